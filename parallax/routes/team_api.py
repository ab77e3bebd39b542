"""Team endpoints: listing, equip/unequip, consumables and unlocks."""

from flask import Blueprint, jsonify
from flask_login import login_required

from parallax.routes.helpers import current_user_id, json_body, require_int, require_str
from parallax.services import equipment_service

bp_teams = Blueprint("teams", __name__)


@bp_teams.route("/api/teams")
@login_required
def list_teams():
    return jsonify(equipment_service.get_user_teams(current_user_id()))


@bp_teams.route("/api/teams/<int:team_id>")
@login_required
def team_detail(team_id: int):
    return jsonify(equipment_service.get_team(current_user_id(), team_id))


@bp_teams.route("/api/teams/equip", methods=["POST"])
@login_required
def equip():
    data = json_body()
    team_id = require_int(data, "team_id")
    slot = require_str(data, "slot")
    inventory_id = require_int(data, "inventory_id")
    return jsonify(equipment_service.equip_item(current_user_id(), team_id, slot, inventory_id))


@bp_teams.route("/api/teams/unequip", methods=["POST"])
@login_required
def unequip():
    data = json_body()
    team_id = require_int(data, "team_id")
    slot = require_str(data, "slot")
    return jsonify(equipment_service.unequip_item(current_user_id(), team_id, slot))


@bp_teams.route("/api/teams/consume", methods=["POST"])
@login_required
def consume():
    data = json_body()
    team_id = require_int(data, "team_id")
    inventory_id = require_int(data, "inventory_id")
    return jsonify(equipment_service.consume_item(current_user_id(), team_id, inventory_id))


@bp_teams.route("/api/teams/<int:team_id>/unlock", methods=["POST"])
@login_required
def unlock(team_id: int):
    return jsonify(equipment_service.unlock_team(current_user_id(), team_id))
