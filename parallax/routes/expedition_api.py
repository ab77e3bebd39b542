"""
project: Parallax
module: expedition_api.py
License: MIT

Expedition endpoints: start, list active/history and claim rewards.
All routes require authentication and act on the logged-in user.
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required

from parallax.routes.helpers import current_user_id, json_body, require_int
from parallax.services import expedition_service

bp_expeditions = Blueprint("expeditions", __name__)


@bp_expeditions.route("/api/expeditions/start", methods=["POST"])
@login_required
def start():
    data = json_body()
    team_id = require_int(data, "team_id")
    rift_id = require_int(data, "rift_id")
    view = expedition_service.start_expedition(current_user_id(), team_id, rift_id)
    return jsonify(view), 201


@bp_expeditions.route("/api/expeditions/active")
@login_required
def active():
    return jsonify(expedition_service.get_active_expeditions(current_user_id()))


@bp_expeditions.route("/api/expeditions/history")
@login_required
def history():
    # invalid or non-positive limits fall back to the configured default
    limit = request.args.get("limit", type=int)
    return jsonify(expedition_service.get_expedition_history(current_user_id(), limit=limit))


@bp_expeditions.route("/api/expeditions/<int:expedition_id>/claim", methods=["POST"])
@login_required
def claim(expedition_id: int):
    return jsonify(expedition_service.claim_rewards(current_user_id(), expedition_id))
