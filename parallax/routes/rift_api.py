from flask import Blueprint, jsonify
from flask_login import login_required

from parallax.routes.helpers import current_user_id
from parallax.services import rift_service

bp_rifts = Blueprint("rifts", __name__)


@bp_rifts.route("/api/rifts")
@login_required
def list_rifts():
    return jsonify(rift_service.list_rifts(current_user_id()))


@bp_rifts.route("/api/rifts/<int:rift_id>")
@login_required
def rift_detail(rift_id: int):
    return jsonify(rift_service.get_rift(rift_id, user_id=current_user_id()))
