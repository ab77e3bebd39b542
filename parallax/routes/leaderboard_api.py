"""Leaderboard endpoint: ``GET /api/leaderboard/<type>``."""

from flask import Blueprint, jsonify
from flask_login import login_required

from parallax.routes.helpers import current_user_id
from parallax.services import leaderboard_service

bp_leaderboard = Blueprint("leaderboard", __name__)


@bp_leaderboard.route("/api/leaderboard/<board>")
@login_required
def leaderboard(board: str):
    return jsonify(leaderboard_service.get_leaderboard(board, current_user_id()))
