"""Inventory API.

Lists the caller's grants split into equipment (with which team holds each
piece) and consumables.
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from parallax.routes.helpers import current_user_id
from parallax.services import inventory_service

bp_inventory = Blueprint("inventory", __name__)


@bp_inventory.route("/api/inventory")
@login_required
def inventory():
    return jsonify(inventory_service.get_inventory(current_user_id()))
