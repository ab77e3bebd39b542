from flask import Blueprint, jsonify

bp_health = Blueprint("health", __name__)


@bp_health.route("/healthz")
def healthz():
    return jsonify({"status": "ok"})
