"""
project: Parallax
module: __init__.py
License: MIT

Flask application and core extensions setup.

This module wires together the Flask app, SQLAlchemy, Flask-Login, and
Flask-SocketIO. Configuration is sourced from environment variables with
reasonable defaults for development. A local `instance/` directory is used
for SQLite and other runtime data.
"""

import logging
import os
import sqlite3
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_login import LoginManager
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still work with an explicit DATABASE_URL
    pass

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")

if not database_url:
    db_path = Path(app.instance_path) / "parallax.db"
    # Use POSIX path for SQLAlchemy URI compatibility across OS
    database_url = f"sqlite:///{db_path.as_posix()}"

app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,  # socketio workers share connections
    }
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)
login_manager = LoginManager(app)


@login_manager.user_loader
def load_user(user_id):
    from parallax.models.models import User

    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


@login_manager.unauthorized_handler
def _unauthorized():
    return jsonify({"error": "unauthorized"}), 401


socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    ping_interval=20,
    ping_timeout=10,
)

from sqlalchemy import event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: D401
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=10000")
    cursor.close()


# Register HTTP blueprints (import after app/db created)
from parallax.errors import GameError  # noqa: E402
from parallax.routes.expedition_api import bp_expeditions  # noqa: E402
from parallax.routes.health import bp_health  # noqa: E402
from parallax.routes.inventory_api import bp_inventory  # noqa: E402
from parallax.routes.leaderboard_api import bp_leaderboard  # noqa: E402
from parallax.routes.rift_api import bp_rifts  # noqa: E402
from parallax.routes.team_api import bp_teams  # noqa: E402

app.register_blueprint(bp_health)
app.register_blueprint(bp_expeditions)
app.register_blueprint(bp_teams)
app.register_blueprint(bp_rifts)
app.register_blueprint(bp_inventory)
app.register_blueprint(bp_leaderboard)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from parallax.websockets import expeditions as _ws_expeditions  # noqa: F401,E402

# Route map debug output (development aid). Suppress with PARALLAX_SUPPRESS_ROUTE_MAP=1
if not (os.getenv("PARALLAX_SUPPRESS_ROUTE_MAP") in ("1", "true", "yes") or os.getenv("PYTEST_CURRENT_TEST")):
    logging.getLogger(__name__).debug("Registered routes:\n%s", app.url_map)


def create_app():
    """Return the Flask app instance, ensuring schema and catalog seeds exist.

    Idempotent; safe to call from the CLI, the server bootstrap and tests.
    """
    from parallax.seed_catalog import seed_catalog, seed_game_config

    with app.app_context():
        db.create_all()
        seed_catalog()
        seed_game_config()
    return app


@app.errorhandler(GameError)
def game_error(e: GameError):
    return jsonify(e.to_dict()), e.http_status


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal", "error_id": error_id}), 500
