import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Must be set before the parallax package builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("PARALLAX_SUPPRESS_ROUTE_MAP", "1")
os.environ.setdefault("PARALLAX_LOG_LEVEL", "error")

from parallax import app, db  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app.config.update({"TESTING": True, "LOGIN_DISABLED": False})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    """Fresh schema per test inside a pushed app context."""
    ctx = test_app.app_context()
    ctx.push()
    db.drop_all()
    db.create_all()
    try:
        yield
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def player():
    from tests.factories import create_player

    return create_player("alice")


@pytest.fixture()
def auth_client(client, player):
    from tests.factories import login

    return login(client, player)
