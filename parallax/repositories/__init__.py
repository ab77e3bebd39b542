"""Persistence layer.

Thin query/write helpers over the Flask-SQLAlchemy session, grouped by
aggregate. Repositories never commit; services wrap each gameplay operation
in ``atomic()`` so the whole read/validate/write sequence lands (or rolls
back) together.

Usage:
    from parallax.repositories import atomic, teams

    with atomic():
        team = teams.get_team(team_id)
        teams.set_unlocked(team)
"""

from __future__ import annotations

from contextlib import contextmanager

from parallax import db


@contextmanager
def atomic():
    """Commit the session on success, roll back and re-raise on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


from . import catalog, expeditions, inventory, leaderboard, teams  # noqa: E402,F401

__all__ = ["atomic", "catalog", "expeditions", "inventory", "leaderboard", "teams"]
