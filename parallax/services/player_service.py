"""Player onboarding: account row plus the five default teams."""

from __future__ import annotations

from typing import List, Optional

from parallax.errors import GameError, UsernameTaken
from parallax.logging_utils import get_logger
from parallax.models.models import Team, User
from parallax.repositories import atomic, teams

log = get_logger(__name__)


def register_player(username: str, email: Optional[str] = None) -> User:
    username = (username or "").strip()
    if not username:
        raise GameError("username required", {"field": "username"}, error_code="bad_request")
    with atomic() as session:
        if User.query.filter_by(username=username).first():
            raise UsernameTaken("username already exists", {"username": username})
        user = User(username=username, email=email)
        session.add(user)
        session.flush()
        teams.create_default_teams(user.id)
    log.info(event="player_registered", user_id=user.id, username=username)
    return user


def create_default_teams(user_id: int) -> List[Team]:
    with atomic():
        created = teams.create_default_teams(user_id)
    return created
