"""Socket.IO expedition update handlers.

Events:
    - watch_expeditions: Subscribe the authenticated caller to their room.
        Emits: watching { room }
    - unwatch_expeditions: Leave the room again.

Server pushes:
    - expedition_update { event: "started" | "claimed", expedition_id, ... }
      sent to room ``user:<id>`` after the gameplay transaction commits.
"""

from flask_login import current_user
from flask_socketio import emit, join_room, leave_room

from parallax import socketio
from parallax.logging_utils import get_logger

_log = get_logger("ws.expeditions")


def user_room(user_id: int) -> str:
    return f"user:{user_id}"


def _current_user_id():
    if not getattr(current_user, "is_authenticated", False):
        return None
    return current_user.id


@socketio.on("watch_expeditions")
def handle_watch_expeditions(data=None):
    uid = _current_user_id()
    if uid is None:
        emit("error", {"message": "authentication required", "code": "unauthorized"})
        return
    room = user_room(uid)
    join_room(room)
    emit("watching", {"room": room})
    _log.info(event="watch_expeditions", user_id=uid)


@socketio.on("unwatch_expeditions")
def handle_unwatch_expeditions(data=None):
    uid = _current_user_id()
    if uid is None:
        return
    leave_room(user_room(uid))
    _log.info(event="unwatch_expeditions", user_id=uid)


def notify_user(user_id: int, payload: dict) -> bool:
    """Push an expedition_update to the user's room. Failures are logged, not raised."""
    try:
        socketio.emit("expedition_update", payload, to=user_room(user_id))
    except Exception as e:  # noqa: BLE001
        _log.warn(event="expedition_update_failed", user_id=user_id, error=str(e))
        return False
    return True
