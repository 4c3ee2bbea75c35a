import logging
from typing import Dict, Set

import socketio

from app.api.auth.utils import decode_access_token
from app.core.config import settings

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════
# SOCKETIO SERVER
# ═══════════════════════════════════════════
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins=settings.SOCKETIO_CORS_ORIGINS,
    logger=settings.DEBUG,
    engineio_logger=settings.DEBUG,
    allow_upgrades=True,
)

# user_id -> set of session ids
user_connections: Dict[str, Set[str]] = {}


# ═══════════════════════════════════════════
# SOCKET EVENTS
# ═══════════════════════════════════════════

@sio.event
async def connect(sid, environ, auth):
    """Client connects with ``auth={"token": <jwt>}``."""
    token = auth.get('token') if isinstance(auth, dict) else None
    user_id = decode_access_token(token) if isinstance(token, str) else None

    if not user_id:
        logger.warning("Rejected socket connection %s: missing or invalid token", sid)
        return False

    if not is_active_user(user_id):
        logger.warning("Rejected socket connection %s: user %s unknown or inactive", sid, user_id)
        return False

    register_connection(user_id, sid)
    logger.info("User %s connected (session %s)", user_id, sid)
    return True


@sio.event
async def disconnect(sid):
    user_id = unregister_connection(sid)
    if user_id:
        logger.info("User %s disconnected (session %s)", user_id, sid)
    else:
        logger.debug("Disconnect for unknown session %s", sid)


def is_active_user(user_id: str) -> bool:
    from app.api.profile.models import User
    from app.database.database import SessionLocal

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.id == user_id).first()
        return user is not None and bool(user.is_active)
    finally:
        db.close()


def register_connection(user_id: str, sid: str):
    user_connections.setdefault(user_id, set()).add(sid)


def unregister_connection(sid: str):
    for uid, sessions in list(user_connections.items()):
        if sid in sessions:
            sessions.discard(sid)
            if not sessions:
                del user_connections[uid]
            return uid
    return None


def is_user_online(user_id: str) -> bool:
    return user_id in user_connections


def get_connection_stats():
    return {
        "total_connections": sum(len(sessions) for sessions in user_connections.values()),
        "unique_users": len(user_connections),
        "connections_per_user": {
            user_id: len(sessions)
            for user_id, sessions in user_connections.items()
        }
    }


# ═══════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════

async def send_to_user(user_id: str, event: str, data: dict) -> int:
    """Emit an event to every live session of a user. Returns sessions reached."""
    sent = 0
    for session_id in list(user_connections.get(user_id, ())):
        try:
            await sio.emit(event, data, to=session_id)
            sent += 1
        except Exception:
            logger.warning("Failed to send %s to user %s", event, user_id, exc_info=True)
    return sent


async def send_notification_to_user(user_id: str, notification_data: dict) -> int:
    return await send_to_user(user_id, 'notification', notification_data)
