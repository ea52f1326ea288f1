"""
Socket.IO event handlers.

This module handles the real-time connection: sending the map history on
connect, answering viewport queries, and accepting new gratitudes, which are
stored and broadcast to every connected client.
"""

import asyncio
import logging
from typing import Any, Dict, List

import socketio

from database import SessionLocal
from logic.config import get_settings
from logic.geo import ViewBounds
from logic.rate_limit import CooldownLimiter
from logic.share import generate_short_code
from logic.validation import InvalidPayload, Submission, parse_bounds, parse_submission
from server import repository
from server.broadcast import UPLOAD_SUCCESS, broadcast_blink, build_blink, build_upload_success
from server.repository import StorageError

logger = logging.getLogger(__name__)

settings = get_settings()

INITIAL_DATA = "initial_data"
UPDATE_MAP_DOTS = "update_map_dots"
ERROR_MSG = "error_msg"


def _cors_origins(origins: List[str]):
    return "*" if origins == ["*"] else origins


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=_cors_origins(settings.cors_origins),
)

# ip -> last accepted post (epoch ms)
limiter = CooldownLimiter(settings.rate_limit_ms)


def client_ip(environ: Dict[str, Any], trust_proxy: bool = False) -> str:
    """Get the client address from a connection environ.

    In ASGI mode engineio always sets REMOTE_ADDR to 127.0.0.1; the real
    peer is only in the ASGI scope, so that is checked first.

    Args:
        environ: WSGI-style environ of the handshake request.
        trust_proxy: Use the first X-Forwarded-For hop when present.

    Returns:
        Client IP string, or "unknown".
    """
    if trust_proxy:
        forwarded = environ.get("HTTP_X_FORWARDED_FOR", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    peer = (environ.get("asgi.scope") or {}).get("client")
    if peer and peer[0]:
        return peer[0]
    return environ.get("REMOTE_ADDR") or "unknown"


async def _session_ip(sid: str) -> str:
    try:
        session = await sio.get_session(sid)
    except KeyError:
        return "unknown"
    return session.get("ip", "unknown")


def rate_limit_message(seconds: int) -> str:
    return f"You are being too grateful! Please wait {seconds} seconds."


# ==========================
# Store access
# ==========================
# Synchronous store calls, run by the handlers via asyncio.to_thread
def load_history(limit: int) -> List[Dict[str, Any]]:
    with SessionLocal() as db:
        return [g.to_dict() for g in repository.list_recent(db, limit)]


def load_view(bounds: ViewBounds, limit: int) -> List[Dict[str, Any]]:
    with SessionLocal() as db:
        return [g.to_dict() for g in repository.list_in_view(db, bounds, limit)]


def store_submission(submission: Submission) -> Dict[str, Any]:
    """Persist a submission and build its new_blink payload."""
    with SessionLocal() as db:
        row = repository.create(
            db,
            message=submission.message,
            lat=submission.lat,
            lng=submission.lng,
            short_code=generate_short_code(),
        )
        return build_blink(row, submission, settings.jitter_degrees)


# ==========================
# Connection
# ==========================
@sio.event
async def connect(sid, environ, auth=None):
    ip = client_ip(environ, settings.trust_proxy)
    await sio.save_session(sid, {"ip": ip})
    logger.info("New user connected: %s (%s)", sid, ip)

    try:
        history = await asyncio.to_thread(load_history, settings.history_limit)
    except StorageError:
        return

    if not history:
        logger.warning("History query returned 0 rows; the gratitudes table may be empty")
    else:
        logger.debug("Loaded %d gratitudes, newest: %s", len(history), history[0])

    await sio.emit(INITIAL_DATA, history, to=sid)


@sio.event
async def disconnect(sid, *args):
    logger.info("User disconnected: %s", sid)


# ==========================
# Viewport queries
# ==========================
@sio.event
async def map_bounds(sid, data):
    try:
        bounds = parse_bounds(data)
    except InvalidPayload as e:
        logger.debug("Dropping map_bounds from %s: %s", sid, e)
        return

    logger.info(
        "Fetching dots for view: [%s, %s] to [%s, %s]",
        bounds.west, bounds.south, bounds.east, bounds.north,
    )

    try:
        dots = await asyncio.to_thread(load_view, bounds, settings.view_limit)
    except StorageError:
        return

    await sio.emit(UPDATE_MAP_DOTS, dots, to=sid)


# ==========================
# Submissions
# ==========================
@sio.event
async def submit_gratitude(sid, data):
    try:
        submission = parse_submission(data, settings.max_message_length)
    except InvalidPayload as e:
        logger.debug("Dropping submit_gratitude from %s: %s", sid, e)
        return

    ip = await _session_ip(sid)
    if not limiter.hit(ip):
        wait = limiter.retry_after(ip)
        logger.info("Rate limited %s (%s), %ds left", sid, ip, wait)
        await sio.emit(ERROR_MSG, rate_limit_message(wait), to=sid)
        return

    try:
        blink = await asyncio.to_thread(store_submission, submission)
    except StorageError:
        return

    logger.info("Stored gratitude %s (%s) from %s", blink["id"], blink["short_code"], ip)

    await sio.emit(UPLOAD_SUCCESS, build_upload_success(settings.share_base_url, blink["short_code"]), to=sid)
    await broadcast_blink(sio, blink)
