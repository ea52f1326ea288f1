"""
Live broadcast payloads.

Builds the events pushed to clients when a gratitude is accepted. The live
"new_blink" position is jittered so a broadcast never reveals exactly where
a message was dropped.
"""

import random
from typing import Any, Dict, Optional

from database import Gratitude
from logic.geo import jitter_point
from logic.share import build_share_link
from logic.validation import Submission

NEW_BLINK = "new_blink"
UPLOAD_SUCCESS = "upload_success"


def build_blink(
        row: Gratitude,
        submission: Submission,
        jitter_degrees: float,
        rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Build the new_blink payload for a stored gratitude.

    Args:
        row: The saved gratitude.
        submission: The submission it came from (supplies the exact point and tempId).
        jitter_degrees: Full width of the jitter box.
        rng: Optional random source.

    Returns:
        Dictionary with id, message, jittered lat/lng, tempId and short_code.
    """
    lat, lng = jitter_point(submission.lat, submission.lng, jitter_degrees, rng)
    return {
        "id": row.id,
        "message": row.message,
        "lat": lat,
        "lng": lng,
        "tempId": submission.temp_id,
        "short_code": row.short_code,
    }


def build_upload_success(base_url: str, short_code: str) -> Dict[str, str]:
    return {"link": build_share_link(base_url, short_code)}


async def broadcast_blink(sio, payload: Dict[str, Any]):
    """Broadcast a new_blink to every connected client, the sender included.

    Args:
        sio: Socket.IO server.
        payload: Output of build_blink.
    """
    await sio.emit(NEW_BLINK, payload)
