"""
Basic API routes.

This module contains the REST endpoints: share link lookup, health and
version.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database import get_db
from server import repository
from server.repository import StorageError

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"

# Icon variant for shared gratitudes; the store does not keep one
DEFAULT_VARIANT = 0


@router.get("/share/{code}")
def get_shared_gratitude(code: str, db: Session = Depends(get_db)):
    """Fetch a single gratitude by its share code.

    Args:
        code: Short code from a share link.
        db: Database session.

    Returns:
        The gratitude with a "variant" field, 404 if unknown, 503 on a store error.
    """
    try:
        gratitude = repository.find_by_code(db, code)
    except StorageError:
        return JSONResponse(status_code=503, content={"error": "Storage unavailable"})

    if gratitude is None:
        return JSONResponse(status_code=404, content={"error": "Gratitude not found"})

    return {**gratitude.to_dict(), "variant": DEFAULT_VARIANT}


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/version")
def get_version():
    """Get the application version.

    Returns:
        Dictionary with version string.
    """
    return {"version": VERSION}
