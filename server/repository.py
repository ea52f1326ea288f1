"""
Gratitude queries.

Every read and write of the gratitudes table goes through here. Store
failures are logged and re-raised as StorageError so callers only have one
error type to handle.
"""

import logging
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import Gratitude
from logic.geo import ViewBounds

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the gratitude store cannot complete an operation."""


def _newest_first(stmt, limit: int):
    return stmt.order_by(Gratitude.created_at.desc(), Gratitude.id.desc()).limit(limit)


def list_recent(db: Session, limit: int = 100) -> List[Gratitude]:
    """Get the newest gratitudes.

    Args:
        db: Database session.
        limit: Maximum number of rows.

    Returns:
        Gratitudes, newest first.

    Raises:
        StorageError: If the query fails.
    """
    try:
        return list(db.scalars(_newest_first(select(Gratitude), limit)))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database read error (list_recent): %s", e)
        raise StorageError(str(e)) from e


def list_in_view(db: Session, bounds: ViewBounds, limit: int = 100) -> List[Gratitude]:
    """Get the newest gratitudes inside a map viewport.

    Args:
        db: Database session.
        bounds: Normalised viewport. A box with west > east wraps the antimeridian.
        limit: Maximum number of rows.

    Returns:
        Gratitudes inside the box, newest first.

    Raises:
        StorageError: If the query fails.
    """
    lat_clause = Gratitude.latitude.between(bounds.south, bounds.north)
    if bounds.crosses_antimeridian:
        lng_clause = or_(Gratitude.longitude >= bounds.west, Gratitude.longitude <= bounds.east)
    else:
        lng_clause = Gratitude.longitude.between(bounds.west, bounds.east)

    stmt = select(Gratitude).where(and_(lat_clause, lng_clause))
    try:
        return list(db.scalars(_newest_first(stmt, limit)))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database read error (list_in_view): %s", e)
        raise StorageError(str(e)) from e


def find_by_code(db: Session, code: str) -> Optional[Gratitude]:
    """Look up a gratitude by its share code.

    Raises:
        StorageError: If the query fails.
    """
    try:
        return db.scalars(select(Gratitude).where(Gratitude.short_code == code)).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database read error (find_by_code): %s", e)
        raise StorageError(str(e)) from e


def create(db: Session, message: str, lat: float, lng: float, short_code: str) -> Gratitude:
    """Insert a gratitude and return the saved row.

    Args:
        db: Database session.
        message: Sanitized message.
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        short_code: Share code for the new row.

    Returns:
        The stored Gratitude with id and created_at populated.

    Raises:
        StorageError: If the insert fails, including a duplicate short code.
    """
    row = Gratitude(message=message, latitude=lat, longitude=lng, short_code=short_code)
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database write error: %s", e)
        raise StorageError(str(e)) from e
    return row
