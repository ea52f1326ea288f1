"""Database setup and models for the gratitude store.

This module provides the database connection, the Gratitude model and
session utilities using SQLAlchemy. The URL comes from DATABASE_URL.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from logic.config import get_settings

DATABASE_URL = get_settings().database_url


def make_engine(url: str):
    """Create an engine, allowing SQLite connections to cross threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Gratitude(Base):
    """A geotagged message dropped on the map.

    Attributes:
        id: Primary key auto-incrementing ID.
        message: Sanitized message text.
        latitude: Latitude in degrees, [-90, 90].
        longitude: Longitude in degrees, [-180, 180].
        short_code: Unique code used in share links.
        created_at: When the row was stored (UTC).
    """

    __tablename__ = "gratitudes"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    message = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False, index=True)
    longitude = Column(Float, nullable=False, index=True)
    short_code = Column(String(32), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def to_dict(self):
        """Convert the gratitude to the shape clients expect.

        Returns:
            Dictionary with id, message, lat, lng, short_code and created_at.
        """
        return {
            "id": self.id,
            "message": self.message,
            "lat": self.latitude,
            "lng": self.longitude,
            "short_code": self.short_code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def get_db():
    """Dependency for getting database session.

    Yields:
        Database session that will be closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Initialize the database by creating all tables."""
    Base.metadata.create_all(bind=bind or engine)
