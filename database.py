"""Database setup and models for the travel spot store.

This module provides the database connection, the TravelSpot model,
and utilities for the spot API using SQLAlchemy.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from logic.config import get_settings

# Database setup
DATABASE_URL = get_settings().database_url
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return uuid.uuid4().hex


class TravelSpot(Base):
    """A point of interest shown on the map.

    Attributes:
        id: Opaque identifier assigned at creation.
        name: Display name of the spot.
        description: Free-text description.
        latitude: Latitude in degrees, within [-90, 90].
        longitude: Longitude in degrees, within [-180, 180].
        country: Country label used for filtering.
        city: City label used for filtering.
        category: Category tag (LANDMARKS, NATURE, BEACH, ...).
        created_at: When the spot was stored.
        updated_at: When the spot was last written.
    """

    __tablename__ = "travel_spots"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    country = Column(String(100), nullable=False, default="", index=True)
    city = Column(String(100), nullable=False, default="", index=True)
    category = Column(String(50), nullable=False, default="OTHER", index=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_dict(self):
        """Convert the spot to its API representation.

        Returns:
            Dictionary with camelCase timestamp keys.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "country": self.country,
            "city": self.city,
            "category": self.category,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
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


def init_db():
    """Initialize the database by creating all tables."""
    Base.metadata.create_all(bind=engine)
