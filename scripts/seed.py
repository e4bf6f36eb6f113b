#!/usr/bin/env python3
"""Seed script for the travel spot store.

Clears the spot table and loads a handful of well-known locations so the
map has something to show on a fresh database.

Usage: python scripts/seed.py
"""

import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import SessionLocal, TravelSpot, init_db

logger = logging.getLogger("seed")

TEST_LOCATIONS = [
    {
        "name": "Eiffel Tower",
        "description": "Iconic iron tower in Paris, France",
        "latitude": 48.8584,
        "longitude": 2.2945,
        "country": "France",
        "city": "Paris",
        "category": "LANDMARKS",
    },
    {
        "name": "Grand Canyon",
        "description": "Massive canyon in Arizona, USA",
        "latitude": 36.1064,
        "longitude": -112.1129,
        "country": "United States",
        "city": "Arizona",
        "category": "NATURE",
    },
    {
        "name": "Bondi Beach",
        "description": "Famous beach in Sydney, Australia",
        "latitude": -33.8915,
        "longitude": 151.2767,
        "country": "Australia",
        "city": "Sydney",
        "category": "BEACH",
    },
    {
        "name": "Taj Mahal",
        "description": "White marble mausoleum in Agra, India",
        "latitude": 27.1751,
        "longitude": 78.0421,
        "country": "India",
        "city": "Agra",
        "category": "LANDMARKS",
    },
    {
        "name": "Mount Everest",
        "description": "Highest peak in the world",
        "latitude": 27.9881,
        "longitude": 86.9250,
        "country": "Nepal",
        "city": "Khumbu",
        "category": "NATURE",
    },
]


def seed_spots(db: Session, locations=None) -> int:
    """Replace all stored spots with the seed locations.

    Args:
        db: Database session.
        locations: Spot field dictionaries; TEST_LOCATIONS when omitted.

    Returns:
        Number of spots inserted.
    """
    locations = TEST_LOCATIONS if locations is None else locations

    deleted = db.query(TravelSpot).delete()
    logger.info("Cleared %d existing spots", deleted)

    for location in locations:
        db.add(TravelSpot(**location))
    db.commit()

    logger.info("Added %d test locations", len(locations))
    return len(locations)


def main():
    """Main entry point for the seed script."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    init_db()

    db = SessionLocal()
    try:
        seed_spots(db)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error seeding database")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
