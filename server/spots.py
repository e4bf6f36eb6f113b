"""
Travel spot API routes.

This module contains endpoints for listing, filtering and creating travel
spots. Spots are never edited or deleted through the API.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import TravelSpot, get_db
from logic.filtering import filter_spots, spot_facets
from logic.validation import validate_spot_payload
from server.broadcast import notify_spot_created

logger = logging.getLogger(__name__)

router = APIRouter()


def load_spots(db: Session):
    """Load all spots, newest first.

    Args:
        db: Database session.

    Returns:
        List of spot dictionaries.
    """
    rows = db.query(TravelSpot).order_by(TravelSpot.created_at.desc()).all()
    return [row.to_dict() for row in rows]


@router.get("/api/spots")
def list_spots(
        category: Optional[str] = None,
        country: Optional[str] = None,
        city: Optional[str] = None,
        q: Optional[str] = None,
        db: Session = Depends(get_db),
):
    """List travel spots.

    Args:
        category: Only spots with this category ("all" for any).
        country: Only spots in this country ("all" for any).
        city: Only spots in this city ("all" for any).
        q: Case-insensitive search over name, city and country.
        db: Database session.

    Returns:
        Spots ordered newest first, or a 500 error body if the store fails.
    """
    try:
        spots = load_spots(db)
    except SQLAlchemyError:
        logger.exception("Error fetching spots")
        return JSONResponse({"error": "Failed to fetch spots"}, status_code=500)

    return filter_spots(spots, category=category, country=country, city=city, query=q)


@router.get("/api/spots/facets")
def list_facets(country: Optional[str] = None, db: Session = Depends(get_db)):
    """Get the filter drop-down options.

    Args:
        country: Selected country; cities are only listed for it.
        db: Database session.

    Returns:
        Dictionary of categories, countries and cities.
    """
    try:
        spots = load_spots(db)
    except SQLAlchemyError:
        logger.exception("Error fetching spot facets")
        return JSONResponse({"error": "Failed to fetch spots"}, status_code=500)

    return spot_facets(spots, country=country)


@router.post("/api/spots")
async def create_spot(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Create a travel spot.

    Args:
        payload: Spot fields without id or timestamps.
        db: Database session.

    Returns:
        The stored spot, or a 500 error body if the store fails.

    Raises:
        HTTPException: If the payload is invalid.
    """
    fields = validate_spot_payload(payload)

    spot = TravelSpot(**fields)
    try:
        db.add(spot)
        db.commit()
        db.refresh(spot)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating spot %r", fields.get("name"))
        return JSONResponse({"error": "Failed to create spot"}, status_code=500)

    created = spot.to_dict()
    logger.info("Created spot %s (%s)", created["id"], created["name"])
    await notify_spot_created(created)
    return created
