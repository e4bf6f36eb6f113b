"""
Location search route for the add-spot form.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from logic.geocoding import SEARCH_ERROR_MESSAGE, GeocodingError, search_places

router = APIRouter()


@router.get("/api/geocode")
async def geocode(q: str = ""):
    """Search for places to pre-fill a new spot.

    Args:
        q: Free-text location query; fewer than three characters returns nothing.

    Returns:
        List of suggestions, or a 502 error body if the geocoder fails.
    """
    try:
        return await search_places(q)
    except GeocodingError:
        return JSONResponse({"error": SEARCH_ERROR_MESSAGE}, status_code=502)
