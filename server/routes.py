"""
Basic API routes.

This module contains the fundamental endpoints for serving the application
page and the map defaults the page starts from.
"""

import os

from fastapi import APIRouter
from fastapi.responses import FileResponse, HTMLResponse

from logic.camera import SPOT_ZOOM, WORLD_VIEW
from logic.config import get_settings
from logic.geocoding import MIN_QUERY_LENGTH
from logic.validation import KNOWN_CATEGORIES

router = APIRouter()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@router.get("/", response_class=HTMLResponse)
def index():
    """Serve the main HTML page.

    Returns:
        HTML page from static/index.html.
    """
    return FileResponse(os.path.join(BASE_DIR, "static", "index.html"))


@router.get("/api/map/config")
def get_map_config():
    """Get the defaults the map page starts from.

    Returns:
        Dictionary with the world view, spot zoom, camera timings,
        known categories and the minimum search length.
    """
    settings = get_settings()
    return {
        "world_view": WORLD_VIEW.to_dict(),
        "spot_zoom": SPOT_ZOOM,
        "overview_zoom": settings.overview_zoom,
        "durations": {
            "recede": settings.recede_seconds,
            "traverse": settings.traverse_seconds,
            "approach": settings.approach_seconds,
        },
        "categories": list(KNOWN_CATEGORIES),
        "min_search_length": MIN_QUERY_LENGTH,
    }
