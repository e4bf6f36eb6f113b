"""
Spot selection routes.

Selecting a spot from the list or a marker updates the shared selection and
starts the camera transition that connected maps follow over SSE.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from database import TravelSpot, get_db

router = APIRouter()


class SelectionRequest(BaseModel):
    """Request model for selecting a spot; a null id clears the selection."""

    spot_id: Optional[str] = None


def selection_state(request: Request):
    """Describe the current selection and camera state.

    Args:
        request: FastAPI request object.

    Returns:
        Dictionary with selected and previous spots plus camera phase,
        viewport and generation.
    """
    store = request.app.state.selection
    camera = request.app.state.camera
    return {
        **store.snapshot(),
        "phase": camera.phase.value,
        "viewport": camera.viewport.to_dict() if camera.viewport else None,
        "generation": camera.generation,
    }


@router.get("/api/selection")
def get_selection(request: Request):
    """Get the current selection and camera state."""
    return selection_state(request)


@router.post("/api/selection")
async def select_spot(data: SelectionRequest, request: Request, db: Session = Depends(get_db)):
    """Select a spot, or clear the selection.

    Args:
        data: SelectionRequest with the spot id or null.
        request: FastAPI request object.
        db: Database session.

    Returns:
        The selection and camera state after the change.

    Raises:
        HTTPException: If the spot does not exist.
    """
    spot = None
    if data.spot_id is not None:
        row = db.get(TravelSpot, data.spot_id)
        if row is None:
            raise HTTPException(404, f"Spot '{data.spot_id}' not found")
        spot = row.to_dict()

    request.app.state.selection.select(spot)
    return selection_state(request)
