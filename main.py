"""
Travel Spots FastAPI Application

Main entry point for the Travel Spots application, serving the REST API,
the SSE stream that drives map camera transitions, and the map page.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import init_db
from logic.camera import CameraTransitionController
from logic.config import BASE_DIR, get_settings
from logic.selection import SelectionStore
from server.broadcast import BroadcastSurface, event_generator, subscribers
from server.geocode import router as geocode_router
from server.routes import router as routes_router
from server.selection import router as selection_router
from server.spots import router as spots_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the spot table and the selection/camera pipeline.

    One surface, controller and selection store live for the lifetime of
    the app; the controller is disposed on shutdown so no phase outlives
    the event loop.
    """
    init_db()

    surface = BroadcastSurface()
    camera = CameraTransitionController.from_settings(surface, get_settings())
    app.state.surface = surface
    app.state.camera = camera
    app.state.selection = SelectionStore(listener=camera.on_selection)
    logger.info("Travel Spots started")

    yield

    camera.dispose()
    logger.info("Travel Spots stopped")


app = FastAPI(title="Travel Spots", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": message} for the page to display."""
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as {"error": message}.

    Only the first problem is reported, prefixed with the offending field
    when there is one.
    """
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        fields = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        message = first.get("msg", message)
        if fields:
            message = f"Invalid {'.'.join(fields)}: {message}"
    return JSONResponse({"error": message}, status_code=422)


# Include all routers
app.include_router(routes_router)
app.include_router(spots_router)
app.include_router(selection_router)
app.include_router(geocode_router)

# ============================================================
# SSE Endpoint
# ============================================================


@app.get("/api/stream")
async def stream(request: Request):
    """Server-Sent Events (SSE) endpoint for real-time updates.

    Clients connect to this endpoint to receive viewport commands from the
    camera controller and notifications about newly added spots. The first
    event positions a freshly opened map on the current camera target.

    Args:
        request: FastAPI request object.

    Returns:
        StreamingResponse with text/event-stream content type.
    """
    queue = asyncio.Queue()
    target = request.app.state.surface.target
    queue.put_nowait({"type": "viewport", "mode": "set", **target.to_dict()})
    subscribers.add(queue)

    return StreamingResponse(event_generator(queue), media_type="text/event-stream")


# ============================================================
# Static Files
# ============================================================

app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")
