"""
pytest configuration and shared fixtures.

Tests run against a throwaway SQLite database and near-instant camera
phases. Environment variables are set before the app is imported so that
the database engine and settings pick them up.
"""

import asyncio
import os
import tempfile

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="travel-spots-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["CAMERA_RECEDE_SECONDS"] = "0.01"
os.environ["CAMERA_TRAVERSE_SECONDS"] = "0.01"
os.environ["CAMERA_APPROACH_SECONDS"] = "0.01"


class RecordingSurface:
    """Map surface that records every command.

    With auto_complete, fly_to reports completion on the next loop
    iteration. Otherwise completion is triggered by calling complete().
    """

    def __init__(self, auto_complete=True):
        self.auto_complete = auto_complete
        self.calls = []
        self.callbacks = []
        self._pending = None
        self._handle = None

    @property
    def flights(self):
        return [call[1:4] for call in self.calls if call[0] == "fly"]

    def set_viewport(self, latitude, longitude, zoom):
        self.calls.append(("set", latitude, longitude, zoom))

    def fly_to(self, latitude, longitude, zoom, duration, on_complete=None):
        self.calls.append(("fly", latitude, longitude, zoom, duration))
        self._pending = on_complete
        if on_complete is not None:
            self.callbacks.append(on_complete)
            if self.auto_complete:
                self._handle = asyncio.get_running_loop().call_soon(self.complete)

    def complete(self):
        callback, self._pending = self._pending, None
        if callback is not None:
            callback()

    def stop(self):
        self.calls.append(("stop",))
        self._pending = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def manual_surface():
    return RecordingSurface(auto_complete=False)


@pytest.fixture(autouse=True)
def clean_db():
    """Start every test with an empty spot table."""
    from database import SessionLocal, TravelSpot, init_db

    init_db()
    db = SessionLocal()
    try:
        db.query(TravelSpot).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture
def db_session():
    from database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """TestClient with the application lifespan running."""
    from fastapi.testclient import TestClient

    from main import app

    with TestClient(app) as test_client:
        yield test_client
