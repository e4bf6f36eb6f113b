"""
Tests for the selection routes and the camera transitions they start.
"""

import time

from scripts.seed import seed_spots


def wait_for_idle(client, timeout=2.0):
    deadline = time.monotonic() + timeout
    state = client.get("/api/selection").json()
    while state["phase"] != "idle" and time.monotonic() < deadline:
        time.sleep(0.01)
        state = client.get("/api/selection").json()
    return state


def spot_ids_by_name(client):
    return {spot["name"]: spot["id"] for spot in client.get("/api/spots").json()}


def test_initial_selection_state(client):
    state = client.get("/api/selection").json()

    assert state == {
        "selected": None,
        "previous": None,
        "phase": "idle",
        "viewport": None,
        "generation": 0,
    }


def test_first_selection_jumps_to_spot(client, db_session):
    seed_spots(db_session)
    ids = spot_ids_by_name(client)

    response = client.post("/api/selection", json={"spot_id": ids["Taj Mahal"]})

    assert response.status_code == 200
    state = response.json()
    assert state["selected"]["name"] == "Taj Mahal"
    assert state["previous"] is None
    assert state["phase"] == "idle"
    assert state["viewport"] == {"latitude": 27.1751, "longitude": 78.0421, "zoom": 8}


def test_second_selection_flies_to_new_spot(client, db_session):
    seed_spots(db_session)
    ids = spot_ids_by_name(client)

    client.post("/api/selection", json={"spot_id": ids["Eiffel Tower"]})
    response = client.post("/api/selection", json={"spot_id": ids["Grand Canyon"]})

    assert response.json()["previous"]["name"] == "Eiffel Tower"
    state = wait_for_idle(client)
    assert state["phase"] == "idle"
    assert state["selected"]["name"] == "Grand Canyon"
    assert state["viewport"] == {"latitude": 36.1064, "longitude": -112.1129, "zoom": 8}
    assert state["generation"] == 2


def test_clearing_selection(client, db_session):
    seed_spots(db_session)
    ids = spot_ids_by_name(client)
    client.post("/api/selection", json={"spot_id": ids["Bondi Beach"]})

    state = client.post("/api/selection", json={"spot_id": None}).json()

    assert state["selected"] is None
    assert state["previous"]["name"] == "Bondi Beach"
    assert state["phase"] == "idle"


def test_selecting_unknown_spot(client):
    response = client.post("/api/selection", json={"spot_id": "missing"})

    assert response.status_code == 404
    assert response.json() == {"error": "Spot 'missing' not found"}
