"""
Tests for the spot, geocode and basic routes.

Run with: python -m pytest tests/test_spots_api.py
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import SQLAlchemyError

from database import TravelSpot
from logic.geocoding import GeocodingError

NEW_SPOT = {
    "name": "Bondi Beach",
    "description": "Famous beach in Sydney, Australia",
    "latitude": -33.8915,
    "longitude": 151.2767,
    "country": "Australia",
    "city": "Sydney",
    "category": "BEACH",
}


def add_spot(db, name, created_at, **fields):
    defaults = {
        "description": f"About {name}",
        "latitude": 0.0,
        "longitude": 0.0,
        "country": "Nowhere",
        "city": "Nowhere",
        "category": "OTHER",
    }
    defaults.update(fields)
    spot = TravelSpot(name=name, created_at=created_at, updated_at=created_at, **defaults)
    db.add(spot)
    db.commit()
    return spot


def test_create_spot(client):
    response = client.post("/api/spots", json=NEW_SPOT)

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Bondi Beach"
    assert data["latitude"] == -33.8915
    assert data["category"] == "BEACH"
    assert data["id"]
    assert data["createdAt"]
    assert data["updatedAt"]

    listed = client.get("/api/spots").json()
    assert [spot["id"] for spot in listed] == [data["id"]]


def test_create_spot_rejects_out_of_range_latitude(client):
    response = client.post("/api/spots", json=dict(NEW_SPOT, latitude=123.0))

    assert response.status_code == 400
    assert response.json() == {"error": "Latitude out of range"}
    assert client.get("/api/spots").json() == []


def test_create_spot_rejects_client_supplied_id(client):
    response = client.post("/api/spots", json=dict(NEW_SPOT, id="abc"))

    assert response.status_code == 400
    assert response.json()["error"] == "Illegal field: id"


def test_create_spot_storage_failure(client):
    with patch("sqlalchemy.orm.Session.commit", side_effect=SQLAlchemyError("disk full")):
        response = client.post("/api/spots", json=NEW_SPOT)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create spot"}


def test_list_spots_newest_first(client, db_session):
    now = datetime(2024, 5, 1, 12, 0, 0)
    add_spot(db_session, "Oldest", now - timedelta(days=2))
    add_spot(db_session, "Newest", now)
    add_spot(db_session, "Middle", now - timedelta(days=1))

    names = [spot["name"] for spot in client.get("/api/spots").json()]

    assert names == ["Newest", "Middle", "Oldest"]


def test_list_spots_filters(client, db_session):
    now = datetime(2024, 5, 1, 12, 0, 0)
    add_spot(db_session, "Bondi Beach", now, country="Australia", city="Sydney", category="BEACH")
    add_spot(db_session, "Opera House", now - timedelta(hours=1), country="Australia", city="Sydney", category="CULTURE")
    add_spot(db_session, "Taj Mahal", now - timedelta(hours=2), country="India", city="Agra", category="LANDMARKS")

    def names(**params):
        return [spot["name"] for spot in client.get("/api/spots", params=params).json()]

    assert names(country="Australia") == ["Bondi Beach", "Opera House"]
    assert names(country="Australia", category="CULTURE") == ["Opera House"]
    assert names(category="all", country="all", city="all") == ["Bondi Beach", "Opera House", "Taj Mahal"]
    assert names(q="agra") == ["Taj Mahal"]


def test_list_spots_storage_failure(client):
    with patch("server.spots.load_spots", side_effect=SQLAlchemyError("gone")):
        response = client.get("/api/spots")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch spots"}


def test_facets(client, db_session):
    now = datetime(2024, 5, 1, 12, 0, 0)
    add_spot(db_session, "Bondi Beach", now, country="Australia", city="Sydney", category="BEACH")
    add_spot(db_session, "Blue Mountains", now, country="Australia", city="Katoomba", category="NATURE")
    add_spot(db_session, "Taj Mahal", now, country="India", city="Agra", category="LANDMARKS")

    facets = client.get("/api/spots/facets").json()
    assert facets["countries"] == ["all", "Australia", "India"]
    assert facets["cities"] == ["all"]
    assert sorted(facets["categories"][1:]) == ["BEACH", "LANDMARKS", "NATURE"]

    facets = client.get("/api/spots/facets", params={"country": "Australia"}).json()
    assert facets["cities"] == ["all", "Katoomba", "Sydney"]


def test_geocode_route_returns_suggestions(client):
    suggestions = [{"name": "Eiffel Tower", "latitude": 48.8584, "longitude": 2.2945}]
    with patch("server.geocode.search_places", new_callable=AsyncMock, return_value=suggestions) as search:
        response = client.get("/api/geocode", params={"q": "eiffel"})

    assert response.status_code == 200
    assert response.json() == suggestions
    search.assert_awaited_once_with("eiffel")


def test_geocode_route_reports_upstream_failure(client):
    with patch("server.geocode.search_places", new_callable=AsyncMock, side_effect=GeocodingError("timeout")):
        response = client.get("/api/geocode", params={"q": "eiffel"})

    assert response.status_code == 502
    assert "Failed to fetch locations" in response.json()["error"]


def test_index_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert b"Travel Spots" in response.content


def test_map_config(client):
    config = client.get("/api/map/config").json()

    assert config["world_view"] == {"latitude": 20.0, "longitude": 0.0, "zoom": 2}
    assert config["spot_zoom"] == 8
    assert config["overview_zoom"] == 4
    assert "LANDMARKS" in config["categories"]
    assert config["min_search_length"] == 3


def test_malformed_spot_body_uses_error_shape(client):
    response = client.post("/api/spots", json=[1, 2])

    assert response.status_code == 422
    assert set(response.json()) == {"error"}
    assert response.json()["error"]


def test_malformed_selection_body_names_the_field(client):
    response = client.post("/api/selection", json={"spot_id": 5})

    assert response.status_code == 422
    assert response.json()["error"].startswith("Invalid spot_id: ")


def test_unknown_route_uses_error_shape(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
