"""Tests for the HTTP surface."""

from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

import main
from models import Event, SearchParams
from screens import AppSession

NOW = datetime(2025, 6, 15, 12, 0)
DENVER = SearchParams(city="Denver", stateCode="CO", radius=50)


def sample_events(params, classification):
    city = params.city
    if classification == "Music":
        return [
            Event(id="m1", name="Rock Night", category="Music", subcategory="Alternative Rock",
                  date="2025-06-15T20:00:00", venueName="Ogden", address="935 E Colfax Ave, Denver, CO"),
            Event(id="m2", name="Country Fair", category="Music", subcategory="Country",
                  date="2025-07-04T18:00:00", venueName="Fairgrounds", address=""),
        ]
    return [
        Event(id="s1", name=f"{city} Football", category="Sports", subcategory="NFL - Preseason",
              date="2025-06-15T19:00:00", venueName="Field", address="1701 Bryant St, Denver, CO"),
        Event(id="s2", name=f"{city} Hoops", category="Sports", subcategory="NBA",
              date="2025-06-20T19:30:00", venueName="Arena", address="1000 Chopper Cir, Denver, CO"),
        Event(id="s3", name="TBA Match", category="Sports", subcategory="MLB"),
    ]


@pytest.fixture
def client(monkeypatch):
    calls = []

    async def fetch(params, classification):
        calls.append((params, classification))
        return sample_events(params, classification)

    monkeypatch.setattr(main, "session", AppSession(fetch, DENVER))
    monkeypatch.setattr(main, "now_local", lambda: NOW)
    monkeypatch.setattr(main, "GOOGLE_PLACES_API_KEY", "")
    with TestClient(main.app) as c:
        c.calls = calls
        yield c


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_startup_loads_every_module(client):
    assert sorted(c for _, c in client.calls) == ["Music", "Sports"]


def test_sports_screen_defaults(client):
    data = client.get("/modules/Sports").json()
    assert data["title"] == "Sports in Denver"
    assert data["filters"] == {"timeFilter": "This Month", "categoryFilter": "Sports"}
    assert data["timeFilters"] == ["Today", "This Week", "This Month", "Next Month"]
    assert data["categoryFilters"] == ["Sports", "NFL", "NBA", "MLB", "NHL"]
    assert [e["id"] for e in data["events"]] == ["s1", "s2"]
    assert data["events"][0]["time"] == "19:00"
    assert data["events"][0]["venueLine"] == "Field • ⭐ N/A"
    assert data["emptyText"] is None


def test_set_filters(client):
    response = client.put("/modules/Sports/filters", json={"timeFilter": "Today", "categoryFilter": "NFL"})
    assert response.status_code == 200
    assert [e["id"] for e in response.json()["events"]] == ["s1"]

    response = client.put("/modules/Sports/filters", json={"timeFilter": "Next Month", "categoryFilter": "NHL"})
    data = response.json()
    assert data["events"] == []
    assert data["emptyText"] == "No games match your filters."


def test_filters_rejects_unknown_sports_category(client):
    response = client.put("/modules/Sports/filters", json={"timeFilter": "Today", "categoryFilter": "Cricket"})
    assert response.status_code == 400
    assert "Cricket" in response.json()["error"]


def test_filters_rejects_unknown_time_filter(client):
    response = client.put("/modules/Music/filters", json={"timeFilter": "Tomorrow", "categoryFilter": "Music"})
    assert response.status_code == 422


def test_music_genre_filter(client):
    data = client.put("/modules/Music/filters", json={"timeFilter": "This Month", "categoryFilter": "rock"}).json()
    assert data["title"] == "Live Music in Denver"
    assert [e["id"] for e in data["events"]] == ["m1"]
    data = client.put("/modules/Music/filters", json={"timeFilter": "Next Month", "categoryFilter": "Music"}).json()
    assert [e["id"] for e in data["events"]] == ["m2"]


def test_social_is_coming_soon(client):
    data = client.get("/modules/Social").json()
    assert data["available"] is False
    assert data["title"] == "Social Coming Soon"


def test_unknown_module(client):
    response = client.get("/modules/Theatre")
    assert response.status_code == 404
    assert response.json() == {"error": "Unknown module: Theatre"}


def test_active_module(client):
    assert client.get("/modules").json() == {"modules": ["Sports", "Music", "Social"], "active": "Sports"}
    assert client.put("/modules/active", json={"module": "Music"}).json()["active"] == "Music"
    assert client.put("/modules/active", json={"module": "Opera"}).status_code == 422


def test_search_update_refetches(client):
    response = client.put("/search", json={"city": "Boulder", "stateCode": "co", "radius": 10})
    assert response.status_code == 200
    assert response.json() == {"city": "Boulder", "stateCode": "CO", "radius": 10}
    assert client.get("/search").json()["city"] == "Boulder"
    boulder = [c for p, c in client.calls if p.city == "Boulder"]
    assert sorted(boulder) == ["Music", "Sports"]
    assert client.get("/modules/Sports").json()["events"][0]["name"] == "Boulder Football"


@pytest.mark.parametrize("radius", [4, 101])
def test_search_radius_bounds(client, radius):
    response = client.put("/search", json={"city": "Denver", "stateCode": "CO", "radius": radius})
    assert response.status_code == 422


def test_event_details_attach_rating(client):
    data = client.get("/events/s1").json()
    assert data["subtitle"] == "Sunday, June 15 at 19:00"
    assert data["address"] == "1701 Bryant St, Denver, CO"
    assert data["ratingLine"] == "Google Rating: 4.5 (1,337 reviews)"
    assert data["venueLine"] == "Field • ⭐ 4.5"
    assert main.session.selected.id == "s1"
    assert client.delete("/selection").json() == {"selected": None}
    assert main.session.selected is None


def test_event_details_without_address_or_date(client):
    data = client.get("/events/s3").json()
    assert data["subtitle"] == "Date to be announced"
    assert data["time"] == ""


def test_unknown_event(client):
    assert client.get("/events/nope").status_code == 404
    assert client.post("/events/nope/plan").status_code == 404


def test_find_my_night_flow(client):
    data = client.post("/modules/Sports/find-my-night").json()
    picked = data["suggestion"]
    assert picked["id"] in {"s1", "s2"}
    assert picked["header"] == "Your night is planned!"
    assert picked["subHeader"] == "How about some sports?"

    retried = client.post("/suggestion/retry").json()["suggestion"]
    assert retried["id"] in {"s1", "s2"}

    details = client.post("/suggestion/accept").json()
    assert details["id"] == retried["id"]
    assert main.session.selected.id == retried["id"]
    assert client.post("/suggestion/retry").status_code == 409


def test_find_my_night_with_nothing_visible(client):
    client.put("/modules/Sports/filters", json={"timeFilter": "Next Month", "categoryFilter": "Sports"})
    assert client.post("/modules/Sports/find-my-night").json() == {"suggestion": None}
    assert client.post("/suggestion/accept").status_code == 409


def test_find_my_night_dismiss(client):
    client.post("/modules/Music/find-my-night")
    assert client.post("/suggestion/dismiss").json() == {"suggestion": None}
    assert main.session.selected is None
    assert client.post("/suggestion/accept").status_code == 409


def test_plan_without_key_apologises(client, monkeypatch):
    monkeypatch.setattr(main, "GEMINI_API_KEY", "")
    data = client.post("/events/m1/plan").json()
    assert data["eventId"] == "m1"
    assert data["plan"].startswith("Sorry, I couldn't come up with a plan")


def test_plan_with_key(client, monkeypatch):
    monkeypatch.setattr(main, "GEMINI_API_KEY", "key")
    with patch("main.generate_plan", new=AsyncMock(return_value="Dinner, show, dessert.")) as gen:
        data = client.post("/events/m1/plan").json()
    assert data["plan"] == "Dinner, show, dessert."
    assert gen.await_args.args[0].id == "m1"


def test_unhandled_error_is_json(client):
    with patch.object(main.session, "module", side_effect=RuntimeError("boom")):
        with TestClient(main.app, raise_server_exceptions=False) as c:
            response = c.get("/modules/Sports")
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}


def test_details_rating_shows_on_module_card(client):
    client.get("/events/s1")
    cards = {c["id"]: c for c in client.get("/modules/Sports").json()["events"]}
    assert cards["s1"]["venueLine"] == "Field • ⭐ 4.5"
    assert cards["s2"]["venueLine"] == "Arena • ⭐ N/A"
