# =============================================================================
# tests/test_api.py - HTTP and WebSocket API Tests
# =============================================================================
# The app is built with create_app() and a services factory made of fakes,
# so no Supabase project, disk cache or weather API is needed.
# =============================================================================

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.dependencies import Services
from app.main import create_app
from core.services.favorites_synchronizer import FavoritesSynchronizer
from core.services.forecast_service import ForecastService
from core.services.location_service import LocationService
from core.services.session_selection import SessionSelection
from lib.supabase_client import SupabaseClientError
from lib.weather_client import WeatherNetworkError
from tests.conftest import FakeCache, FakeIdentity, FakeRemote, FakeWeather


class FakeSupabase:
    """Stand-in for SupabaseClient.ping()."""

    def __init__(self):
        self.fail = False

    async def ping(self) -> None:
        if self.fail:
            raise SupabaseClientError("unreachable", code="PING_FAILED")


class Harness:
    """Fakes shared between the services factory and the test."""

    def __init__(self, weather_payload, places=(), remote_rows=None):
        self.cache = FakeCache(places)
        self.remote = FakeRemote(remote_rows)
        self.identity = FakeIdentity()
        self.weather = FakeWeather(weather_payload)
        self.supabase = FakeSupabase()
        self.services: Services | None = None

    def factory(self, settings) -> Services:
        synchronizer = FavoritesSynchronizer(self.cache, self.remote, self.identity)
        selection = SessionSelection(synchronizer)
        location = LocationService()
        self.services = Services(
            synchronizer=synchronizer,
            selection=selection,
            location=location,
            forecast=ForecastService(self.weather, selection, location),
            weather=self.weather,
            supabase=self.supabase,
        )
        return self.services


@pytest.fixture
def harness(weather_payload, nyc, austin):
    return Harness(weather_payload, places=[nyc], remote_rows={"user-1": [austin]})


@pytest.fixture
def client(harness):
    with TestClient(create_app(services_factory=harness.factory)) as test_client:
        # Settle the startup sync so every test sees the merged set
        test_client.post("/api/v1/favorites/sync")
        yield test_client


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Test health endpoints."""

    def test_health(self, client):
        """Test the basic health check."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, client):
        """Test the liveness check."""
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready(self, client):
        """Test readiness once favorites are merged."""
        data = client.get("/api/v1/health/ready").json()

        assert data["status"] == "ready"
        assert data["checks"]["favorites"] == "ready_merged"
        assert data["checks"]["remote_store"] == "healthy"

    def test_ready_degraded_when_remote_down(self, client, harness):
        """Test a down remote store degrades but does not fail readiness."""
        harness.supabase.fail = True

        data = client.get("/api/v1/health/ready").json()

        assert data["status"] == "degraded"
        assert data["checks"]["remote_store"].startswith("unhealthy")


# =============================================================================
# Favorites
# =============================================================================

class TestFavorites:
    """Test favorites endpoints."""

    def test_sync_merges(self, client, nyc, austin):
        """Test the sync endpoint returns the merged set sorted by name."""
        response = client.post("/api/v1/favorites/sync")

        assert response.status_code == 200
        data = response.json()
        assert [p["name"] for p in data["places"]] == ["Austin", "NYC"]
        assert data["state"] == "ready_merged"
        assert data["owner_id"] == "user-1"

    def test_list(self, client):
        """Test listing favorites."""
        data = client.get("/api/v1/favorites").json()

        assert data["total"] == 2

    def test_add(self, client, harness):
        """Test adding a favorite persists it locally."""
        response = client.post(
            "/api/v1/favorites",
            json={"name": " Denver ", "latitude": 39.7392, "longitude": -104.9903},
        )

        assert response.status_code == 201
        place = response.json()
        assert place["name"] == "Denver"
        assert any(str(p.id) == place["id"] for p in harness.cache.places)

    @pytest.mark.parametrize("body", [
        {"name": "Bad", "latitude": 91, "longitude": 0},
        {"name": "Bad", "latitude": 0, "longitude": -181},
        {"name": "   ", "latitude": 0, "longitude": 0},
    ])
    def test_add_invalid(self, client, harness, body):
        """Test invalid places are rejected with 400 and nothing changes."""
        before = client.get("/api/v1/favorites").json()["places"]

        response = client.post("/api/v1/favorites", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == "PLACE_VALIDATION_ERROR"
        assert client.get("/api/v1/favorites").json()["places"] == before

    def test_add_malformed_body(self, client):
        """Test a body missing fields is a 422."""
        response = client.post("/api/v1/favorites", json={"name": "No coords"})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_remove(self, client, nyc):
        """Test removing a favorite."""
        response = client.delete(f"/api/v1/favorites/{nyc.id}")

        assert response.status_code == 204
        ids = [p["id"] for p in client.get("/api/v1/favorites").json()["places"]]
        assert str(nyc.id) not in ids

    def test_remove_unknown(self, client):
        """Test removing an unknown id is a silent no-op."""
        assert client.delete(f"/api/v1/favorites/{uuid4()}").status_code == 204

    def test_sync_with_remote_down(self, client, harness, nyc):
        """Test a failed sync still answers with the local set."""
        harness.remote.fail = True

        response = client.post("/api/v1/favorites/sync")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "ready_local"
        assert str(nyc.id) in [p["id"] for p in data["places"]]


# =============================================================================
# Selection
# =============================================================================

class TestSelection:
    """Test selection endpoints."""

    def test_select_and_clear(self, client, nyc):
        """Test selecting then clearing a favorite."""
        response = client.put("/api/v1/selection", json={"place_id": str(nyc.id)})

        assert response.status_code == 200
        assert response.json()["place"]["name"] == "NYC"
        assert response.json()["using_device_location"] is False

        cleared = client.delete("/api/v1/selection").json()
        assert cleared == {"place": None, "using_device_location": True}

    def test_select_unknown(self, client):
        """Test selecting a non-favorite is a 404."""
        response = client.put("/api/v1/selection", json={"place_id": str(uuid4())})

        assert response.status_code == 404
        assert response.json()["code"] == "PLACE_NOT_FOUND"

    def test_removing_selected_clears(self, client, nyc):
        """Test deleting the selected favorite resets the selection."""
        client.put("/api/v1/selection", json={"place_id": str(nyc.id)})

        client.delete(f"/api/v1/favorites/{nyc.id}")

        assert client.get("/api/v1/selection").json()["using_device_location"] is True


# =============================================================================
# Location and weather
# =============================================================================

class TestWeather:
    """Test location and weather endpoints."""

    def test_no_location(self, client):
        """Test weather without permission or selection is a 403."""
        response = client.get("/api/v1/weather")

        assert response.status_code == 403
        assert response.json()["code"] == "LOCATION_DENIED"

    def test_no_fix_yet(self, client):
        """Test an authorized device with no fix is a 409."""
        client.app.state.services.location.set_authorization(True)

        response = client.get("/api/v1/weather")

        assert response.status_code == 409

    def test_device_weather(self, client, harness):
        """Test the forecast for the reported device location."""
        location = client.put(
            "/api/v1/location",
            json={"latitude": 51.5, "longitude": -0.12, "placename": "London"},
        ).json()
        assert location["is_authorized"] is True

        response = client.get("/api/v1/weather")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "London"
        assert data["source"] == "device"
        assert data["condition"] == "partly_cloudy"
        assert data["weather"]["current"]["temperature"] == 21.4
        assert harness.weather.calls == [(51.5, -0.12)]

    def test_selected_favorite_weather(self, client, harness, nyc):
        """Test the forecast follows the selected favorite."""
        client.put("/api/v1/selection", json={"place_id": str(nyc.id)})

        data = client.get("/api/v1/weather").json()

        assert data["title"] == "NYC"
        assert data["place_id"] == str(nyc.id)

    def test_coordinate_weather(self, client):
        """Test the forecast for an explicit coordinate."""
        response = client.get("/api/v1/weather/40.7128/-74.006")

        assert response.status_code == 200
        assert response.json()["source"] == "coordinate"

    def test_coordinate_out_of_range(self, client):
        """Test out-of-range path coordinates are rejected."""
        assert client.get("/api/v1/weather/91/0").status_code == 422

    def test_weather_failure(self, client, harness):
        """Test weather API failures are a 502 with the short message."""
        harness.weather.error = WeatherNetworkError("timeout")

        response = client.get("/api/v1/weather/10/10")

        assert response.status_code == 502
        assert response.json()["detail"] == "Network error."


# =============================================================================
# Lifecycle and WebSocket
# =============================================================================

class TestLifecycle:
    """Test startup, shutdown and the live feed."""

    def test_shutdown_flushes_writes_and_closes(self, harness):
        """Test shutdown waits for remote writes and closes the weather client."""
        with TestClient(create_app(services_factory=harness.factory)) as client:
            client.post("/api/v1/favorites", json={"name": "Denver", "latitude": 39.7, "longitude": -105.0})

        assert "upsert" in harness.remote.call_names()
        assert harness.services.synchronizer.write_queue.pending == 0
        assert harness.weather.closed is True

    def test_websocket_initial_state(self, client):
        """Test a new subscriber receives the snapshot and the selection."""
        with client.websocket_connect("/api/v1/ws/favorites") as ws:
            welcome = ws.receive_json()
            selection = ws.receive_json()

            assert welcome["type"] == "connected"
            assert "places" in welcome
            assert selection == {"type": "selection_changed", "place": None}

    def test_websocket_receives_changes(self, client):
        """Test adding a favorite is pushed to subscribers."""
        with client.websocket_connect("/api/v1/ws/favorites") as ws:
            ws.receive_json()
            ws.receive_json()

            client.post("/api/v1/favorites", json={"name": "Denver", "latitude": 39.7, "longitude": -105.0})

            for _ in range(20):
                event = ws.receive_json()
                if event["type"] == "favorites_changed" and any(
                    p["name"] == "Denver" for p in event["places"]
                ):
                    break
            else:
                pytest.fail("favorites_changed with Denver was not received")

    def test_websocket_ping(self, client):
        """Test ping/pong keepalive."""
        with client.websocket_connect("/api/v1/ws/favorites") as ws:
            ws.receive_json()
            ws.receive_json()
            ws.send_text("ping")

            for _ in range(20):
                if ws.receive_text() == "pong":
                    break
            else:
                pytest.fail("pong was not received")
