# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# This module contains tests for all Pydantic models:
# - Place validation (name, coordinate bounds)
# - RemotePlaceRecord conversion
# - FavoritesSnapshot lookups and SyncState
# - Weather decoding and WMO condition mapping
# =============================================================================

from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from core.models.location import DeviceLocation, LocationUpdate
from core.models.place import Place, PlaceCreate, RemotePlaceRecord
from core.models.sync import FavoritesSnapshot, SyncState
from core.models.weather import DailyForecast, WeatherCondition, WeatherResponse


# =============================================================================
# Place Tests
# =============================================================================

class TestPlace:
    """Test Place model."""

    def test_valid_place(self):
        """Test creating a place with valid values."""
        place = Place(name="NYC", latitude=40.7128, longitude=-74.006)

        assert place.name == "NYC"
        assert isinstance(place.id, UUID)
        assert place.coordinate == (40.7128, -74.006)

    def test_ids_are_unique(self):
        """Test each new place gets its own id."""
        a = Place(name="A", latitude=0, longitude=0)
        b = Place(name="A", latitude=0, longitude=0)

        assert a.id != b.id

    @pytest.mark.parametrize("latitude", [-90.0, 90.0])
    def test_latitude_bounds_inclusive(self, latitude):
        """Test the poles are valid latitudes."""
        assert Place(name="Pole", latitude=latitude, longitude=0).latitude == latitude

    @pytest.mark.parametrize("longitude", [-180.0, 180.0])
    def test_longitude_bounds_inclusive(self, longitude):
        """Test the antimeridian is a valid longitude."""
        assert Place(name="Date line", latitude=0, longitude=longitude).longitude == longitude

    @pytest.mark.parametrize("latitude", [91, -90.0001])
    def test_latitude_out_of_range(self, latitude):
        """Test out-of-range latitude is rejected."""
        with pytest.raises(ValidationError):
            Place(name="Bad", latitude=latitude, longitude=0)

    @pytest.mark.parametrize("longitude", [-181, 180.5])
    def test_longitude_out_of_range(self, longitude):
        """Test out-of-range longitude is rejected."""
        with pytest.raises(ValidationError):
            Place(name="Bad", latitude=0, longitude=longitude)

    def test_name_kept_as_given(self):
        """Test stored names are not rewritten."""
        assert Place(name=" Austin", latitude=30, longitude=-97).name == " Austin"

    def test_long_name_accepted(self):
        """Test names have no length cap."""
        name = "x" * 500

        assert Place(name=name, latitude=0, longitude=0).name == name

    def test_blank_name_rejected(self):
        """Test whitespace-only names are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Place(name="   ", latitude=0, longitude=0)

        assert "Please enter a name." in str(exc_info.value)

    def test_place_is_frozen(self):
        """Test places cannot be mutated in place."""
        place = Place(name="NYC", latitude=40.7, longitude=-74.0)

        with pytest.raises(ValidationError):
            place.name = "Other"

    def test_json_round_trip_keeps_id(self):
        """Test the id survives serialization."""
        place = Place(name="NYC", latitude=40.7, longitude=-74.0)

        restored = Place.model_validate_json(place.model_dump_json())

        assert restored == place

    def test_place_create_accepts_out_of_range(self):
        """Test PlaceCreate leaves range checks to the synchronizer."""
        request = PlaceCreate(name="Bad", latitude=91, longitude=0)

        assert request.latitude == 91


# =============================================================================
# RemotePlaceRecord Tests
# =============================================================================

class TestRemotePlaceRecord:
    """Test RemotePlaceRecord conversions."""

    def test_from_place(self, nyc):
        """Test building a row from a place."""
        record = RemotePlaceRecord.from_place(nyc, "user-1")

        assert record.id == nyc.id
        assert record.owner_id == "user-1"
        assert record.created_at is None

    def test_upsert_payload_has_no_created_at(self, nyc):
        """Test created_at is left to the database."""
        payload = RemotePlaceRecord.from_place(nyc, "user-1").to_upsert_payload()

        assert payload == {
            "id": str(nyc.id),
            "owner_id": "user-1",
            "name": "NYC",
            "latitude": 40.7128,
            "longitude": -74.006,
        }

    def test_from_row(self):
        """Test decoding a database row."""
        place_id = uuid4()
        row = {
            "id": str(place_id),
            "owner_id": "user-1",
            "name": "Austin",
            "latitude": 30.2672,
            "longitude": -97.7431,
            "created_at": "2025-09-08T10:30:00+00:00",
        }

        place = RemotePlaceRecord.model_validate(row).to_place()

        assert place.id == place_id
        assert place.name == "Austin"

    def test_to_place_validates_range(self):
        """Test an out-of-range stored row cannot become a Place."""
        record = RemotePlaceRecord(id=uuid4(), owner_id="u", name="Bad", latitude=95, longitude=0)

        with pytest.raises(ValidationError):
            record.to_place()

    def test_empty_owner_rejected(self):
        """Test rows must carry an owner."""
        with pytest.raises(ValidationError):
            RemotePlaceRecord(id=uuid4(), owner_id="", name="A", latitude=0, longitude=0)


# =============================================================================
# Sync Model Tests
# =============================================================================

class TestFavoritesSnapshot:
    """Test FavoritesSnapshot and SyncState."""

    def test_defaults(self):
        """Test an empty snapshot."""
        snapshot = FavoritesSnapshot()

        assert snapshot.places == ()
        assert snapshot.state == SyncState.IDLE
        assert snapshot.version == 0

    def test_find_and_contains(self, nyc, austin):
        """Test lookup by id."""
        snapshot = FavoritesSnapshot(places=(nyc,))

        assert snapshot.contains(nyc.id)
        assert not snapshot.contains(austin.id)
        assert snapshot.find(nyc.id) == nyc
        assert snapshot.find(austin.id) is None

    @pytest.mark.parametrize("state,ready", [
        (SyncState.IDLE, False),
        (SyncState.LOADING_LOCAL, False),
        (SyncState.READY_LOCAL, True),
        (SyncState.AUTHENTICATING, False),
        (SyncState.SYNCING_REMOTE, False),
        (SyncState.READY_MERGED, True),
    ])
    def test_is_ready(self, state, ready):
        """Test which states allow reading favorites."""
        assert state.is_ready is ready


# =============================================================================
# Location Model Tests
# =============================================================================

class TestDeviceLocation:
    """Test DeviceLocation and LocationUpdate."""

    def test_no_fix(self):
        """Test coordinate is None before the first fix."""
        assert DeviceLocation().coordinate is None

    def test_coordinate(self):
        """Test coordinate once both axes are known."""
        location = DeviceLocation(latitude=1.5, longitude=2.5, is_authorized=True)

        assert location.coordinate == (1.5, 2.5)

    def test_update_rejects_out_of_range(self):
        """Test location reports are range-checked."""
        with pytest.raises(ValidationError):
            LocationUpdate(latitude=100, longitude=0)


# =============================================================================
# Weather Model Tests
# =============================================================================

class TestWeatherModels:
    """Test forecast decoding."""

    def test_decode_api_response(self, weather_payload):
        """Test the API field names map onto the model."""
        forecast = WeatherResponse.model_validate(weather_payload)

        assert forecast.current.temperature == 21.4
        assert forecast.current.humidity == 40
        assert forecast.current.condition == WeatherCondition.PARTLY_CLOUDY
        assert len(forecast.daily) == 3
        assert forecast.daily.temp_max[2] == 22.8

    def test_misaligned_daily_arrays(self):
        """Test daily arrays must have the same length."""
        with pytest.raises(ValidationError):
            DailyForecast.model_validate({
                "time": ["2025-09-08", "2025-09-09"],
                "temperature_2m_max": [25.0],
                "temperature_2m_min": [15.0, 14.0],
                "precipitation_sum": [0.0, 0.0],
            })

    @pytest.mark.parametrize("code,condition", [
        (0, WeatherCondition.CLEAR),
        (2, WeatherCondition.PARTLY_CLOUDY),
        (3, WeatherCondition.CLOUDY),
        (48, WeatherCondition.FOG),
        (63, WeatherCondition.RAIN),
        (75, WeatherCondition.SNOW),
        (81, WeatherCondition.SHOWERS),
        (99, WeatherCondition.THUNDERSTORM),
        (42, WeatherCondition.CLOUDY),
    ])
    def test_condition_from_code(self, code, condition):
        """Test WMO code classification, unknown codes fall back to cloudy."""
        assert WeatherCondition.from_code(code) == condition
