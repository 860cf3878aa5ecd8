# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the WeatherApp favorites API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_local_cache.py / test_remote_store.py / test_identity.py: lib/ units
# - test_remote_write_queue.py: Background write ordering and failures
# - test_favorites_synchronizer.py: Merge, startup and mutation behaviour
# - test_session_selection.py / test_forecast_service.py: Selection and weather
# - test_weather_client.py: Open-Meteo client against httpx.MockTransport
# - test_config.py: Settings defaults and validation
# - test_api.py: HTTP and WebSocket endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
