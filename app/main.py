# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the WeatherApp favorites API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, settings
from app.dependencies import Services, build_services
from app.exceptions import (
    WeatherAppException,
    validation_exception_handler,
    weatherapp_exception_handler,
)
from app.routers import health, favorites, selection, location, weather
from app.websocket import ConnectionManager, favorites_event, selection_event
from app.websocket import routes as websocket_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


DESCRIPTION = """
## Weather Favorites API

Keeps a user's favorite places in sync between this device and the cloud,
and serves the forecast for whichever place is active.

### How It Works

1. **Local first** - Favorites are read from the on-disk snapshot at startup
2. **Anonymous identity** - An anonymous account scopes the cloud copy
3. **Merge** - Cloud records win on id; local-only places are kept
4. **Select** - Pick a favorite, or fall back to the device location
5. **Forecast** - Current conditions and a 7-day daily forecast

### Quick Start

```bash
# 1. Add a favorite
curl -X POST http://localhost:8000/api/v1/favorites \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Austin", "latitude": 30.2672, "longitude": -97.7431}'

# 2. Select it
curl -X PUT http://localhost:8000/api/v1/selection \\
  -H "Content-Type: application/json" \\
  -d '{"place_id": "<id from step 1>"}'

# 3. Get its weather
curl http://localhost:8000/api/v1/weather
```
"""


def create_app(
    services_factory: Callable[[Settings], Services] = build_services,
    app_settings: Settings = settings,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services_factory: Builds the service graph at startup (tests pass fakes)
        app_settings: Settings handed to the factory

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Runs on startup and shutdown:
        - Startup: Build services, start the favorites sync and event publisher
        - Shutdown: Stop the publisher, flush remote writes, close clients
        """
        # Startup
        logger.info(f"Starting WeatherApp API in {app_settings.ENVIRONMENT} mode")
        logger.info(f"CORS origins: {app_settings.cors_origins_list}")

        services = services_factory(app_settings)
        manager = ConnectionManager()
        app.state.services = services
        app.state.websocket_manager = manager

        unsubscribers = [
            services.synchronizer.subscribe(lambda snapshot: manager.publish(favorites_event(snapshot))),
            services.selection.subscribe(lambda place: manager.publish(selection_event(place))),
        ]
        publisher = asyncio.create_task(manager.run_publisher(), name="websocket-publisher")

        # Local snapshot, identity and remote merge run in the background;
        # requests are served from memory meanwhile
        services.synchronizer.start()

        yield

        # Shutdown
        logger.info("Shutting down WeatherApp API")

        for unsubscribe in unsubscribers:
            unsubscribe()

        publisher.cancel()
        try:
            await publisher
        except asyncio.CancelledError:
            pass

        await services.aclose()

    app = FastAPI(
        title="WeatherApp Favorites API",
        description=DESCRIPTION,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Favorites",
                "description": "Favorite places, synced between device and cloud",
            },
            {
                "name": "Selection",
                "description": "Which favorite drives the weather screen",
            },
            {
                "name": "Location",
                "description": "Device location reports and permission",
            },
            {
                "name": "Weather",
                "description": "Current conditions and 7-day forecast",
            },
            {
                "name": "WebSocket",
                "description": "Real-time favorites updates",
            },
            {
                "name": "Health",
                "description": "API health and readiness checks",
            },
        ],
    )

    # =========================================================================
    # Middleware
    # =========================================================================

    # CORS middleware - allows cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list if app_settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(WeatherAppException)
    async def handle_weatherapp_exception(request: Request, exc: WeatherAppException):
        """Handle custom WeatherApp exceptions."""
        return await weatherapp_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and parameters."""
        return await validation_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    # =========================================================================
    # Routers
    # =========================================================================

    # Health check endpoints
    app.include_router(
        health.router,
        prefix="/api/v1",
        tags=["Health"]
    )

    # Favorites endpoints
    app.include_router(
        favorites.router,
        prefix="/api/v1/favorites",
        tags=["Favorites"]
    )

    # Selection endpoints
    app.include_router(
        selection.router,
        prefix="/api/v1/selection",
        tags=["Selection"]
    )

    # Device location endpoints
    app.include_router(
        location.router,
        prefix="/api/v1/location",
        tags=["Location"]
    )

    # Forecast endpoints
    app.include_router(
        weather.router,
        prefix="/api/v1/weather",
        tags=["Weather"]
    )

    # WebSocket endpoints (Real-time updates)
    app.include_router(
        websocket_routes.router,
        prefix="/api/v1",
        tags=["WebSocket"]
    )

    # =========================================================================
    # Root Endpoint
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns API info.
        """
        return {
            "name": "WeatherApp Favorites API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
