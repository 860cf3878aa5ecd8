# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import UTC, datetime

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import ServicesDep

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    remote_store: str
    favorites: str
    pending_remote_writes: int
    failed_remote_writes: int


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(UTC).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version="1.0.0",
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(services: ServicesDep):
    """
    Readiness check endpoint.

    Favorites are usable as soon as the local snapshot is loaded; the remote
    store being down only degrades the service.
    """
    synchronizer = services.synchronizer
    queue = synchronizer.write_queue

    try:
        await services.supabase.ping()
        remote_store = "healthy"
    except Exception as e:
        remote_store = f"unhealthy: {str(e)[:50]}"

    checks = ChecksResponse(
        remote_store=remote_store,
        favorites=synchronizer.state.value,
        pending_remote_writes=queue.pending,
        failed_remote_writes=len(queue.failures),
    )

    if not synchronizer.state.is_ready:
        status = "starting"
    elif remote_store != "healthy":
        status = "degraded"
    else:
        status = "ready"

    return ReadinessResponse(
        status=status,
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
