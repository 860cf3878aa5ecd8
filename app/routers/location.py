# =============================================================================
# app/routers/location.py - Device Location Reports
# =============================================================================
# The client's location services report fixes here.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import LocationDep
from core.models.location import DeviceLocation, LocationUpdate

router = APIRouter()


@router.get("", response_model=DeviceLocation)
async def get_location(location: LocationDep):
    """Get the last reported device location."""
    return location.current


@router.put("", response_model=DeviceLocation)
async def report_location(request: LocationUpdate, location: LocationDep):
    """Report a new device fix (and permission state)."""
    return location.update(request)


@router.delete("", response_model=DeviceLocation)
async def revoke_location(location: LocationDep):
    """Record that location permission was revoked."""
    return location.set_authorization(False)
