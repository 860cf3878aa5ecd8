# =============================================================================
# core/services/location_service.py - Device Location Feed
# =============================================================================
# Holds the latest device fix reported by the client. The forecast service
# reads it when no favorite is selected.
# =============================================================================

import logging
from datetime import UTC, datetime

from core.models.location import DeviceLocation, LocationUpdate

logger = logging.getLogger(__name__)


class LocationService:
    """Latest known device location and permission state."""

    def __init__(self, initial: DeviceLocation | None = None):
        self._current = initial or DeviceLocation()

    @property
    def current(self) -> DeviceLocation:
        return self._current

    def update(self, report: LocationUpdate) -> DeviceLocation:
        """Record a new fix."""
        self._current = DeviceLocation(
            latitude=report.latitude,
            longitude=report.longitude,
            placename=report.placename.strip(),
            is_authorized=report.is_authorized,
            updated_at=datetime.now(UTC),
        )
        logger.debug(f"Device location updated: ({report.latitude}, {report.longitude})")
        return self._current

    def set_authorization(self, is_authorized: bool) -> DeviceLocation:
        """Record a permission change; revoking permission forgets the fix."""
        if is_authorized:
            self._current = self._current.model_copy(update={"is_authorized": True})
        else:
            self._current = DeviceLocation(is_authorized=False)
            logger.info("Location permission revoked, cleared device fix")
        return self._current
