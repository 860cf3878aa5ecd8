# =============================================================================
# core/models/location.py - Device Location Schemas
# =============================================================================
# - DeviceLocation: Latest fix reported by the client's location services
# - LocationUpdate: Input for reporting a new fix
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .place import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE


class DeviceLocation(BaseModel):
    """
    Where the device is, as far as we know.

    Coordinates stay None until the first fix arrives. placename is the
    reverse-geocoded label and may be empty.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float | None = Field(default=None, ge=MIN_LATITUDE, le=MAX_LATITUDE)
    longitude: float | None = Field(default=None, ge=MIN_LONGITUDE, le=MAX_LONGITUDE)
    is_authorized: bool = False
    placename: str = ""
    updated_at: datetime | None = None

    @property
    def coordinate(self) -> tuple[float, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


class LocationUpdate(BaseModel):
    """
    A location report from the client.

    Example:
        {"latitude": 40.7128, "longitude": -74.006, "placename": "Manhattan"}
    """

    latitude: float = Field(..., ge=MIN_LATITUDE, le=MAX_LATITUDE)
    longitude: float = Field(..., ge=MIN_LONGITUDE, le=MAX_LONGITUDE)
    placename: str = Field(default="", max_length=200)
    is_authorized: bool = True
