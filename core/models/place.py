# =============================================================================
# core/models/place.py - Favorite Place Schemas
# =============================================================================
# These models define the shape of a saved favorite:
# - Place: A named coordinate pair owned by one user (local + in-memory form)
# - PlaceCreate: Input for creating a favorite (server assigns the id)
# - RemotePlaceRecord: Row shape in the remote favorites table
#
# A Place's id is the only key used to merge and dedupe favorites.
# Coordinates are validated at construction; invalid places never exist.
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Coordinate bounds shared by Place, PlaceCreate and DeviceLocation
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


def clean_name(value: str) -> str:
    """Trim a user-supplied label."""
    return value.strip()


class Place(BaseModel):
    """
    A favorite location.

    Immutable once created: edits produce a new Place with the same id.
    Two favorites may share a name or a position; only ids are unique.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "New York City",
            "latitude": 40.7128,
            "longitude": -74.006
        }
    """

    model_config = ConfigDict(frozen=True)

    # Assigned client-side at creation, never changes
    id: UUID = Field(
        default_factory=uuid4,
        description="Globally unique favorite identifier"
    )

    name: str = Field(
        ...,
        description="User-assigned label (e.g., 'New York City')"
    )

    latitude: float = Field(
        ...,
        ge=MIN_LATITUDE,
        le=MAX_LATITUDE,
        description="Latitude in degrees, -90 to 90"
    )

    longitude: float = Field(
        ...,
        ge=MIN_LONGITUDE,
        le=MAX_LONGITUDE,
        description="Longitude in degrees, -180 to 180"
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        # Stored names are kept as given; only the add path trims
        if not value.strip():
            raise ValueError("Please enter a name.")
        return value

    @property
    def coordinate(self) -> tuple[float, float]:
        """(latitude, longitude) pair for weather lookups."""
        return (self.latitude, self.longitude)


class PlaceCreate(BaseModel):
    """
    Schema for creating a new favorite.

    The id is generated on the server side of the API, mirroring how the
    mobile client assigns a fresh UUID when the add form is saved.

    Example:
        {"name": "Austin", "latitude": 30.2672, "longitude": -97.7431}
    """

    name: str = Field(
        ...,
        examples=["New York City"],
        description="Label for the favorite"
    )

    latitude: float = Field(
        ...,
        examples=[40.7128],
        description="Latitude in degrees, -90 to 90"
    )

    longitude: float = Field(
        ...,
        examples=[-74.006],
        description="Longitude in degrees, -180 to 180"
    )


class RemotePlaceRecord(BaseModel):
    """
    One row of the remote favorites table.

    created_at is filled by the database default on first insert.
    It is omitted from upsert payloads so an existing row keeps its
    original timestamp.
    """

    id: UUID
    owner_id: str = Field(..., min_length=1)
    name: str
    latitude: float
    longitude: float
    created_at: datetime | None = None

    @classmethod
    def from_place(cls, place: Place, owner_id: str) -> "RemotePlaceRecord":
        """Build the remote row for a place owned by owner_id."""
        return cls(
            id=place.id,
            owner_id=owner_id,
            name=place.name,
            latitude=place.latitude,
            longitude=place.longitude,
        )

    def to_place(self) -> Place:
        """
        Convert the row back into a validated Place.

        Raises:
            pydantic.ValidationError: If the stored values are out of range
        """
        return Place(
            id=self.id,
            name=self.name,
            latitude=self.latitude,
            longitude=self.longitude,
        )

    def to_upsert_payload(self) -> dict[str, Any]:
        """JSON payload for an upsert, without created_at."""
        return self.model_dump(mode="json", exclude={"created_at"})
