# =============================================================================
# lib/remote_store.py - Remote Favorites Store
# =============================================================================
# CRUD for the cloud favorites table, scoped by an opaque owner id.
#
# Table layout (one row per place):
#   id uuid primary key, owner_id text, name text,
#   latitude double precision, longitude double precision,
#   created_at timestamptz default now()
#
# Every failure surfaces as SyncFailure; the synchronizer decides what to do.
# Nothing here retries.
#
# Usage:
#   store = RemoteFavoritesStore(supabase)
#   places = await store.fetch_all(owner_id)
#   await store.upsert(place, owner_id)
#   await store.delete(place.id, owner_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from core.models.place import Place, RemotePlaceRecord
from lib.supabase_client import SupabaseClient
from lib.utils import ApplicationError, normalize_uuid

logger = logging.getLogger(__name__)

SELECT_COLUMNS = "id, owner_id, name, latitude, longitude, created_at"


class SyncFailure(ApplicationError):
    """Remote store unreachable, rejected the request, or auth failed."""

    def __init__(
        self,
        message: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            code="SYNC_FAILED",
            suggestion="Favorites stay available locally; sync runs again on next launch or refresh",
            details={"operation": operation, **(details or {})},
        )
        self.operation = operation


class RemoteFavoritesStore:
    """
    Favorites table access for one Supabase project.

    The Supabase handle is injected; this class holds no global state.
    """

    def __init__(self, supabase: SupabaseClient):
        self._supabase = supabase

    async def fetch_all(self, owner_id: str) -> list[Place]:
        """
        Fetch every favorite owned by owner_id, oldest first.

        Rows that cannot be decoded into a valid Place are skipped.

        Args:
            owner_id: Opaque user id

        Returns:
            Places ordered by created_at ascending (empty list if none)

        Raises:
            SyncFailure: If the query fails
        """
        try:
            table = await self._supabase.favorites()
            response = await (
                table.select(SELECT_COLUMNS)
                .eq("owner_id", owner_id)
                .order("created_at")
                .execute()
            )
        except Exception as e:
            raise SyncFailure(
                f"Failed to fetch favorites: {e}",
                operation="fetch_all",
                details={"owner_id": owner_id},
            ) from e

        places: list[Place] = []
        for row in response.data or []:
            try:
                places.append(RemotePlaceRecord.model_validate(row).to_place())
            except ValidationError as e:
                logger.warning(f"Skipping malformed favorite row {row.get('id')!r}: {e.error_count()} error(s)")

        logger.debug(f"Fetched {len(places)} favorites for owner {owner_id}")
        return places

    async def upsert(self, place: Place, owner_id: str) -> None:
        """
        Create or replace the row for place.id.

        created_at is left out of the payload so the database default only
        applies on first insert.

        Raises:
            SyncFailure: If the write fails
        """
        payload = RemotePlaceRecord.from_place(place, owner_id).to_upsert_payload()

        try:
            table = await self._supabase.favorites()
            await table.upsert(payload, on_conflict="id").execute()
        except Exception as e:
            raise SyncFailure(
                f"Failed to save favorite {place.id}: {e}",
                operation="upsert",
                details={"owner_id": owner_id, "place_id": str(place.id)},
            ) from e

        logger.info(f"Upserted favorite {place.id} for owner {owner_id}")

    async def delete(self, place_id: UUID | str, owner_id: str) -> None:
        """
        Delete the row for place_id. Deleting a missing row is not an error.

        Raises:
            SyncFailure: If the delete request fails
        """
        place_id_str = normalize_uuid(place_id)

        try:
            table = await self._supabase.favorites()
            await (
                table.delete()
                .eq("id", place_id_str)
                .eq("owner_id", owner_id)
                .execute()
            )
        except Exception as e:
            raise SyncFailure(
                f"Failed to delete favorite {place_id_str}: {e}",
                operation="delete",
                details={"owner_id": owner_id, "place_id": place_id_str},
            ) from e

        logger.info(f"Deleted favorite {place_id_str} for owner {owner_id}")
