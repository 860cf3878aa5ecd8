# =============================================================================
# lib/local_cache.py - Local Favorites Snapshot
# =============================================================================
# Durable on-disk copy of the favorite set, stored as one JSON array:
#   [{"id": "...", "name": "...", "latitude": 40.7, "longitude": -74.0}, ...]
#
# Reads and writes are whole-snapshot. Both fail soft: a missing, unreadable
# or corrupt file loads as an empty set, and a failed write is logged and
# dropped (the in-memory set stays authoritative until the next launch).
#
# Writes go to a temp file in the same directory and are moved into place
# with os.replace, so a reader never sees a half-written snapshot.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from pydantic import TypeAdapter, ValidationError

from core.models.place import Place
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

_SNAPSHOT = TypeAdapter(list[Place])


class PersistenceFailure(ApplicationError):
    """Local snapshot could not be read or written."""

    def __init__(self, message: str, path: Path, operation: str):
        super().__init__(
            message,
            code="PERSISTENCE_FAILED",
            suggestion="Check that the cache directory exists and is writable",
            details={"path": str(path), "operation": operation},
        )


class LocalFavoritesCache:
    """
    JSON file holding the last known favorite set.

    Only the favorites synchronizer writes to it.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # -------------------------------------------------------------------------
    # Public API (never raises)
    # -------------------------------------------------------------------------

    async def load_snapshot(self) -> list[Place]:
        """
        Load the cached favorite set.

        Returns:
            Cached places, or an empty list on any failure
        """
        try:
            places = await asyncio.to_thread(self._read)
        except PersistenceFailure as e:
            logger.warning(f"Starting with empty favorites: {e.message}")
            return []

        logger.debug(f"Loaded {len(places)} favorites from {self._path}")
        return places

    async def save_snapshot(self, places: Sequence[Place]) -> bool:
        """
        Overwrite the cached favorite set.

        Returns:
            True if the snapshot was written, False if the write was dropped
        """
        try:
            await asyncio.to_thread(self._write, list(places))
        except PersistenceFailure as e:
            logger.error(f"Dropping favorites snapshot write: {e.message}")
            return False

        logger.debug(f"Saved {len(places)} favorites to {self._path}")
        return True

    # -------------------------------------------------------------------------
    # Blocking helpers (run in a worker thread)
    # -------------------------------------------------------------------------

    def _read(self) -> list[Place]:
        if not self._path.exists():
            return []

        try:
            raw = self._path.read_bytes()
        except OSError as e:
            raise PersistenceFailure(f"Cannot read {self._path}: {e}", self._path, "read") from e

        try:
            places = _SNAPSHOT.validate_json(raw)
        except ValidationError as e:
            raise PersistenceFailure(
                f"Corrupt snapshot {self._path}: {e.error_count()} error(s)",
                self._path,
                "decode",
            ) from e

        # Keep the first occurrence of each id
        seen = set()
        unique: list[Place] = []
        for place in places:
            if place.id in seen:
                logger.warning(f"Dropping duplicate cached favorite {place.id}")
                continue
            seen.add(place.id)
            unique.append(place)
        return unique

    def _write(self, places: list[Place]) -> None:
        data = _SNAPSHOT.dump_json(places, indent=2)
        tmp_path: str | None = None

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as e:
            raise PersistenceFailure(f"Cannot write {self._path}: {e}", self._path, "write") from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug(f"Could not remove temp file {tmp_path}")
