# =============================================================================
# core/services/favorites_synchronizer.py - Favorites Synchronization Core
# =============================================================================
# Owns the authoritative in-memory favorite set and keeps the local cache and
# the remote store eventually consistent with it.
#
# Startup (once per process, see start()):
#   1. Load the local snapshot and publish it right away
#   2. Resolve the anonymous identity   (failure -> stay local-only)
#   3. Fetch the remote list            (failure -> stay local-only)
#   4. Merge: remote rows verbatim + local-only rows, stable-sorted by name,
#      then persist locally. Local-only rows are NOT pushed to remote here.
#
# Mutations (add/remove) update memory, save the local snapshot, then hand
# the remote write to the RemoteWriteQueue. Remote failures are logged, never
# raised; PlaceValidationError is the only error callers see.
#
# All reads and writes of the set happen under one asyncio.Lock. Network I/O
# (identity, remote fetch) runs outside the lock so mutations are not blocked.
# =============================================================================

import asyncio
import logging
from datetime import UTC, datetime
from typing import Callable, Sequence
from uuid import UUID

from pydantic import ValidationError

from app.exceptions import PlaceValidationError
from core.models.place import Place, clean_name
from core.models.sync import FavoritesSnapshot, SyncState
from core.services.contracts import FavoritesCache, FavoritesRemote, IdentitySource
from core.services.remote_write_queue import RemoteWriteQueue
from lib.identity import IdentityUnavailable
from lib.remote_store import SyncFailure

logger = logging.getLogger(__name__)

Listener = Callable[[FavoritesSnapshot], None]


# =============================================================================
# Pure helpers
# =============================================================================

def merge_favorites(remote: Sequence[Place], local: Sequence[Place]) -> list[Place]:
    """
    Merge the remote list into the local set.

    Remote wins for any id present on both sides. Local places whose id the
    remote does not know are kept. The result is sorted by name; the sort is
    stable, so equal names keep remote-then-local order.

    Example:
        local  = [NYC(id=1)]
        remote = [Austin(id=2)]
        merge_favorites(remote, local) -> [Austin(id=2), NYC(id=1)]
    """
    remote_ids = {place.id for place in remote}
    local_only = [place for place in local if place.id not in remote_ids]
    return sorted([*remote, *local_only], key=lambda place: place.name)


def validate_place(place: Place) -> Place:
    """
    Re-run Place validation on an instance.

    Places built with model_construct (or deserialized elsewhere) skip
    validation; this makes add() safe regardless of how the Place was made.

    Raises:
        PlaceValidationError: Blank name or out-of-range coordinates
    """
    try:
        return Place.model_validate(place.model_dump())
    except ValidationError as e:
        raise PlaceValidationError.from_validation_error(e) from e


# =============================================================================
# Synchronizer
# =============================================================================

class FavoritesSynchronizer:
    """
    Single-writer owner of the favorite set.

    Consumers read `snapshot` and call `subscribe()` to be told about every
    change; they never mutate the set directly.

    Example:
        sync = FavoritesSynchronizer(cache, remote, identity)
        await sync.start()
        place = await sync.create("Austin", 30.2672, -97.7431)
        await sync.remove(place)
    """

    def __init__(
        self,
        cache: FavoritesCache,
        remote: FavoritesRemote,
        identity: IdentitySource,
        write_queue: RemoteWriteQueue | None = None,
    ):
        self._cache = cache
        self._remote = remote
        self._identity = identity
        self._writes = write_queue or RemoteWriteQueue()

        self._places: list[Place] = []
        self._state = SyncState.IDLE
        self._loaded = False
        self._last_synced_at: datetime | None = None
        self._snapshot = FavoritesSnapshot()

        self._lock = asyncio.Lock()
        self._listeners: list[Listener] = []
        self._startup: asyncio.Task | None = None
        # Bumped by every sync cycle; older cycles' results are discarded
        self._generation = 0

    # -------------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------------

    @property
    def snapshot(self) -> FavoritesSnapshot:
        return self._snapshot

    @property
    def places(self) -> tuple[Place, ...]:
        return self._snapshot.places

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def write_queue(self) -> RemoteWriteQueue:
        return self._writes

    def get(self, place_id: UUID) -> Place | None:
        return self._snapshot.find(place_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        The listener is called with each new snapshot, synchronously, while
        the synchronizer holds its lock. It must not call back into add(),
        remove() or sync() directly.

        Returns:
            A function that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> asyncio.Task:
        """
        Run the startup sequence once; later calls return the same task.

        Returns:
            Task resolving to the snapshot after the first sync cycle
        """
        if self._startup is None:
            self._startup = asyncio.create_task(self._run_startup(), name="favorites-startup")
        return self._startup

    async def _run_startup(self) -> FavoritesSnapshot:
        await self.load_local()
        return await self.sync()

    async def load_local(self) -> FavoritesSnapshot:
        """Load the local snapshot (once) and publish it."""
        async with self._lock:
            await self._ensure_loaded()
            return self._snapshot

    async def sync(self) -> FavoritesSnapshot:
        """
        Reconcile the in-memory set with the remote list.

        Never raises for identity or remote failures: the set stays as it
        was and the state falls back to READY_LOCAL.

        Returns:
            The snapshot after this cycle
        """
        async with self._lock:
            await self._ensure_loaded()
            self._generation += 1
            generation = self._generation
            self._set_state(SyncState.AUTHENTICATING)

        try:
            owner_id = await self._identity.ensure_identity()
        except IdentityUnavailable as e:
            logger.warning(f"Favorites sync skipped, no identity: {e.message}")
            return await self._fall_back(generation)

        async with self._lock:
            if generation == self._generation:
                self._set_state(SyncState.SYNCING_REMOTE)

        try:
            remote_places = await self._remote.fetch_all(owner_id)
        except SyncFailure as e:
            logger.warning(f"Favorites sync failed for owner {owner_id}: {e.message}")
            return await self._fall_back(generation)

        async with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding stale favorites fetch (cycle {generation} < {self._generation})")
                return self._snapshot

            local_count = len(self._places)
            self._places = merge_favorites(remote_places, self._places)
            self._last_synced_at = datetime.now(UTC)
            await self._cache.save_snapshot(self._places)
            self._set_state(SyncState.READY_MERGED)

            logger.info(
                f"Merged favorites for owner {owner_id}: "
                f"{len(remote_places)} remote + {local_count} local -> {len(self._places)}"
            )
            return self._snapshot

    async def close(self) -> None:
        """Wait for outstanding remote writes."""
        if self._startup is not None and not self._startup.done():
            await asyncio.wait([self._startup])
        await self._writes.drain()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add(self, place: Place) -> Place:
        """
        Add (or replace, by id) a favorite.

        The local snapshot is saved before this returns; the remote upsert
        runs in the background.

        Raises:
            PlaceValidationError: If the place is invalid (nothing changes)
        """
        accepted = validate_place(place)

        async with self._lock:
            await self._ensure_loaded()

            places = list(self._places)
            index = next((i for i, p in enumerate(places) if p.id == accepted.id), None)
            if index is None:
                places.append(accepted)
            else:
                places[index] = accepted
            self._places = places

            await self._cache.save_snapshot(self._places)
            self._publish()
            self._schedule_remote(accepted.id, "upsert", lambda owner_id: self._remote.upsert(accepted, owner_id))

        logger.info(f"Added favorite {accepted.id} ({accepted.name})")
        return accepted

    async def create(self, name: str, latitude: float, longitude: float) -> Place:
        """
        Build a Place with a fresh id and add it.

        The name is trimmed here; add() stores names exactly as given.

        Raises:
            PlaceValidationError: If the values are invalid
        """
        try:
            place = Place(name=clean_name(name), latitude=latitude, longitude=longitude)
        except ValidationError as e:
            raise PlaceValidationError.from_validation_error(e) from e
        return await self.add(place)

    async def remove(self, place: Place | UUID | str) -> bool:
        """
        Remove a favorite by id. Unknown ids are a no-op.

        Returns:
            True if a favorite was removed
        """
        place_id = place.id if isinstance(place, Place) else UUID(str(place))

        async with self._lock:
            await self._ensure_loaded()

            remaining = [p for p in self._places if p.id != place_id]
            if len(remaining) == len(self._places):
                logger.debug(f"Remove ignored, favorite {place_id} not present")
                return False
            self._places = remaining

            await self._cache.save_snapshot(self._places)
            self._publish()
            self._schedule_remote(place_id, "delete", lambda owner_id: self._remote.delete(place_id, owner_id))

        logger.info(f"Removed favorite {place_id}")
        return True

    # -------------------------------------------------------------------------
    # Internals (call with the lock held)
    # -------------------------------------------------------------------------

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._set_state(SyncState.LOADING_LOCAL)
        self._places = await self._cache.load_snapshot()
        self._loaded = True
        self._set_state(SyncState.READY_LOCAL)

    async def _fall_back(self, generation: int) -> FavoritesSnapshot:
        async with self._lock:
            if generation == self._generation:
                self._set_state(SyncState.READY_LOCAL)
            return self._snapshot

    def _schedule_remote(self, place_id: UUID, label: str, write) -> asyncio.Task:
        async def operation() -> None:
            owner_id = await self._identity.ensure_identity()
            await write(owner_id)

        return self._writes.submit(str(place_id), label, operation)

    def _set_state(self, state: SyncState) -> None:
        self._state = state
        self._publish()

    def _publish(self) -> None:
        self._snapshot = FavoritesSnapshot(
            places=tuple(self._places),
            state=self._state,
            owner_id=self._identity.user_id,
            version=self._snapshot.version + 1,
            last_synced_at=self._last_synced_at,
        )
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                logger.exception("Favorites listener failed")
