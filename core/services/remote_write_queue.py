# =============================================================================
# core/services/remote_write_queue.py - Background Remote Writes
# =============================================================================
# Runs remote upserts/deletes off the caller's path and keeps track of them.
#
# - submit() returns the asyncio.Task for the write, so the async boundary
#   is explicit and callers (or tests) can await it.
# - Writes for the same key run in submission order: an add followed by a
#   remove reaches the remote store as upsert, then delete.
# - Failures are logged and recorded in `failures`. There is no automatic
#   retry; a failed upsert leaves the place local-only until it is re-added.
# =============================================================================

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from typing import Awaitable, Callable

from lib.utils import one_line_error

logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class FailedWrite:
    """A remote write that did not go through."""
    key: str
    label: str  # "upsert" or "delete"
    error: str  # "[CODE] message" for library errors
    failed_at: datetime


class RemoteWriteQueue:
    """
    Per-key ordered background writes with failure bookkeeping.

    Example:
        queue = RemoteWriteQueue()
        task = queue.submit(str(place.id), "upsert", lambda: remote.upsert(place, uid))
        ok = await task   # True on success, False if it failed
        await queue.drain()
    """

    def __init__(self, max_failures: int = 100):
        # key -> most recently submitted task for that key
        self._tail: dict[str, asyncio.Task] = {}
        self._tasks: set[asyncio.Task] = set()
        self.failures: deque[FailedWrite] = deque(maxlen=max_failures)
        self.completed = 0

    @property
    def pending(self) -> int:
        """Number of writes submitted but not finished."""
        return len(self._tasks)

    def submit(self, key: str, label: str, operation: Operation) -> asyncio.Task:
        """
        Schedule a remote write.

        Args:
            key: Ordering key (the place id)
            label: Short operation name for logs
            operation: Zero-argument coroutine factory performing the write

        Returns:
            Task resolving to True on success, False on failure
        """
        previous = self._tail.get(key)
        task = asyncio.create_task(
            self._run(key, label, operation, previous),
            name=f"remote-{label}-{key}",
        )
        self._tail[key] = task
        self._tasks.add(task)
        task.add_done_callback(partial(self._forget, key))
        logger.debug(f"Queued remote {label} for {key} ({self.pending} pending)")
        return task

    async def drain(self) -> None:
        """Wait until every submitted write (including late submissions) finishes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(
        self,
        key: str,
        label: str,
        operation: Operation,
        previous: asyncio.Task | None,
    ) -> bool:
        if previous is not None and not previous.done():
            # Ordering only; the previous write's outcome is already recorded
            await asyncio.wait([previous])

        try:
            await operation()
        except Exception as e:
            logger.warning(f"Remote {label} for {key} failed: {e}")
            self.failures.append(
                FailedWrite(
                    key=key,
                    label=label,
                    error=one_line_error(e),
                    failed_at=datetime.now(UTC),
                )
            )
            return False

        self.completed += 1
        return True

    def _forget(self, key: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._tail.get(key) is task:
            del self._tail[key]
