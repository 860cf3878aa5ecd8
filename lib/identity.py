# =============================================================================
# lib/identity.py - Anonymous Identity Provider
# =============================================================================
# Supplies the opaque user id that scopes remote favorites.
#
# The id is established lazily through an anonymous bootstrap exchange and
# cached for the lifetime of the process. Concurrent callers share a single
# in-flight exchange (single-flight): the second caller awaits the first
# caller's task instead of signing in again.
#
# Usage:
#   identity = IdentityProvider.for_supabase(supabase)
#   owner_id = await identity.ensure_identity()
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from lib.utils import ApplicationError

if TYPE_CHECKING:
    from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Performs the anonymous exchange and returns the new user id
Bootstrap = Callable[[], Awaitable[str]]


class IdentityUnavailable(ApplicationError):
    """No user id could be established (offline, or the service refused)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            message,
            code="IDENTITY_UNAVAILABLE",
            suggestion="Favorites keep working locally; remote sync resumes once sign-in succeeds",
            details=details,
        )


def _consume_exception(task: asyncio.Task) -> None:
    # Failures must be retrieved even when every caller was cancelled
    if not task.cancelled():
        task.exception()


class IdentityProvider:
    """
    Lazily established, process-wide anonymous identity.

    A failed exchange is not cached: the next call starts a new one.
    """

    def __init__(self, bootstrap: Bootstrap):
        self._bootstrap = bootstrap
        self._user_id: str | None = None
        self._inflight: asyncio.Task[str] | None = None
        self.exchange_count = 0

    @classmethod
    def for_supabase(cls, supabase: SupabaseClient) -> IdentityProvider:
        """Use Supabase anonymous sign-in as the bootstrap exchange."""
        return cls(supabase.anonymous_user_id)

    @property
    def user_id(self) -> str | None:
        """The cached user id, or None if not established yet."""
        return self._user_id

    async def ensure_identity(self) -> str:
        """
        Return the user id, establishing it if necessary.

        Returns:
            Opaque user id

        Raises:
            IdentityUnavailable: If the bootstrap exchange fails
        """
        if self._user_id is not None:
            return self._user_id

        if self._inflight is None:
            self._inflight = asyncio.create_task(self._exchange())
            self._inflight.add_done_callback(_consume_exception)
        else:
            logger.debug("Identity exchange already in flight, joining it")

        # Shield so one cancelled caller does not cancel the shared exchange
        return await asyncio.shield(self._inflight)

    def reset(self) -> None:
        """Forget the cached id; the next call bootstraps again."""
        self._user_id = None

    async def _exchange(self) -> str:
        self.exchange_count += 1
        try:
            user_id = await self._bootstrap()
        except Exception as e:
            logger.warning(f"Identity bootstrap failed: {e}")
            raise IdentityUnavailable(
                f"Identity bootstrap failed: {e}",
                details={"error": str(e)},
            ) from e
        finally:
            self._inflight = None

        if not user_id:
            logger.warning("Identity bootstrap returned an empty id")
            raise IdentityUnavailable("Identity bootstrap returned an empty id")

        self._user_id = user_id
        logger.info(f"Identity established: {user_id}")
        return user_id
