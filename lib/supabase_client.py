# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper around the async Supabase client.
# One SupabaseClient instance is built at startup and passed to the remote
# favorites store and the identity provider, so tests can hand them a fake.
#
# The underlying supabase.AsyncClient is created lazily on first use; until
# then no network or configuration error can surface.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   supabase = SupabaseClient.from_settings(settings)
#   table = await supabase.favorites()
#   rows = (await table.select("*").eq("owner_id", uid).execute()).data
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from supabase import AsyncClient, acreate_client

from lib.utils import ApplicationError

if TYPE_CHECKING:
    from app.config import Settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(ApplicationError):
    """
    Error creating or talking to the Supabase client.

    Callers translate it into their own failure type (SyncFailure,
    IdentityUnavailable) so the favorites core never sees it directly.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class SupabaseClient:
    """
    Async Supabase handle scoped to the favorites table.

    Example:
        supabase = SupabaseClient(url, anon_key)
        user_id = await supabase.anonymous_user_id()
        table = await supabase.favorites()
    """

    def __init__(
        self,
        url: str,
        key: str,
        favorites_table: str = "favorites",
        client: AsyncClient | None = None,
    ):
        self._url = url
        self._key = key
        self.favorites_table = favorites_table
        self._client = client
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> SupabaseClient:
        """Build a client from application settings."""
        return cls(
            url=settings.SUPABASE_URL,
            key=settings.SUPABASE_ANON_KEY,
            favorites_table=settings.SUPABASE_FAVORITES_TABLE,
        )

    async def get_client(self) -> AsyncClient:
        """
        Get or create the underlying async client.

        Returns:
            AsyncClient: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if self._client is not None:
            return self._client

        async with self._init_lock:
            if self._client is None:
                try:
                    self._client = await acreate_client(self._url, self._key)
                except Exception as e:
                    raise SupabaseClientError(
                        message=f"Failed to create Supabase client: {e}",
                        code="CLIENT_INIT_FAILED",
                        suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
                    ) from e
                logger.info("Supabase client initialized successfully")
        return self._client

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    async def favorites(self):
        """Return a fresh query builder for the favorites table."""
        client = await self.get_client()
        return client.table(self.favorites_table)

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def anonymous_user_id(self) -> str:
        """
        Return the signed-in user's id, signing in anonymously if needed.

        An existing auth session (restored by the client) is reused so the
        same device keeps the same owner id.

        Returns:
            The opaque Supabase user id

        Raises:
            SupabaseClientError: If sign-in fails or returns no user
        """
        client = await self.get_client()

        try:
            session = await client.auth.get_session()
            if session is not None and session.user is not None:
                logger.debug(f"Reusing Supabase session for user {session.user.id}")
                return session.user.id

            response = await client.auth.sign_in_anonymously()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Anonymous sign-in failed: {e}",
                code="ANONYMOUS_SIGN_IN_FAILED",
                suggestion="Enable anonymous sign-ins in the Supabase Auth settings and check connectivity",
            ) from e

        if response.user is None or not response.user.id:
            raise SupabaseClientError(
                message="Anonymous sign-in returned no user",
                code="ANONYMOUS_SIGN_IN_FAILED",
                suggestion="Enable anonymous sign-ins in the Supabase Auth settings",
            )

        logger.info(f"Signed in anonymously as {response.user.id}")
        return response.user.id

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    async def ping(self) -> None:
        """
        Run a trivial query against the favorites table.

        Raises:
            SupabaseClientError: If the table is unreachable
        """
        table = await self.favorites()
        try:
            await table.select("id").limit(1).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Favorites table unreachable: {e}",
                code="PING_FAILED",
                details={"table": self.favorites_table},
            ) from e
