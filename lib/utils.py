# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Helpers shared by the storage, identity and weather clients:
# - normalize_uuid: canonical id form used in remote filters
# - ApplicationError: base for every library-level failure
# - one_line_error: compact error text for failure records and logs
# =============================================================================

from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a place id to the lowercase string form stored remotely.

    Args:
        value: UUID as string or UUID object

    Returns:
        Canonical string representation of the UUID

    Raises:
        ValueError: If the string is not a valid UUID

    Example:
        place_id = normalize_uuid(place.id)        # "550e8400-..."
        place_id = normalize_uuid("550E8400-...")  # "550e8400-..."
    """
    if isinstance(value, UUID):
        return str(value)
    return str(UUID(value))


# =============================================================================
# Errors
# =============================================================================

class ApplicationError(Exception):
    """
    Base error for the cache, remote store, identity and weather clients.

    Attributes:
        code: Machine-readable category (e.g. "SYNC_FAILED")
        message: Full description for logs
        suggestion: What the user or operator can do about it
        details: Extra context (ids, paths, status codes)
        user_message: Short text safe to show in an alert

    Example:
        class SyncFailure(ApplicationError):
            def __init__(self, message: str, operation: str):
                super().__init__(message, code="SYNC_FAILED", details={"operation": operation})
    """

    user_message = "Something went wrong."

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def one_line_error(error: BaseException) -> str:
    """
    Render an exception as a single line.

    ApplicationError becomes "[CODE] message" (no suggestion line); anything
    else falls back to its class name and text.
    """
    if isinstance(error, ApplicationError):
        return f"[{error.code}] {error.message}"
    return f"{type(error).__name__}: {error}"
