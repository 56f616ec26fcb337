"""
Exception types raised across the OpenImmo Sync Service.
"""

from typing import Any, Optional


class SyncServiceError(Exception):
    """Base class for all errors raised by the sync service."""


class FeedConnectionError(SyncServiceError):
    """Raised when the FTP feed server cannot be reached or logged into."""


class FeedTransferError(SyncServiceError):
    """Raised when listing, downloading or deleting a feed file fails."""


class OpenImmoParseError(SyncServiceError):
    """Raised when a feed file is not well-formed XML."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class CmsApiError(SyncServiceError):
    """
    Raised by the Webflow API client for any failed request.

    Carries the HTTP status code (None for transport errors) and the error
    code / body returned by Webflow so callers can tell rate limiting apart
    from other failures.
    """

    RATE_LIMIT_MARKERS = ("TooManyRequestsError", "too_many_requests", "Too Many Requests")

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.payload = payload

    @property
    def is_rate_limited(self) -> bool:
        if self.status_code == 429 or self.code == "too_many_requests":
            return True
        return any(marker in self.message for marker in self.RATE_LIMIT_MARKERS)


class CmsOperationError(SyncServiceError):
    """Raised when every call strategy for a CMS operation has failed."""

    def __init__(self, operation: str, errors: Optional[list] = None):
        self.operation = operation
        self.errors = errors or []
        details = "; ".join(f"{name}: {err}" for name, err in self.errors)
        super().__init__(f"All strategies failed for {operation}: {details}")
