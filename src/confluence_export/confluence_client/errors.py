"""Typed exception hierarchy for Confluence-related errors.

This module defines the exceptions raised while talking to the Confluence
REST API. All exceptions inherit from ConfluenceError so callers can catch
every remote failure in one place, and carry enough context (page id,
endpoint) to tell the user what went wrong.
"""

from typing import Optional


class ExportError(Exception):
    """Base exception for all confluence-export errors.

    Use this to catch any application-level error from the export tool.
    """
    pass


class ConfluenceError(ExportError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing, invalid or rejected."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a requested page or space does not exist."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "Confluence API failure (after 3 retries)"):
        super().__init__(message)


class MalformedResponseError(ConfluenceError):
    """Raised when an API payload does not have the expected shape."""

    def __init__(self, message: str):
        super().__init__(f"Malformed API response: {message}")


class RemoteFetchError(ConfluenceError):
    """Raised when fetching the children of a page fails.

    Aborts the hierarchy build; page_id names the page whose child
    listing could not be retrieved.
    """

    def __init__(self, page_id: str, reason: Optional[str] = None):
        message = f"Failed to fetch child pages of page {page_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.page_id = page_id
        self.reason = reason
