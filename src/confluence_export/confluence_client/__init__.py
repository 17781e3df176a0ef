"""Confluence client library for the static exporter.

This package provides Python abstractions over the Confluence Cloud REST API,
with typed errors and rate-limit retries.
"""

from .errors import (
    ExportError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    MalformedResponseError,
    RemoteFetchError,
)
from .auth import Authenticator, Credentials
from .api_wrapper import APIWrapper

__all__ = [
    "ExportError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "MalformedResponseError",
    "RemoteFetchError",
    "Authenticator",
    "Credentials",
    "APIWrapper",
]
