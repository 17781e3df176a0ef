"""Typed exception hierarchy for HTML export errors."""

from typing import Optional

from ..confluence_client.errors import ExportError


class HtmlExportError(ExportError):
    """Base exception for all HTML export errors."""
    pass


class FilesystemError(HtmlExportError):
    """Raised when writing the export tree fails (permissions, disk full, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
