"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Export completed
    - GENERAL_ERROR (1): Config issues, filesystem failures, unexpected errors
    - DATA_INCONSISTENCY (2): Strict mode found a page with two parents
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API failures
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    DATA_INCONSISTENCY = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class ExportConfig:
    """Settings for one export run.

    Attributes:
        space_key: Key of the space to export (e.g., "TEAM")
        output_dir: Export root directory
        page_size: Batch size for paginated API listings
        include_content: Write page files (False writes only index.html)
        include_attachments: Download attachments next to each page
        strict_hierarchy: Fail when a page is listed under two parents
    """
    space_key: str = ""
    output_dir: str = "./confluence_pages"
    page_size: int = 100
    include_content: bool = True
    include_attachments: bool = True
    strict_hierarchy: bool = False
