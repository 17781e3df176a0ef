"""Typed exception hierarchy for page tree errors."""

from ..confluence_client.errors import ExportError


class PageTreeError(ExportError):
    """Base exception for all page tree errors."""
    pass


class DataInconsistencyError(PageTreeError):
    """Raised in strict mode when a page is listed under two different parents."""

    def __init__(self, page_id: str, first_parent_id: str, second_parent_id: str):
        super().__init__(
            f"Page {page_id} is a child of both page {first_parent_id} "
            f"and page {second_parent_id}"
        )
        self.page_id = page_id
        self.first_parent_id = first_parent_id
        self.second_parent_id = second_parent_id
