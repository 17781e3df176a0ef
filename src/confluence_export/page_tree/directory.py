"""Remote page directory for one Confluence space.

Exposes the two listings the hierarchy builder consumes, "all pages in the
space" and "direct children of a page", as async methods returning typed
PageSummary lists. Pagination is resolved here; the blocking API wrapper
runs on a worker thread so the event loop stays free.

Confluence caps the batch size server-side, so a batch shorter than the
requested limit does not mean the listing is complete. Paging stops at
the first empty batch.
"""

import asyncio
import logging
from typing import Any, Dict, List

from ..confluence_client.api_wrapper import APIWrapper
from ..confluence_client.errors import MalformedResponseError
from .models import PageSummary

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class PageDirectory:
    """Lists pages of a single space.

    Args:
        api: API wrapper used for the remote calls
        space_key: Key of the space to list (e.g., "TEAM")
        page_size: Batch size for paginated listings
    """

    def __init__(self, api: APIWrapper, space_key: str, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._api = api
        self.space_key = space_key
        self.page_size = page_size

    async def list_pages(self) -> List[PageSummary]:
        """Return every page of the space, regardless of nesting level.

        Raises:
            ConfluenceError: If any batch fails to load
            MalformedResponseError: If a batch has an unexpected shape
        """
        pages: List[PageSummary] = []
        start = 0
        while True:
            logger.debug(
                f"Confluence API: list pages of space {self.space_key} "
                f"(start={start}, limit={self.page_size})"
            )
            batch = await asyncio.to_thread(
                self._api.get_all_pages_from_space,
                self.space_key,
                start=start,
                limit=self.page_size
            )
            results = _results(batch)
            pages.extend(PageSummary.from_api(item) for item in results)
            if not results:
                break
            start += len(results)

        logger.info(f"Space {self.space_key} lists {len(pages)} page(s)")
        return pages

    async def fetch_children(self, page_id: str) -> List[PageSummary]:
        """Return the direct child pages of page_id.

        Raises:
            ConfluenceError: If any batch fails to load
            MalformedResponseError: If a batch has an unexpected shape
        """
        children: List[PageSummary] = []
        start = 0
        while True:
            batch = await asyncio.to_thread(
                self._api.get_page_child_by_type,
                page_id,
                child_type='page',
                start=start,
                limit=self.page_size
            )
            results = _results(batch)
            children.extend(PageSummary.from_api(item) for item in results)
            if not results:
                break
            start += len(results)

        logger.debug(f"Found {len(children)} children for page {page_id}")
        return children


def _results(response: Any) -> List[Dict[str, Any]]:
    """Normalize a listing response to a list of page dicts.

    Handles both dict with 'results' key and a bare list (or other iterable).
    """
    if response is None:
        return []
    if isinstance(response, dict):
        results = response.get('results', [])
        if not isinstance(results, list):
            raise MalformedResponseError("'results' is not a list")
        return results
    if isinstance(response, (str, bytes)):
        raise MalformedResponseError(f"unexpected listing payload of type {type(response).__name__}")
    return list(response)
