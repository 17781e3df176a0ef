"""Hierarchy builder that reconstructs a space's page forest.

The space listing endpoint returns every page of a space flatly, without
nesting information. This module turns that flat list into a forest by
asking the remote directory for the direct children of each page,
breadth-first, and classifying as roots the pages nobody claimed as a child.

Nodes live in a registry keyed by page id. Every reference to a page,
whether from the initial listing or from any parent's child listing,
resolves to the registered node, so each page exists exactly once per
build and is asked for its children exactly once.
"""

import logging
from collections import deque
from typing import Awaitable, Callable, Deque, Dict, Iterable, List, Optional, Sequence, Set

from ..confluence_client.errors import RemoteFetchError
from .errors import DataInconsistencyError
from .models import BuildStats, PageNode, PageSummary

logger = logging.getLogger(__name__)

FetchChildren = Callable[[str], Awaitable[Sequence[PageSummary]]]


class PageTreeBuilder:
    """Builds a deduplicated page forest from a flat page listing.

    When a page shows up as the child of more than one parent, the parent
    processed last wins and the page is moved under it. With strict=True
    the build raises DataInconsistencyError instead.

    Example:
        >>> directory = PageDirectory(api, "TEAM")
        >>> builder = PageTreeBuilder()
        >>> pages = await directory.list_pages()
        >>> forest = await builder.build(pages, directory.fetch_children)
    """

    def __init__(self, strict: bool = False):
        """Initialize the builder.

        Args:
            strict: Raise on multi-parent pages instead of reassigning them
        """
        self.strict = strict
        self.last_stats: Optional[BuildStats] = None

    async def build(
        self,
        initial_pages: Iterable[PageSummary],
        fetch_children: FetchChildren
    ) -> List[PageNode]:
        """Build the page forest.

        Child listings are awaited one at a time, in FIFO order of
        discovery. All state is local to this call.

        Args:
            initial_pages: Flat page listing (may be empty or incomplete)
            fetch_children: Async callable returning the direct children
                of a page id

        Returns:
            Root nodes in registry order, each with nested children

        Raises:
            RemoteFetchError: If any child listing fails; the build is aborted
            DataInconsistencyError: In strict mode, if a page has two parents
        """
        registry: Dict[str, PageNode] = {}
        parent_of: Dict[str, str] = {}
        child_ids: Dict[str, Set[str]] = {}
        queue: Deque[PageNode] = deque()
        stats = BuildStats()

        def resolve(summary: PageSummary) -> PageNode:
            node = registry.get(summary.page_id)
            if node is None:
                node = PageNode(page_id=summary.page_id, title=summary.title)
                registry[node.page_id] = node
                child_ids[node.page_id] = set()
                queue.append(node)
            return node

        for summary in initial_pages:
            resolve(summary)

        logger.debug(f"Seeded page tree with {len(registry)} page(s)")

        while queue:
            current = queue.popleft()
            children = await self._fetch(fetch_children, current.page_id)
            stats.fetch_count += 1

            for summary in children:
                child = resolve(summary)

                if child.page_id not in child_ids[current.page_id]:
                    current.children.append(child)
                    child_ids[current.page_id].add(child.page_id)

                previous_parent_id = parent_of.get(child.page_id)
                if previous_parent_id is not None and previous_parent_id != current.page_id:
                    if self.strict:
                        raise DataInconsistencyError(
                            child.page_id, previous_parent_id, current.page_id
                        )
                    self._detach(registry[previous_parent_id], child, child_ids)
                    stats.reassigned_count += 1
                    logger.warning(
                        f"Page {child.page_id} ('{child.title}') listed under both "
                        f"{previous_parent_id} and {current.page_id}; keeping it under "
                        f"{current.page_id}"
                    )

                parent_of[child.page_id] = current.page_id

        roots = [node for page_id, node in registry.items() if page_id not in parent_of]

        stats.node_count = len(registry)
        stats.root_count = len(roots)
        self.last_stats = stats
        logger.info(
            f"Built page tree: {stats.node_count} page(s), {stats.root_count} root(s), "
            f"{stats.fetch_count} child listing(s)"
        )
        return roots

    @staticmethod
    async def _fetch(fetch_children: FetchChildren, page_id: str) -> Sequence[PageSummary]:
        """Await one child listing, tagging failures with the page id."""
        try:
            return await fetch_children(page_id)
        except RemoteFetchError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch children for page {page_id}: {e}")
            raise RemoteFetchError(page_id, str(e)) from e

    @staticmethod
    def _detach(parent: PageNode, child: PageNode, child_ids: Dict[str, Set[str]]) -> None:
        """Remove child from parent's children list."""
        parent.children = [c for c in parent.children if c is not child]
        child_ids[parent.page_id].discard(child.page_id)
