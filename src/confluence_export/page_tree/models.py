"""Data models for the page tree.

PageSummary is the typed shape every API payload is parsed into before the
hierarchy builder sees it; PageNode is the node of the resulting forest.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..confluence_client.errors import MalformedResponseError


@dataclass(frozen=True)
class PageSummary:
    """Minimal remote representation of a page (id + title).

    Attributes:
        page_id: Confluence page ID, unique within a space
        title: Page title (not guaranteed unique)
    """
    page_id: str
    title: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PageSummary":
        """Parse a page payload from the Confluence REST API.

        Raises:
            MalformedResponseError: If the payload is not a dict or has no id
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"expected page object, got {type(data).__name__}"
            )
        page_id = data.get('id')
        if page_id is None or str(page_id).strip() == '':
            raise MalformedResponseError("page object missing 'id' field")
        title = data.get('title') or 'Untitled Page'
        return cls(page_id=str(page_id), title=str(title))


@dataclass(eq=False)
class PageNode:
    """A page in the reconstructed hierarchy.

    Nodes compare by identity: the builder guarantees a single instance per
    page id, so two references to the same page are the same object.

    Attributes:
        page_id: Confluence page ID
        title: Page title
        children: Child nodes in discovery order
    """
    page_id: str
    title: str
    children: List['PageNode'] = field(default_factory=list)

    def walk(self):
        """Yield this node and all descendants, depth-first, each id once."""
        seen = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if node.page_id in seen:
                continue
            seen.add(node.page_id)
            yield node
            stack.extend(reversed(node.children))


@dataclass
class BuildStats:
    """Counters recorded by a finished hierarchy build."""
    fetch_count: int = 0
    node_count: int = 0
    root_count: int = 0
    reassigned_count: int = 0
