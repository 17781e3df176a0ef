"""Filesafe directory names for exported pages.

Page titles become directory and file names in the export tree:
`<name>/<name>.html`. Titles are not unique within a space, so the
PathResolver disambiguates collisions with the page id.
"""

import re
from typing import Dict, Iterable
from urllib.parse import quote

from ..page_tree.models import PageNode

_UNSAFE_CHARS = re.compile(r'[\\/:"*?<>|]+')


class FilesafeConverter:
    """Converts Confluence titles to names safe on all file systems.

    Conversion rules:
    - Each run of \\ / : " * ? < > | becomes a single underscore
    - Leading/trailing whitespace and dots are trimmed
    - An empty result becomes "untitled"

    Examples:
        - "Release Notes" -> "Release Notes"
        - "API: v2/v3" -> "API_ v2_v3"
    """

    @staticmethod
    def title_to_dirname(title: str) -> str:
        """Convert a page title to a filesafe directory name.

        Examples:
            >>> FilesafeConverter.title_to_dirname('Q&A: "Ops"')
            'Q&A_ _Ops_'
        """
        name = _UNSAFE_CHARS.sub('_', title).strip().strip('.')
        return name or 'untitled'

    @staticmethod
    def attachment_filename(title: str) -> str:
        """Convert an attachment title to a filesafe file name."""
        name = _UNSAFE_CHARS.sub('_', title).strip()
        return name or 'attachment'


class PathResolver:
    """Assigns every page a unique directory name within the export root.

    The first page to claim a name keeps it; later pages whose titles
    sanitize to the same name get "_<page_id>" appended, plus a counter if
    that name is taken as well. Comparison is
    case-insensitive so the tree also works on case-insensitive file systems.
    """

    def __init__(self, nodes: Iterable[PageNode] = ()):
        self._names: Dict[str, str] = {}
        self._taken: set = set()
        for node in nodes:
            self.dirname(node)

    def dirname(self, node: PageNode) -> str:
        """Return the directory name for a page, assigning one on first use."""
        name = self._names.get(node.page_id)
        if name is not None:
            return name

        base = FilesafeConverter.title_to_dirname(node.title)
        name = base
        if name.lower() in self._taken:
            name = f"{base}_{node.page_id}"
            counter = 2
            # another page may already be titled "<base>_<page_id>"
            while name.lower() in self._taken:
                name = f"{base}_{node.page_id}_{counter}"
                counter += 1
        self._taken.add(name.lower())
        self._names[node.page_id] = name
        return name

    def relative_href(self, node: PageNode) -> str:
        """URL-quoted link to the page file, relative to the export root."""
        name = quote(self.dirname(node))
        return f"./{name}/{name}.html"
