"""Page tree reconstruction for Confluence spaces.

This package turns the flat page listing of a space into a forest of
PageNode objects that mirrors the space's real parent/child structure.
"""

from .models import PageSummary, PageNode, BuildStats
from .errors import PageTreeError, DataInconsistencyError
from .builder import PageTreeBuilder
from .directory import PageDirectory

__all__ = [
    'PageSummary',
    'PageNode',
    'BuildStats',
    'PageTreeError',
    'DataInconsistencyError',
    'PageTreeBuilder',
    'PageDirectory',
]
