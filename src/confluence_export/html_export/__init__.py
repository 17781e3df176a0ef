"""Static HTML export of Confluence spaces.

This package writes a reconstructed page forest to disk as a browsable
offline mirror: one HTML file per page plus a hierarchical index.html.
"""

from .errors import HtmlExportError, FilesystemError
from .filesafe_converter import FilesafeConverter, PathResolver
from .image_rewriter import ImageRewriter, RewrittenContent
from .templates import render_page, render_index, render_index_list
from .exporter import SpaceExporter, ExportResult

__all__ = [
    'HtmlExportError',
    'FilesystemError',
    'FilesafeConverter',
    'PathResolver',
    'ImageRewriter',
    'RewrittenContent',
    'render_page',
    'render_index',
    'render_index_list',
    'SpaceExporter',
    'ExportResult',
]
