"""Space exporter that writes the offline HTML mirror.

SpaceExporter drives a whole export: list the space, rebuild the page
hierarchy, write one HTML file per page (images rewritten to local files,
attachments downloaded next to the page), and finally write index.html.

Layout of the export root:
    index.html
    <page>/<page>.html
    <page>/<attachment files>
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ..confluence_client.api_wrapper import APIWrapper
from ..confluence_client.errors import ConfluenceError, InvalidCredentialsError
from ..page_tree.builder import PageTreeBuilder
from ..page_tree.directory import PageDirectory
from ..page_tree.models import BuildStats, PageNode
from .errors import FilesystemError
from .filesafe_converter import FilesafeConverter, PathResolver
from .image_rewriter import ImageRewriter
from .templates import render_index, render_page

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"
ATTACHMENT_BATCH_SIZE = 100


@dataclass
class ExportResult:
    """Outcome of a space export.

    Attributes:
        forest: Root pages of the reconstructed hierarchy
        index_path: Path of the written index.html
        pages_written: Number of page files written
        attachments_written: Number of attachment files written
        attachments_skipped: Attachments that failed to download
        stats: Counters from the hierarchy build
    """
    forest: List[PageNode]
    index_path: Path
    pages_written: int = 0
    attachments_written: int = 0
    attachments_skipped: List[str] = field(default_factory=list)
    stats: Optional[BuildStats] = None


class SpaceExporter:
    """Exports one Confluence space to static HTML.

    Example:
        >>> api = APIWrapper(Authenticator())
        >>> exporter = SpaceExporter(api, PageDirectory(api, "TEAM"), Path("./out"))
        >>> result = asyncio.run(exporter.export())
    """

    def __init__(
        self,
        api: APIWrapper,
        directory: PageDirectory,
        output_dir: Path,
        builder: Optional[PageTreeBuilder] = None,
        include_content: bool = True,
        include_attachments: bool = True,
        on_page_exported: Optional[Callable[[PageNode], None]] = None,
    ):
        """Initialize the exporter.

        Args:
            api: API wrapper for page bodies and attachments
            directory: Page directory of the space to export
            output_dir: Export root (created if missing)
            builder: Hierarchy builder (default: last-write-wins builder)
            include_content: Write page files; when False only index.html is written
            include_attachments: Download attachments next to each page
            on_page_exported: Called after each page file is written
        """
        self._api = api
        self._directory = directory
        self._output_dir = Path(output_dir)
        self._builder = builder or PageTreeBuilder()
        self._rewriter = ImageRewriter()
        self.include_content = include_content
        self.include_attachments = include_attachments
        self.on_page_exported = on_page_exported

    async def build_tree(self) -> List[PageNode]:
        """List the space and rebuild its hierarchy.

        Raises:
            ConfluenceError: If the listing fails
            RemoteFetchError: If any child listing fails
            DataInconsistencyError: If the builder is strict and a page has two parents
        """
        pages = await self._directory.list_pages()
        return await self._builder.build(pages, self._directory.fetch_children)

    async def export(self, forest: Optional[List[PageNode]] = None) -> ExportResult:
        """Run the full export.

        Args:
            forest: Hierarchy from an earlier build_tree() call; built here if omitted

        Returns:
            ExportResult describing what was written

        Raises:
            ConfluenceError: If listing, hierarchy or page fetches fail
            DataInconsistencyError: If the builder is strict and a page has two parents
            FilesystemError: If the export tree cannot be written
        """
        self._mkdir(self._output_dir)

        if forest is None:
            forest = await self.build_tree()
        nodes = _unique_nodes(forest)
        resolver = PathResolver(nodes)

        result = ExportResult(
            forest=forest,
            index_path=self._output_dir / INDEX_FILENAME,
            stats=self._builder.last_stats,
        )

        if self.include_content:
            for node in nodes:
                await self._export_page(node, resolver, result)
                result.pages_written += 1
                if self.on_page_exported:
                    self.on_page_exported(node)

        self._write_text(result.index_path, render_index(forest, resolver))
        logger.info(f"Hierarchical index written to {result.index_path}")
        return result

    async def _export_page(self, node: PageNode, resolver: PathResolver, result: ExportResult) -> None:
        """Write one page file and its attachments."""
        logger.debug(f"Confluence API: GET /content/{node.page_id}?expand=body.export_view")
        data = await asyncio.to_thread(
            self._api.get_page_by_id, node.page_id, expand="body.export_view"
        )
        body = (data.get('body') or {}).get('export_view') or {}
        rewritten = self._rewriter.rewrite(body.get('value') or "")

        name = resolver.dirname(node)
        page_dir = self._output_dir / name
        self._mkdir(page_dir)
        self._write_text(page_dir / f"{name}.html", render_page(node.title, rewritten.html))
        logger.info(f"Saved: {name}.html")

        if self.include_attachments:
            await self._export_attachments(node, page_dir, result)

    async def _export_attachments(self, node: PageNode, page_dir: Path, result: ExportResult) -> None:
        """Download every attachment of a page into its directory.

        A failed download is logged and recorded in result.attachments_skipped.
        Rejected credentials abort the export instead.
        """
        start = 0
        while True:
            response = await asyncio.to_thread(
                self._api.get_attachments_from_content,
                node.page_id,
                start=start,
                limit=ATTACHMENT_BATCH_SIZE
            )
            attachments = (response or {}).get('results') or []

            for attachment in attachments:
                title = attachment.get('title') or ''
                download_link = (attachment.get('_links') or {}).get('download')
                if not download_link:
                    logger.warning(f"Attachment '{title}' of page {node.page_id} has no download link")
                    result.attachments_skipped.append(title)
                    continue

                filename = _attachment_filename(title, page_dir.name)
                try:
                    content = await asyncio.to_thread(self._api.download_attachment, download_link)
                except InvalidCredentialsError:
                    raise
                except ConfluenceError as e:
                    logger.warning(f"Failed to download attachment '{title}' of page {node.page_id}: {e}")
                    result.attachments_skipped.append(title)
                    continue

                self._write_bytes(page_dir / filename, content)
                result.attachments_written += 1
                logger.info(f"Downloaded: {filename}")

            if not attachments:
                break
            start += len(attachments)

    @staticmethod
    def _mkdir(path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(str(path), 'mkdir', str(e)) from e

    @staticmethod
    def _write_text(path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise FilesystemError(str(path), 'write', str(e)) from e

    @staticmethod
    def _write_bytes(path: Path, content: bytes) -> None:
        try:
            path.write_bytes(content)
        except OSError as e:
            raise FilesystemError(str(path), 'write', str(e)) from e


def _attachment_filename(title: str, page_name: str) -> str:
    """Filesafe attachment name that never replaces the page file itself."""
    filename = FilesafeConverter.attachment_filename(title)
    if filename.lower() == f"{page_name}.html".lower():
        filename = f"{page_name}_attachment.html"
    return filename


def _unique_nodes(forest: List[PageNode]) -> List[PageNode]:
    """Flatten the forest depth-first, root order preserved, each page once."""
    seen = set()
    nodes: List[PageNode] = []
    for root in forest:
        for node in root.walk():
            if node.page_id not in seen:
                seen.add(node.page_id)
                nodes.append(node)
    return nodes
