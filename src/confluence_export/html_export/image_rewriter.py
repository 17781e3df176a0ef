"""Image reference rewriting for exported page bodies.

Confluence renders images with absolute or wiki-relative download URLs. In
the offline mirror every image lives next to the page file, so each
<img src> is rewritten to "./<filename>", where filename matches the name
the attachment is saved under.
"""

import logging
from dataclasses import dataclass, field
from typing import List
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup

from .filesafe_converter import FilesafeConverter

logger = logging.getLogger(__name__)

FALLBACK_FILENAME = "unknown.png"


@dataclass
class RewrittenContent:
    """Page body with local image references.

    Attributes:
        html: Rewritten HTML fragment
        image_urls: Original src values, in document order
    """
    html: str
    image_urls: List[str] = field(default_factory=list)


def extract_filename(url: str) -> str:
    """Return the decoded last path segment of an image URL.

    Examples:
        >>> extract_filename("/download/attachments/1/my%20chart.png?version=2")
        'my chart.png'
    """
    try:
        path = urlsplit(url).path
        name = unquote(path.rsplit('/', 1)[-1], errors='strict')
    except (ValueError, UnicodeDecodeError):
        logger.warning(f"Failed to extract filename from URL: {url}")
        return FALLBACK_FILENAME
    return name or FALLBACK_FILENAME


class ImageRewriter:
    """Rewrites <img> sources in an HTML fragment to local file paths."""

    def __init__(self):
        self.parser = "lxml"

    def rewrite(self, xhtml: str) -> RewrittenContent:
        """Rewrite every <img src> in xhtml to "./<filename>".

        Args:
            xhtml: Rendered page body (export_view HTML)

        Returns:
            RewrittenContent with the new fragment and the original URLs
        """
        if not xhtml:
            return RewrittenContent(html="")

        soup = BeautifulSoup(xhtml, self.parser)
        image_urls: List[str] = []

        for img in soup.find_all('img'):
            src = img.get('src')
            if not src:
                continue
            filename = FilesafeConverter.attachment_filename(extract_filename(src))
            img['src'] = f"./{filename}"
            image_urls.append(src)

        # lxml wraps fragments in <html><body>
        container = soup.body if soup.body is not None else soup
        return RewrittenContent(html=container.decode_contents(), image_urls=image_urls)
