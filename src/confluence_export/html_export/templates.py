"""HTML templates for exported pages and the space index."""

from html import escape
from typing import List, Sequence, Union

from ..page_tree.models import PageNode
from .filesafe_converter import PathResolver

INDEX_TITLE = "Content"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <link rel="stylesheet" href="{stylesheet}" type="text/css">
</head>
<body class="theme-default aui-theme-default">
  <div id="page">
    <div id="main" class="aui-page-panel">
      <div id="main-header">
        <h1 id="title-heading" class="pagetitle">
          <span id="title-text">{title}</span>
        </h1>
      </div>
      <div id="content">
        <div class="pageSection">
          {content}
        </div>
      </div>
    </div>
  </div>
</body>
</html>
"""


def render_page(title: str, content: str, stylesheet: str = "../styles/batch.css") -> str:
    """Render a complete HTML document.

    The title is escaped; content is inserted as-is, since it is already HTML.
    """
    return PAGE_TEMPLATE.format(
        title=escape(title),
        stylesheet=escape(stylesheet),
        content=content,
    )


def render_index_list(forest: Sequence[PageNode], resolver: PathResolver) -> str:
    """Render the forest as nested <ul>/<li> links.

    Walks with an explicit stack, visiting each page id once, so deep or
    cyclic trees cannot overflow or loop.
    """
    parts: List[str] = ["<ul>"]
    seen = set()
    stack: List[Union[str, PageNode]] = ["</ul>"]
    stack.extend(reversed(forest))

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        if item.page_id in seen:
            continue
        seen.add(item.page_id)

        parts.append(
            f'<li><a href="{escape(resolver.relative_href(item))}">{escape(item.title)}</a>'
        )
        stack.append("</li>")
        children = [child for child in item.children if child.page_id not in seen]
        if children:
            stack.append("</ul>")
            stack.extend(reversed(children))
            stack.append("<ul>")

    return "".join(parts)


def render_index(forest: Sequence[PageNode], resolver: PathResolver) -> str:
    """Render the index.html document for the export root."""
    return render_page(
        INDEX_TITLE,
        render_index_list(forest, resolver),
        stylesheet="styles/batch.css",
    )
