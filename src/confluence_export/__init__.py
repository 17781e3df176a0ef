"""Export a Confluence space to a self-contained tree of static HTML files."""

__version__ = "0.1.0"
