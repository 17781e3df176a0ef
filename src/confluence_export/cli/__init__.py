"""Command-line interface for confluence-export."""

from .main import app, main

__all__ = ['app', 'main']
