"""Command-line interface module for markup-tree.

Provides the ``markup-tree`` tool for rendering JSON tree descriptions and
checking raw attribute strings.
"""

from .main import main

__all__ = ["main"]
