"""Markup writer and attribute escaping.

Key Components:
    Writer: Renders node trees to markup according to a WriterConfig
    escape_attribute: Language-aware attribute text escaping
"""

from .escaping import entity_for, escape_attribute
from .writer import Writer, default_writer

__all__ = [
    "Writer",
    "default_writer",
    "entity_for",
    "escape_attribute",
]
