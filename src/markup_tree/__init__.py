"""Markup tree construction and rendering.

Build a mutable tree of ``Node`` objects, each with a tag, multi-valued
attributes, content fragments and children, then turn it into deterministic
markup with a ``Writer``.

Progressive API Disclosure:
- Level 1: Simple functions - element(), render(), render_safe()
- Level 2: Node and AttributeValue for building trees by hand
- Level 3: Writer with a WriterConfig for language and self-closing tags
"""

__version__ = "0.1.0"
__author__ = "Markup Tree Team"

# Tree model comes first: the writer depends on it
from .tree import AttributeValue, Node, ValueKind
from .writer import Writer

# Level 1: Simple functions
from .api import element, render, render_safe

# Configuration, results and errors
from .shared import (
    AttributeParseError,
    AttributeTypeError,
    InvalidElementError,
    InvalidTagError,
    Language,
    MarkupConfig,
    MarkupError,
    RenderResult,
    WriterConfig,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "element",
    "render",
    "render_safe",

    # Level 2: Tree model
    "AttributeValue",
    "Node",
    "ValueKind",

    # Level 3: Writer and configuration
    "Writer",
    "WriterConfig",
    "MarkupConfig",
    "Language",
    "RenderResult",

    # Errors
    "MarkupError",
    "InvalidTagError",
    "InvalidElementError",
    "AttributeParseError",
    "AttributeTypeError",
]
