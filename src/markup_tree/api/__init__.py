"""Convenience API for building and rendering markup trees."""

from .builder import (
    build_attribute_string,
    dump_tree,
    element,
    load_tree,
    parse_attribute_string,
    render,
    render_safe,
)

__all__ = [
    "build_attribute_string",
    "dump_tree",
    "element",
    "load_tree",
    "parse_attribute_string",
    "render",
    "render_safe",
]
