"""Module-level convenience API for building and rendering markup trees.

Simple functions cover the common cases; ``Writer`` and ``WriterConfig`` are
there for anything that needs more control.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from markup_tree.shared import (
    Language,
    RenderResult,
    WriterConfig,
    get_logger,
)
from markup_tree.tree import Node
from markup_tree.writer import Writer

TreeSource = Union[Node, Mapping[str, Any], str, Path]


def element(
    tag: str,
    attributes: Optional[Mapping[str, Any]] = None,
    content: str = "",
    children: Iterable[Node] = (),
) -> Node:
    """Create a node in one call.

    Examples:
        >>> str(element("div", {"class": ["a", "b"]}))
        '<div class="a b"></div>'
    """
    node = Node(tag=tag)
    if attributes:
        node.set_attributes(attributes)
    if content:
        node.set_content(content)
    for child in children:
        node.add_child(child)
    return node


def load_tree(source: TreeSource) -> Node:
    """Load a node tree from a Node, a dict, a JSON string or a JSON file path."""
    if isinstance(source, Node):
        return source
    if isinstance(source, Path):
        return Node.from_json(source.read_text(encoding="utf-8"))
    if isinstance(source, str):
        return Node.from_json(source)
    return Node.from_dict(source)


def _writer(language: Union[Language, str], correlation_id: Optional[str]) -> Writer:
    return Writer(WriterConfig(language=language), correlation_id=correlation_id)


def render(
    source: TreeSource,
    language: Union[Language, str] = Language.HTML5,
    correlation_id: Optional[str] = None,
) -> str:
    """Render a tree to markup, returning "" on failure."""
    return render_safe(source, language, correlation_id).markup


def render_safe(
    source: TreeSource,
    language: Union[Language, str] = Language.HTML5,
    correlation_id: Optional[str] = None,
) -> RenderResult:
    """Render a tree and return markup with diagnostics.

    Loading errors (malformed JSON, invalid tags) propagate; only failures
    during the render itself are turned into diagnostics.
    """
    logger = get_logger(__name__, correlation_id, "render")
    node = load_tree(source)

    result = _writer(language, correlation_id).render_safe(node)
    logger.debug(
        "Render finished",
        extra={
            "success": result.success,
            "elements_rendered": result.metrics.elements_rendered,
        },
    )
    return result


def build_attribute_string(
    attributes: Union[Mapping[str, Any], str],
    language: Union[Language, str] = Language.HTML5,
) -> str:
    """Build an escaped attribute string such as `` class="a b"``."""
    return _writer(language, None).build_attribute_string(attributes)


def parse_attribute_string(text: str) -> Dict[str, str]:
    """Parse a raw attribute string into a name to value mapping."""
    return Writer().parse_attribute_string(text)


def dump_tree(node: Node, indent: Optional[int] = 2) -> str:
    """Serialize a tree to the JSON format read by ``load_tree``."""
    return json.dumps(node.to_dict(), indent=indent)
