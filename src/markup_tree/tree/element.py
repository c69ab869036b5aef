"""Mutable markup tree element.

A ``Node`` is rendered using the following layout::

    before_element
    <tag attributes>
        before_content
        content + children     (or children + content)
        after_content
    </tag>
    after_element

Self-closing tags drop everything between the open tag and ``after_element``.
"""

import json
import weakref
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Union,
)

from markup_tree.shared import (
    InvalidElementError,
    InvalidTagError,
    Language,
    RenderResult,
)
from markup_tree.tree.attribute import AttributeValue

if TYPE_CHECKING:
    from markup_tree.writer.writer import Writer

Preparer = Callable[["Node"], None]
DefaultAttributeProvider = Callable[["Node"], Mapping[str, Any]]

DEFAULT_TAG = "span"


class Node:
    """A markup element with a tag, attributes, content fragments and children.

    Customization works two ways. Subclasses may override ``prepare`` and
    ``get_default_attributes``; plain nodes may instead receive a ``preparer``
    callable (run at the start of every render) and a ``default_attributes``
    callable (run once at construction).
    """

    def __init__(
        self,
        parent: Optional["Node"] = None,
        *,
        tag: Optional[str] = None,
        preparer: Optional[Preparer] = None,
        default_attributes: Optional[DefaultAttributeProvider] = None,
    ) -> None:
        """Create a node.

        Args:
            parent: Optional parent; only the back-reference is set, the node
                is not added to the parent's children
            tag: Optional tag name, defaults to ``span``
            preparer: Called with the node before each render
            default_attributes: Called with the node once, its mapping is
                applied with ``set_attributes``
        """
        self._tag = DEFAULT_TAG
        self._parent_ref: Optional["weakref.ReferenceType[Node]"] = None
        self._attributes: Dict[str, AttributeValue] = {}
        self._children: List[Node] = []
        self._before_element: List[str] = []
        self._after_element: List[str] = []
        self._before_content: List[str] = []
        self._after_content: List[str] = []
        self._children_before_content = False
        self._content = ""
        self._preparer = preparer
        self._default_attributes = default_attributes

        if tag is not None:
            self.set_tag(tag)

        if parent is not None:
            self.set_parent(parent)

        self.initialize()

    # ------------------------------------------------------------------
    # Tag
    # ------------------------------------------------------------------

    @property
    def tag(self) -> str:
        return self._tag

    @tag.setter
    def tag(self, value: str) -> None:
        self.set_tag(value)

    def set_tag(self, tag: str) -> "Node":
        """Set the tag name, trimmed and lowercased.

        Raises:
            InvalidTagError: If the tag is empty or whitespace-only
        """
        if not isinstance(tag, str):
            raise InvalidTagError(f"Element tag must be a string, given {type(tag).__name__}")

        tag = tag.strip()
        if not tag:
            raise InvalidTagError()

        self._tag = tag.lower()
        return self

    def get_tag(self) -> str:
        return self._tag

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def attribute(self, name: str, attribute: Optional[AttributeValue] = None) -> AttributeValue:
        """Return the attribute called ``name``, creating it if missing.

        When ``attribute`` is given it replaces whatever is stored under ``name``.
        """
        if attribute is not None:
            if not isinstance(attribute, AttributeValue):
                raise TypeError("attribute must be an AttributeValue instance")
            self._attributes[name] = attribute
        elif name not in self._attributes:
            self._attributes[name] = AttributeValue(name)

        return self._attributes[name]

    def attr(self, name: str, attribute: Optional[AttributeValue] = None) -> AttributeValue:
        """Alias of ``attribute``."""
        return self.attribute(name, attribute)

    def data(self, name: str) -> AttributeValue:
        """Return the ``data-<name>`` attribute."""
        return self.attribute(f"data-{name}")

    def set_attribute(self, name: str, value: Any) -> "Node":
        self.attribute(name).set_value(value)
        return self

    def set_attributes(self, attributes: Mapping[str, Any]) -> "Node":
        for name, value in attributes.items():
            self.set_attribute(name, value)
        return self

    def add_attribute(self, name: str, value: Any) -> "Node":
        self.attribute(name).add_value(value)
        return self

    def add_attributes(self, attributes: Mapping[str, Any]) -> "Node":
        for name, value in attributes.items():
            self.add_attribute(name, value)
        return self

    def get_attribute(self, name: str) -> List[Any]:
        """Return the value list of an attribute, creating the attribute if missing."""
        return self.attribute(name).values

    def get_attributes(self) -> Dict[str, List[Any]]:
        """Return ``{name: [values]}`` in insertion order."""
        return {name: attribute.values for name, attribute in self._attributes.items()}

    def has_attribute(self, name: str, value: Any = None) -> bool:
        """Check whether an attribute exists and, optionally, holds ``value``."""
        attribute = self._attributes.get(name)
        if attribute is None:
            return False
        if value is None:
            return True
        return attribute.has_value(value)

    def remove_attribute(self, name: str, value: Any = None) -> "Node":
        """Remove a whole attribute, or only one of its values."""
        if value is None:
            self._attributes.pop(name, None)
        elif name in self._attributes:
            self._attributes[name].remove_value(value)
        return self

    # ------------------------------------------------------------------
    # Tree structure
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Optional["Node"]:
        """The node that most recently attached this one, if still alive."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def set_parent(self, node: "Node") -> "Node":
        """Set the parent back-reference only.

        The node is neither added to ``node``'s children nor removed from a
        previous parent's children.
        """
        if not isinstance(node, Node):
            raise InvalidElementError(node)
        self._parent_ref = weakref.ref(node)
        return self

    def get_parent(self) -> Optional["Node"]:
        return self.parent

    @property
    def children(self) -> List["Node"]:
        return list(self._children)

    def get_children(self) -> List["Node"]:
        return self.children

    def set_children(self, nodes: Iterable["Node"]) -> "Node":
        """Replace the children list.

        Every item is validated before the list is replaced. Children dropped
        from the previous list keep their parent reference.

        Raises:
            InvalidElementError: If any item is not a Node
        """
        children = list(nodes)
        for child in children:
            if not isinstance(child, Node):
                raise InvalidElementError(child)

        for child in children:
            child.set_parent(self)

        self._children = children
        return self

    def has_children(self) -> bool:
        return bool(self._children)

    def add_child(self, node: Optional["Node"] = None) -> "Node":
        """Append a child and return it.

        A default node is created when none is given, which allows nested
        construction such as ``root.add_child().add_child()``.
        """
        if node is None:
            node = Node()
        elif not isinstance(node, Node):
            raise InvalidElementError(node)

        node.set_parent(self)
        self._children.append(node)
        return node

    def get_child(self, index: int) -> Optional["Node"]:
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def has_child(self, index: int) -> bool:
        return 0 <= index < len(self._children)

    def is_child(self, node: "Node") -> bool:
        return any(child is node for child in self._children)

    def delete_child(self, child: Union["Node", int]) -> "Node":
        """Remove a child by identity, or by position for anything else.

        Unknown nodes and out-of-range positions are ignored.
        """
        if isinstance(child, Node):
            for index, existing in enumerate(self._children):
                if existing is child:
                    del self._children[index]
                    break
        else:
            index = int(child)
            if 0 <= index < len(self._children):
                del self._children[index]
        return self

    # ------------------------------------------------------------------
    # Content and fragments
    # ------------------------------------------------------------------

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: str) -> None:
        self.set_content(value)

    def set_content(self, content: str) -> "Node":
        self._content = str(content)
        return self

    def get_content(self) -> str:
        return self._content

    def before_content(self, content: str) -> "Node":
        """Insert a fragment at the front of the before-content list."""
        self._before_content.insert(0, str(content))
        return self

    def set_before_content(self, content: str) -> "Node":
        self._before_content = [str(content)]
        return self

    def get_before_content(self) -> List[str]:
        return list(self._before_content)

    def after_content(self, content: str) -> "Node":
        self._after_content.append(str(content))
        return self

    def set_after_content(self, content: str) -> "Node":
        self._after_content = [str(content)]
        return self

    def get_after_content(self) -> List[str]:
        return list(self._after_content)

    def before_element(self, content: str) -> "Node":
        """Insert a fragment at the front of the before-element list."""
        self._before_element.insert(0, str(content))
        return self

    def set_before_element(self, content: str) -> "Node":
        self._before_element = [str(content)]
        return self

    def get_before_element(self) -> List[str]:
        return list(self._before_element)

    def after_element(self, content: str) -> "Node":
        self._after_element.append(str(content))
        return self

    def set_after_element(self, content: str) -> "Node":
        self._after_element = [str(content)]
        return self

    def get_after_element(self) -> List[str]:
        return list(self._after_element)

    @property
    def children_before_content(self) -> bool:
        return self._children_before_content

    def render_children_before_content(self, value: bool = True) -> "Node":
        """Set whether children are rendered before the node's own content."""
        self._children_before_content = bool(value)
        return self

    def get_child_content(
        self,
        writer: Optional["Writer"] = None,
        result: Optional[RenderResult] = None,
    ) -> str:
        """Render every child to text and concatenate.

        Each child goes through the writer's string-conversion boundary, so a
        failing child contributes an empty string.
        """
        writer = writer or _default_writer()
        return "".join(writer.render_child(child, result) for child in self._children)

    def get_html_content(
        self,
        writer: Optional["Writer"] = None,
        result: Optional[RenderResult] = None,
    ) -> str:
        """Return the inner markup: fragments, content and rendered children."""
        parts = list(self._before_content)

        child_content = self.get_child_content(writer, result)
        if self._children_before_content:
            parts.extend((child_content, self._content))
        else:
            parts.extend((self._content, child_content))

        parts.extend(self._after_content)
        return "".join(parts)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def prepare(self) -> None:
        """Called at the start of every render, before any markup is built."""
        if self._preparer is not None:
            self._preparer(self)

    def initialize(self) -> None:
        """Called once at the end of construction; applies default attributes."""
        self.set_attributes(self.get_default_attributes())

    def get_default_attributes(self) -> Mapping[str, Any]:
        if self._default_attributes is not None:
            return self._default_attributes(self)
        return {}

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(
        self,
        language: Optional[Union[Language, str]] = None,
        writer: Optional["Writer"] = None,
    ) -> str:
        """Render to markup; never raises and returns "" on failure."""
        return _resolve_writer(writer, language).to_string(self)

    def render_safe(
        self,
        language: Optional[Union[Language, str]] = None,
        writer: Optional["Writer"] = None,
    ) -> RenderResult:
        """Render to a ``RenderResult`` carrying markup and diagnostics."""
        return _resolve_writer(writer, language).render_safe(self)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"<Node {self._tag} attributes={len(self._attributes)} "
            f"children={len(self._children)}>"
        )

    # ------------------------------------------------------------------
    # Name-indexed attribute access
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> List[Any]:
        return self.get_attribute(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set_attribute(name, value)

    def __delitem__(self, name: str) -> None:
        self.remove_attribute(name)

    def __contains__(self, name: str) -> bool:
        return self.has_attribute(name)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._attributes))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to a dictionary."""
        result: Dict[str, Any] = {
            "tag": self._tag,
            "attributes": self.get_attributes(),
            "content": self._content,
        }

        if self._children_before_content:
            result["children_before_content"] = True
        for key in ("before_element", "after_element", "before_content", "after_content"):
            fragments = getattr(self, f"_{key}")
            if fragments:
                result[key] = list(fragments)

        if self._children:
            result["children"] = [child.to_dict() for child in self._children]

        return result

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], parent: Optional["Node"] = None) -> "Node":
        """Build a subtree from the format produced by ``to_dict``.

        Fragment lists are taken in their stored order.
        """
        if not isinstance(data, Mapping):
            raise InvalidElementError(data)

        node = cls(parent, tag=data.get("tag", DEFAULT_TAG))
        node.set_attributes(data.get("attributes", {}))
        node.set_content(data.get("content", ""))
        node.render_children_before_content(data.get("children_before_content", False))

        for key in ("before_element", "after_element", "before_content", "after_content"):
            setattr(node, f"_{key}", [str(fragment) for fragment in data.get(key, [])])

        node.set_children(cls.from_dict(child) for child in data.get("children", []))
        return node

    @classmethod
    def from_json(cls, json_str: str) -> "Node":
        return cls.from_dict(json.loads(json_str))

    def __getstate__(self) -> Dict[str, Any]:
        state = self.__dict__.copy()
        state["_parent_ref"] = self.parent
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        parent = state.pop("_parent_ref", None)
        self.__dict__.update(state)
        self._parent_ref = weakref.ref(parent) if parent is not None else None


def _default_writer() -> "Writer":
    from markup_tree.writer.writer import default_writer

    return default_writer()


def _resolve_writer(
    writer: Optional["Writer"],
    language: Optional[Union[Language, str]],
) -> "Writer":
    if writer is not None:
        return writer
    if language is None:
        return _default_writer()

    from markup_tree.writer.writer import Writer

    return Writer(language=language)
