"""Multi-valued attribute container.

An ``AttributeValue`` holds one attribute name and an ordered list of value
tokens. Tokens are scalars (str, int, float, bool) or structured values
(dicts, lists and anything else JSON can encode). The writer decides how to
serialize the list from its ``ValueKind``.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

if TYPE_CHECKING:
    from markup_tree.writer.writer import Writer

SCALAR_TYPES = (str, int, float, bool)


class ValueKind(Enum):
    """Shape of an attribute's value list."""

    EMPTY = auto()       # No values; rendered as name="name"
    SCALAR = auto()      # Exactly one scalar value
    LIST = auto()        # Several scalar values, space-joined
    STRUCTURED = auto()  # At least one non-scalar value, JSON-encoded


def is_scalar(value: Any) -> bool:
    """Check whether a value is a scalar attribute token."""
    return isinstance(value, SCALAR_TYPES)


def strict_equal(left: Any, right: Any) -> bool:
    """Compare two values by exact type and value.

    ``True`` and ``1`` compare equal in Python but are different tokens here.
    """
    return type(left) is type(right) and left == right


def scalar_to_text(value: Any) -> str:
    """Convert a scalar token to its attribute text."""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def classify_values(values: Sequence[Any]) -> ValueKind:
    """Classify a value list for serialization."""
    if not values:
        return ValueKind.EMPTY
    if not all(is_scalar(value) for value in values):
        return ValueKind.STRUCTURED
    if len(values) == 1:
        return ValueKind.SCALAR
    return ValueKind.LIST


def _as_list(value: Any) -> Optional[List[Any]]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


class AttributeValue:
    """One attribute name with its ordered list of values."""

    __slots__ = ("_name", "_values")

    def __init__(self, name: str, value: Any = None) -> None:
        """Create an attribute.

        Args:
            name: Attribute name, fixed for the lifetime of the object
            value: Optional initial value, applied with ``set_value``
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Attribute name cannot be empty")

        self._name = name
        self._values: List[Any] = []

        if value is not None:
            self.set_value(value)

    @property
    def name(self) -> str:
        return self._name

    @property
    def values(self) -> List[Any]:
        """Copy of the value list."""
        return list(self._values)

    @property
    def kind(self) -> ValueKind:
        return classify_values(self._values)

    def set_value(self, value: Any) -> "AttributeValue":
        """Replace the value list.

        A list or tuple replaces the list wholesale without deduplication;
        anything else becomes a single-element list.
        """
        values = _as_list(value)
        self._values = values if values is not None else [value]
        return self

    def add_value(self, value: Any) -> "AttributeValue":
        """Append to the value list.

        Every element of a list or tuple is appended, duplicates included.
        A single value is appended only if no strictly equal value is present.
        """
        values = _as_list(value)
        if values is not None:
            self._values.extend(values)
        elif not self.has_value(value):
            self._values.append(value)
        return self

    def add_values(self, values: Iterable[Any]) -> "AttributeValue":
        """Add each value individually, skipping strictly equal duplicates."""
        for value in values:
            if not self.has_value(value):
                self._values.append(value)
        return self

    def has_value(self, value: Any) -> bool:
        """Check whether a strictly equal value is in the list."""
        return any(strict_equal(existing, value) for existing in self._values)

    def get_values(self) -> List[Any]:
        return self.values

    def get_value(self, index: int) -> Any:
        """Return the value at ``index`` or None when out of range."""
        if 0 <= index < len(self._values):
            return self._values[index]
        return None

    def remove_value(self, value: Any) -> "AttributeValue":
        """Remove the first strictly equal value, if any."""
        for index, existing in enumerate(self._values):
            if strict_equal(existing, value):
                del self._values[index]
                break
        return self

    def clear(self) -> "AttributeValue":
        self._values = []
        return self

    def to_text(self, writer: Optional["Writer"] = None) -> str:
        """Unescaped value text as resolved by ``writer``, the default writer if omitted."""
        if writer is None:
            from markup_tree.writer.writer import default_writer

            writer = default_writer()
        return writer.attribute_text(self._name, self)

    def to_dict(self) -> Dict[str, List[Any]]:
        """Export as ``{name: [values...]}``."""
        return {self._name: self.values}

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(list(self._values))

    def __contains__(self, value: Any) -> bool:
        return self.has_value(value)

    def __str__(self) -> str:
        return f'{self._name}="{self.to_text()}"'

    def __repr__(self) -> str:
        return f"AttributeValue({self._name!r}, {self._values!r})"
