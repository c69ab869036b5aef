"""Markup tree model.

Key Components:
    Node: Mutable element with tag, attributes, content fragments and children
    AttributeValue: Ordered, multi-valued container behind one attribute name
    ValueKind: Shape of an attribute's value list, used by the writer
"""

from .attribute import (
    AttributeValue,
    ValueKind,
    classify_values,
    is_scalar,
    scalar_to_text,
    strict_equal,
)
from .element import (
    DefaultAttributeProvider,
    Node,
    Preparer,
)

__all__ = [
    "AttributeValue",
    "ValueKind",
    "classify_values",
    "is_scalar",
    "scalar_to_text",
    "strict_equal",
    "DefaultAttributeProvider",
    "Node",
    "Preparer",
]
