"""Exception types raised by markup tree construction and rendering.

Construction errors are raised synchronously from the mutating call. The only
place that catches them is the string-conversion boundary of the writer.
"""

from typing import Any, Optional


class MarkupError(Exception):
    """Base exception for all markup tree errors."""


class InvalidTagError(MarkupError, ValueError):
    """Raised when a tag name is empty or whitespace-only."""

    def __init__(self, message: str = "Element tag cannot be empty") -> None:
        super().__init__(message)


class InvalidElementError(MarkupError, TypeError):
    """Raised when a child that is not a Node is handed to a Node."""

    def __init__(self, value: Any) -> None:
        self.value_type = type(value).__name__
        super().__init__(
            f'Invalid child element: expecting Node, given "{self.value_type}"'
        )


class AttributeParseError(MarkupError, ValueError):
    """Raised when a raw attribute string cannot be parsed."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class AttributeTypeError(MarkupError, TypeError):
    """Raised when attributes are neither a mapping nor a string."""

    def __init__(self, value: Any) -> None:
        self.value_type = type(value).__name__
        super().__init__(
            f"Attributes must be string or mapping, given: '{self.value_type}'."
        )
