"""Configuration classes for markup rendering.

This module provides configuration objects for the writer and for process-wide
settings such as logging. Configurations validate themselves on creation and
are immutable, so one instance can be shared between writers.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple


class Language(Enum):
    """Output language; controls escaping and self-closing tag syntax."""

    XML1 = "xml1"
    XHTML = "xhtml"
    HTML5 = "html5"


# Tags rendered without content, children or a closing tag.
DEFAULT_SELF_CLOSING_TAGS: FrozenSet[str] = frozenset({
    "hr",
    "br",
    "input",
    "meta",
    "base",
    "basefont",
    "col",
    "frame",
    "link",
    "param",
})

_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _normalize_tags(tags: Iterable[str]) -> FrozenSet[str]:
    if isinstance(tags, str):
        raise ValueError("self_closing_tags must be a collection of tag names")
    normalized = set()
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip():
            raise ValueError("self_closing_tags entries must be non-empty strings")
        normalized.add(tag.strip().lower())
    return frozenset(normalized)


@dataclass(frozen=True)
class WriterConfig:
    """Configuration for a Writer.

    Attributes:
        language: Output language; selects the entity table and how
            self-closing tags are terminated
        self_closing_tags: Tag names rendered without content or closing tag
        structured_separators: Item and key separators used when a
            non-scalar attribute value is encoded as JSON
        parse_host_tag: Tag wrapped around raw attribute strings before parsing
        report_render_failures: Log a warning when the string-conversion
            boundary swallows an error
    """

    language: Language = Language.HTML5
    self_closing_tags: FrozenSet[str] = DEFAULT_SELF_CLOSING_TAGS
    structured_separators: Tuple[str, str] = (",", ":")
    parse_host_tag: str = "div"
    report_render_failures: bool = True

    def __post_init__(self) -> None:
        """Validate and normalize writer configuration."""
        if isinstance(self.language, str):
            try:
                object.__setattr__(self, "language", Language(self.language.lower()))
            except ValueError:
                raise ValueError(
                    f"language must be one of {[lang.value for lang in Language]}"
                ) from None
        if not isinstance(self.language, Language):
            raise ValueError("language must be a Language member")

        object.__setattr__(
            self, "self_closing_tags", _normalize_tags(self.self_closing_tags)
        )

        if len(self.structured_separators) != 2:
            raise ValueError("structured_separators must be an (item, key) pair")
        object.__setattr__(
            self, "structured_separators", tuple(self.structured_separators)
        )

        if not self.parse_host_tag or not self.parse_host_tag.strip():
            raise ValueError("parse_host_tag cannot be empty")

    def is_self_closing(self, tag: str) -> bool:
        """Check whether a tag is in the self-closing registry."""
        return tag in self.self_closing_tags

    def with_self_closing_tags(self, *tags: str) -> "WriterConfig":
        """Return a copy whose registry also contains the given tags."""
        return replace(self, self_closing_tags=self.self_closing_tags | _normalize_tags(tags))

    def without_self_closing_tags(self, *tags: str) -> "WriterConfig":
        """Return a copy whose registry no longer contains the given tags."""
        return replace(self, self_closing_tags=self.self_closing_tags - _normalize_tags(tags))

    def override(self, **kwargs: Any) -> "WriterConfig":
        """Create a new configuration with specific overrides."""
        return replace(self, **kwargs)

    @classmethod
    def html5(cls) -> "WriterConfig":
        return cls(language=Language.HTML5)

    @classmethod
    def xhtml(cls) -> "WriterConfig":
        return cls(language=Language.XHTML)

    @classmethod
    def xml1(cls) -> "WriterConfig":
        return cls(language=Language.XML1)


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _VALID_LEVELS:
            raise ValueError(f"logging_level must be one of {_VALID_LEVELS}")


@dataclass(frozen=True)
class MarkupConfig:
    """Top-level configuration grouping the writer and global settings.

    Thread-safe due to frozen dataclass implementation.
    """

    writer: WriterConfig = field(default_factory=WriterConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.writer.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "MarkupConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New MarkupConfig instance with overrides applied

        Example:
            >>> config = MarkupConfig()
            >>> new_config = config.override(
            ...     writer__language=Language.XHTML,
            ...     global___logging_level="DEBUG"
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        new_fields: Dict[str, Any] = {}

        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component == "global":
                    # "global___x" splits into "global" and "_x"
                    component, field_name = "global_", field_name.lstrip("_")
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                new_fields[key] = value

        for component, overrides in nested_overrides.items():
            if component not in ("writer", "global_"):
                raise ConfigValidationError(
                    f"Unknown configuration component: {component}",
                    field_name=component,
                    suggestions=["writer", "global_"],
                )
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _to_plain(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {name: _to_plain(getattr(obj, name)) for name in obj.__dataclass_fields__}
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (set, frozenset)):
                return sorted(obj)
            if isinstance(obj, (list, tuple)):
                return [_to_plain(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _to_plain(value) for key, value in obj.items()}
            return obj

        return _to_plain(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarkupConfig":
        """Create configuration from dictionary.

        Args:
            data: Dictionary in the format produced by ``to_dict``

        Returns:
            MarkupConfig instance created from dictionary
        """
        writer_data = dict(data.get("writer", {}))
        if isinstance(writer_data.get("language"), str):
            try:
                writer_data["language"] = Language[writer_data["language"].upper()]
            except KeyError as e:
                raise ConfigValidationError(
                    f"Unknown language: {writer_data['language']}",
                    field_name="writer.language",
                    suggestions=[lang.name for lang in Language],
                ) from e
        if "self_closing_tags" in writer_data:
            writer_data["self_closing_tags"] = frozenset(writer_data["self_closing_tags"])
        if "structured_separators" in writer_data:
            writer_data["structured_separators"] = tuple(writer_data["structured_separators"])

        try:
            return cls(
                writer=WriterConfig(**writer_data),
                global_=GlobalConfig(**data.get("global_", {})),
                name=data.get("name"),
                description=data.get("description"),
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "MarkupConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))
