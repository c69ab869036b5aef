"""Shared utilities for markup tree construction and rendering.

This module provides configuration objects, result and diagnostic types,
the exception taxonomy, and logging helpers used by the tree and writer layers.
"""

from .config import (
    DEFAULT_SELF_CLOSING_TAGS,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    Language,
    MarkupConfig,
    WriterConfig,
)
from .errors import (
    AttributeParseError,
    AttributeTypeError,
    InvalidElementError,
    InvalidTagError,
    MarkupError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    RenderMetrics,
    RenderResult,
)

__all__ = [
    "DEFAULT_SELF_CLOSING_TAGS",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "Language",
    "MarkupConfig",
    "WriterConfig",
    "AttributeParseError",
    "AttributeTypeError",
    "InvalidElementError",
    "InvalidTagError",
    "MarkupError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "RenderMetrics",
    "RenderResult",
]
