"""Result objects and diagnostic types for markup rendering.

A render either produces markup or, when something inside the tree walk
raises, an empty string plus an error diagnostic. Both cases are carried by
``RenderResult`` so callers can inspect failures without relying on logging.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Recoverable oddities in the tree
    ERROR = auto()      # A render failed and was replaced with empty output
    CRITICAL = auto()   # Reserved for failures outside the tree walk


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.details:
            result["details"] = dict(self.details)
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id
        return result


@dataclass
class RenderMetrics:
    """Counters collected while walking a tree."""

    elements_rendered: int = 0
    attributes_rendered: int = 0
    characters_emitted: int = 0
    processing_time_ms: float = 0.0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters emitted per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_emitted * 1000.0) / self.processing_time_ms


@dataclass
class RenderResult:
    """Markup produced by a safe render together with its diagnostics."""

    markup: str = ""
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: RenderMetrics = field(default_factory=RenderMetrics)
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        """True when no error diagnostic was recorded."""
        return not self.has_errors()

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> DiagnosticEntry:
        """Add diagnostic entry to result."""
        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            details=details,
            correlation_id=self.correlation_id,
        )
        self.diagnostics.append(entry)
        return entry

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the render."""
        by_severity: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            name = diagnostic.severity.name
            by_severity[name] = by_severity.get(name, 0) + 1

        return {
            "success": self.success,
            "correlation_id": self.correlation_id,
            "length": len(self.markup),
            "elements_rendered": self.metrics.elements_rendered,
            "attributes_rendered": self.metrics.attributes_rendered,
            "processing_time_ms": self.metrics.processing_time_ms,
            "diagnostics_by_severity": by_severity,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }

    def __str__(self) -> str:
        return self.markup
