"""Diagnostic and metrics types for compact XML parsing.

This module defines the diagnostic entries attached to parse results and the
performance counters collected while scanning a buffer.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Recoverable oddities (stray attribute bytes, CDATA skipped)
    ERROR = auto()      # Parse failures
    CRITICAL = auto()   # Failures outside the scanner (I/O, unexpected exceptions)


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    @property
    def offset(self) -> Optional[int]:
        """Byte offset the diagnostic refers to, if any."""
        if not self.position:
            return None
        return self.position.get("offset")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary representation."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Counters collected during one parse."""

    processing_time_ms: float = 0.0
    bytes_processed: int = 0
    fragments_classified: int = 0
    elements_built: int = 0
    attributes_extracted: int = 0
    max_depth_reached: int = 0

    @property
    def bytes_per_second(self) -> float:
        """Calculate bytes scanned per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary representation."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "bytes_processed": self.bytes_processed,
            "fragments_classified": self.fragments_classified,
            "elements_built": self.elements_built,
            "attributes_extracted": self.attributes_extracted,
            "max_depth_reached": self.max_depth_reached,
        }
