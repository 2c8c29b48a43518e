"""Shared utilities for compact XML parsing.

This module provides the error taxonomy, configuration object, diagnostic
result types, and logging helpers used by the scanning, tree, API and CLI
layers.
"""

from .config import (
    CDataHandling,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import (
    XMLErrorKind,
    XMLParseError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "CDataHandling",
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParserConfig",
    "PerformanceMetrics",
    "XMLErrorKind",
    "XMLParseError",
    "configure_logging",
    "get_logger",
]
