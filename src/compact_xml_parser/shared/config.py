"""Configuration for compact XML parsing.

The scanner itself has no options beyond the buffer it is given; the knobs
here decide how the builder reacts to the constructs it tolerates by default
(mismatched closing tags, CDATA sections) and bound the resources one parse
may use.
"""

import codecs
import json
import sys
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class CDataHandling(Enum):
    """What the builder does when it meets a ``<![CDATA[ ... ]]>`` section."""

    SKIP = "skip"      # Skip the whole section and record a warning
    ERROR = "error"    # Stop with UNSUPPORTED_CONSTRUCT


VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Stack frames kept free below the recursion limit when bounding max_depth
RECURSION_HEADROOM = 200

_BOOL_FIELDS = (
    "strict_tag_matching",
    "return_partial_results",
    "enable_diagnostics",
)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []



def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

@dataclass(frozen=True)
class ParserConfig:
    """Immutable parser configuration.

    Thread-safe due to frozen dataclass implementation; use ``override`` to
    derive a modified copy.
    """

    strict_tag_matching: bool = False
    cdata_handling: CDataHandling = CDataHandling.SKIP
    max_depth: int = 256
    max_input_size_bytes: Optional[int] = None
    return_partial_results: bool = False
    text_encoding: str = "utf-8"
    enable_diagnostics: bool = True
    logging_level: str = "WARNING"

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in _BOOL_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ConfigValidationError(
                    f"{name} must be a bool, got {getattr(self, name)!r}",
                    field_name=name,
                )
        for name in ("text_encoding", "logging_level"):
            if not isinstance(getattr(self, name), str):
                raise ConfigValidationError(
                    f"{name} must be a str, got {getattr(self, name)!r}",
                    field_name=name,
                )
        for name in ("name", "description"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigValidationError(
                    f"{name} must be a str or None, got {value!r}",
                    field_name=name,
                )
        if not isinstance(self.cdata_handling, CDataHandling):
            raise ConfigValidationError(
                f"cdata_handling must be a CDataHandling, got {self.cdata_handling!r}",
                field_name="cdata_handling",
                suggestions=[member.value for member in CDataHandling],
            )
        if not _is_int(self.max_depth):
            raise ConfigValidationError(
                f"max_depth must be an int, got {self.max_depth!r}",
                field_name="max_depth",
            )
        if self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0", field_name="max_depth"
            )
        depth_limit = sys.getrecursionlimit() - RECURSION_HEADROOM
        if self.max_depth > depth_limit:
            raise ConfigValidationError(
                f"max_depth must be <= {depth_limit} (recursion limit "
                f"{sys.getrecursionlimit()} minus {RECURSION_HEADROOM})",
                field_name="max_depth",
                suggestions=[str(depth_limit)],
            )
        if self.max_input_size_bytes is not None and not _is_int(
            self.max_input_size_bytes
        ):
            raise ConfigValidationError(
                "max_input_size_bytes must be an int or None, got "
                f"{self.max_input_size_bytes!r}",
                field_name="max_input_size_bytes",
            )
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ConfigValidationError(
                "max_input_size_bytes must be > 0 or None",
                field_name="max_input_size_bytes",
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=VALID_LOGGING_LEVELS,
            )
        try:
            codecs.lookup(self.text_encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown text_encoding: {self.text_encoding}",
                field_name="text_encoding",
                suggestions=["utf-8", "ascii", "latin-1"],
            ) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> strict = config.override(strict_tag_matching=True)
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files are
        reported rather than silently ignored.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )

        values = dict(data)
        if "cdata_handling" in values and not isinstance(
            values["cdata_handling"], CDataHandling
        ):
            raw = values["cdata_handling"]
            try:
                values["cdata_handling"] = CDataHandling(str(raw).lower())
            except ValueError as e:
                raise ConfigValidationError(
                    f"Invalid cdata_handling: {raw!r}",
                    field_name="cdata_handling",
                    suggestions=[member.value for member in CDataHandling],
                ) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Default behaviour: tolerate mismatched closing tags, skip CDATA."""
        return cls(
            name="lenient",
            description="Accept mismatched closing tags and skip CDATA with warnings",
        )

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Reject mismatched closing tags and CDATA sections."""
        return cls(
            strict_tag_matching=True,
            cdata_handling=CDataHandling.ERROR,
            name="strict",
            description="Fail on mismatched closing tags and CDATA sections",
        )
