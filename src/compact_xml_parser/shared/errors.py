"""Error taxonomy for compact XML parsing.

Every scanning and extraction step that can fail raises ``XMLParseError``
with a specific ``XMLErrorKind`` instead of producing an empty or garbage
value. The tree builder catches these at the level that owns the element
under construction and unwinds with a partial tree.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional


class XMLErrorKind(Enum):
    """Kinds of parse failures."""

    EMPTY_INPUT = auto()                   # No buffer supplied
    UNEXPECTED_END_OF_INPUT = auto()       # Buffer ended before a fragment did
    MALFORMED_FRAGMENT = auto()            # Fragment that cannot be categorized
    ORPHAN_CLOSING_TAG = auto()            # Closing tag with no open element
    UNTERMINATED_NAME = auto()             # Name scan ran out of range
    UNTERMINATED_ATTRIBUTE_VALUE = auto()  # Quote never closed inside the tag
    UNSUPPORTED_CONSTRUCT = auto()         # CDATA when configured to refuse it
    MISMATCHED_CLOSING_TAG = auto()        # Strict mode only
    MAX_DEPTH_EXCEEDED = auto()            # Nesting deeper than configured
    INPUT_TOO_LARGE = auto()               # Buffer over configured size limit
    FILE_NOT_FOUND = auto()                # File or package resource missing
    UNSUPPORTED_INPUT_TYPE = auto()        # parse() given a type it cannot read
    READ_FAILED = auto()                   # File, stream or resource could not be read
    INTERNAL_ERROR = auto()                # Unexpected exception inside the builder


class XMLParseError(Exception):
    """Structured parse failure.

    Attributes:
        kind: Category of the failure
        message: Human readable description
        offset: Byte offset in the input where the failure was detected
    """

    def __init__(
        self,
        kind: XMLErrorKind,
        message: str,
        offset: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.offset = offset

    def __str__(self) -> str:
        if self.offset is None:
            return f"{self.kind.name}: {self.message}"
        return f"{self.kind.name} at offset {self.offset}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"XMLParseError(kind={self.kind.name}, message={self.message!r}, "
            f"offset={self.offset})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "kind": self.kind.name,
            "message": self.message,
            "offset": self.offset,
        }
