"""Public parsing API.

Module-level functions for one-off parses and ``CompactXMLParser`` for
reusing a configuration across many documents.
"""

from .parser import (
    CompactXMLParser,
    parse,
    parse_bytes,
    parse_file,
    parse_resource,
    parse_string,
)

__all__ = [
    "CompactXMLParser",
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_resource",
    "parse_string",
]
