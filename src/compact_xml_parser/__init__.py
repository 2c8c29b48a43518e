"""Compact XML Parser.

A small recursive-descent XML DOM parser: a complete byte buffer goes in, an
immutable element tree with ordered attributes and children comes out.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_bytes(),
  parse_file(), parse_resource()
- Level 2: Configured parser - CompactXMLParser with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "Compact XML Parser Team"

from .api import (
    CompactXMLParser,
    parse,
    parse_bytes,
    parse_file,
    parse_resource,
    parse_string,
)
from .shared.config import CDataHandling, ParserConfig
from .shared.errors import XMLErrorKind, XMLParseError
from .tree import ParseResult, XMLAttribute, XMLElement

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_resource",
    "parse_string",

    # Level 2: Configured parser
    "CompactXMLParser",
    "ParserConfig",
    "CDataHandling",

    # Result objects and data structures
    "ParseResult",
    "XMLAttribute",
    "XMLElement",

    # Errors
    "XMLErrorKind",
    "XMLParseError",
]
