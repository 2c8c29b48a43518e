"""Element tree model and recursive builder.

Key Components:
    XMLTreeBuilder: Builds the element tree from a complete byte buffer
    XMLElement: Immutable element with name, text, children and attributes
    XMLAttribute: Immutable name/value pair
    ParseResult: Result object with the tree, error and diagnostics
"""

from .builder import (
    BuildOutcome,
    ParseResult,
    XMLTreeBuilder,
)
from .model import (
    XMLAttribute,
    XMLElement,
)

__all__ = [
    "BuildOutcome",
    "ParseResult",
    "XMLAttribute",
    "XMLElement",
    "XMLTreeBuilder",
]
