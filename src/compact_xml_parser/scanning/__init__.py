"""Byte-level scanning for compact XML parsing.

Key Components:
    classify_fragment: Locate and categorize the next ``<...>`` fragment
    extract_name: Read an element name after ``<`` or ``</``
    extract_attributes: Run the attribute state machine over a tag
    cursor: Bounded search primitives shared by all of the above
"""

from .attributes import (
    AttributeAction,
    AttributeScanner,
    AttributeScanResult,
    AttributeState,
    CharClass,
    TRANSITIONS,
    classify_byte,
    extract_attributes,
    transition,
)
from .fragments import Fragment, FragmentType, classify_fragment
from .names import extract_name

__all__ = [
    "AttributeAction",
    "AttributeScanResult",
    "AttributeScanner",
    "AttributeState",
    "CharClass",
    "Fragment",
    "FragmentType",
    "TRANSITIONS",
    "classify_byte",
    "classify_fragment",
    "extract_attributes",
    "extract_name",
    "transition",
]
