"""Structural delimiters recognised by the scanner.

All byte values and multi-byte markers consulted by the classifier and the
extractors live here; nothing else in the scanning layer spells out a raw
delimiter literal.
"""

# Single-byte delimiters (ints, as produced by indexing a bytes object)
LEFT_ANGLE = ord("<")
SLASH = ord("/")
EQUALS = ord("=")
DOUBLE_QUOTE = ord('"')
SINGLE_QUOTE = ord("'")
QUESTION = ord("?")
EXCLAMATION = ord("!")
LEFT_SQUARE = ord("[")

WHITESPACE = frozenset(b" \t\r\n")
QUOTES = frozenset((DOUBLE_QUOTE, SINGLE_QUOTE))

# Delimiter sets used by bounded searches
TAG_BOUNDARIES = b"<>"
NAME_TERMINATORS = b" \t\r\n/>"

# Multi-byte markers
COMMENT_OPEN = b"<!--"
COMMENT_CLOSE = b"-->"
CDATA_OPEN = b"<![CDATA["
CDATA_CLOSE = b"]]>"
TAG_OPEN = b"<"
TAG_CLOSE = b">"
SUBSET_OPEN_OR_TAG_CLOSE = b"[>"
SUBSET_CLOSE = b"]"
