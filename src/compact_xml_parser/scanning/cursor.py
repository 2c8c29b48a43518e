"""Bounded search primitives over an immutable byte buffer.

Every function takes a half-open range ``[start, end)`` and never looks at a
byte outside it; ``end`` is clamped to the buffer length. A failed search
returns ``None`` and the caller decides which error kind that is.
"""

import re
from functools import lru_cache
from typing import Optional


def clamp_end(buffer: bytes, end: int) -> int:
    """Clamp a declared end offset to the buffer length."""
    return min(end, len(buffer))


@lru_cache(maxsize=32)
def _any_of_pattern(chars: bytes) -> "re.Pattern[bytes]":
    return re.compile(b"[" + re.escape(chars) + b"]")


def find_sequence(
    buffer: bytes, needle: bytes, start: int, end: int
) -> Optional[int]:
    """Find the first occurrence of ``needle`` lying fully inside the range."""
    index = buffer.find(needle, start, clamp_end(buffer, end))
    return None if index < 0 else index


def find_any_of(
    buffer: bytes, chars: bytes, start: int, end: int
) -> Optional[int]:
    """Find the first byte in the range that is one of ``chars``."""
    match = _any_of_pattern(chars).search(buffer, start, clamp_end(buffer, end))
    return match.start() if match else None


def starts_with(buffer: bytes, prefix: bytes, position: int, end: int) -> bool:
    """Check whether ``prefix`` begins at ``position`` and fits before ``end``."""
    return buffer.startswith(prefix, position, clamp_end(buffer, end))


def byte_at(buffer: bytes, position: int, end: int) -> Optional[int]:
    """Return the byte at ``position`` if it lies inside the range."""
    if 0 <= position < clamp_end(buffer, end):
        return buffer[position]
    return None
