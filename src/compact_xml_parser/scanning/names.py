"""Element name extraction."""

from typing import Tuple

from compact_xml_parser.shared.errors import XMLErrorKind, XMLParseError

from . import delimiters
from .cursor import find_any_of


def extract_name(
    buffer: bytes, start: int, end: int, encoding: str = "utf-8"
) -> Tuple[str, int]:
    """Extract an element name starting right after ``<`` or ``</``.

    The name runs up to the first whitespace, ``/`` or ``>`` in
    ``[start, end)``.

    Args:
        buffer: Complete input document
        start: Offset of the first name byte
        end: Exclusive bound, normally one past the fragment's ``>``
        encoding: Codec used to decode the name bytes

    Returns:
        Tuple of (name, offset of the terminating delimiter)

    Raises:
        XMLParseError: UNTERMINATED_NAME if no delimiter exists in range
    """
    name_end = find_any_of(buffer, delimiters.NAME_TERMINATORS, start, end)
    if name_end is None:
        raise XMLParseError(
            XMLErrorKind.UNTERMINATED_NAME,
            "Element name is not terminated before the end of the tag",
            offset=start,
        )
    return buffer[start:name_end].decode(encoding, errors="replace"), name_end
