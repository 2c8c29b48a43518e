"""Fragment classification.

A fragment is one ``<...>`` unit of the input before its role in the tree is
decided. ``classify_fragment`` locates the next ``<`` at or after a position,
decides what kind of fragment starts there, and reports the offset of the
``>`` that terminates it.
"""

from dataclasses import dataclass
from enum import Enum, auto

from compact_xml_parser.shared.errors import XMLErrorKind, XMLParseError

from . import delimiters
from .cursor import byte_at, clamp_end, find_any_of, find_sequence, starts_with


class FragmentType(Enum):
    """Kinds of fragment the classifier distinguishes."""

    OPENING_TAG = auto()        # <name ...>
    CLOSING_TAG = auto()        # </name>
    SELF_CLOSING_TAG = auto()   # <name .../>
    COMMENT = auto()            # <!-- ... -->
    CDATA = auto()              # <![CDATA[ ... ]]>
    DECLARATION = auto()        # <?xml ...?>, <!DOCTYPE ...>
    MALFORMED = auto()          # <>, </>, or a tag interrupted by another <


@dataclass(frozen=True)
class Fragment:
    """A classified fragment.

    Attributes:
        kind: Fragment category
        start: Offset of the opening ``<``
        end: Offset of the terminating ``>`` (inclusive)
    """

    kind: FragmentType
    start: int
    end: int

    @property
    def next_position(self) -> int:
        """Offset immediately after the fragment."""
        return self.end + 1

    @property
    def is_tag(self) -> bool:
        """Check if the fragment opens, closes or self-closes an element."""
        return self.kind in (
            FragmentType.OPENING_TAG,
            FragmentType.CLOSING_TAG,
            FragmentType.SELF_CLOSING_TAG,
        )

    @property
    def is_skippable(self) -> bool:
        """Check if the fragment carries no tree content."""
        return self.kind in (FragmentType.COMMENT, FragmentType.DECLARATION)


def classify_fragment(buffer: bytes, start: int, end: int) -> Fragment:
    """Classify the fragment beginning at the next ``<`` in ``[start, end)``.

    Args:
        buffer: Complete input document
        start: Offset to begin searching for ``<``
        end: Declared end of input (exclusive)

    Returns:
        Fragment describing the kind and extent of the next fragment

    Raises:
        XMLParseError: UNEXPECTED_END_OF_INPUT when no ``<`` or no terminator
            exists in range, MALFORMED_FRAGMENT for unterminated comment or
            CDATA sections
    """
    end = clamp_end(buffer, end)
    tag_start = find_sequence(buffer, delimiters.TAG_OPEN, start, end)
    if tag_start is None:
        raise XMLParseError(
            XMLErrorKind.UNEXPECTED_END_OF_INPUT,
            "Input ended while looking for the next '<'",
            offset=start,
        )

    if starts_with(buffer, delimiters.COMMENT_OPEN, tag_start, end):
        return _delimited_fragment(
            buffer, tag_start, end, FragmentType.COMMENT,
            delimiters.COMMENT_OPEN, delimiters.COMMENT_CLOSE, "comment",
        )

    if starts_with(buffer, delimiters.CDATA_OPEN, tag_start, end):
        return _delimited_fragment(
            buffer, tag_start, end, FragmentType.CDATA,
            delimiters.CDATA_OPEN, delimiters.CDATA_CLOSE, "CDATA section",
        )

    marker = byte_at(buffer, tag_start + 1, end)
    if marker is None:
        raise XMLParseError(
            XMLErrorKind.UNEXPECTED_END_OF_INPUT,
            "Input ended immediately after '<'",
            offset=tag_start,
        )

    if marker in (delimiters.QUESTION, delimiters.EXCLAMATION):
        return _declaration_fragment(buffer, tag_start, end, marker)

    terminator = find_any_of(buffer, delimiters.TAG_BOUNDARIES, tag_start + 1, end)
    if terminator is None:
        raise XMLParseError(
            XMLErrorKind.UNEXPECTED_END_OF_INPUT,
            "Input ended inside a tag",
            offset=tag_start,
        )

    if buffer[terminator] == delimiters.LEFT_ANGLE:
        # Resume point is the stray '<', so the fragment ends just before it
        return Fragment(FragmentType.MALFORMED, tag_start, terminator - 1)

    if marker == delimiters.SLASH:
        if terminator == tag_start + 2:
            return Fragment(FragmentType.MALFORMED, tag_start, terminator)
        return Fragment(FragmentType.CLOSING_TAG, tag_start, terminator)

    if terminator == tag_start + 1:
        return Fragment(FragmentType.MALFORMED, tag_start, terminator)

    if buffer[terminator - 1] == delimiters.SLASH:
        return Fragment(FragmentType.SELF_CLOSING_TAG, tag_start, terminator)

    return Fragment(FragmentType.OPENING_TAG, tag_start, terminator)


def _delimited_fragment(
    buffer: bytes,
    tag_start: int,
    end: int,
    kind: FragmentType,
    opener: bytes,
    closer: bytes,
    label: str,
) -> Fragment:
    close_at = find_sequence(buffer, closer, tag_start + len(opener), end)
    if close_at is None:
        raise XMLParseError(
            XMLErrorKind.MALFORMED_FRAGMENT,
            f"Unterminated {label}",
            offset=tag_start,
        )
    return Fragment(kind, tag_start, close_at + len(closer) - 1)


def _declaration_fragment(
    buffer: bytes, tag_start: int, end: int, marker: int
) -> Fragment:
    search_from = tag_start + 2

    # <!DOCTYPE name [ ... ]> carries '>' inside its internal subset
    if marker == delimiters.EXCLAMATION:
        boundary = find_any_of(
            buffer, delimiters.SUBSET_OPEN_OR_TAG_CLOSE, search_from, end
        )
        if boundary is not None and buffer[boundary] == delimiters.LEFT_SQUARE:
            subset_end = find_sequence(
                buffer, delimiters.SUBSET_CLOSE, boundary + 1, end
            )
            if subset_end is not None:
                search_from = subset_end + 1

    terminator = find_sequence(
        buffer, delimiters.TAG_CLOSE, search_from, end
    )
    if terminator is None:
        raise XMLParseError(
            XMLErrorKind.UNEXPECTED_END_OF_INPUT,
            "Input ended inside a declaration",
            offset=tag_start,
        )
    return Fragment(FragmentType.DECLARATION, tag_start, terminator)
