"""Attribute extraction as an explicit finite-state machine.

The scanner walks the bytes between an element's name and its closing ``>``
(or ``/>``). Each byte is reduced to a ``CharClass`` and the pair
``(state, char_class)`` is looked up in ``TRANSITIONS``:

    ============  =============  ============  ==================
    state         char class     next state    action
    ============  =============  ============  ==================
    NAME_START    WHITESPACE     NAME_START    -
    NAME_START    EQUALS         NAME_START    STRAY (warning)
    NAME_START    QUOTE          NAME_START    STRAY (warning)
    NAME_START    OTHER          NAME_END      BEGIN_NAME
    NAME_END      WHITESPACE     VALUE_START   END_NAME
    NAME_END      EQUALS         VALUE_START   END_NAME_AT_EQUALS
    NAME_END      QUOTE          NAME_END      -
    NAME_END      OTHER          NAME_END      -
    VALUE_START   WHITESPACE     VALUE_START   -
    VALUE_START   EQUALS         VALUE_START   ACCEPT_EQUALS
    VALUE_START   QUOTE          VALUE_END     BEGIN_VALUE
    VALUE_START   OTHER          VALUE_START   STRAY (warning)
    VALUE_END     CLOSING_QUOTE  NAME_START    EMIT
    VALUE_END     OTHER          VALUE_END     -
    ============  =============  ============  ==================

Inside a value every byte other than the quote that opened it classifies as
OTHER, so ``'`` may appear in a ``"``-quoted value and vice versa.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from compact_xml_parser.shared.errors import XMLErrorKind, XMLParseError
from compact_xml_parser.shared.result import DiagnosticEntry, DiagnosticSeverity

from . import delimiters
from .cursor import clamp_end

COMPONENT = "attribute_extractor"


class AttributeState(Enum):
    """States of the attribute scanner."""

    NAME_START = auto()    # Looking for the first byte of a name
    NAME_END = auto()      # Inside a name
    VALUE_START = auto()   # Looking for the opening quote
    VALUE_END = auto()     # Inside a quoted value


class CharClass(Enum):
    """Byte categories that drive attribute state transitions."""

    WHITESPACE = auto()
    EQUALS = auto()
    QUOTE = auto()
    CLOSING_QUOTE = auto()
    OTHER = auto()


class AttributeAction(Enum):
    """Side effects attached to a transition."""

    NONE = auto()
    BEGIN_NAME = auto()
    END_NAME = auto()
    END_NAME_AT_EQUALS = auto()
    ACCEPT_EQUALS = auto()
    BEGIN_VALUE = auto()
    EMIT = auto()
    STRAY = auto()


_S = AttributeState
_C = CharClass
_A = AttributeAction

TRANSITIONS: Dict[Tuple[AttributeState, CharClass], Tuple[AttributeState, AttributeAction]] = {
    (_S.NAME_START, _C.WHITESPACE): (_S.NAME_START, _A.NONE),
    (_S.NAME_START, _C.EQUALS): (_S.NAME_START, _A.STRAY),
    (_S.NAME_START, _C.QUOTE): (_S.NAME_START, _A.STRAY),
    (_S.NAME_START, _C.OTHER): (_S.NAME_END, _A.BEGIN_NAME),
    (_S.NAME_END, _C.WHITESPACE): (_S.VALUE_START, _A.END_NAME),
    (_S.NAME_END, _C.EQUALS): (_S.VALUE_START, _A.END_NAME_AT_EQUALS),
    (_S.NAME_END, _C.QUOTE): (_S.NAME_END, _A.NONE),
    (_S.NAME_END, _C.OTHER): (_S.NAME_END, _A.NONE),
    (_S.VALUE_START, _C.WHITESPACE): (_S.VALUE_START, _A.NONE),
    (_S.VALUE_START, _C.EQUALS): (_S.VALUE_START, _A.ACCEPT_EQUALS),
    (_S.VALUE_START, _C.QUOTE): (_S.VALUE_END, _A.BEGIN_VALUE),
    (_S.VALUE_START, _C.OTHER): (_S.VALUE_START, _A.STRAY),
    (_S.VALUE_END, _C.CLOSING_QUOTE): (_S.NAME_START, _A.EMIT),
    (_S.VALUE_END, _C.OTHER): (_S.VALUE_END, _A.NONE),
}


def classify_byte(
    byte: int, state: AttributeState, open_quote: Optional[int] = None
) -> CharClass:
    """Reduce a byte to its character class for the given state."""
    if state is AttributeState.VALUE_END:
        return CharClass.CLOSING_QUOTE if byte == open_quote else CharClass.OTHER
    if byte in delimiters.WHITESPACE:
        return CharClass.WHITESPACE
    if byte == delimiters.EQUALS:
        return CharClass.EQUALS
    if byte in delimiters.QUOTES:
        return CharClass.QUOTE
    return CharClass.OTHER


def transition(
    state: AttributeState, char_class: CharClass
) -> Tuple[AttributeState, AttributeAction]:
    """Look up a single transition of the attribute state machine."""
    try:
        return TRANSITIONS[(state, char_class)]
    except KeyError:
        raise ValueError(
            f"No transition from {state.name} on {char_class.name}"
        ) from None


@dataclass
class AttributeScanResult:
    """Attributes found in one tag, in encounter order, plus any warnings."""

    attributes: List[Tuple[str, str]] = field(default_factory=list)
    warnings: List[DiagnosticEntry] = field(default_factory=list)


class AttributeScanner:
    """Drives the transition table across one attribute span."""

    def __init__(self, buffer: bytes, encoding: str = "utf-8") -> None:
        self.buffer = buffer
        self.encoding = encoding
        self.state = AttributeState.NAME_START
        self.result = AttributeScanResult()

        self._name_start = 0
        self._name: Optional[str] = None
        self._value_start = 0
        self._open_quote: Optional[int] = None
        self._equals_seen = False

    def feed(self, position: int) -> AttributeAction:
        """Consume the byte at ``position`` and apply its transition."""
        byte = self.buffer[position]
        char_class = classify_byte(byte, self.state, self._open_quote)
        next_state, action = transition(self.state, char_class)

        if action is AttributeAction.BEGIN_NAME:
            self._name_start = position
            self._equals_seen = False
        elif action in (AttributeAction.END_NAME, AttributeAction.END_NAME_AT_EQUALS):
            self._name = self._decode(self._name_start, position)
            self._equals_seen = action is AttributeAction.END_NAME_AT_EQUALS
        elif action is AttributeAction.ACCEPT_EQUALS:
            if self._equals_seen:
                self._warn(f"Repeated '=' after attribute '{self._name}'", position)
            self._equals_seen = True
        elif action is AttributeAction.BEGIN_VALUE:
            self._value_start = position + 1
            self._open_quote = byte
        elif action is AttributeAction.EMIT:
            value = self._decode(self._value_start, position)
            self.result.attributes.append((self._name or "", value))
            self._name = None
            self._open_quote = None
        elif action is AttributeAction.STRAY:
            self._warn(
                f"Unexpected character {chr(byte)!r} in attribute list; ignored",
                position,
            )

        self.state = next_state
        return action

    def finish(self, end: int) -> AttributeScanResult:
        """Close the scan at ``end`` and return the collected attributes.

        Raises:
            XMLParseError: UNTERMINATED_ATTRIBUTE_VALUE if a value is still open
        """
        if self.state is AttributeState.VALUE_END:
            raise XMLParseError(
                XMLErrorKind.UNTERMINATED_ATTRIBUTE_VALUE,
                f"Value of attribute '{self._name}' is missing its closing quote",
                offset=self._value_start - 1,
            )
        if self.state is AttributeState.NAME_END:
            dangling = self._decode(self._name_start, end)
            self._warn(f"Attribute '{dangling}' has no value; dropped", self._name_start)
        elif self.state is AttributeState.VALUE_START:
            self._warn(f"Attribute '{self._name}' has no value; dropped", end)
        return self.result

    def _decode(self, start: int, end: int) -> str:
        return self.buffer[start:end].decode(self.encoding, errors="replace")

    def _warn(self, message: str, position: int) -> None:
        self.result.warnings.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=message,
            component=COMPONENT,
            position={"offset": position},
        ))


def extract_attributes(
    buffer: bytes, start: int, end: int, encoding: str = "utf-8"
) -> AttributeScanResult:
    """Extract ``name="value"`` pairs from ``buffer[start:end]``.

    Args:
        buffer: Complete input document
        start: First offset after the element name
        end: Exclusive bound, the offset of ``>`` or of the ``/`` in ``/>``
        encoding: Codec used to decode names and values

    Returns:
        AttributeScanResult with pairs in encounter order (duplicates kept)

    Raises:
        XMLParseError: UNTERMINATED_ATTRIBUTE_VALUE for an unclosed quote
    """
    end = clamp_end(buffer, end)
    scanner = AttributeScanner(buffer, encoding)
    for position in range(start, end):
        scanner.feed(position)
    return scanner.finish(end)
