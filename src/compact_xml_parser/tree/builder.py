"""Recursive element builder for compact XML parsing.

One builder invocation produces exactly one element. It classifies fragments
left to right from its start position; the first opening tag becomes its
element, every further opening tag is handed to a nested invocation that
returns the finished child and the position just past it, and the matching
closing tag completes the element. The position is threaded explicitly
through every call and the input buffer is never modified.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from compact_xml_parser.scanning import (
    Fragment,
    FragmentType,
    classify_fragment,
    extract_attributes,
    extract_name,
)
from compact_xml_parser.shared import (
    CDataHandling,
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    PerformanceMetrics,
    XMLErrorKind,
    XMLParseError,
    get_logger,
)

from .model import XMLAttribute, XMLElement

COMPONENT = "xml_tree_builder"


@dataclass
class ParseResult:
    """Result of one parse, following the never-fail philosophy.

    ``root`` is only set for a successful parse unless the configuration asks
    for partial results; whatever was built before a failure is always kept
    in ``partial_root``.
    """

    root: Optional[XMLElement] = None
    partial_root: Optional[XMLElement] = None
    error: Optional[XMLParseError] = None
    success: bool = True
    consumed_bytes: int = 0

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Get total number of elements in the returned tree."""
        return self.root.element_count if self.root else 0

    @property
    def warnings(self) -> List[DiagnosticEntry]:
        """Get warning diagnostics."""
        return self.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def raise_for_error(self) -> XMLElement:
        """Return the root element, or raise the parse error.

        Raises:
            XMLParseError: if the parse failed
        """
        if self.error is not None:
            raise self.error
        if self.root is None:
            raise XMLParseError(XMLErrorKind.EMPTY_INPUT, "No root element was built")
        return self.root

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        severities: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            name = diagnostic.severity.name
            severities[name] = severities.get(name, 0) + 1

        return {
            "success": self.success,
            "root": self.root.name if self.root else None,
            "element_count": self.element_count,
            "consumed_bytes": self.consumed_bytes,
            "error": self.error.to_dict() if self.error else None,
            "diagnostics_by_severity": severities,
            "performance": self.performance.to_dict(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result = self.summary()
        result["tree"] = self.root.to_dict() if self.root else None
        result["diagnostics"] = [diag.to_dict() for diag in self.diagnostics]
        return result


@dataclass
class BuildOutcome:
    """What one builder invocation hands back to its caller.

    Attributes:
        element: The finished (or, on error, partial) element, if any
        position: Offset immediately after the consumed input
        error: The first failure met in this subtree
    """

    element: Optional[XMLElement]
    position: int
    error: Optional[XMLParseError] = None


@dataclass
class _ElementParts:
    """Mutable parts of the element an invocation is still assembling."""

    name: str
    attributes: List[XMLAttribute]
    children: List[XMLElement] = field(default_factory=list)
    text: Optional[str] = None

    def freeze(self) -> XMLElement:
        return XMLElement(
            name=self.name,
            text=self.text,
            children=tuple(self.children),
            attributes=tuple(self.attributes),
        )


class XMLTreeBuilder:
    """Builds one element tree from a complete byte buffer."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, COMPONENT)

        self._diagnostics: List[DiagnosticEntry] = []
        self._metrics = PerformanceMetrics()

    def build(self, buffer: Optional[bytes]) -> ParseResult:
        """Parse the first top-level element of ``buffer``.

        Args:
            buffer: Complete XML document

        Returns:
            ParseResult with the root element or the error that stopped it
        """
        start_time = time.time()
        result = ParseResult(correlation_id=self.correlation_id)
        self._diagnostics = []
        self._metrics = PerformanceMetrics()

        size = len(buffer) if buffer is not None else 0
        self.logger.info("Starting tree building", extra={"input_bytes": size})

        try:
            if not buffer:
                outcome = BuildOutcome(None, 0, XMLParseError(
                    XMLErrorKind.EMPTY_INPUT, "No input supplied", offset=0
                ))
            elif (
                self.config.max_input_size_bytes is not None
                and size > self.config.max_input_size_bytes
            ):
                outcome = BuildOutcome(None, 0, XMLParseError(
                    XMLErrorKind.INPUT_TOO_LARGE,
                    f"Input of {size} bytes exceeds limit of "
                    f"{self.config.max_input_size_bytes}",
                    offset=0,
                ))
            else:
                try:
                    outcome = self._build_element(bytes(buffer), 0, size, depth=0)
                except RecursionError:
                    outcome = BuildOutcome(None, 0, XMLParseError(
                        XMLErrorKind.MAX_DEPTH_EXCEEDED,
                        "Element nesting exhausted the interpreter stack",
                        offset=0,
                    ))

            self._apply_outcome(result, outcome)

        except Exception as e:
            # Never-fail: unexpected failures become a CRITICAL diagnostic
            self.logger.exception("Tree building failed unexpectedly")
            result.success = False
            result.root = None
            result.error = XMLParseError(
                XMLErrorKind.INTERNAL_ERROR, f"Tree building failed: {e}"
            )
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Tree building failed: {e}",
                COMPONENT,
                details={"exception_type": type(e).__name__}
            )

        self._metrics.bytes_processed = size
        self._metrics.processing_time_ms = (time.time() - start_time) * 1000
        result.performance = self._metrics

        self.logger.info(
            "Tree building completed",
            extra={
                "success": result.success,
                "element_count": self._metrics.elements_built,
                "processing_time_ms": self._metrics.processing_time_ms,
            }
        )
        return result

    def _apply_outcome(self, result: ParseResult, outcome: BuildOutcome) -> None:
        if self.config.enable_diagnostics:
            for diagnostic in self._diagnostics:
                diagnostic.correlation_id = self.correlation_id
                result.diagnostics.append(diagnostic)

        result.consumed_bytes = outcome.position

        if outcome.error is None:
            result.root = outcome.element
            return

        error = outcome.error
        result.success = False
        result.error = error
        result.partial_root = outcome.element
        if self.config.return_partial_results:
            result.root = outcome.element

        # Errors are always reported, even with diagnostics disabled
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            error.message,
            COMPONENT,
            position={"offset": error.offset} if error.offset is not None else None,
            details={"kind": error.kind.name},
        )
        self.logger.warning(
            "Parse failed",
            extra={"kind": error.kind.name, "offset": error.offset},
        )

    def _build_element(
        self,
        buffer: bytes,
        start: int,
        end: int,
        depth: int,
        pending: Optional[Fragment] = None,
    ) -> BuildOutcome:
        """Build one element starting at ``start`` (or at ``pending``).

        Args:
            buffer: Complete input document
            start: Offset to resume scanning from
            end: Declared end of input (exclusive)
            depth: Nesting level of the element being built
            pending: Opening fragment already classified by the parent

        Returns:
            BuildOutcome with the element and the offset just past it
        """
        if depth > self.config.max_depth:
            return BuildOutcome(None, start, XMLParseError(
                XMLErrorKind.MAX_DEPTH_EXCEEDED,
                f"Element nesting exceeds max_depth={self.config.max_depth}",
                offset=start,
            ))
        self._metrics.max_depth_reached = max(self._metrics.max_depth_reached, depth)

        parts: Optional[_ElementParts] = None
        text_start: Optional[int] = None
        position = start

        while True:
            if pending is not None:
                fragment, pending = pending, None
            else:
                try:
                    fragment = classify_fragment(buffer, position, end)
                except XMLParseError as e:
                    return self._abort(parts, position, e)
                self._metrics.fragments_classified += 1

            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.debug(
                    "Fragment classified",
                    extra={
                        "kind": fragment.kind.name,
                        "start": fragment.start,
                        "end": fragment.end,
                        "depth": depth,
                    }
                )

            kind = fragment.kind

            if kind in (FragmentType.OPENING_TAG, FragmentType.SELF_CLOSING_TAG):
                if parts is None:
                    try:
                        parts = self._open_element(buffer, fragment)
                    except XMLParseError as e:
                        return self._abort(None, fragment.start, e)
                    if kind is FragmentType.SELF_CLOSING_TAG:
                        return self._complete(parts, fragment.next_position)
                    position = fragment.next_position
                    text_start = position
                else:
                    child = self._build_element(
                        buffer, fragment.start, end, depth + 1, pending=fragment
                    )
                    if child.element is not None:
                        parts.children.append(child.element)
                    if child.error is not None:
                        return self._abort(parts, child.position, child.error)
                    position = child.position
                    # Mixed content is not captured once a child has been seen
                    text_start = None

            elif kind is FragmentType.CLOSING_TAG:
                if parts is None:
                    return self._abort(None, fragment.start, XMLParseError(
                        XMLErrorKind.ORPHAN_CLOSING_TAG,
                        "Closing tag without a matching opening tag",
                        offset=fragment.start,
                    ))
                try:
                    self._check_closing_name(buffer, fragment, parts)
                except XMLParseError as e:
                    return self._abort(parts, fragment.start, e)
                if text_start is not None:
                    parts.text = self._decode(buffer, text_start, fragment.start)
                return self._complete(parts, fragment.next_position)

            elif fragment.is_skippable:
                position = fragment.next_position

            elif kind is FragmentType.CDATA:
                if self.config.cdata_handling is CDataHandling.ERROR:
                    return self._abort(parts, fragment.start, XMLParseError(
                        XMLErrorKind.UNSUPPORTED_CONSTRUCT,
                        "CDATA sections are not supported",
                        offset=fragment.start,
                    ))
                self._warn("CDATA section skipped", fragment.start)
                position = fragment.next_position

            else:
                return self._abort(parts, fragment.start, XMLParseError(
                    XMLErrorKind.MALFORMED_FRAGMENT,
                    "Fragment could not be classified",
                    offset=fragment.start,
                ))

    def _complete(self, parts: _ElementParts, position: int) -> BuildOutcome:
        self._metrics.elements_built += 1
        return BuildOutcome(parts.freeze(), position)

    def _open_element(self, buffer: bytes, fragment: Fragment) -> _ElementParts:
        """Extract name and attributes from an opening or self-closing tag."""
        encoding = self.config.text_encoding
        name, name_end = extract_name(
            buffer, fragment.start + 1, fragment.end + 1, encoding
        )

        attributes_end = fragment.end
        if fragment.kind is FragmentType.SELF_CLOSING_TAG:
            attributes_end -= 1

        scan = extract_attributes(buffer, name_end, attributes_end, encoding)
        self._diagnostics.extend(scan.warnings)
        self._metrics.attributes_extracted += len(scan.attributes)

        return _ElementParts(
            name=name,
            attributes=[XMLAttribute(n, v) for n, v in scan.attributes],
        )

    def _check_closing_name(
        self, buffer: bytes, fragment: Fragment, parts: _ElementParts
    ) -> None:
        closing_name, _ = extract_name(
            buffer, fragment.start + 2, fragment.end + 1, self.config.text_encoding
        )
        if closing_name == parts.name:
            return

        message = f"Closing tag </{closing_name}> does not match <{parts.name}>"
        if self.config.strict_tag_matching:
            raise XMLParseError(
                XMLErrorKind.MISMATCHED_CLOSING_TAG, message, offset=fragment.start
            )
        self._warn(message, fragment.start)

    def _abort(
        self,
        parts: Optional[_ElementParts],
        position: int,
        error: XMLParseError,
    ) -> BuildOutcome:
        element = parts.freeze() if parts is not None else None
        return BuildOutcome(element, position, error)

    def _decode(self, buffer: bytes, start: int, end: int) -> str:
        return buffer[start:end].decode(self.config.text_encoding, errors="replace")

    def _warn(self, message: str, offset: int) -> None:
        self._diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=message,
            component=COMPONENT,
            position={"offset": offset},
        ))
