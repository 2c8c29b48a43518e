"""Parsing API for compact XML parsing.

Module-level functions cover the common cases; ``CompactXMLParser`` keeps a
configuration and usage statistics across many parses. Every entry point
follows the never-fail philosophy: malformed input and I/O problems are
reported on the returned ``ParseResult`` instead of being raised.
"""

import codecs
import time
from importlib import resources
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from compact_xml_parser.shared import (
    DiagnosticSeverity,
    ParserConfig,
    XMLErrorKind,
    XMLParseError,
    get_logger,
)
from compact_xml_parser.tree import ParseResult, XMLTreeBuilder

# Type definitions for input data
BufferType = Union[bytes, bytearray, memoryview]
InputType = Union[str, BufferType, BinaryIO, TextIO, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion
SOURCE_ENCODING = "utf-8"  # Encoding applied to str input before scanning


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from various input sources with automatic type detection.

    Args:
        input_data: XML content as string, bytes, file-like object, or Path
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult containing the root element or the parse error

    Examples:
        >>> result = parse('<root><item>value</item></root>')
        >>> result.root.find_child('item').text
        'value'
    """
    logger = get_logger(__name__, correlation_id, "parse")
    logger.info(
        "Starting universal parse operation",
        extra={"input_type": type(input_data).__name__}
    )

    if isinstance(input_data, str):
        return parse_string(input_data, config, correlation_id)
    if isinstance(input_data, (bytes, bytearray, memoryview)):
        return parse_bytes(input_data, config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, config, correlation_id)
    if hasattr(input_data, "read"):
        return _parse_file_like_object(input_data, config, correlation_id)

    return _create_error_result(
        f"Unsupported input type: {type(input_data).__name__}",
        correlation_id,
        0.0,
        kind=XMLErrorKind.UNSUPPORTED_INPUT_TYPE,
    )


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML held in a string.

    The string is encoded as UTF-8 and scanned as bytes, so the configured
    ``text_encoding`` is replaced by UTF-8 for this call.

    Examples:
        >>> parse_string('<a x="1"/>').root.get_attribute('x')
        '1'
    """
    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.debug(
        "Starting string parse operation",
        extra={
            "content_length": len(xml_string),
            "preview": (
                xml_string[:PREVIEW_LENGTH] + "..."
                if len(xml_string) > PREVIEW_LENGTH else xml_string
            )
        }
    )
    effective = config or ParserConfig()
    if codecs.lookup(effective.text_encoding).name != SOURCE_ENCODING:
        logger.debug(
            "Decoding string input as UTF-8",
            extra={"configured_encoding": effective.text_encoding}
        )
        effective = effective.override(text_encoding=SOURCE_ENCODING)
    return parse_bytes(xml_string.encode(SOURCE_ENCODING), effective, correlation_id)


def parse_bytes(
    buffer: Optional[BufferType],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from a complete byte buffer.

    Args:
        buffer: Whole document; ``None`` or empty reports EMPTY_INPUT
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult containing the root element or the parse error
    """
    data = bytes(buffer) if buffer is not None else None
    builder = XMLTreeBuilder(config=config, correlation_id=correlation_id)
    return builder.build(data)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from a file.

    Examples:
        Non-existent file handling:
        >>> result = parse_file('missing.xml')
        >>> result.error.kind.name
        'FILE_NOT_FOUND'
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.info("Starting file parse operation", extra={"file_path": str(path_obj)})

    if not path_obj.is_file():
        reason = "Path is not a file" if path_obj.exists() else "File not found"
        return _create_not_found_result(
            f"{reason}: {path_obj}", correlation_id, start_time
        )

    try:
        raw_data = path_obj.read_bytes()
    except OSError as e:
        logger.warning("Could not read file", extra={"file_path": str(path_obj)})
        return _create_error_result(
            f"Could not read file {path_obj}: {e}",
            correlation_id,
            (time.time() - start_time) * MS_PER_SECOND,
        )

    result = parse_bytes(raw_data, config, correlation_id)
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"Parsed file {path_obj.name}",
        "file_parser",
        details={"file_path": str(path_obj), "size_bytes": len(raw_data)}
    )
    return result


def parse_resource(
    package: str,
    resource_name: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse an XML file shipped inside a Python package.

    Args:
        package: Dotted name of the package holding the resource
        resource_name: Path of the resource relative to the package,
            using ``/`` as separator
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Examples:
        >>> result = parse_resource('my_app.data', 'levels/level1.xml')
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_resource")
    logger.info(
        "Starting resource parse operation",
        extra={"package": package, "resource": resource_name}
    )

    try:
        resource = resources.files(package)
        for part in resource_name.split("/"):
            resource = resource / part
        raw_data = resource.read_bytes()
    except (ModuleNotFoundError, FileNotFoundError, IsADirectoryError) as e:
        return _create_not_found_result(
            f"Resource not found: {package}/{resource_name} ({e})",
            correlation_id,
            start_time,
        )
    except (OSError, TypeError) as e:
        return _create_error_result(
            f"Could not read resource {package}/{resource_name}: {e}",
            correlation_id,
            (time.time() - start_time) * MS_PER_SECOND,
        )

    return parse_bytes(raw_data, config, correlation_id)


def _parse_file_like_object(
    file_obj: Union[BinaryIO, TextIO],
    config: Optional[ParserConfig],
    correlation_id: Optional[str]
) -> ParseResult:
    start_time = time.time()
    try:
        content = file_obj.read()
    except OSError as e:
        return _create_error_result(
            f"File-like object read failed: {e}",
            correlation_id,
            (time.time() - start_time) * MS_PER_SECOND,
        )

    if isinstance(content, str):
        return parse_string(content, config, correlation_id)
    return parse_bytes(content, config, correlation_id)


def _create_not_found_result(
    message: str, correlation_id: Optional[str], start_time: float
) -> ParseResult:
    return _create_error_result(
        message,
        correlation_id,
        (time.time() - start_time) * MS_PER_SECOND,
        kind=XMLErrorKind.FILE_NOT_FOUND,
    )


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float,
    kind: XMLErrorKind = XMLErrorKind.READ_FAILED,
) -> ParseResult:
    """Create error result following never-fail philosophy."""
    result = ParseResult(correlation_id=correlation_id)
    result.success = False
    result.error = XMLParseError(kind, error_message)
    result.performance.processing_time_ms = processing_time
    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        error_message,
        "api_parser"
    )
    return result


class CompactXMLParser:
    """Reusable parser with a fixed configuration and usage statistics.

    Examples:
        >>> parser = CompactXMLParser(ParserConfig.strict())
        >>> parser.parse('<a></b>').success
        False
        >>> parser.statistics['total_parses']
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "compact_xml_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self._total_bytes = 0

    def parse(
        self,
        input_data: InputType,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse any supported input with this parser's configuration."""
        effective_correlation_id = correlation_id_override or self.correlation_id
        return self._record(parse(input_data, self.config, effective_correlation_id))

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        """Parse a file with this parser's configuration."""
        return self.parse(Path(file_path))

    def parse_resource(self, package: str, resource_name: str) -> ParseResult:
        """Parse a package resource with this parser's configuration."""
        return self._record(
            parse_resource(package, resource_name, self.config, self.correlation_id)
        )

    def _record(self, result: ParseResult) -> ParseResult:
        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        self._total_bytes += result.performance.bytes_processed
        if result.success:
            self._successful_parses += 1

        self.logger.debug(
            "Configured parse completed",
            extra={"success": result.success, "total_parses": self._parse_count}
        )
        return result

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration used by later parses."""
        self.config = config
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_bytes": self._total_bytes,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self._total_bytes = 0
