"""Tests for the public parsing API."""

import io
import sys
from pathlib import Path

import pytest

from compact_xml_parser import (
    CompactXMLParser,
    ParserConfig,
    XMLErrorKind,
    XMLParseError,
    parse,
    parse_bytes,
    parse_file,
    parse_resource,
    parse_string,
)
from compact_xml_parser.shared import DiagnosticSeverity

SAMPLE = '<?xml version="1.0"?>\n<config><db host="localhost">main</db></config>'


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.xml"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def resource_package(tmp_path: Path, monkeypatch) -> str:
    """Importable package shipping XML resources."""
    package_dir = tmp_path / "cxp_resource_pkg"
    (package_dir / "levels").mkdir(parents=True)
    (package_dir / "__init__.py").write_text("")
    (package_dir / "levels" / "level1.xml").write_text(
        '<level number="1"><tile>grass</tile></level>'
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "cxp_resource_pkg", raising=False)
    return "cxp_resource_pkg"


class TestParseDispatch:
    """Test automatic input type detection."""

    def test_string_input(self) -> None:
        """Test parsing a str."""
        result = parse(SAMPLE)

        assert result.success
        assert result.root.find_child("db").get_attribute("host") == "localhost"

    @pytest.mark.parametrize("wrap", [bytes, bytearray, memoryview])
    def test_buffer_inputs(self, wrap) -> None:
        """Test parsing bytes-like objects."""
        result = parse(wrap(SAMPLE.encode("utf-8")))
        assert result.root.name == "config"

    def test_path_input(self, sample_file: Path) -> None:
        """Test parsing a Path."""
        assert parse(sample_file).root.name == "config"

    def test_binary_file_like(self) -> None:
        """Test parsing a binary stream."""
        assert parse(io.BytesIO(b"<a>1</a>")).root.text == "1"

    def test_text_file_like(self) -> None:
        """Test parsing a text stream."""
        assert parse(io.StringIO("<a>1</a>")).root.text == "1"

    def test_unsupported_input(self) -> None:
        """Test unsupported types produce an error result."""
        result = parse(12345)

        assert not result.success
        assert result.error.kind is XMLErrorKind.UNSUPPORTED_INPUT_TYPE
        critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        assert critical[0].message == "Unsupported input type: int"

    def test_unsupported_input_raises_its_own_kind(self) -> None:
        """Test raise_for_error reports the unsupported type, not EMPTY_INPUT."""
        with pytest.raises(XMLParseError) as info:
            parse(12345).raise_for_error()
        assert info.value.kind is XMLErrorKind.UNSUPPORTED_INPUT_TYPE
        assert info.value.message == "Unsupported input type: int"

    def test_unreadable_stream(self) -> None:
        """Test a stream whose read fails reports READ_FAILED."""
        class BrokenStream:
            def read(self):
                raise OSError("device gone")

        result = parse(BrokenStream())

        assert not result.success
        assert result.error.kind is XMLErrorKind.READ_FAILED
        assert "device gone" in result.error.message

    def test_text_stream_ignores_configured_encoding(self) -> None:
        """Test str content from a text stream decodes as UTF-8."""
        config = ParserConfig(text_encoding="latin-1")
        assert parse(io.StringIO("<a>é</a>"), config=config).root.text == "é"

    def test_config_is_applied(self) -> None:
        """Test the configuration reaches the builder."""
        result = parse("<a></b>", config=ParserConfig.strict())
        assert result.error.kind is XMLErrorKind.MISMATCHED_CLOSING_TAG

    def test_correlation_id_propagates(self) -> None:
        """Test the correlation ID is stored on result and diagnostics."""
        result = parse("</a>", correlation_id="req-9")

        assert result.correlation_id == "req-9"
        assert all(d.correlation_id == "req-9" for d in result.diagnostics)


class TestParseFunctions:
    """Test the type-specific functions."""

    def test_parse_string_encodes_utf8(self) -> None:
        """Test non-ASCII text survives the UTF-8 round trip."""
        assert parse_string("<a>naïve</a>").root.text == "naïve"

    def test_parse_string_ignores_configured_encoding(self) -> None:
        """Test a non-UTF-8 text_encoding does not garble string input."""
        config = ParserConfig(text_encoding="latin-1")
        result = parse_string('<a k="ü">é</a>', config)

        assert result.root.text == "é"
        assert result.root.get_attribute("k") == "ü"
        assert config.text_encoding == "latin-1"

    def test_parse_bytes_honours_configured_encoding(self) -> None:
        """Test byte input is still decoded with text_encoding."""
        config = ParserConfig(text_encoding="latin-1")
        assert parse_bytes("<a>é</a>".encode("latin-1"), config).root.text == "é"

    def test_parse_bytes_empty(self) -> None:
        """Test empty buffers report EMPTY_INPUT."""
        assert parse_bytes(b"").error.kind is XMLErrorKind.EMPTY_INPUT
        assert parse_bytes(None).error.kind is XMLErrorKind.EMPTY_INPUT

    def test_parse_file(self, sample_file: Path) -> None:
        """Test file parsing records an INFO diagnostic."""
        result = parse_file(str(sample_file))

        assert result.success
        info = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert info[0].message == "Parsed file sample.xml"
        assert info[0].details["size_bytes"] == len(SAMPLE.encode("utf-8"))

    def test_parse_file_missing(self, tmp_path: Path) -> None:
        """Test a missing file reports FILE_NOT_FOUND."""
        result = parse_file(tmp_path / "missing.xml")

        assert not result.success
        assert result.error.kind is XMLErrorKind.FILE_NOT_FOUND
        assert result.error.message.startswith("File not found")

    def test_parse_file_directory(self, tmp_path: Path) -> None:
        """Test a directory is reported as not a file."""
        result = parse_file(tmp_path)

        assert result.error.kind is XMLErrorKind.FILE_NOT_FOUND
        assert result.error.message.startswith("Path is not a file")


class TestParseResource:
    """Test loading XML shipped inside a package."""

    def test_nested_resource(self, resource_package: str) -> None:
        """Test a resource in a subdirectory of the package."""
        result = parse_resource(resource_package, "levels/level1.xml")

        assert result.success
        assert result.root.get_attribute("number") == "1"
        assert result.root.find_child("tile").text == "grass"

    def test_missing_resource(self, resource_package: str) -> None:
        """Test a missing resource reports FILE_NOT_FOUND."""
        result = parse_resource(resource_package, "levels/level9.xml")

        assert not result.success
        assert result.error.kind is XMLErrorKind.FILE_NOT_FOUND

    def test_missing_package(self) -> None:
        """Test an unknown package reports FILE_NOT_FOUND."""
        result = parse_resource("cxp_no_such_package", "data.xml")
        assert result.error.kind is XMLErrorKind.FILE_NOT_FOUND


class TestCompactXMLParser:
    """Test the reusable parser."""

    def test_uses_configuration(self) -> None:
        """Test every parse uses the stored configuration."""
        parser = CompactXMLParser(ParserConfig.strict())
        assert parser.parse("<a><![CDATA[x]]></a>").error.kind is (
            XMLErrorKind.UNSUPPORTED_CONSTRUCT
        )

    def test_statistics(self, sample_file: Path) -> None:
        """Test usage counters across several parses."""
        parser = CompactXMLParser(correlation_id="batch-1")
        parser.parse("<a/>")
        parser.parse("</a>")
        parser.parse_file(sample_file)

        stats = parser.statistics
        assert stats["total_parses"] == 3
        assert stats["successful_parses"] == 2
        assert stats["success_rate"] == pytest.approx(2 / 3)
        assert stats["total_bytes"] == len("<a/>") + len("</a>") + len(SAMPLE)
        assert stats["correlation_id"] == "batch-1"

    def test_statistics_empty(self) -> None:
        """Test averages are zero before any parse."""
        stats = CompactXMLParser().statistics

        assert stats["success_rate"] == 0.0
        assert stats["average_processing_time_ms"] == 0.0

    def test_reset_statistics(self) -> None:
        """Test counters can be cleared."""
        parser = CompactXMLParser()
        parser.parse("<a/>")
        parser.reset_statistics()

        assert parser.statistics["total_parses"] == 0

    def test_reconfigure(self) -> None:
        """Test later parses pick up a new configuration."""
        parser = CompactXMLParser()
        assert parser.parse("<a></b>").success

        parser.reconfigure(ParserConfig.strict())
        assert not parser.parse("<a></b>").success

    def test_correlation_override(self) -> None:
        """Test a per-call correlation ID wins over the parser's."""
        parser = CompactXMLParser(correlation_id="parser")
        assert parser.parse("<a/>", correlation_id_override="call").correlation_id == "call"

    def test_parse_resource(self, resource_package: str) -> None:
        """Test resource parsing is counted."""
        parser = CompactXMLParser()
        result = parser.parse_resource(resource_package, "levels/level1.xml")

        assert result.success
        assert parser.statistics["total_parses"] == 1
