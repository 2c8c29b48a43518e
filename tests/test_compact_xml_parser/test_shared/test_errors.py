"""Tests for the parse error taxonomy."""

import pytest

from compact_xml_parser.shared.errors import XMLErrorKind, XMLParseError


class TestXMLParseError:
    """Test XMLParseError formatting and conversion."""

    def test_error_is_exception(self) -> None:
        """Test that parse errors can be raised and caught."""
        with pytest.raises(XMLParseError) as info:
            raise XMLParseError(XMLErrorKind.ORPHAN_CLOSING_TAG, "no opener", offset=4)

        assert info.value.kind is XMLErrorKind.ORPHAN_CLOSING_TAG
        assert info.value.offset == 4

    def test_str_with_offset(self) -> None:
        """Test string form when an offset is known."""
        error = XMLParseError(XMLErrorKind.MALFORMED_FRAGMENT, "bad", offset=7)
        assert str(error) == "MALFORMED_FRAGMENT at offset 7: bad"

    def test_str_without_offset(self) -> None:
        """Test string form when no offset is known."""
        error = XMLParseError(XMLErrorKind.FILE_NOT_FOUND, "File not found: x.xml")
        assert str(error) == "FILE_NOT_FOUND: File not found: x.xml"

    def test_repr_names_kind(self) -> None:
        """Test repr includes the kind name."""
        error = XMLParseError(XMLErrorKind.EMPTY_INPUT, "empty", offset=0)
        assert "EMPTY_INPUT" in repr(error)

    def test_to_dict(self) -> None:
        """Test dictionary conversion."""
        error = XMLParseError(XMLErrorKind.UNTERMINATED_NAME, "open name", offset=1)
        assert error.to_dict() == {
            "kind": "UNTERMINATED_NAME",
            "message": "open name",
            "offset": 1,
        }


class TestXMLErrorKind:
    """Test the error kind enumeration."""

    def test_kinds_are_distinct(self) -> None:
        """Test every kind has a unique value."""
        values = [kind.value for kind in XMLErrorKind]
        assert len(values) == len(set(values))

    def test_expected_kinds_present(self) -> None:
        """Test the scanner failure kinds are all defined."""
        names = {kind.name for kind in XMLErrorKind}
        assert {
            "EMPTY_INPUT",
            "UNEXPECTED_END_OF_INPUT",
            "MALFORMED_FRAGMENT",
            "ORPHAN_CLOSING_TAG",
            "UNTERMINATED_NAME",
            "UNTERMINATED_ATTRIBUTE_VALUE",
        }.issubset(names)
