"""Tests for fragment classification."""

import pytest

from compact_xml_parser.scanning import Fragment, FragmentType, classify_fragment
from compact_xml_parser.shared import XMLErrorKind, XMLParseError


def classify(text: str, start: int = 0) -> Fragment:
    data = text.encode("utf-8")
    return classify_fragment(data, start, len(data))


class TestTagFragments:
    """Test classification of element tags."""

    def test_opening_tag(self) -> None:
        """Test a plain opening tag."""
        fragment = classify('<root id="1">')

        assert fragment.kind is FragmentType.OPENING_TAG
        assert fragment.start == 0
        assert fragment.end == 12
        assert fragment.next_position == 13
        assert fragment.is_tag

    def test_closing_tag(self) -> None:
        """Test a closing tag."""
        fragment = classify("</root>")
        assert fragment.kind is FragmentType.CLOSING_TAG
        assert fragment.end == 6

    @pytest.mark.parametrize("text", ["<x/>", "<x />", '<x a="1"/>'])
    def test_self_closing_tag(self, text: str) -> None:
        """Test self-closing tags with and without whitespace or attributes."""
        fragment = classify(text)
        assert fragment.kind is FragmentType.SELF_CLOSING_TAG
        assert fragment.end == len(text) - 1

    def test_search_starts_at_position(self) -> None:
        """Test leading text is skipped to the next '<'."""
        fragment = classify("<a>hello</a>", start=3)

        assert fragment.kind is FragmentType.CLOSING_TAG
        assert fragment.start == 8


class TestSkippableFragments:
    """Test comments, declarations and CDATA."""

    def test_comment(self) -> None:
        """Test a comment spans to its terminator."""
        fragment = classify("<!-- a > b --><root/>")

        assert fragment.kind is FragmentType.COMMENT
        assert fragment.end == 13
        assert fragment.is_skippable

    def test_xml_declaration(self) -> None:
        """Test the XML declaration is a declaration fragment."""
        fragment = classify('<?xml version="1.0"?><root/>')

        assert fragment.kind is FragmentType.DECLARATION
        assert fragment.end == 20
        assert fragment.is_skippable

    def test_doctype(self) -> None:
        """Test a simple DOCTYPE declaration."""
        fragment = classify("<!DOCTYPE root><root/>")
        assert fragment.kind is FragmentType.DECLARATION
        assert fragment.end == 14

    def test_doctype_with_internal_subset(self) -> None:
        """Test '>' inside the internal subset does not end the declaration."""
        text = '<!DOCTYPE r [<!ENTITY e "v">]><r/>'
        fragment = classify(text)

        assert fragment.kind is FragmentType.DECLARATION
        assert fragment.end == text.index("]>") + 1

    def test_cdata(self) -> None:
        """Test a CDATA section may contain markup characters."""
        text = "<![CDATA[<a> & </b>]]>"
        fragment = classify(text)

        assert fragment.kind is FragmentType.CDATA
        assert fragment.end == len(text) - 1
        assert not fragment.is_skippable
        assert not fragment.is_tag


class TestMalformedFragments:
    """Test fragments that cannot be categorised."""

    def test_empty_tag(self) -> None:
        """Test '<>' is malformed."""
        assert classify("<>").kind is FragmentType.MALFORMED

    def test_empty_closing_tag(self) -> None:
        """Test '</>' is malformed."""
        assert classify("</>").kind is FragmentType.MALFORMED

    def test_tag_interrupted_by_open_angle(self) -> None:
        """Test a tag that meets another '<' before '>' ends just before it."""
        fragment = classify("<a <b>")

        assert fragment.kind is FragmentType.MALFORMED
        assert fragment.next_position == 3


class TestClassificationErrors:
    """Test failures raised by the classifier."""

    def test_no_open_angle(self) -> None:
        """Test text without '<' reports end of input at the search start."""
        with pytest.raises(XMLParseError) as info:
            classify("just text")

        assert info.value.kind is XMLErrorKind.UNEXPECTED_END_OF_INPUT
        assert info.value.offset == 0

    def test_lone_open_angle(self) -> None:
        """Test a trailing '<'."""
        with pytest.raises(XMLParseError) as info:
            classify("<")
        assert info.value.kind is XMLErrorKind.UNEXPECTED_END_OF_INPUT

    def test_unterminated_tag(self) -> None:
        """Test a tag with no terminator."""
        with pytest.raises(XMLParseError) as info:
            classify('<root id="1"')
        assert info.value.kind is XMLErrorKind.UNEXPECTED_END_OF_INPUT

    def test_unterminated_comment(self) -> None:
        """Test a comment without '-->'."""
        with pytest.raises(XMLParseError) as info:
            classify("<!-- never closed >")

        assert info.value.kind is XMLErrorKind.MALFORMED_FRAGMENT
        assert "comment" in info.value.message

    def test_unterminated_cdata(self) -> None:
        """Test a CDATA section without ']]>'."""
        with pytest.raises(XMLParseError) as info:
            classify("<![CDATA[ open")
        assert info.value.kind is XMLErrorKind.MALFORMED_FRAGMENT

    def test_unterminated_declaration(self) -> None:
        """Test a declaration without '>'."""
        with pytest.raises(XMLParseError) as info:
            classify("<?xml version")
        assert info.value.kind is XMLErrorKind.UNEXPECTED_END_OF_INPUT

    def test_declared_end_limits_search(self) -> None:
        """Test bytes past the declared end are never used."""
        data = b"<root>"
        with pytest.raises(XMLParseError):
            classify_fragment(data, 0, 5)
