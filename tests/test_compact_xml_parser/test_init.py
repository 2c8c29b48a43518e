"""Test module for compact_xml_parser package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import compact_xml_parser

    # Assert
    assert compact_xml_parser is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import compact_xml_parser

    # Assert
    assert isinstance(compact_xml_parser.__version__, str)
    assert compact_xml_parser.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    import compact_xml_parser

    assert compact_xml_parser.__author__ == "Compact XML Parser Team"


def test_package_all_exports() -> None:
    """Test that __all__ contains expected exports."""
    # Arrange & Act
    import compact_xml_parser

    # Assert
    expected = {
        "parse",
        "parse_bytes",
        "parse_file",
        "parse_resource",
        "parse_string",
        "CompactXMLParser",
        "ParserConfig",
        "CDataHandling",
        "ParseResult",
        "XMLAttribute",
        "XMLElement",
        "XMLErrorKind",
        "XMLParseError",
    }
    assert expected.issubset(set(compact_xml_parser.__all__))
    for name in expected:
        assert hasattr(compact_xml_parser, name)


def test_top_level_parse_round_trip() -> None:
    """Test the top-level parse function on a small document."""
    from compact_xml_parser import parse

    result = parse('<root><item id="1">value</item></root>')

    assert result.success
    assert result.root.name == "root"
    assert result.root.children[0].text == "value"
