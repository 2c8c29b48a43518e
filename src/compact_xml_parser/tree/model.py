"""Element tree model produced by the builder.

Elements and attributes are immutable: the builder assembles each element's
parts while scanning and constructs the element once its subtree is
complete. Ownership is strictly tree-shaped; there are no parent references.
"""

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

DUMP_INDENT = "  "


@dataclass(frozen=True)
class XMLAttribute:
    """A single ``name="value"`` pair."""

    name: str
    value: str

    def dump_line(self, depth: int = 0) -> str:
        """Render the attribute as one line of the debug dump."""
        return f'{DUMP_INDENT * depth} ( {self.name} = "{self.value}" )'

    def to_xml(self) -> str:
        """Render as XML, picking the quote style the value allows."""
        quote = "'" if '"' in self.value else '"'
        return f"{self.name}={quote}{self.value}{quote}"


@dataclass(frozen=True)
class XMLElement:
    """Represents a single XML element in the document tree.

    Attributes:
        name: Element name, exactly as written in the opening tag
        text: Raw bytes between the opening and closing tag, decoded; ``None``
            for self-closing elements and for elements with children
        children: Child elements in document order
        attributes: Attributes in encounter order, duplicates preserved
    """

    name: str
    text: Optional[str] = None
    children: Tuple["XMLElement", ...] = field(default_factory=tuple)
    attributes: Tuple[XMLAttribute, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Normalise sequences to tuples so the element stays immutable."""
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if not isinstance(self.attributes, tuple):
            object.__setattr__(self, "attributes", tuple(self.attributes))

    @property
    def has_children(self) -> bool:
        """Check if this element has any child elements."""
        return len(self.children) > 0

    @property
    def element_count(self) -> int:
        """Number of elements in this subtree, including this one."""
        return sum(1 for _ in self.iter())

    @property
    def depth(self) -> int:
        """Height of the subtree below this element (a leaf has depth 0)."""
        if not self.children:
            return 0
        return 1 + max(child.depth for child in self.children)

    def find_child(self, name: str) -> Optional["XMLElement"]:
        """Find first direct child with matching name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["XMLElement"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get the value of the first attribute named ``name``."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return any(attribute.name == name for attribute in self.attributes)

    def iter(self) -> Iterator["XMLElement"]:
        """Iterate over this element and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": [[a.name, a.value] for a in self.attributes],
        }

        if self.text is not None:
            result["text"] = self.text

        if self.children:
            result["children"] = [child.to_dict() for child in self.children]

        return result

    def to_xml(self) -> str:
        """Serialize the subtree back to XML text.

        Text and attribute values are written verbatim; the parser never
        decodes entities, so none are re-encoded here.
        """
        open_tag = self.name
        if self.attributes:
            open_tag += " " + " ".join(a.to_xml() for a in self.attributes)

        if self.text is None and not self.children:
            return f"<{open_tag}/>"

        inner = self.text if self.text is not None else ""
        inner += "".join(child.to_xml() for child in self.children)
        return f"<{open_tag}>{inner}</{self.name}>"

    def dump(self, depth: int = 0) -> str:
        """Render an indented debug view of the subtree.

        Each element is written as ``< name : text >`` (or ``< name >`` when
        it has no text), followed by its attributes at the same indentation
        and its children one level deeper.
        """
        return "\n".join(self._dump_lines(depth))

    def _dump_lines(self, depth: int) -> List[str]:
        indent = DUMP_INDENT * depth
        if self.text is not None:
            lines = [f"{indent}< {self.name} : {self.text} >"]
        else:
            lines = [f"{indent}< {self.name} >"]

        lines.extend(attribute.dump_line(depth) for attribute in self.attributes)
        for child in self.children:
            lines.extend(child._dump_lines(depth + 1))
        return lines

    def print_tree(self, stream: Optional[TextIO] = None) -> None:
        """Write the debug dump to ``stream`` (stdout by default)."""
        print(self.dump(), file=stream or sys.stdout)
