"""
Parsed template document model

The markup parser hands the compiler a tree of Element and Text nodes.
The compiler only ever reads this tree, in document order.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union


@dataclass
class Text:
    """
    A run of character data between or inside elements

    Attributes:
        value: Raw text, whitespace untouched
    """
    value: str


@dataclass
class Element:
    """
    A markup element

    Attributes:
        tag_name: Tag name as written by the parser (case preserved)
        attributes: Attribute name -> value, in document order
        children: Child Element and Text nodes, in document order
        namespace: Namespace URI reported by the parser, if any

    Example:
        For source '<p class="x">Hi</p>':
        Element(
            tag_name="p",
            attributes={"class": "x"},
            children=[Text("Hi")],
            namespace=None
        )
    """
    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    namespace: Optional[str] = None

    def elements(self) -> Iterator["Element"]:
        """Iterate over element children only"""
        for child in self.children:
            if isinstance(child, Element):
                yield child

    def child_find(self, tag_name: str) -> Optional["Element"]:
        """First element child with the given tag name (case-insensitive)"""
        wanted = tag_name.lower()
        for child in self.elements():
            if child.tag_name.lower() == wanted:
                return child
        return None


Node = Union[Element, Text]


@dataclass
class Document:
    """
    A parsed template: the document element and convenient access to
    its <head> and <body> children.
    """
    root: Element

    @property
    def head(self) -> Optional[Element]:
        return self.root.child_find("head")

    @property
    def body(self) -> Optional[Element]:
        return self.root.child_find("body")
