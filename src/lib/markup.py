"""
Markup parser adapter

Parses template source with lxml and converts the result into the
compiler's read-only Document model. HTML goes through lxml.html (which
supplies missing html/head/body elements); XML goes through lxml.etree
with whitespace preserved.

lxml keeps text as .text/.tail strings on elements; the conversion turns
those into Text nodes placed in document order. Comments and processing
instructions are dropped, their tails kept.
"""

from typing import Dict, List, Optional, Tuple

from lxml import etree
from lxml import html as lxml_html

from ..models.document import Document, Element, Node, Text


MIME_HTML = "text/html"
MIME_XML = "application/xml"
MIME_TYPES = (MIME_XML, MIME_HTML)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def name_split(name: str) -> Tuple[Optional[str], str]:
    """
    Split lxml's Clark notation into (namespace, local name)

    Example:
        >>> name_split("{http://www.w3.org/2000/svg}rect")
        ('http://www.w3.org/2000/svg', 'rect')
        >>> name_split("xlink:href")
        (None, 'xlink:href')
    """
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        return namespace, local
    return None, name


def attribute_name(key: str, nsmap: Dict[Optional[str], str]) -> str:
    """
    Attribute name as written in the source, prefix included

    Namespaced attributes keep their prefix so that "xlink:href" and
    "href" on the same element stay distinct. A namespace with no prefix
    in scope keeps lxml's Clark notation.

    Example:
        >>> attribute_name("{http://www.w3.org/1999/xlink}href", {"xlink": "http://www.w3.org/1999/xlink"})
        'xlink:href'
        >>> attribute_name("{http://www.w3.org/XML/1998/namespace}lang", {})
        'xml:lang'
    """
    namespace, local = name_split(key)
    if namespace is None:
        return local
    if namespace == XML_NAMESPACE:
        return f"xml:{local}"
    for prefix, uri in nsmap.items():
        if uri == namespace and prefix:
            return f"{prefix}:{local}"
    return key


class MarkupParser:
    """
    Parses template text into a Document

    Example:
        >>> document = MarkupParser().parse("<p>Hi</p>", "text/html")
        >>> document.body.children[0].tag_name
        'p'
    """

    def __init__(self, huge_tree: bool = False) -> None:
        self.xml_parser = etree.XMLParser(
            remove_blank_text=False,
            resolve_entities=False,
            huge_tree=huge_tree,
        )

    def parse(self, text: str, mime_type: str) -> Document:
        """
        Parse template text

        Args:
            text: Template source
            mime_type: "text/html" or "application/xml"

        Returns:
            Converted document

        Raises:
            ValueError: For any other mime type
            lxml.etree.ParserError, lxml.etree.XMLSyntaxError: On
                unparseable input
        """
        if mime_type == MIME_HTML:
            root = lxml_html.document_fromstring(text)
        elif mime_type == MIME_XML:
            root = etree.fromstring(text.encode("utf-8"), self.xml_parser)
        else:
            raise ValueError(f"Can't parse type {mime_type!r}. Use {MIME_HTML} or {MIME_XML}")

        return Document(root=self.element_convert(root))

    def element_convert(self, source: etree._Element) -> Element:
        """Convert one lxml element, recursively"""
        namespace, tag_name = name_split(source.tag)
        element = Element(
            tag_name=tag_name,
            attributes={attribute_name(key, source.nsmap): value or "" for key, value in source.attrib.items()},
            namespace=namespace,
        )

        children: List[Node] = []
        self.text_append(children, source.text)
        for child in source:
            if isinstance(child.tag, str):
                children.append(self.element_convert(child))
            self.text_append(children, child.tail)
        element.children = children
        return element

    @staticmethod
    def text_append(children: List[Node], value: Optional[str]) -> None:
        """Append text, merging with a preceding Text node"""
        if not value:
            return
        if children and isinstance(children[-1], Text):
            children[-1] = Text(children[-1].value + value)
        else:
            children.append(Text(value))
