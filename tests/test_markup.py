"""
Markup parser tests

Tests conversion of lxml trees into the Document model.
"""

import pytest

from tagwright.lib.markup import MarkupParser, attribute_name, name_split
from tagwright.models.document import Element, Text


SVG = "http://www.w3.org/2000/svg"
XHTML = "http://www.w3.org/1999/xhtml"
XLINK = "http://www.w3.org/1999/xlink"


class TestHtml:
    """Test HTML parsing"""

    def test_head_and_body(self):
        document = MarkupParser().parse(
            '<html><head><link rel="tag" href="./icon.html"></head><body><p>Hi</p></body></html>',
            "text/html",
        )
        link = document.head.child_find("link")
        assert link.attributes == {"rel": "tag", "href": "./icon.html"}
        assert document.body.children == [Element("p", children=[Text("Hi")])]

    def test_missing_structure_supplied(self):
        """A fragment still yields a document with a body"""
        document = MarkupParser().parse("<p>Hi</p>", "text/html")
        assert document.body is not None
        assert document.body.child_find("p").children == [Text("Hi")]

    def test_text_in_document_order(self):
        document = MarkupParser().parse("<html><body><p>Hi <b>there</b>!</p></body></html>", "text/html")
        paragraph = document.body.child_find("p")
        assert paragraph.children == [
            Text("Hi "),
            Element("b", children=[Text("there")]),
            Text("!"),
        ]

    def test_whitespace_preserved(self):
        """Text is handed over untouched"""
        document = MarkupParser().parse("<html><body><p>  a \n b  </p></body></html>", "text/html")
        assert document.body.child_find("p").children == [Text("  a \n b  ")]

    def test_valueless_attribute(self):
        document = MarkupParser().parse("<html><body><input disabled></body></html>", "text/html")
        assert document.body.child_find("input").attributes == {"disabled": ""}


class TestXml:
    """Test XML parsing"""

    def test_namespaces(self):
        document = MarkupParser().parse(
            f'<html xmlns="{XHTML}"><head/><body><svg xmlns="{SVG}"><rect width="3"/></svg></body></html>',
            "application/xml",
        )
        assert document.root.tag_name == "html"
        assert document.root.namespace == XHTML

        svg = document.body.child_find("svg")
        assert svg.namespace == SVG
        assert svg.child_find("rect").namespace == SVG
        assert svg.child_find("rect").attributes == {"width": "3"}

    def test_namespaced_attributes_keep_prefix(self):
        """xlink:href and href on one element stay distinct"""
        document = MarkupParser().parse(
            f'<html xmlns:xlink="{XLINK}"><body>'
            '<a href="/plain" xlink:href="#linked" xml:lang="en"/>'
            "</body></html>",
            "application/xml",
        )
        assert document.body.child_find("a").attributes == {
            "href": "/plain",
            "xlink:href": "#linked",
            "xml:lang": "en",
        }

    def test_comments_dropped_tails_kept(self):
        document = MarkupParser().parse("<html><body><!-- note -->text</body></html>", "application/xml")
        assert document.body.children == [Text("text")]

    def test_adjacent_text_merged(self):
        document = MarkupParser().parse("<html><body>a<!-- x -->b</body></html>", "application/xml")
        assert document.body.children == [Text("ab")]

    def test_malformed(self):
        from lxml import etree

        with pytest.raises(etree.XMLSyntaxError):
            MarkupParser().parse("<html><body></html>", "application/xml")


class TestTypes:
    """Test mime type handling"""

    def test_unsupported_type(self):
        with pytest.raises(ValueError):
            MarkupParser().parse("{}", "application/json")

    def test_attribute_name(self):
        assert attribute_name("href", {}) == "href"
        assert attribute_name(f"{{{XLINK}}}href", {"xlink": XLINK}) == "xlink:href"
        assert attribute_name("{http://www.w3.org/XML/1998/namespace}space", {}) == "xml:space"
        assert attribute_name(f"{{{XLINK}}}href", {None: XLINK}) == f"{{{XLINK}}}href"

    def test_name_split(self):
        assert name_split(f"{{{SVG}}}rect") == (SVG, "rect")
        assert name_split("rect") == (None, "rect")
