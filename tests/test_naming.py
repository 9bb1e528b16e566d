"""
Identifier derivation tests

Display names, variable names and link aliases must be stable for the same
input.
"""

import pytest

from tagwright.config import AppSettings
from tagwright.lib.naming import displayName_derive, variable_make


class TestDisplayName:
    """Test constructor display names"""

    def test_html_path(self):
        assert displayName_derive("widgets/my-button.html", "text/html") == "MyButton"

    def test_leading_digit(self):
        assert displayName_derive("9lives.xml", "application/xml") == "_9Lives"

    def test_case_normalized(self):
        assert displayName_derive("LIST_ITEM.html", "text/html") == "ListItem"

    def test_fragment_segment(self):
        """The segment after '#' names the constructor"""
        assert displayName_derive("pages/list#row-view.html", "text/html") == "RowView"

    def test_suffix_length_by_type(self):
        """XML strips four characters, HTML five"""
        assert displayName_derive("card.xml", "application/xml") == "Card"
        assert displayName_derive("card.xhtml", "text/html") == "Card"
        assert displayName_derive("card.xhtml", "application/xml") == "CardX"

    def test_no_letters(self):
        assert displayName_derive("---.html", "text/html") == "_"

    def test_stable(self):
        names = {displayName_derive("a/b/c-d.html", "text/html") for _ in range(5)}
        assert names == {"CD"}

    def test_unsupported_type(self):
        with pytest.raises(ValueError):
            displayName_derive("card.json", "application/json")


class TestVariables:
    """Test module-level variable names"""

    def test_dash_replaced(self):
        assert variable_make("MY-CARD") == "$MY_CARD"

    def test_custom_prefix(self):
        assert variable_make("TIP", "$$") == "$$TIP"

    def test_no_prefix(self):
        assert variable_make("svg:rect", "") == "svg_rect"


class TestAliases:
    """Test alias derivation for link hrefs"""

    @pytest.mark.parametrize(
        "href, alias",
        [
            ("./widgets/my-button.html", "my-button"),
            ("card.xml", "card"),
            ("./tooltip.js", "tooltip"),
            ("lists/", "lists"),
            ("./icon", "icon"),
            ("./Panel.HTML", "Panel"),
        ],
    )
    def test_alias_derive(self, href, alias):
        assert AppSettings().alias_derive(href) == alias

    @pytest.mark.parametrize("href", ["./", "../", "/"])
    def test_no_alias(self, href):
        assert AppSettings().alias_derive(href) == ""
