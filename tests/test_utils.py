"""Tests for shared text utilities and the StringBuilder."""

import pytest

from gotita.stringbuilder import StringBuilder
from gotita.utils.text import escape_html, make_identifier, normalize_label


class TestMakeIdentifier:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello, World!", "Hello-World"),
            ("  spaced   out  ", "spaced-out"),
            ("a.b/c", "abc"),
            ("Café au lait", "Café-au-lait"),
            ("???", "s"),
            ("", "s"),
        ],
    )
    def test_identifier(self, text: str, expected: str) -> None:
        assert make_identifier(text) == expected

    def test_unique_within_set(self) -> None:
        seen: set[str] = set()
        assert [make_identifier("A", seen) for _ in range(3)] == ["A", "A-1", "A-2"]
        assert seen == {"A", "A-1", "A-2"}


class TestNormalizeLabel:
    def test_case_and_whitespace(self) -> None:
        assert normalize_label("  Foo\n\tBAR  baz ") == "foo bar baz"

    def test_casefold(self) -> None:
        assert normalize_label("Straße") == normalize_label("STRASSE")


class TestEscapeHtml:
    def test_escapes(self) -> None:
        assert escape_html('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"

    def test_single_quote_kept(self) -> None:
        assert escape_html("it's") == "it's"

    def test_empty(self) -> None:
        assert escape_html("") == ""


class TestStringBuilder:
    def test_chaining(self) -> None:
        sb = StringBuilder()
        sb.append("<p>").append("").append("x").append("</p>").newline()
        assert sb.build() == "<p>x</p>\n"
        assert len(sb) == 4

    def test_newline_not_doubled(self) -> None:
        sb = StringBuilder()
        sb.append("a\n").newline()
        assert sb.build() == "a\n"

    def test_newline_on_empty(self) -> None:
        sb = StringBuilder()
        sb.newline()
        assert not sb
        assert sb.build() == ""
