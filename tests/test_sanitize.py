"""Tests for sanitization policies."""

from gotita import parse, render, sanitize
from gotita.location import SourceLocation
from gotita.nodes import Document, Image, Link, Paragraph, RawBlock, RawInline, Span, Text
from gotita.sanitize import (
    Policy,
    allow_attributes,
    normalize_unicode,
    safe,
    strip_dangerous_urls,
    strip_raw,
)

LOC = SourceLocation(lineno=1, col_offset=1)


def _para(text: str) -> Paragraph:
    return Paragraph(LOC, children=(Text(LOC, content=text),))


class TestStripRaw:
    def test_removes_raw_block(self) -> None:
        doc = parse("# Hi\n\n``` =html\n<script></script>\n```\n\nMore")
        clean = strip_raw(doc)
        assert len(clean.children) == 2
        assert not any(isinstance(c, RawBlock) for c in clean.children)

    def test_removes_raw_inline(self) -> None:
        clean = strip_raw(parse("a `<b>`{=html} c"))
        para = clean.children[0]
        assert isinstance(para, Paragraph)
        assert not any(isinstance(c, RawInline) for c in para.children)


class TestStripDangerousUrls:
    def test_javascript_link_unwrapped(self) -> None:
        clean = strip_dangerous_urls(parse("[x](javascript:alert(1))"))
        para = clean.children[0]
        assert isinstance(para.children[0], Span)  # type: ignore[union-attr]
        assert render(clean) == "<p><span>x</span></p>\n"

    def test_case_and_whitespace_ignored(self) -> None:
        link = Link(LOC, children=(Text(LOC, content="x"),), destination=" Java Script:alert(1)")
        doc = Document(LOC, children=(Paragraph(LOC, children=(link,)),))
        clean = strip_dangerous_urls(doc)
        assert isinstance(clean.children[0].children[0], Span)  # type: ignore[union-attr]

    def test_data_image_removed(self) -> None:
        clean = strip_dangerous_urls(parse("a ![i](data:image/png;base64,xyz)"))
        assert not any(isinstance(c, Image) for c in clean.children[0].children)  # type: ignore[union-attr]

    def test_safe_link_kept(self) -> None:
        doc = parse("[x](https://example.com)")
        clean = strip_dangerous_urls(doc)
        assert clean is doc


class TestNormalizeUnicode:
    def test_strips_zero_width(self) -> None:
        doc = Document(LOC, children=(_para("a\u200bb\u202ec"),))
        clean = normalize_unicode(doc)
        assert clean.children[0].children[0].content == "abc"  # type: ignore[union-attr]

    def test_plain_text_unchanged(self) -> None:
        doc = Document(LOC, children=(_para("plain"),))
        assert normalize_unicode(doc) is doc


class TestAllowAttributes:
    def test_keeps_listed_names(self) -> None:
        doc = parse('{#a .b onclick="x"}\ntext')
        clean = allow_attributes(["class"])(doc)
        assert list(clean.children[0].attributes) == [("class", "b")]

    def test_inline_attributes_filtered(self) -> None:
        clean = allow_attributes(["id"])(parse("[t]{#i .c}"))
        span = clean.children[0].children[0]  # type: ignore[union-attr]
        assert list(span.attributes) == [("id", "i")]


class TestComposition:
    def test_safe_policy(self) -> None:
        doc = parse("[x](javascript:void)\n\n``` =html\n<b>\n```")
        assert render(sanitize(doc, policy=safe)) == "<p><span>x</span></p>\n"

    def test_pipe_order(self) -> None:
        calls: list[str] = []

        def first(doc: Document) -> Document:
            calls.append("first")
            return doc

        def second(doc: Document) -> Document:
            calls.append("second")
            return doc

        (Policy(first) | Policy(second))(parse("x"))
        assert calls == ["first", "second"]

    def test_plain_callable(self) -> None:
        doc = parse("x")
        assert sanitize(doc, policy=lambda d: d) is doc
