"""Tests for BaseVisitor dispatch and the transform function."""

import dataclasses

import pytest

from gotita import parse
from gotita.nodes import (
    Document,
    Emphasis,
    FootnoteDef,
    Heading,
    Image,
    Node,
    Paragraph,
    Text,
)
from gotita.visitor import BaseVisitor, iter_children, transform


class _Collector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.types: list[str] = []

    def visit_default(self, node: Node) -> None:
        self.types.append(type(node).__name__)


class _HeadingCollector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.headings: list[Heading] = []

    def visit_heading(self, node: Heading) -> None:
        self.headings.append(node)


class TestBaseVisitor:
    def test_specific_method_called(self) -> None:
        collector = _HeadingCollector()
        collector.visit(parse("# A\n\ntext\n\n> ## B"))
        assert [h.level for h in collector.headings] == [1, 2]

    def test_walks_depth_first(self) -> None:
        collector = _Collector()
        collector.visit(parse("a _b_"))
        assert collector.types == ["Document", "Paragraph", "Text", "Emphasis", "Text"]

    def test_walks_footnotes_after_body(self) -> None:
        collector = _Collector()
        collector.visit(parse("x[^1]\n\n[^1]: note"))
        assert collector.types[-3:] == ["FootnoteDef", "Paragraph", "Text"]

    def test_walks_definition_terms(self) -> None:
        collector = _Collector()
        collector.visit(parse(": term\n\n  body"))
        assert collector.types == [
            "Document", "List", "ListItem", "Text", "Paragraph", "Text",
        ]

    def test_walks_table_caption(self) -> None:
        collector = _Collector()
        collector.visit(parse("| a |\n^ cap"))
        assert collector.types == [
            "Document", "Table", "TableRow", "TableCell", "Text", "Text",
        ]

    def test_return_value(self) -> None:
        class Namer(BaseVisitor[str]):
            def visit_default(self, node: Node) -> str:
                return type(node).__name__

        assert Namer().visit(parse("x")) == "Document"


class TestTransform:
    def test_identity_shares_tree(self) -> None:
        doc = parse("# A\n\n- b\n- c\n\n| d |")
        assert transform(doc, lambda node: node) is doc

    def test_replace_text(self) -> None:
        def upper(node: Node) -> Node:
            if isinstance(node, Text):
                return dataclasses.replace(node, content=node.content.upper())
            return node

        doc = parse("a _b_")
        new = transform(doc, upper)
        para = new.children[0]
        assert isinstance(para, Paragraph)
        assert para.children[0].content == "A "  # type: ignore[union-attr]
        assert isinstance(para.children[1], Emphasis)
        assert doc.children[0].children[0].content == "a "  # type: ignore[union-attr]

    def test_remove_nodes(self) -> None:
        new = transform(parse("a ![i](x.png) b"), lambda n: None if isinstance(n, Image) else n)
        assert not any(isinstance(c, Image) for c in new.children[0].children)  # type: ignore[union-attr]

    def test_bottom_up(self) -> None:
        seen: list[str] = []

        def record(node: Node) -> Node:
            seen.append(type(node).__name__)
            return node

        transform(parse("_x_"), record)
        assert seen == ["Text", "Emphasis", "Paragraph", "Document"]

    def test_root_cannot_be_removed(self) -> None:
        with pytest.raises(TypeError):
            transform(parse("x"), lambda n: None if isinstance(n, Document) else n)

    def test_remove_footnote_definition(self) -> None:
        doc = parse("x[^1]\n\n[^1]: note")
        new = transform(doc, lambda n: None if isinstance(n, FootnoteDef) else n)
        assert new.footnotes == {}
        assert "1" in doc.footnotes


class TestIterChildren:
    def test_list_item_term_first(self) -> None:
        item = parse(": term\n\n  body").children[0].items[0]  # type: ignore[union-attr]
        assert [type(c).__name__ for c in iter_children(item)] == ["Text", "Paragraph"]

    def test_document_footnotes_last(self) -> None:
        doc = parse("x[^1]\n\n[^1]: note")
        assert [type(c).__name__ for c in iter_children(doc)] == ["Paragraph", "FootnoteDef"]

    def test_leaf(self) -> None:
        text = parse("x").children[0].children[0]  # type: ignore[union-attr]
        assert list(iter_children(text)) == []
