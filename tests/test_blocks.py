"""Tests for block structure: what the block scanner and tree builder produce."""

import pytest

from gotita import (
    BlockQuote,
    CodeBlock,
    Div,
    Heading,
    List,
    Paragraph,
    RawBlock,
    Table,
    Text,
    ThematicBreak,
    WarningKind,
    parse,
)


def _text(node) -> str:  # type: ignore[no-untyped-def]
    return "".join(child.content for child in node.children if isinstance(child, Text))


class TestParagraphs:
    def test_single_paragraph(self) -> None:
        doc = parse("Hello World")
        assert len(doc.children) == 1
        assert isinstance(doc.children[0], Paragraph)

    def test_blank_line_separates(self) -> None:
        doc = parse("one\n\ntwo")
        assert [type(b).__name__ for b in doc.children] == ["Paragraph", "Paragraph"]

    def test_lines_join_with_soft_break(self) -> None:
        doc = parse("one\ntwo")
        para = doc.children[0]
        assert isinstance(para, Paragraph)
        assert [type(c).__name__ for c in para.children] == ["Text", "SoftBreak", "Text"]

    def test_trailing_whitespace_dropped(self) -> None:
        doc = parse("text   \n")
        assert _text(doc.children[0]) == "text"

    def test_empty_document(self) -> None:
        assert parse("").children == ()
        assert parse("\n\n  \n").children == ()


class TestHeadings:
    @pytest.mark.parametrize("level", range(1, 7))
    def test_levels(self, level: int) -> None:
        doc = parse("#" * level + " Title")
        heading = doc.children[0]
        assert isinstance(heading, Heading)
        assert heading.level == level
        assert _text(heading) == "Title"

    def test_heading_ends_paragraph(self) -> None:
        doc = parse("# Title\nmore title\n\nBody")
        assert isinstance(doc.children[0], Heading)
        assert isinstance(doc.children[1], Paragraph)


class TestCodeBlocks:
    def test_language_and_content(self) -> None:
        doc = parse("```python\nprint(1)\n```")
        code = doc.children[0]
        assert isinstance(code, CodeBlock)
        assert code.language == "python"
        assert code.code == "print(1)\n"

    def test_content_is_verbatim(self) -> None:
        doc = parse("~~~\n  indented\n\n*not strong*\n~~~")
        code = doc.children[0]
        assert isinstance(code, CodeBlock)
        assert code.code == "  indented\n\n*not strong*\n"

    def test_longer_closing_fence(self) -> None:
        doc = parse("```\nx\n`````\nafter")
        assert isinstance(doc.children[0], CodeBlock)
        assert isinstance(doc.children[1], Paragraph)

    def test_shorter_fence_does_not_close(self) -> None:
        doc = parse("````\n```\n````")
        code = doc.children[0]
        assert isinstance(code, CodeBlock)
        assert code.code == "```\n"

    def test_unclosed_fence_runs_to_end_and_warns(self) -> None:
        doc = parse("```\ncode\nmore")
        code = doc.children[0]
        assert isinstance(code, CodeBlock)
        assert code.code == "code\nmore\n"
        assert [w.kind for w in doc.warnings] == [WarningKind.UNCLOSED_FENCE]
        assert doc.warnings[0].position == (1, 1)

    def test_raw_block(self) -> None:
        doc = parse("``` =html\n<video></video>\n```")
        raw = doc.children[0]
        assert isinstance(raw, RawBlock)
        assert raw.format == "html"
        assert raw.content == "<video></video>\n"


class TestThematicBreaks:
    @pytest.mark.parametrize("source", ["***", "---", "* * *", "- - - -"])
    def test_break(self, source: str) -> None:
        assert isinstance(parse(source).children[0], ThematicBreak)


class TestBlockQuotes:
    def test_quote(self) -> None:
        doc = parse("> quoted\n> text")
        quote = doc.children[0]
        assert isinstance(quote, BlockQuote)
        assert isinstance(quote.children[0], Paragraph)

    def test_lazy_continuation(self) -> None:
        doc = parse("> quoted\nlazy")
        assert len(doc.children) == 1
        quote = doc.children[0]
        assert isinstance(quote, BlockQuote)
        assert len(quote.children) == 1

    def test_nested(self) -> None:
        doc = parse("> > deep")
        outer = doc.children[0]
        assert isinstance(outer, BlockQuote)
        assert isinstance(outer.children[0], BlockQuote)

    def test_blank_line_ends_quote(self) -> None:
        doc = parse("> a\n\nb")
        assert isinstance(doc.children[0], BlockQuote)
        assert isinstance(doc.children[1], Paragraph)


class TestLists:
    def test_bullet_list(self) -> None:
        doc = parse("- a\n- b")
        lst = doc.children[0]
        assert isinstance(lst, List)
        assert lst.kind == "bullet"
        assert lst.tight
        assert len(lst.items) == 2

    def test_blank_between_items_makes_loose(self) -> None:
        lst = parse("- a\n\n- b").children[0]
        assert isinstance(lst, List)
        assert not lst.tight

    def test_different_bullet_starts_new_list(self) -> None:
        doc = parse("- a\n+ b")
        assert [type(b).__name__ for b in doc.children] == ["List", "List"]

    def test_ordered_start_and_style(self) -> None:
        lst = parse("3) three\n4) four").children[0]
        assert isinstance(lst, List)
        assert lst.kind == "ordered"
        assert lst.start == 3
        assert lst.style == "1)"

    def test_nested_list(self) -> None:
        lst = parse("- a\n  - b\n- c").children[0]
        assert isinstance(lst, List)
        assert len(lst.items) == 2
        first = lst.items[0]
        assert isinstance(first.children[1], List)

    def test_continuation_paragraph(self) -> None:
        lst = parse("- a\n\n  still a\n- b").children[0]
        assert isinstance(lst, List)
        assert len(lst.items[0].children) == 2
        assert not lst.tight

    def test_task_list(self) -> None:
        lst = parse("- [ ] todo\n- [x] done").children[0]
        assert isinstance(lst, List)
        assert lst.kind == "task"
        assert [item.checked for item in lst.items] == [False, True]

    def test_definition_list(self) -> None:
        lst = parse(": orange\n\n  A citrus fruit.").children[0]
        assert isinstance(lst, List)
        assert lst.kind == "definition"
        item = lst.items[0]
        assert item.term is not None
        assert item.term[0] == Text(item.term[0].location, content="orange")
        assert len(item.children) == 1

    def test_list_interrupts_paragraph(self) -> None:
        doc = parse("text\n- item")
        assert [type(b).__name__ for b in doc.children] == ["Paragraph", "List"]

    def test_letter_does_not_interrupt_paragraph(self) -> None:
        doc = parse("text\na) not a list")
        assert [type(b).__name__ for b in doc.children] == ["Paragraph"]

    @pytest.mark.parametrize(
        ("source", "style", "start"),
        [
            ("a. one\nb. two", "a.", 1),
            ("A) one\nB) two", "A)", 1),
            ("(a) one\n(b) two", "(a)", 1),
            ("i. one\nii. two", "i.", 1),
            ("I. one\nII. two", "I.", 1),
            ("h. one\ni. two", "a.", 8),
            ("iv. one\nv. two", "i.", 4),
        ],
    )
    def test_letter_items_continue_list(self, source: str, style: str, start: int) -> None:
        doc = parse(source)
        assert len(doc.children) == 1
        lst = doc.children[0]
        assert isinstance(lst, List)
        assert lst.style == style
        assert lst.start == start
        assert len(lst.items) == 2

    def test_letter_item_in_other_style_stays_text(self) -> None:
        lst = parse("a. one\nb) two").children[0]
        assert isinstance(lst, List)
        assert len(lst.items) == 1
        assert _text(lst.items[0].children[0]) == "oneb) two"


class TestTables:
    def test_header_and_alignment(self) -> None:
        table = parse("| a | b |\n|:--|--:|\n| 1 | 2 |").children[0]
        assert isinstance(table, Table)
        assert len(table.rows) == 2
        header, body = table.rows
        assert header.is_header
        assert all(cell.is_header for cell in header.cells)
        assert [cell.align for cell in body.cells] == ["left", "right"]
        assert not body.is_header

    def test_without_separator(self) -> None:
        table = parse("| x | y |").children[0]
        assert isinstance(table, Table)
        assert not table.rows[0].is_header
        assert [cell.align for cell in table.rows[0].cells] == [None, None]

    def test_escaped_pipe_stays_in_cell(self) -> None:
        table = parse("| a \\| b | c |").children[0]
        assert isinstance(table, Table)
        assert len(table.rows[0].cells) == 2

    def test_caption(self) -> None:
        table = parse("| a |\n^ The caption").children[0]
        assert isinstance(table, Table)
        assert table.caption is not None
        assert table.caption[0].content == "The caption"  # type: ignore[union-attr]

    def test_caption_without_table_is_text(self) -> None:
        doc = parse("^ not a caption")
        assert isinstance(doc.children[0], Paragraph)


class TestDivs:
    def test_div_with_class(self) -> None:
        div = parse("::: warning\nCareful.\n:::").children[0]
        assert isinstance(div, Div)
        assert div.attributes.classes == ("warning",)
        assert isinstance(div.children[0], Paragraph)

    def test_nested_divs(self) -> None:
        doc = parse("::: outer\n::: inner\ntext\n:::\n:::\nafter")
        outer = doc.children[0]
        assert isinstance(outer, Div)
        assert isinstance(outer.children[0], Div)
        assert isinstance(doc.children[1], Paragraph)

    def test_unclosed_div_warns(self) -> None:
        doc = parse("::: note\ntext")
        assert isinstance(doc.children[0], Div)
        assert [w.kind for w in doc.warnings] == [WarningKind.UNCLOSED_FENCE]


class TestBlockAttributes:
    def test_attribute_line(self) -> None:
        para = parse("{#intro .lead}\nParagraph").children[0]
        assert isinstance(para, Paragraph)
        assert para.attributes.get("id") == "intro"
        assert para.attributes.classes == ("lead",)

    def test_consecutive_attribute_lines_merge(self) -> None:
        para = parse("{.a}\n{.b key=v}\ntext").children[0]
        assert para.attributes.classes == ("a", "b")
        assert para.attributes.get("key") == "v"

    def test_multiline_attributes(self) -> None:
        para = parse('{key="a\nb"}\nText').children[0]
        assert isinstance(para, Paragraph)
        assert para.attributes.get("key") == "a b"

    def test_failed_attributes_become_text(self) -> None:
        para = parse("{.a\nb c}").children[0]
        assert isinstance(para, Paragraph)
        assert not para.attributes
        assert "{.a" in _text(para)


class TestDefinitions:
    def test_references_collected(self) -> None:
        doc = parse("[Example]: https://example.com")
        assert doc.children == ()
        assert doc.references["example"].destination == "https://example.com"

    def test_reference_continuation_lines(self) -> None:
        doc = parse("[r]:\n  https://example.com/\n  long")
        assert doc.references["r"].destination == "https://example.com/long"

    def test_reference_attributes(self) -> None:
        doc = parse('{title="Home"}\n[r]: /home')
        assert doc.references["r"].attributes.get("title") == "Home"

    def test_duplicate_reference_first_wins(self) -> None:
        doc = parse("[a]: /one\n[a]: /two")
        assert doc.references["a"].destination == "/one"
        assert [w.kind for w in doc.warnings] == [WarningKind.DUPLICATE_REFERENCE_LABEL]
        assert doc.warnings[0].position == (2, 1)

    def test_footnotes_collected(self) -> None:
        doc = parse("[^n]: First\n\n    Second")
        assert doc.children == ()
        note = doc.footnotes["n"]
        assert len(note.children) == 2

    def test_duplicate_footnote_warns(self) -> None:
        doc = parse("[^n]: one\n\n[^n]: two")
        assert [w.kind for w in doc.warnings] == [WarningKind.DUPLICATE_REFERENCE_LABEL]


class TestLocations:
    def test_block_positions(self) -> None:
        doc = parse("# A\n\npara")
        heading, para = doc.children
        assert (heading.location.lineno, heading.location.col_offset) == (1, 1)
        assert para.location.lineno == 3
        assert para.location.offset == 5
        assert para.location.end_offset == 9

    def test_source_file_recorded(self) -> None:
        doc = parse("text", source_file="notes.dj")
        assert doc.location.source_file == "notes.dj"
        assert doc.children[0].location.source_file == "notes.dj"

    def test_crlf_input(self) -> None:
        doc = parse("# A\r\n\r\ntext\r\n")
        assert [type(b).__name__ for b in doc.children] == ["Heading", "Paragraph"]
        assert _text(doc.children[1]) == "text"
