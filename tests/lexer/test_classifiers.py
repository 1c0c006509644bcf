"""Tests for the block-start classifiers.

Classification is pure: each test feeds the unconsumed part of a line and
checks the BlockStart (or None) that comes back.
"""

import pytest

from gotita.lexer import Lexer
from gotita.lexer.classifiers import is_closing_div, is_closing_fence, quote_marker_width
from gotita.lexer.classifiers.list import roman_to_int
from gotita.tokens import BlockType, ListMarker


def classify(  # type: ignore[no-untyped-def]
    content: str, *, paragraph_open: bool = False, open_list: ListMarker | None = None
):
    return Lexer(content).classify(content, paragraph_open=paragraph_open, open_list=open_list)


class TestHeadings:
    @pytest.mark.parametrize("level", range(1, 7))
    def test_levels(self, level: int) -> None:
        start = classify("#" * level + " Title")
        assert start is not None
        assert start.type is BlockType.HEADING
        assert start.level == level
        assert start.text == "Title"
        assert start.width == level + 1

    def test_seven_hashes_is_not_a_heading(self) -> None:
        assert classify("####### no") is None

    def test_hash_needs_space(self) -> None:
        assert classify("#hashtag") is None

    def test_empty_heading(self) -> None:
        start = classify("##")
        assert start is not None
        assert start.type is BlockType.HEADING
        assert start.level == 2

    def test_trailing_hashes_are_text(self) -> None:
        start = classify("# Title #")
        assert start is not None
        assert start.text == "Title #"


class TestFences:
    def test_backtick_fence_with_language(self) -> None:
        start = classify("``` python")
        assert start is not None
        assert start.type is BlockType.CODE_FENCE
        assert start.text == "python"
        assert start.fence_char == "`"
        assert start.fence_length == 3

    def test_tilde_fence(self) -> None:
        start = classify("~~~~")
        assert start is not None
        assert start.fence_char == "~"
        assert start.fence_length == 4

    def test_raw_format_info(self) -> None:
        start = classify("``` =html")
        assert start is not None
        assert start.text == "=html"

    def test_two_backticks_are_not_a_fence(self) -> None:
        assert classify("``x``") is None

    def test_backtick_in_info_rejected(self) -> None:
        assert classify("``` a`b") is None

    def test_div_fence_with_class(self) -> None:
        start = classify("::: warning")
        assert start is not None
        assert start.type is BlockType.DIV_FENCE
        assert start.text == "warning"
        assert start.fence_length == 3

    def test_div_fence_two_words_rejected(self) -> None:
        start = classify("::: two words")
        assert start is None or start.type is not BlockType.DIV_FENCE

    def test_closing_fence(self) -> None:
        assert is_closing_fence("````", "`", 3)
        assert not is_closing_fence("``", "`", 3)
        assert not is_closing_fence("~~~", "`", 3)
        assert not is_closing_fence("``` info", "`", 3)

    def test_closing_div(self) -> None:
        assert is_closing_div(":::", 3)
        assert is_closing_div("::::  ", 3)
        assert not is_closing_div("::", 3)
        assert not is_closing_div("::: note", 3)


class TestThematicBreak:
    @pytest.mark.parametrize("content", ["***", "---", "* * *", "- - -", "*-*", "------"])
    def test_breaks(self, content: str) -> None:
        start = classify(content)
        assert start is not None
        assert start.type is BlockType.THEMATIC_BREAK

    def test_two_characters_is_not_a_break(self) -> None:
        start = classify("--")
        assert start is None or start.type is not BlockType.THEMATIC_BREAK


class TestBlockQuote:
    def test_marker_widths(self) -> None:
        assert quote_marker_width("> text") == 2
        assert quote_marker_width(">") == 1
        assert quote_marker_width(">\ttext") == 1
        assert quote_marker_width(">text") == 0

    def test_classify(self) -> None:
        start = classify("> quoted")
        assert start is not None
        assert start.type is BlockType.BLOCK_QUOTE
        assert start.text == "quoted"


class TestListMarkers:
    @pytest.mark.parametrize("bullet", ["-", "+", "*"])
    def test_bullets(self, bullet: str) -> None:
        start = classify(f"{bullet} item")
        assert start is not None
        assert start.type is BlockType.LIST_ITEM
        assert start.marker is not None
        assert start.marker.kind == "bullet"
        assert start.marker.style == bullet
        assert start.text == "item"

    def test_bullet_needs_space(self) -> None:
        assert classify("-item") is None

    def test_task_unchecked(self) -> None:
        start = classify("- [ ] todo")
        assert start is not None and start.marker is not None
        assert start.marker.kind == "task"
        assert start.marker.checked is False
        assert start.text == "todo"

    @pytest.mark.parametrize("box", ["[x]", "[X]"])
    def test_task_checked(self, box: str) -> None:
        start = classify(f"- {box} done")
        assert start is not None and start.marker is not None
        assert start.marker.kind == "task"
        assert start.marker.checked is True

    def test_definition_marker(self) -> None:
        start = classify(": term")
        assert start is not None and start.marker is not None
        assert start.marker.kind == "definition"
        assert start.text == "term"

    @pytest.mark.parametrize(
        ("content", "style", "number"),
        [
            ("1. one", "1.", 1),
            ("42) x", "1)", 42),
            ("(7) x", "(1)", 7),
            ("a. x", "a.", 1),
            ("C) x", "A)", 3),
            ("iv. x", "i.", 4),
            ("(XII) x", "(I)", 12),
            ("i. x", "i.", 1),
        ],
    )
    def test_ordered(self, content: str, style: str, number: int) -> None:
        start = classify(content)
        assert start is not None and start.marker is not None
        assert start.marker.kind == "ordered"
        assert start.marker.style == style
        assert start.marker.number == number

    @pytest.mark.parametrize("content", ["1.x", "ab. x", "Ab. x", "1234567890. x", "(1. x"])
    def test_not_ordered(self, content: str) -> None:
        start = classify(content)
        assert start is None or start.type is not BlockType.LIST_ITEM

    def test_only_decimal_interrupts_paragraph(self) -> None:
        assert classify("a) x", paragraph_open=True) is None
        assert classify("I. x", paragraph_open=True) is None
        start = classify("1. x", paragraph_open=True)
        assert start is not None
        assert start.type is BlockType.LIST_ITEM

    @pytest.mark.parametrize(
        ("content", "style"),
        [("b. x", "a."), ("B) x", "A)"), ("ii. x", "i."), ("(II) x", "(I)")],
    )
    def test_same_style_interrupts_paragraph(self, content: str, style: str) -> None:
        start = classify(content, paragraph_open=True, open_list=ListMarker("ordered", style))
        assert start is not None and start.marker is not None
        assert start.marker.style == style

    def test_other_style_does_not_interrupt(self) -> None:
        assert classify("b. x", paragraph_open=True, open_list=ListMarker("ordered", "a)")) is None
        assert classify("b. x", paragraph_open=True, open_list=ListMarker("bullet", "-")) is None

    @pytest.mark.parametrize(
        ("content", "style", "expected", "number"),
        [
            ("i. x", "a.", "a.", 9),
            ("v. x", "i.", "i.", 5),
            ("x. x", "i.", "i.", 10),
            ("v. x", "1.", "a.", 22),
            ("I. x", "A.", "A.", 9),
        ],
    )
    def test_open_list_settles_letter(
        self, content: str, style: str, expected: str, number: int
    ) -> None:
        start = classify(content, open_list=ListMarker("ordered", style))
        assert start is not None and start.marker is not None
        assert start.marker.style == expected
        assert start.marker.number == number

    def test_roman_values(self) -> None:
        assert roman_to_int("i") == 1
        assert roman_to_int("iv") == 4
        assert roman_to_int("MCMXC") == 1990


class TestDefinitions:
    def test_reference_definition(self) -> None:
        start = classify("[Label]: https://example.com")
        assert start is not None
        assert start.type is BlockType.REFERENCE_DEF
        assert start.label == "Label"
        assert start.text == "https://example.com"

    def test_reference_without_destination(self) -> None:
        start = classify("[label]:")
        assert start is not None
        assert start.type is BlockType.REFERENCE_DEF
        assert start.text == ""

    def test_footnote_definition(self) -> None:
        start = classify("[^note]: The body")
        assert start is not None
        assert start.type is BlockType.FOOTNOTE_DEF
        assert start.label == "note"
        assert start.text == "The body"

    def test_empty_label_rejected(self) -> None:
        assert classify("[]: x") is None

    def test_definitions_do_not_interrupt_paragraph(self) -> None:
        assert classify("[a]: b", paragraph_open=True) is None


class TestTablesAndAttributes:
    def test_table_row(self) -> None:
        start = classify("| a | b |")
        assert start is not None
        assert start.type is BlockType.TABLE_ROW
        assert start.text == "| a | b |"

    def test_row_must_end_with_pipe(self) -> None:
        assert classify("| a | b") is None

    def test_caption(self) -> None:
        start = classify("^ The caption")
        assert start is not None
        assert start.type is BlockType.CAPTION
        assert start.text == "The caption"

    def test_attribute_line(self) -> None:
        start = classify("{#id .cls}")
        assert start is not None
        assert start.type is BlockType.ATTRIBUTES
        assert start.attributes.get("id") == "id"
        assert start.attributes.classes == ("cls",)
        assert not start.incomplete

    def test_incomplete_attribute_line(self) -> None:
        start = classify('{key="multi')
        assert start is not None
        assert start.type is BlockType.ATTRIBUTES
        assert start.incomplete

    def test_attribute_with_trailing_text_rejected(self) -> None:
        assert classify("{.a} text") is None

    def test_plain_text(self) -> None:
        assert classify("Hello world") is None
        assert classify("") is None
