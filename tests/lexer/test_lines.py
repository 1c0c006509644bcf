"""Tests for line splitting and the Line cursor."""

from gotita.lexer import TAB_STOP, Lexer, Line


class TestLineSplitting:
    def test_lf_lines(self) -> None:
        lines = list(Lexer("a\nb\nc").lines())
        assert [line.text for line in lines] == ["a", "b", "c"]
        assert [line.lineno for line in lines] == [1, 2, 3]
        assert [line.offset for line in lines] == [0, 2, 4]

    def test_crlf_lines(self) -> None:
        lines = list(Lexer("a\r\nb\r\n").lines())
        assert [line.text for line in lines] == ["a", "b"]
        assert lines[1].offset == 3

    def test_trailing_newline_adds_no_line(self) -> None:
        assert len(list(Lexer("x\n").lines())) == 1

    def test_blank_lines_kept(self) -> None:
        assert [line.text for line in Lexer("a\n\n\nb").lines()] == ["a", "", "", "b"]

    def test_empty_source(self) -> None:
        assert list(Lexer("").lines()) == []


class TestLineCursor:
    def test_indent_counts_columns(self) -> None:
        line = Line("  \tx", 0, 1)
        assert line.indent() == TAB_STOP

    def test_skip_indent_respects_limit(self) -> None:
        line = Line("      x", 0, 1)
        assert line.skip_indent(2) == 2
        assert line.rest == "    x"
        assert line.col == 2

    def test_skip_indent_keeps_overshooting_tab(self) -> None:
        line = Line(" \tx", 0, 1)
        assert line.skip_indent(2) == 1
        assert line.rest == "\tx"

    def test_advance_tracks_offset(self) -> None:
        line = Line("> quote", 10, 3)
        line.advance(2)
        assert line.rest == "quote"
        assert line.source_offset == 12
        assert line.col == 2

    def test_advance_past_end_is_clamped(self) -> None:
        line = Line("ab", 0, 1)
        line.advance(10)
        assert line.rest == ""
        assert line.pos == 2

    def test_blank_and_consume_all(self) -> None:
        line = Line("  text  ", 0, 1)
        assert not line.is_blank()
        line.consume_all()
        assert line.is_blank()
        assert line.rest == ""
