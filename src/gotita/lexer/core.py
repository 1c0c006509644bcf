"""Line-oriented lexer.

Splits the source into lines and classifies the unconsumed part of a line
against the ordered set of block-start patterns. Classification is pure:
it never moves the line cursor; the block scanner commits a match by
advancing the cursor itself.

No regex in the hot path. Every line is visited once, so the scan is O(n).

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator

from gotita.lexer.classifiers import (
    AttributeClassifierMixin,
    FenceClassifierMixin,
    HeadingClassifierMixin,
    ListClassifierMixin,
    QuoteClassifierMixin,
    ReferenceClassifierMixin,
    TableClassifierMixin,
    ThematicClassifierMixin,
)
from gotita.tokens import BlockStart, ListMarker

TAB_STOP = 4


class Line:
    """Cursor over one source line (newline excluded).

    Tracks both the character position and the visual column, where tabs
    advance to the next multiple of four.

    Attributes:
        text: Line content without the line terminator
        offset: Absolute offset of the line start in the source
        lineno: 1-indexed line number
        pos: Index of the first unconsumed character
        col: Visual column (0-indexed) of ``pos``

    """

    __slots__ = ("text", "offset", "lineno", "pos", "col")

    def __init__(self, text: str, offset: int, lineno: int) -> None:
        self.text = text
        self.offset = offset
        self.lineno = lineno
        self.pos = 0
        self.col = 0

    def __repr__(self) -> str:
        return f"Line({self.lineno}, {self.rest!r})"

    @property
    def rest(self) -> str:
        """Unconsumed text."""
        return self.text[self.pos :]

    @property
    def source_offset(self) -> int:
        """Absolute source offset of ``pos``."""
        return self.offset + self.pos

    def is_blank(self) -> bool:
        """True if nothing but whitespace is left."""
        return not self.text[self.pos :].strip()

    def indent(self) -> int:
        """Columns of whitespace at the cursor (tabs expanded)."""
        return self.peek_indent()[1] - self.col

    def peek_indent(self) -> tuple[int, int]:
        """Position and visual column just past the whitespace at the cursor.

        Nothing is consumed.
        """
        col = self.col
        text = self.text
        pos = self.pos
        while pos < len(text):
            char = text[pos]
            if char == " ":
                col += 1
            elif char == "\t":
                col += TAB_STOP - (col % TAB_STOP)
            else:
                break
            pos += 1
        return pos, col

    def skip_indent(self, max_columns: int | None = None) -> int:
        """Consume leading whitespace, at most ``max_columns`` columns.

        A tab that would overshoot the limit is left in place.

        Returns:
            Columns consumed.
        """
        start_col = self.col
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == " ":
                width = 1
            elif char == "\t":
                width = TAB_STOP - (self.col % TAB_STOP)
            else:
                break
            if max_columns is not None and self.col - start_col + width > max_columns:
                break
            self.col += width
            self.pos += 1
        return self.col - start_col

    def advance(self, count: int) -> None:
        """Consume ``count`` characters (marker text, never tabs)."""
        end = min(self.pos + count, len(self.text))
        for char in self.text[self.pos : end]:
            if char == "\t":
                self.col += TAB_STOP - (self.col % TAB_STOP)
            else:
                self.col += 1
        self.pos = end

    def consume_all(self) -> None:
        """Mark the whole line consumed."""
        self.advance(len(self.text) - self.pos)


class Lexer(
    # Classifiers (pure logic, no position mutation)
    FenceClassifierMixin,
    ThematicClassifierMixin,
    HeadingClassifierMixin,
    QuoteClassifierMixin,
    ListClassifierMixin,
    ReferenceClassifierMixin,
    TableClassifierMixin,
    AttributeClassifierMixin,
):
    """Line splitter plus block-start classifier.

    Usage:
            >>> lexer = Lexer("# Hello\\n\\nWorld")
            >>> [line.text for line in lexer.lines()]
            ['# Hello', '', 'World']
            >>> lexer.classify("# Hello")
            BlockStart(HEADING, 'Hello')

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = ("_source", "_source_len")

    def __init__(self, source: str) -> None:
        """Initialize lexer with source text.

        Args:
            source: Djot source text
        """
        self._source = source
        self._source_len = len(source)

    def lines(self) -> Iterator[Line]:
        """Yield a Line per source line.

        ``\\n`` and ``\\r\\n`` end a line. A trailing newline does not produce
        an extra empty line.

        Complexity: O(n) where n = len(source)
        """
        source = self._source
        pos = 0
        lineno = 1
        while pos < self._source_len:
            nl = source.find("\n", pos)
            end = nl if nl != -1 else self._source_len
            text = source[pos:end]
            if text.endswith("\r"):
                text = text[:-1]
            yield Line(text, pos, lineno)
            lineno += 1
            pos = end + 1

    def classify(
        self,
        content: str,
        *,
        paragraph_open: bool = False,
        open_list: ListMarker | None = None,
    ) -> BlockStart | None:
        """Classify ``content`` (indentation already consumed).

        Order matters: fences before list markers (``:::`` vs ``:``),
        thematic breaks before bullets (``- - -`` vs ``-``).

        Args:
            content: Unconsumed part of the line, starting at a non-space
            paragraph_open: A paragraph is open and would otherwise take the
                line lazily; constructs that cannot interrupt a paragraph
                are not offered.
            open_list: Marker of the innermost open list, which settles
                ambiguous enumerators and lets its own numbering style
                interrupt a paragraph

        Returns:
            BlockStart if a block marker was recognised, None otherwise.
        """
        if not content:
            return None

        first = content[0]

        if first in "`~":
            return self._try_classify_code_fence(content)

        if first == ":":
            div = self._try_classify_div_fence(content)
            if div is not None:
                return div

        if first in "*-":
            brk = self._try_classify_thematic_break(content)
            if brk is not None:
                return brk

        if first == "#":
            heading = self._try_classify_heading(content)
            if heading is not None:
                return heading

        if first == ">":
            return self._try_classify_block_quote(content)

        item = self._try_classify_list_marker(
            content, paragraph_open=paragraph_open, open_list=open_list
        )
        if item is not None:
            return item

        if paragraph_open:
            return None

        if first == "[":
            return self._try_classify_footnote_def(content) or self._try_classify_reference_def(
                content
            )

        if first == "|":
            return self._try_classify_table_row(content)

        if first == "^":
            return self._try_classify_caption(content)

        if first == "{":
            return self._try_classify_attributes(content)

        return None
