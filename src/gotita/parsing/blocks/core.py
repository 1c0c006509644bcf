"""Line-oriented block scanner.

Consumes the input one line at a time and maintains the tree of open
frames (see gotita.parsing.containers). For every line:

1. Open containers are matched from the outside in: a block quote needs
   its ``>``, a list item or footnote needs indentation past its marker,
   lists and divs always continue.
2. A line inside an open code block goes to the code block verbatim.
3. A closing ``:::`` closes the innermost matched div.
4. Blank lines close the open leaf and mark open lists.
5. A plain line that failed some continuation but follows paragraph text
   is a lazy continuation of that paragraph.
6. Otherwise unmatched containers close, and new block starts are
   classified until a leaf takes the rest of the line.

Inline content is gathered into TextSpans and left unparsed; the inline
scanner only runs after the last line has been consumed.

Thread Safety:
BlockScanner instances are single-use and never shared.

"""

from __future__ import annotations

from gotita.attributes import ScanStatus, scan_attributes
from gotita.diagnostics import Diagnostics, WarningKind
from gotita.lexer import Lexer, Line
from gotita.lexer.classifiers import is_closing_div, is_closing_fence, quote_marker_width
from gotita.location import TextSpan
from gotita.parsing.containers import INDENTED_KINDS, ContainerStack, Frame, FrameKind
from gotita.tokens import BlockStart, BlockType, ListMarker
from gotita.utils.logger import get_logger
from gotita.utils.text import normalize_label

logger = get_logger(__name__)

_TEXT_LEAVES = frozenset({FrameKind.PARAGRAPH, FrameKind.HEADING})


def _same_list(marker: ListMarker | None, other: ListMarker) -> bool:
    """True if an item with ``other`` continues a list started with ``marker``."""
    return marker is not None and marker.kind == other.kind and marker.style == other.style


def _blank_from(text: str, pos: int) -> bool:
    """True if ``text[pos:]`` is whitespace; ``pos`` is already past spaces and tabs."""
    return pos == len(text) or (text[pos].isspace() and not text[pos:].strip())


class BlockScanner:
    """Build the open-block tree for one source string.

    Usage:
        >>> scanner = BlockScanner("> quote\\n\\n- item")
        >>> document = scanner.scan()
        >>> [child.kind.name for child in document.children]
        ['BLOCK_QUOTE', 'LIST']

    """

    __slots__ = (
        "_lexer",
        "_source_len",
        "_source_file",
        "_diagnostics",
        "_stack",
        "_references",
        "_footnotes",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        """Initialize scanner.

        Args:
            source: Djot source text
            source_file: Optional source file path for locations
            diagnostics: Warning collector shared with later stages
        """
        self._lexer = Lexer(source)
        self._source_len = len(source)
        self._source_file = source_file
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._stack = ContainerStack(Frame(FrameKind.DOCUMENT, 0, 1, 1))
        self._references: dict[str, Frame] = {}
        self._footnotes: dict[str, Frame] = {}

    @property
    def references(self) -> dict[str, Frame]:
        """Reference definition frames by normalized label (first wins)."""
        return self._references

    @property
    def footnotes(self) -> dict[str, Frame]:
        """Footnote definition frames by label (first wins)."""
        return self._footnotes

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    def scan(self) -> Frame:
        """Consume every line and return the finished document frame."""
        for line in self._lexer.lines():
            self._add_line(line)
        self._close_frames(1)
        document = self._stack.document
        self._close_leaf(document)
        document.touch(self._source_len, document.end_lineno)
        logger.debug(
            "Scanned %d top-level blocks, %d references, %d footnotes",
            len(document.children),
            len(self._references),
            len(self._footnotes),
        )
        return document

    # =========================================================================
    # Per-line driver
    # =========================================================================

    def _add_line(self, line: Line) -> None:
        stack = self._stack
        matched = self._match_containers(line)
        all_matched = matched == len(stack)
        leaf = stack.innermost.leaf
        blank = line.is_blank()

        if leaf is not None and leaf.kind is FrameKind.CODE and all_matched:
            self._add_code_line(leaf, line)
            return

        if not blank and self._close_div(line, matched):
            return

        if leaf is not None and all_matched and not blank:
            if leaf.kind is FrameKind.ATTRIBUTES:
                self._add_attribute_line(stack.innermost, leaf, line)
                return
            if leaf.kind is FrameKind.REFERENCE and line.indent() > 0:
                line.skip_indent()
                leaf.lines.append(line.rest.strip())
                self._touch(line)
                return

        if blank:
            self._close_frames(matched)
            self._close_leaf(stack.innermost)
            for frame in stack.lists():
                frame.blank_pending = True
            return

        self._update_tightness(line, matched)

        if not all_matched and leaf is not None and leaf.kind is FrameKind.PARAGRAPH:
            rest = line.rest.lstrip(" \t")
            start = self._lexer.classify(rest, paragraph_open=True, open_list=self._open_list())
            if start is None:
                self._append_text(leaf, line)
                self._finish_line(line)
                return

        self._close_frames(matched)
        self._open_blocks(line)
        self._finish_line(line)

    def _match_containers(self, line: Line) -> int:
        """Consume container prefixes; return how many frames matched."""
        stack = self._stack
        text = line.text
        matched = 1
        # Where the line's content starts; only a quote marker moves it
        first, first_col = line.peek_indent()
        blank = _blank_from(text, first)
        for index in range(1, len(stack)):
            frame = stack[index]
            kind = frame.kind
            if kind is FrameKind.BLOCK_QUOTE:
                width = quote_marker_width(text[first : first + 2])
                if not width:
                    break
                line.skip_indent()
                line.advance(width)
                first, first_col = line.peek_indent()
                blank = _blank_from(text, first)
            elif kind in INDENTED_KINDS:
                if not blank:
                    if first_col <= frame.marker_col:
                        break
                    line.skip_indent(max(frame.content_col - line.col, 0))
            matched += 1
        return matched

    def _update_tightness(self, line: Line, matched: int) -> None:
        """A list that receives content after a blank line becomes loose.

        The receiver is the innermost matched list, unless that list is
        about to end: then the content lands in the enclosing item.
        """
        stack = self._stack
        innermost = stack[matched - 1]
        if innermost.kind is FrameKind.LIST and innermost.blank_pending:
            start = self._lexer.classify(line.rest.lstrip(" \t"), open_list=innermost.marker)
            if (
                start is not None
                and start.type is BlockType.LIST_ITEM
                and start.marker is not None
                and _same_list(innermost.marker, start.marker)
            ):
                # Sibling item; _open_list_item settles it
                return
        for index in range(matched - 2, -1, -1):
            frame = stack[index]
            if frame.kind is FrameKind.LIST:
                if frame.blank_pending:
                    frame.tight = False
                return

    def _finish_line(self, line: Line) -> None:
        for frame in self._stack.lists():
            frame.blank_pending = False
        self._touch(line)

    def _touch(self, line: Line) -> None:
        end = line.offset + len(line.text)
        for frame in self._stack:
            frame.touch(end, line.lineno)
        leaf = self._stack.innermost.leaf
        if leaf is not None:
            leaf.touch(end, line.lineno)

    def _open_list(self) -> ListMarker | None:
        """Marker of the innermost open list."""
        for frame in reversed(self._stack):
            if frame.kind is FrameKind.LIST:
                return frame.marker
        return None

    # =========================================================================
    # Block starts
    # =========================================================================

    def _open_blocks(self, line: Line) -> None:
        """Classify the rest of the line, opening blocks until a leaf takes it."""
        stack = self._stack
        while True:
            container = stack.innermost
            line.skip_indent()
            rest = line.rest
            if not rest.strip():
                return

            leaf = container.leaf
            paragraph_open = leaf is not None and leaf.kind in _TEXT_LEAVES
            start = self._lexer.classify(
                rest, paragraph_open=paragraph_open, open_list=self._open_list()
            )
            if container.kind is FrameKind.LIST and (
                start is None or start.type is not BlockType.LIST_ITEM
            ):
                # Only items live directly in a list
                self._close_frames(len(stack) - 1)
                container = stack.innermost
            if start is None:
                self._add_text(container, line)
                return

            match start.type:
                case BlockType.CODE_FENCE:
                    self._close_leaf(container)
                    self._new_leaf(
                        container,
                        FrameKind.CODE,
                        line,
                        info=start.text,
                        fence_char=start.fence_char,
                        fence_length=start.fence_length,
                    )
                    line.consume_all()
                    return

                case BlockType.DIV_FENCE:
                    div = self._push(
                        FrameKind.DIV,
                        line,
                        info=start.text,
                        fence_char=":",
                        fence_length=start.fence_length,
                    )
                    if start.text:
                        div.attributes = div.attributes.with_value("class", start.text)
                    line.consume_all()
                    return

                case BlockType.THEMATIC_BREAK:
                    self._close_leaf(container)
                    self._new_leaf(container, FrameKind.THEMATIC_BREAK, line)
                    container.leaf = None
                    line.consume_all()
                    return

                case BlockType.HEADING:
                    self._open_heading(container, line, start)
                    return

                case BlockType.BLOCK_QUOTE:
                    self._push(FrameKind.BLOCK_QUOTE, line)
                    line.advance(start.width)

                case BlockType.LIST_ITEM:
                    self._open_list_item(line, start)

                case BlockType.FOOTNOTE_DEF:
                    self._open_footnote(line, start)

                case BlockType.REFERENCE_DEF:
                    self._close_leaf(container)
                    reference = self._new_leaf(
                        container, FrameKind.REFERENCE, line, label=start.label
                    )
                    if start.text:
                        reference.lines.append(start.text)
                    line.consume_all()
                    return

                case BlockType.TABLE_ROW:
                    self._add_table_row(container, line, start)
                    return

                case BlockType.CAPTION:
                    self._add_caption(container, line, start)
                    return

                case BlockType.ATTRIBUTES:
                    self._close_leaf(container)
                    if start.incomplete:
                        draft = Frame(
                            FrameKind.ATTRIBUTES, line.source_offset, line.lineno, line.pos + 1
                        )
                        draft.span = TextSpan(source_file=self._source_file)
                        self._add_segment(draft.span, line)
                        container.leaf = draft
                    else:
                        container.pending = container.pending.merge(start.attributes)
                    line.consume_all()
                    return

    def _new_leaf(self, container: Frame, kind: FrameKind, line: Line, **fields) -> Frame:
        """Append a new open leaf to ``container``; it takes pending attributes."""
        frame = Frame(
            kind,
            line.source_offset,
            line.lineno,
            line.pos + 1,
            attributes=container.take_pending(),
            **fields,
        )
        frame.touch(line.offset + len(line.text), line.lineno)
        container.children.append(frame)
        container.leaf = frame
        return frame

    def _push(self, kind: FrameKind, line: Line, **fields) -> Frame:
        """Open a new container inside the innermost one."""
        container = self._stack.innermost
        self._close_leaf(container)
        frame = Frame(
            kind,
            line.source_offset,
            line.lineno,
            line.pos + 1,
            attributes=container.take_pending(),
            **fields,
        )
        frame.touch(line.offset + len(line.text), line.lineno)
        self._stack.push(frame)
        return frame

    def _open_heading(self, container: Frame, line: Line, start: BlockStart) -> None:
        leaf = container.leaf
        if leaf is not None and leaf.kind is FrameKind.HEADING and leaf.level == start.level:
            # "# " prefix repeated on a continuation line
            line.advance(start.width)
            self._append_text(leaf, line)
            return
        self._close_leaf(container)
        heading = self._new_leaf(container, FrameKind.HEADING, line, level=start.level)
        heading.span = TextSpan(source_file=self._source_file)
        line.advance(start.width)
        self._append_text(heading, line)

    def _open_list_item(self, line: Line, start: BlockStart) -> None:
        stack = self._stack
        marker = start.marker
        container = stack.innermost
        if container.kind is FrameKind.LIST and _same_list(container.marker, marker):
            if container.blank_pending:
                container.tight = False
        else:
            if container.kind is FrameKind.LIST:
                self._close_frames(len(stack) - 1)
            self._push(FrameKind.LIST, line, marker=marker)

        marker_col = line.col
        item = self._push(FrameKind.LIST_ITEM, line, marker=marker, marker_col=marker_col)
        line.advance(start.width)
        if line.is_blank():
            item.content_col = marker_col + 2
        else:
            item.content_col = line.col + line.indent()

    def _open_footnote(self, line: Line, start: BlockStart) -> None:
        marker_col = line.col
        footnote = self._push(FrameKind.FOOTNOTE, line, label=start.label, marker_col=marker_col)
        line.advance(start.width)
        footnote.content_col = marker_col + 2 if line.is_blank() else line.col + line.indent()
        if start.label in self._footnotes:
            self._diagnostics.warn(
                WarningKind.DUPLICATE_REFERENCE_LABEL,
                footnote.location(self._source_file),
                f"duplicate footnote label '{start.label}' ignored",
            )
        else:
            self._footnotes[start.label] = footnote

    def _add_table_row(self, container: Frame, line: Line, start: BlockStart) -> None:
        leaf = container.leaf
        if leaf is not None and leaf.kind is FrameKind.TABLE:
            table = leaf
        else:
            self._close_leaf(container)
            table = self._new_leaf(container, FrameKind.TABLE, line)
        row = TextSpan(source_file=self._source_file)
        row.add(start.text, offset=line.source_offset, lineno=line.lineno, col=line.pos + 1)
        table.rows.append(row)
        line.consume_all()

    def _add_caption(self, container: Frame, line: Line, start: BlockStart) -> None:
        table = container.leaf
        if table is None and container.children:
            table = container.children[-1]
        if table is None or table.kind is not FrameKind.TABLE or table.caption is not None:
            self._add_text(container, line)
            return
        container.leaf = None
        line.advance(start.width)
        table.caption = TextSpan(source_file=self._source_file)
        self._add_segment(table.caption, line)
        table.caption.rstrip_last()
        table.touch(line.offset + len(line.text), line.lineno)

    # =========================================================================
    # Leaf content
    # =========================================================================

    def _add_text(self, container: Frame, line: Line) -> None:
        leaf = container.leaf
        if leaf is None or leaf.kind not in _TEXT_LEAVES:
            self._close_leaf(container)
            leaf = self._new_leaf(container, FrameKind.PARAGRAPH, line)
            leaf.span = TextSpan(source_file=self._source_file)
        self._append_text(leaf, line)

    def _append_text(self, leaf: Frame, line: Line) -> None:
        assert leaf.span is not None
        self._add_segment(leaf.span, line)
        leaf.touch(line.offset + len(line.text), line.lineno)

    @staticmethod
    def _add_segment(span: TextSpan, line: Line) -> None:
        line.skip_indent()
        span.add(line.rest, offset=line.source_offset, lineno=line.lineno, col=line.pos + 1)
        line.consume_all()

    def _add_code_line(self, code: Frame, line: Line) -> None:
        if is_closing_fence(line.rest.lstrip(" \t"), code.fence_char, code.fence_length):
            code.closed_by_fence = True
            self._touch(line)
            self._stack.innermost.leaf = None
            return
        code.lines.append(line.rest)
        self._touch(line)

    def _add_attribute_line(self, container: Frame, draft: Frame, line: Line) -> None:
        assert draft.span is not None
        self._add_segment(draft.span, line)
        draft.touch(line.offset + len(line.text), line.lineno)
        text = draft.span.text
        scan = scan_attributes(text, 0)
        if scan.status is ScanStatus.INCOMPLETE:
            return
        if scan.status is ScanStatus.MATCHED and not text[scan.end :].strip():
            container.leaf = None
            container.pending = container.pending.merge(scan.attributes)
            return
        self._demote_attributes(container, draft)

    def _demote_attributes(self, container: Frame, draft: Frame) -> Frame:
        """Turn an attribute block that never parsed into paragraph text."""
        paragraph = Frame(
            FrameKind.PARAGRAPH,
            draft.offset,
            draft.lineno,
            draft.col,
            end_offset=draft.end_offset,
            end_lineno=draft.end_lineno,
            attributes=container.take_pending(),
            span=draft.span,
        )
        container.children.append(paragraph)
        container.leaf = paragraph
        return paragraph

    # =========================================================================
    # Closing
    # =========================================================================

    def _close_div(self, line: Line, matched: int) -> bool:
        """Close the innermost matched div if the line is its closing fence."""
        content = line.rest.lstrip(" \t")
        if not content.startswith(":::"):
            return False
        stack = self._stack
        for index in range(matched - 1, 0, -1):
            frame = stack[index]
            if frame.kind is FrameKind.DIV:
                if not is_closing_div(content, frame.fence_length):
                    return False
                self._touch(line)
                frame.closed_by_fence = True
                self._close_frames(index)
                self._finish_line(line)
                return True
        return False

    def _close_frames(self, keep: int) -> None:
        """Close containers until only ``keep`` frames remain on the stack."""
        stack = self._stack
        while len(stack) > keep:
            frame = stack.innermost
            self._close_leaf(frame)
            stack.pop()
            if frame.kind is FrameKind.DIV and not frame.closed_by_fence:
                self._diagnostics.warn(
                    WarningKind.UNCLOSED_FENCE,
                    frame.location(self._source_file),
                    "div opened here is never closed",
                )

    def _close_leaf(self, container: Frame) -> None:
        leaf = container.leaf
        if leaf is None:
            return
        container.leaf = None
        match leaf.kind:
            case FrameKind.ATTRIBUTES:
                self._demote_attributes(container, leaf)
                container.leaf = None
                assert leaf.span is not None
                leaf.span.rstrip_last()
            case FrameKind.PARAGRAPH | FrameKind.HEADING:
                assert leaf.span is not None
                leaf.span.rstrip_last()
            case FrameKind.CODE:
                if not leaf.closed_by_fence:
                    self._diagnostics.warn(
                        WarningKind.UNCLOSED_FENCE,
                        leaf.location(self._source_file),
                        "code fence opened here is never closed",
                    )
            case FrameKind.REFERENCE:
                self._register_reference(leaf)

    def _register_reference(self, frame: Frame) -> None:
        frame.info = "".join(frame.lines)
        key = normalize_label(frame.label)
        if key in self._references:
            self._diagnostics.warn(
                WarningKind.DUPLICATE_REFERENCE_LABEL,
                frame.location(self._source_file),
                f"duplicate reference label '{frame.label}' ignored",
            )
            return
        self._references[key] = frame
