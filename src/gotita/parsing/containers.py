"""Open-block frames and the container stack used by the block scanner.

The scanner never recurses: nesting lives in an explicit stack of container
frames (document, block quote, list, list item, div, footnote). Each frame
owns its children in source order. Leaf blocks (paragraph, heading, code,
table, ...) are frames too, appended to their container when they open;
only the innermost container may hold an *open* leaf.

Frames are mutable while the scan runs and are turned into frozen nodes
by gotita.parsing.blocks.build once the whole input has been consumed.

Usage:
    stack = ContainerStack(Frame(FrameKind.DOCUMENT, 0, 1, 1))
    stack.push(Frame(FrameKind.BLOCK_QUOTE, 0, 1, 1))
    stack.innermost.kind
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from gotita.attributes import EMPTY_ATTRIBUTES, Attributes
from gotita.location import SourceLocation, TextSpan
from gotita.tokens import ListMarker


class FrameKind(Enum):
    """Kinds of open blocks."""

    # Containers
    DOCUMENT = auto()
    BLOCK_QUOTE = auto()
    LIST = auto()
    LIST_ITEM = auto()
    DIV = auto()
    FOOTNOTE = auto()

    # Leaves
    PARAGRAPH = auto()
    HEADING = auto()
    CODE = auto()
    THEMATIC_BREAK = auto()
    TABLE = auto()
    REFERENCE = auto()
    ATTRIBUTES = auto()  # attribute line still waiting for its "}"


CONTAINER_KINDS = frozenset(
    {
        FrameKind.DOCUMENT,
        FrameKind.BLOCK_QUOTE,
        FrameKind.LIST,
        FrameKind.LIST_ITEM,
        FrameKind.DIV,
        FrameKind.FOOTNOTE,
    }
)

# Containers whose continuation is decided by indentation
INDENTED_KINDS = frozenset({FrameKind.LIST_ITEM, FrameKind.FOOTNOTE})


@dataclass(slots=True, eq=False)
class Frame:
    """An open (or finished) block during the scan.

    Attributes:
        kind: What the frame is
        offset: Source offset where the block starts
        lineno: Line where the block starts
        col: 1-indexed column where the block starts
        end_offset: Source offset just past the last character seen
        end_lineno: Last line that contributed to the block
        attributes: Block attributes (from a preceding attribute line)
        children: Child frames in source order (containers only)
        leaf: Open leaf of this container
        pending: Attributes waiting for the next child block
        marker_col: Column of the list/footnote marker; continuation lines
            must be indented past it
        content_col: Column where item content starts
        marker: List marker (lists and list items)
        tight: List tightness
        blank_pending: A blank line was seen inside the list and nothing
            has followed it yet
        span: Inline text (paragraph, heading)
        lines: Raw lines (code blocks, attribute lines, reference URL parts)
        info: Fence info word, div class or reference destination
        fence_char: Character of the opening fence
        fence_length: Length of the opening fence
        level: Heading level
        label: Reference or footnote label
        rows: Row spans of a table
        caption: Caption span of a table
        closed_by_fence: Code block or div ended with a closing fence

    """

    kind: FrameKind
    offset: int
    lineno: int
    col: int
    end_offset: int = 0
    end_lineno: int = 0
    attributes: Attributes = EMPTY_ATTRIBUTES
    children: list[Frame] = field(default_factory=list)
    leaf: Frame | None = None
    pending: Attributes = EMPTY_ATTRIBUTES
    marker_col: int = 0
    content_col: int = 0
    marker: ListMarker | None = None
    tight: bool = True
    blank_pending: bool = False
    span: TextSpan | None = None
    lines: list[str] = field(default_factory=list)
    info: str = ""
    fence_char: str = ""
    fence_length: int = 0
    level: int = 0
    label: str = ""
    rows: list[TextSpan] = field(default_factory=list)
    caption: TextSpan | None = None
    closed_by_fence: bool = False

    def __repr__(self) -> str:
        return f"Frame({self.kind.name}, line {self.lineno})"

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS

    def touch(self, end_offset: int, lineno: int) -> None:
        """Extend the frame to cover source up to ``end_offset``."""
        if end_offset > self.end_offset:
            self.end_offset = end_offset
        if lineno > self.end_lineno:
            self.end_lineno = lineno

    def location(self, source_file: str | None = None) -> SourceLocation:
        """Source range covered by the frame."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col,
            offset=self.offset,
            end_offset=max(self.end_offset, self.offset),
            end_lineno=max(self.end_lineno, self.lineno),
            source_file=source_file,
        )

    def take_pending(self) -> Attributes:
        """Hand the pending attributes to a new child and clear them."""
        pending = self.pending
        self.pending = EMPTY_ATTRIBUTES
        return pending


class ContainerStack:
    """Stack of open container frames; the document frame is never popped.

    Thread Safety:
        Not thread-safe. Each scanner owns its own stack.
    """

    __slots__ = ("_frames",)

    def __init__(self, document: Frame) -> None:
        self._frames: list[Frame] = [document]

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    def __iter__(self):
        return iter(self._frames)

    @property
    def document(self) -> Frame:
        return self._frames[0]

    @property
    def innermost(self) -> Frame:
        return self._frames[-1]

    def push(self, frame: Frame) -> None:
        """Open ``frame`` as a child of the innermost container."""
        self._frames[-1].children.append(frame)
        self._frames.append(frame)

    def pop(self) -> Frame:
        """Remove and return the innermost container."""
        if len(self._frames) == 1:
            raise IndexError("cannot pop the document frame")
        return self._frames.pop()

    def lists(self) -> list[Frame]:
        """Open LIST frames, outermost first."""
        return [frame for frame in self._frames if frame.kind is FrameKind.LIST]
