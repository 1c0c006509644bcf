"""Block-start records produced by the line classifiers.

A classifier looks at the unconsumed part of a line and either returns a
BlockStart describing the construct it recognised or ``None`` ("fell
through"). Falling through is the normal case, so there is no exception
path: the block scanner tries the next classifier and finally treats the
line as paragraph text.

Thread Safety:
BlockStart and ListMarker are immutable; BlockType is an enum.

"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple

from gotita.attributes import EMPTY_ATTRIBUTES, Attributes


class BlockType(Enum):
    """Kinds of block starts, in the order they are tried."""

    CODE_FENCE = auto()  # ``` or ~~~
    DIV_FENCE = auto()  # :::
    THEMATIC_BREAK = auto()  # * * * or ---
    HEADING = auto()  # # Heading
    BLOCK_QUOTE = auto()  # >
    LIST_ITEM = auto()  # -, +, *, 1., a), (i), :, - [ ]
    FOOTNOTE_DEF = auto()  # [^label]:
    REFERENCE_DEF = auto()  # [label]: url
    TABLE_ROW = auto()  # | a | b |
    CAPTION = auto()  # ^ caption
    ATTRIBUTES = auto()  # {#id .class}


class ListMarker(NamedTuple):
    """Parsed list marker.

    Attributes:
        kind: "bullet", "ordered", "task" or "definition"
        style: Marker shape shared by sibling items ("-", "1.", "(a)", ":")
        number: Ordinal value of ordered markers (1 otherwise)
        checked: Task state for task markers

    """

    kind: str
    style: str
    number: int = 1
    checked: bool | None = None


@dataclass(frozen=True, slots=True)
class BlockStart:
    """A recognised block start.

    Attributes:
        type: What was recognised
        width: Characters of the line consumed by the marker (including the
            single space after it where one is required)
        text: Remaining payload (heading text, fence info, reference URL ...)
        level: Heading level
        fence_char: Fence character for code and div fences
        fence_length: Fence run length
        marker: List marker details
        label: Reference or footnote label
        attributes: Parsed attribute-line content
        incomplete: Attribute line that continues on the next line

    """

    type: BlockType
    width: int = 0
    text: str = ""
    level: int = 0
    fence_char: str = ""
    fence_length: int = 0
    marker: ListMarker | None = None
    label: str = ""
    attributes: Attributes = EMPTY_ATTRIBUTES
    incomplete: bool = False

    def __repr__(self) -> str:
        text = self.text if len(self.text) <= 20 else self.text[:17] + "..."
        return f"BlockStart({self.type.name}, {text!r})"
