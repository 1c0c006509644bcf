"""Pipe table building.

The block scanner only collects row lines; this module splits them into
cells and applies separator rows:

    | a  |  b |
    |:---|---:|     <- separator: row above becomes a header, sets alignment
    | 1  |  2 |
    ^ caption

A separator row turns the row before it into a header row and sets the
alignment of every column from there on (until the next separator).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from gotita.location import TextSpan
from gotita.nodes import Inline, Table, TableCell, TableRow

type Alignment = Literal["left", "center", "right"] | None


def split_cells(row: str) -> list[tuple[int, int]]:
    """Return (start, end) ranges of the cells of ``row``, content stripped.

    ``row`` starts and ends with ``|``. Escaped pipes and pipes inside
    verbatim spans do not split.

    Examples:
        >>> row = "| a | `x|y` |"
        >>> [row[s:e] for s, e in split_cells(row)]
        ['a', '`x|y`']
    """
    cells: list[tuple[int, int]] = []
    pos = 1
    start = 1
    length = len(row)
    while pos < length:
        char = row[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "`":
            run_end = pos
            while run_end < length and row[run_end] == "`":
                run_end += 1
            closer = row.find(row[pos:run_end], run_end)
            # An unmatched backtick run is literal text
            pos = closer + (run_end - pos) if closer != -1 else run_end
            continue
        if char == "|":
            cells.append(_strip_range(row, start, pos))
            start = pos + 1
        pos += 1
    return cells


def _strip_range(text: str, start: int, end: int) -> tuple[int, int]:
    while start < end and text[start] in " \t":
        start += 1
    while end > start and text[end - 1] in " \t":
        end -= 1
    return start, end


def separator_alignments(cells: list[str]) -> list[Alignment] | None:
    """Alignments if every cell is a separator (``---``, ``:--``, ``--:``, ``:-:``).

    Examples:
        >>> separator_alignments([":--", "--:", ":-:", "---"])
        ['left', 'right', 'center', None]
        >>> separator_alignments(["--", "x"]) is None
        True
    """
    alignments: list[Alignment] = []
    for cell in cells:
        core = cell.strip(":")
        if not cell or not core or core.strip("-"):
            return None
        left = cell.startswith(":")
        right = cell.endswith(":")
        if left and right:
            alignments.append("center")
        elif left:
            alignments.append("left")
        elif right:
            alignments.append("right")
        else:
            alignments.append(None)
    return alignments


def build_table(
    rows: list[TextSpan],
    caption: TextSpan | None,
    parse_inlines: Callable[[TextSpan], tuple[Inline, ...]],
    **node_fields,
) -> Table:
    """Build a Table node from row spans.

    Args:
        rows: One single-line span per ``|...|`` row
        caption: Caption span, if any
        parse_inlines: Inline scanner for cell content
        **node_fields: ``location`` and ``attributes`` of the table

    Returns:
        Table node (separator rows themselves are dropped)
    """
    built: list[TableRow] = []
    alignments: list[Alignment] = []

    for row in rows:
        text = row.text
        ranges = split_cells(text)
        separator = separator_alignments([text[s:e] for s, e in ranges])
        if separator is not None:
            alignments = separator
            if built and not built[-1].is_header:
                previous = built[-1]
                built[-1] = TableRow(
                    location=previous.location,
                    cells=tuple(
                        TableCell(
                            location=cell.location,
                            children=cell.children,
                            is_header=True,
                            align=_align(alignments, index),
                        )
                        for index, cell in enumerate(previous.cells)
                    ),
                    is_header=True,
                )
            continue

        cells = tuple(
            TableCell(
                location=row.location(start, end),
                children=parse_inlines(row.slice(start, end)),
                align=_align(alignments, index),
            )
            for index, (start, end) in enumerate(ranges)
        )
        built.append(TableRow(location=row.whole(), cells=cells))

    return Table(
        rows=tuple(built),
        caption=parse_inlines(caption) if caption is not None else None,
        **node_fields,
    )


def _align(alignments: list[Alignment], index: int) -> Alignment:
    return alignments[index] if index < len(alignments) else None
