"""Event stream renderer.

Flattens a Document into the djot event list: one enter/exit pair per
container node and one event per leaf, each carrying 1-based source
offsets. The JSON form is a list of ``[tag, start, end]`` triples:

    >>> from gotita.parser import Parser
    >>> EventRenderer().render(Parser("# hi\\n").parse())
    '[["+heading", 1, 1], ["str", 3, 4], ["-heading", 4, 4]]'

Enter events point at the node's first character, exit events at its
last; a leaf spans both. Footnote definitions follow the document body.

Thread Safety:
    EventRenderer holds no state; events() builds a fresh list per call.
"""

from __future__ import annotations

import json
from typing import NamedTuple

from gotita.nodes import (
    BlockQuote,
    CodeBlock,
    Delete,
    Div,
    Document,
    DoubleQuoted,
    Emphasis,
    FootnoteDef,
    FootnoteRef,
    Heading,
    Image,
    Inline,
    Insert,
    LineBreak,
    Link,
    List,
    ListItem,
    Mark,
    Math,
    Node,
    Paragraph,
    RawBlock,
    RawInline,
    SingleQuoted,
    SoftBreak,
    Span,
    Strong,
    Subscript,
    Superscript,
    Symbol,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Verbatim,
)

_CONTAINER_TAGS: dict[type, str] = {
    Paragraph: "para",
    Heading: "heading",
    BlockQuote: "blockquote",
    Div: "div",
    ListItem: "list_item",
    Table: "table",
    TableRow: "row",
    TableCell: "cell",
    FootnoteDef: "footnote",
    Emphasis: "emph",
    Strong: "strong",
    Superscript: "superscript",
    Subscript: "subscript",
    Mark: "mark",
    Insert: "insert",
    Delete: "delete",
    DoubleQuoted: "double_quoted",
    SingleQuoted: "single_quoted",
    Span: "span",
    Link: "link",
    Image: "image",
}

_LEAF_TAGS: dict[type, str] = {
    Text: "str",
    CodeBlock: "code_block",
    RawBlock: "raw_block",
    ThematicBreak: "thematic_break",
    Verbatim: "verbatim",
    RawInline: "raw_inline",
    Symbol: "symb",
    FootnoteRef: "footnote_reference",
    LineBreak: "hard_break",
    SoftBreak: "soft_break",
}


class Event(NamedTuple):
    """One entry of the event stream (serializes as a JSON array)."""

    tag: str
    start: int
    end: int


class _Caption(NamedTuple):
    """Stand-in container for a table caption, which is not a node."""

    children: tuple[Inline, ...]


def _children(node: Node | _Caption) -> tuple | None:
    """Child sequence of a container, None for leaves."""
    match node:
        case _Caption(children=children):
            return children
        case List(items=items):
            return items
        case ListItem(children=children, term=term):
            return (*term, *children) if term else children
        case Table(rows=rows, caption=caption):
            return (*rows, _Caption(caption)) if caption else rows
        case TableRow(cells=cells):
            return cells
        case Math():
            return None
    if type(node) in _CONTAINER_TAGS:
        return node.children  # type: ignore[union-attr]
    return None


def _tag(node: Node | _Caption) -> str:
    match node:
        case _Caption():
            return "caption"
        case List(kind=kind):
            return f"{kind}_list"
        case Math(display=display):
            return "display_math" if display else "inline_math"
    tag = _CONTAINER_TAGS.get(type(node)) or _LEAF_TAGS.get(type(node))
    return tag or type(node).__name__.lower()


def _span(node: Node | _Caption) -> tuple[int, int]:
    """(first, last) 1-based offsets of the node's source text."""
    if isinstance(node, _Caption):
        first = _span(node.children[0])[0]
        last = _span(node.children[-1])[1]
        return first, last
    location = node.location
    return location.offset + 1, max(location.end_offset, location.offset + 1)


class EventRenderer:
    """Render a Document as a flat list of source-anchored events.

    Usage:
        events = EventRenderer().events(doc)
        json_text = EventRenderer().render(doc)

    """

    __slots__ = ()

    def events(self, node: Document) -> list[Event]:
        """Flatten ``node`` into events without recursion."""
        out: list[Event] = []
        top = (*node.children, *node.footnotes.values())
        stack: list[tuple[Node | _Caption, bool]] = [(child, False) for child in reversed(top)]
        while stack:
            current, done = stack.pop()
            first, last = _span(current)
            tag = _tag(current)
            if done:
                out.append(Event(f"-{tag}", last, last))
                continue
            children = _children(current)
            if children is None:
                out.append(Event(tag, first, last))
                continue
            out.append(Event(f"+{tag}", first, first))
            stack.append((current, True))
            stack.extend((child, False) for child in reversed(children))
        return out

    def render(self, node: Document) -> str:
        """The event list as compact JSON."""
        return json.dumps([list(event) for event in self.events(node)])
