"""Turn the finished frame tree into frozen AST nodes.

This is where inline scanning happens: every paragraph, heading, table
cell and caption span goes through the inline scanner while its block
node is created. Children are built with an explicit work stack, so deep
nesting never recurses.

Reference and footnote definitions leave the block flow here and are
collected into the Document's tables instead.
"""

from __future__ import annotations

from collections.abc import Callable

from gotita.location import TextSpan
from gotita.nodes import (
    Block,
    BlockQuote,
    CodeBlock,
    Div,
    Document,
    FootnoteDef,
    Heading,
    Inline,
    List,
    ListItem,
    Paragraph,
    RawBlock,
    Reference,
    ThematicBreak,
)
from gotita.parsing.blocks.table import build_table
from gotita.parsing.containers import Frame, FrameKind

# Frames that never appear in the block flow
_OUT_OF_FLOW = frozenset({FrameKind.REFERENCE, FrameKind.FOOTNOTE, FrameKind.ATTRIBUTES})


class TreeBuilder:
    """Build a Document from scanner output.

    Usage:
        builder = TreeBuilder(parse_inlines, source_file="notes.dj")
        document = builder.build(root, scanner.references, scanner.footnotes)

    """

    __slots__ = ("_parse_inlines", "_source_file")

    def __init__(
        self,
        parse_inlines: Callable[[TextSpan], tuple[Inline, ...]],
        source_file: str | None = None,
    ) -> None:
        self._parse_inlines = parse_inlines
        self._source_file = source_file

    def build(
        self,
        root: Frame,
        references: dict[str, Frame],
        footnotes: dict[str, Frame],
    ) -> Document:
        """Build the document node (warnings are attached by the caller)."""
        return Document(
            root.location(self._source_file),
            children=self._blocks(root),
            references={
                key: Reference(
                    frame.location(self._source_file),
                    label=frame.label,
                    destination=frame.info,
                    attributes=frame.attributes,
                )
                for key, frame in references.items()
            },
            footnotes={
                label: FootnoteDef(
                    frame.location(self._source_file),
                    label=label,
                    children=self._blocks(frame),
                    attributes=frame.attributes,
                )
                for label, frame in footnotes.items()
            },
        )

    def _blocks(self, container: Frame) -> tuple[Block, ...]:
        """Build the in-flow children of ``container``.

        Uses a work stack of (frame, built children) pairs: a container is
        finished once all of its own children have been built.
        """
        work: list[tuple[Frame, list[Block], int]] = [(container, [], 0)]
        while True:
            frame, built, index = work[-1]
            children = frame.children
            while index < len(children):
                child = children[index]
                index += 1
                if child.kind in _OUT_OF_FLOW:
                    continue
                if child.is_container:
                    work[-1] = (frame, built, index)
                    work.append((child, [], 0))
                    break
                node = self._leaf(child)
                if node is not None:
                    built.append(node)
            else:
                work.pop()
                if not work:
                    return tuple(built)
                parent_built = work[-1][1]
                parent_built.append(self._container(frame, tuple(built)))

    def _leaf(self, frame: Frame) -> Block | None:
        location = frame.location(self._source_file)
        match frame.kind:
            case FrameKind.PARAGRAPH:
                inlines = self._inlines(frame.span)
                if not inlines:
                    return None
                return Paragraph(location, children=inlines, attributes=frame.attributes)
            case FrameKind.HEADING:
                return Heading(
                    location,
                    level=frame.level,  # type: ignore[arg-type]
                    children=self._inlines(frame.span),
                    attributes=frame.attributes,
                )
            case FrameKind.CODE:
                code = "".join(line + "\n" for line in frame.lines)
                if frame.info.startswith("="):
                    return RawBlock(
                        location, format=frame.info[1:], content=code, attributes=frame.attributes
                    )
                return CodeBlock(
                    location,
                    code=code,
                    language=frame.info or None,
                    attributes=frame.attributes,
                )
            case FrameKind.THEMATIC_BREAK:
                return ThematicBreak(location, attributes=frame.attributes)
            case FrameKind.TABLE:
                return build_table(
                    frame.rows,
                    frame.caption,
                    self._parse_inlines,
                    location=location,
                    attributes=frame.attributes,
                )
        return None

    def _container(self, frame: Frame, children: tuple[Block, ...]) -> Block:
        location = frame.location(self._source_file)
        attributes = frame.attributes
        match frame.kind:
            case FrameKind.BLOCK_QUOTE:
                return BlockQuote(location, children=children, attributes=attributes)
            case FrameKind.DIV:
                return Div(location, children=children, attributes=attributes)
            case FrameKind.LIST:
                marker = frame.marker
                assert marker is not None
                items = tuple(child for child in children if isinstance(child, ListItem))
                return List(
                    location,
                    items=items,
                    kind=marker.kind,  # type: ignore[arg-type]
                    tight=frame.tight,
                    start=marker.number,
                    style=marker.style,
                    attributes=attributes,
                )
            case FrameKind.LIST_ITEM:
                return self._list_item(frame, children)
        raise ValueError(f"not a container frame: {frame!r}")

    def _list_item(self, frame: Frame, children: tuple[Block, ...]) -> ListItem:
        marker = frame.marker
        assert marker is not None
        term = None
        if marker.kind == "definition":
            if children and isinstance(children[0], Paragraph):
                term = children[0].children
                children = children[1:]
            else:
                term = ()
        return ListItem(
            frame.location(self._source_file),
            children=children,
            checked=marker.checked,
            term=term,
            attributes=frame.attributes,
        )

    def _inlines(self, span: TextSpan | None) -> tuple[Inline, ...]:
        if span is None:
            return ()
        return self._parse_inlines(span)
