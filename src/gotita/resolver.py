"""Second pass over the built tree: references, anchors and footnotes.

Runs after every block and inline has been scanned, so a link may use a
reference defined further down the document, or a heading that appears
later.

What gets resolved:
- ``[text][label]`` and ``[text][]`` links and images are bound to a
  reference definition (its attributes, ``title`` most commonly, merge
  into the link). Failing that, a heading whose text matches the label
  serves as an implicit reference. Anything else is marked ``dangling``
  and reported once per occurrence.
- Every heading receives a unique anchor; an explicit ``{#id}`` wins.
- Footnote references are numbered in order of first use. A reference to
  a footnote that is never defined keeps number 0 and is reported.

Thread Safety:
    A Resolver belongs to one parse. The input tree is never modified;
    ``resolve`` returns a new Document sharing untouched subtrees.

"""

from __future__ import annotations

import dataclasses

from gotita.diagnostics import Diagnostics, WarningKind
from gotita.nodes import Document, FootnoteRef, Heading, Image, Link, Node
from gotita.text import extract_text
from gotita.utils.logger import get_logger
from gotita.utils.text import make_identifier, normalize_label
from gotita.visitor import BaseVisitor, transform

logger = get_logger(__name__)


class _HeadingCollector(BaseVisitor[None]):
    """Collect headings in document order (footnote bodies last)."""

    def __init__(self) -> None:
        self.headings: list[Heading] = []

    def visit_heading(self, node: Heading) -> None:
        self.headings.append(node)


class Resolver:
    """Resolve references, heading anchors and footnote numbers.

    Usage:
        resolver = Resolver(document, diagnostics)
        document = resolver.resolve()

    """

    __slots__ = (
        "_document",
        "_diagnostics",
        "_anchors",
        "_implicit",
        "_heading_index",
        "_footnote_numbers",
    )

    def __init__(self, document: Document, diagnostics: Diagnostics | None = None) -> None:
        self._document = document
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._anchors: list[str] = []
        self._implicit: dict[str, str] = {}
        self._heading_index = 0
        self._footnote_numbers: dict[str, int] = {}

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    def resolve(self) -> Document:
        """Return the resolved document (warnings go to the diagnostics)."""
        self._assign_anchors()
        resolved = transform(self._document, self._resolve_node)
        logger.debug(
            "Resolved %d headings, %d footnotes", len(self._anchors), len(self._footnote_numbers)
        )
        return resolved

    def _assign_anchors(self) -> None:
        collector = _HeadingCollector()
        collector.visit(self._document)

        used: set[str] = set()
        for heading in collector.headings:
            explicit = heading.attributes.get("id")
            if explicit:
                used.add(explicit)

        for heading in collector.headings:
            text = extract_text(heading)
            anchor = heading.attributes.get("id") or make_identifier(text, used)
            self._anchors.append(anchor)
            self._implicit.setdefault(normalize_label(text), anchor)

    def _resolve_node(self, node: Node) -> Node:
        match node:
            case Heading():
                anchor = self._anchors[self._heading_index]
                self._heading_index += 1
                return dataclasses.replace(node, anchor=anchor)
            case Link() | Image() if node.reference is not None and node.destination is None:
                return self._resolve_reference(node)
            case FootnoteRef():
                return self._number_footnote(node)
        return node

    def _resolve_reference(self, node: Link | Image) -> Link | Image:
        label = node.reference or extract_text(node)
        key = normalize_label(label)

        definition = self._document.references.get(key)
        if definition is not None:
            return dataclasses.replace(
                node,
                destination=definition.destination,
                attributes=definition.attributes.merge(node.attributes),
            )

        anchor = self._implicit.get(key)
        if anchor is not None:
            return dataclasses.replace(node, destination=f"#{anchor}")

        self._diagnostics.warn(
            WarningKind.DANGLING_REFERENCE,
            node.location,
            f"Reference '{label}' is not defined",
        )
        return dataclasses.replace(node, dangling=True)

    def _number_footnote(self, node: FootnoteRef) -> FootnoteRef:
        if node.label not in self._document.footnotes:
            self._diagnostics.warn(
                WarningKind.DANGLING_REFERENCE,
                node.location,
                f"Footnote '{node.label}' is not defined",
            )
            return node
        number = self._footnote_numbers.setdefault(node.label, len(self._footnote_numbers) + 1)
        return dataclasses.replace(node, number=number)


def resolve(document: Document, diagnostics: Diagnostics | None = None) -> Document:
    """Resolve ``document`` in one call."""
    return Resolver(document, diagnostics).resolve()
