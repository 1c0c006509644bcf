"""Composable sanitization policies for Gotita AST.

Provides immutable transform policies for stripping unsafe content before
rendering untrusted djot. Policies compose via the | operator.

Example:
    >>> from gotita import parse, render
    >>> from gotita.sanitize import sanitize, safe
    >>> doc = parse("[x](javascript:alert(1))")
    >>> render(sanitize(doc, policy=safe))
    '<p><span>x</span></p>\\n'
"""

import dataclasses
import re
from collections.abc import Callable, Iterable

from gotita.nodes import Document, Image, Link, Node, RawBlock, RawInline, Span, Text
from gotita.visitor import transform

# Zero-width and bidi override characters to strip (Trojan Source mitigation)
_NORMALIZE_UNICODE_PATTERN = re.compile(
    "[\u200b\u200c\u200d\u200e\u200f\u202a\u202b\u202c\u202d\u202e\ufeff]+"
)

_DANGEROUS_SCHEMES = ("javascript:", "data:", "vbscript:")


def _is_dangerous_url(url: str | None) -> bool:
    """Check if URL uses a dangerous scheme (whitespace and case ignored)."""
    if not url:
        return False
    compact = "".join(url.split()).lower()
    return compact.startswith(_DANGEROUS_SCHEMES)


class Policy:
    """Wrapper for Document -> Document transform, supports composition via |."""

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[Document], Document]) -> None:
        self._fn = fn

    def __call__(self, doc: Document) -> Document:
        return self._fn(doc)

    def __or__(self, other: "Policy") -> "Policy":
        """Chain policies: (self | other)(doc) applies self then other."""

        def chained(doc: Document) -> Document:
            return other._fn(self._fn(doc))

        return Policy(chained)


def allow_attributes(names: Iterable[str]) -> Policy:
    """Keep only the named ``{...}`` attributes on every node.

    Markup the renderer generates itself (``href``, ``src``, the language
    class of code blocks) is not an attribute and is unaffected.
    """
    allowed = frozenset(names)

    def fn(node: Node) -> Node | None:
        if not node.attributes:
            return node
        kept = node.attributes.only(allowed)
        if len(kept) == len(node.attributes):
            return node
        return dataclasses.replace(node, attributes=kept)

    return Policy(lambda d: transform(d, fn))


def _strip_raw(doc: Document) -> Document:
    """Remove RawBlock and RawInline nodes whatever their format."""

    def fn(node: Node) -> Node | None:
        if isinstance(node, (RawBlock, RawInline)):
            return None
        return node

    return transform(doc, fn)


def _strip_dangerous_urls(doc: Document) -> Document:
    """Unwrap links and drop images with javascript:, data:, vbscript: URLs."""

    def fn(node: Node) -> Node | None:
        if isinstance(node, Link) and _is_dangerous_url(node.destination):
            return Span(node.location, children=node.children)
        if isinstance(node, Image) and _is_dangerous_url(node.destination):
            return None
        return node

    return transform(doc, fn)


def _normalize_unicode(doc: Document) -> Document:
    """Strip zero-width characters and bidi overrides from Text nodes."""

    def fn(node: Node) -> Node | None:
        if isinstance(node, Text) and _NORMALIZE_UNICODE_PATTERN.search(node.content):
            cleaned = _NORMALIZE_UNICODE_PATTERN.sub("", node.content)
            return dataclasses.replace(node, content=cleaned)
        return node

    return transform(doc, fn)


# Composable Policy instances (use with | operator)
strip_raw = Policy(_strip_raw)
strip_dangerous_urls = Policy(_strip_dangerous_urls)
normalize_unicode = Policy(_normalize_unicode)

# Pre-built policy set for untrusted input
safe: Policy = strip_raw | strip_dangerous_urls | normalize_unicode


def sanitize(doc: Document, *, policy: Policy | Callable[[Document], Document]) -> Document:
    """Apply a sanitization policy to a document.

    Args:
        doc: Document to sanitize.
        policy: Policy or callable Document -> Document.

    Returns:
        Sanitized document.
    """
    return policy(doc)
