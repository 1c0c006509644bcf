"""Text processing utilities for Gotita.

Canonical implementations for the small string operations shared by the
scanners, the resolver and the renderers.

Example:
    >>> from gotita.utils.text import make_identifier
    >>> make_identifier("Hello, World!")
    'Hello-World'
"""

from __future__ import annotations

import html as html_module
import re

# Characters dropped from heading text when deriving an identifier.
_IDENTIFIER_STRIP = re.compile(r"[\]\[~!@#$%^&*(){}`'\",.<>\\|=+/?:;]")
_WHITESPACE_RUN = re.compile(r"\s+")


def make_identifier(text: str, existing: set[str] | None = None) -> str:
    """Derive a heading identifier from its plain text.

    Punctuation is removed and whitespace runs collapse to a single hyphen.
    Case is preserved. When ``existing`` is given the result is made unique
    by appending ``-1``, ``-2``, ... and is added to the set.

    Args:
        text: Plain text of the heading
        existing: Identifiers already handed out in this document

    Returns:
        Identifier suitable for an ``id`` attribute

    Examples:
        >>> make_identifier("My heading")
        'My-heading'
        >>> make_identifier("???")
        's'
        >>> seen = {"Intro"}
        >>> make_identifier("Intro", seen)
        'Intro-1'
    """
    base = _IDENTIFIER_STRIP.sub("", text)
    base = _WHITESPACE_RUN.sub("-", base.strip()).strip("-")
    if not base:
        base = "s"

    if existing is None:
        return base

    candidate = base
    counter = 1
    while candidate in existing:
        candidate = f"{base}-{counter}"
        counter += 1
    existing.add(candidate)
    return candidate


def normalize_label(label: str) -> str:
    """Normalize a reference label for matching.

    Matching is case-insensitive (Unicode case folding) and every run of
    whitespace, line endings included, counts as a single space.

    Examples:
        >>> normalize_label("  Foo\\n  Bar ")
        'foo bar'
    """
    return _WHITESPACE_RUN.sub(" ", label.strip()).casefold()


def escape_html(text: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` for text and attribute values.

    Single quotes are left alone; every attribute Gotita emits is
    double-quoted.

    Examples:
        >>> escape_html('<a href="x">&</a>')
        '&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=False).replace('"', "&quot;")
