"""Link, image and autolink syntax helpers.

Djot link forms:
- Inline: ``[text](url)``; the destination may wrap across lines, line
  breaks and surrounding whitespace are dropped
- Reference: ``[text][label]``
- Collapsed reference: ``[text][]`` (the text doubles as the label)
- Autolink: ``<https://example.com>`` or ``<me@example.com>``

The scanners here are pure functions over the span text returning
``None`` when the syntax does not apply.
"""

from __future__ import annotations

import re

from gotita.parsing.charsets import ASCII_PUNCTUATION

_URI_AUTOLINK_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9+.\-]{1,31}:[^\s<>]*")
_FOOTNOTE_STOP_RE = re.compile(r"[\[\]\n]")
_AUTOLINK_STOP_RE = re.compile(r"[<> \t\n]")
_EMAIL_AUTOLINK_RE = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~\-]+@[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*"
)


def process_escapes(text: str) -> str:
    """Drop the backslash from backslash-escaped punctuation.

    Examples:
        >>> process_escapes(r"a\\_b\\x")
        'a_b\\\\x'
    """
    if "\\" not in text:
        return text
    out: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == "\\" and pos + 1 < length and text[pos + 1] in ASCII_PUNCTUATION:
            out.append(text[pos + 1])
            pos += 2
            continue
        out.append(char)
        pos += 1
    return "".join(out)


def match_parentheses(text: str) -> dict[int, int]:
    """Map the offset of every balanced ``(`` to the offset of its ``)``.

    Backslash-escaped characters are skipped. One pass over ``text``, so
    any number of destination scans over the same text stays linear.

    Examples:
        >>> match_parentheses("(a(b)) (")
        {2: 4, 0: 5}
    """
    matches: dict[int, int] = {}
    opened: list[int] = []
    cursor = 0
    length = len(text)
    while cursor < length:
        char = text[cursor]
        if char == "\\":
            cursor += 2
            continue
        if char == "(":
            opened.append(cursor)
        elif char == ")" and opened:
            matches[opened.pop()] = cursor
        cursor += 1
    return matches


def scan_destination(
    text: str, pos: int, matches: dict[int, int] | None = None
) -> tuple[str, int] | None:
    """Scan ``(destination)`` with ``text[pos] == "("``.

    Parentheses must balance. Line breaks and the whitespace around them
    are removed, since long URLs may be wrapped.

    Args:
        text: Span text
        pos: Offset of the opening parenthesis
        matches: ``match_parentheses(text)``, when the caller scans the
            same text repeatedly

    Returns:
        (destination, end) with ``end`` just past the ``)``, or None.

    Examples:
        >>> scan_destination("(https://x.org/a_(b))!", 0)
        ('https://x.org/a_(b)', 21)
    """
    if matches is None:
        matches = match_parentheses(text)
    close = matches.get(pos)
    if close is None:
        return None
    raw = text[pos + 1 : close]
    destination = "".join(part.strip() for part in raw.split("\n"))
    return process_escapes(destination), close + 1


def scan_reference_label(text: str, pos: int) -> tuple[str, int] | None:
    """Scan ``[label]`` with ``text[pos] == "["``.

    The label may be empty (collapsed reference) but may not contain
    unescaped brackets.

    Returns:
        (label, end) with ``end`` just past the ``]``, or None.
    """
    cursor = pos + 1
    length = len(text)
    while cursor < length:
        char = text[cursor]
        if char == "\\":
            cursor += 2
            continue
        if char == "[":
            return None
        if char == "]":
            return text[pos + 1 : cursor], cursor + 1
        cursor += 1
    return None


def scan_footnote_reference(text: str, pos: int) -> tuple[str, int] | None:
    """Scan ``[^label]`` with ``text[pos:pos + 2] == "[^"``.

    The search stops at the first bracket or newline, so scans from
    different openers never cover the same text.

    Examples:
        >>> scan_footnote_reference("see[^note].", 3)
        ('note', 10)
    """
    stop = _FOOTNOTE_STOP_RE.search(text, pos + 2)
    if stop is None or stop.group() != "]" or stop.start() == pos + 2:
        return None
    close = stop.start()
    return text[pos + 2 : close], close + 1


def scan_autolink(text: str, pos: int) -> tuple[str, str, int] | None:
    """Scan ``<url>`` or ``<email>`` with ``text[pos] == "<"``.

    Like footnote references, the search ends at the first character an
    autolink cannot contain.

    Returns:
        (display text, destination, end) or None.

    Examples:
        >>> scan_autolink("<me@example.com>", 0)
        ('me@example.com', 'mailto:me@example.com', 16)
    """
    stop = _AUTOLINK_STOP_RE.search(text, pos + 1)
    if stop is None or stop.group() != ">" or stop.start() == pos + 1:
        return None
    close = stop.start()
    inner = text[pos + 1 : close]
    if _URI_AUTOLINK_RE.fullmatch(inner):
        return inner, inner, close + 1
    if _EMAIL_AUTOLINK_RE.fullmatch(inner):
        return inner, f"mailto:{inner}", close + 1
    return None
