"""Verbatim, math, raw inline and symbol syntax helpers.

Backtick runs open verbatim spans that suspend all other inline syntax.
A span closes on the next run of exactly the same length; a run with no
partner is plain text.

    `code`          Verbatim
    `` a`b ``       Verbatim "a`b" (one padding space dropped next to a backtick)
    $`x^2`          inline Math
    $$`x^2`         display Math
    `<b>`{=html}    RawInline for the html output format
    :smile:         Symbol
"""

from __future__ import annotations

from gotita.parsing.charsets import SYMBOL_CHARS


def backtick_run_end(text: str, pos: int) -> int:
    """Index just past the backtick run starting at ``pos``."""
    end = pos
    length = len(text)
    while end < length and text[end] == "`":
        end += 1
    return end


def find_verbatim_close(text: str, start: int, count: int) -> int:
    """Start of the first run of exactly ``count`` backticks at or after ``start``.

    Returns:
        Index of the closing run, or -1 if the span is never closed.

    Examples:
        >>> find_verbatim_close("a``b`c", 0, 1)
        4
    """
    pos = text.find("`", start)
    while pos != -1:
        end = backtick_run_end(text, pos)
        if end - pos == count:
            return pos
        pos = text.find("`", end)
    return -1


def verbatim_content(raw: str) -> str:
    """Content of a verbatim span.

    One space of padding is dropped at either end when it separates the
    content from a backtick that belongs to it.

    Examples:
        >>> verbatim_content(" `a` ")
        '`a`'
        >>> verbatim_content(" a ")
        ' a '
    """
    if raw.startswith(" `"):
        raw = raw[1:]
    if raw.endswith("` "):
        raw = raw[:-1]
    return raw


def scan_raw_format(text: str, pos: int) -> tuple[str, int] | None:
    """Scan a ``{=format}`` suffix at ``pos``.

    Returns:
        (format, end) or None.

    Examples:
        >>> scan_raw_format("{=html} rest", 0)
        ('html', 7)
    """
    if not text.startswith("{=", pos):
        return None
    close = text.find("}", pos + 2)
    if close == -1:
        return None
    fmt = text[pos + 2 : close]
    if not fmt or not all(char.isalnum() or char in "_-" for char in fmt):
        return None
    return fmt, close + 1


def scan_symbol(text: str, pos: int) -> tuple[str, int] | None:
    """Scan ``:alias:`` with ``text[pos] == ":"``.

    Examples:
        >>> scan_symbol(":+1: nice", 0)
        ('+1', 4)
        >>> scan_symbol(": no :", 0) is None
        True
    """
    end = pos + 1
    length = len(text)
    while end < length and text[end] in SYMBOL_CHARS:
        end += 1
    if end == pos + 1 or end >= length or text[end] != ":":
        return None
    return text[pos + 1 : end], end + 1
