"""List marker classifier mixin.

Recognised markers:

- bullets ``-`` ``+`` ``*``
- tasks ``- [ ]`` / ``- [x]`` (any bullet character)
- definitions ``:``
- ordered ``1.`` ``1)`` ``(1)`` with decimal, alphabetic (``a`` / ``A``)
  or roman (``i`` / ``I``) numbering

Every marker must be followed by whitespace or the end of the line.
"""

from gotita.parsing.charsets import BULLET_MARKERS, ROMAN_DIGITS
from gotita.tokens import BlockStart, BlockType, ListMarker

_ROMAN_VALUES = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100, "d": 500, "m": 1000}


def roman_to_int(numeral: str) -> int:
    """Value of a roman numeral (either case).

    Examples:
        >>> roman_to_int("iv")
        4
        >>> roman_to_int("XII")
        12
    """
    total = 0
    previous = 0
    for char in reversed(numeral.lower()):
        value = _ROMAN_VALUES[char]
        if value < previous:
            total -= value
        else:
            total += value
            previous = value
    return total


def _enumerator(text: str, prefer: str = "") -> tuple[str, int] | None:
    """Classify an ordered-list enumerator as (style symbol, value).

    A single letter that is also a roman digit (``i``, ``v``, ``x`` ...) is
    read the way ``prefer`` (the symbol of the list being continued) reads
    it; on its own ``i`` is roman and every other letter alphabetic.
    """
    if text.isdigit() and text.isascii():
        if len(text) > 9:
            return None
        return "1", int(text)

    if not text.isascii() or not text.isalpha():
        return None

    lower = text.lower()
    if text != lower and text != text.upper():
        return None  # mixed case

    upper = text != lower
    roman_symbol = "I" if upper else "i"
    alpha_symbol = "A" if upper else "a"
    is_roman = all(char in ROMAN_DIGITS for char in lower)

    if len(text) == 1:
        if is_roman and (prefer == roman_symbol or (lower == "i" and prefer != alpha_symbol)):
            return roman_symbol, roman_to_int(text)
        return alpha_symbol, ord(lower) - ord("a") + 1

    if is_roman:
        return roman_symbol, roman_to_int(text)

    return None


def _followed_by_space(content: str, pos: int) -> bool:
    return pos == len(content) or content[pos] in " \t"


class ListClassifierMixin:
    """Mixin providing list marker classification."""

    def _try_classify_list_marker(
        self,
        content: str,
        *,
        paragraph_open: bool = False,
        open_list: ListMarker | None = None,
    ) -> BlockStart | None:
        """Try to classify content as a list item marker.

        Args:
            content: Line content with leading whitespace consumed
            paragraph_open: Only decimal numbering, or numbering that
                continues ``open_list``, may interrupt a paragraph; a
                sentence starting with "I." or "a)" stays text
            open_list: Marker of the innermost open list

        Returns:
            BlockStart with a ListMarker, None otherwise.
        """
        first = content[0]

        if first in BULLET_MARKERS:
            if not _followed_by_space(content, 1):
                return None
            return self._bullet_or_task(content, first)

        if first == ":":
            if not _followed_by_space(content, 1):
                return None
            return BlockStart(
                BlockType.LIST_ITEM,
                width=min(2, len(content)),
                text=content[2:],
                marker=ListMarker("definition", ":"),
            )

        return self._ordered_marker(content, paragraph_open, open_list)

    def _bullet_or_task(self, content: str, bullet: str) -> BlockStart:
        width = min(2, len(content))
        box = content[2:5]
        if len(box) == 3 and box[0] == "[" and box[2] == "]" and box[1] in " xX":
            if _followed_by_space(content, 5):
                task_width = min(6, len(content))
                return BlockStart(
                    BlockType.LIST_ITEM,
                    width=task_width,
                    text=content[task_width:],
                    marker=ListMarker("task", bullet, checked=box[1] != " "),
                )
        return BlockStart(
            BlockType.LIST_ITEM,
            width=width,
            text=content[width:],
            marker=ListMarker("bullet", bullet),
        )

    def _ordered_marker(
        self, content: str, paragraph_open: bool, open_list: ListMarker | None
    ) -> BlockStart | None:
        parenthesized = content[0] == "("
        pos = 1 if parenthesized else 0
        start = pos
        while pos < len(content) and content[pos].isalnum():
            pos += 1
        if pos == start or pos >= len(content):
            return None

        delimiter = content[pos]
        if parenthesized:
            if delimiter != ")":
                return None
        elif delimiter not in ".)":
            return None

        prefer = ""
        if open_list is not None and open_list.kind == "ordered":
            prefer = open_list.style.strip("().")
        enumerator = _enumerator(content[start:pos], prefer)
        if enumerator is None:
            return None
        symbol, number = enumerator
        style = f"({symbol})" if parenthesized else f"{symbol}{delimiter}"
        if paragraph_open and symbol != "1":
            if open_list is None or open_list.kind != "ordered" or open_list.style != style:
                return None

        pos += 1
        if not _followed_by_space(content, pos):
            return None

        width = min(pos + 1, len(content))
        return BlockStart(
            BlockType.LIST_ITEM,
            width=width,
            text=content[width:],
            marker=ListMarker("ordered", style, number=number),
        )
