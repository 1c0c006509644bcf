"""Delimiter matching for inline containers.

Every delimiter is a single character; there are no run lengths to split.
Openers wait on a stack per (character, braced) pair. When a closer finds
an opener, that opener and every opener pushed after it (on any stack,
brackets included) are discarded: containers never cross. Each opener is
pushed and popped at most once, so matching is amortized linear.

Flanking is purely local:

- can open: the next character exists and is not whitespace
- can close: the previous character exists and is not whitespace

``'`` additionally only opens after whitespace, punctuation or the start
of the text, so apostrophes inside words stay apostrophes.

Thread Safety:
OpenerStacks belongs to a single scan. The helpers are pure functions.

"""

from __future__ import annotations

from gotita.parsing.charsets import WHITESPACE
from gotita.parsing.inline.tokens import ContainerKind, DelimiterToken

DELIMITER_KINDS: dict[str, ContainerKind] = {
    "_": "emphasis",
    "*": "strong",
    "^": "superscript",
    "~": "subscript",
    "=": "mark",
    "+": "insert",
    "-": "delete",
    '"': "double_quoted",
    "'": "single_quoted",
}

EM_DASH = "—"
EN_DASH = "–"
ELLIPSIS = "…"
LEFT_DOUBLE_QUOTE = "“"
RIGHT_DOUBLE_QUOTE = "”"
LEFT_SINGLE_QUOTE = "‘"
RIGHT_SINGLE_QUOTE = "’"


def can_open_at(text: str, end: int) -> bool:
    """A delimiter ending at ``end`` may open: something non-blank follows."""
    return end < len(text) and text[end] not in WHITESPACE


def can_close_at(text: str, start: int) -> bool:
    """A delimiter starting at ``start`` may close: something non-blank precedes."""
    return start > 0 and text[start - 1] not in WHITESPACE


def can_open_quote(text: str, start: int, end: int) -> bool:
    """Single quotes open only at a word boundary."""
    if not can_open_at(text, end):
        return False
    return start == 0 or not text[start - 1].isalnum()


def smart_dashes(count: int) -> str:
    """Typographic replacement for a run of ``count`` hyphens.

    All em dashes if the count divides by three, all en dashes if it
    divides by two, otherwise em dashes first and one or two en dashes.

    Examples:
        >>> smart_dashes(3) == EM_DASH
        True
        >>> smart_dashes(5) == EM_DASH + EN_DASH
        True
        >>> smart_dashes(1)
        '-'
    """
    if count == 1:
        return "-"
    if count % 3 == 0:
        return EM_DASH * (count // 3)
    if count % 2 == 0:
        return EN_DASH * (count // 2)
    if count % 3 == 2:
        return EM_DASH * (count // 3) + EN_DASH
    return EM_DASH * ((count - 4) // 3) + EN_DASH * 2


def unmatched_literal(token: DelimiterToken, smart: bool) -> str:
    """Text for a delimiter that never found a partner."""
    char = token.char
    if smart and char == "'":
        return RIGHT_SINGLE_QUOTE
    if smart and char == '"':
        return LEFT_DOUBLE_QUOTE if token.can_open and not token.can_close else RIGHT_DOUBLE_QUOTE
    if not token.braced:
        return char
    return "{" + char if token.can_open else char + "}"


class OpenerStacks:
    """Pending openers, one stack per delimiter flavour, plus the bracket stack.

    Stacks hold token indices in increasing order.

    Thread Safety:
        Not thread-safe. One instance per inline scan.
    """

    __slots__ = ("_stacks", "_brackets")

    def __init__(self) -> None:
        self._stacks: dict[tuple[str, bool], list[int]] = {}
        self._brackets: list[int] = []

    def push(self, token: DelimiterToken, index: int) -> None:
        self._stacks.setdefault((token.char, token.braced), []).append(index)

    def match(self, token: DelimiterToken, index: int) -> int | None:
        """Find and remove the opener for closer ``token`` at ``index``.

        Returns:
            Index of the opener, or None if there is no usable one.
        """
        stack = self._stacks.get((token.char, token.braced))
        if not stack:
            return None
        opener = stack[-1]
        if opener == index - 1:
            # Nothing between the two: not a container
            return None
        self.discard_above(opener - 1)
        return opener

    def discard_above(self, index: int) -> None:
        """Forget every opener (delimiter or bracket) after token ``index``."""
        for stack in self._stacks.values():
            while stack and stack[-1] > index:
                stack.pop()
        brackets = self._brackets
        while brackets and brackets[-1] > index:
            brackets.pop()

    def push_bracket(self, index: int) -> None:
        self._brackets.append(index)

    def pop_bracket(self) -> int | None:
        return self._brackets.pop() if self._brackets else None
