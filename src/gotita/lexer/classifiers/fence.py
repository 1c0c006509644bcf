"""Code fence and div fence classifier mixin."""

from gotita.parsing.charsets import FENCE_CHARS
from gotita.tokens import BlockStart, BlockType


def _run_length(content: str, char: str) -> int:
    count = 0
    while count < len(content) and content[count] == char:
        count += 1
    return count


def is_closing_fence(content: str, char: str, length: int) -> bool:
    """True if ``content`` closes a code fence opened with ``char * length``.

    The closer must use the same character, be at least as long as the
    opener and carry nothing but trailing whitespace.

    Examples:
        >>> is_closing_fence("````", "`", 3)
        True
        >>> is_closing_fence("``", "`", 3)
        False
        >>> is_closing_fence("``` python", "`", 3)
        False
    """
    count = _run_length(content, char)
    return count >= length and not content[count:].strip()


def is_closing_div(content: str, length: int) -> bool:
    """True if ``content`` is a bare colon run closing a div of ``length``.

    Examples:
        >>> is_closing_div(":::", 3)
        True
        >>> is_closing_div("::: note", 3)
        False
    """
    return is_closing_fence(content, ":", length)


class FenceClassifierMixin:
    """Mixin providing code fence and div fence classification."""

    def _try_classify_code_fence(self, content: str) -> BlockStart | None:
        """Try to classify content as a code fence opener.

        Code fences are 3+ backticks or tildes followed by an optional info
        word. ``=format`` as the info word marks a raw block. Backtick
        fences cannot carry backticks in the info string.

        Args:
            content: Line content with leading whitespace consumed

        Returns:
            BlockStart if valid fence, None otherwise.
        """
        fence_char = content[0]
        if fence_char not in FENCE_CHARS:
            return None

        count = _run_length(content, fence_char)
        if count < 3:
            return None

        info = content[count:].strip()
        if fence_char == "`" and "`" in info:
            return None

        return BlockStart(
            BlockType.CODE_FENCE,
            width=len(content),
            text=info.split()[0] if info else "",
            fence_char=fence_char,
            fence_length=count,
        )

    def _try_classify_div_fence(self, content: str) -> BlockStart | None:
        """Try to classify content as a div fence (``:::`` + optional class).

        A bare ``:::`` is returned as well; whether it opens or closes a div
        is decided by the block scanner, which knows the open divs.
        """
        count = _run_length(content, ":")
        if count < 3:
            return None

        rest = content[count:].strip()
        words = rest.split()
        if len(words) > 1:
            return None

        return BlockStart(
            BlockType.DIV_FENCE,
            width=len(content),
            text=rest,
            fence_char=":",
            fence_length=count,
        )
