"""Block quote classifier mixin."""

from gotita.tokens import BlockStart, BlockType


def quote_marker_width(content: str) -> int:
    """Width of a ``>`` quote marker at the start of ``content``, 0 if none.

    The marker must be followed by a space, a tab or the end of the line;
    one following space belongs to the marker.

    Examples:
        >>> quote_marker_width("> text")
        2
        >>> quote_marker_width(">")
        1
        >>> quote_marker_width(">text")
        0
    """
    if not content or content[0] != ">":
        return 0
    if len(content) == 1:
        return 1
    if content[1] == " ":
        return 2
    if content[1] == "\t":
        return 1
    return 0


class QuoteClassifierMixin:
    """Mixin providing block quote classification."""

    def _try_classify_block_quote(self, content: str) -> BlockStart | None:
        """Try to classify content as a block quote marker."""
        width = quote_marker_width(content)
        if not width:
            return None
        return BlockStart(BlockType.BLOCK_QUOTE, width=width, text=content[width:])
