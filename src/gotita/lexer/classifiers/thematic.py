"""Thematic break classifier mixin."""

from gotita.parsing.charsets import THEMATIC_BREAK_CHARS
from gotita.tokens import BlockStart, BlockType


class ThematicClassifierMixin:
    """Mixin providing thematic break classification."""

    def _try_classify_thematic_break(self, content: str) -> BlockStart | None:
        """Try to classify content as thematic break.

        Thematic breaks are 3+ ``*`` or ``-`` characters (mixing allowed)
        with optional spaces/tabs between them.

        Args:
            content: Line content with leading whitespace consumed

        Returns:
            BlockStart if valid break, None otherwise.
        """
        count = 0
        for char in content:
            if char in THEMATIC_BREAK_CHARS:
                count += 1
            elif char in " \t":
                continue
            else:
                return None

        if count >= 3:
            return BlockStart(BlockType.THEMATIC_BREAK, width=len(content))
        return None
