"""Heading classifier mixin."""

from gotita.tokens import BlockStart, BlockType


class HeadingClassifierMixin:
    """Mixin providing heading classification."""

    def _try_classify_heading(self, content: str) -> BlockStart | None:
        """Try to classify content as a heading line.

        Headings are 1-6 ``#`` characters followed by a space, a tab or the
        end of the line. Unlike ATX headings there is no closing sequence:
        trailing ``#`` characters are heading text.

        Args:
            content: Line content with leading whitespace consumed

        Returns:
            BlockStart if valid heading, None otherwise.
        """
        level = 0
        while level < len(content) and content[level] == "#":
            level += 1

        if level > 6:
            return None

        if level == len(content):
            return BlockStart(BlockType.HEADING, width=level, level=level)

        if content[level] not in " \t":
            return None

        return BlockStart(
            BlockType.HEADING,
            width=level + 1,
            text=content[level + 1 :].strip(),
            level=level,
        )
