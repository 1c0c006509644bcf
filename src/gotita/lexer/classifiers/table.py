"""Table row and caption classifier mixin."""

from gotita.tokens import BlockStart, BlockType


class TableClassifierMixin:
    """Mixin providing pipe table classification."""

    def _try_classify_table_row(self, content: str) -> BlockStart | None:
        """Try to classify content as a table row.

        A row starts and ends with ``|``; splitting into cells (which must
        respect escapes and verbatim spans) is left to the table builder.
        """
        row = content.rstrip()
        if len(row) < 2 or row[-1] != "|":
            return None
        return BlockStart(BlockType.TABLE_ROW, width=len(content), text=row)

    def _try_classify_caption(self, content: str) -> BlockStart | None:
        """Try to classify content as a table caption: ``^ caption``.

        Only meaningful right after a table; the scanner falls back to
        paragraph text otherwise.
        """
        if len(content) == 1:
            return BlockStart(BlockType.CAPTION, width=1)
        if content[1] not in " \t":
            return None
        return BlockStart(BlockType.CAPTION, width=2, text=content[2:].strip())
