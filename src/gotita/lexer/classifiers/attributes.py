"""Block attribute line classifier mixin."""

from gotita.attributes import ScanStatus, scan_attributes
from gotita.tokens import BlockStart, BlockType


class AttributeClassifierMixin:
    """Mixin providing block attribute classification."""

    def _try_classify_attributes(self, content: str) -> BlockStart | None:
        """Try to classify content as a block attribute line.

        ``{#id .class}`` on a line of its own attaches to the next block.
        A block left open at the end of the line is reported with
        ``incomplete=True`` so the scanner can feed it the following lines.

        Args:
            content: Line content with leading whitespace consumed

        Returns:
            BlockStart carrying the parsed attributes, None otherwise.
        """
        scan = scan_attributes(content, 0)
        if scan.status is ScanStatus.INCOMPLETE:
            return BlockStart(
                BlockType.ATTRIBUTES, width=len(content), text=content, incomplete=True
            )
        if scan.status is ScanStatus.MATCHED and not content[scan.end :].strip():
            return BlockStart(
                BlockType.ATTRIBUTES, width=len(content), attributes=scan.attributes
            )
        return None
