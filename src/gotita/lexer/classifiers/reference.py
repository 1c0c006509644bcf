"""Reference definition and footnote definition classifier mixin."""

from gotita.tokens import BlockStart, BlockType


def _label_end(content: str) -> int:
    """Index of the ``]`` closing a label that starts at content[0] == "[".

    Returns -1 if there is none or the label is empty. Labels may contain
    backslash escapes but no unescaped brackets.
    """
    pos = 1
    while pos < len(content):
        char = content[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "[":
            return -1
        if char == "]":
            return pos if pos > 1 else -1
        pos += 1
    return -1


class ReferenceClassifierMixin:
    """Mixin providing reference and footnote definition classification."""

    def _try_classify_footnote_def(self, content: str) -> BlockStart | None:
        """Try to classify content as a footnote definition: ``[^label]:``.

        The footnote body starts after the colon (and one space) and may
        continue on following indented lines, like a list item.
        """
        if not content.startswith("[^"):
            return None
        end = _label_end(content)
        if end <= 2 or end + 1 >= len(content) or content[end + 1] != ":":
            return None
        colon = end + 1
        if colon + 1 < len(content) and content[colon + 1] not in " \t":
            return None
        width = min(colon + 2, len(content))
        return BlockStart(
            BlockType.FOOTNOTE_DEF,
            width=width,
            text=content[width:],
            label=content[2:end],
        )

    def _try_classify_reference_def(self, content: str) -> BlockStart | None:
        """Try to classify content as a reference definition: ``[label]: url``.

        The destination may be empty here and continued on following
        indented lines; the pieces are joined without spaces.
        """
        if content.startswith("[^"):
            return None
        end = _label_end(content)
        if end < 0 or end + 1 >= len(content) or content[end + 1] != ":":
            return None
        colon = end + 1
        if colon + 1 < len(content) and content[colon + 1] not in " \t":
            return None
        destination = content[colon + 1 :].strip()
        if " " in destination:
            return None
        return BlockStart(
            BlockType.REFERENCE_DEF,
            width=len(content),
            text=destination,
            label=content[1:end],
        )
