"""StringBuilder for O(n) string accumulation.

Renderers append fragments to a list and join once at the end: O(n) total
vs O(n²) for repeated string concatenation.

Thread Safety:
StringBuilder instances are local to each render() call.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator.

    Usage:
        >>> sb = StringBuilder()
        >>> _ = sb.append("<h1>").append("Hello").append("</h1>").newline()
        >>> sb.build()
        '<h1>Hello</h1>\\n'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a string (empty strings are skipped); returns self for chaining."""
        if s:
            self._parts.append(s)
        return self

    def newline(self) -> StringBuilder:
        """Append a newline unless the output already ends with one."""
        if self._parts and not self._parts[-1].endswith("\n"):
            self._parts.append("\n")
        return self

    def build(self) -> str:
        """Join all parts into the final string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
