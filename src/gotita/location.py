"""Source location tracking for warnings, events and debugging.

Provides SourceLocation for positions in source text and TextSpan, the
opaque unit of inline content handed from the block scanner to the inline
scanner together with the map back to source offsets.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.
TextSpan is built by one scanner and read-only afterwards.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for warnings and debugging.

    Line and column numbers are 1-indexed. Offsets are 0-indexed character
    positions into the source string, ``end_offset`` exclusive.

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column (1-indexed)
        offset: Absolute start offset in source
        end_offset: Absolute end offset in source (exclusive)
        end_lineno: Ending line number (optional)
        end_col_offset: Ending column (optional)
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=3, col_offset=5)
        >>> str(loc)
        '3:5'
        >>> str(SourceLocation(1, 1, source_file="notes.dj"))
        'notes.dj:1:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for messages ("file:line:col" or "line:col")."""
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """Create a new location spanning from this location to end."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col_offset,
            offset=self.offset,
            end_offset=end.end_offset or end.offset,
            end_lineno=end.end_lineno or end.lineno,
            end_col_offset=end.end_col_offset or end.col_offset,
            source_file=self.source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Placeholder location for synthetic nodes."""
        return cls(lineno=0, col_offset=0)


@dataclass(slots=True)
class TextSpan:
    """Inline content gathered from one or more source lines.

    The block scanner appends one segment per line (already stripped of
    container prefixes); the inline scanner sees ``text`` (segments joined
    with newlines) and asks ``location`` to translate positions in that
    text back to source coordinates.

    Example:
        >>> span = TextSpan()
        >>> span.add("hello", offset=2, lineno=1, col=3)
        >>> span.add("world", offset=10, lineno=2, col=1)
        >>> span.text
        'hello\\nworld'
        >>> span.location(6, 11).offset
        10

    """

    _parts: list[str] = field(default_factory=list)
    _starts: list[int] = field(default_factory=list)
    _offsets: list[int] = field(default_factory=list)
    _linenos: list[int] = field(default_factory=list)
    _cols: list[int] = field(default_factory=list)
    _length: int = 0
    source_file: str | None = None

    def add(self, segment: str, *, offset: int, lineno: int, col: int) -> None:
        """Append one line segment and its source coordinates."""
        if self._parts:
            self._length += 1  # joining newline
        self._starts.append(self._length)
        self._parts.append(segment)
        self._offsets.append(offset)
        self._linenos.append(lineno)
        self._cols.append(col)
        self._length += len(segment)

    @property
    def text(self) -> str:
        """The joined text the inline scanner works on."""
        return "\n".join(self._parts)

    @property
    def lines(self) -> list[str]:
        """The individual segments (a copy)."""
        return list(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)

    def rstrip_last(self) -> None:
        """Drop trailing whitespace from the final segment."""
        if self._parts:
            last = self._parts[-1]
            stripped = last.rstrip()
            self._length -= len(last) - len(stripped)
            self._parts[-1] = stripped

    def _map(self, pos: int) -> tuple[int, int, int]:
        if not self._parts:
            return 0, 1, 1
        idx = max(bisect_right(self._starts, pos) - 1, 0)
        delta = pos - self._starts[idx]
        return self._offsets[idx] + delta, self._linenos[idx], self._cols[idx] + delta

    def location(self, start: int, end: int) -> SourceLocation:
        """Translate a ``[start, end)`` range of ``text`` to a SourceLocation."""
        offset, lineno, col = self._map(start)
        if end > start:
            last_offset, end_lineno, end_col = self._map(end - 1)
            end_offset, end_col = last_offset + 1, end_col + 1
        else:
            end_offset, end_lineno, end_col = offset, lineno, col
        return SourceLocation(
            lineno=lineno,
            col_offset=col,
            offset=offset,
            end_offset=end_offset,
            end_lineno=end_lineno,
            end_col_offset=end_col,
            source_file=self.source_file,
        )

    def slice(self, start: int, end: int) -> TextSpan:
        """Sub-span of a single-segment span (table cells, captions)."""
        offset, lineno, col = self._map(start)
        sub = TextSpan(source_file=self.source_file)
        sub.add(self.text[start:end], offset=offset, lineno=lineno, col=col)
        return sub

    def whole(self) -> SourceLocation:
        """Location covering the complete span."""
        return self.location(0, self._length)
