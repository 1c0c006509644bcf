"""Attribute sets and the ``{...}`` attribute syntax.

Attributes attach to blocks (an attribute line before the block) and to
inlines (directly after the element). The syntax:

    {#ident .class .other key=value key="quoted \\" value" %comment%}

Merging follows one rule everywhere: insertion order is kept, a later
value for an existing key replaces the earlier one in place, and ``class``
values accumulate space-joined.

Example:
    >>> scan = scan_attributes('{#top .note lang=en}', 0)
    >>> scan.status is ScanStatus.MATCHED
    True
    >>> list(scan.attributes)
    [('id', 'top'), ('class', 'note'), ('lang', 'en')]

Thread Safety:
Attributes is frozen. The scanner is a pure function.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple

# Characters allowed in keys, identifiers, classes and bare values.
_NAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-:"
)
_SPACE = frozenset(" \t\r\n")


@dataclass(frozen=True, slots=True)
class Attributes:
    """Immutable, ordered attribute set.

    Attributes:
        pairs: (name, value) pairs in insertion order, names unique

    """

    pairs: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, *pairs: tuple[str, str]) -> Attributes:
        """Build from pairs, merging duplicates the usual way."""
        result = EMPTY_ATTRIBUTES
        for key, value in pairs:
            result = result.with_value(key, value)
        return result

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.pairs)

    def get(self, key: str, default: str | None = None) -> str | None:
        for k, v in self.pairs:
            if k == key:
                return v
        return default

    @property
    def classes(self) -> tuple[str, ...]:
        value = self.get("class")
        return tuple(value.split()) if value else ()

    def with_value(self, key: str, value: str) -> Attributes:
        """Return a copy with one attribute added or overridden."""
        items = list(self.pairs)
        for i, (k, v) in enumerate(items):
            if k == key:
                if key == "class" and v:
                    value = f"{v} {value}" if value else v
                items[i] = (key, value)
                return Attributes(tuple(items))
        items.append((key, value))
        return Attributes(tuple(items))

    def merge(self, other: Attributes) -> Attributes:
        """Return ``self`` updated with ``other`` (``other`` wins, classes join)."""
        if not other:
            return self
        if not self:
            return other
        result = self
        for key, value in other.pairs:
            result = result.with_value(key, value)
        return result

    def without(self, *keys: str) -> Attributes:
        """Return a copy with the named attributes removed."""
        return Attributes(tuple((k, v) for k, v in self.pairs if k not in keys))

    def only(self, allowed: frozenset[str]) -> Attributes:
        """Return a copy keeping only attributes whose names are in ``allowed``."""
        return Attributes(tuple((k, v) for k, v in self.pairs if k in allowed))


EMPTY_ATTRIBUTES = Attributes()


class ScanStatus(Enum):
    """Outcome of an attribute scan attempt."""

    MATCHED = auto()  # complete, well-formed block
    INCOMPLETE = auto()  # well-formed so far, ran out of input before "}"
    FAILED = auto()  # not an attribute block; caller treats the text literally


class AttributeScan(NamedTuple):
    """Capability-tagged result of scan_attributes()."""

    status: ScanStatus
    attributes: Attributes = EMPTY_ATTRIBUTES
    end: int = -1  # position just after the closing "}" when MATCHED


_FAILED = AttributeScan(ScanStatus.FAILED)
_INCOMPLETE = AttributeScan(ScanStatus.INCOMPLETE)


def _scan_name(text: str, pos: int) -> int:
    """Return the end of the name starting at pos (pos itself if none)."""
    end = pos
    text_len = len(text)
    while end < text_len and text[end] in _NAME_CHARS:
        end += 1
    return end


def scan_attributes(text: str, pos: int) -> AttributeScan:
    """Scan an attribute block starting at ``text[pos] == "{"``.

    Never raises. A block that is well-formed up to the end of ``text`` is
    reported INCOMPLETE so the block scanner can feed it more lines.

    Args:
        text: Text containing the block
        pos: Index of the opening brace

    Returns:
        AttributeScan with status, parsed attributes and end position
    """
    text_len = len(text)
    if pos >= text_len or text[pos] != "{":
        return _FAILED

    pairs: list[tuple[str, str]] = []
    i = pos + 1
    while True:
        while i < text_len and text[i] in _SPACE:
            i += 1
        if i >= text_len:
            return _INCOMPLETE

        char = text[i]
        if char == "}":
            return AttributeScan(ScanStatus.MATCHED, Attributes.of(*pairs), i + 1)

        if char == "%":
            close = text.find("%", i + 1)
            if close == -1:
                return _INCOMPLETE
            i = close + 1
            continue

        if char in "#.":
            end = _scan_name(text, i + 1)
            if end == i + 1:
                return _FAILED
            pairs.append(("id" if char == "#" else "class", text[i + 1 : end]))
            i = end
            if i < text_len and text[i] not in _SPACE and text[i] != "}":
                return _FAILED
            continue

        key_end = _scan_name(text, i)
        if key_end == i:
            return _FAILED
        key = text[i:key_end]
        i = key_end
        if i >= text_len:
            return _INCOMPLETE
        if text[i] != "=":
            return _FAILED
        i += 1
        if i >= text_len:
            return _INCOMPLETE

        if text[i] == '"':
            i += 1
            chars: list[str] = []
            while i < text_len and text[i] != '"':
                if text[i] == "\\" and i + 1 < text_len:
                    i += 1
                chars.append(text[i])
                i += 1
            if i >= text_len:
                return _INCOMPLETE
            i += 1  # closing quote
            # Line breaks inside quoted values fold to spaces
            value = " ".join("".join(chars).split("\n"))
        else:
            value_end = _scan_name(text, i)
            if value_end == i:
                return _FAILED
            value = text[i:value_end]
            i = value_end
        pairs.append((key, value))
        if i < text_len and text[i] not in _SPACE and text[i] != "}":
            return _FAILED
