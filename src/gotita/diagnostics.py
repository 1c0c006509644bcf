"""Recoverable compile conditions.

The scanners and the resolver never raise on odd input; they record a
CompileWarning instead and carry on with a best-effort tree. Warnings are
returned alongside the rendered output.

Example:
    >>> from gotita import compile
    >>> result = compile("[x][nowhere]")
    >>> [w.kind.name for w in result.warnings]
    ['DANGLING_REFERENCE']

Thread Safety:
CompileWarning is frozen. A Diagnostics collector belongs to exactly one
parse and is never shared.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from gotita.location import SourceLocation
from gotita.utils.logger import get_logger

logger = get_logger(__name__)


class WarningKind(Enum):
    """Categories of recoverable conditions."""

    DANGLING_REFERENCE = auto()  # [text][label] with no definition
    DUPLICATE_REFERENCE_LABEL = auto()  # second [label]: definition, ignored
    UNCLOSED_FENCE = auto()  # ``` or ::: running to end of input


@dataclass(frozen=True, slots=True)
class CompileWarning:
    """A recoverable condition found while compiling.

    Attributes:
        kind: Warning category
        location: Where in the source it was found
        message: Human-readable description

    """

    kind: WarningKind
    location: SourceLocation
    message: str

    @property
    def position(self) -> tuple[int, int]:
        """(line, column), both 1-indexed."""
        return self.location.lineno, self.location.col_offset

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


@dataclass(slots=True)
class Diagnostics:
    """Per-parse warning collector."""

    _warnings: list[CompileWarning] = field(default_factory=list)

    def warn(self, kind: WarningKind, location: SourceLocation, message: str) -> None:
        """Record a warning and log it at debug level."""
        logger.debug("%s: %s (%s)", location, message, kind.name)
        self._warnings.append(CompileWarning(kind=kind, location=location, message=message))

    def extend(self, warnings: tuple[CompileWarning, ...]) -> None:
        """Absorb warnings gathered elsewhere (e.g. by an earlier stage)."""
        self._warnings.extend(warnings)

    def __len__(self) -> int:
        return len(self._warnings)

    def sorted(self) -> tuple[CompileWarning, ...]:
        """All warnings in source order (stable for equal positions)."""
        return tuple(sorted(self._warnings, key=lambda w: (w.location.offset, w.kind.value)))
