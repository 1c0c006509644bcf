"""Optional syntax highlighting for code blocks.

When gotita[syntax] is installed, Rosettes is used automatically for code
blocks whose language it knows. Without a highlighter, code blocks render
as plain ``<pre><code>`` and ``RenderOptions.highlight`` has no effect.

Usage:
    # Automatic with gotita[syntax]
    from gotita import compile, RenderOptions
    compile(source, RenderOptions(highlight=True))

    # Manual injection
    from gotita.highlighting import set_highlighter

    def my_highlighter(code: str, language: str) -> str:
        return f'<pre class="hl-{language}"><code>{code}</code></pre>'

    set_highlighter(my_highlighter)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from gotita.utils.logger import get_logger

logger = get_logger(__name__)


class Highlighter(Protocol):
    """Protocol for syntax highlighters.

    Thread Safety:
        Implementations must be thread-safe. ``highlight()`` may be called
        concurrently from several render threads.
    """

    def highlight(self, code: str, language: str) -> str:
        """Highlight code, returning complete HTML for the block.

        Contract:
            - MUST escape HTML entities in code
            - MUST NOT raise for code it cannot lex (fall back to plain text)
        """
        ...

    def supports_language(self, language: str) -> bool:
        """Whether ``language`` (or an alias of it) can be highlighted."""
        ...


# Support for simple callable-based highlighters
SimpleHighlighter = Callable[[str, str], str]

# Installed highlighter; filled lazily with Rosettes when available
_highlighter: Highlighter | SimpleHighlighter | None = None
_tried_rosettes: bool = False


def set_highlighter(highlighter: Highlighter | SimpleHighlighter | None) -> None:
    """Install a global highlighter (None clears it and disables auto-detection)."""
    global _highlighter, _tried_rosettes
    _highlighter = highlighter
    _tried_rosettes = True


class RosettesHighlighter:
    """Highlighter backed by the ``rosettes`` package."""

    __slots__ = ("_rosettes",)

    def __init__(self, module) -> None:
        self._rosettes = module

    def highlight(self, code: str, language: str) -> str:
        result: str = self._rosettes.highlight(code, language=language)
        return result

    def supports_language(self, language: str) -> bool:
        try:
            result: bool = self._rosettes.supports_language(language)
        except (LookupError, ValueError):
            return False
        return result


def _load_rosettes() -> None:
    global _highlighter, _tried_rosettes
    _tried_rosettes = True
    try:
        import rosettes  # type: ignore[import-not-found]
    except ImportError:
        logger.debug("rosettes is not installed; code blocks render unhighlighted")
        return
    _highlighter = RosettesHighlighter(rosettes)


def get_highlighter() -> Highlighter | SimpleHighlighter | None:
    """The active highlighter, trying Rosettes on first use."""
    if _highlighter is None and not _tried_rosettes:
        _load_rosettes()
    return _highlighter


def has_highlighter() -> bool:
    """Check if a syntax highlighter is available."""
    return get_highlighter() is not None


def highlight(code: str, language: str) -> str | None:
    """Highlight ``code`` with the active highlighter.

    Returns:
        Highlighted HTML, or None when no highlighter is installed or it
        does not know ``language`` (the caller renders plain code then).
    """
    highlighter = get_highlighter()
    if highlighter is None:
        return None
    supports = getattr(highlighter, "supports_language", None)
    if supports is not None:
        if not supports(language):
            return None
        return highlighter.highlight(code, language)  # type: ignore[union-attr]
    return highlighter(code, language)  # type: ignore[operator]
