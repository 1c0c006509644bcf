"""Tests for pluggable syntax highlighting of code blocks."""

import pytest

from gotita import RenderOptions, compile
from gotita import highlighting
from gotita.highlighting import get_highlighter, has_highlighter, highlight, set_highlighter

SOURCE = "```py\nx < 1\n```"
PLAIN = '<pre><code class="language-py">x &lt; 1\n</code></pre>\n'
ON = RenderOptions(highlight=True)


@pytest.fixture(autouse=True)
def _restore_highlighter():
    saved = (highlighting._highlighter, highlighting._tried_rosettes)
    yield
    highlighting._highlighter, highlighting._tried_rosettes = saved


class _OnlyPython:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def highlight(self, code: str, language: str) -> str:
        self.calls.append(language)
        return f'<pre class="hl"><code>{code.strip()}</code></pre>'

    def supports_language(self, language: str) -> bool:
        return language in ("py", "python")


class TestHighlighting:
    def test_callable_highlighter(self) -> None:
        set_highlighter(lambda code, language: f"<pre data-lang={language}></pre>")
        assert compile(SOURCE, ON).html == "<pre data-lang=py></pre>\n"

    def test_disabled_by_default(self) -> None:
        set_highlighter(lambda code, language: "<pre>HL</pre>")
        assert compile(SOURCE).html == PLAIN

    def test_protocol_highlighter(self) -> None:
        highlighter = _OnlyPython()
        set_highlighter(highlighter)
        assert compile(SOURCE, ON).html == '<pre class="hl"><code>x < 1</code></pre>\n'
        assert highlighter.calls == ["py"]

    def test_unsupported_language_falls_back(self) -> None:
        set_highlighter(_OnlyPython())
        assert compile("```cobol\nX\n```", ON).html == (
            '<pre><code class="language-cobol">X\n</code></pre>\n'
        )

    def test_failing_highlighter_falls_back(self) -> None:
        def broken(code: str, language: str) -> str:
            raise RuntimeError("lexer crashed")

        set_highlighter(broken)
        assert compile(SOURCE, ON).html == PLAIN

    def test_no_language_not_highlighted(self) -> None:
        set_highlighter(lambda code, language: "<pre>HL</pre>")
        assert compile("```\nx\n```", ON).html == "<pre><code>x\n</code></pre>\n"

    def test_cleared(self) -> None:
        set_highlighter(None)
        assert not has_highlighter()
        assert get_highlighter() is None
        assert highlight("x", "py") is None
        assert compile(SOURCE, ON).html == PLAIN
