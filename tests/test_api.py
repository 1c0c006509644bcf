"""Tests for the public API surface."""

import gotita
from gotita import (
    CompileResult,
    Djot,
    Document,
    RenderOptions,
    WarningKind,
    compile,
    parse,
    render,
)


class TestExports:
    def test_all_names_resolve(self) -> None:
        for name in gotita.__all__:
            assert hasattr(gotita, name), name

    def test_version(self) -> None:
        assert gotita.__version__ == "0.1.0"


class TestCompile:
    def test_returns_result(self) -> None:
        result = compile("# hi")
        assert isinstance(result, CompileResult)
        assert result.html == "<h1>hi</h1>\n"
        assert result.warnings == ()

    def test_unpacks(self) -> None:
        html, warnings = compile("[a][b]")
        assert html == "<p>[a][b]</p>\n"
        assert warnings[0].kind is WarningKind.DANGLING_REFERENCE

    def test_accepts_bytes(self) -> None:
        assert compile("_é_".encode()).html == "<p><em>é</em></p>\n"

    def test_empty_input(self) -> None:
        assert compile("").html == ""
        assert compile("\n\n  \n").html == ""

    def test_source_file_in_warnings(self) -> None:
        result = compile("[a][b]", source_file="doc.dj")
        assert str(result.warnings[0]).startswith("doc.dj:1:1:")

    def test_parse_then_render_matches_compile(self) -> None:
        source = "# T\n\n- a\n- b\n\n> q[^1]\n\n[^1]: n"
        assert render(parse(source)) == compile(source).html

    def test_crlf_input(self) -> None:
        assert compile("a\r\nb\r\n").html == compile("a\nb\n").html


class TestDjot:
    def test_call(self) -> None:
        assert Djot()("_hi_") == "<p><em>hi</em></p>\n"

    def test_options_applied(self) -> None:
        djot = Djot(RenderOptions(container="main"))
        assert djot("x") == "<main>\n<p>x</p>\n</main>\n"
        assert djot.options.container == "main"

    def test_parse_and_render(self) -> None:
        djot = Djot()
        doc = djot.parse("# H")
        assert isinstance(doc, Document)
        assert djot.render(doc) == "<h1>H</h1>\n"

    def test_compile_keeps_warnings(self) -> None:
        result = Djot().compile("```\nx")
        assert result.warnings[0].kind is WarningKind.UNCLOSED_FENCE

    def test_reusable(self) -> None:
        djot = Djot()
        assert [djot(s) for s in ("a", "b")] == ["<p>a</p>\n", "<p>b</p>\n"]
