"""Tests for AST serialization (to_dict/from_dict, to_json/from_json)."""

import json

import pytest

from gotita import Djot, from_dict, from_json, parse, to_dict, to_json
from gotita.attributes import Attributes
from gotita.location import SourceLocation
from gotita.nodes import Heading, Text


class TestRoundTrip:
    @pytest.mark.parametrize(
        "source",
        [
            "# Hello *World*",
            "- [x] done\n- [ ] todo",
            ": term\n\n  definition",
            "| a | b |\n|:-:|---|\n| 1 | 2 |\n^ cap",
            "{#id .c k=v}\n::: note\n> quote\n:::",
            "[link][r] ![img](i.png) `code` $`m` :sym: \"q\"\n\n[r]: /u",
            "x[^1]\n\n[^1]: note",
            "[dangling][nowhere] and ```unclosed",
        ],
    )
    def test_document_round_trip(self, source: str) -> None:
        doc = parse(source)
        assert from_json(to_json(doc)) == doc

    def test_warnings_survive(self) -> None:
        doc = parse("[a][missing]")
        restored = from_json(to_json(doc))
        assert restored.warnings == doc.warnings
        assert restored.warnings[0].kind.name == "DANGLING_REFERENCE"


class TestToDict:
    def test_type_discriminator(self) -> None:
        data = to_dict(parse("# Hi"))
        assert data["_type"] == "Document"
        assert data["children"][0]["_type"] == "Heading"
        assert data["children"][0]["anchor"] == "Hi"

    def test_attributes_encoding(self) -> None:
        loc = SourceLocation(1, 1)
        node = Text(loc, content="x", attributes=Attributes.of(("id", "a"), ("class", "b")))
        data = to_dict(node)
        assert data["attributes"] == {"_type": "Attributes", "pairs": [["id", "a"], ["class", "b"]]}
        assert from_dict(data) == node

    def test_location_encoding(self) -> None:
        data = to_dict(Heading(SourceLocation(2, 3, 10, 15), level=1, children=()))
        assert data["location"]["_type"] == "SourceLocation"
        assert data["location"]["offset"] == 10

    def test_json_is_deterministic(self) -> None:
        source = "# A\n\n[x][y]\n\n[y]: /z"
        assert to_json(parse(source)) == to_json(parse(source))

    def test_non_ascii_kept(self) -> None:
        assert "café" in to_json(parse("café"))

    def test_indent(self) -> None:
        assert "\n" in to_json(parse("x"), indent=2)

    def test_djot_ast_json(self) -> None:
        data = json.loads(Djot().ast_json("x"))
        assert data["_type"] == "Document"


class TestErrors:
    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="Missing"):
            from_dict({"content": "x"})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown node type"):
            from_dict({"_type": "Bogus"})

    def test_from_json_requires_document(self) -> None:
        text = json.dumps(to_dict(Text(SourceLocation(1, 1), content="x")))
        with pytest.raises(ValueError, match="Expected Document"):
            from_json(text)
