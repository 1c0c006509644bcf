"""Property-based tests: the compiler never fails on text input."""

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from gotita import EventRenderer, compile, from_json, parse, to_json

# Characters that drive most of the block and inline syntax
djot_alphabet = st.sampled_from(
    list("abc xyz\n\t-*_^~=+{}[]()<>!`$#:|'\".\\%^0123456789")
)
djot_text = st.lists(djot_alphabet, max_size=120).map("".join)


class TestProperties:
    @given(source=djot_text)
    @settings(max_examples=300)
    def test_never_raises(self, source: str) -> None:
        result = compile(source)
        assert isinstance(result.html, str)

    @given(source=st.text(max_size=80))
    @settings(max_examples=200)
    def test_arbitrary_unicode(self, source: str) -> None:
        try:
            source.encode("utf-8")
        except UnicodeEncodeError:
            return
        compile(source)

    @given(source=djot_text)
    @settings(max_examples=100)
    def test_deterministic(self, source: str) -> None:
        assert compile(source) == compile(source)

    @given(word=st.text(alphabet="abc<>&\"", min_size=1, max_size=20))
    @settings(max_examples=100)
    def test_plain_text_escaped(self, word: str) -> None:
        html = compile(f"x {word} y").html
        assert "<script" not in html
        body = html.removeprefix("<p>").removesuffix("</p>\n")
        assert "<" not in body
        assert ">" not in body

    @given(source=djot_text)
    @settings(max_examples=150)
    def test_events_balanced(self, source: str) -> None:
        depth = 0
        for event in EventRenderer().events(parse(source)):
            assert 1 <= event.start <= event.end
            if event.tag.startswith("+"):
                depth += 1
            elif event.tag.startswith("-"):
                depth -= 1
            assert depth >= 0
        assert depth == 0

    @given(source=djot_text)
    @settings(max_examples=100)
    def test_json_round_trip(self, source: str) -> None:
        doc = parse(source)
        assert from_json(to_json(doc)) == doc
        json.loads(to_json(doc))
