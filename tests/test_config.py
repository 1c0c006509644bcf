"""Tests for ParseConfig, RenderOptions and the ContextVar plumbing."""

import pytest

from gotita import Djot, compile, parse
from gotita.config import (
    ParseConfig,
    RenderOptions,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from gotita.errors import ConfigError


@pytest.fixture(autouse=True)
def _reset_config():
    yield
    reset_parse_config()


class TestParseConfig:
    def test_defaults(self) -> None:
        config = ParseConfig()
        assert config.smart_punctuation is True
        assert config.text_transformer is None

    def test_from_dict_ignores_unknown(self) -> None:
        config = ParseConfig.from_dict({"smart_punctuation": False, "bogus": 1})
        assert config == ParseConfig(smart_punctuation=False)

    def test_smart_punctuation_off(self) -> None:
        config = ParseConfig(smart_punctuation=False)
        assert compile("a--b...", config=config).html == "<p>a--b...</p>\n"
        assert compile("it's", config=config).html == "<p>it's</p>\n"

    def test_text_transformer(self) -> None:
        config = ParseConfig(text_transformer=str.upper)
        assert compile("hi _there_ `code`", config=config).html == (
            "<p>HI <em>THERE</em> <code>code</code></p>\n"
        )


class TestRenderOptions:
    def test_from_dict(self) -> None:
        options = RenderOptions.from_dict({"sections": True, "container": "main", "x": 0})
        assert options.sections
        assert options.container == "main"

    def test_empty_output_format(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            RenderOptions(output_format="")
        assert exc_info.value.option == "output_format"

    def test_bad_container(self) -> None:
        with pytest.raises(ConfigError, match="container"):
            RenderOptions(container="span")

    def test_allowed_attributes_frozen(self) -> None:
        options = RenderOptions(allowed_attributes={"id"})  # type: ignore[arg-type]
        assert options.allowed_attributes == frozenset({"id"})
        assert isinstance(options.allowed_attributes, frozenset)

    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            RenderOptions().sections = True  # type: ignore[misc]


class TestContextVar:
    def test_set_and_reset(self) -> None:
        set_parse_config(ParseConfig(smart_punctuation=False))
        assert parse("a--b").children[0].children[0].content == "a--b"  # type: ignore[union-attr]
        reset_parse_config()
        assert get_parse_config() == ParseConfig()

    def test_context_manager_restores(self) -> None:
        with parse_config_context(ParseConfig(smart_punctuation=False)):
            assert not get_parse_config().smart_punctuation
        assert get_parse_config().smart_punctuation

    def test_context_manager_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with parse_config_context(ParseConfig(smart_punctuation=False)):
                raise RuntimeError("boom")
        assert get_parse_config() == ParseConfig()

    def test_per_call_config_does_not_leak(self) -> None:
        parse("x", config=ParseConfig(smart_punctuation=False))
        assert get_parse_config().smart_punctuation

    def test_djot_config(self) -> None:
        djot = Djot(config=ParseConfig(smart_punctuation=False))
        assert djot("a--b") == "<p>a--b</p>\n"
        assert djot.config.smart_punctuation is False
        assert Djot().config == get_parse_config()
