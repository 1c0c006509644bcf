"""Parse configuration and render options for Gotita.

ParseConfig is carried in a ContextVar (PEP 567) so every scanner created
during one parse reads the same settings without threading them through
constructors. RenderOptions is passed explicitly to render()/compile().

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent
    storage, so concurrent compiles with different configs never see each
    other's settings.

Usage:
    from gotita.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(smart_punctuation=False)):
        doc = Parser(source).parse()

"""

from collections.abc import Callable
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields
from typing import Any, Iterator

from gotita.errors import ConfigError

# Tags accepted for RenderOptions.container
CONTAINER_TAGS = frozenset({"article", "div", "main", "section"})


def _known_fields(cls: type, config_dict: dict[str, Any]) -> dict[str, Any]:
    valid = {f.name for f in fields(cls)}
    return {k: v for k, v in config_dict.items() if k in valid}


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        smart_punctuation: Turn straight quotes, ``...``, ``--`` and ``---``
            into typographic characters
        text_transformer: Optional callback applied to every Text node's
            content (e.g. variable substitution)

    """

    smart_punctuation: bool = True
    text_transformer: Callable[[str], str] | None = None

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ParseConfig":
        """Create ParseConfig from a dictionary; unknown keys are ignored.

        Example:
            >>> ParseConfig.from_dict({"smart_punctuation": False, "x": 1})
            ParseConfig(smart_punctuation=False, text_transformer=None)
        """
        return cls(**_known_fields(cls, config_dict))


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options controlling the rendered output.

    Attributes:
        output_format: Raw blocks/inlines tagged with this format pass
            through verbatim; all others are dropped
        sections: Wrap each heading and the content up to the next heading
            of the same or higher level in ``<section id=...>``
        container: Wrap the whole output in this tag (``None`` = no wrapper)
        tight_lists: Omit ``<p>`` inside the items of tight lists
        allowed_attributes: If set, only these attribute names survive on
            rendered elements (hardening against attribute injection)
        heading_ids: Put the heading anchor on the ``<hN>`` tag itself
            (ignored when ``sections`` carries the id)
        highlight: Syntax-highlight code blocks when a highlighter is
            available

    """

    output_format: str = "html"
    sections: bool = False
    container: str | None = None
    tight_lists: bool = True
    allowed_attributes: frozenset[str] | None = None
    heading_ids: bool = False
    highlight: bool = False

    def __post_init__(self) -> None:
        if not self.output_format:
            raise ConfigError("output_format", "must be a non-empty format name")
        if self.container is not None and self.container not in CONTAINER_TAGS:
            allowed = ", ".join(sorted(CONTAINER_TAGS))
            raise ConfigError("container", f"{self.container!r} is not one of: {allowed}")
        if self.allowed_attributes is not None and not isinstance(
            self.allowed_attributes, frozenset
        ):
            object.__setattr__(self, "allowed_attributes", frozenset(self.allowed_attributes))

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "RenderOptions":
        """Create RenderOptions from a dictionary; unknown keys are ignored.

        Example:
            >>> RenderOptions.from_dict({"sections": True}).sections
            True
        """
        return cls(**_known_fields(cls, config_dict))


# Module-level defaults (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()
DEFAULT_RENDER_OPTIONS: RenderOptions = RenderOptions()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "gotita_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the parse configuration active in this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for the current context only."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to the module-level default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for a temporary configuration.

    Restores the previous configuration even if the body raises.

    Example:
        >>> with parse_config_context(ParseConfig(smart_punctuation=False)):
        ...     get_parse_config().smart_punctuation
        False
    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "CONTAINER_TAGS",
    "DEFAULT_RENDER_OPTIONS",
    "ParseConfig",
    "RenderOptions",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
