"""Typed inline tokens for the Gotita inline scanner.

The tokenizer turns a TextSpan into a flat token list in one left-to-right
pass. Delimiters and brackets that find a partner are rewritten in place
to OpenToken/CloseToken pairs; whatever is left unmatched falls back to
literal text when the tree is built.

All positions are indices into the span text (``start`` inclusive, ``end``
exclusive) and are mapped back to source locations by the builder.

Thread Safety:
All tokens are immutable and safe to share across threads.

Usage:
    from gotita.parsing.inline.tokens import DelimiterToken

    token = DelimiterToken("_", 3, 4, can_open=True, can_close=False)
    match token:
        case DelimiterToken(char="_"):
            ...

"""

from __future__ import annotations

from typing import Any, Literal, NamedTuple

from gotita.attributes import Attributes

# Container kinds an OpenToken/CloseToken pair can produce
type ContainerKind = Literal[
    "emphasis",
    "strong",
    "superscript",
    "subscript",
    "mark",
    "insert",
    "delete",
    "double_quoted",
    "single_quoted",
    "span",
    "link",
    "image",
]


class TextToken(NamedTuple):
    """Literal text (escapes already applied).

    Attributes:
        content: Text to emit.
        start: Start index in the span text.
        end: End index in the span text.

    """

    content: str
    start: int
    end: int


class DelimiterToken(NamedTuple):
    """A single delimiter character, bare (``_``) or braced (``{_`` / ``_}``).

    Attributes:
        char: Delimiter character.
        start: Start index (the brace for braced openers).
        end: End index (past the brace for braced closers).
        can_open: May start a container.
        can_close: May end a container.
        braced: Written with a brace; only matches another braced delimiter.

    """

    char: str
    start: int
    end: int
    can_open: bool
    can_close: bool
    braced: bool = False


class NodeToken(NamedTuple):
    """A finished inline node (verbatim, autolink, symbol, break, ...)."""

    node: Any
    start: int
    end: int


class OpenToken(NamedTuple):
    """Start of a matched container."""

    kind: ContainerKind
    start: int
    end: int


class CloseToken(NamedTuple):
    """End of a matched container, carrying the container's payload.

    Attributes:
        kind: Container kind (same as the matching OpenToken).
        start: Start index of the closing delimiter or bracket suffix.
        end: End index.
        destination: Inline link/image destination.
        reference: Reference label for ``[text][label]`` / ``[text][]``.
        attributes: Attributes for ``[text]{...}`` spans.

    """

    kind: ContainerKind
    start: int
    end: int
    destination: str | None = None
    reference: str | None = None
    attributes: Attributes | None = None


class BracketToken(NamedTuple):
    """``[`` or ``![`` still waiting for its ``]``."""

    image: bool
    start: int
    end: int


class AttributesToken(NamedTuple):
    """Inline ``{...}`` attributes for the preceding element."""

    attributes: Attributes
    start: int
    end: int


# PEP 695 type alias for all inline tokens
type InlineToken = (
    TextToken
    | DelimiterToken
    | NodeToken
    | OpenToken
    | CloseToken
    | BracketToken
    | AttributesToken
)


__all__ = [
    "AttributesToken",
    "BracketToken",
    "CloseToken",
    "ContainerKind",
    "DelimiterToken",
    "InlineToken",
    "NodeToken",
    "OpenToken",
    "TextToken",
]
