"""
Gotita: a djot-to-HTML compiler for Python 3.12+

Raw djot text in, HTML plus structured warnings out. Parsing never fails
on odd markup (it degrades to literal text); the only fatal input error is
an invalid encoding.

Quick Start:
    >>> from gotita import compile
    >>> result = compile("# hi")
    >>> result.html
    '<h1>hi</h1>\\n'
    >>> result.warnings
    ()

    >>> # Parse and render separately
    >>> from gotita import parse, render
    >>> doc = parse("Some _emphasis_ and a [link](https://djot.net).")
    >>> html = render(doc)

    >>> # Or keep one configured compiler around
    >>> from gotita import Djot, RenderOptions
    >>> djot = Djot(RenderOptions(sections=True))
    >>> html = djot("# Intro\\n\\nText")

Installation:
    pip install gotita              # Core compiler (zero deps)
    pip install gotita[syntax]      # + Syntax highlighting via Rosettes
"""

from typing import NamedTuple

from gotita.attributes import Attributes
from gotita.config import (
    DEFAULT_RENDER_OPTIONS,
    ParseConfig,
    RenderOptions,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from gotita.diagnostics import CompileWarning, WarningKind
from gotita.errors import ConfigError, GotitaError, InvalidUTF8Error, RenderError
from gotita.location import SourceLocation
from gotita.nodes import (
    Block,
    BlockQuote,
    CodeBlock,
    Delete,
    Div,
    Document,
    DoubleQuoted,
    Emphasis,
    FootnoteDef,
    FootnoteRef,
    Heading,
    Image,
    Inline,
    Insert,
    LineBreak,
    Link,
    List,
    ListItem,
    Mark,
    Math,
    Node,
    Paragraph,
    RawBlock,
    RawInline,
    Reference,
    SingleQuoted,
    SoftBreak,
    Span,
    Strong,
    Subscript,
    Superscript,
    Symbol,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Verbatim,
)
from gotita.parser import Parser
from gotita.renderers.events import Event, EventRenderer
from gotita.renderers.html import HtmlRenderer
from gotita.renderers.protocol import ASTRenderer
from gotita.sanitize import Policy, sanitize
from gotita.serialization import from_dict, from_json, to_dict, to_json
from gotita.text import extract_text
from gotita.visitor import BaseVisitor, transform

__version__ = "0.1.0"


class CompileResult(NamedTuple):
    """Outcome of a successful compile.

    Attributes:
        html: Complete rendered output
        warnings: Recoverable conditions, in source order

    """

    html: str
    warnings: tuple[CompileWarning, ...]


def decode_source(source: str | bytes, source_file: str | None = None) -> str:
    """Validate and decode compiler input.

    Bytes must be UTF-8 (a leading byte-order mark is dropped). Strings
    must not carry lone surrogates, which cannot be encoded as UTF-8.

    Raises:
        InvalidUTF8Error: With the offset of the first bad byte/character

    Example:
        >>> decode_source(b"caf\\xc3\\xa9")
        'café'
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        try:
            text = bytes(source).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUTF8Error(exc.start, exc.reason, source_file) from exc
        return text.removeprefix("\ufeff")

    try:
        source.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidUTF8Error(exc.start, "lone surrogate in text", source_file) from exc
    return source


def parse(
    source: str | bytes,
    *,
    config: ParseConfig | None = None,
    source_file: str | None = None,
) -> Document:
    """Parse djot source into a resolved, typed AST.

    Args:
        source: Djot source text (``bytes`` must be UTF-8)
        config: Parse configuration for this call (defaults to the one
            active in the current context)
        source_file: Optional source file path for locations and warnings

    Returns:
        Document AST root node; recoverable problems are in ``warnings``

    Raises:
        InvalidUTF8Error: If the input is not valid UTF-8

    Example:
        >>> doc = parse("# Hello *World*")
        >>> doc.children[0].level
        1
    """
    text = decode_source(source, source_file)
    if config is None:
        return Parser(text, source_file=source_file).parse()
    with parse_config_context(config):
        return Parser(text, source_file=source_file).parse()


def render(doc: Document, options: RenderOptions | None = None) -> str:
    """Render an AST Document to HTML.

    Args:
        doc: Document AST to render
        options: Output options (defaults to ``RenderOptions()``)

    Returns:
        HTML string

    Example:
        >>> render(parse("# Hello"))
        '<h1>Hello</h1>\\n'
    """
    return HtmlRenderer(options).render(doc)


def compile(
    source: str | bytes,
    options: RenderOptions | None = None,
    *,
    config: ParseConfig | None = None,
    source_file: str | None = None,
) -> CompileResult:
    """Compile djot to HTML in one call.

    Either returns the complete HTML plus zero or more warnings, or raises
    InvalidUTF8Error for malformed input encoding; there is no third outcome.

    Example:
        >>> result = compile("[bar][missing]")
        >>> result.html
        '<p>[bar][missing]</p>\\n'
        >>> [w.kind.name for w in result.warnings]
        ['DANGLING_REFERENCE']
    """
    doc = parse(source, config=config, source_file=source_file)
    return CompileResult(render(doc, options), doc.warnings)


class Djot:
    """Reusable compiler context.

    Holds parse configuration and render options, so a caller can open one
    context, compile many documents through it and simply drop it when
    done; there is nothing to close.

    Usage:
        >>> djot = Djot()
        >>> djot("_hi_")
        '<p><em>hi</em></p>\\n'

        >>> # Access the AST and the event stream
        >>> doc = djot.parse("# Heading")
        >>> doc.children[0].level
        1
        >>> djot.events("x")[0]
        Event(tag='+para', start=1, end=1)

    Thread Safety:
        Configuration is immutable and applied through a ContextVar for
        the duration of each call. Safe to share across threads.

    """

    __slots__ = ("_config", "_options", "_renderer")

    def __init__(
        self,
        options: RenderOptions | None = None,
        *,
        config: ParseConfig | None = None,
    ) -> None:
        """Initialize the compiler context.

        Args:
            options: Render options used by ``__call__``, ``render`` and
                ``compile``
            config: Parse configuration (defaults to the one active in the
                context of each call)
        """
        self._options = options if options is not None else DEFAULT_RENDER_OPTIONS
        self._config = config
        self._renderer = HtmlRenderer(self._options)

    @property
    def options(self) -> RenderOptions:
        return self._options

    @property
    def config(self) -> ParseConfig:
        return self._config if self._config is not None else get_parse_config()

    def __call__(self, source: str | bytes) -> str:
        """Parse and render in one call, returning only the HTML."""
        return self.compile(source).html

    def parse(self, source: str | bytes, *, source_file: str | None = None) -> Document:
        """Parse source into a resolved AST."""
        return parse(source, config=self._config, source_file=source_file)

    def render(self, doc: Document) -> str:
        """Render a parsed document with this context's options."""
        return self._renderer.render(doc)

    def compile(self, source: str | bytes, *, source_file: str | None = None) -> CompileResult:
        """Parse and render, keeping the warnings."""
        doc = self.parse(source, source_file=source_file)
        return CompileResult(self._renderer.render(doc), doc.warnings)

    def events(self, source: str | bytes, *, source_file: str | None = None) -> list[Event]:
        """The djot event stream for ``source``."""
        return EventRenderer().events(self.parse(source, source_file=source_file))

    def ast_json(
        self,
        source: str | bytes,
        *,
        source_file: str | None = None,
        indent: int | None = None,
    ) -> str:
        """The parsed AST as JSON (see gotita.serialization)."""
        return to_json(self.parse(source, source_file=source_file), indent=indent)


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "compile",
    "parse",
    "render",
    "decode_source",
    "CompileResult",
    "Djot",
    # Warnings and errors
    "CompileWarning",
    "WarningKind",
    "GotitaError",
    "InvalidUTF8Error",
    "ConfigError",
    "RenderError",
    # Block nodes
    "Block",
    "BlockQuote",
    "CodeBlock",
    "Div",
    "Document",
    "FootnoteDef",
    "Heading",
    "List",
    "ListItem",
    "Paragraph",
    "RawBlock",
    "Reference",
    "Table",
    "TableCell",
    "TableRow",
    "ThematicBreak",
    # Inline nodes
    "Inline",
    "Delete",
    "DoubleQuoted",
    "Emphasis",
    "FootnoteRef",
    "Image",
    "Insert",
    "LineBreak",
    "Link",
    "Mark",
    "Math",
    "RawInline",
    "SingleQuoted",
    "SoftBreak",
    "Span",
    "Strong",
    "Subscript",
    "Superscript",
    "Symbol",
    "Text",
    "Verbatim",
    "Node",
    "Attributes",
    # Parser and renderers
    "Parser",
    "HtmlRenderer",
    "EventRenderer",
    "Event",
    "ASTRenderer",
    # Visitor + Transform
    "BaseVisitor",
    "transform",
    "extract_text",
    # Sanitization
    "Policy",
    "sanitize",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "ParseConfig",
    "RenderOptions",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Location
    "SourceLocation",
]
