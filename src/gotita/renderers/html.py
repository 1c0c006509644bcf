"""HTML renderer using StringBuilder pattern.

Renders a resolved Document to HTML in one pass over an explicit work
stack. Text and attribute values are escaped (``& < > "``); code content
is escaped but otherwise kept byte for byte; raw blocks and raw inlines
pass through only when their format is the active output format.

Output shape, for ``RenderOptions()`` defaults:

    # hi            ->  <h1>hi</h1>
    - a             ->  <ul>
    - b                 <li>a</li>
                        <li>b</li>
                        </ul>

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can safely share a single HtmlRenderer instance
and call render() concurrently without synchronization.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gotita.attributes import Attributes
from gotita.config import DEFAULT_RENDER_OPTIONS, RenderOptions
from gotita.errors import RenderError
from gotita.highlighting import highlight
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
    Mark,
    Math,
    Node,
    Paragraph,
    RawBlock,
    RawInline,
    SingleQuoted,
    SoftBreak,
    Span,
    Strong,
    Subscript,
    Superscript,
    Symbol,
    Table,
    Text,
    ThematicBreak,
    Verbatim,
)
from gotita.sanitize import allow_attributes
from gotita.stringbuilder import StringBuilder
from gotita.text import extract_text
from gotita.utils.logger import get_logger
from gotita.utils.text import escape_html, make_identifier

logger = get_logger(__name__)

_INLINE_TAGS: dict[type, str] = {
    Emphasis: "em",
    Strong: "strong",
    Superscript: "sup",
    Subscript: "sub",
    Mark: "mark",
    Insert: "ins",
    Delete: "del",
    Span: "span",
}

_BACKLINK_ARROW = "\u21a9\ufe0e"


def render_attributes(attributes: Attributes, *leading: tuple[str, str]) -> str:
    """Render attributes as ` key="value"` pairs.

    ``leading`` pairs are generated by the renderer (``href``, ``start``...)
    and come first; node attributes merge over them, classes joining.

    Examples:
        >>> render_attributes(Attributes.of(("class", "b")), ("class", "a"))
        ' class="a b"'
    """
    if leading:
        attributes = Attributes.of(*leading).merge(attributes)
    return "".join(f' {key}="{escape_html(value)}"' for key, value in attributes)


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render() call.

    Attributes:
        footnotes: Footnote definitions of the document being rendered
        footnote_numbers: Label -> number for every note referenced so far
        sections: Heading levels of the open ``<section>`` wrappers

    """

    footnotes: dict[str, FootnoteDef] = field(default_factory=dict)
    footnote_numbers: dict[str, int] = field(default_factory=dict)
    sections: list[int] = field(default_factory=list)


# Pending output: literal HTML, or a node to expand as a block (True) or an inline (False)
type _Work = str | tuple[Node, bool]


def _blocks(nodes: tuple[Block, ...]) -> list[_Work]:
    return [(node, True) for node in nodes]


def _inlines(nodes: tuple[Inline, ...]) -> list[_Work]:
    return [(node, False) for node in nodes]


class HtmlRenderer:
    """Render AST to HTML using StringBuilder pattern.

    Nodes are expanded on an explicit work stack into their opening markup,
    their children and their closing markup, so nesting depth never
    touches the interpreter's recursion limit.

    Usage:
        >>> from gotita.parser import Parser
        >>> doc = Parser("# Hello *World*").parse()
        >>> HtmlRenderer().render(doc)
        '<h1>Hello <strong>World</strong></h1>\\n'

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
        Each render() call creates an independent RenderContext.
    """

    __slots__ = ("_options",)

    def __init__(self, options: RenderOptions | None = None) -> None:
        self._options = options if options is not None else DEFAULT_RENDER_OPTIONS

    @property
    def options(self) -> RenderOptions:
        return self._options

    def render(self, node: Document) -> str:
        """Render document AST to HTML string.

        The tree is never modified; attribute filtering for
        ``allowed_attributes`` works on a transformed copy.
        """
        options = self._options
        if options.allowed_attributes is not None:
            node = allow_attributes(options.allowed_attributes)(node)

        ctx = RenderContext(footnotes=node.footnotes)
        sb = StringBuilder()
        if options.container:
            sb.append(f"<{options.container}>\n")

        for child in node.children:
            if options.sections and isinstance(child, Heading):
                self._open_section(child, sb, ctx)
                self._walk(self._heading(child, in_section=True), sb, ctx)
            else:
                self._walk([(child, True)], sb, ctx)
        while ctx.sections:
            ctx.sections.pop()
            sb.append("</section>\n")

        if ctx.footnote_numbers:
            self._render_endnotes(sb, ctx)

        if options.container:
            sb.append(f"</{options.container}>\n")
        return sb.build()

    def _walk(self, work: list[_Work], sb: StringBuilder, ctx: RenderContext) -> None:
        """Write ``work`` in order, expanding nodes in place."""
        stack = work[::-1]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                sb.append(item)
                continue
            node, is_block = item
            expanded = self._expand_block(node) if is_block else self._expand_inline(node, ctx)
            stack.extend(reversed(expanded))

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _expand_block(self, block: Node) -> list[_Work]:
        """Markup and children of a block node."""
        match block:
            case Paragraph():
                return [
                    f"<p{render_attributes(block.attributes)}>",
                    *_inlines(block.children),
                    "</p>\n",
                ]
            case Heading():
                return self._heading(block)
            case CodeBlock():
                return self._code_block(block)
            case RawBlock():
                content = block.content
                if block.format != self._options.output_format or not content:
                    return []
                return [content] if content.endswith("\n") else [content, "\n"]
            case BlockQuote():
                return _container("blockquote", block.attributes, block.children)
            case Div():
                return _container("div", block.attributes, block.children)
            case List():
                return self._list(block)
            case ThematicBreak():
                return [f"<hr{render_attributes(block.attributes)}>\n"]
            case Table():
                return _table(block)
            case FootnoteDef():
                return []  # Rendered in the endnotes section
            case _:
                raise RenderError(f"Cannot render {type(block).__name__} as a block")

    def _heading(self, heading: Heading, *, in_section: bool = False) -> list[_Work]:
        """Heading markup.

        In section mode the anchor belongs to the ``<section>`` and is kept
        off the tag; with ``heading_ids`` it is put on the tag.
        """
        attributes = heading.attributes
        if in_section:
            attributes = attributes.without("id")
        elif self._options.heading_ids:
            attributes = Attributes.of(("id", _anchor(heading))).merge(attributes.without("id"))
        return [
            f"<h{heading.level}{render_attributes(attributes)}>",
            *_inlines(heading.children),
            f"</h{heading.level}>\n",
        ]

    def _open_section(self, heading: Heading, sb: StringBuilder, ctx: RenderContext) -> None:
        """Close sections of the same or a deeper level, then open one for ``heading``."""
        while ctx.sections and ctx.sections[-1] >= heading.level:
            ctx.sections.pop()
            sb.append("</section>\n")
        ctx.sections.append(heading.level)
        sb.append(f'<section id="{escape_html(_anchor(heading))}">\n')

    def _code_block(self, code: CodeBlock) -> list[_Work]:
        """Code block markup, highlighted when asked for and possible."""
        language = code.language
        if self._options.highlight and language:
            highlighted = None
            try:
                highlighted = highlight(code.code, language)
            except Exception:
                # Fall back to plain code
                logger.debug("Syntax highlighting failed for language %r", language, exc_info=True)
            if highlighted is not None:
                needs_newline = highlighted and not highlighted.endswith("\n")
                return [highlighted, "\n"] if needs_newline else [highlighted]

        lang_class = f' class="language-{escape_html(language)}"' if language else ""
        return [
            f"<pre{render_attributes(code.attributes)}><code{lang_class}>"
            f"{escape_html(code.code)}</code></pre>\n"
        ]

    def _list(self, lst: List) -> list[_Work]:
        """Bullet, ordered, task or definition list markup."""
        tight = lst.tight and self._options.tight_lists
        match lst.kind:
            case "definition":
                work: list[_Work] = [f"<dl{render_attributes(lst.attributes)}>\n"]
                for item in lst.items:
                    work.append(f"<dt{render_attributes(item.attributes)}>")
                    work += _inlines(item.term or ())
                    work.append("</dt>\n<dd>")
                    work += _item_body(item.children, tight)
                    work.append("</dd>\n")
                work.append("</dl>\n")
                return work
            case "ordered":
                tag = "ol"
                leading: list[tuple[str, str]] = []
                if lst.start != 1:
                    leading.append(("start", str(lst.start)))
                symbol = lst.style.strip("().")
                if symbol != "1":
                    leading.append(("type", symbol))
                attrs = render_attributes(lst.attributes, *leading)
            case "task":
                tag = "ul"
                attrs = render_attributes(lst.attributes, ("class", "task-list"))
            case _:
                tag = "ul"
                attrs = render_attributes(lst.attributes)

        work = [f"<{tag}{attrs}>\n"]
        for item in lst.items:
            work.append(f"<li{render_attributes(item.attributes)}>")
            prefix = ""
            if item.checked is not None:
                checked = " checked" if item.checked else ""
                prefix = f'<input type="checkbox" disabled{checked}> '
            work += _item_body(item.children, tight, prefix)
            work.append("</li>\n")
        work.append(f"</{tag}>\n")
        return work

    def _render_endnotes(self, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render referenced footnotes in number order.

        Notes referenced only from other notes get their numbers while
        this loop runs, so the pending set is recomputed per note.
        """
        sb.append('<section role="doc-endnotes">\n<hr>\n<ol>\n')
        rendered: set[str] = set()
        while True:
            pending = sorted(
                (number, label)
                for label, number in ctx.footnote_numbers.items()
                if label not in rendered
            )
            if not pending:
                break
            number, label = pending[0]
            rendered.add(label)
            note = ctx.footnotes[label]
            backlink = f'<a href="#fnref{number}" role="doc-backlink">{_BACKLINK_ARROW}</a>'

            work: list[_Work] = [f'<li id="fn{number}">\n']
            children = note.children
            if children and isinstance(children[-1], Paragraph):
                last = children[-1]
                work += _blocks(children[:-1])
                work.append(f"<p{render_attributes(last.attributes)}>")
                work += _inlines(last.children)
                work.append(f"{backlink}</p>\n")
            else:
                work += _blocks(children)
                work.append(f"<p>{backlink}</p>\n")
            work.append("</li>\n")
            self._walk(work, sb, ctx)
        sb.append("</ol>\n</section>\n")

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _expand_inline(self, inline: Node, ctx: RenderContext) -> list[_Work]:
        """Markup and children of an inline node."""
        match inline:
            case Text():
                return [escape_html(inline.content)]
            case (
                Emphasis()
                | Strong()
                | Superscript()
                | Subscript()
                | Mark()
                | Insert()
                | Delete()
                | Span()
            ):
                tag = _INLINE_TAGS[type(inline)]
                return [
                    f"<{tag}{render_attributes(inline.attributes)}>",
                    *_inlines(inline.children),
                    f"</{tag}>",
                ]
            case DoubleQuoted() | SingleQuoted():
                if isinstance(inline, DoubleQuoted):
                    open_quote, close_quote = "\u201c", "\u201d"
                else:
                    open_quote, close_quote = "\u2018", "\u2019"
                if inline.attributes:
                    open_quote = f"<span{render_attributes(inline.attributes)}>{open_quote}"
                    close_quote += "</span>"
                return [open_quote, *_inlines(inline.children), close_quote]
            case Link():
                if inline.dangling:
                    # Unresolved references stay as the text that was written
                    return ["[", *_inlines(inline.children), _reference_suffix(inline.reference)]
                leading = (("href", inline.destination),) if inline.destination is not None else ()
                return [
                    f"<a{render_attributes(inline.attributes, *leading)}>",
                    *_inlines(inline.children),
                    "</a>",
                ]
            case Image():
                if inline.dangling:
                    return ["![", *_inlines(inline.children), _reference_suffix(inline.reference)]
                image_leading = [("alt", extract_text(inline))]
                if inline.destination is not None:
                    image_leading.append(("src", inline.destination))
                return [f"<img{render_attributes(inline.attributes, *image_leading)}>"]
            case Verbatim():
                attrs = render_attributes(inline.attributes)
                return [f"<code{attrs}>{escape_html(inline.code)}</code>"]
            case Math():
                kind, open_delim, close_delim = (
                    ("display", "\\[", "\\]") if inline.display else ("inline", "\\(", "\\)")
                )
                attrs = render_attributes(inline.attributes, ("class", f"math {kind}"))
                content = escape_html(inline.content)
                return [f"<span{attrs}>{open_delim}{content}{close_delim}</span>"]
            case RawInline():
                return [inline.content] if inline.format == self._options.output_format else []
            case Symbol():
                return [escape_html(f":{inline.alias}:")]
            case FootnoteRef():
                if inline.number == 0:
                    return [escape_html(f"[^{inline.label}]")]
                ctx.footnote_numbers.setdefault(inline.label, inline.number)
                number = inline.number
                return [
                    f'<a id="fnref{number}" href="#fn{number}" role="doc-noteref">'
                    f"<sup>{number}</sup></a>"
                ]
            case LineBreak():
                return ["<br>\n"]
            case SoftBreak():
                return ["\n"]
            case _:
                raise RenderError(f"Cannot render {type(inline).__name__} as an inline")


def _container(tag: str, attributes: Attributes, children: tuple[Block, ...]) -> list[_Work]:
    return [f"<{tag}{render_attributes(attributes)}>\n", *_blocks(children), f"</{tag}>\n"]


def _item_body(children: tuple[Block, ...], tight: bool, prefix: str = "") -> list[_Work]:
    """List item content.

    - Tight, single paragraph: <li>text</li>
    - Tight, several blocks: paragraphs render as bare text lines
    - Loose: every block renders normally, paragraphs with <p>
    """
    if tight and len(children) == 1 and isinstance(children[0], Paragraph):
        return [prefix, *_inlines(children[0].children)]
    work: list[_Work] = [prefix.rstrip()]
    if not children:
        return work
    work.append("\n")
    for child in children:
        if tight and isinstance(child, Paragraph):
            work += _inlines(child.children)
            work.append("\n")
        else:
            work.append((child, True))
    return work


def _table(table: Table) -> list[_Work]:
    """Pipe table markup; alignment becomes a text-align style per cell."""
    work: list[_Work] = [f"<table{render_attributes(table.attributes)}>\n"]
    if table.caption is not None:
        work.append("<caption>")
        work += _inlines(table.caption)
        work.append("</caption>\n")
    for row in table.rows:
        work.append(f"<tr{render_attributes(row.attributes)}>\n")
        for cell in row.cells:
            tag = "th" if cell.is_header else "td"
            leading = (("style", f"text-align: {cell.align};"),) if cell.align else ()
            work.append(f"<{tag}{render_attributes(cell.attributes, *leading)}>")
            work += _inlines(cell.children)
            work.append(f"</{tag}>\n")
        work.append("</tr>\n")
    work.append("</table>\n")
    return work


def _reference_suffix(reference: str | None) -> str:
    return f"][{escape_html(reference or '')}]"


def _anchor(heading: Heading) -> str:
    """Resolved anchor, or one derived on the spot for hand-built trees."""
    return heading.anchor or heading.attributes.get("id") or make_identifier(extract_text(heading))
