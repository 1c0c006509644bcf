"""Typed AST nodes for Gotita.

All AST nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: the finished tree is safe to share across threads
- Pattern matching: renderers dispatch with ``match`` statements

Every node carries its SourceLocation and an Attributes set filled from
djot ``{...}`` annotations.

Node Hierarchy:
Node (base)
├── Block
│   ├── Document
│   ├── Paragraph
│   ├── Heading
│   ├── CodeBlock
│   ├── RawBlock
│   ├── BlockQuote
│   ├── List / ListItem
│   ├── ThematicBreak
│   ├── Table / TableRow / TableCell
│   ├── Div
│   └── FootnoteDef
└── Inline
    ├── Text
    ├── Emphasis / Strong
    ├── Superscript / Subscript
    ├── Mark / Insert / Delete
    ├── DoubleQuoted / SingleQuoted
    ├── Span
    ├── Link / Image
    ├── Verbatim / Math
    ├── RawInline
    ├── Symbol
    ├── FootnoteRef
    └── LineBreak / SoftBreak

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from gotita.attributes import EMPTY_ATTRIBUTES, Attributes
from gotita.location import SourceLocation

if TYPE_CHECKING:
    from gotita.diagnostics import CompileWarning

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    Attributes:
        location: Where the node came from in the source
        attributes: Attributes attached with ``{...}`` syntax

    """

    location: SourceLocation
    attributes: Attributes = field(default=EMPTY_ATTRIBUTES, kw_only=True)


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content.

    Smart punctuation (curly apostrophes, ellipses, dashes) is already
    folded into ``content``.

    """

    content: str


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    """Emphasized text.

    Djot: _text_
    HTML: <em>text</em>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strong(Node):
    """Strong text.

    Djot: *text*
    HTML: <strong>text</strong>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Superscript(Node):
    """Djot: ^text^  HTML: <sup>text</sup>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Subscript(Node):
    """Djot: ~text~  HTML: <sub>text</sub>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Mark(Node):
    """Djot: {=text=}  HTML: <mark>text</mark>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Insert(Node):
    """Djot: {+text+}  HTML: <ins>text</ins>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Delete(Node):
    """Djot: {-text-}  HTML: <del>text</del>"""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class DoubleQuoted(Node):
    """Matched straight double quotes, rendered with curly quotes."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class SingleQuoted(Node):
    """Matched straight single quotes, rendered with curly quotes."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Span(Node):
    """Generic inline container.

    Djot: [text]{.class} or word{.class}
    HTML: <span class="class">text</span>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    Djot: [text](url), [text][label], [text][]

    A reference link keeps ``reference`` (the label as written, empty for
    the collapsed ``[text][]`` form) until the resolver fills in
    ``destination`` or marks the link ``dangling``.

    """

    children: tuple[Inline, ...]
    destination: str | None = None
    reference: str | None = None
    dangling: bool = False


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image; ``children`` form the alt text.

    Djot: ![alt](url) or ![alt][label]

    """

    children: tuple[Inline, ...]
    destination: str | None = None
    reference: str | None = None
    dangling: bool = False


@dataclass(frozen=True, slots=True)
class Verbatim(Node):
    """Inline code.

    Djot: `code`
    HTML: <code>code</code>

    """

    code: str


@dataclass(frozen=True, slots=True)
class Math(Node):
    """TeX math.

    Djot: $`x^2` (inline) or $$`x^2` (display)

    """

    content: str
    display: bool = False


@dataclass(frozen=True, slots=True)
class RawInline(Node):
    """Format-tagged passthrough.

    Djot: `<b>`{=html}

    """

    format: str
    content: str


@dataclass(frozen=True, slots=True)
class Symbol(Node):
    """Symbol alias.

    Djot: :smile:

    """

    alias: str


@dataclass(frozen=True, slots=True)
class FootnoteRef(Node):
    """Footnote reference; ``number`` is assigned by the resolver.

    Djot: [^label]

    """

    label: str
    number: int = 0


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Hard line break (backslash or two trailing spaces before a newline)."""


@dataclass(frozen=True, slots=True)
class SoftBreak(Node):
    """Soft line break (single newline inside a paragraph)."""


# PEP 695 type alias for inline elements
type Inline = (
    Text
    | Emphasis
    | Strong
    | Superscript
    | Subscript
    | Mark
    | Insert
    | Delete
    | DoubleQuoted
    | SingleQuoted
    | Span
    | Link
    | Image
    | Verbatim
    | Math
    | RawInline
    | Symbol
    | FootnoteRef
    | LineBreak
    | SoftBreak
)

# Inline nodes whose only payload is ``children``
CONTAINER_INLINES = (
    Emphasis,
    Strong,
    Superscript,
    Subscript,
    Mark,
    Insert,
    Delete,
    DoubleQuoted,
    SingleQuoted,
    Span,
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block.

    Djot: lines of text ended by a blank line
    HTML: <p>text</p>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """Heading, possibly spanning several lines.

    Djot: # Heading
    HTML: <h1>Heading</h1>

    ``anchor`` is the unique identifier assigned by the resolver (explicit
    ``{#id}`` wins over the generated one).

    """

    level: Literal[1, 2, 3, 4, 5, 6]
    children: tuple[Inline, ...]
    anchor: str | None = None


@dataclass(frozen=True, slots=True)
class CodeBlock(Node):
    """Fenced code block, content kept byte for byte.

    Djot: ``` python ... ```
    HTML: <pre><code class="language-python">...</code></pre>

    """

    code: str
    language: str | None = None


@dataclass(frozen=True, slots=True)
class RawBlock(Node):
    """Format-tagged passthrough block.

    Djot: ``` =html ... ```

    """

    format: str
    content: str


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    """Block quote.

    Djot: > quoted text
    HTML: <blockquote>...</blockquote>

    """

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """List item.

    ``checked`` is set for task items; ``term`` for definition-list items
    (the first paragraph of the item becomes the term).

    """

    children: tuple[Block, ...]
    checked: bool | None = None
    term: tuple[Inline, ...] | None = None


type ListKind = Literal["bullet", "ordered", "task", "definition"]


@dataclass(frozen=True, slots=True)
class List(Node):
    """Bullet, ordered, task or definition list.

    ``style`` is the marker shape shared by all items: ``-``, ``+``, ``*``
    for bullets, or numbering plus delimiter for ordered lists (``1.``,
    ``a)``, ``(I)``, ...).

    """

    items: tuple[ListItem, ...]
    kind: ListKind = "bullet"
    tight: bool = True
    start: int = 1
    style: str = "-"


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    """Thematic break.

    Djot: * * * or ---
    HTML: <hr>

    """


@dataclass(frozen=True, slots=True)
class TableCell(Node):
    """Table cell (th or td)."""

    children: tuple[Inline, ...]
    is_header: bool = False
    align: Literal["left", "center", "right"] | None = None


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    """Table row."""

    cells: tuple[TableCell, ...]
    is_header: bool = False


@dataclass(frozen=True, slots=True)
class Table(Node):
    """Pipe table.

    Djot:
        | a | b |
        |---|--:|
        | 1 | 2 |
        ^ caption

    """

    rows: tuple[TableRow, ...]
    caption: tuple[Inline, ...] | None = None


@dataclass(frozen=True, slots=True)
class Div(Node):
    """Generic block container.

    Djot: ::: warning ... :::
    HTML: <div class="warning">...</div>

    """

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class FootnoteDef(Node):
    """Footnote definition (collected into Document.footnotes).

    Djot: [^label]: Footnote text

    """

    label: str
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class Reference(Node):
    """Link reference definition.

    Djot: [label]: https://example.com

    Extra attributes (``title`` most commonly) come from an attribute line
    before the definition and are merged into every link that uses it.

    """

    label: str
    destination: str


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node.

    Attributes:
        children: Top-level blocks
        references: Normalized label -> Reference (first definition wins)
        footnotes: Label -> FootnoteDef
        warnings: Recoverable conditions found while parsing

    """

    children: tuple[Block, ...]
    references: dict[str, Reference] = field(default_factory=dict)
    footnotes: dict[str, FootnoteDef] = field(default_factory=dict)
    warnings: tuple[CompileWarning, ...] = ()


# PEP 695 type alias for block elements
type Block = (
    Paragraph
    | Heading
    | CodeBlock
    | RawBlock
    | BlockQuote
    | List
    | ListItem
    | ThematicBreak
    | Table
    | Div
    | FootnoteDef
)
