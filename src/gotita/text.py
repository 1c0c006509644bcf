"""Extract plain text from Gotita AST nodes.

Provides a public API for extracting text content from any node type,
used for heading identifiers, implicit heading references and image alt
text.

Example:
    >>> from gotita import parse, extract_text
    >>> doc = parse("# Hello *World*")
    >>> extract_text(doc.children[0])
    'Hello World'
"""

from gotita.nodes import (
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


_INLINE_CONTAINERS = (
    Emphasis,
    Strong,
    Superscript,
    Subscript,
    Mark,
    Insert,
    Delete,
    Span,
    Link,
    Image,
    Paragraph,
    Heading,
    TableCell,
)


def extract_text(node: Node) -> str:
    """Extract plain text from any AST node.

    Walks the tree with an explicit stack, concatenating text content. Raw
    blocks and raw inlines contribute nothing. LineBreak and SoftBreak
    contribute a space; quoted text keeps its curly quotes. Block children
    are separated by a space.

    Args:
        node: Any AST node (block or inline).

    Returns:
        Concatenated plain text from the node and its descendants.

    """
    stack: list[tuple[Node, bool]] = [(node, False)]
    texts: list[str] = []
    while stack:
        current, done = stack.pop()
        children = _parts(current)
        if children is None:
            texts.append(_leaf_text(current))
            continue
        if not done:
            stack.append((current, True))
            stack.extend((child, False) for child in reversed(children))
            continue
        start = len(texts) - len(children)
        parts = texts[start:]
        del texts[start:]
        texts.append(_combine(current, parts))
    return texts[0]


def _parts(node: Node) -> tuple[Node, ...] | None:
    """Children that contribute text, or None for a leaf."""
    match node:
        case DoubleQuoted() | SingleQuoted() | BlockQuote() | Div() | FootnoteDef() | Document():
            return node.children
        case List():
            return node.items
        case ListItem():
            return (node.term or ()) + node.children
        case Table():
            return node.rows
        case TableRow():
            return node.cells
        case _ if isinstance(node, _INLINE_CONTAINERS):
            return node.children  # type: ignore[attr-defined]
        case _:
            return None


def _leaf_text(node: Node) -> str:
    match node:
        case Text():
            return node.content
        case Verbatim():
            return node.code
        case Math():
            return node.content
        case Symbol():
            return f":{node.alias}:"
        case LineBreak() | SoftBreak():
            return " "
        case CodeBlock():
            return node.code
        case RawInline() | RawBlock() | ThematicBreak() | FootnoteRef():
            return ""
        case _:
            return ""


def _combine(node: Node, parts: list[str]) -> str:
    """Join the texts of ``node``'s children."""
    match node:
        case DoubleQuoted():
            return "“" + "".join(parts) + "”"
        case SingleQuoted():
            return "‘" + "".join(parts) + "’"
        case ListItem():
            split = len(node.term or ())
            term = "".join(parts[:split])
            body = " ".join(parts[split:])
            return f"{term} {body}" if term and body else term or body
        case BlockQuote() | Div() | FootnoteDef() | Document() | List() | Table() | TableRow():
            return " ".join(parts)
        case _:
            return "".join(parts)
