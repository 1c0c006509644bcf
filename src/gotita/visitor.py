"""Tree walking for Gotita ASTs.

``BaseVisitor`` walks a document depth-first and calls a ``visit_<kind>``
method per node; ``transform`` rebuilds the frozen tree bottom-up through a
single rewrite function.

Collect all headings:

    class HeadingCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.headings: list[Heading] = []

        def visit_heading(self, node: Heading) -> None:
            self.headings.append(node)

    collector = HeadingCollector()
    collector.visit(doc)

Drop every image:

    def drop_images(node: Node) -> Node | None:
        return None if isinstance(node, Image) else node

    new_doc = transform(doc, drop_images)

Footnote definitions live in ``Document.footnotes`` rather than in the
block flow; both the visitor and ``transform`` reach them after the
document's children.

Thread Safety:
    A visitor usually accumulates state, so give each thread its own.
    ``transform`` is pure.

"""

import dataclasses
import re
from collections.abc import Callable, Iterator

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

_TREE_NODES: tuple[type[Node], ...] = (
    Document,
    Heading,
    Paragraph,
    CodeBlock,
    RawBlock,
    BlockQuote,
    List,
    ListItem,
    ThematicBreak,
    Table,
    TableRow,
    TableCell,
    Div,
    FootnoteDef,
    Text,
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
    Link,
    Image,
    Verbatim,
    Math,
    RawInline,
    Symbol,
    FootnoteRef,
    LineBreak,
    SoftBreak,
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Node type -> name of its BaseVisitor method ("FootnoteDef" -> "visit_footnote_def")
_VISIT_METHODS: dict[type[Node], str] = {
    cls: "visit_" + _CAMEL_BOUNDARY.sub("_", cls.__name__).lower() for cls in _TREE_NODES
}

# Node type -> fields holding child nodes, in document order.
# Either field may be None (a list item without a term, a table without a caption).
_CHILD_FIELDS: dict[type[Node], tuple[str, ...]] = {
    cls: ("children",)
    for cls in _TREE_NODES
    if any(f.name == "children" for f in dataclasses.fields(cls))
}
_CHILD_FIELDS[ListItem] = ("term", "children")
_CHILD_FIELDS[List] = ("items",)
_CHILD_FIELDS[Table] = ("rows", "caption")
_CHILD_FIELDS[TableRow] = ("cells",)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in document order.

    For a Document the footnote definitions follow its blocks.
    """
    for name in _CHILD_FIELDS.get(type(node), ()):
        yield from getattr(node, name) or ()
    if isinstance(node, Document):
        yield from node.footnotes.values()


class BaseVisitor[T]:
    """Depth-first visitor with one ``visit_*`` method per node type.

    Override the methods for the nodes you care about; everything else goes
    to ``visit_default``. Children are walked after the node's own method
    returns, whatever it returns.

    ``T`` is the return type of the visit methods (``None`` for visitors
    that only collect).

    """

    def visit(self, node: Node) -> T:
        """Call the node's ``visit_*`` method, then visit its descendants.

        Descendants are walked in document order from an explicit stack, so
        nesting depth is not limited by the interpreter's recursion limit.
        Returns what the ``visit_*`` method of ``node`` itself returned.
        """
        result = self._dispatch(node)
        stack = [*reversed(tuple(iter_children(node)))]
        while stack:
            current = stack.pop()
            self._dispatch(current)
            stack.extend(reversed(tuple(iter_children(current))))
        return result

    def _dispatch(self, node: Node) -> T:
        method = _VISIT_METHODS.get(type(node))
        return getattr(self, method)(node) if method else self.visit_default(node)

    def visit_default(self, node: Node) -> T:
        """Fallback for every ``visit_*`` method not overridden (returns None)."""
        return None  # type: ignore[return-value]

    # -- Blocks ----------------------------------------------------------------

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_heading(self, node: Heading) -> T:
        return self.visit_default(node)

    def visit_paragraph(self, node: Paragraph) -> T:
        return self.visit_default(node)

    def visit_code_block(self, node: CodeBlock) -> T:
        return self.visit_default(node)

    def visit_raw_block(self, node: RawBlock) -> T:
        return self.visit_default(node)

    def visit_block_quote(self, node: BlockQuote) -> T:
        return self.visit_default(node)

    def visit_list(self, node: List) -> T:
        return self.visit_default(node)

    def visit_list_item(self, node: ListItem) -> T:
        return self.visit_default(node)

    def visit_thematic_break(self, node: ThematicBreak) -> T:
        return self.visit_default(node)

    def visit_table(self, node: Table) -> T:
        return self.visit_default(node)

    def visit_table_row(self, node: TableRow) -> T:
        return self.visit_default(node)

    def visit_table_cell(self, node: TableCell) -> T:
        return self.visit_default(node)

    def visit_div(self, node: Div) -> T:
        return self.visit_default(node)

    def visit_footnote_def(self, node: FootnoteDef) -> T:
        return self.visit_default(node)

    # -- Inlines ---------------------------------------------------------------

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_emphasis(self, node: Emphasis) -> T:
        return self.visit_default(node)

    def visit_strong(self, node: Strong) -> T:
        return self.visit_default(node)

    def visit_superscript(self, node: Superscript) -> T:
        return self.visit_default(node)

    def visit_subscript(self, node: Subscript) -> T:
        return self.visit_default(node)

    def visit_mark(self, node: Mark) -> T:
        return self.visit_default(node)

    def visit_insert(self, node: Insert) -> T:
        return self.visit_default(node)

    def visit_delete(self, node: Delete) -> T:
        return self.visit_default(node)

    def visit_double_quoted(self, node: DoubleQuoted) -> T:
        return self.visit_default(node)

    def visit_single_quoted(self, node: SingleQuoted) -> T:
        return self.visit_default(node)

    def visit_span(self, node: Span) -> T:
        return self.visit_default(node)

    def visit_link(self, node: Link) -> T:
        return self.visit_default(node)

    def visit_image(self, node: Image) -> T:
        return self.visit_default(node)

    def visit_verbatim(self, node: Verbatim) -> T:
        return self.visit_default(node)

    def visit_math(self, node: Math) -> T:
        return self.visit_default(node)

    def visit_raw_inline(self, node: RawInline) -> T:
        return self.visit_default(node)

    def visit_symbol(self, node: Symbol) -> T:
        return self.visit_default(node)

    def visit_footnote_ref(self, node: FootnoteRef) -> T:
        return self.visit_default(node)

    def visit_line_break(self, node: LineBreak) -> T:
        return self.visit_default(node)

    def visit_soft_break(self, node: SoftBreak) -> T:
        return self.visit_default(node)


type Rewrite = Callable[[Node], Node | None]


def transform(doc: Document, fn: Rewrite) -> Document:
    """Rebuild ``doc`` by passing every node through ``fn``, bottom-up.

    ``fn`` sees each node with its children already rewritten and returns
    the replacement, the node itself to keep it, or None to remove it.
    Removing a footnote definition drops it from ``Document.footnotes``.
    Subtrees ``fn`` leaves alone are shared with the input, so an identity
    ``fn`` returns ``doc`` itself.

    The walk keeps its own stack, so any nesting depth works.

    Raises:
        TypeError: If ``fn`` removes or replaces the root Document

    """
    # A node is pushed twice: once to schedule its children, once (done=True)
    # to collect their rewrites from the top of ``results``.
    stack: list[tuple[Node, bool]] = [(doc, False)]
    results: list[Node | None] = []
    while stack:
        node, done = stack.pop()
        children = tuple(iter_children(node))
        if not done:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
            continue
        start = len(results) - len(children)
        rewritten = results[start:]
        del results[start:]
        results.append(fn(_rebuild(node, rewritten)))

    result = results[0]
    if not isinstance(result, Document):
        msg = "transform fn must return a Document for the root (cannot remove root)"
        raise TypeError(msg)
    return result


def _rebuild(node: Node, rewritten: list[Node | None]) -> Node:
    """Swap the children of ``node`` for their rewrites.

    ``rewritten`` lines up with ``iter_children(node)``. ``node`` itself comes
    back when every child is unchanged.
    """
    changes: dict[str, object] = {}
    index = 0
    for name in _CHILD_FIELDS.get(type(node), ()):
        children = getattr(node, name)
        if children is None:
            continue
        results = rewritten[index : index + len(children)]
        index += len(children)
        if any(new is not old for new, old in zip(results, children, strict=True)):
            changes[name] = tuple(new for new in results if new is not None)
    if isinstance(node, Document):
        footnotes: dict[str, FootnoteDef] = {}
        changed = False
        for (label, footnote), new in zip(node.footnotes.items(), rewritten[index:], strict=True):
            changed = changed or new is not footnote
            if isinstance(new, FootnoteDef):
                footnotes[label] = new
        if changed:
            changes["footnotes"] = footnotes
    return dataclasses.replace(node, **changes) if changes else node
