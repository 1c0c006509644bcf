"""Core inline scanning for Gotita.

One left-to-right pass over a TextSpan produces a flat token list. Openers
(delimiters and brackets) wait on OpenerStacks; when a closer finds its
partner both tokens are rewritten to an OpenToken/CloseToken pair right
away. A second pass turns the flat list into a node tree with an explicit
stack, so nesting depth never touches the call stack.

Thread Safety:
InlineScanner instances are single-use. Configuration is read from the
ContextVar once, at construction.

"""

from __future__ import annotations

from dataclasses import replace

from gotita.attributes import EMPTY_ATTRIBUTES, ScanStatus, scan_attributes
from gotita.config import ParseConfig, get_parse_config
from gotita.location import TextSpan
from gotita.nodes import (
    DoubleQuoted,
    Delete,
    Emphasis,
    FootnoteRef,
    Image,
    Inline,
    Insert,
    LineBreak,
    Link,
    Mark,
    Math,
    RawInline,
    SingleQuoted,
    SoftBreak,
    Span,
    Strong,
    Subscript,
    Superscript,
    Symbol,
    Text,
    Verbatim,
)
from gotita.parsing.charsets import (
    ALL_DELIMITERS,
    ASCII_PUNCTUATION,
    BRACED_ONLY_DELIMITERS,
    INLINE_SPECIAL,
)
from gotita.parsing.inline.delimiters import (
    DELIMITER_KINDS,
    ELLIPSIS,
    OpenerStacks,
    can_close_at,
    can_open_at,
    can_open_quote,
    smart_dashes,
    unmatched_literal,
)
from gotita.parsing.inline.links import (
    match_parentheses,
    scan_autolink,
    scan_destination,
    scan_footnote_reference,
    scan_reference_label,
)
from gotita.parsing.inline.special import (
    backtick_run_end,
    find_verbatim_close,
    scan_raw_format,
    scan_symbol,
    verbatim_content,
)
from gotita.parsing.inline.tokens import (
    AttributesToken,
    BracketToken,
    CloseToken,
    ContainerKind,
    DelimiterToken,
    InlineToken,
    NodeToken,
    OpenToken,
    TextToken,
)

_NBSP = "\u00a0"
_QUOTES = frozenset("\"'")

_CONTAINER_NODES = {
    "emphasis": Emphasis,
    "strong": Strong,
    "superscript": Superscript,
    "subscript": Subscript,
    "mark": Mark,
    "insert": Insert,
    "delete": Delete,
    "double_quoted": DoubleQuoted,
    "single_quoted": SingleQuoted,
}


class InlineScanner:
    """Parse one span of inline content into nodes.

    Usage:
        >>> span = TextSpan()
        >>> span.add("_hi_ there", offset=0, lineno=1, col=1)
        >>> [type(node).__name__ for node in InlineScanner(span).parse()]
        ['Emphasis', 'Text']

    """

    __slots__ = (
        "_span",
        "_text",
        "_tokens",
        "_openers",
        "_smart",
        "_transformer",
        "_parens",
        "_unclosed_runs",
    )

    def __init__(self, span: TextSpan, config: ParseConfig | None = None) -> None:
        """Initialize scanner.

        Args:
            span: Inline content with its source map
            config: Parse configuration (defaults to the active ContextVar value)
        """
        config = config if config is not None else get_parse_config()
        self._span = span
        self._text = span.text
        self._tokens: list[InlineToken] = []
        self._openers = OpenerStacks()
        self._smart = config.smart_punctuation
        self._transformer = config.text_transformer
        # Offsets of balanced parentheses, computed on the first "](" seen
        self._parens: dict[int, int] | None = None
        # Backtick run lengths with no closing run further on
        self._unclosed_runs: set[int] = set()

    def parse(self) -> tuple[Inline, ...]:
        """Tokenize, match and build. Never raises on any input."""
        if not self._text:
            return ()
        self._tokenize()
        return self._build()

    # =========================================================================
    # Tokenizing
    # =========================================================================

    def _tokenize(self) -> None:
        text = self._text
        length = len(text)
        pos = 0
        text_start = 0

        while pos < length:
            char = text[pos]
            if char not in INLINE_SPECIAL:
                pos += 1
                continue

            if char == " ":
                run_end = pos
                while run_end < length and text[run_end] == " ":
                    run_end += 1
                if run_end < length and text[run_end] != "\n":
                    pos = run_end
                    continue

            if text_start < pos:
                self._tokens.append(TextToken(text[text_start:pos], text_start, pos))
            end = self._scan_special(char, pos)
            if end is None:
                text_start = pos
                pos += 1
            else:
                text_start = pos = end

        if text_start < length:
            self._tokens.append(TextToken(text[text_start:], text_start, length))

    def _scan_special(self, char: str, pos: int) -> int | None:
        """Handle the construct starting at ``pos``.

        Returns:
            Position after the construct, or None if ``char`` is literal here.
        """
        text = self._text
        nxt = text[pos + 1] if pos + 1 < len(text) else ""

        match char:
            case "\\":
                return self._scan_escape(pos, nxt)
            case "`":
                return self._scan_verbatim(pos)
            case "$":
                return self._scan_math(pos)
            case "<":
                return self._scan_autolink(pos)
            case "[":
                if nxt == "^":
                    found = scan_footnote_reference(text, pos)
                    if found is not None:
                        label, end = found
                        location = self._span.location(pos, end)
                        self._node(FootnoteRef(location, label=label), pos, end)
                        return end
                return self._open_bracket(pos, pos + 1, image=False)
            case "!":
                if nxt == "[":
                    return self._open_bracket(pos, pos + 2, image=True)
                return None
            case "]":
                return self._close_bracket(pos)
            case "{":
                return self._scan_brace(pos, nxt)
            case ".":
                if self._smart and text.startswith("...", pos):
                    self._tokens.append(TextToken(ELLIPSIS, pos, pos + 3))
                    return pos + 3
                return None
            case ":":
                found = scan_symbol(text, pos)
                if found is None:
                    return None
                alias, end = found
                self._node(Symbol(self._span.location(pos, end), alias=alias), pos, end)
                return end
            case "\n":
                self._node(SoftBreak(self._span.location(pos, pos + 1)), pos, pos + 1)
                return pos + 1
            case " ":
                return self._scan_trailing_spaces(pos)
            case "-":
                return self._scan_hyphens(pos, nxt)
            case _:
                return self._scan_delimiter(char, pos, nxt)

    def _node(self, node: Inline, start: int, end: int) -> None:
        self._tokens.append(NodeToken(node, start, end))

    def _scan_escape(self, pos: int, nxt: str) -> int | None:
        if nxt == "\n":
            self._node(LineBreak(self._span.location(pos, pos + 2)), pos, pos + 2)
            return pos + 2
        if nxt == " ":
            self._tokens.append(TextToken(_NBSP, pos, pos + 2))
            return pos + 2
        if nxt and nxt in ASCII_PUNCTUATION:
            self._tokens.append(TextToken(nxt, pos, pos + 2))
            return pos + 2
        return None

    def _scan_trailing_spaces(self, pos: int) -> int:
        """Spaces before a newline (or the end) never reach the output."""
        text = self._text
        end = pos
        while end < len(text) and text[end] == " ":
            end += 1
        if end == len(text):
            return end
        # text[end] == "\n"
        if end - pos >= 2:
            self._node(LineBreak(self._span.location(pos, end + 1)), pos, end + 1)
        else:
            self._node(SoftBreak(self._span.location(end, end + 1)), pos, end + 1)
        return end + 1

    def _scan_verbatim(self, pos: int, *, math: int = 0) -> int:
        """Verbatim span, raw inline, or (with ``math`` dollars) math."""
        text = self._text
        run_end = backtick_run_end(text, pos)
        count = run_end - pos
        close = -1 if count in self._unclosed_runs else find_verbatim_close(text, run_end, count)
        start = pos - math
        if close == -1:
            self._unclosed_runs.add(count)
            self._tokens.append(TextToken(text[start:run_end], start, run_end))
            return run_end

        content = verbatim_content(text[run_end:close])
        end = close + count
        if math:
            node: Inline = Math(self._span.location(start, end), content=content, display=math == 2)
        else:
            raw = scan_raw_format(text, end)
            if raw is not None:
                fmt, end = raw
                node = RawInline(self._span.location(start, end), format=fmt, content=content)
            else:
                node = Verbatim(self._span.location(start, end), code=content)
        self._node(node, start, end)
        return end

    def _scan_math(self, pos: int) -> int | None:
        text = self._text
        dollars = 2 if text.startswith("$$`", pos) else 1 if text.startswith("$`", pos) else 0
        if not dollars:
            return None
        return self._scan_verbatim(pos + dollars, math=dollars)

    def _scan_autolink(self, pos: int) -> int | None:
        found = scan_autolink(self._text, pos)
        if found is None:
            return None
        display, destination, end = found
        label = Text(self._span.location(pos + 1, end - 1), content=display)
        self._node(
            Link(self._span.location(pos, end), children=(label,), destination=destination),
            pos,
            end,
        )
        return end

    def _scan_hyphens(self, pos: int, nxt: str) -> int | None:
        if nxt == "}":
            return self._scan_delimiter("-", pos, nxt)
        text = self._text
        end = pos
        while end < len(text) and text[end] == "-":
            end += 1
        if end < len(text) and text[end] == "}":
            end -= 1  # the last hyphen closes {- -}
        count = end - pos
        if count < 2:
            return None
        content = smart_dashes(count) if self._smart else text[pos:end]
        self._tokens.append(TextToken(content, pos, end))
        return end

    def _scan_brace(self, pos: int, nxt: str) -> int | None:
        if nxt and nxt in ALL_DELIMITERS and (self._smart or nxt not in _QUOTES):
            token = DelimiterToken(nxt, pos, pos + 2, can_open=True, can_close=False, braced=True)
            return self._push_delimiter(token)
        scan = scan_attributes(self._text, pos)
        if scan.status is not ScanStatus.MATCHED:
            return None
        self._tokens.append(AttributesToken(scan.attributes, pos, scan.end))
        return scan.end

    def _scan_delimiter(self, char: str, pos: int, nxt: str) -> int | None:
        if char in _QUOTES and not self._smart:
            return None
        if nxt == "}":
            token = DelimiterToken(char, pos, pos + 2, can_open=False, can_close=True, braced=True)
            return self._push_delimiter(token)
        if char in BRACED_ONLY_DELIMITERS:
            return None
        text = self._text
        if char == "'":
            opens = can_open_quote(text, pos, pos + 1)
        else:
            opens = can_open_at(text, pos + 1)
        token = DelimiterToken(
            char, pos, pos + 1, can_open=opens, can_close=can_close_at(text, pos)
        )
        return self._push_delimiter(token)

    def _push_delimiter(self, token: DelimiterToken) -> int:
        """Match ``token`` as a closer if possible, else record it as an opener."""
        tokens = self._tokens
        index = len(tokens)
        if token.can_close:
            opener = self._openers.match(token, index)
            if opener is not None:
                kind = DELIMITER_KINDS[token.char]
                previous = tokens[opener]
                tokens[opener] = OpenToken(kind, previous.start, previous.end)
                tokens.append(CloseToken(kind, token.start, token.end))
                return token.end
        tokens.append(token)
        if token.can_open:
            self._openers.push(token, index)
        return token.end

    def _open_bracket(self, start: int, end: int, *, image: bool) -> int:
        self._openers.push_bracket(len(self._tokens))
        self._tokens.append(BracketToken(image, start, end))
        return end

    def _close_bracket(self, pos: int) -> int | None:
        """Resolve ``]`` against the innermost ``[``/``![``.

        The bracket pair becomes a link, image or span only if a
        destination, reference label or attribute block follows directly.
        """
        opener_index = self._openers.pop_bracket()
        if opener_index is None:
            return None

        text = self._text
        opener = self._tokens[opener_index]
        assert isinstance(opener, BracketToken)
        kind: ContainerKind = "image" if opener.image else "link"
        after = pos + 1
        nxt = text[after] if after < len(text) else ""
        close: CloseToken | None = None

        if nxt == "(":
            if self._parens is None:
                self._parens = match_parentheses(text)
            found = scan_destination(text, after, self._parens)
            if found is not None:
                destination, end = found
                close = CloseToken(kind, pos, end, destination=destination)
        elif nxt == "[":
            label = scan_reference_label(text, after)
            if label is not None:
                reference, end = label
                close = CloseToken(kind, pos, end, reference=reference)
        elif nxt == "{" and not opener.image:
            scan = scan_attributes(text, after)
            if scan.status is ScanStatus.MATCHED:
                close = CloseToken("span", pos, scan.end, attributes=scan.attributes)

        if close is None:
            return None

        self._tokens[opener_index] = OpenToken(close.kind, opener.start, opener.end)
        # Delimiters opened inside the brackets can no longer close
        self._openers.discard_above(opener_index)
        self._tokens.append(close)
        return close.end

    # =========================================================================
    # Tree building
    # =========================================================================

    def _build(self) -> tuple[Inline, ...]:
        stack: list[tuple[OpenToken | None, list[Inline]]] = [(None, [])]
        run: list[TextToken] = []

        for token in self._tokens:
            children = stack[-1][1]
            match token:
                case TextToken():
                    run.append(token)
                case DelimiterToken():
                    literal = unmatched_literal(token, self._smart)
                    run.append(TextToken(literal, token.start, token.end))
                case BracketToken(image=image, start=start, end=end):
                    run.append(TextToken("![" if image else "[", start, end))
                case NodeToken(node=node):
                    self._flush(run, children)
                    children.append(node)
                case OpenToken():
                    self._flush(run, children)
                    stack.append((token, []))
                case CloseToken():
                    self._flush(run, children)
                    opener, inner = stack.pop()
                    assert opener is not None
                    stack[-1][1].append(self._container(opener, token, tuple(inner)))
                case AttributesToken():
                    self._attach(token, run, children)

        self._flush(run, stack[-1][1])
        return tuple(stack[0][1])

    def _text_node(self, content: str, start: int, end: int) -> Text:
        if self._transformer is not None:
            content = self._transformer(content)
        return Text(self._span.location(start, end), content=content)

    def _flush(self, run: list[TextToken], children: list[Inline]) -> None:
        if not run:
            return
        content = "".join(token.content for token in run)
        children.append(self._text_node(content, run[0].start, run[-1].end))
        run.clear()

    def _attach(self, token: AttributesToken, run: list[TextToken], children: list[Inline]) -> None:
        """Give inline attributes to the preceding element.

        After plain text the attributes wrap the last word in a Span; after
        whitespace (or at the very start) they are dropped, and so is the
        whitespace in front of them.
        """
        attributes = token.attributes
        if run:
            content = "".join(item.content for item in run)
            start, end = run[0].start, run[-1].end
            split = len(content)
            while split > 0 and not content[split - 1].isspace():
                split -= 1
            if split == len(content):
                kept = content.rstrip()
                run.clear()
                if kept:
                    kept_end = max(end - (len(content) - len(kept)), start)
                    children.append(self._text_node(kept, start, kept_end))
                return
            word_start = max(end - (len(content) - split), start)
            run.clear()
            if split:
                children.append(self._text_node(content[:split], start, word_start))
            word = self._text_node(content[split:], word_start, end)
            children.append(
                Span(self._span.location(word_start, end), children=(word,), attributes=attributes)
            )
            return
        if children:
            last = children[-1]
            children[-1] = replace(last, attributes=last.attributes.merge(attributes))

    def _container(
        self, opener: OpenToken, close: CloseToken, children: tuple[Inline, ...]
    ) -> Inline:
        location = self._span.location(opener.start, close.end)
        match close.kind:
            case "link":
                return Link(
                    location,
                    children=children,
                    destination=close.destination,
                    reference=close.reference,
                )
            case "image":
                return Image(
                    location,
                    children=children,
                    destination=close.destination,
                    reference=close.reference,
                )
            case "span":
                return Span(
                    location,
                    children=children,
                    attributes=close.attributes or EMPTY_ATTRIBUTES,
                )
            case kind:
                return _CONTAINER_NODES[kind](location, children=children)


def parse_inlines(span: TextSpan, config: ParseConfig | None = None) -> tuple[Inline, ...]:
    """Parse a span of inline content.

    Example:
        >>> span = TextSpan()
        >>> span.add("`x`", offset=0, lineno=1, col=1)
        >>> parse_inlines(span)[0].code
        'x'
    """
    return InlineScanner(span, config).parse()
