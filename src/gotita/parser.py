"""Djot parser producing a typed, resolved AST.

Runs the three parse stages strictly in order:

1. BlockScanner: lines -> frame tree with unparsed text spans, plus the
   reference and footnote tables
2. TreeBuilder: frames -> frozen nodes, inline-scanning every span
3. Resolver: references, heading anchors, footnote numbers

Every stage reports recoverable conditions into one shared Diagnostics
collector; the sorted warnings end up on ``Document.warnings``.

Thread Safety:
- Parser produces immutable AST (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share AST across threads

"""

from __future__ import annotations

import dataclasses
from functools import partial

from gotita.config import ParseConfig, get_parse_config
from gotita.diagnostics import Diagnostics
from gotita.nodes import Document
from gotita.parsing.blocks import BlockScanner, TreeBuilder
from gotita.parsing.inline import parse_inlines
from gotita.resolver import Resolver
from gotita.utils.logger import get_logger

logger = get_logger(__name__)


class Parser:
    """Parser for one djot source string.

    Usage:
        >>> parser = Parser("# Hello\\n\\nWorld")
        >>> doc = parser.parse()
        >>> type(doc.children[0]).__name__
        'Heading'

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).
        The resulting AST is immutable and thread-safe.

    """

    __slots__ = ("_source", "_source_file", "_diagnostics")

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser with source text.

        Configuration is read from ContextVar, not passed as parameters.
        Use set_parse_config() or parse_config_context() before creating
        a Parser if you need non-default configuration.

        Args:
            source: Djot source text (already decoded)
            source_file: Optional source file path for locations and warnings

        """
        self._source = source
        self._source_file = source_file
        self._diagnostics = Diagnostics()

    @property
    def _config(self) -> ParseConfig:
        """Get current parse configuration (thread-local)."""
        return get_parse_config()

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    def parse(self) -> Document:
        """Parse source into a resolved Document.

        Never raises on malformed djot; odd constructs degrade to text and
        recoverable conditions are listed in ``Document.warnings``.
        """
        scanner = BlockScanner(self._source, self._source_file, self._diagnostics)
        root = scanner.scan()

        # The config is captured once so every span sees the same settings
        inlines = partial(parse_inlines, config=self._config)
        builder = TreeBuilder(inlines, self._source_file)
        document = builder.build(root, scanner.references, scanner.footnotes)

        document = Resolver(document, self._diagnostics).resolve()
        warnings = self._diagnostics.sorted()
        if warnings:
            logger.debug("Parse finished with %d warnings", len(warnings))
        return dataclasses.replace(document, warnings=warnings)
