"""Inline scanning: text spans to inline nodes."""

from gotita.parsing.inline.core import InlineScanner, parse_inlines

__all__ = ["InlineScanner", "parse_inlines"]
