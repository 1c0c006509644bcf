"""Gotita renderers.

Renderers convert a resolved Document into an output format.

Available Renderers:
- HtmlRenderer: Renders AST to HTML using StringBuilder pattern
- EventRenderer: Flattens AST into a source-anchored JSON event stream

Thread Safety:
All renderers keep per-render state local to each render() call.
Safe for concurrent use from multiple threads.

"""

from gotita.renderers.events import Event, EventRenderer
from gotita.renderers.html import HtmlRenderer
from gotita.renderers.protocol import ASTRenderer

__all__ = ["ASTRenderer", "Event", "EventRenderer", "HtmlRenderer"]
