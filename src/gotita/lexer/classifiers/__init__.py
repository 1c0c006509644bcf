"""Block-level content classifiers for the Gotita lexer.

Each classifier is a mixin that provides classification logic for
a specific block type. Classifiers are pure functions that determine
whether a line matches a particular block pattern.
"""

from gotita.lexer.classifiers.attributes import (
    AttributeClassifierMixin,
)
from gotita.lexer.classifiers.fence import (
    FenceClassifierMixin,
    is_closing_div,
    is_closing_fence,
)
from gotita.lexer.classifiers.heading import (
    HeadingClassifierMixin,
)
from gotita.lexer.classifiers.list import (
    ListClassifierMixin,
)
from gotita.lexer.classifiers.quote import (
    QuoteClassifierMixin,
    quote_marker_width,
)
from gotita.lexer.classifiers.reference import (
    ReferenceClassifierMixin,
)
from gotita.lexer.classifiers.table import (
    TableClassifierMixin,
)
from gotita.lexer.classifiers.thematic import (
    ThematicClassifierMixin,
)

__all__ = [
    "AttributeClassifierMixin",
    "FenceClassifierMixin",
    "HeadingClassifierMixin",
    "ListClassifierMixin",
    "QuoteClassifierMixin",
    "ReferenceClassifierMixin",
    "TableClassifierMixin",
    "ThematicClassifierMixin",
    "is_closing_div",
    "is_closing_fence",
    "quote_marker_width",
]
