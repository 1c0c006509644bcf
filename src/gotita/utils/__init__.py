"""Utility modules for Gotita.

Provides:
- text: heading identifiers, label normalization, HTML escaping
- logger: get_logger for logging
"""

from gotita.utils.logger import get_logger
from gotita.utils.text import escape_html, make_identifier, normalize_label

__all__ = [
    "escape_html",
    "get_logger",
    "make_identifier",
    "normalize_label",
]
