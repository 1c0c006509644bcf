"""Block scanning: lines to the open-block tree, then to frozen nodes."""

from gotita.parsing.blocks.build import TreeBuilder
from gotita.parsing.blocks.core import BlockScanner
from gotita.parsing.blocks.table import build_table, separator_alignments, split_cells

__all__ = [
    "BlockScanner",
    "TreeBuilder",
    "build_table",
    "separator_alignments",
    "split_cells",
]
