"""
Loose Columns Strategy - Header rows, per-row column spread.
"""

from typing import Optional

from ..base import LayoutStrategy
from ..columns import row_id_cutoff
from ..context import LayoutContext
from ..factory import register_strategy
from ..grid import CellTable


@register_strategy
class LooseColumnsStrategy(LayoutStrategy):
    """
    Keeps the header's row offsets but ignores its column boundaries.

    Each row's names are spread over 10 bins across that row's own x span,
    which tolerates a header whose digits were found in the wrong place.
    """
    name = "loose_columns"
    description = "Header rows with columns spread over each row's own span"
    order = 10

    def reconstruct(self, context: LayoutContext) -> Optional[CellTable]:
        header = context.header
        if header is None:
            return None

        config = context.config
        cutoff = row_id_cutoff(header.centers[0], config.row_id_zone, config.row_id_gap)
        start = header.row_index + 1
        return self.fill_spread_rows(context.rows[start:start + 10], cutoff)
