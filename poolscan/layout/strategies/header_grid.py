"""
Header Grid Strategy - Primary reconstruction from a detected header row.
"""

import logging
from typing import Optional

from ..base import LayoutStrategy
from ..columns import column_for, header_bounds, row_id_cutoff
from ..context import LayoutContext
from ..factory import register_strategy
from ..grid import CellTable, GridBuilder

logger = logging.getLogger(__name__)


@register_strategy
class HeaderGridStrategy(LayoutStrategy):
    """
    Bins every name under the header's column boundaries.

    The 10 rows below the header become grid rows 0-9. Each row's side
    digit is read from the row-identifier strip and every name fragment is
    appended to the cell its center falls in, so two-line names that were
    recognized as separate fragments are joined back together.
    """
    name = "header_grid"
    description = "Header-derived column boundaries under the detected header row"
    order = 0

    def reconstruct(self, context: LayoutContext) -> Optional[CellTable]:
        header = context.header
        if header is None:
            return None

        config = context.config
        bounds = header_bounds(header.centers, config.column_margin)
        cutoff = row_id_cutoff(header.centers[0], config.row_id_zone, config.row_id_gap)
        rows = context.rows

        builder = GridBuilder()
        for offset in range(10):
            physical = header.row_index + 1 + offset
            if physical >= len(rows):
                logger.debug(f"Only {offset} data rows below header")
                break
            row = rows[physical]
            builder.set_row_digit(offset, self.side_digit(row, cutoff))
            for fragment in self.name_fragments(row, cutoff):
                col = column_for(fragment.x, bounds)
                if col is not None:
                    builder.add_text(offset, col, fragment.text)

        return builder.build()
