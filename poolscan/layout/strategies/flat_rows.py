"""
Flat Rows Strategy - Row binning without relying on the header index.
"""

import logging
from typing import Optional

from ..base import LayoutStrategy
from ..context import LayoutContext
from ..factory import register_strategy
from ..grid import CellTable
from ..header import is_contaminated
from ..rows import Row

logger = logging.getLogger(__name__)


@register_strategy
class FlatRowsStrategy(LayoutStrategy):
    """
    Treats the first 10 name-bearing rows as the grid rows.

    Every row with a name is kept in order, including the usual side digit
    plus single name, so correctly read side digits stay with their row.
    Only header-like rows (clean runs of lone digits) are skipped.

    Only applies when the sheet shows some axis digits; a sheet with no
    digits at all has no row structure worth trusting and is left to the
    positional fill.
    """
    name = "flat_rows"
    description = "First 10 name rows, columns spread over each row's own span"
    order = 20

    def reconstruct(self, context: LayoutContext) -> Optional[CellTable]:
        if not context.has_digits:
            return None

        cutoff = context.config.row_id_zone
        header = context.header
        rows = context.rows[header.row_index + 1:] if header is not None else context.rows

        data_rows = [row for row in rows if self._is_data_row(row, context)][:10]
        if not data_rows:
            return None

        logger.debug(f"Flat binning over {len(data_rows)} rows")
        return self.fill_spread_rows(data_rows, cutoff)

    def _is_data_row(self, row: Row, context: LayoutContext) -> bool:
        if not self.name_fragments(row, context.config.row_id_zone):
            return False
        # Same shape the header locator accepts: a clean run of lone digits
        digits = sum(1 for f in row if f.is_digit)
        return is_contaminated(row) or digits < context.config.relaxed_min_digits
