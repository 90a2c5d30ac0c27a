"""
Base Strategy Module - Abstract base class for layout strategies.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .columns import spread_column
from .context import LayoutContext
from .fragment import LayoutFragment
from .grid import CellTable, GridBuilder
from .rows import Row


class LayoutStrategy(ABC):
    """
    Abstract base class for all grid reconstruction strategies.

    Strategies form the fallback cascade: the engine tries them in
    ascending `order` and keeps the first table with a filled cell.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
        order: Position in the fallback cascade (lower runs first)
    """
    name: str = "base"
    description: str = "Base strategy"
    order: int = 100

    @abstractmethod
    def reconstruct(self, context: LayoutContext) -> Optional[CellTable]:
        """
        Attempt to fill the 10x10 table.

        Args:
            context: Layout context with clustered rows and header

        Returns:
            CellTable, or None if this strategy does not apply
        """
        pass

    def side_digit(self, row: Row, cutoff: float) -> Optional[int]:
        """
        Row-identifier digit: the leftmost lone digit left of cutoff.

        Args:
            row: Clustered row
            cutoff: Right edge of the row-identifier strip

        Returns:
            Digit 0-9 or None
        """
        in_zone = [f for f in row if f.is_digit and f.x < cutoff]
        if not in_zone:
            return None
        return min(in_zone, key=lambda f: f.min_x).digit

    def name_fragments(self, row: Row, cutoff: float) -> List[LayoutFragment]:
        """
        Fragments that may carry cell text.

        Only name text counts: lone digits are either row identifiers or
        box numbers 1-9, and multi-digit integers are box numbers.
        """
        return [f for f in row if f.is_name and f.x >= cutoff]

    def fill_spread_rows(
        self,
        data_rows: Sequence[Row],
        cutoff: float
    ) -> CellTable:
        """
        Populate up to 10 rows, binning each row's names over its own x span.

        Args:
            data_rows: Rows to treat as grid rows 0..9
            cutoff: Right edge of the row-identifier strip

        Returns:
            CellTable built from the rows
        """
        builder = GridBuilder()
        for grid_row, row in enumerate(data_rows[:10]):
            builder.set_row_digit(grid_row, self.side_digit(row, cutoff))
            names = self.name_fragments(row, cutoff)
            if not names:
                continue
            lo = min(f.x for f in names)
            hi = max(f.x for f in names)
            for fragment in names:
                builder.add_text(grid_row, spread_column(fragment.x, lo, hi), fragment.text)
        return builder.build()
