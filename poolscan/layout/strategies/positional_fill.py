"""
Positional Fill Strategy - Last resort raster fill of merged fragments.
"""

from typing import List, Optional

from ..base import LayoutStrategy
from ..context import LayoutContext
from ..factory import register_strategy
from ..fragment import LayoutFragment
from ..grid import CellTable, GridBuilder

GRID_CELLS = 100


@register_strategy
class PositionalFillStrategy(LayoutStrategy):
    """
    Abandons row/column structure entirely.

    Name fragments are sorted top-to-bottom then left-to-right, neighbours
    close in both axes are merged into one cell, and the merged cells are
    laid out in raster order (row = index // 10, col = index % 10).
    """
    name = "positional_fill"
    description = "Raster fill of merged name fragments (no structure)"
    order = 30

    def reconstruct(self, context: LayoutContext) -> Optional[CellTable]:
        config = context.config
        names = sorted(
            (f for f in context.fragments if f.is_name),
            key=LayoutFragment.sort_key,
        )

        merged: List[List[LayoutFragment]] = []
        for fragment in names:
            if merged:
                previous = merged[-1][-1]
                if (abs(fragment.y - previous.y) < config.merge_dy
                        and abs(fragment.x - previous.x) < config.merge_dx):
                    merged[-1].append(fragment)
                    continue
            merged.append([fragment])

        builder = GridBuilder()
        for index, group in enumerate(merged[:GRID_CELLS]):
            text = " ".join(f.text for f in group)
            builder.add_text(index // 10, index % 10, text)
        return builder.build()
