"""
Layout Engine Module - Runs the fallback cascade and repairs the axes.
"""

import logging
import threading
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .base import LayoutStrategy
from .columns import header_bounds
from .context import LayoutConfig, LayoutContext, ReconstructionCancelled
from .factory import create_cascade
from .fragment import TextFragment
from .grid import CellTable, ReconstructedGrid
from .repair import repair_sequence

logger = logging.getLogger(__name__)


def run_cascade(
    context: LayoutContext,
    strategies: Sequence[LayoutStrategy]
) -> Tuple[CellTable, Optional[str]]:
    """
    Try strategies in order, stopping at the first with a filled cell.

    Args:
        context: Layout context
        strategies: Strategies in cascade order

    Returns:
        Tuple of (CellTable, strategy name or None if nothing was filled)

    Raises:
        ReconstructionCancelled: If the context's cancel flag is set
    """
    for index, strategy in enumerate(strategies):
        if context.is_cancelled():
            raise ReconstructionCancelled(f"Cancelled before {strategy.name}")

        table = strategy.reconstruct(context)
        filled = table.filled_count if table is not None else 0
        logger.debug(f"Strategy {strategy.name}: {filled} cells")

        if table is not None and filled > 0:
            if index > 0:
                logger.info(f"Fell back to {strategy.name} ({filled} cells)")
            return table, strategy.name

    logger.info("No strategy filled any cell")
    return CellTable.empty(), None


def reconstruct(
    fragments: Sequence[TextFragment],
    config: Optional[LayoutConfig] = None,
    cancel_flag: Optional[threading.Event] = None,
    strategies: Optional[List[LayoutStrategy]] = None
) -> ReconstructedGrid:
    """
    Rebuild the 10x10 pool grid from unordered text fragments.

    Never fails on malformed input: missing structure falls through the
    cascade and missing digits are replaced by a flagged filler.

    Args:
        fragments: Recognized text fragments, any order
        config: Reconstruction tunables (defaults if None)
        cancel_flag: Event the caller may set to abort between stages
        strategies: Override the registered cascade (mainly for tests)

    Returns:
        ReconstructedGrid with exactly 100 cells and valid digit axes

    Raises:
        ReconstructionCancelled: If cancel_flag is set during the run
    """
    context = LayoutContext.from_fragments(fragments, config, cancel_flag)
    if strategies is None:
        strategies = create_cascade()

    table, strategy_name = run_cascade(context, strategies)

    header = context.header
    column_values = header.digits if header is not None else []
    rng = np.random.default_rng(context.config.repair_seed)
    column_digits, columns_repaired = repair_sequence(column_values, rng, label="column")
    row_digits, rows_repaired = repair_sequence(table.row_digits, rng, label="row")

    bounds = None
    if header is not None:
        bounds = header_bounds(header.centers, context.config.column_margin)

    grid = ReconstructedGrid(
        column_digits=column_digits,
        row_digits=row_digits,
        cells=table.cells,
        columns_repaired=columns_repaired,
        rows_repaired=rows_repaired,
        strategy=strategy_name,
        header_row=header.row_index if header is not None else None,
        column_bounds=bounds,
        confidence=context.mean_confidence(),
    )
    logger.debug(
        f"Reconstructed {grid.filled_count} cells from {len(fragments)} fragments "
        f"via {strategy_name}"
    )
    return grid
