"""
Layout Package - Rebuilds a pool sheet grid from recognized text fragments.

The engine clusters fragments into rows, finds the header row of column
digits, bins names under the header's columns and falls back through
progressively less structured strategies when that yields nothing.

Public API:
    - TextFragment, BoundingBox: Input fragment model
    - classify(): Digit / CellId / Name text classifier
    - ReconstructedGrid: Immutable 10x10 result
    - LayoutConfig: Tunable reconstruction parameters
    - reconstruct(): Run the full pipeline
    - LayoutStrategy, register_strategy(): Extend the cascade

Usage:
    from poolscan.layout import reconstruct, TextFragment, BoundingBox

    fragments = [TextFragment("Mike", BoundingBox(0.4, 0.5, 0.46, 0.52), 0.9), ...]
    grid = reconstruct(fragments)

    print(grid.column_digits, grid.row_digits)
    if grid.is_low_confidence:
        print("Axis digits were not read - confirm before scoring")
"""

# Core data structures
from .fragment import (
    BoundingBox,
    TextFragment,
    LayoutFragment,
    Digit,
    CellId,
    Name,
    classify,
)
from .grid import CellTable, GridBuilder, ReconstructedGrid
from .context import LayoutConfig, LayoutContext, ReconstructionCancelled

# Pipeline stages
from .rows import RowBuilder, cluster_rows
from .header import HeaderMatch, locate_header
from .columns import column_for, even_bounds, header_bounds, row_id_cutoff
from .repair import is_permutation, repair_sequence

# Strategy framework
from .base import LayoutStrategy
from .factory import (
    create_strategy,
    create_cascade,
    get_strategy_names,
    get_strategy_info,
    register_strategy,
)

# Import strategies to register them
from . import strategies

from .engine import reconstruct, run_cascade

__all__ = [
    # Data structures
    "BoundingBox",
    "TextFragment",
    "LayoutFragment",
    "Digit",
    "CellId",
    "Name",
    "classify",
    "CellTable",
    "GridBuilder",
    "ReconstructedGrid",
    "LayoutConfig",
    "LayoutContext",
    "ReconstructionCancelled",
    # Stages
    "RowBuilder",
    "cluster_rows",
    "HeaderMatch",
    "locate_header",
    "column_for",
    "even_bounds",
    "header_bounds",
    "row_id_cutoff",
    "is_permutation",
    "repair_sequence",
    # Strategy framework
    "LayoutStrategy",
    "create_strategy",
    "create_cascade",
    "get_strategy_names",
    "get_strategy_info",
    "register_strategy",
    # Engine
    "reconstruct",
    "run_cascade",
]
