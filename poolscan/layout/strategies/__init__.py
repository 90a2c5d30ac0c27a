"""
Strategies Package - The fallback cascade, primary strategy first.

Import this module to register all built-in strategies.
"""

from .header_grid import HeaderGridStrategy
from .loose_columns import LooseColumnsStrategy
from .flat_rows import FlatRowsStrategy
from .positional_fill import PositionalFillStrategy

__all__ = [
    "HeaderGridStrategy",
    "LooseColumnsStrategy",
    "FlatRowsStrategy",
    "PositionalFillStrategy",
]
