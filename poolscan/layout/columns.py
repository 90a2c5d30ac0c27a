"""
Column Binner Module - Column boundaries and x-to-column lookup.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

GRID_COLS = 10

Bounds = Tuple[float, ...]


def even_bounds(lo: float = 0.0, hi: float = 1.0) -> Bounds:
    """11 evenly spaced boundaries across [lo, hi]."""
    return tuple(float(b) for b in np.linspace(lo, hi, GRID_COLS + 1))


def header_bounds(centers: Sequence[float], margin: float = 0.08) -> Bounds:
    """
    Derive column boundaries from header digit centers.

    With 10 centers, interior boundaries are midpoints between neighbours
    and the outer ones are padded by margin (clamped to [0, 1]). A partial
    (relaxed) header is split evenly across its padded span.

    Args:
        centers: Header fragment center x values, any order
        margin: Outward padding for the first and last boundary

    Returns:
        11 strictly ascending boundaries
    """
    if not centers:
        return even_bounds()

    xs = np.sort(np.asarray(centers, dtype=float))
    first = max(0.0, float(xs[0]) - margin)
    last = min(1.0, float(xs[-1]) + margin)

    if len(xs) != GRID_COLS:
        bounds = np.linspace(first, last, GRID_COLS + 1)
    else:
        bounds = np.empty(GRID_COLS + 1)
        bounds[0] = first
        bounds[1:GRID_COLS] = (xs[:-1] + xs[1:]) / 2
        bounds[GRID_COLS] = last

    if np.all(np.diff(bounds) > 0):
        return tuple(float(b) for b in bounds)

    logger.warning(f"Degenerate header centers {xs.tolist()}, spacing columns evenly")
    if last > first:
        return even_bounds(first, last)
    return even_bounds()


def column_for(x: float, bounds: Bounds) -> Optional[int]:
    """
    Map an x position to a column index.

    Args:
        x: Center x of a fragment
        bounds: 11 ascending boundaries

    Returns:
        Column 0-9, or None if x lies left of the first boundary.
        Positions at or past the last boundary clamp to column 9.
    """
    index = int(np.searchsorted(np.asarray(bounds), x, side="right")) - 1
    if index < 0:
        return None
    return min(index, GRID_COLS - 1)


def row_id_cutoff(first_center: Optional[float], zone: float = 0.06, gap: float = 0.03) -> float:
    """
    Right edge of the row-identifier strip.

    Args:
        first_center: Leftmost header center, or None without a header
        zone: Maximum strip width
        gap: Space kept between the strip and the first header digit

    Returns:
        Cutoff x; lone digits left of it are row identifiers
    """
    if first_center is None:
        return zone
    return min(zone, first_center - gap)


def spread_column(x: float, lo: float, hi: float) -> int:
    """
    Column for x when a row's own fragments are spread evenly over 10 bins.

    Args:
        x: Fragment center x
        lo: Leftmost center in the row
        hi: Rightmost center in the row

    Returns:
        Column 0-9
    """
    span = hi - lo
    if span < 1e-6:
        position = x * GRID_COLS
    else:
        position = (x - lo) / span * GRID_COLS
    return int(min(max(np.floor(position), 0), GRID_COLS - 1))
