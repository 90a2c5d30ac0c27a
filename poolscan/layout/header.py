"""
Header Locator Module - Finds the row carrying the 10 column digits.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .fragment import LayoutFragment
from .rows import Row, mean_position

logger = logging.getLogger(__name__)

AXIS_SIZE = 10


@dataclass(frozen=True)
class HeaderMatch:
    """
    The detected header row.

    Attributes:
        row_index: Index of the header in the clustered rows
        fragments: Digit fragments sorted left-to-right by center x
        strict: False when found by the relaxed 6-12 digit pass
    """
    row_index: int
    fragments: Tuple[LayoutFragment, ...]
    strict: bool = True

    @property
    def digits(self) -> List[int]:
        return [f.digit for f in self.fragments]

    @property
    def centers(self) -> List[float]:
        return [f.x for f in self.fragments]


def is_contaminated(row: Row) -> bool:
    """True if the row carries any printed box-numbering label."""
    return any(f.is_cell_id for f in row)


def _digit_fragments(row: Row) -> List[LayoutFragment]:
    return sorted((f for f in row if f.is_digit), key=lambda f: (f.x, f.y))


def locate_header(
    rows: Sequence[Row],
    header_region: float = 0.35,
    relaxed_range: Tuple[int, int] = (6, 12)
) -> Optional[HeaderMatch]:
    """
    Locate the header row among clustered rows.

    Strict pass: uncontaminated rows with exactly 10 lone digits. Ranked by
    (mean position outside the top header_region, total fragment count, row
    index). The relaxed pass only runs when the strict pass found nothing.

    Args:
        rows: Clustered rows, top-to-bottom
        header_region: Fraction of page height, from the top, preferred for headers
        relaxed_range: Inclusive digit count range accepted by the relaxed pass

    Returns:
        HeaderMatch or None if no row qualifies
    """
    candidates = []
    for index, row in enumerate(rows):
        if is_contaminated(row):
            continue
        digits = _digit_fragments(row)
        if len(digits) == AXIS_SIZE:
            below_region = mean_position(digits) >= header_region
            candidates.append(((below_region, len(row), index), index, digits))

    if candidates:
        _, index, digits = min(candidates, key=lambda c: c[0])
        logger.debug(
            f"Header at row {index} ({len(candidates)} candidates): "
            f"{[f.digit for f in digits]}"
        )
        return HeaderMatch(row_index=index, fragments=tuple(digits), strict=True)

    low, high = relaxed_range
    for index, row in enumerate(rows):
        if is_contaminated(row):
            continue
        digits = _digit_fragments(row)
        if low <= len(digits) <= high:
            kept = digits[:AXIS_SIZE]
            logger.debug(
                f"Relaxed header at row {index} with {len(digits)} digits: "
                f"{[f.digit for f in kept]}"
            )
            return HeaderMatch(row_index=index, fragments=tuple(kept), strict=False)

    logger.debug("No header row found")
    return None
