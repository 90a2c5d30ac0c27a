"""
Row Clustering Module - Groups fragments into horizontal bands.
"""

from typing import Iterable, List, Optional, Tuple

from .fragment import LayoutFragment

# A row is an immutable left-to-right run of fragments
Row = Tuple[LayoutFragment, ...]


class RowBuilder:
    """Accumulates one row during the top-to-bottom sweep."""

    def __init__(self, first: LayoutFragment):
        self._members: List[LayoutFragment] = [first]
        self.last_y = first.y

    def accepts(self, fragment: LayoutFragment, tolerance: float) -> bool:
        # Compared against the most recent member so a slightly tilted row
        # can drift gradually across the page.
        return abs(fragment.y - self.last_y) < tolerance

    def add(self, fragment: LayoutFragment) -> None:
        self._members.append(fragment)
        self.last_y = fragment.y

    def build(self) -> Row:
        return tuple(sorted(self._members, key=lambda f: (f.min_x, f.y, f.text)))


def cluster_rows(fragments: Iterable[LayoutFragment], tolerance: float) -> List[Row]:
    """
    Cluster fragments into rows by vertical position.

    Args:
        fragments: Classified fragments in any order
        tolerance: Max vertical gap to the previous member of the current row

    Returns:
        Rows top-to-bottom, each sorted left-to-right by min x
    """
    rows: List[Row] = []
    current: Optional[RowBuilder] = None

    for fragment in sorted(fragments, key=LayoutFragment.sort_key):
        if current is not None and current.accepts(fragment, tolerance):
            current.add(fragment)
            continue
        if current is not None:
            rows.append(current.build())
        current = RowBuilder(fragment)

    if current is not None:
        rows.append(current.build())

    return rows


def mean_position(fragments: Iterable[LayoutFragment]) -> float:
    """Mean row position of a group of fragments (0.0 for an empty group)."""
    ys = [f.y for f in fragments]
    return sum(ys) / len(ys) if ys else 0.0
