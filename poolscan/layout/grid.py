"""
Grid Module - Cell accumulation and the immutable reconstructed grid.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .repair import is_permutation

GRID_SIZE = 10

Cells = Tuple[Tuple[str, ...], ...]


def empty_cells() -> Cells:
    return tuple(tuple("" for _ in range(GRID_SIZE)) for _ in range(GRID_SIZE))


def _count_filled(cells: Cells) -> int:
    return sum(1 for row in cells for cell in row if cell.strip())


@dataclass(frozen=True)
class CellTable:
    """
    Output of a single layout strategy.

    Attributes:
        cells: 10x10 names, row-major ("" = empty)
        row_digits: Side digit per row, None where none was recognized
    """
    cells: Cells
    row_digits: Tuple[Optional[int], ...]

    @property
    def filled_count(self) -> int:
        return _count_filled(self.cells)

    @classmethod
    def empty(cls) -> 'CellTable':
        return cls(cells=empty_cells(), row_digits=(None,) * GRID_SIZE)


class GridBuilder:
    """Mutable 10x10 accumulator owned by one strategy call."""

    def __init__(self):
        self._parts: List[List[List[str]]] = [
            [[] for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)
        ]
        self._row_digits: List[Optional[int]] = [None] * GRID_SIZE

    def add_text(self, row: int, col: int, text: str) -> None:
        """Append text to a cell; multiple fragments are space-joined."""
        text = text.strip()
        if text and 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE:
            self._parts[row][col].append(text)

    def set_row_digit(self, row: int, digit: Optional[int]) -> None:
        if 0 <= row < GRID_SIZE:
            self._row_digits[row] = digit

    def build(self) -> CellTable:
        cells = tuple(
            tuple(" ".join(parts) for parts in row)
            for row in self._parts
        )
        return CellTable(cells=cells, row_digits=tuple(self._row_digits))


@dataclass(frozen=True)
class ReconstructedGrid:
    """
    Final reconstruction result.

    Always exactly 10x10 cells with both axes valid permutations of 0-9.
    A repaired axis means the digits were not read reliably and the grid
    must be confirmed before any winner is computed from it.

    Attributes:
        column_digits: Header digits, left to right
        row_digits: Side digits, top to bottom
        cells: 10x10 names, row-major ("" = empty square)
        columns_repaired: True if column digits are a filler
        rows_repaired: True if row digits are a filler
        strategy: Name of the layout stage that filled the cells
        header_row: Index of the detected header among clustered rows
        column_bounds: Column boundaries used, when derived from a header
        confidence: Mean recognition confidence of the input
    """
    column_digits: Tuple[int, ...]
    row_digits: Tuple[int, ...]
    cells: Cells
    columns_repaired: bool = False
    rows_repaired: bool = False
    strategy: Optional[str] = None
    header_row: Optional[int] = None
    column_bounds: Optional[Tuple[float, ...]] = None
    confidence: float = 0.0

    def __post_init__(self):
        if len(self.cells) != GRID_SIZE or any(len(row) != GRID_SIZE for row in self.cells):
            raise ValueError("Grid must have exactly 10x10 cells")
        if not is_permutation(self.column_digits):
            raise ValueError(f"Column digits are not a permutation of 0-9: {self.column_digits}")
        if not is_permutation(self.row_digits):
            raise ValueError(f"Row digits are not a permutation of 0-9: {self.row_digits}")

    @property
    def filled_count(self) -> int:
        """Number of non-empty squares."""
        return _count_filled(self.cells)

    @property
    def is_complete(self) -> bool:
        return self.filled_count == GRID_SIZE * GRID_SIZE

    @property
    def is_low_confidence(self) -> bool:
        """True if either axis was replaced by the repair filler."""
        return self.columns_repaired or self.rows_repaired

    def cell(self, row: int, col: int) -> Optional[str]:
        if 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE:
            return self.cells[row][col]
        return None

    def players(self) -> List[str]:
        """Sorted unique names on the sheet."""
        return sorted({cell for row in self.cells for cell in row if cell.strip()})

    def squares_for(self, name: str) -> List[Tuple[int, int]]:
        """(row, col) of every square held by name, case-insensitive."""
        wanted = name.strip().lower()
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell.strip() and cell.lower() == wanted
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column_digits": list(self.column_digits),
            "row_digits": list(self.row_digits),
            "cells": [list(row) for row in self.cells],
            "columns_repaired": self.columns_repaired,
            "rows_repaired": self.rows_repaired,
            "strategy": self.strategy,
            "header_row": self.header_row,
            "column_bounds": list(self.column_bounds) if self.column_bounds else None,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReconstructedGrid':
        bounds = data.get("column_bounds")
        return cls(
            column_digits=tuple(data["column_digits"]),
            row_digits=tuple(data["row_digits"]),
            cells=tuple(tuple(row) for row in data["cells"]),
            columns_repaired=bool(data.get("columns_repaired", False)),
            rows_repaired=bool(data.get("rows_repaired", False)),
            strategy=data.get("strategy"),
            header_row=data.get("header_row"),
            column_bounds=tuple(bounds) if bounds else None,
            confidence=float(data.get("confidence", 0.0)),
        )
