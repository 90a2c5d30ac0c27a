"""
Synthetic pool sheet fragments for tests.

Positions are given top-down (y_top = distance from the top of the page)
and converted to the bottom-left origin the fragment model uses.
"""

from typing import Dict, List, Sequence, Tuple, Union

from poolscan.layout import BoundingBox, TextFragment

# Header digit / name column centers, left to right
COL_CENTERS = [0.15 + c * 0.085 for c in range(10)]
HEADER_Y = 0.05
ROW_DIGIT_X = 0.03


def row_y(row: int) -> float:
    return 0.14 + row * 0.08


def frag(
    text: str,
    cx: float,
    y_top: float,
    w: float = 0.04,
    h: float = 0.02,
    conf: float = 0.9
) -> TextFragment:
    """Fragment centered at (cx, y_top)."""
    cy = 1.0 - y_top
    return TextFragment(
        text=text,
        box=BoundingBox(x_min=cx - w / 2, y_min=cy - h / 2, x_max=cx + w / 2, y_max=cy + h / 2),
        confidence=conf,
    )


def header_row(digits: Sequence[int], y_top: float = HEADER_Y,
               centers: Sequence[float] = COL_CENTERS) -> List[TextFragment]:
    return [frag(str(d), cx, y_top, w=0.02) for d, cx in zip(digits, centers)]


def clean_sheet(
    column_digits: Sequence[int],
    row_digits: Sequence[int],
    names: Dict[Tuple[int, int], Union[str, List[str]]],
    cell_ids: bool = False
) -> List[TextFragment]:
    """
    A well-formed sheet: header row, a side digit per row and names.

    A list value is a multi-line name, recognized as one fragment per line.
    With cell_ids, every square also carries its printed box number 1-100.
    """
    fragments = header_row(column_digits)
    for r, digit in enumerate(row_digits):
        fragments.append(frag(str(digit), ROW_DIGIT_X, row_y(r), w=0.02))

    for (r, c), value in names.items():
        lines = [value] if isinstance(value, str) else value
        offsets = [0.0] if len(lines) == 1 else [-0.01 + 0.02 * i / (len(lines) - 1) for i in range(len(lines))]
        for line, dy in zip(lines, offsets):
            fragments.append(frag(line, COL_CENTERS[c], row_y(r) + dy, w=0.06))

    if cell_ids:
        for r in range(10):
            for c in range(10):
                fragments.append(
                    frag(str(r * 10 + c + 1), COL_CENTERS[c] - 0.03, row_y(r) - 0.015, w=0.015, h=0.01)
                )
    return fragments


SCENARIO_COLUMNS = [9, 6, 4, 1, 5, 7, 8, 2, 3, 0]
SCENARIO_ROWS = [3, 8, 0, 5, 1, 9, 2, 7, 4, 6]
SCENARIO_NAMES: Dict[Tuple[int, int], Union[str, List[str]]] = {
    (0, 0): "Alice",
    (0, 4): "Bob",
    (1, 2): "Carla",
    (1, 7): "Dev",
    (1, 9): "Ellen",
    (2, 5): "Frank",
    (3, 6): ["Mike", "Capace"],
    (3, 1): "Gus",
    (4, 3): "Hana",
    (4, 8): "Ivan",
    (5, 0): "Jo",
    (6, 9): "Kim",
    (6, 4): "Lou",
    (6, 2): "Mo",
    (7, 7): "Nell",
    (8, 1): ["Olive", "Park"],
    (9, 5): "Pete",
    (9, 0): "Quinn",
}


def expected_cells(names: Dict[Tuple[int, int], Union[str, List[str]]]) -> List[List[str]]:
    cells = [[""] * 10 for _ in range(10)]
    for (r, c), value in names.items():
        cells[r][c] = value if isinstance(value, str) else " ".join(value)
    return cells
