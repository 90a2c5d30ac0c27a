"""
Fragment Module - Recognized text fragments and their classification.

Fragments arrive from a recognition backend as text + normalized box +
confidence. Boxes use a bottom-left origin (y grows upward), so the
vertical "row position" used for ordering is 1 - center_y.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")

# Printed box-numbering labels run 1..100
CELL_ID_MIN = 1
CELL_ID_MAX = 100


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box normalized to [0, 1], origin at bottom-left."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def center_x(self) -> float:
        return (self.x_min + self.x_max) / 2

    @property
    def center_y(self) -> float:
        return (self.y_min + self.y_max) / 2

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @classmethod
    def from_xywh(cls, x: float, y: float, width: float, height: float) -> 'BoundingBox':
        """Create from origin + size (the backend block shape)."""
        return cls(x_min=x, y_min=y, x_max=x + width, y_max=y + height)


@dataclass(frozen=True)
class TextFragment:
    """
    One recognition output unit.

    Attributes:
        text: Raw text, not yet trimmed
        box: Normalized bounding box (bottom-left origin)
        confidence: Recognition confidence 0.0-1.0
    """
    text: str
    box: BoundingBox
    confidence: float = 1.0

    @property
    def center_x(self) -> float:
        return self.box.center_x

    @property
    def center_y(self) -> float:
        return self.box.center_y

    @property
    def min_x(self) -> float:
        return self.box.x_min

    @property
    def row_position(self) -> float:
        """Vertical position from the top of the page (smaller = higher)."""
        return 1.0 - self.box.center_y

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TextFragment':
        """
        Create a fragment from a JSON-style dict.

        Accepts either explicit corners (x_min/y_min/x_max/y_max, optionally
        nested under "box") or the backend block shape (x/y/width/height).

        Raises:
            ValueError: If no usable box coordinates are present
        """
        box_data = data.get("box", data)
        if all(k in box_data for k in ("x_min", "y_min", "x_max", "y_max")):
            box = BoundingBox(
                x_min=float(box_data["x_min"]),
                y_min=float(box_data["y_min"]),
                x_max=float(box_data["x_max"]),
                y_max=float(box_data["y_max"]),
            )
        elif all(k in box_data for k in ("x", "y", "width", "height")):
            box = BoundingBox.from_xywh(
                float(box_data["x"]),
                float(box_data["y"]),
                float(box_data["width"]),
                float(box_data["height"]),
            )
        else:
            raise ValueError(f"Fragment has no bounding box: {data!r}")

        return cls(
            text=str(data.get("text", "")),
            box=box,
            confidence=float(data.get("confidence", 1.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "box": {
                "x_min": self.box.x_min,
                "y_min": self.box.y_min,
                "x_max": self.box.x_max,
                "y_max": self.box.y_max,
            },
            "confidence": self.confidence,
        }


# ---------- text classification ----------


@dataclass(frozen=True)
class Digit:
    """A lone axis digit 0-9."""
    value: int


@dataclass(frozen=True)
class CellId:
    """A printed box-numbering label (integer 1-100, not a lone digit)."""
    value: int


@dataclass(frozen=True)
class Name:
    """Anything else - candidate participant name text."""
    text: str


TextKind = Union[Digit, CellId, Name]


def _parse_int(text: str) -> Optional[int]:
    if _INTEGER_RE.match(text):
        return int(text)
    return None


def classify(text: str) -> TextKind:
    """
    Classify raw fragment text.

    A single character 0-9 is always an axis Digit, even though 1-9 are
    also valid box numbers; multi-character integers in [1, 100] ("57",
    "07", "100") are CellIds.

    Args:
        text: Raw fragment text

    Returns:
        Digit, CellId or Name
    """
    trimmed = text.strip()
    if len(trimmed) == 1 and trimmed in "0123456789":
        return Digit(int(trimmed))

    value = _parse_int(trimmed)
    if value is not None and CELL_ID_MIN <= value <= CELL_ID_MAX:
        return CellId(value)

    return Name(trimmed)


@dataclass(frozen=True)
class LayoutFragment:
    """
    A fragment with its classification and derived positions.

    Built once per input fragment so later stages never re-parse text.

    Attributes:
        fragment: Source fragment (never mutated)
        kind: Classification result
        x: Center x
        y: Row position (distance from top of page)
        min_x: Left edge
    """
    fragment: TextFragment
    kind: TextKind
    x: float
    y: float
    min_x: float

    @classmethod
    def from_fragment(cls, fragment: TextFragment) -> 'LayoutFragment':
        return cls(
            fragment=fragment,
            kind=classify(fragment.text),
            x=fragment.center_x,
            y=fragment.row_position,
            min_x=fragment.min_x,
        )

    @property
    def is_digit(self) -> bool:
        return isinstance(self.kind, Digit)

    @property
    def is_cell_id(self) -> bool:
        return isinstance(self.kind, CellId)

    @property
    def is_name(self) -> bool:
        """True for non-empty name text."""
        return isinstance(self.kind, Name) and bool(self.kind.text)

    @property
    def digit(self) -> Optional[int]:
        return self.kind.value if isinstance(self.kind, Digit) else None

    @property
    def text(self) -> str:
        return self.fragment.text.strip()

    def sort_key(self):
        """Top-to-bottom, then left-to-right, then text (order-independent)."""
        return (self.y, self.min_x, self.text)
