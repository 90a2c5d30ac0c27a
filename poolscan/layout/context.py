"""
Layout Context Module - Tunables and shared per-call state for strategies.
"""

import threading
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .fragment import LayoutFragment, TextFragment
from .header import HeaderMatch, locate_header
from .rows import Row, cluster_rows


@dataclass(frozen=True)
class LayoutConfig:
    """
    Empirically tuned reconstruction parameters.

    All distances are fractions of the normalized page.

    Attributes:
        row_tolerance: Max vertical gap to the last row member to join a row
        column_margin: Outward padding of the first/last column boundary
        header_region: Header rows with mean position above this are preferred
        row_id_zone: Right edge of the row-identifier strip
        row_id_gap: Required gap between the strip and the first header center
        relaxed_min_digits: Fewest digits a relaxed header row may carry
        relaxed_max_digits: Most digits a relaxed header row may carry
        merge_dx: Horizontal merge distance for positional fill
        merge_dy: Vertical merge distance for positional fill
        repair_seed: Seed for the repair filler (None = nondeterministic)
    """
    row_tolerance: float = 0.04  # 0.14 would merge the 11 bands of a full sheet
    column_margin: float = 0.08
    header_region: float = 0.35
    row_id_zone: float = 0.06
    row_id_gap: float = 0.03
    relaxed_min_digits: int = 6
    relaxed_max_digits: int = 12
    merge_dx: float = 0.05
    merge_dy: float = 0.02
    repair_seed: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'LayoutConfig':
        """
        Build a config from a settings dict, ignoring unrelated keys.

        Args:
            settings: Settings dictionary (see poolscan.settings)

        Returns:
            LayoutConfig with any matching keys applied
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in settings.items() if k in known})


class ReconstructionCancelled(Exception):
    """Raised when the caller sets the cancel flag mid-reconstruction."""


@dataclass
class LayoutContext:
    """
    Shared context passed to layout strategies.

    Rows and the header are computed lazily, once per reconstruction call,
    and reused by every cascade stage.

    Attributes:
        fragments: Classified input fragments
        config: Reconstruction tunables
        cancel_flag: Threading event the caller may set to abort
    """
    fragments: Tuple[LayoutFragment, ...]
    config: LayoutConfig = field(default_factory=LayoutConfig)
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    _rows: Optional[List[Row]] = field(default=None, init=False, repr=False)
    _header: Optional[HeaderMatch] = field(default=None, init=False, repr=False)
    _header_done: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_fragments(
        cls,
        fragments: Sequence[TextFragment],
        config: Optional[LayoutConfig] = None,
        cancel_flag: Optional[threading.Event] = None
    ) -> 'LayoutContext':
        """Classify raw fragments and wrap them in a context."""
        classified = tuple(LayoutFragment.from_fragment(f) for f in fragments)
        return cls(
            fragments=classified,
            config=config or LayoutConfig(),
            cancel_flag=cancel_flag or threading.Event(),
        )

    @property
    def rows(self) -> List[Row]:
        if self._rows is None:
            self._rows = cluster_rows(self.fragments, self.config.row_tolerance)
        return self._rows

    @property
    def header(self) -> Optional[HeaderMatch]:
        if not self._header_done:
            self._header = locate_header(
                self.rows,
                header_region=self.config.header_region,
                relaxed_range=(self.config.relaxed_min_digits, self.config.relaxed_max_digits),
            )
            self._header_done = True
        return self._header

    @property
    def has_digits(self) -> bool:
        """True if any lone axis digit was recognized anywhere on the sheet."""
        return any(f.is_digit for f in self.fragments)

    def is_cancelled(self) -> bool:
        return self.cancel_flag.is_set()

    def mean_confidence(self) -> float:
        if not self.fragments:
            return 0.0
        return sum(f.fragment.confidence for f in self.fragments) / len(self.fragments)
