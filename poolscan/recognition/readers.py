"""
Fragment-Based Readers

Runs a fragment source through the layout engine, with the caller-side
retry on an uncropped image.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from PIL import Image

from ..layout import LayoutConfig, ReconstructedGrid, TextFragment, reconstruct
from .base import FragmentSource, GridReader

logger = logging.getLogger(__name__)

# Fewer fragments than this from a cropped image suggests a bad crop
DEFAULT_MIN_FRAGMENTS = 20


class StaticFragmentSource(FragmentSource):
    """Returns a fixed fragment list regardless of the image."""

    def __init__(self, fragments: Iterable[TextFragment]):
        self._fragments = list(fragments)

    @property
    def name(self) -> str:
        return "static"

    def recognize(self, image: Optional[Image.Image]) -> List[TextFragment]:
        return list(self._fragments)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'StaticFragmentSource':
        """
        Load fragments from a JSON file.

        Accepts a list of fragment dicts or {"blocks": [...]}.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("blocks", data.get("fragments", []))
        return cls(TextFragment.from_dict(item) for item in data)


def best_grid(grids: Sequence[ReconstructedGrid]) -> ReconstructedGrid:
    """Grid with the most filled cells (earliest wins ties)."""
    best = grids[0]
    for grid in grids[1:]:
        if grid.filled_count > best.filled_count:
            best = grid
    return best


class FragmentGridReader(GridReader):
    """
    Reads a grid by recognizing fragments and reconstructing the layout.

    Example:
        reader = FragmentGridReader(BackendFragmentSource(url))
        grid = reader.read(cropped, fallback_image=original)
    """

    def __init__(
        self,
        source: FragmentSource,
        config: Optional[LayoutConfig] = None,
        min_fragments: int = DEFAULT_MIN_FRAGMENTS
    ):
        self.source = source
        self.config = config or LayoutConfig()
        self.min_fragments = min_fragments
        # Image and fragments behind the most recently returned grid
        self.last_image: Optional[Image.Image] = None
        self.last_fragments: List[TextFragment] = []

    @property
    def name(self) -> str:
        return "fragments"

    def read(
        self,
        image: Optional[Image.Image],
        fallback_image: Optional[Image.Image] = None
    ) -> ReconstructedGrid:
        """
        Recognize and reconstruct, retrying on fallback_image if needed.

        The retry fires when the first pass gives fewer than min_fragments
        fragments or no filled cells; the grid with more filled cells wins.

        Args:
            image: Sheet image (usually cropped to the grid)
            fallback_image: Uncropped original to retry with

        Returns:
            ReconstructedGrid
        """
        fragments = self.source.recognize(image)
        grid = reconstruct(fragments, self.config)
        self.last_image, self.last_fragments = image, fragments

        needs_retry = len(fragments) < self.min_fragments or grid.filled_count == 0
        if fallback_image is None or not needs_retry:
            return grid

        logger.info(
            f"First pass weak ({len(fragments)} fragments, {grid.filled_count} cells), "
            "retrying on uncropped image"
        )
        retry_fragments = self.source.recognize(fallback_image)
        retry = reconstruct(retry_fragments, self.config)
        if best_grid([grid, retry]) is retry:
            self.last_image, self.last_fragments = fallback_image, retry_fragments
            return retry
        return grid
