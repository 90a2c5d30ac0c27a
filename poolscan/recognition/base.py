"""
Recognition Base Interfaces

Abstract base classes for fragment producers and grid readers.
"""

from abc import ABC, abstractmethod
from typing import List

from PIL import Image

from ..layout import ReconstructedGrid, TextFragment


class FragmentSource(ABC):
    """
    Abstract base class for text fragment producers.

    Implementations turn a sheet image into unordered text fragments
    for the layout engine.
    """

    @abstractmethod
    def recognize(self, image: Image.Image) -> List[TextFragment]:
        """
        Recognize text on a pool sheet image.

        Args:
            image: PIL Image of the (usually cropped) sheet

        Returns:
            Text fragments with normalized, bottom-left-origin boxes
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Source identifier (e.g., "backend", "static")."""
        pass


class GridReader(ABC):
    """
    Abstract base class for anything that turns an image into a grid.

    Fragment-based readers run the layout engine; structured readers get
    the grid directly from a remote backend and bypass it.
    """

    @abstractmethod
    def read(self, image: Image.Image) -> ReconstructedGrid:
        """
        Read a pool sheet image.

        Args:
            image: PIL Image of the sheet

        Returns:
            ReconstructedGrid (always 10x10 with valid axes)
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Reader identifier (e.g., "fragments", "structured")."""
        pass
