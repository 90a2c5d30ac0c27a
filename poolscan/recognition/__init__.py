"""
Recognition Module

Pluggable producers that turn a pool sheet image into a grid: remote OCR
fragments run through the layout engine, or a remote structured backend
that returns the grid directly.

Usage:
    from poolscan.recognition import create_reader

    reader = create_reader("fragments", url="https://ocr.internal/blocks")
    grid = reader.read(image)

Choosing by configured endpoint:
    from poolscan.settings import load_settings
    from poolscan.recognition import reader_from_settings

    reader = reader_from_settings(load_settings())
"""

# Public API - Base classes
from .base import FragmentSource, GridReader

# Public API - Implementations
from .backend import (
    BackendError,
    BackendFragmentSource,
    StructuredGridReader,
    encode_jpeg,
)
from .readers import FragmentGridReader, StaticFragmentSource, best_grid
from .structured import grid_from_structured_response, unwrap_proxy_body

# Public API - Factory functions
from .factory import (
    create_reader,
    register_reader,
    available_readers,
    reader_from_settings,
)

# Debug utilities
from .debug import DEBUG_DIR, save_debug_image

__all__ = [
    # Base classes
    "FragmentSource",
    "GridReader",
    # Implementations
    "BackendError",
    "BackendFragmentSource",
    "StructuredGridReader",
    "FragmentGridReader",
    "StaticFragmentSource",
    "encode_jpeg",
    "best_grid",
    "grid_from_structured_response",
    "unwrap_proxy_body",
    # Factory
    "create_reader",
    "register_reader",
    "available_readers",
    "reader_from_settings",
    # Debug
    "DEBUG_DIR",
    "save_debug_image",
]
