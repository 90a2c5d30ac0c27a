"""
Recognition Debug Utilities

Functions for saving annotated debug images of fragments and the
inferred grid layout.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..layout import ReconstructedGrid, TextFragment

logger = logging.getLogger(__name__)


# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10

# Confidence thresholds for coloring
HIGH_CONFIDENCE = 0.95
MEDIUM_CONFIDENCE = 0.80


def get_confidence_color(confidence: float) -> str:
    """
    Get color name for a confidence level.

    Args:
        confidence: Confidence value 0.0-1.0

    Returns:
        PIL color name
    """
    if confidence >= HIGH_CONFIDENCE:
        return "green"
    elif confidence >= MEDIUM_CONFIDENCE:
        return "orange"
    else:
        return "red"


def _load_font(size: int):
    try:
        return ImageFont.truetype("arial.ttf", size)
    except OSError:
        return ImageFont.load_default()


def save_debug_image(
    image: Image.Image,
    fragments: Sequence[TextFragment],
    grid: Optional[ReconstructedGrid],
    path: str
) -> None:
    """
    Save an annotated debug image of a reconstruction.

    Annotations include:
    - Fragment boxes colored by recognition confidence
    - Column boundaries derived from the header (blue)
    - Strategy, filled cell count and repair flags

    Args:
        image: Original PIL Image the fragments were recognized from
        fragments: Recognized fragments (bottom-left origin boxes)
        grid: Reconstruction result (can be None)
        path: Output file path
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    debug_img = image.convert("RGB")
    draw = ImageDraw.Draw(debug_img)
    width, height = debug_img.size
    font = _load_font(12)
    small_font = _load_font(10)

    for fragment in fragments:
        box = fragment.box
        # Flip to top-left pixel coordinates
        x0, x1 = box.x_min * width, box.x_max * width
        y0, y1 = (1 - box.y_max) * height, (1 - box.y_min) * height
        color = get_confidence_color(fragment.confidence)
        draw.rectangle([x0, y0, x1, y1], outline=color, width=1)
        draw.text((x0, max(0, y0 - 11)), fragment.text.strip(), fill=color, font=small_font)

    if grid is not None:
        if grid.column_bounds:
            for bound in grid.column_bounds:
                x = bound * width
                draw.line([(x, 0), (x, height)], fill="blue", width=1)

        summary = f"Strategy: {grid.strategy or 'none'}, Cells: {grid.filled_count}/100"
        if grid.is_low_confidence:
            summary += " (digits repaired)"
        draw.text((10, 10), summary, fill="blue", font=font)

    debug_img.save(out_path, "PNG")
    logger.debug(f"Debug image saved: {out_path}")

    _cleanup_debug_images(out_path.parent)


def _cleanup_debug_images(directory: Path = DEBUG_DIR) -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not directory.exists():
        return

    debug_files = sorted(
        directory.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old debug image {old_file}: {e}")
