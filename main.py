"""
poolscan - Entry Point

Reconstructs a pool sheet grid from a fragments JSON file, or from an
image sent to the recognition backend configured in config.json.

Example:
    python main.py fragments.json
    python main.py --image sheet.jpg --fallback-image original.jpg
    python main.py fragments.json --image sheet.jpg --debug  # Save overlay
"""

import sys
import json
import logging
import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from PIL import Image

from poolscan.layout import LayoutConfig, ReconstructedGrid, TextFragment
from poolscan.recognition import (
    DEBUG_DIR,
    BackendError,
    FragmentGridReader,
    GridReader,
    StaticFragmentSource,
    reader_from_settings,
    save_debug_image,
)
from poolscan.settings import SETTINGS_FILE, load_settings


logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging - output to console and optionally a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )


def format_grid(grid: ReconstructedGrid, width: int = 12) -> str:
    """Render a grid as a fixed-width text table."""
    def cell(text: str) -> str:
        text = text or "."
        return text[:width].ljust(width)

    lines = [" " * 4 + "".join(cell(str(d)) for d in grid.column_digits)]
    for digit, row in zip(grid.row_digits, grid.cells):
        lines.append(f"{digit:>2}  " + "".join(cell(name) for name in row))

    lines.append("")
    lines.append(f"Strategy: {grid.strategy or 'none'}  Filled: {grid.filled_count}/100  "
                 f"Confidence: {grid.confidence * 100:.1f}%")
    if grid.is_low_confidence:
        repaired = [axis for axis, flag in (("columns", grid.columns_repaired),
                                            ("rows", grid.rows_repaired)) if flag]
        lines.append(f"WARNING: {' and '.join(repaired)} digits were not read; confirm before use")
    return "\n".join(lines)


class Application:
    """
    Command line controller.

    Picks a reader from the arguments and settings, runs it and prints
    the resulting grid.
    """

    def __init__(self, settings_path: Path = SETTINGS_FILE, debug_mode: bool = False):
        """
        Initialize the application.

        Args:
            settings_path: Path of the JSON settings file
            debug_mode: Enable debug overlay via CLI (overrides saved setting)
        """
        self.settings = load_settings(settings_path)
        self.debug_mode = debug_mode or bool(self.settings.get("debug_enabled", False))

    def build_reader(self, fragments_path: Optional[str], seed: Optional[int]) -> GridReader:
        """Static reader for a fragments file, else whichever backend is configured."""
        if seed is not None:
            self.settings["repair_seed"] = seed
        layout = LayoutConfig.from_settings(self.settings)

        if fragments_path:
            source = StaticFragmentSource.from_json(fragments_path)
            return FragmentGridReader(source, layout, min_fragments=0)
        return reader_from_settings(self.settings)

    def save_overlay(self, reader: GridReader, grid: ReconstructedGrid, image: Image.Image) -> None:
        """Save the debug overlay from the fragments that produced grid."""
        fragments: List[TextFragment] = []
        if isinstance(reader, FragmentGridReader):
            fragments = reader.last_fragments
            if reader.last_image is not None:
                image = reader.last_image
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = DEBUG_DIR / f"debug_{stamp}.png"
        save_debug_image(image, fragments, grid, str(path))
        logger.info(f"Debug image saved: {path}")

    def run(self, args: argparse.Namespace) -> int:
        """
        Run one reconstruction.

        Returns:
            Exit code
        """
        if not args.fragments and not args.image:
            logger.error("Give a fragments JSON file or --image")
            return 2

        try:
            reader = self.build_reader(args.fragments, args.seed)
        except (ValueError, OSError) as e:
            logger.error(f"Could not set up reader: {e}")
            return 2

        try:
            image = Image.open(args.image) if args.image else None
            fallback = Image.open(args.fallback_image) if args.fallback_image else None
        except OSError as e:
            logger.error(f"Could not open image: {e}")
            return 2

        try:
            if isinstance(reader, FragmentGridReader):
                grid = reader.read(image, fallback_image=fallback)
            else:
                grid = reader.read(image)
        except BackendError as e:
            logger.error(f"Recognition failed: {e}")
            return 1

        logger.info(f"Read grid with {reader.name} reader: {grid.filled_count} cells")

        if self.debug_mode and image is not None:
            self.save_overlay(reader, grid, image)

        if args.json:
            print(json.dumps(grid.to_dict(), indent=2))
        else:
            print(format_grid(grid))
        return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="poolscan - Rebuild a squares pool grid from a sheet scan"
    )
    parser.add_argument(
        "fragments",
        nargs="?",
        help="JSON file of recognized fragments (list or {\"blocks\": [...]})"
    )
    parser.add_argument(
        "--image", "-i",
        help="Sheet image; sent to the configured backend when no fragments file is given"
    )
    parser.add_argument(
        "--fallback-image",
        help="Uncropped image to retry with when the first pass is weak"
    )
    parser.add_argument(
        "--config", "-c",
        default=str(SETTINGS_FILE),
        help="Settings file (default: config.json)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the digit repair filler"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the grid as JSON"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug mode (save an annotated overlay of the image)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log at DEBUG level"
    )
    parser.add_argument(
        "--log-file",
        help="Also write the log to this file"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run a single reconstruction."""
    args = parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    application = Application(settings_path=Path(args.config), debug_mode=args.debug)
    return application.run(args)


if __name__ == "__main__":
    sys.exit(main())
