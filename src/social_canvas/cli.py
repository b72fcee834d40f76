"""
Command-line front end.

Converts image files (or every image in the given directories) into
social media canvases and saves them, one file per image or as a single
ZIP archive.

Example:
    social-canvas holiday/ -o out --preset instagram-story-9-16 --blur 12 \\
        --overlay-opacity 60 --stroke-width 8 --mode archive --archive-name holiday
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from social_canvas import __version__
from social_canvas.batch.naming import DEFAULT_PATTERN
from social_canvas.batch.orchestrator import run_batch
from social_canvas.config import read_options_dict, save_options
from social_canvas.core.errors import SocialCanvasError
from social_canvas.core.models import ProcessingOptions, SourceImage
from social_canvas.core.presets import PRESETS
from social_canvas.output.packager import DEFAULT_ARCHIVE_NAME, PackageMode, package
from social_canvas.output.writer import write_deliverables

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif", ".tif", ".tiff"}

EXIT_OK = 0
EXIT_ALL_FAILED = 1
EXIT_RUN_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="social-canvas",
        description="Batch-convert photos into blurred-backdrop social media canvases.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("inputs", nargs="*", type=Path, help="Image files or directories of images")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Where to save results")

    # Canvas
    parser.add_argument("--preset", help="Canvas preset name or slug (see --list-presets)")
    parser.add_argument("--width", type=int, help="Canvas width in pixels")
    parser.add_argument("--height", type=int, help="Canvas height in pixels")

    # Look
    parser.add_argument("--blur", type=float, dest="blur_radius", help="Background blur radius in pixels")
    parser.add_argument("--overlay-opacity", type=float, help="Colour wash opacity, 0-100")
    parser.add_argument("--overlay-color", help="Colour wash colour, e.g. '#000000'")
    parser.add_argument("--border", type=int, dest="outer_border", help="Outer border around the foreground, pixels")
    parser.add_argument("--stroke-width", type=int, help="Outline width around the foreground, pixels")
    parser.add_argument("--stroke-color", help="Outline colour, e.g. '#ffffff'")
    parser.add_argument("--quality", type=int, help="JPEG quality, 1-100")

    # Output
    parser.add_argument("--pattern", default=DEFAULT_PATTERN, help="Filename pattern using {stem} and {idx}")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in PackageMode],
        default=PackageMode.INDIVIDUAL.value,
        help="Save separate images or one archive",
    )
    parser.add_argument("--archive-name", default=DEFAULT_ARCHIVE_NAME, help="Archive name (without .zip)")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing files in the output directory")

    # Config
    parser.add_argument("--config", type=Path, help="Load options from a JSON file")
    parser.add_argument("--save-config", type=Path, help="Save the effective options to a JSON file")

    parser.add_argument("--list-presets", action="store_true", help="List canvas presets and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> ProcessingOptions:
    """
    Resolve the effective options: defaults < --config file < flags.

    The canvas (--preset, then --width/--height) is resolved before any
    flag is applied. A stroke or border inherited from the config file is
    clamped to that canvas; one given as a flag must fit it.

    Raises:
        InvalidOption: On invalid values
    """
    data: Dict[str, Any] = read_options_dict(args.config) if args.config else {}

    # File values are checked against the stored canvas, then clamped to the requested one
    options = ProcessingOptions.from_dict(data)
    if args.preset:
        options = options.with_preset(args.preset)
    if args.width is not None or args.height is not None:
        options = options.with_canvas(
            args.width if args.width is not None else options.canvas_width,
            args.height if args.height is not None else options.canvas_height,
        )

    overrides = {
        "blur_radius": args.blur_radius,
        "overlay_opacity": args.overlay_opacity,
        "overlay_color": args.overlay_color,
        "outer_border": args.outer_border,
        "stroke_width": args.stroke_width,
        "stroke_color": args.stroke_color,
        "quality": args.quality / 100 if args.quality is not None else None,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return options

    # Flags are validated against the final canvas, never clamped
    return ProcessingOptions.from_dict({**options.to_dict(), **overrides})


def collect_sources(inputs: Sequence[Path]) -> List[SourceImage]:
    """Expand directories to their image files and read everything in order."""
    paths: List[Path] = []
    for item in inputs:
        if item.is_dir():
            paths.extend(
                sorted(p for p in item.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES)
            )
        else:
            paths.append(item)

    sources: List[SourceImage] = []
    for path in paths:
        try:
            sources.append(SourceImage.from_path(path))
        except OSError as e:
            logger.warning(f"Skipping {path}: {e}")
    return sources


def _log_progress(fraction: float) -> None:
    logger.info(f"Progress: {fraction * 100:.0f}%")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s | %(message)s",
    )

    if args.list_presets:
        for preset in PRESETS:
            print(f"{preset.slug:<28} {preset.width}x{preset.height}  {preset.name}")
        return EXIT_OK

    try:
        options = options_from_args(args)
    except SocialCanvasError as e:
        logger.error(f"Invalid options: {e}")
        return EXIT_RUN_ERROR

    if args.save_config:
        try:
            save_options(options, args.save_config)
        except SocialCanvasError as e:
            logger.error(f"Cannot save options: {e}")
            return EXIT_RUN_ERROR
        if not args.inputs:
            return EXIT_OK

    if not args.inputs:
        parser.print_usage(sys.stderr)
        logger.error("No input images given")
        return EXIT_ALL_FAILED

    sources = collect_sources(args.inputs)
    if not sources:
        logger.error("No readable input images found")
        return EXIT_ALL_FAILED

    try:
        result = run_batch(sources, options, args.pattern, _log_progress)
        deliverables = package(result.artifacts, args.mode, args.archive_name)
        written = write_deliverables(deliverables, args.output_dir, overwrite=args.overwrite)
    except SocialCanvasError as e:
        logger.error(f"Batch failed: {e}")
        return EXIT_RUN_ERROR

    for name, reason in result.failures:
        logger.warning(f"Failed: {name}: {reason}")
    logger.info(
        f"Converted {result.succeeded}/{result.total} image(s); "
        f"saved {len(written)} file(s) to {args.output_dir}"
    )
    return EXIT_OK if result.succeeded else EXIT_ALL_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
