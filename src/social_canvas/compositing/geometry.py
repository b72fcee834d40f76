"""
Module: compositing.geometry

Purpose:
    Pure fit calculations for placing a source image on a canvas.
    Cover-fit fills the target box (overflow is cropped by the canvas);
    contain-fit fits inside the box leaving symmetric margin.

Key Functions:
    - cover_fit(): Scale-to-fill rect, centred on the target
    - contain_fit(): Scale-to-fit rect inside an inset box, centred on
      the full canvas

Dependencies:
    - core.models.geometry: Rect
    - core.errors: InvalidDimensions

Used By:
    - compositing.engine: Background and foreground passes
"""

from __future__ import annotations

from social_canvas.core.errors import InvalidDimensions
from social_canvas.core.models.geometry import Rect


def _require_positive(label: str, width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"{label} dimensions must be positive: {width}x{height}")


def cover_fit(
    source_width: float,
    source_height: float,
    target_width: float,
    target_height: float,
) -> Rect:
    """
    Scale the source to fill the target box, centred.

    The scaled size is >= the target on both axes; the excess on one
    axis hangs off the canvas symmetrically.

    Raises:
        InvalidDimensions: If any dimension is non-positive

    Example:
        >>> cover_fit(800, 600, 1080, 1350)
        Rect(x=-360.0, y=0.0, width=1800.0, height=1350.0)
    """
    _require_positive("Source", source_width, source_height)
    _require_positive("Target", target_width, target_height)

    ratio = max(target_width / source_width, target_height / source_height)
    width = source_width * ratio
    height = source_height * ratio
    return Rect(
        x=(target_width - width) / 2,
        y=(target_height - height) / 2,
        width=width,
        height=height,
    )


def contain_fit(
    source_width: float,
    source_height: float,
    canvas_width: float,
    canvas_height: float,
    inset: float = 0,
) -> Rect:
    """
    Scale the source to fit the canvas shrunk by `inset` on every side.

    The rect is centred within the full canvas, so the inset shows up as
    a symmetric margin around the foreground.

    Args:
        source_width: Source width in pixels
        source_height: Source height in pixels
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels
        inset: Border reserved on each side (outer_border)

    Returns:
        Placement rect, size <= the available box on both axes

    Raises:
        InvalidDimensions: If any dimension, or the inset box, is non-positive

    Example:
        >>> contain_fit(800, 600, 1080, 1350)
        Rect(x=0.0, y=270.0, width=1080.0, height=810.0)
    """
    _require_positive("Source", source_width, source_height)
    _require_positive("Canvas", canvas_width, canvas_height)

    available_width = canvas_width - inset * 2
    available_height = canvas_height - inset * 2
    _require_positive("Bordered canvas", available_width, available_height)

    ratio = min(available_width / source_width, available_height / source_height)
    width = source_width * ratio
    height = source_height * ratio
    return Rect(
        x=(canvas_width - width) / 2,
        y=(canvas_height - height) / 2,
        width=width,
        height=height,
    )
