"""
Module: geometry

Purpose:
    Provides the Rect and PixelBox dataclasses - placement rectangles on
    the output canvas. Rect keeps the exact fractional result of a fit
    calculation; PixelBox is the integer box actually used for raster
    operations.

Key Functions:
    - Rect.snap(): Round a fractional rect onto the pixel grid

Dependencies:
    - dataclasses (std)
    - math (std)

Used By:
    - compositing.geometry: Cover/contain fit solver
    - compositing.engine: Draw passes
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Fractional placement rectangle in canvas coordinates.

    The origin may be negative: a cover-fit background overflows the
    canvas on one axis and is cropped by the canvas bounds.

    Attributes:
        x: Left edge
        y: Top edge
        width: Width (> 0)
        height: Height (> 0)

    Example:
        >>> r = Rect(0.0, 270.0, 1080.0, 810.0)
        >>> r.bottom
        1080.0
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Rect size must be positive: {self.width}x{self.height}")

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def snap(self) -> PixelBox:
        """
        Round each edge to the nearest pixel boundary.

        Edges are rounded independently so adjacent rects keep sharing an
        edge. The result is always at least 1x1.
        """
        left = _round_half_up(self.x)
        top = _round_half_up(self.y)
        right = max(_round_half_up(self.right), left + 1)
        bottom = max(_round_half_up(self.bottom), top + 1)
        return PixelBox(left, top, right, bottom)


@dataclass(frozen=True, slots=True)
class PixelBox:
    """
    Integer box on the pixel grid, [left, right) x [top, bottom).

    Attributes:
        left: X of first column (inclusive)
        top: Y of first row (inclusive)
        right: X after last column (exclusive)
        bottom: Y after last row (exclusive)
    """

    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self) -> None:
        if self.right <= self.left:
            raise ValueError(f"right must be > left: {self.right} <= {self.left}")
        if self.bottom <= self.top:
            raise ValueError(f"bottom must be > top: {self.bottom} <= {self.top}")

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def origin(self) -> tuple[int, int]:
        return (self.left, self.top)

    def __repr__(self) -> str:
        return f"PixelBox({self.left}, {self.top}, {self.right}, {self.bottom})"
