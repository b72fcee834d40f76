"""
Module: compositing.engine

Purpose:
    Produce one output canvas from one decoded source image and an
    options snapshot. The canvas is built by four fixed, ordered passes,
    each a pure function returning a new image:

        1. background  - blurred cover-fit copy of the source
        2. overlay     - translucent colour wash over the whole canvas
        3. stroke      - outline just outside the foreground box
        4. foreground  - unblurred contain-fit copy of the source

    The stroke is drawn before the foreground so the foreground sits on
    top of any stroke pixels it overlaps; only the outer band remains.

Key Functions:
    - composite(): Run all four passes
    - plan_layout(): Background/foreground placement for a source size
    - render_preview(): Scaled-down composite for on-screen display

Key Classes:
    - CanvasLayout: Rects and pixel boxes used by the passes

Dependencies:
    - PIL: Resampling, blur, drawing
    - compositing.geometry: cover_fit, contain_fit

Used By:
    - batch.orchestrator: Per-item compositing
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFilter

from social_canvas.core.errors import InvalidDimensions
from social_canvas.core.models.geometry import PixelBox, Rect
from social_canvas.core.models.options import ProcessingOptions, RGB

from .geometry import contain_fit, cover_fit

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS

# Canvas pixels outside a transparent canvas encode as black in JPEG.
CANVAS_BASE_COLOR = (0, 0, 0)

# Gaussian kernels are effectively zero beyond three sigma.
BLUR_MARGIN_SIGMAS = 3


@dataclass(frozen=True)
class CanvasLayout:
    """
    Placement of the passes on the canvas (immutable).

    Attributes:
        canvas_size: (width, height) of the output
        background: Cover-fit rect (may extend past the canvas)
        foreground: Contain-fit rect inside the bordered box
        stroke_width: Outline width (0 = no stroke pass)
    """

    canvas_size: Tuple[int, int]
    background: Rect
    foreground: Rect
    stroke_width: int = 0

    @property
    def background_box(self) -> PixelBox:
        return self.background.snap()

    @property
    def foreground_box(self) -> PixelBox:
        return self.foreground.snap()

    @property
    def stroke_box(self) -> Optional[PixelBox]:
        """Outer edge of the stroke, or None when there is no stroke."""
        if self.stroke_width <= 0:
            return None
        fg = self.foreground_box
        w = self.stroke_width
        return PixelBox(fg.left - w, fg.top - w, fg.right + w, fg.bottom + w)


def plan_layout(source_size: Tuple[int, int], options: ProcessingOptions) -> CanvasLayout:
    """
    Compute background and foreground placement for a source size.

    Raises:
        InvalidDimensions: If the source has zero area
    """
    src_w, src_h = source_size
    canvas_w, canvas_h = options.canvas_size
    return CanvasLayout(
        canvas_size=(canvas_w, canvas_h),
        background=cover_fit(src_w, src_h, canvas_w, canvas_h),
        foreground=contain_fit(src_w, src_h, canvas_w, canvas_h, inset=options.outer_border),
        stroke_width=options.stroke_width,
    )


def composite(source: Image.Image, options: ProcessingOptions) -> Image.Image:
    """
    Build the output canvas for one source image.

    Args:
        source: Decoded source raster (any mode Pillow can convert to RGBA)
        options: Options snapshot for the run

    Returns:
        New RGB image of exactly options.canvas_size

    Raises:
        InvalidDimensions: If the source has zero area

    Example:
        >>> out = composite(Image.new("RGB", (800, 600)), ProcessingOptions())
        >>> out.size
        (1080, 1350)
    """
    if source.width <= 0 or source.height <= 0:
        raise InvalidDimensions(f"Source dimensions must be positive: {source.width}x{source.height}")

    layer = _as_layer(source)
    plan = plan_layout(layer.size, options)
    logger.debug(
        f"Layout for {layer.width}x{layer.height} on {options.canvas_width}x{options.canvas_height}: "
        f"background={plan.background_box} foreground={plan.foreground_box}"
    )

    canvas = Image.new("RGB", options.canvas_size, CANVAS_BASE_COLOR)
    canvas = draw_background(canvas, layer, plan.background, options.blur_radius)
    canvas = draw_overlay(canvas, options.overlay_color, options.overlay_opacity)
    canvas = draw_stroke(canvas, plan.foreground_box, options.stroke_width, options.stroke_color)
    canvas = draw_foreground(canvas, layer, plan.foreground_box)
    return canvas


# ─────────────────────────────────────────────────────────────────────────────
# Passes
# ─────────────────────────────────────────────────────────────────────────────


def draw_background(
    canvas: Image.Image,
    layer: Image.Image,
    rect: Rect,
    blur_radius: float,
) -> Image.Image:
    """
    Pass 1: blurred cover-fit copy of the source.

    Only the part of the scaled source that lands on the canvas (plus a
    blur margin) is resampled; blurring happens in canvas pixels so the
    radius means the same thing for every source size.
    """
    margin = int(math.ceil(blur_radius * BLUR_MARGIN_SIGMAS)) if blur_radius > 0 else 0
    scaled, origin = _resample_visible(layer, rect.snap(), canvas.size, margin)
    if blur_radius > 0:
        scaled = scaled.filter(ImageFilter.GaussianBlur(blur_radius))

    result = canvas.copy()
    _paste_layer(result, scaled, origin)
    return result


def draw_overlay(canvas: Image.Image, color: RGB, opacity: float) -> Image.Image:
    """Pass 2: colour wash at opacity/100 alpha. Opacity 0 leaves the canvas as is."""
    if opacity <= 0:
        return canvas
    wash = Image.new("RGB", canvas.size, color)
    if opacity >= 100:
        return wash
    return Image.blend(canvas, wash, opacity / 100)


def draw_stroke(
    canvas: Image.Image,
    foreground_box: PixelBox,
    stroke_width: int,
    color: RGB,
) -> Image.Image:
    """
    Pass 3: square-cornered outline around the foreground box.

    The outline's inner edge touches the foreground box and its outer
    edge lies stroke_width beyond it, i.e. its centre line runs
    stroke_width / 2 outside the image. It is drawn as four bands that
    share the corner squares (mitred corners).
    """
    if stroke_width <= 0:
        return canvas

    fg = foreground_box
    w = stroke_width
    bands = [
        (fg.left - w, fg.top - w, fg.right + w, fg.top),        # top, with corners
        (fg.left - w, fg.bottom, fg.right + w, fg.bottom + w),  # bottom, with corners
        (fg.left - w, fg.top, fg.left, fg.bottom),              # left
        (fg.right, fg.top, fg.right + w, fg.bottom),            # right
    ]

    result = canvas.copy()
    draw = ImageDraw.Draw(result)
    for band in bands:
        clipped = _clip(band, result.size)
        if clipped is None:
            continue
        left, top, right, bottom = clipped
        # ImageDraw rectangles are inclusive of the far edge
        draw.rectangle((left, top, right - 1, bottom - 1), fill=color)
    return result


def draw_foreground(canvas: Image.Image, layer: Image.Image, foreground_box: PixelBox) -> Image.Image:
    """Pass 4: unblurred, fully opaque contain-fit copy of the source."""
    scaled = layer.resize(foreground_box.size, RESAMPLE)
    result = canvas.copy()
    _paste_layer(result, scaled, foreground_box.origin)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Preview
# ─────────────────────────────────────────────────────────────────────────────


def render_preview(source: Image.Image, options: ProcessingOptions, scale: float = 0.2) -> Image.Image:
    """
    Composite at full size, then shrink for display.

    Args:
        source: Decoded source raster
        options: Options snapshot
        scale: Display scale, 0 < scale <= 1

    Returns:
        RGB image of roughly canvas_size * scale (at least 1x1)
    """
    if not 0 < scale <= 1:
        raise ValueError(f"scale must be within (0, 1]: {scale}")
    full = composite(source, options)
    if scale == 1:
        return full
    size = (
        max(1, int(round(full.width * scale))),
        max(1, int(round(full.height * scale))),
    )
    return full.resize(size, RESAMPLE)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _as_layer(image: Image.Image) -> Image.Image:
    """Normalise to RGB, or RGBA when the source carries transparency."""
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def _paste_layer(canvas: Image.Image, layer: Image.Image, origin: Tuple[int, int]) -> None:
    """Alpha-over a layer onto an opaque canvas in place (paste clips to bounds)."""
    if layer.mode == "RGBA":
        canvas.paste(layer, origin, layer)
    else:
        canvas.paste(layer, origin)


def _clip(
    box: Tuple[int, int, int, int],
    size: Tuple[int, int],
) -> Optional[Tuple[int, int, int, int]]:
    left, top, right, bottom = box
    left, top = max(left, 0), max(top, 0)
    right, bottom = min(right, size[0]), min(bottom, size[1])
    if right <= left or bottom <= top:
        return None
    return (left, top, right, bottom)


def _resample_visible(
    layer: Image.Image,
    target: PixelBox,
    canvas_size: Tuple[int, int],
    margin: int,
) -> Tuple[Image.Image, Tuple[int, int]]:
    """
    Resample only the region of `target` that falls on the canvas.

    Equivalent to resizing the whole layer to target.size and cropping,
    without materialising the off-canvas overflow (a very wide panorama
    cover-fitted to a portrait canvas would otherwise be enormous).

    Returns:
        (resampled region, canvas origin of that region)
    """
    left = max(target.left, -margin)
    top = max(target.top, -margin)
    right = min(target.right, canvas_size[0] + margin)
    bottom = min(target.bottom, canvas_size[1] + margin)
    # Cover-fit always overlaps the canvas; fall back to a full resize otherwise
    if right <= left or bottom <= top:
        return layer.resize(target.size, RESAMPLE), target.origin

    scale_x = layer.width / target.width
    scale_y = layer.height / target.height
    source_box = (
        (left - target.left) * scale_x,
        (top - target.top) * scale_y,
        min((right - target.left) * scale_x, layer.width),
        min((bottom - target.top) * scale_y, layer.height),
    )
    region = layer.resize((right - left, bottom - top), RESAMPLE, box=source_box)
    return region, (left, top)
