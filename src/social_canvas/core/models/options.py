"""
Module: core.models.options

Purpose:
    Immutable parameter snapshot for one compositing run. Captured once
    when a batch starts and passed explicitly through every stage, so a
    run is reproducible even if the caller's form changes mid-batch.

Key Classes:
    - ProcessingOptions: Canvas size, blur, overlay, quality, border, stroke

Key Functions:
    - stroke_cap(): Max stroke width for a canvas size
    - border_cap(): Max outer border for a canvas size
    - parse_color(): Normalise a colour value to an (r, g, b) tuple

Dependencies:
    - PIL.ImageColor: Colour string parsing
    - core.errors: InvalidOption, InvalidQuality

Used By:
    - compositing.engine: Draw passes
    - batch.orchestrator: Run snapshot
    - config: JSON option files
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Sequence, Tuple, Union

from PIL import ImageColor

from social_canvas.core.errors import InvalidOption, InvalidQuality
from social_canvas.core.presets import CanvasPreset, get_preset

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
ColorSpec = Union[str, Sequence[int]]

STROKE_CAP_FRACTION = 0.05
BORDER_CAP_FRACTION = 0.125


def stroke_cap(canvas_width: int, canvas_height: int) -> int:
    """Largest allowed stroke width: 5% of the longer canvas side."""
    return int(math.floor(max(canvas_width, canvas_height) * STROKE_CAP_FRACTION))


def border_cap(canvas_width: int, canvas_height: int) -> int:
    """
    Largest allowed outer border: 12.5% of the longer canvas side.

    Also limited so the bordered foreground box keeps at least one pixel
    on the shorter side (a 1584x396 banner would otherwise allow a
    198px border that leaves no room at all).
    """
    by_fraction = int(math.floor(max(canvas_width, canvas_height) * BORDER_CAP_FRACTION))
    by_room = (min(canvas_width, canvas_height) - 1) // 2
    return max(0, min(by_fraction, by_room))


def parse_color(value: ColorSpec) -> RGB:
    """
    Normalise a colour to an (r, g, b) tuple.

    Accepts "#rrggbb", "#rgb", CSS colour names, or a sequence of three
    0-255 integers. Alpha components are dropped.

    Raises:
        InvalidOption: If the colour cannot be parsed

    Example:
        >>> parse_color("#ff8000")
        (255, 128, 0)
    """
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value.strip())
        except ValueError as e:
            raise InvalidOption(f"Unrecognised colour: {value!r}") from e
        return (rgb[0], rgb[1], rgb[2])

    try:
        components = tuple(int(c) for c in value)
    except (TypeError, ValueError) as e:
        raise InvalidOption(f"Unrecognised colour: {value!r}") from e
    if len(components) not in (3, 4) or any(c < 0 or c > 255 for c in components):
        raise InvalidOption(f"Colour must be three 0-255 components: {value!r}")
    return (components[0], components[1], components[2])


def color_to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class ProcessingOptions:
    """
    Parameter set shared by every item of a batch (immutable).

    Attributes:
        canvas_width: Output width in pixels
        canvas_height: Output height in pixels
        blur_radius: Gaussian blur radius for the background, in canvas pixels
        overlay_opacity: Colour wash opacity, 0-100 percent
        overlay_color: Colour wash colour (r, g, b)
        quality: Encoder quality factor, 0 < q <= 1
        outer_border: Margin reserved around the foreground on every side
        stroke_width: Outline width around the foreground
        stroke_color: Outline colour (r, g, b)

    Invariants:
        - 0 <= stroke_width <= stroke_cap(canvas)
        - 0 <= outer_border <= border_cap(canvas)

    Example:
        >>> opts = ProcessingOptions(canvas_width=1080, canvas_height=1350)
        >>> opts.with_canvas(400, 400).stroke_cap
        20
    """

    canvas_width: int = 1080
    canvas_height: int = 1350
    blur_radius: float = 8
    overlay_opacity: float = 80
    overlay_color: RGB = (0, 0, 0)
    quality: float = 1.0
    outer_border: int = 0
    stroke_width: int = 0
    stroke_color: RGB = (255, 255, 255)

    def __post_init__(self) -> None:
        """Validate and normalise on construction."""
        if not _is_int(self.canvas_width) or self.canvas_width <= 0:
            raise InvalidOption(f"canvas_width must be a positive integer: {self.canvas_width!r}")
        if not _is_int(self.canvas_height) or self.canvas_height <= 0:
            raise InvalidOption(f"canvas_height must be a positive integer: {self.canvas_height!r}")
        if not _is_number(self.blur_radius) or self.blur_radius < 0:
            raise InvalidOption(f"blur_radius must be non-negative: {self.blur_radius!r}")
        if not _is_number(self.overlay_opacity) or not 0 <= self.overlay_opacity <= 100:
            raise InvalidOption(f"overlay_opacity must be within 0-100: {self.overlay_opacity!r}")
        if not _is_number(self.quality) or not 0 < self.quality <= 1:
            raise InvalidQuality(f"quality must be within (0, 1]: {self.quality!r}")
        if not _is_int(self.outer_border) or self.outer_border < 0:
            raise InvalidOption(f"outer_border must be a non-negative integer: {self.outer_border!r}")
        if not _is_int(self.stroke_width) or self.stroke_width < 0:
            raise InvalidOption(f"stroke_width must be a non-negative integer: {self.stroke_width!r}")
        if self.outer_border > self.border_cap:
            raise InvalidOption(
                f"outer_border {self.outer_border} exceeds cap {self.border_cap} "
                f"for a {self.canvas_width}x{self.canvas_height} canvas"
            )
        if self.stroke_width > self.stroke_cap:
            raise InvalidOption(
                f"stroke_width {self.stroke_width} exceeds cap {self.stroke_cap} "
                f"for a {self.canvas_width}x{self.canvas_height} canvas"
            )

        # Frozen: normalise colours through object.__setattr__
        object.__setattr__(self, "overlay_color", parse_color(self.overlay_color))
        object.__setattr__(self, "stroke_color", parse_color(self.stroke_color))

    # ─────────────────────────────────────────────────────────────────────────
    # Derived limits
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def stroke_cap(self) -> int:
        return stroke_cap(self.canvas_width, self.canvas_height)

    @property
    def border_cap(self) -> int:
        return border_cap(self.canvas_width, self.canvas_height)

    # ─────────────────────────────────────────────────────────────────────────
    # Derived snapshots
    # ─────────────────────────────────────────────────────────────────────────

    def with_canvas(self, canvas_width: int, canvas_height: int) -> ProcessingOptions:
        """
        Return a snapshot for a new canvas size.

        Stroke width and outer border are clamped to the caps of the new
        canvas; each clamp is logged.
        """
        if not _is_int(canvas_width) or not _is_int(canvas_height) or canvas_width <= 0 or canvas_height <= 0:
            raise InvalidOption(f"Canvas size must be positive integers: {canvas_width!r}x{canvas_height!r}")

        new_stroke_cap = stroke_cap(canvas_width, canvas_height)
        new_border_cap = border_cap(canvas_width, canvas_height)

        stroke = self.stroke_width
        if stroke > new_stroke_cap:
            logger.warning(
                f"stroke_width {stroke} clamped to {new_stroke_cap} for {canvas_width}x{canvas_height} canvas"
            )
            stroke = new_stroke_cap

        border = self.outer_border
        if border > new_border_cap:
            logger.warning(
                f"outer_border {border} clamped to {new_border_cap} for {canvas_width}x{canvas_height} canvas"
            )
            border = new_border_cap

        return replace(
            self,
            canvas_width=canvas_width,
            canvas_height=canvas_height,
            stroke_width=stroke,
            outer_border=border,
        )

    def with_preset(self, preset: Union[str, CanvasPreset]) -> ProcessingOptions:
        """Return a snapshot sized to a named preset (see core.presets)."""
        if isinstance(preset, str):
            try:
                preset = get_preset(preset)
            except KeyError as e:
                raise InvalidOption(str(e)) from e
        return self.with_canvas(preset.width, preset.height)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON storage (colours as #rrggbb)."""
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name.endswith("_color"):
                value = color_to_hex(value)
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProcessingOptions:
        """
        Deserialize from a dictionary; missing keys take defaults.

        Raises:
            InvalidOption: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidOption(f"Unknown option(s): {', '.join(unknown)}")
        return cls(**data)
