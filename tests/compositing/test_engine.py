"""
Tests for compositing.engine

Test Coverage:
- composite(): output size, determinism, pass ordering
- Overlay opacity 0 / 100 behaviour
- Blur radius 0 is a plain cover-fit draw
- Stroke geometry: outer band only, square corners, no inward bleed
- Transparent sources, extreme aspect ratios, preview scaling
"""

import numpy as np
import pytest
from PIL import Image

from social_canvas.compositing import engine
from social_canvas.compositing.engine import (
    composite,
    draw_background,
    draw_foreground,
    draw_overlay,
    draw_stroke,
    plan_layout,
    render_preview,
)
from social_canvas.core.errors import InvalidDimensions
from social_canvas.core.models import PixelBox, ProcessingOptions

RED = (255, 0, 0)
BLUE = (0, 0, 255)
BLACK = (0, 0, 0)


def _pixels(image: Image.Image) -> np.ndarray:
    return np.asarray(image.convert("RGB"), dtype=np.int16)


def _close(actual, expected, tolerance=3) -> bool:
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected))


def _run_passes(source, options, *, overlay=True, stroke=True):
    """Run the passes by hand, optionally leaving some out."""
    plan = plan_layout(source.size, options)
    canvas = Image.new("RGB", options.canvas_size, engine.CANVAS_BASE_COLOR)
    canvas = draw_background(canvas, source, plan.background, options.blur_radius)
    if overlay:
        canvas = draw_overlay(canvas, options.overlay_color, options.overlay_opacity)
    if stroke:
        canvas = draw_stroke(canvas, plan.foreground_box, options.stroke_width, options.stroke_color)
    return draw_foreground(canvas, source, plan.foreground_box)


# ─────────────────────────────────────────────────────────────────────────────
# Basic contract
# ─────────────────────────────────────────────────────────────────────────────


def test_composite_returns_canvas_size(gradient_image, plain_options):
    out = composite(gradient_image, plain_options)
    assert out.size == (120, 150)
    assert out.mode == "RGB"


def test_composite_is_deterministic(gradient_image):
    opts = ProcessingOptions(canvas_width=120, canvas_height=150, blur_radius=3, stroke_width=4, outer_border=6)
    first = _pixels(composite(gradient_image, opts))
    second = _pixels(composite(gradient_image, opts))
    assert np.array_equal(first, second)


def test_composite_does_not_mutate_source(gradient_image):
    before = _pixels(gradient_image)
    composite(gradient_image, ProcessingOptions(canvas_width=120, canvas_height=150))
    assert np.array_equal(before, _pixels(gradient_image))


def test_composite_rejects_zero_area_source():
    with pytest.raises(InvalidDimensions):
        composite(Image.new("RGB", (0, 10)), ProcessingOptions())


def test_plan_layout_end_to_end_geometry():
    plan = plan_layout((800, 600), ProcessingOptions())
    assert plan.background_box == PixelBox(-360, 0, 1440, 1350)
    assert plan.foreground_box == PixelBox(0, 270, 1080, 1080)
    assert plan.stroke_box is None


def test_plan_layout_stroke_box_wraps_foreground():
    plan = plan_layout((800, 600), ProcessingOptions(stroke_width=10, outer_border=40))
    fg = plan.foreground_box
    assert plan.stroke_box == PixelBox(fg.left - 10, fg.top - 10, fg.right + 10, fg.bottom + 10)


# ─────────────────────────────────────────────────────────────────────────────
# Overlay pass
# ─────────────────────────────────────────────────────────────────────────────


def test_overlay_zero_matches_composite_without_overlay_pass(gradient_image):
    opts = ProcessingOptions(canvas_width=120, canvas_height=150, blur_radius=2, overlay_opacity=0)
    with_pass = _pixels(composite(gradient_image, opts))
    without_pass = _pixels(_run_passes(gradient_image, opts, overlay=False))
    assert np.array_equal(with_pass, without_pass)


def test_overlay_full_opacity_replaces_background(gradient_image):
    opts = ProcessingOptions(
        canvas_width=120, canvas_height=150, blur_radius=4,
        overlay_opacity=100, overlay_color="#3366cc",
    )
    out = _pixels(composite(gradient_image, opts))
    # Rows above the foreground (fg spans rows 30-119) are pure overlay colour
    assert np.all(out[:30] == (0x33, 0x66, 0xCC))
    assert np.all(out[120:] == (0x33, 0x66, 0xCC))


def test_overlay_half_opacity_blends():
    canvas = Image.new("RGB", (10, 10), BLACK)
    out = draw_overlay(canvas, (255, 255, 255), 50)
    value = out.getpixel((5, 5))
    assert all(127 <= c <= 128 for c in value)


def test_overlay_zero_returns_canvas_unchanged():
    canvas = Image.new("RGB", (4, 4), RED)
    assert draw_overlay(canvas, BLUE, 0) is canvas


# ─────────────────────────────────────────────────────────────────────────────
# Background pass
# ─────────────────────────────────────────────────────────────────────────────


def test_blur_zero_is_plain_cover_draw(gradient_image, plain_options):
    out = _pixels(composite(gradient_image, plain_options))
    # Cover-fit of 80x60 onto 120x150 is 200x150 at x=-40
    expected = _pixels(gradient_image.resize((200, 150), Image.Resampling.LANCZOS).crop((40, 0, 160, 150)))
    # Compare the background margin above and below the foreground
    assert np.abs(out[:30] - expected[:30]).max() <= 2
    assert np.abs(out[120:] - expected[120:]).max() <= 2


def test_blur_changes_background_only(gradient_image, plain_options):
    sharp = _pixels(composite(gradient_image, plain_options))
    blurred_opts = ProcessingOptions(**{**plain_options.to_dict(), "blur_radius": 6})
    blurred = _pixels(composite(gradient_image, blurred_opts))
    assert not np.array_equal(sharp[:30], blurred[:30])
    # Foreground rows are untouched by blur
    assert np.array_equal(sharp[30:120], blurred[30:120])


def test_blurred_background_reaches_canvas_corners():
    source = Image.new("RGB", (80, 60), RED)
    opts = ProcessingOptions(canvas_width=120, canvas_height=150, blur_radius=10, overlay_opacity=0)
    out = composite(source, opts)
    for corner in [(0, 0), (119, 0), (0, 149), (119, 149)]:
        assert _close(out.getpixel(corner), RED)


def test_extreme_panorama_background_still_covers():
    source = Image.new("RGB", (4000, 10), RED)
    opts = ProcessingOptions(canvas_width=108, canvas_height=135, blur_radius=2, overlay_opacity=0)
    out = composite(source, opts)
    assert out.size == (108, 135)
    assert _close(out.getpixel((0, 0)), RED)
    assert _close(out.getpixel((107, 134)), RED)


# ─────────────────────────────────────────────────────────────────────────────
# Stroke pass
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def stroke_canvas():
    """Red source, black background, blue 4px stroke, 10px border.

    Foreground box: contain-fit of 80x60 into 100x130 -> 100x75 at
    (10, 37.5), snapped to PixelBox(10, 38, 110, 113).
    """
    source = Image.new("RGB", (80, 60), RED)
    opts = ProcessingOptions(
        canvas_width=120, canvas_height=150, blur_radius=0,
        overlay_opacity=100, overlay_color=BLACK,
        outer_border=10, stroke_width=4, stroke_color=BLUE,
    )
    assert plan_layout(source.size, opts).foreground_box == PixelBox(10, 38, 110, 113)
    return composite(source, opts)


def test_stroke_sits_outside_foreground(stroke_canvas):
    # Left band: columns 6-9
    assert _close(stroke_canvas.getpixel((6, 70)), BLUE)
    assert _close(stroke_canvas.getpixel((9, 70)), BLUE)
    assert _close(stroke_canvas.getpixel((5, 70)), BLACK)
    # No inward bleed: first foreground column is image colour
    assert _close(stroke_canvas.getpixel((10, 70)), RED)
    # Right band: columns 110-113
    assert _close(stroke_canvas.getpixel((110, 70)), BLUE)
    assert _close(stroke_canvas.getpixel((113, 70)), BLUE)
    assert _close(stroke_canvas.getpixel((114, 70)), BLACK)
    assert _close(stroke_canvas.getpixel((109, 70)), RED)
    # Top band: rows 34-37, bottom band: rows 113-116
    assert _close(stroke_canvas.getpixel((60, 34)), BLUE)
    assert _close(stroke_canvas.getpixel((60, 33)), BLACK)
    assert _close(stroke_canvas.getpixel((60, 38)), RED)
    assert _close(stroke_canvas.getpixel((60, 116)), BLUE)
    assert _close(stroke_canvas.getpixel((60, 117)), BLACK)


def test_stroke_corners_are_square(stroke_canvas):
    for corner in [(6, 34), (113, 34), (6, 116), (113, 116)]:
        assert _close(stroke_canvas.getpixel(corner), BLUE)
    for outside in [(5, 33), (114, 33), (5, 117), (114, 117)]:
        assert _close(stroke_canvas.getpixel(outside), BLACK)


def test_stroke_zero_matches_composite_without_stroke_pass(gradient_image):
    opts = ProcessingOptions(canvas_width=120, canvas_height=150, blur_radius=1, stroke_width=0, outer_border=8)
    with_pass = _pixels(composite(gradient_image, opts))
    without_pass = _pixels(_run_passes(gradient_image, opts, stroke=False))
    assert np.array_equal(with_pass, without_pass)


def test_stroke_off_canvas_is_clipped():
    canvas = Image.new("RGB", (20, 20), BLACK)
    out = draw_stroke(canvas, PixelBox(0, 5, 20, 15), 3, BLUE)
    assert out.size == (20, 20)
    assert _close(out.getpixel((10, 2)), BLUE)
    assert _close(out.getpixel((10, 17)), BLUE)
    assert _close(out.getpixel((10, 10)), BLACK)


# ─────────────────────────────────────────────────────────────────────────────
# Foreground pass and sources with alpha
# ─────────────────────────────────────────────────────────────────────────────


def test_foreground_is_unblurred(gradient_image):
    opts = ProcessingOptions(canvas_width=160, canvas_height=120, blur_radius=8, overlay_opacity=50)
    out = _pixels(composite(gradient_image, opts))
    # Same aspect as the source: the foreground fills the canvas exactly
    expected = _pixels(gradient_image.resize((160, 120), Image.Resampling.LANCZOS))
    assert np.array_equal(out, expected)


def test_transparent_source_shows_background():
    source = Image.new("RGBA", (80, 60), (0, 0, 0, 0))
    opts = ProcessingOptions(
        canvas_width=120, canvas_height=150, blur_radius=0,
        overlay_opacity=100, overlay_color="white",
    )
    out = _pixels(composite(source, opts))
    assert np.all(out == 255)


def test_palette_source_is_supported():
    source = Image.new("RGB", (40, 30), RED).convert("P")
    out = composite(source, ProcessingOptions(canvas_width=60, canvas_height=60, overlay_opacity=0, blur_radius=0))
    assert _close(out.getpixel((30, 30)), RED)


# ─────────────────────────────────────────────────────────────────────────────
# Preview
# ─────────────────────────────────────────────────────────────────────────────


def test_render_preview_scales_output(gradient_image):
    preview = render_preview(gradient_image, ProcessingOptions(), scale=0.2)
    assert preview.size == (216, 270)


def test_render_preview_rejects_bad_scale(gradient_image):
    with pytest.raises(ValueError):
        render_preview(gradient_image, ProcessingOptions(), scale=0)
