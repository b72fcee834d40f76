"""
Module: compositing

Purpose:
    Geometry, raster compositing and codec for a single image.
    Source bytes -> decode -> four-pass composite -> JPEG bytes.

Key Functions:
    - cover_fit(), contain_fit(): Placement rects
    - composite(): Build one output canvas
    - decode(), encode(): Image I/O

Dependencies:
    - PIL: Image manipulation

Used By:
    - social_canvas.batch: Batch orchestration
"""

from .geometry import cover_fit, contain_fit
from .engine import CanvasLayout, composite, plan_layout, render_preview
from .codec import decode, encode, jpeg_quality, OUTPUT_EXTENSION, OUTPUT_MEDIA_TYPE

__all__ = [
    "cover_fit",
    "contain_fit",
    "CanvasLayout",
    "composite",
    "plan_layout",
    "render_preview",
    "decode",
    "encode",
    "jpeg_quality",
    "OUTPUT_EXTENSION",
    "OUTPUT_MEDIA_TYPE",
]
