"""
Core Models Package

Immutable, validated data models shared by the compositing and batch
pipelines. Options, sources, artifacts and placement rects are frozen
dataclasses; BatchRun is the single mutable record, owned by the
orchestrator for the lifetime of one run.
"""

from .geometry import Rect, PixelBox
from .options import ProcessingOptions, parse_color
from .artifacts import SourceImage, OutputArtifact, Deliverable, BatchRun, source_stem

__all__ = [
    "Rect",
    "PixelBox",
    "ProcessingOptions",
    "parse_color",
    "SourceImage",
    "OutputArtifact",
    "Deliverable",
    "BatchRun",
    "source_stem",
]
