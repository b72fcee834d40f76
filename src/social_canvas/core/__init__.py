"""
social_canvas Core Package

Shared data models, presets and the error taxonomy used by every
pipeline stage.
"""

from .errors import (
    SocialCanvasError,
    InvalidDimensions,
    InvalidOption,
    InvalidQuality,
    DecodeFailure,
    EncodeFailure,
    PackagingFailure,
    BatchCancelled,
)
from .models import (
    Rect,
    PixelBox,
    ProcessingOptions,
    SourceImage,
    OutputArtifact,
    Deliverable,
    BatchRun,
)

__all__ = [
    "SocialCanvasError",
    "InvalidDimensions",
    "InvalidOption",
    "InvalidQuality",
    "DecodeFailure",
    "EncodeFailure",
    "PackagingFailure",
    "BatchCancelled",
    "Rect",
    "PixelBox",
    "ProcessingOptions",
    "SourceImage",
    "OutputArtifact",
    "Deliverable",
    "BatchRun",
]
