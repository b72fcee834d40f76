"""
Module: core.errors

Purpose:
    Exception taxonomy shared by every stage of the pipeline. Per-item
    errors (dimensions, decode, encode) are recovered by the batch
    orchestrator; run-level errors (options, packaging, cancellation)
    propagate to the caller.

Key Classes:
    - SocialCanvasError: Base class for all library errors
    - InvalidDimensions, DecodeFailure, EncodeFailure: Per-item failures
    - InvalidOption, InvalidQuality, PackagingFailure, BatchCancelled:
      Run-level failures

Used By:
    - Every social_canvas module
"""

from __future__ import annotations

from typing import Optional


class SocialCanvasError(Exception):
    """Base error for the resizing pipeline."""
    pass


class InvalidDimensions(SocialCanvasError, ValueError):
    """Non-positive source, target or canvas size."""
    pass


class InvalidOption(SocialCanvasError, ValueError):
    """Out-of-range processing parameter."""
    pass


class InvalidQuality(InvalidOption):
    """Encoder quality outside (0, 1]."""
    pass


class DecodeFailure(SocialCanvasError):
    """Source bytes could not be decoded into a raster."""

    def __init__(self, message: str, source_name: Optional[str] = None):
        super().__init__(message)
        self.source_name = source_name


class EncodeFailure(SocialCanvasError):
    """Codec error while compressing a finished raster."""
    pass


class PackagingFailure(SocialCanvasError):
    """Archive serialization or delivery failed."""
    pass


class BatchCancelled(SocialCanvasError):
    """Run abandoned between items."""

    def __init__(self, completed: int, total: int):
        super().__init__(f"Batch cancelled after {completed}/{total} items")
        self.completed = completed
        self.total = total
