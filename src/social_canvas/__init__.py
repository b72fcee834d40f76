"""Top-level package for social_canvas.

Provides subpackages:
- social_canvas.core – options, data models, presets and errors
- social_canvas.compositing – fit geometry, four-pass compositing, codec
- social_canvas.batch – batch orchestration, naming, background jobs
- social_canvas.output – packaging and delivery
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("social_canvas")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0"

from .core import (  # noqa: E402
    SocialCanvasError,
    InvalidDimensions,
    InvalidOption,
    InvalidQuality,
    DecodeFailure,
    EncodeFailure,
    PackagingFailure,
    BatchCancelled,
    ProcessingOptions,
    SourceImage,
    OutputArtifact,
    Deliverable,
)
from .compositing import composite, cover_fit, contain_fit, decode, encode  # noqa: E402
from .batch import BatchJob, BatchResult, resolve, run_batch  # noqa: E402
from .output import PackageMode, package, write_deliverables  # noqa: E402

__all__: list[str] = [
    "__version__",
    "SocialCanvasError",
    "InvalidDimensions",
    "InvalidOption",
    "InvalidQuality",
    "DecodeFailure",
    "EncodeFailure",
    "PackagingFailure",
    "BatchCancelled",
    "ProcessingOptions",
    "SourceImage",
    "OutputArtifact",
    "Deliverable",
    "composite",
    "cover_fit",
    "contain_fit",
    "decode",
    "encode",
    "BatchJob",
    "BatchResult",
    "resolve",
    "run_batch",
    "PackageMode",
    "package",
    "write_deliverables",
]
