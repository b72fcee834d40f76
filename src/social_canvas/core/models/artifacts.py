"""
Module: core.models.artifacts

Purpose:
    Data carried through a batch: the source images going in, the
    encoded artifacts coming out, the run state owned by the
    orchestrator and the deliverables handed to the delivery layer.

Key Classes:
    - SourceImage: Raw input bytes plus declared name
    - OutputArtifact: Encoded output image plus resolved filename
    - BatchRun: Mutable run state (orchestrator-owned)
    - Deliverable: Named byte blob ready for saving or download

Dependencies:
    - dataclasses (std)
    - mimetypes (std)

Used By:
    - compositing.codec: Decoding SourceImage
    - batch.orchestrator: BatchRun lifecycle
    - output.packager: Deliverable creation
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .options import ProcessingOptions


def source_stem(name: str) -> str:
    """
    Base name of a declared file name with its last extension removed.

    Examples:
        >>> source_stem("holiday/IMG_0042.JPG")
        'IMG_0042'
        >>> source_stem("photo.final.png")
        'photo.final'
        >>> source_stem("README")
        'README'
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, _ = base.rpartition(".")
    if not dot or not stem:
        return base
    return stem


@dataclass(frozen=True)
class SourceImage:
    """
    One batch input (immutable).

    Attributes:
        data: Encoded image bytes as supplied
        name: Declared file name (used for the {stem} token and logging)
        media_type: Declared media type, e.g. "image/png" (optional)
    """

    data: bytes
    name: str
    media_type: Optional[str] = None

    @property
    def stem(self) -> str:
        return source_stem(self.name)

    @classmethod
    def from_path(cls, path: Path) -> SourceImage:
        """Read a file from disk, guessing its media type from the suffix."""
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        return cls(data=path.read_bytes(), name=path.name, media_type=media_type)

    def __repr__(self) -> str:
        return f"SourceImage({self.name!r}, {len(self.data)} bytes)"


@dataclass(frozen=True)
class OutputArtifact:
    """
    One finished output image (immutable).

    Attributes:
        data: Compressed image bytes
        filename: Resolved output filename, extension included
        source_name: Declared name of the source it came from
        size: (width, height) of the encoded image
    """

    data: bytes
    filename: str
    source_name: str = ""
    size: Tuple[int, int] = (0, 0)

    def __repr__(self) -> str:
        return f"OutputArtifact({self.filename!r}, {len(self.data)} bytes)"


@dataclass(frozen=True)
class Deliverable:
    """A named byte blob: one image, or one archive of images."""

    filename: str
    data: bytes
    media_type: str

    def __repr__(self) -> str:
        return f"Deliverable({self.filename!r}, {self.media_type}, {len(self.data)} bytes)"


@dataclass
class BatchRun:
    """
    State of one batch while it runs.

    Created when a batch starts and mutated only by the orchestrator,
    which appends artifacts and advances `completed` after every
    attempted item. Discarded once packaging completes or the run is
    cancelled.

    Attributes:
        sources: Inputs in submission order
        options: Shared options snapshot
        pattern: Naming pattern for outputs
        completed: Items attempted so far (successful or skipped)
        artifacts: Successfully produced artifacts, in input order
        failures: (source name, reason) for every skipped item
    """

    sources: Tuple[SourceImage, ...]
    options: ProcessingOptions
    pattern: str
    completed: int = 0
    artifacts: List[OutputArtifact] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.sources)

    @property
    def progress(self) -> float:
        """Fraction of items attempted; 1.0 for an empty batch."""
        if not self.sources:
            return 1.0
        return self.completed / self.total

    @property
    def is_finished(self) -> bool:
        return self.completed >= self.total
