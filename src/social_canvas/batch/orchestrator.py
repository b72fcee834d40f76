"""
Module: batch.orchestrator

Purpose:
    Run the per-image pipeline over an ordered batch of sources.
    Decode → Composite → Encode → Name, one source at a time, in input
    order. Per-item failures are logged and skipped; the run carries on.

Key Functions:
    - run_batch(): Main entry point for a batch
    - process_one(): Decode and composite a single source

Key Classes:
    - BatchResult: Artifacts and failures of a finished run

Dependencies:
    - compositing: decode, composite, encode
    - batch.naming: resolve
    - core.models: ProcessingOptions, SourceImage, BatchRun

Used By:
    - batch.job: Background-thread runs
    - social_canvas.cli: Command-line front end
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

from PIL import Image

from social_canvas.compositing.codec import decode, encode
from social_canvas.compositing.engine import composite
from social_canvas.core.errors import (
    BatchCancelled,
    DecodeFailure,
    EncodeFailure,
    InvalidDimensions,
    InvalidOption,
)
from social_canvas.core.models import BatchRun, OutputArtifact, ProcessingOptions, SourceImage

from .naming import DEFAULT_PATTERN, resolve

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
SourceLike = Union[SourceImage, Tuple[bytes, str]]

# Failures that cost one item, not the whole run
ITEM_ERRORS = (InvalidDimensions, DecodeFailure, EncodeFailure)


@dataclass(frozen=True)
class BatchResult:
    """
    Outcome of a finished batch (immutable).

    Attributes:
        artifacts: Produced artifacts in input order (skipped items absent)
        failures: (source name, reason) for each skipped item
        total: Number of sources attempted
        elapsed: Wall-clock seconds for the run

    Example:
        >>> result = run_batch(sources, ProcessingOptions())
        >>> print(f"{result.succeeded}/{result.total} images converted")
    """

    artifacts: Tuple[OutputArtifact, ...]
    failures: Tuple[Tuple[str, str], ...]
    total: int
    elapsed: float = 0.0

    @property
    def succeeded(self) -> int:
        return len(self.artifacts)

    @property
    def failed(self) -> int:
        return len(self.failures)


def process_one(source: SourceImage, options: ProcessingOptions) -> Image.Image:
    """
    Decode and composite one source.

    Raises:
        DecodeFailure: If the source cannot be decoded
        InvalidDimensions: If the source has zero area
    """
    return composite(decode(source), options)


def run_batch(
    sources: Sequence[SourceLike],
    options: ProcessingOptions,
    pattern: str = DEFAULT_PATTERN,
    on_progress: Optional[ProgressCallback] = None,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> BatchResult:
    """
    Convert a batch of sources into named JPEG artifacts.

    Pipeline per source (strictly sequential, input order):
    1. Decode the source bytes
    2. Composite background, overlay, stroke and foreground
    3. Encode to JPEG at options.quality
    4. Resolve the filename from `pattern`, the 1-based index and the stem

    Args:
        sources: SourceImage objects or (bytes, name) pairs, in order
        options: Options snapshot shared by every item
        pattern: Naming pattern ({idx}, {stem})
        on_progress: Called with completed/total after every attempted item
        cancel_event: Checked before each item; when set the run is abandoned

    Returns:
        BatchResult with artifacts in input order

    Raises:
        InvalidOption: If options or pattern are invalid (before any work)
        BatchCancelled: If cancel_event is set between items
    """
    if not isinstance(options, ProcessingOptions):
        raise InvalidOption(f"options must be ProcessingOptions, got {type(options).__name__}")
    if not isinstance(pattern, str) or not pattern:
        raise InvalidOption(f"Naming pattern must be a non-empty string: {pattern!r}")

    run = BatchRun(sources=_coerce_sources(sources), options=options, pattern=pattern)
    start_time = time.perf_counter()

    logger.info(
        f"Starting batch of {run.total} image(s) at "
        f"{options.canvas_width}x{options.canvas_height}, pattern {pattern!r}"
    )

    if not run.sources and on_progress is not None:
        on_progress(1.0)

    for index, source in enumerate(run.sources, start=1):
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Batch cancelled before item {index}/{run.total}")
            raise BatchCancelled(run.completed, run.total)

        try:
            artifact = _produce(source, index, run)
        except ITEM_ERRORS as e:
            logger.warning(f"Skipping {source.name} (item {index}/{run.total}): {e}")
            run.failures.append((source.name, str(e)))
        else:
            run.artifacts.append(artifact)
            logger.debug(f"Produced {artifact.filename} from {source.name}")

        run.completed += 1
        if on_progress is not None:
            on_progress(run.progress)

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Batch finished in {elapsed:.2f}s: "
        f"{len(run.artifacts)} produced, {len(run.failures)} skipped"
    )

    return BatchResult(
        artifacts=tuple(run.artifacts),
        failures=tuple(run.failures),
        total=run.total,
        elapsed=elapsed,
    )


def _produce(source: SourceImage, index: int, run: BatchRun) -> OutputArtifact:
    """Run one item through decode → composite → encode → name."""
    canvas = process_one(source, run.options)
    data = encode(canvas, run.options.quality)
    filename = resolve(run.pattern, index, source.stem)
    return OutputArtifact(
        data=data,
        filename=filename,
        source_name=source.name,
        size=canvas.size,
    )


def _coerce_sources(sources: Iterable[SourceLike]) -> Tuple[SourceImage, ...]:
    coerced = []
    for item in sources:
        if isinstance(item, SourceImage):
            coerced.append(item)
        else:
            data, name = item
            coerced.append(SourceImage(data=bytes(data), name=str(name)))
    return tuple(coerced)
