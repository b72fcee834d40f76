"""
Module: output.writer

Purpose:
    Save deliverables into a directory. Names are made unique against
    each other and against files already present, and every file is
    written atomically (temp file in the same directory, then replace).

Key Functions:
    - write_deliverables(): Save a list of deliverables

Dependencies:
    - tempfile (std)
    - batch.naming: Collision suffixes

Used By:
    - social_canvas.cli: Command-line delivery
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import List, Sequence

from social_canvas.batch.naming import deduplicate
from social_canvas.core.errors import PackagingFailure
from social_canvas.core.models import Deliverable

logger = logging.getLogger(__name__)


def write_deliverables(
    deliverables: Sequence[Deliverable],
    output_dir: Path,
    *,
    overwrite: bool = False,
) -> List[Path]:
    """
    Write deliverables into `output_dir`.

    Args:
        deliverables: Deliverables in order
        output_dir: Target directory (created if needed)
        overwrite: Replace existing files instead of picking a free name

    Returns:
        Paths written, in order

    Raises:
        PackagingFailure: If the directory or a file cannot be written
    """
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        existing = [] if overwrite else [p.name for p in output_dir.iterdir()]
    except OSError as e:
        raise PackagingFailure(f"Cannot prepare output directory {output_dir}: {e}") from e

    names = deduplicate((_safe_name(d.filename) for d in deliverables), taken=existing)

    written: List[Path] = []
    for deliverable, name in zip(deliverables, names):
        path = output_dir / name
        try:
            _write_bytes_atomic(deliverable.data, path)
        except OSError as e:
            raise PackagingFailure(f"Failed to write {path}: {e}") from e
        logger.info(f"Wrote {path}")
        written.append(path)
    return written


def _safe_name(filename: str) -> str:
    """Keep deliverables inside the output directory."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return name or "untitled"


def _write_bytes_atomic(data: bytes, path: Path) -> None:
    """Synchronous atomic file write."""
    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=".part",
        dir=path.parent,
        delete=False,
    ) as f:
        f.write(data)
        temp_path = Path(f.name)

    try:
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
