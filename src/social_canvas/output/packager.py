"""
Module: output.packager

Purpose:
    Turn finished artifacts into deliverables: either one file per image
    or a single ZIP archive containing every image.

Key Functions:
    - package(): Main entry point
    - build_archive(): Serialize artifacts into an in-memory ZIP

Key Classes:
    - PackageMode: individual / archive

Dependencies:
    - zipfile (std)
    - batch.naming: Duplicate entry names

Used By:
    - social_canvas.cli: Command-line delivery
    - GUI: Download buttons (external)
"""

from __future__ import annotations

import logging
import zipfile
from enum import Enum
from io import BytesIO
from typing import List, Sequence, Union

from social_canvas.batch.naming import deduplicate
from social_canvas.compositing.codec import OUTPUT_MEDIA_TYPE
from social_canvas.core.errors import PackagingFailure
from social_canvas.core.models import Deliverable, OutputArtifact

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = ".zip"
ARCHIVE_MEDIA_TYPE = "application/zip"
DEFAULT_ARCHIVE_NAME = "resized-images"


class PackageMode(str, Enum):
    INDIVIDUAL = "individual"
    ARCHIVE = "archive"


def package(
    artifacts: Sequence[OutputArtifact],
    mode: Union[PackageMode, str] = PackageMode.ARCHIVE,
    archive_name: str = DEFAULT_ARCHIVE_NAME,
) -> List[Deliverable]:
    """
    Group artifacts into deliverables.

    A batch with a single artifact is always delivered as an individual
    file, whatever mode was requested.

    Args:
        artifacts: Artifacts in batch order
        mode: "individual" or "archive"
        archive_name: Archive base name (".zip" is appended)

    Returns:
        One deliverable per artifact (individual), or one archive

    Raises:
        PackagingFailure: If the archive cannot be written, or mode is unknown

    Example:
        >>> [d.filename for d in package(result.artifacts, "archive", "week-12")]
        ['week-12.zip']
    """
    try:
        mode = PackageMode(mode)
    except ValueError as e:
        raise PackagingFailure(f"Unknown package mode: {mode!r}") from e

    if not artifacts:
        logger.warning("Nothing to package: batch produced no artifacts")
        return []

    if mode is PackageMode.INDIVIDUAL or len(artifacts) == 1:
        return [
            Deliverable(filename=a.filename, data=a.data, media_type=OUTPUT_MEDIA_TYPE)
            for a in artifacts
        ]

    filename = _archive_filename(archive_name)
    data = build_archive(artifacts)
    logger.info(f"Packaged {len(artifacts)} image(s) into {filename} ({len(data)} bytes)")
    return [Deliverable(filename=filename, data=data, media_type=ARCHIVE_MEDIA_TYPE)]


def build_archive(artifacts: Sequence[OutputArtifact]) -> bytes:
    """
    Write artifacts as ZIP entries, in order.

    Entries are named after each artifact's filename. Repeated names get
    a "(n)" suffix before the extension instead of overwriting the
    earlier entry.

    Raises:
        PackagingFailure: If zip serialization fails
    """
    entry_names = deduplicate(a.filename for a in artifacts)
    buffer = BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for artifact, entry_name in zip(artifacts, entry_names):
                if entry_name != artifact.filename:
                    logger.warning(
                        f"Duplicate filename {artifact.filename!r} stored as {entry_name!r}"
                    )
                zf.writestr(entry_name, artifact.data)
    except (OSError, ValueError, zipfile.LargeZipFile) as e:
        raise PackagingFailure(f"Failed to build archive: {e}") from e
    return buffer.getvalue()


def _archive_filename(archive_name: str) -> str:
    name = archive_name.strip() or DEFAULT_ARCHIVE_NAME
    if name.lower().endswith(ARCHIVE_EXTENSION):
        return name
    return name + ARCHIVE_EXTENSION
