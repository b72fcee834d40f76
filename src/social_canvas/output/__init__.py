"""
Module: output

Purpose:
    Packaging and delivery of finished images.

Key Functions:
    - package(): Artifacts -> individual files or one ZIP
    - write_deliverables(): Save deliverables to a directory

Dependencies:
    - zipfile (std)

Used By:
    - social_canvas.cli: Command-line delivery
"""

from .packager import PackageMode, package, build_archive
from .writer import write_deliverables

__all__ = [
    "PackageMode",
    "package",
    "build_archive",
    "write_deliverables",
]
