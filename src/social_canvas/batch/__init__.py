"""
Module: batch

Purpose:
    Sequence the single-image pipeline over many sources, name the
    outputs and run batches in the background.

Key Functions:
    - run_batch(): Convert an ordered batch into artifacts
    - resolve(): Expand a naming pattern

Key Classes:
    - BatchResult: Outcome of a run
    - BatchJob: Background-thread run with cancellation

Used By:
    - social_canvas.cli: Command-line front end
"""

from .naming import DEFAULT_PATTERN, resolve, deduplicate, unique_name
from .orchestrator import BatchResult, process_one, run_batch
from .job import BatchJob

__all__ = [
    "DEFAULT_PATTERN",
    "resolve",
    "deduplicate",
    "unique_name",
    "BatchResult",
    "process_one",
    "run_batch",
    "BatchJob",
]
