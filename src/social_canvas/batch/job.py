"""
Module: batch.job

Purpose:
    Run a batch on a background thread so a UI-bound caller stays
    responsive. The batch itself stays strictly sequential; the job only
    moves it off the caller's thread and adds cancellation between items.

Key Classes:
    - BatchJob: One background batch run

Dependencies:
    - threading (std)
    - batch.orchestrator: run_batch

Used By:
    - GUI/preview front ends (external)
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

from social_canvas.core.errors import BatchCancelled
from social_canvas.core.models import ProcessingOptions

from .naming import DEFAULT_PATTERN
from .orchestrator import BatchResult, ProgressCallback, SourceLike, run_batch

logger = logging.getLogger(__name__)


class BatchJob:
    """
    Background batch run with cooperative cancellation.

    The options snapshot is captured at construction; progress callbacks
    fire on the worker thread in input order.

    Usage:
        job = BatchJob(sources, options, on_progress=bar.set_fraction)
        job.start()
        ...
        job.cancel()          # optional, takes effect before the next item
        result = job.wait()   # BatchResult, or None if cancelled/failed

    Attributes:
        result: BatchResult once finished successfully
        error: Exception that ended the run (BatchCancelled on cancel)
    """

    def __init__(
        self,
        sources: Sequence[SourceLike],
        options: ProcessingOptions,
        pattern: str = DEFAULT_PATTERN,
        *,
        on_progress: Optional[ProgressCallback] = None,
        on_done: Optional[Callable[["BatchJob"], None]] = None,
    ):
        self._sources = tuple(sources)
        self._options = options
        self._pattern = pattern
        self._on_progress = on_progress
        self._on_done = on_done
        self._cancel_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.result: Optional[BatchResult] = None
        self.error: Optional[BaseException] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cancelled(self) -> bool:
        return isinstance(self.error, BatchCancelled)

    def start(self) -> "BatchJob":
        if self._thread is not None:
            raise RuntimeError("BatchJob already started")
        self._thread = threading.Thread(target=self._run, name="social-canvas-batch", daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Request abandonment; checked before the next item starts."""
        self._cancel_event.set()

    def wait(self, timeout: Optional[float] = None) -> Optional[BatchResult]:
        """
        Block until the run ends.

        Returns:
            BatchResult, or None if the run was cancelled, failed, or the
            timeout expired
        """
        if self._thread is None:
            raise RuntimeError("BatchJob not started")
        self._thread.join(timeout)
        return self.result

    def _run(self) -> None:
        try:
            self.result = run_batch(
                self._sources,
                self._options,
                self._pattern,
                self._on_progress,
                cancel_event=self._cancel_event,
            )
        except BatchCancelled as e:
            self.error = e
            logger.info(str(e))
        except Exception as e:
            self.error = e
            logger.error(f"Batch failed: {e}")
        finally:
            if self._on_done is not None:
                self._on_done(self)
