"""
fftcore/pipeline.py

Asynchronous compute pipeline.

One long-lived single-worker process per session runs compute_transform for
each submitted request. Submission never blocks; every submission produces
exactly one TransformResult through its callback, in submission order.

The pipeline does not track request identity and never cancels in-flight
work. Callers compare a response's width/height with the size they
currently want (SpectrumConsumer) and drop mismatches.
"""

from concurrent.futures import Future, ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import logging
import threading
import numpy as np

from .transform import TransformRequest, TransformResponse, compute_transform

logger = logging.getLogger(__name__)


class TransformUnavailableError(RuntimeError):
    """The worker process crashed or could not be started."""


@dataclass
class TransformResult:
    """Outcome of one submission: exactly one of response/error is set."""
    width: int
    height: int
    response: Optional[TransformResponse] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None


ResultCallback = Callable[[TransformResult], None]


def _default_executor():
    return ProcessPoolExecutor(max_workers=1)


class FFTPipeline:
    """
    Request/response front-end for the transform worker.

    Parameters
    ----------
    executor_factory : callable, optional
        Builds the single-worker executor. Defaults to a one-process
        ProcessPoolExecutor. Must return an executor with max_workers=1 so
        computations never overlap.
    compute : callable, optional
        The function run for each request (module-level so it pickles).
    """

    def __init__(self, executor_factory: Optional[Callable] = None, compute: Callable = compute_transform):
        self._executor_factory = executor_factory or _default_executor
        self._compute = compute
        self._lock = threading.Lock()
        self._executor = None
        self._broken = False
        self._start()

    # --- lifecycle ---
    def _start(self) -> None:
        try:
            self._executor = self._executor_factory()
        except (OSError, RuntimeError) as e:
            self._executor = None
            self._broken = True
            raise TransformUnavailableError(f"Could not start transform worker: {e}") from e
        self._broken = False
        logger.debug("Transform worker started.")

    @property
    def available(self) -> bool:
        return self._executor is not None and not self._broken

    def restart(self) -> None:
        """Throw away the current worker (if any) and start a fresh one."""
        with self._lock:
            old = self._executor
            self._executor = None
            if old is not None:
                old.shutdown(wait=False, cancel_futures=True)
            logger.info("Restarting transform worker.")
            self._start()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait, cancel_futures=not wait)
                self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False

    # --- submission ---
    def submit(self, request: TransformRequest, callback: Optional[ResultCallback] = None) -> Future:
        """
        Hand `request` to the worker and return immediately.

        The request's sample buffer is marked read-only: it now belongs to
        the pipeline. `callback` (if given) is called once with a
        TransformResult, from a pipeline thread, when the work finishes or
        fails.

        Raises
        ------
        TransformUnavailableError
            If the worker is not running. Call restart() to recover.

        Size-contract violations are not raised here; they fail this
        submission inside the worker and arrive as TransformResult.error.
        """
        if isinstance(request.samples, np.ndarray):
            request.samples.flags.writeable = False

        with self._lock:
            if not self.available:
                raise TransformUnavailableError("Transform worker is not running.")
            try:
                future = self._executor.submit(self._compute, request)
            except (BrokenProcessPool, RuntimeError) as e:
                self._broken = True
                logger.error("Transform worker unavailable: %s", e)
                raise TransformUnavailableError(str(e)) from e

        logger.debug("Submitted %dx%d transform.", request.width, request.height)
        size = request.size
        if callback is not None:
            future.add_done_callback(lambda f: callback(self._to_result(f, size)))
        return future

    def _to_result(self, future: Future, size: Tuple[int, int]) -> TransformResult:
        width, height = size
        if future.cancelled():
            return TransformResult(width, height, error=TransformUnavailableError("Transform was cancelled."))
        exc = future.exception()
        if exc is None:
            return TransformResult(width, height, response=future.result())
        if isinstance(exc, BrokenProcessPool):
            self._broken = True
            logger.error("Transform worker crashed: %s", exc)
            err = TransformUnavailableError(f"Transform worker crashed: {exc}")
            err.__cause__ = exc
            return TransformResult(width, height, error=err)
        logger.debug("Transform %dx%d failed: %s", width, height, exc)
        return TransformResult(width, height, error=exc)


class SpectrumConsumer:
    """
    Caller-side state for the latest spectrum.

    Holds the size the caller currently wants and the last accepted
    response. Responses computed for another size are discarded as stale.
    Not thread-safe; feed it from the thread that owns the display.
    """

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.current: Optional[TransformResponse] = None
        self.pending = False
        self.last_error: Optional[BaseException] = None
        self.discarded = 0

    def set_size(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)

    def mark_pending(self) -> None:
        self.pending = True

    def accept(self, result: TransformResult) -> bool:
        """
        Apply `result` if it is current. Returns True when the displayed
        spectrum changed.
        """
        # a dead worker fails every queued request, whatever its size
        crashed = isinstance(result.error, TransformUnavailableError)
        if not crashed and (result.width, result.height) != (self.width, self.height):
            self.discarded += 1
            logger.debug(
                "Discarding stale %dx%d result (want %dx%d).",
                result.width, result.height, self.width, self.height,
            )
            return False
        if result.error is not None:
            # keep showing the previous valid spectrum
            self.pending = False
            self.last_error = result.error
            return False
        response = result.response
        if response is None or not response.matches(self.width, self.height):
            self.discarded += 1
            return False
        self.current = response
        self.pending = False
        self.last_error = None
        return True

    @property
    def spectrum(self) -> Optional[TransformResponse]:
        """Last accepted response, or None if it does not fit the current size."""
        if self.current is None or not self.current.matches(self.width, self.height):
            return None
        return self.current
