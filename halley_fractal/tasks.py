"""
Cooperative jobs with progress reporting and cancellation.

A job is a generator that yields integer progress percentages between slices
of work and returns its result. `RenderTask` drives a job either one slice at
a time (for a host event loop) or to completion.
"""

from __future__ import annotations

from typing import Any, Callable, Generator, Optional

Job = Generator[int, None, Any]


class RenderCancelled(Exception):
    """Raised inside a job when its cancellation token has been triggered."""


class CancelToken:
    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RenderCancelled()


def rescale(job: Job, lo: int, hi: int) -> Job:
    """Re-map the percentages a sub-job yields onto lo..hi; returns its result."""
    try:
        pct = next(job)
        while True:
            yield lo + (hi - lo) * pct // 100
            pct = next(job)
    except StopIteration as stop:
        return stop.value


class RenderTask:
    """
    Drive a job, keeping the latest progress value.

    `progress` ends at exactly 100 once the job has finished successfully.
    `cancel()` makes the next slice raise `RenderCancelled`; the job's partial
    state is discarded.
    """

    def __init__(
        self,
        job_factory: Callable[[CancelToken], Job],
        on_progress: Optional[Callable[[int], None]] = None,
        token: Optional[CancelToken] = None,
    ):
        self.token = token if token is not None else CancelToken()
        self._job = job_factory(self.token)
        self._on_progress = on_progress
        self.progress = 0
        self._last_reported = -1
        self.done = False
        self.result: Any = None

    def _report(self, pct: int) -> None:
        # callbacks see strictly increasing values
        pct = max(0, min(100, int(pct)))
        if pct <= self._last_reported:
            return
        self._last_reported = self.progress = pct
        if self._on_progress is not None:
            self._on_progress(pct)

    def cancel(self) -> None:
        self.token.cancel()

    def step(self) -> bool:
        """Advance one slice. Returns True while more work remains."""
        if self.done:
            return False
        try:
            self.token.raise_if_cancelled()
            pct = next(self._job)
        except StopIteration as stop:
            self.result = stop.value
            self.done = True
            self._report(100)
            return False
        except RenderCancelled:
            self._job.close()
            raise
        self._report(pct)
        return True

    def run(self) -> Any:
        while self.step():
            pass
        return self.result


def run_job(
    job_factory: Callable[[CancelToken], Job],
    on_progress: Optional[Callable[[int], None]] = None,
    token: Optional[CancelToken] = None,
) -> Any:
    return RenderTask(job_factory, on_progress=on_progress, token=token).run()
