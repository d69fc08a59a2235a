"""
Wall-clock timing for survival routines.

Every public routine times itself and stores the breakdown in
Result.timing: a 'total_seconds' entry plus one entry per named phase
(normalize, estimate, test, count).
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Stopwatch with named, accumulating phases.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('normalize'):
            design = CohortDesign.from_subjects(subjects)
        for series in design:
            with timer.section('estimate'):
                curve = kaplan_meier_curve(series.time, series.event)
        timer.stop()
        timer.result()
        # {'total_seconds': 0.002, 'normalize': 0.001, 'estimate': 0.001}

    A phase entered once per group reports the sum over all groups.
    """

    def __init__(self) -> None:
        self._phases: dict[str, float] = {}
        self._started_at: float | None = None
        self._elapsed: float | None = None

    def start(self) -> None:
        self._started_at = time.perf_counter()
        self._elapsed = None

    def stop(self) -> None:
        """
        Freeze the total elapsed time.

        Raises:
            RuntimeError: If the timer was never started
        """
        if self._started_at is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._elapsed = time.perf_counter() - self._started_at

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent inside the block to phase ``name``."""
        entered = time.perf_counter()
        try:
            yield
        finally:
            spent = time.perf_counter() - entered
            self._phases[name] = self._phases.get(name, 0.0) + spent

    def result(self) -> dict[str, float]:
        """
        Timing breakdown for Result.timing.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._elapsed, **self._phases}

