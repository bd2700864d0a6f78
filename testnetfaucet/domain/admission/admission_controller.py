import math
import threading
import time
from typing import Callable


class AdmissionController:
    """Fixed ceiling of admitted requests per period.

    Counting is per period index (floor(now / period)), the count restarts at
    zero on the first call of a new period. Rejected calls return immediately,
    nothing is queued.
    """

    def __init__(
        self,
        ceiling: int,
        period_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ceiling < 0:
            raise ValueError("ceiling must not be negative")
        if period_seconds <= 0:
            raise ValueError("period_seconds must be positive")
        self.ceiling = ceiling
        self.period_seconds = period_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._period_index = self._current_period_index()
        self._count = 0

    def admit(self) -> bool:
        with self._lock:
            period_index = self._current_period_index()
            if period_index != self._period_index:
                self._period_index = period_index
                self._count = 0
            if self._count >= self.ceiling:
                return False
            self._count += 1
            return True

    def _current_period_index(self) -> int:
        return math.floor(self._clock() / self.period_seconds)


def per_worker_ceiling(ceiling: int, workers: int) -> int:
    """Share of the ceiling for one of `workers` server processes.

    Each process counts on its own, so the shares sum to at most `ceiling`.
    With a single worker the share is the whole ceiling.
    """
    if workers < 1:
        raise ValueError("workers must be at least 1")
    return ceiling // workers
