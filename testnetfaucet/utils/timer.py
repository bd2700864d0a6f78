"""
Logs how long an awaited call took, as a decorator or as a context manager.

```python
@async_timer("claim_repository.try_reserve", logger=logger)
async def try_reserve(self, record):
    ...

async with Timer("chain dispatch", logger=logger) as timer:
    ...
```

Log line: "Timer: claim_repository.try_reserve took 0.003112 s".
A call that raises is logged as failed, the exception is not touched.
"""

import functools
import logging
import time
from typing import Optional


class Timer:
    """Measure elapsed wall time of an async block"""

    def __init__(self, text: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.text = text
        self.logger = logger or logging.getLogger(__name__)
        self._started: Optional[float] = None
        self._ended: Optional[float] = None

    @property
    def elapsed(self) -> float:
        """Seconds since enter, frozen on exit"""
        if self._started is None:
            return 0.0
        end = self._ended if self._ended is not None else time.perf_counter()
        return end - self._started

    async def __aenter__(self):
        self._started = time.perf_counter()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self._ended = time.perf_counter()
        if self.text is None:
            return
        if exc_type is None:
            self.logger.info("Timer: %s took %f s", self.text, self.elapsed)
        else:
            self.logger.info(
                "Timer: %s failed with %s after %f s",
                self.text,
                exc_type.__name__,
                self.elapsed,
            )


def async_timer(name: str, logger: logging.Logger):
    def decorator(function):
        @functools.wraps(function)
        async def wrapper(*args, **kwargs):
            async with Timer(name, logger=logger):
                return await function(*args, **kwargs)

        return wrapper

    return decorator
