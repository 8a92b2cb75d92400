from __future__ import annotations

import time
from typing import Callable


class Timer:
    """Stopwatch over an injectable clock (seconds)."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._start_time: float | None = None
        self._accumulated_s = 0.0

    @property
    def is_running(self) -> bool:
        return self._start_time is not None

    def start(self) -> None:
        if self._start_time is None:
            self._start_time = float(self._clock())

    def restart(self) -> None:
        self.reset()
        self.start()

    def stop(self) -> None:
        self._accumulated_s = self.get()
        self._start_time = None

    def reset(self) -> None:
        self._accumulated_s = 0.0
        if self._start_time is not None:
            self._start_time = float(self._clock())

    def get(self) -> float:
        if self._start_time is None:
            return self._accumulated_s
        return self._accumulated_s + (float(self._clock()) - self._start_time)

    def has_elapsed(self, seconds: float) -> bool:
        return self.get() >= seconds
