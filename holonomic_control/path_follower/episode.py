from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .tracker import TrackerDebug, TrajectoryTracker

logger = logging.getLogger(__name__)


@dataclass
class EpisodeResult:
    ticks: int
    elapsed_s: float
    interrupted: bool
    history: list[TrackerDebug] = field(default_factory=list)


class EpisodeRunner:
    """Fixed-rate cooperative scheduler for one tracking episode.

    ``advance`` moves the plant (and the tracker's clock) forward by one
    period after every command. Used with the simulator; on a robot the
    periodic scheduler plays this role.
    """

    def __init__(
        self,
        tracker: TrajectoryTracker,
        advance: Callable[[float], object],
        period_s: float = 0.02,
        timeout_s: float | None = None,
    ):
        if period_s <= 0.0:
            raise ValueError("period_s must be positive.")
        self.tracker = tracker
        self._advance = advance
        self.period_s = period_s
        self.timeout_s = timeout_s

    def run(
        self,
        interrupt_at_s: float | None = None,
        on_tick: Callable[[TrackerDebug], None] | None = None,
    ) -> EpisodeResult:
        tracker = self.tracker
        tracker.start()
        result = EpisodeResult(ticks=0, elapsed_s=0.0, interrupted=False)

        while True:
            if interrupt_at_s is not None and tracker.elapsed_s >= interrupt_at_s - 1e-9:
                tracker.cancel()

            command = tracker.tick()
            if command is None:
                result.interrupted = True
                break

            result.ticks += 1
            if tracker.last_debug is not None:
                result.history.append(tracker.last_debug)
                if on_tick is not None:
                    on_tick(tracker.last_debug)

            self._advance(self.period_s)

            if tracker.is_finished():
                tracker.stop(interrupted=False)
                break
            if self.timeout_s is not None and tracker.elapsed_s >= self.timeout_s:
                logger.warning("Episode timed out after %.2f s.", tracker.elapsed_s)
                tracker.stop(interrupted=True)
                result.interrupted = True
                break

        result.elapsed_s = tracker.elapsed_s
        return result
