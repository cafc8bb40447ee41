"""
Fixed-cadence driver for a workout session
Polls a frame source, feeds the session, and publishes tick results to subscribers
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from pushtrack.pushups.live.frame_sources import FrameSource
from pushtrack.pushups.rep_counter.session import TickResult, WorkoutSession

DEFAULT_TICK_INTERVAL_SECONDS = 0.1  # 10 Hz


class SessionTicker:
    """Runs session ticks until stopped, a tick budget is used up, or a replay source runs dry.

    Frame source errors propagate to the caller.
    """

    def __init__(
        self,
        session: WorkoutSession,
        frame_source: FrameSource,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = None,
    ):
        self.session = session
        self.frame_source = frame_source
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self._clock = clock
        self._listeners: List[Callable[[TickResult], None]] = []
        self._stopped = False
        self.tick_count = 0

    def subscribe(self, listener: Callable[[TickResult], None]) -> None:
        self._listeners.append(listener)

    def stop(self) -> None:
        self._stopped = True

    def _now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return datetime.utcnow()

    def tick(self) -> TickResult:
        frame = self.frame_source.latest_frame()
        result = self.session.tick(frame, now=self._now())
        self.tick_count += 1
        for listener in self._listeners:
            listener(result)
        return result

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Blocks until done. Returns the number of ticks run."""
        self._stopped = False
        if not self.session.active:
            self.session.start(now=self._now())
        ticks = 0
        while not self._stopped and self.session.active:
            if max_ticks is not None and ticks >= max_ticks:
                break
            if getattr(self.frame_source, "exhausted", False):
                break
            self.tick()
            ticks += 1
            self._sleep(self.interval_seconds)
        logging.info(f"Session ticker finished after {ticks} ticks")
        return ticks


def simulated_clock(start: datetime, interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS) -> Callable[[], datetime]:
    """Clock that advances by one interval per call, for deterministic replays."""
    state = {"now": start - timedelta(seconds=interval_seconds)}

    def clock() -> datetime:
        state["now"] = state["now"] + timedelta(seconds=interval_seconds)
        return state["now"]

    return clock
