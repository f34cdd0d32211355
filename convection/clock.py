"""
clock.py — Fixed-Tick Accumulator
==================================
Decouples the physics rate from the display rate.

Every display refresh the host reports how much real time passed. That
time (capped, then scaled by the speed multiplier) goes into an
accumulator; whole ticks are paid out of it. After a stall we run at most
``max_ticks_per_frame`` ticks and drop whatever is left over instead of
trying to catch up.
"""

import logging

logger = logging.getLogger(__name__)


class FrameClock:

    def __init__(self, tick_duration: float = 1.0 / 60.0, time_scale: float = 1.0,
                 max_ticks_per_frame: int = 16, max_frame_delta: float = 0.1):
        self.tick_duration = tick_duration
        self.time_scale = time_scale
        self.max_ticks_per_frame = max_ticks_per_frame
        self.max_frame_delta = max_frame_delta
        self.accumulated = 0.0
        self.dropped_time = 0.0

    def advance(self, elapsed: float) -> int:
        """
        Feed ``elapsed`` real seconds and return how many ticks to run now.
        """
        if elapsed > 0:
            self.accumulated += min(elapsed, self.max_frame_delta) * self.time_scale

        ticks = int(self.accumulated // self.tick_duration)
        if ticks > self.max_ticks_per_frame:
            excess = (ticks - self.max_ticks_per_frame) * self.tick_duration
            self.dropped_time += excess
            logger.debug("Frame clock over budget: dropping %.4fs", excess)
            ticks = self.max_ticks_per_frame
        self.accumulated -= ticks * self.tick_duration
        # Anything still worth a whole tick was beyond the cap
        if self.accumulated >= self.tick_duration:
            self.accumulated %= self.tick_duration
        return ticks

    def reset(self):
        self.accumulated = 0.0
        self.dropped_time = 0.0
