#!/usr/bin/env python3
"""
Fixed-step scheduler.

Real frame time is accumulated and spent in whole physics ticks of a constant
size, so the simulation advances identically whatever the render framerate.
See https://gafferongames.com/post/fix_your_timestep/

Pause policy: while paused the accumulator is frozen. Frame time that passes
during a pause is discarded, and the sub-step remainder left before pausing is
kept, so resuming never produces a burst of catch-up ticks.
"""
import logging
from typing import Callable, Optional

from .constants import FIXED_DT, MAX_TICKS_PER_FRAME

logger = logging.getLogger("gravsim")


class FixedStepScheduler:
    """
    Accumulates elapsed time and runs `tick(step)` once per whole step.

    Args:
        step: Fixed simulation time per tick (seconds).
        max_ticks_per_frame: Upper bound on ticks executed by one `advance`
            call; any further whole steps are dropped. None disables the cap.
    """

    def __init__(self, step: float = FIXED_DT,
                 max_ticks_per_frame: Optional[int] = MAX_TICKS_PER_FRAME):
        if step <= 0:
            raise ValueError("fixed step must be positive")
        self.step = float(step)
        self.max_ticks_per_frame = max_ticks_per_frame
        self.accumulator = 0.0
        self.paused = False
        self.ticks = 0  # total ticks executed since reset

    def reset(self) -> None:
        self.accumulator = 0.0
        self.ticks = 0

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def advance(self, frame_time: float, tick: Callable[[float], None]) -> int:
        """
        Add one frame's elapsed time and run as many whole ticks as it covers.

        Returns:
            Number of ticks executed.
        """
        if self.paused:
            return 0

        self.accumulator += max(0.0, float(frame_time))
        executed = 0
        while self.accumulator >= self.step:
            if self.max_ticks_per_frame is not None and executed >= self.max_ticks_per_frame:
                dropped = int(self.accumulator // self.step)
                logger.warning("dropping %d ticks of backlog (%.3f s behind)",
                               dropped, dropped * self.step)
                self.accumulator -= dropped * self.step
                break
            tick(self.step)
            self.accumulator -= self.step
            self.ticks += 1
            executed += 1
        return executed

    def step_once(self, tick: Callable[[float], None]) -> None:
        """Run exactly one tick regardless of the pause state; the accumulator is untouched."""
        tick(self.step)
        self.ticks += 1
