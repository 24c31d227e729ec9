"""
Tick driver: the external clock that invokes simulation steps.

Runs a fixed-interval loop on the wall clock. Each frame calls
simulation.tick() unless the simulation is paused; pausing only stops the
invocation, it never alters state. Speed is applied inside the step as a
multiplier on simulated time, not on the frame cadence.
"""

import time
from typing import Callable, Optional

from .constants import DRIVER_INTERVAL_S, TICK_SUMMARY_INTERVAL


class TickDriver:
    """
    Fixed-interval frame loop around a MeadowSimulation.

    Attributes:
        frames: Loop iterations completed
        ticks_invoked: Frames that actually called simulation.tick()
    """

    def __init__(
        self,
        simulation,
        interval_s: float = DRIVER_INTERVAL_S,
        on_frame: Optional[Callable] = None,
        summary_every: Optional[int] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Args:
            simulation: Object exposing tick() and paused (MeadowSimulation)
            interval_s: Wall-clock seconds per frame (0 = as fast as possible)
            on_frame: Optional callback(driver) after every frame
            summary_every: Print a tick summary every N ticks (None = never,
                           0 = TICK_SUMMARY_INTERVAL)
            clock: Monotonic clock (injectable for tests)
            sleep: Sleep function (injectable for tests)
        """
        self.simulation = simulation
        self.interval_s = max(0.0, interval_s)
        self.on_frame = on_frame
        if summary_every == 0:
            summary_every = TICK_SUMMARY_INTERVAL
        self.summary_every = summary_every
        self._clock = clock
        self._sleep = sleep
        self._running = False
        self.frames: int = 0
        self.ticks_invoked: int = 0

    @property
    def running(self) -> bool:
        return self._running

    def step_once(self) -> bool:
        """
        Run one frame.

        Returns:
            True if the simulation was ticked (False while paused)
        """
        self.frames += 1
        ticked = False
        if not self.simulation.paused:
            self.simulation.tick()
            self.ticks_invoked += 1
            ticked = True

            if self.summary_every and self.ticks_invoked % self.summary_every == 0:
                self.simulation.print_tick_summary()

        if self.on_frame is not None:
            self.on_frame(self)
        return ticked

    def run(self, max_frames: Optional[int] = None, duration_s: Optional[float] = None) -> int:
        """
        Loop until stop(), max_frames frames, or duration_s seconds.

        With neither limit the loop runs until stop() is called (from
        on_frame) or the process is interrupted.

        Returns:
            Number of frames run by this call
        """
        self._running = True
        start = self._clock()
        next_deadline = start
        frames_this_run = 0

        try:
            while self._running:
                if max_frames is not None and frames_this_run >= max_frames:
                    break
                if duration_s is not None and self._clock() - start >= duration_s:
                    break

                self.step_once()
                frames_this_run += 1

                next_deadline += self.interval_s
                remaining = next_deadline - self._clock()
                if remaining > 0.0:
                    self._sleep(remaining)
                else:
                    # Running behind: resync instead of bursting to catch up
                    next_deadline = self._clock()
        finally:
            self._running = False

        return frames_this_run

    def stop(self):
        self._running = False
