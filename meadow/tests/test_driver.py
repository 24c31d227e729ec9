"""
Test TickDriver frame loop.

Uses a fake clock and sleep so no wall-clock time passes.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from meadow.driver import TickDriver


class StubSimulation:
    def __init__(self):
        self.paused = False
        self.ticks = 0
        self.summaries = 0

    def tick(self):
        self.ticks += 1

    def print_tick_summary(self):
        self.summaries += 1


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.slept = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.slept.append(seconds)
        self.now += seconds


def make_driver(sim, clock, **kwargs) -> TickDriver:
    return TickDriver(sim, clock=clock, sleep=clock.sleep, **kwargs)


def test_max_frames():
    sim = StubSimulation()
    clock = FakeClock()
    driver = make_driver(sim, clock, interval_s=0.5)

    frames = driver.run(max_frames=10)

    assert frames == 10
    assert sim.ticks == 10
    assert driver.ticks_invoked == 10
    assert driver.running is False
    assert clock.now == 5.0, "Fixed interval pacing via sleep"


def test_paused_frames_do_not_tick():
    sim = StubSimulation()
    sim.paused = True
    driver = make_driver(sim, FakeClock(), interval_s=0.0)

    driver.run(max_frames=5)

    assert driver.frames == 5
    assert sim.ticks == 0
    assert driver.ticks_invoked == 0


def test_stop_from_callback():
    sim = StubSimulation()

    def on_frame(driver):
        if driver.frames == 3:
            driver.stop()

    driver = make_driver(sim, FakeClock(), interval_s=0.1, on_frame=on_frame)
    frames = driver.run()

    assert frames == 3
    assert sim.ticks == 3


def test_duration_limit():
    sim = StubSimulation()
    clock = FakeClock()
    driver = make_driver(sim, clock, interval_s=0.25)

    frames = driver.run(duration_s=1.0)

    assert frames == 4
    assert sim.ticks == 4


def test_summary_every():
    sim = StubSimulation()
    driver = make_driver(sim, FakeClock(), interval_s=0.0, summary_every=4)

    driver.run(max_frames=10)

    assert sim.summaries == 2


def test_pause_toggle_mid_run():
    sim = StubSimulation()

    def on_frame(driver):
        sim.paused = driver.frames >= 2

    driver = make_driver(sim, FakeClock(), interval_s=0.0, on_frame=on_frame)
    driver.run(max_frames=6)

    assert sim.ticks == 2
    assert driver.frames == 6


def test_step_once_with_real_simulation():
    from meadow.simulation import MeadowSimulation

    sim = MeadowSimulation(seed=1)
    sim.seed_food()
    sim.spawn_creature()
    driver = TickDriver(sim, interval_s=0.0)

    assert driver.step_once() is True
    assert sim.sim_time == 1.0

    sim.set_paused(True)
    assert driver.step_once() is False
    assert sim.sim_time == 1.0
