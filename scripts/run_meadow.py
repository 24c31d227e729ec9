"""
Headless meadow runner.

Seeds the tulip bed, spawns a flock, and ticks the simulation through the
fixed-interval driver, printing periodic summaries.

Usage:
    python scripts/run_meadow.py --profile extended --creatures 12 --ticks 20000
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from meadow.constants import DATA_ROOT, DEFAULT_PROFILE, TICK_SUMMARY_INTERVAL
from meadow.driver import TickDriver
from meadow.simulation import MeadowSimulation


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the meadow ecosystem headless")
    parser.add_argument("--data-root", type=Path, default=DATA_ROOT, help="data pack directory")
    parser.add_argument("--profile", default=DEFAULT_PROFILE, help="tuning profile id (extended, classic)")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: profile seed)")
    parser.add_argument("--creatures", type=int, default=10, help="geese to spawn")
    parser.add_argument("--ticks", type=int, default=20000, help="frames to run")
    parser.add_argument("--speed", type=float, default=1.0, help="simulated-time multiplier")
    parser.add_argument("--interval", type=float, default=0.0,
                        help="wall-clock seconds per frame (0 = as fast as possible)")
    parser.add_argument("--summary-every", type=int, default=TICK_SUMMARY_INTERVAL,
                        help="print a summary every N ticks")
    parser.add_argument("--log-events", action="store_true", help="print per-entity events")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    sim = MeadowSimulation(
        data_root=args.data_root,
        profile=args.profile,
        seed=args.seed,
        log_events=args.log_events
    )
    sim.seed_food()
    for _ in range(args.creatures):
        sim.spawn_creature()
    sim.set_speed(args.speed)

    print(f"Running {args.ticks} frames with {len(sim.creatures)} geese "
          f"and {len(sim.food)} tulips (speed={sim.speed})...")

    driver = TickDriver(sim, interval_s=args.interval, summary_every=args.summary_every)
    driver.run(max_frames=args.ticks)

    print("=" * 60)
    sim.print_tick_summary()
    telemetry = sim.get_telemetry()
    print(f"[OK] Done: {telemetry['living_count']} alive, {telemetry['total_deaths']} starved, "
          f"{telemetry['total_births']} born, {telemetry['total_food_eaten']} tulips eaten")
    return 0


if __name__ == '__main__':
    sys.exit(main())
