"""
Test tick step and MeadowSimulation.

Verifies:
- Pause freezes all state
- Speed scales the simulated-time delta
- One food item is never consumed twice in a tick
- Determinism (same seed = identical results)
- Long-run invariants over the default data pack
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from meadow.data_types import FoodConfig, SimulationConfig, WanderConfig
from meadow.entity import Creature, CreatureState
from meadow.rng import make_rng
from meadow.simulation import MeadowSimulation, step
from meadow.store import EntityStore


def quiet_config() -> SimulationConfig:
    return SimulationConfig(
        hungry_wander=WanderConfig(probability=0.0, offset=10.0),
        full_wander=WanderConfig(probability=0.0, offset=5.0),
        food=FoodConfig(spawn_probability=0.0)
    )


def goose(**overrides) -> Creature:
    attributes = dict(position=[0.0, 0.5, 0.0], vision=50.0, speed=50.0,
                      intelligence=50.0, hunger=60.0, state=CreatureState.FULL)
    attributes.update(overrides)
    return Creature(**attributes)


def populated_sim(seed: int = 7, creatures: int = 15) -> MeadowSimulation:
    sim = MeadowSimulation(seed=seed)
    sim.seed_food()
    for _ in range(creatures):
        sim.spawn_creature()
    return sim


def test_paused_tick_changes_nothing():
    sim = populated_sim(creatures=5)
    for _ in range(10):
        sim.tick()

    sim.set_paused(True)
    before = sim.get_snapshot()
    report = sim.tick()
    after = sim.get_snapshot()

    assert report.ran is False
    assert after['sim_time'] == before['sim_time']
    assert after['tick_count'] == before['tick_count']
    assert after['creatures'] == before['creatures']
    assert after['food'] == before['food']

    sim.toggle_pause()
    assert sim.tick().ran is True
    assert sim.sim_time == before['sim_time'] + 1.0

    print("[OK] Pause freezes state\n")


def test_speed_scales_delta():
    store = EntityStore()
    cid = store.add_creature(goose(hunger=60.0))
    store.set_speed(2.5)

    report = step(store, quiet_config(), make_rng(1, "speed"))

    assert report.delta == 2.5
    assert store.sim_time == 2.5
    assert store.get_creature(cid).hunger == pytest.approx(60.0 - 0.025)


def test_speed_zero_freezes_clock():
    store = EntityStore()
    cid = store.add_creature(goose(hunger=60.0))
    store.set_speed(0.0)

    report = step(store, quiet_config(), make_rng(1, "speed"))

    assert report.ran is True
    assert store.sim_time == 0.0
    assert store.get_creature(cid).hunger == 60.0


def test_one_food_one_eater():
    """Two hungry geese see the same tulip: the lowest id eats, the other loses"""
    store = EntityStore()
    a = store.add_creature(goose(hunger=20.0, state=CreatureState.HUNGRY, position=[0.0, 0.5, 0.0]))
    b = store.add_creature(goose(hunger=20.0, state=CreatureState.HUNGRY, position=[0.5, 0.5, 0.0]))
    f = store.create_food(position=[0.2, -2.8, 0.0])

    report = step(store, quiet_config(), make_rng(3, "contest"))

    assert report.food_eaten == [(a, f)]
    assert report.claims_lost == [b]
    assert store.get_creature(a).state == CreatureState.FULL
    assert store.get_creature(a).hunger == 100.0
    assert store.get_creature(b).state == CreatureState.HUNGRY
    assert store.get_food(f).is_available is False
    assert store.get_food(f).last_eaten == store.sim_time


def test_loser_takes_next_free_item():
    store = EntityStore()
    a = store.add_creature(goose(hunger=20.0, state=CreatureState.HUNGRY))
    b = store.add_creature(goose(hunger=20.0, state=CreatureState.HUNGRY))
    f1 = store.create_food(position=[0.1, -2.8, 0.0])
    f2 = store.create_food(position=[0.2, -2.8, 0.0])

    report = step(store, quiet_config(), make_rng(3, "contest"))

    assert report.food_eaten == [(a, f1), (b, f2)]
    assert report.claims_lost == []


def test_determinism():
    """Two simulations with the same seed produce identical states"""
    sim1 = populated_sim(seed=123, creatures=10)
    sim2 = populated_sim(seed=123, creatures=10)

    for _ in range(500):
        sim1.tick()
        sim2.tick()

    snap1 = sim1.get_snapshot()
    snap2 = sim2.get_snapshot()
    print(f"  Births: {snap1['telemetry']['total_births']}, "
          f"eaten: {snap1['telemetry']['total_food_eaten']}")

    assert snap1['creatures'] == snap2['creatures']
    assert snap1['food'] == snap2['food']
    assert snap1['telemetry'] == snap2['telemetry']

    print("[OK] Same seed gives identical runs\n")


def test_different_seeds_diverge():
    sim1 = populated_sim(seed=1, creatures=10)
    sim2 = populated_sim(seed=2, creatures=10)
    assert sim1.get_snapshot()['creatures'] != sim2.get_snapshot()['creatures']


def test_long_run_invariants():
    """Hunger bounds, wall, dead permanence and food toggles over a long run"""
    sim = populated_sim(seed=42, creatures=15)
    wall = sim.config.wall_boundary
    delay = sim.config.food.respawn_delay

    dead = set()
    availability = {f.food_id: f.is_available for f in sim.food}
    last_eaten = {}

    for _ in range(3000):
        report = sim.tick()
        now = report.sim_time
        eaten = {fid for _, fid in report.food_eaten}

        for c in sim.store.creatures():
            assert 0.0 <= c.hunger <= 100.0, f"Hunger out of range: {c.hunger}"
            assert abs(c.position[0]) <= wall and abs(c.position[2]) <= wall, \
                f"{c.creature_id} escaped: {c.position.tolist()}"
            if c.creature_id in dead:
                assert c.is_dead and c.state == CreatureState.DEAD, "Dead creature revived"
            if c.is_dead:
                dead.add(c.creature_id)

        for f in sim.food:
            was = availability.get(f.food_id)
            if was is True and not f.is_available:
                assert f.food_id in eaten, "Food vanished without being eaten"
                last_eaten[f.food_id] = now
            elif was is False and f.is_available:
                assert f.food_id in report.food_respawned
                assert now - last_eaten.get(f.food_id, f.last_eaten) > delay, "Respawned too early"
            availability[f.food_id] = f.is_available

        assert len(eaten) == len(report.food_eaten), "Food item consumed twice in one tick"

    telemetry = sim.get_telemetry()
    print(f"  After 3000 ticks: living={telemetry['living_count']} dead={telemetry['dead_count']} "
          f"eaten={telemetry['total_food_eaten']} births={telemetry['total_births']}")

    assert telemetry['total_food_eaten'] > 0, "Hungry geese near tulips should eat"

    print("[OK] Long-run invariants hold\n")


def test_snapshot_contents():
    sim = populated_sim(creatures=3)
    sim.store.advance_clock(2999.0)
    sim.tick()

    snapshot = sim.get_snapshot()

    assert snapshot['sim_time'] == 3000.0
    assert snapshot['environment']['time_of_day'] == "night"
    assert snapshot['environment']['light_level'] == 20.0
    assert snapshot['creature_count'] == 3
    assert len(snapshot['food']) >= 30
    assert snapshot['tick_count'] == 1
    assert snapshot['timing']['tick_count'] == 1
    assert snapshot['selected_id'] is None

    sim.set_selected(sim.creatures[0].creature_id)
    assert sim.get_snapshot()['selected_id'] == [0, 0]


def test_spawn_creature_ranges():
    sim = MeadowSimulation(seed=5)
    spawn = sim.config.spawn

    for _ in range(50):
        creature = sim.store.get_creature(sim.spawn_creature())
        assert spawn.vision[0] <= creature.vision <= spawn.vision[1]
        assert spawn.speed[0] <= creature.speed <= spawn.speed[1]
        assert spawn.hunger[0] <= creature.hunger <= spawn.hunger[1]
        assert abs(creature.position[0]) <= 10.0 and abs(creature.position[2]) <= 10.0
        assert creature.state == CreatureState.HUNGRY


def test_classic_profile_loads_and_runs():
    sim = MeadowSimulation(profile="classic", seed=3)
    sim.seed_food()
    for _ in range(10):
        sim.spawn_creature()

    for _ in range(500):
        report = sim.tick()
        assert report.pairs_formed == []
        assert report.food_spawned == []

    assert sim.config.hunger.decay_rate == 0.0125
    assert len(sim.food) == 30


def test_tick_stats_and_telemetry():
    sim = populated_sim(creatures=4)
    for _ in range(5):
        sim.tick()

    stats = sim.get_tick_stats()
    assert stats['tick_count'] == 5
    assert stats['avg_tick_time_ms'] >= 0.0

    telemetry = sim.get_telemetry()
    assert telemetry['living_count'] == 4
    assert telemetry['food_total'] == len(sim.food)
    assert 0.0 <= telemetry['min_hunger'] <= telemetry['mean_hunger'] <= 100.0

    sim.print_tick_summary()


def test_debug_invariants_env(monkeypatch):
    monkeypatch.setenv('SIM_DEBUG_INVARIANTS', '1')
    sim = populated_sim(creatures=6)
    for _ in range(200):
        sim.tick()


def test_ckdtree_and_linear_runs_match():
    sim1 = MeadowSimulation(seed=77, use_ckdtree=True)
    sim2 = MeadowSimulation(seed=77, use_ckdtree=False)
    for sim in (sim1, sim2):
        sim.seed_food()
        for _ in range(12):
            sim.spawn_creature()
        for _ in range(400):
            sim.tick()

    assert len(sim1.creatures) == len(sim2.creatures)
    for c1, c2 in zip(sim1.creatures, sim2.creatures):
        assert np.array_equal(c1.position, c2.position)
        assert c1.state == c2.state
