"""
Test food lifecycle.

Verifies:
- Seeding is idempotent
- Respawn only after the delay has strictly elapsed
- Spontaneous spawns land inside the inset arena
"""

import sys
from pathlib import Path

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from meadow.data_types import FoodConfig, FoodSeed, SimulationConfig
from meadow.entity import Food
from meadow.food import consume, maybe_spawn_food, respawn_due, respawn_food, seed_food
from meadow.loader import load_food_seed
from meadow.rng import make_rng
from meadow.store import EntityStore

DATA_ROOT = Path(__file__).parent.parent / "data"


def test_seed_food_is_idempotent():
    """Second seed call with food present inserts nothing"""
    store = EntityStore()
    food_seed = load_food_seed(DATA_ROOT / "seeds" / "tulips.yaml")

    first = seed_food(store, food_seed)
    second = seed_food(store, food_seed)

    print(f"  First call: {len(first)} items, second call: {len(second)} items")

    assert len(first) == 30
    assert second == []
    assert len(store.food()) == 30, "No duplicates after repeated seeding"
    assert all(f.is_available for f in store.food())

    print("[OK] Seeding is idempotent\n")


def test_seed_skipped_when_any_food_exists():
    store = EntityStore()
    store.create_food(position=[20.0, -2.8, 20.0])
    food_seed = FoodSeed(seed_id="t", kind="tulip", positions=[(0.0, -2.8, 0.0)])

    assert seed_food(store, food_seed) == []
    assert len(store.food()) == 1


def test_respawn_requires_strictly_elapsed_delay():
    food = Food(position=[0.0, -2.8, 0.0], respawn_delay=1500.0)
    consume(food, 100.0)

    assert food.is_available is False
    assert food.last_eaten == 100.0
    assert not respawn_due(food, 1000.0)
    assert not respawn_due(food, 1600.0), "Exactly the delay is not enough"
    assert respawn_due(food, 1600.5)


def test_available_food_never_respawns():
    food = Food(position=[0.0, -2.8, 0.0], last_eaten=0.0)
    assert not respawn_due(food, 1e9)


def test_respawn_food_updates_store():
    store = EntityStore()
    a = store.create_food(position=[0.0, -2.8, 0.0], is_available=False, last_eaten=0.0)
    b = store.create_food(position=[1.0, -2.8, 0.0], is_available=False, last_eaten=1000.0)

    respawned = respawn_food(store, 1501.0)

    assert respawned == [a]
    assert store.get_food(a).is_available is True
    assert store.get_food(b).is_available is False


def test_spontaneous_spawn_within_inset():
    config = SimulationConfig(food=FoodConfig(spawn_probability=1.0, spawn_margin=5.0))
    rng = make_rng(7, "food-test")
    limit = config.wall_boundary - config.food.spawn_margin

    for _ in range(500):
        food = maybe_spawn_food(rng, config)
        assert food is not None, "Probability 1.0 should always spawn"
        assert abs(food.position[0]) <= limit and abs(food.position[2]) <= limit, \
            f"Spawn outside inset: {food.position.tolist()}"
        assert food.is_available
        assert food.nutrition_value == config.food.nutrition_value
        assert food.respawn_delay == config.food.respawn_delay


def test_spawn_probability_zero_never_spawns():
    config = SimulationConfig(food=FoodConfig(spawn_probability=0.0))
    rng = make_rng(7, "food-test")
    assert all(maybe_spawn_food(rng, config) is None for _ in range(1000))


def test_spawn_rate_matches_probability():
    config = SimulationConfig(food=FoodConfig(spawn_probability=0.02))
    rng = make_rng(11, "food-rate")

    spawned = sum(1 for _ in range(20000) if maybe_spawn_food(rng, config) is not None)
    rate = spawned / 20000.0
    print(f"  Observed spawn rate: {rate:.4f}")

    assert np.isclose(rate, 0.02, atol=0.006), f"Spawn rate {rate} far from 0.02"
