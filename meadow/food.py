"""
Food lifecycle: seeding, respawn and spontaneous spawning.

Food items never move and are never removed by the rules. Consumption
toggles an item unavailable; it returns once its respawn delay has
elapsed. The extended profile also sprouts new items at random spots.
"""

import numpy as np
from typing import List, Optional

from .arena import EntityId
from .data_types import FoodSeed, SimulationConfig
from .entity import Food
from .rng import roll, random_position_in_square
from .store import EntityStore
from .constants import FOOD_GROUND_LEVEL


def seed_food(store: EntityStore, food_seed: FoodSeed) -> List[EntityId]:
    """
    Populate the seed positions, only if the store holds no food.

    Idempotent: a second call with food present inserts nothing.

    Returns:
        Ids of inserted items (empty when skipped)
    """
    if len(store.food()) > 0:
        return []

    inserted = []
    for position in food_seed.positions:
        inserted.append(store.create_food(
            position=np.array(position, dtype=np.float64),
            kind=food_seed.kind,
            is_available=True,
            nutrition_value=food_seed.nutrition_value,
            respawn_delay=food_seed.respawn_delay,
            last_eaten=0.0
        ))
    return inserted


def respawn_due(food: Food, now: float) -> bool:
    """True when an unavailable item's respawn delay has strictly elapsed"""
    return (not food.is_available) and (now - food.last_eaten > food.respawn_delay)


def respawn_food(store: EntityStore, now: float) -> List[EntityId]:
    """
    Make every due item available again.

    Returns:
        Ids of respawned items
    """
    respawned = []
    for food in store.food():
        if respawn_due(food, now):
            food.is_available = True
            respawned.append(food.food_id)
    return respawned


def consume(food: Food, now: float):
    """Mark an item eaten at simulated time now"""
    food.is_available = False
    food.last_eaten = now


def maybe_spawn_food(rng: np.random.Generator, config: SimulationConfig, kind: str = "tulip") -> Optional[Food]:
    """
    Roll the spontaneous spawn rule once.

    Places the new item uniformly inside the wall boundary minus the
    keep-away margin, at the food ground level.

    Returns:
        New (not yet stored) Food, or None if the roll failed
    """
    food_config = config.food
    if not roll(rng, food_config.spawn_probability):
        return None

    half_extent = max(0.0, config.wall_boundary - food_config.spawn_margin)
    position = random_position_in_square(rng, half_extent, FOOD_GROUND_LEVEL)

    return Food(
        position=position,
        kind=kind,
        is_available=True,
        nutrition_value=food_config.nutrition_value,
        respawn_delay=food_config.respawn_delay,
        last_eaten=0.0
    )
