"""
Breeding manager.

Two full, cooldown-eligible creatures that see each other pair up, spend
the breeding duration together, then the initiating parent produces one
juvenile offspring with mutated copies of its own attributes. The pairing
is stored on both records so completion never has to re-derive the
partner by proximity.
"""

import numpy as np
from typing import List, TYPE_CHECKING

from .arena import EntityId
from .data_types import SimulationConfig
from .entity import Creature, CreatureState
from .spatial import clamp_to_wall, vision_range
from .constants import GROUND_OFFSET, VISION_RANGE_MAX

if TYPE_CHECKING:
    from .spatial_queries import BoxQueryIndex


def is_breeding_eligible(creature: Creature, now: float) -> bool:
    """Cooldown check: strictly more than breeding_cooldown since the last breeding"""
    return now - creature.last_breeding_time > creature.breeding_cooldown


def find_partner_candidates(
    creature: Creature,
    creature_index: 'BoxQueryIndex[Creature]',
    now: float
) -> List[EntityId]:
    """
    Partners this creature would accept, ascending id.

    A candidate is another living creature in the full state, inside the
    same vision box used for foraging, whose own cooldown has elapsed.

    Args:
        creature: Post-vitals record of the searching creature
        creature_index: Box index over post-vitals living creatures
        now: Simulated time of this tick
    """
    half_extent = vision_range(creature.vision, VISION_RANGE_MAX)
    candidates = []
    for other in creature_index.query_box(creature.position, half_extent):
        if other.creature_id == creature.creature_id:
            continue
        if other.is_dead or other.state != CreatureState.FULL:
            continue
        if not is_breeding_eligible(other, now):
            continue
        candidates.append(other.creature_id)
    return candidates


def enter_breeding(creature: Creature, partner_id: EntityId, initiator: bool, now: float):
    """Switch a creature (in place) into the breeding state with its partner"""
    creature.state = CreatureState.BREEDING
    creature.breeding_partner_id = partner_id
    creature.breeding_initiator = initiator
    creature.target_position = None
    creature.target_food_id = None
    creature.is_moving = False
    creature.last_state_change = now


def breeding_complete(creature: Creature, now: float, duration: float) -> bool:
    return (creature.state == CreatureState.BREEDING
            and now - creature.last_state_change >= duration)


def finish_breeding(creature: Creature, now: float):
    """Return a parent (in place) to full and restart its cooldown"""
    creature.state = CreatureState.FULL
    creature.last_breeding_time = now
    creature.last_state_change = now
    creature.breeding_partner_id = None
    creature.breeding_initiator = False
    creature.target_position = None
    creature.is_moving = False


def make_offspring(
    parent: Creature,
    rng: np.random.Generator,
    config: SimulationConfig,
    now: float
) -> Creature:
    """
    Build one juvenile from the initiating parent.

    Position jitters around the parent (clamped to the wall). Vision,
    speed and intelligence are the parent's values plus a uniform
    perturbation in [-mutation, mutation], clamped to the configured
    per-attribute range.

    Returns:
        New (not yet stored) Creature
    """
    breeding = config.breeding
    wall = config.wall_boundary

    jx, jz = rng.uniform(-breeding.offspring_jitter, breeding.offspring_jitter, size=2)
    dv, ds, di = rng.uniform(-breeding.mutation, breeding.mutation, size=3)

    position = np.array([
        clamp_to_wall(parent.position[0] + jx, wall),
        GROUND_OFFSET,
        clamp_to_wall(parent.position[2] + jz, wall)
    ], dtype=np.float64)

    juvenile = breeding.offspring_scale

    return Creature(
        position=position,
        rotation=parent.rotation.copy(),
        scale=np.array([juvenile, juvenile, juvenile], dtype=np.float64),
        vision=breeding.vision.clamp(parent.vision + float(dv)),
        speed=breeding.speed.clamp(parent.speed + float(ds)),
        intelligence=breeding.intelligence.clamp(parent.intelligence + float(di)),
        hunger=breeding.offspring_hunger,
        state=CreatureState.HUNGRY,
        last_state_change=now,
        last_breeding_time=0.0,
        breeding_cooldown=breeding.cooldown
    )
