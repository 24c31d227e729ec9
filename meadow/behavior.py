"""
Creature behavior state machine.

Per tick, each living creature goes through:
1. Vitals: idle animation phase, hunger decay, starvation, base
   hungry/full transition (update_vitals)
2. Decision: state dispatch producing an intent, read-only against the
   start-of-tick views (decide)
3. Movement integration toward the current target (integrate_movement)

Nothing here writes to the store. Intents are arbitrated and committed by
simulation.step so that two creatures never consume the same food item or
pick the same breeding partner in one tick.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from .arena import EntityId
from .data_types import SimulationConfig, WanderConfig
from .entity import Creature, CreatureState, Food
from .rng import roll, random_offset_xz
from .spatial import clamp_to_wall, direction_xz, inside_wall, vision_range
from .breeding import find_partner_candidates, is_breeding_eligible, breeding_complete
from .constants import (
    ARRIVAL_DISTANCE,
    EATING_DURATION,
    GROUND_OFFSET,
    HUNGER_EPSILON,
    HUNGER_FULL_THRESHOLD,
    HUNGER_MAX,
    HUNGER_MIN,
    IDLE_ANIMATION_RATE,
    VISION_RANGE_MAX,
)

if TYPE_CHECKING:
    from .spatial_queries import BoxQueryIndex


class ClaimKind:
    """What a food claim is for"""
    FORAGE = "forage"  # Hungry creature eating food it can see
    FINISH_EATING = "finish_eating"  # Eating timer done on the targeted item


@dataclass
class CreatureIntent:
    """
    Proposed outcome of one creature's tick, before arbitration.

    Attributes:
        creature: Next record if every claim succeeds (movement applied)
        claim_kind: ClaimKind value when the creature wants a food item
        food_candidates: Food ids it would accept, ascending
        partner_candidates: Breeding partner ids it would accept, ascending
        finish_breeding: Breeding timer elapsed this tick
        died: Starved this tick (no other field applies)
    """
    creature: Creature
    claim_kind: Optional[str] = None
    food_candidates: List[EntityId] = field(default_factory=list)
    partner_candidates: List[EntityId] = field(default_factory=list)
    finish_breeding: bool = False
    died: bool = False


# ============================================================================
# Phase A: Vitals
# ============================================================================

def decay_hunger(hunger: float, delta: float, rate: float) -> float:
    """
    Hunger after delta time units of decay, clamped to [0, 100].

    Values below HUNGER_EPSILON snap to zero so accumulated float error
    cannot postpone starvation by a tick.
    """
    new_hunger = max(HUNGER_MIN, hunger - delta * rate)
    if new_hunger < HUNGER_EPSILON:
        new_hunger = HUNGER_MIN
    return min(HUNGER_MAX, new_hunger)


def update_vitals(creature: Creature, now: float, delta: float, config: SimulationConfig) -> CreatureIntent:
    """
    Apply idle phase, hunger decay, starvation and base transition.

    Args:
        creature: Start-of-tick record (not modified)
        now: Simulated time of this tick
        delta: Simulated time elapsed this tick
        config: Tuning profile

    Returns:
        Intent holding an updated copy; died=True when hunger hit zero
    """
    new_hunger = decay_hunger(creature.hunger, delta, config.hunger.decay_rate)

    if new_hunger == HUNGER_MIN and creature.hunger > HUNGER_MIN:
        dead = creature.copy(
            hunger=HUNGER_MIN,
            is_dead=True,
            state=CreatureState.DEAD,
            last_state_change=now,
            target_position=None,
            target_food_id=None,
            is_moving=False,
            breeding_partner_id=None,
            breeding_initiator=False
        )
        return CreatureIntent(creature=dead, died=True)

    updated = creature.copy(
        idle_animation=(creature.idle_animation + delta * IDLE_ANIMATION_RATE) % 1.0,
        hunger=new_hunger
    )

    # Base transition between the two hunger-driven states only.
    # The pre-decay hunger decides, matching the start-of-tick view.
    if updated.state == CreatureState.HUNGRY and creature.hunger > HUNGER_FULL_THRESHOLD:
        updated.state = CreatureState.FULL
        updated.last_state_change = now
    elif updated.state == CreatureState.FULL and creature.hunger <= HUNGER_FULL_THRESHOLD:
        updated.state = CreatureState.HUNGRY
        updated.last_state_change = now

    return CreatureIntent(creature=updated)


# ============================================================================
# Phase B: Decision
# ============================================================================

def visible_food(creature: Creature, food_index: 'BoxQueryIndex[Food]') -> List[EntityId]:
    """Ids of available food inside the creature's vision box, ascending"""
    half_extent = vision_range(creature.vision, VISION_RANGE_MAX)
    return [f.food_id for f in food_index.query_box(creature.position, half_extent)]


def wander_target(
    creature: Creature,
    rng: np.random.Generator,
    wander: WanderConfig,
    wall: float
) -> Optional[np.ndarray]:
    """
    Roll the wander rule once.

    Returns:
        New wall-clamped target, or None if the roll failed
    """
    if not roll(rng, wander.probability):
        return None

    dx, dz = random_offset_xz(rng, wander.offset)
    return np.array([
        clamp_to_wall(creature.position[0] + dx, wall),
        GROUND_OFFSET,
        clamp_to_wall(creature.position[2] + dz, wall)
    ], dtype=np.float64)


def _set_wander(creature: Creature, target: Optional[np.ndarray]):
    if target is not None:
        creature.target_position = target
        creature.is_moving = True


def decide(
    intent: CreatureIntent,
    now: float,
    delta: float,
    rng: np.random.Generator,
    config: SimulationConfig,
    food_index: 'BoxQueryIndex[Food]',
    available_food: dict,
    creature_index: 'BoxQueryIndex[Creature]'
) -> CreatureIntent:
    """
    Dispatch on the post-vitals state and fill in the intent.

    Args:
        intent: Phase A result (creature copy is updated in place)
        now: Simulated time of this tick
        delta: Simulated time elapsed this tick
        rng: Simulation generator
        config: Tuning profile
        food_index: Box index over start-of-tick available food
        available_food: food_id -> start-of-tick Food, available items only
        creature_index: Box index over post-vitals living creatures

    Returns:
        The same intent, completed
    """
    if intent.died:
        return intent

    creature = intent.creature
    state = creature.state

    if state == CreatureState.HUNGRY:
        candidates = visible_food(creature, food_index)
        if candidates:
            intent.claim_kind = ClaimKind.FORAGE
            intent.food_candidates = candidates
        else:
            _set_wander(creature, wander_target(creature, rng, config.hungry_wander, config.wall_boundary))

    elif state == CreatureState.EATING:
        target_id = creature.target_food_id
        if target_id is not None:
            if target_id not in available_food:
                # Eaten by someone else (or removed) before we finished
                creature.state = CreatureState.HUNGRY
                creature.target_food_id = None
            elif now - creature.last_state_change >= EATING_DURATION:
                intent.claim_kind = ClaimKind.FINISH_EATING
                intent.food_candidates = [target_id]

    elif state == CreatureState.FULL:
        partners = []
        if config.breeding.enabled and is_breeding_eligible(creature, now):
            partners = find_partner_candidates(creature, creature_index, now)
        if partners:
            intent.partner_candidates = partners
        else:
            _set_wander(creature, wander_target(creature, rng, config.full_wander, config.wall_boundary))

    elif state == CreatureState.BREEDING:
        if breeding_complete(creature, now, config.breeding.duration):
            intent.finish_breeding = True

    integrate_movement(creature, now, delta, config.wall_boundary)
    return intent


# ============================================================================
# Movement
# ============================================================================

def integrate_movement(creature: Creature, now: float, delta: float, wall: float):
    """
    Move the creature toward its target (in place).

    Arrival (remaining distance < ARRIVAL_DISTANCE) clears the target; if a
    food target was set the creature starts eating. Otherwise the creature
    steps speed / 100 * delta units along the straight line, never past the
    target. Each axis is tested against the wall independently; a proposed
    coordinate outside the wall is not applied and cancels the target.
    """
    target = creature.target_position
    if target is None:
        return

    direction, distance = direction_xz(creature.position, target)

    if distance < ARRIVAL_DISTANCE:
        creature.target_position = None
        creature.is_moving = False
        if creature.target_food_id is not None:
            creature.state = CreatureState.EATING
            creature.last_state_change = now
        return

    step = min(creature.speed / 100.0 * delta, distance)
    proposed_x = creature.position[0] + direction[0] * step
    proposed_z = creature.position[2] + direction[2] * step

    if inside_wall(proposed_x, wall):
        creature.position[0] = proposed_x
    else:
        creature.target_position = None
        creature.is_moving = False

    if inside_wall(proposed_z, wall):
        creature.position[2] = proposed_z
    else:
        creature.target_position = None
        creature.is_moving = False
