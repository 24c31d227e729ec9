"""
Entity runtime representation.

Creatures and food items exist in the simulation store. Each carries the
EntityId assigned by its arena, spatial vectors as float64 arrays, and
the state the tick rules read and write.
"""

import numpy as np
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional

from .arena import EntityId
from .constants import DEFAULT_BREEDING_COOLDOWN, HUNGER_MAX, HUNGER_MIN


class CreatureState(str, Enum):
    """Behavioral state of a creature"""
    HUNGRY = "hungry"
    FULL = "full"
    SEARCHING = "searching"  # Declared for view-layer compatibility, never entered
    EATING = "eating"
    BREEDING = "breeding"
    DEAD = "dead"


def _as_vector(value) -> np.ndarray:
    if not isinstance(value, np.ndarray):
        return np.array(value, dtype=np.float64)
    return value.astype(np.float64, copy=False)


def _id_to_list(entity_id: Optional[EntityId]) -> Optional[list]:
    return None if entity_id is None else [entity_id.index, entity_id.generation]


def _id_from_list(data) -> Optional[EntityId]:
    return None if data is None else EntityId(int(data[0]), int(data[1]))


@dataclass
class Creature:
    """
    Runtime creature (a goose).

    Attributes:
        creature_id: Arena handle (assigned by the store)
        position: [x, y, z]; y stays at the ground offset while walking
        rotation: [x, y, z] Euler angles, carried for the view layer
        scale: [x, y, z]; offspring start juvenile-sized
        vision: 0-100, scales the vision box (fixed at birth)
        speed: 0-100, movement per time unit is speed / 100 (fixed at birth)
        intelligence: 0-100, inherited and stored, read by no rule
        hunger: 0-100 satiety; 0 kills, feeding resets to 100
        health: Carried for the view layer, no rule decrements it
        state: CreatureState
        target_position: Current movement target (None when idle)
        target_food_id: Food being walked to or eaten
        last_state_change: Simulated time of the last state transition
        idle_animation: Cosmetic phase in [0, 1)
        last_breeding_time: Simulated time of the last completed breeding
        breeding_cooldown: Minimum interval between breedings
        breeding_partner_id: Partner recorded when entering breeding
        breeding_initiator: True for the parent that spawns the offspring
    """
    position: np.ndarray
    vision: float
    speed: float
    intelligence: float
    hunger: float
    creature_id: Optional[EntityId] = None
    kind: str = "goose"
    rotation: np.ndarray = None
    scale: np.ndarray = None
    health: float = 100.0
    energy: float = 100.0
    is_dead: bool = False
    state: CreatureState = CreatureState.HUNGRY
    target_position: Optional[np.ndarray] = None
    target_food_id: Optional[EntityId] = None
    last_state_change: float = 0.0
    is_moving: bool = False
    is_idle: bool = True
    idle_animation: float = 0.0
    last_breeding_time: float = 0.0
    breeding_cooldown: float = DEFAULT_BREEDING_COOLDOWN
    breeding_partner_id: Optional[EntityId] = None
    breeding_initiator: bool = False

    def __post_init__(self):
        """Ensure spatial fields are float64 arrays, initialize defaults"""
        self.position = _as_vector(self.position)
        self.rotation = _as_vector([0.0, 0.0, 0.0] if self.rotation is None else self.rotation)
        self.scale = _as_vector([1.0, 1.0, 1.0] if self.scale is None else self.scale)
        if self.target_position is not None:
            self.target_position = _as_vector(self.target_position)
        self.state = CreatureState(self.state)
        self.hunger = min(HUNGER_MAX, max(HUNGER_MIN, float(self.hunger)))

    def copy(self, **changes) -> 'Creature':
        """Independent copy (arrays included) with optional field changes"""
        clone = replace(
            self,
            position=self.position.copy(),
            rotation=self.rotation.copy(),
            scale=self.scale.copy(),
            target_position=None if self.target_position is None else self.target_position.copy()
        )
        for name, value in changes.items():
            setattr(clone, name, value)
        clone.__post_init__()
        return clone

    def to_dict(self) -> dict:
        """
        Serialize creature to JSON-compatible dict.

        Returns:
            Dict with all creature fields
        """
        return {
            'creature_id': _id_to_list(self.creature_id),
            'kind': self.kind,
            'position': self.position.tolist(),
            'rotation': self.rotation.tolist(),
            'scale': self.scale.tolist(),
            'vision': self.vision,
            'speed': self.speed,
            'intelligence': self.intelligence,
            'hunger': self.hunger,
            'health': self.health,
            'energy': self.energy,
            'is_dead': self.is_dead,
            'state': self.state.value,
            'target_position': None if self.target_position is None else self.target_position.tolist(),
            'target_food_id': _id_to_list(self.target_food_id),
            'last_state_change': self.last_state_change,
            'is_moving': self.is_moving,
            'is_idle': self.is_idle,
            'idle_animation': self.idle_animation,
            'last_breeding_time': self.last_breeding_time,
            'breeding_cooldown': self.breeding_cooldown,
            'breeding_partner_id': _id_to_list(self.breeding_partner_id),
            'breeding_initiator': self.breeding_initiator,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Creature':
        """
        Deserialize creature from dict.

        Args:
            data: Dict with creature fields (as produced by to_dict)

        Returns:
            Creature instance
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for key in ('creature_id', 'target_food_id', 'breeding_partner_id'):
            values[key] = _id_from_list(values.get(key))
        return cls(**values)


@dataclass
class Food:
    """
    Runtime food item (a tulip). Position never changes.

    Attributes:
        position: [x, y, z]
        food_id: Arena handle (assigned by the store)
        is_available: False between consumption and respawn
        nutrition_value: Carried for the view layer (eating resets hunger to 100)
        respawn_delay: Simulated time before a consumed item returns
        last_eaten: Simulated time of the last consumption
    """
    position: np.ndarray
    food_id: Optional[EntityId] = None
    kind: str = "tulip"
    is_available: bool = True
    nutrition_value: float = 25.0
    respawn_delay: float = 1500.0
    last_eaten: float = 0.0

    def __post_init__(self):
        self.position = _as_vector(self.position)

    def copy(self, **changes) -> 'Food':
        clone = replace(self, position=self.position.copy())
        for name, value in changes.items():
            setattr(clone, name, value)
        clone.__post_init__()
        return clone

    def to_dict(self) -> dict:
        return {
            'food_id': _id_to_list(self.food_id),
            'kind': self.kind,
            'position': self.position.tolist(),
            'is_available': self.is_available,
            'nutrition_value': self.nutrition_value,
            'respawn_delay': self.respawn_delay,
            'last_eaten': self.last_eaten,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Food':
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values['food_id'] = _id_from_list(values.get('food_id'))
        return cls(**values)
