"""
Entity store: authoritative simulation state.

Owns the creature and food arenas, the environment record, the simulated
clock and the view-facing controls (pause, speed, selection). The store
is an explicit object owned by the caller; the tick step receives it by
reference. Every mutation is synchronous and total: unknown ids are
silently ignored, and an update carrying an invalid value is rejected
whole with a [WARN] line, leaving the record untouched.
"""

from dataclasses import fields, replace
from typing import List, Optional

from .arena import EntityArena, EntityId
from .entity import Creature, Food
from .environment import Environment


_CREATURE_FIELDS = {f.name for f in fields(Creature)} - {'creature_id'}
_FOOD_FIELDS = {f.name for f in fields(Food)} - {'food_id'}
_ENVIRONMENT_FIELDS = {f.name for f in fields(Environment)}


def _known_updates(updates: dict, allowed: set, kind: str) -> dict:
    accepted = {}
    for name, value in updates.items():
        if name not in allowed:
            print(f"[WARN] Ignoring unknown {kind} field '{name}'")
            continue
        accepted[name] = value
    return accepted


class EntityStore:
    """
    Simulation state container with a CRUD-style mutation API.

    Attributes:
        environment: Current Environment record
        sim_time: Monotonic simulated-time counter
        paused: When True the tick step mutates nothing
        speed: Multiplier on the per-tick simulated-time delta
        selected_id: Entity picked by the view layer (or None)
    """

    def __init__(self, environment: Optional[Environment] = None):
        self._creatures: EntityArena[Creature] = EntityArena()
        self._food: EntityArena[Food] = EntityArena()
        self.environment: Environment = environment if environment is not None else Environment()
        self.sim_time: float = 0.0
        self.paused: bool = False
        self.speed: float = 1.0
        self.selected_id: Optional[EntityId] = None

    # ------------------------------------------------------------------
    # Creatures
    # ------------------------------------------------------------------

    def add_creature(self, creature: Creature) -> EntityId:
        """Insert a creature record and stamp it with its new id"""
        creature_id = self._creatures.insert(creature)
        creature.creature_id = creature_id
        return creature_id

    def create_creature(self, **attributes) -> EntityId:
        """Build a Creature from attributes and insert it"""
        return self.add_creature(Creature(**attributes))

    def remove_creature(self, creature_id: EntityId):
        self._creatures.remove(creature_id)

    def update_creature(self, creature_id: EntityId, **updates):
        """Merge updates into the creature. No-op if creature_id is unknown."""
        creature = self._creatures.get(creature_id)
        if creature is None:
            return
        accepted = _known_updates(updates, _CREATURE_FIELDS, 'creature')
        try:
            updated = creature.copy(**accepted)
        except (TypeError, ValueError) as e:
            print(f"[WARN] Rejected creature update for {creature_id}: {e}")
            return
        self._creatures.replace(creature_id, updated)

    def replace_creature(self, creature: Creature):
        """Commit a full record computed elsewhere (keyed by creature.creature_id)"""
        if creature.creature_id is not None:
            self._creatures.replace(creature.creature_id, creature)

    def get_creature(self, creature_id: EntityId) -> Optional[Creature]:
        return self._creatures.get(creature_id)

    def creatures(self) -> List[Creature]:
        """All creature records (dead included), ascending id"""
        return self._creatures.values()

    def living_creatures(self) -> List[Creature]:
        """Creatures the view layer should display"""
        return [c for c in self._creatures.values() if not c.is_dead]

    # ------------------------------------------------------------------
    # Food
    # ------------------------------------------------------------------

    def add_food(self, food: Food) -> EntityId:
        food_id = self._food.insert(food)
        food.food_id = food_id
        return food_id

    def create_food(self, **attributes) -> EntityId:
        return self.add_food(Food(**attributes))

    def remove_food(self, food_id: EntityId):
        self._food.remove(food_id)

    def update_food(self, food_id: EntityId, **updates):
        """Merge updates into the food item. No-op if food_id is unknown."""
        food = self._food.get(food_id)
        if food is None:
            return
        accepted = _known_updates(updates, _FOOD_FIELDS, 'food')
        try:
            updated = food.copy(**accepted)
        except (TypeError, ValueError) as e:
            print(f"[WARN] Rejected food update for {food_id}: {e}")
            return
        self._food.replace(food_id, updated)

    def get_food(self, food_id: EntityId) -> Optional[Food]:
        return self._food.get(food_id)

    def food(self) -> List[Food]:
        """All food records, ascending id"""
        return self._food.values()

    # ------------------------------------------------------------------
    # Environment, clock and view controls
    # ------------------------------------------------------------------

    def update_environment(self, **updates):
        """Merge updates into the environment record. Invalid values are rejected whole."""
        accepted = _known_updates(updates, _ENVIRONMENT_FIELDS, 'environment')
        try:
            self.environment = replace(self.environment, **accepted)
        except (TypeError, ValueError) as e:
            print(f"[WARN] Rejected environment update: {e}")

    def advance_clock(self, delta: float):
        """Advance simulated time. Negative deltas are ignored (clock is monotonic)."""
        if delta > 0.0:
            self.sim_time += delta

    def set_paused(self, paused: bool):
        self.paused = bool(paused)

    def toggle_pause(self):
        self.paused = not self.paused

    def set_speed(self, speed: float):
        """Set the speed multiplier (clamped at zero)"""
        self.speed = max(0.0, float(speed))

    def set_selected(self, entity_id: Optional[EntityId]):
        self.selected_id = entity_id
