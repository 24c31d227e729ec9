"""
Meadow simulation kernel.

step() advances an EntityStore by one tick using a snapshot-then-commit
discipline: every creature decides against an immutable start-of-tick
view, claims on food and breeding partners are arbitrated lowest id
first, and all results are written back together at the end.

MeadowSimulation wraps a store with its tuning profile, RNG, food seed
list, timing and telemetry, and exposes the action surface a view layer
uses.
"""

import numpy as np
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .arena import EntityId
from .behavior import ClaimKind, decide, update_vitals
from .breeding import enter_breeding, finish_breeding, make_offspring
from .data_types import FoodSeed, SimulationConfig
from .entity import Creature, CreatureState, Food
from .environment import derive_environment
from .food import consume, maybe_spawn_food, respawn_food, seed_food
from .loader import load_all_data, load_food_seed
from .rng import make_rng, random_in_range, random_position_in_square
from .spatial_queries import BoxQueryIndex
from .store import EntityStore
from .constants import (
    DATA_ROOT,
    DEFAULT_FOOD_SEED,
    DEFAULT_PROFILE,
    GROUND_OFFSET,
    HUNGER_MAX,
    LOG_EVENTS,
    SPAWN_HALF_EXTENT,
    TICK_TIME_WINDOW,
)


@dataclass
class TickReport:
    """
    What happened during one step.

    Attributes:
        ran: False when the store was paused (nothing changed)
        sim_time: Simulated time after the step
        delta: Simulated time added by the step
        deaths: Creatures that starved
        births: Offspring ids
        food_eaten: (creature_id, food_id) consumptions
        food_respawned: Items that became available again
        food_spawned: Items created by the spontaneous spawn rule
        pairs_formed: (initiator_id, partner_id) pairs entering breeding
        claims_lost: Creatures whose food claim lost arbitration
    """
    ran: bool
    sim_time: float
    delta: float = 0.0
    deaths: List[EntityId] = field(default_factory=list)
    births: List[EntityId] = field(default_factory=list)
    food_eaten: List[Tuple[EntityId, EntityId]] = field(default_factory=list)
    food_respawned: List[EntityId] = field(default_factory=list)
    food_spawned: List[EntityId] = field(default_factory=list)
    pairs_formed: List[Tuple[EntityId, EntityId]] = field(default_factory=list)
    claims_lost: List[EntityId] = field(default_factory=list)


def step(
    store: EntityStore,
    config: SimulationConfig,
    rng: np.random.Generator,
    food_index: Optional[BoxQueryIndex] = None,
    creature_index: Optional[BoxQueryIndex] = None
) -> TickReport:
    """
    Advance the store by one tick.

    Args:
        store: Simulation state (mutated in place)
        config: Tuning profile
        rng: Simulation generator
        food_index: Optional reusable index (rebuilt every tick)
        creature_index: Optional reusable index (rebuilt every tick)

    Returns:
        TickReport describing the tick
    """
    if store.paused:
        return TickReport(ran=False, sim_time=store.sim_time)

    if food_index is None:
        food_index = BoxQueryIndex()
    if creature_index is None:
        creature_index = BoxQueryIndex()

    delta = config.base_step * store.speed
    store.advance_clock(delta)
    now = store.sim_time
    report = TickReport(ran=True, sim_time=now, delta=delta)

    # ============================================================
    # ENVIRONMENT + FOOD LIFECYCLE
    # ============================================================

    store.environment = derive_environment(store.environment, now)

    report.food_respawned = respawn_food(store, now)
    sprouted = maybe_spawn_food(rng, config)
    if sprouted is not None:
        report.food_spawned.append(store.add_food(sprouted))

    # Start-of-tick food view (copies, so commits below cannot leak in)
    available_food: Dict[EntityId, Food] = {
        f.food_id: f.copy() for f in store.food() if f.is_available
    }
    food_index.build(list(available_food.values()))

    # ============================================================
    # PHASE A: VITALS (Read)
    # ============================================================

    intents = [update_vitals(c, now, delta, config) for c in store.living_creatures()]

    # Post-vitals view for partner search; copies stay frozen for the tick
    vitals_view: Dict[EntityId, Creature] = {
        i.creature.creature_id: i.creature.copy() for i in intents if not i.died
    }
    creature_index.build(list(vitals_view.values()))

    # ============================================================
    # PHASE B: DECISIONS (Read)
    # ============================================================

    for intent in intents:
        decide(intent, now, delta, rng, config, food_index, available_food, creature_index)

    # ============================================================
    # PHASE C: ARBITRATION (lowest id first)
    # ============================================================

    by_id = {i.creature.creature_id: i for i in intents}
    claimed_food = set()
    paired = set()
    offspring: List[Creature] = []

    for intent in intents:
        creature = intent.creature
        cid = creature.creature_id

        if intent.died:
            report.deaths.append(cid)
            continue

        if intent.claim_kind is not None:
            choice = next((f for f in intent.food_candidates if f not in claimed_food), None)
            if choice is None:
                report.claims_lost.append(cid)
                if intent.claim_kind == ClaimKind.FINISH_EATING:
                    creature.state = CreatureState.HUNGRY
                    creature.target_food_id = None
            else:
                claimed_food.add(choice)
                report.food_eaten.append((cid, choice))
                creature.hunger = HUNGER_MAX
                creature.state = CreatureState.FULL
                creature.last_state_change = now
                creature.target_food_id = None

        if intent.partner_candidates and cid not in paired:
            partner_id = next((p for p in intent.partner_candidates if p not in paired), None)
            if partner_id is not None:
                paired.update((cid, partner_id))
                enter_breeding(creature, partner_id, True, now)
                enter_breeding(by_id[partner_id].creature, cid, False, now)
                report.pairs_formed.append((cid, partner_id))

        if intent.finish_breeding:
            partner = vitals_view.get(creature.breeding_partner_id)
            still_paired = (partner is not None
                            and partner.state == CreatureState.BREEDING
                            and partner.breeding_partner_id == cid)
            if creature.breeding_initiator and still_paired:
                offspring.append(make_offspring(creature, rng, config, now))
            finish_breeding(creature, now)

    # ============================================================
    # PHASE D: COMMIT (Write)
    # ============================================================

    for intent in intents:
        store.replace_creature(intent.creature)

    for _, food_id in report.food_eaten:
        food = store.get_food(food_id)
        if food is not None:
            consume(food, now)

    for child in offspring:
        report.births.append(store.add_creature(child))

    return report


class MeadowSimulation:
    """
    Main simulation class for the meadow ecosystem.

    Owns the entity store, tuning profile, RNG and telemetry, and exposes
    the read/action surface consumed by a view layer.
    """

    def __init__(
        self,
        data_root: Path = DATA_ROOT,
        profile: str = DEFAULT_PROFILE,
        food_seed: str = DEFAULT_FOOD_SEED,
        config: Optional[SimulationConfig] = None,
        seed: Optional[int] = None,
        schema_dir: Optional[Path] = None,
        log_events: Optional[bool] = None,
        use_ckdtree: Optional[bool] = None
    ):
        """
        Initialize simulation from a data pack.

        Args:
            data_root: Path to data directory
            profile: Tuning profile id (ignored when config is given)
            food_seed: Food seed list id
            config: Optional prebuilt SimulationConfig (skips profile loading)
            seed: Optional RNG seed (default: profile seed, then 0)
            schema_dir: Optional path to JSON schemas
            log_events: Override LOG_EVENTS constant
            use_ckdtree: Override USE_CKDTREE constant (for testing)
        """
        data_root = Path(data_root)

        if config is None:
            print("Loading data pack...")
            data = load_all_data(data_root, profile, food_seed, schema_dir)
            config = data['config']
            seed_list = data['food_seed']
        else:
            seed_dir = schema_dir if schema_dir is not None else data_root / "schemas"
            seed_list = load_food_seed(data_root / "seeds" / f"{food_seed}.yaml", seed_dir)

        self.config: SimulationConfig = config
        self.food_seed: FoodSeed = seed_list
        self.seed: int = seed if seed is not None else (config.seed if config.seed is not None else 0)
        self.rng: np.random.Generator = make_rng(self.seed, "meadow")
        self.log_events: bool = LOG_EVENTS if log_events is None else log_events

        # Simulation state
        self.store = EntityStore()
        self.tick_count: int = 0
        self.last_report: Optional[TickReport] = None

        # Spatial indexing (rebuilt every tick)
        self._food_index = BoxQueryIndex(use_ckdtree=use_ckdtree)
        self._creature_index = BoxQueryIndex(use_ckdtree=use_ckdtree)

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW

        # Ecosystem telemetry
        self._telemetry: Dict = {
            'total_deaths': 0,
            'total_births': 0,
            'total_food_eaten': 0,
            'total_food_spawned': 0,
            'deaths_this_tick': 0,
            'births_this_tick': 0,
            'food_eaten_this_tick': 0,
        }

        print(f"[OK] Simulation initialized: profile={config.profile_id}, "
              f"seed={self.seed}, base_step={config.base_step}")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> TickReport:
        """Run one step (no-op while paused)"""
        start_time = time.perf_counter()

        report = step(self.store, self.config, self.rng, self._food_index, self._creature_index)
        self.last_report = report
        if not report.ran:
            return report

        self.tick_count += 1
        self._update_telemetry(report)
        if self.log_events:
            self._log_events(report)

        self._record_tick_time(time.perf_counter() - start_time)

        # Debug invariant check (zero cost when env var not set)
        if os.getenv('SIM_DEBUG_INVARIANTS') == '1':
            self._check_invariants()

        return report

    def _update_telemetry(self, report: TickReport):
        self._telemetry['deaths_this_tick'] = len(report.deaths)
        self._telemetry['births_this_tick'] = len(report.births)
        self._telemetry['food_eaten_this_tick'] = len(report.food_eaten)
        self._telemetry['total_deaths'] += len(report.deaths)
        self._telemetry['total_births'] += len(report.births)
        self._telemetry['total_food_eaten'] += len(report.food_eaten)
        self._telemetry['total_food_spawned'] += len(report.food_spawned)

    def _log_events(self, report: TickReport):
        t = report.sim_time
        for cid in report.deaths:
            print(f"[EVENT] t={t:.0f} goose {cid} starved")
        for cid, fid in report.food_eaten:
            print(f"[EVENT] t={t:.0f} goose {cid} ate tulip {fid}")
        for initiator, partner in report.pairs_formed:
            print(f"[EVENT] t={t:.0f} geese {initiator} and {partner} started breeding")
        for cid in report.births:
            print(f"[EVENT] t={t:.0f} gosling {cid} hatched")
        for fid in report.food_respawned:
            print(f"[EVENT] t={t:.0f} tulip {fid} respawned")
        for fid in report.food_spawned:
            print(f"[EVENT] t={t:.0f} tulip {fid} sprouted")

    def _check_invariants(self):
        wall = self.config.wall_boundary
        for c in self.store.creatures():
            assert 0.0 <= c.hunger <= HUNGER_MAX, f"hunger out of range for {c.creature_id}: {c.hunger}"
            assert abs(c.position[0]) <= wall and abs(c.position[2]) <= wall, \
                f"{c.creature_id} outside wall: {c.position.tolist()}"
            assert c.is_dead == (c.state == CreatureState.DEAD), \
                f"{c.creature_id} is_dead={c.is_dead} but state={c.state.value}"

    # ------------------------------------------------------------------
    # Action surface
    # ------------------------------------------------------------------

    def spawn_creature(self) -> EntityId:
        """Add one goose with randomized starter attributes (debug/seed action)"""
        spawn = self.config.spawn
        position = random_position_in_square(self.rng, SPAWN_HALF_EXTENT, GROUND_OFFSET)
        creature_id = self.store.create_creature(
            position=position,
            vision=random_in_range(self.rng, spawn.vision),
            speed=random_in_range(self.rng, spawn.speed),
            intelligence=random_in_range(self.rng, spawn.intelligence),
            hunger=random_in_range(self.rng, spawn.hunger),
            state=CreatureState.HUNGRY,
            last_state_change=self.store.sim_time,
            breeding_cooldown=self.config.breeding.cooldown
        )
        if self.log_events:
            creature = self.store.get_creature(creature_id)
            print(f"[EVENT] spawned goose {creature_id} with hunger {creature.hunger:.1f}")
        return creature_id

    def seed_food(self) -> List[EntityId]:
        """Populate the food seed list (idempotent)"""
        inserted = seed_food(self.store, self.food_seed)
        if inserted and self.log_events:
            print(f"[EVENT] initialized {len(inserted)} food items")
        return inserted

    def add_creature(self, creature: Creature) -> EntityId:
        return self.store.add_creature(creature)

    def create_creature(self, **attributes) -> EntityId:
        return self.store.create_creature(**attributes)

    def remove_creature(self, creature_id: EntityId):
        self.store.remove_creature(creature_id)

    def update_creature(self, creature_id: EntityId, **updates):
        self.store.update_creature(creature_id, **updates)

    def add_food(self, food: Food) -> EntityId:
        return self.store.add_food(food)

    def create_food(self, **attributes) -> EntityId:
        return self.store.create_food(**attributes)

    def remove_food(self, food_id: EntityId):
        self.store.remove_food(food_id)

    def update_food(self, food_id: EntityId, **updates):
        self.store.update_food(food_id, **updates)

    def update_environment(self, **updates):
        self.store.update_environment(**updates)

    def toggle_pause(self):
        self.store.toggle_pause()

    def set_paused(self, paused: bool):
        self.store.set_paused(paused)

    def set_speed(self, speed: float):
        self.store.set_speed(speed)

    def set_selected(self, entity_id: Optional[EntityId]):
        self.store.set_selected(entity_id)

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def creatures(self) -> List[Creature]:
        """Living creatures (what the view layer displays)"""
        return self.store.living_creatures()

    @property
    def food(self) -> List[Food]:
        return self.store.food()

    @property
    def environment(self):
        return self.store.environment

    @property
    def sim_time(self) -> float:
        return self.store.sim_time

    @property
    def paused(self) -> bool:
        return self.store.paused

    @property
    def speed(self) -> float:
        return self.store.speed

    @property
    def selected_id(self) -> Optional[EntityId]:
        return self.store.selected_id

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_telemetry(self) -> dict:
        living = self.store.living_creatures()
        hungers = [c.hunger for c in living]
        telemetry = dict(self._telemetry)
        telemetry.update({
            'living_count': len(living),
            'dead_count': len(self.store.creatures()) - len(living),
            'food_available': sum(1 for f in self.store.food() if f.is_available),
            'food_total': len(self.store.food()),
            'mean_hunger': float(np.mean(hungers)) if hungers else 0.0,
            'min_hunger': float(np.min(hungers)) if hungers else 0.0,
        })
        return telemetry

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with tick_count, sim_time, controls, environment,
            living creatures, food, telemetry and timing
        """
        living = self.store.living_creatures()
        selected = self.store.selected_id
        return {
            'tick_count': self.tick_count,
            'sim_time': self.store.sim_time,
            'paused': self.store.paused,
            'speed': self.store.speed,
            'selected_id': None if selected is None else [selected.index, selected.generation],
            'environment': self.store.environment.to_dict(),
            'creature_count': len(living),
            'creatures': [c.to_dict() for c in living],
            'food': [f.to_dict() for f in self.store.food()],
            'telemetry': self.get_telemetry(),
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        telemetry = self.get_telemetry()
        print(f"Tick {stats['tick_count']:6d} | "
              f"t={self.store.sim_time:8.0f} {self.store.environment.time_of_day.value:9s} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Geese: {telemetry['living_count']:3d} "
              f"(dead {telemetry['dead_count']}, born {telemetry['total_births']}) | "
              f"Tulips: {telemetry['food_available']}/{telemetry['food_total']} | "
              f"Hunger mean={telemetry['mean_hunger']:5.1f}")
