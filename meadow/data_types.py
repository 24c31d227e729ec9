"""
Data types mirroring YAML schema structures.

These dataclasses are populated by loader.py from the tuning profile and
food seed YAML files. Every field has a default equal to the "extended"
profile so a SimulationConfig can be built in code without any files.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constants import BASE_STEP, BREEDING_DURATION, DEFAULT_BREEDING_COOLDOWN, WALL_BOUNDARY


# ============================================================================
# Tuning Profile
# ============================================================================

@dataclass
class AttributeRange:
    """Inclusive clamp range for an inherited attribute"""
    min: float = 0.0
    max: float = 100.0

    def clamp(self, value: float) -> float:
        return min(self.max, max(self.min, value))


@dataclass
class HungerConfig:
    """Hunger decay tuning"""
    decay_rate: float = 0.01  # Hunger lost per simulated time unit


@dataclass
class WanderConfig:
    """Random wander rule: roll probability per tick, max offset per axis"""
    probability: float
    offset: float  # Full width of the uniform offset window


@dataclass
class FoodConfig:
    """Food lifecycle tuning"""
    spawn_probability: float = 0.02  # Spontaneous spawn chance per tick
    spawn_margin: float = 5.0  # Keep-away distance from the walls
    nutrition_value: float = 25.0
    respawn_delay: float = 1500.0


@dataclass
class BreedingConfig:
    """Breeding manager tuning"""
    enabled: bool = True
    cooldown: float = DEFAULT_BREEDING_COOLDOWN
    duration: float = BREEDING_DURATION
    mutation: float = 10.0  # Max absolute perturbation per attribute
    offspring_jitter: float = 1.0  # Max offset from initiating parent per axis
    offspring_scale: float = 0.6  # Juvenile scale factor
    offspring_hunger: float = 40.0
    vision: AttributeRange = field(default_factory=AttributeRange)
    speed: AttributeRange = field(default_factory=AttributeRange)
    intelligence: AttributeRange = field(default_factory=AttributeRange)


@dataclass
class CreatureSpawnConfig:
    """Starter attribute ranges for the debug spawn action"""
    vision: Tuple[float, float] = (50.0, 80.0)
    speed: Tuple[float, float] = (30.0, 70.0)
    intelligence: Tuple[float, float] = (20.0, 80.0)
    hunger: Tuple[float, float] = (30.0, 90.0)


def _hungry_wander() -> WanderConfig:
    return WanderConfig(probability=0.08, offset=10.0)


def _full_wander() -> WanderConfig:
    return WanderConfig(probability=0.02, offset=5.0)


@dataclass
class SimulationConfig:
    """Complete tuning profile"""
    profile_id: str = "extended"
    name: str = "Extended"
    hunger: HungerConfig = field(default_factory=HungerConfig)
    hungry_wander: WanderConfig = field(default_factory=_hungry_wander)
    full_wander: WanderConfig = field(default_factory=_full_wander)
    food: FoodConfig = field(default_factory=FoodConfig)
    breeding: BreedingConfig = field(default_factory=BreedingConfig)
    spawn: CreatureSpawnConfig = field(default_factory=CreatureSpawnConfig)
    base_step: float = BASE_STEP
    wall_boundary: float = WALL_BOUNDARY
    seed: Optional[int] = None
    description: Optional[str] = None


# ============================================================================
# Food Seed
# ============================================================================

@dataclass
class FoodSeed:
    """Fixed list of initial food positions"""
    seed_id: str
    kind: str
    positions: List[Tuple[float, float, float]]
    nutrition_value: float = 25.0
    respawn_delay: float = 1500.0
    description: Optional[str] = None
