"""
YAML data loader with schema validation.

Loads tuning profiles and food seed lists from YAML files and validates
them against JSON schemas before parsing into dataclasses.
"""

import yaml
import json
from pathlib import Path
from typing import Dict, Optional
import jsonschema

from .data_types import (
    SimulationConfig, HungerConfig, WanderConfig, FoodConfig,
    BreedingConfig, CreatureSpawnConfig, AttributeRange, FoodSeed
)
from .constants import DATA_ROOT, DEFAULT_PROFILE, DEFAULT_FOOD_SEED


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional (custom data packs may ship without schemas)
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def _parse_range(data: Optional[dict]) -> AttributeRange:
    if data is None:
        return AttributeRange()
    return AttributeRange(min=float(data['min']), max=float(data['max']))


def _parse_pair(data: Optional[list], default: tuple) -> tuple:
    if data is None:
        return default
    return (float(data[0]), float(data[1]))


def parse_profile(data: dict) -> SimulationConfig:
    """Convert a validated profile dict into a SimulationConfig"""
    breeding_data = dict(data.get('breeding', {}))
    ranges = {name: _parse_range(breeding_data.pop(name, None))
              for name in ('vision', 'speed', 'intelligence')}
    breeding = BreedingConfig(**breeding_data, **ranges)

    spawn_defaults = CreatureSpawnConfig()
    spawn_data = data.get('spawn', {})
    spawn = CreatureSpawnConfig(
        vision=_parse_pair(spawn_data.get('vision'), spawn_defaults.vision),
        speed=_parse_pair(spawn_data.get('speed'), spawn_defaults.speed),
        intelligence=_parse_pair(spawn_data.get('intelligence'), spawn_defaults.intelligence),
        hunger=_parse_pair(spawn_data.get('hunger'), spawn_defaults.hunger)
    )

    defaults = SimulationConfig()
    return SimulationConfig(
        profile_id=data['profile_id'],
        name=data['name'],
        hunger=HungerConfig(**data['hunger']),
        hungry_wander=WanderConfig(**data['hungry_wander']),
        full_wander=WanderConfig(**data['full_wander']),
        food=FoodConfig(**data.get('food', {})),
        breeding=breeding,
        spawn=spawn,
        base_step=data.get('base_step', defaults.base_step),
        wall_boundary=data.get('wall_boundary', defaults.wall_boundary),
        seed=data.get('seed'),
        description=data.get('description')
    )


def load_profile(file_path: Path, schema_dir: Optional[Path] = None) -> SimulationConfig:
    """Load tuning profile from YAML"""
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = schema_dir / "profile.schema.json"
        validate_against_schema(data, schema_path, file_path)

    return parse_profile(data)


def load_food_seed(file_path: Path, schema_dir: Optional[Path] = None) -> FoodSeed:
    """Load food seed list from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        schema_path = schema_dir / "food_seed.schema.json"
        validate_against_schema(data, schema_path, file_path)

    positions = [tuple(float(v) for v in p) for p in data['positions']]

    return FoodSeed(
        seed_id=data['seed_id'],
        kind=data['kind'],
        positions=positions,
        nutrition_value=data.get('nutrition_value', 25.0),
        respawn_delay=data.get('respawn_delay', 1500.0),
        description=data.get('description')
    )


def load_all_profiles(data_root: Path = DATA_ROOT, schema_dir: Optional[Path] = None) -> Dict[str, SimulationConfig]:
    """
    Load every tuning profile in data_root/profiles.

    Returns:
        Dict of profile_id -> SimulationConfig
    """
    if schema_dir is None:
        schema_dir = data_root / "schemas"

    profile_dir = data_root / "profiles"
    if not profile_dir.exists():
        raise DataLoadError(f"Profile directory not found: {profile_dir}")

    profiles = {}
    for profile_file in sorted(profile_dir.glob("*.yaml")):
        profile = load_profile(profile_file, schema_dir)
        profiles[profile.profile_id] = profile

    if not profiles:
        raise DataLoadError(f"No profile files found in {profile_dir}")

    return profiles


def load_all_data(
    data_root: Path = DATA_ROOT,
    profile: str = DEFAULT_PROFILE,
    food_seed: str = DEFAULT_FOOD_SEED,
    schema_dir: Optional[Path] = None
) -> dict:
    """
    Load the selected profile and food seed list from a data pack.

    Args:
        data_root: Root data directory (profiles/, seeds/, schemas/)
        profile: Profile id (file stem under profiles/)
        food_seed: Seed list id (file stem under seeds/)
        schema_dir: Optional schema directory (default: data_root/schemas)

    Returns:
        Dict with 'config' (SimulationConfig) and 'food_seed' (FoodSeed)
    """
    data_root = Path(data_root)
    if schema_dir is None:
        schema_dir = data_root / "schemas"

    profile_path = data_root / "profiles" / f"{profile}.yaml"
    if not profile_path.exists():
        raise DataLoadError(f"Unknown profile '{profile}' (no {profile_path})")

    seed_path = data_root / "seeds" / f"{food_seed}.yaml"
    if not seed_path.exists():
        raise DataLoadError(f"Unknown food seed '{food_seed}' (no {seed_path})")

    return {
        'config': load_profile(profile_path, schema_dir),
        'food_seed': load_food_seed(seed_path, schema_dir),
    }
