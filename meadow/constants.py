"""
Central configuration constants for meadow simulation.

Defines arena geometry, timing thresholds, and backend switches used
across multiple modules. Per-profile tunables (decay rates, wander
probabilities, breeding) live in the YAML tuning profiles instead.
"""

from pathlib import Path

# ============================================================================
# Data Pack Locations
# ============================================================================

DATA_ROOT = Path(__file__).parent / "data"
DEFAULT_PROFILE = "extended"
DEFAULT_FOOD_SEED = "tulips"


# ============================================================================
# Arena Geometry
# ============================================================================

# Symmetric position clamp on x and z (arena units)
WALL_BOUNDARY = 49.0

# Creature y offset while walking
GROUND_OFFSET = 0.5

# Food y level (tulips sit in the flower bed)
FOOD_GROUND_LEVEL = -2.8

# Half-extent of the square used for debug creature spawns
SPAWN_HALF_EXTENT = 10.0

# Vision range in arena units at vision = 100
VISION_RANGE_MAX = 5.0

# Distance below which a movement target counts as reached
ARRIVAL_DISTANCE = 0.5

# Distances below this are treated as zero (no direction to normalize)
DISTANCE_EPSILON = 1e-9


# ============================================================================
# Vitals
# ============================================================================

HUNGER_MAX = 100.0
HUNGER_MIN = 0.0

# Hunger above this keeps a creature full, at or below makes it hungry
HUNGER_FULL_THRESHOLD = 50.0

# Hunger below this after decay snaps to exactly zero
HUNGER_EPSILON = 1e-9

# Idle animation phase advance per simulated time unit
IDLE_ANIMATION_RATE = 0.1


# ============================================================================
# Timings (simulated time units)
# ============================================================================

# Simulated time added per tick at speed 1.0
BASE_STEP = 1.0

EATING_DURATION = 2000.0
BREEDING_DURATION = 3000.0
DEFAULT_BREEDING_COOLDOWN = 10000.0


# ============================================================================
# Environment Clock
# ============================================================================

# Simulated time per time-of-day slot
TIME_SLOT_LENGTH = 1000.0
TIME_SLOT_COUNT = 4

# Light level per slot: morning, afternoon, evening, night
LIGHT_LEVEL_BY_SLOT = (80.0, 100.0, 60.0, 20.0)

ENVIRONMENT_DEFAULTS = {
    'temperature': 22.0,
    'humidity': 60.0,
    'light_level': 80.0,
}


# ============================================================================
# Spatial Indexing Configuration
# ============================================================================

# Enable scipy.cKDTree box queries
# Set to False to use O(n) fallback for comparison
USE_CKDTREE = True

CKDTREE_LEAFSIZE = 16


# ============================================================================
# Logging and Performance
# ============================================================================

# Print per-entity [EVENT] lines (deaths, feeding, births, respawns)
LOG_EVENTS = False

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 1000

# Default tick driver cadence (seconds of wall clock per tick)
DRIVER_INTERVAL_S = 1.0 / 60.0
