"""
Deterministic RNG utilities for meadow simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world_seed, component_name). All randomness in a simulation draws from a
single numpy.random.Generator(PCG64) so a run is reproducible from its seed.
"""

import hashlib
import numpy as np
from typing import Any, Tuple


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (world_seed, component name, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        sim_seed = make_seed(world_seed, "meadow")
    """
    hash_input = ":".join(str(c) for c in components)

    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    seed = int.from_bytes(hash_bytes[:8], byteorder='big')

    return seed


def make_rng(*components: Any) -> np.random.Generator:
    """Build a PCG64 generator seeded from make_seed(*components)"""
    return np.random.Generator(np.random.PCG64(make_seed(*components)))


def roll(rng: np.random.Generator, probability: float) -> bool:
    """Bernoulli trial; probability <= 0 never draws so profiles can disable rules"""
    if probability <= 0.0:
        return False
    return bool(rng.random() < probability)


def random_offset_xz(rng: np.random.Generator, width: float) -> Tuple[float, float]:
    """
    Uniform offset in [-width/2, width/2) on both horizontal axes.

    Args:
        rng: Simulation generator
        width: Full width of the offset window

    Returns:
        (dx, dz)
    """
    dx, dz = (rng.random(2) - 0.5) * width
    return float(dx), float(dz)


def random_position_in_square(rng: np.random.Generator, half_extent: float, y: float) -> np.ndarray:
    """
    Uniform position on the horizontal square [-half_extent, half_extent]^2.

    Args:
        rng: Simulation generator
        half_extent: Half side length of the square
        y: Fixed height of the returned point

    Returns:
        Position [x, y, z] as float64 array
    """
    x, z = rng.uniform(-half_extent, half_extent, size=2)
    return np.array([x, y, z], dtype=np.float64)


def random_in_range(rng: np.random.Generator, bounds: Tuple[float, float]) -> float:
    """Uniform draw from a (low, high) pair"""
    low, high = bounds
    return float(rng.uniform(low, high))
