"""
Meadow Ecosystem Simulation

A deterministic, headless simulator for a small closed ecosystem of geese
that forage for regrowing tulips, breed, and starve inside a walled arena.

Architecture: the simulation is the source of truth. Any view layer is a
read-only consumer of its snapshot.
"""

__version__ = "0.1.0"
