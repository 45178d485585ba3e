"""Ephemeris-driven gravitational forces for test-particle integrations.

This package provides:
- A reader for JPL binary planetary ephemerides (DE4xx "linux_" files),
  memory-mapped and evaluated with Chebyshev polynomials
- Barycentric states and masses of the Sun, planets, Moon and the 16 most
  massive asteroids (asteroids via a SPICE SPK kernel read with cspyce)
- A per-step force routine that adds Newtonian accelerations from those
  bodies plus a post-Newtonian correction to a set of test particles
"""

from ephem_forces.context import EphemerisContext
from ephem_forces.errors import (
    BodyIndexError,
    EphemerisFileError,
    EpochOutOfRangeError,
)
from ephem_forces.forces import EphemerisForceComputer, Particle
from ephem_forces.jpl.bodies import Body
from ephem_forces.jpl.store import EphemerisStore

__all__: list[str] = [
    'Body',
    'BodyIndexError',
    'EphemerisContext',
    'EphemerisFileError',
    'EphemerisForceComputer',
    'EphemerisStore',
    'EpochOutOfRangeError',
    'Particle',
]
