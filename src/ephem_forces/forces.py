"""Per-step ephemeris forces on test particles (Sun, planets, Moon, asteroids, GR)."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from ephem_forces.catalog import MassiveBodyCatalog, asteroid_name, planet_name
from ephem_forces.constants import GAUSS_K2, NUM_ASTEROIDS, NUM_PLANETS
from ephem_forces.errors import BodyIndexError
from ephem_forces.query import EphemerisQuery
from ephem_forces.relativity import DEFAULT_MAX_ITERATIONS, RelativisticCorrector
from ephem_forces.spice.asteroids import AsteroidQuery

if TYPE_CHECKING:
    from ephem_forces.context import EphemerisContext

logger = logging.getLogger(__name__)

# Host parameter names
PARAM_N_EPHEM = 'N_ephem'
PARAM_N_AST = 'N_ast'
PARAM_C = 'c'
REQUIRED_PARAMS = (PARAM_N_EPHEM, PARAM_N_AST, PARAM_C)


@dataclass
class Particle:
    """Test particle: position, velocity, and the acceleration accumulator.

    Any object with the same attribute names (e.g. a REBOUND particle) can be
    passed to EphemerisForceComputer.apply instead.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    ax: float = 0.0
    ay: float = 0.0
    az: float = 0.0
    m: float = 0.0


class BodySource(Protocol):
    """Major-body lookup (EphemerisQuery)."""

    def query_body(self, index: int, epoch: float) -> Any: ...


class AsteroidSource(Protocol):
    """Asteroid lookup (AsteroidQuery)."""

    def query_asteroid(self, index: int, epoch: float) -> Any: ...


def _check_separation(particles: Sequence[Any], sources: Sequence[tuple[str, float, np.ndarray]]) -> None:
    """Reject particles at the origin or exactly on a perturbing body."""
    for p in particles:
        if p.x == 0.0 and p.y == 0.0 and p.z == 0.0:
            raise ValueError('Particle at the origin (the central mass) has no defined acceleration')
        for name, _mass, position in sources:
            if p.x == position[0] and p.y == position[1] and p.z == position[2]:
                raise ValueError(f'Particle coincides with {name} at ({p.x!r}, {p.y!r}, {p.z!r})')


def add_point_mass(particles: Sequence[Any], G: float, mass: float, position: np.ndarray) -> None:
    """Add -G m dr / |dr|^3 to every particle, dr = particle - body.

    Raises:
        ValueError: If a particle sits exactly on the body; no particle is
            modified in that case.
    """
    bx = float(position[0])
    by = float(position[1])
    bz = float(position[2])
    for p in particles:
        if p.x == bx and p.y == by and p.z == bz:
            raise ValueError(f'Particle coincides with the body at ({bx!r}, {by!r}, {bz!r})')
    for p in particles:
        dx = p.x - bx
        dy = p.y - by
        dz = p.z - bz
        r = math.sqrt(dx * dx + dy * dy + dz * dz)
        prefac = G * mass / (r * r * r)
        p.ax -= prefac * dx
        p.ay -= prefac * dy
        p.az -= prefac * dz


class EphemerisForceComputer:
    """Adds ephemeris-body gravity and the relativistic correction to particles.

    Parameters are read from ``params`` on every call so the host can change
    them between steps:

    - ``N_ephem``: number of major bodies to include (Sun first, see
      EphemerisQuery.query_body);
    - ``N_ast``: number of asteroids to include (see
      AsteroidQuery.query_asteroid);
    - ``c``: speed of light in simulation units.

    A missing parameter skips the whole step; it is logged once per key.
    """

    def __init__(
        self,
        bodies: BodySource,
        asteroids: AsteroidSource | None,
        params: Mapping[str, Any],
        G: float = GAUSS_K2,
        central_mass: float = 1.0,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        self.bodies = bodies
        self.asteroids = asteroids
        self.params = params
        self.G = G
        self.central_mass = central_mass
        self.max_iterations = max_iterations
        self._reported_missing: set[str] = set()

    @classmethod
    def from_context(
        cls,
        context: EphemerisContext,
        params: Mapping[str, Any],
        G: float = GAUSS_K2,
        **kwargs: Any,
    ) -> EphemerisForceComputer:
        """Build the computer with EphemerisQuery/AsteroidQuery over a context.

        Parameters:
            context: EphemerisContext owning the files.
            params: Host parameter mapping (N_ephem, N_ast, c).
            G: Gravitational constant of the simulation.
            **kwargs: Passed to the constructor (central_mass, max_iterations).
        """
        catalog = MassiveBodyCatalog.for_gravitational_constant(G)
        bodies = EphemerisQuery(context, catalog)
        asteroids = AsteroidQuery(context, bodies, catalog)
        return cls(bodies, asteroids, params, G=G, **kwargs)

    def _read_params(self) -> tuple[int, int, float] | None:
        missing = [key for key in REQUIRED_PARAMS if self.params.get(key) is None]
        if missing:
            for key in missing:
                if key not in self._reported_missing:
                    self._reported_missing.add(key)
                    logger.error(
                        'Parameter %r is required for ephemeris forces; skipping the force step',
                        key,
                    )
            return None
        return (
            int(self.params[PARAM_N_EPHEM]),
            int(self.params[PARAM_N_AST]),
            float(self.params[PARAM_C]),
        )

    def apply(self, time: float, particles: Sequence[Any]) -> bool:
        """Accumulate accelerations on the particles for one force evaluation.

        Every body is looked up before any particle is touched, so a step
        that raises leaves the accelerations as they were.

        Parameters:
            time: Simulation time (TDB Julian date).
            particles: Particles whose ax, ay, az are incremented in place.

        Returns:
            True if forces were applied; False if a parameter was missing.

        Raises:
            EpochOutOfRangeError: If time is outside an ephemeris span.
            EphemerisFileError: If an ephemeris file cannot be opened or read.
            BodyIndexError: If N_ephem or N_ast exceeds its catalog.
            ValueError: If a particle sits on a body or at the origin.
        """
        values = self._read_params()
        if values is None:
            return False
        n_ephem, n_ast, c = values

        if n_ephem > NUM_PLANETS:
            raise BodyIndexError(f'{PARAM_N_EPHEM}={n_ephem} exceeds the {NUM_PLANETS} major bodies')
        if n_ast > NUM_ASTEROIDS:
            raise BodyIndexError(f'{PARAM_N_AST}={n_ast} exceeds the {NUM_ASTEROIDS} asteroids')
        if n_ast > 0 and self.asteroids is None:
            raise ValueError(f'{PARAM_N_AST}={n_ast} but no asteroid source was configured')

        sources: list[tuple[str, float, np.ndarray]] = []
        for i in range(n_ephem):
            body = self.bodies.query_body(i, time)
            sources.append((planet_name(i), body.mass, body.position))
        if self.asteroids is not None:
            for i in range(n_ast):
                asteroid = self.asteroids.query_asteroid(i, time)
                sources.append((asteroid_name(i), asteroid.mass, asteroid.position))
        _check_separation(particles, sources)

        for name, mass, position in sources:
            logger.debug('Adding %s at JD %.6f', name, time)
            add_point_mass(particles, self.G, mass, position)

        corrector = RelativisticCorrector(
            mu=self.G * self.central_mass,
            c=c,
            max_iterations=self.max_iterations,
        )
        for p in particles:
            corrector.apply(p)
        return True
