"""Masses of the perturbing bodies in simulation units."""

from __future__ import annotations

from dataclasses import dataclass

from ephem_forces.constants import ASTEROID_GM, ASTEROID_NAMES, PLANET_GM, PLANET_NAMES
from ephem_forces.errors import BodyIndexError


@dataclass(frozen=True)
class MassiveBodyCatalog:
    """GM table divided by the simulation's gravitational constant.

    Index order matches EphemerisQuery.query_body (Sun, Mercury, Venus, Earth,
    Moon, Mars, ..., Pluto) and AsteroidQuery.query_asteroid (Ceres, Vesta,
    Pallas, ...).
    """

    planet_masses: tuple[float, ...]
    asteroid_masses: tuple[float, ...]

    @classmethod
    def for_gravitational_constant(cls, G: float) -> MassiveBodyCatalog:
        """Build the catalog for a simulation with gravitational constant G."""
        if G == 0.0:
            raise ValueError('Gravitational constant must be non-zero')
        return cls(
            planet_masses=tuple(gm / G for gm in PLANET_GM),
            asteroid_masses=tuple(gm / G for gm in ASTEROID_GM),
        )

    def planet_mass(self, index: int) -> float:
        """Mass of major body index (0=Sun .. 10=Pluto).

        Raises:
            BodyIndexError: If index is outside the table.
        """
        if not 0 <= index < len(self.planet_masses):
            raise BodyIndexError(
                f'Major body index {index} out of range 0..{len(self.planet_masses) - 1}'
            )
        return self.planet_masses[index]

    def asteroid_mass(self, index: int) -> float:
        """Mass of asteroid index (0=Ceres .. 15=Sylvia).

        Raises:
            BodyIndexError: If index is outside the table.
        """
        if not 0 <= index < len(self.asteroid_masses):
            raise BodyIndexError(
                f'Asteroid index {index} out of range 0..{len(self.asteroid_masses) - 1}'
            )
        return self.asteroid_masses[index]


def planet_name(index: int) -> str:
    """Display name of major body index."""
    return PLANET_NAMES[index]


def asteroid_name(index: int) -> str:
    """Display name of asteroid index."""
    return ASTEROID_NAMES[index]
