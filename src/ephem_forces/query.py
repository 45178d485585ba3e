"""Barycentric states and masses of the Sun, planets and Moon."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ephem_forces.constants import NUM_PLANETS, SECONDS_PER_DAY
from ephem_forces.errors import BodyIndexError
from ephem_forces.jpl.bodies import Body, relative_state

if TYPE_CHECKING:
    from ephem_forces.catalog import MassiveBodyCatalog
    from ephem_forces.context import EphemerisContext

# query_body() index -> ephemeris body
PLANET_BODIES: tuple[Body, ...] = (
    Body.SUN,
    Body.MERCURY,
    Body.VENUS,
    Body.EARTH,
    Body.MOON,
    Body.MARS,
    Body.JUPITER,
    Body.SATURN,
    Body.URANUS,
    Body.NEPTUNE,
    Body.PLUTO,
)


@dataclass
class MassiveBodyState:
    """Mass (simulation units), position (AU) and velocity (AU/day)."""

    mass: float
    position: np.ndarray
    velocity: np.ndarray


class EphemerisQuery:
    """Major-body lookups against the context's planetary ephemeris."""

    def __init__(self, context: EphemerisContext, catalog: MassiveBodyCatalog) -> None:
        self._context = context
        self._catalog = catalog

    def query_body(self, index: int, epoch: float) -> MassiveBodyState:
        """Mass and barycentric state of a major body.

        Parameters:
            index: 0=Sun, 1=Mercury, 2=Venus, 3=Earth, 4=Moon, 5=Mars,
                6=Jupiter, 7=Saturn, 8=Uranus, 9=Neptune, 10=Pluto.
            epoch: TDB Julian date.

        Returns:
            MassiveBodyState in AU and AU/day.

        Raises:
            BodyIndexError: If index is outside 0..10.
            EpochOutOfRangeError: If epoch is outside the ephemeris span.
            EphemerisFileError: If the ephemeris cannot be opened.
        """
        if not 0 <= index < NUM_PLANETS:
            raise BodyIndexError(f'Major body index {index} out of range 0..{NUM_PLANETS - 1}')
        store = self._context.ephemeris()
        state = relative_state(store, PLANET_BODIES[index], Body.BARYCENTER, epoch)
        au = store.header.au_km
        return MassiveBodyState(
            mass=self._catalog.planet_mass(index),
            position=state.position / au,
            velocity=state.velocity / (au / SECONDS_PER_DAY),
        )
