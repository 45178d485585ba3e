"""Body states from ephemeris records: one resolver per body, keyed by Body."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

import numpy as np

from ephem_forces.constants import (
    SLOT_EMB,
    SLOT_JUPITER,
    SLOT_MARS,
    SLOT_MERCURY,
    SLOT_MOON,
    SLOT_NEPTUNE,
    SLOT_PLUTO,
    SLOT_SATURN,
    SLOT_SUN,
    SLOT_URANUS,
    SLOT_VENUS,
)
from ephem_forces.jpl.chebyshev import evaluate

if TYPE_CHECKING:
    from ephem_forces.jpl.store import EphemerisStore


class Body(IntEnum):
    """Bodies that can be requested from a planetary ephemeris."""

    BARYCENTER = 0
    SUN = 1
    EARTH = 2
    EMB = 3
    MOON = 4
    MERCURY = 5
    VENUS = 6
    MARS = 7
    JUPITER = 8
    SATURN = 9
    URANUS = 10
    NEPTUNE = 11
    PLUTO = 12

    @classmethod
    def parse(cls, name: str) -> Body:
        """Return the Body for a case-insensitive name (e.g. 'earth', 'EMB').

        Raises:
            ValueError: If the name is unknown.
        """
        key = name.strip().upper().replace('-', '_')
        try:
            return cls[key]
        except KeyError:
            choices = ', '.join(b.name.lower() for b in cls)
            raise ValueError(f'Unknown body {name!r}; expected one of: {choices}') from None


@dataclass
class BodyState:
    """Position and velocity of a body at an epoch (km, km/s unless converted)."""

    position: np.ndarray
    velocity: np.ndarray
    epoch: float


def _zeros() -> np.ndarray:
    return np.zeros(3, dtype=np.float64)


class BodyResolver(Protocol):
    """Computes one body's state from the record covering an epoch."""

    def resolve(self, store: EphemerisStore, record_offset: int, fraction: float) -> tuple[np.ndarray, np.ndarray]:
        """Return (position, velocity) in km and km/s."""
        ...


class BarycenterResolver:
    """Solar system barycenter: the origin of the ephemeris frame."""

    def resolve(self, store: EphemerisStore, record_offset: int, fraction: float) -> tuple[np.ndarray, np.ndarray]:
        return (_zeros(), _zeros())


class SlotResolver:
    """Body stored directly in one slot of the record."""

    def __init__(self, slot: int) -> None:
        self.slot = slot

    def resolve(self, store: EphemerisStore, record_offset: int, fraction: float) -> tuple[np.ndarray, np.ndarray]:
        block = store.block(record_offset, self.slot)
        pos, vel = evaluate(block, fraction, store.header.step)
        return (np.array(pos, dtype=np.float64), np.array(vel, dtype=np.float64))


class EarthMoonResolver:
    """Earth or Moon from the Earth-Moon barycenter and the geocentric Moon.

    With mu the Earth/Moon mass ratio, the body is EMB + weight * Moon where
    weight is -1/(1+mu) for the Earth and mu/(1+mu) for the Moon.
    """

    def __init__(self, moon: bool) -> None:
        self.moon = moon

    def weight(self, earth_moon_ratio: float) -> float:
        """Multiplier applied to the geocentric Moon vector."""
        if self.moon:
            return earth_moon_ratio / (1.0 + earth_moon_ratio)
        return -1.0 / (1.0 + earth_moon_ratio)

    def resolve(self, store: EphemerisStore, record_offset: int, fraction: float) -> tuple[np.ndarray, np.ndarray]:
        step = store.header.step
        emb_pos, emb_vel = evaluate(store.block(record_offset, SLOT_EMB), fraction, step)
        lun_pos, lun_vel = evaluate(store.block(record_offset, SLOT_MOON), fraction, step)
        w = self.weight(store.header.earth_moon_ratio)
        pos = [emb_pos[i] + lun_pos[i] * w for i in range(3)]
        vel = [emb_vel[i] + lun_vel[i] * w for i in range(3)]
        return (np.array(pos, dtype=np.float64), np.array(vel, dtype=np.float64))


RESOLVERS: dict[Body, BodyResolver] = {
    Body.BARYCENTER: BarycenterResolver(),
    Body.SUN: SlotResolver(SLOT_SUN),
    Body.EARTH: EarthMoonResolver(moon=False),
    Body.EMB: SlotResolver(SLOT_EMB),
    Body.MOON: EarthMoonResolver(moon=True),
    Body.MERCURY: SlotResolver(SLOT_MERCURY),
    Body.VENUS: SlotResolver(SLOT_VENUS),
    Body.MARS: SlotResolver(SLOT_MARS),
    Body.JUPITER: SlotResolver(SLOT_JUPITER),
    Body.SATURN: SlotResolver(SLOT_SATURN),
    Body.URANUS: SlotResolver(SLOT_URANUS),
    Body.NEPTUNE: SlotResolver(SLOT_NEPTUNE),
    Body.PLUTO: SlotResolver(SLOT_PLUTO),
}


def relative_state(store: EphemerisStore, target: Body, center: Body, epoch: float) -> BodyState:
    """State of target relative to center in the ephemeris frame (ICRF).

    Parameters:
        store: Open ephemeris.
        target: Body whose state is wanted.
        center: Body the state is measured from (Body.BARYCENTER for
            barycentric states).
        epoch: TDB Julian date.

    Returns:
        BodyState with position in km and velocity in km/s.

    Raises:
        EpochOutOfRangeError: If epoch is outside the file's span.
    """
    record_offset, fraction = store.lookup(epoch)
    pos, vel = RESOLVERS[Body(target)].resolve(store, record_offset, fraction)
    ref_pos, ref_vel = RESOLVERS[Body(center)].resolve(store, record_offset, fraction)
    return BodyState(position=pos - ref_pos, velocity=vel - ref_vel, epoch=epoch)
