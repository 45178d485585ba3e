"""Massive-asteroid positions from a SPICE SPK kernel (e.g. sb431-n16s.bsp)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import cspyce
import numpy as np

from ephem_forces.constants import (
    ASTEROID_NAIF_IDS,
    AU_KM,
    J2000_JD,
    NUM_ASTEROIDS,
    SECONDS_PER_DAY,
    SUN_NAIF_ID,
)
from ephem_forces.errors import BodyIndexError, EphemerisFileError, EpochOutOfRangeError

if TYPE_CHECKING:
    from ephem_forces.catalog import MassiveBodyCatalog
    from ephem_forces.context import EphemerisContext
    from ephem_forces.query import EphemerisQuery

logger = logging.getLogger(__name__)


class MinorBodyStore(Protocol):
    """Source of heliocentric asteroid states.

    query() returns (position in AU, velocity in AU/day) relative to the Sun
    in the planetary ephemeris frame, converting kilometres with the au_km
    it is given (the planetary ephemeris header's AU).
    """

    def open(self, path: str) -> Any: ...

    def query(self, handle: Any, index: int, epoch: float, au_km: float) -> tuple[np.ndarray, np.ndarray]: ...

    def close(self, handle: Any) -> None: ...


@dataclass(frozen=True)
class SpkHandle:
    """A furnished SPK kernel."""

    path: str


def et_from_jd(epoch: float) -> float:
    """Ephemeris seconds past J2000 for a TDB Julian date."""
    return (epoch - J2000_JD) * SECONDS_PER_DAY


class SpkAsteroidStore:
    """MinorBodyStore backed by cspyce; index i is ASTEROID_NAIF_IDS[i]."""

    def open(self, path: str) -> SpkHandle:
        """Furnish the kernel.

        Raises:
            EphemerisFileError: If the kernel is missing or SPICE rejects it.
        """
        kpath = Path(path)
        if not kpath.is_file():
            raise EphemerisFileError(f'Asteroid kernel not found: {kpath}')
        try:
            cspyce.furnsh(str(kpath))
        except Exception as e:
            raise EphemerisFileError(f'Failed to load asteroid kernel {kpath}: {e}') from e
        logger.info('Loaded asteroid kernel %s', kpath)
        return SpkHandle(path=str(kpath))

    def query(
        self, handle: SpkHandle, index: int, epoch: float, au_km: float = AU_KM
    ) -> tuple[np.ndarray, np.ndarray]:
        """Heliocentric J2000 state of asteroid index at a TDB Julian date.

        Parameters:
            handle: Handle returned by open().
            index: Asteroid index into ASTEROID_NAIF_IDS.
            epoch: TDB Julian date.
            au_km: Kilometres per AU for the conversion.

        Returns:
            Tuple of (position in AU, velocity in AU/day).

        Raises:
            EpochOutOfRangeError: If the kernel has no data for the epoch.
            EphemerisFileError: For any other SPICE failure.
        """
        del handle
        naif_id = ASTEROID_NAIF_IDS[index]
        try:
            state, _lt = cspyce.spkez(naif_id, et_from_jd(epoch), 'J2000', 'NONE', SUN_NAIF_ID)
        except Exception as e:
            if 'SPKINSUFFDATA' in str(e):
                raise EpochOutOfRangeError(epoch, detail=f'asteroid kernel has no data for NAIF {naif_id}') from e
            raise EphemerisFileError(f'Asteroid kernel lookup failed for NAIF {naif_id} at JD {epoch!r}: {e}') from e
        pv = np.array(state, dtype=np.float64)
        return (pv[:3] / au_km, pv[3:6] / (au_km / SECONDS_PER_DAY))

    def close(self, handle: SpkHandle) -> None:
        """Unload the kernel from the SPICE pool."""
        cspyce.unload(handle.path)


@dataclass
class AsteroidState:
    """Mass (simulation units) and barycentric position (AU) of an asteroid."""

    mass: float
    position: np.ndarray


class AsteroidQuery:
    """Barycentric asteroid positions for force accumulation.

    The minor-body store gives heliocentric positions; the Sun's barycentric
    position from the planetary ephemeris is added. Kilometres are
    converted with the planetary header's AU. Velocities are not provided.
    """

    def __init__(
        self,
        context: EphemerisContext,
        ephemeris: EphemerisQuery,
        catalog: MassiveBodyCatalog,
    ) -> None:
        self._context = context
        self._ephemeris = ephemeris
        self._catalog = catalog

    def query_asteroid(self, index: int, epoch: float) -> AsteroidState:
        """Mass and barycentric position of asteroid index (0..15).

        Parameters:
            index: 0=Ceres, 1=Vesta, 2=Pallas, ... 15=Sylvia.
            epoch: TDB Julian date.

        Returns:
            AsteroidState.

        Raises:
            BodyIndexError: If index is outside 0..15.
            EpochOutOfRangeError: If epoch is outside the planetary ephemeris
                or the asteroid kernel.
            EphemerisFileError: If either file cannot be opened or read.
        """
        if not 0 <= index < NUM_ASTEROIDS:
            raise BodyIndexError(f'Asteroid index {index} out of range 0..{NUM_ASTEROIDS - 1}')
        mass = self._catalog.asteroid_mass(index)
        sun = self._ephemeris.query_body(0, epoch)
        au_km = self._context.ephemeris().header.au_km
        store, handle = self._context.asteroids()
        helio_pos, _helio_vel = store.query(handle, index, epoch, au_km)
        position = np.asarray(helio_pos, dtype=np.float64) + sun.position
        return AsteroidState(mass=mass, position=position)
