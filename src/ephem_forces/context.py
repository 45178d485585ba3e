"""Shared ephemeris handles, opened lazily and at most once."""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import Any

from ephem_forces.config import get_asteroids_path, get_planets_path
from ephem_forces.jpl.store import EphemerisStore
from ephem_forces.spice.asteroids import MinorBodyStore, SpkAsteroidStore

logger = logging.getLogger(__name__)


class EphemerisContext:
    """Owns the planetary ephemeris and the asteroid kernel handle.

    Construct one context and pass it to the queries and the force computer.
    Files are opened on first use; the first-use path is serialized so
    concurrent callers see a single open. Reads after that need no locking.
    Closing is optional; an unclosed context releases its mapping when the
    process exits.
    """

    def __init__(
        self,
        planets_path: str | None = None,
        asteroids_path: str | None = None,
        asteroid_store: MinorBodyStore | None = None,
    ) -> None:
        self.planets_path = planets_path if planets_path is not None else get_planets_path()
        self.asteroids_path = asteroids_path if asteroids_path is not None else get_asteroids_path()
        self._asteroid_store: MinorBodyStore = (
            asteroid_store if asteroid_store is not None else SpkAsteroidStore()
        )
        self._lock = threading.Lock()
        self._ephemeris: EphemerisStore | None = None
        self._asteroid_handle: Any = None

    def ephemeris(self) -> EphemerisStore:
        """Return the planetary ephemeris, opening it on first call.

        Raises:
            EphemerisFileError: If the file cannot be opened or mapped.
        """
        store = self._ephemeris
        if store is not None:
            return store
        with self._lock:
            if self._ephemeris is None:
                logger.debug('Opening planetary ephemeris %s', self.planets_path)
                self._ephemeris = EphemerisStore.open(self.planets_path)
            return self._ephemeris

    def asteroids(self) -> tuple[MinorBodyStore, Any]:
        """Return (store, handle) for the asteroid kernel, opening it on first call.

        Raises:
            EphemerisFileError: If the kernel cannot be opened.
        """
        handle = self._asteroid_handle
        if handle is not None:
            return (self._asteroid_store, handle)
        with self._lock:
            if self._asteroid_handle is None:
                logger.debug('Opening asteroid kernel %s', self.asteroids_path)
                self._asteroid_handle = self._asteroid_store.open(self.asteroids_path)
            return (self._asteroid_store, self._asteroid_handle)

    def close(self) -> None:
        """Release both handles; safe to call more than once."""
        with self._lock:
            if self._ephemeris is not None:
                self._ephemeris.close()
                self._ephemeris = None
            if self._asteroid_handle is not None:
                self._asteroid_store.close(self._asteroid_handle)
                self._asteroid_handle = None

    def __enter__(self) -> EphemerisContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
