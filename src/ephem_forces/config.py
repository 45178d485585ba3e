"""Configuration: ephemeris and asteroid kernel paths from environment."""

import os
from pathlib import Path

# Env var overrides with defaults matching the usual JPL distribution names.
DEFAULT_PLANETS_FILE = 'linux_p1550p2650.430'
DEFAULT_ASTEROIDS_FILE = 'sb431-n16s.bsp'


def get_data_path() -> str:
    """Return the directory default file names are resolved in.

    Returns:
        EPHEM_FORCES_DATA env var, or '' (current directory) when unset.
    """
    return os.environ.get('EPHEM_FORCES_DATA', '').strip()


def _resolve(name: str) -> str:
    base = get_data_path()
    if not base:
        return name
    return str(Path(base) / name)


def get_planets_path() -> str:
    """Return path to the binary planetary ephemeris.

    Prefers EPHEM_FORCES_PLANETS, then DEFAULT_PLANETS_FILE under
    EPHEM_FORCES_DATA.

    Returns:
        Path string.
    """
    path = os.environ.get('EPHEM_FORCES_PLANETS', '').strip()
    if path:
        return path
    return _resolve(DEFAULT_PLANETS_FILE)


def get_asteroids_path() -> str:
    """Return path to the SPK kernel holding the massive asteroids.

    Prefers EPHEM_FORCES_ASTEROIDS, then DEFAULT_ASTEROIDS_FILE under
    EPHEM_FORCES_DATA.

    Returns:
        Path string.
    """
    path = os.environ.get('EPHEM_FORCES_ASTEROIDS', '').strip()
    if path:
        return path
    return _resolve(DEFAULT_ASTEROIDS_FILE)
