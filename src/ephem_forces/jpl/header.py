"""Header of a JPL binary planetary ephemeris (DE4xx "linux_" files)."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from ephem_forces.constants import (
    CONSTANT_NAME_BASE,
    CONSTANT_NAME_BYTES,
    HEADER_OFFSET,
    NUM_LEADING_SLOTS,
    NUM_SLOTS,
    SLOT_COMPONENTS,
)
from ephem_forces.errors import EphemerisFileError

_DOUBLE = struct.Struct('<d')
_SPAN = struct.Struct('<3d')  # begin, end, step
_COUNT = struct.Struct('<i')
_SCALES = struct.Struct('<2d')  # AU, Earth/Moon mass ratio
_TRIPLE = struct.Struct('<3i')  # offset, coefficients, sub-intervals


@dataclass(frozen=True)
class EphemerisHeader:
    """Parsed header: time span, scale constants, and per-slot record layout.

    Offsets are 0-based counts of float64 values from the start of a record
    (the two leading time stamps included).
    """

    begin: float
    end: float
    step: float
    constant_count: int
    au_km: float
    earth_moon_ratio: float
    version: int
    offsets: tuple[int, ...]
    coefficients: tuple[int, ...]
    intervals: tuple[int, ...]
    components: tuple[int, ...]

    @property
    def record_length(self) -> int:
        """Bytes per record: two time stamps plus every slot's coefficients."""
        size = 2 * _DOUBLE.size
        for ncf, niv, ncm in zip(self.coefficients, self.intervals, self.components):
            size += _DOUBLE.size * ncf * niv * ncm
        return size

    def block_size(self, slot: int) -> int:
        """Number of float64 coefficients one record holds for a slot."""
        return self.coefficients[slot] * self.intervals[slot] * self.components[slot]


def parse_header(buffer: bytes | bytearray | memoryview) -> EphemerisHeader:
    """Decode the header from the raw bytes (or mapping) of an ephemeris file.

    Layout at HEADER_OFFSET: begin, end, step (float64); constant count
    (int32); AU, Earth/Moon mass ratio (float64); 12 slot triples; version;
    triple 12; a skip of 6 bytes per constant name beyond 400; triples 13-14.
    Slot offsets are stored 1-based and returned 0-based.

    Parameters:
        buffer: Anything supporting the buffer protocol, e.g. an mmap.

    Returns:
        EphemerisHeader.

    Raises:
        EphemerisFileError: If the buffer is too short or the header is
            inconsistent (begin after end, non-positive step).
    """
    try:
        pos = HEADER_OFFSET
        begin, end, step = _SPAN.unpack_from(buffer, pos)
        pos += _SPAN.size
        (constant_count,) = _COUNT.unpack_from(buffer, pos)
        pos += _COUNT.size
        au_km, earth_moon_ratio = _SCALES.unpack_from(buffer, pos)
        pos += _SCALES.size

        triples: list[tuple[int, int, int]] = []
        for _ in range(NUM_LEADING_SLOTS):
            triples.append(_TRIPLE.unpack_from(buffer, pos))
            pos += _TRIPLE.size
        (version,) = _COUNT.unpack_from(buffer, pos)
        pos += _COUNT.size
        triples.append(_TRIPLE.unpack_from(buffer, pos))
        pos += _TRIPLE.size

        pos += CONSTANT_NAME_BYTES * (constant_count - CONSTANT_NAME_BASE)
        for _ in range(NUM_LEADING_SLOTS + 1, NUM_SLOTS):
            triples.append(_TRIPLE.unpack_from(buffer, pos))
            pos += _TRIPLE.size
    except struct.error as e:
        raise EphemerisFileError(f'Ephemeris header truncated or unreadable: {e}') from e

    if not begin <= end:
        raise EphemerisFileError(f'Ephemeris header begin {begin!r} is after end {end!r}')
    if not step > 0.0:
        raise EphemerisFileError(f'Ephemeris header record step must be positive, got {step!r}')

    return EphemerisHeader(
        begin=begin,
        end=end,
        step=step,
        constant_count=constant_count,
        au_km=au_km,
        earth_moon_ratio=earth_moon_ratio,
        version=version,
        offsets=tuple(t[0] - 1 for t in triples),
        coefficients=tuple(t[1] for t in triples),
        intervals=tuple(t[2] for t in triples),
        components=tuple(SLOT_COMPONENTS.get(slot, 3) for slot in range(NUM_SLOTS)),
    )
