"""Synthetic JPL binary ephemeris files for tests.

Every slot component follows a known quadratic in time,
f(t) = a + b (t - BEGIN) + q (t - BEGIN)^2 (km), encoded as exact Chebyshev
coefficients in each sub-interval, so positions and velocities can be checked
analytically at any epoch.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from ephem_forces.constants import HEADER_OFFSET, NUM_SLOTS, SLOT_COMPONENTS

BEGIN = 2451536.5
STEP = 32.0
NREC = 4
END = BEGIN + NREC * STEP
AU_KM = 149597870.7
EMRAT = 81.30056907419062
VERSION = 430
CONSTANT_COUNT = 402  # exercises the constant-name skip before slots 13 and 14
NCF = 8
# Sub-intervals per slot: EMB 2, Moon 4, Sun 2, everything else 1.
INTERVALS = (1, 1, 2, 1, 1, 1, 1, 1, 1, 4, 2, 1, 1, 1, 1)


def slot_components(slot: int) -> int:
    return SLOT_COMPONENTS.get(slot, 3)


def coefficients_abq(slot: int, m: int) -> tuple[float, float, float]:
    """Constant (km), rate (km/day), curvature (km/day^2) of one component."""
    a = 1.0e7 * (slot + 1) * (1.0 if m % 2 == 0 else -1.0) + 3.5e5 * m
    b = 1.0e4 * (slot + 2) - 2.5e3 * m
    q = 12.5 * (slot + 1) - 3.0 * m
    return (a, b, q)


@dataclass
class SyntheticEphemeris:
    """Path and analytic truth of a synthetic ephemeris file."""

    path: Path
    record_length: int

    def position(self, slot: int, m: int, epoch: float) -> float:
        a, b, q = coefficients_abq(slot, m)
        dt = epoch - BEGIN
        return a + b * dt + q * dt * dt

    def velocity(self, slot: int, m: int, epoch: float) -> float:
        """Analytic velocity in km/s."""
        _a, b, q = coefficients_abq(slot, m)
        dt = epoch - BEGIN
        return (b + 2.0 * q * dt) / 86400.0

    def slot_position(self, slot: int, epoch: float) -> list[float]:
        return [self.position(slot, m, epoch) for m in range(slot_components(slot))]

    def slot_velocity(self, slot: int, epoch: float) -> list[float]:
        return [self.velocity(slot, m, epoch) for m in range(slot_components(slot))]


def _chebyshev_coeffs(slot: int, m: int, start: float, span: float) -> list[float]:
    """Exact Chebyshev coefficients of the quadratic over [start, start + span]."""
    a, b, q = coefficients_abq(slot, m)
    half = 0.5 * span
    mid = start + half - BEGIN
    c0 = a + b * mid + q * mid * mid + 0.5 * q * half * half
    c1 = half * (b + 2.0 * q * mid)
    c2 = 0.5 * q * half * half
    return [c0, c1, c2] + [0.0] * (NCF - 3)


def write_synthetic_ephemeris(path: Path, nrec: int = NREC, au_km: float = AU_KM) -> SyntheticEphemeris:
    """Write a DE-layout file with nrec data records and return its truth."""
    offsets: list[int] = []
    next_offset = 3  # 1-based; two time stamps come first
    for slot in range(NUM_SLOTS):
        offsets.append(next_offset)
        next_offset += NCF * INTERVALS[slot] * slot_components(slot)
    record_doubles = next_offset - 1
    record_length = 8 * record_doubles

    header = bytearray(2 * record_length)
    pos = HEADER_OFFSET
    struct.pack_into('<3d', header, pos, BEGIN, END, STEP)
    pos += 24
    struct.pack_into('<i', header, pos, CONSTANT_COUNT)
    pos += 4
    struct.pack_into('<2d', header, pos, au_km, EMRAT)
    pos += 16
    for slot in range(12):
        struct.pack_into('<3i', header, pos, offsets[slot], NCF, INTERVALS[slot])
        pos += 12
    struct.pack_into('<i', header, pos, VERSION)
    pos += 4
    struct.pack_into('<3i', header, pos, offsets[12], NCF, INTERVALS[12])
    pos += 12
    pos += 6 * (CONSTANT_COUNT - 400)
    for slot in (13, 14):
        struct.pack_into('<3i', header, pos, offsets[slot], NCF, INTERVALS[slot])
        pos += 12
    assert pos <= len(header), 'synthetic header overlaps the first data record'

    body = bytearray()
    for r in range(nrec):
        rec_start = BEGIN + r * STEP
        values = [rec_start, rec_start + STEP]
        for slot in range(NUM_SLOTS):
            niv = INTERVALS[slot]
            span = STEP / niv
            for k in range(niv):
                for m in range(slot_components(slot)):
                    values.extend(_chebyshev_coeffs(slot, m, rec_start + k * span, span))
        assert len(values) == record_doubles
        body += struct.pack(f'<{record_doubles}d', *values)

    path.write_bytes(bytes(header) + bytes(body))
    return SyntheticEphemeris(path=path, record_length=record_length)



class FakeMinorBodyStore:
    """Minor-body store returning fixed heliocentric positions (AU)."""

    def __init__(self, positions: dict[int, tuple[float, float, float]] | None = None) -> None:
        self.positions = positions or {}
        self.opened: list[str] = []
        self.closed: list[object] = []
        self.queries: list[tuple[int, float]] = []
        self.au_km: list[float] = []

    def open(self, path: str) -> str:
        self.opened.append(path)
        return f'handle:{path}'

    def query(self, handle: object, index: int, epoch: float, au_km: float) -> tuple[np.ndarray, np.ndarray]:
        del handle
        self.queries.append((index, epoch))
        self.au_km.append(au_km)
        pos = self.positions.get(index, (1.0 + index, 0.0, 0.0))
        return (np.array(pos, dtype=np.float64), np.zeros(3, dtype=np.float64))

    def close(self, handle: object) -> None:
        self.closed.append(handle)
