"""Tests for Chebyshev position/velocity evaluation."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.polynomial import chebyshev

from synthetic import BEGIN, STEP, SyntheticEphemeris
from ephem_forces.constants import SLOT_EMB, SLOT_MOON, SLOT_SUN
from ephem_forces.jpl.chebyshev import ChebyshevBlock, evaluate
from ephem_forces.jpl.store import EphemerisStore


def test_matches_numpy_chebval() -> None:
    """Position equals chebval and velocity the scaled derivative series."""
    rng = np.random.default_rng(12345)
    ncf, ncm = 13, 3
    coeffs = rng.normal(size=ncf * ncm)
    block = ChebyshevBlock(values=coeffs, components=ncm, coefficients=ncf, intervals=1)
    span = 16.0
    for fraction in (0.0, 0.1, 0.5, 0.77, 0.999):
        pos, vel = evaluate(block, fraction, span)
        x = 2.0 * fraction - 1.0
        for m in range(ncm):
            c = coeffs[m * ncf:(m + 1) * ncf]
            assert pos[m] == pytest.approx(chebyshev.chebval(x, c), rel=1e-12, abs=1e-12)
            dv = chebyshev.chebval(x, chebyshev.chebder(c)) * 2.0 / span / 86400.0
            assert vel[m] == pytest.approx(dv, rel=1e-10, abs=1e-15)


def test_selects_sub_interval() -> None:
    """Each quarter of the record reads its own coefficient set."""
    ncf, ncm, niv = 2, 1, 4
    # Sub-interval k: constant k, no slope.
    values = np.array([float(k) if p == 0 else 0.0 for k in range(niv) for p in range(ncf)])
    block = ChebyshevBlock(values=values, components=ncm, coefficients=ncf, intervals=niv)
    for k in range(niv):
        pos, vel = evaluate(block, (k + 0.5) / niv, 32.0)
        assert pos == [float(k)]
        assert vel == [0.0]


def test_closing_edge_of_last_sub_interval() -> None:
    """fraction == 1.0 evaluates the last sub-interval at x = 1."""
    values = np.array([0.0, 0.0, 5.0, 2.0])  # two sub-intervals: 0 and 5 + 2x
    block = ChebyshevBlock(values=values, components=1, coefficients=2, intervals=2)
    pos, _vel = evaluate(block, 1.0, 32.0)
    assert pos == [7.0]


def test_two_coefficient_series() -> None:
    """A linear series evaluates without touching higher recurrence terms."""
    block = ChebyshevBlock(values=np.array([1.0, 3.0]), components=1, coefficients=2, intervals=1)
    pos, vel = evaluate(block, 0.75, 1.0)
    assert pos == [2.5]
    assert vel == pytest.approx([3.0 * 2.0 / 86400.0])


@pytest.mark.parametrize('slot', [SLOT_SUN, SLOT_EMB, SLOT_MOON])
def test_analytic_values_from_store(synthetic_ephemeris: SyntheticEphemeris, slot: int) -> None:
    """Store blocks reproduce the synthetic quadratic and its derivative."""
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        for epoch in (BEGIN + 0.3, BEGIN + 17.0, BEGIN + 3 * STEP + 31.9):
            offset, fraction = store.lookup(epoch)
            pos, vel = evaluate(store.block(offset, slot), fraction, store.header.step)
            assert pos == pytest.approx(synthetic_ephemeris.slot_position(slot, epoch), rel=1e-12)
            assert vel == pytest.approx(synthetic_ephemeris.slot_velocity(slot, epoch), rel=1e-9)


@pytest.mark.parametrize('boundary', [BEGIN + STEP / 4, BEGIN + STEP / 2, BEGIN + STEP, BEGIN + 2 * STEP])
def test_continuity_across_boundaries(synthetic_ephemeris: SyntheticEphemeris, boundary: float) -> None:
    """Values just before a sub-interval or record boundary agree with those at it."""
    eps = 1e-7
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        before_off, before_frac = store.lookup(boundary - eps)
        at_off, at_frac = store.lookup(boundary)
        before, _ = evaluate(store.block(before_off, SLOT_MOON), before_frac, STEP)
        at, _ = evaluate(store.block(at_off, SLOT_MOON), at_frac, STEP)
        for b, a in zip(before, at):
            assert b == pytest.approx(a, rel=1e-9)
