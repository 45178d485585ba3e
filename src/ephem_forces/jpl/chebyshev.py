"""Chebyshev interpolation of one slot's coefficients within a record."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ephem_forces.constants import SECONDS_PER_DAY


@dataclass(frozen=True)
class ChebyshevBlock:
    """Coefficients of one slot in one record.

    Laid out as ``intervals`` sub-intervals, each holding ``components`` runs
    of ``coefficients`` values.
    """

    values: np.ndarray
    components: int
    coefficients: int
    intervals: int


def evaluate(
    block: ChebyshevBlock, fraction: float, span_days: float
) -> tuple[list[float], list[float]]:
    """Interpolate position and velocity at a fractional time in the record.

    The record's fraction is rescaled into its sub-interval and mapped to
    x in [-1, 1]. Position sums T_p(x) c_p; velocity sums T_p'(x) c_p scaled
    by dx/dt, so velocity is in position units per second. Sums run in index
    order to reproduce reference values.

    Parameters:
        block: Coefficients for the slot.
        fraction: Time within the record, in [0, 1]; 1.0 only for the
            closing epoch of the file.
        span_days: Record length in days.

    Returns:
        Tuple of (position, velocity) lists, one value per component.
    """
    ncf = block.coefficients
    ncm = block.components
    niv = block.intervals

    t = fraction * float(niv)
    x = 2.0 * math.fmod(t, 1.0) - 1.0
    scale = float(niv * 2) / span_days / SECONDS_PER_DAY
    sub = int(t)
    if sub >= niv:
        # fraction == 1.0: the closing edge of the last sub-interval
        sub = niv - 1
        x = 1.0

    cheb = [0.0] * max(ncf, 2)
    deriv = [0.0] * max(ncf, 2)
    cheb[0] = 1.0
    cheb[1] = x
    deriv[0] = 0.0
    deriv[1] = 1.0
    for p in range(2, ncf):
        cheb[p] = 2.0 * x * cheb[p - 1] - cheb[p - 2]
        deriv[p] = 2.0 * x * deriv[p - 1] + 2.0 * cheb[p - 1] - deriv[p - 2]

    coeffs = block.values.tolist()
    position = [0.0] * ncm
    velocity = [0.0] * ncm
    for m in range(ncm):
        n = ncf * (m + sub * ncm)
        u = 0.0
        v = 0.0
        for p in range(ncf):
            u += cheb[p] * coeffs[n + p]
            v += deriv[p] * coeffs[n + p] * scale
        position[m] = u
        velocity[m] = v
    return (position, velocity)
