"""Post-Newtonian acceleration correction for test particles.

The correction is the Einstein-Infeld-Hoffmann term for a single dominant
mass (gravitational parameter mu) sitting at the origin of the frame. The
particle's canonical velocity appears implicitly, so it is found by
fixed-point substitution before the correction is formed.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10


@dataclass(frozen=True)
class Correction:
    """Acceleration increment and the solver's outcome for one particle."""

    ax: float
    ay: float
    az: float
    converged: bool
    iterations: int


class RelativisticCorrector:
    """Fixed-point solver for the post-Newtonian acceleration correction.

    Parameters:
        mu: G times the central mass, in simulation units.
        c: Speed of light in simulation units; math.inf disables the
            correction (it then evaluates to zero).
        max_iterations: Cap on fixed-point iterations; reaching it without
            converging logs a warning and the last iterate is used.
        tolerance: Relative velocity change below which iteration stops;
            compared squared.
    """

    def __init__(
        self,
        mu: float,
        c: float,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float = sys.float_info.epsilon,
    ) -> None:
        if max_iterations < 1:
            raise ValueError(f'max_iterations must be at least 1, got {max_iterations}')
        self.mu = mu
        self.c = c
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def correction(
        self,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
        acceleration: tuple[float, float, float],
    ) -> Correction:
        """Compute the correction for one particle without modifying it.

        Parameters:
            position: Particle position relative to the central mass.
            velocity: Particle velocity.
            acceleration: Newtonian acceleration accumulated so far.

        Returns:
            Correction to add to the acceleration.

        Raises:
            ValueError: If the particle sits at the origin, where the
                correction is undefined.
        """
        x, y, z = position
        pvx, pvy, pvz = velocity
        pax, pay, paz = acceleration
        mu = self.mu
        c2 = self.c * self.c
        tol2 = self.tolerance * self.tolerance

        vx, vy, vz = pvx, pvy, pvz
        vi2 = vx * vx + vy * vy + vz * vz
        ri = math.sqrt(x * x + y * y + z * z)
        if ri == 0.0:
            raise ValueError('Particle at the origin has no defined relativistic correction')
        a_term = (0.5 * vi2 + 3.0 * mu / ri) / c2

        converged = False
        q = 0
        while q < self.max_iterations:
            old_vx, old_vy, old_vz = vx, vy, vz
            vx = pvx / (1.0 - a_term)
            vy = pvy / (1.0 - a_term)
            vz = pvz / (1.0 - a_term)
            vi2 = vx * vx + vy * vy + vz * vz
            a_term = (0.5 * vi2 + 3.0 * mu / ri) / c2
            dvx = vx - old_vx
            dvy = vy - old_vy
            dvz = vz - old_vz
            dv2 = dvx * dvx + dvy * dvy + dvz * dvz
            q += 1
            # A particle at rest has nothing to iterate on.
            if vi2 == 0.0 or dv2 / vi2 < tol2:
                converged = True
                break

        b_term = (mu / ri - 1.5 * vi2) * mu / (ri * ri * ri) / c2
        rdotv = x * pvx + y * pvy + z * pvz
        vidot_x = pax + b_term * x
        vidot_y = pay + b_term * y
        vidot_z = paz + b_term * z
        vdotvdot = vx * vidot_x + vy * vidot_y + vz * vidot_z
        d_term = (vdotvdot - 3.0 * mu / (ri * ri * ri) * rdotv) / c2

        return Correction(
            ax=b_term * (1.0 - a_term) * x - a_term * pax - d_term * vx,
            ay=b_term * (1.0 - a_term) * y - a_term * pay - d_term * vy,
            az=b_term * (1.0 - a_term) * z - a_term * paz - d_term * vz,
            converged=converged,
            iterations=q,
        )

    def apply(self, particle: Any) -> bool:
        """Add the correction to a particle's acceleration in place.

        Parameters:
            particle: Object with x, y, z, vx, vy, vz, ax, ay, az attributes.

        Returns:
            True if the velocity iteration converged.

        Raises:
            ValueError: If the particle sits at the origin; it is left
                unchanged.
        """
        corr = self.correction(
            (particle.x, particle.y, particle.z),
            (particle.vx, particle.vy, particle.vz),
            (particle.ax, particle.ay, particle.az),
        )
        if not corr.converged:
            logger.warning(
                '%d iterations of the relativistic velocity solve failed to converge; '
                'the perturbation is too strong for this approximation',
                corr.iterations,
            )
        particle.ax += corr.ax
        particle.ay += corr.ay
        particle.az += corr.az
        return corr.converged
