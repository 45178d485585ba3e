"""CLI entry point: ephem-forces header|state|accel subcommands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import NoReturn, cast

from ephem_forces.constants import GAUSS_K2, SLOT_NAMES, SPEED_OF_LIGHT_AU_PER_DAY
from ephem_forces.context import EphemerisContext
from ephem_forces.errors import BodyIndexError, EphemerisFileError, EpochOutOfRangeError
from ephem_forces.forces import EphemerisForceComputer, Particle
from ephem_forces.jpl.bodies import Body, relative_state

_ERRORS = (EphemerisFileError, EpochOutOfRangeError, BodyIndexError, ValueError)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or EPHEM_FORCES_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('EPHEM_FORCES_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def _context(args: argparse.Namespace) -> EphemerisContext:
    return EphemerisContext(planets_path=args.ephemeris, asteroids_path=getattr(args, 'asteroids', None))


def _header_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print the ephemeris header (header subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    del parser
    try:
        with _context(args) as ctx:
            store = ctx.ephemeris()
            h = store.header
            print(f'File:              {store.path}')
            print(f'Version:           {h.version}')
            print(f'Begin (JD):        {h.begin:.1f}')
            print(f'End (JD):          {h.end:.1f}')
            print(f'Record step (d):   {h.step:g}')
            print(f'Records:           {store.record_count}')
            print(f'Record length (B): {h.record_length}')
            print(f'AU (km):           {h.au_km:.3f}')
            print(f'Earth/Moon ratio:  {h.earth_moon_ratio:.12f}')
            print(f'Constants:         {h.constant_count}')
            print(f'{"Slot":<24s}{"offset":>8s}{"ncf":>6s}{"niv":>6s}{"ncm":>6s}')
            for slot, name in enumerate(SLOT_NAMES):
                print(
                    f'{name:<24s}{h.offsets[slot]:>8d}{h.coefficients[slot]:>6d}'
                    f'{h.intervals[slot]:>6d}{h.components[slot]:>6d}'
                )
    except _ERRORS as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0


def _state_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print a body's state relative to a center (state subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    del parser
    try:
        target = Body.parse(args.body)
        center = Body.parse(args.center)
        with _context(args) as ctx:
            state = relative_state(ctx.ephemeris(), target, center, args.jd)
    except _ERRORS as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    pos = ' '.join(f'{v:24.16e}' for v in state.position)
    vel = ' '.join(f'{v:24.16e}' for v in state.velocity)
    print(f'{target.name.lower()} - {center.name.lower()} at JD {args.jd:.6f}')
    print(f'position (km):   {pos}')
    print(f'velocity (km/s): {vel}')
    return 0


def _accel_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print the acceleration on one test particle (accel subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    del parser
    particle = Particle(
        x=args.position[0],
        y=args.position[1],
        z=args.position[2],
        vx=args.velocity[0],
        vy=args.velocity[1],
        vz=args.velocity[2],
    )
    params = {'N_ephem': args.n_ephem, 'N_ast': args.n_ast, 'c': args.c}
    try:
        with _context(args) as ctx:
            computer = EphemerisForceComputer.from_context(ctx, params, G=args.G)
            computer.apply(args.jd, [particle])
    except _ERRORS as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    print(f'{particle.ax:24.16e} {particle.ay:24.16e} {particle.az:24.16e}')
    return 0


def main() -> int:
    """Entry point for ephem-forces CLI (header | state | accel).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='ephem-forces',
        description='Inspect JPL binary ephemerides and evaluate ephemeris forces.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    def _common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            '--ephemeris',
            type=str,
            default=None,
            help='Planetary ephemeris file; env: EPHEM_FORCES_PLANETS',
        )
        sub.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')

    header_parser = subparsers.add_parser('header', help='Print the ephemeris header')
    _common(header_parser)
    header_parser.set_defaults(func=_header_cmd)

    state_parser = subparsers.add_parser('state', help='Print a body state in km and km/s')
    _common(state_parser)
    state_parser.add_argument('--body', type=str, required=True, help='Target body (e.g. earth, moon, sun)')
    state_parser.add_argument('--center', type=str, default='barycenter', help='Center body')
    state_parser.add_argument('--jd', type=float, required=True, help='TDB Julian date')
    state_parser.set_defaults(func=_state_cmd)

    accel_parser = subparsers.add_parser('accel', help='Acceleration on one test particle (AU/day^2)')
    _common(accel_parser)
    accel_parser.add_argument(
        '--asteroids',
        type=str,
        default=None,
        help='Asteroid SPK kernel; env: EPHEM_FORCES_ASTEROIDS',
    )
    accel_parser.add_argument('--jd', type=float, required=True, help='TDB Julian date')
    accel_parser.add_argument(
        '--position', type=float, nargs=3, required=True, metavar=('X', 'Y', 'Z'), help='Barycentric AU'
    )
    accel_parser.add_argument(
        '--velocity',
        type=float,
        nargs=3,
        default=[0.0, 0.0, 0.0],
        metavar=('VX', 'VY', 'VZ'),
        help='Barycentric AU/day',
    )
    accel_parser.add_argument('--n-ephem', type=int, default=11, help='Major bodies to include (0-11)')
    accel_parser.add_argument('--n-ast', type=int, default=0, help='Asteroids to include (0-16)')
    accel_parser.add_argument(
        '--c', type=float, default=SPEED_OF_LIGHT_AU_PER_DAY, help='Speed of light (AU/day)'
    )
    accel_parser.add_argument('--G', type=float, default=GAUSS_K2, help='Gravitational constant')
    accel_parser.set_defaults(func=_accel_cmd)

    args = parser.parse_args()
    _configure_logging(verbose=args.verbose)
    return cast(int, args.func(parser, args))


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
