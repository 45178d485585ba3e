"""Tests for body resolution (Earth/Moon composition, barycenter, relative states)."""

from __future__ import annotations

import numpy as np
import pytest

from synthetic import BEGIN, EMRAT, END, STEP, SyntheticEphemeris
from ephem_forces.constants import SLOT_EMB, SLOT_JUPITER, SLOT_MOON, SLOT_SUN
from ephem_forces.errors import EpochOutOfRangeError
from ephem_forces.jpl.bodies import RESOLVERS, Body, BodyResolver, relative_state
from ephem_forces.jpl.store import EphemerisStore

EPOCHS = (BEGIN, BEGIN + 5.25, BEGIN + STEP + 0.5, BEGIN + 3 * STEP + 20.0, END)


def test_parse_body_names() -> None:
    """Body names parse case-insensitively."""
    assert Body.parse('earth') is Body.EARTH
    assert Body.parse(' EMB ') is Body.EMB
    assert Body.parse('Barycenter') is Body.BARYCENTER
    with pytest.raises(ValueError, match='Unknown body'):
        Body.parse('vulcan')


def test_every_body_has_a_resolver() -> None:
    """The dispatch table covers the whole enumeration."""
    assert set(RESOLVERS) == set(Body)


def test_resolver_interface_is_not_instantiable() -> None:
    """BodyResolver only describes the interface; every table entry implements resolve()."""
    with pytest.raises(TypeError):
        BodyResolver()
    for resolver in RESOLVERS.values():
        assert type(resolver).resolve is not BodyResolver.resolve


@pytest.mark.parametrize('epoch', EPOCHS)
def test_barycenter_is_zero(synthetic_ephemeris: SyntheticEphemeris, epoch: float) -> None:
    """The barycenter has zero position and velocity everywhere in range."""
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        state = relative_state(store, Body.BARYCENTER, Body.BARYCENTER, epoch)
    assert np.all(state.position == 0.0)
    assert np.all(state.velocity == 0.0)
    assert state.epoch == epoch


@pytest.mark.parametrize(('body', 'slot'), [(Body.SUN, SLOT_SUN), (Body.JUPITER, SLOT_JUPITER), (Body.EMB, SLOT_EMB)])
def test_slot_bodies(synthetic_ephemeris: SyntheticEphemeris, body: Body, slot: int) -> None:
    """Slot bodies come straight from their Chebyshev block."""
    epoch = BEGIN + 40.125
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        state = relative_state(store, body, Body.BARYCENTER, epoch)
    np.testing.assert_allclose(state.position, synthetic_ephemeris.slot_position(slot, epoch), rtol=1e-12)
    np.testing.assert_allclose(state.velocity, synthetic_ephemeris.slot_velocity(slot, epoch), rtol=1e-9)


@pytest.mark.parametrize('epoch', EPOCHS)
def test_earth_and_moon_recombine_to_emb(synthetic_ephemeris: SyntheticEphemeris, epoch: float) -> None:
    """Earth/(1+mu) weighting of Earth and Moon reproduces the Earth-Moon barycenter."""
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        earth = relative_state(store, Body.EARTH, Body.BARYCENTER, epoch)
        moon = relative_state(store, Body.MOON, Body.BARYCENTER, epoch)
        emb = relative_state(store, Body.EMB, Body.BARYCENTER, epoch)
    w_earth = EMRAT / (1.0 + EMRAT)
    w_moon = 1.0 / (1.0 + EMRAT)
    np.testing.assert_allclose(w_earth * earth.position + w_moon * moon.position, emb.position, rtol=1e-12)
    np.testing.assert_allclose(w_earth * earth.velocity + w_moon * moon.velocity, emb.velocity, rtol=1e-9)


def test_moon_minus_earth_is_geocentric_moon(synthetic_ephemeris: SyntheticEphemeris) -> None:
    """Moon relative to Earth equals the stored geocentric lunar vector."""
    epoch = BEGIN + 77.7
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        state = relative_state(store, Body.MOON, Body.EARTH, epoch)
    np.testing.assert_allclose(state.position, synthetic_ephemeris.slot_position(SLOT_MOON, epoch), rtol=1e-9)


def test_relative_to_non_barycenter_center(synthetic_ephemeris: SyntheticEphemeris) -> None:
    """Center is subtracted from target."""
    epoch = BEGIN + 12.0
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        state = relative_state(store, Body.JUPITER, Body.SUN, epoch)
    expected = np.array(synthetic_ephemeris.slot_position(SLOT_JUPITER, epoch)) - np.array(
        synthetic_ephemeris.slot_position(SLOT_SUN, epoch)
    )
    np.testing.assert_allclose(state.position, expected, rtol=1e-12)


@pytest.mark.parametrize('body', list(Body))
def test_out_of_range_for_every_body(synthetic_ephemeris: SyntheticEphemeris, body: Body) -> None:
    """No body returns a value outside the file's span."""
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        for epoch in (BEGIN - 0.5, END + 0.5):
            with pytest.raises(EpochOutOfRangeError):
                relative_state(store, body, Body.BARYCENTER, epoch)


def test_repeated_queries_are_identical(synthetic_ephemeris: SyntheticEphemeris) -> None:
    """Two lookups of the same body and epoch give bit-identical states."""
    epoch = BEGIN + 63.99
    with EphemerisStore.open(synthetic_ephemeris.path) as store:
        first = relative_state(store, Body.EARTH, Body.BARYCENTER, epoch)
        second = relative_state(store, Body.EARTH, Body.BARYCENTER, epoch)
    assert np.array_equal(first.position, second.position)
    assert np.array_equal(first.velocity, second.velocity)
