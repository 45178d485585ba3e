"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from synthetic import SyntheticEphemeris, write_synthetic_ephemeris


@pytest.fixture
def synthetic_ephemeris(tmp_path: Path) -> SyntheticEphemeris:
    """A four-record synthetic ephemeris spanning [BEGIN, END]."""
    return write_synthetic_ephemeris(tmp_path / 'linux_test.430')
