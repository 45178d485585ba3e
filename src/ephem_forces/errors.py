"""Exceptions raised by the ephemeris readers and queries."""

from __future__ import annotations


class EphemerisFileError(OSError):
    """Ephemeris or kernel file missing, unreadable, truncated, or closed."""


class EpochOutOfRangeError(ValueError):
    """Requested epoch lies outside the span covered by an ephemeris.

    begin and end are None when the source does not report its span (e.g. an
    SPK kernel without data for the epoch).
    """

    def __init__(
        self,
        epoch: float,
        begin: float | None = None,
        end: float | None = None,
        detail: str | None = None,
    ) -> None:
        if begin is not None and end is not None:
            message = f'Epoch {epoch!r} outside ephemeris range [{begin!r}, {end!r}]'
        else:
            message = f'Epoch {epoch!r} outside ephemeris coverage'
        if detail:
            message = f'{message}: {detail}'
        super().__init__(message)
        self.epoch = epoch
        self.begin = begin
        self.end = end


class BodyIndexError(IndexError):
    """Massive body or asteroid index outside its catalog."""
