"""Memory-mapped JPL binary planetary ephemeris."""

from __future__ import annotations

import logging
import math
import mmap
import os
from pathlib import Path
from types import TracebackType

import numpy as np

from ephem_forces.constants import NUM_RESERVED_RECORDS
from ephem_forces.errors import EphemerisFileError, EpochOutOfRangeError
from ephem_forces.jpl.chebyshev import ChebyshevBlock
from ephem_forces.jpl.header import EphemerisHeader, parse_header

logger = logging.getLogger(__name__)

_COEFFICIENT_DTYPE = np.dtype('<f8')


class EphemerisStore:
    """Read-only view of one ephemeris file covering [header.begin, header.end].

    The whole file is mapped once; records are located by epoch and slot
    coefficients are copied out of the mapping on demand, so concurrent
    readers never share mutable state.
    """

    def __init__(self, path: str, header: EphemerisHeader, mapping: mmap.mmap, length: int) -> None:
        self._path = path
        self._header = header
        self._map: mmap.mmap | None = mapping
        self._length = length
        self._record_length = header.record_length

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> EphemerisStore:
        """Open, map, and parse an ephemeris file.

        Parameters:
            path: Path to a DE4xx binary file (e.g. linux_p1550p2650.430).

        Returns:
            Open EphemerisStore.

        Raises:
            EphemerisFileError: If the file cannot be opened or mapped, or
                its header is unreadable.
        """
        path_str = str(Path(path))
        try:
            with open(path_str, 'rb') as f:
                length = os.fstat(f.fileno()).st_size
                # The descriptor is not needed once the mapping exists.
                mapping = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as e:
            raise EphemerisFileError(f'Cannot map ephemeris file {path_str}: {e}') from e

        if hasattr(mmap, 'MADV_RANDOM'):
            try:
                mapping.madvise(mmap.MADV_RANDOM)
            except OSError as e:
                logger.debug('madvise(MADV_RANDOM) failed for %s: %s', path_str, e)

        try:
            header = parse_header(mapping)
        except EphemerisFileError:
            mapping.close()
            raise
        store = cls(path_str, header, mapping, length)
        if store.record_count < 1:
            mapping.close()
            raise EphemerisFileError(
                f'Ephemeris file {path_str} holds no data records '
                f'({length} bytes, record length {header.record_length})'
            )
        logger.info(
            'Mapped %s: version %d, JD %.1f to %.1f, %d records of %d bytes',
            path_str,
            header.version,
            header.begin,
            header.end,
            store.record_count,
            header.record_length,
        )
        return store

    @property
    def path(self) -> str:
        """Path the store was opened from."""
        return self._path

    @property
    def header(self) -> EphemerisHeader:
        """Parsed file header."""
        return self._header

    @property
    def length(self) -> int:
        """File size in bytes."""
        return self._length

    @property
    def record_count(self) -> int:
        """Number of data records after the reserved leading records."""
        return self._length // self._record_length - NUM_RESERVED_RECORDS

    @property
    def closed(self) -> bool:
        """True once close() has released the mapping."""
        return self._map is None

    def lookup(self, epoch: float) -> tuple[int, float]:
        """Locate the record covering an epoch.

        Parameters:
            epoch: TDB Julian date.

        Returns:
            Tuple of (byte offset of the record in the file, fractional time
            within the record).

        Raises:
            EpochOutOfRangeError: If epoch is outside [begin, end].
            EphemerisFileError: If the store is closed or the record lies
                beyond the end of the file.
        """
        if self._map is None:
            raise EphemerisFileError(f'Ephemeris file {self._path} is closed')
        h = self._header
        if not h.begin <= epoch <= h.end:
            raise EpochOutOfRangeError(epoch, h.begin, h.end)

        index = int((epoch - h.begin) / h.step)
        fraction = math.fmod(epoch - h.begin, h.step) / h.step
        if index >= self.record_count and index > 0 and fraction == 0.0:
            # Closing epoch of the file: end of the last record.
            index -= 1
            fraction = 1.0
        offset = (index + NUM_RESERVED_RECORDS) * self._record_length
        if offset + self._record_length > self._length:
            raise EphemerisFileError(
                f'Ephemeris file {self._path} is truncated: record {index} for JD {epoch!r} '
                f'ends past byte {self._length}'
            )
        return (offset, fraction)

    def block(self, record_offset: int, slot: int) -> ChebyshevBlock:
        """Copy one slot's coefficients out of a record.

        Parameters:
            record_offset: Byte offset returned by lookup().
            slot: Slot index (see constants.SLOT_*).

        Returns:
            ChebyshevBlock for the slot.
        """
        if self._map is None:
            raise EphemerisFileError(f'Ephemeris file {self._path} is closed')
        h = self._header
        start = record_offset + _COEFFICIENT_DTYPE.itemsize * h.offsets[slot]
        stop = start + _COEFFICIENT_DTYPE.itemsize * h.block_size(slot)
        values = np.frombuffer(self._map[start:stop], dtype=_COEFFICIENT_DTYPE)
        return ChebyshevBlock(
            values=values,
            components=h.components[slot],
            coefficients=h.coefficients[slot],
            intervals=h.intervals[slot],
        )

    def close(self) -> None:
        """Release the mapping. Further calls are no-ops."""
        if self._map is None:
            return
        self._map.close()
        self._map = None
        logger.debug('Unmapped %s', self._path)

    def __enter__(self) -> EphemerisStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
