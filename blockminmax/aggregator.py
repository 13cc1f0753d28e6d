"""
Cell aggregation.

The CellAggregator owns the dense lattice: one float aggregate and one hit
flag per cell, stored in flat numpy arrays indexed by ``ix + nx * iy``. It
applies the configured min/max update rule for every mapped point and, when
legacy-compatible output is requested, keeps the verbatim z token of the
record that produced each stored aggregate.
"""

from typing import Iterator, Optional, Tuple

import numpy as np

from blockminmax.errors import ConfigError
from blockminmax.grid import Lattice

MODES = ("min", "max")
UPDATE_POLICIES = ("strict", "legacy")

OccupiedCell = Tuple[int, int, float, Optional[str]]


class CellAggregator:
    """
    Dense per-cell minimum/maximum accumulator.

    Update policies:

    * ``strict`` -- the first value routed to a cell is stored; later values
      replace it only if strictly smaller (min mode) or strictly larger (max
      mode).
    * ``legacy`` -- parity mode for the legacy Tcl tool. In min mode any
      different value replaces the stored one, so the result is the last
      value that differed rather than a true minimum. Max mode behaves like
      ``strict``: an equal value never replaces the stored one, so the token
      of the first record with the maximum is kept. Never use it for
      production output.
    """

    def __init__(self,
                 lattice: Lattice,
                 mode: str = "min",
                 update: str = "strict",
                 keep_tokens: bool = False) -> None:
        """
        Initialize the aggregator and allocate the lattice.

        Args:
            lattice: Lattice dimensions
            mode: ``"min"`` or ``"max"``
            update: ``"strict"`` or ``"legacy"``
            keep_tokens: Whether to retain the verbatim z token per cell
        """
        if mode not in MODES:
            raise ConfigError(f"Unknown aggregation mode '{mode}'; expected one of {MODES}")
        if update not in UPDATE_POLICIES:
            raise ConfigError(f"Unknown update policy '{update}'; expected one of {UPDATE_POLICIES}")

        self.lattice = lattice
        self.mode = mode
        self.update = update
        self.keep_tokens = keep_tokens
        self.find_min = mode == "min"
        self.sentinel = np.inf if self.find_min else -np.inf

        ncell = lattice.nx * lattice.ny
        self.values = np.full(ncell, self.sentinel, dtype=np.float64)
        self.hit = np.zeros(ncell, dtype=bool)
        self.tokens = np.empty(ncell, dtype=object) if keep_tokens else None

        # Counters for run statistics
        self.points_added = 0
        self.points_dropped = 0

    def _accepts(self, z: float, current: float) -> bool:
        if self.find_min:
            if self.update == "legacy":
                return z < current or z > current
            return z < current
        return z > current

    def add(self,
            index: Optional[Tuple[int, int]],
            z: float,
            token: Optional[str] = None) -> bool:
        """
        Route one value to a cell.

        Args:
            index: ``(ix, iy)`` from a mapper, or None for a discarded point
            z: Value to aggregate
            token: Verbatim text of z, stored when ``keep_tokens`` is set

        Returns:
            True if the stored aggregate of the cell changed
        """
        if index is None:
            self.points_dropped += 1
            return False

        self.points_added += 1
        ix, iy = index
        i = ix + self.lattice.nx * iy

        if self.hit[i] and not self._accepts(z, self.values[i]):
            return False

        # Value and token change together
        self.values[i] = z
        self.hit[i] = True
        if self.tokens is not None:
            self.tokens[i] = token
        return True

    def get(self, ix: int, iy: int) -> Optional[float]:
        """Return the aggregate of a cell, or None if it received no data."""
        i = ix + self.lattice.nx * iy
        if not self.hit[i]:
            return None
        return float(self.values[i])

    def token(self, ix: int, iy: int) -> Optional[str]:
        """Return the retained z token of a cell, or None."""
        if self.tokens is None:
            return None
        return self.tokens[ix + self.lattice.nx * iy]

    @property
    def count(self) -> int:
        """Number of cells that received data."""
        return int(np.count_nonzero(self.hit))

    def occupied(self) -> Iterator[OccupiedCell]:
        """
        Iterate over cells that received data in row-major order.

        Yields:
            ``(ix, iy, z, token)`` tuples; ``token`` is None unless tokens are kept
        """
        nx = self.lattice.nx
        for i in np.flatnonzero(self.hit):
            i = int(i)
            token = self.tokens[i] if self.tokens is not None else None
            yield i % nx, i // nx, float(self.values[i]), token

    def as_grid(self) -> np.ndarray:
        """
        Return the aggregates as a ``(ny, nx)`` array.

        Cells without data are NaN. Row ``iy`` of the array is lattice row ``iy``.
        """
        grid = self.values.copy()
        grid[~self.hit] = np.nan
        return grid.reshape(self.lattice.ny, self.lattice.nx)
