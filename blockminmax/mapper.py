"""
Coordinate mappers.

A mapper converts a continuous point ``(x, y)`` into the integer index
``(ix, iy)`` of the lattice cell it belongs to, or ``None`` when the point must
be discarded. Three interchangeable addressing policies are provided:

* ``nearest``  -- round half away from zero, clamp into the lattice (default)
* ``tie-low``  -- nearest node with ties toward the smaller coordinate, clamp
* ``gridline`` -- gridline registration with an inverted row axis; points that
  fall outside the lattice are rejected instead of clamped

Mappers are pure: they hold only the immutable region, spacing and lattice
size, and never change after construction.
"""

import math
from typing import Dict, Optional, Tuple, Type

from blockminmax.errors import ConfigError
from blockminmax.functional import round_half_away, round_half_down, round_tie_low, snap_clamped
from blockminmax.grid import Lattice, Region, compute_lattice, make_region, validate_spacing

CellIndex = Tuple[int, int]


class CoordinateMapper:
    """
    Base class for addressing policies.

    Subclasses implement ``locate`` and, where their node layout differs from
    the origin-anchored one, ``node``.
    """

    name = None
    clamped = True

    def __init__(self,
                 region: Region,
                 inc: float,
                 lattice: Optional[Lattice] = None) -> None:
        """
        Initialize the mapper.

        Args:
            region: Region being gridded
            inc: Grid spacing
            lattice: Precomputed lattice dimensions (derived from region and inc if omitted)
        """
        self.region = make_region(*region)
        self.inc = validate_spacing(inc)
        self.lattice = lattice if lattice is not None else compute_lattice(self.region, self.inc)

    def locate(self, x: float, y: float) -> Optional[CellIndex]:
        """
        Map a point to a cell index.

        Args:
            x: Point x coordinate
            y: Point y coordinate

        Returns:
            ``(ix, iy)`` with ``0 <= ix < nx`` and ``0 <= iy < ny``, or None if
            the point is discarded
        """
        raise NotImplementedError

    def node(self, ix: int, iy: int) -> Tuple[float, float]:
        """Return the coordinates of the lattice node for a cell index."""
        return (self.region.xmin + ix * self.inc,
                self.region.ymin + iy * self.inc)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(region={tuple(self.region)}, inc={self.inc}, "
                f"nx={self.lattice.nx}, ny={self.lattice.ny})")


class NearestMapper(CoordinateMapper):
    """Nearest node, ties away from zero, indices clamped into the lattice."""

    name = "nearest"

    def locate(self, x: float, y: float) -> Optional[CellIndex]:
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        tx = (x - self.region.xmin) / self.inc
        ty = (y - self.region.ymin) / self.inc
        return (snap_clamped(tx, self.lattice.nx, round_half_away),
                snap_clamped(ty, self.lattice.ny, round_half_away))


class TieLowMapper(CoordinateMapper):
    """
    Nearest node with ties toward the smaller coordinate, clamped.

    Equivalent to a binary nearest-value search over the node list
    ``xmin, xmin + inc, xmin + 2*inc, ...`` that keeps the lower node on equal
    distances. The equivalence holds only for uniformly spaced nodes anchored
    at the region origin.
    """

    name = "tie-low"

    def locate(self, x: float, y: float) -> Optional[CellIndex]:
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        tx = (x - self.region.xmin) / self.inc
        ty = (y - self.region.ymin) / self.inc
        return (snap_clamped(tx, self.lattice.nx, round_tie_low),
                snap_clamped(ty, self.lattice.ny, round_tie_low))


class GridlineMapper(CoordinateMapper):
    """
    Gridline registration with rejection of out-of-range points.

    Rows count downward from ``ymax``: row 0 is the top edge of the region.
    Exact half-spacing offsets resolve to the gridline with the smaller
    coordinate on both axes.
    """

    name = "gridline"
    clamped = False

    def locate(self, x: float, y: float) -> Optional[CellIndex]:
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        tx = (x - self.region.xmin) / self.inc
        ty = (y - self.region.ymin) / self.inc
        # An overflowed offset lies outside the lattice
        if math.isinf(tx) or math.isinf(ty):
            return None
        col = round_half_down(tx)
        row = (self.lattice.ny - 1) - round_half_down(ty)
        if 0 <= col < self.lattice.nx and 0 <= row < self.lattice.ny:
            return col, row
        return None

    def node(self, ix: int, iy: int) -> Tuple[float, float]:
        return (self.region.xmin + ix * self.inc,
                self.region.ymax - iy * self.inc)


ADDRESSING: Dict[str, Type[CoordinateMapper]] = {
    NearestMapper.name: NearestMapper,
    TieLowMapper.name: TieLowMapper,
    GridlineMapper.name: GridlineMapper,
}


def make_mapper(addressing: str,
                region: Region,
                inc: float,
                lattice: Optional[Lattice] = None) -> CoordinateMapper:
    """
    Create the mapper for an addressing policy.

    Args:
        addressing: One of ``"nearest"``, ``"tie-low"``, ``"gridline"``
        region: Region being gridded
        inc: Grid spacing
        lattice: Optional precomputed lattice

    Returns:
        CoordinateMapper instance

    Raises:
        ConfigError: If the addressing policy is unknown
    """
    try:
        cls = ADDRESSING[addressing]
    except KeyError:
        raise ConfigError(
            f"Unknown addressing policy '{addressing}'; expected one of {sorted(ADDRESSING)}"
        ) from None
    return cls(region, inc, lattice)
