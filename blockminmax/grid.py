"""
Region and lattice geometry.

This module holds the immutable description of the region being gridded and
the Grid Dimension Calculator, which derives the number of lattice nodes along
each axis from the region extents and the grid spacing.
"""

import math
import re
from typing import NamedTuple, Union

import numpy as np

from blockminmax.errors import ConfigError, CapacityError
from blockminmax.functional import round_half_away

# Largest number of cells a flat numpy index can address
MAX_CELLS = int(np.iinfo(np.intp).max)

_REGION_PREFIX = re.compile(r'^-?[Rr]')


class Region(NamedTuple):
    """Rectangular region ``(xmin, xmax, ymin, ymax)``; bounds are inclusive."""
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin


class Lattice(NamedTuple):
    """Lattice size in nodes along x (``nx``) and y (``ny``)."""
    nx: int
    ny: int

    @property
    def size(self) -> int:
        return self.nx * self.ny


def make_region(xmin: float, xmax: float, ymin: float, ymax: float) -> Region:
    """
    Build a validated region.

    Args:
        xmin, xmax, ymin, ymax: Region bounds

    Returns:
        Region with float bounds

    Raises:
        ConfigError: If a bound is not finite or an extent is not positive
    """
    bounds = tuple(float(v) for v in (xmin, xmax, ymin, ymax))
    if not all(math.isfinite(v) for v in bounds):
        raise ConfigError(f"Region bounds must be finite, got {bounds}")

    region = Region(*bounds)
    if not (region.xmax > region.xmin and region.ymax > region.ymin):
        raise ConfigError("Invalid region; require xmax > xmin and ymax > ymin")
    return region


def parse_region(text: str) -> Region:
    """
    Parse a region string of the form ``xmin/xmax/ymin/ymax``.

    A leading ``-R`` or ``R`` (either case) is accepted and ignored, so the
    value of a ``-R`` command-line flag can be passed through unchanged.

    Args:
        text: Region string

    Returns:
        Validated Region

    Raises:
        ConfigError: If the string is not four numbers separated by '/'
    """
    if not text:
        raise ConfigError("Empty region string")

    body = _REGION_PREFIX.sub('', text.strip(), count=1)
    fields = body.split('/')
    if len(fields) != 4:
        raise ConfigError(f"Invalid region '{text}'; expected xmin/xmax/ymin/ymax")

    try:
        values = [float(f) for f in fields]
    except ValueError:
        raise ConfigError(f"Invalid region '{text}'; bounds must be numbers") from None

    return make_region(*values)


def validate_spacing(inc: Union[int, float]) -> float:
    """Return the spacing as a float, raising ConfigError unless it is finite and positive."""
    inc = float(inc)
    if not (math.isfinite(inc) and inc > 0):
        raise ConfigError(f"Grid spacing must be > 0, got {inc}")
    return inc


def _node_count(extent: float, inc: float, axis: str) -> int:
    steps = extent / inc
    if not math.isfinite(steps) or steps >= MAX_CELLS:
        raise CapacityError(f"Too many grid nodes along {axis} ({steps:.6g} steps)")

    n = round_half_away(steps) + 1
    if n < 1:
        raise ConfigError(f"Computed grid dimension along {axis} is invalid ({n})")
    return n


def compute_lattice(region: Region, inc: float) -> Lattice:
    """
    Derive the lattice dimensions for a region and spacing.

    ``nx = round((xmax - xmin) / inc) + 1`` and likewise for ``ny``, rounding
    half away from zero. The same lattice is used by every addressing policy.

    Args:
        region: Region to cover
        inc: Grid spacing

    Returns:
        Lattice with ``nx >= 1`` and ``ny >= 1``

    Raises:
        ConfigError: If the region or spacing is invalid
        CapacityError: If ``nx * ny`` cannot be indexed on this platform
    """
    region = make_region(*region)
    inc = validate_spacing(inc)

    nx = _node_count(region.width, inc, "x")
    ny = _node_count(region.height, inc, "y")

    if nx > MAX_CELLS // ny:
        raise CapacityError(f"Grid size too large (overflow): {nx} x {ny} cells")

    return Lattice(nx, ny)
