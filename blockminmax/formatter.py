"""
Output formatting.

Occupied cells are written as ``x y z`` lines in the row-major order produced
by the aggregator. Three formatting policies are supported:

* ``compact`` -- ``%.10g`` for all three fields
* ``legacy``  -- x and y with one fractional digit, z as the verbatim token
  of the input record that determined the stored aggregate
* ``gmt``     -- x and y with one fractional digit, z with ``%.10g``; the
  layout of the GMT-style reference runs
"""

from typing import Iterator, Optional, Tuple

from blockminmax.aggregator import CellAggregator
from blockminmax.errors import ConfigError
from blockminmax.mapper import CoordinateMapper

FORMATS = ("compact", "legacy", "gmt")


def format_compact(x: float, y: float, z: float) -> str:
    """Render a triplet with about ten significant digits per field."""
    return "%.10g %.10g %.10g" % (x, y, z)


def format_legacy(x: float, y: float, z: float, token: Optional[str] = None) -> str:
    """Render a triplet the way the legacy Tcl tool prints it."""
    # Cells fed through the API without a token fall back to the numeric value
    ztext = token if token is not None else "%.10g" % z
    return "%.1f %.1f %s" % (x, y, ztext)


def format_gmt(x: float, y: float, z: float) -> str:
    return "%.1f %.1f %.10g" % (x, y, z)


class OutputFormatter:
    """Walks an aggregator and renders its occupied cells as text lines."""

    def __init__(self, mapper: CoordinateMapper, fmt: str = "compact") -> None:
        if fmt not in FORMATS:
            raise ConfigError(f"Unknown output format '{fmt}'; expected one of {FORMATS}")
        self.mapper = mapper
        self.fmt = fmt

    @property
    def needs_tokens(self) -> bool:
        """Whether the aggregator must retain verbatim z tokens."""
        return self.fmt == "legacy"

    def records(self, aggregator: CellAggregator) -> Iterator[Tuple[float, float, float]]:
        """Yield ``(x, y, z)`` node coordinates and aggregates of occupied cells."""
        for ix, iy, z, _ in aggregator.occupied():
            x, y = self.mapper.node(ix, iy)
            yield x, y, z

    def lines(self, aggregator: CellAggregator) -> Iterator[str]:
        """Yield one formatted line (without newline) per occupied cell."""
        for ix, iy, z, token in aggregator.occupied():
            x, y = self.mapper.node(ix, iy)
            if self.fmt == "legacy":
                yield format_legacy(x, y, z, token)
            elif self.fmt == "gmt":
                yield format_gmt(x, y, z)
            else:
                yield format_compact(x, y, z)
