"""
blockminmax: per-cell minimum/maximum gridding of scattered x y z points.

This package bins a stream of 3-D points onto a regular 2-D lattice and reports
the minimum (or maximum) z of every occupied cell. Its snapping, tie-breaking
and formatting options reproduce two legacy tools so results can be diffed
against them.
"""

from blockminmax.aggregator import CellAggregator
from blockminmax.config import Config
from blockminmax.errors import (
    BlockMinMaxError,
    CapacityError,
    ConfigError,
    MalformedRecord,
    ResourceError
)
from blockminmax.formatter import OutputFormatter
from blockminmax.grid import Lattice, Region, compute_lattice, parse_region
from blockminmax.mapper import GridlineMapper, NearestMapper, TieLowMapper, make_mapper
from blockminmax.pipeline import BlockMinMax, grid_file

__all__ = [
    'BlockMinMax',
    'grid_file',
    'CellAggregator',
    'OutputFormatter',
    'Config',
    'Region',
    'Lattice',
    'compute_lattice',
    'parse_region',
    'make_mapper',
    'NearestMapper',
    'TieLowMapper',
    'GridlineMapper',
    'BlockMinMaxError',
    'ConfigError',
    'CapacityError',
    'ResourceError',
    'MalformedRecord'
]

__version__ = '0.1.0'
