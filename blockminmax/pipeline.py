"""
Gridding pipeline.

This module provides the BlockMinMax class, which sizes the lattice once and
then streams point records through the coordinate mapper into the cell
aggregator, plus ``grid_file``, which runs a complete file-to-file job.
"""

import sys
import time
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from tqdm import tqdm

from blockminmax import io
from blockminmax.aggregator import CellAggregator
from blockminmax.config import Config
from blockminmax.formatter import OutputFormatter
from blockminmax.grid import compute_lattice
from blockminmax.io import PointRecord
from blockminmax.mapper import make_mapper


class BlockMinMax:
    """
    Per-cell minimum/maximum gridding of a point stream.

    The lattice is allocated when the object is created; all configuration
    errors are therefore raised before any point is read.
    """

    def __init__(self, config: Optional[Union[Dict[str, Any], Config]] = None) -> None:
        """
        Initialize the gridder.

        Args:
            config: Configuration dictionary or Config object; must define grid.region
        """
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config(config)
        else:
            self.config = config

        self.verbose = self.config.get("system", "verbose")
        self.show_progress = self.config.get("system", "show_progress")
        self.report_every = self.config.get("system", "report_every")

        self._init_components()

        self.records_processed = 0
        self.process_time = 0.0

    def _init_components(self) -> None:
        """Size the lattice and create the mapper, aggregator and formatter."""
        self.region = self.config.region
        self.spacing = self.config.spacing

        self._log("region %.12g %.12g %.12g %.12g" % tuple(self.region))

        self.lattice = compute_lattice(self.region, self.spacing)
        self._log(f"{self.lattice.nx} columns by {self.lattice.ny} rows")

        aggregation = self.config.get("aggregation")
        self.mapper = make_mapper(aggregation["addressing"], self.region, self.spacing, self.lattice)
        self.formatter = OutputFormatter(self.mapper, self.config.get("output", "format"))
        self.aggregator = CellAggregator(
            self.lattice,
            mode=aggregation["mode"],
            update=aggregation["update"],
            keep_tokens=self.formatter.needs_tokens
        )
        self._log("initialised lattice")

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message, file=sys.stderr)

    def add_point(self, x: float, y: float, z: float, ztoken: Optional[str] = None) -> bool:
        """
        Map and aggregate a single point.

        Args:
            x, y: Point coordinates
            z: Value to aggregate
            ztoken: Verbatim text of z for legacy formatting

        Returns:
            True if the point changed the aggregate of its cell
        """
        return self.aggregator.add(self.mapper.locate(x, y), z, ztoken)

    def process_records(self, records: Iterable[PointRecord]) -> int:
        """
        Aggregate a stream of point records.

        Args:
            records: Iterable of PointRecord (or ``(x, y, z[, ztoken])`` tuples)

        Returns:
            Number of records consumed
        """
        start_time = time.time()

        iterator = tqdm(records, unit=" points") if self.show_progress else records

        count = 0
        for record in iterator:
            self.add_point(*record)
            count += 1
            if count % self.report_every == 0:
                self._log(f"{self.records_processed + count:,} lines")

        self.records_processed += count
        self.process_time += time.time() - start_time

        self._log(f"updated lattice with z{self.aggregator.mode}")
        return count

    def records(self) -> Iterator[Tuple[float, float, float]]:
        """Yield ``(x, y, z)`` for every occupied cell in row-major order."""
        return self.formatter.records(self.aggregator)

    def lines(self) -> Iterator[str]:
        """Yield the formatted output line of every occupied cell."""
        return self.formatter.lines(self.aggregator)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get run statistics.

        Returns:
            Dictionary with counts and timings
        """
        return {
            "nx": self.lattice.nx,
            "ny": self.lattice.ny,
            "records_processed": self.records_processed,
            "points_dropped": self.aggregator.points_dropped,
            "cells_occupied": self.aggregator.count,
            "process_time": self.process_time,
        }


def grid_file(input_file: str,
              output_file: Optional[str] = None,
              config: Optional[Union[Dict[str, Any], Config]] = None) -> Dict[str, Any]:
    """
    Grid an ``x y z`` file and write the occupied cells to an output file.

    Args:
        input_file: Path to the input point file
        output_file: Output path (default: ``<input>.min`` or ``<input>.max``)
        config: Configuration dictionary or Config object

    Returns:
        Dictionary with the output path and run statistics

    Raises:
        ConfigError: If the configuration is invalid (nothing is opened)
        ResourceError: If the input or output file cannot be opened; the output
            is not touched until the input has been read completely
    """
    start_time = time.time()

    gridder = BlockMinMax(config)

    if output_file is None:
        output_file = io.default_output_path(input_file, gridder.aggregator.mode)

    with io.open_input(input_file) as fin:
        gridder.process_records(io.iter_records(fin))

    # An existing output is only replaced once the whole input was read
    gridder._log(f"write {output_file}")
    with io.open_output(output_file) as fout:
        lines_written = io.write_lines(fout, gridder.lines())

    stats = gridder.get_stats()
    stats["lines_written"] = lines_written
    stats["total_time"] = time.time() - start_time

    return {
        "output_file": output_file,
        "stats": stats,
    }
