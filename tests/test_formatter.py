"""Unit tests for output formatting."""

import unittest
import sys
import os

# Add parent directory to path to import blockminmax package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockminmax.aggregator import CellAggregator
from blockminmax.errors import ConfigError
from blockminmax.formatter import OutputFormatter, format_compact, format_gmt, format_legacy
from blockminmax.grid import Region
from blockminmax.mapper import GridlineMapper, NearestMapper


class TestFormatFunctions(unittest.TestCase):
    """Test cases for single-line formatting."""

    def test_compact(self):
        self.assertEqual(format_compact(0.0, 0.0, 5.0), "0 0 5")
        self.assertEqual(format_compact(1585520.5, 5464422.5, 123.456789012345),
                         "1585520.5 5464422.5 123.456789")
        self.assertEqual(format_compact(-2.5, 1e-7, 1e12), "-2.5 1e-07 1e+12")

    def test_legacy(self):
        self.assertEqual(format_legacy(1.0, 0.0, 7.0, "7"), "1.0 0.0 7")
        self.assertEqual(format_legacy(1585520.5, 5464422.0, 9.0, "9.000"),
                         "1585520.5 5464422.0 9.000")

    def test_legacy_without_token(self):
        self.assertEqual(format_legacy(2.0, 2.0, 9.25), "2.0 2.0 9.25")

    def test_gmt(self):
        self.assertEqual(format_gmt(1.0, 0.0, 7.0), "1.0 0.0 7")
        self.assertEqual(format_gmt(1585520.5, 5464422.0, 123.456789012345),
                         "1585520.5 5464422.0 123.456789")


class TestOutputFormatter(unittest.TestCase):
    """Test cases for the OutputFormatter."""

    def setUp(self):
        """Set up test fixtures."""
        self.region = Region(0.0, 2.0, 0.0, 2.0)

    def test_compact_lines(self):
        mapper = NearestMapper(self.region, 1.0)
        formatter = OutputFormatter(mapper, "compact")
        agg = CellAggregator(mapper.lattice)
        agg.add((1, 0), 7.0)
        agg.add((0, 0), 5.0)

        self.assertFalse(formatter.needs_tokens)
        self.assertEqual(list(formatter.lines(agg)), ["0 0 5", "1 0 7"])
        self.assertEqual(list(formatter.records(agg)), [(0.0, 0.0, 5.0), (1.0, 0.0, 7.0)])

    def test_legacy_lines_use_tokens(self):
        mapper = NearestMapper(self.region, 1.0)
        formatter = OutputFormatter(mapper, "legacy")
        agg = CellAggregator(mapper.lattice, keep_tokens=formatter.needs_tokens)
        agg.add((2, 2), 9.0, "9.00")

        self.assertTrue(formatter.needs_tokens)
        self.assertEqual(list(formatter.lines(agg)), ["2.0 2.0 9.00"])

    def test_gridline_node_reconstruction(self):
        mapper = GridlineMapper(self.region, 1.0)
        formatter = OutputFormatter(mapper, "compact")
        agg = CellAggregator(mapper.lattice)
        agg.add(mapper.locate(2.0, 2.0), 9.0)
        agg.add(mapper.locate(0.2, 0.1), 5.0)

        # Row 0 (top) is walked first
        self.assertEqual(list(formatter.lines(agg)), ["2 2 9", "0 0 5"])

    def test_gmt_lines(self):
        mapper = GridlineMapper(self.region, 1.0)
        formatter = OutputFormatter(mapper, "gmt")
        agg = CellAggregator(mapper.lattice, keep_tokens=formatter.needs_tokens)
        agg.add(mapper.locate(2.0, 2.0), 9.0)
        agg.add(mapper.locate(1.49, 0.49), 7.5)

        self.assertFalse(formatter.needs_tokens)
        self.assertEqual(list(formatter.lines(agg)), ["2.0 2.0 9", "1.0 0.0 7.5"])

    def test_unknown_format(self):
        with self.assertRaises(ConfigError):
            OutputFormatter(NearestMapper(self.region, 1.0), "csv")


if __name__ == "__main__":
    unittest.main()
