"""
Unit tests for region parsing and lattice dimensions.

This module contains unit tests for the Grid Dimension Calculator.
"""

import unittest
import sys
import os

# Add parent directory to path to import blockminmax package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockminmax.errors import CapacityError, ConfigError
from blockminmax.grid import Lattice, Region, compute_lattice, make_region, parse_region


class TestComputeLattice(unittest.TestCase):
    """Test cases for lattice dimension calculation."""

    def test_unit_region(self):
        """Inclusive bounds give one more node than steps."""
        lattice = compute_lattice(Region(0.0, 2.0, 0.0, 2.0), 1.0)
        self.assertEqual(lattice, Lattice(3, 3))
        self.assertEqual(lattice.size, 9)

    def test_real_world_region(self):
        """Half-metre spacing over a LiDAR tile."""
        region = Region(1585520.5, 1587224.5, 5464422.5, 5467728.5)
        lattice = compute_lattice(region, 0.5)
        self.assertEqual(lattice.nx, 3409)
        self.assertEqual(lattice.ny, 6613)

    def test_step_count_rounding(self):
        """Fractional step counts round to the nearest integer, halves upward."""
        self.assertEqual(compute_lattice(Region(0.0, 2.5, 0.0, 1.0), 1.0), Lattice(4, 2))
        self.assertEqual(compute_lattice(Region(0.0, 2.4, 0.0, 1.0), 1.0), Lattice(3, 2))
        self.assertEqual(compute_lattice(Region(0.0, 2.6, 0.0, 1.0), 1.0), Lattice(4, 2))

    def test_spacing_larger_than_region(self):
        """A spacing wider than the region still yields a single node."""
        lattice = compute_lattice(Region(0.0, 1.0, 0.0, 1.0), 10.0)
        self.assertEqual(lattice, Lattice(1, 1))

    def test_dimensions_always_positive(self):
        """Every valid region and spacing yields nx >= 1 and ny >= 1."""
        for spacing in (1e-3, 0.1, 0.5, 1.0, 3.3, 1e6):
            for region in ((0, 1, 0, 1), (-5, 5, 100, 101), (1e6, 1e6 + 0.25, -1, 0)):
                lattice = compute_lattice(Region(*region), spacing)
                self.assertGreaterEqual(lattice.nx, 1)
                self.assertGreaterEqual(lattice.ny, 1)

    def test_invalid_region(self):
        """Non-positive extents are rejected."""
        with self.assertRaises(ConfigError):
            compute_lattice(Region(2.0, 0.0, 0.0, 2.0), 1.0)
        with self.assertRaises(ConfigError):
            compute_lattice(Region(0.0, 2.0, 1.0, 1.0), 1.0)
        with self.assertRaises(ConfigError):
            compute_lattice(Region(0.0, float('nan'), 0.0, 1.0), 1.0)

    def test_invalid_spacing(self):
        """Spacing must be finite and positive."""
        for spacing in (0.0, -1.0, float('nan'), float('inf')):
            with self.assertRaises(ConfigError):
                compute_lattice(Region(0.0, 2.0, 0.0, 2.0), spacing)

    def test_capacity_overflow(self):
        """A lattice too large to index raises CapacityError."""
        with self.assertRaises(CapacityError):
            compute_lattice(Region(0.0, 1e10, 0.0, 1e10), 0.1)

        # Step count overflows to infinity
        with self.assertRaises(CapacityError):
            compute_lattice(Region(0.0, 1e10, 0.0, 1.0), 1e-300)

    def test_capacity_error_is_config_error(self):
        """Callers handling ConfigError also catch capacity failures."""
        self.assertTrue(issubclass(CapacityError, ConfigError))


class TestParseRegion(unittest.TestCase):
    """Test cases for region string parsing."""

    def test_plain(self):
        self.assertEqual(parse_region("0/2/0/2"), Region(0.0, 2.0, 0.0, 2.0))

    def test_flag_prefixes(self):
        """The -R flag prefix is accepted in either case, with or without the dash."""
        expected = Region(1.0, 2.0, 3.0, 4.0)
        for text in ("-R1/2/3/4", "R1/2/3/4", "-r1/2/3/4", "r1/2/3/4"):
            self.assertEqual(parse_region(text), expected)

    def test_negative_bounds(self):
        self.assertEqual(parse_region("-R-10/10/-5/5"), Region(-10.0, 10.0, -5.0, 5.0))
        self.assertEqual(parse_region("-10/10/-5/5"), Region(-10.0, 10.0, -5.0, 5.0))

    def test_decimal_bounds(self):
        region = parse_region("1585520.5/1587224.5/5464422.5/5467728.5")
        self.assertEqual(region.xmin, 1585520.5)
        self.assertEqual(region.ymax, 5467728.5)
        self.assertEqual(region.width, 1704.0)
        self.assertEqual(region.height, 3306.0)

    def test_invalid(self):
        for text in ("", "0/2/0", "0/2/0/2/4", "a/b/c/d", "0/2/2/0", "-R"):
            with self.assertRaises(ConfigError):
                parse_region(text)

    def test_make_region_converts_to_float(self):
        region = make_region(0, 2, 0, 2)
        self.assertIsInstance(region.xmin, float)


if __name__ == "__main__":
    unittest.main()
