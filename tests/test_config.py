"""
Unit tests for configuration management.

This module contains unit tests for the Config class.
"""

import unittest
import json
import sys
import os
import tempfile

# Add parent directory to path to import blockminmax package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockminmax.config import Config
from blockminmax.errors import ConfigError, ResourceError
from blockminmax.grid import Region


class TestConfig(unittest.TestCase):
    """Test cases for Config."""

    def test_defaults(self):
        config = Config()
        self.assertIsNone(config.get("grid", "region"))
        self.assertEqual(config.spacing, 1.0)
        self.assertEqual(config.get("aggregation", "mode"), "min")
        self.assertEqual(config.get("aggregation", "addressing"), "nearest")
        self.assertEqual(config.get("aggregation", "update"), "strict")
        self.assertEqual(config.get("output", "format"), "compact")
        self.assertEqual(config.get("system", "report_every"), 1000000)

    def test_region_required(self):
        with self.assertRaises(ConfigError):
            Config().region

    def test_region_string_normalized(self):
        config = Config({"grid": {"region": "-R0/2/0/2"}})
        self.assertEqual(config.get("grid", "region"), [0.0, 2.0, 0.0, 2.0])
        self.assertEqual(config.region, Region(0.0, 2.0, 0.0, 2.0))

    def test_region_list(self):
        config = Config({"grid": {"region": [0, 10, -5, 5], "spacing": 2}})
        self.assertEqual(config.region, Region(0.0, 10.0, -5.0, 5.0))
        self.assertEqual(config.spacing, 2.0)

    def test_unknown_section_or_parameter(self):
        with self.assertRaises(ConfigError):
            Config({"smoothing": {"radius": 2}})
        with self.assertRaises(ConfigError):
            Config({"grid": {"resolution": 0.1}})
        with self.assertRaises(ConfigError):
            Config({"grid": 1.0})

    def test_invalid_values(self):
        invalid = [
            {"grid": {"region": "0/2/0"}},
            {"grid": {"region": [0, 1, 2]}},
            {"grid": {"region": ["a", 1, 0, 1]}},
            {"grid": {"spacing": 0}},
            {"grid": {"spacing": "1"}},
            {"aggregation": {"mode": "median"}},
            {"aggregation": {"addressing": "bilinear"}},
            {"aggregation": {"update": "first"}},
            {"output": {"format": "csv"}},
            {"system": {"show_progress": "yes"}},
            {"system": {"report_every": 0}},
        ]
        for config_dict in invalid:
            with self.assertRaises(ConfigError, msg=str(config_dict)):
                Config(config_dict)

    def test_set_and_rollback(self):
        config = Config()
        config.set("aggregation", "mode", "max")
        self.assertEqual(config.get("aggregation", "mode"), "max")

        with self.assertRaises(ConfigError):
            config.set("aggregation", "mode", "median")
        self.assertEqual(config.get("aggregation", "mode"), "max")

        with self.assertRaises(ConfigError):
            config.set("grid", "cells", 4)

    def test_get_section(self):
        section = Config().get("aggregation")
        self.assertEqual(set(section), {"mode", "addressing", "update"})

    def test_save_and_load(self):
        config = Config({
            "grid": {"region": "0/2/0/2", "spacing": 0.5},
            "aggregation": {"addressing": "gridline"},
        })
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            config.save(path)
            loaded = Config.load(path)

        self.assertEqual(loaded.to_dict(), config.to_dict())
        self.assertEqual(json.loads(str(loaded))["aggregation"]["addressing"], "gridline")

    def test_load_errors(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ResourceError):
                Config.load(os.path.join(tmpdir, "missing.json"))

            bad = os.path.join(tmpdir, "bad.json")
            with open(bad, 'w') as f:
                f.write("{not json")
            with self.assertRaises(ConfigError):
                Config.load(bad)

            listing = os.path.join(tmpdir, "list.json")
            with open(listing, 'w') as f:
                f.write("[1, 2]")
            with self.assertRaises(ConfigError):
                Config.load(listing)

    def test_to_dict_is_a_copy(self):
        config = Config()
        d = config.to_dict()
        d["grid"]["spacing"] = 99.0
        self.assertEqual(config.spacing, 1.0)


if __name__ == "__main__":
    unittest.main()
