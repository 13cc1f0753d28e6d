"""
Configuration management for blockminmax.

This module provides configuration management for a gridding run, including
default parameters, validation, and loading/saving configurations as JSON.
"""

import json
from typing import Any, Dict, Optional

from blockminmax.aggregator import MODES, UPDATE_POLICIES
from blockminmax.errors import ConfigError, ResourceError
from blockminmax.formatter import FORMATS
from blockminmax.grid import Region, make_region, parse_region, validate_spacing
from blockminmax.mapper import ADDRESSING


class Config:
    """
    Configuration manager for blockminmax.

    This class manages configuration parameters for a gridding run, providing
    default values, validation, and loading/saving functionality.
    """

    # Default configuration parameters
    DEFAULT_CONFIG = {
        # Region and spacing of the lattice
        "grid": {
            "region": None,               # [xmin, xmax, ymin, ymax]; required before a run
            "spacing": 1.0,               # Distance between lattice nodes
        },

        # How points are snapped and combined
        "aggregation": {
            "mode": "min",                # "min" or "max"
            "addressing": "nearest",      # "nearest", "tie-low" or "gridline"
            "update": "strict",           # "strict" or "legacy" (parity testing only)
        },

        # Output text layout
        "output": {
            "format": "compact",          # "compact", "legacy" or "gmt"
        },

        # System parameters
        "system": {
            "show_progress": False,       # Whether to show a progress bar
            "verbose": False,             # Whether to print diagnostics to stderr
            "report_every": 1000000,      # Records between progress messages
        }
    }

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_dict: Optional dictionary with configuration parameters
        """
        self.config = self._deep_copy_dict(self.DEFAULT_CONFIG)

        if config_dict is not None:
            self._update_config(config_dict)

        self._validate_config()

    def _deep_copy_dict(self, d: Dict[str, Any]) -> Dict[str, Any]:
        """Create a deep copy of a dictionary."""
        return json.loads(json.dumps(d))

    def _update_config(self, config_dict: Dict[str, Any]) -> None:
        """
        Update configuration with provided dictionary.

        Args:
            config_dict: Dictionary with configuration parameters to update
        """
        for section, params in config_dict.items():
            if section not in self.config:
                raise ConfigError(f"Unknown section '{section}'")
            if not isinstance(params, dict):
                raise ConfigError(f"Section '{section}' should be a dictionary")
            for key, value in params.items():
                if key not in self.config[section]:
                    raise ConfigError(f"Unknown parameter '{key}' in section '{section}'")
                self.config[section][key] = value

    def _validate_config(self) -> None:
        """Validate configuration parameters, normalizing the region to a list of floats."""
        grid = self.config["grid"]
        region = grid["region"]
        if region is not None:
            if isinstance(region, str):
                region = parse_region(region)
            elif isinstance(region, (list, tuple)) and len(region) == 4:
                try:
                    bounds = [float(v) for v in region]
                except (TypeError, ValueError):
                    raise ConfigError(f"Region bounds must be numbers, got {region}") from None
                region = make_region(*bounds)
            else:
                raise ConfigError("Region must be 'xmin/xmax/ymin/ymax' or a list of four numbers")
            grid["region"] = list(region)

        if isinstance(grid["spacing"], bool) or not isinstance(grid["spacing"], (int, float)):
            raise ConfigError("Grid spacing must be a number")
        grid["spacing"] = validate_spacing(grid["spacing"])

        aggregation = self.config["aggregation"]
        if aggregation["mode"] not in MODES:
            raise ConfigError(f"Aggregation mode must be one of {MODES}")
        if aggregation["addressing"] not in ADDRESSING:
            raise ConfigError(f"Addressing policy must be one of {sorted(ADDRESSING)}")
        if aggregation["update"] not in UPDATE_POLICIES:
            raise ConfigError(f"Update policy must be one of {UPDATE_POLICIES}")

        if self.config["output"]["format"] not in FORMATS:
            raise ConfigError(f"Output format must be one of {FORMATS}")

        system = self.config["system"]
        if not isinstance(system["show_progress"], bool):
            raise ConfigError("Show progress must be a boolean")
        if not isinstance(system["verbose"], bool):
            raise ConfigError("Verbose must be a boolean")
        report_every = system["report_every"]
        if isinstance(report_every, bool) or not isinstance(report_every, int) or report_every <= 0:
            raise ConfigError("Report interval must be a positive integer")

    @property
    def region(self) -> Region:
        """
        The configured region.

        Raises:
            ConfigError: If no region has been set
        """
        region = self.config["grid"]["region"]
        if region is None:
            raise ConfigError("No region configured; set grid.region to xmin/xmax/ymin/ymax")
        return Region(*region)

    @property
    def spacing(self) -> float:
        return self.config["grid"]["spacing"]

    def get(self, section: str, param: Optional[str] = None) -> Any:
        """
        Get configuration parameter(s).

        Args:
            section: Configuration section
            param: Optional parameter name within section

        Returns:
            Configuration parameter value or section dictionary
        """
        if section not in self.config:
            raise ConfigError(f"Unknown section '{section}'")

        if param is None:
            return self.config[section]

        if param not in self.config[section]:
            raise ConfigError(f"Unknown parameter '{param}' in section '{section}'")

        return self.config[section][param]

    def set(self, section: str, param: str, value: Any) -> None:
        """
        Set configuration parameter.

        Args:
            section: Configuration section
            param: Parameter name within section
            value: Parameter value
        """
        if section not in self.config:
            raise ConfigError(f"Unknown section '{section}'")

        if param not in self.config[section]:
            raise ConfigError(f"Unknown parameter '{param}' in section '{section}'")

        previous = self.config[section][param]
        self.config[section][param] = value

        # Roll back so a rejected value leaves the configuration usable
        try:
            self._validate_config()
        except ConfigError:
            self.config[section][param] = previous
            raise

    def save(self, filepath: str) -> None:
        """
        Save configuration to file.

        Args:
            filepath: Path to save configuration file
        """
        try:
            with open(filepath, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            raise ResourceError(f"Failed to write configuration file '{filepath}': {e}") from e

    @classmethod
    def load(cls, filepath: str) -> 'Config':
        """
        Load configuration from file.

        Args:
            filepath: Path to configuration file

        Returns:
            Config object with loaded configuration
        """
        try:
            with open(filepath, 'r') as f:
                config_dict = json.load(f)
        except OSError as e:
            raise ResourceError(f"Failed to open configuration file '{filepath}': {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Configuration file '{filepath}' is not valid JSON: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigError(f"Configuration file '{filepath}' must contain a JSON object")

        return cls(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary with configuration parameters
        """
        return self._deep_copy_dict(self.config)

    def __str__(self) -> str:
        """String representation of configuration."""
        return json.dumps(self.config, indent=2)
