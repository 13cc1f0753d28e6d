"""
Exception hierarchy for blockminmax.

Fatal conditions (configuration, capacity, file access) are raised by the library
and turned into an exit status by the command-line interface. Malformed input
records are not fatal: the reader catches them and skips the line.
"""


class BlockMinMaxError(Exception):
    """Base class for all blockminmax errors."""


class ConfigError(BlockMinMaxError, ValueError):
    """Invalid region, spacing, policy name or configuration parameter."""


class CapacityError(ConfigError):
    """The lattice has more cells than the platform can index."""


class ResourceError(BlockMinMaxError):
    """An input or output file could not be opened; the OSError is chained as the cause."""


class MalformedRecord(BlockMinMaxError, ValueError):
    """A line that does not start with three numeric tokens."""
