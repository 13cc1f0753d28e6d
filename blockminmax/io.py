"""Input/output functions for blockminmax."""

import math
import os
import re
from typing import IO, Iterable, Iterator, NamedTuple, Optional

from blockminmax.errors import MalformedRecord, ResourceError

# Plain decimal numbers only; float() alone would also accept '1_000'
_NUMBER = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z')

# Undecodable bytes survive a read/write round trip unchanged
ENCODING = "utf-8"
ERRORS = "surrogateescape"


class PointRecord(NamedTuple):
    """One parsed input point; ``ztoken`` is the z field exactly as written."""
    x: float
    y: float
    z: float
    ztoken: Optional[str] = None


def _parse_number(token: str) -> float:
    if not _NUMBER.match(token):
        raise MalformedRecord(f"Not a number: {token!r}")
    value = float(token)
    if not math.isfinite(value):
        raise MalformedRecord(f"Number out of range: {token!r}")
    return value


def is_skippable(line: str) -> bool:
    """Return True for blank lines and ``#`` comment lines."""
    stripped = line.lstrip()
    return not stripped or stripped.startswith('#')


def parse_record(line: str) -> PointRecord:
    """
    Parse an ``x y z`` line.

    Only the first three whitespace-separated tokens are used; anything after
    them is ignored.

    Args:
        line: Input line

    Returns:
        PointRecord with the verbatim z token attached

    Raises:
        MalformedRecord: If the line has fewer than three numeric tokens
    """
    tokens = line.split(None, 3)
    if len(tokens) < 3:
        raise MalformedRecord(f"Expected 'x y z', got {line.rstrip()!r}")

    x = _parse_number(tokens[0])
    y = _parse_number(tokens[1])
    z = _parse_number(tokens[2])
    return PointRecord(x, y, z, tokens[2])


def iter_records(lines: Iterable[str]) -> Iterator[PointRecord]:
    """
    Parse a stream of lines, silently skipping comments, blanks and malformed lines.

    Args:
        lines: Iterable of text lines (an open file works)

    Yields:
        PointRecord for every valid line
    """
    for line in lines:
        if is_skippable(line):
            continue
        try:
            yield parse_record(line)
        except MalformedRecord:
            continue


def open_input(filepath: str) -> IO[str]:
    """
    Open a point file for reading.

    Raises:
        ResourceError: If the file cannot be opened
    """
    try:
        return open(filepath, 'r', encoding=ENCODING, errors=ERRORS)
    except OSError as e:
        raise ResourceError(f"Failed to open input file '{filepath}': {e.strerror or e}") from e


def open_output(filepath: str) -> IO[str]:
    """
    Open an output file for writing, creating its directory if needed.

    Raises:
        ResourceError: If the file cannot be created
    """
    try:
        directory = os.path.dirname(os.path.abspath(filepath))
        os.makedirs(directory, exist_ok=True)
        return open(filepath, 'w', encoding=ENCODING, errors=ERRORS, newline='\n')
    except OSError as e:
        raise ResourceError(f"Failed to open output file '{filepath}': {e.strerror or e}") from e


def write_lines(f: IO[str], lines: Iterable[str]) -> int:
    """Write lines to an open file, one per line. Returns the number written."""
    n = 0
    for line in lines:
        f.write(line)
        f.write('\n')
        n += 1
    return n


def default_output_path(input_path: str, mode: str = "min") -> str:
    """Return the default output path ``<input>.min`` or ``<input>.max``."""
    return f"{input_path}.{mode}"
