"""
Rounding primitives shared by the grid calculator and the coordinate mappers.

All functions take a lattice offset ``t`` (a distance from the region origin
measured in units of the grid spacing) and return an integer node index. They
differ only in how an offset that lies exactly halfway between two nodes is
resolved.
"""

import math
from typing import Callable

# Fractional parts within this distance above one half still count as a tie
# for the tie-low rule. Absorbs noise from (x - xmin) / inc.
TIE_EPSILON = 1e-12


def round_half_away(t: float) -> int:
    """
    Round to the nearest integer, resolving .5 away from zero (like C llround).

    Args:
        t: Finite offset to round

    Returns:
        Nearest integer; 0.5 -> 1, -0.5 -> -1, 2.5 -> 3
    """
    a = abs(t)
    f = math.floor(a)
    # a - f is exact for doubles, unlike floor(a + 0.5)
    if a - f >= 0.5:
        f += 1
    return f if t >= 0 else -f


def round_tie_low(t: float, eps: float = TIE_EPSILON) -> int:
    """
    Round to the nearest integer, resolving ties toward the smaller value.

    This is the closed form of a nearest-node search over the nodes
    ``0, 1, 2, ...`` that keeps the lower node on equal distances. A fractional
    part must exceed one half by more than ``eps`` to move up.

    Args:
        t: Finite offset to round
        eps: Tolerance added to the one-half threshold

    Returns:
        Nearest integer; 0.5 -> 0, 1.5 -> 1, 0.5000001 -> 1
    """
    f = math.floor(t)
    return f + 1 if t - f > 0.5 + eps else f


def round_half_down(t: float) -> int:
    """
    Round to the nearest integer, resolving an exact .5 toward negative infinity.

    Args:
        t: Finite offset to round

    Returns:
        Nearest integer; 0.5 -> 0, -0.5 -> -1
    """
    f = math.floor(t)
    return f + 1 if t - f > 0.5 else f


def clamp(i: int, n: int) -> int:
    """Clamp an index into ``[0, n - 1]``."""
    if i < 0:
        return 0
    if i >= n:
        return n - 1
    return i


def snap_clamped(t: float, n: int, rounder: Callable[[float], int]) -> int:
    """
    Round an offset and clamp the index into ``[0, n - 1]``.

    An offset that overflowed to infinity (a finite point very far from the
    region at a small spacing) clamps to the edge on its side.

    Args:
        t: Offset from the region origin in units of the spacing
        n: Number of nodes along the axis
        rounder: One of the rounding functions above

    Returns:
        Index in ``[0, n - 1]``
    """
    if math.isinf(t):
        return 0 if t < 0 else n - 1
    return clamp(rounder(t), n)
