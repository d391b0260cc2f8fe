"""
Linear interpolation between two known samples.

Generic over value types: x and y may be any quantities (or plain floats)
as long as x-differences divide into a float and y supports
`y + (y - y) * float`. Interpolating StaticPressure along InletAirflow and
InletAirflow along StaticPressure go through the same function.
"""
from __future__ import annotations

from typing import Tuple, TypeVar

from .errors import OutOfRange, UndefinedInterpolation

X = TypeVar("X")
Y = TypeVar("Y")


def within_bracket(target, a, b) -> bool:
    lo, hi = (a, b) if a <= b else (b, a)
    # == is tolerant for quantities, so edge targets survive float noise
    return (lo <= target or target == lo) and (target <= hi or target == hi)


def interpolate_between(low: Tuple[X, Y], high: Tuple[X, Y], target: X, *, extrapolate: bool = False) -> Y:
    """
    Estimate y at `target` from two samples:
        y = y_low + (y_high - y_low) * (target - x_low) / (x_high - x_low)
    Args:
        low: (x_low, y_low)
        high: (x_high, y_high); x_high may be below x_low
        target: position to evaluate
        extrapolate: allow target outside [x_low, x_high]; the caller must
            report such a result as lower confidence
    Returns:
        y at target, of the same type as y_low
    Raises:
        OutOfRange: target outside the bracket and extrapolate is False
        UndefinedInterpolation: x_low == x_high while y_low != y_high
    """
    x_low, y_low = low
    x_high, y_high = high
    if not extrapolate and not within_bracket(target, x_low, x_high):
        raise OutOfRange(target, x_low, x_high)
    if x_low == x_high:
        if y_low == y_high:
            return y_low
        raise UndefinedInterpolation(low, high)
    fraction = (target - x_low) / (x_high - x_low)
    return y_low + (y_high - y_low) * fraction
