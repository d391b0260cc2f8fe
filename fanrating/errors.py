"""
Typed failures raised by the rating engine.

Every condition reachable from measured data is reported through one of
these classes; none of them terminates the process. Callers catch
CalculationError to handle them all.
"""
from __future__ import annotations

from typing import Any


class CalculationError(Exception):
    """Base class for recoverable rating-engine failures."""


# --- Scaling ---

class ScalingError(CalculationError):
    """Base class for failures while rescaling a quantity."""


class ContextMismatch(ScalingError):
    """Scaling requested from a context the quantity was not observed under."""

    def __init__(self, quantity: Any, expected: Any, given: Any):
        self.quantity = quantity
        self.expected = expected
        self.given = given
        super().__init__(
            f"{quantity!r} was observed under {expected!r}, cannot scale it from {given!r}"
        )


class UnsupportedScaling(ScalingError):
    """No exponent registered for a (quantity type, context type) pair."""

    def __init__(self, quantity_type: type, context_type: type):
        self.quantity_type = quantity_type
        self.context_type = context_type
        super().__init__(
            f"No scaling rule for {quantity_type.__name__} along {context_type.__name__}"
        )


class InvalidContext(ScalingError):
    """A context whose magnitude cannot enter a power-law ratio (zero, negative, NaN)."""

    def __init__(self, context: Any, magnitude: float):
        self.context = context
        self.magnitude = magnitude
        super().__init__(f"Context {context!r} has unusable magnitude {magnitude!r}")


# --- Interpolation / error metric ---

class UndefinedInterpolation(CalculationError):
    """Degenerate bracket (x_low == x_high) with different endpoint values."""

    def __init__(self, low: Any, high: Any):
        self.low = low
        self.high = high
        super().__init__(f"Cannot interpolate between {low!r} and {high!r}: zero-width bracket")


class DegenerateReference(CalculationError):
    """Relative comparison against a zero (or non-finite) reference."""

    def __init__(self, reference: Any):
        self.reference = reference
        super().__init__(f"Reference value {reference!r} cannot normalize an error")


# --- Curves / solver ---

class CurveError(CalculationError):
    """Base class for operating-point solver failures."""


class InvalidCurve(CurveError):
    """Empty, mixed or non-monotonic determination-point sequence."""

    def __init__(self, reason: str, index: int | None = None):
        self.reason = reason
        self.index = index
        where = f" (at point {index})" if index is not None else ""
        super().__init__(f"Invalid curve: {reason}{where}")


class OutOfRange(CurveError):
    """Target outside the measured envelope with extrapolation disallowed or exceeded."""

    def __init__(self, target: Any, low: Any, high: Any):
        self.target = target
        self.low = low
        self.high = high
        super().__init__(f"Target {target!r} lies outside the measured range [{low!r}, {high!r}]")


class NotConverged(CurveError):
    """Iterative refinement exceeded its iteration bound without meeting tolerance."""

    def __init__(self, iterations: int, error: float, tolerance: float):
        self.iterations = iterations
        self.error = error
        self.tolerance = tolerance
        super().__init__(
            f"No convergence after {iterations} iterations (error {error:.3e} > tolerance {tolerance:.3e})"
        )
