"""
Operating-point solver.

Given a report's ordered determination points and a constraint, locate the
point on the interpolated fan curve that satisfies it:

  - Target(q):       the curve point whose field of q's class equals q
                     (e.g. "airflow at 9 in. wg")
  - SystemCurve(k):  the intersection of the fan's pressure/airflow curve
                     with a system-resistance curve P = k * Q^2

Extrapolation beyond the measured envelope is opt-in, bounded by
SolverOptions.extrapolation_span and always reported through
OperatingPoint.extrapolated. The solver is deterministic and never
mutates its inputs.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Generic, Optional, Sequence, Tuple, TypeVar, Union

from . import calibration as CAL
from .determinations import DeterminationPoint, validate_curve
from .errors import NotConverged, OutOfRange
from .interpolation import interpolate_between, within_bracket
from .metrics import error_from
from .units import Quantity, StaticPressure, SystemResistance

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=DeterminationPoint)


@dataclass(frozen=True)
class Target:
    """Curve-vs-fixed-value constraint."""

    value: Quantity

    __hash__ = None

    def __post_init__(self):
        if not isinstance(self.value, Quantity):
            raise TypeError(f"Target expects a quantity, got {type(self.value).__name__}")


@dataclass(frozen=True)
class SystemCurve:
    """Curve-vs-curve constraint: P = k * Q^2."""

    resistance: SystemResistance

    __hash__ = None

    def __post_init__(self):
        if not isinstance(self.resistance, SystemResistance):
            raise TypeError("SystemCurve expects a SystemResistance")
        if not self.resistance.is_finite() or self.resistance.value <= 0:
            raise ValueError("resistance must be > 0")

    @classmethod
    def through(cls, pressure: StaticPressure, airflow) -> "SystemCurve":
        return cls(SystemResistance.through(pressure, airflow))

    def pressure_at(self, airflow) -> StaticPressure:
        return self.resistance.pressure_at(airflow)


Constraint = Union[Target, SystemCurve]


@dataclass(frozen=True)
class SolverOptions:
    """Solver knobs; defaults are read from calibration when the options are built."""

    allow_extrapolation: bool = field(default_factory=lambda: CAL.ALLOW_EXTRAPOLATION)
    tolerance: float = field(default_factory=lambda: CAL.SOLVER_TOLERANCE)
    max_iterations: int = field(default_factory=lambda: CAL.SOLVER_MAX_ITERATIONS)
    extrapolation_span: float = field(default_factory=lambda: CAL.EXTRAPOLATION_SPAN)

    def __post_init__(self):
        if not math.isfinite(self.tolerance) or self.tolerance <= 0:
            raise ValueError("tolerance > 0")
        if self.max_iterations < 1:
            raise ValueError("max_iterations >= 1")
        if not math.isfinite(self.extrapolation_span) or self.extrapolation_span < 0:
            raise ValueError("extrapolation_span >= 0")


@dataclass(frozen=True)
class OperatingPoint(Generic[P]):
    """A derived point on the fan curve; `extrapolated` marks a lower-confidence result."""

    point: P
    extrapolated: bool = False
    iterations: int = 0
    error: float = 0.0

    __hash__ = None


def solve_operating_point(points: Sequence[P], constraint: Constraint, options: SolverOptions | None = None) -> OperatingPoint[P]:
    """
    Locate the operating point of `points` under `constraint`.
    Raises:
        InvalidCurve: empty, mixed or non-monotonic points
        OutOfRange: target outside the envelope (and extrapolation disallowed or exceeded)
        NotConverged: curve-vs-curve refinement ran out of iterations
    """
    options = options or SolverOptions()
    if isinstance(constraint, Target):
        return _solve_for_value(points, constraint.value, options)
    if isinstance(constraint, SystemCurve):
        return _solve_for_system(points, constraint, options)
    raise TypeError(f"Unsupported constraint {type(constraint).__name__}")


def _edge_pair(curve: Tuple[P, ...], along: str, at_end: bool) -> Optional[Tuple[P, P]]:
    """(inner, edge) at one end of the curve; inner is the nearest point whose `along` value differs."""
    ordered = curve[::-1] if at_end else curve
    edge = ordered[0]
    for inner in ordered[1:]:
        if getattr(inner, along) != getattr(edge, along):
            return inner, edge
    return None


def _extrapolation_pair(curve: Tuple[P, ...], along: str, target, options: SolverOptions) -> Tuple[P, P]:
    """Nearest edge pair (inner, edge) for extrapolation toward `target`."""
    first, last = getattr(curve[0], along), getattr(curve[-1], along)
    if not options.allow_extrapolation:
        raise OutOfRange(target, first, last)
    pair = _edge_pair(curve, along, at_end=abs(target - last) <= abs(target - first))
    if pair is None:
        raise OutOfRange(target, first, last)
    reach = abs(target - getattr(pair[1], along))
    if reach > abs(last - first) * options.extrapolation_span:
        raise OutOfRange(target, first, last)
    return pair


def _solve_for_value(points: Sequence[P], target: Quantity, options: SolverOptions) -> OperatingPoint[P]:
    curve = validate_curve(points)
    cls = type(curve[0])
    try:
        along = cls.field_for(type(target))
    except KeyError:
        raise TypeError(f"{cls.__name__} has no {type(target).__name__} field to solve for") from None
    curve = validate_curve(curve, cls.airflow_field, along)

    for p in curve:
        if getattr(p, along) == target:
            return OperatingPoint(p)

    for low, high in zip(curve, curve[1:]):
        x_low, x_high = getattr(low, along), getattr(high, along)
        if x_low != x_high and within_bracket(target, x_low, x_high):
            logger.debug("bracket %s..%s for %s", x_low, x_high, target)
            return OperatingPoint(cls.between(low, high, along, target))

    inner, edge = _extrapolation_pair(curve, along, target, options)
    logger.debug("extrapolating %s from edge %s", target, getattr(edge, along))
    return OperatingPoint(cls.between(inner, edge, along, target, extrapolate=True), extrapolated=True)


def _solve_for_system(points: Sequence[P], system: SystemCurve, options: SolverOptions) -> OperatingPoint[P]:
    curve = validate_curve(points)
    cls = type(curve[0])
    q_name, p_name = cls.airflow_field, cls.pressure_field
    curve = validate_curve(curve, q_name)

    def residual(p: P) -> float:
        return (getattr(p, p_name) - system.pressure_at(getattr(p, q_name))).value

    residuals = [residual(p) for p in curve]
    for p, r in zip(curve, residuals):
        if r == 0:
            return OperatingPoint(p)

    for i in range(len(curve) - 1):
        if residuals[i] * residuals[i + 1] < 0:
            low, high = curve[i], curve[i + 1]
            q_low, q_high = getattr(low, q_name), getattr(high, q_name)
            logger.debug("system curve crosses between points %d and %d", i, i + 1)
            if q_low == q_high:
                # repeated airflow reading: the crossing sits on the pressure step
                return OperatingPoint(cls.between(low, high, p_name, system.pressure_at(q_low)))
            return _bisect(low, high, q_low, q_high, system, options, extrapolate=False)

    first, last = getattr(curve[0], q_name), getattr(curve[-1], q_name)
    if not options.allow_extrapolation:
        raise OutOfRange(system.resistance, first, last)
    # fan above the system curve: the crossing lies toward higher airflow
    toward_higher = residuals[0] > 0
    pair = _edge_pair(curve, q_name, at_end=(last >= first) == toward_higher)
    if pair is None:
        raise OutOfRange(system.resistance, first, last)
    inner, edge = pair
    q_inner, q_edge = getattr(inner, q_name), getattr(edge, q_name)
    step = abs(last - first) * options.extrapolation_span
    q_outer = q_edge + step if q_edge > q_inner else q_edge - step
    p_outer = interpolate_between(
        (q_inner, getattr(inner, p_name)), (q_edge, getattr(edge, p_name)), q_outer, extrapolate=True
    )
    r_outer = (p_outer - system.pressure_at(q_outer)).value
    if r_outer * residual(edge) > 0:
        raise OutOfRange(system.resistance, first, last)
    logger.debug("system curve crosses beyond edge %s, extrapolating to %s", q_edge, q_outer)
    return _bisect(inner, edge, q_edge, q_outer, system, options, extrapolate=True)


def _bisect(low: P, high: P, a, b, system: SystemCurve, options: SolverOptions, *, extrapolate: bool) -> OperatingPoint[P]:
    """Bisect airflow in [a, b] on the line through `low` and `high` until the pressures agree."""
    cls = type(low)
    q_name, p_name = cls.airflow_field, cls.pressure_field
    q_low, q_high = getattr(low, q_name), getattr(high, q_name)
    p_low, p_high = getattr(low, p_name), getattr(high, p_name)

    def fan_pressure(q) -> StaticPressure:
        return interpolate_between((q_low, p_low), (q_high, p_high), q, extrapolate=extrapolate)

    r_a = (fan_pressure(a) - system.pressure_at(a)).value
    error = math.inf
    for iteration in range(1, options.max_iterations + 1):
        mid = a + (b - a) * 0.5
        p_fan = fan_pressure(mid)
        p_sys = system.pressure_at(mid)
        error = error_from(p_fan, p_sys)
        if error <= options.tolerance:
            logger.debug("converged at %s after %d iterations (error %.3e)", mid, iteration, error)
            point = cls.between(low, high, q_name, mid, extrapolate=extrapolate)
            return OperatingPoint(point, extrapolated=extrapolate, iterations=iteration, error=error)
        r_mid = (p_fan - p_sys).value
        if (r_mid < 0) == (r_a < 0):
            a, r_a = mid, r_mid
        else:
            b = mid
    raise NotConverged(options.max_iterations, error, options.tolerance)
