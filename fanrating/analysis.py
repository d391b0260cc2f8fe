"""
Series generators for fan-curve plots and tables (backend-only). Returns lists; no plotting.
Uses typed determinations in, raw floats out.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from . import formulas as F
from .determinations import DeterminationPoint
from .errors import DegenerateReference
from .metrics import mean_error_from
from .operating_point import SystemCurve


def series_field(points: Sequence[DeterminationPoint], name: str) -> List[float]:
    """Raw values of one field, in curve order."""
    return [getattr(p, name).value for p in points]


def series_fan_curve(points: Sequence[DeterminationPoint]) -> Dict[str, List[float]]:
    """Every field of the curve as a raw series, keyed by field name."""
    if not points:
        return {}
    return {name: series_field(points, name) for name in type(points[0]).field_names()}


def series_system_curve(system: SystemCurve, airflows: Sequence[Any]) -> List[float]:
    """System pressure [in. wg] at each airflow: P = k * Q^2."""
    return [system.pressure_at(q).value for q in airflows]


def _efficiency_or_none(p: DeterminationPoint) -> Optional[float]:
    try:
        return getattr(p, "static_efficiency")
    except (AttributeError, DegenerateReference):
        # no efficiency defined for the standard, or zero shaft power
        return None


def fan_curve_table(points: Sequence[DeterminationPoint]) -> List[Dict[str, Optional[float]]]:
    """Return list-of-dict rows: raw field values plus static efficiency when defined."""
    out = []
    for p in points:
        row: Dict[str, Optional[float]] = {name: getattr(p, name).value for name in p.field_names()}
        row["static_efficiency"] = _efficiency_or_none(p)
        out.append(row)
    return out


def compare_curves(points_a: Sequence[DeterminationPoint], points_b: Sequence[DeterminationPoint],
                   name: str) -> Dict[str, Any]:
    """
    Compare one field of two equal-length curves (e.g. rated vs. retest).
    Returns A, B, per-point %Δ (None where B is 0) and the mean squared relative error of A against B.
    """
    if len(points_a) != len(points_b):
        raise ValueError("curves must have the same number of points")
    a = [getattr(p, name) for p in points_a]
    b = [getattr(p, name) for p in points_b]
    pct = [None if not bb else F.percent_change(aa.value, bb.value) for aa, bb in zip(a, b)]
    try:
        mean_error = mean_error_from(a, b)
    except DegenerateReference:
        mean_error = None
    return {
        "A": [v.value for v in a],
        "B": [v.value for v in b],
        "pct": pct,
        "mean_error": mean_error,
    }
