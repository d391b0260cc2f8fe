"""
Thin, stable API for the web application.

Contracts (do not change signatures during front-end work):
  - a1_operating_point(report, target, config=None, allow_extrapolation=None) -> dict
  - a2_operating_point(report, target, config=None, allow_extrapolation=None) -> dict
  - a1_fan_curve(report, config=None, system_resistance=None) -> dict
  - a1_compare(report_a, report_b, field="static_pressure", config=None) -> dict
  - scale_value(quantity, value, context, from_, to) -> dict

Inputs are raw dicts in US units (in. wg, CFM, hp, rpm, in, lb/ft³),
validated via Pydantic schemas; outputs are dicts of raw floats.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Type
import logging

from pydantic import BaseModel, ValidationError

from . import analysis as A
from .a1_2010 import a1_curve, a1_operating_point as _a1_solve
from .a2_2010 import a2_curve, a2_operating_point as _a2_solve
from .determinations import FanReport
from .operating_point import OperatingPoint, SolverOptions, SystemCurve
from .scaling import scale
from .schemas import A1ReportIn, A2ReportIn, ConfigurationIn, OperatingTargetIn
from .units import (
    AirDensity, BrakeHorsepower, FanDiameter, FanSpeed, InducedAirflow,
    InletAirflow, OutletAirflow, StaticPressure, SystemResistance,
)


class BackendError(Exception):
    """Raised when backend API computation fails in a controlled way."""
    pass


QUANTITIES: Dict[str, type] = {
    "cfm": InletAirflow,
    "inlet_cfm": InletAirflow,
    "outlet_cfm": OutletAirflow,
    "induced_cfm": InducedAirflow,
    "static_pressure": StaticPressure,
    "brake_horsepower": BrakeHorsepower,
    "system_resistance": SystemResistance,
    "rpm": FanSpeed,
    "diameter": FanDiameter,
    "density_lb_ft3": AirDensity,
}

CONTEXTS: Dict[str, type] = {
    "diameter": FanDiameter,
    "rpm": FanSpeed,
    "density_lb_ft3": AirDensity,
}


def _validate(model: Type[BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BackendError(f"Invalid {model.__name__}: {e}") from e


def _options(allow_extrapolation: Optional[bool]) -> Optional[SolverOptions]:
    if allow_extrapolation is None:
        return None
    return SolverOptions(allow_extrapolation=bool(allow_extrapolation))


def _configuration(report: FanReport, config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    kwargs = _validate(ConfigurationIn, config or {}).to_kwargs()
    rpm = kwargs["rpm"] or report.rpm
    size = kwargs["size"] or report.fan_size.diameter
    density = kwargs["density"] or report.density
    return {
        "kwargs": kwargs,
        "echo": {"rpm": rpm.rpm(), "diameter": size.inches(), "density_lb_ft3": density.lb_ft3()},
    }


def _point_dict(op: OperatingPoint) -> Dict[str, Any]:
    p = op.point
    out: Dict[str, Any] = {name: getattr(p, name).value for name in p.field_names()}
    out["static_efficiency"] = A.fan_curve_table([p])[0]["static_efficiency"]
    out["extrapolated"] = op.extrapolated
    out["iterations"] = op.iterations
    out["error"] = op.error
    return out


def a1_operating_point(report: Dict[str, Any], target: Dict[str, Any], config: Optional[Dict[str, Any]] = None,
                       allow_extrapolation: Optional[bool] = None) -> Dict[str, Any]:
    """Operating point of an A1 (2010) report at the requested configuration."""
    try:
        return _operating_point_impl(A1ReportIn, _a1_solve, report, target, config, allow_extrapolation)
    except Exception:
        logging.getLogger(__name__).exception("a1_operating_point failed")
        raise


def a2_operating_point(report: Dict[str, Any], target: Dict[str, Any], config: Optional[Dict[str, Any]] = None,
                       allow_extrapolation: Optional[bool] = None) -> Dict[str, Any]:
    """Operating point of an A2 (2010) report; output adds induced airflow."""
    try:
        out = _operating_point_impl(A2ReportIn, _a2_solve, report, target, config, allow_extrapolation)
        out["induced_airflow"] = out["outlet_airflow"] - out["inlet_airflow"]
        return out
    except Exception:
        logging.getLogger(__name__).exception("a2_operating_point failed")
        raise


def _operating_point_impl(model, solve, report, target, config, allow_extrapolation) -> Dict[str, Any]:
    rep = _validate(model, report).to_report()
    constraint = _validate(OperatingTargetIn, target).to_constraint()
    cfg = _configuration(rep, config)
    op = solve(rep, constraint, options=_options(allow_extrapolation), **cfg["kwargs"])
    out = {"report": rep.id}
    out.update(cfg["echo"])
    out.update(_point_dict(op))
    return out


def a1_fan_curve(report: Dict[str, Any], config: Optional[Dict[str, Any]] = None,
                 system_resistance: Optional[float] = None) -> Dict[str, Any]:
    """Rated A1 curve as flat series (one list per field), ready for plotting or CSV.

    Adds `static_efficiency` per point and, when a system resistance
    (in. wg / CFM²) is given, the system pressure at each airflow.
    """
    try:
        rep = _validate(A1ReportIn, report).to_report()
        cfg = _configuration(rep, config)
        curve = a1_curve(rep, **cfg["kwargs"])
        out: Dict[str, Any] = A.series_fan_curve(curve)
        out["static_efficiency"] = [row["static_efficiency"] for row in A.fan_curve_table(curve)]
        if system_resistance is not None:
            system = SystemCurve(SystemResistance(system_resistance))
            out["system_static_pressure"] = A.series_system_curve(system, [p.airflow for p in curve])
        return out
    except Exception:
        logging.getLogger(__name__).exception("a1_fan_curve failed")
        raise


def a1_compare(report_a: Dict[str, Any], report_b: Dict[str, Any], field: str = "static_pressure",
               config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Compare one field of two A1 reports, both rated at the same configuration."""
    try:
        rep_a = _validate(A1ReportIn, report_a).to_report()
        rep_b = _validate(A1ReportIn, report_b).to_report()
        if field not in rep_a.determination_type.field_names():
            raise BackendError(f"Unknown A1 field '{field}'")
        kwargs = _configuration(rep_b, config)["kwargs"]
        # B sets the reference configuration when none is given
        kwargs = {
            "rpm": kwargs["rpm"] or rep_b.rpm,
            "size": kwargs["size"] or rep_b.fan_size.diameter,
            "density": kwargs["density"] or rep_b.density,
        }
        return A.compare_curves(a1_curve(rep_a, **kwargs), a1_curve(rep_b, **kwargs), field)
    except Exception:
        logging.getLogger(__name__).exception("a1_compare failed")
        raise


def a2_fan_curve(report: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Rated A2 curve as flat series, including induced airflow."""
    try:
        rep = _validate(A2ReportIn, report).to_report()
        curve = a2_curve(rep, **_configuration(rep, config)["kwargs"])
        out: Dict[str, Any] = A.series_fan_curve(curve)
        out["induced_airflow"] = [p.induced_airflow.value for p in curve]
        out["static_efficiency"] = [row["static_efficiency"] for row in A.fan_curve_table(curve)]
        return out
    except Exception:
        logging.getLogger(__name__).exception("a2_fan_curve failed")
        raise


def scale_value(quantity: str, value: float, context: str, from_: float, to: float) -> Dict[str, Any]:
    """Scale one raw value between two contexts of the same kind.

    Example: scale_value("cfm", 1000, "rpm", 1000, 1200) -> {"scaled": 1200.0, ...}
    """
    try:
        if quantity not in QUANTITIES:
            raise BackendError(f"Unknown quantity '{quantity}' (use one of {sorted(QUANTITIES)})")
        if context not in CONTEXTS:
            raise BackendError(f"Unknown context '{context}' (use one of {sorted(CONTEXTS)})")
        ctx = CONTEXTS[context]
        scaled = scale(QUANTITIES[quantity](value), ctx(from_), ctx(to))
        return {
            "quantity": quantity,
            "value": float(value),
            "context": context,
            "from": float(from_),
            "to": float(to),
            "scaled": scaled.value,
        }
    except Exception:
        logging.getLogger(__name__).exception("scale_value failed")
        raise
