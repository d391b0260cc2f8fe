from __future__ import annotations

import logging

import pytest

from fanrating import calibration as CAL
from fanrating.a1_2010 import A1Determination
from fanrating.errors import InvalidCurve, NotConverged, OutOfRange
from fanrating.operating_point import SolverOptions, SystemCurve, Target, solve_operating_point
from fanrating.units import (
    BrakeHorsepower, InletAirflow, OutletAirflow, StaticPressure, SystemResistance,
)


def _curve(*rows):
    return [A1Determination.from_raw(*r) for r in rows]


def test_airflow_at_pressure_midpoint(three_point_curve) -> None:
    op = solve_operating_point(three_point_curve, Target(StaticPressure(9.0)))
    assert abs(op.point.airflow.cfm() - 50.0) < 1e-9
    assert abs(op.point.brake_horsepower.hp() - 1.25) < 1e-9
    assert op.point.static_pressure == StaticPressure(9.0)
    assert not op.extrapolated
    assert type(op.point) is A1Determination


def test_target_on_a_measured_point(three_point_curve) -> None:
    op = solve_operating_point(three_point_curve, Target(StaticPressure(8.0)))
    assert op.point is three_point_curve[1]


def test_target_any_field(three_point_curve) -> None:
    op = solve_operating_point(three_point_curve, Target(BrakeHorsepower(2.0)))
    assert abs(op.point.airflow.cfm() - 150.0) < 1e-9
    assert abs(op.point.static_pressure.in_wg() - 6.0) < 1e-9
    with pytest.raises(TypeError):
        solve_operating_point(three_point_curve, Target(OutletAirflow(10.0)))


def test_non_monotonic_curve_is_rejected() -> None:
    bad_airflow = _curve((10.0, 0.0, 1.0), (8.0, 200.0, 1.5), (4.0, 100.0, 2.5))
    with pytest.raises(InvalidCurve) as exc:
        solve_operating_point(bad_airflow, Target(StaticPressure(9.0)))
    assert exc.value.index == 2
    with pytest.raises(InvalidCurve):
        solve_operating_point(bad_airflow, SystemCurve(SystemResistance(0.0005)))
    bad_pressure = _curve((10.0, 0.0, 1.0), (4.0, 100.0, 1.5), (8.0, 200.0, 2.5))
    with pytest.raises(InvalidCurve):
        solve_operating_point(bad_pressure, Target(StaticPressure(9.0)))
    with pytest.raises(InvalidCurve):
        solve_operating_point([], Target(StaticPressure(9.0)))


def test_out_of_range_without_extrapolation(three_point_curve) -> None:
    with pytest.raises(OutOfRange) as exc:
        solve_operating_point(three_point_curve, Target(InletAirflow(250.0)))
    assert exc.value.target == InletAirflow(250.0)
    assert exc.value.low == InletAirflow(0.0)
    assert exc.value.high == InletAirflow(200.0)


def test_bounded_extrapolation_is_flagged(three_point_curve) -> None:
    options = SolverOptions(allow_extrapolation=True)
    op = solve_operating_point(three_point_curve, Target(InletAirflow(250.0)), options)
    assert op.extrapolated
    assert abs(op.point.static_pressure.in_wg() - 2.0) < 1e-9
    assert abs(op.point.brake_horsepower.hp() - 3.0) < 1e-9
    # a quarter of the 200 CFM span is the furthest reach
    with pytest.raises(OutOfRange):
        solve_operating_point(three_point_curve, Target(InletAirflow(300.0)), options)


def test_extrapolation_default_from_calibration(three_point_curve) -> None:
    CAL.set_solver_defaults(allow_extrapolation=True)
    op = solve_operating_point(three_point_curve, Target(InletAirflow(250.0)))
    assert op.extrapolated


def test_system_curve_intersection(three_point_curve) -> None:
    # 12 - 0.04 Q = 0.0005 Q^2  ->  Q = 120, P = 7.2
    op = solve_operating_point(three_point_curve, SystemCurve(SystemResistance(0.0005)))
    assert abs(op.point.airflow.cfm() - 120.0) < 1e-2
    assert abs(op.point.static_pressure.in_wg() - 7.2) < 1e-2
    assert op.error <= CAL.SOLVER_TOLERANCE
    assert op.iterations >= 1
    assert not op.extrapolated


def test_system_curve_through_a_measured_point(three_point_curve) -> None:
    system = SystemCurve.through(StaticPressure(8.0), InletAirflow(100.0))
    op = solve_operating_point(three_point_curve, system)
    assert abs(op.point.airflow.cfm() - 100.0) < 1e-3
    assert abs(op.point.static_pressure.in_wg() - 8.0) < 1e-3


def test_system_curve_beyond_the_envelope(three_point_curve) -> None:
    # 12 - 0.04 Q = 0.00005 Q^2  ->  Q = 232.456
    system = SystemCurve(SystemResistance(0.00005))
    with pytest.raises(OutOfRange):
        solve_operating_point(three_point_curve, system)
    op = solve_operating_point(three_point_curve, system, SolverOptions(allow_extrapolation=True))
    assert op.extrapolated
    assert abs(op.point.airflow.cfm() - 232.456) < 1e-2
    assert abs(op.point.static_pressure.in_wg() - 2.702) < 1e-2


def test_iteration_bound(three_point_curve) -> None:
    with pytest.raises(NotConverged) as exc:
        solve_operating_point(
            three_point_curve, SystemCurve(SystemResistance(0.0005)), SolverOptions(max_iterations=1)
        )
    assert exc.value.iterations == 1
    assert exc.value.error > exc.value.tolerance


def test_solver_options_validation() -> None:
    with pytest.raises(ValueError):
        SolverOptions(tolerance=0.0)
    with pytest.raises(ValueError):
        SolverOptions(max_iterations=0)
    with pytest.raises(ValueError):
        SolverOptions(extrapolation_span=-1.0)
    with pytest.raises(ValueError):
        SystemCurve(SystemResistance(-1.0))


def test_inputs_are_not_mutated(three_point_curve) -> None:
    points = list(three_point_curve)
    solve_operating_point(points, SystemCurve(SystemResistance(0.0005)))
    solve_operating_point(points, Target(StaticPressure(9.0)))
    assert points == list(three_point_curve)
    assert points[1].airflow == InletAirflow(100.0)


def test_solver_logs_convergence(three_point_curve, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="fanrating.operating_point"):
        solve_operating_point(three_point_curve, SystemCurve(SystemResistance(0.0005)))
    assert any("converged" in r.getMessage() for r in caplog.records)


def test_system_curve_across_a_repeated_airflow() -> None:
    # two readings at 100 CFM; the system curve (7 in. wg at 100 CFM) passes between them
    curve = _curve((10.0, 0.0, 1.0), (8.0, 100.0, 1.5), (6.0, 100.0, 1.7), (4.0, 200.0, 2.5))
    op = solve_operating_point(curve, SystemCurve(SystemResistance(0.0007)))
    assert abs(op.point.airflow.cfm() - 100.0) < 1e-9
    assert abs(op.point.static_pressure.in_wg() - 7.0) < 1e-9
    assert abs(op.point.brake_horsepower.hp() - 1.6) < 1e-9
    assert not op.extrapolated


def test_fixed_value_across_a_repeated_airflow() -> None:
    curve = _curve((10.0, 0.0, 1.0), (8.0, 100.0, 1.5), (6.0, 100.0, 1.7), (4.0, 200.0, 2.5))
    op = solve_operating_point(curve, Target(StaticPressure(7.0)))
    assert abs(op.point.airflow.cfm() - 100.0) < 1e-9
    op = solve_operating_point(curve, Target(StaticPressure(5.0)))
    assert abs(op.point.airflow.cfm() - 150.0) < 1e-9
    op = solve_operating_point(curve, Target(InletAirflow(100.0)))
    assert op.point is curve[1]


def test_extrapolation_past_a_repeated_edge_reading() -> None:
    curve = _curve((10.0, 0.0, 1.0), (8.0, 100.0, 1.5), (4.0, 200.0, 2.5), (3.0, 200.0, 2.6))
    options = SolverOptions(allow_extrapolation=True)
    # line through (100, 8) and (200, 3)
    op = solve_operating_point(curve, Target(InletAirflow(220.0)), options)
    assert op.extrapolated
    assert abs(op.point.static_pressure.in_wg() - 2.0) < 1e-9
    # 13 - 0.05 Q = 0.00005 Q^2  ->  Q = 214.143
    op = solve_operating_point(curve, SystemCurve(SystemResistance(0.00005)), options)
    assert op.extrapolated
    assert abs(op.point.airflow.cfm() - 214.143) < 1e-2


def test_single_airflow_curve_cannot_extrapolate() -> None:
    curve = _curve((10.0, 100.0, 1.0), (8.0, 100.0, 1.5))
    options = SolverOptions(allow_extrapolation=True)
    with pytest.raises(OutOfRange):
        solve_operating_point(curve, Target(InletAirflow(110.0)), options)
    with pytest.raises(OutOfRange):
        solve_operating_point(curve, SystemCurve(SystemResistance(0.00001)), options)


def test_extrapolation_edge_follows_residual_sign() -> None:
    # decreasing airflow order; fan above the system curve everywhere
    curve = _curve((4.0, 200.0, 2.5), (8.0, 100.0, 1.5), (10.0, 0.0, 1.0))
    op = solve_operating_point(curve, SystemCurve(SystemResistance(0.00005)), SolverOptions(allow_extrapolation=True))
    assert op.extrapolated
    assert abs(op.point.airflow.cfm() - 232.456) < 1e-2
