from __future__ import annotations

import pytest

from fanrating import calibration as CAL
from fanrating.a1_2010 import A1Determination, A1Report
from fanrating.a2_2010 import A2Determination, A2Report
from fanrating.anchors import ANCHORS
from fanrating.units import FanDiameter, FanSize, FanSpeed


@pytest.fixture(autouse=True)
def _restore_calibration():
    yield
    CAL.reset_solver_defaults()
    CAL.set_quantity_tolerance(float(ANCHORS["QUANTITY_REL_TOL"]), float(ANCHORS["QUANTITY_ABS_TOL"]))


@pytest.fixture
def three_point_curve() -> tuple:
    # (static pressure [in. wg], airflow [CFM], bhp [hp])
    return (
        A1Determination.from_raw(10.0, 0.0, 1.0),
        A1Determination.from_raw(8.0, 100.0, 1.5),
        A1Determination.from_raw(4.0, 200.0, 2.5),
    )


@pytest.fixture
def a1_report(three_point_curve) -> A1Report:
    return A1Report(
        id="A1-TEST",
        fan_size=FanSize("10", FanDiameter.from_inches(10.0)),
        rpm=FanSpeed.from_rpm(1000.0),
        determinations=three_point_curve,
    )


@pytest.fixture
def a2_report() -> A2Report:
    # (static pressure, inlet CFM, outlet CFM, bhp)
    return A2Report(
        id="A2-TEST",
        fan_size=FanSize("10", FanDiameter.from_inches(10.0)),
        rpm=FanSpeed.from_rpm(1000.0),
        determinations=(
            A2Determination.from_raw(10.0, 0.0, 0.0, 1.0),
            A2Determination.from_raw(8.0, 100.0, 150.0, 1.5),
            A2Determination.from_raw(4.0, 200.0, 300.0, 2.5),
        ),
    )


@pytest.fixture
def a1_report_dict() -> dict:
    return {
        "id": "A1-TEST",
        "fan_size": {"id": "10", "diameter": 10.0},
        "fan_rpm": 1000.0,
        "determinations": [
            {"static_pressure": 10.0, "cfm": 0.0, "brake_horsepower": 1.0},
            {"static_pressure": 8.0, "cfm": 100.0, "brake_horsepower": 1.5},
            {"static_pressure": 4.0, "cfm": 200.0, "brake_horsepower": 2.5},
        ],
    }
