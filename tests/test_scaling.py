from __future__ import annotations

import pytest

from fanrating.errors import ContextMismatch, InvalidContext, UnsupportedScaling
from fanrating.scaling import Conditions, register_context, register_scaling, registered_rules, scale, scale_across
from fanrating.units import (
    AirDensity, BrakeHorsepower, FanDiameter, FanSize, FanSpeed, InletAirflow, Quantity,
    StaticPressure, SystemResistance,
)


def test_diameter_scaling_literals() -> None:
    d10, d20 = FanDiameter(10.0), FanDiameter(20.0)
    assert scale(InletAirflow(100.0), d10, d20).value == 800.0
    assert scale(StaticPressure(1.0), d10, d20).value == 4.0
    assert scale(BrakeHorsepower(1.0), d10, d20).value == 32.0


def test_speed_and_density_scaling() -> None:
    n1, n2 = FanSpeed(1000.0), FanSpeed(1200.0)
    assert abs(scale(InletAirflow(100.0), n1, n2).value - 120.0) < 1e-9
    assert abs(scale(StaticPressure(1.0), n1, n2).value - 1.44) < 1e-12
    assert abs(scale(BrakeHorsepower(1.0), n1, n2).value - 1.728) < 1e-12
    r1, r2 = AirDensity(0.075), AirDensity(0.060)
    q = InletAirflow(100.0)
    assert scale(q, r1, r2) is q
    assert abs(scale(StaticPressure(10.0), r1, r2).value - 8.0) < 1e-12
    assert abs(scale(SystemResistance(1e-4), FanDiameter(10.0), FanDiameter(20.0)).value - 1e-4 / 16.0) < 1e-18


def test_scaling_to_same_context_is_identity() -> None:
    for q, c in [
        (InletAirflow(123.0), FanDiameter(10.0)),
        (StaticPressure(4.5), FanSpeed(1750.0)),
        (BrakeHorsepower(2.0), AirDensity(0.07)),
        (InletAirflow(5.0), FanSize("12", FanDiameter(12.0))),
    ]:
        assert scale(q, c, c) == q


def test_scaling_composes() -> None:
    q = StaticPressure(3.3)
    c1, c2, c3 = FanSpeed(900.0), FanSpeed(1170.0), FanSpeed(1750.0)
    assert scale(scale(q, c1, c2), c2, c3) == scale(q, c1, c3)
    p = BrakeHorsepower(7.5)
    d1, d2, d3 = FanDiameter(18.0), FanDiameter(24.5), FanDiameter(36.0)
    assert scale(scale(p, d1, d2), d2, d3) == scale(p, d1, d3)


def test_context_scaled_along_itself() -> None:
    assert scale(FanSpeed(1000.0), FanSpeed(1000.0), FanSpeed(1200.0)) == FanSpeed(1200.0)
    with pytest.raises(ContextMismatch) as exc:
        scale(FanSpeed(900.0), FanSpeed(1000.0), FanSpeed(1200.0))
    assert exc.value.given == FanSpeed(1000.0)


def test_origin_mismatch_is_reported_not_fatal() -> None:
    with pytest.raises(ContextMismatch) as exc:
        scale(InletAirflow(100.0), FanDiameter(12.0), FanDiameter(20.0), origin=FanDiameter(10.0))
    assert exc.value.expected == FanDiameter(10.0)
    assert exc.value.given == FanDiameter(12.0)
    out = scale(InletAirflow(100.0), FanDiameter(10.0), FanDiameter(20.0), origin=FanDiameter(10.0))
    assert out.value == 800.0


def test_bad_contexts() -> None:
    with pytest.raises(TypeError):
        scale(InletAirflow(1.0), FanDiameter(10.0), FanSpeed(1000.0))
    with pytest.raises(InvalidContext):
        scale(InletAirflow(1.0), FanDiameter(0.0), FanDiameter(10.0))
    with pytest.raises(UnsupportedScaling):
        scale(FanSpeed(1000.0), FanDiameter(10.0), FanDiameter(20.0))


def test_open_registry_accepts_new_pairs() -> None:
    class Torque(Quantity):
        unit = "lbf·ft"

    register_scaling(Torque, FanDiameter, 5)
    register_scaling(Torque, FanSpeed, 2)
    assert registered_rules()[(Torque, FanDiameter)] == 5.0
    assert scale(Torque(1.0), FanDiameter(10.0), FanDiameter(20.0)).value == 32.0
    assert abs(scale(Torque(1.0), FanSpeed(1.0), FanSpeed(3.0)).value - 9.0) < 1e-12

    class Elevation:
        pass

    with pytest.raises(ValueError):
        register_scaling(Torque, Elevation, 1)
    register_context(Elevation, lambda e: 1.0)
    register_scaling(Torque, Elevation, 0)
    t = Torque(2.0)
    assert scale(t, Elevation(), Elevation()) is t


def test_scale_across_conditions() -> None:
    size = FanSize("10", FanDiameter(10.0))
    src = Conditions(size=size, speed=FanSpeed(1000.0), density=AirDensity(0.075))
    dst = Conditions(size=FanDiameter(20.0), speed=FanSpeed(2000.0))
    # 2^3 * 2 = 16, density held
    assert abs(scale_across(InletAirflow(10.0), src, dst).value - 160.0) < 1e-9
    # 2^2 * 2^2 = 16
    assert abs(scale_across(StaticPressure(1.0), src, dst).value - 16.0) < 1e-9
    with pytest.raises(ContextMismatch):
        scale_across(InletAirflow(1.0), Conditions(), dst)
    assert src.with_(speed=FanSpeed(1200.0)).speed == FanSpeed(1200.0)
