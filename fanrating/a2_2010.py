"""
A2 (2010) performance test for induced-flow fans: inlet and outlet airflow
are both measured, the difference being ambient air entrained by the
discharge plume.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from .determinations import DeterminationPoint, FanReport
from .operating_point import Constraint, OperatingPoint, SolverOptions, solve_operating_point
from .scaling import SizeContext
from .units import (
    AirDensity,
    BrakeHorsepower,
    FanSpeed,
    InducedAirflow,
    InletAirflow,
    OutletAirflow,
    StaticPressure,
    entrainment_ratio,
    induced_airflow,
    static_efficiency,
)


@dataclass(frozen=True)
class A2Determination(DeterminationPoint):
    airflow_field: ClassVar[str] = "inlet_airflow"

    static_pressure: StaticPressure
    inlet_airflow: InletAirflow
    outlet_airflow: OutletAirflow
    brake_horsepower: BrakeHorsepower

    @classmethod
    def from_raw(cls, static_pressure: float, inlet_cfm: float, outlet_cfm: float,
                 brake_horsepower: float) -> "A2Determination":
        return cls(
            StaticPressure.from_in_wg(static_pressure),
            InletAirflow.from_cfm(inlet_cfm),
            OutletAirflow.from_cfm(outlet_cfm),
            BrakeHorsepower.from_hp(brake_horsepower),
        )

    def raw(self) -> Tuple[float, float, float, float]:
        return (
            self.static_pressure.in_wg(),
            self.inlet_airflow.cfm(),
            self.outlet_airflow.cfm(),
            self.brake_horsepower.hp(),
        )

    @property
    def induced_airflow(self) -> InducedAirflow:
        return induced_airflow(self.inlet_airflow, self.outlet_airflow)

    @property
    def entrainment_ratio(self) -> float:
        return entrainment_ratio(self.inlet_airflow, self.outlet_airflow)

    @property
    def static_efficiency(self) -> float:
        # rated on the air actually drawn through the fan
        return static_efficiency(self.inlet_airflow, self.static_pressure, self.brake_horsepower)


@dataclass(frozen=True)
class A2Report(FanReport[A2Determination]):
    determination_type: ClassVar[type] = A2Determination


def a2_curve(report: A2Report, *, rpm: Optional[FanSpeed] = None, size: Optional[SizeContext] = None,
             density: Optional[AirDensity] = None) -> Tuple[A2Determination, ...]:
    return report.curve(rpm=rpm, size=size, density=density)


def a2_operating_point(report: A2Report, constraint: Constraint, *, rpm: Optional[FanSpeed] = None,
                       size: Optional[SizeContext] = None, density: Optional[AirDensity] = None,
                       options: Optional[SolverOptions] = None) -> OperatingPoint[A2Determination]:
    curve = a2_curve(report, rpm=rpm, size=size, density=density)
    return solve_operating_point(curve, constraint, options)
