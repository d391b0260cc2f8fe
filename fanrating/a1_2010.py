"""
A1 (2010) performance test: static pressure, inlet airflow and brake
horsepower measured together at one test speed, for one fan size.
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
    InletAirflow,
    StaticPressure,
    air_power,
    static_efficiency,
)


@dataclass(frozen=True)
class A1Determination(DeterminationPoint):
    static_pressure: StaticPressure
    airflow: InletAirflow
    brake_horsepower: BrakeHorsepower

    @classmethod
    def from_raw(cls, static_pressure: float, cfm: float, brake_horsepower: float) -> "A1Determination":
        """Build from raw in. wg / CFM / hp values, in table column order."""
        return cls(
            StaticPressure.from_in_wg(static_pressure),
            InletAirflow.from_cfm(cfm),
            BrakeHorsepower.from_hp(brake_horsepower),
        )

    def raw(self) -> Tuple[float, float, float]:
        return (self.static_pressure.in_wg(), self.airflow.cfm(), self.brake_horsepower.hp())

    @property
    def air_power(self) -> BrakeHorsepower:
        return air_power(self.airflow, self.static_pressure)

    @property
    def static_efficiency(self) -> float:
        return static_efficiency(self.airflow, self.static_pressure, self.brake_horsepower)


@dataclass(frozen=True)
class A1Report(FanReport[A1Determination]):
    determination_type: ClassVar[type] = A1Determination


def a1_curve(report: A1Report, *, rpm: Optional[FanSpeed] = None, size: Optional[SizeContext] = None,
             density: Optional[AirDensity] = None) -> Tuple[A1Determination, ...]:
    """Determinations of `report` rescaled to another speed, size and/or density."""
    return report.curve(rpm=rpm, size=size, density=density)


def a1_operating_point(report: A1Report, constraint: Constraint, *, rpm: Optional[FanSpeed] = None,
                       size: Optional[SizeContext] = None, density: Optional[AirDensity] = None,
                       options: Optional[SolverOptions] = None) -> OperatingPoint[A1Determination]:
    """
    Operating point of the fan described by `report`, at the requested
    configuration (test configuration when none is given).
    """
    curve = a1_curve(report, rpm=rpm, size=size, density=density)
    return solve_operating_point(curve, constraint, options)
