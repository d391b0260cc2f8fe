from __future__ import annotations
from typing import Optional, List, Annotated
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .a1_2010 import A1Determination, A1Report
from .a2_2010 import A2Determination, A2Report
from .operating_point import Constraint, SystemCurve, Target
from .units import (
    AirDensity, BrakeHorsepower, FanDiameter, FanSeries, FanSize, FanSpeed,
    InletAirflow, OutletAirflow, StaticPressure, SystemResistance,
)

# Common helpers
Positive = Annotated[float, Field(gt=0)]
NonNegative = Annotated[float, Field(ge=0)]


# Fan catalog
class FanSeriesIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    fan_type: str

    def to_series(self) -> FanSeries:
        return FanSeries(id=self.id, fan_type=self.fan_type)


class FanSizeIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    diameter: Positive  # in
    fan_series: Optional[FanSeriesIn] = None

    def to_size(self) -> FanSize:
        series = self.fan_series.to_series() if self.fan_series else None
        return FanSize(id=self.id, diameter=FanDiameter.from_inches(self.diameter), series=series)


# A1 (2010)
class A1DeterminationIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    static_pressure: float  # in. wg
    cfm: NonNegative
    brake_horsepower: NonNegative

    def to_determination(self) -> A1Determination:
        return A1Determination.from_raw(self.static_pressure, self.cfm, self.brake_horsepower)


class A1ReportIn(BaseModel):
    model_config = ConfigDict(extra="allow")
    id: str
    fan_size: FanSizeIn
    fan_rpm: Positive
    determinations: List[A1DeterminationIn] = []
    density_lb_ft3: Optional[Positive] = None

    def to_report(self) -> A1Report:
        density = AirDensity.from_lb_ft3(self.density_lb_ft3) if self.density_lb_ft3 else AirDensity.standard()
        return A1Report(
            id=self.id,
            fan_size=self.fan_size.to_size(),
            rpm=FanSpeed.from_rpm(self.fan_rpm),
            determinations=tuple(d.to_determination() for d in self.determinations),
            density=density,
        )


# A2 (2010)
class A2DeterminationIn(BaseModel):
    model_config = ConfigDict(extra="forbid")
    static_pressure: float  # in. wg
    inlet_cfm: NonNegative
    outlet_cfm: NonNegative
    brake_horsepower: NonNegative

    def to_determination(self) -> A2Determination:
        return A2Determination.from_raw(self.static_pressure, self.inlet_cfm, self.outlet_cfm, self.brake_horsepower)


class A2ReportIn(BaseModel):
    model_config = ConfigDict(extra="allow")
    id: str
    fan_size: FanSizeIn
    fan_rpm: Positive
    determinations: List[A2DeterminationIn] = []
    density_lb_ft3: Optional[Positive] = None

    def to_report(self) -> A2Report:
        density = AirDensity.from_lb_ft3(self.density_lb_ft3) if self.density_lb_ft3 else AirDensity.standard()
        return A2Report(
            id=self.id,
            fan_size=self.fan_size.to_size(),
            rpm=FanSpeed.from_rpm(self.fan_rpm),
            determinations=tuple(d.to_determination() for d in self.determinations),
            density=density,
        )


# Operating-point targets
class OperatingTargetIn(BaseModel):
    """Exactly one way of pinning the operating point."""
    model_config = ConfigDict(extra="forbid")
    static_pressure: Optional[float] = None     # in. wg
    cfm: Optional[NonNegative] = None           # inlet CFM
    outlet_cfm: Optional[NonNegative] = None    # A2 only
    brake_horsepower: Optional[NonNegative] = None
    system_resistance: Optional[Positive] = None  # in. wg / CFM^2
    system_pressure: Optional[Positive] = None    # system curve through (system_cfm, system_pressure)
    system_cfm: Optional[Positive] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "OperatingTargetIn":
        system_point = self.system_pressure is not None or self.system_cfm is not None
        if system_point and (self.system_pressure is None or self.system_cfm is None):
            raise ValueError("system_pressure and system_cfm must be given together")
        chosen = [
            self.static_pressure is not None,
            self.cfm is not None,
            self.outlet_cfm is not None,
            self.brake_horsepower is not None,
            self.system_resistance is not None,
            system_point,
        ]
        if sum(chosen) != 1:
            raise ValueError("exactly one operating-point target must be given")
        return self

    def to_constraint(self) -> Constraint:
        if self.static_pressure is not None:
            return Target(StaticPressure.from_in_wg(self.static_pressure))
        if self.cfm is not None:
            return Target(InletAirflow.from_cfm(self.cfm))
        if self.outlet_cfm is not None:
            return Target(OutletAirflow.from_cfm(self.outlet_cfm))
        if self.brake_horsepower is not None:
            return Target(BrakeHorsepower.from_hp(self.brake_horsepower))
        if self.system_resistance is not None:
            return SystemCurve(SystemResistance(self.system_resistance))
        return SystemCurve.through(
            StaticPressure.from_in_wg(self.system_pressure), InletAirflow.from_cfm(self.system_cfm)
        )


class ConfigurationIn(BaseModel):
    """Optional rating configuration; omitted fields keep the test configuration."""
    model_config = ConfigDict(extra="forbid")
    rpm: Optional[Positive] = None
    diameter: Optional[Positive] = None  # in
    density_lb_ft3: Optional[Positive] = None

    def to_kwargs(self) -> dict:
        return {
            "rpm": FanSpeed.from_rpm(self.rpm) if self.rpm else None,
            "size": FanDiameter.from_inches(self.diameter) if self.diameter else None,
            "density": AirDensity.from_lb_ft3(self.density_lb_ft3) if self.density_lb_ft3 else None,
        }
