"""
Unit-typed physical quantities for fan performance testing.

One class per dimension. Each holds a single float in its base unit and
only supports arithmetic that keeps the dimension intact:

  - q1 + q2, q1 - q2       same class only
  - q * x, x * q, q / x    x a plain number
  - q1 / q2                same class only, yields a dimensionless float
  - -q, abs(q), ordering   same class only

Mixing classes raises TypeError through Python's operator protocol, so an
InletAirflow can never be added to, compared with, or mistaken for a
StaticPressure. Cross-dimension rules that the fan standards do define
(resistance coefficient, air power, induced flow) are separate functions
at the bottom of this module.

Raw floats cross the boundary only through the constructors, `.value`
and the named unit accessors.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional, Type, TypeVar

from . import calibration as CAL
from . import formulas as F
from .errors import DegenerateReference

Q = TypeVar("Q", bound="Quantity")


@dataclass(frozen=True, eq=False)
class Quantity:
    """Base class; use one of the dimension classes below."""

    value: float

    unit = ""

    def __post_init__(self):
        if isinstance(self.value, Quantity):
            raise TypeError(f"{type(self).__name__} cannot wrap {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def _same(self, other) -> bool:
        return type(other) is type(self)

    # --- arithmetic ---

    def __add__(self: Q, other: Q) -> Q:
        if not self._same(other):
            return NotImplemented
        return type(self)(self.value + other.value)

    def __sub__(self: Q, other: Q) -> Q:
        if not self._same(other):
            return NotImplemented
        return type(self)(self.value - other.value)

    def __mul__(self: Q, factor) -> Q:
        if isinstance(factor, Quantity) or not isinstance(factor, numbers.Real):
            return NotImplemented
        return type(self)(self.value * factor)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if self._same(other):
            return self.value / other.value
        if isinstance(other, Quantity) or not isinstance(other, numbers.Real):
            return NotImplemented
        return type(self)(self.value / other)

    def __neg__(self: Q) -> Q:
        return type(self)(-self.value)

    def __pos__(self: Q) -> Q:
        return self

    def __abs__(self: Q) -> Q:
        return type(self)(abs(self.value))

    def __bool__(self) -> bool:
        return self.value != 0.0

    # --- comparison ---

    def __eq__(self, other) -> bool:
        if not self._same(other):
            return NotImplemented
        return math.isclose(
            self.value, other.value, rel_tol=CAL.QUANTITY_REL_TOL, abs_tol=CAL.QUANTITY_ABS_TOL
        )

    # Tolerant equality cannot be hashed consistently.
    __hash__ = None

    def __lt__(self, other) -> bool:
        if not self._same(other):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other) -> bool:
        if not self._same(other):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other) -> bool:
        if not self._same(other):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other) -> bool:
        if not self._same(other):
            return NotImplemented
        return self.value >= other.value

    def isclose(self, other, *, rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        """Equality with an explicit tolerance (same class only)."""
        if not self._same(other):
            raise TypeError(f"Cannot compare {type(self).__name__} with {type(other).__name__}")
        return math.isclose(self.value, other.value, rel_tol=rel_tol, abs_tol=abs_tol)

    def is_finite(self) -> bool:
        return math.isfinite(self.value)

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit}".rstrip()


# =============================
# Airflow
# =============================

class _Airflow(Quantity):
    unit = "CFM"

    @classmethod
    def from_cfm(cls: Type[Q], cfm: float) -> Q:
        return cls(cfm)

    @classmethod
    def from_m3s(cls: Type[Q], q_m3s: float) -> Q:
        return cls(F.m3s_to_cfm(q_m3s))

    def cfm(self) -> float:
        return self.value

    def m3s(self) -> float:
        return F.cfm_to_m3s(self.value)


class InletAirflow(_Airflow):
    """Volumetric airflow at the fan inlet [CFM]."""


class OutletAirflow(_Airflow):
    """Volumetric airflow leaving the fan outlet [CFM]."""


class InducedAirflow(_Airflow):
    """Ambient air entrained by the outlet plume (outlet minus inlet) [CFM]."""


# =============================
# Pressure, power
# =============================

class StaticPressure(Quantity):
    """Fan static pressure [in. wg]."""

    unit = "in. wg"

    @classmethod
    def from_in_wg(cls, p_in_wg: float) -> "StaticPressure":
        return cls(p_in_wg)

    @classmethod
    def from_pa(cls, p_pa: float) -> "StaticPressure":
        return cls(F.pa_to_in_wg(p_pa))

    def in_wg(self) -> float:
        return self.value

    def pa(self) -> float:
        return F.in_wg_to_pa(self.value)


class BrakeHorsepower(Quantity):
    """Shaft power absorbed by the fan [hp]."""

    unit = "hp"

    @classmethod
    def from_hp(cls, hp: float) -> "BrakeHorsepower":
        return cls(hp)

    @classmethod
    def from_kw(cls, kw: float) -> "BrakeHorsepower":
        return cls(F.kw_to_hp(kw))

    def hp(self) -> float:
        return self.value

    def kw(self) -> float:
        return F.hp_to_kw(self.value)


# =============================
# Scaling contexts
# =============================

class FanSpeed(Quantity):
    """Impeller rotational speed [rpm]."""

    unit = "rpm"

    @classmethod
    def from_rpm(cls, rpm: float) -> "FanSpeed":
        return cls(rpm)

    @classmethod
    def from_rad_s(cls, w: float) -> "FanSpeed":
        return cls(F.rad_s_to_rpm(w))

    def rpm(self) -> float:
        return self.value

    def rad_s(self) -> float:
        return F.rpm_to_rad_s(self.value)


class FanDiameter(Quantity):
    """Impeller diameter [in]."""

    unit = "in"

    @classmethod
    def from_inches(cls, d_in: float) -> "FanDiameter":
        return cls(d_in)

    @classmethod
    def from_mm(cls, d_mm: float) -> "FanDiameter":
        return cls(F.mm_to_in(d_mm))

    def inches(self) -> float:
        return self.value

    def mm(self) -> float:
        return F.in_to_mm(self.value)


class AirDensity(Quantity):
    """Air density at the fan inlet [lb/ft^3]."""

    unit = "lb/ft³"

    @classmethod
    def from_lb_ft3(cls, rho: float) -> "AirDensity":
        return cls(rho)

    @classmethod
    def from_kg_m3(cls, rho: float) -> "AirDensity":
        return cls(F.kg_m3_to_lb_ft3(rho))

    @classmethod
    def from_air_state(cls, state: F.AirState) -> "AirDensity":
        return cls.from_kg_m3(F.air_density(state))

    @classmethod
    def standard(cls) -> "AirDensity":
        """Standard air, 0.075 lb/ft^3."""
        return cls(CAL.RHO_STD_LB_FT3)

    def lb_ft3(self) -> float:
        return self.value

    def kg_m3(self) -> float:
        return F.lb_ft3_to_kg_m3(self.value)


@dataclass(frozen=True)
class FanSeries:
    """A product line sharing one fan type."""

    id: str
    fan_type: str


@dataclass(frozen=True)
class FanSize:
    """A discrete size class within a series; scales through its diameter."""

    id: str
    diameter: FanDiameter
    series: Optional[FanSeries] = None

    def __post_init__(self):
        if not isinstance(self.diameter, FanDiameter):
            raise TypeError("FanSize.diameter must be a FanDiameter")

    # Equality is tolerant through FanDiameter.
    __hash__ = None


# =============================
# Documented cross-dimension rules
# =============================

class SystemResistance(Quantity):
    """
    System-curve coefficient k in P = k * Q^2 [in. wg / CFM^2].

    A duct system's pressure drop grows with the square of the airflow
    pushed through it; k fixes the whole curve from a single point.
    """

    unit = "in. wg/CFM²"

    @classmethod
    def through(cls, pressure: StaticPressure, airflow: _Airflow) -> "SystemResistance":
        """k = P / Q^2 for the curve passing through (Q, P)."""
        if not isinstance(pressure, StaticPressure) or not isinstance(airflow, _Airflow):
            raise TypeError("SystemResistance.through(StaticPressure, airflow)")
        if not airflow:
            raise DegenerateReference(airflow)
        return cls(F.system_resistance(pressure.value, airflow.value))

    def pressure_at(self, airflow: _Airflow) -> StaticPressure:
        """P = k * Q^2."""
        if not isinstance(airflow, _Airflow):
            raise TypeError(f"pressure_at expects an airflow, got {type(airflow).__name__}")
        return StaticPressure(self.value * airflow.value ** 2)

    def airflow_at(self, pressure: StaticPressure, airflow_type: Type[Q] = InletAirflow) -> Q:
        """Q = sqrt(P / k), returned as the requested airflow class."""
        if not isinstance(pressure, StaticPressure):
            raise TypeError(f"airflow_at expects StaticPressure, got {type(pressure).__name__}")
        if self.value <= 0:
            raise DegenerateReference(self)
        if pressure.value < 0:
            raise ValueError("pressure must be >= 0")
        return airflow_type(math.sqrt(pressure.value / self.value))


def induced_airflow(inlet: InletAirflow, outlet: OutletAirflow) -> InducedAirflow:
    """Entrained flow: outlet - inlet."""
    if not isinstance(inlet, InletAirflow) or not isinstance(outlet, OutletAirflow):
        raise TypeError("induced_airflow(InletAirflow, OutletAirflow)")
    return InducedAirflow(outlet.value - inlet.value)


def entrainment_ratio(inlet: InletAirflow, outlet: OutletAirflow) -> float:
    """Dilution ratio: outlet / inlet."""
    if not isinstance(inlet, InletAirflow) or not isinstance(outlet, OutletAirflow):
        raise TypeError("entrainment_ratio(InletAirflow, OutletAirflow)")
    if not inlet:
        raise DegenerateReference(inlet)
    return outlet.value / inlet.value


def air_power(airflow: _Airflow, pressure: StaticPressure) -> BrakeHorsepower:
    """Air horsepower delivered: Q * P / 6356."""
    if not isinstance(airflow, _Airflow) or not isinstance(pressure, StaticPressure):
        raise TypeError("air_power(airflow, StaticPressure)")
    return BrakeHorsepower(F.air_horsepower(airflow.value, pressure.value))


def static_efficiency(airflow: _Airflow, pressure: StaticPressure, power: BrakeHorsepower) -> float:
    """Static efficiency: air power / brake horsepower."""
    if not isinstance(airflow, _Airflow) or not isinstance(pressure, StaticPressure) or not isinstance(power, BrakeHorsepower):
        raise TypeError("static_efficiency(airflow, StaticPressure, BrakeHorsepower)")
    if power.value <= 0:
        raise DegenerateReference(power)
    return F.static_efficiency(airflow.value, pressure.value, power.value)
