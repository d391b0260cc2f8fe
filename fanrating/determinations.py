"""
Determination points: one set of co-measured quantities from a single test reading.

Concrete standards subclass DeterminationPoint as frozen dataclasses whose
fields are all quantities. The base class provides field lookup by
quantity class, per-field interpolation and per-field rescaling, so the
solver never needs to know which standard it is working on.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from functools import lru_cache
from typing import ClassVar, Dict, Generic, Optional, Sequence, Tuple, Type, TypeVar, get_type_hints

from .errors import InvalidCurve
from .interpolation import interpolate_between
from .scaling import Conditions, SizeContext, scale_across
from .units import AirDensity, FanSize, FanSpeed, Quantity

P = TypeVar("P", bound="DeterminationPoint")


@lru_cache(maxsize=None)
def _field_types(cls: type) -> Dict[str, type]:
    hints = get_type_hints(cls)
    return {f.name: hints[f.name] for f in fields(cls)}


@dataclass(frozen=True)
class DeterminationPoint:
    """Base class for a standard's determination; fields are quantities only."""

    # Field the curve is ordered by, and field a system curve is matched against.
    airflow_field: ClassVar[str] = "airflow"
    pressure_field: ClassVar[str] = "static_pressure"

    __hash__ = None

    def __post_init__(self):
        for name, expected in _field_types(type(self)).items():
            value = getattr(self, name)
            if type(value) is not expected:
                raise TypeError(
                    f"{type(self).__name__}.{name} must be {expected.__name__}, got {type(value).__name__}"
                )

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def quantities(self) -> Tuple[Quantity, ...]:
        return tuple(getattr(self, name) for name in self.field_names())

    def __len__(self) -> int:
        return len(fields(self))

    @classmethod
    def field_for(cls, quantity_type: type) -> str:
        """Name of the single field holding `quantity_type`."""
        matches = [name for name, t in _field_types(cls).items() if t is quantity_type]
        if len(matches) != 1:
            raise KeyError(f"{cls.__name__} has no unique {quantity_type.__name__} field")
        return matches[0]

    @classmethod
    def between(cls: Type[P], low: P, high: P, along: str, target, *, extrapolate: bool = False) -> P:
        """New point at `target` of field `along`, every other field interpolated independently."""
        values = {}
        for name in cls.field_names():
            if name == along:
                values[name] = target
                continue
            values[name] = interpolate_between(
                (getattr(low, along), getattr(low, name)),
                (getattr(high, along), getattr(high, name)),
                target,
                extrapolate=extrapolate,
            )
        return cls(**values)

    def rescaled(self: P, from_conditions: Conditions, to_conditions: Conditions) -> P:
        return type(self)(
            **{name: scale_across(getattr(self, name), from_conditions, to_conditions) for name in self.field_names()}
        )


def validate_curve(points: Sequence[P], *field_names: str) -> Tuple[P, ...]:
    """
    Check a determination sequence before it is used as a curve.

    - at least one point, all of one class, all values finite
    - each named field monotonic (non-strict, either direction)

    Returns the points as a tuple; raises InvalidCurve otherwise.
    """
    curve = tuple(points)
    if not curve:
        raise InvalidCurve("no determination points")
    cls = type(curve[0])
    for i, p in enumerate(curve):
        if type(p) is not cls:
            raise InvalidCurve(f"mixed determination types {cls.__name__} and {type(p).__name__}", i)
        if not all(q.is_finite() for q in p.quantities()):
            raise InvalidCurve("non-finite measurement", i)
    for name in field_names:
        direction = 0
        for i in range(1, len(curve)):
            prev, cur = getattr(curve[i - 1], name), getattr(curve[i], name)
            if cur == prev:
                continue
            step = 1 if cur > prev else -1
            if direction == 0:
                direction = step
            elif step != direction:
                raise InvalidCurve(f"{name} is not monotonic", i)
    return curve


def rescale_curve(points: Sequence[P], from_conditions: Conditions, to_conditions: Conditions) -> Tuple[P, ...]:
    """Every point rescaled; the input sequence is left untouched."""
    return tuple(p.rescaled(from_conditions, to_conditions) for p in points)


@dataclass(frozen=True)
class FanReport(Generic[P]):
    """
    A performance test report: the fan tested, the speed and air density it
    was tested at, and its ordered determination points.

    Subclasses pin `determination_type`; the points are kept as a tuple and
    never modified.
    """

    determination_type: ClassVar[type] = DeterminationPoint

    id: str
    fan_size: FanSize
    rpm: FanSpeed
    determinations: Tuple[P, ...] = ()
    density: AirDensity = field(default_factory=AirDensity.standard)

    __hash__ = None

    def __post_init__(self):
        if not isinstance(self.fan_size, FanSize):
            raise TypeError("fan_size must be a FanSize")
        if not isinstance(self.rpm, FanSpeed):
            raise TypeError("rpm must be a FanSpeed")
        if not isinstance(self.density, AirDensity):
            raise TypeError("density must be an AirDensity")
        object.__setattr__(self, "determinations", tuple(self.determinations))
        for i, d in enumerate(self.determinations):
            if not isinstance(d, self.determination_type):
                raise TypeError(
                    f"determination {i} must be {self.determination_type.__name__}, got {type(d).__name__}"
                )

    @property
    def conditions(self) -> Conditions:
        return Conditions(size=self.fan_size, speed=self.rpm, density=self.density)

    def curve(self, *, rpm: Optional[FanSpeed] = None, size: Optional[SizeContext] = None,
              density: Optional[AirDensity] = None) -> Tuple[P, ...]:
        """Determinations rescaled to the given configuration (unspecified contexts held)."""
        target = Conditions(size=size, speed=rpm, density=density)
        return rescale_curve(self.determinations, self.conditions, target)
