"""
Fan-law rescaling of quantities between physical configurations.

A quantity observed under one context (impeller diameter, size class,
speed, air density) is converted to its equivalent under another context
of the same kind by a power law:

    result = quantity * (to / from) ** k

The exponent k is looked up per (quantity class, context class) pair in an
open registry. New quantity or context classes join by calling
register_context / register_scaling; nothing here needs to change.

Default exponents (affinity laws):

    quantity            diameter/size   speed   density
    airflow                   3           1        0
    static pressure           2           2        1
    brake horsepower          5           3        1
    system resistance        -4           0        1
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional, Tuple, Union

from . import formulas as F
from .errors import ContextMismatch, InvalidContext, UnsupportedScaling
from .units import (
    AirDensity,
    BrakeHorsepower,
    FanDiameter,
    FanSize,
    FanSpeed,
    InducedAirflow,
    InletAirflow,
    OutletAirflow,
    StaticPressure,
    SystemResistance,
)

_MAGNITUDES: Dict[type, Callable[[Any], float]] = {}
_EXPONENTS: Dict[Tuple[type, type], float] = {}


def register_context(context_type: type, magnitude: Callable[[Any], float]) -> None:
    """Declare a context class; magnitude maps a context value to the positive float used in ratios."""
    _MAGNITUDES[context_type] = magnitude


def register_scaling(quantity_type: type, context_type: type, exponent: float) -> None:
    """Register (or replace) the exponent for a (quantity class, context class) pair."""
    if context_type not in _MAGNITUDES:
        raise ValueError(f"{context_type.__name__} is not a registered scaling context")
    _EXPONENTS[(quantity_type, context_type)] = float(exponent)


def scaling_exponent(quantity_type: type, context_type: type) -> float:
    try:
        return _EXPONENTS[(quantity_type, context_type)]
    except KeyError:
        raise UnsupportedScaling(quantity_type, context_type) from None


def registered_rules() -> Dict[Tuple[type, type], float]:
    """Snapshot of the exponent registry."""
    return dict(_EXPONENTS)


def context_magnitude(context: Any) -> float:
    fn = _MAGNITUDES.get(type(context))
    if fn is None:
        raise TypeError(f"{type(context).__name__} is not a scaling context")
    m = float(fn(context))
    if not math.isfinite(m) or m <= 0:
        raise InvalidContext(context, m)
    return m


def scale(quantity, from_context, to_context, *, origin=None):
    """
    Rescale `quantity`, observed under `from_context`, to `to_context`.

    Args:
        quantity: any registered quantity (or a context value scaled along its own class)
        from_context: context the quantity was observed under
        to_context: context of the same class to rescale to
        origin: the context the quantity is known to have been observed under;
            when given it must equal from_context
    Returns:
        A new quantity of the same class, or `quantity` itself when the
        exponent is 0 or the contexts are equal.
    Raises:
        TypeError: from_context and to_context are of different classes
        ContextMismatch: from_context is not the quantity's originating context
        UnsupportedScaling: no exponent registered for the pair
        InvalidContext: a context magnitude is zero, negative or not finite
    """
    if type(from_context) is not type(to_context):
        raise TypeError(
            f"Cannot scale from {type(from_context).__name__} to {type(to_context).__name__}"
        )
    # A context value scaled along its own class simply becomes the target.
    if type(quantity) is type(from_context):
        if quantity != from_context:
            raise ContextMismatch(quantity, quantity, from_context)
        return to_context
    if origin is not None and origin != from_context:
        raise ContextMismatch(quantity, origin, from_context)
    k = scaling_exponent(type(quantity), type(from_context))
    if k == 0 or from_context == to_context:
        return quantity
    ratio = F.affinity_ratio(context_magnitude(from_context), context_magnitude(to_context), k)
    return quantity * ratio


SizeContext = Union[FanSize, FanDiameter]


@dataclass(frozen=True)
class Conditions:
    """The contexts a set of measurements was observed under (None = unspecified)."""

    size: Optional[SizeContext] = None
    speed: Optional[FanSpeed] = None
    density: Optional[AirDensity] = None

    __hash__ = None

    def with_(self, **changes) -> "Conditions":
        return replace(self, **changes)


def _align(source, target):
    # A size class and a bare diameter meet through the diameter.
    if isinstance(source, FanSize) and isinstance(target, FanDiameter):
        return source.diameter, target
    if isinstance(source, FanDiameter) and isinstance(target, FanSize):
        return source, target.diameter
    return source, target


def scale_across(quantity, from_conditions: Conditions, to_conditions: Conditions):
    """
    Apply size, then speed, then density scaling. Contexts left as None on
    the target side are held fixed. The fan laws are multiplicative, so the
    order does not change the result.
    """
    result = quantity
    for name in ("size", "speed", "density"):
        target = getattr(to_conditions, name)
        if target is None:
            continue
        source = getattr(from_conditions, name)
        if source is None:
            raise ContextMismatch(quantity, None, target)
        source, target = _align(source, target)
        result = scale(result, source, target)
    return result


# --- default registry ---

register_context(FanDiameter, lambda d: d.value)
register_context(FanSize, lambda s: s.diameter.value)
register_context(FanSpeed, lambda n: n.value)
register_context(AirDensity, lambda r: r.value)

_AFFINITY_LAWS = {
    # quantity: (diameter/size, speed, density)
    InletAirflow: (3, 1, 0),
    OutletAirflow: (3, 1, 0),
    InducedAirflow: (3, 1, 0),
    StaticPressure: (2, 2, 1),
    BrakeHorsepower: (5, 3, 1),
    SystemResistance: (-4, 0, 1),
}

for _quantity, (_k_size, _k_speed, _k_density) in _AFFINITY_LAWS.items():
    register_scaling(_quantity, FanDiameter, _k_size)
    register_scaling(_quantity, FanSize, _k_size)
    register_scaling(_quantity, FanSpeed, _k_speed)
    register_scaling(_quantity, AirDensity, _k_density)
