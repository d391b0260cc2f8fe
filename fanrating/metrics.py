"""
Normalized squared-error metric used as a convergence / fitness score.
"""
from __future__ import annotations

import math
from typing import Protocol, Sequence, TypeVar

from .errors import DegenerateReference

T = TypeVar("T", bound="SupportsRelativeError")


class SupportsRelativeError(Protocol):
    """Exactly what error_from needs: same-type subtraction and same-type division to a float."""

    def __sub__(self: T, other: T) -> T: ...

    def __truediv__(self: T, other: T) -> float: ...


def _finite(x) -> bool:
    raw = getattr(x, "value", x)
    return math.isfinite(raw)


def error_from(value: T, reference: T) -> float:
    """
    Squared relative error:
        ((value - reference) / reference) ** 2
    Always >= 0; 0 iff value == reference; grows with relative deviation.
    Raises:
        DegenerateReference: reference is zero or not finite
        ValueError: value is not finite
    """
    if not reference or not _finite(reference):
        raise DegenerateReference(reference)
    if not _finite(value):
        raise ValueError(f"value must be finite, got {value!r}")
    relative = (value - reference) / reference
    return float(relative) ** 2


def mean_error_from(values: Sequence[T], references: Sequence[T]) -> float:
    """Mean of error_from over paired samples."""
    if len(values) != len(references):
        raise ValueError("values and references must have equal length")
    if not values:
        raise ValueError("at least one pair is required")
    return sum(error_from(v, r) for v, r in zip(values, references)) / len(values)
