"""Closed interval arithmetic used to carry regression uncertainty.

Every quantity produced by the impact pipeline is a :class:`RangeValue`. A
plain number is the degenerate range ``[v, v]``, so callers may mix scalars
and ranges freely; :func:`coerce` performs the promotion.

The multiplication rule pairs lower bounds with lower bounds and upper bounds
with upper bounds. It is not a general interval product and is only correct
while both operands are non-negative, which holds for every quantity the
pipeline models. Revisit it before admitting negative coefficients.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from llm_footprint.errors import InvalidInputError

__all__ = [
    "RangeValue",
    "ValueOrRange",
    "add",
    "coerce",
    "divide",
    "is_range",
    "less_than",
    "multiply",
]


@dataclass(frozen=True, slots=True)
class RangeValue:
    """Inclusive interval ``[min, max]``.

    Attributes:
        min: Lower bound.
        max: Upper bound, never below ``min``.
    """

    min: float
    max: float

    def __post_init__(self) -> None:
        # NaN bounds compare false against everything; reject them explicitly.
        try:
            has_nan = math.isnan(self.min) or math.isnan(self.max)
        except OverflowError as exc:
            raise InvalidInputError("RangeValue bounds must fit in a float") from exc
        if has_nan:
            raise InvalidInputError("RangeValue bounds must not be NaN")
        if self.min > self.max:
            raise InvalidInputError(
                f"RangeValue min ({self.min}) must not exceed max ({self.max})"
            )

    @classmethod
    def point(cls, value: float) -> "RangeValue":
        """Return the degenerate range ``[value, value]``."""

        return cls(value, value)

    @property
    def mean(self) -> float:
        return (self.min + self.max) / 2

    @property
    def is_degenerate(self) -> bool:
        return self.min == self.max

    def add(self, other: "ValueOrRange") -> "RangeValue":
        return add(self, other)

    def multiply(self, other: "ValueOrRange") -> "RangeValue":
        return multiply(self, other)

    def divide(self, divisor: float) -> "RangeValue":
        return divide(self, divisor)

    def less_than(self, bound: float) -> bool:
        return less_than(self, bound)

    def __add__(self, other: "ValueOrRange") -> "RangeValue":
        return add(self, other)

    __radd__ = __add__

    def __mul__(self, other: "ValueOrRange") -> "RangeValue":
        return multiply(self, other)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "RangeValue":
        return divide(self, divisor)

    def to_dict(self) -> dict[str, float]:
        return {"min": self.min, "max": self.max}


ValueOrRange = Union[float, int, RangeValue]


def is_range(value: object) -> bool:
    return isinstance(value, RangeValue)


def coerce(value: ValueOrRange) -> RangeValue:
    """Return ``value`` unchanged when it is a range, else ``[value, value]``."""

    if isinstance(value, RangeValue):
        return value
    return RangeValue(float(value), float(value))


def add(a: ValueOrRange, b: ValueOrRange) -> RangeValue:
    left, right = coerce(a), coerce(b)
    return RangeValue(left.min + right.min, left.max + right.max)


def multiply(a: ValueOrRange, b: ValueOrRange) -> RangeValue:
    """Multiply bound by bound (``min*min``, ``max*max``)."""

    left, right = coerce(a), coerce(b)
    return RangeValue(left.min * right.min, left.max * right.max)


def divide(a: ValueOrRange, divisor: float) -> RangeValue:
    """Divide both bounds by a scalar.

    A zero divisor follows IEEE semantics (``inf`` or ``nan``) rather than
    raising; ``nan`` results are then rejected by the range constructor.
    """

    value = coerce(a)
    if divisor == 0:
        return RangeValue(_ieee_divide(value.min), _ieee_divide(value.max))
    return RangeValue(value.min / divisor, value.max / divisor)


def less_than(value: ValueOrRange, bound: float) -> bool:
    """Return ``True`` when the whole range lies strictly below ``bound``."""

    return coerce(value).max < bound


def _ieee_divide(numerator: float) -> float:
    if numerator == 0:
        return math.nan
    return math.copysign(math.inf, numerator)
