"""Tests for interval arithmetic."""

from __future__ import annotations

import math

import pytest
from hypothesis import given, strategies as st

from llm_footprint.errors import InvalidInputError
from llm_footprint.range_value import (
    RangeValue,
    add,
    coerce,
    divide,
    is_range,
    less_than,
    multiply,
)

_finite = st.floats(min_value=0.0, max_value=1e9, allow_nan=False, allow_infinity=False)


def test_rejects_inverted_bounds():
    """A range whose min exceeds its max cannot be built."""
    with pytest.raises(InvalidInputError, match="must not exceed"):
        RangeValue(2.0, 1.0)


def test_rejects_nan_bounds():
    """NaN bounds are rejected explicitly."""
    with pytest.raises(InvalidInputError):
        RangeValue(math.nan, 1.0)
    with pytest.raises(InvalidInputError):
        RangeValue(0.0, math.nan)


def test_coerce_promotes_scalars():
    """Scalars become degenerate ranges; ranges pass through."""
    value = RangeValue(1.0, 2.0)
    assert coerce(value) is value
    assert coerce(3) == RangeValue(3.0, 3.0)
    assert coerce(3).is_degenerate
    assert is_range(value)
    assert not is_range(3.0)


def test_add_and_multiply_pair_bounds():
    """Addition and multiplication act bound by bound."""
    a = RangeValue(1.0, 2.0)
    b = RangeValue(3.0, 5.0)
    assert add(a, b) == RangeValue(4.0, 7.0)
    assert multiply(a, b) == RangeValue(3.0, 10.0)
    assert add(a, 1) == RangeValue(2.0, 3.0)
    assert multiply(2, a) == RangeValue(2.0, 4.0)


def test_operators_delegate_to_functions():
    """Operator forms match the module functions."""
    a = RangeValue(1.0, 2.0)
    assert a + 1 == add(a, 1)
    assert 1 + a == add(a, 1)
    assert a * 3 == multiply(a, 3)
    assert 3 * a == multiply(a, 3)
    assert a / 2 == RangeValue(0.5, 1.0)
    assert a.less_than(2.5)
    assert not a.less_than(2.0)


def test_ranges_are_not_orderable():
    """Ranges define no ordering operators; comparison goes through less_than."""
    with pytest.raises(TypeError):
        RangeValue(1.0, 2.0) < RangeValue(3.0, 4.0)  # noqa: B015
    with pytest.raises(TypeError):
        sorted([RangeValue(3.0, 4.0), RangeValue(1.0, 2.0)])


def test_rejects_bounds_beyond_float_range():
    """Integers too large for a float are rejected, not left to overflow."""
    with pytest.raises(InvalidInputError):
        RangeValue(0, 10**400)


def test_divide_by_positive_scalar():
    """Division scales both bounds."""
    assert divide(RangeValue(2.0, 4.0), 2) == RangeValue(1.0, 2.0)
    assert divide(6.0, 3) == RangeValue(2.0, 2.0)


def test_divide_by_zero_follows_ieee():
    """Non-zero bounds become infinite; zero bounds become NaN and are rejected."""
    assert divide(RangeValue(1.0, 2.0), 0) == RangeValue(math.inf, math.inf)
    with pytest.raises(InvalidInputError):
        divide(RangeValue(0.0, 2.0), 0)


def test_less_than_uses_upper_bound():
    """A range is below a bound only when its whole extent is."""
    assert less_than(RangeValue(1.0, 2.0), 3.0)
    assert not less_than(RangeValue(1.0, 3.0), 3.0)
    assert less_than(5.0, math.inf)


def test_mean_and_to_dict():
    """Mean is the midpoint; to_dict exposes both bounds."""
    value = RangeValue(1.0, 3.0)
    assert value.mean == 2.0
    assert value.to_dict() == {"min": 1.0, "max": 3.0}
    assert RangeValue.point(4.0).to_dict() == {"min": 4.0, "max": 4.0}


@given(a=_finite, b=_finite)
def test_degenerate_ranges_behave_like_scalars(a, b):
    """Arithmetic on degenerate ranges reproduces scalar arithmetic."""
    assert add(a, b) == RangeValue.point(a + b)
    assert multiply(a, b) == RangeValue.point(a * b)
    if b > 0:
        assert divide(a, b) == RangeValue.point(a / b)
    assert less_than(a, b) == (a < b)


@given(lo=_finite, width=_finite, other=_finite)
def test_non_negative_operations_keep_order(lo, width, other):
    """Results stay ordered for non-negative operands."""
    value = RangeValue(lo, lo + width)
    for result in (value + other, value * other, value * value):
        assert result.min <= result.max
