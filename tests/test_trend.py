import math

import numpy as np
import pytest

from mhealthgen.domain.bounded_random_variable import BoundedRandomVariable
from mhealthgen.domain.trend import BoundedRandomVariableTrend, TrendNotReady


def test_interpolate_endpoints_and_quarter(noiseless_trend):
    assert noiseless_trend.interpolate(0.0) == 10.0
    assert noiseless_trend.interpolate(1.0) == 20.0
    assert noiseless_trend.interpolate(0.25) == 12.5


def test_next_value_without_noise_is_interpolated_mean(noiseless_trend):
    assert noiseless_trend.next_value(0.25) == 12.5


@pytest.mark.parametrize("start,end", [(0.1, 0.3), (-7.25, 3.5), (1e9, -1e-3), (5.0, 5.0)])
def test_interpolate_endpoints_are_exact(start, end):
    trend = BoundedRandomVariableTrend(BoundedRandomVariable(), start, end)
    assert trend.interpolate(0.0) == start
    assert trend.interpolate(1.0) == end
    # start + (end - start) * 0.5 rounds differently from (start + end) / 2
    assert trend.interpolate(0.5) == pytest.approx((start + end) / 2)


def test_midpoint_within_one_ulp():
    trend = BoundedRandomVariableTrend(BoundedRandomVariable(), 0.1, 0.7)
    midpoint = trend.interpolate(0.5)
    half_sum = (0.1 + 0.7) / 2
    assert midpoint == 0.4
    assert half_sum == 0.39999999999999997
    assert abs(midpoint - half_sum) <= math.ulp(0.4)


def test_interpolate_overflows_for_extreme_endpoints():
    # end - start is not representable, same as plain float arithmetic
    trend = BoundedRandomVariableTrend(BoundedRandomVariable(), -1e308, 1e308)
    assert math.isinf(trend.interpolate(0.5))
    assert trend.interpolate(1.0) == 1e308


@pytest.mark.parametrize("start,end", [(10.0, 20.0), (20.0, 10.0)])
def test_interpolate_is_monotonic(start, end):
    trend = BoundedRandomVariableTrend(BoundedRandomVariable(), start, end)
    values = [trend.interpolate(f) for f in np.linspace(0.0, 1.0, 101)]
    pairs = list(zip(values, values[1:]))
    if end >= start:
        assert all(a <= b for a, b in pairs)
    else:
        assert all(a >= b for a, b in pairs)


@pytest.mark.parametrize("fraction", [-0.01, 1.01, float("nan")])
def test_fraction_out_of_range_rejected(noiseless_trend, fraction):
    with pytest.raises(ValueError):
        noiseless_trend.interpolate(fraction)
    with pytest.raises(ValueError):
        noiseless_trend.next_value(fraction)


def test_next_value_respects_variable_bounds():
    variable = BoundedRandomVariable(standard_deviation=30.0, minimum_value=55.0, maximum_value=65.0,
                                     rng=np.random.default_rng(11))
    trend = BoundedRandomVariableTrend(variable, 40.0, 90.0)
    for fraction in np.linspace(0.0, 1.0, 500):
        assert 55.0 <= trend.next_value(fraction) <= 65.0


def test_full_construction_keeps_values(noiseless_trend):
    assert noiseless_trend.start_value == 10.0
    assert noiseless_trend.end_value == 20.0
    assert noiseless_trend.variable.minimum_value == -1000.0


@pytest.mark.parametrize("args", [
    (None, 1.0, 2.0),
    (BoundedRandomVariable(), None, 2.0),
    (BoundedRandomVariable(), 1.0, None),
])
def test_construction_with_none_rejected(args):
    with pytest.raises(ValueError):
        BoundedRandomVariableTrend(*args)


def test_partial_construction_rejected():
    with pytest.raises(ValueError):
        BoundedRandomVariableTrend(start_value=1.0, end_value=2.0)


def test_setters_reject_none(noiseless_trend):
    for name in ("variable", "start_value", "end_value"):
        with pytest.raises(ValueError):
            setattr(noiseless_trend, name, None)
    assert noiseless_trend.start_value == 10.0


def test_default_construction_defers_validation():
    trend = BoundedRandomVariableTrend()
    assert isinstance(trend.variable, BoundedRandomVariable)
    assert trend.start_value is None

    with pytest.raises(TrendNotReady):
        trend.interpolate(0.5)

    trend.end_value = 4.0
    trend.start_value = 2.0
    assert trend.interpolate(0.5) == 3.0


def test_flat_setters_mutate_owned_variable():
    trend = BoundedRandomVariableTrend()
    variable = trend.variable

    trend.set_maximum_value(9.0)
    trend.set_standard_deviation(1.5)
    trend.set_minimum_value(3.0)

    assert trend.variable is variable
    assert variable.standard_deviation == 1.5
    assert variable.minimum_value == 3.0
    assert variable.maximum_value == 9.0

    trend.standard_deviation = 0.0
    assert variable.standard_deviation == 0.0


def test_from_dict_accepts_flat_keys_in_any_order():
    trend = BoundedRandomVariableTrend.from_dict({
        "maximum-value": 100,
        "standard-deviation": 0,
        "end_value": 80,
        "minimum-value": 40,
        "start-value": 60,
    })
    assert trend.interpolate(0.5) == 70.0
    assert trend.variable.minimum_value == 40.0
    assert trend.variable.maximum_value == 100.0


def test_from_dict_unknown_key():
    with pytest.raises(KeyError):
        BoundedRandomVariableTrend.from_dict({"start-value": 1, "slope": 2})


def test_repr_includes_variable_and_endpoints(noiseless_trend):
    text = repr(noiseless_trend)
    assert "BoundedRandomVariable(" in text
    assert "start_value=10.0" in text
    assert "end_value=20.0" in text
