import numpy as np
import pytest

from mhealthgen.domain.bounded_random_variable import BoundedRandomVariable


def test_zero_standard_deviation_returns_mean():
    v = BoundedRandomVariable(standard_deviation=0.0)
    assert v.next_value(42.5) == 42.5


def test_samples_stay_within_bounds():
    v = BoundedRandomVariable(standard_deviation=25.0, minimum_value=50.0, maximum_value=60.0,
                              rng=np.random.default_rng(7))
    samples = [v.next_value(55.0) for _ in range(2000)]
    assert min(samples) >= 50.0
    assert max(samples) <= 60.0


def test_mean_outside_bounds_is_clamped():
    v = BoundedRandomVariable(standard_deviation=0.0, minimum_value=0.0, maximum_value=10.0)
    assert v.next_value(-5.0) == 0.0
    assert v.next_value(15.0) == 10.0


def test_missing_bound_means_unbounded():
    v = BoundedRandomVariable(standard_deviation=0.0, maximum_value=10.0)
    assert v.next_value(-1e6) == -1e6


def test_noise_is_centred_on_mean():
    v = BoundedRandomVariable(standard_deviation=2.0, rng=np.random.default_rng(3))
    samples = np.array([v.next_value(100.0) for _ in range(5000)])
    assert abs(samples.mean() - 100.0) < 0.2
    assert samples.std() == pytest.approx(2.0, rel=0.1)


def test_negative_standard_deviation_rejected():
    with pytest.raises(ValueError):
        BoundedRandomVariable(standard_deviation=-1.0)

    v = BoundedRandomVariable()
    with pytest.raises(ValueError):
        v.standard_deviation = -0.5
    with pytest.raises(ValueError):
        v.standard_deviation = None


def test_inverted_bounds_rejected_on_sampling():
    v = BoundedRandomVariable(minimum_value=10.0, maximum_value=5.0)
    with pytest.raises(ValueError):
        v.next_value(7.0)


def test_same_seed_same_samples():
    a = BoundedRandomVariable(standard_deviation=1.0, rng=np.random.default_rng(99))
    b = BoundedRandomVariable(standard_deviation=1.0, rng=np.random.default_rng(99))
    assert [a.next_value(0.0) for _ in range(5)] == [b.next_value(0.0) for _ in range(5)]
