# mhealthgen/domain/bounded_random_variable.py
from __future__ import annotations

from typing import Optional

import numpy as np


class BoundedRandomVariable:
    """
    Normally distributed noise around a caller-supplied mean.
    Samples are clamped to [minimum_value, maximum_value]; a missing bound means unbounded.
    """

    def __init__(
        self,
        standard_deviation: float = 0.0,
        minimum_value: Optional[float] = None,
        maximum_value: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._standard_deviation = 0.0
        self.standard_deviation = standard_deviation
        self.minimum_value = minimum_value
        self.maximum_value = maximum_value
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def standard_deviation(self) -> float:
        return self._standard_deviation

    @standard_deviation.setter
    def standard_deviation(self, value: float) -> None:
        if value is None:
            raise ValueError("standard_deviation must not be None")
        value = float(value)
        if value < 0:
            raise ValueError(f"standard_deviation must be >= 0, got {value}")
        self._standard_deviation = value

    @property
    def minimum_value(self) -> Optional[float]:
        return self._minimum_value

    @minimum_value.setter
    def minimum_value(self, value: Optional[float]) -> None:
        self._minimum_value = None if value is None else float(value)

    @property
    def maximum_value(self) -> Optional[float]:
        return self._maximum_value

    @maximum_value.setter
    def maximum_value(self, value: Optional[float]) -> None:
        self._maximum_value = None if value is None else float(value)

    def next_value(self, mean: float) -> float:
        lo, hi = self._minimum_value, self._maximum_value
        if lo is not None and hi is not None and lo > hi:
            raise ValueError(f"minimum_value {lo} is greater than maximum_value {hi}")

        if self._standard_deviation == 0.0:
            value = float(mean)
        else:
            value = float(self.rng.normal(float(mean), self._standard_deviation))

        if lo is not None:
            value = max(lo, value)
        if hi is not None:
            value = min(hi, value)
        return value

    def __repr__(self) -> str:
        return (
            f"BoundedRandomVariable(standard_deviation={self._standard_deviation!r}, "
            f"minimum_value={self._minimum_value!r}, maximum_value={self._maximum_value!r})"
        )
