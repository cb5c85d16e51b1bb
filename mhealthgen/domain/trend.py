# mhealthgen/domain/trend.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from mhealthgen.domain.bounded_random_variable import BoundedRandomVariable


class TrendNotReady(ValueError):
    pass


_UNSET: Any = object()


def _require(name: str, value: Any) -> Any:
    if value is None:
        raise ValueError(f"{name} must not be None")
    return value


class BoundedRandomVariableTrend:
    """
    Wraps a BoundedRandomVariable so that its mean follows a straight line
    from start_value (fraction 0.0) to end_value (fraction 1.0).

    BoundedRandomVariableTrend() builds an empty trend for the config loader to fill in;
    BoundedRandomVariableTrend(variable, start_value, end_value) requires all three.
    """

    def __init__(self, variable=_UNSET, start_value=_UNSET, end_value=_UNSET):
        self._variable = BoundedRandomVariable()
        self._start_value: Optional[float] = None
        self._end_value: Optional[float] = None

        if variable is _UNSET and start_value is _UNSET and end_value is _UNSET:
            return

        self.variable = None if variable is _UNSET else variable
        self.start_value = None if start_value is _UNSET else start_value
        self.end_value = None if end_value is _UNSET else end_value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BoundedRandomVariableTrend":
        """
        Flat config record -> trend. Keys may use hyphens or underscores:
          start-value, end-value, standard-deviation, minimum-value, maximum-value
        """
        trend = cls()
        for raw_key, value in data.items():
            key = str(raw_key).replace("-", "_")
            setter = _FLAT_SETTERS.get(key)
            if setter is None:
                raise KeyError(raw_key)
            setter(trend, value)
        return trend

    # -----------------------
    # Fields
    # -----------------------

    @property
    def variable(self) -> BoundedRandomVariable:
        return self._variable

    @variable.setter
    def variable(self, value: BoundedRandomVariable) -> None:
        self._variable = _require("variable", value)

    @property
    def start_value(self) -> Optional[float]:
        """Mean of the trend at fraction 0.0."""
        return self._start_value

    @start_value.setter
    def start_value(self, value: float) -> None:
        self._start_value = float(_require("start_value", value))

    @property
    def end_value(self) -> Optional[float]:
        """Mean of the trend at fraction 1.0."""
        return self._end_value

    @end_value.setter
    def end_value(self, value: float) -> None:
        self._end_value = float(_require("end_value", value))

    # -----------------------
    # Flat pass-throughs to the owned variable
    # -----------------------

    @property
    def standard_deviation(self) -> float:
        return self._variable.standard_deviation

    @standard_deviation.setter
    def standard_deviation(self, value: float) -> None:
        self._variable.standard_deviation = value

    @property
    def minimum_value(self) -> Optional[float]:
        return self._variable.minimum_value

    @minimum_value.setter
    def minimum_value(self, value: Optional[float]) -> None:
        self._variable.minimum_value = value

    @property
    def maximum_value(self) -> Optional[float]:
        return self._variable.maximum_value

    @maximum_value.setter
    def maximum_value(self, value: Optional[float]) -> None:
        self._variable.maximum_value = value

    def set_standard_deviation(self, value: float) -> None:
        self.standard_deviation = value

    def set_minimum_value(self, value: Optional[float]) -> None:
        self.minimum_value = value

    def set_maximum_value(self, value: Optional[float]) -> None:
        self.maximum_value = value

    # -----------------------
    # Sampling
    # -----------------------

    def check_ready(self) -> None:
        if self._start_value is None:
            raise TrendNotReady("start_value has not been set")
        if self._end_value is None:
            raise TrendNotReady("end_value has not been set")

    def interpolate(self, fraction: float) -> float:
        if not (0.0 <= fraction <= 1.0):
            raise ValueError(f"fraction must be within [0, 1], got {fraction}")
        self.check_ready()

        # exact endpoint, start + (end - start) can be off by an ulp
        if fraction == 1.0:
            return self._end_value
        return self._start_value + (self._end_value - self._start_value) * fraction

    def next_value(self, fraction: float) -> float:
        mean = self.interpolate(fraction)
        return self._variable.next_value(mean)

    def __repr__(self) -> str:
        return (
            f"BoundedRandomVariableTrend(variable={self._variable!r}, "
            f"start_value={self._start_value!r}, end_value={self._end_value!r})"
        )


_FLAT_SETTERS = {
    "start_value": lambda t, v: setattr(t, "start_value", v),
    "end_value": lambda t, v: setattr(t, "end_value", v),
    "standard_deviation": BoundedRandomVariableTrend.set_standard_deviation,
    "minimum_value": BoundedRandomVariableTrend.set_minimum_value,
    "maximum_value": BoundedRandomVariableTrend.set_maximum_value,
}
