# mhealthgen/domain/value_group_generator.py
from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

import numpy as np

from mhealthgen.domain.generation_request import MeasureGenerationRequest
from mhealthgen.domain.value_group import TimestampedValueGroup

NIGHT_TIME_START_HOUR = 23
NIGHT_TIME_END_HOUR = 6


def is_night_time(hour: int) -> bool:
    return hour >= NIGHT_TIME_START_HOUR or hour < NIGHT_TIME_END_HOUR


class TrendValueGroupGenerator:
    """
    Walks a request's time window and samples every trend once per point.

    - Gaps between points are exponential with the request's mean (whole seconds, at least 1)
    - Fraction = seconds elapsed since start / total seconds in the window
    - Points landing between 23:00 and 06:00 are dropped when night suppression is on
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def _next_gap(self, mean_s: float, remaining_s: float) -> timedelta:
        # capped just past the window end so huge means cannot overflow datetime
        seconds = min(self.rng.exponential(mean_s), remaining_s + 1)
        return timedelta(seconds=max(1, int(seconds)))

    def generate(self, request: MeasureGenerationRequest) -> List[TimestampedValueGroup]:
        request.validate()

        start = request.start_date_time
        end = request.end_date_time
        total_s = request.total_duration.total_seconds()
        mean_s = request.mean_inter_point_duration.total_seconds()

        groups: List[TimestampedValueGroup] = []
        t = start

        while True:
            t = t + self._next_gap(mean_s, (end - t).total_seconds())
            if t >= end:
                break

            if request.suppress_night_time_measures and is_night_time(t.hour):
                continue

            fraction = (t - start).total_seconds() / total_s

            group = TimestampedValueGroup(timestamp=t)
            for key, trend in request.trends.items():
                group.set_value(key, trend.next_value(fraction))
            groups.append(group)

        return groups
