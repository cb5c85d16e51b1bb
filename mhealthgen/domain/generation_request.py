# mhealthgen/domain/generation_request.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from mhealthgen.domain.trend import BoundedRandomVariableTrend


def _now_utc() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class MeasureGenerationRequest:
    generator_name: str
    start_date_time: Optional[datetime] = None     # default: end - 365 days
    end_date_time: Optional[datetime] = None       # default: now (UTC)
    mean_inter_point_duration: timedelta = timedelta(hours=1)
    suppress_night_time_measures: bool = False
    trends: Dict[str, BoundedRandomVariableTrend] = field(default_factory=dict)

    def __post_init__(self):
        if self.end_date_time is None:
            self.end_date_time = _now_utc()
        if self.start_date_time is None:
            self.start_date_time = self.end_date_time - timedelta(days=365)

    @property
    def total_duration(self) -> timedelta:
        return self.end_date_time - self.start_date_time

    def validate(self) -> None:
        if self.start_date_time >= self.end_date_time:
            raise ValueError(
                f"start_date_time {self.start_date_time.isoformat()} "
                f"must be before end_date_time {self.end_date_time.isoformat()}"
            )
        if self.mean_inter_point_duration <= timedelta(0):
            raise ValueError("mean_inter_point_duration must be positive")
        for key, trend in self.trends.items():
            try:
                trend.check_ready()
            except ValueError as e:
                raise ValueError(f"trend '{key}': {e}") from e
