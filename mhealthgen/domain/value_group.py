# mhealthgen/domain/value_group.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict


@dataclass
class TimestampedValueGroup:
    timestamp: datetime
    values: Dict[str, float] = field(default_factory=dict)

    def get_value(self, key: str) -> float:
        return self.values[key]

    def set_value(self, key: str, value: float) -> None:
        self.values[key] = float(value)
