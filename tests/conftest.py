from datetime import datetime, timedelta, timezone
from pathlib import Path

import numpy as np
import pytest

from mhealthgen.domain.bounded_random_variable import BoundedRandomVariable
from mhealthgen.domain.generation_request import MeasureGenerationRequest
from mhealthgen.domain.trend import BoundedRandomVariableTrend

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def example_config() -> Path:
    return REPO_ROOT / "config" / "example.yml"


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noiseless_trend():
    variable = BoundedRandomVariable(standard_deviation=0.0, minimum_value=-1000.0, maximum_value=1000.0)
    return BoundedRandomVariableTrend(variable, 10.0, 20.0)


@pytest.fixture
def heart_rate_request(rng):
    variable = BoundedRandomVariable(standard_deviation=3.0, minimum_value=45.0, maximum_value=110.0, rng=rng)
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return MeasureGenerationRequest(
        generator_name="heart-rate",
        start_date_time=start,
        end_date_time=start + timedelta(days=14),
        mean_inter_point_duration=timedelta(hours=2),
        trends={"heart-rate": BoundedRandomVariableTrend(variable, 60.0, 80.0)},
    )


@pytest.fixture
def write_config(tmp_path):
    def _write(text: str) -> Path:
        p = tmp_path / "config.yml"
        p.write_text(text, encoding="utf-8")
        return p

    return _write
