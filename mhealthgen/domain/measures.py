# mhealthgen/domain/measures.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Tuple

from mhealthgen.domain.data_point import DataPoint, DataPointHeader, SchemaId
from mhealthgen.domain.generation_request import MeasureGenerationRequest
from mhealthgen.domain.value_group import TimestampedValueGroup


def _unit_value(value: float, unit: str) -> Dict[str, Any]:
    return {"value": value, "unit": unit}


def _at(group: TimestampedValueGroup) -> Dict[str, Any]:
    return {"date_time": group.timestamp.isoformat()}


def _over(group: TimestampedValueGroup, duration: float, unit: str) -> Dict[str, Any]:
    return {
        "time_interval": {
            "start_date_time": group.timestamp.isoformat(),
            "duration": _unit_value(duration, unit),
        }
    }


class MeasureGenerator(ABC):
    """Turns one value group into the body of one data point."""

    name: str = ""
    schema_name: str = ""
    schema_version: str = "1.0"
    trend_keys: Tuple[str, ...] = ()

    @abstractmethod
    def measure_body(self, group: TimestampedValueGroup) -> Dict[str, Any]:
        raise NotImplementedError

    def schema_id(self) -> SchemaId:
        return SchemaId(name=self.schema_name, version=self.schema_version)

    def missing_trend_keys(self, keys: Iterable[str]) -> List[str]:
        present = set(keys)
        return [k for k in self.trend_keys if k not in present]


class HeartRateGenerator(MeasureGenerator):
    name = "heart-rate"
    schema_name = "heart-rate"
    trend_keys = ("heart-rate",)

    def measure_body(self, group):
        return {
            "heart_rate": _unit_value(int(round(group.get_value("heart-rate"))), "beats/min"),
            "effective_time_frame": _at(group),
        }


class StepCountGenerator(MeasureGenerator):
    name = "step-count"
    schema_name = "step-count"
    schema_version = "2.0"
    trend_keys = ("steps-per-minute", "duration-in-minutes")

    def measure_body(self, group):
        steps_per_minute = group.get_value("steps-per-minute")
        minutes = group.get_value("duration-in-minutes")
        return {
            "step_count": int(round(steps_per_minute * minutes)),
            "effective_time_frame": _over(group, minutes, "min"),
        }


class BodyWeightGenerator(MeasureGenerator):
    name = "body-weight"
    schema_name = "body-weight"
    trend_keys = ("weight-in-kg",)

    def measure_body(self, group):
        return {
            "body_weight": _unit_value(group.get_value("weight-in-kg"), "kg"),
            "effective_time_frame": _at(group),
        }


class BodyHeightGenerator(MeasureGenerator):
    name = "body-height"
    schema_name = "body-height"
    trend_keys = ("height-in-meters",)

    def measure_body(self, group):
        return {
            "body_height": _unit_value(group.get_value("height-in-meters"), "m"),
            "effective_time_frame": _at(group),
        }


class BloodPressureGenerator(MeasureGenerator):
    name = "blood-pressure"
    schema_name = "blood-pressure"
    trend_keys = ("systolic-in-mmhg", "diastolic-in-mmhg")

    def measure_body(self, group):
        return {
            "systolic_blood_pressure": _unit_value(group.get_value("systolic-in-mmhg"), "mmHg"),
            "diastolic_blood_pressure": _unit_value(group.get_value("diastolic-in-mmhg"), "mmHg"),
            "effective_time_frame": _at(group),
        }


class BodyTemperatureGenerator(MeasureGenerator):
    name = "body-temperature"
    schema_name = "body-temperature"
    schema_version = "2.0"
    trend_keys = ("temperature-in-c",)

    def measure_body(self, group):
        return {
            "body_temperature": _unit_value(group.get_value("temperature-in-c"), "C"),
            "effective_time_frame": _at(group),
        }


class BloodGlucoseGenerator(MeasureGenerator):
    name = "blood-glucose"
    schema_name = "blood-glucose"
    trend_keys = ("glucose-in-mg-per-dl",)

    def measure_body(self, group):
        return {
            "blood_glucose": _unit_value(group.get_value("glucose-in-mg-per-dl"), "mg/dL"),
            "effective_time_frame": _at(group),
        }


class AmbientTemperatureGenerator(MeasureGenerator):
    name = "ambient-temperature"
    schema_name = "ambient-temperature"
    trend_keys = ("temperature-in-c",)

    def measure_body(self, group):
        return {
            "ambient_temperature": _unit_value(group.get_value("temperature-in-c"), "C"),
            "effective_time_frame": _at(group),
        }


class SleepDurationGenerator(MeasureGenerator):
    name = "sleep-duration"
    schema_name = "sleep-duration"
    trend_keys = ("duration-in-hours",)

    def measure_body(self, group):
        hours = group.get_value("duration-in-hours")
        return {
            "sleep_duration": _unit_value(hours, "h"),
            "effective_time_frame": _over(group, hours, "h"),
        }


class MinutesModerateActivityGenerator(MeasureGenerator):
    name = "minutes-moderate-activity"
    schema_name = "minutes-moderate-activity"
    trend_keys = ("minutes",)

    def measure_body(self, group):
        minutes = int(round(group.get_value("minutes")))
        return {
            "minutes_moderate_activity": _unit_value(minutes, "min"),
            "effective_time_frame": _over(group, minutes, "min"),
        }


MEASURE_GENERATORS: Dict[str, MeasureGenerator] = {
    g.name: g
    for g in (
        HeartRateGenerator(),
        StepCountGenerator(),
        BodyWeightGenerator(),
        BodyHeightGenerator(),
        BloodPressureGenerator(),
        BodyTemperatureGenerator(),
        BloodGlucoseGenerator(),
        AmbientTemperatureGenerator(),
        SleepDurationGenerator(),
        MinutesModerateActivityGenerator(),
    )
}


def get_measure_generator(name: str) -> MeasureGenerator:
    try:
        return MEASURE_GENERATORS[name]
    except KeyError:
        known = ", ".join(sorted(MEASURE_GENERATORS))
        raise ValueError(f"unknown measure generator '{name}' (known: {known})") from None


class DataPointGenerator:
    def __init__(self, user_id: str, source_name: str):
        self.user_id = user_id
        self.source_name = source_name

    def generate(
        self,
        request: MeasureGenerationRequest,
        groups: Iterable[TimestampedValueGroup],
    ) -> List[DataPoint]:
        measure = get_measure_generator(request.generator_name)
        points: List[DataPoint] = []
        for group in groups:
            header = DataPointHeader(
                schema_id=measure.schema_id(),
                user_id=self.user_id,
                source_name=self.source_name,
                source_creation_date_time=group.timestamp,
            )
            points.append(DataPoint(header=header, body=measure.measure_body(group)))
        return points
