# mhealthgen/core/settings_store.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from mhealthgen.domain.generation_request import MeasureGenerationRequest
from mhealthgen.domain.measures import get_measure_generator
from mhealthgen.domain.trend import BoundedRandomVariableTrend


class ConfigError(ValueError):
    def __init__(self, key: str, message: str):
        super().__init__(f"{key}: {message}")
        self.key = key


DESTINATIONS = ("file", "console")


@dataclass
class GeneratorSettings:
    user_id: str = "some-user"
    source_name: str = "generator"
    output_destination: str = "file"
    output_file: Optional[Path] = None      # None -> storage.default_output_path()
    append: bool = True
    seed: Optional[int] = None
    requests: List[MeasureGenerationRequest] = field(default_factory=list)


# -----------------------
# Value parsing
# -----------------------

_ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)


def parse_duration(value: Any, key: str) -> timedelta:
    """
    Accepts ISO-8601 durations ("PT6H", "P1DT30M", "pt15m") or a number of seconds.
    """
    if isinstance(value, bool):
        raise ConfigError(key, f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        parts = {"seconds": float(value)}
    else:
        text = str(value).strip()
        m = _ISO_DURATION.match(text)
        if not m or text.upper() in ("P", "PT") or text.upper().endswith("T"):
            raise ConfigError(key, f"invalid duration {value!r}")
        parts = {k: float(v) for k, v in m.groupdict().items() if v is not None}

    try:
        return timedelta(**parts)
    except (OverflowError, ValueError):
        raise ConfigError(key, f"duration out of range {value!r}") from None


def format_duration(value: timedelta) -> str:
    hours = value.days * 24 + value.seconds // 3600
    minutes = (value.seconds % 3600) // 60
    seconds = value.seconds % 60
    out = "PT"
    if hours:
        out += f"{hours}H"
    if minutes:
        out += f"{minutes}M"
    if value.microseconds:
        frac = f"{seconds + value.microseconds / 1_000_000:.6f}".rstrip("0")
        out += f"{frac}S"
    elif seconds or out == "PT":
        out += f"{seconds}S"
    return out


def parse_date_time(value: Any, key: str) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            raise ConfigError(key, f"invalid date-time {value!r}") from None

    # naive timestamps are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _get(data: Dict[str, Any], name: str, path: str, default: Any = None) -> Any:
    if not isinstance(data, dict):
        raise ConfigError(path, "expected a mapping")
    return data.get(name, default)


def _get_bool(data: Dict[str, Any], name: str, path: str, default: bool) -> bool:
    value = _get(data, name, path, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{path}.{name}", f"expected true/false, got {value!r}")
    return value


# -----------------------
# Requests / trends
# -----------------------

def parse_trend(data: Any, key: str) -> BoundedRandomVariableTrend:
    if not isinstance(data, dict):
        raise ConfigError(key, "expected a mapping")
    try:
        trend = BoundedRandomVariableTrend.from_dict(data)
        trend.check_ready()
    except KeyError as e:
        raise ConfigError(f"{key}.{e.args[0]}", "unknown trend property") from None
    except (TypeError, ValueError) as e:
        raise ConfigError(key, str(e)) from None
    return trend


def parse_request(data: Any, key: str) -> MeasureGenerationRequest:
    generator_name = _get(data, "generator", key)
    if not generator_name:
        raise ConfigError(f"{key}.generator", "missing")
    try:
        measure = get_measure_generator(str(generator_name))
    except ValueError as e:
        raise ConfigError(f"{key}.generator", str(e)) from None

    start = _get(data, "start-date-time", key)
    end = _get(data, "end-date-time", key)
    mean_gap = _get(data, "mean-inter-point-duration", key)

    trends_data = _get(data, "trends", key) or {}
    if not isinstance(trends_data, dict):
        raise ConfigError(f"{key}.trends", "expected a mapping")

    trends = {
        str(name): parse_trend(t, f"{key}.trends.{name}")
        for name, t in trends_data.items()
    }

    missing = measure.missing_trend_keys(trends)
    if missing:
        raise ConfigError(f"{key}.trends", f"missing trend(s) for {measure.name}: {', '.join(missing)}")

    request = MeasureGenerationRequest(
        generator_name=measure.name,
        start_date_time=None if start is None else parse_date_time(start, f"{key}.start-date-time"),
        end_date_time=None if end is None else parse_date_time(end, f"{key}.end-date-time"),
        suppress_night_time_measures=_get_bool(data, "suppress-night-time-measures", key, False),
        trends=trends,
    )
    if mean_gap is not None:
        request.mean_inter_point_duration = parse_duration(mean_gap, f"{key}.mean-inter-point-duration")

    try:
        request.validate()
    except ValueError as e:
        raise ConfigError(key, str(e)) from None
    return request


def trend_to_dict(trend: BoundedRandomVariableTrend) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "start-value": trend.start_value,
        "end-value": trend.end_value,
        "standard-deviation": trend.standard_deviation,
    }
    if trend.minimum_value is not None:
        out["minimum-value"] = trend.minimum_value
    if trend.maximum_value is not None:
        out["maximum-value"] = trend.maximum_value
    return out


def request_to_dict(request: MeasureGenerationRequest) -> Dict[str, Any]:
    return {
        "generator": request.generator_name,
        "start-date-time": request.start_date_time.isoformat(),
        "end-date-time": request.end_date_time.isoformat(),
        "mean-inter-point-duration": format_duration(request.mean_inter_point_duration),
        "suppress-night-time-measures": request.suppress_night_time_measures,
        "trends": {k: trend_to_dict(t) for k, t in request.trends.items()},
    }


# -----------------------
# Store
# -----------------------

class SettingsStore:
    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> GeneratorSettings:
        if not self.path.exists():
            raise ConfigError(str(self.path), "config file not found")
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(str(self.path), f"invalid YAML: {e}") from None

        return self.from_dict(raw)

    def from_dict(self, raw: Dict[str, Any]) -> GeneratorSettings:
        s = GeneratorSettings()

        data = _get(raw, "data", "<root>") or {}
        header = _get(data, "header", "data") or {}
        provenance = _get(header, "acquisition-provenance", "data.header") or {}

        s.user_id = str(_get(header, "user-id", "data.header", s.user_id))
        s.source_name = str(_get(provenance, "source-name", "data.header.acquisition-provenance", s.source_name))

        requests = _get(data, "measure-generation-requests", "data") or []
        if not isinstance(requests, list):
            raise ConfigError("data.measure-generation-requests", "expected a list")
        s.requests = [
            parse_request(r, f"data.measure-generation-requests[{i}]")
            for i, r in enumerate(requests)
        ]

        output = _get(raw, "output", "<root>") or {}
        destination = str(_get(output, "destination", "output", s.output_destination))
        if destination not in DESTINATIONS:
            raise ConfigError("output.destination", f"expected one of {', '.join(DESTINATIONS)}")
        s.output_destination = destination

        file_cfg = _get(output, "file", "output") or {}
        filename = _get(file_cfg, "filename", "output.file")
        if filename:
            p = Path(str(filename))
            # relative filenames resolve next to the config file
            s.output_file = p if p.is_absolute() else self.path.parent / p
        s.append = _get_bool(file_cfg, "append", "output.file", s.append)

        seed = _get(raw, "seed", "<root>")
        if seed is not None:
            try:
                s.seed = int(seed)
            except (TypeError, ValueError):
                raise ConfigError("seed", f"expected an integer, got {seed!r}") from None

        return s

    def _filename_for(self, output_file: Path) -> str:
        # inverse of load(): files under the config directory are written relative to it
        target = Path(output_file).resolve()
        try:
            return target.relative_to(self.path.parent.resolve()).as_posix()
        except ValueError:
            return str(target)

    def save(self, settings: GeneratorSettings) -> None:
        raw: Dict[str, Any] = {
            "data": {
                "header": {
                    "user-id": settings.user_id,
                    "acquisition-provenance": {"source-name": settings.source_name},
                },
                "measure-generation-requests": [request_to_dict(r) for r in settings.requests],
            },
            "output": {
                "destination": settings.output_destination,
                "file": {"append": settings.append},
            },
        }
        if settings.output_file is not None:
            raw["output"]["file"]["filename"] = self._filename_for(settings.output_file)
        if settings.seed is not None:
            raw["seed"] = settings.seed

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(raw, sort_keys=False), encoding="utf-8")
