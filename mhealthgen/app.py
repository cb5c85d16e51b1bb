# mhealthgen/app.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from mhealthgen.core.logger import RunLogger, log
from mhealthgen.core.settings_store import ConfigError, GeneratorSettings, SettingsStore
from mhealthgen.core.storage import DataPointWriter, writer_for
from mhealthgen.domain.generation_request import MeasureGenerationRequest
from mhealthgen.domain.measures import DataPointGenerator
from mhealthgen.domain.value_group import TimestampedValueGroup
from mhealthgen.domain.value_group_generator import TrendValueGroupGenerator

RunResult = Tuple[MeasureGenerationRequest, List[TimestampedValueGroup]]


def seed_settings(settings: GeneratorSettings) -> np.random.Generator:
    """One generator shared by the point spacing and every trend's noise, so a seed replays a whole run."""
    rng = np.random.default_rng(settings.seed)
    for request in settings.requests:
        for trend in request.trends.values():
            trend.variable.rng = rng
    return rng


def generate(
    settings: GeneratorSettings,
    writer: DataPointWriter,
    run_logger: Optional[RunLogger] = None,
) -> List[RunResult]:
    rng = seed_settings(settings)
    groups_gen = TrendValueGroupGenerator(rng)
    points_gen = DataPointGenerator(settings.user_id, settings.source_name)

    results: List[RunResult] = []
    for request in settings.requests:
        groups = groups_gen.generate(request)
        n = writer.write(points_gen.generate(request, groups))
        log(f"{request.generator_name}: {n} data points -> {writer.describe()}")

        if run_logger is not None:
            run_logger.log_request(
                request.generator_name,
                request.start_date_time,
                request.end_date_time,
                n,
                writer.describe(),
            )
        results.append((request, groups))
    return results


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="mhealthgen",
        description="Generate mock Open mHealth data points from a YAML configuration.",
    )
    ap.add_argument("--config", required=True, help="YAML configuration file")
    ap.add_argument("--seed", type=int, default=None, help="Override the configured random seed")
    ap.add_argument("--output", default=None, help="Write data points to this file (JSON lines)")
    ap.add_argument("--console", action="store_true", help="Write data points to stdout")
    ap.add_argument("--log-dir", default="logs", help="Directory for the per-run CSV log")
    ap.add_argument("--preview", action="store_true", help="Plot the generated values when done")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = SettingsStore(args.config).load()
    except ConfigError as e:
        log("config error:", e)
        return 2

    if args.seed is not None:
        settings.seed = args.seed
    if args.output:
        settings.output_destination = "file"
        settings.output_file = Path(args.output)
    if args.console:
        settings.output_destination = "console"

    if not settings.requests:
        log("no measure generation requests configured")
        return 0

    with RunLogger(args.log_dir) as run_logger:
        results = generate(settings, writer_for(settings), run_logger)
        log("run log:", run_logger.path)

    if args.preview:
        from mhealthgen.ui.preview import launch_preview
        return launch_preview(results)
    return 0
