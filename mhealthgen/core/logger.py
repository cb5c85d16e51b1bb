# mhealthgen/core/logger.py
import csv
import sys
from datetime import datetime
from pathlib import Path

PREFIX = "[mhealthgen]"


def log(*parts) -> None:
    print(PREFIX, *parts, file=sys.stderr)


class RunLogger:
    def __init__(self, out_dir: str = "logs"):
        Path(out_dir).mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.path = Path(out_dir) / f"run_{ts}.csv"

        self._file = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._writer.writerow(["timestamp", "generator", "start", "end", "data_points", "output"])

    def log_request(self, generator: str, start: datetime, end: datetime, data_points: int, output: str):
        ts = datetime.now().isoformat(timespec="seconds")
        self._writer.writerow([ts, generator, start.isoformat(), end.isoformat(), data_points, output])
        self._file.flush()

    def close(self):
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
