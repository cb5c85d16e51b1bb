# mhealthgen/core/storage.py
from __future__ import annotations

import json
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, TextIO

from PySide6.QtCore import QStandardPaths

from mhealthgen.core.settings_store import GeneratorSettings
from mhealthgen.domain.data_point import DataPoint


def _app_data_dir() -> Path:
    base = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    p = Path(base)
    p.mkdir(parents=True, exist_ok=True)
    return p


def default_output_path() -> Path:
    return _app_data_dir() / "output.json"


def _line(point: DataPoint) -> str:
    return json.dumps(point.to_dict(), ensure_ascii=False)


class DataPointWriter(ABC):
    @abstractmethod
    def write(self, data_points: Iterable[DataPoint]) -> int:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


class ConsoleDataPointWriter(DataPointWriter):
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def write(self, data_points: Iterable[DataPoint]) -> int:
        out = self.stream or sys.stdout
        n = 0
        for point in data_points:
            out.write(_line(point) + "\n")
            n += 1
        out.flush()
        return n

    def describe(self) -> str:
        return "console"


class FileDataPointWriter(DataPointWriter):
    """
    One JSON document per line.
    append=False replaces the file on the first write (via a .tmp file), later writes append.
    """

    def __init__(self, path, append: bool = True):
        self.path = Path(path)
        self.append = bool(append)
        self._truncated = False

    def write(self, data_points: Iterable[DataPoint]) -> int:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        lines = [_line(p) + "\n" for p in data_points]

        if not self.append and not self._truncated:
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                f.writelines(lines)
            tmp.replace(self.path)
            self._truncated = True
        else:
            with self.path.open("a", encoding="utf-8") as f:
                f.writelines(lines)

        return len(lines)

    def describe(self) -> str:
        return str(self.path)


def writer_for(settings: GeneratorSettings) -> DataPointWriter:
    if settings.output_destination == "console":
        return ConsoleDataPointWriter()
    return FileDataPointWriter(settings.output_file or default_output_path(), append=settings.append)
