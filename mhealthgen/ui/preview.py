# mhealthgen/ui/preview.py
from __future__ import annotations

import sys
from typing import List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QLabel, QFrame, QScrollArea
)

import pyqtgraph as pg

from mhealthgen.domain.generation_request import MeasureGenerationRequest
from mhealthgen.domain.value_group import TimestampedValueGroup
from mhealthgen.ui.style import PREVIEW_QSS, series_color


def _card() -> QFrame:
    f = QFrame()
    f.setObjectName("card")
    return f


def _hours_since(start, groups: List[TimestampedValueGroup]) -> List[float]:
    return [(g.timestamp - start).total_seconds() / 3600.0 for g in groups]


class PreviewWindow(QMainWindow):
    """
    Read-only chart of a finished run:
    one card per request, one plot per trend key (x = hours since request start).
    """

    def __init__(self, results):
        super().__init__()
        self.setWindowTitle("mhealthgen preview")
        self.resize(960, 720)

        pg.setConfigOptions(antialias=True)

        body = QWidget()
        root = QVBoxLayout(body)
        root.setContentsMargins(22, 20, 22, 20)
        root.setSpacing(12)

        title = QLabel("Generated data")
        title.setObjectName("title")
        root.addWidget(title)

        self.plots: List[pg.PlotWidget] = []
        for request, groups in results:
            root.addWidget(self._request_card(request, groups))
        root.addStretch(1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(body)
        self.setCentralWidget(scroll)

    def _request_card(self, request: MeasureGenerationRequest, groups: List[TimestampedValueGroup]) -> QFrame:
        card = _card()
        layout = QVBoxLayout(card)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        header = QLabel(f"{request.generator_name} · {len(groups)} points")
        header.setStyleSheet("font-weight: 700;")
        layout.addWidget(header)

        span = QLabel(f"{request.start_date_time:%Y-%m-%d %H:%M} → {request.end_date_time:%Y-%m-%d %H:%M}")
        span.setObjectName("muted")
        layout.addWidget(span)

        xs = _hours_since(request.start_date_time, groups)
        for i, key in enumerate(request.trends):
            plot = pg.PlotWidget()
            plot.setMinimumHeight(160)
            plot.setBackground(None)
            plot.showGrid(x=True, y=True, alpha=0.2)
            plot.setTitle(key)
            plot.setLabel("bottom", "hours")
            plot.plot(xs, [g.get_value(key) for g in groups], pen=pg.mkPen(series_color(i), width=2))

            trend = request.trends[key]
            plot.plot(
                [0.0, request.total_duration.total_seconds() / 3600.0],
                [trend.start_value, trend.end_value],
                pen=pg.mkPen("#e7eef7", width=1, style=Qt.DashLine),
            )
            self.plots.append(plot)
            layout.addWidget(plot)

        return card


def launch_preview(results) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    app.setStyleSheet(PREVIEW_QSS)
    window = PreviewWindow(results)
    window.show()
    return app.exec()
