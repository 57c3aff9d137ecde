from __future__ import annotations

from typing import List

import pyqtgraph as pg
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout

from safetyhalo.domain.models import TrendPoint
from safetyhalo.ui.adapters.store_snapshots import trend_series
from safetyhalo.ui.theme import COLOR_GAS, COLOR_NOISE, COLOR_TEMP


class TrendPlot(QFrame):
    """
    Real-time telemetry chart: temperature, gas % and noise % over the
    trend buffer window.
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        title = QLabel("Real-time Telemetry")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")

        pg.setConfigOptions(antialias=True)

        self.plot = pg.PlotWidget()
        self.plot.setBackground(None)
        self.plot.showGrid(x=False, y=True, alpha=0.2)
        self.plot.addLegend(offset=(10, 10))

        self.temp_curve = self.plot.plot([], [], pen=pg.mkPen(COLOR_TEMP, width=2), name="Temp °C")
        self.gas_curve = self.plot.plot([], [], pen=pg.mkPen(COLOR_GAS, width=2), name="Gas %")
        self.noise_curve = self.plot.plot([], [], pen=pg.mkPen(COLOR_NOISE, width=2), name="Noise %")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addWidget(title)
        layout.addWidget(self.plot)

    def set_points(self, points: List[TrendPoint]) -> None:
        """
        Redraw from the buffered points (call periodically from QTimer).
        """
        series = trend_series(points)
        xs = list(range(len(series.labels)))
        self.temp_curve.setData(xs, series.temp)
        self.gas_curve.setData(xs, series.gas)
        self.noise_curve.setData(xs, series.noise)

        axis = self.plot.getAxis("bottom")
        step = max(1, len(xs) // 5)
        axis.setTicks([[(x, series.labels[x]) for x in xs[::step]]])
