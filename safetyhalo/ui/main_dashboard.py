from __future__ import annotations

import logging
from pathlib import Path
from queue import Empty
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from safetyhalo.domain.events import EvaluationEvent
from safetyhalo.runtime.app_runtime import AppRuntime
from safetyhalo.runtime.event_bus import EventBus
from safetyhalo.simulation.scenarios import SCENARIOS
from safetyhalo.ui.adapters.store_snapshots import indicator_state, log_rows, report_text
from safetyhalo.ui.widgets.control_bar import ControlBar
from safetyhalo.ui.widgets.event_log_table import EventLogTable
from safetyhalo.ui.widgets.report_panel import ReportPanel
from safetyhalo.ui.widgets.status_indicator import StatusIndicator
from safetyhalo.ui.widgets.trend_plot import TrendPlot

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main dashboard window.
    - Top: status indicator
    - Middle: trend chart + controls / AI report
    - Bottom: event ledger
    """

    def __init__(self, runtime: AppRuntime, bus: EventBus) -> None:
        super().__init__()
        self.setWindowTitle("SafetyHalo Monitor")
        self.resize(1280, 820)

        self.runtime = runtime
        self.store = runtime.store
        self.bus = bus
        self._latest: Optional[EvaluationEvent] = self.store.latest_evaluation

        root = QWidget()
        self.setCentralWidget(root)
        layout = QVBoxLayout(root)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        # Top bar
        top = QHBoxLayout()
        self.status = StatusIndicator()
        top.addWidget(self.status)
        top.addStretch(1)
        layout.addLayout(top)

        # Middle: chart | controls + report
        splitter = QSplitter()
        splitter.setChildrenCollapsible(False)

        self.trend_plot = TrendPlot()
        self.controls = ControlBar(scenario_names=list(SCENARIOS))
        self.report = ReportPanel()

        side = QWidget()
        side_layout = QVBoxLayout(side)
        side_layout.setContentsMargins(0, 0, 0, 0)
        side_layout.setSpacing(12)
        side_layout.addWidget(self.controls)
        side_layout.addWidget(self.report, stretch=1)

        splitter.addWidget(self.trend_plot)
        splitter.addWidget(side)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        layout.addWidget(splitter, stretch=3)

        # Bottom: ledger
        self.log_table = EventLogTable()
        layout.addWidget(self.log_table, stretch=2)

        self.controls.set_settings(self.store.threshold(), self.store.alerts_enabled())
        self.controls.scenario_requested.connect(self._on_scenario)
        self.controls.threshold_changed.connect(self.runtime.set_threshold)
        self.controls.alerts_toggled.connect(self.runtime.set_alerts_enabled)
        self.controls.clear_requested.connect(self._on_clear)
        self.controls.export_requested.connect(self._on_export)

        # UI refresh timer
        self.timer = QTimer(self)
        self.timer.setInterval(200)  # 5 Hz refresh
        self.timer.timeout.connect(self.refresh_ui)
        self.timer.start()

    def refresh_ui(self) -> None:
        # Drain evaluation events; the newest one drives the indicator
        while True:
            try:
                self._latest = self.bus.evaluation_events_q.get_nowait()
            except Empty:
                break

        busy = self.runtime.busy
        self.controls.set_busy(busy)
        self.report.set_busy(busy)

        level, text = indicator_state(self._latest)
        self.status.set_level(level, text)
        self.report.set_text(report_text(self._latest))

        self.trend_plot.set_points(self.store.trend_points)
        self.log_table.set_rows(log_rows(self.store))

    def _on_scenario(self, name: str) -> None:
        self.runtime.trigger_scenario(name)

    def _on_clear(self) -> None:
        self.runtime.clear_log()
        self._latest = None

    def _on_export(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Export Event Log", "safetyhalo_log.csv", "CSV (*.csv)")
        if not path:
            return
        try:
            Path(path).write_text(self.runtime.export_log(), encoding="utf-8")
        except OSError as e:
            log.error("Export to %s failed: %s", path, e)
            QMessageBox.warning(self, "Export failed", str(e))
