from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QDoubleSpinBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
)


class ControlBar(QFrame):
    """
    Scenario triggers and safety settings.

    Emits signals only; the main window forwards them to the runtime.
    """

    scenario_requested = Signal(str)
    threshold_changed = Signal(float)
    alerts_toggled = Signal(bool)
    clear_requested = Signal()
    export_requested = Signal()

    def __init__(self, scenario_names: Iterable[str], parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        title = QLabel("Simulation Triggers")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")

        grid = QGridLayout()
        grid.setSpacing(8)
        self._buttons = []
        for i, name in enumerate(scenario_names):
            btn = QPushButton(name.replace("_", " ").title())
            btn.clicked.connect(lambda _=False, n=name: self.scenario_requested.emit(n))
            grid.addWidget(btn, i // 2, i % 2)
            self._buttons.append(btn)

        self.threshold_spin = QDoubleSpinBox()
        self.threshold_spin.setRange(0.0, 1.0)
        self.threshold_spin.setSingleStep(0.05)
        self.threshold_spin.setDecimals(2)
        self.threshold_spin.valueChanged.connect(self.threshold_changed.emit)

        self.alerts_check = QCheckBox("Audio alerts")
        self.alerts_check.toggled.connect(self.alerts_toggled.emit)

        settings = QHBoxLayout()
        settings.addWidget(QLabel("Confidence threshold:"))
        settings.addWidget(self.threshold_spin)
        settings.addStretch(1)
        settings.addWidget(self.alerts_check)

        clear_btn = QPushButton("Clear Log")
        clear_btn.clicked.connect(self.clear_requested.emit)
        export_btn = QPushButton("Export CSV")
        export_btn.clicked.connect(self.export_requested.emit)

        actions = QHBoxLayout()
        actions.addStretch(1)
        actions.addWidget(clear_btn)
        actions.addWidget(export_btn)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addWidget(title)
        layout.addLayout(grid)
        layout.addLayout(settings)
        layout.addLayout(actions)

    def set_settings(self, threshold: float, alerts_enabled: bool) -> None:
        """
        Show persisted settings without re-emitting change signals.
        """
        self.threshold_spin.blockSignals(True)
        self.alerts_check.blockSignals(True)
        try:
            self.threshold_spin.setValue(threshold)
            self.alerts_check.setChecked(alerts_enabled)
        finally:
            self.threshold_spin.blockSignals(False)
            self.alerts_check.blockSignals(False)

    def set_busy(self, busy: bool) -> None:
        for btn in self._buttons:
            btn.setEnabled(not busy)
