from __future__ import annotations

from typing import List

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFrame,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from safetyhalo.ui.adapters.store_snapshots import LogRow
from safetyhalo.ui.theme import COLOR_CRIT, COLOR_OK, COLOR_TEXT_MUTED, COLOR_WARN

_STATUS_COLORS = {"SAFE": COLOR_OK, "WARNING": COLOR_WARN, "DANGER": COLOR_CRIT}


class EventLogTable(QFrame):
    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        title = QLabel("Event Ledger")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")
        self._count = QLabel("0 entries")
        self._count.setStyleSheet(f"color: {COLOR_TEXT_MUTED};")

        header = QHBoxLayout()
        header.addWidget(title)
        header.addStretch(1)
        header.addWidget(self._count)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Time", "ML State", "AI Assessment", "Sensors"])
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addLayout(header)
        layout.addWidget(self.table)

        self._last_rows: List[LogRow] = []

    def set_rows(self, rows: List[LogRow]) -> None:
        if rows == self._last_rows:
            return
        self._last_rows = list(rows)

        self.table.setRowCount(len(rows))
        for i, (t, state, status, sensors) in enumerate(rows):
            self._item(i, 0, t)
            self._item(i, 1, state)
            self._item(i, 2, status).setForeground(QColor(_STATUS_COLORS.get(status, COLOR_OK)))
            self._item(i, 3, sensors)
        self._count.setText(f"{len(rows)} entries")

    def _item(self, r: int, c: int, text: str) -> QTableWidgetItem:
        it = QTableWidgetItem(text)
        it.setFlags(it.flags() & ~Qt.ItemIsEditable)
        it.setTextAlignment(Qt.AlignCenter)
        self.table.setItem(r, c, it)
        return it
