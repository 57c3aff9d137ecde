from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout

from safetyhalo.ui.theme import COLOR_OK, COLOR_TEXT_MUTED, LEVEL_COLORS


class StatusIndicator(QFrame):
    """
    Status banner: headline in the level color, detail line below and a
    border matching the level.
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("StatusBanner")
        self.setMinimumWidth(420)

        self._headline = QLabel("NOMINAL STATUS")
        self._detail = QLabel("")
        self._detail.setStyleSheet(f"color: {COLOR_TEXT_MUTED}; font-size: 11px;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 12, 18, 12)
        layout.setSpacing(2)
        layout.addWidget(self._headline, 0, Qt.AlignLeft)
        layout.addWidget(self._detail, 0, Qt.AlignLeft)

        self._level = ""
        self.set_level("OK", "NOMINAL STATUS")

    def set_level(self, level: str, text: str) -> None:
        """
        level: 'OK' | 'WARNING' | 'CRITICAL'; text: "<headline> - <detail>"
        """
        headline, _, detail = text.partition(" - ")
        self._headline.setText(headline)
        self._detail.setText(detail)

        if level == self._level:
            return
        self._level = level
        color = LEVEL_COLORS.get(level, COLOR_OK)
        self._headline.setStyleSheet(f"color: {color}; font-size: 22px; font-weight: 900;")
        self.setStyleSheet(f"QFrame#StatusBanner {{ border-color: {color}; }}")
