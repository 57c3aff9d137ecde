from __future__ import annotations

from PySide6.QtWidgets import QFrame, QLabel, QPlainTextEdit, QVBoxLayout


class ReportPanel(QFrame):
    """
    AI reasoning explanation: summary plus resident and warden directives.
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        title = QLabel("AI Reasoning Explanation")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")

        self.text = QPlainTextEdit()
        self.text.setReadOnly(True)

        self._busy = QLabel("")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addWidget(title)
        layout.addWidget(self._busy)
        layout.addWidget(self.text)

    def set_text(self, text: str) -> None:
        if self.text.toPlainText() != text:
            self.text.setPlainText(text)

    def set_busy(self, busy: bool) -> None:
        self._busy.setText("Analyzing context..." if busy else "")
