from __future__ import annotations

# Light "clinical" palette: slate surfaces, indigo accents.
APP_QSS = """
QMainWindow {
    background: #f8fafc; /* slate-50 */
    font-family: Inter, Segoe UI, Arial;
    font-size: 12px;
}

QLabel, QCheckBox {
    color: #1e293b; /* slate-800 */
}

QFrame#Card {
    background: #ffffff;
    border: 1px solid #e2e8f0; /* slate-200 */
    border-radius: 16px;
}

QFrame#StatusBanner {
    background: #ffffff;
    border: 2px solid #e2e8f0;
    border-radius: 16px;
}

QTableWidget, QPlainTextEdit {
    background: #f1f5f9; /* slate-100 */
    border: 0px;
    border-radius: 10px;
    gridline-color: #e2e8f0;
    color: #334155; /* slate-700 */
}

QHeaderView::section {
    background: #f1f5f9;
    color: #64748b; /* slate-500 */
    border: 0px;
    padding: 6px;
    font-size: 10px;
    font-weight: 800;
}

QPushButton {
    background: #4f46e5; /* indigo-600 */
    border: 0px;
    padding: 8px 12px;
    border-radius: 10px;
    color: #ffffff;
    font-weight: 700;
}
QPushButton:hover {
    background: #4338ca; /* indigo-700 */
}
QPushButton:disabled {
    background: #cbd5e1; /* slate-300 */
    color: #f8fafc;
}

QDoubleSpinBox {
    background: #f1f5f9;
    border: 1px solid #e2e8f0;
    border-radius: 6px;
    padding: 4px 6px;
}
"""

COLOR_OK = "#10b981"          # emerald-500
COLOR_WARN = "#f59e0b"        # amber-500
COLOR_CRIT = "#f43f5e"        # rose-500
COLOR_TEXT_MUTED = "#64748b"  # slate-500

COLOR_TEMP = "#6366f1"        # indigo-500
COLOR_GAS = "#06b6d4"         # cyan-500
COLOR_NOISE = "#f43f5e"       # rose-500

LEVEL_COLORS = {"OK": COLOR_OK, "WARNING": COLOR_WARN, "CRITICAL": COLOR_CRIT}
