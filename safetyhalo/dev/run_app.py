from __future__ import annotations

import sys
from PySide6.QtWidgets import QApplication

from safetyhalo.audio.qt_tone_sink import QtToneSink
from safetyhalo.bootstrap import build_app_system
from safetyhalo.core.config.yaml_config import load_app_config
from safetyhalo.ui.main_dashboard import MainWindow
from safetyhalo.ui.theme import APP_QSS


def main() -> None:
    """
    Start the desktop UI and runtime threads.

    Notes
    -----
    - Loads configuration from `config.yaml` by default.
    - Optional CLI usage:
        python -m safetyhalo.dev.run_app --config path/to/config.yaml
    - The tone sink is created here so it lives on the GUI thread.
    """
    app = QApplication(sys.argv)
    app.setStyleSheet(APP_QSS)

    config_path = None
    if "--config" in sys.argv:
        i = sys.argv.index("--config")
        if i + 1 < len(sys.argv):
            config_path = sys.argv[i + 1]

    alerts = load_app_config(config_path).alerts
    sink = QtToneSink(sample_rate=alerts.sample_rate, volume=alerts.volume) if alerts.audio else None

    wiring = build_app_system(config_path=config_path, sink=sink)

    win = MainWindow(runtime=wiring.runtime, bus=wiring.bus)
    win.show()

    wiring.runtime.start()

    app.aboutToQuit.connect(wiring.runtime.stop)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
