"""Application launcher.

Logging goes to stderr; set DAYSTRIP_DEBUG=1 for state machine and delay
tracing. Picker timings and geometry come from ``PickerConfig.from_env``.
"""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from .config import PickerConfig, env_flag
from .ui.main_window import MainWindow


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run():
    configure_logging(env_flag("DEBUG"))
    app = QApplication(sys.argv)
    window = MainWindow(config=PickerConfig.from_env())
    window.show()
    window.centerOnPreferredScreen()
    sys.exit(app.exec())


if __name__ == "__main__":
    run()
