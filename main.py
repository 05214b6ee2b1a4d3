"""Entry point for the ASKA invoicing desktop app."""

import logging
import sys

from PyQt5.QtWidgets import QApplication

from aska import config
from aska.ui.main_window import MainWindow


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(config.LOG_PATH, mode="a", encoding="utf-8"),
        ],
    )
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
