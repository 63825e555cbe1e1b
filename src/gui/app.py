"""
GUI launcher — builds the QApplication and shows MainWindow.

Qt WebEngine has to be imported before the QApplication exists, so
preload_web_engine() runs first; without it the window still opens with a
placeholder where the viewer would be.
"""

import logging
import sys
from typing import Optional

from src.config import AppConfig
from src.store.json_store import PacsStore
from src.viewer.bridge import preload_web_engine

__all__ = ["run_gui"]

logger = logging.getLogger(__name__)

APP_NAME = "PACS Web Previewer"


def run_gui(config: AppConfig, store: Optional[PacsStore] = None) -> int:
    """Run the Qt event loop until the main window closes; returns the exit code."""
    preload_web_engine()

    from PyQt6.QtWidgets import QApplication

    from src.gui.main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    window = MainWindow(config=config, store=store)
    window.show()
    logger.info("GUI started (store: %s)", config.store_path)
    return app.exec()
