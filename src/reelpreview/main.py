"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the session data model (SessionState).
2. Instantiates the Main Window (View).
3. Passes the Model into the View so they can communicate.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication, QSettings
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication

from reelpreview import config
from reelpreview.logging_config import setup_logging
from reelpreview.model.state import SessionState
from reelpreview.view.main_window import MainWindow, VISIBLE_APP_NAME

ORG_ID = "reelpreview"
APP_ID = "symbols-previewer"

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview symbols inside a reelhouse grid")
    parser.add_argument("config", nargs="?", help="config-symbols.json to import on start")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--log-file", dest="log_file", help="also write the log to this file")
    return parser.parse_args(argv)


def create_app(argv: List[str]) -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication(argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    if os.path.exists(config.ICON_PATH):
        app.setWindowIcon(QIcon(config.ICON_PATH))
    return app


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = create_app(sys.argv[:1])

    # 3. Initialize the Data Model
    session = SessionState()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(session)
    window.show()
    if args.config:
        window.import_config_files([args.config])

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
