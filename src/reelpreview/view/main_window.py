"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the Control Panel and the
Preview Canvas.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (like File -> Export Config) to the
   appropriate controllers and reports their failures to the user.
"""
import logging
import os
from typing import List

from PySide6.QtWidgets import (
    QMainWindow, QSplitter, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QAction

from reelpreview import config
from reelpreview.controller import imaging
from reelpreview.controller.exporter import ExportManager
from reelpreview.model.state import SessionState
from reelpreview.view.control_panel import ControlPanel
from reelpreview.view.widgets.preview_canvas import PreviewCanvas

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Symbols Previewer"
LAST_DIR_KEY = "ui/last_directory"

ABOUT_TEXT = (
    "<b>Symbols Previewer</b><br><br>"
    "Load a reelhouse frame and a set of symbol images, then tune the grid "
    "with padding, offset, gap and size controls. Individual symbols have "
    "their own size and offset.<br><br>"
    "<b>Mega Symbols</b> lets a symbol cover several cells. Shapes are placed "
    "largest first; remaining cells are filled with random 1×1 symbols.<br><br>"
    "Use <b>Shuffle</b> for a new random layout and the File menu to export "
    "sprites, the config or a preview image."
)


class MainWindow(QMainWindow):
    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session: SessionState = session
        self.settings = QSettings()

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Controls ---
        self.controls = ControlPanel(self.session)
        splitter.addWidget(self.controls)

        # --- RIGHT SIDE: Preview ---
        self.canvas = PreviewCanvas(self.session)
        splitter.addWidget(self.canvas)

        splitter.setSizes([420, 980])

        # --- SIGNAL CONNECTIONS ---
        self.controls.render_requested.connect(self.update_preview)
        self.controls.load_reelhouse_requested.connect(self.on_load_reelhouse)
        self.controls.load_symbols_requested.connect(self.on_load_symbols)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # Initial Render
        self.update_preview()

    def _create_actions(self) -> None:
        self.act_new = QAction("New Session", self)
        self.act_new.setShortcut("Ctrl+N")
        self.act_new.triggered.connect(self.on_file_new)

        self.act_import = QAction("Import Config…", self)
        self.act_import.setShortcut("Ctrl+O")
        self.act_import.triggered.connect(self.on_import_config)

        self.act_export_sprites = QAction("Export Sprites…", self)
        self.act_export_sprites.triggered.connect(self.on_export_sprites)

        self.act_export_config = QAction("Export Config…", self)
        self.act_export_config.setShortcut("Ctrl+S")
        self.act_export_config.triggered.connect(self.on_export_config)

        self.act_export_preview = QAction("Export Preview…", self)
        self.act_export_preview.setShortcut("Ctrl+E")
        self.act_export_preview.triggered.connect(self.on_export_preview)

        self.act_shuffle = QAction("Shuffle", self)
        self.act_shuffle.setShortcut("Ctrl+R")
        self.act_shuffle.triggered.connect(self.controls.on_shuffle)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_about = QAction("About", self)
        self.act_about.triggered.connect(self.on_about)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_new)
        file_menu.addSeparator()
        file_menu.addAction(self.act_import)
        file_menu.addSeparator()
        file_menu.addAction(self.act_export_sprites)
        file_menu.addAction(self.act_export_config)
        file_menu.addAction(self.act_export_preview)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        layout_menu = menu_bar.addMenu("&Layout")
        layout_menu.addAction(self.act_shuffle)

        help_menu = menu_bar.addMenu("&Help")
        help_menu.addAction(self.act_about)

    # --- HELPER METHODS ---

    def update_preview(self) -> None:
        self.canvas.refresh()

    def refresh_ui_from_state(self) -> None:
        """
        After loading a file, the State is updated, but the Widgets are old.
        Force the Widgets to read from the State again.
        """
        self.controls.load_from_state()
        self.update_preview()

    def _last_dir(self) -> str:
        return str(self.settings.value(LAST_DIR_KEY, "", type=str))

    def _remember_dir(self, path: str) -> None:
        directory = path if os.path.isdir(path) else os.path.dirname(path)
        self.settings.setValue(LAST_DIR_KEY, directory)

    def _show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self, title, message)

    # --- IMAGE SLOTS ---

    def on_load_reelhouse(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(
            self, "Load Reelhouse", self._last_dir(), config.IMAGE_FILE_FILTER
        )
        if not fname:
            return
        try:
            self.session.set_reelhouse(imaging.load_image(fname))
            self._remember_dir(fname)
        except imaging.ImageLoadError as e:
            logger.error(f"Failed to load reelhouse image: {e}")
            self._show_error("Error", f"Failed to load reelhouse image:\n{e}")
            return
        self.refresh_ui_from_state()

    def on_load_symbols(self) -> None:
        fnames, _ = QFileDialog.getOpenFileNames(
            self, "Add Symbols", self._last_dir(), config.IMAGE_FILE_FILTER
        )
        if fnames:
            self.add_symbol_files(fnames)

    def add_symbol_files(self, paths: List[str]) -> None:
        loaded = []
        failed = []
        for path in paths:
            try:
                loaded.append((imaging.load_image(path), imaging.display_name(path)))
            except imaging.ImageLoadError as e:
                logger.error(f"Failed to load symbol image: {e}")
                failed.append(os.path.basename(path))

        if loaded:
            self.session.add_symbols(loaded)
            self._remember_dir(paths[0])
            self.refresh_ui_from_state()
        if failed:
            self._show_error("Error", "Failed to load symbol images:\n" + "\n".join(failed))

    # --- FILE SLOTS ---

    def on_file_new(self) -> None:
        self.session.reset()
        self.refresh_ui_from_state()

    def on_import_config(self) -> None:
        fnames, _ = QFileDialog.getOpenFileNames(
            self, "Import Config", self._last_dir(), "Config (*.json *.webp)"
        )
        if fnames:
            self.import_config_files(fnames)

    def import_config_files(self, paths: List[str]) -> None:
        try:
            ExportManager.import_config(self.session, paths)
            self._remember_dir(paths[0])
        except Exception as e:
            self._show_error("Error", f"Failed to import config:\n{e}")
            return
        self.refresh_ui_from_state()

    def on_export_sprites(self) -> None:
        if not self.session.symbols:
            QMessageBox.information(self, VISIBLE_APP_NAME, "No symbols to export. Please add some symbols first.")
            return
        directory = QFileDialog.getExistingDirectory(self, "Export Sprites To", self._last_dir())
        if not directory:
            return
        try:
            written = ExportManager.export_sprites(self.session, directory)
            self._remember_dir(directory)
        except Exception as e:
            self._show_error("Error", f"Failed to save:\n{e}")
            return
        self.statusBar().showMessage(f"Exported {len(written)} files to {directory}", 5000)

    def on_export_config(self) -> None:
        if not self.session.symbols:
            QMessageBox.information(self, VISIBLE_APP_NAME, "No symbols to export. Please add some symbols first.")
            return
        fname, _ = QFileDialog.getSaveFileName(
            self, "Export Config", os.path.join(self._last_dir(), config.CONFIG_FILENAME), "JSON Files (*.json)"
        )
        if not fname:
            return
        if not fname.endswith(".json"):
            fname += ".json"
        try:
            ExportManager.export_config(self.session, fname)
            self._remember_dir(fname)
        except Exception as e:
            self._show_error("Error", f"Failed to save:\n{e}")
            return
        self.statusBar().showMessage(f"Config saved to {fname}", 5000)

    def on_export_preview(self) -> None:
        if self.session.reelhouse is None and not self.session.symbols:
            QMessageBox.information(
                self, VISIBLE_APP_NAME, "Nothing to preview. Please add reelhouse or symbols first."
            )
            return
        fname, _ = QFileDialog.getSaveFileName(
            self, "Export Preview", os.path.join(self._last_dir(), config.PREVIEW_FILENAME), "PNG Images (*.png)"
        )
        if not fname:
            return
        if not fname.endswith(".png"):
            fname += ".png"
        try:
            ExportManager.export_preview(self.session, fname)
            self._remember_dir(fname)
        except Exception as e:
            self._show_error("Error", f"Failed to save:\n{e}")
            return
        self.statusBar().showMessage(f"Preview saved to {fname}", 5000)

    def on_about(self) -> None:
        QMessageBox.about(self, VISIBLE_APP_NAME, ABOUT_TEXT)
