"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It keeps grid limits, default canvas size and export limits in
   one place instead of scattered through the widgets and exporters.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (icons) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    ICON_PATH (str): Absolute path to the application icon.
"""
import sys
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/reelpreview/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
ICON_PATH: str = os.path.join(ASSETS_PATH, "reelpreview.svg")

# Grid
MIN_GRID: int = 1
MAX_GRID: int = 20
DEFAULT_ROWS: int = 4
DEFAULT_COLS: int = 5

# Slider ranges (spin boxes accept any integer, sliders only show this window)
PADDING_RANGE = (0, 200)
OFFSET_RANGE = (-200, 200)
GAP_RANGE = (0, 200)
SIZE_RANGE = (0, 200)

# Canvas used when no reelhouse is loaded
DEFAULT_CANVAS_WIDTH: int = 1280
DEFAULT_CANVAS_HEIGHT: int = 720

# Export limits (pixels)
MAX_SYMBOL_DIMENSION: int = 500
MAX_SPRITESHEET_DIMENSION: int = 2048
MAX_REELHOUSE_DIMENSION: int = 2000

# Export file names
SPRITESHEET_FILENAME: str = "sprite_symbols.webp"
SPRITE_DATA_FILENAME: str = "sprite_symbols.json"
REELHOUSE_SPRITE_FILENAME: str = "sprite_reelhouse.webp"
CONFIG_FILENAME: str = "config-symbols.json"
PREVIEW_FILENAME: str = "preview.png"

IMAGE_FILE_FILTER: str = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif)"

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
