"""
Export / Import Manager
=======================
Writes the session to disk as reusable assets and reads config files back.

Exports:
    * Sprites: ``sprite_symbols.webp`` + ``sprite_symbols.json`` (+ reelhouse)
    * Config: single ``config-symbols.json`` with Base64 embedded images
    * Preview: ``preview.png`` with a settings bar

Imports config versions 1 to 5 (see ``reelpreview.model.io``).
"""
import glob
import json
import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from PySide6.QtGui import QImage

from reelpreview import config
from reelpreview.controller import imaging
from reelpreview.controller.renderer import render_with_settings_bar
from reelpreview.controller.spritesheet import create_spritesheet
from reelpreview.model import io
from reelpreview.model.io import ConfigError
from reelpreview.model.state import SessionState
from reelpreview.model.symbols import Symbol

logger = logging.getLogger(__name__)

SPRITESHEET_NAME_HINTS = ("config-symbols", "spritesheet", "symbols_preview")


class ExportError(RuntimeError):
    """Raised when there is nothing to export."""


class ExportManager:

    # ---- EXPORT ----

    @staticmethod
    def export_sprites(state: SessionState, directory: str) -> List[str]:
        """
        Writes the symbol spritesheet, its sprite data JSON and, when loaded,
        the downscaled reelhouse into ``directory``. Returns the written paths.
        """
        if not state.symbols:
            raise ExportError("No symbols to export. Please add some symbols first.")

        logger.info(f"Exporting sprites to: {directory}")
        os.makedirs(directory, exist_ok=True)
        written: List[str] = []
        try:
            sheet = create_spritesheet(state.symbols)

            sheet_path = os.path.join(directory, config.SPRITESHEET_FILENAME)
            imaging.save_image(sheet.image, sheet_path, "WEBP" if imaging.supports_webp() else "PNG")
            written.append(sheet_path)

            data = io.sprite_data(sheet.width, sheet.height, state.symbols, [r.to_dict() for r in sheet.regions])
            data_path = os.path.join(directory, config.SPRITE_DATA_FILENAME)
            with open(data_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            written.append(data_path)

            if state.reelhouse is not None:
                reelhouse, _ = imaging.scale_to_max(state.reelhouse, config.MAX_REELHOUSE_DIMENSION)
                reelhouse_path = os.path.join(directory, config.REELHOUSE_SPRITE_FILENAME)
                imaging.save_image(reelhouse, reelhouse_path)
                written.append(reelhouse_path)

        except Exception as e:
            logger.exception(f"Failed to export sprites: {e}")
            raise

        logger.info(f"Sprites exported ({len(written)} files).")
        return written

    @staticmethod
    def build_config(state: SessionState) -> Dict[str, Any]:
        if not state.symbols:
            raise ExportError("No symbols to export. Please add some symbols first.")

        sheet = create_spritesheet(state.symbols)
        spritesheet = {
            "imageData": imaging.image_to_data_url(sheet.image),
            "width": sheet.width,
            "height": sheet.height,
        }
        reelhouse = None
        if state.reelhouse is not None:
            reelhouse = imaging.image_to_data_url(state.reelhouse, config.MAX_REELHOUSE_DIMENSION)

        return io.config_record(
            state.grid, state.symbols, [r.to_dict() for r in sheet.regions], spritesheet, reelhouse
        )

    @staticmethod
    def export_config(state: SessionState, filepath: str) -> None:
        logger.info(f"Saving config to: {filepath}")
        record = ExportManager.build_config(state)
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(record, f)
        except Exception as e:
            logger.exception(f"Failed to save config: {e}")
            raise
        logger.info(f"Config saved to: {filepath}")

    @staticmethod
    def export_preview(state: SessionState, filepath: str) -> QImage:
        if state.reelhouse is None and not state.symbols:
            raise ExportError("Nothing to preview. Please add reelhouse or symbols first.")

        image = render_with_settings_bar(state)
        try:
            imaging.save_image(image, filepath, "PNG")
        except Exception as e:
            logger.exception(f"Failed to save preview: {e}")
            raise
        return image

    # ---- IMPORT ----

    @staticmethod
    def import_config(state: SessionState, paths: Sequence[str]) -> None:
        """
        Restores settings, symbols and reelhouse from a config JSON.

        ``paths`` must contain one ``.json`` file. Version 3/4 configs also
        need their ``.webp`` files; they are taken from ``paths`` or, failing
        that, from the JSON file's directory.
        """
        json_path = next((p for p in paths if p.lower().endswith(".json")), None)
        if json_path is None:
            raise ConfigError("Please select a JSON config file")

        logger.info(f"Loading config from: {json_path}")
        try:
            with open(json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.exception(f"Failed to parse config: {e}")
            raise ConfigError(f"Config file is not valid JSON: {e}") from e

        version = io.validate_config(data)
        grid = io.settings_from_dict(data["settings"])
        records = data.get("symbols") or []

        webp_paths = [p for p in paths if p.lower().endswith(".webp")]
        if not webp_paths:
            webp_paths = sorted(glob.glob(os.path.join(os.path.dirname(os.path.abspath(json_path)), "*.webp")))

        try:
            if version == 5:
                symbols, reelhouse = ExportManager._load_v5(data, records)
            elif version in (3, 4):
                symbols, reelhouse = ExportManager._load_v3_v4(data, records, webp_paths)
            elif version == 2:
                symbols, reelhouse = ExportManager._load_v2(data, records)
            else:
                symbols, reelhouse = ExportManager._load_v1(data, records)
        except imaging.ImageLoadError as e:
            logger.exception(f"Failed to decode config images: {e}")
            raise
        except (KeyError, TypeError) as e:
            logger.exception(f"Config v{version} is missing data: {e}")
            raise ConfigError(f"Config file is missing required data: {e}") from e

        state.grid = grid
        state.set_reelhouse(reelhouse)
        state.replace_symbols(symbols)
        logger.info(f"Config v{version} loaded: {len(symbols)} symbols, "
                    f"reelhouse {'present' if reelhouse is not None else 'absent'}.")

    @staticmethod
    def _symbols_from_sheet(sheet: QImage, records: List[Dict[str, Any]]) -> List[Symbol]:
        return [
            io.symbol_from_record(r, imaging.extract_region(sheet, io.region_from_record(r)))
            for r in records
        ]

    @staticmethod
    def _load_v5(data: Dict[str, Any], records: List[Dict[str, Any]]):
        symbols: List[Symbol] = []
        if records:
            sheet = imaging.image_from_data_url(data["spritesheet"]["imageData"])
            symbols = ExportManager._symbols_from_sheet(sheet, records)
        reelhouse = imaging.image_from_data_url(data["reelhouse"]) if data.get("reelhouse") else None
        return symbols, reelhouse

    @staticmethod
    def _load_v3_v4(data: Dict[str, Any], records: List[Dict[str, Any]], webp_paths: List[str]):
        expected = data.get("spritesheetFile")
        reelhouse_file = data.get("reelhouseFile")

        def is_sheet(path: str) -> bool:
            name = os.path.basename(path)
            return (
                name == expected
                or any(hint in name for hint in SPRITESHEET_NAME_HINTS)
                or (len(webp_paths) == 1 and not reelhouse_file)
            )

        sheet_path = next((p for p in webp_paths if is_sheet(p)), None)
        if sheet_path is None:
            raise ConfigError(f"Please select all required files together.\n\nExpected: {expected}")

        symbols: List[Symbol] = []
        if records:
            sheet = imaging.load_image(sheet_path)
            symbols = ExportManager._symbols_from_sheet(sheet, records)

        reelhouse: Optional[QImage] = None
        if data["version"] == 4 and reelhouse_file:
            reelhouse_path = next(
                (p for p in webp_paths
                 if os.path.basename(p) == reelhouse_file or "reelhouse" in os.path.basename(p)),
                None
            )
            if reelhouse_path is not None:
                reelhouse = imaging.load_image(reelhouse_path)
            else:
                logger.warning(f"Reelhouse file '{reelhouse_file}' not found, continuing without it.")
        return symbols, reelhouse

    @staticmethod
    def _load_v2(data: Dict[str, Any], records: List[Dict[str, Any]]):
        sheet = imaging.image_from_data_url(data["spritesheet"]["imageData"])
        reelhouse = None
        if data.get("reelhouse"):
            reelhouse = imaging.extract_region(sheet, io.region_from_record(data["reelhouse"]))
        return ExportManager._symbols_from_sheet(sheet, records), reelhouse

    @staticmethod
    def _load_v1(data: Dict[str, Any], records: List[Dict[str, Any]]):
        reelhouse = imaging.image_from_data_url(data["reelhouse"]) if data.get("reelhouse") else None
        symbols = [io.symbol_from_record(r, imaging.image_from_data_url(r["imageData"])) for r in records]
        return symbols, reelhouse
