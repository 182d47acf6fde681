"""
Layout Record (JSON)
Converts the session's settings and symbols to and from the serialized
config / sprite data records. Image bytes are handled by the controller layer;
this module only deals with plain dictionaries.
"""
import logging
from importlib.metadata import version, PackageNotFoundError
from typing import Any, Dict, List, Mapping, Optional

from reelpreview import config
from reelpreview.model.shapes import Shape
from reelpreview.model.state import GridSettings, clamp
from reelpreview.model.symbols import DEFAULT_SYMBOL_SCALE, Symbol

logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("reelpreview")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

# Base64 embedded single file format
CONFIG_VERSION = 5
SUPPORTED_VERSIONS = (1, 2, 3, 4, 5)

# Record key -> GridSettings attribute
SETTINGS_KEYS: Dict[str, str] = {
    "rows": "rows",
    "cols": "cols",
    "hPadding": "h_padding",
    "vPadding": "v_padding",
    "xOffset": "x_offset",
    "yOffset": "y_offset",
    "hGap": "h_gap",
    "vGap": "v_gap",
    "symbolSize": "symbol_size",
    "showBounds": "show_bounds",
}


class ConfigError(ValueError):
    """Raised when a config record cannot be understood."""


def validate_config(data: Any) -> int:
    """Checks the top-level structure and returns the record version."""
    if not isinstance(data, dict) or not data.get("version") or not isinstance(data.get("settings"), dict):
        raise ConfigError("Invalid config file format")
    config_version = data["version"]
    if config_version not in SUPPORTED_VERSIONS:
        raise ConfigError(f"Unsupported config version: {config_version}")
    return config_version


def settings_to_dict(grid: GridSettings) -> Dict[str, Any]:
    return {key: getattr(grid, attr) for key, attr in SETTINGS_KEYS.items()}


def _to_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}': {value!r}") from e


def _to_bool(value: Any, key: str) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1"):
            return True
        if text in ("false", "0", ""):
            return False
        raise ConfigError(f"Invalid value for '{key}': {value!r}")
    if isinstance(value, (bool, int, float)):
        return bool(value)
    raise ConfigError(f"Invalid value for '{key}': {value!r}")


def settings_from_dict(data: Mapping[str, Any]) -> GridSettings:
    """Missing keys keep their defaults. Rows and cols are clamped to the grid limits."""
    grid = GridSettings()
    for key, attr in SETTINGS_KEYS.items():
        value = data.get(key)
        if value is None:
            continue
        setattr(grid, attr, _to_bool(value, key) if attr == "show_bounds" else _to_int(value, key))

    rows = clamp(grid.rows, config.MIN_GRID, config.MAX_GRID)
    cols = clamp(grid.cols, config.MIN_GRID, config.MAX_GRID)
    if (rows, cols) != (grid.rows, grid.cols):
        logger.warning(f"Grid size {grid.rows}x{grid.cols} out of range, using {rows}x{cols}.")
        grid.rows, grid.cols = rows, cols
    return grid


def symbol_to_record(symbol: Symbol, region: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Serialized form of a symbol. ``region`` is its position inside the
    spritesheet (x, y, width, height, scale).
    """
    record: Dict[str, Any] = {
        "name": symbol.name,
        "size": symbol.scale,
        "xOffset": symbol.x_offset,
        "yOffset": symbol.y_offset,
        "shape": symbol.shape.to_list(),
    }
    if region is not None:
        for key in ("x", "y", "width", "height", "scale"):
            record[key] = region[key]
    return record


def symbol_from_record(record: Mapping[str, Any], image: Any) -> Symbol:
    """Rebuilds a symbol around an already decoded image, applying defaults."""
    size = record.get("size")
    try:
        shape = Shape.from_list(record.get("shape"))
    except (IndexError, TypeError, ValueError) as e:
        raise ConfigError(f"Symbol '{record.get('name', '?')}' has an invalid shape") from e
    return Symbol(
        image=image,
        name=str(record.get("name") or "symbol"),
        shape=shape,
        scale=_to_int(size, "size") if size is not None else DEFAULT_SYMBOL_SCALE,
        x_offset=_to_int(record.get("xOffset") or 0, "xOffset"),
        y_offset=_to_int(record.get("yOffset") or 0, "yOffset"),
    )


def region_from_record(record: Mapping[str, Any]) -> Dict[str, int]:
    """Spritesheet region of a record; raises ConfigError when incomplete."""
    try:
        return {key: int(record[key]) for key in ("x", "y", "width", "height")}
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Symbol '{record.get('name', '?')}' has no valid spritesheet region") from e


def sprite_data(width: int, height: int, symbols: List[Symbol], regions: List[Mapping[str, Any]]) -> Dict[str, Any]:
    """Payload of ``sprite_symbols.json`` (positions only, no image data)."""
    return {
        "width": width,
        "height": height,
        "symbols": [
            {
                "name": s.name,
                "x": r["x"],
                "y": r["y"],
                "width": r["width"],
                "height": r["height"],
                "scale": r["scale"],
            }
            for s, r in zip(symbols, regions)
        ],
    }


def config_record(
    grid: GridSettings,
    symbols: List[Symbol],
    regions: List[Mapping[str, Any]],
    spritesheet: Dict[str, Any],
    reelhouse: Optional[str]
) -> Dict[str, Any]:
    """Full version 5 config: settings, embedded spritesheet and reelhouse."""
    logger.debug(f"Building config record for {len(symbols)} symbols (app {APP_VERSION}).")
    return {
        "version": CONFIG_VERSION,
        "settings": settings_to_dict(grid),
        "spritesheet": spritesheet,
        "reelhouse": reelhouse,
        "symbols": [symbol_to_record(s, r) for s, r in zip(symbols, regions)],
    }
