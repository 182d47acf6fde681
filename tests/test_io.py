import pytest

from conftest import FakeImage, make_symbol
from reelpreview.model.io import (
    CONFIG_VERSION, ConfigError, config_record, region_from_record, settings_from_dict,
    settings_to_dict, sprite_data, symbol_from_record, symbol_to_record, validate_config
)
from reelpreview.model.state import GridSettings


def test_settings_use_camel_case_keys():
    data = settings_to_dict(GridSettings(h_padding=4, show_bounds=False))
    assert data["hPadding"] == 4
    assert data["showBounds"] is False
    assert set(data) == {"rows", "cols", "hPadding", "vPadding", "xOffset", "yOffset",
                         "hGap", "vGap", "symbolSize", "showBounds"}


def test_missing_settings_take_defaults():
    grid = settings_from_dict({"rows": 3, "hGap": 7})
    assert grid.rows == 3 and grid.h_gap == 7
    assert grid.cols == GridSettings().cols
    assert grid.symbol_size == 100
    assert grid.show_bounds is True


def test_symbol_record_defaults():
    image = FakeImage(10, 10)
    symbol = symbol_from_record({}, image)
    assert symbol.image is image
    assert symbol.name == "symbol"
    assert symbol.scale == 100
    assert (symbol.x_offset, symbol.y_offset) == (0, 0)
    assert symbol.shape.cells == [(0, 0)]


def test_symbol_record_keeps_zero_size():
    symbol = symbol_from_record({"name": "tiny", "size": 0, "shape": [[0, 0], [0, 1]]}, FakeImage(1, 1))
    assert symbol.scale == 0
    assert symbol.shape.cells == [(0, 0), (0, 1)]


def test_symbol_to_record_includes_region():
    symbol = make_symbol("wild", [(0, 0), (1, 0)], scale=120, x_offset=-3)
    region = {"key": "symbol_0", "x": 5, "y": 6, "width": 50, "height": 40, "scale": 0.5}
    record = symbol_to_record(symbol, region)
    assert record == {
        "name": "wild", "size": 120, "xOffset": -3, "yOffset": 0,
        "shape": [[0, 0], [1, 0]], "x": 5, "y": 6, "width": 50, "height": 40, "scale": 0.5,
    }
    assert "key" not in record


@pytest.mark.parametrize("data", [
    None,
    [],
    {"settings": {}},
    {"version": 5},
    {"version": 0, "settings": {}},
    {"version": 5, "settings": "rows=4"},
])
def test_invalid_config_structure(data):
    with pytest.raises(ConfigError, match="Invalid config file format"):
        validate_config(data)


def test_unsupported_version():
    with pytest.raises(ConfigError, match="Unsupported config version: 9"):
        validate_config({"version": 9, "settings": {}})


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_region_requires_position():
    assert region_from_record({"x": "1", "y": 2, "width": 3, "height": 4}) == {"x": 1, "y": 2, "width": 3, "height": 4}
    with pytest.raises(ConfigError):
        region_from_record({"name": "a", "x": 1})


def test_sprite_data_lists_positions_only():
    symbols = [make_symbol("a"), make_symbol("b")]
    regions = [
        {"x": 0, "y": 0, "width": 10, "height": 10, "scale": 1.0},
        {"x": 10, "y": 0, "width": 20, "height": 10, "scale": 0.5},
    ]
    data = sprite_data(30, 10, symbols, regions)
    assert (data["width"], data["height"]) == (30, 10)
    assert [s["name"] for s in data["symbols"]] == ["a", "b"]
    assert data["symbols"][1]["scale"] == 0.5
    assert "shape" not in data["symbols"][0]


def test_config_record_is_current_version():
    record = config_record(GridSettings(), [make_symbol("a")],
                           [{"x": 0, "y": 0, "width": 1, "height": 1, "scale": 1.0}],
                           {"imageData": "data:", "width": 1, "height": 1}, None)
    assert record["version"] == CONFIG_VERSION
    assert validate_config(record) == CONFIG_VERSION
    assert record["reelhouse"] is None
    assert record["symbols"][0]["name"] == "a"


def test_imported_grid_size_is_clamped():
    grid = settings_from_dict({"rows": 0, "cols": 50})
    assert (grid.rows, grid.cols) == (1, 20)


@pytest.mark.parametrize("value, expected", [
    (True, True), (False, False), (0, False), (1, True), ("false", False), ("True", True),
])
def test_show_bounds_parsing(value, expected):
    assert settings_from_dict({"showBounds": value}).show_bounds is expected


@pytest.mark.parametrize("data", [
    {"rows": "four"},
    {"hGap": [1]},
    {"showBounds": "maybe"},
    {"showBounds": {}},
])
def test_malformed_settings_raise_config_error(data):
    with pytest.raises(ConfigError):
        settings_from_dict(data)


@pytest.mark.parametrize("record", [
    {"name": "a", "size": "big"},
    {"name": "a", "xOffset": "left"},
    {"name": "a", "shape": [[0]]},
    {"name": "a", "shape": [["x", 0]]},
])
def test_malformed_symbol_records_raise_config_error(record):
    with pytest.raises(ConfigError):
        symbol_from_record(record, FakeImage(1, 1))
