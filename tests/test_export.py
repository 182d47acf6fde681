import base64
import json
import os

import pytest

from reelpreview import config
from reelpreview.controller import imaging
from reelpreview.controller.exporter import ExportError, ExportManager
from reelpreview.controller.renderer import (
    render_preview, render_with_settings_bar, settings_summary, wrap_settings
)
from reelpreview.controller.spritesheet import create_spritesheet
from reelpreview.model.io import ConfigError
from reelpreview.model.shapes import Shape
from reelpreview.model.state import SessionState
from reelpreview.model.symbols import Symbol


@pytest.fixture
def session(rng):
    return SessionState(rng=rng)


def test_spritesheet_scales_large_symbols(solid_image):
    symbols = [Symbol(solid_image(1000, 250), "big"), Symbol(solid_image(40, 60), "small")]
    sheet = create_spritesheet(symbols)
    big, small = sheet.regions
    assert (big.width, big.height) == (500, 125)
    assert big.scale == pytest.approx(0.5)
    assert (small.x, small.y, small.scale) == (500, 0, 1.0)
    assert (sheet.width, sheet.height) == (540, 125)


def test_spritesheet_wraps_rows(solid_image):
    symbols = [Symbol(solid_image(400, 100), f"s{i}") for i in range(3)]
    sheet = create_spritesheet(symbols, max_sheet=1000)
    assert [(r.x, r.y) for r in sheet.regions] == [(0, 0), (400, 0), (0, 100)]
    assert (sheet.width, sheet.height) == (800, 200)
    assert [r.key for r in sheet.regions] == ["symbol_0", "symbol_1", "symbol_2"]


def test_render_without_reelhouse_uses_default_canvas(qapp, session):
    image = render_preview(session)
    assert (image.width(), image.height()) == (config.DEFAULT_CANVAS_WIDTH, config.DEFAULT_CANVAS_HEIGHT)


def test_render_draws_symbol_over_reelhouse(solid_image, session):
    session.set_reelhouse(solid_image(200, 100, "red"))
    session.grid.show_bounds = False
    image = render_preview(session)
    assert (image.width(), image.height()) == (200, 100)
    assert image.pixelColor(100, 50).name() == "#ff0000"

    session.set_grid_size(1, 1)
    session.add_symbol(solid_image(50, 50, "blue"), "blue")
    image = render_preview(session)
    assert image.pixelColor(100, 50).name() == "#0000ff"
    assert image.pixelColor(10, 50).name() == "#ff0000"


def test_settings_summary_lists_changes(solid_image, session):
    session.add_symbol(solid_image(10, 10), "wild")
    session.add_symbol(solid_image(10, 10), "plain")
    session.grid.h_gap = 5
    session.grid.symbol_size = 150
    wild = session.symbols[0]
    wild.scale = 150
    wild.x_offset = 3
    wild.y_offset = -2

    parts = settings_summary(session)
    assert parts == ["Rows: 4", "Cols: 5", "H-Gap: 5px", "Scale: 150%", "wild:150%,X+3,Y-2"]


def test_wrap_settings_breaks_on_separators():
    parts = ["Rows: 4", "Cols: 5", "H-Gap: 5px"]
    assert wrap_settings(parts, lambda text: True) == ["Rows: 4  |  Cols: 5  |  H-Gap: 5px"]
    lines = wrap_settings(parts, lambda text: len(text) <= 12)
    assert lines[0] == "Rows: 4  |"
    assert "".join(lines).replace(" ", "") == "Rows:4|Cols:5|H-Gap:5px"


def test_preview_export_adds_settings_bar(solid_image, session, tmp_path):
    session.set_reelhouse(solid_image(800, 400))
    session.add_symbol(solid_image(10, 10), "a")
    path = str(tmp_path / config.PREVIEW_FILENAME)
    image = ExportManager.export_preview(session, path)
    assert image.width() == 800
    assert image.height() > 400
    assert os.path.getsize(path) > 0


def test_preview_export_needs_content(qapp, session, tmp_path):
    with pytest.raises(ExportError):
        ExportManager.export_preview(session, str(tmp_path / "p.png"))


def test_export_without_symbols_fails(qapp, session, tmp_path):
    with pytest.raises(ExportError):
        ExportManager.export_sprites(session, str(tmp_path))
    with pytest.raises(ExportError):
        ExportManager.export_config(session, str(tmp_path / "c.json"))


def test_export_sprites_writes_files(solid_image, session, tmp_path):
    session.add_symbols([(solid_image(30, 20), "a"), (solid_image(10, 10), "b")])
    session.set_reelhouse(solid_image(3000, 1000))
    written = ExportManager.export_sprites(session, str(tmp_path))

    names = sorted(os.path.basename(p) for p in written)
    assert names == sorted([config.SPRITESHEET_FILENAME, config.SPRITE_DATA_FILENAME,
                            config.REELHOUSE_SPRITE_FILENAME])
    with open(tmp_path / config.SPRITE_DATA_FILENAME, encoding="utf-8") as f:
        data = json.load(f)
    assert (data["width"], data["height"]) == (40, 20)
    assert [s["name"] for s in data["symbols"]] == ["a", "b"]

    reelhouse = imaging.load_image(str(tmp_path / config.REELHOUSE_SPRITE_FILENAME))
    assert (reelhouse.width(), reelhouse.height()) == (2000, 667)


def test_config_round_trip(solid_image, session, tmp_path):
    session.add_symbols([(solid_image(60, 40, "blue"), "wild"), (solid_image(20, 20, "green"), "ace")])
    session.set_reelhouse(solid_image(320, 180, "red"))
    session.set_grid_size(3, 4)
    session.grid.h_gap = 6
    session.grid.show_bounds = False
    wild = session.symbols[0]
    wild.shape = Shape([(0, 0), (1, 0)])
    wild.scale = 80
    wild.y_offset = 4

    path = str(tmp_path / config.CONFIG_FILENAME)
    ExportManager.export_config(session, path)

    restored = SessionState()
    ExportManager.import_config(restored, [path])

    assert restored.grid == session.grid
    assert [s.name for s in restored.symbols] == ["wild", "ace"]
    assert [s.natural_size for s in restored.symbols] == [(60, 40), (20, 20)]
    assert restored.symbols[0].shape.cells == [(0, 0), (1, 0)]
    assert (restored.symbols[0].scale, restored.symbols[0].y_offset) == (80, 4)
    assert (restored.reelhouse.width(), restored.reelhouse.height()) == (320, 180)
    assert len(restored.placements) == 11


def test_import_version_one(solid_image, tmp_path):
    payload, mime = imaging.encode_image(solid_image(16, 8), "PNG")
    url = f"data:{mime};base64," + base64.b64encode(payload).decode("ascii")
    data = {
        "version": 1,
        "settings": {"rows": 2, "cols": 2},
        "symbols": [{"name": "old", "imageData": url, "shape": [[0, 0], [0, 1]]}],
    }
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    session = SessionState()
    ExportManager.import_config(session, [str(path)])
    assert session.reelhouse is None
    assert session.symbols[0].natural_size == (16, 8)
    assert session.symbols[0].shape.cells == [(0, 0), (0, 1)]
    assert session.symbols[0].scale == 100


def test_import_needs_json(qapp, tmp_path):
    with pytest.raises(ConfigError, match="JSON"):
        ExportManager.import_config(SessionState(), [str(tmp_path / "sheet.webp")])


def test_import_rejects_broken_json(qapp, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        ExportManager.import_config(SessionState(), [str(path)])


def test_failed_import_keeps_session(solid_image, tmp_path):
    session = SessionState()
    session.add_symbol(solid_image(10, 10), "keep")
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"version": 7, "settings": {}}), encoding="utf-8")
    with pytest.raises(ConfigError):
        ExportManager.import_config(session, [str(path)])
    assert [s.name for s in session.symbols] == ["keep"]


def write_config(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_import_clamps_grid_size(qapp, tmp_path):
    path = write_config(tmp_path / "legacy.json", {"version": 1, "settings": {"rows": 0, "cols": 50}})
    session = SessionState()
    ExportManager.import_config(session, [path])
    assert (session.grid.rows, session.grid.cols) == (1, 20)


def test_import_rejects_malformed_settings(qapp, tmp_path):
    path = write_config(tmp_path / "legacy.json", {"version": 1, "settings": {"rows": "many"}})
    with pytest.raises(ConfigError):
        ExportManager.import_config(SessionState(), [path])


def test_import_version_two_cuts_reelhouse_from_sheet(solid_image, tmp_path):
    sheet = solid_image(100, 50)
    data = {
        "version": 2,
        "settings": {"rows": 1, "cols": 1},
        "spritesheet": {"imageData": imaging.image_to_data_url(sheet), "width": 100, "height": 50},
        "reelhouse": {"x": 20, "y": 0, "width": 80, "height": 50},
        "symbols": [{"name": "cherry", "x": 0, "y": 0, "width": 20, "height": 20, "size": 90}],
    }
    session = SessionState()
    ExportManager.import_config(session, [write_config(tmp_path / "v2.json", data)])

    assert (session.reelhouse.width(), session.reelhouse.height()) == (80, 50)
    assert session.symbols[0].name == "cherry"
    assert session.symbols[0].natural_size == (20, 20)
    assert session.symbols[0].scale == 90


def test_import_version_three_finds_lone_sheet_next_to_json(solid_image, tmp_path):
    imaging.save_image(solid_image(30, 10), str(tmp_path / "exported.webp"))
    data = {
        "version": 3,
        "settings": {"rows": 2, "cols": 2},
        "symbols": [
            {"name": "a", "x": 0, "y": 0, "width": 10, "height": 10},
            {"name": "b", "x": 10, "y": 0, "width": 20, "height": 10, "shape": [[0, 0], [1, 0]]},
        ],
    }
    session = SessionState()
    ExportManager.import_config(session, [write_config(tmp_path / "v3.json", data)])

    assert session.reelhouse is None
    assert [s.natural_size for s in session.symbols] == [(10, 10), (20, 10)]
    assert session.symbols[1].shape.cells == [(0, 0), (1, 0)]
    assert len(session.placements) == 3


def test_import_version_four_loads_reelhouse_by_name(solid_image, tmp_path):
    sheet_path = tmp_path / config.SPRITESHEET_FILENAME
    reelhouse_path = tmp_path / config.REELHOUSE_SPRITE_FILENAME
    imaging.save_image(solid_image(10, 10), str(sheet_path))
    imaging.save_image(solid_image(64, 36), str(reelhouse_path))
    data = {
        "version": 4,
        "settings": {},
        "spritesheetFile": config.SPRITESHEET_FILENAME,
        "reelhouseFile": config.REELHOUSE_SPRITE_FILENAME,
        "symbols": [{"name": "a", "x": 0, "y": 0, "width": 10, "height": 10}],
    }
    json_path = write_config(tmp_path / "v4.json", data)

    session = SessionState()
    ExportManager.import_config(session, [json_path, str(reelhouse_path), str(sheet_path)])
    assert (session.reelhouse.width(), session.reelhouse.height()) == (64, 36)
    assert session.symbols[0].natural_size == (10, 10)


def test_import_version_four_without_reelhouse_file(solid_image, tmp_path):
    imaging.save_image(solid_image(10, 10), str(tmp_path / config.SPRITESHEET_FILENAME))
    data = {
        "version": 4,
        "settings": {},
        "spritesheetFile": config.SPRITESHEET_FILENAME,
        "reelhouseFile": config.REELHOUSE_SPRITE_FILENAME,
        "symbols": [{"name": "a", "x": 0, "y": 0, "width": 10, "height": 10}],
    }
    session = SessionState()
    ExportManager.import_config(session, [write_config(tmp_path / "v4.json", data)])

    assert session.reelhouse is None
    assert [s.name for s in session.symbols] == ["a"]


def test_import_version_three_without_sheet(qapp, tmp_path):
    data = {
        "version": 3,
        "settings": {},
        "spritesheetFile": "sprite_symbols.webp",
        "symbols": [{"name": "a", "x": 0, "y": 0, "width": 10, "height": 10}],
    }
    session = SessionState()
    with pytest.raises(ConfigError, match="sprite_symbols.webp"):
        ExportManager.import_config(session, [write_config(tmp_path / "v3.json", data)])
    assert session.symbols == []
