import random

import pytest

from conftest import FakeImage, make_symbol
from reelpreview.model.state import GridSettings, SessionState


@pytest.fixture
def session():
    return SessionState(rng=random.Random(42))


def test_adding_symbols_packs_the_grid(session):
    session.add_symbols([(FakeImage(10, 10), "a"), (FakeImage(20, 10), "b")])
    assert len(session.symbols) == 2
    assert len(session.placements) == session.grid.rows * session.grid.cols


def test_grid_size_is_clamped(session):
    session.set_grid_size(0, 99)
    assert (session.grid.rows, session.grid.cols) == (1, 20)


def test_grid_resize_repacks(session):
    session.add_symbol(FakeImage(10, 10), "a")
    session.set_grid_size(2, 3)
    assert len(session.placements) == 6


def test_toggle_cell_updates_shape_and_repacks(session):
    session.add_symbol(FakeImage(10, 10), "a")
    session.add_symbol(FakeImage(10, 10), "b")
    session.set_grid_size(2, 2)
    assert session.toggle_cell(0, 1, 0) is True
    assert session.symbols[0].shape.cells == [(0, 0), (1, 0)]
    mega = [p for p in session.placements if p.symbol is session.symbols[0]]
    assert len(mega) == 1
    assert len(session.placements) == 3


def test_toggle_cell_keeps_last_cell(session):
    session.add_symbol(FakeImage(10, 10), "a")
    session.toggle_cell(0, 0, 0)
    assert session.symbols[0].shape.cells == [(0, 0)]


def test_unknown_symbol_index_raises(session):
    with pytest.raises(IndexError):
        session.toggle_cell(3, 0, 0)
    with pytest.raises(IndexError):
        session.remove_symbol(0)


def test_remove_symbol_repacks(session):
    session.add_symbols([(FakeImage(10, 10), "a"), (FakeImage(10, 10), "b")])
    removed = session.remove_symbol(0)
    assert removed.name == "a"
    assert all(p.symbol.name == "b" for p in session.placements)


def test_unplaced_symbols_reports_missing_shapes(session):
    session.set_grid_size(2, 2)
    big = make_symbol("big", [(0, 0), (1, 0), (2, 0)])
    session.replace_symbols([big, make_symbol("a")])
    assert session.unplaced_symbols() == [big]


def test_reset_settings_restores_defaults(session):
    session.add_symbol(FakeImage(10, 10), "a")
    session.grid.h_gap = 12
    session.set_grid_size(7, 7)
    symbol = session.symbols[0]
    symbol.scale = 150
    symbol.x_offset = 3
    session.toggle_cell(0, 1, 0)

    session.reset_settings()

    assert session.grid == GridSettings()
    assert symbol.scale == 100 and symbol.x_offset == 0
    assert symbol.shape.cells == [(0, 0)]
    assert len(session.placements) == 20


def test_reset_clears_session(session):
    session.add_symbol(FakeImage(10, 10), "a")
    session.set_reelhouse(FakeImage(100, 100))
    session.reset()
    assert session.symbols == [] and session.placements == []
    assert session.reelhouse is None


def test_changed_from_defaults():
    grid = GridSettings(h_gap=3, show_bounds=False)
    assert grid.changed_from_defaults() == ["h_gap", "show_bounds"]
