import os
import random

import pytest

# Qt must not try to open a display while the tests run
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from reelpreview.model.shapes import Shape
from reelpreview.model.symbols import Symbol


class FakeImage:
    """Stand-in for QImage in the Qt-free model tests."""

    def __init__(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height


def make_symbol(name="sym", cells=None, width=100, height=100, **kwargs) -> Symbol:
    shape = Shape(list(cells)) if cells else Shape()
    return Symbol(image=FakeImage(width, height), name=name, shape=shape, **kwargs)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance() or QGuiApplication([])
    yield app


@pytest.fixture
def solid_image(qapp):
    """Factory for single color QImages."""
    from PySide6.QtGui import QColor, QImage

    def _make(width: int, height: int, color: str = "red") -> QImage:
        image = QImage(width, height, QImage.Format_ARGB32)
        image.fill(QColor(color))
        return image

    return _make
