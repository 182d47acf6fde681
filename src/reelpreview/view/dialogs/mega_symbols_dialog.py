"""
Mega Symbols Dialog
===================
Lets the user draw each symbol's shape on a mini grid of the current
rows x cols. Every click toggles one cell through SessionState.toggle_cell,
which re-packs the grid; the main window is notified through shapes_changed.
"""
from typing import Dict, Optional, Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QDialog, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton,
    QScrollArea, QDialogButtonBox, QFrame
)

from reelpreview.model.state import SessionState

MAX_GRID_WIDTH = 120
THUMB_SIZE = 56

CELL_STYLE = """
QPushButton { background: #2a2a4e; border: 1px solid #4a4a7e; }
QPushButton:checked { background: #e94560; border: 1px solid #ff7b94; }
"""


class MiniGrid(QWidget):
    """rows x cols checkable buttons mirroring one symbol's shape."""
    cell_clicked = Signal(int, int)

    def __init__(self, rows: int, cols: int, cells, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.buttons: Dict[Tuple[int, int], QPushButton] = {}
        cell_size = max(8, min(16, MAX_GRID_WIDTH // cols))

        layout = QGridLayout(self)
        layout.setSpacing(1)
        layout.setContentsMargins(0, 0, 0, 0)

        for row in range(rows):
            for col in range(cols):
                btn = QPushButton()
                btn.setCheckable(True)
                btn.setFixedSize(cell_size, cell_size)
                btn.setStyleSheet(CELL_STYLE)
                btn.setChecked((col, row) in cells)
                btn.clicked.connect(lambda _checked, c=col, r=row: self.cell_clicked.emit(c, r))
                layout.addWidget(btn, row, col)
                self.buttons[(col, row)] = btn

    def sync(self, cells) -> None:
        for cell, btn in self.buttons.items():
            btn.setChecked(cell in cells)


class MegaSymbolsDialog(QDialog):
    shapes_changed = Signal()

    def __init__(self, session: SessionState, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self.setWindowTitle("Mega Symbols")
        self.resize(420, 560)

        layout = QVBoxLayout(self)
        hint = QLabel("Click cells to define the shape each symbol covers. "
                      "A shape always keeps at least one cell.")
        hint.setWordWrap(True)
        layout.addWidget(hint)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        container = QWidget()
        self.list_layout = QVBoxLayout(container)
        scroll.setWidget(container)
        layout.addWidget(scroll, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.accept)
        layout.addWidget(buttons)

        self.shape_labels: Dict[int, QLabel] = {}
        self.grids: Dict[int, MiniGrid] = {}
        self._build_list()

    def _build_list(self) -> None:
        if not self.session.symbols:
            empty = QLabel("Upload symbols first to configure mega symbols.")
            empty.setAlignment(Qt.AlignCenter)
            self.list_layout.addWidget(empty)
            return

        rows, cols = self.session.grid.rows, self.session.grid.cols
        for index, symbol in enumerate(self.session.symbols):
            item = QFrame()
            item.setFrameShape(QFrame.StyledPanel)
            item_layout = QHBoxLayout(item)

            thumb = QLabel()
            thumb.setFixedSize(THUMB_SIZE, THUMB_SIZE)
            thumb.setAlignment(Qt.AlignCenter)
            thumb.setPixmap(QPixmap.fromImage(symbol.image).scaled(
                THUMB_SIZE, THUMB_SIZE, Qt.KeepAspectRatio, Qt.SmoothTransformation))
            item_layout.addWidget(thumb)

            info = QVBoxLayout()
            info.addWidget(QLabel(f"<b>{symbol.name}</b>"))
            shape_label = QLabel(f"Shape: {symbol.shape.describe()}")
            info.addWidget(shape_label)

            grid = MiniGrid(rows, cols, symbol.shape.cells)
            grid.cell_clicked.connect(lambda c, r, i=index: self.on_cell_clicked(i, c, r))
            info.addWidget(grid)
            item_layout.addLayout(info, 1)

            self.shape_labels[index] = shape_label
            self.grids[index] = grid
            self.list_layout.addWidget(item)

        self.list_layout.addStretch()

    def on_cell_clicked(self, index: int, col: int, row: int) -> None:
        self.session.toggle_cell(index, col, row)
        shape = self.session.symbols[index].shape
        # The last cell cannot be removed, so the button state must follow the model
        self.grids[index].sync(shape.cells)
        self.shape_labels[index].setText(f"Shape: {shape.describe()}")
        self.shapes_changed.emit()
