"""
Symbol List
===========
One row per loaded symbol: thumbnail, name, individual scale and x/y offset
spin boxes and a remove button.
"""
from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QSpinBox, QToolButton, QFrame
)

from reelpreview.model.state import SessionState
from reelpreview.model.symbols import Symbol

THUMB_SIZE = 40
SPIN_LIMIT = 10000


class SymbolRow(QFrame):
    """Controls for a single symbol."""
    adjusted = Signal()
    remove_requested = Signal(int)

    def __init__(self, symbol: Symbol, index: int, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.symbol = symbol
        self.index = index
        self.setFrameShape(QFrame.StyledPanel)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)

        thumb = QLabel()
        thumb.setFixedSize(THUMB_SIZE, THUMB_SIZE)
        thumb.setAlignment(Qt.AlignCenter)
        pixmap = QPixmap.fromImage(symbol.image)
        thumb.setPixmap(pixmap.scaled(THUMB_SIZE, THUMB_SIZE, Qt.KeepAspectRatio, Qt.SmoothTransformation))
        layout.addWidget(thumb)

        self.name_label = QLabel(symbol.name)
        self.name_label.setMinimumWidth(60)
        layout.addWidget(self.name_label, 1)

        self.scale_spin = self._spin(0, SPIN_LIMIT, symbol.scale, "%", "Individual size")
        self.x_spin = self._spin(-SPIN_LIMIT, SPIN_LIMIT, symbol.x_offset, " px", "Individual X offset")
        self.y_spin = self._spin(-SPIN_LIMIT, SPIN_LIMIT, symbol.y_offset, " px", "Individual Y offset")
        for spin in (self.scale_spin, self.x_spin, self.y_spin):
            layout.addWidget(spin)

        self.scale_spin.valueChanged.connect(lambda v: self._set("scale", v))
        self.x_spin.valueChanged.connect(lambda v: self._set("x_offset", v))
        self.y_spin.valueChanged.connect(lambda v: self._set("y_offset", v))

        remove_btn = QToolButton()
        remove_btn.setText("✕")
        remove_btn.setToolTip("Remove symbol")
        remove_btn.clicked.connect(lambda: self.remove_requested.emit(self.index))
        layout.addWidget(remove_btn)

        self._update_modified_style()

    @staticmethod
    def _spin(low: int, high: int, value: int, suffix: str, tip: str) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(low, high)
        spin.setValue(value)
        spin.setSuffix(suffix)
        spin.setToolTip(tip)
        return spin

    def _set(self, attr: str, value: int) -> None:
        setattr(self.symbol, attr, value)
        self._update_modified_style()
        self.adjusted.emit()

    def _update_modified_style(self) -> None:
        font = self.name_label.font()
        font.setBold(self.symbol.is_customized)
        self.name_label.setFont(font)


class SymbolList(QWidget):
    # Scale/offset edits only need a repaint; removal needs a re-pack
    symbol_adjusted = Signal()
    symbols_changed = Signal()

    def __init__(self, session: SessionState, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self.rows: List[SymbolRow] = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(2)

        self.empty_label = QLabel("No symbols loaded.")
        self.empty_label.setStyleSheet("color: gray; font-style: italic;")
        self._layout.addWidget(self.empty_label)

    def load_from_state(self) -> None:
        """Rebuild all rows from the session's symbol collection."""
        for row in self.rows:
            self._layout.removeWidget(row)
            row.deleteLater()
        self.rows = []

        for i, symbol in enumerate(self.session.symbols):
            row = SymbolRow(symbol, i)
            row.adjusted.connect(self.symbol_adjusted.emit)
            row.remove_requested.connect(self.on_remove_requested)
            self._layout.addWidget(row)
            self.rows.append(row)

        self.empty_label.setVisible(not self.rows)

    def on_remove_requested(self, index: int) -> None:
        self.session.remove_symbol(index)
        self.load_from_state()
        self.symbols_changed.emit()
