"""
Control Panel
=============
Left side of the main window: image loading, grid size, global placement
sliders, the symbol list and the shuffle / reset / mega symbols actions.

Why is this file needed?
------------------------
1. Input: It writes every control change into the SessionState.
2. Routing: It tells the main window when the preview must be redrawn
   (``render_requested``) and when files must be loaded
   (``load_reelhouse_requested`` / ``load_symbols_requested``).
"""
import logging
from typing import Dict, Optional, Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QFormLayout, QSpinBox, QSlider,
    QCheckBox, QPushButton, QScrollArea, QLabel
)

from reelpreview import config
from reelpreview.model.state import SessionState
from reelpreview.view.dialogs.mega_symbols_dialog import MegaSymbolsDialog
from reelpreview.view.widgets.symbol_list import SymbolList

logger = logging.getLogger(__name__)

SPIN_LIMIT = 10000

# GridSettings attribute -> (label, slider range, allows negative)
SLIDER_SETTINGS: Dict[str, Tuple[str, Tuple[int, int], bool]] = {
    "h_padding": ("H-Padding", config.PADDING_RANGE, False),
    "v_padding": ("V-Padding", config.PADDING_RANGE, False),
    "x_offset": ("X-Offset", config.OFFSET_RANGE, True),
    "y_offset": ("Y-Offset", config.OFFSET_RANGE, True),
    "h_gap": ("H-Gap", config.GAP_RANGE, False),
    "v_gap": ("V-Gap", config.GAP_RANGE, False),
    "symbol_size": ("Symbol Size [%]", config.SIZE_RANGE, False),
}


class SliderSpin(QWidget):
    """
    Slider paired with a spin box. The slider covers the usual range, the spin
    box accepts values beyond it (the slider then pins at its end).
    """
    value_changed = Signal(int)

    def __init__(self, slider_range: Tuple[int, int], allow_negative: bool, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(*slider_range)
        self.spin = QSpinBox()
        self.spin.setRange(-SPIN_LIMIT if allow_negative else 0, SPIN_LIMIT)

        layout.addWidget(self.slider, 1)
        layout.addWidget(self.spin)

        self.slider.valueChanged.connect(self._on_slider)
        self.spin.valueChanged.connect(self._on_spin)

    def _on_slider(self, value: int) -> None:
        self.spin.blockSignals(True)
        self.spin.setValue(value)
        self.spin.blockSignals(False)
        self.value_changed.emit(value)

    def _on_spin(self, value: int) -> None:
        self.slider.blockSignals(True)
        self.slider.setValue(max(self.slider.minimum(), min(self.slider.maximum(), value)))
        self.slider.blockSignals(False)
        self.value_changed.emit(value)

    def set_value(self, value: int) -> None:
        self.blockSignals(True)
        try:
            self.spin.setValue(value)
        finally:
            self.blockSignals(False)


class ControlPanel(QWidget):
    render_requested = Signal()
    load_reelhouse_requested = Signal()
    load_symbols_requested = Signal()

    def __init__(self, session: SessionState, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        outer.addWidget(scroll)

        content = QWidget()
        layout = QVBoxLayout(content)
        scroll.setWidget(content)

        # --- 1. IMAGES ---
        grp_images = QGroupBox("Images")
        images_layout = QVBoxLayout(grp_images)

        self.reelhouse_label = QLabel("No reelhouse loaded (1280×720 placeholder).")
        self.reelhouse_label.setWordWrap(True)
        btn_reelhouse = QPushButton("Load Reelhouse…")
        btn_reelhouse.clicked.connect(self.load_reelhouse_requested.emit)
        btn_clear_reelhouse = QPushButton("Clear")
        btn_clear_reelhouse.clicked.connect(self.on_clear_reelhouse)
        row = QHBoxLayout()
        row.addWidget(btn_reelhouse, 1)
        row.addWidget(btn_clear_reelhouse)
        images_layout.addWidget(self.reelhouse_label)
        images_layout.addLayout(row)

        btn_symbols = QPushButton("Add Symbols…")
        btn_symbols.clicked.connect(self.load_symbols_requested.emit)
        images_layout.addWidget(btn_symbols)

        self.symbol_list = SymbolList(self.session)
        self.symbol_list.symbol_adjusted.connect(self.render_requested.emit)
        self.symbol_list.symbols_changed.connect(self._layout_changed)
        images_layout.addWidget(self.symbol_list)

        layout.addWidget(grp_images)

        # --- 2. GRID ---
        grp_grid = QGroupBox("Grid")
        grid_form = QFormLayout(grp_grid)

        self.rows_spin = QSpinBox()
        self.rows_spin.setRange(config.MIN_GRID, config.MAX_GRID)
        self.cols_spin = QSpinBox()
        self.cols_spin.setRange(config.MIN_GRID, config.MAX_GRID)
        self.rows_spin.valueChanged.connect(self.on_grid_size_changed)
        self.cols_spin.valueChanged.connect(self.on_grid_size_changed)
        grid_form.addRow("Rows:", self.rows_spin)
        grid_form.addRow("Columns:", self.cols_spin)

        self.sliders: Dict[str, SliderSpin] = {}
        for attr, (label, slider_range, allow_negative) in SLIDER_SETTINGS.items():
            control = SliderSpin(slider_range, allow_negative)
            control.value_changed.connect(lambda v, a=attr: self.on_setting_changed(a, v))
            grid_form.addRow(f"{label}:", control)
            self.sliders[attr] = control

        self.bounds_check = QCheckBox("Show cell bounds")
        self.bounds_check.toggled.connect(self.on_bounds_toggled)
        grid_form.addRow(self.bounds_check)

        layout.addWidget(grp_grid)

        # --- 3. ACTIONS ---
        grp_actions = QGroupBox("Layout")
        actions_layout = QHBoxLayout(grp_actions)
        btn_shuffle = QPushButton("Shuffle")
        btn_shuffle.clicked.connect(self.on_shuffle)
        btn_mega = QPushButton("Mega Symbols…")
        btn_mega.clicked.connect(self.on_mega_symbols)
        btn_reset = QPushButton("Reset")
        btn_reset.clicked.connect(self.on_reset)
        for btn in (btn_shuffle, btn_mega, btn_reset):
            actions_layout.addWidget(btn)
        layout.addWidget(grp_actions)

        self.status_label = QLabel()
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet("color: #c0392b;")
        layout.addWidget(self.status_label)

        layout.addStretch()

        self.load_from_state()

    # --- STATE SYNC ---

    def load_from_state(self) -> None:
        """Push the session values into every control without emitting changes."""
        grid = self.session.grid
        for spin, value in ((self.rows_spin, grid.rows), (self.cols_spin, grid.cols)):
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)

        for attr, control in self.sliders.items():
            control.set_value(getattr(grid, attr))

        self.bounds_check.blockSignals(True)
        self.bounds_check.setChecked(grid.show_bounds)
        self.bounds_check.blockSignals(False)

        reelhouse = self.session.reelhouse
        if reelhouse is None:
            self.reelhouse_label.setText("No reelhouse loaded (1280×720 placeholder).")
        else:
            self.reelhouse_label.setText(f"Reelhouse: {reelhouse.width()}×{reelhouse.height()} px")

        self.symbol_list.load_from_state()
        self.update_status()

    def update_status(self) -> None:
        """Warn when some shapes found no room in the grid."""
        missing = self.session.unplaced_symbols()
        if missing:
            names = ", ".join(s.name for s in missing)
            self.status_label.setText(f"No room for: {names}")
        else:
            self.status_label.clear()

    # --- SLOTS ---

    def on_grid_size_changed(self, _value: int) -> None:
        self.session.set_grid_size(self.rows_spin.value(), self.cols_spin.value())
        self._layout_changed()

    def on_setting_changed(self, attr: str, value: int) -> None:
        setattr(self.session.grid, attr, value)
        self.render_requested.emit()

    def on_bounds_toggled(self, checked: bool) -> None:
        self.session.grid.show_bounds = checked
        self.render_requested.emit()

    def on_clear_reelhouse(self) -> None:
        self.session.set_reelhouse(None)
        self.load_from_state()
        self.render_requested.emit()

    def on_shuffle(self) -> None:
        logger.debug("Shuffle requested.")
        self.session.shuffle()
        self._layout_changed()

    def on_reset(self) -> None:
        self.session.reset_settings()
        self.load_from_state()
        self.render_requested.emit()

    def on_mega_symbols(self) -> None:
        dialog = MegaSymbolsDialog(self.session, self)
        dialog.shapes_changed.connect(self._layout_changed)
        dialog.exec()

    def _layout_changed(self) -> None:
        self.update_status()
        self.render_requested.emit()
