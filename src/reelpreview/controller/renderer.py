"""
Preview Renderer
================
Draws the current session onto a QImage: reelhouse (or a placeholder), cell
bounds and every placed symbol at the rectangle computed by the geometry
resolver.

Also builds the exported preview, which is the same picture plus a bar
listing the settings that differ from their defaults.
"""
import logging
from typing import Callable, List, Tuple

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetrics, QImage, QPainter, QPen

from reelpreview import config
from reelpreview.controller.imaging import new_canvas
from reelpreview.model.geometry import GridFrame, cell_rects, resolve_all
from reelpreview.model.state import SessionState

logger = logging.getLogger(__name__)

PLACEHOLDER_FILL = QColor("#1a1a2e")
PLACEHOLDER_BORDER = QColor("#3a3a5e")
PLACEHOLDER_CELL_FILL = QColor("#2a2a4e")
PLACEHOLDER_CELL_BORDER = QColor("#4a4a7e")
BOUNDS_COLOR = QColor(255, 255, 255, 153)
BAR_COLOR = QColor(0, 0, 0, 242)
BAR_TEXT_COLOR = QColor("#aaaaaa")

PLACEHOLDER_CELL_INSET = 4
BAR_PADDING = 8
SETTINGS_SEPARATOR = "  |  "

# Label and unit of each global setting in the preview bar
SETTING_LABELS = {
    "h_padding": ("H-Pad", "px"),
    "v_padding": ("V-Pad", "px"),
    "x_offset": ("X-Off", "px"),
    "y_offset": ("Y-Off", "px"),
    "h_gap": ("H-Gap", "px"),
    "v_gap": ("V-Gap", "px"),
    "symbol_size": ("Scale", "%"),
}


def canvas_size(state: SessionState) -> Tuple[int, int]:
    """Natural size of the reelhouse, or the default canvas when there is none."""
    if state.reelhouse is not None:
        return state.reelhouse.width(), state.reelhouse.height()
    return config.DEFAULT_CANVAS_WIDTH, config.DEFAULT_CANVAS_HEIGHT


def grid_frame(state: SessionState) -> GridFrame:
    width, height = canvas_size(state)
    return GridFrame(width, height, state.grid)


def _dashed_pen(color: QColor, width: float, dash: float) -> QPen:
    pen = QPen(color)
    pen.setWidthF(width)
    # Qt dash pattern is expressed in units of the pen width
    pen.setDashPattern([dash / width, dash / width])
    return pen


def _draw_background(painter: QPainter, state: SessionState, width: int, height: int) -> None:
    if state.reelhouse is not None:
        painter.drawImage(QRectF(0, 0, width, height), state.reelhouse)
        return
    painter.fillRect(0, 0, width, height, PLACEHOLDER_FILL)
    painter.setPen(_dashed_pen(PLACEHOLDER_BORDER, 2, 8))
    painter.setBrush(Qt.NoBrush)
    painter.drawRect(QRectF(4, 4, width - 8, height - 8))


def render_preview(state: SessionState) -> QImage:
    """Renders the session at the canvas' natural size."""
    frame = grid_frame(state)
    width, height = int(frame.width), int(frame.height)
    image, painter = new_canvas(width, height)

    try:
        _draw_background(painter, state, width, height)

        if state.grid.show_bounds:
            painter.setPen(_dashed_pen(BOUNDS_COLOR, 1, 4))
            painter.setBrush(Qt.NoBrush)
            for rect in cell_rects(frame):
                painter.drawRect(QRectF(rect.x + 0.5, rect.y + 0.5, rect.width - 1, rect.height - 1))

        if not state.placements:
            if state.reelhouse is None:
                inset = PLACEHOLDER_CELL_INSET
                painter.setPen(QPen(PLACEHOLDER_CELL_BORDER, 1))
                painter.setBrush(PLACEHOLDER_CELL_FILL)
                for rect in cell_rects(frame):
                    painter.drawRect(QRectF(rect.x + inset, rect.y + inset,
                                            rect.width - 2 * inset, rect.height - 2 * inset))
            return image

        for placement, rect in resolve_all(state.placements, frame):
            painter.drawImage(QRectF(rect.x, rect.y, rect.width, rect.height), placement.symbol.image)
    finally:
        painter.end()

    return image


# --- SETTINGS BAR ---

def _format_offset(axis: str, value: int) -> str:
    return f"{axis}{'+' if value > 0 else ''}{value}"


def settings_summary(state: SessionState) -> List[str]:
    """
    Entries of the preview settings bar. Rows and columns are always listed;
    everything else only when it differs from its default.
    """
    grid = state.grid
    parts = [f"Rows: {grid.rows}", f"Cols: {grid.cols}"]

    changed = grid.changed_from_defaults()
    for attr, (label, unit) in SETTING_LABELS.items():
        if attr in changed:
            parts.append(f"{label}: {getattr(grid, attr)}{unit}")

    for symbol in state.symbols:
        if not symbol.is_customized:
            continue
        adjustments = []
        if symbol.scale != 100:
            adjustments.append(f"{symbol.scale}%")
        if symbol.x_offset:
            adjustments.append(_format_offset("X", symbol.x_offset))
        if symbol.y_offset:
            adjustments.append(_format_offset("Y", symbol.y_offset))
        parts.append(f"{symbol.name}:{','.join(adjustments)}")

    return parts


def wrap_settings(parts: List[str], fits: Callable[[str], bool]) -> List[str]:
    """Greedy line wrapping of the bar entries; ``fits`` tells whether a line fits the width."""
    words = SETTINGS_SEPARATOR.join(parts).split("  ")
    lines: List[str] = []
    current = ""
    for word in words:
        candidate = f"{current}  {word}" if current else word
        if not fits(candidate) and current:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def render_with_settings_bar(state: SessionState) -> QImage:
    """Preview image with the settings bar appended below it."""
    source = render_preview(state)
    width = source.width()

    font = QFont("monospace")
    font.setStyleHint(QFont.Monospace)
    font.setPixelSize(max(10, width // 80))
    metrics = QFontMetrics(font)
    max_text_width = width - BAR_PADDING * 2
    line_height = font.pixelSize() + 4

    lines = wrap_settings(settings_summary(state), lambda text: metrics.horizontalAdvance(text) <= max_text_width)
    bar_height = len(lines) * line_height + BAR_PADDING * 2

    result, painter = new_canvas(width, source.height() + bar_height)
    try:
        painter.drawImage(0, 0, source)
        painter.fillRect(0, source.height(), width, bar_height, BAR_COLOR)
        painter.setFont(font)
        painter.setPen(BAR_TEXT_COLOR)
        for i, line in enumerate(lines):
            y = source.height() + BAR_PADDING + i * line_height
            painter.drawText(QRectF(0, y, width, line_height), Qt.AlignHCenter | Qt.AlignTop, line)
    finally:
        painter.end()

    logger.debug(f"Preview rendered with {len(lines)} settings lines.")
    return result
