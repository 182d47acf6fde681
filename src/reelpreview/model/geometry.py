"""
Geometry Resolver
=================
Turns placements into pixel rectangles on the preview canvas.

Why is this file needed?
------------------------
1. Cell layout: Splits the canvas into rows x cols cells after padding, gaps
   and the global offset are applied.
2. Fitting: Fits each symbol image into the bounding box of its shape while
   keeping the image's aspect ratio, then centers it and applies the symbol's
   own offset.

Nothing here clamps. Padding or gaps larger than the canvas give negative
cell sizes, and a zero scale gives an empty rectangle. Both are valid output.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from reelpreview.model.state import GridSettings
from reelpreview.model.symbols import Placement


@dataclass(frozen=True)
class DrawRect:
    """Destination rectangle in canvas pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(frozen=True)
class GridFrame:
    """Canvas size plus the grid settings laid over it."""
    width: float
    height: float
    grid: GridSettings

    def cell_size(self) -> Tuple[float, float]:
        g = self.grid
        cell_w = (self.width - 2 * g.h_padding - (g.cols - 1) * g.h_gap) / g.cols
        cell_h = (self.height - 2 * g.v_padding - (g.rows - 1) * g.v_gap) / g.rows
        return cell_w, cell_h

    def cell_origin(self, col: int, row: int) -> Tuple[float, float]:
        g = self.grid
        cell_w, cell_h = self.cell_size()
        x = g.h_padding + g.x_offset + col * (cell_w + g.h_gap)
        y = g.v_padding + g.y_offset + row * (cell_h + g.v_gap)
        return x, y


def cell_rect(frame: GridFrame, col: int, row: int) -> DrawRect:
    cell_w, cell_h = frame.cell_size()
    x, y = frame.cell_origin(col, row)
    return DrawRect(x, y, cell_w, cell_h)


def cell_rects(frame: GridFrame) -> List[DrawRect]:
    """All cell rectangles in row-major order."""
    return [cell_rect(frame, col, row)
            for row in range(frame.grid.rows)
            for col in range(frame.grid.cols)]


def bounding_box(frame: GridFrame, placement: Placement) -> DrawRect:
    """Pixel rectangle covering the whole footprint of a placed shape, gaps included."""
    g = frame.grid
    shape = placement.symbol.shape
    min_col, min_row, _, _ = shape.bounds()
    span_w, span_h = shape.footprint
    cell_w, cell_h = frame.cell_size()

    box_x, box_y = frame.cell_origin(placement.anchor_col + min_col, placement.anchor_row + min_row)
    box_w = span_w * cell_w + (span_w - 1) * g.h_gap
    box_h = span_h * cell_h + (span_h - 1) * g.v_gap
    return DrawRect(box_x, box_y, box_w, box_h)


def fit_size(
    natural_w: float,
    natural_h: float,
    box_w: float,
    box_h: float,
    factor: float
) -> Tuple[float, float]:
    """
    Aspect preserving fit of a natural size into a box, times a uniform factor.

    A relatively wider image is fitted to the box width, otherwise to the box
    height. Zero-sized images or boxes give (0, 0).
    """
    if natural_w == 0 or natural_h == 0 or box_h == 0:
        return 0.0, 0.0
    image_aspect = natural_w / natural_h
    box_aspect = box_w / box_h

    if image_aspect > box_aspect:
        return box_w * factor, (box_w / image_aspect) * factor
    return box_h * image_aspect * factor, box_h * factor


def resolve(placement: Placement, frame: GridFrame, global_scale: Optional[float] = None) -> DrawRect:
    """
    Computes where a placed symbol is drawn.

    Args:
        placement: Symbol plus anchor cell.
        frame: Canvas size and grid settings.
        global_scale: Global symbol size in percent. Defaults to the frame's
            ``symbol_size``.

    Returns:
        The destination rectangle, centered in the shape's bounding box and
        shifted by the symbol's own pixel offset.
    """
    if global_scale is None:
        global_scale = frame.grid.symbol_size
    symbol = placement.symbol
    box = bounding_box(frame, placement)

    factor = (global_scale / 100) * (symbol.scale / 100)
    natural_w, natural_h = symbol.natural_size
    draw_w, draw_h = fit_size(natural_w, natural_h, box.width, box.height, factor)

    draw_x = box.x + (box.width - draw_w) / 2 + symbol.x_offset
    draw_y = box.y + (box.height - draw_h) / 2 + symbol.y_offset
    return DrawRect(draw_x, draw_y, draw_w, draw_h)


def resolve_all(placements: List[Placement], frame: GridFrame) -> List[Tuple[Placement, DrawRect]]:
    return [(p, resolve(p, frame)) for p in placements]
