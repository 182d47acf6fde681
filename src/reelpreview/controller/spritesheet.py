"""
Spritesheet Builder
Packs the symbol images into rows of a single sheet image for export.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
import logging
from typing import Any, Dict, List

from PySide6.QtGui import QImage

from reelpreview import config
from reelpreview.controller.imaging import new_canvas, scale_to_max
from reelpreview.model.symbols import Symbol

logger = logging.getLogger(__name__)


@dataclass
class SpriteRegion:
    key: str
    x: int
    y: int
    width: int
    height: int
    scale: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Spritesheet:
    image: QImage
    width: int
    height: int
    regions: List[SpriteRegion]


def create_spritesheet(
    symbols: List[Symbol],
    max_symbol: int = config.MAX_SYMBOL_DIMENSION,
    max_sheet: int = config.MAX_SPRITESHEET_DIMENSION
) -> Spritesheet:
    """
    Shelf packing: symbols are scaled to at most ``max_symbol`` px and laid out
    left to right, wrapping to a new row once a row would exceed ``max_sheet``.
    The final sheet is clipped to ``max_sheet`` in both directions.
    """
    scaled_images: List[QImage] = []
    regions: List[SpriteRegion] = []

    current_x = 0
    current_y = 0
    row_height = 0
    max_width = 0

    for i, symbol in enumerate(symbols):
        scaled, scale = scale_to_max(symbol.image, max_symbol)
        w, h = scaled.width(), scaled.height()

        if current_x + w > max_sheet and current_x > 0:
            current_x = 0
            current_y += row_height
            row_height = 0

        regions.append(SpriteRegion(key=f"symbol_{i}", x=current_x, y=current_y, width=w, height=h, scale=scale))
        scaled_images.append(scaled)

        current_x += w
        row_height = max(row_height, h)
        max_width = max(max_width, current_x)

    total_height = current_y + row_height
    sheet_w = min(max_width, max_sheet) or 1
    sheet_h = min(total_height, max_sheet) or 1
    if max_width > max_sheet or total_height > max_sheet:
        logger.warning(f"Spritesheet content ({max_width}x{total_height}) clipped to {sheet_w}x{sheet_h}.")

    sheet, painter = new_canvas(sheet_w, sheet_h)
    try:
        for image, region in zip(scaled_images, regions):
            painter.drawImage(region.x, region.y, image)
    finally:
        painter.end()

    logger.info(f"Spritesheet created: {len(regions)} symbols on {sheet_w}x{sheet_h}.")
    return Spritesheet(image=sheet, width=sheet_w, height=sheet_h, regions=regions)
