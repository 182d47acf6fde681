"""
Symbols and Placements
======================
Data classes shared by the packer, the geometry resolver and the session state.

Classes:
    ImageLike: Protocol for the opaque image handle (QImage satisfies it).
    Symbol: An image plus its shape and individual adjustments.
    Placement: A symbol anchored at a grid cell.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Protocol, Tuple

from reelpreview.model.shapes import Cell, Shape

DEFAULT_SYMBOL_SCALE = 100


class ImageLike(Protocol):
    def width(self) -> int: ...
    def height(self) -> int: ...


@dataclass(eq=False)
class Symbol:
    """
    A symbol image with its own shape, scale (percent) and pixel offset.

    Identity based equality: two symbols loaded from the same file are still
    two different entries of the collection.
    """
    image: Any
    name: str = "symbol"
    shape: Shape = field(default_factory=Shape)
    scale: int = DEFAULT_SYMBOL_SCALE
    x_offset: int = 0
    y_offset: int = 0

    @property
    def natural_size(self) -> Tuple[int, int]:
        return int(self.image.width()), int(self.image.height())

    @property
    def is_customized(self) -> bool:
        return self.scale != DEFAULT_SYMBOL_SCALE or self.x_offset != 0 or self.y_offset != 0

    def reset_adjustments(self) -> None:
        self.scale = DEFAULT_SYMBOL_SCALE
        self.x_offset = 0
        self.y_offset = 0
        self.shape = Shape()


@dataclass(frozen=True, eq=False)
class Placement:
    """Symbol anchored at (anchor_col, anchor_row)."""
    symbol: Symbol
    anchor_col: int
    anchor_row: int

    def cells(self) -> List[Cell]:
        """Absolute grid cells covered by this placement."""
        return [(self.anchor_col + dc, self.anchor_row + dr) for dc, dr in self.symbol.shape]
