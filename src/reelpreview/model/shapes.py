"""
Symbol Shapes
=============
A shape is the set of grid cells a symbol covers, expressed as
(column offset, row offset) pairs relative to the symbol's anchor cell.

A plain symbol covers a single cell ``[(0, 0)]``. Anything larger is a
"mega symbol". Cells do not need to be contiguous.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

Cell = Tuple[int, int]

DEFAULT_CELL: Cell = (0, 0)


def _default_cells() -> List[Cell]:
    return [DEFAULT_CELL]


@dataclass
class Shape:
    """Ordered, duplicate-free list of cell offsets. Never empty."""
    cells: List[Cell] = field(default_factory=_default_cells)

    def __post_init__(self) -> None:
        unique: List[Cell] = []
        for col, row in self.cells:
            cell = (int(col), int(row))
            if cell not in unique:
                unique.append(cell)
        self.cells = unique or _default_cells()

    @classmethod
    def from_list(cls, data: Optional[Iterable[Sequence[int]]]) -> Shape:
        """Builds a shape from its serialized form (``[[col, row], ...]``)."""
        if not data:
            return cls()
        return cls([(int(c[0]), int(c[1])) for c in data])

    def to_list(self) -> List[List[int]]:
        return [[col, row] for col, row in self.cells]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self.cells

    @property
    def is_single_cell(self) -> bool:
        return len(self.cells) == 1

    def toggle(self, col: int, row: int) -> bool:
        """
        Adds the cell if absent, removes it if present.

        Removing the last remaining cell is rejected and the shape stays as it
        is. Returns True when the cell is part of the shape afterwards.
        """
        cell = (int(col), int(row))
        if cell in self.cells:
            if len(self.cells) > 1:
                self.cells.remove(cell)
                return False
            return True
        self.cells.append(cell)
        return True

    def bounds(self) -> Tuple[int, int, int, int]:
        """Returns (min_col, min_row, max_col, max_row) of the offsets."""
        cols = [c for c, _ in self.cells]
        rows = [r for _, r in self.cells]
        return min(cols), min(rows), max(cols), max(rows)

    @property
    def footprint(self) -> Tuple[int, int]:
        """Bounding box size in cells (width, height)."""
        min_col, min_row, max_col, max_row = self.bounds()
        return max_col - min_col + 1, max_row - min_row + 1

    def describe(self) -> str:
        if self.is_single_cell:
            return "1×1"
        width, height = self.footprint
        if len(self.cells) == width * height:
            return f"{width}×{height}"
        return f"Custom ({len(self.cells)} cells)"
