"""
Shape Packer
============
Places every symbol's shape on a rows x cols grid without overlaps.

Procedure:
1. Shuffle the symbols, then stable-sort them by cell count (largest first),
   so mega symbols are tried while the grid is still empty.
2. Place each symbol once at the first free anchor of a shuffled anchor list.
   A symbol that does not fit anywhere is left out of this pass.
3. Fill every remaining free cell (row-major) with a random 1x1 symbol.

The random source is injectable so a seeded ``random.Random`` gives
reproducible layouts.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

import numpy as np

from reelpreview.model.shapes import Shape
from reelpreview.model.symbols import Placement, Symbol

logger = logging.getLogger(__name__)


def can_place(occupied: np.ndarray, shape: Shape, anchor_col: int, anchor_row: int) -> bool:
    """True when every cell of the shape is inside the grid and still free."""
    rows, cols = occupied.shape
    for dc, dr in shape:
        c = anchor_col + dc
        r = anchor_row + dr
        if r < 0 or r >= rows or c < 0 or c >= cols or occupied[r, c]:
            return False
    return True


def mark_occupied(occupied: np.ndarray, shape: Shape, anchor_col: int, anchor_row: int) -> None:
    for dc, dr in shape:
        occupied[anchor_row + dr, anchor_col + dc] = True


def find_valid_position(
    occupied: np.ndarray,
    shape: Shape,
    rng: random.Random
) -> Optional[Tuple[int, int]]:
    """Returns a random free anchor (col, row) for the shape, or None."""
    rows, cols = occupied.shape
    positions = [(col, row) for row in range(rows) for col in range(cols)]
    rng.shuffle(positions)

    for col, row in positions:
        if can_place(occupied, shape, col, row):
            return col, row
    return None


def pack(
    rows: int,
    cols: int,
    symbols: Sequence[Symbol],
    rng: Optional[random.Random] = None
) -> List[Placement]:
    """
    Computes a fresh placement list for the grid.

    Args:
        rows: Grid rows (>= 1).
        cols: Grid columns (>= 1).
        symbols: Symbol collection; only read, never modified.
        rng: Random source. A new unseeded generator is used when omitted.

    Returns:
        Placements with pairwise disjoint cells.
    """
    if not symbols:
        return []
    if rng is None:
        rng = random.Random()

    occupied = np.zeros((rows, cols), dtype=bool)
    placements: List[Placement] = []

    ordered = list(symbols)
    rng.shuffle(ordered)
    # list.sort is stable, so equally sized symbols keep their shuffled order
    ordered.sort(key=lambda s: len(s.shape), reverse=True)

    for symbol in ordered:
        position = find_valid_position(occupied, symbol.shape, rng)
        if position is None:
            logger.debug(f"No room for symbol '{symbol.name}' ({symbol.shape.describe()}) in {rows}x{cols} grid.")
            continue
        anchor_col, anchor_row = position
        placements.append(Placement(symbol, anchor_col, anchor_row))
        mark_occupied(occupied, symbol.shape, anchor_col, anchor_row)

    singles = [s for s in symbols if s.shape.is_single_cell]
    if singles:
        for row in range(rows):
            for col in range(cols):
                if not occupied[row, col]:
                    placements.append(Placement(rng.choice(singles), col, row))
                    occupied[row, col] = True

    logger.debug(f"Packed {len(placements)} placements into {rows}x{cols} grid "
                 f"({int(occupied.sum())}/{rows * cols} cells used).")
    return placements
