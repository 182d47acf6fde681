"""
Session State (Data Model)
==========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the reelhouse, the symbol collection, the grid
   settings and the current placements in one explicitly owned object.
2. Consistency: Every edit that changes the layout structure re-packs the grid
   synchronously, so readers never see stale placements.
3. Decoupling: Views read from this object; controllers write to this object.

Classes:
    GridSettings: Global grid and placement controls.
    SessionState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
import logging
import random
from typing import Any, List, Optional

from reelpreview import config
from reelpreview.model.packer import pack
from reelpreview.model.symbols import Placement, Symbol

logger = logging.getLogger(__name__)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


@dataclass
class GridSettings:
    rows: int = config.DEFAULT_ROWS
    cols: int = config.DEFAULT_COLS
    h_padding: int = 0
    v_padding: int = 0
    x_offset: int = 0
    y_offset: int = 0
    h_gap: int = 0
    v_gap: int = 0
    symbol_size: int = 100
    show_bounds: bool = True

    def changed_from_defaults(self) -> List[str]:
        """Names of the fields whose value differs from the default."""
        defaults = GridSettings()
        return [f.name for f in fields(self) if getattr(self, f.name) != getattr(defaults, f.name)]


@dataclass
class SessionState:
    """
    Holds the entire state of one preview session.
    Pass this instance to your controllers and views.
    """
    reelhouse: Optional[Any] = None
    symbols: List[Symbol] = field(default_factory=list)
    grid: GridSettings = field(default_factory=GridSettings)
    placements: List[Placement] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    # --- LAYOUT ---

    def repack(self) -> List[Placement]:
        """Replaces the placement list with a freshly packed one."""
        self.placements = pack(self.grid.rows, self.grid.cols, self.symbols, self.rng)
        return self.placements

    def shuffle(self) -> List[Placement]:
        return self.repack()

    def unplaced_symbols(self) -> List[Symbol]:
        """Symbols that found no room in the current placement list."""
        placed = {id(p.symbol) for p in self.placements}
        return [s for s in self.symbols if id(s) not in placed]

    def set_grid_size(self, rows: int, cols: int) -> None:
        self.grid.rows = clamp(rows, config.MIN_GRID, config.MAX_GRID)
        self.grid.cols = clamp(cols, config.MIN_GRID, config.MAX_GRID)
        logger.debug(f"Grid resized to {self.grid.rows}x{self.grid.cols}.")
        self.repack()

    # --- SYMBOL COLLECTION ---

    def add_symbol(self, image: Any, name: str) -> Symbol:
        symbol = Symbol(image=image, name=name)
        self.symbols.append(symbol)
        self.repack()
        return symbol

    def add_symbols(self, items: List[tuple]) -> List[Symbol]:
        """Adds (image, name) pairs in one go and packs once."""
        added = [Symbol(image=image, name=name) for image, name in items]
        self.symbols.extend(added)
        logger.info(f"Added {len(added)} symbols ({len(self.symbols)} total).")
        self.repack()
        return added

    def remove_symbol(self, index: int) -> Symbol:
        if not 0 <= index < len(self.symbols):
            raise IndexError(f"Symbol index {index} out of range.")
        symbol = self.symbols.pop(index)
        logger.debug(f"Removed symbol '{symbol.name}'.")
        self.repack()
        return symbol

    def replace_symbols(self, symbols: List[Symbol]) -> None:
        self.symbols = list(symbols)
        self.repack()

    def toggle_cell(self, symbol_index: int, col: int, row: int) -> bool:
        """Toggles one cell of a symbol's shape and re-packs the grid."""
        if not 0 <= symbol_index < len(self.symbols):
            raise IndexError(f"Symbol index {symbol_index} out of range.")
        selected = self.symbols[symbol_index].shape.toggle(col, row)
        self.repack()
        return selected

    def set_reelhouse(self, image: Optional[Any]) -> None:
        self.reelhouse = image

    # --- RESETS ---

    def reset_settings(self) -> None:
        """Global controls back to defaults and every symbol's adjustments cleared."""
        self.grid = GridSettings()
        for symbol in self.symbols:
            symbol.reset_adjustments()
        self.repack()
        logger.info("Settings have been reset.")

    def reset(self) -> None:
        """Clear all data for a new session."""
        self.reelhouse = None
        self.symbols = []
        self.grid = GridSettings()
        self.placements = []
        logger.info("Session state has been reset.")
