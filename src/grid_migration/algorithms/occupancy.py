"""
Occupancy tracking for one destination screen and for the hotseat.

GridOccupancy keeps a ``columns × rows`` boolean numpy array; a cell is True
when some item covers it. HotseatOccupancy is the 1-D equivalent for the
hotseat strip, indexed by slot.

Both are scratch state: built fresh for each migration run from the items
already in the destination, then updated as surplus items are placed.

Usage:
    grid = GridOccupancy(4, 5)
    grid.mark_item(existing_item, True)
    if grid.is_region_vacant(x, y, item.span_x, item.span_y):
        ...
"""

from __future__ import annotations

import numpy as np

from grid_migration.core.models import Item


class GridOccupancy:
    """
    Occupied cells of one workspace screen.

    Indexed ``cells[x, y]`` with x along columns and y along rows.
    """

    __slots__ = ("columns", "rows", "cells")

    def __init__(self, columns: int, rows: int) -> None:
        self.columns = columns
        self.rows = rows
        self.cells: np.ndarray = np.zeros((columns, rows), dtype=bool)

    # ── Queries ──────────────────────────────────────────────────────────

    def is_region_vacant(self, x: int, y: int, span_x: int, span_y: int) -> bool:
        """True iff ``[x, x+span_x) × [y, y+span_y)`` is in bounds and unmarked."""
        if x < 0 or y < 0:
            return False
        if x + span_x > self.columns or y + span_y > self.rows:
            return False
        return not self.cells[x:x + span_x, y:y + span_y].any()

    def occupied_count(self) -> int:
        return int(self.cells.sum())

    # ── Mutation ─────────────────────────────────────────────────────────

    def mark_region(self, x: int, y: int, span_x: int, span_y: int, value: bool) -> None:
        """Set every cell of the rectangle to *value*, clipped to the grid."""
        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + span_x, self.columns)
        y1 = min(y + span_y, self.rows)
        if x0 >= x1 or y0 >= y1:
            return
        self.cells[x0:x1, y0:y1] = value

    def mark_item(self, item: Item, value: bool) -> None:
        self.mark_region(item.cell_x, item.cell_y, item.span_x, item.span_y, value)

    def __repr__(self) -> str:
        return (f"GridOccupancy({self.columns}x{self.rows}, "
                f"occupied={self.occupied_count()})")


class HotseatOccupancy:
    """Occupied slots of the hotseat strip."""

    __slots__ = ("cells",)

    def __init__(self, size: int) -> None:
        self.cells: np.ndarray = np.zeros(size, dtype=bool)

    def __len__(self) -> int:
        return len(self.cells)

    def is_slot_free(self, index: int) -> bool:
        return 0 <= index < len(self.cells) and not self.cells[index]

    def mark_slot(self, index: int, value: bool) -> None:
        if not 0 <= index < len(self.cells):
            raise ValueError(f"Hotseat slot {index} out of range 0..{len(self.cells) - 1}")
        self.cells[index] = value

    def __repr__(self) -> str:
        return f"HotseatOccupancy({''.join('x' if c else '.' for c in self.cells)})"
