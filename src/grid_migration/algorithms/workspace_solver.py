"""
Workspace placement: greedy first-fit of surplus items onto one screen.

Algorithm:
  1. Seed the screen's occupancy from the destination items already on it
     (and the reserved first row on screen 0, when configured).
  2. Walk the shared surplus list in reading order.
  3. For each item scan rows top→bottom, columns left→right, starting at the
     cursor left by the previous placement, and take the first cell where the
     item fits at its minimum span or its full span.
  4. Placed items are persisted and dropped from the surplus; items that do
     not fit stay for the next screen.

The cursor never moves back up within a screen, so later items in reading
order never land above earlier ones.
"""

from __future__ import annotations

import logging
from typing import Iterable

from grid_migration.algorithms.occupancy import GridOccupancy
from grid_migration.core.models import Item
from grid_migration.storage.interfaces import ItemWriter

log = logging.getLogger(__name__)


class GridPlacementSolution:
    """
    Places surplus items on a single workspace screen.

    One instance is used per screen and discarded afterwards. The surplus
    list is owned by the caller and compacted in place by ``find()``.

    Args:
        screen_id:               Destination screen being filled.
        columns, rows:           Destination grid size.
        items_to_place:          Shared surplus list, sorted in reading order.
        writer:                  Receives every placed item.
        existing_items:          Destination items already on this screen.
        matching_screen_id_only: Only accept items whose original screen id
                                 equals *screen_id*.
        reserve_first_row:       Keep row 0 free (honoured on screen 0 only).
    """

    def __init__(
        self,
        screen_id: int,
        columns: int,
        rows: int,
        items_to_place: list[Item],
        writer: ItemWriter,
        existing_items: Iterable[Item] = (),
        matching_screen_id_only: bool = False,
        reserve_first_row: bool = False,
    ) -> None:
        self.screen_id = screen_id
        self.columns = columns
        self.rows = rows
        self.matching_screen_id_only = matching_screen_id_only
        self.occupied = GridOccupancy(columns, rows)
        self.placed: list[Item] = []
        self.discarded: list[Item] = []
        self._items = items_to_place
        self._writer = writer
        self._next_x = 0
        self._next_y = 0

        if reserve_first_row and screen_id == 0:
            self.occupied.mark_region(0, 0, columns, 1, True)
            self._next_y = 1
        for item in existing_items:
            self.occupied.mark_item(item, True)

    def find(self) -> None:
        """Place as many surplus items as possible on this screen."""
        items = self._items
        keep: list[Item] = []
        stop = len(items)
        for index, item in enumerate(items):
            if self.matching_screen_id_only:
                if item.screen_id < self.screen_id:
                    keep.append(item)
                    continue
                if item.screen_id > self.screen_id:
                    stop = index
                    break
            if item.min_span_x > self.columns or item.min_span_y > self.rows:
                log.debug("Discarding %r: min span %dx%d exceeds %dx%d grid",
                          item, item.min_span_x, item.min_span_y,
                          self.columns, self.rows)
                self.discarded.append(item)
                continue
            if self._find_placement(item):
                self._writer.insert_item(item)
                self.placed.append(item)
                log.debug("Placed %r", item)
                continue
            keep.append(item)
        keep.extend(items[stop:])
        items[:] = keep

    def _find_placement(self, item: Item) -> bool:
        """
        Search for the next cell where *item* fits.

        (next_x, next_y) memoizes where the previous placement ended, so the
        scan resumes there instead of rescanning exhausted cells.
        """
        for y in range(self._next_y, self.rows):
            for x in range(self._next_x, self.columns):
                fits = self.occupied.is_region_vacant(x, y, item.span_x, item.span_y)
                min_fits = self.occupied.is_region_vacant(
                    x, y, item.min_span_x, item.min_span_y)
                if min_fits:
                    item.span_x = item.min_span_x
                    item.span_y = item.min_span_y
                if fits or min_fits:
                    item.screen_id = self.screen_id
                    item.cell_x = x
                    item.cell_y = y
                    self.occupied.mark_item(item, True)
                    self._next_x = x + item.span_x
                    self._next_y = y
                    return True
            self._next_x = 0
        return False
