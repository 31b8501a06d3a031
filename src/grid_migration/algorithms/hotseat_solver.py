"""Hotseat placement: fill free hotseat slots with surplus items, in order."""

from __future__ import annotations

import logging

from grid_migration.algorithms.occupancy import HotseatOccupancy
from grid_migration.core.models import Item
from grid_migration.storage.interfaces import ItemWriter

log = logging.getLogger(__name__)


class HotseatPlacementSolution:
    """
    Places surplus hotseat items into the destination hotseat.

    Each free slot, lowest index first, takes the next surplus item. Items
    left over once the strip is full stay in the surplus list unplaced.
    """

    def __init__(
        self,
        hotseat_size: int,
        placed_items: list[Item],
        items_to_place: list[Item],
        writer: ItemWriter,
    ) -> None:
        self.occupied = HotseatOccupancy(hotseat_size)
        self.placed: list[Item] = []
        self._items = items_to_place
        self._writer = writer
        for item in placed_items:
            if 0 <= item.screen_id < hotseat_size:
                self.occupied.mark_slot(item.screen_id, True)
            else:
                log.warning("Ignoring hotseat item %r: slot outside 0..%d",
                            item, hotseat_size - 1)

    def find(self) -> None:
        for slot in range(len(self.occupied)):
            if not self._items:
                break
            if not self.occupied.is_slot_free(slot):
                continue
            item = self._items.pop(0)
            item.screen_id = slot
            # Position inside the strip is given by the slot; the cell is a placeholder.
            item.cell_x = slot
            item.cell_y = 0
            self._writer.insert_item(item)
            self.occupied.mark_slot(slot, True)
            self.placed.append(item)
            log.debug("Placed %r in hotseat slot %d", item, slot)
