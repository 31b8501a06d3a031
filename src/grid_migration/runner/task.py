"""
Migration coordinator: moves the surplus of one layout into another.

Flow:
    1. Load both layouts and diff them (hotseat and workspace separately)
    2. Sort both surpluses in reading order
    3. Fill free hotseat slots
    4. Fill the destination's existing screens, lowest id first
    5. Open new screens after the last one until the workspace surplus is
       empty, keeping items on their original page when preserving pages
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from grid_migration.algorithms.diff import calc_diff
from grid_migration.algorithms.hotseat_solver import HotseatPlacementSolution
from grid_migration.algorithms.workspace_solver import GridPlacementSolution
from grid_migration.config import GridSpec, MigrationSettings, compare_grid_area
from grid_migration.core.models import Item, sort_reading_order
from grid_migration.monitoring.metrics import MigrationReport, ScreenMetrics
from grid_migration.storage.interfaces import ItemReader, ItemWriter

log = logging.getLogger(__name__)

GridComparator = Callable[[GridSpec, GridSpec], int]


class MigrationError(Exception):
    """The migration cannot complete; the caller must roll back."""


class MigrationState(Enum):
    NOT_STARTED = "not_started"
    DIFFED = "diffed"
    HOTSEAT_PLACED = "hotseat_placed"
    EXISTING_SCREENS = "existing_screens"
    NEW_SCREENS = "new_screens"
    DONE = "done"


def should_preserve_pages(
    src_grid: GridSpec,
    dest_grid: GridSpec,
    compare: GridComparator = compare_grid_area,
) -> bool:
    """
    True when surplus items may keep their original page grouping.

    Requires the destination to be no worse than the source and to lose at
    most two columns.
    """
    return compare(dest_grid, src_grid) >= 0 and src_grid.columns - dest_grid.columns <= 2


class GridMigrationTask:
    """
    One migration run from a source layout into a destination layout.

    Both layouts are loaded and diffed on construction; ``migrate()`` then
    places the surplus. The task owns the surplus lists and lends them to one
    solver at a time.

    Args:
        src_reader:  Reader over the layout being migrated from.
        dest_reader: Reader over the layout being migrated into.
        writer:      Receives every placed item.
        dest_grid:   Size of the destination layout.
        settings:    Behaviour switches; defaults when omitted.
    """

    def __init__(
        self,
        src_reader: ItemReader,
        dest_reader: ItemReader,
        writer: ItemWriter,
        dest_grid: GridSpec,
        settings: MigrationSettings | None = None,
    ) -> None:
        self.state = MigrationState.NOT_STARTED
        self.dest_reader = dest_reader
        self.writer = writer
        self.dest_grid = dest_grid
        self.settings = settings or MigrationSettings()
        self.report = MigrationReport(dest_grid=dest_grid.label)

        self.hotseat_items: list[Item] = dest_reader.load_hotseat_items()
        self.workspace_items: list[Item] = dest_reader.load_workspace_items()

        self.hotseat_diff = calc_diff(src_reader.load_hotseat_items(), self.hotseat_items)
        self.workspace_diff = calc_diff(src_reader.load_workspace_items(), self.workspace_items)
        self.report.hotseat_surplus = len(self.hotseat_diff)
        self.report.workspace_surplus = len(self.workspace_diff)
        self.state = MigrationState.DIFFED

    def migrate(self, src_grid: GridSpec, compare: GridComparator = compare_grid_area) -> bool:
        """
        Place the surplus items.

        Returns:
            False if there was nothing to migrate, True otherwise.

        Raises:
            MigrationError: If a fresh screen can take none of the remaining items.
        """
        self.report.src_grid = src_grid.label
        if not self.hotseat_diff and not self.workspace_diff:
            log.info("Nothing to migrate: destination already holds every item")
            self.state = MigrationState.DONE
            return False

        sort_reading_order(self.hotseat_diff)
        sort_reading_order(self.workspace_diff)

        hotseat = HotseatPlacementSolution(
            self.dest_grid.hotseat_size, self.hotseat_items,
            self.hotseat_diff, self.writer)
        hotseat.find()
        self.report.hotseat_placed = len(hotseat.placed)
        self.report.hotseat_unplaced = len(self.hotseat_diff)
        self.state = MigrationState.HOTSEAT_PLACED

        last_screen_id = self.dest_reader.last_screen_id
        preserve_pages = False
        if last_screen_id < 0 and self.settings.preserve_pages:
            preserve_pages = should_preserve_pages(src_grid, self.dest_grid, compare)

        self.state = MigrationState.EXISTING_SCREENS
        for screen_id in range(last_screen_id + 1):
            self._place_on_screen(screen_id, matching_screen_id_only=False, new_screen=False)
            if not self.workspace_diff:
                break

        # Leftovers that fit nowhere go onto new screens until all are placed.
        self.state = MigrationState.NEW_SCREENS
        screen_id = last_screen_id + 1
        while self.workspace_diff:
            # Past the last original page, grouping can no longer place anything.
            matching = preserve_pages and screen_id <= max(
                item.screen_id for item in self.workspace_diff)
            solution = self._place_on_screen(screen_id, matching, new_screen=True)
            reserved = self.settings.reserve_first_row and screen_id == 0
            if not (matching or reserved or solution.placed or solution.discarded):
                raise MigrationError(
                    f"Empty screen {screen_id} accepted none of "
                    f"{len(self.workspace_diff)} remaining items")
            screen_id += 1

        self.state = MigrationState.DONE
        self.report.changed = self.report.items_placed > 0
        log.info("Migrated %d hotseat and %d workspace items (%d new screens)",
                 self.report.hotseat_placed, self.report.workspace_placed,
                 self.report.new_screens)
        return True

    def _place_on_screen(
        self, screen_id: int, matching_screen_id_only: bool, new_screen: bool,
    ) -> GridPlacementSolution:
        solution = GridPlacementSolution(
            screen_id,
            self.dest_grid.columns,
            self.dest_grid.rows,
            self.workspace_diff,
            self.writer,
            existing_items=self.dest_reader.items_on_screen(screen_id),
            matching_screen_id_only=matching_screen_id_only,
            reserve_first_row=self.settings.reserve_first_row,
        )
        solution.find()
        self.report.discarded_oversize += len(solution.discarded)
        self.report.add_screen(ScreenMetrics(
            screen_id=screen_id,
            items_placed=len(solution.placed),
            cells_used=sum(i.span_x * i.span_y for i in solution.placed),
            new_screen=new_screen,
            matching_screen_id_only=matching_screen_id_only,
        ))
        return solution
