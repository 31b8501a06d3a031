"""
Entry point: migrate a store's items between two grid layouts.

The whole run happens inside one store transaction: invalid records removed
while loading, every placement and the optional source-table drop are
committed together, or not at all.

Usage:
    store = LayoutStore()                    # holds "favorites_tmp" and "favorites"
    changed = migrate_grid(store, GridSpec(5, 5, 5), GridSpec(4, 4, 4),
                           StaticPackageOracle(installed))
"""

from __future__ import annotations

import logging

from grid_migration.config import GridSpec, MigrationSettings, compare_grid_area
from grid_migration.monitoring.metrics import MigrationReport
from grid_migration.runner.task import GridComparator, GridMigrationTask
from grid_migration.storage.interfaces import PackageOracle, WidgetSizeOracle
from grid_migration.storage.memory_store import LayoutStore
from grid_migration.storage.reader import TableReader
from grid_migration.storage.writer import TableWriter

log = logging.getLogger(__name__)

FAVORITES_TABLE = "favorites"
TMP_TABLE = "favorites_tmp"


def needs_to_migrate(src_grid: GridSpec, dest_grid: GridSpec) -> bool:
    """True when items laid out for *src_grid* have to be migrated to *dest_grid*."""
    needs = not dest_grid.is_compatible(src_grid)
    if needs:
        log.info("Migration is needed. dest: %s, src: %s", dest_grid, src_grid)
    return needs


def run_migration(
    store: LayoutStore,
    src_grid: GridSpec,
    dest_grid: GridSpec,
    packages: PackageOracle,
    widget_sizes: WidgetSizeOracle | None = None,
    settings: MigrationSettings | None = None,
    src_table: str = TMP_TABLE,
    dest_table: str = FAVORITES_TABLE,
    compare: GridComparator = compare_grid_area,
) -> MigrationReport:
    """
    Migrate the items of *src_table* (laid out for *src_grid*) into *dest_table*.

    Args:
        store:        Store holding both tables.
        src_grid:     Layout the source items were placed on.
        dest_grid:    Layout of the destination table.
        packages:     Package validity oracle used to validate records.
        widget_sizes: Widget minimum-size oracle.
        settings:     Behaviour switches.
        src_table:    Table to migrate from.
        dest_table:   Table to migrate into.
        compare:      Generosity ordering between layouts.

    Returns:
        MigrationReport; ``changed`` is False when no item was placed.

    Raises:
        Exception: Any failure, after the store has been rolled back.
    """
    if not needs_to_migrate(src_grid, dest_grid):
        report = MigrationReport(src_grid=src_grid.label, dest_grid=dest_grid.label)
        report.mark_complete()
        return report

    settings = settings or MigrationSettings()
    src_reader = TableReader(store, src_table, packages, widget_sizes,
                             settings.default_widget_min_span)
    dest_reader = TableReader(store, dest_table, packages, widget_sizes,
                              settings.default_widget_min_span)
    writer = TableWriter(store, src_table, dest_table)

    task = None
    try:
        with store.transaction() as t:
            task = GridMigrationTask(src_reader, dest_reader, writer, dest_grid, settings)
            task.migrate(src_grid, compare)
            if settings.drop_source_table:
                store.drop_table(src_table)
            t.commit()
    except Exception:
        log.exception("Error during grid migration")
        raise
    finally:
        if task is not None:
            task.report.mark_complete()
            log.info("Workspace migration completed in %.1f ms", task.report.runtime_ms)

    task.report.invalid_removed = len(src_reader.removed_ids) + len(dest_reader.removed_ids)
    return task.report


def migrate_grid(
    store: LayoutStore,
    src_grid: GridSpec,
    dest_grid: GridSpec,
    packages: PackageOracle,
    **kwargs,
) -> bool:
    """
    Run the migration and return True if any item was placed.

    See ``run_migration`` for the arguments.
    """
    return run_migration(store, src_grid, dest_grid, packages, **kwargs).changed
