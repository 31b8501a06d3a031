"""
grid_migration: move home-screen items from one grid size to another.

Typical use:
    from grid_migration import GridSpec, LayoutStore, StaticPackageOracle, migrate_grid

    changed = migrate_grid(store, GridSpec(5, 5, 5), GridSpec(4, 4, 4),
                           StaticPackageOracle(installed_packages))
"""

from grid_migration.config import GridSpec, MigrationSettings, load_settings
from grid_migration.runner.migrate import migrate_grid, needs_to_migrate, run_migration
from grid_migration.storage.interfaces import StaticPackageOracle, StaticWidgetSizeOracle
from grid_migration.storage.memory_store import FavoriteRecord, LayoutStore

__version__ = "0.1.0"

__all__ = [
    "GridSpec",
    "MigrationSettings",
    "load_settings",
    "migrate_grid",
    "needs_to_migrate",
    "run_migration",
    "StaticPackageOracle",
    "StaticWidgetSizeOracle",
    "FavoriteRecord",
    "LayoutStore",
]
