"""Monitoring module for grid migrations.

Provides the migration report, per-screen metrics and their exporters.
"""

from .metrics import (
    MigrationReport,
    ScreenMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)

__all__ = [
    "MigrationReport",
    "ScreenMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
]
