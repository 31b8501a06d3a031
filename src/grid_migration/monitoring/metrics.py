"""Metrics tracking and export for grid migration runs.

Provides dataclasses recording what a migration run did and utilities for
exporting them to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScreenMetrics:
    """Placements made on a single destination screen.

    Attributes:
        screen_id: Destination screen id.
        items_placed: Number of surplus items placed on the screen.
        cells_used: Cells covered by the placed items.
        new_screen: True if the screen did not exist in the destination.
        matching_screen_id_only: Whether page grouping was enforced.
    """

    screen_id: int
    items_placed: int
    cells_used: int
    new_screen: bool
    matching_screen_id_only: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Example:
            >>> sm = ScreenMetrics(2, 5, 9, True)
            >>> sm.to_dict()["items_placed"]
            5
        """
        return asdict(self)


@dataclass
class MigrationReport:
    """Aggregate outcome of one migration run.

    Attributes:
        src_grid: Source layout, as ``"CxR/H"``.
        dest_grid: Destination layout, as ``"CxR/H"``.
        changed: True if the destination was modified by placements.
        hotseat_surplus: Hotseat items found missing from the destination.
        workspace_surplus: Workspace items found missing from the destination.
        hotseat_placed: Hotseat items placed.
        hotseat_unplaced: Hotseat items left over once the hotseat was full.
        workspace_placed: Workspace items placed.
        discarded_oversize: Items dropped because their minimum span exceeds
            the destination grid.
        invalid_removed: Records removed by validation while loading.
        new_screens: Screens created beyond the destination's last screen.
        runtime_ms: Wall time of the run in milliseconds.
        started_at: Run start timestamp.
        completed_at: Run completion timestamp (None if running).
        screen_metrics: Per-screen placement metrics.
    """

    src_grid: str = ""
    dest_grid: str = ""
    changed: bool = False
    hotseat_surplus: int = 0
    workspace_surplus: int = 0
    hotseat_placed: int = 0
    hotseat_unplaced: int = 0
    workspace_placed: int = 0
    discarded_oversize: int = 0
    invalid_removed: int = 0
    new_screens: int = 0
    runtime_ms: float = 0.0
    started_at: datetime = field(default_factory=_now)
    completed_at: datetime | None = None
    screen_metrics: list[ScreenMetrics] = field(default_factory=list)

    def add_screen(self, screen: ScreenMetrics) -> None:
        """Add a screen's metrics to the report.

        Example:
            >>> report = MigrationReport()
            >>> report.add_screen(ScreenMetrics(3, 4, 4, True))
            >>> report.workspace_placed, report.new_screens
            (4, 1)
        """
        self.screen_metrics.append(screen)
        self.workspace_placed += screen.items_placed
        if screen.new_screen and screen.items_placed:
            self.new_screens += 1

    def mark_complete(self) -> None:
        """Mark the run as complete and calculate its runtime."""
        self.completed_at = _now()
        self.runtime_ms = (self.completed_at - self.started_at).total_seconds() * 1000

    @property
    def items_placed(self) -> int:
        return self.hotseat_placed + self.workspace_placed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps.

        Example:
            >>> d = MigrationReport(src_grid="5x5/5").to_dict()
            >>> d["src_grid"]
            '5x5/5'
        """
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["screen_metrics"] = [s.to_dict() for s in self.screen_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to dictionary without per-screen details."""
        d = self.to_dict()
        del d["screen_metrics"]
        return d


def export_to_json(report: MigrationReport, output_path: Path | str,
                   include_screens: bool = True) -> None:
    """Export a migration report to a JSON file.

    Args:
        report: MigrationReport instance to export.
        output_path: Path to output JSON file.
        include_screens: If True, include per-screen metrics.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = report.to_dict() if include_screens else report.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


SCREEN_CSV_FIELDS = ["screen_id", "items_placed", "cells_used", "new_screen",
                     "matching_screen_id_only"]


def export_to_csv(report: MigrationReport, output_path: Path | str) -> None:
    """Export per-screen metrics to a CSV file (header only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SCREEN_CSV_FIELDS)
        writer.writeheader()
        for screen in report.screen_metrics:
            writer.writerow(screen.to_dict())


def print_summary(report: MigrationReport) -> str:
    """Generate a human-readable summary of a migration report.

    Returns:
        Formatted multi-line summary string.

    Example:
        >>> summary = print_summary(MigrationReport(src_grid="5x5/5", dest_grid="4x4/4"))
        >>> "Migration: 5x5/5 -> 4x4/4" in summary
        True
    """
    lines = [
        "=" * 60,
        f"Migration: {report.src_grid} -> {report.dest_grid}",
        f"Changed: {'yes' if report.changed else 'no'}",
        "=" * 60,
        f"Hotseat:   {report.hotseat_placed}/{report.hotseat_surplus} placed, "
        f"{report.hotseat_unplaced} left over",
        f"Workspace: {report.workspace_placed}/{report.workspace_surplus} placed",
        f"New screens: {report.new_screens}",
        f"Discarded (too large): {report.discarded_oversize}",
        f"Invalid records removed: {report.invalid_removed}",
        "",
        f"Runtime: {report.runtime_ms:.1f} ms",
        f"Started:   {report.started_at.isoformat()}",
        f"Completed: {report.completed_at.isoformat() if report.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
