"""
Layout descriptors and tuneable settings for a grid migration run.

Classes:
    GridSpec          — columns, rows and hotseat size of one grid layout
    MigrationSettings — behaviour switches for a single migration run

Settings can be kept in a small YAML file and loaded with ``load_settings``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml


# ─────────────────────────────────────────────────────────────────────────────
# Grid layout descriptor
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GridSpec:
    """
    Dimensions of one grid layout.

    Attributes:
        columns:      Number of workspace columns (cells along x).
        rows:         Number of workspace rows (cells along y).
        hotseat_size: Number of slots in the hotseat strip.
    """
    columns: int
    rows: int
    hotseat_size: int

    def __post_init__(self) -> None:
        if self.columns < 1 or self.rows < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.columns}x{self.rows}")
        if self.hotseat_size < 0:
            raise ValueError(f"Hotseat size must be >= 0, got {self.hotseat_size}")

    @property
    def area(self) -> int:
        """Number of workspace cells on one screen."""
        return self.columns * self.rows

    @property
    def label(self) -> str:
        """Compact form, e.g. ``5x5/5``."""
        return f"{self.columns}x{self.rows}/{self.hotseat_size}"

    def is_compatible(self, other: GridSpec) -> bool:
        """True when items laid out on *other* need no migration to fit here."""
        return (self.columns == other.columns
                and self.rows == other.rows
                and self.hotseat_size == other.hotseat_size)

    def to_dict(self) -> dict:
        return {"columns": self.columns, "rows": self.rows,
                "hotseat_size": self.hotseat_size}

    @classmethod
    def from_dict(cls, d: dict) -> GridSpec:
        return cls(columns=d["columns"], rows=d["rows"],
                   hotseat_size=d["hotseat_size"])

    def __str__(self) -> str:
        return f"{self.columns}x{self.rows} (hotseat {self.hotseat_size})"


def compare_grid_area(a: GridSpec, b: GridSpec) -> int:
    """
    Default generosity ordering between two layouts: by workspace area.

    Returns a negative number, zero or a positive number when *a* is smaller
    than, as large as, or larger than *b*.
    """
    return a.area - b.area


# ─────────────────────────────────────────────────────────────────────────────
# Migration settings
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MigrationSettings:
    """
    Behaviour switches for a migration run.

    Attributes:
        reserve_first_row:       Keep row 0 of screen 0 free for a fixed
                                 system overlay (e.g. a search/glance bar).
        preserve_pages:          Allow surplus items to keep their original
                                 page grouping when the destination starts
                                 without any screens.
        default_widget_min_span: Minimum span assumed for widgets whose size
                                 cannot be looked up.
        drop_source_table:       Delete the source table once the migration
                                 has been written.
    """
    reserve_first_row: bool = False
    preserve_pages: bool = True
    default_widget_min_span: tuple[int, int] = (2, 2)
    drop_source_table: bool = False

    def __post_init__(self) -> None:
        span_x, span_y = self.default_widget_min_span
        if span_x < 1 or span_y < 1:
            raise ValueError(
                f"Default widget min span must be at least 1x1, got {span_x}x{span_y}")

    def to_dict(self) -> dict:
        return {
            "reserve_first_row": self.reserve_first_row,
            "preserve_pages": self.preserve_pages,
            "default_widget_min_span": list(self.default_widget_min_span),
            "drop_source_table": self.drop_source_table,
        }

    @classmethod
    def from_dict(cls, d: dict) -> MigrationSettings:
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(
                f"Unknown migration settings: {sorted(unknown)}. "
                f"Available: {sorted(known)}"
            )
        values = dict(d)
        if "default_widget_min_span" in values:
            span_x, span_y = values["default_widget_min_span"]
            values["default_widget_min_span"] = (int(span_x), int(span_y))
        return cls(**values)


def load_settings(path: Path | str) -> MigrationSettings:
    """
    Load MigrationSettings from a YAML mapping.

    An empty file yields the defaults.

    Raises:
        ValueError: If the document is not a mapping or has unknown keys.
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return MigrationSettings()
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return MigrationSettings.from_dict(data)
