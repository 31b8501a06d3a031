"""
Layout documents: YAML files describing a store and the grids to migrate between.

Example document::

    src_grid:  {columns: 5, rows: 5, hotseat_size: 5}
    dest_grid: {columns: 4, rows: 4, hotseat_size: 4}
    installed_packages: [com.android.calculator2]
    widget_min_spans:
      com.example.clock/.ClockProvider: [2, 1]
    settings:
      reserve_first_row: true
    tables:
      favorites_tmp:
        - {id: 1, item_type: 0, container: -100, screen: 0, cell_x: 4, cell_y: 4,
           intent: "#Intent;component=com.android.calculator2/.Calculator;end"}
      favorites: []

The document is validated with pydantic before anything touches the store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from grid_migration.config import GridSpec, MigrationSettings
from grid_migration.storage.interfaces import StaticPackageOracle, StaticWidgetSizeOracle
from grid_migration.storage.memory_store import FavoriteRecord, LayoutStore


class GridModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: int = Field(ge=1)
    rows: int = Field(ge=1)
    hotseat_size: int = Field(ge=0)

    def to_spec(self) -> GridSpec:
        return GridSpec(self.columns, self.rows, self.hotseat_size)


class RecordModel(BaseModel):
    """One favorites row as written in a layout document."""

    model_config = ConfigDict(extra="forbid")

    id: int = Field(ge=0)
    item_type: int
    container: int
    screen: int = -1
    cell_x: int = -1
    cell_y: int = -1
    span_x: int = 1
    span_y: int = 1
    intent: str | None = None
    appwidget_provider: str | None = None
    appwidget_id: int = -1
    title: str | None = None

    def to_record(self) -> FavoriteRecord:
        return FavoriteRecord(**self.model_dump())


class LayoutDocument(BaseModel):
    """A store snapshot plus everything needed to migrate it."""

    model_config = ConfigDict(extra="forbid")

    src_grid: GridModel
    dest_grid: GridModel
    installed_packages: list[str] = Field(default_factory=list)
    widget_min_spans: dict[str, tuple[int, int]] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    tables: dict[str, list[RecordModel]] = Field(default_factory=dict)

    @field_validator("tables")
    @classmethod
    def _unique_ids(cls, tables: dict[str, list[RecordModel]]) -> dict[str, list[RecordModel]]:
        for name, rows in tables.items():
            seen: set[int] = set()
            for row in rows:
                if row.id in seen:
                    raise ValueError(f"duplicate id {row.id} in table {name!r}")
                seen.add(row.id)
        return tables

    def build_store(self) -> LayoutStore:
        store = LayoutStore()
        for name, rows in self.tables.items():
            store.create_table(name)
            for row in rows:
                store.insert(name, row.to_record())
        return store

    def package_oracle(self) -> StaticPackageOracle:
        return StaticPackageOracle(self.installed_packages)

    def widget_size_oracle(self) -> StaticWidgetSizeOracle:
        return StaticWidgetSizeOracle(self.widget_min_spans)

    def migration_settings(self) -> MigrationSettings:
        return MigrationSettings.from_dict(self.settings)


def load_layout_document(path: Path | str) -> LayoutDocument:
    """
    Read and validate a layout document.

    Raises:
        pydantic.ValidationError: If the document does not match the schema.
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return LayoutDocument.model_validate(data or {})


def store_to_dict(store: LayoutStore) -> dict[str, list[dict]]:
    return {
        name: [record.to_dict() for record in store.table(name).query()]
        for name in store.table_names()
    }


def dump_store(store: LayoutStore, path: Path | str) -> None:
    """Write every table of *store* as a YAML ``tables`` mapping."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump({"tables": store_to_dict(store)}, fh, sort_keys=False)
