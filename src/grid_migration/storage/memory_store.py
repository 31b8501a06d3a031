"""
In-memory favorites store: named tables of item records plus transactions.

This is the reference storage collaborator used by the CLI and the tests.
A table holds ``FavoriteRecord`` rows keyed by id; the store hands out fresh
ids and wraps work in snapshot transactions:

    store = LayoutStore()
    with store.transaction() as t:
        store.table("favorites").insert(record)
        t.commit()          # leaving the block without commit rolls back
"""

from __future__ import annotations

import copy
import logging
from dataclasses import asdict, dataclass
from typing import Callable

log = logging.getLogger(__name__)


class StoreError(Exception):
    """A storage operation failed; the surrounding run must be rolled back."""


@dataclass
class FavoriteRecord:
    """
    One stored row.

    ``container`` is CONTAINER_DESKTOP, CONTAINER_HOTSEAT or the id of the
    folder holding the record. ``screen`` is the slot index for hotseat rows.
    """
    id: int
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

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, d: dict) -> FavoriteRecord:
        return cls(**d)


class FavoritesTable:
    """Rows of one layout, keyed by id."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._rows: dict[int, FavoriteRecord] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, record_id: int) -> FavoriteRecord | None:
        return self._rows.get(record_id)

    def query(self, where: Callable[[FavoriteRecord], bool] | None = None) -> list[FavoriteRecord]:
        """Matching rows in id order."""
        return [r for _, r in sorted(self._rows.items())
                if where is None or where(r)]

    def insert(self, record: FavoriteRecord) -> None:
        if record.id in self._rows:
            raise StoreError(f"Duplicate id {record.id} in table {self.name!r}")
        self._rows[record.id] = record

    def delete(self, record_ids: list[int]) -> None:
        for record_id in record_ids:
            self._rows.pop(record_id, None)

    def __repr__(self) -> str:
        return f"FavoritesTable({self.name!r}, rows={len(self._rows)})"


class LayoutStore:
    """A set of favorites tables sharing one id sequence."""

    def __init__(self) -> None:
        self._tables: dict[str, FavoritesTable] = {}
        self._max_id = 0

    # ── Tables ───────────────────────────────────────────────────────────

    def create_table(self, name: str) -> FavoritesTable:
        if name in self._tables:
            raise StoreError(f"Table {name!r} already exists")
        table = FavoritesTable(name)
        self._tables[name] = table
        return table

    def table(self, name: str) -> FavoritesTable:
        try:
            return self._tables[name]
        except KeyError:
            raise StoreError(f"No such table: {name!r}") from None

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def table_names(self) -> list[str]:
        return sorted(self._tables)

    def drop_table(self, name: str) -> None:
        self._tables.pop(name, None)

    def insert(self, table_name: str, record: FavoriteRecord) -> None:
        """Insert *record* and keep the id sequence ahead of it."""
        self.table(table_name).insert(record)
        self._max_id = max(self._max_id, record.id)

    def new_item_id(self) -> int:
        self._max_id += 1
        return self._max_id

    # ── Transactions ─────────────────────────────────────────────────────

    def transaction(self) -> Transaction:
        return Transaction(self)

    def _snapshot(self) -> tuple[dict[str, FavoritesTable], int]:
        return copy.deepcopy(self._tables), self._max_id

    def _restore(self, snapshot: tuple[dict[str, FavoritesTable], int]) -> None:
        self._tables, self._max_id = snapshot

    def __repr__(self) -> str:
        tables = ", ".join(f"{n}={len(t)}" for n, t in sorted(self._tables.items()))
        return f"LayoutStore({tables})"


class Transaction:
    """
    Snapshot transaction over a LayoutStore.

    Changes made inside the ``with`` block are kept only if ``commit()`` was
    called and no exception escaped; otherwise the store is restored.
    """

    def __init__(self, store: LayoutStore) -> None:
        self._store = store
        self._snapshot = store._snapshot()
        self._committed = False

    def commit(self) -> None:
        self._committed = True

    def rollback(self) -> None:
        self._store._restore(self._snapshot)
        self._committed = False

    def __enter__(self) -> Transaction:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None or not self._committed:
            log.info("Rolling back store transaction")
            self.rollback()
