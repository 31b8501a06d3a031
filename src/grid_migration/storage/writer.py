"""Table writer: copies placed items from the source table into the destination."""

from __future__ import annotations

from dataclasses import replace

from grid_migration.core.models import Item
from grid_migration.storage.interfaces import ItemWriter
from grid_migration.storage.memory_store import FavoriteRecord, LayoutStore, StoreError


class TableWriter(ItemWriter):
    """
    ItemWriter copying rows of *src_table* into *dest_table* under new ids.

    Only screen, cell and span are taken from the placed Item; every other
    column comes from the source row unchanged.
    """

    def __init__(self, store: LayoutStore, src_table: str, dest_table: str) -> None:
        self.store = store
        self.src_table = src_table
        self.dest_table = dest_table
        self.written_ids: list[int] = []

    def persist_placement(self, item: Item) -> int:
        record = self._source_record(item.id)
        return self._insert(replace(
            record,
            screen=item.screen_id,
            cell_x=item.cell_x,
            cell_y=item.cell_y,
            span_x=item.span_x,
            span_y=item.span_y,
        ))

    def persist_child(self, child_id: int, parent_id: int) -> int:
        return self._insert(replace(self._source_record(child_id), container=parent_id))

    def _source_record(self, record_id: int) -> FavoriteRecord:
        record = self.store.table(self.src_table).get(record_id)
        if record is None:
            raise StoreError(f"Record {record_id} missing from {self.src_table!r}")
        return record

    def _insert(self, record: FavoriteRecord) -> int:
        new_id = self.store.new_item_id()
        self.store.insert(self.dest_table, replace(record, id=new_id))
        self.written_ids.append(new_id)
        return new_id
