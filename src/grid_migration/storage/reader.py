"""
Table reader: loads and validates the items of one favorites table.

Every record goes through ``core.validation``. A record that fails is
collected and deleted from the table once loading finishes; the rest come
back as Item objects. Folder children are validated one by one and a folder
left without children is removed as well.
"""

from __future__ import annotations

import logging

from grid_migration.core.models import (
    CONTAINER_DESKTOP,
    CONTAINER_HOTSEAT,
    Item,
    ItemKind,
)
from grid_migration.core.validation import (
    InvalidItemError,
    verify_folder_size,
    verify_intent,
    verify_kind,
    verify_provider,
)
from grid_migration.storage.interfaces import ItemReader, PackageOracle, WidgetSizeOracle
from grid_migration.storage.memory_store import FavoriteRecord, LayoutStore

log = logging.getLogger(__name__)

HOTSEAT_KINDS = (ItemKind.APPLICATION, ItemKind.SHORTCUT, ItemKind.DEEP_SHORTCUT,
                 ItemKind.FOLDER)


class TableReader(ItemReader):
    """
    ItemReader over one table of a LayoutStore.

    Args:
        store:                   Store holding the table.
        table_name:              Table to read (and delete invalid rows from).
        packages:                Package validity oracle.
        widget_sizes:            Widget minimum-size oracle; None means every
                                 lookup comes back unknown.
        default_widget_min_span: Minimum span assumed when the lookup fails.
    """

    def __init__(
        self,
        store: LayoutStore,
        table_name: str,
        packages: PackageOracle,
        widget_sizes: WidgetSizeOracle | None = None,
        default_widget_min_span: tuple[int, int] = (2, 2),
    ) -> None:
        self.store = store
        self.table_name = table_name
        self._packages = packages
        self._widget_sizes = widget_sizes
        self._default_min_span = default_widget_min_span
        self._last_screen_id = -1
        self._by_screen: dict[int, list[Item]] = {}
        self.removed_ids: list[int] = []

    @property
    def last_screen_id(self) -> int:
        return self._last_screen_id

    def items_on_screen(self, screen_id: int) -> list[Item]:
        return list(self._by_screen.get(screen_id, []))

    # ── Loading ──────────────────────────────────────────────────────────

    def load_hotseat_items(self) -> list[Item]:
        table = self.store.table(self.table_name)
        items: list[Item] = []
        to_remove: list[int] = []
        for record in table.query(lambda r: r.container == CONTAINER_HOTSEAT):
            try:
                kind = verify_kind(record.item_type, allowed=HOTSEAT_KINDS)
                item = Item(id=record.id, kind=kind, screen_id=record.screen)
                if kind is ItemKind.FOLDER:
                    self._load_folder_items(item)
                else:
                    item.intent = record.intent
                    verify_intent(record.intent, self._packages.is_valid_package)
            except InvalidItemError as e:
                log.debug("Removing hotseat item %d from %s: %s",
                          record.id, self.table_name, e)
                to_remove.append(record.id)
                continue
            items.append(item)
        self._remove(to_remove)
        return items

    def load_workspace_items(self) -> list[Item]:
        table = self.store.table(self.table_name)
        items: list[Item] = []
        to_remove: list[int] = []
        for record in table.query(lambda r: r.container == CONTAINER_DESKTOP):
            self._last_screen_id = max(self._last_screen_id, record.screen)
            try:
                item = self._workspace_item(record)
            except InvalidItemError as e:
                log.debug("Removing workspace item %d from %s: %s",
                          record.id, self.table_name, e)
                to_remove.append(record.id)
                continue
            items.append(item)
            self._by_screen.setdefault(item.screen_id, []).append(item)
        self._remove(to_remove)
        return items

    def _workspace_item(self, record: FavoriteRecord) -> Item:
        kind = verify_kind(record.item_type)
        span_x, span_y = max(record.span_x, 1), max(record.span_y, 1)
        item = Item(id=record.id, kind=kind, screen_id=record.screen,
                    cell_x=record.cell_x, cell_y=record.cell_y,
                    span_x=span_x, span_y=span_y)
        if kind.has_descriptor:
            item.intent = record.intent
            verify_intent(record.intent, self._packages.is_valid_package)
        elif kind is ItemKind.WIDGET:
            item.provider = record.appwidget_provider
            verify_provider(record.appwidget_provider, self._packages.is_valid_package)
            item.min_span_x, item.min_span_y = self._widget_min_spans(record, span_x, span_y)
        else:
            self._load_folder_items(item)
        return item

    def _widget_min_spans(self, record: FavoriteRecord,
                          span_x: int, span_y: int) -> tuple[int, int]:
        spans = None
        if self._widget_sizes is not None:
            spans = self._widget_sizes.min_spans(record.appwidget_id,
                                                 record.appwidget_provider or "")
        if spans is not None:
            min_x = spans[0] if spans[0] > 0 else span_x
            min_y = spans[1] if spans[1] > 0 else span_y
        else:
            # Assume the widget can be resized down to the default size.
            min_x, min_y = self._default_min_span
        return max(1, min(min_x, span_x)), max(1, min(min_y, span_y))

    def _load_folder_items(self, folder: Item) -> None:
        """Fill ``folder.folder_items`` with its valid children."""
        table = self.store.table(self.table_name)
        total = 0
        for child in table.query(lambda r: r.container == folder.id):
            try:
                verify_intent(child.intent, self._packages.is_valid_package)
            except InvalidItemError as e:
                log.debug("Removing folder child %d of %d: %s", child.id, folder.id, e)
                self._remove([child.id])
                continue
            total += 1
            folder.folder_items.setdefault(child.intent, []).append(child.id)
        verify_folder_size(total)

    def _remove(self, record_ids: list[int]) -> None:
        if not record_ids:
            return
        self.store.table(self.table_name).delete(record_ids)
        self.removed_ids.extend(record_ids)
