"""
Collaborator contracts between the migration core and the outside world.

The core never touches storage or the platform directly. It reads items from
an ``ItemReader``, hands placements to an ``ItemWriter`` and asks two oracles
about packages and widget sizes. ``storage.memory_store`` provides reference
implementations of all of them.

Implementing a store:
    1. Subclass ``ItemReader`` and ``ItemWriter``
    2. Pass the readers and writer to ``GridMigrationTask``
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from grid_migration.core.models import Item, ItemKind


class ItemReader(ABC):
    """
    Loads the items of one layout.

    Implementations validate every record while loading and delete the ones
    that fail validation from their own table; invalid records never appear
    in the returned lists.
    """

    @abstractmethod
    def load_hotseat_items(self) -> list[Item]:
        """Valid hotseat items, in storage order."""
        ...

    @abstractmethod
    def load_workspace_items(self) -> list[Item]:
        """Valid workspace items, in storage order."""
        ...

    @property
    @abstractmethod
    def last_screen_id(self) -> int:
        """Highest screen id seen by ``load_workspace_items``, -1 if none."""
        ...

    @abstractmethod
    def items_on_screen(self, screen_id: int) -> list[Item]:
        """Workspace items already on *screen_id* (after loading)."""
        ...


class ItemWriter(ABC):
    """
    Persists placed items into the destination layout.

    Writing copies the item's source record with only position and span
    overwritten, under a fresh storage id.
    """

    @abstractmethod
    def persist_placement(self, item: Item) -> int:
        """Copy *item* with its new position and span; return the new id."""
        ...

    @abstractmethod
    def persist_child(self, child_id: int, parent_id: int) -> int:
        """Copy folder child *child_id* into the folder *parent_id*; return the new id."""
        ...

    def insert_item(self, item: Item) -> int:
        """Persist *item* and, for folders, every child it holds."""
        new_id = self.persist_placement(item)
        if item.kind is ItemKind.FOLDER:
            for child_ids in item.folder_items.values():
                for child_id in child_ids:
                    self.persist_child(child_id, new_id)
        return new_id


class PackageOracle(ABC):
    """Answers whether a package is installed or being installed."""

    @abstractmethod
    def is_valid_package(self, package: str) -> bool:
        ...


class WidgetSizeOracle(ABC):
    """Looks up the minimum span a widget can be resized to."""

    @abstractmethod
    def min_spans(self, widget_id: int, provider: str) -> tuple[int, int] | None:
        """Minimum ``(span_x, span_y)``, or None when unknown."""
        ...


class StaticPackageOracle(PackageOracle):
    """Package oracle backed by a fixed set of package names."""

    def __init__(self, packages: set[str] | frozenset[str] | list[str]) -> None:
        self.packages = frozenset(packages)

    def is_valid_package(self, package: str) -> bool:
        return package in self.packages

    def __repr__(self) -> str:
        return f"StaticPackageOracle({len(self.packages)} packages)"


class StaticWidgetSizeOracle(WidgetSizeOracle):
    """Widget size oracle backed by a provider -> min span mapping."""

    def __init__(self, min_spans: dict[str, tuple[int, int]] | None = None) -> None:
        self._min_spans = dict(min_spans or {})

    def min_spans(self, widget_id: int, provider: str) -> tuple[int, int] | None:
        return self._min_spans.get(provider)
