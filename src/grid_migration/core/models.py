"""Core data model for grid migration: items, kinds, identity and reading order."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from grid_migration.core.descriptor import (
    DescriptorSyntaxError,
    LaunchDescriptor,
    clean_descriptor,
)


# Container ids used by favorites records. Folder children use the folder's id.
CONTAINER_DESKTOP = -100
CONTAINER_HOTSEAT = -101

# Screen id of an item that has not been placed yet.
NO_SCREEN = -1


class ItemKind(IntEnum):
    """Item kinds, valued by their storage code."""

    APPLICATION = 0
    SHORTCUT = 1
    FOLDER = 2
    WIDGET = 4
    DEEP_SHORTCUT = 6

    @property
    def has_descriptor(self) -> bool:
        return self in (ItemKind.APPLICATION, ItemKind.SHORTCUT, ItemKind.DEEP_SHORTCUT)


@dataclass(eq=False)
class Item:
    """
    One item being migrated: an app, shortcut, widget or folder.

    Position and span fields are mutated in place by the placement solvers;
    everything else describes what the item *is* and never changes.

    Attributes:
        id:            Storage id in the table the item was read from.
        kind:          Item kind.
        screen_id:     Screen (workspace) or slot index (hotseat).
        cell_x/cell_y: Top-left cell of the item's rectangle.
        span_x/span_y: Size of the item's rectangle in cells.
        min_span_x/y:  Smallest rectangle the item can be shrunk to.
        intent:        Launch descriptor (apps and shortcuts).
        provider:      Flattened provider component (widgets).
        folder_items:  Child descriptor -> storage ids of children (folders).
    """

    id: int
    kind: ItemKind
    screen_id: int = NO_SCREEN
    cell_x: int = -1
    cell_y: int = -1
    span_x: int = 1
    span_y: int = 1
    min_span_x: int = 1
    min_span_y: int = 1
    intent: str | None = None
    provider: str | None = None
    folder_items: dict[str, list[int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.span_x < 1 or self.span_y < 1:
            raise ValueError(f"Item {self.id}: span must be >= 1, got "
                             f"{self.span_x}x{self.span_y}")
        if not (1 <= self.min_span_x <= self.span_x and 1 <= self.min_span_y <= self.span_y):
            raise ValueError(f"Item {self.id}: min span {self.min_span_x}x{self.min_span_y} "
                             f"outside 1..{self.span_x}x{self.span_y}")

    @property
    def reading_order(self) -> tuple[int, int, int]:
        """Sort key: screen, then row, then column."""
        return (self.screen_id, self.cell_y, self.cell_x)

    @property
    def migration_id(self) -> str:
        """Structural identity used to match this item across two layouts."""
        return migration_id(self)

    def child_count(self) -> int:
        return sum(len(ids) for ids in self.folder_items.values())

    def __repr__(self) -> str:
        return (
            f"Item(id={self.id}, {self.kind.name.lower()}, "
            f"screen={self.screen_id}, cell=({self.cell_x},{self.cell_y}), "
            f"span={self.span_x}x{self.span_y})"
        )


def sort_reading_order(items: list[Item]) -> None:
    """Sort *items* in place by reading order."""
    items.sort(key=lambda item: item.reading_order)


# ─────────────────────────────────────────────────────────────────────────────
# Identity
# ─────────────────────────────────────────────────────────────────────────────

def folder_migration_id(folder_items: dict[str, list[int]]) -> str:
    """
    Identity of a folder from its children.

    Two folders holding the same multiset of children get the same id, no
    matter the children's storage ids or the order they were read in.
    """
    return ",".join(sorted(
        f"{len(ids)}{clean_descriptor(descriptor)}"
        for descriptor, ids in folder_items.items()
    ))


def migration_id(item: Item) -> str:
    """
    Identity key of *item*.

    Widgets are identified by their provider and folders by their children.
    Apps and shortcuts use the component their cleaned descriptor launches,
    or the cleaned descriptor itself when it names no component.
    """
    if item.kind is ItemKind.FOLDER:
        return folder_migration_id(item.folder_items)
    if item.kind is ItemKind.WIDGET:
        return item.provider or ""
    cleaned = clean_descriptor(item.intent or "")
    try:
        component = LaunchDescriptor.parse(cleaned).component
    except DescriptorSyntaxError:
        return cleaned
    return component.flatten() if component is not None else cleaned
