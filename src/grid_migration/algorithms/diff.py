"""Multiset difference between two item lists, by identity key."""

from __future__ import annotations

from collections import Counter

from grid_migration.core.models import Item


def calc_diff(source_items: list[Item], dest_items: list[Item]) -> list[Item]:
    """
    Return the items of *source_items* that have no counterpart in *dest_items*.

    Matching is by ``migration_id`` with multiplicity: three calculators in the
    source and one in the destination leave two calculators in the result.
    Source order is preserved.

    Args:
        source_items: Items of the layout being migrated from.
        dest_items:   Items already present in the destination layout.

    Returns:
        New list of surplus items (the same Item objects, not copies).
    """
    remaining = Counter(item.migration_id for item in dest_items)
    surplus: list[Item] = []
    for item in source_items:
        key = item.migration_id
        if remaining[key] > 0:
            remaining[key] -= 1
        else:
            surplus.append(item)
    return surplus
