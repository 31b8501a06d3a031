"""
Item validation: structural checks run while items are loaded.

All checks are plain functions: they take a raw value plus the oracles they
need and either return the parsed value or raise an ``InvalidItemError``.
The reader catches these per record, schedules the record for deletion and
carries on; none of them ever aborts a migration.

Checks:
  1. Descriptor — the launch descriptor parses
  2. Package    — the launched package is installed (or installing)
  3. Folder     — a folder keeps at least one valid child
  4. Kind       — the item kind is one of the known kinds
"""

from __future__ import annotations

from typing import Callable

from grid_migration.core.descriptor import (
    ComponentName,
    DescriptorSyntaxError,
    LaunchDescriptor,
)
from grid_migration.core.models import ItemKind


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class InvalidItemError(Exception):
    """Base class for records that cannot be migrated and must be removed."""


class UnparseableDescriptorError(InvalidItemError):
    """The launch descriptor (or widget provider) does not parse."""


class UnresolvablePackageError(InvalidItemError):
    """The package the item refers to is not installed or installing."""


class EmptyFolderError(InvalidItemError):
    """A folder has no valid children left."""


class UnknownItemKindError(InvalidItemError):
    """The record's item type is not one of the recognised kinds."""


# ─────────────────────────────────────────────────────────────────────────────
# Checks
# ─────────────────────────────────────────────────────────────────────────────

PackageCheck = Callable[[str], bool]


def verify_package(package: str, is_valid_package: PackageCheck) -> None:
    """Raise UnresolvablePackageError unless *package* is available."""
    if not is_valid_package(package):
        raise UnresolvablePackageError(f"Package not available: {package}")


def verify_intent(intent: str | None, is_valid_package: PackageCheck) -> LaunchDescriptor:
    """
    Parse *intent* and verify the package it launches.

    The component's package is checked when there is one; otherwise the
    explicit package, if any. A descriptor naming neither is accepted.
    """
    try:
        descriptor = LaunchDescriptor.parse(intent)
    except DescriptorSyntaxError as e:
        raise UnparseableDescriptorError(str(e)) from e
    if descriptor.target_package is not None:
        verify_package(descriptor.target_package, is_valid_package)
    return descriptor


def verify_provider(provider: str | None, is_valid_package: PackageCheck) -> ComponentName:
    """Parse a widget provider (``pkg/cls``) and verify its package."""
    component = ComponentName.unflatten(provider or "")
    if component is None:
        raise UnparseableDescriptorError(f"Bad widget provider: {provider!r}")
    verify_package(component.package, is_valid_package)
    return component


def verify_kind(item_type: int, allowed: tuple[ItemKind, ...] | None = None) -> ItemKind:
    """Map a stored item type to an ItemKind, optionally restricted to *allowed*."""
    try:
        kind = ItemKind(item_type)
    except ValueError as e:
        raise UnknownItemKindError(f"Invalid item type: {item_type}") from e
    if allowed is not None and kind not in allowed:
        raise UnknownItemKindError(f"Item type {kind.name} not allowed here")
    return kind


def verify_folder_size(total: int) -> None:
    if total == 0:
        raise EmptyFolderError("Folder is empty")
