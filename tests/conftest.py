"""
Shared fixtures for the grid_migration test suite.

Item factories build Items with valid launch descriptors; the in-memory
reader/writer doubles let the solvers and the coordinator run without a store.
"""

import itertools
import os
import sys

import pytest

# Make the src/ layout importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from grid_migration.core.models import (
    CONTAINER_DESKTOP,
    Item,
    ItemKind,
)
from grid_migration.storage.interfaces import ItemReader, ItemWriter, StaticPackageOracle
from grid_migration.storage.memory_store import FavoriteRecord, LayoutStore


INSTALLED = ["com.android.calculator2", "com.android.camera", "com.example.mail",
             "com.example.clock", "com.example.notes", "com.example.maps"]


def app_intent(package: str, activity: str = ".Main") -> str:
    return ("#Intent;action=android.intent.action.MAIN;"
            "category=android.intent.category.LAUNCHER;launchFlags=0x10200000;"
            f"component={package}/{activity};end")


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class RecordingWriter(ItemWriter):
    """Writer that records every placement instead of persisting it."""

    def __init__(self):
        self.placements = []
        self.children = []
        self._ids = itertools.count(1000)

    def persist_placement(self, item):
        self.placements.append(
            (item.id, item.screen_id, item.cell_x, item.cell_y, item.span_x, item.span_y))
        return next(self._ids)

    def persist_child(self, child_id, parent_id):
        self.children.append((child_id, parent_id))
        return next(self._ids)


class ListReader(ItemReader):
    """Reader over ready-made item lists."""

    def __init__(self, hotseat=(), workspace=()):
        self.hotseat = list(hotseat)
        self.workspace = list(workspace)

    def load_hotseat_items(self):
        return list(self.hotseat)

    def load_workspace_items(self):
        return list(self.workspace)

    @property
    def last_screen_id(self):
        return max((item.screen_id for item in self.workspace), default=-1)

    def items_on_screen(self, screen_id):
        return [item for item in self.workspace if item.screen_id == screen_id]


# ---------------------------------------------------------------------------
# Item factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_app():
    """Factory for application items launching ``<package>/.Main``."""
    ids = itertools.count(1)

    def _make(package="com.android.calculator2", screen=0, x=0, y=0, **kwargs):
        kwargs.setdefault("id", next(ids))
        return Item(kind=ItemKind.APPLICATION, screen_id=screen, cell_x=x, cell_y=y,
                    intent=app_intent(package), **kwargs)

    return _make


@pytest.fixture
def make_widget():
    """Factory for widget items with an explicit span and min span."""
    ids = itertools.count(500)

    def _make(span=(2, 2), min_span=None, screen=0, x=0, y=0,
              provider="com.example.clock/.ClockProvider", **kwargs):
        min_x, min_y = min_span or span
        kwargs.setdefault("id", next(ids))
        return Item(kind=ItemKind.WIDGET, screen_id=screen, cell_x=x, cell_y=y,
                    span_x=span[0], span_y=span[1], min_span_x=min_x, min_span_y=min_y,
                    provider=provider, **kwargs)

    return _make


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def list_reader():
    return ListReader


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def packages():
    return StaticPackageOracle(INSTALLED)


@pytest.fixture
def store():
    """Store with an empty source (favorites_tmp) and destination (favorites) table."""
    s = LayoutStore()
    s.create_table("favorites_tmp")
    s.create_table("favorites")
    return s


@pytest.fixture
def add_record(store):
    """Insert a row into one of the store's tables; returns the record."""
    ids = itertools.count(1)

    def _add(table="favorites_tmp", item_type=ItemKind.APPLICATION, container=CONTAINER_DESKTOP,
             package="com.android.calculator2", **kwargs):
        kwargs.setdefault("id", next(ids))
        if "intent" not in kwargs and item_type != ItemKind.WIDGET and item_type != ItemKind.FOLDER:
            kwargs["intent"] = app_intent(package)
        record = FavoriteRecord(item_type=int(item_type), container=container, **kwargs)
        store.insert(table, record)
        return record

    return _add
