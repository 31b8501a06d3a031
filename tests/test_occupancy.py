"""
Tests for the screen and hotseat occupancy trackers.
"""

import pytest

from grid_migration.algorithms.occupancy import GridOccupancy, HotseatOccupancy


@pytest.fixture
def grid():
    return GridOccupancy(4, 5)


class TestGridOccupancy:
    def test_empty_grid_is_vacant(self, grid):
        assert grid.is_region_vacant(0, 0, 4, 5)
        assert grid.occupied_count() == 0

    @pytest.mark.parametrize("x, y, w, h", [
        (-1, 0, 1, 1),
        (0, -1, 1, 1),
        (3, 0, 2, 1),
        (0, 4, 1, 2),
        (0, 0, 5, 5),
    ])
    def test_out_of_bounds_not_vacant(self, grid, x, y, w, h):
        assert not grid.is_region_vacant(x, y, w, h)

    def test_marked_region_blocks_overlaps(self, grid):
        grid.mark_region(1, 1, 2, 2, True)
        assert grid.occupied_count() == 4
        assert not grid.is_region_vacant(0, 0, 2, 2)
        assert not grid.is_region_vacant(2, 2, 1, 1)
        assert grid.is_region_vacant(3, 0, 1, 5)
        assert grid.is_region_vacant(0, 3, 4, 2)

    def test_indexed_by_column_then_row(self, grid):
        grid.mark_region(3, 0, 1, 1, True)
        assert grid.cells[3, 0]
        assert not grid.cells[0, 3]

    def test_mark_is_clipped(self, grid):
        grid.mark_region(3, 4, 3, 3, True)
        assert grid.occupied_count() == 1
        grid.mark_region(-2, -2, 1, 1, True)
        assert grid.occupied_count() == 1

    def test_mark_item_and_release(self, grid, make_widget):
        w = make_widget(span=(2, 3), x=1, y=2)
        grid.mark_item(w, True)
        assert grid.occupied_count() == 6
        grid.mark_item(w, False)
        assert grid.occupied_count() == 0


class TestHotseatOccupancy:
    def test_slots(self):
        strip = HotseatOccupancy(3)
        assert len(strip) == 3
        strip.mark_slot(1, True)
        assert [strip.is_slot_free(i) for i in range(3)] == [True, False, True]

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_out_of_range_slot_not_free(self, index):
        assert not HotseatOccupancy(3).is_slot_free(index)

    @pytest.mark.parametrize("index", [-1, 3])
    def test_mark_out_of_range_slot_rejected(self, index):
        strip = HotseatOccupancy(3)
        with pytest.raises(ValueError, match="out of range"):
            strip.mark_slot(index, True)
        assert not strip.cells.any()

    def test_repr(self):
        strip = HotseatOccupancy(4)
        strip.mark_slot(0, True)
        strip.mark_slot(2, True)
        assert repr(strip) == "HotseatOccupancy(x.x.)"
