"""
Tests for grid descriptors and migration settings.
"""

import pytest

from grid_migration.config import GridSpec, MigrationSettings, compare_grid_area, load_settings


class TestGridSpec:
    @pytest.mark.parametrize("columns, rows, hotseat", [(0, 4, 4), (4, 0, 4), (4, 4, -1)])
    def test_invalid_dimensions(self, columns, rows, hotseat):
        with pytest.raises(ValueError):
            GridSpec(columns, rows, hotseat)

    def test_zero_hotseat_allowed(self):
        assert GridSpec(4, 4, 0).hotseat_size == 0

    def test_compatibility(self):
        assert GridSpec(4, 5, 4).is_compatible(GridSpec(4, 5, 4))
        assert not GridSpec(4, 5, 4).is_compatible(GridSpec(5, 4, 4))
        assert not GridSpec(4, 5, 4).is_compatible(GridSpec(4, 5, 5))

    def test_area_ordering(self):
        assert compare_grid_area(GridSpec(5, 5, 5), GridSpec(4, 4, 4)) > 0
        assert compare_grid_area(GridSpec(2, 8, 4), GridSpec(4, 4, 5)) == 0

    def test_dict_round_trip(self):
        spec = GridSpec(6, 5, 5)
        assert GridSpec.from_dict(spec.to_dict()) == spec
        assert spec.label == "6x5/5"
        assert str(spec) == "6x5 (hotseat 5)"


class TestMigrationSettings:
    def test_defaults(self):
        s = MigrationSettings()
        assert not s.reserve_first_row
        assert s.preserve_pages
        assert s.default_widget_min_span == (2, 2)

    def test_from_dict_converts_span(self):
        s = MigrationSettings.from_dict({"default_widget_min_span": [3, 1]})
        assert s.default_widget_min_span == (3, 1)
        assert MigrationSettings.from_dict(s.to_dict()) == s

    @pytest.mark.parametrize("span", [(0, 0), (0, 2), (2, -1)])
    def test_widget_min_span_must_be_positive(self, span):
        with pytest.raises(ValueError, match="at least 1x1"):
            MigrationSettings(default_widget_min_span=span)
        with pytest.raises(ValueError):
            MigrationSettings.from_dict({"default_widget_min_span": list(span)})

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown migration settings"):
            MigrationSettings.from_dict({"reserve_row": True})

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("reserve_first_row: true\ndrop_source_table: true\n")
        s = load_settings(path)
        assert s.reserve_first_row and s.drop_source_table

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == MigrationSettings()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_settings(path)
