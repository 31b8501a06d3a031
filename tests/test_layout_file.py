"""
Tests for YAML layout documents and the grid-migrate command line.
"""

import json

import pytest
import yaml
from pydantic import ValidationError

from grid_migration.runner.cli import main
from grid_migration.storage.layout_file import dump_store, load_layout_document

from conftest import app_intent


def layout(**overrides):
    doc = {
        "src_grid": {"columns": 5, "rows": 5, "hotseat_size": 5},
        "dest_grid": {"columns": 4, "rows": 4, "hotseat_size": 4},
        "installed_packages": ["com.android.calculator2", "com.example.clock"],
        "widget_min_spans": {"com.example.clock/.ClockProvider": [2, 1]},
        "tables": {
            "favorites_tmp": [
                {"id": 1, "item_type": 0, "container": -100, "screen": 0,
                 "cell_x": 4, "cell_y": 4, "intent": app_intent("com.android.calculator2")},
                {"id": 2, "item_type": 4, "container": -100, "screen": 0,
                 "cell_x": 0, "cell_y": 0, "span_x": 5, "span_y": 2, "appwidget_id": 8,
                 "appwidget_provider": "com.example.clock/.ClockProvider"},
            ],
            "favorites": [],
        },
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def layout_path(tmp_path):
    path = tmp_path / "layout.yaml"
    path.write_text(yaml.safe_dump(layout()))
    return path


# ---------------------------------------------------------------------------
# 1. Documents
# ---------------------------------------------------------------------------

class TestLayoutDocument:
    def test_load_and_build_store(self, layout_path):
        doc = load_layout_document(layout_path)
        store = doc.build_store()
        assert store.table_names() == ["favorites", "favorites_tmp"]
        assert store.table("favorites_tmp").get(2).span_x == 5
        assert doc.src_grid.to_spec().label == "5x5/5"
        assert doc.package_oracle().is_valid_package("com.example.clock")
        assert doc.widget_size_oracle().min_spans(8, "com.example.clock/.ClockProvider") == (2, 1)

    def test_settings_section(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text(yaml.safe_dump(layout(settings={"reserve_first_row": True})))
        assert load_layout_document(path).migration_settings().reserve_first_row

    @pytest.mark.parametrize("overrides", [
        {"src_grid": {"columns": 0, "rows": 5, "hotseat_size": 5}},
        {"dest_grid": {"columns": 4, "rows": 4}},
        {"colour": "blue"},
        {"tables": {"favorites": [{"id": 1, "item_type": 0}]}},
        {"tables": {"favorites": [{"id": 1, "item_type": 0, "container": -100},
                                  {"id": 1, "item_type": 0, "container": -100}]}},
    ])
    def test_invalid_documents_rejected(self, tmp_path, overrides):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(layout(**overrides)))
        with pytest.raises(ValidationError):
            load_layout_document(path)

    def test_dump_store_round_trip(self, layout_path, tmp_path):
        store = load_layout_document(layout_path).build_store()
        out = tmp_path / "out" / "store.yaml"
        dump_store(store, out)

        data = yaml.safe_load(out.read_text())
        assert set(data["tables"]) == {"favorites", "favorites_tmp"}
        assert data["tables"]["favorites_tmp"][0]["intent"] == app_intent("com.android.calculator2")
        assert "title" not in data["tables"]["favorites_tmp"][0]


# ---------------------------------------------------------------------------
# 2. Command line
# ---------------------------------------------------------------------------

class TestCli:
    def test_migrates_and_writes_outputs(self, layout_path, tmp_path, capsys):
        out = tmp_path / "result.yaml"
        report = tmp_path / "report.json"
        screens = tmp_path / "screens.csv"
        code = main([str(layout_path), "--out", str(out), "--report", str(report),
                     "--screens-csv", str(screens)])

        assert code == 0
        favorites = yaml.safe_load(out.read_text())["tables"]["favorites"]
        assert sorted((r["cell_x"], r["cell_y"], r["span_x"], r["span_y"]) for r in favorites) == [
            (0, 0, 2, 1), (2, 0, 1, 1)]
        assert json.loads(report.read_text())["changed"] is True
        assert screens.read_text().startswith("screen_id,")
        assert "Migration: 5x5/5 -> 4x4/4" in capsys.readouterr().out

    def test_compatible_grids_exit_zero(self, tmp_path, capsys):
        path = tmp_path / "same.yaml"
        path.write_text(yaml.safe_dump(layout(dest_grid={"columns": 5, "rows": 5,
                                                         "hotseat_size": 5})))
        assert main([str(path)]) == 0
        assert "Changed: no" in capsys.readouterr().out

    def test_settings_file_overrides_document(self, layout_path, tmp_path):
        settings = tmp_path / "settings.yaml"
        settings.write_text("reserve_first_row: true\n")
        out = tmp_path / "result.yaml"
        assert main([str(layout_path), "--settings", str(settings), "--out", str(out)]) == 0
        favorites = yaml.safe_load(out.read_text())["tables"]["favorites"]
        assert min(r["cell_y"] for r in favorites) == 1

    def test_missing_layout_fails(self, tmp_path):
        assert main([str(tmp_path / "missing.yaml")]) == 1

    def test_invalid_layout_fails(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("src_grid: [1, 2\n")
        assert main([str(path)]) == 1

    def test_migration_failure_exits_one(self, layout_path):
        assert main([str(layout_path), "--dest-table", "nope"]) == 1
