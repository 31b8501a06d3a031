"""
Tests for the migration report and its exporters.
"""

import csv
import json

from grid_migration.monitoring.metrics import (
    MigrationReport,
    ScreenMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)


def sample_report():
    report = MigrationReport(src_grid="5x5/5", dest_grid="4x4/4", changed=True,
                             hotseat_surplus=2, hotseat_placed=2, workspace_surplus=5)
    report.add_screen(ScreenMetrics(0, 3, 5, False))
    report.add_screen(ScreenMetrics(1, 2, 2, True))
    report.add_screen(ScreenMetrics(2, 0, 0, True, matching_screen_id_only=True))
    report.mark_complete()
    return report


class TestMigrationReport:
    def test_add_screen_totals(self):
        report = sample_report()
        assert report.workspace_placed == 5
        assert report.new_screens == 1
        assert report.items_placed == 7

    def test_mark_complete(self):
        report = sample_report()
        assert report.completed_at >= report.started_at
        assert report.runtime_ms >= 0

    def test_summary_dict_drops_screens(self):
        d = sample_report().to_summary_dict()
        assert "screen_metrics" not in d
        assert d["dest_grid"] == "4x4/4"


class TestExport:
    def test_json(self, tmp_path):
        path = tmp_path / "nested" / "report.json"
        export_to_json(sample_report(), path)
        data = json.loads(path.read_text())
        assert data["changed"] is True
        assert len(data["screen_metrics"]) == 3
        assert data["completed_at"] is not None

    def test_json_without_screens(self, tmp_path):
        path = tmp_path / "report.json"
        export_to_json(sample_report(), path, include_screens=False)
        assert "screen_metrics" not in json.loads(path.read_text())

    def test_csv(self, tmp_path):
        path = tmp_path / "screens.csv"
        export_to_csv(sample_report(), path)
        with path.open() as f:
            rows = list(csv.DictReader(f))
        assert [r["screen_id"] for r in rows] == ["0", "1", "2"]
        assert rows[2]["matching_screen_id_only"] == "True"

    def test_summary_text(self):
        text = print_summary(sample_report())
        assert "Migration: 5x5/5 -> 4x4/4" in text
        assert "Workspace: 5/5 placed" in text
        assert "New screens: 1" in text

    def test_summary_in_progress(self):
        assert "In Progress" in print_summary(MigrationReport())
