"""Command-line front end: migrate the store described by a layout document."""

from __future__ import annotations

import argparse
import logging
import sys

import yaml

from grid_migration.config import load_settings
from grid_migration.monitoring.metrics import export_to_csv, export_to_json, print_summary
from grid_migration.runner.migrate import FAVORITES_TABLE, TMP_TABLE, run_migration
from grid_migration.storage.layout_file import dump_store, load_layout_document

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-migrate",
        description="Migrate home-screen items to a different grid size",
    )
    parser.add_argument("layout", help="Layout document (YAML)")
    parser.add_argument("--out", help="Write the migrated store to this YAML file")
    parser.add_argument("--settings",
                        help="Settings YAML (overrides the document's settings)")
    parser.add_argument("--report", help="Write the migration report as JSON")
    parser.add_argument("--screens-csv", help="Write per-screen metrics as CSV")
    parser.add_argument("--src-table", default=TMP_TABLE,
                        help=f"Table to migrate from (default: {TMP_TABLE})")
    parser.add_argument("--dest-table", default=FAVORITES_TABLE,
                        help=f"Table to migrate into (default: {FAVORITES_TABLE})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every item decision")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        document = load_layout_document(args.layout)
        settings = (load_settings(args.settings) if args.settings
                    else document.migration_settings())
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error("Cannot load %s: %s", args.settings or args.layout, e)
        return 1

    store = document.build_store()
    try:
        report = run_migration(
            store,
            document.src_grid.to_spec(),
            document.dest_grid.to_spec(),
            document.package_oracle(),
            widget_sizes=document.widget_size_oracle(),
            settings=settings,
            src_table=args.src_table,
            dest_table=args.dest_table,
        )
    except Exception:
        # run_migration has already logged the failure and rolled back.
        return 1

    if args.out:
        dump_store(store, args.out)
    if args.report:
        export_to_json(report, args.report)
    if args.screens_csv:
        export_to_csv(report, args.screens_csv)

    print(print_summary(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
