#!/usr/bin/env python3
"""
Script to export season financial reports as CSV files.

For each requested season this writes the season totals, per-owner profits,
the ticket-holder financial summary and per-game financials.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from seat_ledger.analysis.export import ReportExporter
from seat_ledger.config import get_database_path
from seat_ledger.exceptions import SeatLedgerError
from seat_ledger.storage.database import DatabaseManager
from seat_ledger.utils.logging_config import setup_logging


def main():
    """Main entry point for the report export script."""
    parser = argparse.ArgumentParser(
        description="Export season financial reports from the seat ledger as CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export one season
  python export_season_reports.py --season-id 3

  # Export every season into a custom directory
  python export_season_reports.py --all --output-dir reports/

  # Dump a raw table as well
  python export_season_reports.py --season-id 3 --table payments
        """,
    )

    season_group = parser.add_mutually_exclusive_group(required=True)
    season_group.add_argument("--season-id", type=int, help="Season to export")
    season_group.add_argument("--all", action="store_true", help="Export every season")

    parser.add_argument(
        "--db-path",
        type=str,
        default=None,
        help="Path to SQLite database file (default: SEAT_LEDGER_DB or seat_ledger.db)",
    )
    parser.add_argument(
        "--output-dir", type=str, default="exports", help="Directory for CSV files (default: exports)"
    )
    parser.add_argument(
        "--table", type=str, nargs="*", default=[], help="Raw tables to export alongside the reports"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.verbose else "INFO")
    logger = logging.getLogger(__name__)

    db_path = args.db_path or get_database_path()
    db_manager = DatabaseManager(db_path)
    exporter = ReportExporter(db_manager)
    logger.info(f"Connected to database: {db_path}")

    if args.all:
        season_ids = [season.id for season in db_manager.teams.get_seasons()]
    else:
        season_ids = [args.season_id]

    try:
        written = []
        for season_id in season_ids:
            written.extend(exporter.export_season(season_id, args.output_dir))

        for table in args.table:
            path = Path(args.output_dir) / f"{table}.csv"
            exporter.table_to_df(table).to_csv(path, index=False)
            written.append(path)

        logger.info(f"Exported {len(written)} files to {args.output_dir}")
        return 0
    except (SeatLedgerError, ValueError) as e:
        logger.error(f"Export failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
