"""Convert ledger tables and season reports to pandas DataFrames."""

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any

import pandas as pd

from ..storage.database import TABLES, DatabaseManager
from ..utils.logging_config import get_logger
from .financials import FinancialAggregator

logger = get_logger(__name__)


def _records_to_df(records: list[dict[str, Any]], columns: list[str]) -> pd.DataFrame:
    """Build a DataFrame, keeping the columns even when there are no rows.

    Monetary strings are kept as strings so no value is rounded through float.
    """
    return pd.DataFrame.from_records(records, columns=columns)


class ReportExporter:
    """Exports raw tables and season reports as DataFrames or CSV files."""

    def __init__(self, db_manager: DatabaseManager):
        """Initialize exporter with database manager."""
        self.db_manager = db_manager
        self.aggregator = FinancialAggregator(db_manager)

    def table_to_df(self, table_name: str) -> pd.DataFrame:
        """Convert one database table to a DataFrame.

        Raises:
            ValueError: If the table is not part of the ledger schema
        """
        if table_name not in TABLES:
            raise ValueError(f"Unknown table '{table_name}'")

        with closing(sqlite3.connect(self.db_manager.db_path)) as conn:
            df = pd.read_sql_query(f"SELECT * FROM {table_name}", conn)
        return df

    def season_totals_df(self, season_id: int) -> pd.DataFrame:
        totals = self.aggregator.get_season_totals(season_id).to_dict()
        return _records_to_df([totals], list(totals.keys()))

    def owner_profits_df(self, season_id: int) -> pd.DataFrame:
        rows = [owner.to_dict() for owner in self.aggregator.get_owner_profits(season_id)]
        return _records_to_df(rows, ["holderId", "name", "cost", "revenue", "profit"])

    def financial_summary_df(self, season_id: int) -> pd.DataFrame:
        rows = [s.to_dict() for s in self.aggregator.get_financial_summary(season_id)]
        return _records_to_df(rows, ["ticketHolderId", "name", "seatsOwned", "balance"])

    def game_financials_df(self, season_id: int) -> pd.DataFrame:
        """One row per game of the season with its financials."""
        rows = []
        for game in self.db_manager.games.get_games(season_id):
            row = self.aggregator.get_game_financials(game.id).to_dict()
            row["date"] = game.date.isoformat()
            row["opponent"] = game.opponent
            rows.append(row)
        return _records_to_df(
            rows,
            ["gameId", "date", "opponent", "totalCost", "totalSold", "profit", "seatsWithPricing"],
        )

    def export_season(self, season_id: int, output_dir: str | Path) -> list[Path]:
        """Write the season's report DataFrames as CSV files.

        Returns:
            Paths of the written files
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        frames = {
            "season_totals": self.season_totals_df(season_id),
            "owner_profits": self.owner_profits_df(season_id),
            "financial_summary": self.financial_summary_df(season_id),
            "game_financials": self.game_financials_df(season_id),
        }

        written = []
        for name, df in frames.items():
            path = output_dir / f"season_{season_id}_{name}.csv"
            df.to_csv(path, index=False)
            written.append(path)
            logger.info(f"Wrote {len(df)} rows to {path}")
        return written
