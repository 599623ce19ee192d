"""Shared FastAPI dependencies."""

from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from ..analysis.financials import FinancialAggregator
from ..analysis.reports import ReportService
from ..config import get_database_path
from ..storage.database import DatabaseManager


@lru_cache(maxsize=4)
def _db_manager_for(path: Path) -> DatabaseManager:
    return DatabaseManager(path)


def get_db_manager() -> DatabaseManager:
    """Database manager for the configured SEAT_LEDGER_DB path."""
    return _db_manager_for(get_database_path())


def get_aggregator(db: DatabaseManager = Depends(get_db_manager)) -> FinancialAggregator:
    return FinancialAggregator(db)


def get_report_service(db: DatabaseManager = Depends(get_db_manager)) -> ReportService:
    return ReportService(db)
