"""Seat Ledger - Season-ticket ownership and seat-level financial reconciliation."""

__version__ = "0.1.0"
__author__ = "Seat Ledger Team"
__description__ = "Track shared season-ticket seats, game pricing and owner balances"

from .analysis.financials import FinancialAggregator
from .storage.database import DatabaseManager

__all__ = ["DatabaseManager", "FinancialAggregator"]
