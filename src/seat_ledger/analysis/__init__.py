"""Financial aggregation and reporting."""

from .financials import (
    CashPosition,
    FinancialAggregator,
    GameFinancials,
    HolderSummary,
    OwnerProfit,
    SeasonTotals,
    financial_summary,
    game_financials,
    net_cash_positions,
    owner_profits,
    season_totals,
)
from .reports import OwnerBalance, ReportService

__all__ = [
    "CashPosition",
    "FinancialAggregator",
    "GameFinancials",
    "HolderSummary",
    "OwnerBalance",
    "OwnerProfit",
    "ReportService",
    "SeasonTotals",
    "financial_summary",
    "game_financials",
    "net_cash_positions",
    "owner_profits",
    "season_totals",
]
