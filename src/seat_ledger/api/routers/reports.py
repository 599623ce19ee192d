"""Financial report endpoints."""

import logging

from fastapi import APIRouter, Depends

from ...analysis.financials import FinancialAggregator
from ...analysis.reports import ReportService, summary_with_headlines
from ...exceptions import SeatLedgerError
from ..dependencies import get_aggregator, get_report_service
from ..errors import http_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/games/{game_id}/financials")
def get_game_financials(game_id: int, aggregator: FinancialAggregator = Depends(get_aggregator)):
    """Cost, sales, profit and priced-seat count of one game."""
    try:
        return aggregator.get_game_financials(game_id).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)


@router.get("/seasons/{season_id}/totals")
def get_season_totals(season_id: int, aggregator: FinancialAggregator = Depends(get_aggregator)):
    """Season-wide cost, revenue and profit."""
    try:
        return aggregator.get_season_totals(season_id).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)


@router.get("/seasons/{season_id}/owner-profits")
def get_owner_profits(season_id: int, aggregator: FinancialAggregator = Depends(get_aggregator)):
    """Per-owner profit for a season, most profitable first."""
    try:
        return [owner.to_dict() for owner in aggregator.get_owner_profits(season_id)]
    except SeatLedgerError as e:
        raise http_error(e)


@router.get("/seasons/{season_id}/financial-summary")
def get_financial_summary(
    season_id: int, aggregator: FinancialAggregator = Depends(get_aggregator)
):
    """Seats owned and license balance per holder with seats in the season."""
    try:
        return summary_with_headlines(aggregator.get_financial_summary(season_id))
    except SeatLedgerError as e:
        raise http_error(e)


@router.get("/seasons/{season_id}/cash-positions")
def get_season_cash_positions(
    season_id: int, aggregator: FinancialAggregator = Depends(get_aggregator)
):
    """Net cash position per holder within one season."""
    try:
        return [p.to_dict() for p in aggregator.get_cash_positions(season_id)]
    except SeatLedgerError as e:
        raise http_error(e)


@router.get("/cash-positions")
def get_cash_positions(aggregator: FinancialAggregator = Depends(get_aggregator)):
    """Net cash position per holder across all seasons."""
    return [p.to_dict() for p in aggregator.get_cash_positions()]


@router.get("/seasons/{season_id}/dashboard")
def get_dashboard(season_id: int, reports: ReportService = Depends(get_report_service)):
    """Headline numbers for a season's dashboard."""
    try:
        return reports.dashboard_stats(season_id)
    except SeatLedgerError as e:
        raise http_error(e)


@router.get("/season-summary")
def get_season_summary(
    team_id: int | None = None, reports: ReportService = Depends(get_report_service)
):
    """Totals and owner details for every season."""
    return [report.to_dict() for report in reports.season_summary_report(team_id)]


@router.get("/license-investment")
def get_license_investment(
    team_id: int | None = None, reports: ReportService = Depends(get_report_service)
):
    """License capital per holder across all seasons."""
    return [row.to_dict() for row in reports.license_investment_summary(team_id)]


@router.get("/owner-balances")
def get_owner_balances(reports: ReportService = Depends(get_report_service)):
    """All-time balance per holder: trading result, licenses and owner payments."""
    return [balance.to_dict() for balance in reports.owner_balances()]
