"""Report views built on top of the financial aggregations."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from ..config import local_today
from ..storage.database import DatabaseManager
from ..storage.models import PaymentType
from ..utils.data_helpers import ZERO, format_headline, money_to_str
from ..utils.logging_config import get_logger
from .financials import (
    FinancialAggregator,
    HolderSummary,
    OwnerProfit,
    SeasonTotals,
    owner_profits,
    season_totals,
)

logger = get_logger(__name__)


@dataclass
class SeasonReport:
    """Totals and per-owner results of one season."""

    season_id: int
    season_year: int
    team_name: str
    totals: SeasonTotals
    owners: list[OwnerProfit] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "seasonId": self.season_id,
            "seasonYear": self.season_year,
            "teamName": self.team_name,
            "totalSales": money_to_str(self.totals.total_revenue),
            "totalCosts": money_to_str(self.totals.total_cost),
            "totalProfit": money_to_str(self.totals.total_profit),
            "headlineProfit": format_headline(self.totals.total_profit),
            "ownerDetails": [owner.to_dict() for owner in self.owners],
        }


@dataclass
class LicenseInvestment:
    """Distinct seats a holder has ever owned and their total license cost."""

    ticket_holder_id: int
    name: str
    seats_owned: int = 0
    total_license_costs: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticketHolderId": self.ticket_holder_id,
            "name": self.name,
            "seatsOwned": self.seats_owned,
            "totalLicenseCosts": money_to_str(self.total_license_costs),
        }


@dataclass
class OwnerBalance:
    """All-time trading result, license capital and owner payments of one holder."""

    ticket_holder_id: int
    name: str
    seats_owned: int = 0
    seat_license_costs: Decimal = ZERO
    sales: Decimal = ZERO
    costs: Decimal = ZERO
    payments_made: Decimal = ZERO
    payments_received: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return (
            self.sales
            + self.payments_made
            - self.costs
            - self.seat_license_costs
            - self.payments_received
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticketHolderId": self.ticket_holder_id,
            "name": self.name,
            "seatsOwned": self.seats_owned,
            "seatLicenseCosts": money_to_str(self.seat_license_costs),
            "sales": money_to_str(self.sales),
            "costs": money_to_str(self.costs),
            "paymentsMade": money_to_str(self.payments_made),
            "paymentsReceived": money_to_str(self.payments_received),
            "balance": money_to_str(self.balance),
            "headlineBalance": format_headline(self.balance),
        }


def summary_with_headlines(summaries: list[HolderSummary]) -> list[dict[str, Any]]:
    """Financial summary rows with the signed headline balance added for display."""
    rows = []
    for summary in summaries:
        row = summary.to_dict()
        row["headlineBalance"] = format_headline(summary.balance)
        rows.append(row)
    return rows


class ReportService:
    """Builds the dashboard and cross-season reports."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self.aggregator = FinancialAggregator(db_manager)

    def season_summary_report(self, team_id: int | None = None) -> list[SeasonReport]:
        """Totals and owner results for every season, newest year first.

        Args:
            team_id: Only report seasons of this team

        Returns:
            One report per season, ordered by year descending then team name
        """
        teams = {team.id: team.name for team in self.db_manager.teams.get_teams()}
        seasons = self.db_manager.teams.get_seasons(team_id)
        seasons.sort(key=lambda s: (-s.year, teams.get(s.team_id, ""), s.id))

        reports = []
        for season in seasons:
            snapshot = self.aggregator.load_season(season.id)
            reports.append(
                SeasonReport(
                    season_id=season.id,
                    season_year=season.year,
                    team_name=teams.get(season.team_id, ""),
                    totals=season_totals(snapshot.games, snapshot.pricing, season_id=season.id),
                    owners=owner_profits(
                        snapshot.games, snapshot.pricing, snapshot.ownerships, snapshot.holders
                    ),
                )
            )

        logger.debug(f"Built season summary report for {len(reports)} seasons")
        return reports

    def license_investment_summary(self, team_id: int | None = None) -> list[LicenseInvestment]:
        """License capital per holder across all seasons.

        A seat owned in several seasons counts once.
        """
        seats = {seat.id: seat for seat in self.db_manager.teams.get_seats(team_id)}
        names = {h.id: h.name for h in self.db_manager.holders.get_ticket_holders()}

        seats_by_holder: dict[int, set[int]] = {}
        for ownership in self.db_manager.ownership.get_ownerships():
            if ownership.seat_id not in seats:
                continue
            seats_by_holder.setdefault(ownership.ticket_holder_id, set()).add(ownership.seat_id)

        results = []
        for holder_id, seat_ids in seats_by_holder.items():
            total = sum(
                (seats[seat_id].license_cost or ZERO for seat_id in seat_ids), ZERO
            )
            results.append(
                LicenseInvestment(
                    ticket_holder_id=holder_id,
                    name=names.get(holder_id, "Unknown"),
                    seats_owned=len(seat_ids),
                    total_license_costs=total,
                )
            )

        return sorted(results, key=lambda r: (r.name, r.ticket_holder_id))

    def owner_balances(self) -> list[OwnerBalance]:
        """Combined all-time balance per holder that has ever owned a seat.

        balance = sales + payments made - costs - seat licenses - payments received

        Sales and costs of a game go to the seat's owner in that game's season,
        so a seat that changed hands is never counted for both holders.

        Returns:
            Balances sorted by holder name, then id
        """
        db = self.db_manager
        profits = {
            owner.holder_id: owner
            for owner in owner_profits(
                db.games.get_games(),
                db.pricing.get_all_pricing(),
                db.ownership.get_ownerships(),
                db.holders.get_ticket_holders(),
            )
        }

        balances = {}
        for investment in self.license_investment_summary():
            owner = profits.get(investment.ticket_holder_id)
            balances[investment.ticket_holder_id] = OwnerBalance(
                ticket_holder_id=investment.ticket_holder_id,
                name=investment.name,
                seats_owned=investment.seats_owned,
                seat_license_costs=investment.total_license_costs,
                sales=owner.revenue if owner else ZERO,
                costs=owner.cost if owner else ZERO,
            )

        for payment in db.ledger.get_payments():
            balance = balances.get(payment.ticket_holder_id)
            if balance is None:
                continue
            if payment.type is PaymentType.FROM_OWNER:
                balance.payments_made += payment.amount
            elif payment.type is PaymentType.TO_OWNER:
                balance.payments_received += payment.amount

        return sorted(balances.values(), key=lambda b: (b.name, b.ticket_holder_id))

    def dashboard_stats(self, season_id: int, today: date | None = None) -> dict[str, Any]:
        """Headline numbers for a season's dashboard.

        Args:
            season_id: Season to summarize
            today: Day used to count played games; defaults to today in the
                configured timezone

        Raises:
            NotFoundError: If the season does not exist
        """
        today = today or local_today()
        snapshot = self.aggregator.load_season(season_id)
        totals = season_totals(snapshot.games, snapshot.pricing, season_id=season_id)

        return {
            **totals.to_dict(),
            "headlineProfit": format_headline(totals.total_profit),
            "gamesPlayed": sum(1 for game in snapshot.games if game.is_played(today)),
            "totalGames": len(snapshot.games),
            "activeSeats": len(snapshot.ownerships),
            "ticketHolders": len({o.ticket_holder_id for o in snapshot.ownerships}),
        }
