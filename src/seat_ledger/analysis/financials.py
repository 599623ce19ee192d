"""Financial aggregation over ownership, pricing and money movements.

The functions in this module are pure: they take plain lists of records and
return result dataclasses, never touching the database. FinancialAggregator
loads a season's records through the DatabaseManager and applies them, so it
can be called concurrently without any locking.

Missing cost or sold price values count as zero in sums only; the records
themselves keep None so displays can tell "unset" from "zero".
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ..exceptions import NotFoundError
from ..storage.database import DatabaseManager
from ..storage.models import (
    Game,
    GamePricing,
    Payment,
    PaymentType,
    Payout,
    Season,
    Seat,
    SeatOwnership,
    TicketHolder,
    Transfer,
)
from ..utils.data_helpers import ZERO, money_to_str

logger = logging.getLogger(__name__)

UNKNOWN_HOLDER = "Unknown"


def _amount(value: Decimal | None) -> Decimal:
    return value if value is not None else ZERO


def _holder_names(holders: Iterable[TicketHolder]) -> dict[int, str]:
    return {holder.id: holder.name for holder in holders}


@dataclass
class GameFinancials:
    """Cost, sales and profit of one game across all priced seats."""

    total_cost: Decimal = ZERO
    total_sold: Decimal = ZERO
    profit: Decimal = ZERO
    seats_with_pricing: int = 0
    game_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "gameId": self.game_id,
            "totalCost": money_to_str(self.total_cost),
            "totalSold": money_to_str(self.total_sold),
            "profit": money_to_str(self.profit),
            "seatsWithPricing": self.seats_with_pricing,
        }


@dataclass
class SeasonTotals:
    """Season-wide cost, revenue and profit, including unassigned seats."""

    total_cost: Decimal = ZERO
    total_revenue: Decimal = ZERO
    total_profit: Decimal = ZERO
    season_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "seasonId": self.season_id,
            "totalCost": money_to_str(self.total_cost),
            "totalRevenue": money_to_str(self.total_revenue),
            "totalProfit": money_to_str(self.total_profit),
        }


@dataclass
class OwnerProfit:
    """Trading result of the seats one holder owns in a season."""

    holder_id: int
    name: str
    cost: Decimal = ZERO
    revenue: Decimal = ZERO

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.cost

    def to_dict(self) -> dict[str, Any]:
        return {
            "holderId": self.holder_id,
            "name": self.name,
            "cost": money_to_str(self.cost),
            "revenue": money_to_str(self.revenue),
            "profit": money_to_str(self.profit),
        }


@dataclass
class HolderSummary:
    """Seats a holder owns in a season and the license capital behind them."""

    ticket_holder_id: int
    name: str
    seats_owned: int = 0
    balance: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticketHolderId": self.ticket_holder_id,
            "name": self.name,
            "seatsOwned": self.seats_owned,
            "balance": money_to_str(self.balance),
        }


@dataclass
class CashPosition:
    """Net cash a holder has put into the pool.

    net = paid_in - paid_out - payouts + transfers_net
    """

    ticket_holder_id: int
    name: str
    paid_in: Decimal = ZERO
    paid_out: Decimal = ZERO
    payouts: Decimal = ZERO
    transfers_net: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.paid_in - self.paid_out - self.payouts + self.transfers_net

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticketHolderId": self.ticket_holder_id,
            "name": self.name,
            "paidIn": money_to_str(self.paid_in),
            "paidOut": money_to_str(self.paid_out),
            "payouts": money_to_str(self.payouts),
            "transfersNet": money_to_str(self.transfers_net),
            "net": money_to_str(self.net),
        }


@dataclass
class SeasonSnapshot:
    """Every record the aggregations of one season read."""

    season: Season
    games: list[Game] = field(default_factory=list)
    pricing: list[GamePricing] = field(default_factory=list)
    ownerships: list[SeatOwnership] = field(default_factory=list)
    seats: list[Seat] = field(default_factory=list)
    holders: list[TicketHolder] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)
    payouts: list[Payout] = field(default_factory=list)
    transfers: list[Transfer] = field(default_factory=list)


def game_financials(pricing: Iterable[GamePricing], game_id: int | None = None) -> GameFinancials:
    """Sum the pricing records of one game.

    seats_with_pricing counts records where cost or sold price was set,
    i.e. where a pricing decision was made for the seat.
    """
    result = GameFinancials(game_id=game_id)
    for record in pricing:
        result.total_cost += _amount(record.cost)
        result.total_sold += _amount(record.sold_price)
        if record.has_pricing:
            result.seats_with_pricing += 1
    result.profit = result.total_sold - result.total_cost
    return result


def season_totals(
    games: Iterable[Game], pricing: Iterable[GamePricing], season_id: int | None = None
) -> SeasonTotals:
    """Sum pricing over every game of a season.

    Only pricing whose game is in `games` is counted. Games without pricing
    add zero; a season without games is all zero.
    """
    game_ids = {game.id for game in games}
    totals = SeasonTotals(season_id=season_id)
    for record in pricing:
        if record.game_id not in game_ids:
            continue
        totals.total_cost += _amount(record.cost)
        totals.total_revenue += _amount(record.sold_price)
    totals.total_profit = totals.total_revenue - totals.total_cost
    return totals


def owner_profits(
    games: Iterable[Game],
    pricing: Iterable[GamePricing],
    ownerships: Iterable[SeatOwnership],
    holders: Iterable[TicketHolder],
) -> list[OwnerProfit]:
    """Attribute each pricing record to the seat's owner for the game's season.

    The owner is resolved from season ownership, never from attendance.
    Pricing on seats without an owner is left out of every bucket (it still
    counts in season_totals). Every owner gets a bucket, even without pricing.

    Returns:
        Owner results sorted by profit descending, then holder id
    """
    season_of_game = {game.id: game.season_id for game in games}
    names = _holder_names(holders)

    owner_of: dict[tuple[int, int], int] = {}
    buckets: dict[int, OwnerProfit] = {}
    for ownership in ownerships:
        owner_of[(ownership.seat_id, ownership.season_id)] = ownership.ticket_holder_id
        if ownership.ticket_holder_id not in buckets:
            buckets[ownership.ticket_holder_id] = OwnerProfit(
                holder_id=ownership.ticket_holder_id,
                name=names.get(ownership.ticket_holder_id, UNKNOWN_HOLDER),
            )

    unassigned = 0
    for record in pricing:
        season_id = season_of_game.get(record.game_id)
        if season_id is None:
            continue
        holder_id = owner_of.get((record.seat_id, season_id))
        if holder_id is None:
            unassigned += 1
            continue
        bucket = buckets[holder_id]
        bucket.cost += _amount(record.cost)
        bucket.revenue += _amount(record.sold_price)

    if unassigned:
        logger.debug(f"{unassigned} pricing records on unassigned seats left out of owner profits")

    return sorted(buckets.values(), key=lambda owner: (-owner.profit, owner.holder_id))


def financial_summary(
    season_id: int,
    ownerships: Iterable[SeatOwnership],
    seats: Iterable[Seat],
    holders: Iterable[TicketHolder],
) -> list[HolderSummary]:
    """Count each holder's seats in a season and sum their license costs.

    Holders without seats in the season are not included.

    Returns:
        Summaries sorted by holder name, then id
    """
    license_cost = {seat.id: seat.license_cost for seat in seats}
    names = _holder_names(holders)

    summaries: dict[int, HolderSummary] = {}
    for ownership in ownerships:
        if ownership.season_id != season_id:
            continue
        summary = summaries.get(ownership.ticket_holder_id)
        if summary is None:
            summary = summaries[ownership.ticket_holder_id] = HolderSummary(
                ticket_holder_id=ownership.ticket_holder_id,
                name=names.get(ownership.ticket_holder_id, UNKNOWN_HOLDER),
            )
        summary.seats_owned += 1
        summary.balance += _amount(license_cost.get(ownership.seat_id))

    return sorted(
        (summary for summary in summaries.values() if summary.seats_owned > 0),
        key=lambda summary: (summary.name, summary.ticket_holder_id),
    )


def net_cash_positions(
    payments: Iterable[Payment],
    payouts: Iterable[Payout],
    transfers: Iterable[Transfer],
    ownerships: Iterable[SeatOwnership],
    games: Iterable[Game],
    holders: Iterable[TicketHolder],
) -> list[CashPosition]:
    """Net each holder's cash movements.

    - from_owner payments add to what the holder put in, to_owner payments
      subtract; team payments do not touch a holder's position.
    - Payouts subtract, but only for games in whose season the holder owned
      at least one seat.
    - Completed transfers add the amount to the buyer and subtract it from
      the seller. Pending transfers are not settled cash and are ignored.

    Scope (season or all time) is decided by which records the caller passes.

    Returns:
        Positions sorted by holder name, then id
    """
    names = _holder_names(holders)
    season_of_game = {game.id: game.season_id for game in games}
    owned_seasons: set[tuple[int, int]] = set()
    positions: dict[int, CashPosition] = {}

    def position(holder_id: int) -> CashPosition:
        if holder_id not in positions:
            positions[holder_id] = CashPosition(
                ticket_holder_id=holder_id, name=names.get(holder_id, UNKNOWN_HOLDER)
            )
        return positions[holder_id]

    for ownership in ownerships:
        owned_seasons.add((ownership.ticket_holder_id, ownership.season_id))
        position(ownership.ticket_holder_id)

    for payment in payments:
        if payment.ticket_holder_id is None:
            continue
        if payment.type is PaymentType.FROM_OWNER:
            position(payment.ticket_holder_id).paid_in += payment.amount
        elif payment.type is PaymentType.TO_OWNER:
            position(payment.ticket_holder_id).paid_out += payment.amount

    for payout in payouts:
        season_id = season_of_game.get(payout.game_id)
        if (payout.ticket_holder_id, season_id) not in owned_seasons:
            continue
        position(payout.ticket_holder_id).payouts += payout.amount

    for transfer in transfers:
        if not transfer.is_settled:
            continue
        position(transfer.to_ticket_holder_id).transfers_net += transfer.amount
        position(transfer.from_ticket_holder_id).transfers_net -= transfer.amount

    return sorted(positions.values(), key=lambda p: (p.name, p.ticket_holder_id))


class FinancialAggregator:
    """Loads season data from the database and applies the aggregations."""

    def __init__(self, db_manager: DatabaseManager):
        """Initialize aggregator with database manager.

        Args:
            db_manager: Database manager instance
        """
        self.db_manager = db_manager

    def _require_season(self, season_id: int) -> Season:
        season = self.db_manager.teams.get_season(season_id)
        if season is None:
            raise NotFoundError("Season", season_id)
        return season

    def load_season(self, season_id: int) -> SeasonSnapshot:
        """Read every record the season's aggregations need.

        Raises:
            NotFoundError: If the season does not exist
        """
        season = self._require_season(season_id)
        games = self.db_manager.games.get_games(season_id)
        game_ids = {game.id for game in games}

        return SeasonSnapshot(
            season=season,
            games=games,
            pricing=self.db_manager.pricing.pricing_for_season(season_id),
            ownerships=self.db_manager.ownership.get_ownerships(season_id=season_id),
            seats=self.db_manager.teams.get_seats(season.team_id),
            holders=self.db_manager.holders.get_ticket_holders(),
            payments=self.db_manager.ledger.get_payments(season_id=season_id),
            payouts=[p for p in self.db_manager.ledger.get_payouts() if p.game_id in game_ids],
            transfers=[t for t in self.db_manager.ledger.get_transfers() if t.game_id in game_ids],
        )

    def get_game_financials(self, game_id: int) -> GameFinancials:
        """Cost, sales, profit and priced-seat count of one game.

        Raises:
            NotFoundError: If the game does not exist
        """
        if self.db_manager.games.get_game(game_id) is None:
            raise NotFoundError("Game", game_id)
        return game_financials(self.db_manager.pricing.pricing_for(game_id), game_id=game_id)

    def get_season_totals(self, season_id: int) -> SeasonTotals:
        """Season-wide totals. A season with no games yields zeros."""
        snapshot = self.load_season(season_id)
        return season_totals(snapshot.games, snapshot.pricing, season_id=season_id)

    def get_owner_profits(self, season_id: int) -> list[OwnerProfit]:
        """Per-owner profit, sorted by profit descending."""
        snapshot = self.load_season(season_id)
        return owner_profits(snapshot.games, snapshot.pricing, snapshot.ownerships, snapshot.holders)

    def get_financial_summary(self, season_id: int) -> list[HolderSummary]:
        """Seats owned and license balance per holder with seats in the season."""
        snapshot = self.load_season(season_id)
        return financial_summary(season_id, snapshot.ownerships, snapshot.seats, snapshot.holders)

    def get_cash_positions(self, season_id: int | None = None) -> list[CashPosition]:
        """Net cash position per holder for one season, or across all seasons.

        Season scope counts payments tagged with that season and payouts and
        transfers for its games. All-time scope counts everything, including
        payments that belong to no season such as seat license purchases.
        """
        if season_id is not None:
            snapshot = self.load_season(season_id)
            return net_cash_positions(
                snapshot.payments,
                snapshot.payouts,
                snapshot.transfers,
                snapshot.ownerships,
                snapshot.games,
                snapshot.holders,
            )

        db = self.db_manager
        return net_cash_positions(
            db.ledger.get_payments(),
            db.ledger.get_payouts(),
            db.ledger.get_transfers(),
            db.ownership.get_ownerships(),
            db.games.get_games(),
            db.holders.get_ticket_holders(),
        )
