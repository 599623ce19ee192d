"""Tests for the financial aggregations."""

from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest

from seat_ledger.analysis.financials import (
    FinancialAggregator,
    game_financials,
    owner_profits,
    season_totals,
)
from seat_ledger.exceptions import NotFoundError
from seat_ledger.storage.models import Game, GamePricing, SeatOwnership, TicketHolder


@pytest.fixture
def aggregator(db_manager):
    return FinancialAggregator(db_manager)


class TestGameFinancials:
    """Test per-game totals."""

    def test_cost_without_sale(self, db_manager, seeded, aggregator):
        game, seat = seeded.games[0], seeded.seats[1]
        db_manager.set_game_pricing(game.id, seat.id, cost="450")

        result = aggregator.get_game_financials(game.id)

        assert result.to_dict() == {
            "gameId": game.id,
            "totalCost": "450.00",
            "totalSold": "0.00",
            "profit": "-450.00",
            "seatsWithPricing": 1,
        }

    def test_game_without_pricing(self, seeded, aggregator):
        result = aggregator.get_game_financials(seeded.games[1].id)

        assert result.total_cost == Decimal("0")
        assert result.profit == Decimal("0")
        assert result.seats_with_pricing == 0

    def test_unknown_game(self, aggregator):
        with pytest.raises(NotFoundError):
            aggregator.get_game_financials(9999)

    def test_records_without_values_are_not_counted(self):
        pricing = [
            GamePricing(game_id=1, seat_id=1),
            GamePricing(game_id=1, seat_id=2, sold_price=Decimal("0.00")),
            GamePricing(game_id=1, seat_id=3, cost=Decimal("10.00"), sold_price=Decimal("25.50")),
        ]

        result = game_financials(pricing, game_id=1)

        assert result.seats_with_pricing == 2
        assert result.profit == Decimal("15.50")


class TestSeasonTotals:
    """Test season-wide totals."""

    def test_empty_season_is_zero(self, db_manager, seeded, aggregator):
        empty = db_manager.teams.create_season(seeded.team.id, 2026)

        totals = aggregator.get_season_totals(empty.id)

        assert totals.to_dict() == {
            "seasonId": empty.id,
            "totalCost": "0.00",
            "totalRevenue": "0.00",
            "totalProfit": "0.00",
        }

    def test_sums_every_game(self, db_manager, seeded, aggregator):
        db_manager.set_game_pricing(seeded.games[0].id, seeded.seats[0].id, cost="100", sold_price="80")
        db_manager.set_game_pricing(seeded.games[1].id, seeded.seats[1].id, cost="100.10", sold_price="300.25")

        totals = aggregator.get_season_totals(seeded.season.id)

        assert totals.total_cost == Decimal("200.10")
        assert totals.total_revenue == Decimal("380.25")
        assert totals.total_profit == Decimal("180.15")

    def test_other_seasons_do_not_leak(self):
        games = [Game(id=1, season_id=1, date=date(2024, 1, 1), opponent="X")]
        pricing = [
            GamePricing(game_id=1, seat_id=1, cost=Decimal("5.00")),
            GamePricing(game_id=2, seat_id=1, cost=Decimal("7.00")),
        ]

        assert season_totals(games, pricing).total_cost == Decimal("5.00")

    def test_unknown_season(self, aggregator):
        with pytest.raises(NotFoundError):
            aggregator.get_season_totals(9999)


class TestOwnerProfits:
    """Test attribution of pricing to seat owners."""

    def test_unassigned_seat_counts_only_in_totals(self, db_manager, seeded, aggregator):
        game = seeded.games[0]
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.cale.id)
        db_manager.set_game_pricing(game.id, seeded.seats[0].id, cost="100", sold_price="150")
        db_manager.set_game_pricing(game.id, seeded.seats[2].id, cost="40", sold_price="90")

        totals = aggregator.get_season_totals(seeded.season.id)
        owners = aggregator.get_owner_profits(seeded.season.id)

        assert totals.total_profit == Decimal("100.00")
        assert [owner.holder_id for owner in owners] == [seeded.cale.id]
        assert owners[0].profit == Decimal("50.00")
        assert sum(owner.profit for owner in owners) != totals.total_profit

    def test_sorted_by_profit_descending(self, db_manager, seeded, aggregator):
        game = seeded.games[0]
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.cale.id)
        db_manager.assign_ownership(seeded.seats[1].id, seeded.season.id, seeded.dana.id)
        db_manager.set_game_pricing(game.id, seeded.seats[0].id, cost="100", sold_price="90")
        db_manager.set_game_pricing(game.id, seeded.seats[1].id, cost="100", sold_price="400")

        owners = aggregator.get_owner_profits(seeded.season.id)

        assert [owner.name for owner in owners] == ["Dana", "Cale"]
        assert [owner.to_dict()["profit"] for owner in owners] == ["300.00", "-10.00"]

    def test_owner_without_pricing_has_zero_bucket(self, db_manager, seeded, aggregator):
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.cale.id)

        owners = aggregator.get_owner_profits(seeded.season.id)

        assert len(owners) == 1
        assert owners[0].profit == Decimal("0")

    def test_owner_is_resolved_per_season(self):
        """The owner of the game's season gets the profit, not last season's owner."""
        games = [
            Game(id=10, season_id=1, date=date(2023, 1, 1), opponent="X"),
            Game(id=20, season_id=2, date=date(2024, 1, 1), opponent="Y"),
        ]
        ownerships = [
            SeatOwnership(seat_id=5, season_id=1, ticket_holder_id=1),
            SeatOwnership(seat_id=5, season_id=2, ticket_holder_id=2),
        ]
        holders = [TicketHolder(id=1, name="Ann"), TicketHolder(id=2, name="Ben")]
        pricing = [
            GamePricing(game_id=10, seat_id=5, sold_price=Decimal("10.00")),
            GamePricing(game_id=20, seat_id=5, sold_price=Decimal("99.00")),
        ]

        profits = {owner.name: owner.profit for owner in owner_profits(games, pricing, ownerships, holders)}

        assert profits == {"Ben": Decimal("99.00"), "Ann": Decimal("10.00")}


class TestFinancialSummary:
    """Test seat count and license balance per holder."""

    def test_license_balance(self, db_manager, seeded, aggregator):
        seat = db_manager.teams.create_seat(seeded.team.id, "110", "C", "2", license_cost="9996.39")
        db_manager.assign_ownership(seat.id, seeded.season.id, seeded.cale.id)
        db_manager.set_game_pricing(seeded.games[0].id, seat.id, cost="450")

        summary = aggregator.get_financial_summary(seeded.season.id)

        assert [row.to_dict() for row in summary] == [
            {"ticketHolderId": seeded.cale.id, "name": "Cale", "seatsOwned": 1, "balance": "9996.39"}
        ]
        assert aggregator.get_game_financials(seeded.games[0].id).profit == Decimal("-450.00")

    def test_holders_without_seats_are_left_out(self, db_manager, seeded, aggregator):
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.dana.id)
        db_manager.assign_ownership(seeded.seats[2].id, seeded.season.id, seeded.dana.id)

        summary = aggregator.get_financial_summary(seeded.season.id)

        assert [(row.name, row.seats_owned, row.balance) for row in summary] == [
            ("Dana", 2, Decimal("7500.50"))
        ]


class TestCashPositions:
    """Test net cash positions."""

    def _transfer(self, db_manager, seeded, status="pending"):
        return db_manager.record_transfer(
            from_ticket_holder_id=seeded.cale.id,
            to_ticket_holder_id=seeded.dana.id,
            seat_id=seeded.seats[0].id,
            game_id=seeded.games[0].id,
            amount="200",
            date="2024-10-20",
            status=status,
        )

    def _positions(self, aggregator, season_id=None):
        return {p.name: p for p in aggregator.get_cash_positions(season_id)}

    def test_pending_transfer_is_ignored_until_completed(self, db_manager, seeded, aggregator):
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.cale.id)
        transfer = self._transfer(db_manager, seeded)

        before = self._positions(aggregator, seeded.season.id)
        assert before["Cale"].net == Decimal("0")
        assert "Dana" not in before

        db_manager.ledger.update_transfer_status(transfer.id, "completed")

        after = self._positions(aggregator, seeded.season.id)
        assert after["Cale"].net == Decimal("-200.00")
        assert after["Dana"].net == Decimal("200.00")

    def test_payments_and_payouts(self, db_manager, seeded, aggregator):
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.cale.id)
        db_manager.record_payment(
            amount="1000", type="from_owner", date="2024-08-01",
            season_id=seeded.season.id, ticket_holder_id=seeded.cale.id,
        )
        db_manager.record_payment(
            amount="150", type="to_owner", date="2024-12-01",
            season_id=seeded.season.id, ticket_holder_id=seeded.cale.id,
        )
        db_manager.record_payment(
            amount="5000", type="to_team", date="2024-08-02",
            season_id=seeded.season.id, team_id=seeded.team.id,
        )
        db_manager.record_payout(seeded.cale.id, seeded.games[0].id, "50")
        db_manager.record_payout(seeded.dana.id, seeded.games[0].id, "75")

        cale = self._positions(aggregator, seeded.season.id)["Cale"]

        assert cale.paid_in == Decimal("1000.00")
        assert cale.paid_out == Decimal("150.00")
        assert cale.payouts == Decimal("50.00")
        assert cale.net == Decimal("800.00")
        assert "Dana" not in self._positions(aggregator, seeded.season.id)

    def test_all_time_includes_one_time_payments(self, db_manager, seeded, aggregator):
        db_manager.assign_ownership(seeded.seats[0].id, seeded.season.id, seeded.cale.id)
        db_manager.record_payment(
            amount="5000", type="from_owner", date="2023-05-01",
            ticket_holder_id=seeded.cale.id, category="seat_license",
        )

        assert self._positions(aggregator, seeded.season.id)["Cale"].net == Decimal("0")
        assert self._positions(aggregator)["Cale"].net == Decimal("5000.00")


def test_missing_season_reads_nothing_else():
    """An unknown season fails before any season data is loaded."""
    db = Mock()
    db.teams.get_season.return_value = None

    with pytest.raises(NotFoundError):
        FinancialAggregator(db).get_owner_profits(7)

    db.teams.get_season.assert_called_once_with(7)
    db.pricing.pricing_for_season.assert_not_called()
    db.ownership.get_ownerships.assert_not_called()
