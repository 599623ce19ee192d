"""Tests for per-game seat pricing."""

from decimal import Decimal

import pytest

from seat_ledger.exceptions import NotFoundError, ValidationError


class TestSetPricing:
    """Test the pricing upsert."""

    def test_create_pricing(self, db_manager, seeded):
        pricing = db_manager.set_game_pricing(
            seeded.games[0].id, seeded.seats[0].id, cost="450.00", sold_price="1249.55"
        )

        assert pricing.cost == Decimal("450.00")
        assert pricing.sold_price == Decimal("1249.55")
        assert pricing.profit == Decimal("799.55")

    def test_repeated_upsert_is_idempotent(self, db_manager, seeded):
        game, seat = seeded.games[0], seeded.seats[0]

        first = db_manager.set_game_pricing(game.id, seat.id, cost="100", sold_price="150")
        second = db_manager.set_game_pricing(game.id, seat.id, cost="100", sold_price="150")

        assert second.id == first.id
        assert (second.cost, second.sold_price) == (first.cost, first.sold_price)
        assert len(db_manager.pricing.pricing_for(game.id)) == 1

    def test_omitted_field_keeps_existing_value(self, db_manager, seeded):
        game, seat = seeded.games[0], seeded.seats[0]
        db_manager.set_game_pricing(game.id, seat.id, cost="100")

        pricing = db_manager.set_game_pricing(game.id, seat.id, sold_price="175.25")

        assert pricing.cost == Decimal("100.00")
        assert pricing.sold_price == Decimal("175.25")

    def test_zero_is_not_the_same_as_unset(self, db_manager, seeded):
        game, seat = seeded.games[0], seeded.seats[0]

        pricing = db_manager.set_game_pricing(game.id, seat.id, cost="0")

        assert pricing.cost == Decimal("0.00")
        assert pricing.sold_price is None
        assert pricing.has_pricing is True

    def test_explicit_zero_overwrites(self, db_manager, seeded):
        game, seat = seeded.games[0], seeded.seats[0]
        db_manager.set_game_pricing(game.id, seat.id, cost="80", sold_price="120")

        pricing = db_manager.set_game_pricing(game.id, seat.id, sold_price=0)

        assert pricing.cost == Decimal("80.00")
        assert pricing.sold_price == Decimal("0.00")

    @pytest.mark.parametrize("bad_value", ["-5", "12.345", "abc", "NaN"])
    def test_invalid_amounts(self, db_manager, seeded, bad_value):
        with pytest.raises(ValidationError):
            db_manager.set_game_pricing(seeded.games[0].id, seeded.seats[0].id, cost=bad_value)

        assert db_manager.pricing.get_pricing(seeded.games[0].id, seeded.seats[0].id) is None

    def test_unknown_game_or_seat(self, db_manager, seeded):
        with pytest.raises(NotFoundError):
            db_manager.set_game_pricing(9999, seeded.seats[0].id, cost="1")
        with pytest.raises(NotFoundError):
            db_manager.set_game_pricing(seeded.games[0].id, 9999, cost="1")

    def test_seat_of_another_team(self, db_manager, seeded):
        other_team = db_manager.teams.create_team("Bulls")
        other_seat = db_manager.teams.create_seat(other_team.id, "1", "1", "1")

        with pytest.raises(ValidationError):
            db_manager.set_game_pricing(seeded.games[0].id, other_seat.id, cost="1")

    def test_pricing_for_season(self, db_manager, seeded):
        other_season = db_manager.teams.create_season(seeded.team.id, 2025)
        other_game = db_manager.games.create_game(other_season.id, "2025-10-20", "Magic")
        db_manager.set_game_pricing(seeded.games[0].id, seeded.seats[0].id, cost="10")
        db_manager.set_game_pricing(seeded.games[1].id, seeded.seats[1].id, cost="20")
        db_manager.set_game_pricing(other_game.id, seeded.seats[0].id, cost="30")

        pricing = db_manager.pricing.pricing_for_season(seeded.season.id)

        assert [p.cost for p in pricing] == [Decimal("10.00"), Decimal("20.00")]
