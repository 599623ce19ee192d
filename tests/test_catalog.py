"""Tests for teams, seasons, seats, ticket holders and games."""

import logging
from datetime import date

import pytest

from seat_ledger.exceptions import ConflictError, NotFoundError, ValidationError
from seat_ledger.storage.models import SeasonType


class TestTeamsAndSeasons:
    """Test team and season records."""

    def test_duplicate_season_year_is_allowed_with_warning(self, db_manager, seeded, caplog):
        with caplog.at_level(logging.WARNING):
            duplicate = db_manager.teams.create_season(seeded.team.id, 2024)

        assert duplicate.id != seeded.season.id
        assert "already has a 2024 season" in caplog.text
        assert len(db_manager.teams.get_seasons(seeded.team.id)) == 2

    def test_seasons_are_newest_first(self, db_manager, seeded):
        db_manager.teams.create_season(seeded.team.id, 2022)
        db_manager.teams.create_season(seeded.team.id, 2025)

        years = [season.year for season in db_manager.teams.get_seasons(seeded.team.id)]

        assert years == [2025, 2024, 2022]

    def test_season_for_unknown_team(self, db_manager):
        with pytest.raises(NotFoundError) as exc_info:
            db_manager.teams.create_season(42, 2024)
        assert exc_info.value.details == {"entity": "Team", "id": 42}

    def test_invalid_year(self, db_manager, seeded):
        with pytest.raises(ValidationError):
            db_manager.teams.create_season(seeded.team.id, 0)

    def test_blank_team_name(self, db_manager):
        with pytest.raises(ValidationError):
            db_manager.teams.create_team("   ")


class TestSeats:
    """Test seat records."""

    def test_seat_label_and_license_cost(self, seeded):
        seat = seeded.seats[2]

        assert seat.label == "Sec 102, Row B, Seat 7"
        assert str(seat.license_cost) == "2500.50"
        assert seat.to_dict()["license_cost"] == "2500.50"

    def test_incomplete_address(self, db_manager, seeded):
        with pytest.raises(ValidationError):
            db_manager.teams.create_seat(seeded.team.id, "101", "", "3")

    def test_update_unreferenced_seat(self, db_manager, seeded):
        seat = db_manager.teams.update_seat(seeded.seats[0].id, row="C", license_cost="6000")

        assert seat.row == "C"
        assert str(seat.license_cost) == "6000.00"

    def test_referenced_seat_is_immutable(self, db_manager, seeded):
        seat = seeded.seats[0]
        db_manager.assign_ownership(seat.id, seeded.season.id, seeded.cale.id)

        with pytest.raises(ConflictError):
            db_manager.teams.update_seat(seat.id, section="200")


class TestTicketHolders:
    """Test ticket holder records."""

    def test_lookup_by_email_is_case_insensitive(self, db_manager, seeded):
        holder = db_manager.holders.get_ticket_holder_by_email("CALE@Example.com")

        assert holder is not None
        assert holder.id == seeded.cale.id

    def test_holder_without_email(self, seeded):
        assert seeded.dana.email is None

    def test_update_holder(self, db_manager, seeded):
        holder = db_manager.holders.update_ticket_holder(seeded.dana.id, email="dana@example.com")

        assert holder.email == "dana@example.com"
        assert holder.name == "Dana"


class TestGames:
    """Test game records and attendance."""

    def test_season_type_defaults_to_regular(self, seeded):
        assert seeded.games[0].season_type is SeasonType.REGULAR

    def test_season_type_short_tags(self, db_manager, seeded):
        game = db_manager.games.create_game(seeded.season.id, "2024-10-05", "Heat", season_type="Pre")

        assert game.season_type is SeasonType.PRESEASON
        assert game.date == date(2024, 10, 5)

    def test_unknown_season_type(self, db_manager, seeded):
        with pytest.raises(ValidationError):
            db_manager.games.create_game(seeded.season.id, "2024-10-05", "Heat", season_type="exhibition")

    def test_games_ordered_by_date(self, db_manager, seeded):
        db_manager.games.create_game(seeded.season.id, "2024-10-01", "Heat")

        opponents = [game.opponent for game in db_manager.games.get_games(seeded.season.id)]

        assert opponents == ["Heat", "Celtics", "Knicks"]

    def test_game_with_pricing_cannot_be_deleted(self, db_manager, seeded):
        game = seeded.games[0]
        db_manager.set_game_pricing(game.id, seeded.seats[0].id, cost="100")

        with pytest.raises(ConflictError):
            db_manager.games.delete_game(game.id)

        assert db_manager.games.delete_game(seeded.games[1].id) is True
        assert db_manager.games.get_game(seeded.games[1].id) is None

    def test_attendance_toggle(self, db_manager, seeded):
        game, seat = seeded.games[0], seeded.seats[0]

        attendance = db_manager.games.toggle_attendance(game.id, seat.id, seeded.cale.id)
        assert attendance is not None
        assert attendance.ticket_holder_id == seeded.cale.id

        assert db_manager.games.toggle_attendance(game.id, seat.id, seeded.cale.id) is None
        assert db_manager.games.get_attendance(game.id) == []

    def test_attendance_is_one_holder_per_seat(self, db_manager, seeded):
        game, seat = seeded.games[0], seeded.seats[0]

        db_manager.games.set_attendance(game.id, seat.id, seeded.cale.id)
        db_manager.games.set_attendance(game.id, seat.id, seeded.dana.id)

        attendance = db_manager.games.get_attendance(game.id)
        assert len(attendance) == 1
        assert attendance[0].ticket_holder_id == seeded.dana.id
