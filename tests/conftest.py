"""Shared fixtures: a fresh database per test and a seeded season."""

from dataclasses import dataclass
from datetime import date

import pytest

from seat_ledger.storage.database import DatabaseManager
from seat_ledger.storage.models import Game, Season, Seat, Team, TicketHolder


@pytest.fixture
def db_manager(tmp_path):
    """Create a database manager backed by a temporary file."""
    return DatabaseManager(tmp_path / "ledger.db")


@dataclass
class SeededSeason:
    team: Team
    season: Season
    seats: list[Seat]
    cale: TicketHolder
    dana: TicketHolder
    games: list[Game]


@pytest.fixture
def seeded(db_manager):
    """One team, one 2024 season, three seats, two holders and two games.

    No ownership or pricing is recorded; tests add what they need.
    """
    team = db_manager.teams.create_team("Hornets")
    season = db_manager.teams.create_season(team.id, 2024)
    seats = [
        db_manager.teams.create_seat(team.id, "101", "A", "1", license_cost="5000.00"),
        db_manager.teams.create_seat(team.id, "101", "A", "2", license_cost="5000.00"),
        db_manager.teams.create_seat(team.id, "102", "B", "7", license_cost="2500.50"),
    ]
    cale = db_manager.holders.create_ticket_holder("Cale", email="cale@example.com")
    dana = db_manager.holders.create_ticket_holder("Dana")
    games = [
        db_manager.games.create_game(season.id, date(2024, 10, 25), "Celtics"),
        db_manager.games.create_game(season.id, date(2024, 11, 2), "Knicks"),
    ]
    return SeededSeason(team=team, season=season, seats=seats, cale=cale, dana=dana, games=games)
