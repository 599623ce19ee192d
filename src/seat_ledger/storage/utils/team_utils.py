"""Team, season and seat database operations."""

import sqlite3
from typing import Any

from ..models import Season, Seat, Team
from .base import BaseManager, parse_timestamp
from ...exceptions import ConflictError, ValidationError
from ...utils.data_helpers import money_from_db, money_to_str, parse_money
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

SEAT_FIELDS = ("section", "row", "number", "license_cost")

# Attribute name -> column name where they differ
SEAT_COLUMNS = {"row": "seat_row"}


def _row_to_team(row: sqlite3.Row) -> Team:
    return Team(id=row["id"], name=row["name"], created_at=parse_timestamp(row["created_at"]))


def _row_to_season(row: sqlite3.Row) -> Season:
    return Season(
        id=row["id"],
        team_id=row["team_id"],
        year=row["year"],
        created_at=parse_timestamp(row["created_at"]),
    )


def row_to_seat(row: sqlite3.Row) -> Seat:
    return Seat(
        id=row["id"],
        team_id=row["team_id"],
        section=row["section"],
        row=row["seat_row"],
        number=row["number"],
        license_cost=money_from_db(row["license_cost"]),
        created_at=parse_timestamp(row["created_at"]),
    )


class TeamManager(BaseManager):
    """Manages teams, their seasons and their seats."""

    def create_team(self, name: str) -> Team:
        """Create a team.

        Raises:
            ValidationError: If the name is blank
        """
        if not name or not name.strip():
            raise ValidationError("Team name is required", field="name")

        with self._connect() as conn:
            cursor = conn.execute("INSERT INTO teams (name) VALUES (?)", (name.strip(),))
            row = self._require(conn, "teams", "Team", cursor.lastrowid)
            logger.info(f"Created team {row['id']} ({row['name']})")
            return _row_to_team(row)

    def get_team(self, team_id: int) -> Team | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM teams WHERE id = ?", (team_id,)).fetchone()
            return _row_to_team(row) if row else None

    def get_teams(self) -> list[Team]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM teams ORDER BY name, id").fetchall()
            return [_row_to_team(row) for row in rows]

    def create_season(self, team_id: int, year: int) -> Season:
        """Create a season for a team.

        Duplicate (team, year) pairs are allowed but logged as a warning.

        Raises:
            NotFoundError: If the team does not exist
            ValidationError: If the year is not a positive integer
        """
        if not isinstance(year, int) or isinstance(year, bool) or year <= 0:
            raise ValidationError("year must be a positive integer", field="year", value=year)

        with self._connect() as conn:
            self._require(conn, "teams", "Team", team_id)

            duplicate = conn.execute(
                "SELECT id FROM seasons WHERE team_id = ? AND year = ?", (team_id, year)
            ).fetchone()
            if duplicate:
                logger.warning(
                    f"Team {team_id} already has a {year} season (id {duplicate['id']}); "
                    "creating a logical duplicate"
                )

            cursor = conn.execute(
                "INSERT INTO seasons (team_id, year) VALUES (?, ?)", (team_id, year)
            )
            row = self._require(conn, "seasons", "Season", cursor.lastrowid)
            logger.info(f"Created season {row['id']} ({year}) for team {team_id}")
            return _row_to_season(row)

    def get_season(self, season_id: int) -> Season | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM seasons WHERE id = ?", (season_id,)).fetchone()
            return _row_to_season(row) if row else None

    def get_seasons(self, team_id: int | None = None) -> list[Season]:
        """Get seasons, newest year first, optionally for one team."""
        query = "SELECT * FROM seasons"
        params: list[Any] = []
        if team_id is not None:
            query += " WHERE team_id = ?"
            params.append(team_id)
        query += " ORDER BY year DESC, id"

        with self._connect() as conn:
            return [_row_to_season(row) for row in conn.execute(query, params).fetchall()]

    def create_seat(
        self,
        team_id: int,
        section: str,
        row: str,
        number: str,
        license_cost: Any = None,
    ) -> Seat:
        """Create a seat belonging to a team.

        Raises:
            NotFoundError: If the team does not exist
            ValidationError: If the address is incomplete or the license cost is invalid
        """
        address = {"section": section, "row": row, "number": number}
        missing = [key for key, value in address.items() if value is None or not str(value).strip()]
        if missing:
            raise ValidationError(
                f"Seat address is incomplete: missing {', '.join(missing)}", fields=missing
            )
        cost = parse_money(license_cost, "license_cost")

        with self._connect() as conn:
            self._require(conn, "teams", "Team", team_id)
            cursor = conn.execute(
                """
                INSERT INTO seats (team_id, section, seat_row, number, license_cost)
                VALUES (?, ?, ?, ?, ?)
            """,
                (team_id, str(section).strip(), str(row).strip(), str(number).strip(), money_to_str(cost)),
            )
            seat = row_to_seat(self._require(conn, "seats", "Seat", cursor.lastrowid))
            logger.info(f"Created seat {seat.id} ({seat.label}) for team {team_id}")
            return seat

    def get_seat(self, seat_id: int) -> Seat | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM seats WHERE id = ?", (seat_id,)).fetchone()
            return row_to_seat(row) if row else None

    def get_seats(self, team_id: int | None = None) -> list[Seat]:
        query = "SELECT * FROM seats"
        params: list[Any] = []
        if team_id is not None:
            query += " WHERE team_id = ?"
            params.append(team_id)
        query += " ORDER BY section, seat_row, number, id"

        with self._connect() as conn:
            return [row_to_seat(row) for row in conn.execute(query, params).fetchall()]

    def update_seat(self, seat_id: int, **fields: Any) -> Seat:
        """Update a seat's address or license cost.

        Seats are immutable once ownership, pricing, attendance or transfers
        reference them.

        Raises:
            NotFoundError: If the seat does not exist
            ConflictError: If the seat is already referenced
            ValidationError: If an unknown field is given
        """
        unknown = set(fields) - set(SEAT_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update seat fields: {', '.join(sorted(unknown))}", fields=sorted(unknown)
            )

        updates: dict[str, Any] = {}
        for field_name, value in fields.items():
            if field_name == "license_cost":
                updates["license_cost"] = money_to_str(parse_money(value, "license_cost"))
            elif value is not None:
                updates[SEAT_COLUMNS.get(field_name, field_name)] = str(value).strip()

        with self._connect() as conn:
            self._require(conn, "seats", "Seat", seat_id)

            for table in ("seat_ownership", "game_pricing", "game_attendance", "transfers"):
                referenced = conn.execute(
                    f"SELECT 1 FROM {table} WHERE seat_id = ? LIMIT 1", (seat_id,)
                ).fetchone()
                if referenced:
                    raise ConflictError(
                        f"Seat {seat_id} is referenced by {table} and can no longer change",
                        seat_id=seat_id,
                        table=table,
                    )

            if updates:
                assignments = ", ".join(f"{name} = ?" for name in updates)
                conn.execute(
                    f"UPDATE seats SET {assignments} WHERE id = ?", [*updates.values(), seat_id]
                )
            return row_to_seat(self._require(conn, "seats", "Seat", seat_id))
