"""Game and attendance database operations."""

import sqlite3
from typing import Any

from ..models import Game, GameAttendance, SeasonType
from .base import BaseManager, parse_day, parse_timestamp
from ...exceptions import ConflictError, ValidationError
from ...utils.data_helpers import parse_date
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

GAME_FIELDS = ("date", "time", "opponent", "season_type", "venue", "is_home", "notes")


def row_to_game(row: sqlite3.Row) -> Game:
    return Game(
        id=row["id"],
        season_id=row["season_id"],
        date=parse_day(row["date"]),
        time=row["time"],
        opponent=row["opponent"],
        season_type=SeasonType(row["season_type"]),
        venue=row["venue"],
        is_home=bool(row["is_home"]),
        notes=row["notes"],
        created_at=parse_timestamp(row["created_at"]),
    )


def _row_to_attendance(row: sqlite3.Row) -> GameAttendance:
    return GameAttendance(
        id=row["id"],
        ticket_holder_id=row["ticket_holder_id"],
        seat_id=row["seat_id"],
        game_id=row["game_id"],
        created_at=parse_timestamp(row["created_at"]),
    )


def require_seat_for_game(conn: sqlite3.Connection, game_id: int, seat_id: int) -> None:
    """Check that a game and seat exist and that the seat belongs to the game's team.

    Raises:
        NotFoundError: If the game or seat does not exist
        ValidationError: If the seat belongs to a different team
    """
    game = BaseManager._require(conn, "games", "Game", game_id)
    seat = BaseManager._require(conn, "seats", "Seat", seat_id)
    season = conn.execute("SELECT team_id FROM seasons WHERE id = ?", (game["season_id"],)).fetchone()
    if season["team_id"] != seat["team_id"]:
        raise ValidationError(
            f"Seat {seat_id} does not belong to the team playing game {game_id}",
            seat_id=seat_id,
            game_id=game_id,
        )


class GameManager(BaseManager):
    """Manages games and per-game seat attendance."""

    def _validate_game_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Normalize game fields to their column values.

        Raises:
            ValidationError: If a value is missing or malformed
        """
        values: dict[str, Any] = {}
        for field_name, value in fields.items():
            if field_name == "date":
                values["date"] = parse_date(value).isoformat()
            elif field_name == "season_type":
                values["season_type"] = SeasonType.from_string(
                    value.value if isinstance(value, SeasonType) else value
                ).value
            elif field_name == "opponent":
                if not value or not str(value).strip():
                    raise ValidationError("opponent is required", field="opponent")
                values["opponent"] = str(value).strip()
            elif field_name == "is_home":
                values["is_home"] = bool(value)
            else:
                values[field_name] = value
        return values

    def create_game(
        self,
        season_id: int,
        date: Any,
        opponent: str,
        season_type: SeasonType | str | None = SeasonType.REGULAR,
        time: str | None = None,
        venue: str | None = None,
        is_home: bool = True,
        notes: str | None = None,
    ) -> Game:
        """Create a game in a season.

        Raises:
            NotFoundError: If the season does not exist
            ValidationError: If the date, opponent or season type is invalid
        """
        values = self._validate_game_fields(
            {
                "date": date,
                "opponent": opponent,
                "season_type": season_type,
                "time": time,
                "venue": venue,
                "is_home": is_home,
                "notes": notes,
            }
        )

        with self._connect() as conn:
            self._require(conn, "seasons", "Season", season_id)
            columns = ["season_id", *values.keys()]
            placeholders = ", ".join(["?"] * len(columns))
            cursor = conn.execute(
                f"INSERT INTO games ({', '.join(columns)}) VALUES ({placeholders})",
                [season_id, *values.values()],
            )
            game = row_to_game(self._require(conn, "games", "Game", cursor.lastrowid))
            logger.info(f"Created game {game.id} vs {game.opponent} on {game.date} (season {season_id})")
            return game

    def get_game(self, game_id: int) -> Game | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
            return row_to_game(row) if row else None

    def get_games(self, season_id: int | None = None) -> list[Game]:
        """Get games in date order, optionally for one season."""
        query = "SELECT * FROM games"
        params: list[Any] = []
        if season_id is not None:
            query += " WHERE season_id = ?"
            params.append(season_id)
        query += " ORDER BY date, time, id"

        with self._connect() as conn:
            return [row_to_game(row) for row in conn.execute(query, params).fetchall()]

    def update_game(self, game_id: int, **fields: Any) -> Game:
        """Update schedule details of a game.

        Raises:
            NotFoundError: If the game does not exist
            ValidationError: If an unknown field is given or values are invalid
        """
        unknown = set(fields) - set(GAME_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update game fields: {', '.join(sorted(unknown))}", fields=sorted(unknown)
            )
        values = self._validate_game_fields(fields)

        with self._connect() as conn:
            self._require(conn, "games", "Game", game_id)
            if values:
                assignments = ", ".join(f"{name} = ?" for name in values)
                conn.execute(
                    f"UPDATE games SET {assignments} WHERE id = ?", [*values.values(), game_id]
                )
            return row_to_game(self._require(conn, "games", "Game", game_id))

    def delete_game(self, game_id: int) -> bool:
        """Delete a game that nothing references yet.

        Returns:
            True if a game was deleted, False if it did not exist

        Raises:
            ConflictError: If pricing, attendance, payouts or transfers reference the game
        """
        with self._connect() as conn:
            for table in ("game_pricing", "game_attendance", "payouts", "transfers"):
                referenced = conn.execute(
                    f"SELECT 1 FROM {table} WHERE game_id = ? LIMIT 1", (game_id,)
                ).fetchone()
                if referenced:
                    raise ConflictError(
                        f"Game {game_id} is referenced by {table} and cannot be deleted",
                        game_id=game_id,
                        table=table,
                    )
            cursor = conn.execute("DELETE FROM games WHERE id = ?", (game_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Deleted game {game_id}")
            return deleted

    def set_attendance(self, game_id: int, seat_id: int, holder_id: int) -> GameAttendance:
        """Record who occupies a seat at a game, replacing any previous attendee.

        Raises:
            NotFoundError: If the game, seat or holder does not exist
            ValidationError: If the seat belongs to a different team
        """
        with self._connect() as conn:
            require_seat_for_game(conn, game_id, seat_id)
            self._require(conn, "ticket_holders", "TicketHolder", holder_id)
            conn.execute(
                """
                INSERT INTO game_attendance (ticket_holder_id, seat_id, game_id)
                VALUES (?, ?, ?)
                ON CONFLICT(game_id, seat_id)
                DO UPDATE SET ticket_holder_id = excluded.ticket_holder_id
            """,
                (holder_id, seat_id, game_id),
            )
            row = conn.execute(
                "SELECT * FROM game_attendance WHERE game_id = ? AND seat_id = ?",
                (game_id, seat_id),
            ).fetchone()
            logger.info(f"Holder {holder_id} attending game {game_id} in seat {seat_id}")
            return _row_to_attendance(row)

    def clear_attendance(self, game_id: int, seat_id: int) -> bool:
        """Remove the attendee of a seat at a game. Returns whether one was removed."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM game_attendance WHERE game_id = ? AND seat_id = ?", (game_id, seat_id)
            )
            return cursor.rowcount > 0

    def toggle_attendance(self, game_id: int, seat_id: int, holder_id: int) -> GameAttendance | None:
        """Mark a holder as attending, or unmark them if they already are.

        Returns:
            The attendance record, or None if it was removed
        """
        with self._connect() as conn:
            existing = conn.execute(
                "SELECT ticket_holder_id FROM game_attendance WHERE game_id = ? AND seat_id = ?",
                (game_id, seat_id),
            ).fetchone()
        if existing and existing["ticket_holder_id"] == holder_id:
            self.clear_attendance(game_id, seat_id)
            return None
        return self.set_attendance(game_id, seat_id, holder_id)

    def get_attendance(self, game_id: int | None = None) -> list[GameAttendance]:
        query = "SELECT * FROM game_attendance"
        params: list[Any] = []
        if game_id is not None:
            query += " WHERE game_id = ?"
            params.append(game_id)
        query += " ORDER BY game_id, seat_id"

        with self._connect() as conn:
            return [_row_to_attendance(row) for row in conn.execute(query, params).fetchall()]
