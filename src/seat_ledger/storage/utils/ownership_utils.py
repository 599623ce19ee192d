"""Seat ownership: which ticket holder owns which seat in which season."""

import sqlite3
from typing import Any

from ..models import Seat, SeatOwnership
from .base import BaseManager, parse_timestamp
from .team_utils import row_to_seat
from ...exceptions import ConflictError, ValidationError
from ...utils.logging_config import get_logger

logger = get_logger(__name__)


def _row_to_ownership(row: sqlite3.Row) -> SeatOwnership:
    return SeatOwnership(
        id=row["id"],
        seat_id=row["seat_id"],
        season_id=row["season_id"],
        ticket_holder_id=row["ticket_holder_id"],
        created_at=parse_timestamp(row["created_at"]),
    )


class OwnershipManager(BaseManager):
    """Resolves and assigns seat owners per season.

    A (seat, season) pair has at most one owner. The UNIQUE index on
    seat_ownership(seat_id, season_id) is what enforces it, so concurrent
    assignments cannot both succeed.
    """

    def assign(self, seat_id: int, season_id: int, holder_id: int) -> SeatOwnership:
        """Assign a seat to a ticket holder for one season.

        Args:
            seat_id: Seat to assign
            season_id: Season the assignment covers
            holder_id: Ticket holder who will own the seat

        Returns:
            The created ownership record

        Raises:
            NotFoundError: If the seat, season or holder does not exist
            ValidationError: If the seat belongs to a different team than the season
            ConflictError: If the seat already has an owner in this season
        """
        with self._connect() as conn:
            seat = self._require(conn, "seats", "Seat", seat_id)
            season = self._require(conn, "seasons", "Season", season_id)
            self._require(conn, "ticket_holders", "TicketHolder", holder_id)

            if seat["team_id"] != season["team_id"]:
                raise ValidationError(
                    f"Seat {seat_id} belongs to team {seat['team_id']}, "
                    f"season {season_id} to team {season['team_id']}",
                    seat_id=seat_id,
                    season_id=season_id,
                )

            try:
                cursor = conn.execute(
                    """
                    INSERT INTO seat_ownership (seat_id, season_id, ticket_holder_id)
                    VALUES (?, ?, ?)
                """,
                    (seat_id, season_id, holder_id),
                )
            except sqlite3.IntegrityError as e:
                if "UNIQUE" not in str(e):
                    raise
                owner = conn.execute(
                    "SELECT ticket_holder_id FROM seat_ownership WHERE seat_id = ? AND season_id = ?",
                    (seat_id, season_id),
                ).fetchone()
                current_owner = owner["ticket_holder_id"] if owner else None
                logger.warning(
                    f"Seat {seat_id} already owned by holder {current_owner} in season {season_id}"
                )
                raise ConflictError(
                    f"Seat {seat_id} already has an owner in season {season_id}",
                    seat_id=seat_id,
                    season_id=season_id,
                    current_owner_id=current_owner,
                ) from e

            row = self._require(conn, "seat_ownership", "SeatOwnership", cursor.lastrowid)
            logger.info(f"Assigned seat {seat_id} to holder {holder_id} for season {season_id}")
            return _row_to_ownership(row)

    def release(self, seat_id: int, season_id: int) -> bool:
        """Remove the owner of a seat for one season. Returns whether one was removed."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM seat_ownership WHERE seat_id = ? AND season_id = ?",
                (seat_id, season_id),
            )
            released = cursor.rowcount > 0
            if released:
                logger.info(f"Released seat {seat_id} for season {season_id}")
            return released

    def owner_of(self, seat_id: int, season_id: int) -> int | None:
        """Get the holder that owns a seat in a season, or None if unassigned.

        Ownership in other seasons is never consulted.
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT ticket_holder_id FROM seat_ownership WHERE seat_id = ? AND season_id = ?",
                (seat_id, season_id),
            ).fetchone()
            return row["ticket_holder_id"] if row else None

    def available_seats(self, season_id: int, team_id: int) -> list[Seat]:
        """Get the team's seats that have no owner in the given season."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT s.* FROM seats s
                WHERE s.team_id = ?
                AND NOT EXISTS (
                    SELECT 1 FROM seat_ownership o
                    WHERE o.seat_id = s.id AND o.season_id = ?
                )
                ORDER BY s.section, s.seat_row, s.number, s.id
            """,
                (team_id, season_id),
            ).fetchall()
            return [row_to_seat(row) for row in rows]

    def get_ownerships(
        self, season_id: int | None = None, holder_id: int | None = None
    ) -> list[SeatOwnership]:
        """Get ownership records, optionally filtered by season and/or holder."""
        conditions = []
        params: list[Any] = []
        if season_id is not None:
            conditions.append("season_id = ?")
            params.append(season_id)
        if holder_id is not None:
            conditions.append("ticket_holder_id = ?")
            params.append(holder_id)

        query = "SELECT * FROM seat_ownership"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY season_id, seat_id"

        with self._connect() as conn:
            return [_row_to_ownership(row) for row in conn.execute(query, params).fetchall()]
