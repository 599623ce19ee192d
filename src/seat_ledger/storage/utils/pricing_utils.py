"""Per-game seat pricing: what a seat cost and what it sold for."""

import sqlite3
from typing import Any

from ..models import GamePricing
from .base import BaseManager, parse_timestamp
from .game_utils import require_seat_for_game
from ...utils.data_helpers import money_from_db, money_to_str, parse_money
from ...utils.logging_config import get_logger

logger = get_logger(__name__)


def _row_to_pricing(row: sqlite3.Row) -> GamePricing:
    return GamePricing(
        id=row["id"],
        game_id=row["game_id"],
        seat_id=row["seat_id"],
        cost=money_from_db(row["cost"]),
        sold_price=money_from_db(row["sold_price"]),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


class PricingManager(BaseManager):
    """Manages game pricing records, one per (game, seat)."""

    def set_pricing(
        self, game_id: int, seat_id: int, cost: Any = None, sold_price: Any = None
    ) -> GamePricing:
        """Create or update the pricing of a seat at a game.

        A value of None means "not supplied": an existing value is left as is,
        and a new record stores NULL. The upsert is a single statement, so a
        retry after a failure is harmless.

        Args:
            game_id: Game the pricing applies to
            seat_id: Seat the pricing applies to
            cost: What the owner paid or owes for the seat at this game
            sold_price: What was recouped by reselling the seat

        Returns:
            The stored pricing record

        Raises:
            NotFoundError: If the game or seat does not exist
            ValidationError: If an amount is malformed or negative, or the seat
                belongs to a different team
        """
        cost_value = money_to_str(parse_money(cost, "cost"))
        sold_value = money_to_str(parse_money(sold_price, "sold_price"))

        with self._connect() as conn:
            require_seat_for_game(conn, game_id, seat_id)
            conn.execute(
                """
                INSERT INTO game_pricing (game_id, seat_id, cost, sold_price)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(game_id, seat_id) DO UPDATE SET
                    cost = COALESCE(excluded.cost, game_pricing.cost),
                    sold_price = COALESCE(excluded.sold_price, game_pricing.sold_price),
                    updated_at = CURRENT_TIMESTAMP
            """,
                (game_id, seat_id, cost_value, sold_value),
            )
            row = conn.execute(
                "SELECT * FROM game_pricing WHERE game_id = ? AND seat_id = ?", (game_id, seat_id)
            ).fetchone()
            logger.info(
                f"Pricing for game {game_id} seat {seat_id}: "
                f"cost={row['cost']} sold_price={row['sold_price']}"
            )
            return _row_to_pricing(row)

    def get_pricing(self, game_id: int, seat_id: int) -> GamePricing | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM game_pricing WHERE game_id = ? AND seat_id = ?", (game_id, seat_id)
            ).fetchone()
            return _row_to_pricing(row) if row else None

    def pricing_for(self, game_id: int) -> list[GamePricing]:
        """Get every pricing record for a game."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM game_pricing WHERE game_id = ? ORDER BY seat_id", (game_id,)
            ).fetchall()
            return [_row_to_pricing(row) for row in rows]

    def pricing_for_season(self, season_id: int) -> list[GamePricing]:
        """Get every pricing record for every game of a season."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT p.* FROM game_pricing p
                INNER JOIN games g ON g.id = p.game_id
                WHERE g.season_id = ?
                ORDER BY g.date, p.game_id, p.seat_id
            """,
                (season_id,),
            ).fetchall()
            return [_row_to_pricing(row) for row in rows]

    def get_all_pricing(self) -> list[GamePricing]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM game_pricing ORDER BY game_id, seat_id").fetchall()
            return [_row_to_pricing(row) for row in rows]
