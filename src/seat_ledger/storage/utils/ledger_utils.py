"""Payments, payouts and transfers: the money side of the ledger."""

import sqlite3
from typing import Any

from ..models import Payment, PaymentCategory, PaymentType, Payout, Transfer, TransferStatus
from .base import BaseManager, parse_day, parse_timestamp
from .game_utils import require_seat_for_game
from ...exceptions import ValidationError
from ...utils.data_helpers import money_from_db, money_to_str, parse_date, parse_money
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

PAYMENT_FIELDS = (
    "amount",
    "type",
    "date",
    "season_id",
    "ticket_holder_id",
    "team_id",
    "category",
    "description",
    "notes",
)


def _payment_type(value: PaymentType | str) -> PaymentType:
    if isinstance(value, PaymentType):
        return value
    try:
        return PaymentType(value)
    except ValueError:
        raise ValidationError(
            f"Unknown payment type '{value}'",
            field="type",
            value=value,
            allowed=[t.value for t in PaymentType],
        )


def _transfer_status(value: TransferStatus | str) -> TransferStatus:
    if isinstance(value, TransferStatus):
        return value
    try:
        return TransferStatus(value)
    except ValueError:
        raise ValidationError(
            f"Unknown transfer status '{value}'",
            field="status",
            value=value,
            allowed=[s.value for s in TransferStatus],
        )


def _category(value: PaymentCategory | str | None) -> str | None:
    """Store known categories by their canonical value, anything else as given."""
    if value is None:
        return None
    if isinstance(value, PaymentCategory):
        return value.value
    cleaned = value.strip()
    try:
        return PaymentCategory(cleaned.lower().replace(" ", "_")).value
    except ValueError:
        return cleaned or None


def _check_owner_holder(payment_type: str, ticket_holder_id: int | None) -> None:
    """Owner payments must name the holder whose cash position they move."""
    if payment_type in (PaymentType.FROM_OWNER.value, PaymentType.TO_OWNER.value) and ticket_holder_id is None:
        raise ValidationError(
            f"A {payment_type} payment needs a ticket holder", field="ticket_holder_id"
        )


def _required_amount(value: Any, field: str = "amount"):
    amount = parse_money(value, field)
    if amount is None:
        raise ValidationError(f"{field} is required", field=field)
    return amount


def _row_to_payment(row: sqlite3.Row) -> Payment:
    return Payment(
        id=row["id"],
        season_id=row["season_id"],
        ticket_holder_id=row["ticket_holder_id"],
        team_id=row["team_id"],
        amount=money_from_db(row["amount"]),
        type=PaymentType(row["type"]),
        category=row["category"],
        date=parse_day(row["date"]),
        description=row["description"],
        notes=row["notes"],
        created_at=parse_timestamp(row["created_at"]),
    )


def _row_to_payout(row: sqlite3.Row) -> Payout:
    return Payout(
        id=row["id"],
        ticket_holder_id=row["ticket_holder_id"],
        game_id=row["game_id"],
        amount=money_from_db(row["amount"]),
        created_at=parse_timestamp(row["created_at"]),
    )


def _row_to_transfer(row: sqlite3.Row) -> Transfer:
    return Transfer(
        id=row["id"],
        from_ticket_holder_id=row["from_ticket_holder_id"],
        to_ticket_holder_id=row["to_ticket_holder_id"],
        seat_id=row["seat_id"],
        game_id=row["game_id"],
        amount=money_from_db(row["amount"]),
        date=parse_day(row["date"]),
        status=TransferStatus(row["status"]),
        created_at=parse_timestamp(row["created_at"]),
    )


class LedgerManager(BaseManager):
    """Manages payments, payouts and transfers."""

    def _check_payment_refs(self, conn: sqlite3.Connection, values: dict[str, Any]) -> None:
        if values.get("season_id") is not None:
            self._require(conn, "seasons", "Season", values["season_id"])
        if values.get("ticket_holder_id") is not None:
            self._require(conn, "ticket_holders", "TicketHolder", values["ticket_holder_id"])
        if values.get("team_id") is not None:
            self._require(conn, "teams", "Team", values["team_id"])

    def _normalize_payment(self, fields: dict[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_name, value in fields.items():
            if field_name == "amount":
                values["amount"] = money_to_str(_required_amount(value))
            elif field_name == "type":
                values["type"] = _payment_type(value).value
            elif field_name == "date":
                values["date"] = parse_date(value).isoformat()
            elif field_name == "category":
                values["category"] = _category(value)
            else:
                values[field_name] = value
        return values

    def record_payment(
        self,
        amount: Any,
        type: PaymentType | str,
        date: Any,
        season_id: int | None = None,
        ticket_holder_id: int | None = None,
        team_id: int | None = None,
        category: str | None = None,
        description: str | None = None,
        notes: str | None = None,
    ) -> Payment:
        """Record a payment.

        season_id is None for one-time payments such as a seat license purchase.

        Raises:
            NotFoundError: If a referenced season, holder or team does not exist
            ValidationError: If the amount, type or date is invalid, or an
                owner payment has no ticket holder
        """
        values = self._normalize_payment(
            {
                "amount": amount,
                "type": type,
                "date": date,
                "season_id": season_id,
                "ticket_holder_id": ticket_holder_id,
                "team_id": team_id,
                "category": category,
                "description": description,
                "notes": notes,
            }
        )
        _check_owner_holder(values["type"], ticket_holder_id)

        with self._connect() as conn:
            self._check_payment_refs(conn, values)
            columns = list(values.keys())
            placeholders = ", ".join(["?"] * len(columns))
            cursor = conn.execute(
                f"INSERT INTO payments ({', '.join(columns)}) VALUES ({placeholders})",
                list(values.values()),
            )
            payment = _row_to_payment(self._require(conn, "payments", "Payment", cursor.lastrowid))
            logger.info(
                f"Recorded {payment.type.value} payment {payment.id} of {payment.amount} "
                f"(holder {ticket_holder_id}, season {season_id})"
            )
            return payment

    def get_payment(self, payment_id: int) -> Payment | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            return _row_to_payment(row) if row else None

    def get_payments(
        self, season_id: int | None = None, ticket_holder_id: int | None = None
    ) -> list[Payment]:
        """Get payments, newest first, optionally filtered by season and/or holder."""
        conditions = []
        params: list[Any] = []
        if season_id is not None:
            conditions.append("season_id = ?")
            params.append(season_id)
        if ticket_holder_id is not None:
            conditions.append("ticket_holder_id = ?")
            params.append(ticket_holder_id)

        query = "SELECT * FROM payments"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY date DESC, id DESC"

        with self._connect() as conn:
            return [_row_to_payment(row) for row in conn.execute(query, params).fetchall()]

    def update_payment(self, payment_id: int, **fields: Any) -> Payment:
        """Update fields of a payment.

        Raises:
            NotFoundError: If the payment or a referenced entity does not exist
            ValidationError: If an unknown field is given or values are invalid
        """
        unknown = set(fields) - set(PAYMENT_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update payment fields: {', '.join(sorted(unknown))}", fields=sorted(unknown)
            )
        values = self._normalize_payment(fields)

        with self._connect() as conn:
            current = self._require(conn, "payments", "Payment", payment_id)
            _check_owner_holder(
                values.get("type", current["type"]),
                values.get("ticket_holder_id", current["ticket_holder_id"]),
            )
            self._check_payment_refs(conn, values)
            if values:
                assignments = ", ".join(f"{name} = ?" for name in values)
                conn.execute(
                    f"UPDATE payments SET {assignments} WHERE id = ?", [*values.values(), payment_id]
                )
            return _row_to_payment(self._require(conn, "payments", "Payment", payment_id))

    def delete_payment(self, payment_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM payments WHERE id = ?", (payment_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Deleted payment {payment_id}")
            return deleted

    def record_payout(self, ticket_holder_id: int, game_id: int, amount: Any) -> Payout:
        """Record money paid to a holder for a game.

        Raises:
            NotFoundError: If the holder or game does not exist
            ValidationError: If the amount is missing, malformed or negative
        """
        value = money_to_str(_required_amount(amount))

        with self._connect() as conn:
            self._require(conn, "ticket_holders", "TicketHolder", ticket_holder_id)
            self._require(conn, "games", "Game", game_id)
            cursor = conn.execute(
                "INSERT INTO payouts (ticket_holder_id, game_id, amount) VALUES (?, ?, ?)",
                (ticket_holder_id, game_id, value),
            )
            payout = _row_to_payout(self._require(conn, "payouts", "Payout", cursor.lastrowid))
            logger.info(f"Recorded payout {payout.id} of {value} to holder {ticket_holder_id} for game {game_id}")
            return payout

    def get_payouts(
        self, game_id: int | None = None, ticket_holder_id: int | None = None
    ) -> list[Payout]:
        conditions = []
        params: list[Any] = []
        if game_id is not None:
            conditions.append("game_id = ?")
            params.append(game_id)
        if ticket_holder_id is not None:
            conditions.append("ticket_holder_id = ?")
            params.append(ticket_holder_id)

        query = "SELECT * FROM payouts"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY game_id, id"

        with self._connect() as conn:
            return [_row_to_payout(row) for row in conn.execute(query, params).fetchall()]

    def record_transfer(
        self,
        from_ticket_holder_id: int,
        to_ticket_holder_id: int,
        seat_id: int,
        game_id: int,
        amount: Any,
        date: Any,
        status: TransferStatus | str = TransferStatus.PENDING,
    ) -> Transfer:
        """Record the sale of a seat's attendance rights for one game.

        Raises:
            NotFoundError: If a holder, the seat or the game does not exist
            ValidationError: If the amount, date or status is invalid, or a
                holder would transfer to themselves
        """
        if from_ticket_holder_id == to_ticket_holder_id:
            raise ValidationError(
                "A transfer needs two different ticket holders",
                from_ticket_holder_id=from_ticket_holder_id,
                to_ticket_holder_id=to_ticket_holder_id,
            )
        value = money_to_str(_required_amount(amount))
        transfer_date = parse_date(date).isoformat()
        transfer_status = _transfer_status(status)

        with self._connect() as conn:
            self._require(conn, "ticket_holders", "TicketHolder", from_ticket_holder_id)
            self._require(conn, "ticket_holders", "TicketHolder", to_ticket_holder_id)
            require_seat_for_game(conn, game_id, seat_id)
            cursor = conn.execute(
                """
                INSERT INTO transfers (
                    from_ticket_holder_id, to_ticket_holder_id, seat_id, game_id,
                    amount, date, status
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    from_ticket_holder_id,
                    to_ticket_holder_id,
                    seat_id,
                    game_id,
                    value,
                    transfer_date,
                    transfer_status.value,
                ),
            )
            transfer = _row_to_transfer(self._require(conn, "transfers", "Transfer", cursor.lastrowid))
            logger.info(
                f"Recorded {transfer.status.value} transfer {transfer.id}: seat {seat_id} game {game_id} "
                f"from holder {from_ticket_holder_id} to {to_ticket_holder_id} for {value}"
            )
            return transfer

    def get_transfer(self, transfer_id: int) -> Transfer | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM transfers WHERE id = ?", (transfer_id,)).fetchone()
            return _row_to_transfer(row) if row else None

    def get_transfers(self, game_id: int | None = None) -> list[Transfer]:
        """Get transfers, newest first, optionally for one game."""
        query = "SELECT * FROM transfers"
        params: list[Any] = []
        if game_id is not None:
            query += " WHERE game_id = ?"
            params.append(game_id)
        query += " ORDER BY date DESC, id DESC"

        with self._connect() as conn:
            return [_row_to_transfer(row) for row in conn.execute(query, params).fetchall()]

    def update_transfer_status(self, transfer_id: int, status: TransferStatus | str) -> Transfer:
        """Change a transfer's status, e.g. mark it completed once paid.

        Raises:
            NotFoundError: If the transfer does not exist
            ValidationError: If the status is unknown
        """
        new_status = _transfer_status(status)
        with self._connect() as conn:
            self._require(conn, "transfers", "Transfer", transfer_id)
            conn.execute(
                "UPDATE transfers SET status = ? WHERE id = ?", (new_status.value, transfer_id)
            )
            logger.info(f"Transfer {transfer_id} is now {new_status.value}")
            return _row_to_transfer(self._require(conn, "transfers", "Transfer", transfer_id))
