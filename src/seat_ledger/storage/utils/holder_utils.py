"""Ticket holder database operations."""

import sqlite3
from typing import Any

from ..models import TicketHolder
from .base import BaseManager, parse_timestamp
from ...exceptions import ValidationError
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

HOLDER_FIELDS = ("name", "email", "notes")


def row_to_holder(row: sqlite3.Row) -> TicketHolder:
    return TicketHolder(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        notes=row["notes"],
        created_at=parse_timestamp(row["created_at"]),
    )


def _clean_email(email: str | None) -> str | None:
    if email is None or not email.strip():
        return None
    email = email.strip()
    if "@" not in email:
        raise ValidationError(f"Invalid email address '{email}'", field="email", value=email)
    return email


class TicketHolderManager(BaseManager):
    """Manages ticket holders. Holders are never deleted."""

    def create_ticket_holder(
        self, name: str, email: str | None = None, notes: str | None = None
    ) -> TicketHolder:
        """Create a ticket holder.

        Raises:
            ValidationError: If the name is blank or the email is malformed
        """
        if not name or not name.strip():
            raise ValidationError("Ticket holder name is required", field="name")

        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO ticket_holders (name, email, notes) VALUES (?, ?, ?)",
                (name.strip(), _clean_email(email), notes),
            )
            holder = row_to_holder(self._require(conn, "ticket_holders", "TicketHolder", cursor.lastrowid))
            logger.info(f"Created ticket holder {holder.id} ({holder.name})")
            return holder

    def get_ticket_holder(self, holder_id: int) -> TicketHolder | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM ticket_holders WHERE id = ?", (holder_id,)).fetchone()
            return row_to_holder(row) if row else None

    def get_ticket_holder_by_email(self, email: str) -> TicketHolder | None:
        """Find the holder linked to an external account email (case-insensitive)."""
        if not email or not email.strip():
            return None
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM ticket_holders WHERE lower(email) = lower(?) ORDER BY id LIMIT 1",
                (email.strip(),),
            ).fetchone()
            return row_to_holder(row) if row else None

    def get_ticket_holders(self) -> list[TicketHolder]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM ticket_holders ORDER BY name, id").fetchall()
            return [row_to_holder(row) for row in rows]

    def update_ticket_holder(self, holder_id: int, **fields: Any) -> TicketHolder:
        """Update name, email or notes of a holder.

        Raises:
            NotFoundError: If the holder does not exist
            ValidationError: If an unknown field is given or values are invalid
        """
        unknown = set(fields) - set(HOLDER_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update ticket holder fields: {', '.join(sorted(unknown))}",
                fields=sorted(unknown),
            )
        if "name" in fields and (not fields["name"] or not fields["name"].strip()):
            raise ValidationError("Ticket holder name is required", field="name")
        if "email" in fields:
            fields["email"] = _clean_email(fields["email"])
        if "name" in fields:
            fields["name"] = fields["name"].strip()

        with self._connect() as conn:
            self._require(conn, "ticket_holders", "TicketHolder", holder_id)
            if fields:
                assignments = ", ".join(f"{name} = ?" for name in fields)
                conn.execute(
                    f"UPDATE ticket_holders SET {assignments} WHERE id = ?",
                    [*fields.values(), holder_id],
                )
            return row_to_holder(self._require(conn, "ticket_holders", "TicketHolder", holder_id))
