"""Domain errors raised by the storage and analysis layers."""

from typing import Any


class SeatLedgerError(Exception):
    """Base class for errors caused by caller input.

    None of these are retried: they describe a problem with the request,
    not with the infrastructure.
    """

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a JSON-serializable dictionary."""
        return {"error": type(self).__name__, "message": self.message, **self.details}


class ConflictError(SeatLedgerError):
    """Raised when a write would violate a uniqueness constraint."""


class NotFoundError(SeatLedgerError):
    """Raised when a referenced team, season, game, seat or holder does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(SeatLedgerError):
    """Raised for malformed monetary strings, negative amounts or unknown enum values."""
