"""Translation of domain errors into HTTP errors."""

import logging

from fastapi import HTTPException

from ..exceptions import ConflictError, NotFoundError, SeatLedgerError, ValidationError

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[SeatLedgerError], int] = {
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 422,
}


def http_error(error: SeatLedgerError) -> HTTPException:
    """Map a domain error to an HTTPException carrying its identifiers."""
    status_code = next(
        (code for error_type, code in STATUS_CODES.items() if isinstance(error, error_type)),
        400,
    )
    return HTTPException(status_code=status_code, detail=error.to_dict())


def internal_error(action: str, error: Exception) -> HTTPException:
    """Log an unexpected failure and build a 500 response."""
    logger.error(f"Error {action}: {error}")
    return HTTPException(status_code=500, detail=f"Failed {action}")
