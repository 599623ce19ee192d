"""Payment, payout and transfer endpoints."""

import datetime as dt
import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...exceptions import SeatLedgerError
from ...storage.database import DatabaseManager
from ..dependencies import get_db_manager
from ..errors import http_error, internal_error

logger = logging.getLogger(__name__)


class PaymentCreateRequest(BaseModel):
    amount: Decimal
    type: str
    date: dt.date
    season_id: int | None = None
    ticket_holder_id: int | None = None
    team_id: int | None = None
    category: str | None = None
    description: str | None = None
    notes: str | None = None


class PaymentUpdateRequest(BaseModel):
    amount: Decimal | None = None
    type: str | None = None
    date: dt.date | None = None
    season_id: int | None = None
    ticket_holder_id: int | None = None
    team_id: int | None = None
    category: str | None = None
    description: str | None = None
    notes: str | None = None


class PayoutCreateRequest(BaseModel):
    ticket_holder_id: int
    game_id: int
    amount: Decimal


class TransferCreateRequest(BaseModel):
    from_ticket_holder_id: int
    to_ticket_holder_id: int
    seat_id: int
    game_id: int
    amount: Decimal
    date: dt.date
    status: str = "pending"


class TransferStatusRequest(BaseModel):
    status: str


# Create router
router = APIRouter(prefix="/api", tags=["payments"])


@router.get("/payments")
def list_payments(
    season_id: int | None = None,
    ticket_holder_id: int | None = None,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Get payments, newest first."""
    payments = db.ledger.get_payments(season_id=season_id, ticket_holder_id=ticket_holder_id)
    return {"payments": [p.to_dict() for p in payments]}


@router.post("/payments", status_code=201)
def record_payment(request: PaymentCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Record a payment. season_id may be omitted for one-time payments."""
    try:
        return db.record_payment(**request.model_dump()).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("recording payment", e)


@router.patch("/payments/{payment_id}")
def update_payment(
    payment_id: int, request: PaymentUpdateRequest, db: DatabaseManager = Depends(get_db_manager)
):
    """Update fields of a payment."""
    try:
        fields = request.model_dump(exclude_unset=True)
        return db.ledger.update_payment(payment_id, **fields).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"updating payment {payment_id}", e)


@router.delete("/payments/{payment_id}")
def delete_payment(payment_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Delete a payment."""
    if not db.ledger.delete_payment(payment_id):
        raise HTTPException(status_code=404, detail=f"Payment {payment_id} not found")
    return {"deleted": True}


@router.get("/payouts")
def list_payouts(
    game_id: int | None = None,
    ticket_holder_id: int | None = None,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Get payouts, optionally for one game and/or holder."""
    payouts = db.ledger.get_payouts(game_id=game_id, ticket_holder_id=ticket_holder_id)
    return {"payouts": [p.to_dict() for p in payouts]}


@router.post("/payouts", status_code=201)
def record_payout(request: PayoutCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Record a payout to a holder for a game."""
    try:
        return db.record_payout(request.ticket_holder_id, request.game_id, request.amount).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("recording payout", e)


@router.get("/transfers")
def list_transfers(game_id: int | None = None, db: DatabaseManager = Depends(get_db_manager)):
    """Get transfers, newest first."""
    return {"transfers": [t.to_dict() for t in db.ledger.get_transfers(game_id)]}


@router.post("/transfers", status_code=201)
def record_transfer(request: TransferCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Record a transfer of one game's seat between holders."""
    try:
        return db.record_transfer(**request.model_dump()).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("recording transfer", e)


@router.get("/transfers/{transfer_id}")
def get_transfer(transfer_id: int, db: DatabaseManager = Depends(get_db_manager)):
    transfer = db.ledger.get_transfer(transfer_id)
    if transfer is None:
        raise HTTPException(status_code=404, detail=f"Transfer {transfer_id} not found")
    return transfer.to_dict()


@router.patch("/transfers/{transfer_id}/status")
def update_transfer_status(
    transfer_id: int, request: TransferStatusRequest, db: DatabaseManager = Depends(get_db_manager)
):
    """Change a transfer's status. Only completed transfers count as settled cash."""
    try:
        return db.ledger.update_transfer_status(transfer_id, request.status).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"updating transfer {transfer_id}", e)
