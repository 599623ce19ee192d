"""Ticket holder and seat ownership endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...exceptions import SeatLedgerError
from ...storage.database import DatabaseManager
from ..dependencies import get_db_manager
from ..errors import http_error, internal_error

logger = logging.getLogger(__name__)


class TicketHolderCreateRequest(BaseModel):
    name: str
    email: str | None = None
    notes: str | None = None


class TicketHolderUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    notes: str | None = None


class OwnershipRequest(BaseModel):
    seat_id: int
    season_id: int
    ticket_holder_id: int


# Create router
router = APIRouter(prefix="/api", tags=["ticket-holders"])


@router.get("/ticket-holders")
def list_ticket_holders(db: DatabaseManager = Depends(get_db_manager)):
    """Get all ticket holders."""
    return {"ticket_holders": [h.to_dict() for h in db.holders.get_ticket_holders()]}


@router.post("/ticket-holders", status_code=201)
def create_ticket_holder(
    request: TicketHolderCreateRequest, db: DatabaseManager = Depends(get_db_manager)
):
    """Create a ticket holder."""
    try:
        holder = db.holders.create_ticket_holder(request.name, request.email, request.notes)
        return holder.to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("creating ticket holder", e)


@router.get("/ticket-holders/by-email")
def get_ticket_holder_by_email(email: str, db: DatabaseManager = Depends(get_db_manager)):
    """Find the ticket holder linked to an account email."""
    holder = db.holders.get_ticket_holder_by_email(email)
    if holder is None:
        raise HTTPException(status_code=404, detail=f"No ticket holder with email {email}")
    return holder.to_dict()


@router.get("/ticket-holders/{holder_id}")
def get_ticket_holder(holder_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get one ticket holder."""
    holder = db.holders.get_ticket_holder(holder_id)
    if holder is None:
        raise HTTPException(status_code=404, detail=f"Ticket holder {holder_id} not found")
    return holder.to_dict()


@router.patch("/ticket-holders/{holder_id}")
def update_ticket_holder(
    holder_id: int,
    request: TicketHolderUpdateRequest,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Update a ticket holder's name, email or notes."""
    try:
        fields = request.model_dump(exclude_unset=True)
        return db.holders.update_ticket_holder(holder_id, **fields).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"updating ticket holder {holder_id}", e)


@router.get("/ownership")
def list_ownership(
    season_id: int | None = None,
    ticket_holder_id: int | None = None,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Get seat ownership records."""
    ownerships = db.ownership.get_ownerships(season_id=season_id, holder_id=ticket_holder_id)
    return {"ownerships": [o.to_dict() for o in ownerships]}


@router.post("/ownership", status_code=201)
def assign_ownership(request: OwnershipRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Assign a seat to a ticket holder for a season. 409 if the seat is taken."""
    try:
        ownership = db.assign_ownership(request.seat_id, request.season_id, request.ticket_holder_id)
        return ownership.to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("assigning seat ownership", e)


@router.get("/ownership/{season_id}/{seat_id}")
def get_owner(season_id: int, seat_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get the owner of a seat in a season; ticket_holder_id is null when unassigned."""
    holder_id = db.ownership.owner_of(seat_id, season_id)
    return {
        "season_id": season_id,
        "seat_id": seat_id,
        "ticket_holder_id": holder_id,
        "assigned": holder_id is not None,
    }


@router.delete("/ownership/{season_id}/{seat_id}")
def release_ownership(season_id: int, seat_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Remove the owner of a seat for a season."""
    if not db.ownership.release(seat_id, season_id):
        raise HTTPException(
            status_code=404, detail=f"Seat {seat_id} has no owner in season {season_id}"
        )
    return {"released": True}
