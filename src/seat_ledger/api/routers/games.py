"""Game, pricing and attendance endpoints."""

import logging
import datetime as dt
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...exceptions import SeatLedgerError
from ...storage.database import DatabaseManager
from ..dependencies import get_db_manager
from ..errors import http_error, internal_error

logger = logging.getLogger(__name__)


class GameCreateRequest(BaseModel):
    season_id: int
    date: dt.date
    opponent: str
    season_type: str | None = None
    time: str | None = None
    venue: str | None = None
    is_home: bool = True
    notes: str | None = None


class GameUpdateRequest(BaseModel):
    date: dt.date | None = None
    opponent: str | None = None
    season_type: str | None = None
    time: str | None = None
    venue: str | None = None
    is_home: bool | None = None
    notes: str | None = None


class PricingRequest(BaseModel):
    """Omitted or null fields keep their stored value."""

    cost: Decimal | None = None
    sold_price: Decimal | None = None


class AttendanceRequest(BaseModel):
    ticket_holder_id: int


# Create router
router = APIRouter(prefix="/api/games", tags=["games"])


@router.get("")
def list_games(season_id: int | None = None, db: DatabaseManager = Depends(get_db_manager)):
    """Get games in date order, optionally for one season."""
    return {"games": [game.to_dict() for game in db.games.get_games(season_id)]}


@router.post("", status_code=201)
def create_game(request: GameCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Create a game."""
    try:
        return db.games.create_game(**request.model_dump()).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("creating game", e)


@router.get("/{game_id}")
def get_game(game_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get one game."""
    game = db.games.get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return game.to_dict()


@router.patch("/{game_id}")
def update_game(game_id: int, request: GameUpdateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Update schedule details of a game."""
    try:
        fields = request.model_dump(exclude_unset=True)
        return db.games.update_game(game_id, **fields).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"updating game {game_id}", e)


@router.delete("/{game_id}")
def delete_game(game_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Delete a game that has no pricing, attendance, payouts or transfers."""
    try:
        deleted = db.games.delete_game(game_id)
    except SeatLedgerError as e:
        raise http_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return {"deleted": True}


@router.get("/{game_id}/pricing")
def get_game_pricing(game_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get every pricing record of a game. Unset values are null, not zero."""
    return {"game_id": game_id, "pricing": [p.to_dict() for p in db.pricing.pricing_for(game_id)]}


@router.put("/{game_id}/pricing/{seat_id}")
def set_game_pricing(
    game_id: int,
    seat_id: int,
    request: PricingRequest,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Create or update a seat's cost and sold price for a game."""
    try:
        pricing = db.set_game_pricing(
            game_id, seat_id, cost=request.cost, sold_price=request.sold_price
        )
        return pricing.to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"setting pricing for game {game_id} seat {seat_id}", e)


@router.get("/{game_id}/attendance")
def get_game_attendance(game_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get who is attending a game, per seat."""
    return {"game_id": game_id, "attendance": [a.to_dict() for a in db.games.get_attendance(game_id)]}


@router.put("/{game_id}/attendance/{seat_id}")
def set_attendance(
    game_id: int,
    seat_id: int,
    request: AttendanceRequest,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Set the attendee of a seat at a game."""
    try:
        return db.games.set_attendance(game_id, seat_id, request.ticket_holder_id).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"setting attendance for game {game_id} seat {seat_id}", e)


@router.post("/{game_id}/attendance/{seat_id}/toggle")
def toggle_attendance(
    game_id: int,
    seat_id: int,
    request: AttendanceRequest,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Mark a holder as attending, or unmark them if they already are."""
    try:
        attendance = db.games.toggle_attendance(game_id, seat_id, request.ticket_holder_id)
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"toggling attendance for game {game_id} seat {seat_id}", e)
    return {"attending": attendance is not None, "attendance": attendance.to_dict() if attendance else None}


@router.delete("/{game_id}/attendance/{seat_id}")
def clear_attendance(game_id: int, seat_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Remove the attendee of a seat at a game."""
    if not db.games.clear_attendance(game_id, seat_id):
        raise HTTPException(status_code=404, detail=f"No attendance for game {game_id} seat {seat_id}")
    return {"cleared": True}
