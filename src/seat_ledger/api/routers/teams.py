"""Team, season and seat endpoints."""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...exceptions import SeatLedgerError
from ...storage.database import DatabaseManager
from ..dependencies import get_db_manager
from ..errors import http_error, internal_error

logger = logging.getLogger(__name__)


class TeamCreateRequest(BaseModel):
    name: str


class SeasonCreateRequest(BaseModel):
    team_id: int
    year: int


class SeatCreateRequest(BaseModel):
    team_id: int
    section: str
    row: str
    number: str
    license_cost: Decimal | None = None


class SeatUpdateRequest(BaseModel):
    section: str | None = None
    row: str | None = None
    number: str | None = None
    license_cost: Decimal | None = None


# Create router
router = APIRouter(prefix="/api", tags=["teams"])


@router.get("/teams")
def list_teams(db: DatabaseManager = Depends(get_db_manager)):
    """Get all teams."""
    return {"teams": [team.to_dict() for team in db.teams.get_teams()]}


@router.post("/teams", status_code=201)
def create_team(request: TeamCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Create a team."""
    try:
        return db.teams.create_team(request.name).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("creating team", e)


@router.get("/teams/{team_id}")
def get_team(team_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get one team."""
    team = db.teams.get_team(team_id)
    if team is None:
        raise HTTPException(status_code=404, detail=f"Team {team_id} not found")
    return team.to_dict()


@router.get("/seasons")
def list_seasons(team_id: int | None = None, db: DatabaseManager = Depends(get_db_manager)):
    """Get seasons, newest first, optionally for one team."""
    return {"seasons": [season.to_dict() for season in db.teams.get_seasons(team_id)]}


@router.post("/seasons", status_code=201)
def create_season(request: SeasonCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Create a season for a team."""
    try:
        return db.teams.create_season(request.team_id, request.year).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("creating season", e)


@router.get("/seasons/{season_id}")
def get_season(season_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get one season."""
    season = db.teams.get_season(season_id)
    if season is None:
        raise HTTPException(status_code=404, detail=f"Season {season_id} not found")
    return season.to_dict()


@router.get("/seasons/{season_id}/available-seats")
def get_available_seats(season_id: int, db: DatabaseManager = Depends(get_db_manager)):
    """Get the seats of the season's team that nobody owns in this season."""
    season = db.teams.get_season(season_id)
    if season is None:
        raise HTTPException(status_code=404, detail=f"Season {season_id} not found")
    seats = db.ownership.available_seats(season_id, season.team_id)
    return {"season_id": season_id, "seats": [seat.to_dict() for seat in seats]}


@router.get("/seats")
def list_seats(team_id: int | None = None, db: DatabaseManager = Depends(get_db_manager)):
    """Get seats, optionally for one team."""
    return {"seats": [seat.to_dict() for seat in db.teams.get_seats(team_id)]}


@router.post("/seats", status_code=201)
def create_seat(request: SeatCreateRequest, db: DatabaseManager = Depends(get_db_manager)):
    """Create a seat."""
    try:
        seat = db.teams.create_seat(
            request.team_id, request.section, request.row, request.number, request.license_cost
        )
        return seat.to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error("creating seat", e)


@router.get("/seats/{seat_id}")
def get_seat(seat_id: int, db: DatabaseManager = Depends(get_db_manager)):
    seat = db.teams.get_seat(seat_id)
    if seat is None:
        raise HTTPException(status_code=404, detail=f"Seat {seat_id} not found")
    return seat.to_dict()


@router.patch("/seats/{seat_id}")
def update_seat(
    seat_id: int, request: SeatUpdateRequest, db: DatabaseManager = Depends(get_db_manager)
):
    """Update a seat that nothing references yet."""
    try:
        return db.teams.update_seat(seat_id, **request.model_dump(exclude_unset=True)).to_dict()
    except SeatLedgerError as e:
        raise http_error(e)
    except Exception as e:
        raise internal_error(f"updating seat {seat_id}", e)
