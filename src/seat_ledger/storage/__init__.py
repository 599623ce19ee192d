"""Data storage and persistence module."""

from .database import DatabaseManager
from .models import (
    Game,
    GameAttendance,
    GamePricing,
    Payment,
    PaymentCategory,
    PaymentType,
    Payout,
    Season,
    SeasonType,
    Seat,
    SeatOwnership,
    Team,
    TicketHolder,
    Transfer,
    TransferStatus,
)

__all__ = [
    "DatabaseManager",
    "Game",
    "GameAttendance",
    "GamePricing",
    "Payment",
    "PaymentCategory",
    "PaymentType",
    "Payout",
    "Season",
    "SeasonType",
    "Seat",
    "SeatOwnership",
    "Team",
    "TicketHolder",
    "Transfer",
    "TransferStatus",
]
