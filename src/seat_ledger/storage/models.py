"""Database models for teams, seats, seasons and the ledgers that join them."""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from ..exceptions import ValidationError
from ..utils.data_helpers import money_to_str, seat_label


class SeasonType(Enum):
    """Part of the season a game belongs to."""

    PRESEASON = "Preseason"
    REGULAR = "Regular Season"
    POSTSEASON = "Postseason"

    @classmethod
    def from_string(cls, season_type_str: str | None) -> "SeasonType":
        """Create SeasonType from a full or short tag ("Pre", "Regular", "Post")."""
        if not season_type_str:
            return cls.REGULAR
        try:
            return cls(season_type_str)
        except ValueError:
            aliases = {
                "pre": cls.PRESEASON,
                "preseason": cls.PRESEASON,
                "regular": cls.REGULAR,
                "regular season": cls.REGULAR,
                "post": cls.POSTSEASON,
                "postseason": cls.POSTSEASON,
                "playoffs": cls.POSTSEASON,
            }
            season_type = aliases.get(season_type_str.strip().lower())
            if season_type is None:
                raise ValidationError(
                    f"Unknown season type '{season_type_str}'", season_type=season_type_str
                )
            return season_type


class PaymentType(Enum):
    """Direction of a payment relative to the ticket-holder pool."""

    FROM_OWNER = "from_owner"
    TO_OWNER = "to_owner"
    TO_TEAM = "to_team"
    FROM_TEAM = "from_team"


class PaymentCategory(Enum):
    """Common payment categories. Free-text categories are also stored."""

    SEAT_LICENSE = "seat_license"
    SEASON_FEE = "season_fee"
    CONCESSIONS = "concessions"
    MERCHANDISE = "merchandise"
    PARKING = "parking"
    OTHER = "other"


class TransferStatus(Enum):
    """Settlement state of a transfer. Only completed transfers move cash."""

    PENDING = "pending"
    COMPLETED = "completed"


def _serialize(record: Any) -> dict[str, Any]:
    """asdict() with dates, Decimals and enums rendered for JSON."""
    result = asdict(record)
    for key, value in result.items():
        if isinstance(value, (date, datetime)):
            result[key] = value.isoformat()
        elif isinstance(value, Decimal):
            result[key] = money_to_str(value)
        elif isinstance(value, Enum):
            result[key] = value.value
    return result


@dataclass
class Team:
    """A team whose seats are held by the group."""

    name: str
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class Season:
    """One season of a team. A team may have several seasons with the same year."""

    team_id: int
    year: int
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class Game:
    """A scheduled game within a season."""

    season_id: int
    date: date
    opponent: str
    season_type: SeasonType = SeasonType.REGULAR
    time: str | None = None
    venue: str | None = None
    is_home: bool = True
    notes: str | None = None
    id: int | None = None
    created_at: datetime | None = None

    def is_played(self, today: date) -> bool:
        """Whether the game date is on or before the given day."""
        return self.date <= today

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class Seat:
    """A physical seat and the one-time license paid for it."""

    team_id: int
    section: str
    row: str
    number: str
    license_cost: Decimal | None = None
    id: int | None = None
    created_at: datetime | None = None

    @property
    def label(self) -> str:
        """Composite human-readable seat address."""
        return seat_label(self.section, self.row, self.number)

    def to_dict(self) -> dict[str, Any]:
        result = _serialize(self)
        result["label"] = self.label
        return result


@dataclass
class TicketHolder:
    """A member of the group. Email is used to match an external account."""

    name: str
    email: str | None = None
    notes: str | None = None
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class SeatOwnership:
    """Season-long assignment of a seat to one ticket holder."""

    seat_id: int
    season_id: int
    ticket_holder_id: int
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class GamePricing:
    """Cost and resale price of one seat at one game.

    Both fields are independently optional: None means no value was recorded,
    which is not the same as a recorded zero.
    """

    game_id: int
    seat_id: int
    cost: Decimal | None = None
    sold_price: Decimal | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_pricing(self) -> bool:
        """Whether a pricing decision was recorded for this seat."""
        return self.cost is not None or self.sold_price is not None

    @property
    def profit(self) -> Decimal | None:
        """sold_price - cost, or None when nothing was recorded."""
        if not self.has_pricing:
            return None
        return (self.sold_price or Decimal("0")) - (self.cost or Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class Payment:
    """A dated money movement between a holder (or the pool) and a team."""

    amount: Decimal
    type: PaymentType
    date: date
    season_id: int | None = None
    ticket_holder_id: int | None = None
    team_id: int | None = None
    category: str | None = None
    description: str | None = None
    notes: str | None = None
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class Payout:
    """Money disbursed to a ticket holder for a specific game."""

    ticket_holder_id: int
    game_id: int
    amount: Decimal
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class Transfer:
    """Sale of one game's attendance rights for a seat from one holder to another."""

    from_ticket_holder_id: int
    to_ticket_holder_id: int
    seat_id: int
    game_id: int
    amount: Decimal
    date: date
    status: TransferStatus = TransferStatus.PENDING
    id: int | None = None
    created_at: datetime | None = None

    @property
    def is_settled(self) -> bool:
        return self.status is TransferStatus.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)


@dataclass
class GameAttendance:
    """Who occupied a seat at a game. Independent of ownership."""

    ticket_holder_id: int
    seat_id: int
    game_id: int
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _serialize(self)
