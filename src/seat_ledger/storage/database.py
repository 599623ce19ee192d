"""Database manager for SQLite storage."""

import logging
from pathlib import Path
from typing import Any

from .models import GamePricing, Payment, Payout, SeatOwnership, Transfer
from .utils.base import connect
from .utils.game_utils import GameManager
from .utils.holder_utils import TicketHolderManager
from .utils.ledger_utils import LedgerManager
from .utils.ownership_utils import OwnershipManager
from .utils.pricing_utils import PricingManager
from .utils.team_utils import TeamManager

logger = logging.getLogger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS teams (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    # (team_id, year) is deliberately not unique
    """
    CREATE TABLE IF NOT EXISTS seasons (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        team_id INTEGER NOT NULL REFERENCES teams(id),
        year INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS games (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        season_id INTEGER NOT NULL REFERENCES seasons(id),
        date DATE NOT NULL,
        time TEXT,
        opponent TEXT NOT NULL,
        season_type TEXT NOT NULL DEFAULT 'Regular Season',
        venue TEXT,
        is_home BOOLEAN DEFAULT TRUE,
        notes TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ticket_holders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT,
        notes TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS seats (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        team_id INTEGER NOT NULL REFERENCES teams(id),
        section TEXT NOT NULL,
        seat_row TEXT NOT NULL,
        number TEXT NOT NULL,
        license_cost TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS seat_ownership (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        seat_id INTEGER NOT NULL REFERENCES seats(id),
        season_id INTEGER NOT NULL REFERENCES seasons(id),
        ticket_holder_id INTEGER NOT NULL REFERENCES ticket_holders(id),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(seat_id, season_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS game_pricing (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        game_id INTEGER NOT NULL REFERENCES games(id),
        seat_id INTEGER NOT NULL REFERENCES seats(id),
        cost TEXT,
        sold_price TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(game_id, seat_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS payments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        season_id INTEGER REFERENCES seasons(id),
        ticket_holder_id INTEGER REFERENCES ticket_holders(id),
        team_id INTEGER REFERENCES teams(id),
        amount TEXT NOT NULL,
        type TEXT NOT NULL CHECK (type IN ('from_owner', 'to_owner', 'to_team', 'from_team')),
        category TEXT,
        date DATE NOT NULL,
        description TEXT,
        notes TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS payouts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        ticket_holder_id INTEGER NOT NULL REFERENCES ticket_holders(id),
        game_id INTEGER NOT NULL REFERENCES games(id),
        amount TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transfers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        from_ticket_holder_id INTEGER NOT NULL REFERENCES ticket_holders(id),
        to_ticket_holder_id INTEGER NOT NULL REFERENCES ticket_holders(id),
        seat_id INTEGER NOT NULL REFERENCES seats(id),
        game_id INTEGER NOT NULL REFERENCES games(id),
        amount TEXT NOT NULL,
        date DATE NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'completed')),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS game_attendance (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        ticket_holder_id INTEGER NOT NULL REFERENCES ticket_holders(id),
        seat_id INTEGER NOT NULL REFERENCES seats(id),
        game_id INTEGER NOT NULL REFERENCES games(id),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(game_id, seat_id)
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_seasons_team ON seasons(team_id)",
    "CREATE INDEX IF NOT EXISTS idx_games_season ON games(season_id)",
    "CREATE INDEX IF NOT EXISTS idx_games_date ON games(date)",
    "CREATE INDEX IF NOT EXISTS idx_seats_team ON seats(team_id)",
    "CREATE INDEX IF NOT EXISTS idx_ticket_holders_email ON ticket_holders(lower(email))",
    "CREATE INDEX IF NOT EXISTS idx_ownership_season ON seat_ownership(season_id)",
    "CREATE INDEX IF NOT EXISTS idx_ownership_holder ON seat_ownership(ticket_holder_id)",
    "CREATE INDEX IF NOT EXISTS idx_pricing_game ON game_pricing(game_id)",
    "CREATE INDEX IF NOT EXISTS idx_payments_season ON payments(season_id)",
    "CREATE INDEX IF NOT EXISTS idx_payments_holder ON payments(ticket_holder_id)",
    "CREATE INDEX IF NOT EXISTS idx_payouts_game ON payouts(game_id)",
    "CREATE INDEX IF NOT EXISTS idx_payouts_holder ON payouts(ticket_holder_id)",
    "CREATE INDEX IF NOT EXISTS idx_transfers_game ON transfers(game_id)",
    "CREATE INDEX IF NOT EXISTS idx_attendance_game ON game_attendance(game_id)",
]

TABLES = (
    "teams",
    "seasons",
    "games",
    "seats",
    "ticket_holders",
    "seat_ownership",
    "game_pricing",
    "payments",
    "payouts",
    "transfers",
    "game_attendance",
)


class DatabaseManager:
    """Manages SQLite database operations for the seat ledger.

    Each group of tables has its own manager; the common mutation entry
    points are also available directly on this class.
    """

    def __init__(self, db_path: str | Path = "seat_ledger.db"):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._ensure_database_exists()

        # Initialize utility managers
        self.teams = TeamManager(self.db_path)
        self.holders = TicketHolderManager(self.db_path)
        self.games = GameManager(self.db_path)
        self.ownership = OwnershipManager(self.db_path)
        self.pricing = PricingManager(self.db_path)
        self.ledger = LedgerManager(self.db_path)

    def _ensure_database_exists(self) -> None:
        """Create database and tables if they don't exist."""
        if self.db_path.parent and not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True)

        with connect(self.db_path) as conn:
            for statement in SCHEMA:
                conn.execute(statement)
            for statement in INDEXES:
                conn.execute(statement)
        logger.info(f"Database initialized at {self.db_path}")

    def assign_ownership(self, seat_id: int, season_id: int, holder_id: int) -> SeatOwnership:
        """Delegate to ownership manager."""
        return self.ownership.assign(seat_id, season_id, holder_id)

    def set_game_pricing(
        self, game_id: int, seat_id: int, cost: Any = None, sold_price: Any = None
    ) -> GamePricing:
        """Delegate to pricing manager."""
        return self.pricing.set_pricing(game_id, seat_id, cost=cost, sold_price=sold_price)

    def record_payment(self, **payment: Any) -> Payment:
        """Delegate to ledger manager."""
        return self.ledger.record_payment(**payment)

    def record_payout(self, ticket_holder_id: int, game_id: int, amount: Any) -> Payout:
        """Delegate to ledger manager."""
        return self.ledger.record_payout(ticket_holder_id, game_id, amount)

    def record_transfer(self, **transfer: Any) -> Transfer:
        """Delegate to ledger manager."""
        return self.ledger.record_transfer(**transfer)

    def get_database_stats(self) -> dict[str, int]:
        """Get record counts for every table."""
        with connect(self.db_path) as conn:
            return {
                table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in TABLES
            }
