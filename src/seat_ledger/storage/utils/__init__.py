"""Per-table database managers."""

from .game_utils import GameManager
from .holder_utils import TicketHolderManager
from .ledger_utils import LedgerManager
from .ownership_utils import OwnershipManager
from .pricing_utils import PricingManager
from .team_utils import TeamManager

__all__ = [
    "GameManager",
    "LedgerManager",
    "OwnershipManager",
    "PricingManager",
    "TeamManager",
    "TicketHolderManager",
]
