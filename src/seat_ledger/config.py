"""Runtime configuration read from the environment (and an optional .env file)."""

import logging
import os
from datetime import date, datetime
from pathlib import Path

import pytz
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "seat_ledger.db"
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def get_database_path() -> Path:
    """Get the SQLite database path from SEAT_LEDGER_DB."""
    return Path(os.getenv("SEAT_LEDGER_DB") or DEFAULT_DB_PATH)


def get_log_level() -> str:
    """Get the logging level name from LOG_LEVEL."""
    return (os.getenv("LOG_LEVEL") or "INFO").upper()


def get_log_file() -> Path | None:
    """Get the optional log file path from SEAT_LEDGER_LOG_FILE."""
    log_file = os.getenv("SEAT_LEDGER_LOG_FILE")
    return Path(log_file) if log_file else None


def get_timezone() -> pytz.BaseTzInfo:
    """Get the timezone used to decide which games have been played.

    Unknown zone names fall back to UTC.
    """
    timezone_name = os.getenv("SEAT_LEDGER_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        return pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{timezone_name}', falling back to UTC")
        return pytz.UTC


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins from SEAT_LEDGER_CORS_ORIGINS."""
    raw = os.getenv("SEAT_LEDGER_CORS_ORIGINS") or DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def local_today(tz: pytz.BaseTzInfo | None = None) -> date:
    """Today's date in the configured timezone."""
    tz = tz or get_timezone()
    return datetime.now(pytz.UTC).astimezone(tz).date()
