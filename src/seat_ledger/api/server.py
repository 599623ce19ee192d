"""FastAPI server for the seat ledger."""

import logging

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import get_cors_origins, get_database_path
from ..storage.database import DatabaseManager
from ..utils.logging_config import setup_logging
from .dependencies import get_db_manager
from .routers import games, holders, payments, reports, teams

# Load environment variables
load_dotenv()
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Seat Ledger API",
    description="API for shared season-ticket ownership, pricing and owner balances",
    version="0.1.0",
)

# Add CORS middleware to allow frontend requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(teams.router)
app.include_router(holders.router)
app.include_router(games.router)
app.include_router(payments.router)
app.include_router(reports.router)

logger.info(f"Seat ledger API using database {get_database_path()}")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Seat Ledger API"}


@app.get("/api/stats")
def get_stats(db: DatabaseManager = Depends(get_db_manager)):
    """Record counts for every table."""
    return db.get_database_stats()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
