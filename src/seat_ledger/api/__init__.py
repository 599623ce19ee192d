"""HTTP API for the seat ledger."""
