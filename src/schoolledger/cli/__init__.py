"""CLI layer for schoolledger application."""
