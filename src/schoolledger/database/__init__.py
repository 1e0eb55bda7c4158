"""Database layer for schoolledger application."""

from schoolledger.database.base import Database
from schoolledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
