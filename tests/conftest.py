"""Shared pytest fixtures for schoolledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from schoolledger.config import DEFAULT_CONFIG
from schoolledger.database.factories import create_sqlite_database
from schoolledger.domain.accrual import AccrualService
from schoolledger.domain.assets import AssetService
from schoolledger.domain.category import CategoryService
from schoolledger.domain.ledger import LedgerService
from schoolledger.domain.reports import ReportingService
from schoolledger.domain.settlement import SettlementService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def seeded_db(temp_db):
    """Temporary database with the default category taxonomy installed."""
    CategoryService(temp_db).seed_defaults()
    return temp_db


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def ledger_service(seeded_db):
    return LedgerService(seeded_db, DEFAULT_CONFIG)


@pytest.fixture
def accrual_service(seeded_db):
    return AccrualService(seeded_db, DEFAULT_CONFIG)


@pytest.fixture
def settlement_service(seeded_db):
    return SettlementService(seeded_db, DEFAULT_CONFIG)


@pytest.fixture
def asset_service(seeded_db):
    return AssetService(seeded_db)


@pytest.fixture
def reporting_service(seeded_db):
    return ReportingService(seeded_db, DEFAULT_CONFIG)


@pytest.fixture
def tuition_receivable(accrual_service):
    """A 10,000 tuition receivable for Aarav."""
    return accrual_service.create_revenue(
        date=date(2024, 6, 1),
        customer="Aarav",
        category="Student Fees",
        subcategory="Tuition Fees",
        amount=Decimal("10000"),
        due_date=date(2024, 6, 30),
    )


@pytest.fixture
def electricity_payable(accrual_service):
    """A 2,500 electricity bill owed to the utility."""
    return accrual_service.create_expense(
        date=date(2024, 6, 5),
        vendor="City Power",
        category="Utilities",
        subcategory="Electricity",
        amount=Decimal("2500"),
        due_date=date(2024, 6, 20),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
