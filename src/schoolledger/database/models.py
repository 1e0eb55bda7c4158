"""SQLAlchemy models for the schoolledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CashEntry(Base):
    """Legacy cash ledger row (income or expense)."""

    __tablename__ = "cash_entries"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    category = Column(String, nullable=False)
    subcategory = Column(String, nullable=True)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=True)
    receipt_number = Column(String, nullable=True)
    settlement_id = Column(Integer, ForeignKey("settlements.id"), nullable=True)
    recorded_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_cash_entry_amount_positive"),
        CheckConstraint("kind IN ('income', 'expense')", name="ck_cash_entry_kind"),
    )

    settlement = relationship("Settlement", back_populates="cash_entries")


class AccrualEntry(Base):
    """Accrual revenue or expense; spawns exactly one obligation."""

    __tablename__ = "accrual_entries"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    counterparty_name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    subcategory = Column(String, nullable=True)
    amount = Column(MONEY, nullable=False)
    due_date = Column(Date, nullable=True)
    description = Column(String, nullable=True)
    # Set once the obligation row exists; no FK so the two tables don't form a cycle
    linked_obligation_id = Column(Integer, nullable=True)
    recorded_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_accrual_entry_amount_positive"),
        CheckConstraint("kind IN ('revenue', 'expense')", name="ck_accrual_entry_kind"),
    )


class Obligation(Base):
    """Receivable or payable; mutated only by settlements."""

    __tablename__ = "obligations"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False, index=True)
    source_accrual_entry_id = Column(
        Integer, ForeignKey("accrual_entries.id", ondelete="SET NULL"), nullable=True
    )
    counterparty_name = Column(String, nullable=False)
    original_amount = Column(MONEY, nullable=False)
    paid_amount = Column(MONEY, nullable=False, default=0)
    balance = Column(MONEY, nullable=False)
    due_date = Column(Date, nullable=True)
    status = Column(String, nullable=False)
    description = Column(String, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("original_amount > 0", name="ck_obligation_original_positive"),
        CheckConstraint("paid_amount >= 0", name="ck_obligation_paid_non_negative"),
        CheckConstraint("balance >= 0", name="ck_obligation_balance_non_negative"),
        CheckConstraint("kind IN ('receivable', 'payable')", name="ck_obligation_kind"),
    )

    # Optimistic concurrency: UPDATE ... WHERE version = :old
    __mapper_args__ = {"version_id_col": version}

    source = relationship("AccrualEntry")
    settlements = relationship("Settlement", back_populates="obligation")


class Settlement(Base):
    """Receipt, payment, or capital injection. Immutable once written."""

    __tablename__ = "settlements"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    kind = Column(String, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    linked_obligation_id = Column(Integer, ForeignKey("obligations.id"), nullable=True)
    payment_mode = Column(String, nullable=False, default="Cash")
    document_type = Column(String, nullable=True)
    document_number = Column(String, nullable=True)
    category = Column(String, nullable=True)
    subcategory = Column(String, nullable=True)
    description = Column(String, nullable=True)
    recorded_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_settlement_amount_positive"),)

    obligation = relationship("Obligation", back_populates="settlements")
    cash_entries = relationship("CashEntry", back_populates="settlement")


class Category(Base):
    """Income or expense category with an ordered list of subcategories."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False)
    name = Column(String, nullable=False)
    category_type = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("kind", "name", name="uq_category_kind_name"),)

    subcategories = relationship(
        "Subcategory",
        back_populates="category",
        order_by="Subcategory.position",
        cascade="all, delete-orphan",
    )


class Subcategory(Base):
    """Subcategory name; position keeps insertion order."""

    __tablename__ = "subcategories"

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    name = Column(String, nullable=False)
    position = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_subcategory_name"),)

    category = relationship("Category", back_populates="subcategories")


class Asset(Base):
    """Fixed asset register row."""

    __tablename__ = "assets"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    purchase_date = Column(Date, nullable=False)
    purchase_cost = Column(MONEY, nullable=False)
    salvage_value = Column(MONEY, nullable=False, default=0)
    useful_life_years = Column(Integer, nullable=False)
    method = Column(String, nullable=False, default="Straight Line")
    description = Column(String, nullable=True)
    recorded_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("useful_life_years > 0", name="ck_asset_life_positive"),)


class Adjustment(Base):
    """Manual accrual adjustment for P&L."""

    __tablename__ = "adjustments"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=True)
    related_category = Column(String, nullable=True)
    recorded_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_adjustment_amount_positive"),)


class SalaryPayment(Base):
    """Monthly salary paid to a staff member; mirrored as a cash expense."""

    __tablename__ = "salary_payments"

    id = Column(Integer, primary_key=True)
    staff_name = Column(String, nullable=False)
    month = Column(String(7), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_mode = Column(String, nullable=False, default="Cash")
    remarks = Column(String, nullable=True)
    cash_entry_id = Column(Integer, ForeignKey("cash_entries.id"), nullable=True)
    recorded_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_salary_amount_positive"),
        UniqueConstraint("staff_name", "month", name="uq_salary_staff_month"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
