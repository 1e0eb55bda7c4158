"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes (e.g., when free-text categories become
foreign keys).
"""

from schoolledger.domain import entities as domain
from schoolledger.database.models import (
    CashEntry as ORMCashEntry,
    AccrualEntry as ORMAccrualEntry,
    Obligation as ORMObligation,
    Settlement as ORMSettlement,
    Category as ORMCategory,
    Asset as ORMAsset,
    Adjustment as ORMAdjustment,
    SalaryPayment as ORMSalaryPayment,
)


def cash_entry_to_domain(orm_entry: ORMCashEntry) -> domain.CashEntry:
    """Convert SQLAlchemy CashEntry model to domain CashEntry entity."""
    return domain.CashEntry(
        id=orm_entry.id,
        kind=domain.CashEntryKind(orm_entry.kind),
        date=orm_entry.date,
        category=orm_entry.category,
        subcategory=orm_entry.subcategory,
        amount=orm_entry.amount,
        description=orm_entry.description,
        receipt_number=orm_entry.receipt_number,
        settlement_id=orm_entry.settlement_id,
        recorded_by=orm_entry.recorded_by,
        created_at=orm_entry.created_at,
    )


def accrual_entry_to_domain(orm_entry: ORMAccrualEntry) -> domain.AccrualEntry:
    """Convert SQLAlchemy AccrualEntry model to domain AccrualEntry entity."""
    return domain.AccrualEntry(
        id=orm_entry.id,
        kind=domain.AccrualEntryKind(orm_entry.kind),
        date=orm_entry.date,
        counterparty_name=orm_entry.counterparty_name,
        category=orm_entry.category,
        subcategory=orm_entry.subcategory,
        amount=orm_entry.amount,
        due_date=orm_entry.due_date,
        description=orm_entry.description,
        linked_obligation_id=orm_entry.linked_obligation_id,
        recorded_by=orm_entry.recorded_by,
        created_at=orm_entry.created_at,
    )


def obligation_to_domain(orm_obligation: ORMObligation) -> domain.Obligation:
    """Convert SQLAlchemy Obligation model to domain Obligation entity."""
    return domain.Obligation(
        id=orm_obligation.id,
        kind=domain.ObligationKind(orm_obligation.kind),
        source_accrual_entry_id=orm_obligation.source_accrual_entry_id,
        counterparty_name=orm_obligation.counterparty_name,
        original_amount=orm_obligation.original_amount,
        paid_amount=orm_obligation.paid_amount,
        balance=orm_obligation.balance,
        due_date=orm_obligation.due_date,
        status=domain.ObligationStatus(orm_obligation.status),
        description=orm_obligation.description,
        version=orm_obligation.version,
        created_at=orm_obligation.created_at,
    )


def settlement_to_domain(orm_settlement: ORMSettlement) -> domain.Settlement:
    """Convert SQLAlchemy Settlement model to domain Settlement entity."""
    return domain.Settlement(
        id=orm_settlement.id,
        date=orm_settlement.date,
        kind=domain.SettlementKind(orm_settlement.kind),
        amount=orm_settlement.amount,
        linked_obligation_id=orm_settlement.linked_obligation_id,
        payment_mode=orm_settlement.payment_mode,
        document_type=orm_settlement.document_type,
        document_number=orm_settlement.document_number,
        category=orm_settlement.category,
        subcategory=orm_settlement.subcategory,
        description=orm_settlement.description,
        recorded_by=orm_settlement.recorded_by,
        created_at=orm_settlement.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    category_type = None
    if orm_category.category_type is not None:
        category_type = domain.IncomeCategoryType(orm_category.category_type)
    return domain.Category(
        id=orm_category.id,
        kind=domain.CategoryKind(orm_category.kind),
        name=orm_category.name,
        subcategories=tuple(sub.name for sub in orm_category.subcategories),
        category_type=category_type,
        is_active=orm_category.is_active,
        description=orm_category.description,
        created_at=orm_category.created_at,
    )


def asset_to_domain(orm_asset: ORMAsset) -> domain.Asset:
    """Convert SQLAlchemy Asset model to domain Asset entity."""
    return domain.Asset(
        id=orm_asset.id,
        name=orm_asset.name,
        purchase_date=orm_asset.purchase_date,
        purchase_cost=orm_asset.purchase_cost,
        salvage_value=orm_asset.salvage_value,
        useful_life_years=orm_asset.useful_life_years,
        method=orm_asset.method,
        description=orm_asset.description,
        recorded_by=orm_asset.recorded_by,
        created_at=orm_asset.created_at,
    )


def adjustment_to_domain(orm_adjustment: ORMAdjustment) -> domain.Adjustment:
    """Convert SQLAlchemy Adjustment model to domain Adjustment entity."""
    return domain.Adjustment(
        id=orm_adjustment.id,
        type=domain.AdjustmentType(orm_adjustment.type),
        date=orm_adjustment.date,
        amount=orm_adjustment.amount,
        description=orm_adjustment.description,
        related_category=orm_adjustment.related_category,
        recorded_by=orm_adjustment.recorded_by,
        created_at=orm_adjustment.created_at,
    )


def salary_payment_to_domain(orm_payment: ORMSalaryPayment) -> domain.SalaryPayment:
    return domain.SalaryPayment(
        id=orm_payment.id,
        staff_name=orm_payment.staff_name,
        month=orm_payment.month,
        amount=orm_payment.amount,
        payment_date=orm_payment.payment_date,
        payment_mode=orm_payment.payment_mode,
        remarks=orm_payment.remarks,
        cash_entry_id=orm_payment.cash_entry_id,
        recorded_by=orm_payment.recorded_by,
        created_at=orm_payment.created_at,
    )
