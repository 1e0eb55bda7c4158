"""Domain layer for schoolledger application."""

from importlib import import_module

_SERVICES = {
    "LedgerService": "schoolledger.domain.ledger",
    "AccrualService": "schoolledger.domain.accrual",
    "SettlementService": "schoolledger.domain.settlement",
    "CategoryService": "schoolledger.domain.category",
    "AssetService": "schoolledger.domain.assets",
    "ReportingService": "schoolledger.domain.reports",
}

__all__ = list(_SERVICES)


# Services import config and the database layer, which in turn import
# domain.errors and domain.entities, so they load on first access
def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
