"""Fixed asset register and manual adjustment service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from schoolledger.database.base import Database
from schoolledger.domain.entities import (
    STRAIGHT_LINE,
    Adjustment as AdjustmentEntity,
    AdjustmentType,
    Asset as AssetEntity,
)
from schoolledger.domain.errors import NotFoundError, ValidationError, adjustment_not_found
from schoolledger.domain.validation import (
    optional_text,
    require_amount,
    require_choice,
    require_date,
    require_text,
)

logger = logging.getLogger(__name__)


class AssetService:
    """Service for depreciable assets and period adjustments."""

    def __init__(self, db: Database):
        """Initialize asset service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_asset(
        self,
        name: str,
        purchase_date: date,
        purchase_cost: Decimal,
        useful_life_years: int,
        salvage_value: Decimal = Decimal("0"),
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> AssetEntity:
        """Register a fixed asset depreciated on a straight-line basis.

        Args:
            name: Asset name
            purchase_date: Date the asset entered service
            purchase_cost: Cost, must be positive
            useful_life_years: Useful life in whole years, must be positive
            salvage_value: Residual value, between zero and the cost
            description: Optional description
            recorded_by: Identity of the recording user

        Returns:
            Created asset entity

        Raises:
            ValidationError: If any value is out of range
        """
        name = require_text(name, "name")
        purchase_date = require_date(purchase_date, "purchase_date")
        purchase_cost = require_amount(purchase_cost, "purchase_cost")

        if salvage_value is None or salvage_value == 0:
            salvage_value = Decimal("0")
        else:
            salvage_value = require_amount(salvage_value, "salvage_value")
        if salvage_value > purchase_cost:
            raise ValidationError(
                "salvage_value must be between zero and the purchase cost", field="salvage_value"
            )

        if isinstance(useful_life_years, bool) or not isinstance(useful_life_years, int) or useful_life_years <= 0:
            raise ValidationError(
                "useful_life_years must be a whole number greater than zero", field="useful_life_years"
            )

        asset_id = self.db.create_asset(
            name=name,
            purchase_date=purchase_date,
            purchase_cost=purchase_cost,
            salvage_value=salvage_value,
            useful_life_years=useful_life_years,
            method=STRAIGHT_LINE,
            description=optional_text(description),
            recorded_by=recorded_by,
        )
        logger.info("Registered asset %s '%s' costing %s", asset_id, name, purchase_cost)
        return self.db.get_asset(asset_id)

    def get_asset(self, asset_id: int) -> Optional[AssetEntity]:
        return self.db.get_asset(asset_id)

    def list_assets(self) -> list[AssetEntity]:
        """List assets, most recent purchase first."""
        return self.db.list_assets()

    def add_adjustment(
        self,
        type: AdjustmentType | str,
        date: date,
        amount: Decimal,
        description: Optional[str] = None,
        related_category: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> AdjustmentEntity:
        """Record a manual accrual adjustment for the cash-basis P&L.

        Raises:
            ValidationError: If the type is unknown, the date is missing or
                the amount is not positive
        """
        adjustment_type = require_choice(AdjustmentType, type, "type")
        adjustment_date = require_date(date)
        amount = require_amount(amount)

        adjustment_id = self.db.create_adjustment(
            type=adjustment_type.value,
            date=adjustment_date,
            amount=amount,
            description=optional_text(description),
            related_category=optional_text(related_category),
            recorded_by=recorded_by,
        )
        logger.info("Recorded %s adjustment %s of %s", adjustment_type.value, adjustment_id, amount)
        return self.db.get_adjustment(adjustment_id)

    def list_adjustments(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[AdjustmentEntity]:
        return self.db.list_adjustments(start_date=start_date, end_date=end_date)

    def delete_adjustment(self, adjustment_id: int) -> None:
        """Delete an adjustment.

        Raises:
            NotFoundError: If the adjustment does not exist
        """
        if self.db.get_adjustment(adjustment_id) is None:
            raise NotFoundError(adjustment_not_found(adjustment_id))
        self.db.delete_adjustment(adjustment_id)
        logger.info("Deleted adjustment %s", adjustment_id)
