"""Category registry domain service."""

import logging
from typing import Optional

from schoolledger.config import DEFAULT_CONFIG, LedgerConfig
from schoolledger.database.base import Database
from schoolledger.domain.default_categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES
from schoolledger.domain.entities import (
    Category as CategoryEntity,
    CategoryKind,
    CategoryRef,
    IncomeCategoryType,
)
from schoolledger.domain.errors import (
    ConflictError,
    DuplicateSubcategoryError,
    NotFoundError,
    ValidationError,
    category_name_not_found,
    category_not_found,
    subcategory_not_found,
)
from schoolledger.domain.validation import optional_text, require_choice, require_text

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing income and expense categories."""

    def __init__(self, db: Database, config: LedgerConfig = DEFAULT_CONFIG):
        """Initialize category service.

        Args:
            db: Database instance
            config: Ledger configuration (controls strict classification)
        """
        self.db = db
        self.config = config

    def create_category(
        self,
        kind: CategoryKind | str,
        name: str,
        subcategories: tuple[str, ...] | list[str] = (),
        category_type: Optional[IncomeCategoryType | str] = None,
        description: Optional[str] = None,
    ) -> CategoryEntity:
        """Create a category.

        Args:
            kind: income or expense
            name: Category name, unique within its kind
            subcategories: Initial ordered subcategory names
            category_type: income or capital (income categories only)
            description: Optional description

        Returns:
            Created category entity

        Raises:
            ValidationError: If the name is blank, subcategories repeat, or a
                type is given for an expense category
            ConflictError: If a category with the same name exists
        """
        kind = require_choice(CategoryKind, kind, "kind")
        name = require_text(name, "name")

        type_value = None
        if category_type is not None:
            if kind != CategoryKind.INCOME:
                raise ValidationError("Only income categories have a type", field="category_type")
            type_value = require_choice(IncomeCategoryType, category_type, "category_type").value

        cleaned: list[str] = []
        for sub in subcategories:
            sub_name = require_text(sub, "subcategory")
            if sub_name in cleaned:
                raise DuplicateSubcategoryError(name, sub_name)
            cleaned.append(sub_name)

        if self.db.get_category_by_name(kind.value, name) is not None:
            raise ConflictError(f"{kind.value.capitalize()} category '{name}' already exists")

        category_id = self.db.create_category(
            kind=kind.value,
            name=name,
            subcategories=tuple(cleaned),
            category_type=type_value,
            description=optional_text(description),
        )
        logger.info("Created %s category '%s' (ID %s)", kind.value, name, category_id)
        return self.require_category(category_id)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def require_category(self, category_id: int) -> CategoryEntity:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def get_category_by_name(self, kind: CategoryKind | str, name: str) -> Optional[CategoryEntity]:
        kind = require_choice(CategoryKind, kind, "kind")
        return self.db.get_category_by_name(kind.value, name)

    def list_active(
        self,
        kind: CategoryKind | str,
        category_type: Optional[IncomeCategoryType | str] = None,
    ) -> list[CategoryEntity]:
        """List active categories of a kind, optionally filtered by type."""
        kind = require_choice(CategoryKind, kind, "kind")
        type_value = None
        if category_type is not None:
            type_value = require_choice(IncomeCategoryType, category_type, "category_type").value
        return self.db.list_categories(kind=kind.value, active_only=True, category_type=type_value)

    def list_categories(self, kind: Optional[CategoryKind | str] = None) -> list[CategoryEntity]:
        """List all categories, including retired ones."""
        kind_value = None
        if kind is not None:
            kind_value = require_choice(CategoryKind, kind, "kind").value
        return self.db.list_categories(kind=kind_value)

    def add_subcategory(self, category_id: int, name: str) -> CategoryEntity:
        """Append a subcategory.

        Matching is exact and case-sensitive, so "Furniture" and "furniture"
        are different subcategories.

        Raises:
            NotFoundError: If the category does not exist
            DuplicateSubcategoryError: If the name is already present
        """
        name = require_text(name, "subcategory")
        category = self.require_category(category_id)
        if name in category.subcategories:
            raise DuplicateSubcategoryError(category.name, name)

        self.db.add_subcategory(category_id, name)
        logger.info("Added subcategory '%s' to '%s'", name, category.name)
        return self.require_category(category_id)

    def retire(self, category_id: int) -> CategoryEntity:
        """Soft-retire a category; existing ledger rows keep its name."""
        self.require_category(category_id)
        self.db.set_category_active(category_id, False)
        return self.require_category(category_id)

    def activate(self, category_id: int) -> CategoryEntity:
        self.require_category(category_id)
        self.db.set_category_active(category_id, True)
        return self.require_category(category_id)

    def require_classification(
        self, kind: CategoryKind | str, category: str, subcategory: Optional[str] = None
    ) -> CategoryRef:
        """Resolve a (category, subcategory) pair against the registry.

        Raises:
            NotFoundError: If no active category of that kind has the name
            ValidationError: If the subcategory is not listed on the category
        """
        kind = require_choice(CategoryKind, kind, "kind")
        category = require_text(category, "category")
        subcategory = optional_text(subcategory)

        found = self.db.get_category_by_name(kind.value, category)
        if found is None or not found.is_active:
            raise NotFoundError(category_name_not_found(kind.value, category))
        if subcategory is not None and subcategory not in found.subcategories:
            raise ValidationError(subcategory_not_found(category, subcategory), field="subcategory")

        return CategoryRef(kind=kind, category=found.name, subcategory=subcategory)

    def classify(
        self, kind: CategoryKind | str, category: str, subcategory: Optional[str] = None
    ) -> CategoryRef:
        """Classification used by ledger writers.

        Validated against the registry when strict_categories is on;
        otherwise the free-text labels are accepted as given.
        """
        if self.config.strict_categories:
            return self.require_classification(kind, category, subcategory)
        return CategoryRef(
            kind=require_choice(CategoryKind, kind, "kind"),
            category=require_text(category, "category"),
            subcategory=optional_text(subcategory),
        )

    def find_unregistered(self, kind: CategoryKind | str) -> list[tuple[str, Optional[str]]]:
        """List ledger labels that do not resolve to a registered category.

        Covers rows written before strict classification or under a
        since-renamed category. Retired categories still count as registered.
        """
        kind = require_choice(CategoryKind, kind, "kind")
        registry = {cat.name: set(cat.subcategories) for cat in self.db.list_categories(kind=kind.value)}

        missing = []
        for category, subcategory in self.db.list_used_classifications(kind.value):
            known_subs = registry.get(category)
            if known_subs is None or (subcategory is not None and subcategory not in known_subs):
                missing.append((category, subcategory))
        return missing

    def register_legacy_labels(self, kind: CategoryKind | str) -> int:
        """Register every unresolved ledger label so legacy rows become valid.

        Returns:
            Number of categories created plus subcategories appended
        """
        kind = require_choice(CategoryKind, kind, "kind")
        changes = 0
        with self.db.unit_of_work():
            for category, subcategory in self.find_unregistered(kind):
                existing = self.db.get_category_by_name(kind.value, category)
                if existing is None:
                    self.db.create_category(
                        kind=kind.value,
                        name=category,
                        subcategories=(subcategory,) if subcategory else (),
                        description="Registered from legacy ledger entries",
                    )
                    changes += 1 + (1 if subcategory else 0)
                elif subcategory is not None and subcategory not in existing.subcategories:
                    self.db.add_subcategory(existing.id, subcategory)
                    changes += 1

        if changes:
            logger.info("Registered %s legacy %s labels", changes, kind.value)
        return changes

    def seed_defaults(self) -> int:
        """Create the default school taxonomy, skipping names already present.

        Returns:
            Number of categories created
        """
        created = 0
        with self.db.unit_of_work():
            for kind, defaults in (
                (CategoryKind.INCOME, INCOME_CATEGORIES),
                (CategoryKind.EXPENSE, EXPENSE_CATEGORIES),
            ):
                for name, category_type, subcategories in defaults:
                    if self.db.get_category_by_name(kind.value, name) is not None:
                        continue
                    self.db.create_category(
                        kind=kind.value,
                        name=name,
                        subcategories=tuple(subcategories),
                        category_type=category_type,
                    )
                    created += 1
        return created

    def format_category_path(self, category: str, subcategory: Optional[str]) -> str:
        """Format a classification for display (e.g., "Utilities > Water")."""
        if subcategory:
            return f"{category} > {subcategory}"
        return category
