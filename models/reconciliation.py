"""
Reconciliation schemas.

One ReconciliationResult per catalog product that is missing from the
registry or registered with incomplete data. Complete products are
never materialized.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import Field, model_validator

from models.base import BaseSchema
from utils.text_utils import from_yes_no, to_yes_no


RECONCILIATION_COLUMNS = [
    "product_id",
    "sku",
    "name",
    "exists_in_avalara",
    "is_missing_data",
    "missing_fields",
    "avalara_item_group",
    "avalara_category",
    "reason",
]

NOT_REGISTERED_REASON = "Product not registered in Avalara"
MISSING_FIELDS_REASON = "Missing required fields"


class MissingField(str, Enum):
    """Registry attributes required for tax classification."""
    ITEM_GROUP = "itemGroup"
    CATEGORY = "category"


class ReconciliationResult(BaseSchema):
    """Catalog product flagged for a registry update."""

    product_id: str
    sku: str
    name: str = ""
    exists_in_registry: bool
    is_missing_data: bool = False
    missing_fields: list[MissingField] = Field(default_factory=list)
    registry_group: str = ""
    registry_category: str = ""
    reason: str = ""

    @model_validator(mode="after")
    def absent_is_never_incomplete(self) -> "ReconciliationResult":
        """A product missing from the registry cannot also be missing data."""
        if not self.exists_in_registry and self.is_missing_data:
            raise ValueError("is_missing_data requires exists_in_registry")
        return self

    @property
    def needs_update(self) -> bool:
        return not self.exists_in_registry or self.is_missing_data

    def to_row(self) -> dict:
        return {
            "product_id": self.product_id,
            "sku": self.sku,
            "name": self.name,
            "exists_in_avalara": to_yes_no(self.exists_in_registry),
            "is_missing_data": to_yes_no(self.is_missing_data),
            "missing_fields": ", ".join(f.value for f in self.missing_fields),
            "avalara_item_group": self.registry_group,
            "avalara_category": self.registry_category,
            "reason": self.reason,
        }

    @classmethod
    def from_row(cls, row: dict) -> "ReconciliationResult":
        """Rebuild from a products-to-update row (possibly hand-edited)."""
        exists = from_yes_no(row.get("exists_in_avalara"))
        known = {f.value for f in MissingField}
        missing = [
            MissingField(name.strip())
            for name in (row.get("missing_fields") or "").split(",")
            if name.strip() in known
        ]
        return cls(
            product_id=row.get("product_id") or "",
            sku=row.get("sku") or "",
            name=row.get("name") or "",
            exists_in_registry=exists,
            is_missing_data=exists and from_yes_no(row.get("is_missing_data")),
            missing_fields=missing,
            registry_group=row.get("avalara_item_group") or "",
            registry_category=row.get("avalara_category") or "",
            reason=row.get("reason") or "",
        )


class ReconciliationSummary(BaseSchema):
    """Aggregate counts for the reconciliation report."""

    total_products: int = 0
    total_registry_items: int = 0
    missing_in_registry: int = 0
    missing_data: int = 0
    complete: int = 0
    missing_field_breakdown: dict[str, int] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def products_to_update(self) -> int:
        return self.missing_in_registry + self.missing_data
