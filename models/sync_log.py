"""
Update stage schemas: one SyncLogEntry per attempted product.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import Field

from models.base import BaseSchema
from utils.text_utils import to_yes_no


SYNC_LOG_COLUMNS = [
    "product_id",
    "sku",
    "exists_in_avalara",
    "is_missing_data",
    "status",
    "timestamp",
    "error_message",
    "custom_field_added",
]


class SyncStatus(str, Enum):
    """Outcome of one update attempt."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


class SyncLogEntry(BaseSchema):
    """Outcome of adding the marker field to one product."""

    product_id: str
    sku: str
    exists_in_registry: bool
    is_missing_data: bool
    status: SyncStatus
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error_message: str = ""
    marker_added: bool = False

    def to_row(self) -> dict:
        return {
            "product_id": self.product_id,
            "sku": self.sku,
            "exists_in_avalara": to_yes_no(self.exists_in_registry),
            "is_missing_data": to_yes_no(self.is_missing_data),
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "error_message": self.error_message,
            "custom_field_added": to_yes_no(self.marker_added),
        }


class UpdateSummary(BaseSchema):
    """Aggregate counts for the update report."""

    success: int = 0
    errors: int = 0
    skipped: int = 0
    error_breakdown: dict[str, int] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total(self) -> int:
        return self.success + self.errors + self.skipped
