"""
Avalara registry item schema.
"""

from typing import Any

from pydantic import Field, field_validator

from models.base import BaseSchema
from utils.text_utils import is_blank, normalize_code


REGISTRY_COLUMNS = ["itemCode", "itemGroup", "category"]


class RegistryItem(BaseSchema):
    """
    Item from the Avalara company item registry.

    Read-only to this system. Keyed by code (case-insensitive, trimmed).
    """

    code: str = Field("", alias="itemCode", description="Avalara item code (product SKU)")
    group: str = Field("", alias="itemGroup", description="Avalara item group")
    category: str = Field("", description="Avalara tax category")

    @field_validator("code", "group", "category", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        """Absent API fields default to empty string."""
        if v is None:
            return ""
        return str(v)

    @property
    def normalized_code(self) -> str:
        return normalize_code(self.code)

    @property
    def has_group(self) -> bool:
        return not is_blank(self.group)

    @property
    def has_category(self) -> bool:
        return not is_blank(self.category)

    @classmethod
    def from_api(cls, record: dict) -> "RegistryItem":
        """Map a raw Avalara item, ignoring every other attribute."""
        return cls(
            itemCode=record.get("itemCode"),
            itemGroup=record.get("itemGroup"),
            category=record.get("category"),
        )

    @classmethod
    def from_row(cls, row: dict) -> "RegistryItem":
        return cls(
            itemCode=row.get("itemCode"),
            itemGroup=row.get("itemGroup"),
            category=row.get("category"),
        )

    def to_row(self) -> dict:
        return self.model_dump(by_alias=True)
