"""
BigCommerce catalog product schema.
"""

from typing import Any

from pydantic import Field, field_validator

from models.base import BaseSchema
from utils.text_utils import is_blank, normalize_code


CATALOG_COLUMNS = ["id", "sku", "name"]


class CatalogProduct(BaseSchema):
    """
    Visible product from the BigCommerce catalog.

    The raw SKU is preserved; only products whose SKU is non-empty
    after trimming take part in reconciliation.
    """

    id: str = Field("", description="BigCommerce product ID")
    sku: str = Field("", description="Product SKU as stored in BigCommerce")
    name: str = Field("", description="Product name")

    @field_validator("id", "sku", "name", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> str:
        """API ids are integers and missing fields come back as null."""
        if v is None:
            return ""
        return str(v)

    @property
    def has_valid_sku(self) -> bool:
        return not is_blank(self.sku)

    @property
    def normalized_sku(self) -> str:
        return normalize_code(self.sku)

    @classmethod
    def from_api(cls, record: dict) -> "CatalogProduct":
        return cls(
            id=record.get("id"),
            sku=record.get("sku"),
            name=record.get("name"),
        )

    @classmethod
    def from_row(cls, row: dict) -> "CatalogProduct":
        return cls(id=row.get("id"), sku=row.get("sku"), name=row.get("name"))

    def to_row(self) -> dict:
        return self.model_dump()
