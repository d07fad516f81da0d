"""
External platform clients.
"""

from integrations.avalara import AvalaraClient, AVALARA_PAGE_SIZE
from integrations.bigcommerce import (
    BigCommerceClient,
    BIGCOMMERCE_PAGE_SIZE,
    CUSTOM_FIELD_LIMIT,
)

__all__ = [
    "AvalaraClient",
    "AVALARA_PAGE_SIZE",
    "BigCommerceClient",
    "BIGCOMMERCE_PAGE_SIZE",
    "CUSTOM_FIELD_LIMIT",
]
