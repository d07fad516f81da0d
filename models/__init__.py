"""
Pydantic models for the pipeline records and reports.
"""

from models.base import BaseSchema
from models.registry import RegistryItem, REGISTRY_COLUMNS
from models.catalog import CatalogProduct, CATALOG_COLUMNS
from models.reconciliation import (
    MissingField,
    ReconciliationResult,
    ReconciliationSummary,
    RECONCILIATION_COLUMNS,
    NOT_REGISTERED_REASON,
    MISSING_FIELDS_REASON,
)
from models.sync_log import (
    SyncStatus,
    SyncLogEntry,
    UpdateSummary,
    SYNC_LOG_COLUMNS,
)

__all__ = [
    # Base
    "BaseSchema",

    # Registry
    "RegistryItem",
    "REGISTRY_COLUMNS",

    # Catalog
    "CatalogProduct",
    "CATALOG_COLUMNS",

    # Reconciliation
    "MissingField",
    "ReconciliationResult",
    "ReconciliationSummary",
    "RECONCILIATION_COLUMNS",
    "NOT_REGISTERED_REASON",
    "MISSING_FIELDS_REASON",

    # Sync log
    "SyncStatus",
    "SyncLogEntry",
    "UpdateSummary",
    "SYNC_LOG_COLUMNS",
]
