"""
Pipeline stage services.

Each service handles one stage.
"""

from services.registry_service import RegistryFetchService, RegistryFetchResult
from services.catalog_service import CatalogFetchService, CatalogFetchResult, partition_products
from services.reconciliation_service import (
    ReconciliationService,
    build_registry_lookup,
    reconcile,
    reconcile_product,
)
from services.update_service import UpdateService, summarize

__all__ = [
    "RegistryFetchService",
    "RegistryFetchResult",
    "CatalogFetchService",
    "CatalogFetchResult",
    "partition_products",
    "ReconciliationService",
    "build_registry_lookup",
    "reconcile",
    "reconcile_product",
    "UpdateService",
    "summarize",
]
