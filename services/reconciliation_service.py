"""
Reconciliation service.

Stage 3: compares the catalog against the registry and writes the
products that need a registry update.

Matching key: SKU / item code, trimmed and lowercased.
Flag reasons are mutually exclusive:
    - not registered (absent from the registry)
    - registered but missing itemGroup and/or category
"""

from collections import Counter
from typing import Optional
import structlog

from exceptions import MissingInputFileError
from models.catalog import CatalogProduct
from models.reconciliation import (
    MissingField,
    ReconciliationResult,
    ReconciliationSummary,
    RECONCILIATION_COLUMNS,
    NOT_REGISTERED_REASON,
    MISSING_FIELDS_REASON,
)
from models.registry import RegistryItem
from services.report_service import render_reconciliation_report
from utils.tables import PipelineFiles, read_table, write_report, write_table

logger = structlog.get_logger(__name__)


def build_registry_lookup(items: list[RegistryItem]) -> dict[str, RegistryItem]:
    """
    Index registry items by normalized code.

    Items with blank codes are ignored; on duplicate codes the last one wins.
    """
    lookup: dict[str, RegistryItem] = {}
    for item in items:
        key = item.normalized_code
        if key:
            lookup[key] = item
    return lookup


def find_missing_fields(item: RegistryItem) -> list[MissingField]:
    """Required registry attributes that are blank after trimming."""
    missing = []
    if not item.has_group:
        missing.append(MissingField.ITEM_GROUP)
    if not item.has_category:
        missing.append(MissingField.CATEGORY)
    return missing


def reconcile_product(
    product: CatalogProduct,
    lookup: dict[str, RegistryItem]
) -> Optional[ReconciliationResult]:
    """
    Compare one catalog product against the registry.

    Returns:
        ReconciliationResult when the product needs an update,
        None when it is registered with complete data
    """
    item = lookup.get(product.normalized_sku)

    if item is None:
        return ReconciliationResult(
            product_id=product.id,
            sku=product.sku,
            name=product.name,
            exists_in_registry=False,
            reason=NOT_REGISTERED_REASON,
        )

    missing = find_missing_fields(item)
    if not missing:
        return None

    field_list = ", ".join(f.value for f in missing)
    return ReconciliationResult(
        product_id=product.id,
        sku=product.sku,
        name=product.name,
        exists_in_registry=True,
        is_missing_data=True,
        missing_fields=missing,
        registry_group=item.group,
        registry_category=item.category,
        reason=f"{MISSING_FIELDS_REASON}: {field_list}",
    )


def reconcile(
    registry_items: list[RegistryItem],
    products: list[CatalogProduct]
) -> tuple[list[ReconciliationResult], ReconciliationSummary]:
    """
    Reconcile the whole catalog against the registry.

    Output order follows catalog order. Products with blank SKUs
    (a hand-edited input) are skipped.

    Returns:
        (flagged products, summary counts)
    """
    lookup = build_registry_lookup(registry_items)

    logger.info("registry_lookup_built", size=len(lookup))

    summary = ReconciliationSummary(
        total_products=len(products),
        total_registry_items=len(registry_items),
    )
    results: list[ReconciliationResult] = []
    field_counts: Counter = Counter()

    for product in products:
        if not product.has_valid_sku:
            logger.warning("skipping_product_without_sku", product_id=product.id)
            continue

        result = reconcile_product(product, lookup)

        if result is None:
            summary.complete += 1
        elif not result.exists_in_registry:
            summary.missing_in_registry += 1
            results.append(result)
        else:
            summary.missing_data += 1
            field_counts.update(f.value for f in result.missing_fields)
            results.append(result)

    summary.missing_field_breakdown = dict(field_counts)

    return results, summary


class ReconciliationService:
    """Runs the reconcile stage over the pipeline files."""

    def __init__(self, files: PipelineFiles):
        self.files = files

    def check_inputs(self) -> None:
        """
        Raises:
            MissingInputFileError: If either fetcher output is absent
        """
        if not self.files.registry_items.exists():
            raise MissingInputFileError(
                "Avalara items",
                self.files.registry_items,
                producer="the Avalara items fetch"
            )
        if not self.files.catalog_products.exists():
            raise MissingInputFileError(
                "BigCommerce products",
                self.files.catalog_products,
                producer="the BigCommerce products fetch"
            )

    def run(self) -> ReconciliationSummary:
        """
        Reconcile the fetched files and write products-to-update.csv
        plus reconciliation-summary.txt.

        Returns:
            ReconciliationSummary

        Raises:
            MissingInputFileError: If a prerequisite file is absent
        """
        self.check_inputs()

        logger.info("starting_reconciliation")

        registry_items = [RegistryItem.from_row(row) for row in read_table(self.files.registry_items)]
        products = [CatalogProduct.from_row(row) for row in read_table(self.files.catalog_products)]

        logger.info(
            "reconciliation_inputs_loaded",
            avalara_items=len(registry_items),
            bigcommerce_products=len(products)
        )

        results, summary = reconcile(registry_items, products)

        write_table(
            self.files.products_to_update,
            (r.to_row() for r in results),
            RECONCILIATION_COLUMNS
        )
        write_report(self.files.reconciliation_summary, render_reconciliation_report(summary))

        logger.info(
            "reconciliation_completed",
            path=str(self.files.products_to_update),
            missing_in_avalara=summary.missing_in_registry,
            missing_data=summary.missing_data,
            complete=summary.complete,
            products_to_update=summary.products_to_update
        )

        return summary
