"""
Product update service.

Stage 4: for every flagged product, adds the sync marker custom field
in BigCommerce. The resulting store/product/updated webhook re-sends
the product to Avalara.

Per product:
    1. read existing custom fields (404 = none)
    2. marker present      -> skipped
    3. at the field limit  -> error, no create call
    4. create marker = "1" -> success, or error with the API message
Nothing is retried; a fixed delay separates products.
"""

from collections import Counter
import time
from typing import Callable, Optional
import structlog

from exceptions import ExternalServiceError, MissingInputFileError
from integrations.bigcommerce import BigCommerceClient, CUSTOM_FIELD_LIMIT
from models.reconciliation import ReconciliationResult
from models.sync_log import SyncLogEntry, SyncStatus, UpdateSummary, SYNC_LOG_COLUMNS
from services.report_service import render_update_report
from utils.tables import PipelineFiles, read_table, write_report, write_table
from utils.text_utils import leading_token

logger = structlog.get_logger(__name__)


MARKER_VALUE = "1"
MARKER_EXISTS_MESSAGE = "Custom field already exists"


def field_limit_message(limit: int = CUSTOM_FIELD_LIMIT) -> str:
    return f"Maximum custom fields limit reached ({limit})"


def summarize(entries: list[SyncLogEntry]) -> UpdateSummary:
    """
    Count outcomes and group errors by the text before their first colon.
    """
    statuses = Counter(entry.status for entry in entries)
    error_types = Counter(
        leading_token(entry.error_message)
        for entry in entries
        if entry.status == SyncStatus.ERROR
    )
    return UpdateSummary(
        success=statuses[SyncStatus.SUCCESS],
        errors=statuses[SyncStatus.ERROR],
        skipped=statuses[SyncStatus.SKIPPED],
        error_breakdown=dict(error_types),
    )


class UpdateService:
    """Adds the sync marker field to flagged products."""

    def __init__(
        self,
        client: BigCommerceClient,
        files: PipelineFiles,
        marker_name: str = "avalara_sync",
        delay_seconds: float = 0.1,
        field_limit: int = CUSTOM_FIELD_LIMIT,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.client = client
        self.files = files
        self.marker_name = marker_name
        self.delay_seconds = delay_seconds
        self.field_limit = field_limit
        self.sleep = sleep

    def load_flagged_products(self) -> list[ReconciliationResult]:
        """
        Read products-to-update.csv, keeping only rows that need an update.

        Raises:
            MissingInputFileError: If reconciliation has not run
        """
        path = self.files.products_to_update
        if not path.exists():
            raise MissingInputFileError(
                "Products to update",
                path,
                producer="the reconciliation"
            )

        rows = [ReconciliationResult.from_row(row) for row in read_table(path)]
        flagged = [r for r in rows if r.needs_update]

        if len(flagged) < len(rows):
            logger.info("dropped_rows_not_needing_update", count=len(rows) - len(flagged))

        return flagged

    def _entry(
        self,
        product: ReconciliationResult,
        status: SyncStatus,
        error_message: str = "",
        marker_added: bool = False
    ) -> SyncLogEntry:
        return SyncLogEntry(
            product_id=product.product_id,
            sku=product.sku,
            exists_in_registry=product.exists_in_registry,
            is_missing_data=product.is_missing_data,
            status=status,
            error_message=error_message,
            marker_added=marker_added,
        )

    def process_product(self, product: ReconciliationResult) -> SyncLogEntry:
        """
        Try to add the marker field to one product.

        API failures are recorded in the returned entry, never raised.
        """
        try:
            existing = self.client.get_custom_fields(product.product_id)

            if any(f.get("name") == self.marker_name for f in existing):
                logger.info("marker_already_present", product_id=product.product_id, field=self.marker_name)
                return self._entry(product, SyncStatus.SKIPPED, MARKER_EXISTS_MESSAGE)

            if len(existing) >= self.field_limit:
                logger.warning(
                    "custom_field_limit_reached",
                    product_id=product.product_id,
                    count=len(existing),
                    limit=self.field_limit
                )
                return self._entry(product, SyncStatus.ERROR, field_limit_message(self.field_limit))

            self.client.create_custom_field(product.product_id, self.marker_name, MARKER_VALUE)

        except ExternalServiceError as e:
            message = e.describe()
            logger.error("product_update_failed", product_id=product.product_id, error=message)
            return self._entry(product, SyncStatus.ERROR, message)

        logger.info("marker_added", product_id=product.product_id, field=self.marker_name)
        return self._entry(product, SyncStatus.SUCCESS, marker_added=True)

    def process(
        self,
        products: list[ReconciliationResult],
        entries: Optional[list[SyncLogEntry]] = None
    ) -> list[SyncLogEntry]:
        """
        Process products sequentially, pausing between them.

        Entries are appended to `entries` as they complete, so a caller
        still holds the finished outcomes if an unexpected error escapes.
        """
        entries = [] if entries is None else entries
        total = len(products)

        for index, product in enumerate(products, start=1):
            logger.info(
                "processing_product",
                position=f"{index}/{total}",
                sku=product.sku,
                name=product.name
            )

            entries.append(self.process_product(product))

            if index < total and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)

        return entries

    def write_sync_log(self, entries: list[SyncLogEntry]) -> None:
        write_table(self.files.sync_log, (e.to_row() for e in entries), SYNC_LOG_COLUMNS)

    def run(self) -> UpdateSummary:
        """
        Update every flagged product and write product-sync-log.csv
        plus update-summary.txt.

        Both files are rewritten on every run, including empty ones.
        If an unexpected error stops the loop, the log of the products
        finished so far is written before the error propagates.

        Returns:
            UpdateSummary (all zero when nothing needed updating)

        Raises:
            MissingInputFileError: If products-to-update.csv is absent
        """
        logger.info("starting_product_update")

        products = self.load_flagged_products()

        logger.info("products_needing_update", count=len(products))

        entries: list[SyncLogEntry] = []

        if not products:
            logger.info("no_products_need_updating")
        else:
            try:
                self.process(products, entries)
            except Exception:
                logger.exception("product_update_aborted", completed=len(entries), total=len(products))
                self.write_sync_log(entries)
                raise

        summary = summarize(entries)

        self.write_sync_log(entries)
        write_report(self.files.update_summary, render_update_report(summary))

        logger.info(
            "product_update_completed",
            path=str(self.files.sync_log),
            success=summary.success,
            errors=summary.errors,
            skipped=summary.skipped,
            total=summary.total
        )

        return summary
