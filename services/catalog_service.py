"""
Catalog fetch service.

Stage 2: pulls every visible BigCommerce product, drops those without
a usable SKU, and writes bc-products.csv.
"""

from dataclasses import dataclass, field
from pathlib import Path
import structlog

from integrations.bigcommerce import BigCommerceClient, BIGCOMMERCE_PAGE_SIZE
from models.catalog import CatalogProduct, CATALOG_COLUMNS
from utils.tables import PipelineFiles, write_table

logger = structlog.get_logger(__name__)


@dataclass
class CatalogFetchResult:
    """Outcome of a catalog fetch."""
    output_path: Path
    valid: list[CatalogProduct] = field(default_factory=list)
    invalid: list[CatalogProduct] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.invalid)


def partition_products(
    products: list[CatalogProduct]
) -> tuple[list[CatalogProduct], list[CatalogProduct]]:
    """Split products into (valid SKU, blank SKU), preserving order."""
    valid = [p for p in products if p.has_valid_sku]
    invalid = [p for p in products if not p.has_valid_sku]
    return valid, invalid


class CatalogFetchService:
    """Fetches visible catalog products into the pipeline's second table."""

    def __init__(
        self,
        client: BigCommerceClient,
        files: PipelineFiles,
        page_size: int = BIGCOMMERCE_PAGE_SIZE
    ):
        self.client = client
        self.files = files
        self.page_size = page_size

    def fetch_products(self) -> list[CatalogProduct]:
        """Fetch and map every visible product."""
        logger.info("fetching_bigcommerce_products")

        raw_products = self.client.list_visible_products(page_size=self.page_size)

        logger.info("bigcommerce_products_retrieved", count=len(raw_products))

        return [CatalogProduct.from_api(record) for record in raw_products]

    def run(self) -> CatalogFetchResult:
        """
        Fetch the catalog and write the products with valid SKUs.

        Products with blank SKUs are logged one by one and left out.

        Returns:
            CatalogFetchResult with valid and invalid products
        """
        valid, invalid = partition_products(self.fetch_products())

        if invalid:
            logger.warning("products_without_valid_sku", count=len(invalid))
            for product in invalid:
                logger.warning(
                    "invalid_product_sku",
                    product_id=product.id,
                    name=product.name,
                    sku=product.sku
                )

        output_path = self.files.catalog_products
        write_table(output_path, (p.to_row() for p in valid), CATALOG_COLUMNS)

        logger.info(
            "bigcommerce_products_written",
            path=str(output_path),
            valid=len(valid),
            invalid=len(invalid)
        )

        return CatalogFetchResult(output_path=output_path, valid=valid, invalid=invalid)
