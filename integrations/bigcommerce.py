"""
BigCommerce catalog integration.

Lists visible products (page/limit pagination) and reads/creates
product custom fields, which the update stage uses as a webhook trigger.
"""

from typing import Optional
import requests
import structlog

from config.settings import Settings
from exceptions import CatalogAPIError
from integrations.http import ApiClient, DEFAULT_TIMEOUT_SECONDS, unwrap_records

logger = structlog.get_logger(__name__)


# BigCommerce max limit
BIGCOMMERCE_PAGE_SIZE = 250

# Platform ceiling on custom fields per product
CUSTOM_FIELD_LIMIT = 50


class BigCommerceClient(ApiClient):
    """Client for the BigCommerce v3 catalog API."""

    service_name = "bigcommerce"
    error_class = CatalogAPIError

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        super().__init__(
            base_url=base_url,
            headers={
                "X-Auth-Token": access_token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            session=session,
        )

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "BigCommerceClient":
        return cls(
            base_url=settings.bigcommerce_base_url,
            access_token=settings.bc_access_token,
            timeout=settings.request_timeout_seconds,
            session=session,
        )

    def list_products(
        self,
        page_size: int = BIGCOMMERCE_PAGE_SIZE,
        params: Optional[dict] = None
    ) -> list[dict]:
        """
        Fetch every product matching params.

        Advances the page number until a short page comes back.
        A failed page stops pagination; products gathered so far are returned.

        Args:
            page_size: limit per request (250 max)
            params: Filters, e.g. {"is_visible": "true"}

        Returns:
            Raw BigCommerce product dicts
        """
        products: list[dict] = []
        page = 1

        while True:
            try:
                payload = self.get(
                    "/v3/catalog/products",
                    params={**(params or {}), "page": page, "limit": page_size}
                )
            except CatalogAPIError as e:
                logger.error(
                    "bigcommerce_page_failed",
                    page=page,
                    status=e.response_status,
                    error=e.message
                )
                break

            records = unwrap_records(payload, "data")
            products.extend(records)

            logger.debug("bigcommerce_page_fetched", page=page, count=len(records))

            if len(records) < page_size:
                break

            page += 1

        return products

    def list_visible_products(self, page_size: int = BIGCOMMERCE_PAGE_SIZE) -> list[dict]:
        return self.list_products(page_size=page_size, params={"is_visible": "true"})

    def get_custom_fields(self, product_id: str) -> list[dict]:
        """
        Get a product's custom fields.

        A 404 means the product has none.

        Raises:
            CatalogAPIError: Any other failure
        """
        try:
            payload = self.get(f"/v3/catalog/products/{product_id}/custom-fields")
        except CatalogAPIError as e:
            if e.response_status == 404:
                return []
            raise

        return unwrap_records(payload, "data")

    def create_custom_field(self, product_id: str, name: str, value: str) -> dict:
        """
        Add a custom field to a product.

        Returns:
            The created custom field

        Raises:
            CatalogAPIError: If the create call fails
        """
        payload = self.post(
            f"/v3/catalog/products/{product_id}/custom-fields",
            json_body={"name": name, "value": value}
        )

        logger.debug("custom_field_created", product_id=product_id, name=name)

        if isinstance(payload, dict):
            return payload.get("data") or {}
        return {}
