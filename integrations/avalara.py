"""
Avalara AvaTax integration.

Lists the company item registry using $skip/$top pagination.
"""

from typing import Optional
import requests
import structlog

from config.settings import Settings
from exceptions import RegistryAPIError
from integrations.http import ApiClient, DEFAULT_TIMEOUT_SECONDS, unwrap_records

logger = structlog.get_logger(__name__)


# Avalara recommended page size
AVALARA_PAGE_SIZE = 100


class AvalaraClient(ApiClient):
    """Read-only client for the Avalara item registry."""

    service_name = "avalara"
    error_class = RegistryAPIError

    def __init__(
        self,
        base_url: str,
        token: str,
        company_id: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        super().__init__(
            base_url=base_url,
            headers={
                "Authorization": f"Basic {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            session=session,
        )
        self.company_id = company_id

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "AvalaraClient":
        return cls(
            base_url=settings.avalara_base_url,
            token=settings.avalara_token,
            company_id=settings.avalara_company_id,
            timeout=settings.request_timeout_seconds,
            session=session,
        )

    @property
    def items_path(self) -> str:
        return f"/api/v2/companies/{self.company_id}/items"

    def list_items(self, page_size: int = AVALARA_PAGE_SIZE, params: Optional[dict] = None) -> list[dict]:
        """
        Fetch every registry item.

        Advances $skip by page_size until a short page comes back.
        A failed page stops pagination; items gathered so far are returned.

        Args:
            page_size: $top value per request
            params: Extra query parameters (e.g. $filter)

        Returns:
            Raw Avalara item dicts
        """
        items: list[dict] = []
        skip = 0

        while True:
            try:
                payload = self.get(
                    self.items_path,
                    params={**(params or {}), "$skip": skip, "$top": page_size}
                )
            except RegistryAPIError as e:
                logger.error(
                    "avalara_page_failed",
                    skip=skip,
                    status=e.response_status,
                    error=e.message
                )
                break

            page = unwrap_records(payload, "value")
            items.extend(page)

            logger.debug("avalara_page_fetched", skip=skip, count=len(page))

            if len(page) < page_size:
                break

            skip += page_size

        return items
