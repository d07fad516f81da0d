"""
Registry fetch service.

Stage 1: pulls every Avalara item and writes avalara-items.csv.
"""

from dataclasses import dataclass, field
from pathlib import Path
import structlog

from integrations.avalara import AvalaraClient, AVALARA_PAGE_SIZE
from models.registry import RegistryItem, REGISTRY_COLUMNS
from utils.tables import PipelineFiles, write_table

logger = structlog.get_logger(__name__)


@dataclass
class RegistryFetchResult:
    """Outcome of a registry fetch."""
    output_path: Path
    items: list[RegistryItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def with_group(self) -> int:
        return sum(1 for item in self.items if item.has_group)

    @property
    def with_category(self) -> int:
        return sum(1 for item in self.items if item.has_category)


class RegistryFetchService:
    """Fetches the Avalara item registry into the pipeline's first table."""

    def __init__(
        self,
        client: AvalaraClient,
        files: PipelineFiles,
        page_size: int = AVALARA_PAGE_SIZE
    ):
        self.client = client
        self.files = files
        self.page_size = page_size

    def fetch_items(self) -> list[RegistryItem]:
        """Fetch and map every registry item."""
        logger.info("fetching_avalara_items", company_id=self.client.company_id)

        raw_items = self.client.list_items(page_size=self.page_size)

        logger.info("avalara_items_retrieved", count=len(raw_items))

        return [RegistryItem.from_api(record) for record in raw_items]

    def run(self) -> RegistryFetchResult:
        """
        Fetch the registry and write it out.

        Partial results (after a failed page) are still written.

        Returns:
            RegistryFetchResult with the written items
        """
        items = self.fetch_items()
        output_path = self.files.registry_items

        write_table(output_path, (item.to_row() for item in items), REGISTRY_COLUMNS)

        result = RegistryFetchResult(output_path=output_path, items=items)

        logger.info(
            "avalara_items_written",
            path=str(output_path),
            total=result.total,
            with_group=result.with_group,
            with_category=result.with_category
        )

        return result
