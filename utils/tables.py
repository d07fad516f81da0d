"""
Intermediate table files shared between stages.

Every stage reads and writes flat CSV files in one output directory.
All cells are read back as strings; blank cells are empty strings.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union
import structlog

import pandas as pd
from pandas.errors import EmptyDataError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PipelineFiles:
    """Well-known file locations inside the output directory."""
    output_dir: Path

    @property
    def registry_items(self) -> Path:
        return self.output_dir / "avalara-items.csv"

    @property
    def catalog_products(self) -> Path:
        return self.output_dir / "bc-products.csv"

    @property
    def products_to_update(self) -> Path:
        return self.output_dir / "products-to-update.csv"

    @property
    def reconciliation_summary(self) -> Path:
        return self.output_dir / "reconciliation-summary.txt"

    @property
    def sync_log(self) -> Path:
        return self.output_dir / "product-sync-log.csv"

    @property
    def update_summary(self) -> Path:
        return self.output_dir / "update-summary.txt"


def ensure_output_dir(output_dir: Union[str, Path]) -> Path:
    """Create the output directory if needed and return it."""
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_table(path: Union[str, Path], rows: Iterable[dict], columns: list[str]) -> int:
    """
    Write rows to CSV with a fixed column order.

    The header is always written, even for zero rows.

    Returns:
        Number of rows written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(list(rows), columns=columns)
    df.to_csv(path, index=False)

    logger.debug("table_written", path=str(path), rows=len(df))
    return len(df)


def read_table(path: Union[str, Path]) -> list[dict]:
    """
    Read a CSV written by write_table (or edited by hand).

    Returns:
        One dict per row, all values as strings
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except EmptyDataError:
        logger.warning("table_empty", path=str(path))
        return []

    logger.debug("table_read", path=str(path), rows=len(df))
    return df.to_dict(orient="records")


def write_report(path: Union[str, Path], text: str) -> Path:
    """Write a human-readable summary report."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
