"""
Catalog Sync — command line entry point.

Reconciles the BigCommerce catalog against the Avalara item registry
and flags gaps by adding a sync custom field to products.

Usage:
    # Whole pipeline
    catalog-sync all

    # Single stages (each needs the previous stage's output file)
    catalog-sync fetch-avalara
    catalog-sync fetch-bigcommerce
    catalog-sync reconcile
    catalog-sync update --output-dir ./output
"""

import argparse
import sys
from typing import Optional

import structlog

from config import configure_logging, load_settings
from exceptions import AppError, ConfigurationError
from services.pipeline import STAGE_NAMES, STAGE_ORDER, run_all, run_stage

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-sync",
        description="Reconcile BigCommerce products with Avalara items and trigger re-syncs."
    )
    parser.add_argument(
        "stage",
        choices=STAGE_ORDER + ["all"],
        help="Stage to run, or 'all' for the full pipeline in order",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for intermediate files and reports (default: OUTPUT_DIR or ./output)",
    )
    return parser


def run(stage: str, output_dir: Optional[str] = None) -> int:
    """
    Configure logging and settings, run the stage, return the exit code.

    Per-product update failures are part of a successful run; only
    fatal errors return 1.
    """
    configure_logging()

    overrides = {"output_dir": output_dir} if output_dir else {}
    try:
        settings = load_settings(**overrides)
    except ConfigurationError as e:
        logger.error("configuration_invalid", missing=e.missing, invalid=e.invalid)
        print(f"ERROR: {e.message}", file=sys.stderr)
        print("Please copy env.example to .env and fill in the required values.", file=sys.stderr)
        return 1

    configure_logging(settings.log_level, json_logs=settings.is_production)

    label = "Full pipeline" if stage == "all" else STAGE_NAMES[stage]

    try:
        if stage == "all":
            run_all(settings)
        else:
            run_stage(stage, settings)
    except AppError as e:
        logger.error("stage_failed", stage=stage, code=e.code, error=e.message, details=e.details)
        print(f"{label} failed: {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("stage_crashed", stage=stage, error=str(e))
        print(f"{label} failed: {e}", file=sys.stderr)
        return 1

    logger.info("run_completed", stage=stage)
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    sys.exit(run(args.stage, args.output_dir))


# Per-stage console scripts

def fetch_avalara_items() -> None:
    sys.exit(run("fetch-avalara"))


def fetch_bc_products() -> None:
    sys.exit(run("fetch-bigcommerce"))


def reconcile_products() -> None:
    sys.exit(run("reconcile"))


def update_products() -> None:
    sys.exit(run("update"))


if __name__ == "__main__":
    main()
