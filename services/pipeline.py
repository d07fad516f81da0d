"""
Pipeline orchestration — wires settings into the four stages.

Each stage is independently runnable; run_all executes them in order
and stops at the first stage that raises.
"""

from typing import Any, Callable, Optional
import requests
import structlog

from config.settings import Settings
from integrations.avalara import AvalaraClient
from integrations.bigcommerce import BigCommerceClient
from services.catalog_service import CatalogFetchResult, CatalogFetchService
from services.reconciliation_service import ReconciliationService
from services.registry_service import RegistryFetchResult, RegistryFetchService
from services.update_service import UpdateService
from utils.tables import PipelineFiles, ensure_output_dir

logger = structlog.get_logger(__name__)


# Stage execution order
STAGE_ORDER = ["fetch-avalara", "fetch-bigcommerce", "reconcile", "update"]

STAGE_NAMES = {
    "fetch-avalara": "Avalara items fetch",
    "fetch-bigcommerce": "BigCommerce products fetch",
    "reconcile": "Product reconciliation",
    "update": "Product update",
}


def pipeline_files(settings: Settings) -> PipelineFiles:
    return PipelineFiles(ensure_output_dir(settings.output_dir))


def fetch_avalara(settings: Settings, session: Optional[requests.Session] = None) -> RegistryFetchResult:
    client = AvalaraClient.from_settings(settings, session=session)
    return RegistryFetchService(client, pipeline_files(settings)).run()


def fetch_bigcommerce(settings: Settings, session: Optional[requests.Session] = None) -> CatalogFetchResult:
    client = BigCommerceClient.from_settings(settings, session=session)
    return CatalogFetchService(client, pipeline_files(settings)).run()


def reconcile(settings: Settings, session: Optional[requests.Session] = None):
    return ReconciliationService(pipeline_files(settings)).run()


def update(
    settings: Settings,
    session: Optional[requests.Session] = None,
    sleep: Optional[Callable[[float], None]] = None
):
    client = BigCommerceClient.from_settings(settings, session=session)
    kwargs = {"sleep": sleep} if sleep is not None else {}
    service = UpdateService(
        client,
        pipeline_files(settings),
        marker_name=settings.avalara_sync_field_name,
        delay_seconds=settings.update_delay_ms / 1000,
        **kwargs
    )
    return service.run()


# Map stage keys to their functions
STAGE_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "fetch-avalara": fetch_avalara,
    "fetch-bigcommerce": fetch_bigcommerce,
    "reconcile": reconcile,
    "update": update,
}


def run_stage(stage: str, settings: Settings, **kwargs) -> Any:
    """
    Run one stage by key.

    Raises:
        KeyError: Unknown stage
        AppError: Whatever the stage raises (missing input, ...)
    """
    func = STAGE_FUNCTIONS[stage]

    logger.info("stage_starting", stage=stage, name=STAGE_NAMES[stage])
    result = func(settings, **kwargs)
    logger.info("stage_completed", stage=stage, name=STAGE_NAMES[stage])

    return result


def run_all(settings: Settings, **kwargs) -> dict[str, Any]:
    """
    Run every stage in order. The first failure propagates.

    Keyword arguments are passed to each stage that accepts them
    (session to all, sleep to update only).
    """
    results = {}
    for stage in STAGE_ORDER:
        stage_kwargs = {k: v for k, v in kwargs.items() if k != "sleep" or stage == "update"}
        results[stage] = run_stage(stage, settings, **stage_kwargs)
    return results
