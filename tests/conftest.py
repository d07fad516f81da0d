"""
Shared test fixtures.

Fake HTTP sessions live in tests/fakes.py.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest

from config.settings import Settings, load_settings
from utils.tables import PipelineFiles


# ===================
# FIXTURES
# ===================

@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def files(output_dir) -> PipelineFiles:
    """Pipeline file locations inside a temporary directory."""
    output_dir.mkdir(parents=True, exist_ok=True)
    return PipelineFiles(output_dir)


@pytest.fixture
def settings(output_dir) -> Settings:
    """Complete settings that ignore the process environment's .env file."""
    return load_settings(
        _env_file=None,
        bc_store_hash="abc123",
        bc_access_token="bc-token",
        avalara_token="avalara-token",
        avalara_company_id="42",
        output_dir=output_dir,
    )


@pytest.fixture
def delays() -> list:
    """
    Records requested pauses.

    Usage:
        UpdateService(..., sleep=delays.append)
    """
    return []
