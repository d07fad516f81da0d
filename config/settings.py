"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Required values abort startup with a list of every missing variable.
"""

from pathlib import Path
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from exceptions import ConfigurationError


BIGCOMMERCE_API_URL = "https://api.bigcommerce.com"


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens on first access through load_settings().
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,  # Blank optional vars fall back to defaults
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # BIGCOMMERCE
    # ===================
    bc_store_hash: str = Field(
        ...,
        min_length=1,
        description="BigCommerce store hash"
    )
    bc_access_token: str = Field(
        ...,
        min_length=1,
        description="BigCommerce API account access token"
    )
    bc_client_id: Optional[str] = Field(
        None,
        description="BigCommerce API client ID"
    )
    bc_client_secret: Optional[str] = Field(
        None,
        description="BigCommerce API client secret"
    )

    # ===================
    # AVALARA
    # ===================
    avalara_token: str = Field(
        ...,
        min_length=1,
        description="Avalara credential, sent as a Basic authorization value"
    )
    avalara_company_id: str = Field(
        ...,
        min_length=1,
        description="Avalara company ID owning the item registry"
    )
    avalara_base_url: str = Field(
        default="https://rest.avatax.com",
        min_length=1,
        description="Avalara REST API base URL"
    )

    # ===================
    # SYNC
    # ===================
    avalara_sync_field_name: str = Field(
        default="avalara_sync",
        min_length=1,
        description="Custom field added to products to trigger the webhook re-sync"
    )
    update_delay_ms: int = Field(
        default=100,
        ge=0,
        le=10000,
        description="Pause between products in the update stage"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Per-request HTTP timeout"
    )
    output_dir: Path = Field(
        default=Path("output"),
        description="Directory holding the intermediate CSV files and reports"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def bigcommerce_base_url(self) -> str:
        """Store-scoped BigCommerce API root."""
        return f"{BIGCOMMERCE_API_URL}/stores/{self.bc_store_hash}"


def load_settings(**overrides) -> Settings:
    """
    Build settings, translating validation failures into ConfigurationError.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Settings: Validated settings

    Raises:
        ConfigurationError: Names every missing or invalid variable
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = []
        invalid = []
        for error in e.errors():
            name = str(error["loc"][0]).upper() if error["loc"] else "UNKNOWN"
            if error["type"] in ("missing", "string_too_short"):
                missing.append(name)
            else:
                invalid.append(name)
        raise ConfigurationError(missing=missing, invalid=invalid) from e


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ConfigurationError: If required env vars are missing or invalid
    """
    return load_settings()
