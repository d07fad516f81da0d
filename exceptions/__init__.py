"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ConfigurationError,
    MissingInputFileError,
    ExternalServiceError,

    # Platform-specific
    RegistryAPIError,
    CatalogAPIError,
)

__all__ = [
    # Base
    "AppError",
    "ConfigurationError",
    "MissingInputFileError",
    "ExternalServiceError",

    # Platform
    "RegistryAPIError",
    "CatalogAPIError",
]
