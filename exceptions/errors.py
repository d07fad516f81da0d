"""
Custom exception classes for the application.

Fatal errors (configuration, missing input files) abort a stage.
ExternalServiceError is caught per page in the fetchers and per
product in the updater.
"""

from pathlib import Path
from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "MISSING_INPUT_FILE")
        message: Human-readable message
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to a loggable dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ConfigurationError(AppError):
    """Required settings are missing or invalid."""

    def __init__(
        self,
        missing: Optional[list[str]] = None,
        invalid: Optional[list[str]] = None
    ):
        self.missing = missing or []
        self.invalid = invalid or []

        parts = []
        if self.missing:
            parts.append(f"Missing required environment variables: {', '.join(self.missing)}")
        if self.invalid:
            parts.append(f"Invalid environment variables: {', '.join(self.invalid)}")

        super().__init__(
            code="CONFIGURATION_ERROR",
            message="; ".join(parts) or "Invalid configuration",
            details={"missing": self.missing, "invalid": self.invalid}
        )


class MissingInputFileError(AppError):
    """A stage's prerequisite file has not been produced yet."""

    def __init__(self, label: str, path: Path, producer: str):
        self.path = Path(path)
        super().__init__(
            code="MISSING_INPUT_FILE",
            message=f"{label} file not found: {self.path}. Please run {producer} first.",
            details={"path": str(self.path), "producer": producer}
        )


class ExternalServiceError(AppError):
    """
    External API call failed.

    response_status is the HTTP status when the platform answered,
    None for transport failures (timeouts, connection errors).
    """

    def __init__(
        self,
        service: str,
        message: str,
        response_status: Optional[int] = None,
        details: Optional[dict] = None
    ):
        self.service = service
        self.response_status = response_status
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            details={
                "service": service,
                "response_status": response_status,
                **(details or {})
            }
        )

    def describe(self) -> str:
        """'<status>: <message>' when a response exists, else the raw message."""
        if self.response_status is not None:
            return f"{self.response_status}: {self.message}"
        return self.message


# ===================
# PLATFORM ERRORS
# ===================

class RegistryAPIError(ExternalServiceError):
    """Avalara API call failed."""

    def __init__(self, message: str, response_status: Optional[int] = None, details: Optional[dict] = None):
        super().__init__("avalara", message, response_status, details)


class CatalogAPIError(ExternalServiceError):
    """BigCommerce API call failed."""

    def __init__(self, message: str, response_status: Optional[int] = None, details: Optional[dict] = None):
        super().__init__("bigcommerce", message, response_status, details)
