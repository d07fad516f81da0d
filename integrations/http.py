"""
Shared HTTP plumbing for the platform clients.

Wraps a requests.Session with a base URL, static auth headers and a
per-request timeout. Every failure surfaces as the client's
ExternalServiceError subclass.
"""

from typing import Any, Optional
import requests
import structlog

from exceptions import ExternalServiceError

logger = structlog.get_logger(__name__)


DEFAULT_TIMEOUT_SECONDS = 30.0


def response_message(response: Optional[requests.Response]) -> Optional[str]:
    """
    Pull a human-readable message out of an error response body.

    BigCommerce returns {"title": ...}, Avalara {"error": {"message": ...}},
    others {"message": ...}.
    """
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        text = (response.text or "").strip()
        return text or response.reason or None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        for key in ("message", "title", "detail"):
            if body.get(key):
                return str(body[key])
    return response.reason or None


def unwrap_records(payload: Any, envelope_key: str) -> list:
    """Records under envelope_key, or the payload itself when it is a bare array."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        records = payload.get(envelope_key)
        if isinstance(records, list):
            return records
    return []


class ApiClient:
    """Base class for the Avalara and BigCommerce clients."""

    service_name: str
    error_class: type[ExternalServiceError]

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(headers)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _raise(self, message: str, response_status: Optional[int] = None, **details):
        raise self.error_class(message, response_status=response_status, details=details)

    def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Perform a request and return the decoded JSON body.

        Raises:
            ExternalServiceError: On transport failure, HTTP error status,
                or an undecodable body
        """
        url = self._url(path)

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(
                "http_request_failed",
                service=self.service_name,
                method=method,
                path=path,
                error=str(e)
            )
            self._raise(str(e), path=path)

        if response.status_code >= 400:
            message = response_message(response) or f"HTTP {response.status_code}"
            logger.debug(
                "http_error_response",
                service=self.service_name,
                method=method,
                path=path,
                status=response.status_code,
                message=message
            )
            self._raise(message, response.status_code, path=path)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            self._raise(f"Invalid JSON response: {e}", response.status_code, path=path)

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params or {})

    def post(self, path: str, json_body: Optional[dict] = None) -> Any:
        return self.request("POST", path, json=json_body or {})
