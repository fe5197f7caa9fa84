"""
API client for the QuickBooks Online accounting API.

Handles HTTP communication and bearer authentication. Every non-success
response is converted into RemoteApiError; nothing is retried.
"""

from typing import Any

import httpx
import orjson

from qbo_query.constants import DEFAULT_REQUEST_TIMEOUT, MINOR_VERSION
from qbo_query.exceptions import NetworkError, RemoteApiError
from qbo_query.utils.app_logger import get_logger

logger = get_logger(__name__)


class APIClient:
    """Client for the per-company QuickBooks v3 endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        minor_version: int = MINOR_VERSION,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize API client.

        Args:
            base_url: QuickBooks API base URL (must be HTTPS)
            minor_version: API minor version appended to every request
            timeout: Request timeout in seconds for a private client (default: 30)
            http_client: Shared HTTP client (a private one is created if omitted)

        Raises:
            ValueError: If base_url is not HTTPS
        """
        if not base_url.startswith("https://"):
            if base_url.startswith("http://"):
                raise ValueError(
                    f"HTTPS required for API base URL. Found insecure HTTP: {base_url}"
                )
            raise ValueError(f"Invalid API base URL. Must start with https://: {base_url}")

        self.base_url = base_url.rstrip("/")
        self.minor_version = minor_version
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(
            timeout=httpx.Timeout(timeout),
            verify=True,
        )

    def company_url(self, realm_id: str, *segments: str) -> str:
        """Build ``{base}/v3/company/{realm_id}/{segments...}``."""
        return "/".join([f"{self.base_url}/v3/company/{realm_id}", *segments])

    def query(self, realm_id: str, access_token: str, statement: str) -> dict[str, Any]:
        """
        Execute a single query statement (one page).

        Args:
            realm_id: QuickBooks company ID
            access_token: OAuth bearer token
            statement: Query text, e.g. ``SELECT * FROM Customer STARTPOSITION 1 MAXRESULTS 1000``

        Returns:
            Decoded response document (rows live under ``QueryResponse``)

        Raises:
            RemoteApiError: On non-success status or invalid JSON
            NetworkError: On transport failure
        """
        logger.debug("POST query: %s", statement)
        return self._request(
            "POST",
            self.company_url(realm_id, "query"),
            access_token,
            content=statement.encode("utf-8"),
            headers={"Content-Type": "application/text"},
        )

    def get_entity(
        self, realm_id: str, access_token: str, entity: str, entity_id: str
    ) -> dict[str, Any]:
        """Fetch one entity by ID; the document is keyed by the entity name."""
        return self._request(
            "GET",
            self.company_url(realm_id, entity.lower(), entity_id),
            access_token,
        )

    def get_company_info(self, realm_id: str, access_token: str) -> dict[str, Any]:
        """Fetch the company profile; the document is keyed by ``CompanyInfo``."""
        return self._request(
            "GET",
            self.company_url(realm_id, "companyinfo", realm_id),
            access_token,
        )

    def _request(
        self,
        method: str,
        url: str,
        access_token: str,
        *,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)

        try:
            response = self._client.request(
                method,
                url,
                params={"minorversion": self.minor_version},
                content=content,
                headers=request_headers,
            )
        except httpx.TransportError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            logger.debug("%s %s -> %s", method, url, response.status_code)
            raise RemoteApiError(response.status_code, response.reason_phrase, response.text)

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise RemoteApiError(
                response.status_code, response.reason_phrase, f"Invalid JSON response: {e}"
            ) from e

        if not isinstance(payload, dict):
            raise RemoteApiError(
                response.status_code,
                response.reason_phrase,
                f"Unexpected JSON payload type: {type(payload).__name__}",
            )
        return payload

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
