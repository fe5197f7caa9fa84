"""
OAuth2 access token lifecycle.

Decides whether the cached access token is still usable and exchanges the
refresh token for a new one against the Intuit token endpoint when it is not.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx
import orjson

from qbo_query.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TOKEN_LIFETIME,
    TOKEN_REFRESH_MARGIN,
    TOKEN_URL,
)
from qbo_query.core.credential_store import CredentialStore
from qbo_query.exceptions import AuthError, NetworkError
from qbo_query.models.credentials import Credentials
from qbo_query.utils.app_logger import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenManager:
    """Hands out valid access tokens, refreshing them when needed.

    Credentials are read from the store once, on first use, and written back
    after every successful refresh.
    """

    def __init__(
        self,
        store: CredentialStore,
        *,
        token_url: str = TOKEN_URL,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize TokenManager.

        Args:
            store: Credential persistence port
            token_url: OAuth2 token endpoint
            http_client: Shared HTTP client (a private one is created if omitted)
            timeout: Request timeout in seconds for a private client
            clock: Source of the current time (timezone-aware)
        """
        self.store = store
        self.token_url = token_url
        self._clock = clock
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(
            timeout=httpx.Timeout(timeout)
        )
        self._credentials: Credentials | None = None

    @property
    def credentials(self) -> Credentials:
        """Current credential record, loaded from the store on first access."""
        if self._credentials is None:
            self._credentials = self.store.load()
        return self._credentials

    def has_valid_token(self) -> bool:
        """Check whether the cached token outlives the refresh margin."""
        credentials = self.credentials
        if not credentials.has_cached_token():
            return False
        remaining = credentials.seconds_until_expiry(self._clock())
        return remaining is not None and remaining > TOKEN_REFRESH_MARGIN

    def get_valid_access_token(self) -> tuple[str, str]:
        """
        Return a usable bearer token and the company it belongs to.

        Tokens expiring within five minutes are treated as absent so that a
        request never starts with a token about to lapse mid-flight.

        Returns:
            Tuple of (access_token, realm_id)

        Raises:
            ConfigurationError: If the credentials file is missing or malformed
            AuthError: If a required refresh is rejected
        """
        if self.has_valid_token():
            credentials = self.credentials
            return credentials.access_token, credentials.realm_id  # type: ignore[return-value]

        credentials = self.refresh()
        if not credentials.access_token:
            raise AuthError("Failed to get access token after refresh")
        return credentials.access_token, credentials.realm_id

    def refresh(self) -> Credentials:
        """
        Exchange the refresh token for a new access token and persist it.

        Returns:
            Updated credentials (refresh token replaced if the server rotated it)

        Raises:
            AuthError: On a non-success response or a response without an access token
            NetworkError: If the token endpoint could not be reached
        """
        credentials = self.credentials
        logger.debug("Refreshing access token for realm %s", credentials.realm_id)

        try:
            response = self._client.post(
                self.token_url,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": credentials.refresh_token,
                },
                auth=(credentials.client_id, credentials.client_secret),
                headers={"Accept": "application/json"},
            )
        except httpx.TransportError as e:
            raise NetworkError(f"Token refresh request failed: {e}") from e

        if not response.is_success:
            raise AuthError(
                f"Token refresh failed: {response.status_code} {response.reason_phrase}\n"
                f"{response.text}"
            )

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise AuthError(f"Token refresh returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not payload.get("access_token"):
            received = sorted(payload) if isinstance(payload, dict) else type(payload).__name__
            raise AuthError(f"Token refresh response missing access_token (received: {received})")

        expires_in = payload.get("expires_in") or DEFAULT_TOKEN_LIFETIME
        try:
            lifetime = int(expires_in)
        except (TypeError, ValueError) as e:
            raise AuthError(
                f"Token refresh response has invalid expires_in: {expires_in!r}"
            ) from e
        expiry = self._clock() + timedelta(seconds=lifetime)

        updated = credentials.model_copy(
            update={
                "access_token": payload["access_token"],
                "refresh_token": payload.get("refresh_token") or credentials.refresh_token,
                "token_expiry": expiry,
            }
        )
        self.store.save(updated)
        self._credentials = updated

        logger.info("Access token refreshed; expires at %s", expiry.isoformat())
        return updated

    def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TokenManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
