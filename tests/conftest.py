"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import httpx
import pytest

from qbo_query.core.api_client import APIClient
from qbo_query.core.credential_store import InMemoryCredentialStore
from qbo_query.core.query_engine import QueryEngine
from qbo_query.core.token_manager import TokenManager
from qbo_query.models.credentials import Credentials
from tests.helpers import API_BASE_URL, FIXED_NOW, REALM_ID, TOKEN_URL, FrozenClock


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary configuration directory for testing."""
    config_dir = tmp_path / ".qbo-query-test"
    config_dir.mkdir(mode=0o700)
    return config_dir


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def base_credentials() -> Credentials:
    """Credentials with no cached access token."""
    return Credentials(
        client_id="client-abc",
        client_secret="secret-xyz",
        realm_id=REALM_ID,
        refresh_token="refresh-1",
    )


@pytest.fixture
def valid_credentials(base_credentials: Credentials) -> Credentials:
    """Credentials whose access token has an hour left."""
    return base_credentials.model_copy(
        update={
            "access_token": "cached-access",
            "token_expiry": FIXED_NOW + timedelta(hours=1),
        }
    )


@pytest.fixture
def memory_store(valid_credentials: Credentials) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(valid_credentials)


@pytest.fixture
def http_client() -> Generator[httpx.Client, None, None]:
    with httpx.Client() as client:
        yield client


@pytest.fixture
def token_manager(
    memory_store: InMemoryCredentialStore, http_client: httpx.Client, clock: FrozenClock
) -> TokenManager:
    return TokenManager(memory_store, token_url=TOKEN_URL, http_client=http_client, clock=clock)


@pytest.fixture
def engine(token_manager: TokenManager, http_client: httpx.Client) -> QueryEngine:
    client = APIClient(API_BASE_URL, http_client=http_client)
    return QueryEngine(token_manager, client)


@pytest.fixture
def credentials_file(tmp_path: Path) -> Path:
    """Write a credentials file with a token that is still valid for a long time."""
    path = tmp_path / "project" / ".qbo-query" / "credentials.local.json"
    path.parent.mkdir(parents=True)
    path.write_text(
        json.dumps(
            {
                "client_id": "client-abc",
                "client_secret": "secret-xyz",
                "realm_id": REALM_ID,
                "refresh_token": "refresh-1",
                "access_token": "cached-access",
                "token_expiry": (datetime.now(UTC) + timedelta(days=1)).isoformat(),
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def cleanup_loggers() -> Generator[None, None, None]:
    """Reset logger state after each test."""
    yield

    import logging

    from qbo_query.utils import app_logger

    app_logger._loggers.clear()
    app_logger._configured = False

    logger = logging.getLogger("qbo_query")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
