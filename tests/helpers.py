"""Shared constants and helpers for the test suite."""

from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

API_BASE_URL = "https://quickbooks.api.intuit.com"
TOKEN_URL = "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer"
REALM_ID = "9130350000000000"
QUERY_URL = f"{API_BASE_URL}/v3/company/{REALM_ID}/query"

FIXED_NOW = datetime(2025, 10, 21, 12, 0, 0, tzinfo=UTC)


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


def query_page(entity: str, count: int, start_id: int = 1) -> httpx.Response:
    """Build a query response holding ``count`` records with sequential Ids."""
    rows: list[dict[str, Any]] = [
        {"Id": str(i), "FullyQualifiedName": f"{entity} {i}"}
        for i in range(start_id, start_id + count)
    ]
    return httpx.Response(200, json={"QueryResponse": {entity: rows} if rows else {}})
