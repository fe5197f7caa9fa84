"""Core components for the QuickBooks Query Tool."""

from qbo_query.core.api_client import APIClient
from qbo_query.core.credential_store import FileCredentialStore, InMemoryCredentialStore
from qbo_query.core.query_engine import QueryEngine
from qbo_query.core.token_manager import TokenManager

__all__ = [
    "APIClient",
    "FileCredentialStore",
    "InMemoryCredentialStore",
    "QueryEngine",
    "TokenManager",
]
