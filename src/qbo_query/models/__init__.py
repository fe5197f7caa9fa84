"""Data models for the QuickBooks Query Tool."""

from qbo_query.models.config import AppConfig
from qbo_query.models.credentials import Credentials
from qbo_query.models.query import ConnectionStatus, QueryOptions

__all__ = [
    "AppConfig",
    "ConnectionStatus",
    "Credentials",
    "QueryOptions",
]
