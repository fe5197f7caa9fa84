"""Query execution data models."""

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

from qbo_query.constants import DEFAULT_QUERY_BY, MAX_RESULTS_PER_PAGE

_BARE_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class QueryOptions(BaseModel):
    """Filter and paging options for an entity query.

    Attributes:
        start: Lower bound for ``query_by`` (YYYY-MM-DD or full timestamp)
        end: Upper bound for ``query_by`` (YYYY-MM-DD or full timestamp)
        query_by: Date field the bounds apply to
        where: Additional raw condition, passed to the API verbatim
        max_results: Page size (the API caps this at 1000)
    """

    start: str | None = Field(default=None, description="Start date or timestamp")
    end: str | None = Field(default=None, description="End date or timestamp")
    query_by: str = Field(
        default=DEFAULT_QUERY_BY, min_length=1, description="Date field to filter on"
    )
    where: str | None = Field(default=None, description="Additional WHERE condition")
    max_results: int = Field(
        default=MAX_RESULTS_PER_PAGE,
        ge=1,
        le=MAX_RESULTS_PER_PAGE,
        description="Max results per page",
    )

    @field_validator("start", "end")
    @classmethod
    def validate_date(cls, v: str | None) -> str | None:
        """Accept a bare YYYY-MM-DD date or any value carrying a time component."""
        if v is None or "T" in v:
            return v
        if not _BARE_DATE.match(v):
            raise ValueError(f"Expected a date as YYYY-MM-DD or a full timestamp, got: {v!r}")
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "start": "2025-01-01",
                    "end": "2025-01-31",
                    "query_by": "TxnDate",
                    "where": "Balance > '0'",
                    "max_results": 1000,
                }
            ]
        }
    }


class ConnectionStatus(BaseModel):
    """Outcome of a connection check against the company profile endpoint.

    Attributes:
        connected: Whether the profile was fetched successfully
        realm_id: Company the check ran against, when known
        company_info: ``CompanyInfo`` document returned by the API
        error: Failure description when not connected
    """

    connected: bool = Field(..., description="Connection success flag")
    realm_id: str | None = Field(default=None, description="QuickBooks company ID")
    company_info: dict[str, Any] | None = Field(default=None, description="Company profile")
    error: str | None = Field(default=None, description="Error message if not connected")
