"""OAuth credential data model."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

REQUIRED_CREDENTIAL_FIELDS: tuple[str, ...] = (
    "client_id",
    "client_secret",
    "realm_id",
    "refresh_token",
)


class Credentials(BaseModel):
    """Persisted OAuth credentials for a single QuickBooks company.

    Attributes:
        client_id: OAuth client ID of the Intuit app
        client_secret: OAuth client secret of the Intuit app
        realm_id: QuickBooks company (realm) identifier
        refresh_token: Long-lived refresh token (~100 days)
        access_token: Short-lived bearer token (~1 hour), if one is cached
        token_expiry: When ``access_token`` expires, if one is cached
    """

    client_id: str = Field(..., min_length=1, description="OAuth client ID")
    client_secret: str = Field(..., min_length=1, description="OAuth client secret")
    realm_id: str = Field(..., min_length=1, description="QuickBooks company ID")
    refresh_token: str = Field(..., min_length=1, description="OAuth refresh token")
    access_token: str | None = Field(default=None, description="Cached access token")
    token_expiry: datetime | None = Field(default=None, description="Access token expiry")

    model_config = {
        "extra": "allow",
        "json_schema_extra": {
            "examples": [
                {
                    "client_id": "ABc123",
                    "client_secret": "s3cr3t",
                    "realm_id": "9130350000000000",
                    "refresh_token": "AB11...",
                    "access_token": "eyJlbmMi...",
                    "token_expiry": "2025-10-21T11:30:00Z",
                }
            ]
        },
    }

    @field_validator("token_expiry")
    @classmethod
    def ensure_timezone(cls, v: datetime | None) -> datetime | None:
        """Interpret naive expiry timestamps as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @model_validator(mode="after")
    def pair_access_token_and_expiry(self) -> "Credentials":
        # A token without an expiry (or vice versa) cannot be trusted
        if self.access_token is None or self.token_expiry is None:
            self.access_token = None
            self.token_expiry = None
        return self

    def has_cached_token(self) -> bool:
        """Check whether an access token and its expiry are both present."""
        return self.access_token is not None and self.token_expiry is not None

    def seconds_until_expiry(self, now: datetime) -> float | None:
        """Seconds remaining before the cached token expires, or None if absent."""
        if self.token_expiry is None:
            return None
        return (self.token_expiry - now).total_seconds()

    def to_storage_dict(self) -> dict:
        """Serialize for persistence, omitting absent optional fields."""
        return self.model_dump(mode="json", exclude_none=True)
