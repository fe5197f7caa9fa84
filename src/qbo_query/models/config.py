"""Configuration data models."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from qbo_query.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    MINOR_VERSION,
    PRODUCTION_API_BASE_URL,
    TOKEN_URL,
)


class AppConfig(BaseModel):
    """Application-wide configuration.

    Attributes:
        config_dir: Directory for configuration and log files
        api_base_url: QuickBooks API base URL (HTTPS only)
        token_url: OAuth2 token endpoint (HTTPS only)
        minor_version: QuickBooks API minor version sent on every call
        request_timeout_seconds: Per-request HTTP timeout in seconds
    """

    config_dir: Path = Field(..., description="Directory for configuration files")
    api_base_url: str = Field(
        default=PRODUCTION_API_BASE_URL, description="QuickBooks API base URL (HTTPS required)"
    )
    token_url: str = Field(default=TOKEN_URL, description="OAuth2 token endpoint (HTTPS required)")
    minor_version: int = Field(default=MINOR_VERSION, ge=1, description="API minor version")
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="HTTP request timeout in seconds"
    )

    @field_validator("api_base_url", "token_url")
    @classmethod
    def require_https(cls, v: str) -> str:
        """Reject endpoints that are not served over HTTPS."""
        if v.startswith("http://"):
            raise ValueError(f"HTTPS required. Found insecure HTTP: {v}")
        if not v.startswith("https://"):
            raise ValueError(f"Invalid URL scheme. Must start with https://: {v}")
        return v.rstrip("/")

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "examples": [
                {
                    "config_dir": "/home/user/.qbo-query",
                    "api_base_url": "https://quickbooks.api.intuit.com",
                    "token_url": "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer",
                    "minor_version": 75,
                    "request_timeout_seconds": 30,
                }
            ]
        },
    }
