"""Exception hierarchy for the QuickBooks Query Tool."""


class QuickBooksError(Exception):
    """Base class for all errors raised by qbo_query."""


class ConfigurationError(QuickBooksError):
    """Credential file or application configuration is missing or malformed.

    Attributes:
        reason: ``"not_found"`` when the file does not exist, ``"malformed"``
            when it exists but cannot be used
        missing_fields: Required keys absent from the file (malformed only)
    """

    NOT_FOUND = "not_found"
    MALFORMED = "malformed"

    def __init__(
        self,
        message: str,
        *,
        reason: str = MALFORMED,
        missing_fields: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.missing_fields = missing_fields or []


class AuthError(QuickBooksError):
    """Token exchange was rejected or returned an unusable response."""


class RemoteApiError(QuickBooksError):
    """Remote API returned a non-success status or an undecodable body.

    Attributes:
        status_code: HTTP status code
        reason: HTTP reason phrase
        body: Raw response body text
    """

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"QuickBooks API error: {status_code} {reason}\n{body}")


class NetworkError(QuickBooksError):
    """Request could not be completed at the transport level."""
