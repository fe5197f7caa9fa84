"""Credential persistence.

The token manager talks to a :class:`CredentialStore`, a two-method port
(``load``/``save``). :class:`FileCredentialStore` binds it to the per-project
JSON file; :class:`InMemoryCredentialStore` keeps the record in memory.
"""

from pathlib import Path
from typing import Any, Protocol

import orjson
from pydantic import ValidationError

from qbo_query.constants import CREDENTIALS_DIR_NAME, CREDENTIALS_FILE_NAME
from qbo_query.exceptions import ConfigurationError
from qbo_query.models.credentials import REQUIRED_CREDENTIAL_FIELDS, Credentials
from qbo_query.utils.app_logger import get_logger
from qbo_query.utils.file_utils import read_json_file, write_json_file

logger = get_logger(__name__)


def default_credentials_path(project_dir: Path | None = None) -> Path:
    """Per-project credential file location (relative to the working directory)."""
    base = project_dir if project_dir is not None else Path.cwd()
    return base / CREDENTIALS_DIR_NAME / CREDENTIALS_FILE_NAME


def parse_credentials(data: Any, source: str) -> Credentials:
    """Validate a raw credential document.

    Args:
        data: Decoded JSON document
        source: Human-readable origin used in error messages

    Raises:
        ConfigurationError: With reason ``malformed`` listing any missing keys
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Credentials file must contain a JSON object.\nFile: {source}",
            reason=ConfigurationError.MALFORMED,
        )

    missing = [name for name in REQUIRED_CREDENTIAL_FIELDS if not data.get(name)]
    if missing:
        raise ConfigurationError(
            "Missing required fields in credentials file: "
            + ", ".join(missing)
            + f"\nRequired: {', '.join(REQUIRED_CREDENTIAL_FIELDS)}\nFile: {source}",
            reason=ConfigurationError.MALFORMED,
            missing_fields=missing,
        )

    try:
        return Credentials(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid credentials file: {e}\nFile: {source}",
            reason=ConfigurationError.MALFORMED,
        ) from e


class CredentialStore(Protocol):
    """Persistence port for the credential record."""

    def load(self) -> Credentials: ...

    def save(self, credentials: Credentials) -> None: ...


class FileCredentialStore:
    """Stores credentials as a JSON document on disk."""

    def __init__(self, path: Path) -> None:
        """
        Initialize FileCredentialStore.

        Args:
            path: Location of the credentials JSON file
        """
        self.path = path

    def load(self) -> Credentials:
        """
        Read and validate the credentials file.

        Returns:
            Credentials: Validated credential record

        Raises:
            ConfigurationError: ``not_found`` if the file is absent,
                ``malformed`` if it is unreadable or incomplete
        """
        try:
            data = read_json_file(self.path)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Credentials file not found at: {self.path}\n\n"
                "Run: qbo-query setup\n\n"
                "For setup instructions.",
                reason=ConfigurationError.NOT_FOUND,
            ) from e
        except orjson.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in credentials file: {e}\nFile: {self.path}",
                reason=ConfigurationError.MALFORMED,
            ) from e

        credentials = parse_credentials(data, str(self.path))
        logger.debug("Loaded credentials for realm %s from %s", credentials.realm_id, self.path)
        return credentials

    def save(self, credentials: Credentials) -> None:
        """Persist the full record, creating the containing directory if needed."""
        write_json_file(self.path, credentials.to_storage_dict())
        logger.debug("Saved credentials to %s", self.path)


class InMemoryCredentialStore:
    """Keeps the credential record in memory; ``save`` replaces it."""

    def __init__(self, credentials: Credentials | None = None) -> None:
        self._credentials = credentials
        self.save_count = 0

    def load(self) -> Credentials:
        if self._credentials is None:
            raise ConfigurationError(
                "No credentials stored", reason=ConfigurationError.NOT_FOUND
            )
        return self._credentials.model_copy(deep=True)

    def save(self, credentials: Credentials) -> None:
        self._credentials = credentials.model_copy(deep=True)
        self.save_count += 1
