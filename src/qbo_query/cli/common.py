"""Shared plumbing for CLI commands: engine construction and result output."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import click
import httpx

from qbo_query.constants import EXIT_GENERAL_ERROR
from qbo_query.core.api_client import APIClient
from qbo_query.core.config import ConfigManager
from qbo_query.core.credential_store import FileCredentialStore
from qbo_query.core.query_engine import QueryEngine
from qbo_query.core.token_manager import TokenManager
from qbo_query.renderers.envelope import emit_failure, emit_success
from qbo_query.utils.app_logger import get_logger

logger = get_logger(__name__)


@contextmanager
def open_engine(ctx: click.Context) -> Iterator[QueryEngine]:
    """Build a QueryEngine from the invocation's config and credential paths.

    One HTTP client is shared by the token manager and the API client and is
    closed when the block exits.
    """
    config = ConfigManager(ctx.obj["config_dir"]).load()
    store = FileCredentialStore(ctx.obj["credentials_path"])

    with httpx.Client(timeout=httpx.Timeout(config.request_timeout_seconds)) as http_client:
        token_manager = TokenManager(store, token_url=config.token_url, http_client=http_client)
        client = APIClient(
            config.api_base_url,
            minor_version=config.minor_version,
            http_client=http_client,
        )
        yield QueryEngine(token_manager, client)


def run_command(ctx: click.Context, action: Callable[[], Any]) -> None:
    """Run a command body and print its result envelope.

    Any exception becomes a failure envelope and exit code 1; the traceback
    only goes to the log file.
    """
    try:
        data = action()
    except Exception as e:
        logger.debug("Command '%s' failed", ctx.command_path, exc_info=True)
        emit_failure(str(e))
        ctx.exit(EXIT_GENERAL_ERROR)
    emit_success(data)


def fail(ctx: click.Context, message: str) -> None:
    """Print a failure envelope and exit with code 1."""
    emit_failure(message)
    ctx.exit(EXIT_GENERAL_ERROR)
