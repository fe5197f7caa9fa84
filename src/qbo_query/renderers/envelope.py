"""JSON envelope output for CLI commands.

Every command that produces data writes exactly one document to stdout:

    {"success": true, "data": ...}
    {"success": false, "error": "..."}
"""

from typing import Any

import click
import orjson

_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS


def render_envelope(*, success: bool, data: Any = None, error: str | None = None) -> str:
    """Serialize a result envelope.

    Args:
        success: Whether the command succeeded
        data: Payload for successful commands
        error: Message for failed commands

    Returns:
        Indented JSON text
    """
    envelope: dict[str, Any] = {"success": success}
    if success:
        envelope["data"] = data
    else:
        envelope["error"] = error
    return orjson.dumps(envelope, option=_OPTIONS, default=str).decode("utf-8")


def emit_success(data: Any) -> None:
    click.echo(render_envelope(success=True, data=data))


def emit_failure(error: str) -> None:
    click.echo(render_envelope(success=False, error=error))
