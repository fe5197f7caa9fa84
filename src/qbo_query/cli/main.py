"""Main CLI entry point using Click framework."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from qbo_query import __version__
from qbo_query.constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_LOG_FILE,
    EXIT_GENERAL_ERROR,
    EXIT_SUCCESS,
)
from qbo_query.core.credential_store import default_credentials_path
from qbo_query.renderers.envelope import emit_failure
from qbo_query.utils.app_logger import setup_logging

console = Console(stderr=True)


class LowercaseGroup(click.Group):
    """Click Group that resolves command names case-insensitively."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is None:
            command = super().get_command(ctx, cmd_name.lower())
        return command


@click.group(cls=LowercaseGroup)
@click.version_option(version=__version__, prog_name="qbo-query")
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_DIR,
    help="Configuration directory path",
    envvar="QBO_QUERY_CONFIG_DIR",
)
@click.option(
    "--credentials",
    "credentials_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Credentials file (default: ./.qbo-query/credentials.local.json)",
    envvar="QBO_QUERY_CREDENTIALS",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.pass_context
def cli(ctx: click.Context, config_dir: Path, credentials_path: Path | None, verbose: bool) -> None:
    """QuickBooks Online query tool (read-only).

    Queries QuickBooks entities with automatic token refresh and pagination.
    Every data command prints a JSON {success, data|error} envelope.
    """
    ctx.ensure_object(dict)

    ctx.obj["config_dir"] = config_dir
    ctx.obj["credentials_path"] = credentials_path or default_credentials_path()
    ctx.obj["verbose"] = verbose

    try:
        setup_logging(
            config_dir / DEFAULT_LOG_FILE,
            console_level=logging.DEBUG if verbose else logging.WARNING,
        )
    except OSError as e:
        console.print(f"[yellow]Warning: Could not initialize logging: {e}[/yellow]")


# Import commands
from qbo_query.cli.auth_cmd import check_command, refresh_command, setup_command
from qbo_query.cli.config_cmd import config_group
from qbo_query.cli.entity_cmd import ENTITY_QUERY_COMMANDS, get_command, refs_command

# Register commands
cli.add_command(setup_command)
cli.add_command(check_command)
cli.add_command(refresh_command)
cli.add_command(get_command)
cli.add_command(refs_command)
cli.add_command(config_group)
for _entity_command in ENTITY_QUERY_COMMANDS:
    cli.add_command(_entity_command)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Click usage errors are reported through the same failure envelope as
    command errors, so every failure exits with code 1.
    """
    try:
        rv = cli(args=argv, obj={}, standalone_mode=False)
    except click.ClickException as e:
        emit_failure(e.format_message())
        return EXIT_GENERAL_ERROR
    except click.Abort:
        emit_failure("Aborted")
        return EXIT_GENERAL_ERROR

    return rv if isinstance(rv, int) else EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
