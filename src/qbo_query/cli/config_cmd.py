"""Configuration management CLI commands."""

import click

from qbo_query.cli.common import run_command
from qbo_query.core.config import ConfigManager
from qbo_query.utils.app_logger import get_logger

logger = get_logger(__name__)


@click.group(name="config")
def config_group() -> None:
    """Manage application configuration settings."""
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show all configuration settings and the config file path."""

    def _show() -> dict:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        return {"path": str(config_mgr.config_path), "settings": config_mgr.to_dict()}

    run_command(ctx, _show)


@config_group.command(name="set")
@click.argument("key", type=str)
@click.argument("value", type=str)
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value.

    Use `environment sandbox` or `environment production` to switch API hosts.
    """

    def _set() -> dict:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        config_mgr.set(key, value)
        config_mgr.save()
        logger.info("Configuration updated: %s = %s", key, value)
        return {"path": str(config_mgr.config_path), "settings": config_mgr.to_dict()}

    run_command(ctx, _set)
