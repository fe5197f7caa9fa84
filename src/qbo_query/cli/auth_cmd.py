"""Setup, connection check, and token refresh commands."""

from pathlib import Path

import click
from rich.console import Console

from qbo_query.cli.common import open_engine, run_command
from qbo_query.constants import GITIGNORE_PATTERN
from qbo_query.utils.app_logger import get_logger
from qbo_query.utils.file_utils import ensure_gitignore

logger = get_logger(__name__)

SETUP_INSTRUCTIONS = """
QuickBooks Query Tool - first-time setup
========================================

This tool reads QuickBooks Online data with OAuth2 credentials stored per
project in:

    {credentials_path}

1. Create an app
   Sign in at https://developer.intuit.com/, open the Dashboard and create an
   app for "QuickBooks Online and Payments".

2. Collect the OAuth keys
   Under "Keys & OAuth" copy the Client ID and Client Secret (Production, or
   Development for a sandbox company).

3. Authorize a company
   Use the OAuth 2.0 Playground to connect your company. Note the Realm ID
   (Company ID) and the Refresh Token from the token response.

4. Write the credentials file

    {{
      "client_id": "YOUR_CLIENT_ID",
      "client_secret": "YOUR_CLIENT_SECRET",
      "realm_id": "YOUR_REALM_ID",
      "refresh_token": "YOUR_REFRESH_TOKEN"
    }}

5. Fetch an access token
       qbo-query refresh

6. Verify the connection
       qbo-query check

For a sandbox company run: qbo-query config set environment sandbox

Notes:
- Access tokens last about an hour and are refreshed automatically.
- Refresh tokens last about 100 days; re-authorize when refresh fails.
- `refresh` adds {gitignore_pattern} to .gitignore.
- Access is read-only.
"""


@click.command(name="setup")
@click.pass_context
def setup_command(ctx: click.Context) -> None:
    """Show first-time setup instructions."""
    console = Console()
    console.print(
        SETUP_INSTRUCTIONS.format(
            credentials_path=ctx.obj["credentials_path"],
            gitignore_pattern=GITIGNORE_PATTERN,
        ),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


@click.command(name="check")
@click.pass_context
def check_command(ctx: click.Context) -> None:
    """Verify the connection and show company info."""

    def _check() -> dict:
        with open_engine(ctx) as engine:
            status = engine.check_connection()

        if not status.connected:
            raise click.ClickException(status.error or "Failed to connect to QuickBooks")

        info = status.company_info or {}
        return {
            "message": "Connected to QuickBooks",
            "realmId": status.realm_id,
            "companyName": info.get("CompanyName"),
            "legalName": info.get("LegalName"),
            "address": info.get("CompanyAddr"),
            "email": (info.get("Email") or {}).get("Address"),
            "phone": (info.get("PrimaryPhone") or info.get("Phone") or {}).get("FreeFormNumber"),
            "tokenPath": str(ctx.obj["credentials_path"]),
        }

    run_command(ctx, _check)


@click.command(name="refresh")
@click.pass_context
def refresh_command(ctx: click.Context) -> None:
    """Exchange the refresh token for a new access token."""

    def _refresh() -> dict:
        ensure_gitignore(Path.cwd())
        with open_engine(ctx) as engine:
            credentials = engine.token_manager.refresh()
        expiry = credentials.token_expiry
        return {
            "message": "Access token refreshed",
            "tokenExpiry": expiry.isoformat() if expiry else None,
            "tokenPath": str(ctx.obj["credentials_path"]),
        }

    run_command(ctx, _refresh)
