"""CLI command modules."""

from __future__ import annotations

import os

import typer
from rich.console import Console

from gotrue_client.client import GoTrueClient
from gotrue_client.config import URL_ENV_VAR
from gotrue_client.exceptions import ConfigurationError

from ..constants import API_KEY_ENV_VAR, API_KEY_HEADER, SERVICE_TOKEN_ENV_VAR
from ..credentials import load_session, stored_url

_console = Console()

URL_OPTION_HELP = f"Service base URL (default: ${URL_ENV_VAR}, then the URL of the stored session)"


def get_client(url: str | None = None, *, service: bool = False) -> GoTrueClient:
    """Build a GoTrueClient from options, environment and stored state, or exit with an error.

    With ``service`` set, the service token is attached as a static bearer
    header for admin endpoints.
    """
    url = url or os.environ.get(URL_ENV_VAR) or stored_url()

    headers: dict[str, str] = {}
    api_key = os.environ.get(API_KEY_ENV_VAR)
    if api_key:
        headers[API_KEY_HEADER] = api_key

    if service:
        token = os.environ.get(SERVICE_TOKEN_ENV_VAR)
        if not token:
            _console.print(f"[red]Admin commands need a service token. Set {SERVICE_TOKEN_ENV_VAR}.[/red]")
            raise typer.Exit(1)
        headers["Authorization"] = f"Bearer {token}"

    try:
        return GoTrueClient(url, headers=headers)
    except ConfigurationError as e:
        _console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def get_authenticated_client(url: str | None = None) -> GoTrueClient:
    """Get a GoTrueClient holding the stored session, or exit with an error message."""
    session = load_session()
    if session is None:
        _console.print("[red]Not signed in. Run 'gotrue auth login' first.[/red]")
        raise typer.Exit(1)

    client = get_client(url)
    client.set_session(session)
    return client
