"""Current-user commands for the GoTrue CLI."""

from __future__ import annotations

import json

import typer
from rich.console import Console

from gotrue_client.exceptions import GoTrueError
from gotrue_client.types import User, UserAttributes

from . import URL_OPTION_HELP, get_authenticated_client

app = typer.Typer(help="Show and update the signed-in user")
console = Console()


def print_user(user: User) -> None:
    console.print(f"\n[bold]User: {user.id}[/bold]\n")
    console.print(f"  Email: {user.email or 'N/A'}" + (" (confirmed)" if user.email_confirmed else ""))
    console.print(f"  Phone: {user.phone or 'N/A'}" + (" (confirmed)" if user.phone_confirmed else ""))
    console.print(f"  Role: {user.role or 'N/A'}")
    if user.created_at:
        console.print(f"  Created: {user.created_at}")
    if user.last_sign_in_at:
        console.print(f"  Last sign in: {user.last_sign_in_at}")
    if user.user_metadata:
        console.print(f"  Metadata: {json.dumps(user.user_metadata)}")


@app.command()
def show(
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Fetch the signed-in user from the service."""
    client = get_authenticated_client(url)

    try:
        print_user(client.get_user())
    except GoTrueError as e:
        console.print(f"[red]Could not fetch user: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def update(
    email: str = typer.Option(None, help="New email address"),
    phone: str = typer.Option(None, help="New phone number"),
    password: str = typer.Option(None, help="New password"),
    data: str = typer.Option(None, help='User metadata as a JSON object, e.g. \'{"plan": "pro"}\''),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Update the signed-in user."""
    metadata = None
    if data is not None:
        try:
            metadata = json.loads(data)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"not valid JSON: {e}", param_hint="--data")
        if not isinstance(metadata, dict):
            raise typer.BadParameter("must be a JSON object", param_hint="--data")

    attributes = UserAttributes(email=email, phone=phone, password=password, data=metadata)
    if not attributes.to_payload():
        console.print("[yellow]Nothing to update.[/yellow]")
        raise typer.Exit(1)

    client = get_authenticated_client(url)

    try:
        user = client.update_user(attributes)
        console.print("[green]User updated.[/green]")
        print_user(user)
    except GoTrueError as e:
        console.print(f"[red]Update failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()
