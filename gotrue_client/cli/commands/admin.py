"""User administration commands for the GoTrue CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from gotrue_client.exceptions import GoTrueError
from gotrue_client.types import AdminUserAttributes

from . import URL_OPTION_HELP, get_client
from .user import print_user

app = typer.Typer(help="Administer users (needs GOTRUE_SERVICE_TOKEN)")
console = Console()


@app.command("list")
def list_users(
    query: str = typer.Option(None, help='Raw query suffix, e.g. "?page=2&per_page=50"'),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """List users."""
    client = get_client(url, service=True)

    try:
        users = client.api.admin.list_users(query)

        if not users:
            console.print("[yellow]No users found.[/yellow]")
            return

        table = Table(title="Users")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Email")
        table.add_column("Phone")
        table.add_column("Confirmed", style="green")
        table.add_column("Created")

        for user in users:
            table.add_row(
                user.id,
                user.email or "",
                user.phone or "",
                "yes" if user.email_confirmed or user.phone_confirmed else "no",
                user.created_at or "",
            )

        console.print(table)
    except GoTrueError as e:
        console.print(f"[red]Could not list users: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def get(
    user_id: str = typer.Argument(help="The user ID"),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Show a user by ID."""
    client = get_client(url, service=True)

    try:
        print_user(client.api.admin.get_user_by_id(user_id))
    except GoTrueError as e:
        console.print(f"[red]Could not fetch user: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def invite(
    email: str = typer.Argument(help="Email address to invite"),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Invite a user by email."""
    client = get_client(url, service=True)

    try:
        user = client.api.admin.invite_user_by_email(email)
        console.print(f"[green]Invited {email} (user {user.id}).[/green]")
    except GoTrueError as e:
        console.print(f"[red]Invite failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def create(
    email: str = typer.Argument(help="Email address of the new user"),
    password: str = typer.Option(None, help="Initial password"),
    confirm: bool = typer.Option(False, "--confirm", help="Mark the email as already confirmed"),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Create a user."""
    client = get_client(url, service=True)
    attributes = AdminUserAttributes(email=email, password=password, email_confirmed=confirm or None)

    try:
        user = client.api.admin.create_user(attributes)
        console.print("[green]User created.[/green]")
        print_user(user)
    except GoTrueError as e:
        console.print(f"[red]Create failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def delete(
    user_id: str = typer.Argument(help="The user ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Delete a user by ID."""
    if not yes:
        typer.confirm(f"Delete user {user_id}?", abort=True)

    client = get_client(url, service=True)

    try:
        client.api.admin.delete_user(user_id)
        console.print(f"[green]Deleted user {user_id}.[/green]")
    except GoTrueError as e:
        console.print(f"[red]Delete failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()
