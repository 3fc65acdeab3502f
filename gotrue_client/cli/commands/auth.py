"""Authentication commands for the GoTrue CLI."""

from __future__ import annotations

from datetime import datetime, timezone

import typer
from rich.console import Console

from gotrue_client.exceptions import GoTrueError
from gotrue_client.types import Session, selector_from

from ..credentials import clear_state, get_state_path, load_session, save_state, stored_url
from . import URL_OPTION_HELP, get_authenticated_client, get_client

app = typer.Typer(help="Sign up, sign in and manage the stored session")
console = Console()


def _describe(session: Session) -> str:
    return session.user.email or session.user.phone or session.user.id


@app.command()
def signup(
    identifier: str = typer.Argument(help="Email address (or phone number with --phone)"),
    phone: bool = typer.Option(False, "--phone", help="Treat the identifier as a phone number"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Create an account and store its session."""
    client = get_client(url)

    try:
        session = client.sign_up(selector_from(identifier, phone=phone), password)
        save_state(client.api.base_url, session)
        console.print(f"[green]Signed up as {_describe(session)}.[/green]")
    except GoTrueError as e:
        console.print(f"[red]Sign up failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def login(
    identifier: str = typer.Argument(help="Email address (or phone number with --phone)"),
    phone: bool = typer.Option(False, "--phone", help="Treat the identifier as a phone number"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Sign in with a password and store the session."""
    client = get_client(url)

    try:
        session = client.sign_in(selector_from(identifier, phone=phone), password)
        save_state(client.api.base_url, session)
        console.print(f"[green]Signed in as {_describe(session)}.[/green]")
    except GoTrueError as e:
        console.print(f"[red]Sign in failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def logout(
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Sign out and remove the stored session."""
    if load_session() is None:
        clear_state()
        console.print("[yellow]Not signed in.[/yellow]")
        return

    client = get_authenticated_client(url)
    try:
        if not client.sign_out():
            console.print("[red]Sign out was rejected by the service. The stored session was kept.[/red]")
            raise typer.Exit(1)
    finally:
        client.close()

    clear_state()
    console.print("[green]Signed out.[/green]")


@app.command()
def refresh(
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Exchange the stored refresh token for a new session."""
    client = get_authenticated_client(url)

    try:
        session = client.refresh_session()
        save_state(client.api.base_url, session)
        console.print("[green]Session refreshed.[/green]")
    except GoTrueError as e:
        console.print(f"[red]Refresh failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def status() -> None:
    """Show the stored session without contacting the service."""
    session = load_session()

    if session is None:
        console.print("[yellow]Not signed in.[/yellow]")
        console.print("Run [bold]gotrue auth login[/bold] to sign in.")
        raise typer.Exit(1)

    expires = datetime.fromtimestamp(session.expires_at, tz=timezone.utc)

    console.print("[green]Signed in[/green]")
    console.print(f"  User: {_describe(session)}")
    console.print(f"  User ID: {session.user.id}")
    console.print(f"  Service: {stored_url() or 'unknown'}")
    if session.expired:
        console.print(f"  Expired: {expires.isoformat()} [yellow](run 'gotrue auth refresh')[/yellow]")
    else:
        console.print(f"  Expires: {expires.isoformat()}")
    console.print(f"  Stored in: {get_state_path()}")


@app.command()
def otp(
    identifier: str = typer.Argument(help="Email address (or phone number with --phone)"),
    phone: bool = typer.Option(False, "--phone", help="Treat the identifier as a phone number"),
    create_user: bool = typer.Option(None, "--create-user/--no-create-user", help="Create the account if missing"),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Send a one-time passcode."""
    client = get_client(url)

    try:
        sent = client.send_otp(selector_from(identifier, phone=phone), should_create_user=create_user)
    finally:
        client.close()

    if not sent:
        console.print("[red]Could not send the passcode.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Passcode sent to {identifier}.[/green]")


@app.command()
def recover(
    email: str = typer.Argument(help="Email address of the account"),
    url: str = typer.Option(None, "--url", help=URL_OPTION_HELP),
) -> None:
    """Send a password recovery email."""
    client = get_client(url)

    try:
        sent = client.reset_password_for_email(email)
    finally:
        client.close()

    if not sent:
        console.print("[red]Could not send the recovery email.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Recovery email sent to {email}.[/green]")
