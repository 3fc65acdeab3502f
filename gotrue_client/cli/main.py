"""Main entry point for the GoTrue CLI."""

from __future__ import annotations

try:
    import typer
except ImportError:
    import sys

    print("GoTrue CLI requires extras: pip install gotrue-client[cli]")
    sys.exit(1)

from .commands import admin, auth, user

app = typer.Typer(
    name="gotrue",
    help="Talk to a GoTrue authentication server from the shell.",
    epilog="The server URL comes from --url, then GOTRUE_URL, then the stored session.",
    no_args_is_help=True,
)

app.add_typer(auth.app, name="auth")
app.add_typer(user.app, name="user")
app.add_typer(admin.app, name="admin")


def _version_callback(value: bool) -> None:
    """Handle --version and exit early."""
    if value:
        from gotrue_client import __version__

        typer.echo(f"gotrue {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the CLI version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Sign up, sign in and manage users on a GoTrue server.

    A successful login is kept in ~/.gotrue/session.json so later commands
    reuse it. Admin commands authenticate with GOTRUE_SERVICE_TOKEN instead.
    """
    _ = version


@app.command()
def version() -> None:
    """Show the CLI version."""
    from gotrue_client import __version__

    typer.echo(f"gotrue {__version__}")


if __name__ == "__main__":
    app()
