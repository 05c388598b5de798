"""Main Rolegate CLI application."""

import typer
from rich.console import Console

from rolegate import __version__
from rolegate.commands import database, users
from rolegate.core.logging import configure_logging


console = Console()

app = typer.Typer(
    name="rolegate",
    help="Manage roles, permissions and user access.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="init-db")(database.init_db)
app.command(name="seed")(database.seed)
app.command(name="create-user")(users.create_user)
app.command(name="grant-role")(users.grant_role)
app.command(name="access")(users.access)


@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show debug logs from the services."
    ),
) -> None:
    """Rolegate CLI - Manage roles, permissions and user access."""
    configure_logging("DEBUG" if verbose else "WARNING")
    if version:
        console.print(f"[bold cyan]rolegate[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
