"""Chitchat CLI - run the server and manage local development state"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from chitchat import __version__
from chitchat.auth.token_verifier import TokenVerifier
from chitchat.utils.settings.factory import settings_factory

app = typer.Typer(
    name="chitchat",
    help="Direct messaging backend",
    add_completion=False
)
console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (defaults to APP_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port (defaults to APP_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the HTTP + Socket.IO server with uvicorn."""
    import uvicorn

    settings = settings_factory.create_app_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(Panel(
        f"[bold]{settings.app_name}[/bold] v{__version__}\n"
        f"Listening on http://{host}:{port} (socket path /socket.io/)",
        title="Starting",
        box=box.ROUNDED,
    ))
    uvicorn.run("chitchat.api.main:app", host=host, port=port, reload=reload)


@app.command("init-db")
def init_db():
    """Create the message tables in the configured database."""
    from chitchat.dbs.database import Database

    db = Database(settings_factory.create_postgres_settings())
    try:
        db.create_tables()
    except Exception as e:
        console.print(f"[red]Failed to create tables: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        db.close()
    console.print("[green]Tables created[/green]")


@app.command("issue-token")
def issue_token(
    user_id: str = typer.Argument(..., help="User id to embed in the token"),
    days: Optional[int] = typer.Option(None, help="Lifetime in days (defaults to AUTH_TOKEN_TTL_DAYS)"),
):
    """Mint a development bearer token signed with AUTH_JWT_SECRET."""
    from datetime import timedelta

    verifier = TokenVerifier.from_settings(settings_factory.create_auth_settings())
    token = verifier.issue(user_id, timedelta(days=days) if days is not None else None)

    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("user_id", user_id)
    table.add_row("token", token)
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
