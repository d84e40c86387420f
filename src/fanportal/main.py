import logging
from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from .config import get_db_url, get_log_level
from .errors import PortalError
from .homepage import latest_first, resolve_trending
from .identity import IdentityStore, parse_role
from .service import PortalService
from .storage import Storage

app = typer.Typer(help="Operator commands for the fan portal backend.")
console = Console()


def _format_ns(value: int) -> str:
    return datetime.fromtimestamp(value / 1e9, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _service(ctx: typer.Context) -> PortalService:
    service = PortalService(Storage(ctx.obj["db_url"]))
    service.bootstrap()
    return service


@app.callback()
def main(
    ctx: typer.Context,
    db_url: Optional[str] = typer.Option(None, "--db-url", help="SQLAlchemy URL, defaults to the user data dir."),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level."),
):
    """
    Fan portal - content service for news, rumors, discussions and groups.
    """
    logging.basicConfig(
        level=(log_level or get_log_level()).upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.obj = {"db_url": db_url or get_db_url()}


@app.command("init-db")
def init_db(ctx: typer.Context):
    """Creates the schema, seeds settings and grants bootstrap admins."""
    _service(ctx)
    console.print("[bold green]Database ready.[/bold green]")


@app.command("grant-role")
def grant_role(ctx: typer.Context, principal: str, role: str):
    """Assigns a role out-of-band, e.g. to create the first admin."""
    service = _service(ctx)
    try:
        with service.storage.session_scope() as db:
            IdentityStore(db).set_role(principal, parse_role(role))
    except PortalError as e:
        console.print(str(e), style="bold red", markup=False)
        raise typer.Exit(code=1)
    console.print(f"'{principal}' is now [cyan]{role}[/cyan].")


@app.command()
def homepage(ctx: typer.Context):
    """Shows trending items and the latest uploads, newest first."""
    service = _service(ctx)
    content = service.get_homepage_content()

    trending = Table(title="[bold blue]Trending[/bold blue]")
    trending.add_column("Type", style="green")
    trending.add_column("ID", style="cyan", no_wrap=True)
    trending.add_column("Title", style="magenta")
    trending.add_column("Curated", style="dim")
    limit = service.settings.get("homepage.trending_limit", 3)
    for entry, item in resolve_trending(content, limit=limit):
        trending.add_row(entry.content_type, str(item.id), Text(item.title), _format_ns(entry.timestamp))
    console.print(trending)

    latest = Table(title="[bold blue]Latest[/bold blue]")
    latest.add_column("Type", style="green")
    latest.add_column("ID", style="cyan", no_wrap=True)
    latest.add_column("Uploaded", style="dim")
    for row in latest_first(content.latest_articles_table):
        latest.add_row(row.item_type, str(row.item_id), _format_ns(row.upload_date))
    console.print(latest)


@app.command()
def groups(ctx: typer.Context):
    """Lists groups with their member counts."""
    service = _service(ctx)
    all_groups = service.get_all_groups()
    if not all_groups:
        console.print("[bold yellow]No groups found.[/bold yellow]")
        return

    table = Table(title="[bold blue]Groups[/bold blue]")
    table.add_column("Name", style="magenta")
    table.add_column("Members", justify="right")
    table.add_column("Base", style="green")
    table.add_column("Theater")
    for group in all_groups:
        table.add_row(Text(group.name), str(group.member_count), Text(group.base_location), Text(group.theater_location))
    console.print(table)


if __name__ == "__main__":
    app()
