"""Book server and database CLI commands."""

import typer
from rich.panel import Panel
from rich.table import Table

from src.booknotes.entities.service.book import BookRepository, SortMode

from .utils import console


def serve(
    host: str | None = typer.Option(None, help="Host to bind the server to"),
    port: int | None = typer.Option(None, help="Port to bind the server to"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the Booknotes web server.

    Host and port default to the values in config.yaml (port 3000).
    """
    import uvicorn

    from src.booknotes.runtime.context import get_config

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    console.print(
        Panel.fit(
            "[bold green]Starting Booknotes[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Server will be available at:[/blue] http://{bind_host}:{bind_port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.booknotes.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )


def init_db() -> None:
    """🗄️  Create the books table if it does not exist."""
    from src.booknotes.core.services import DbManageService

    DbManageService().create_all()
    console.print("[green]✅ Database tables created[/green]")


def list_books(
    sort: SortMode = typer.Option(SortMode.RECENCY, help="Sort order"),
) -> None:
    """📖 Print every book in the database."""
    from src.booknotes.core.services import DbSessionService

    with DbSessionService().session_scope() as session:
        books = BookRepository(session).list_all(sort)

    if not books:
        console.print("[yellow]📭 No books found[/yellow]")
        console.print("[dim]Add books from the web interface at /add[/dim]")
        return

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="green")
    table.add_column("Author", style="yellow")
    table.add_column("Rating", style="magenta", justify="center")
    table.add_column("Date read", style="blue", justify="center")

    for book in books:
        table.add_row(
            str(book.id),
            book.title,
            book.author,
            "" if book.rating is None else f"{book.rating:g}",
            book.date_read.isoformat() if book.date_read else "",
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(books)} books[/dim]")
