"""Main CLI application module."""

import typer

from .book_commands import init_db, list_books, serve

# Create the main CLI application
app = typer.Typer(
    help="📚 Booknotes CLI - run the web server and manage the book database",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command(name="serve")(serve)
app.command(name="init-db")(init_db)
app.command(name="books")(list_books)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
