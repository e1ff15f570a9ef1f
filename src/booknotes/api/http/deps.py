"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates
from sqlmodel import Session

from src.booknotes.api.http.app_data import ApplicationDependencies
from src.booknotes.core.services import DbSessionService
from src.booknotes.entities.service.book import BookRepository, BookStore
from src.booknotes.runtime.context import get_config

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a database session that is closed once the response is sent."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_store(db: Session = Depends(get_db_session)) -> BookStore:
    """Get the book store used by the book routes."""
    return BookRepository(db)


@lru_cache
def get_templates() -> Jinja2Templates:
    """Get the Jinja2 template renderer for HTML views."""
    return Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_cover_url_template() -> str:
    """Get the template used to build cover image URLs from an ISBN."""
    return get_config().covers.url_template
