"""Schema management for the book database."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from src.booknotes.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine if engine is not None else DbSessionService().engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.booknotes.entities.service.book import BookTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop all database tables."""
        from src.booknotes.entities.service.book import BookTable  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.info("Database tables dropped.")
