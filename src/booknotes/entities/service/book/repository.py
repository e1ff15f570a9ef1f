"""Book data-access layer."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from src.booknotes.core.errors import StoreError
from .entity import Book, BookDraft, SortMode
from .table import BookTable

_ORDERINGS = {
    SortMode.RECENCY: (
        col(BookTable.date_read).desc().nulls_last(),
        col(BookTable.id).desc(),
    ),
    SortMode.RATING: (
        col(BookTable.rating).desc().nulls_last(),
        col(BookTable.date_read).desc().nulls_last(),
        col(BookTable.id).desc(),
    ),
    SortMode.TITLE: (
        col(BookTable.title).asc(),
        col(BookTable.id).asc(),
    ),
}


class BookStore(Protocol):
    """Operations the HTTP layer needs from a book store."""

    def list_all(self, sort: SortMode | str | None = SortMode.RECENCY) -> list[Book]: ...

    def get(self, book_id: int) -> Book | None: ...

    def create(self, draft: BookDraft) -> Book: ...

    def update(self, book_id: int, draft: BookDraft) -> Book | None: ...

    def delete(self, book_id: int) -> bool: ...


class BookRepository:
    """SQL-backed book store.

    Every public method runs a single statement with bound parameters and commits
    its own writes. Database failures are logged and surfaced as ``StoreError``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _guard(self, public_message: str, log_message: str, **context: Any) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.bind(error_type=type(exc).__name__, **context).exception(log_message)
            raise StoreError(public_message) from exc

    def list_all(self, sort: SortMode | str | None = SortMode.RECENCY) -> list[Book]:
        mode = sort if isinstance(sort, SortMode) else SortMode.parse(sort)
        statement = select(BookTable).order_by(*_ORDERINGS[mode])
        with self._guard(
            "Error loading books from database", "Error fetching books", sort=mode.value
        ):
            rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def get(self, book_id: int) -> Book | None:
        with self._guard(
            "Error loading book from database", "Error fetching book", book_id=book_id
        ):
            row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def create(self, draft: BookDraft) -> Book:
        row = BookTable(**draft.model_dump())
        with self._guard("Error adding book to database", "Error adding book", title=draft.title):
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        logger.info("Book {} added", row.id)
        return Book.model_validate(row, from_attributes=True)

    def update(self, book_id: int, draft: BookDraft) -> Book | None:
        """Overwrite every writable column of a book; a missing id is a no-op."""
        with self._guard(
            "Error updating book in database", "Error updating book", book_id=book_id
        ):
            row = self._session.get(BookTable, book_id)
            if row is None:
                logger.debug("Update skipped, book {} does not exist", book_id)
                return None
            for field, value in draft.model_dump().items():
                setattr(row, field, value)
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        logger.info("Book {} updated", book_id)
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: int) -> bool:
        """Remove a book if it exists; returns whether a row was deleted."""
        with self._guard(
            "Error deleting book from database", "Error deleting book", book_id=book_id
        ):
            row = self._session.get(BookTable, book_id)
            if row is None:
                return False
            self._session.delete(row)
            self._session.commit()
        logger.info("Book {} deleted", book_id)
        return True
