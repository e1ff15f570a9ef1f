"""Entity: Book."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.booknotes.runtime.config.config_data import DEFAULT_COVER_URL_TEMPLATE


class SortMode(str, Enum):
    """Fixed orderings available for the book listing."""

    RECENCY = "recency"
    RATING = "rating"
    TITLE = "title"

    @classmethod
    def parse(cls, value: str | None) -> SortMode:
        """Return the matching mode, falling back to recency for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.RECENCY


def cover_url_for(isbn: str | None, url_template: str = DEFAULT_COVER_URL_TEMPLATE) -> str | None:
    """Build the cover image URL for an ISBN, or None when there is no ISBN."""
    if not isbn:
        return None
    return url_template.format(isbn=isbn)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BookFields(BaseModel):
    """Attributes shared by submitted and stored books."""

    title: str = Field(min_length=1, description="Book title")
    author: str = Field(min_length=1, description="Book author")
    isbn: str | None = Field(default=None, description="ISBN used to look up a cover")
    rating: float | None = Field(default=None, description="Reader rating, no fixed range")
    notes: str | None = Field(default=None, description="Free-form reading notes")

    @field_validator("title", "author", mode="before")
    @classmethod
    def _strip_required(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("isbn", "notes", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("rating", mode="before")
    @classmethod
    def _optional_rating(cls, value: Any) -> Any:
        return _blank_to_none(value)


class BookDraft(BookFields):
    """Writable fields of a book, as submitted for insert or update.

    Blank optional values are stored as NULL and a missing read date defaults
    to today.
    """

    date_read: date = Field(default_factory=date.today, description="Date the book was read")

    @field_validator("date_read", mode="before")
    @classmethod
    def _default_date(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            return date.today()
        return value


class Book(BookFields):
    """A persisted book record."""

    id: int = Field(description="Primary key assigned by the store")
    date_read: date | None = Field(default=None, description="Date the book was read")

    def with_cover(self, url_template: str = DEFAULT_COVER_URL_TEMPLATE) -> BookView:
        """Return a view of this book that carries its cover image URL."""
        return BookView(
            **self.model_dump(exclude={"cover_url"}),
            cover_url=cover_url_for(self.isbn, url_template),
        )

    def form_values(self) -> dict[str, Any]:
        """Field values ready to populate an HTML form."""
        values = self.model_dump()
        values["date_read"] = self.date_read.isoformat() if self.date_read else ""
        return values


class BookView(Book):
    """A book enriched with its derived cover image URL."""

    cover_url: str | None = None
