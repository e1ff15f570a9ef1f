"""Book database table model."""

from datetime import date

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class BookTable(SQLModel, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "books"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(sa_column=sa.Column(sa.Text, nullable=False))
    author: str = Field(sa_column=sa.Column(sa.Text, nullable=False))
    isbn: str | None = Field(default=None, sa_column=sa.Column(sa.Text, nullable=True))
    rating: float | None = Field(default=None, sa_column=sa.Column(sa.Float, nullable=True))
    notes: str | None = Field(default=None, sa_column=sa.Column(sa.Text, nullable=True))
    date_read: date | None = Field(default=None, sa_column=sa.Column(sa.Date, nullable=True))
