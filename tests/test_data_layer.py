"""Consolidated data layer tests.

This module covers:
- Book entity, draft normalisation and cover URL derivation
- Sort mode parsing
- Book repository operations (using in-memory SQLite for fast, real database testing)
- Store failure handling
"""

from datetime import date

import pytest
from pydantic import ValidationError
from sqlmodel import select

from src.booknotes.core.errors import StoreError
from src.booknotes.entities.service.book import (
    Book,
    BookDraft,
    BookRepository,
    BookTable,
    SortMode,
    cover_url_for,
)

COVER_TEMPLATE = "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg"


class TestSortMode:
    """Test sort mode parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("recency", SortMode.RECENCY),
            ("rating", SortMode.RATING),
            ("title", SortMode.TITLE),
        ],
    )
    def test_known_modes(self, value, expected):
        assert SortMode.parse(value) is expected

    @pytest.mark.parametrize("value", [None, "", "author", "RATING", "random"])
    def test_unknown_modes_fall_back_to_recency(self, value):
        assert SortMode.parse(value) is SortMode.RECENCY


class TestCoverUrl:
    """Test cover URL derivation."""

    def test_cover_url_with_isbn(self):
        assert cover_url_for("9780441172719") == (
            "https://covers.openlibrary.org/b/isbn/9780441172719-L.jpg"
        )

    @pytest.mark.parametrize("isbn", [None, ""])
    def test_cover_url_without_isbn(self, isbn):
        assert cover_url_for(isbn) is None

    def test_cover_url_custom_template(self):
        assert cover_url_for("123", "https://img.test/{isbn}.png") == "https://img.test/123.png"

    def test_with_cover_attaches_url(self):
        book = Book(id=1, title="Dune", author="Herbert", isbn="9780441172719")
        view = book.with_cover(COVER_TEMPLATE)

        assert view.id == 1
        assert view.title == "Dune"
        assert view.cover_url == COVER_TEMPLATE.format(isbn="9780441172719")

    def test_with_cover_without_isbn(self):
        view = Book(id=1, title="Dune", author="Herbert").with_cover(COVER_TEMPLATE)
        assert view.cover_url is None


class TestBookDraft:
    """Test the writable book fields model."""

    def test_blank_optional_fields_become_none(self):
        draft = BookDraft(title="Dune", author="Herbert", isbn="", rating="", notes="  ")

        assert draft.isbn is None
        assert draft.rating is None
        assert draft.notes is None

    def test_missing_date_defaults_to_today(self):
        assert BookDraft(title="Dune", author="Herbert").date_read == date.today()
        assert BookDraft(title="Dune", author="Herbert", date_read="").date_read == date.today()
        assert BookDraft(title="Dune", author="Herbert", date_read=None).date_read == date.today()

    def test_required_fields_are_stripped(self):
        draft = BookDraft(title="  Dune ", author=" Herbert")
        assert draft.title == "Dune"
        assert draft.author == "Herbert"

    @pytest.mark.parametrize(
        "title, author",
        [("", "Herbert"), ("Dune", ""), ("   ", "Herbert"), ("Dune", "  ")],
    )
    def test_blank_title_or_author_rejected(self, title, author):
        with pytest.raises(ValidationError):
            BookDraft(title=title, author=author)

    def test_rating_accepts_numeric_strings(self):
        assert BookDraft(title="Dune", author="Herbert", rating="4.5").rating == 4.5

    def test_form_values_format_date(self):
        book = Book(id=3, title="Dune", author="Herbert", date_read=date(2024, 3, 9))
        assert book.form_values()["date_read"] == "2024-03-09"

    def test_form_values_without_date(self):
        book = Book(id=3, title="Dune", author="Herbert")
        assert book.form_values()["date_read"] == ""


class TestBookRepository:
    """Test the SQL-backed book store."""

    def test_create_assigns_unique_ids(self, repository, make_draft):
        first = repository.create(make_draft(title="Dune"))
        second = repository.create(make_draft(title="Emma"))

        assert first.id is not None
        assert second.id is not None
        assert first.id != second.id

    def test_create_then_list_contains_exactly_one_new_record(self, repository, make_draft):
        before = repository.list_all()
        created = repository.create(make_draft(title="Dune", author="Herbert"))
        after = repository.list_all()

        new_records = [b for b in after if b.id not in {x.id for x in before}]
        assert len(after) == len(before) + 1
        assert len(new_records) == 1
        assert new_records[0] == created
        assert (new_records[0].title, new_records[0].author) == ("Dune", "Herbert")

    def test_create_persists_all_fields(self, repository, session, make_draft):
        created = repository.create(
            make_draft(isbn="9780441172719", rating=4.5, notes="Spice", date_read=date(2023, 5, 1))
        )

        row = session.exec(select(BookTable).where(BookTable.id == created.id)).one()
        assert row.title == "Dune"
        assert row.isbn == "9780441172719"
        assert row.rating == 4.5
        assert row.notes == "Spice"
        assert row.date_read == date(2023, 5, 1)

    def test_create_defaults_date_read_to_today(self, repository):
        created = repository.create(BookDraft(title="Dune", author="Herbert"))
        assert created.date_read == date.today()

    def test_get_existing(self, repository, make_draft):
        created = repository.create(make_draft())
        assert repository.get(created.id) == created

    def test_get_missing_returns_none(self, repository):
        assert repository.get(999) is None

    def test_update_overwrites_every_field(self, repository, make_draft):
        created = repository.create(
            make_draft(isbn="9780441172719", rating=5, notes="Great", date_read=date(2020, 1, 1))
        )

        updated = repository.update(
            created.id,
            make_draft(title="Dune Messiah", author="F. Herbert", date_read=date(2021, 2, 2)),
        )

        fetched = repository.get(created.id)
        assert updated == fetched
        assert fetched.title == "Dune Messiah"
        assert fetched.author == "F. Herbert"
        # Previous optional values do not leak through
        assert fetched.isbn is None
        assert fetched.rating is None
        assert fetched.notes is None
        assert fetched.date_read == date(2021, 2, 2)

    def test_update_missing_is_noop(self, repository, make_draft):
        assert repository.update(999, make_draft()) is None
        assert repository.list_all() == []

    def test_delete_then_get_is_not_found(self, repository, make_draft):
        created = repository.create(make_draft())

        assert repository.delete(created.id) is True
        assert repository.get(created.id) is None

    def test_delete_missing_does_not_error(self, repository):
        assert repository.delete(999) is False

    def test_list_empty(self, repository):
        assert repository.list_all(SortMode.RATING) == []


class TestBookRepositoryOrdering:
    """Test the three listing orders."""

    @pytest.fixture
    def populated(self, repository, make_draft):
        repository.create(make_draft(title="Middlemarch", rating=4, date_read=date(2022, 6, 1)))
        repository.create(make_draft(title="Beloved", rating=5, date_read=date(2021, 1, 1)))
        repository.create(make_draft(title="Anna Karenina", rating=4, date_read=date(2023, 3, 3)))
        repository.create(make_draft(title="Catch-22", rating=None, date_read=date(2024, 2, 2)))
        return repository

    def test_recency_orders_by_date_descending(self, populated):
        books = populated.list_all(SortMode.RECENCY)
        dates = [b.date_read for b in books]
        assert dates == sorted(dates, reverse=True)

    def test_rating_orders_by_rating_then_date(self, populated):
        books = populated.list_all(SortMode.RATING)
        assert [b.title for b in books] == ["Beloved", "Anna Karenina", "Middlemarch", "Catch-22"]

    def test_undated_books_come_last_in_recency(self, populated, session):
        session.add(BookTable(title="Undated", author="Anon", date_read=None))
        session.commit()

        books = populated.list_all(SortMode.RECENCY)

        assert books[-1].title == "Undated"
        assert books[-1].date_read is None
        assert books[0].title == "Catch-22"

    def test_title_orders_alphabetically(self, populated):
        titles = [b.title for b in populated.list_all(SortMode.TITLE)]
        assert titles == sorted(titles)

    @pytest.mark.parametrize("sort", [None, "bogus", "recency"])
    def test_unknown_sort_uses_recency(self, populated, sort):
        assert populated.list_all(sort) == populated.list_all(SortMode.RECENCY)

    def test_string_sort_modes_accepted(self, populated):
        assert populated.list_all("title") == populated.list_all(SortMode.TITLE)


class TestStoreErrors:
    """Database failures surface as StoreError with a client-safe message."""

    @pytest.fixture
    def broken_repository(self, session, engine):
        BookTable.__table__.drop(engine)
        return BookRepository(session)

    def test_list_failure(self, broken_repository):
        with pytest.raises(StoreError, match="Error loading books from database"):
            broken_repository.list_all()

    def test_get_failure(self, broken_repository):
        with pytest.raises(StoreError, match="Error loading book from database"):
            broken_repository.get(1)

    def test_create_failure(self, broken_repository, make_draft):
        with pytest.raises(StoreError, match="Error adding book to database") as exc_info:
            broken_repository.create(make_draft())
        assert exc_info.value.__cause__ is not None

    def test_update_failure(self, broken_repository, make_draft):
        with pytest.raises(StoreError, match="Error updating book in database"):
            broken_repository.update(1, make_draft())

    def test_delete_failure(self, broken_repository):
        with pytest.raises(StoreError, match="Error deleting book from database"):
            broken_repository.delete(1)
