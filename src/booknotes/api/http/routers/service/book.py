"""Book routes: server-rendered listing, detail and CRUD forms."""

import re
from datetime import date

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from src.booknotes.api.http.deps import (
    get_book_store,
    get_cover_url_template,
    get_templates,
)
from src.booknotes.core.errors import BookNotFoundError, BookValidationError
from src.booknotes.entities.service.book import BookDraft, BookStore, SortMode

router = APIRouter(tags=["books"])

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=302)


def _parse_date_read(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` date; other ISO 8601 forms are rejected."""
    if not _DATE_PATTERN.fullmatch(value):
        raise BookValidationError("Date read must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise BookValidationError("Date read must be YYYY-MM-DD") from exc


def book_form(
    title: str = Form(""),
    author: str = Form(""),
    isbn: str = Form(""),
    rating: str = Form(""),
    notes: str = Form(""),
    date_read: str = Form(""),
) -> BookDraft:
    """Parse and validate the add/edit book form."""
    if not title.strip() or not author.strip():
        raise BookValidationError("Title and author are required")

    rating_value = None
    if rating.strip():
        try:
            rating_value = float(rating)
        except ValueError as exc:
            raise BookValidationError("Rating must be a number") from exc

    date_value = _parse_date_read(date_read.strip()) if date_read.strip() else None

    try:
        return BookDraft(
            title=title,
            author=author,
            isbn=isbn,
            rating=rating_value,
            notes=notes,
            date_read=date_value,
        )
    except ValidationError as exc:
        raise BookValidationError("Invalid book data") from exc


@router.get("/", response_class=HTMLResponse, name="list_books")
def list_books(
    request: Request,
    sort: str | None = Query(default=None, description="recency, rating or title"),
    store: BookStore = Depends(get_book_store),
    templates: Jinja2Templates = Depends(get_templates),
    url_template: str = Depends(get_cover_url_template),
):
    """List every book in the requested order."""
    mode = SortMode.parse(sort)
    books = [book.with_cover(url_template) for book in store.list_all(mode)]
    return templates.TemplateResponse(
        request,
        "index.html",
        {"books": books, "current_sort": mode.value, "sort_modes": list(SortMode)},
    )


@router.get("/add", response_class=HTMLResponse, name="add_book_form")
def add_book_form(
    request: Request,
    templates: Jinja2Templates = Depends(get_templates),
):
    return templates.TemplateResponse(request, "add.html", {})


@router.post("/add", name="add_book")
def add_book(
    draft: BookDraft = Depends(book_form),
    store: BookStore = Depends(get_book_store),
) -> RedirectResponse:
    store.create(draft)
    return _redirect_home()


@router.get("/edit/{book_id}", response_class=HTMLResponse, name="edit_book_form")
def edit_book_form(
    request: Request,
    book_id: int,
    store: BookStore = Depends(get_book_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Render the edit form pre-filled with the stored values."""
    book = store.get(book_id)
    if book is None:
        raise BookNotFoundError(book_id)
    return templates.TemplateResponse(
        request, "edit.html", {"book": book.form_values()}
    )


@router.post("/edit/{book_id}", name="edit_book")
def edit_book(
    book_id: int,
    draft: BookDraft = Depends(book_form),
    store: BookStore = Depends(get_book_store),
) -> RedirectResponse:
    """Overwrite a book with the submitted form; unknown ids are ignored."""
    store.update(book_id, draft)
    return _redirect_home()


@router.post("/delete/{book_id}", name="delete_book")
def delete_book(
    book_id: int,
    store: BookStore = Depends(get_book_store),
) -> RedirectResponse:
    store.delete(book_id)
    return _redirect_home()


@router.get("/book/{book_id}", response_class=HTMLResponse, name="show_book")
def show_book(
    request: Request,
    book_id: int,
    store: BookStore = Depends(get_book_store),
    templates: Jinja2Templates = Depends(get_templates),
    url_template: str = Depends(get_cover_url_template),
):
    """Render a single book with its cover."""
    book = store.get(book_id)
    if book is None:
        raise BookNotFoundError(book_id)
    return templates.TemplateResponse(
        request, "book.html", {"book": book.with_cover(url_template)}
    )
