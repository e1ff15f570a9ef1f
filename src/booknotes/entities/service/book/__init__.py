"""Entity package: Book."""

from .entity import Book, BookDraft, BookView, SortMode, cover_url_for
from .repository import BookRepository, BookStore
from .table import BookTable

__all__ = [
    "Book",
    "BookDraft",
    "BookView",
    "SortMode",
    "cover_url_for",
    "BookRepository",
    "BookStore",
    "BookTable",
]
