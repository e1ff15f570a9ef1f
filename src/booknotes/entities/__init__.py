"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with validation
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .service.book import Book, BookDraft, BookRepository, BookStore, BookTable, BookView, SortMode

__all__ = [
    "Book",
    "BookDraft",
    "BookView",
    "SortMode",
    "BookTable",
    "BookRepository",
    "BookStore",
]
