"""Application error types mapped to HTTP responses by the API layer."""


class BooknotesError(Exception):
    """Base class for errors whose message is safe to show to the client."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BookValidationError(BooknotesError):
    """Submitted book data is missing a required field or is malformed."""

    status_code = 400


class BookNotFoundError(BooknotesError):
    """No book exists with the requested id."""

    status_code = 404

    def __init__(self, book_id: int, message: str = "Book not found") -> None:
        super().__init__(message)
        self.book_id = book_id


class StoreError(BooknotesError):
    """The record store failed to execute a statement.

    ``message`` is the generic text returned to the client; the underlying
    database error is kept as ``__cause__`` and logged server-side.
    """

    status_code = 500
