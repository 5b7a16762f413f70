"""
Domain exceptions raised by the library core.
"""

from typing import Any, Dict, List, Optional


class LibraryError(Exception):
    """Base class for errors reported back to API clients."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        example: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.example = example


class BadRequestError(LibraryError):
    """Malformed identifier, invalid body fields or empty search query."""

    status_code = 400


class EmptyQueryError(BadRequestError):
    """Search query is empty after trimming."""

    def __init__(self, message: str = "Search query cannot be empty"):
        super().__init__(message)


class BookNotFoundError(LibraryError):
    """No book matches the requested identifier."""

    status_code = 404

    def __init__(self, book_id: int):
        super().__init__(f"Book with ID {book_id} not found.")
        self.book_id = book_id
