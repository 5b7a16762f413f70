"""
In-memory book storage.

BookStore is the only component that owns book records and the id sequence.
Callers always receive copies, so the stored collection can only change
through the methods below.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

import structlog

from library.exceptions import BookNotFoundError, EmptyQueryError
from library.models import Book, BookUpdate, DeletedBook
from utilities.logger import RequestLogger

logger = structlog.get_logger(__name__)

INITIAL_ID = 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookStore:
    """Owns the book collection and hands out sequential identifiers."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._books: List[Book] = []
        self._next_id = INITIAL_ID
        self._lock = threading.RLock()
        self._events = RequestLogger("library.store").bind_context(collection="books")

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._books)

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def _locate(self, book_id: int) -> Optional[int]:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None

    def insert(self, title: str, author: str) -> Book:
        """
        Append a new book.

        Args:
            title: Validated, trimmed title
            author: Validated, trimmed author

        Returns:
            Copy of the stored book with its assigned id and timestamps
        """
        with self._lock:
            now = self._clock()
            book = Book(
                id=self._next_id,
                title=title,
                author=author,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._books.append(book)

        self._events.log_book_created(book.id, book.title, book.author)
        return book.model_copy()

    def find_by_id(self, book_id: int) -> Optional[Tuple[Book, int]]:
        """Return a copy of the matching book and its position, or None."""
        with self._lock:
            index = self._locate(book_id)
            if index is None:
                return None
            return self._books[index].model_copy(), index

    def update_by_id(self, book_id: int, fields: BookUpdate) -> Tuple[Book, List[str]]:
        """
        Apply the present fields of ``fields`` to an existing book.

        Returns:
            Tuple of the updated book and the names of the fields changed

        Raises:
            BookNotFoundError: If no book has ``book_id``
        """
        with self._lock:
            index = self._locate(book_id)
            if index is None:
                raise BookNotFoundError(book_id)

            book = self._books[index]
            updated_fields = fields.present_fields()
            changes = {name: getattr(fields, name) for name in updated_fields}

            # updated_at must move forward even when the clock has not ticked
            now = self._clock()
            if now <= book.updated_at:
                now = book.updated_at + timedelta(microseconds=1)
            changes["updated_at"] = now

            book = book.model_copy(update=changes)
            self._books[index] = book

        self._events.log_book_updated(book_id, updated_fields)
        return book.model_copy(), updated_fields

    def delete_by_id(self, book_id: int) -> DeletedBook:
        """
        Remove a book, keeping the order of the remaining records.

        Raises:
            BookNotFoundError: If no book has ``book_id``
        """
        with self._lock:
            index = self._locate(book_id)
            if index is None:
                raise BookNotFoundError(book_id)
            book = self._books.pop(index)

        self._events.log_book_deleted(book.id, book.title)
        return DeletedBook(id=book.id, title=book.title, author=book.author)

    def delete_all(self) -> Tuple[List[Book], int]:
        """Clear the collection and restart ids at 1."""
        with self._lock:
            removed = self._books
            self._books = []
            self._next_id = INITIAL_ID

        self._events.log_books_cleared(len(removed))
        return removed, len(removed)

    def search(self, query: str) -> List[Book]:
        """
        Case-insensitive substring search over title and author.

        Raises:
            EmptyQueryError: If ``query`` is empty after trimming
        """
        if not query or not query.strip():
            raise EmptyQueryError()

        needle = query.lower()

        with self._lock:
            matches = [
                book.model_copy() for book in self._books
                if needle in book.title.lower() or needle in book.author.lower()
            ]

        logger.debug("Search completed", query=query, matches=len(matches))
        return matches

    def list_all(self) -> List[Book]:
        with self._lock:
            return [book.model_copy() for book in self._books]
