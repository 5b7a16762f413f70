"""
Unit tests for the in-memory BookStore.
"""

from datetime import datetime, timezone

import pytest

from library.exceptions import BookNotFoundError, EmptyQueryError
from library.models import BookUpdate, DeletedBook
from library.store import BookStore


class TestInsert:
    """Test cases for BookStore.insert."""

    def test_insert_assigns_sequential_ids(self, book_store):
        ids = [book_store.insert(f"Title {i}", "Author").id for i in range(5)]

        assert ids == [1, 2, 3, 4, 5]
        assert book_store.next_id == 6

    def test_insert_sets_equal_timestamps(self, book_store):
        book = book_store.insert("The Hobbit", "J.R.R. Tolkien")

        assert book.title == "The Hobbit"
        assert book.author == "J.R.R. Tolkien"
        assert book.created_at == book.updated_at

    def test_ids_never_reused_after_delete(self, book_store):
        book_store.insert("A", "a")
        second = book_store.insert("B", "b")
        book_store.delete_by_id(second.id)

        assert book_store.insert("C", "c").id == 3

    def test_returned_book_is_a_copy(self, book_store):
        """Test callers cannot mutate stored records."""
        book = book_store.insert("Original", "Author")
        book.title = "Changed"

        stored, _ = book_store.find_by_id(book.id)
        assert stored.title == "Original"

    def test_default_clock_is_utc(self):
        store = BookStore()
        book = store.insert("A", "B")

        assert book.created_at.tzinfo is not None
        assert book.created_at <= datetime.now(timezone.utc)


class TestFindById:
    """Test cases for BookStore.find_by_id."""

    def test_find_existing(self, populated_store):
        book, index = populated_store.find_by_id(2)

        assert book.title == "The Great Gatsby"
        assert index == 1

    def test_find_missing(self, populated_store):
        assert populated_store.find_by_id(9999) is None

    def test_index_shifts_after_delete(self, populated_store):
        populated_store.delete_by_id(1)

        _, index = populated_store.find_by_id(3)
        assert index == 1


class TestUpdateById:
    """Test cases for BookStore.update_by_id."""

    def test_update_title_only(self, populated_store):
        before, _ = populated_store.find_by_id(1)

        book, updated_fields = populated_store.update_by_id(1, BookUpdate(title="There and Back Again"))

        assert updated_fields == ["title"]
        assert book.title == "There and Back Again"
        assert book.author == before.author
        assert book.created_at == before.created_at
        assert book.updated_at > before.updated_at

    def test_update_both_fields(self, populated_store):
        book, updated_fields = populated_store.update_by_id(
            2, BookUpdate(title="Gatsby", author="Fitzgerald")
        )

        assert updated_fields == ["title", "author"]
        assert (book.title, book.author) == ("Gatsby", "Fitzgerald")

    def test_update_moves_timestamp_with_frozen_clock(self):
        """Test updated_at advances even if the clock does not."""
        frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
        store = BookStore(clock=lambda: frozen)
        store.insert("A", "B")

        book, _ = store.update_by_id(1, BookUpdate(author="C"))

        assert book.updated_at > book.created_at

    def test_update_preserves_order(self, populated_store):
        populated_store.update_by_id(1, BookUpdate(title="Zzz"))

        assert [book.id for book in populated_store.list_all()] == [1, 2, 3]

    def test_update_missing_raises(self, book_store):
        with pytest.raises(BookNotFoundError) as exc_info:
            book_store.update_by_id(9999, BookUpdate(title="X"))

        assert exc_info.value.book_id == 9999
        assert exc_info.value.status_code == 404


class TestDelete:
    """Test cases for delete_by_id and delete_all."""

    def test_delete_returns_snapshot(self, populated_store):
        deleted = populated_store.delete_by_id(2)

        assert deleted == DeletedBook(id=2, title="The Great Gatsby", author="F. Scott Fitzgerald")
        assert populated_store.find_by_id(2) is None
        assert [book.id for book in populated_store.list_all()] == [1, 3]

    def test_delete_missing_raises(self, populated_store):
        with pytest.raises(BookNotFoundError):
            populated_store.delete_by_id(42)

        assert populated_store.count == 3

    def test_delete_all_returns_snapshot_and_resets_ids(self, populated_store):
        books, count = populated_store.delete_all()

        assert count == 3
        assert [book.id for book in books] == [1, 2, 3]
        assert populated_store.count == 0
        assert populated_store.insert("Fresh", "Start").id == 1

    def test_delete_all_on_empty_store(self, book_store):
        books, count = book_store.delete_all()

        assert books == []
        assert count == 0


class TestSearch:
    """Test cases for BookStore.search."""

    @pytest.mark.parametrize("query", ["gatsby", "GATSBY", "Great G", "fitz"])
    def test_case_insensitive_substring(self, populated_store, query):
        results = populated_store.search(query)

        assert [book.id for book in results] == [2]

    def test_matches_preserve_collection_order(self, populated_store):
        results = populated_store.search("the")

        assert [book.id for book in results] == [1, 2]

    def test_no_matches(self, populated_store):
        assert populated_store.search("dune") == []

    @pytest.mark.parametrize("query", ["", "   ", "\t"])
    def test_empty_query_rejected(self, populated_store, query):
        with pytest.raises(EmptyQueryError) as exc_info:
            populated_store.search(query)

        assert exc_info.value.message == "Search query cannot be empty"


class TestListAll:
    """Test cases for BookStore.list_all."""

    def test_list_is_stable(self, populated_store):
        assert populated_store.list_all() == populated_store.list_all()

    def test_empty_store(self, book_store):
        assert book_store.list_all() == []
        assert book_store.count == 0
