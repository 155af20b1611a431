"""
Tests for database schema and index management.

SAFETY NOTE: All tests use the `configured_db` fixture, so the schema is
only ever created inside a temporary directory.
"""

import sqlite3
import pytest
from datetime import datetime

from pagesearch.core import DatabaseError
from pagesearch.database import DocumentStore, Page
from pagesearch.database.connection import DatabaseManager, get_connection, get_cursor
from pagesearch.database.indexes import ensure_indexes, rebuild_text_index, drop_indexes, tokenizer_args
from pagesearch.database.schema import init_schema, reset_schema, get_statistics


def _names(kind: str) -> set:
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = ?", (kind,)
        ).fetchall()
    return {row["name"] for row in rows}


def _insert_page(cur, title="Rome", page_num=1, text="The fox ran."):
    cur.execute(
        "INSERT INTO pages (subject, book_title, page_num, text, imported_at) "
        "VALUES (?, ?, ?, ?, ?)",
        ("history", title, page_num, text, "2024-05-01T12:00:00+00:00")
    )


class TestInitSchema:
    """Tests for init_schema function."""

    def test_creates_tables(self, configured_db):
        init_schema()

        tables = _names("table")
        assert {"books", "pages", "pages_fts"} <= tables

    def test_creates_indexes(self, configured_db):
        init_schema()

        indexes = _names("index")
        assert "uq_books_subject_title" in indexes
        assert "uq_pages_subject_title_page" in indexes
        assert "idx_books_subject" in indexes
        assert "idx_pages_subject_title" in indexes

    def test_creates_fts_triggers(self, configured_db):
        init_schema()

        assert {"pages_ai", "pages_ad", "pages_au"} <= _names("trigger")

    def test_idempotent(self, configured_db):
        """Test that running init_schema repeatedly is a no-op."""
        init_schema()
        with get_cursor() as cur:
            _insert_page(cur)

        init_schema()
        init_schema()

        with get_connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM pages").fetchone()[0]
        assert count == 1


class TestUniqueness:
    """The natural-key indexes reject duplicates."""

    def test_duplicate_page_key_rejected(self, configured_db):
        init_schema()

        with pytest.raises(sqlite3.IntegrityError):
            with get_cursor() as cur:
                _insert_page(cur, text="first")
                _insert_page(cur, text="second")

    def test_negative_page_num_rejected(self, configured_db):
        init_schema()

        with pytest.raises(sqlite3.IntegrityError):
            with get_cursor() as cur:
                _insert_page(cur, page_num=-1)

    def test_ensure_indexes_fails_on_existing_duplicates(self, configured_db):
        """Test that duplicates stored before the index exists surface as DatabaseError."""
        init_schema()
        with get_cursor() as cur:
            cur.execute("DROP INDEX uq_pages_subject_title_page")
            _insert_page(cur, text="first")
            _insert_page(cur, text="second")

        with pytest.raises(DatabaseError):
            ensure_indexes()


class TestTextIndex:
    """Tests for the FTS5 index and its triggers."""

    def _fts_rowids(self, phrase: str) -> list:
        with get_connection() as conn:
            rows = conn.execute(
                "SELECT rowid FROM pages_fts WHERE pages_fts MATCH ?", (phrase,)
            ).fetchall()
        return [row[0] for row in rows]

    def test_insert_trigger_indexes_text(self, configured_db):
        init_schema()
        with get_cursor() as cur:
            _insert_page(cur, text="The quick brown fox")

        assert len(self._fts_rowids('"brown fox"')) == 1

    def test_update_trigger_replaces_text(self, configured_db):
        init_schema()
        with get_cursor() as cur:
            _insert_page(cur, text="The quick brown fox")
            cur.execute("UPDATE pages SET text = 'A lazy dog'")

        assert self._fts_rowids("fox") == []
        assert len(self._fts_rowids("dog")) == 1

    def test_late_index_creation_covers_existing_pages(self, configured_db):
        """Test that pages stored before the FTS table existed are indexed."""
        init_schema()
        drop_indexes()
        with get_cursor() as cur:
            _insert_page(cur, text="Before the index")

        ensure_indexes()

        assert len(self._fts_rowids("index")) == 1

    def test_rebuild_text_index(self, configured_db):
        init_schema()
        with get_cursor() as cur:
            _insert_page(cur, text="Rebuilt content")

        rebuild_text_index()

        assert len(self._fts_rowids("rebuilt")) == 1


class TestResetSchema:
    """Tests for reset_schema function."""

    def test_reset_deletes_data(self, configured_db):
        init_schema()
        with get_cursor() as cur:
            _insert_page(cur)

        reset_schema()

        with get_connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM pages").fetchone()[0]
        assert count == 0
        assert "uq_pages_subject_title_page" in _names("index")


class TestStatistics:
    """Tests for get_statistics function."""

    def test_empty_database(self, configured_db):
        init_schema()

        stats = get_statistics()

        assert stats["total_books"] == 0
        assert stats["total_subjects"] == 0
        assert stats["total_pages"] == 0
        assert stats["total_content_mb"] == 0
        assert stats["newest_import"] is None

    def test_counts(self, configured_db):
        init_schema()
        with get_cursor() as cur:
            cur.execute(
                "INSERT INTO books (subject, book_title, file_name, imported_at) "
                "VALUES ('history', 'Rome', 'Rome.pdf', '2024-05-01T12:00:00+00:00')"
            )
            _insert_page(cur, page_num=1)
            _insert_page(cur, page_num=2)

        stats = get_statistics()

        assert stats["total_books"] == 1
        assert stats["total_subjects"] == 1
        assert stats["total_pages"] == 2
        assert stats["newest_import"] == "2024-05-01T12:00:00+00:00"


class TestTokenizer:
    """FTS5 token characters stay within the regex word characters."""

    def test_unicode61_limited_to_letters_and_numbers(self):
        assert tokenizer_args("unicode61") == "unicode61 categories 'L* N*'"

    def test_explicit_categories_kept(self):
        assert tokenizer_args("unicode61 categories 'L*'") == "unicode61 categories 'L*'"

    def test_other_tokenizer_untouched(self):
        assert tokenizer_args("porter unicode61") == "porter unicode61"

    def test_fts_table_created_with_categories(self, configured_db):
        init_schema()

        with get_connection() as conn:
            sql = conn.execute(
                "SELECT sql FROM sqlite_master WHERE name = 'pages_fts'"
            ).fetchone()["sql"]
        assert "categories" in sql

    def test_private_use_glyph_separates_tokens(self, configured_db):
        init_schema()
        with get_cursor() as cur:
            _insert_page(cur, text="\ue000fox ran")

        with get_connection() as conn:
            rows = conn.execute(
                "SELECT rowid FROM pages_fts WHERE pages_fts MATCH ?", ('"fox"',)
            ).fetchall()
        assert len(rows) == 1


class TestInjectedManager:
    """Schema operations run on the handle they are given."""

    @pytest.fixture
    def other_db(self, configured_db, temp_dir):
        manager = DatabaseManager(temp_dir / "other.db", timeout=5.0)
        yield manager
        manager.close()

    def test_store_on_other_handle(self, other_db):
        init_schema(other_db)
        store = DocumentStore(db_manager=other_db)

        store.upsert_page(Page(
            subject="history",
            book_title="A",
            page_num=1,
            text="The fox ran.",
            imported_at=datetime(2024, 5, 1)
        ))
        rebuild_text_index(other_db)

        assert get_statistics(other_db)["total_pages"] == 1
        assert store.get_page("history", "A", 1).text == "The fox ran."
        assert "pages" not in _names("table")

    def test_ensure_and_drop_indexes_on_other_handle(self, other_db):
        init_schema(other_db)
        drop_indexes(other_db)

        with other_db.connection() as conn:
            names = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master")}
        assert "pages_fts" not in names

        ensure_indexes(other_db)

        with other_db.connection() as conn:
            names = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master")}
        assert {"pages_fts", "uq_pages_subject_title_page"} <= names

    def test_reset_on_other_handle(self, other_db):
        init_schema(other_db)
        with other_db.cursor() as cur:
            _insert_page(cur)

        reset_schema(other_db)

        assert get_statistics(other_db)["total_pages"] == 0
