"""
Document store for books and pages.

Provides upserts keyed on natural keys, subject and title listings, and
predicate-based page lookups evaluated inside SQLite.
"""

import sqlite3
import time
from typing import Callable, List, Optional, Set, Tuple, TypeVar

from ..core import get_config, get_logger, DatabaseError, WriteConflictError
from .connection import DatabaseManager, get_db_manager
from .models import (
    Book,
    Page,
    PagePredicate,
    WriteOutcome,
    from_db_timestamp,
    to_db_timestamp,
    utc_now,
)

logger = get_logger(__name__)

T = TypeVar("T")

_LOCK_MESSAGES = ("database is locked", "database is busy", "database table is locked")


def _is_lock_error(error: sqlite3.OperationalError) -> bool:
    message = str(error).lower()
    return any(fragment in message for fragment in _LOCK_MESSAGES)


class DocumentStore:
    """
    Store for Book and Page records.

    Every write is an upsert on the record's natural key, applied in a
    single IMMEDIATE transaction so that concurrent writers with the same
    key never create two records. Lock contention is retried with a linear
    backoff before surfacing as WriteConflictError.
    """

    def __init__(
        self,
        db_manager: DatabaseManager = None,
        write_retries: int = None,
        retry_backoff_ms: int = None
    ):
        """
        Initialize the store.

        Args:
            db_manager: Connection handle owner. Defaults to the process-wide one.
            write_retries: Extra attempts on lock contention. Defaults to config.
            retry_backoff_ms: Base backoff between attempts. Defaults to config.
        """
        if write_retries is None or retry_backoff_ms is None:
            store_config = get_config().store
            if write_retries is None:
                write_retries = store_config.write_retries
            if retry_backoff_ms is None:
                retry_backoff_ms = store_config.retry_backoff_ms

        self.db = db_manager or get_db_manager()
        self.write_retries = max(0, write_retries)
        self.retry_backoff_ms = retry_backoff_ms

    # Writes

    def upsert_book(self, book: Book) -> WriteOutcome:
        """
        Insert a book or overwrite the one with the same (subject, book_title).

        Args:
            book: Book record to store.

        Returns:
            WriteOutcome describing whether the book was inserted or updated.
        """
        return self._write(lambda cur: self._upsert_book(cur, book), book.key)

    def upsert_page(self, page: Page) -> WriteOutcome:
        """
        Insert a page or overwrite the one with the same
        (subject, book_title, page_num).

        Args:
            page: Page record to store.

        Returns:
            WriteOutcome describing whether the page was inserted or updated.
        """
        return self._write(lambda cur: self._upsert_page(cur, page), page.key)

    def _upsert_book(self, cur: sqlite3.Cursor, book: Book) -> WriteOutcome:
        existing = cur.execute(
            "SELECT * FROM books WHERE subject = ? AND book_title = ?",
            book.key
        ).fetchone()

        stored = book.merge_into(
            self._row_to_book(existing) if existing else None,
            now=utc_now()
        )

        cur.execute("""
            INSERT INTO books (subject, book_title, file_name, imported_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(subject, book_title) DO UPDATE SET
                file_name = excluded.file_name,
                imported_at = excluded.imported_at,
                updated_at = excluded.updated_at
        """, (
            stored.subject,
            stored.book_title,
            stored.file_name,
            to_db_timestamp(stored.imported_at),
            to_db_timestamp(stored.updated_at)
        ))

        return WriteOutcome.updated() if existing else WriteOutcome.inserted()

    def _upsert_page(self, cur: sqlite3.Cursor, page: Page) -> WriteOutcome:
        existing = cur.execute(
            "SELECT * FROM pages WHERE subject = ? AND book_title = ? AND page_num = ?",
            page.key
        ).fetchone()

        stored = page.merge_into(
            self._row_to_page(existing) if existing else None,
            now=utc_now()
        )

        cur.execute("""
            INSERT INTO pages (subject, book_title, page_num, text, imported_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(subject, book_title, page_num) DO UPDATE SET
                text = excluded.text,
                imported_at = excluded.imported_at,
                updated_at = excluded.updated_at
        """, (
            stored.subject,
            stored.book_title,
            stored.page_num,
            stored.text,
            to_db_timestamp(stored.imported_at),
            to_db_timestamp(stored.updated_at)
        ))

        return WriteOutcome.updated() if existing else WriteOutcome.inserted()

    def _write(self, operation: Callable[[sqlite3.Cursor], T], key: tuple) -> T:
        """Run operation in an IMMEDIATE transaction, retrying on lock contention."""
        attempts = self.write_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                with self.db.cursor() as cur:
                    cur.execute("BEGIN IMMEDIATE")
                    return operation(cur)

            except sqlite3.OperationalError as e:
                if not _is_lock_error(e):
                    raise DatabaseError(f"Write failed for {key}: {e}")

                logger.warning(
                    f"Write contention on {key} (attempt {attempt}/{attempts}): {e}"
                )
                if attempt < attempts:
                    time.sleep(self.retry_backoff_ms * attempt / 1000)

            except sqlite3.Error as e:
                raise DatabaseError(f"Write failed for {key}: {e}")

        raise WriteConflictError(
            f"Could not apply upsert after {attempts} attempts",
            {"key": list(key)}
        )

    # Reads

    def list_distinct_subjects(self) -> List[str]:
        """
        Get every distinct subject across books.

        Returns:
            Subject names, alphabetically sorted.
        """
        rows = self._fetch_all(
            "SELECT DISTINCT subject FROM books ORDER BY subject"
        )
        return [row["subject"] for row in rows]

    def list_book_titles_by_subject(self, subject: str) -> List[str]:
        """
        Get the titles of all books of a subject.

        Only the title column is read, served from the subject/title index.

        Args:
            subject: Subject to filter by.

        Returns:
            Book titles in import order.
        """
        rows = self._fetch_all(
            "SELECT book_title FROM books WHERE subject = ? ORDER BY id",
            (subject,)
        )
        return [row["book_title"] for row in rows]

    def list_books_by_subject(self, subject: str) -> List[Book]:
        """
        Get all books of a subject.

        Args:
            subject: Subject to filter by.

        Returns:
            Book records in import order.
        """
        rows = self._fetch_all(
            "SELECT * FROM books WHERE subject = ? ORDER BY id",
            (subject,)
        )
        return [self._row_to_book(row) for row in rows]

    def get_book(self, subject: str, book_title: str) -> Optional[Book]:
        """Fetch a single book by natural key."""
        rows = self._fetch_all(
            "SELECT * FROM books WHERE subject = ? AND book_title = ?",
            (subject, book_title)
        )
        return self._row_to_book(rows[0]) if rows else None

    def get_page(self, subject: str, book_title: str, page_num: int) -> Optional[Page]:
        """Fetch a single page by natural key."""
        rows = self._fetch_all(
            "SELECT * FROM pages WHERE subject = ? AND book_title = ? AND page_num = ?",
            (subject, book_title, page_num)
        )
        return self._row_to_page(rows[0]) if rows else None

    def get_imported_keys(self) -> Set[Tuple[str, str]]:
        """
        Get the natural keys of all imported books.

        Returns:
            Set of (subject, book_title) tuples.
        """
        rows = self._fetch_all("SELECT subject, book_title FROM books")
        return {(row["subject"], row["book_title"]) for row in rows}

    def count_pages(self, subject: str = None, book_title: str = None) -> int:
        """
        Count stored pages, optionally restricted to a subject and title.

        Args:
            subject: Optional subject filter.
            book_title: Optional title filter (used with subject).

        Returns:
            Number of matching pages.
        """
        sql = "SELECT COUNT(*) as count FROM pages"
        clauses = []
        params: list = []

        if subject is not None:
            clauses.append("subject = ?")
            params.append(subject)
        if book_title is not None:
            clauses.append("book_title = ?")
            params.append(book_title)

        if clauses:
            sql += " WHERE " + " AND ".join(clauses)

        return self._fetch_all(sql, tuple(params))[0]["count"]

    def find_pages(self, predicate: PagePredicate) -> List[Page]:
        """
        Find pages satisfying every constraint of a predicate.

        Subject and titles are resolved through the subject/title index, the
        optional FTS5 phrase narrows candidates through the text index, and
        the text pattern is checked by the registered REGEXP function.

        Args:
            predicate: Constraints to evaluate.

        Returns:
            Matching pages in storage order. Empty if nothing matches.
        """
        titles = list(dict.fromkeys(predicate.book_titles))
        if not titles:
            return []

        placeholders = ", ".join("?" for _ in titles)
        clauses = ["p.subject = ?", f"p.book_title IN ({placeholders})"]
        params: list = [predicate.subject, *titles]

        if predicate.fts_phrase:
            clauses.append(
                "p.id IN (SELECT rowid FROM pages_fts WHERE pages_fts MATCH ?)"
            )
            params.append(predicate.fts_phrase)

        if predicate.text_pattern:
            clauses.append("p.text REGEXP ?")
            params.append(predicate.text_pattern)

        sql = f"""
            SELECT p.* FROM pages p
            WHERE {' AND '.join(clauses)}
            ORDER BY p.id
        """

        rows = self._fetch_all(sql, tuple(params))
        return [self._row_to_page(row) for row in rows]

    def _fetch_all(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        try:
            with self.db.connection() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise DatabaseError(f"Query failed: {e}")

    @staticmethod
    def _row_to_book(row) -> Book:
        """Convert a database row to a Book object."""
        return Book(
            subject=row["subject"],
            book_title=row["book_title"],
            file_name=row["file_name"],
            imported_at=from_db_timestamp(row["imported_at"]),
            updated_at=from_db_timestamp(row["updated_at"])
        )

    @staticmethod
    def _row_to_page(row) -> Page:
        """Convert a database row to a Page object."""
        return Page(
            subject=row["subject"],
            book_title=row["book_title"],
            page_num=row["page_num"],
            text=row["text"],
            imported_at=from_db_timestamp(row["imported_at"]),
            updated_at=from_db_timestamp(row["updated_at"])
        )
