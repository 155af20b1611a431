"""
Index declarations for the books and pages tables.

The unique natural-key indexes are what make upserts safe: at most one
page per (subject, book_title, page_num) and one book per
(subject, book_title). The lookup indexes and the FTS5 text index keep
page lookups proportional to the selected subject and titles rather than
to the whole corpus.

FTS5 token characters are restricted to letters and numbers, a subset of
the regex word characters. Every page the whole-word regular expression
matches therefore also matches the FTS5 phrase built from the same query.
"""

import sqlite3

from ..core import get_config, get_logger, DatabaseError
from .connection import DatabaseManager, get_db_manager

logger = get_logger(__name__)


TOKEN_CATEGORIES = "L* N*"

UNIQUE_INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_books_subject_title ON books(subject, book_title)",
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_pages_subject_title_page ON pages(subject, book_title, page_num)",
]

LOOKUP_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_books_subject ON books(subject)",
    "CREATE INDEX IF NOT EXISTS idx_pages_subject_title ON pages(subject, book_title)",
]


def tokenizer_args(tokenizer: str = None) -> str:
    """
    Resolve the FTS5 tokenizer arguments.

    A unicode61 tokenizer without explicit categories gets
    `categories 'L* N*'`, so private-use glyphs and combining marks
    separate tokens as they separate words for the regex.
    """
    if tokenizer is None:
        tokenizer = get_config().search.tokenizer

    tokenizer = tokenizer.strip() or "unicode61"
    if tokenizer.split()[0] == "unicode61" and "categories" not in tokenizer:
        tokenizer += f" categories '{TOKEN_CATEGORIES}'"
    return tokenizer


def _get_fts_table_sql() -> str:
    """Generate FTS5 table creation SQL with configured tokenizer."""
    tokenizer = tokenizer_args().replace("'", "''")

    return f"""
    CREATE VIRTUAL TABLE IF NOT EXISTS pages_fts USING fts5(
        text,
        content='pages',
        content_rowid='id',
        tokenize='{tokenizer}'
    )
    """


FTS_TRIGGERS = [
    """
    CREATE TRIGGER IF NOT EXISTS pages_ai AFTER INSERT ON pages BEGIN
        INSERT INTO pages_fts(rowid, text) VALUES (new.id, new.text);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS pages_ad AFTER DELETE ON pages BEGIN
        INSERT INTO pages_fts(pages_fts, rowid, text)
        VALUES ('delete', old.id, old.text);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS pages_au AFTER UPDATE ON pages BEGIN
        INSERT INTO pages_fts(pages_fts, rowid, text)
        VALUES ('delete', old.id, old.text);
        INSERT INTO pages_fts(rowid, text) VALUES (new.id, new.text);
    END
    """
]


def ensure_indexes(db_manager: DatabaseManager = None) -> None:
    """
    Create every index the store relies on.

    Idempotent: each statement is IF NOT EXISTS, so it is safe to run on
    every process start.

    Args:
        db_manager: Handle to create the indexes on. Defaults to the process-wide one.

    Raises:
        DatabaseError: If an index cannot be created, e.g. because the
            pages table already holds duplicate natural keys.
    """
    db = db_manager or get_db_manager()

    with db.cursor() as cur:
        for index_sql in UNIQUE_INDEXES:
            try:
                cur.execute(index_sql)
            except sqlite3.IntegrityError as e:
                raise DatabaseError(
                    f"Cannot enforce uniqueness, duplicate records exist: {e}",
                    {"statement": index_sql}
                )

        for index_sql in LOOKUP_INDEXES:
            cur.execute(index_sql)

        fts_existed = cur.execute(
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name='pages_fts'"
        ).fetchone() is not None

        try:
            cur.execute(_get_fts_table_sql())
        except sqlite3.OperationalError as e:
            raise DatabaseError(f"Failed to create FTS table: {e}")

        for trigger_sql in FTS_TRIGGERS:
            cur.execute(trigger_sql)

        # Pages stored before the text index existed are not in it yet
        if not fts_existed:
            cur.execute("INSERT INTO pages_fts(pages_fts) VALUES ('rebuild')")

    logger.debug("Indexes ensured")


def rebuild_text_index(db_manager: DatabaseManager = None) -> None:
    """Rebuild the FTS5 text index from the pages table."""
    db = db_manager or get_db_manager()
    try:
        with db.cursor() as cur:
            cur.execute("INSERT INTO pages_fts(pages_fts) VALUES ('rebuild')")
    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to rebuild text index: {e}")
    logger.info("Text index rebuilt")


def drop_indexes(db_manager: DatabaseManager = None) -> None:
    """Drop the FTS5 index and its triggers. Table indexes go with their tables."""
    db = db_manager or get_db_manager()
    with db.cursor() as cur:
        cur.execute("DROP TRIGGER IF EXISTS pages_ai")
        cur.execute("DROP TRIGGER IF EXISTS pages_ad")
        cur.execute("DROP TRIGGER IF EXISTS pages_au")
        cur.execute("DROP TABLE IF EXISTS pages_fts")
