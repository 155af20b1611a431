"""
Database schema definitions for the Page Search engine.

Defines the books and pages tables. Indexes, the FTS5 text index and its
synchronization triggers are declared in the indexes module.
"""

from ..core import get_logger
from .connection import DatabaseManager, get_db_manager
from .indexes import ensure_indexes, drop_indexes

logger = get_logger(__name__)


BOOKS_TABLE = """
CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject TEXT NOT NULL,
    book_title TEXT NOT NULL,
    file_name TEXT NOT NULL,
    imported_at TEXT NOT NULL,
    updated_at TEXT
)
"""

PAGES_TABLE = """
CREATE TABLE IF NOT EXISTS pages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject TEXT NOT NULL,
    book_title TEXT NOT NULL,
    page_num INTEGER NOT NULL CHECK (page_num >= 0),
    text TEXT NOT NULL,
    imported_at TEXT NOT NULL,
    updated_at TEXT
)
"""


def init_schema(db_manager: DatabaseManager = None) -> None:
    """
    Initialize database schema if not exists.

    Creates the books and pages tables, then every index the store relies
    on. Safe to call on every process start.

    Args:
        db_manager: Handle to create the schema on. Defaults to the process-wide one.
    """
    db = db_manager or get_db_manager()
    logger.info(f"Initializing database schema: {db.db_path}")

    with db.cursor() as cur:
        cur.execute(BOOKS_TABLE)
        cur.execute(PAGES_TABLE)

    ensure_indexes(db)

    logger.info("Schema initialization complete")


def reset_schema(db_manager: DatabaseManager = None) -> None:
    """
    Drop and recreate all tables.

    Warning: This deletes all imported books and pages.
    """
    db = db_manager or get_db_manager()
    logger.warning("Resetting database schema - all data will be deleted")

    drop_indexes(db)

    with db.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS pages")
        cur.execute("DROP TABLE IF EXISTS books")

    init_schema(db)

    logger.info("Schema reset complete")


def get_statistics(db_manager: DatabaseManager = None) -> dict:
    """
    Get database statistics for dashboard display.

    Args:
        db_manager: Handle to read from. Defaults to the process-wide one.

    Returns:
        Dictionary with subject, book and page counts and size info.
    """
    db = db_manager or get_db_manager()

    with db.connection() as conn:
        stats = {}

        row = conn.execute("SELECT COUNT(*) as count FROM books").fetchone()
        stats["total_books"] = row["count"]

        row = conn.execute(
            "SELECT COUNT(DISTINCT subject) as count FROM books"
        ).fetchone()
        stats["total_subjects"] = row["count"]

        row = conn.execute("SELECT COUNT(*) as count FROM pages").fetchone()
        stats["total_pages"] = row["count"]

        row = conn.execute(
            "SELECT SUM(LENGTH(text)) as total FROM pages"
        ).fetchone()
        total_bytes = row["total"] or 0
        stats["total_content_mb"] = round(total_bytes / (1024 * 1024), 2)

        row = conn.execute(
            "SELECT MAX(COALESCE(updated_at, imported_at)) as newest FROM pages"
        ).fetchone()
        stats["newest_import"] = row["newest"]

    return stats
