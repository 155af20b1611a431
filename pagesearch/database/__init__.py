"""
Database module for SQLite persistence of books and pages.

Provides connection management, schema and index definitions, typed
records, and the document store used by search and ingestion.
"""

from .connection import (
    get_connection,
    get_cursor,
    get_db_manager,
    close_db_manager,
    DatabaseManager
)
from .schema import init_schema, reset_schema, get_statistics
from .indexes import ensure_indexes, rebuild_text_index
from .models import Book, Page, PagePredicate, WriteOutcome
from .repository import DocumentStore

__all__ = [
    "get_connection",
    "get_cursor",
    "get_db_manager",
    "close_db_manager",
    "DatabaseManager",
    "init_schema",
    "reset_schema",
    "get_statistics",
    "ensure_indexes",
    "rebuild_text_index",
    "Book",
    "Page",
    "PagePredicate",
    "WriteOutcome",
    "DocumentStore"
]
