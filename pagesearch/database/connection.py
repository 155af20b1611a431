"""
SQLite connection management for the Page Search engine.

A DatabaseManager owns a single lazily established connection handle.
The first operation opens it, later operations reuse it, and a failed
attempt leaves the handle unestablished so the next call tries again.
"""

import re
import sqlite3
import threading
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Generator, Optional

from ..core import get_config, get_logger, NotConfiguredError
from ..utils import ensure_directory

logger = get_logger(__name__)


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> "re.Pattern":
    return re.compile(pattern)


def _regexp(pattern: str, value: Optional[str]) -> int:
    """SQLite REGEXP implementation: `value REGEXP pattern`."""
    if value is None:
        return 0
    return 1 if _compile_pattern(pattern).search(value) else 0


class DatabaseManager:
    """
    Manages the SQLite connection handle with proper lifecycle handling.

    Enables WAL mode for concurrent reads from other processes during
    imports, registers the REGEXP function used by page lookups, and
    serializes use of the shared handle across threads.
    """

    def __init__(self, db_path: Path = None, timeout: float = None):
        """
        Initialize database manager without connecting.

        Args:
            db_path: Path to SQLite database file. Defaults to config value.
            timeout: Seconds to wait on a locked database. Defaults to config value.
        """
        if db_path is None or timeout is None:
            config = get_config()
            db_path = db_path or config.paths.database_path
            timeout = timeout if timeout is not None else config.store.connect_timeout

        self.db_path = Path(db_path)
        self.timeout = timeout

        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def is_established(self) -> bool:
        """Whether the connection handle is currently open."""
        return self._connection is not None

    def _establish(self) -> sqlite3.Connection:
        """Open the connection with optimal settings, or raise NotConfiguredError."""
        conn = None
        try:
            ensure_directory(self.db_path.parent)

            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=self.timeout
            )

            conn.row_factory = sqlite3.Row
            conn.create_function("regexp", 2, _regexp, deterministic=True)

            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA cache_size=-64000")  # 64MB cache
            conn.execute("PRAGMA temp_store=MEMORY")

        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            self._connection = None
            logger.error(f"Database connection failed for {self.db_path}: {e}")
            raise NotConfiguredError(
                f"Failed to connect to database: {e}",
                {"path": str(self.db_path)}
            )

        logger.info(f"Connected to database: {self.db_path}")
        self._connection = conn
        return conn

    def get_handle(self) -> sqlite3.Connection:
        """
        Return the shared connection, establishing it on first use.

        Raises:
            NotConfiguredError: If the connection cannot be established.
        """
        with self._lock:
            if self._connection is None:
                return self._establish()
            return self._connection

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for read access to the shared connection.

        Yields:
            SQLite connection with Row factory enabled.
        """
        with self._lock:
            yield self.get_handle()

    @contextmanager
    def cursor(self, commit: bool = True) -> Generator[sqlite3.Cursor, None, None]:
        """
        Context manager for database cursors with automatic commit/rollback.

        Args:
            commit: Whether to commit on successful exit.

        Yields:
            SQLite cursor for query execution.
        """
        with self._lock:
            conn = self.get_handle()
            cursor = conn.cursor()

            try:
                yield cursor
                if commit:
                    conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def execute(self, query: str, params: tuple = ()) -> int:
        """
        Execute a single write statement.

        Args:
            query: SQL query string.
            params: Query parameters.

        Returns:
            Number of rows affected.
        """
        with self.cursor() as cur:
            cur.execute(query, params)
            return cur.rowcount

    def close(self) -> None:
        """Close the connection handle if open."""
        with self._lock:
            if self._connection is not None:
                logger.info("Closing database connection")
                self._connection.close()
                self._connection = None


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get the process-wide DatabaseManager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def close_db_manager() -> None:
    """Close and drop the process-wide DatabaseManager."""
    global _db_manager
    if _db_manager is not None:
        _db_manager.close()
        _db_manager = None


@contextmanager
def get_connection() -> Generator[sqlite3.Connection, None, None]:
    """
    Get the shared database connection via context manager.

    Yields:
        SQLite connection.
    """
    with get_db_manager().connection() as conn:
        yield conn


@contextmanager
def get_cursor(commit: bool = True) -> Generator[sqlite3.Cursor, None, None]:
    """
    Get a database cursor via context manager.

    Args:
        commit: Whether to auto-commit on exit.

    Yields:
        SQLite cursor.
    """
    with get_db_manager().cursor(commit=commit) as cur:
        yield cur
