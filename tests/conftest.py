"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, a temporary config and database, a sample
PDF library, and singleton resets so tests are isolated and never touch
real data.
"""

import json
import pytest
import tempfile
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="page_search_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_config(temp_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    data_dir = temp_dir / "data"
    data_dir.mkdir(exist_ok=True)

    output_dir = temp_dir / "output"
    output_dir.mkdir()

    logs_dir = output_dir / "logs"
    logs_dir.mkdir()

    config_data = {
        "paths": {
            "data_directory": str(data_dir),
            "database_path": str(output_dir / "test.db"),
            "logs_directory": str(logs_dir)
        },
        "store": {
            "connect_timeout": 5.0,
            "write_retries": 2,
            "retry_backoff_ms": 1
        },
        "extraction": {
            "primary_backend": "pypdf",
            "fallback_backend": "pdfplumber",
            "max_file_size_mb": 100,
            "supported_extensions": [".pdf"]
        },
        "indexing": {
            "skip_existing": True,
            "log_progress_every": 5
        },
        "search": {
            "max_titles": 40,
            "snippet_length": 80,
            "tokenizer": "unicode61",
            "use_fts_prefilter": True,
            "sort_by_page_num": False
        },
        "gui": {
            "page_title": "Test Page Search"
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def sample_pdf_content() -> bytes:
    """
    Create minimal valid PDF content for testing.

    Returns:
        Bytes representing a minimal PDF with text.
    """
    # Minimal PDF with "Hello World" text
    pdf_content = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792]
   /Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>
endobj
4 0 obj
<< /Length 44 >>
stream
BT /F1 12 Tf 100 700 Td (Hello World) Tj ET
endstream
endobj
5 0 obj
<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>
endobj
xref
0 6
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
0000000266 00000 n
0000000359 00000 n
trailer
<< /Size 6 /Root 1 0 R >>
startxref
434
%%EOF"""
    return pdf_content


@pytest.fixture
def sample_pdf(temp_dir: Path, sample_pdf_content: bytes) -> Path:
    """Create a sample PDF file for testing."""
    pdf_path = temp_dir / "sample.pdf"
    pdf_path.write_bytes(sample_pdf_content)
    return pdf_path


@pytest.fixture
def sample_library(temp_dir: Path, sample_pdf_content: bytes) -> Path:
    """
    Create a subject-organized library of sample PDFs.

    Layout:
        data/history/Rome.pdf
        data/history/medieval/Castles.pdf
        data/science/Atoms.pdf
        data/loose.pdf          (no subject, ignored)
        data/science/notes.txt  (wrong extension, ignored)

    Returns:
        Path to the library directory.
    """
    data_dir = temp_dir / "data"
    data_dir.mkdir(exist_ok=True)

    history = data_dir / "history"
    (history / "medieval").mkdir(parents=True)
    science = data_dir / "science"
    science.mkdir()

    (history / "Rome.pdf").write_bytes(sample_pdf_content)
    (history / "medieval" / "Castles.pdf").write_bytes(sample_pdf_content)
    (science / "Atoms.pdf").write_bytes(sample_pdf_content)
    (data_dir / "loose.pdf").write_bytes(sample_pdf_content)
    (science / "notes.txt").write_text("Not a PDF")

    return data_dir


@pytest.fixture
def temp_database(temp_dir: Path) -> Path:
    """Path where a test database should be created."""
    return temp_dir / "test.db"


@pytest.fixture
def imported_at() -> datetime:
    """A fixed import timestamp."""
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from pagesearch.core import config_loader
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    """Reset the logger initialization flag between tests."""
    from pagesearch.core import logger
    logger._logger_initialized = False
    yield
    logger._logger_initialized = False


@pytest.fixture
def reset_db_singleton():
    """Close and drop the process-wide database manager between tests."""
    from pagesearch.database import connection
    connection.close_db_manager()
    yield
    connection.close_db_manager()


@pytest.fixture
def configured_db(temp_config, reset_config_singleton, reset_db_singleton):
    """
    Set up a fully configured database using temp config.

    This fixture initializes config with temp paths and resets
    both config and db singletons, ready for schema operations.
    """
    from pagesearch.core.config_loader import get_config
    get_config(temp_config)
    yield


@pytest.fixture
def store(configured_db):
    """A DocumentStore over an initialized temporary database."""
    from pagesearch.database import init_schema, DocumentStore
    init_schema()
    return DocumentStore()
