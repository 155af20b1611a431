"""
PDF import pipeline.

Scans the subject-organized library, extracts page text from each PDF,
and writes one book and its pages through the ingestion API.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..core import get_config, get_logger, ExtractionError, PageSearchError
from ..database import init_schema, reset_schema
from ..database.models import utc_now
from ..extraction import BookFile, FileScanner, PDFExtractor
from ..utils import clean_text
from .api import IngestionAPI

logger = get_logger(__name__)


@dataclass
class ImportStats:
    """Statistics from an import run."""
    books_scanned: int = 0
    books_imported: int = 0
    books_skipped: int = 0
    books_failed: int = 0
    pages_imported: int = 0
    errors: List[str] = field(default_factory=list)


class BookImporter:
    """
    Orchestrates the PDF import pipeline.

    Handles library discovery, text extraction, and upserts with
    progress callbacks for CLI and UI.
    """

    def __init__(
        self,
        reset: bool = False,
        progress_callback: Callable[[int, int, str], None] = None,
        ingestion: Optional[IngestionAPI] = None,
        scanner: Optional[FileScanner] = None,
        extractor: Optional[PDFExtractor] = None
    ):
        """
        Initialize the importer.

        Args:
            reset: If True, drop and recreate the database schema first.
            progress_callback: Optional callback(current, total, title)
                called for each book.
            ingestion: Ingestion API to write through.
            scanner: Library scanner. Defaults to the configured library.
            extractor: PDF extractor. Defaults to the configured backends.
        """
        self.config = get_config()
        self.reset = reset
        self.progress_callback = progress_callback

        self.ingestion = ingestion or IngestionAPI()
        self.scanner = scanner or FileScanner()
        self.extractor = extractor or PDFExtractor()

        self.skip_existing = self.config.indexing.skip_existing
        self.log_every = self.config.indexing.log_progress_every

    def run(self) -> ImportStats:
        """
        Run the complete import pipeline.

        Returns:
            ImportStats with counts and any errors encountered.
        """
        stats = ImportStats()

        logger.info("Starting import pipeline")

        db = self.ingestion.store.db
        if self.reset:
            reset_schema(db)
        else:
            init_schema(db)

        imported_keys = (
            self.ingestion.store.get_imported_keys() if self.skip_existing and not self.reset
            else set()
        )

        book_files = self.scanner.list_all()
        stats.books_scanned = len(book_files)

        logger.info(f"Found {stats.books_scanned} books to process")

        for i, book_file in enumerate(book_files):
            if (book_file.subject, book_file.book_title) in imported_keys:
                stats.books_skipped += 1
                continue

            if self.progress_callback:
                self.progress_callback(i + 1, stats.books_scanned, book_file.book_title)

            try:
                pages = self.import_book_file(book_file)
                stats.books_imported += 1
                stats.pages_imported += pages

            except ExtractionError as e:
                stats.books_failed += 1
                error_msg = f"{book_file.file_name}: {e.message}"
                stats.errors.append(error_msg)
                logger.warning(f"Failed to extract: {error_msg}")

            except PageSearchError as e:
                stats.books_failed += 1
                error_msg = f"{book_file.file_name}: {e.message}"
                stats.errors.append(error_msg)
                logger.error(f"Failed to store: {error_msg}")

            if (i + 1) % self.log_every == 0:
                logger.info(
                    f"Progress: {i + 1}/{stats.books_scanned} books "
                    f"({stats.books_imported} imported, {stats.books_failed} failed)"
                )

        logger.info(
            f"Import complete: {stats.books_imported} books, "
            f"{stats.pages_imported} pages, {stats.books_failed} failures"
        )

        return stats

    def import_book_file(self, book_file: BookFile) -> int:
        """
        Extract and store one book and its pages.

        Pages are extracted first so that a PDF that cannot be read leaves
        no book record behind.

        Args:
            book_file: Discovered book PDF.

        Returns:
            Number of pages stored.
        """
        extracted = self.extractor.extract(book_file.path)
        imported_at = utc_now()

        self.ingestion.import_book({
            "subject": book_file.subject,
            "bookTitle": book_file.book_title,
            "fileName": book_file.file_name,
            "importedAt": imported_at,
        })

        stored = 0
        for page_num, content in extracted:
            text = clean_text(content)
            if not text:
                continue

            self.ingestion.import_page({
                "subject": book_file.subject,
                "bookTitle": book_file.book_title,
                "pageNum": page_num,
                "text": text,
                "importedAt": imported_at,
            })
            stored += 1

        logger.debug(f"Stored {stored} pages for {book_file.subject}/{book_file.book_title}")
        return stored
