"""
Tests for the PDF import pipeline.

Extraction is mocked; books and pages are written to a temporary database
through the `store` fixture.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from pagesearch.core import ExtractionError
from pagesearch.extraction import BookFile, FileScanner, PDFExtractor
from pagesearch.ingestion import BookImporter, IngestionAPI


def book_file(subject: str, title: str) -> BookFile:
    return BookFile(path=Path(f"/library/{subject}/{title}.pdf"), subject=subject, book_title=title)


@pytest.fixture
def scanner():
    scanner = Mock(spec=FileScanner)
    scanner.list_all.return_value = [
        book_file("history", "Rome"),
        book_file("science", "Atoms"),
    ]
    return scanner


@pytest.fixture
def extractor():
    extractor = Mock(spec=PDFExtractor)
    extractor.extract.return_value = [
        (1, "The   fox ran."),
        (2, "   "),
        (3, "Another page."),
    ]
    return extractor


def make_importer(store, scanner, extractor, **kwargs) -> BookImporter:
    return BookImporter(
        ingestion=IngestionAPI(store=store),
        scanner=scanner,
        extractor=extractor,
        **kwargs
    )


class TestBookImporter:

    def test_imports_books_and_pages(self, store, scanner, extractor):
        stats = make_importer(store, scanner, extractor).run()

        assert stats.books_scanned == 2
        assert stats.books_imported == 2
        assert stats.books_failed == 0
        assert stats.pages_imported == 4
        assert store.list_distinct_subjects() == ["history", "science"]
        assert store.get_book("history", "Rome").file_name == "Rome.pdf"

    def test_pages_are_cleaned_and_blank_pages_skipped(self, store, scanner, extractor):
        make_importer(store, scanner, extractor).run()

        assert store.get_page("history", "Rome", 1).text == "The fox ran."
        assert store.get_page("history", "Rome", 2) is None

    def test_skips_already_imported_books(self, store, scanner, extractor):
        make_importer(store, scanner, extractor).run()
        extractor.extract.reset_mock()

        stats = make_importer(store, scanner, extractor).run()

        assert stats.books_skipped == 2
        assert stats.books_imported == 0
        extractor.extract.assert_not_called()

    def test_reset_reimports_everything(self, store, scanner, extractor):
        make_importer(store, scanner, extractor).run()

        stats = make_importer(store, scanner, extractor, reset=True).run()

        assert stats.books_imported == 2
        assert store.count_pages() == 4

    def test_extraction_failure_recorded(self, store, scanner, extractor):
        extractor.extract.side_effect = [
            ExtractionError("corrupt file"),
            [(1, "Atoms are small.")],
        ]

        stats = make_importer(store, scanner, extractor).run()

        assert stats.books_failed == 1
        assert stats.books_imported == 1
        assert "Rome.pdf: corrupt file" in stats.errors
        assert store.get_book("history", "Rome") is None

    def test_progress_callback(self, store, scanner, extractor):
        calls = []

        make_importer(
            store, scanner, extractor,
            progress_callback=lambda current, total, title: calls.append((current, total, title))
        ).run()

        assert calls == [(1, 2, "Rome"), (2, 2, "Atoms")]
