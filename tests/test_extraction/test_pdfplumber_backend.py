"""
Tests for the pdfplumber-based extraction backend.

Tests page text extraction and error cases using sample PDF fixtures
and mocks.
"""

import pytest
from unittest.mock import patch, Mock, MagicMock

from pagesearch.extraction.pdfplumber_backend import PDFPlumberBackend
from pagesearch.core.exceptions import ExtractionError


@pytest.fixture
def backend():
    """Create a PDFPlumberBackend instance."""
    return PDFPlumberBackend()


def mock_pdf_with(pages):
    mock_pdf = MagicMock()
    mock_pdf.pages = pages
    mock_pdf.__enter__ = Mock(return_value=mock_pdf)
    mock_pdf.__exit__ = Mock(return_value=False)
    return mock_pdf


def mock_page(text=None, error=None):
    page = Mock()
    page.dedupe_chars.return_value = page
    if error:
        page.extract_text.side_effect = error
    else:
        page.extract_text.return_value = text
    return page


class TestPDFPlumberBackend:
    """Tests for PDFPlumberBackend class."""

    def test_backend_name(self, backend):
        assert backend.name == "pdfplumber"

    def test_extract_returns_list(self, backend, sample_pdf):
        try:
            result = backend.extract(sample_pdf)
            assert isinstance(result, list)
        except ExtractionError:
            pass

    def test_extract_nonexistent_file_raises(self, backend, temp_dir):
        with pytest.raises(ExtractionError):
            backend.extract(temp_dir / "nonexistent.pdf")

    def test_extract_invalid_pdf_raises(self, backend, temp_dir):
        invalid_pdf = temp_dir / "invalid.pdf"
        invalid_pdf.write_bytes(b"Not a valid PDF")

        with pytest.raises(ExtractionError):
            backend.extract(invalid_pdf)


class TestPDFPlumberBackendWithMock:
    """Tests using mocked pdfplumber for deterministic behavior."""

    @patch("pagesearch.extraction.pdfplumber_backend.pdfplumber")
    def test_extract_multiple_pages(self, mock_pdfplumber, backend, sample_pdf):
        mock_pdfplumber.open.return_value = mock_pdf_with(
            [mock_page("Page one"), mock_page("Page two"), mock_page("Page three")]
        )

        results = backend.extract(sample_pdf)

        assert results == [(1, "Page one"), (2, "Page two"), (3, "Page three")]

    @patch("pagesearch.extraction.pdfplumber_backend.pdfplumber")
    def test_extract_skips_empty_pages(self, mock_pdfplumber, backend, sample_pdf):
        mock_pdfplumber.open.return_value = mock_pdf_with(
            [mock_page("Real content"), mock_page("   \n  "), mock_page(None)]
        )

        assert backend.extract(sample_pdf) == [(1, "Real content")]

    @patch("pagesearch.extraction.pdfplumber_backend.pdfplumber")
    def test_extract_continues_on_page_error(self, mock_pdfplumber, backend, sample_pdf):
        """Test that a failing page doesn't stop extraction of others."""
        mock_pdfplumber.open.return_value = mock_pdf_with([
            mock_page("Good content"),
            mock_page(error=Exception("Page corrupted")),
            mock_page("Good content"),
        ])

        results = backend.extract(sample_pdf)

        assert results == [(1, "Good content"), (3, "Good content")]

    @patch("pagesearch.extraction.pdfplumber_backend.pdfplumber")
    def test_duplicate_glyphs_merged_before_reading(self, mock_pdfplumber, backend, sample_pdf):
        raw = Mock()
        raw.extract_text.return_value = "ffooxx"
        deduped = Mock()
        deduped.extract_text.return_value = "fox"
        raw.dedupe_chars.return_value = deduped
        mock_pdfplumber.open.return_value = mock_pdf_with([raw])

        assert backend.extract(sample_pdf) == [(1, "fox")]
        raw.extract_text.assert_not_called()

    @patch("pagesearch.extraction.pdfplumber_backend.pdfplumber")
    def test_dedupe_can_be_disabled(self, mock_pdfplumber, sample_pdf):
        page = mock_page("raw text")
        mock_pdfplumber.open.return_value = mock_pdf_with([page])

        assert PDFPlumberBackend(dedupe_chars=False).extract(sample_pdf) == [(1, "raw text")]
        page.dedupe_chars.assert_not_called()

    @patch("pagesearch.extraction.pdfplumber_backend.pdfplumber")
    def test_iter_pages_is_lazy(self, mock_pdfplumber, backend, sample_pdf):
        mock_pdfplumber.open.return_value = mock_pdf_with([mock_page("One"), mock_page("Two")])

        pages = backend.iter_pages(sample_pdf)

        assert next(pages) == (1, "One")
        assert next(pages) == (2, "Two")
