"""
Tests for the PDF extractor module.

Tests backend selection and fallback handling.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from pagesearch.core.exceptions import ExtractionError
from pagesearch.extraction.extractor import PDFExtractor
from pagesearch.extraction.pdfplumber_backend import PDFPlumberBackend
from pagesearch.extraction.pypdf_backend import PyPDFBackend


class TestPDFExtractor:
    """Tests for PDFExtractor class."""

    def test_default_backends(self, configured_db):
        extractor = PDFExtractor()

        assert isinstance(extractor.primary, PyPDFBackend)
        assert isinstance(extractor.fallback, PDFPlumberBackend)

    def test_explicit_backends(self, configured_db):
        extractor = PDFExtractor(primary_backend="pdfplumber", fallback_backend="")

        assert isinstance(extractor.primary, PDFPlumberBackend)
        assert extractor.fallback is None

    def test_unknown_backend_raises(self, configured_db):
        with pytest.raises(ExtractionError):
            PDFExtractor(primary_backend="ocr")

    def test_primary_result_used(self, configured_db, sample_pdf: Path):
        extractor = PDFExtractor()
        extractor.primary = Mock(extract=Mock(return_value=[(1, "primary")]))
        extractor.fallback = Mock(extract=Mock(return_value=[(1, "fallback")]))

        assert extractor.extract(sample_pdf) == [(1, "primary")]
        extractor.fallback.extract.assert_not_called()

    def test_fallback_on_failure(self, configured_db, sample_pdf: Path):
        extractor = PDFExtractor()
        extractor.primary = Mock(extract=Mock(side_effect=ExtractionError("broken")))
        extractor.fallback = Mock(extract=Mock(return_value=[(1, "fallback")]))

        assert extractor.extract(sample_pdf) == [(1, "fallback")]

    def test_fallback_on_empty(self, configured_db, sample_pdf: Path):
        extractor = PDFExtractor()
        extractor.primary = Mock(extract=Mock(return_value=[]))
        extractor.fallback = Mock(extract=Mock(return_value=[(2, "scanned")]))

        assert extractor.extract(sample_pdf) == [(2, "scanned")]

    def test_primary_error_raised_when_both_fail(self, configured_db, sample_pdf: Path):
        extractor = PDFExtractor()
        extractor.primary = Mock(extract=Mock(side_effect=ExtractionError("primary broke")))
        extractor.fallback = Mock(extract=Mock(side_effect=ExtractionError("fallback broke")))

        with pytest.raises(ExtractionError, match="primary broke"):
            extractor.extract(sample_pdf)

    def test_empty_everywhere_raises(self, configured_db, sample_pdf: Path):
        extractor = PDFExtractor()
        extractor.primary = Mock(extract=Mock(return_value=[]))
        extractor.fallback = Mock(extract=Mock(return_value=[]))

        with pytest.raises(ExtractionError, match="empty"):
            extractor.extract(sample_pdf)

    def test_nonexistent_file_raises(self, configured_db, temp_dir: Path):
        extractor = PDFExtractor()

        with pytest.raises(ExtractionError):
            extractor.extract(temp_dir / "nonexistent.pdf")
