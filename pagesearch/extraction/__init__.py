"""
PDF extraction module for the import pipeline.

Provides library scanning and page text extraction with two backends
(pypdf and pdfplumber) and automatic fallback.
"""

from .file_scanner import FileScanner, BookFile
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend
from .extractor import PDFExtractor

__all__ = [
    "FileScanner",
    "BookFile",
    "PyPDFBackend",
    "PDFPlumberBackend",
    "PDFExtractor"
]
