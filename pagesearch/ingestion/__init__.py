"""
Ingestion module: the write path into the document store.

Provides the validating ingestion API and the PDF import pipeline that
feeds it.
"""

from .api import IngestionAPI, parse_book, parse_page
from .importer import BookImporter, ImportStats

__all__ = [
    "IngestionAPI",
    "parse_book",
    "parse_page",
    "BookImporter",
    "ImportStats"
]
