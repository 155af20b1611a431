"""
Search module for whole-word phrase search across book pages.

Provides query parsing, search execution, and result models.
"""

from .models import PageMatch, SearchResultSet
from .query_parser import QueryParser
from .engine import PageSearchEngine

__all__ = [
    "PageMatch",
    "SearchResultSet",
    "QueryParser",
    "PageSearchEngine"
]
