"""
Request/response façade over the search engine and document store.

Validates external input, forwards to the core, derives the total match
count, and translates internal errors into status codes with generic
messages. Internal diagnostics are logged, never returned.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core import (
    get_config,
    get_logger,
    PageSearchError,
    InvalidInputError,
    NotConfiguredError,
    WriteConflictError,
)
from ..database import DocumentStore
from ..search import PageSearchEngine

logger = get_logger(__name__)


SEARCH_FIELDS = {
    "subject": ("selectedSubject", "subject"),
    "query": ("searchQuery", "query"),
    "book_titles": ("pdfBookTitles", "book_titles"),
}


@dataclass(frozen=True)
class FacadeResponse:
    """Status code and JSON-ready body of a façade call."""
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _error(status: int, message: str) -> FacadeResponse:
    return FacadeResponse(status=status, body={"error": message})


def _failure(error: Exception, message: str) -> FacadeResponse:
    """Map an internal error to a response, logging its details."""
    if isinstance(error, InvalidInputError):
        return _error(400, error.message)

    logger.error(f"{message}: {error}")

    if isinstance(error, NotConfiguredError):
        return _error(503, "Service unavailable")
    if isinstance(error, WriteConflictError):
        return _error(409, message)
    return _error(500, message)


def _pick(body: Mapping[str, Any], field: str) -> Any:
    for key in SEARCH_FIELDS[field]:
        if key in body:
            return body[key]
    return None


class SearchFacade:
    """
    Entry point for external callers: subject listing, title listing and
    search requests.
    """

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        engine: Optional[PageSearchEngine] = None,
        max_titles: int = None
    ):
        """
        Initialize the façade.

        Args:
            store: Document store for listings. Defaults to a new DocumentStore.
            engine: Search engine. Defaults to one reading from store.
            max_titles: Upper bound on titles per search. Defaults to config.
        """
        if max_titles is None:
            max_titles = get_config().search.max_titles

        self.store = store or DocumentStore()
        self.engine = engine or PageSearchEngine(store=self.store)
        self.max_titles = max_titles

    def list_subjects(self) -> FacadeResponse:
        """List every distinct subject."""
        try:
            return FacadeResponse(200, self.store.list_distinct_subjects())
        except PageSearchError as e:
            return _failure(e, "Failed to fetch subjects")

    def list_titles(self, subject: str) -> FacadeResponse:
        """List the book titles of a subject."""
        if not subject:
            return _error(400, "Subject parameter is required")

        try:
            return FacadeResponse(200, self.store.list_book_titles_by_subject(subject))
        except PageSearchError as e:
            return _failure(e, "Failed to fetch PDF titles")

    def search(self, body: Mapping[str, Any]) -> FacadeResponse:
        """
        Run a search request.

        Args:
            body: Request body with selectedSubject, searchQuery and
                pdfBookTitles (or subject, query and book_titles).

        Returns:
            200 with results, total and message; 400 for a missing field or
            too many titles, before the store is touched.
        """
        if not isinstance(body, Mapping):
            return _error(400, "Request body must be a JSON object")

        subject = _pick(body, "subject")
        query = _pick(body, "query")
        book_titles = _pick(body, "book_titles")

        if not subject or not query or not book_titles:
            return _error(400, "Missing selectedSubject, searchQuery, or pdfBookTitles")

        if not isinstance(book_titles, (list, tuple)):
            return _error(400, "pdfBookTitles must be a list of titles")

        if len(book_titles) > self.max_titles:
            return _error(400, f"Too many titles, max {self.max_titles} allowed")

        try:
            results = self.engine.search(subject, query, book_titles)
        except PageSearchError as e:
            return _failure(e, "Failed to process search")

        total = results.match_count()
        logger.info(f"Search '{query}' in '{subject}': {total} matches in {len(results)} titles")

        return FacadeResponse(200, {
            "message": "Search completed",
            "results": results.to_dict(),
            "total": total
        })
