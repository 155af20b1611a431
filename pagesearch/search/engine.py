"""
Page search engine.

Finds the pages of selected books of a subject whose text contains a
phrase as a case-insensitive whole-word match, and groups them by book
title. The engine keeps no state between calls and never writes.
"""

import time
from typing import Sequence

from ..core import get_config, get_logger, InvalidInputError
from ..database import DocumentStore, PagePredicate
from .models import PageMatch, SearchResultSet
from .query_parser import QueryParser

logger = get_logger(__name__)


class PageSearchEngine:
    """
    Whole-word phrase search over stored pages.

    Builds a page predicate from the subject, phrase and candidate titles,
    delegates its evaluation to the document store, and groups the
    returned pages by title. Store errors propagate unchanged.
    """

    def __init__(
        self,
        store: DocumentStore = None,
        use_fts_prefilter: bool = None,
        sort_by_page_num: bool = None
    ):
        """
        Initialize the search engine.

        Args:
            store: Document store to read from. Defaults to a new DocumentStore.
            use_fts_prefilter: Narrow candidates through the FTS5 text index.
                Defaults to config value.
            sort_by_page_num: Order each title's matches by page number
                instead of storage order. Defaults to config value.
        """
        if use_fts_prefilter is None or sort_by_page_num is None:
            search_config = get_config().search
            if use_fts_prefilter is None:
                use_fts_prefilter = search_config.use_fts_prefilter
            if sort_by_page_num is None:
                sort_by_page_num = search_config.sort_by_page_num

        self.store = store or DocumentStore()
        self.parser = QueryParser()
        self.use_fts_prefilter = use_fts_prefilter
        self.sort_by_page_num = sort_by_page_num

    def build_predicate(
        self,
        subject: str,
        query: str,
        book_titles: Sequence[str]
    ) -> PagePredicate:
        """
        Build the page predicate for a search.

        Args:
            subject: Subject the pages must belong to.
            query: Literal phrase to match as whole words.
            book_titles: Titles the pages must belong to.

        Returns:
            PagePredicate ready for DocumentStore.find_pages.

        Raises:
            InvalidInputError: If subject, query or titles are empty or
                malformed.
        """
        if not isinstance(subject, str) or not subject.strip():
            raise InvalidInputError("Subject must be a non-empty string", field="subject")

        phrase = self.parser.normalize(query) if isinstance(query, str) else ""
        if not phrase:
            raise InvalidInputError("Query must be a non-empty string", field="query")

        if isinstance(book_titles, str) or not book_titles:
            raise InvalidInputError(
                "Book titles must be a non-empty list of strings",
                field="book_titles"
            )
        if not all(isinstance(title, str) for title in book_titles):
            raise InvalidInputError(
                "Book titles must be a non-empty list of strings",
                field="book_titles"
            )

        fts_phrase = self.parser.fts_phrase(phrase) if self.use_fts_prefilter else None

        return PagePredicate(
            subject=subject,
            book_titles=tuple(book_titles),
            text_pattern=self.parser.whole_word_pattern(phrase),
            fts_phrase=fts_phrase
        )

    def search(
        self,
        subject: str,
        query: str,
        book_titles: Sequence[str]
    ) -> SearchResultSet:
        """
        Search pages of the given books for a phrase.

        Args:
            subject: Subject to search within.
            query: Literal phrase to match as whole words, ignoring case.
            book_titles: Titles to search. The caller bounds its size.

        Returns:
            SearchResultSet mapping each title with matches to its pages.
            Empty when nothing matches.
        """
        start_time = time.time()

        predicate = self.build_predicate(subject, query, book_titles)
        pages = self.store.find_pages(predicate)

        results = SearchResultSet()
        for page in pages:
            results.add(page.book_title, PageMatch(page_num=page.page_num, text=page.text))

        if self.sort_by_page_num:
            for matches in results.values():
                matches.sort(key=lambda match: match.page_num)

        execution_time = (time.time() - start_time) * 1000

        logger.debug(
            f"Search '{query}' in '{subject}' over {len(predicate.book_titles)} titles: "
            f"{len(pages)} pages in {len(results)} titles, {execution_time:.1f}ms"
        )

        return results
