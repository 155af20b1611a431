"""
Data models for search functionality.

Defines the page match and the per-title grouping returned by the
search engine.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class PageMatch:
    """
    A single page whose text matched the search phrase.

    Attributes:
        page_num: Page number within the book.
        text: Full extracted page text.
    """
    page_num: int
    text: str

    def to_dict(self) -> dict:
        return {"pageNum": self.page_num, "text": self.text}


class SearchResultSet(Dict[str, List[PageMatch]]):
    """
    Matches of one search, keyed by book title.

    Each title maps to its matching pages in the order the store returned
    them. Titles without matches are absent. There is no ordering across
    titles.
    """

    def add(self, book_title: str, match: PageMatch) -> None:
        """Append a match under its book title."""
        self.setdefault(book_title, []).append(match)

    def match_count(self) -> int:
        """Total number of matching pages across all titles."""
        return sum(len(matches) for matches in self.values())

    def to_dict(self) -> Dict[str, List[dict]]:
        """JSON-ready representation: title -> [{pageNum, text}, ...]."""
        return {
            title: [match.to_dict() for match in matches]
            for title, matches in self.items()
        }
