"""
Query parser for whole-word phrase search.

Turns a user phrase into the literal, case-insensitive, word-bounded
regular expression that decides a match, and into the quoted FTS5 phrase
used to narrow candidate pages before that check.
"""

import re
from typing import Optional

from ..core import get_logger

logger = get_logger(__name__)


WORD_TOKEN = re.compile(r"\w+")


class QueryParser:
    """
    Builds matchers for a literal search phrase.

    The phrase is never interpreted as a pattern: every character with a
    special meaning to the regular expression engine is escaped, and the
    FTS5 phrase is rebuilt from word tokens only.
    """

    def normalize(self, query: str) -> str:
        """
        Trim surrounding whitespace from a raw phrase.

        Args:
            query: Raw user input.

        Returns:
            The phrase to search for, or "" if nothing is left.
        """
        if not query:
            return ""
        return query.strip()

    def whole_word_pattern(self, query: str) -> str:
        """
        Build the matcher for a phrase.

        Args:
            query: Normalized phrase.

        Returns:
            Case-insensitive regular expression matching the phrase only
            where it is bounded by word/non-word transitions on both sides.
        """
        return r"(?i)\b" + re.escape(query) + r"\b"

    def fts_phrase(self, query: str) -> Optional[str]:
        """
        Build a quoted FTS5 phrase from the word tokens of a phrase.

        The text index tokenizes on letters and numbers only, a subset of
        the regex word characters, so any page matching whole_word_pattern(query) also matches
        this phrase and it can only narrow the candidate set.

        Args:
            query: Normalized phrase.

        Returns:
            FTS5 phrase string, or None if the phrase has no word tokens.
        """
        tokens = WORD_TOKEN.findall(query)
        if not tokens:
            return None
        return '"' + " ".join(tokens) + '"'
