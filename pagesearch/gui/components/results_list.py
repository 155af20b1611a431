"""
Results list component for displaying search results.

Renders matches grouped by book title, one card per page with a snippet
around the match and an optional full-text view.
"""

import streamlit as st
from typing import Dict, List

from ...utils import make_snippet, highlight_matches
from ..state import get_state, set_state


def render_results(results: Dict[str, List[dict]], pattern: str, snippet_length: int) -> None:
    """
    Render search results grouped by book.

    Args:
        results: Mapping of book title to [{pageNum, text}, ...].
        pattern: Whole-word matcher used to place snippets and highlights.
        snippet_length: Approximate snippet length in characters.
    """
    for book_title, matches in results.items():
        st.markdown(f"### {book_title}")
        st.caption(f"{len(matches)} matching pages")

        for match in matches:
            _render_page_card(book_title, match, pattern, snippet_length)


def _render_page_card(book_title: str, match: dict, pattern: str, snippet_length: int) -> None:
    """Render a single page match with expander."""
    page_num = match["pageNum"]
    text = match["text"]
    card_id = f"{book_title}_{page_num}"

    snippet = make_snippet(text, pattern, snippet_length)

    with st.expander(f"Page {page_num}", expanded=False):
        st.markdown(highlight_matches(snippet, pattern))

        if st.button("Full text", key=f"text_btn_{card_id}"):
            current = get_state("show_content", {})
            current[card_id] = not current.get(card_id, False)
            set_state("show_content", current)

        if get_state("show_content", {}).get(card_id, False):
            st.text_area(
                f"{book_title} - Page {page_num}",
                value=text,
                height=300,
                key=f"content_area_{card_id}"
            )
