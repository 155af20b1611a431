"""
Search bar component for the Page Search interface.

Provides the phrase input, submit button, and result header.
"""

import streamlit as st
from typing import Tuple

from ..state import get_state, set_state, clear_search_state


def render_search_bar() -> Tuple[str, bool]:
    """
    Render the search input bar.

    Returns:
        Tuple of (query_text, was_submitted).
    """
    col1, col2 = st.columns([5, 1])

    with col1:
        query = st.text_input(
            "Search",
            value=get_state("search_query", ""),
            placeholder="Enter a word or phrase...",
            key="search_input",
            label_visibility="collapsed"
        )

    with col2:
        submitted = st.button(
            "Search",
            type="primary",
            use_container_width=True
        )

    previous_query = get_state("search_query", "")
    query_changed = query != previous_query and query.strip() != ""

    if query_changed:
        clear_search_state()
        set_state("search_query", query)

    return query, submitted or query_changed


def render_search_header(query: str, total: int, titles_with_matches: int, elapsed_ms: float) -> None:
    """
    Render search results header with totals.

    Args:
        query: Phrase that was searched.
        total: Total matching pages.
        titles_with_matches: Number of books with at least one match.
        elapsed_ms: Request time in milliseconds.
    """
    col1, col2, col3 = st.columns([2, 2, 1])

    with col1:
        st.markdown(f"**{total:,}** matching pages in **{titles_with_matches}** books")

    with col2:
        st.caption(f"Phrase: \"{query}\"")

    with col3:
        if elapsed_ms is not None:
            st.caption(f"{elapsed_ms:.0f} ms")


def render_no_results(query: str) -> None:
    """Display no results message with suggestions."""
    st.info(f"No page contains \"{query}\" as a whole word")

    with st.expander("Suggestions"):
        st.markdown("""
        - Check the spelling
        - Search for a shorter phrase or a single word
        - Whole words only: a word inside a longer word is not a match
        - Select more books or another subject
        """)
