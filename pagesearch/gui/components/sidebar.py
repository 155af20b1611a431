"""
Sidebar component for the Page Search interface.

Displays library statistics, the subject selector and the book title
selection for the next search.
"""

import streamlit as st
from typing import Dict, List, Optional

from ...api import SearchFacade
from ...database import get_statistics
from ..state import get_state, set_state, clear_search_state


def render_sidebar(facade: SearchFacade) -> Dict:
    """
    Render the sidebar with stats and selections.

    Args:
        facade: Façade used to list subjects and titles.

    Returns:
        Dictionary with the selected subject and titles.
    """
    with st.sidebar:
        st.title("PDF Page Search")

        st.subheader("Library")
        _render_statistics()

        st.divider()

        st.subheader("Subject")
        subject = _render_subject_selector(facade)

        st.divider()

        st.subheader("Books")
        titles = _render_title_selector(facade, subject, facade.max_titles)

        st.divider()

        _render_previous_searches()

        _render_help(facade.max_titles)

    return {"subject": subject, "book_titles": titles}


def _render_statistics() -> None:
    """Display library statistics."""
    try:
        stats = get_statistics()
    except Exception as e:
        st.warning(f"Statistics unavailable: {e}")
        return

    col1, col2, col3 = st.columns(3)

    with col1:
        st.metric("Subjects", f"{stats['total_subjects']:,}")

    with col2:
        st.metric("Books", f"{stats['total_books']:,}")

    with col3:
        st.metric("Pages", f"{stats['total_pages']:,}")

    st.caption(f"Text size: {stats['total_content_mb']:.1f} MB")

    if stats["newest_import"]:
        st.caption(f"Last import: {stats['newest_import'][:16]}")


def _render_subject_selector(facade: SearchFacade) -> Optional[str]:
    """Render the subject dropdown."""
    response = facade.list_subjects()

    if not response.ok:
        st.error(response.body["error"])
        return None

    subjects: List[str] = response.body
    if not subjects:
        st.info("No subjects imported yet.")
        return None

    current = get_state("selected_subject")
    index = subjects.index(current) if current in subjects else 0

    subject = st.selectbox("Select a subject", options=subjects, index=index, key="subject_select")

    if subject != current:
        set_state("selected_subject", subject)
        set_state("selected_titles", [])
        clear_search_state()

    return subject


def _render_title_selector(
    facade: SearchFacade,
    subject: Optional[str],
    max_titles: int
) -> List[str]:
    """Render the book title multiselect for a subject."""
    if not subject:
        return []

    response = facade.list_titles(subject)

    if not response.ok:
        st.error(response.body["error"])
        return []

    titles: List[str] = response.body
    default = [t for t in get_state("selected_titles", []) if t in titles]

    if not default:
        default = titles[:max_titles]

    selected = st.multiselect(
        f"Books to search (max {max_titles})",
        options=titles,
        default=default,
        max_selections=max_titles,
        key=f"titles_select_{subject}"
    )
    set_state("selected_titles", selected)

    st.caption(f"{len(selected)} of {len(titles)} books selected")

    return selected


def _render_previous_searches() -> None:
    """List recent queries of this session."""
    previous = get_state("previous_searches", [])
    if not previous:
        return

    with st.expander("Previous searches", expanded=False):
        for query in previous:
            st.markdown(f"- `{query}`")


def _render_help(max_titles: int) -> None:
    """Display search help text."""
    with st.expander("Search help"):
        st.markdown(f"""
        **How matching works:**
        - The phrase is matched as whole words: `cat` finds *the cat sat*
          but not *category*
        - Matching ignores case: `Cat`, `cat` and `CAT` are the same
        - The phrase is taken literally, punctuation included
        - Up to {max_titles} books can be searched at once
        """)
