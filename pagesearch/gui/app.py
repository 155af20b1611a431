"""
Main Streamlit application for the Page Search engine.

Entry point that assembles the sidebar selections, search bar and
grouped results into the web interface. All data access goes through
the SearchFacade.

Note: This file is run directly by Streamlit, so it needs to
set up the Python path before importing other modules.
"""

import sys
import time
from pathlib import Path

# Add project root to path for imports when run directly by Streamlit
_project_root = Path(__file__).parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import streamlit as st  # noqa: E402

from pagesearch.core import get_config, get_logger  # noqa: E402
from pagesearch.database import init_schema  # noqa: E402
from pagesearch.api import SearchFacade  # noqa: E402
from pagesearch.search import QueryParser  # noqa: E402

from pagesearch.gui.state import init_state, get_state, set_state, remember_search  # noqa: E402
from pagesearch.gui.components import (  # noqa: E402
    render_sidebar,
    render_search_bar,
    render_search_header,
    render_no_results,
    render_results,
)

logger = get_logger(__name__)


@st.cache_resource
def _get_facade() -> SearchFacade:
    """Create the façade once per server process, ensuring the schema first."""
    init_schema()
    return SearchFacade()


def main():
    """Main application entry point."""
    config = get_config()

    st.set_page_config(
        page_title=config.gui.page_title,
        page_icon="📚",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    init_state()

    facade = _get_facade()

    selection = render_sidebar(facade)

    st.title(config.gui.page_title)
    st.caption("Whole-word phrase search across the pages of your books")

    query_text, submitted = render_search_bar()

    if submitted and query_text.strip():
        _execute_search(facade, query_text, selection)

    _render_results_section(config.search.snippet_length)


def _execute_search(facade: SearchFacade, query_text: str, selection: dict) -> None:
    """
    Run a search through the façade and store the response in state.

    Args:
        facade: Search façade.
        query_text: The phrase to search for.
        selection: Subject and titles chosen in the sidebar.
    """
    if not selection["subject"] or not selection["book_titles"]:
        st.warning("Select a subject and at least one book first.")
        return

    start_time = time.time()

    with st.spinner("Searching..."):
        response = facade.search({
            "selectedSubject": selection["subject"],
            "searchQuery": query_text,
            "pdfBookTitles": selection["book_titles"],
        })

    if not response.ok:
        st.error(response.body["error"])
        logger.warning(f"Search '{query_text}' rejected with status {response.status}")
        return

    set_state("search_response", response.body)
    set_state("search_time_ms", (time.time() - start_time) * 1000)
    remember_search(query_text.strip())


def _render_results_section(snippet_length: int) -> None:
    """Render the search results section."""
    response = get_state("search_response")

    if not response:
        _render_welcome()
        return

    query = get_state("search_query", "").strip()
    results = response["results"]

    render_search_header(query, response["total"], len(results), get_state("search_time_ms"))

    if not results:
        render_no_results(query)
        return

    st.divider()

    pattern = QueryParser().whole_word_pattern(query)
    render_results(results, pattern, snippet_length)


def _render_welcome() -> None:
    """Render welcome message when no search has been performed."""
    st.markdown("""
    ### Welcome

    1. Pick a subject in the sidebar
    2. Choose the books to search
    3. Enter a word or phrase above

    Matches are whole words, ignore case, and are grouped by book with
    their page numbers.
    """)


if __name__ == "__main__":
    main()
