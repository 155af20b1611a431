"""
Reusable UI components for the Streamlit application.

Contains modular components for the sidebar, search bar,
and grouped results display.
"""

from .sidebar import render_sidebar
from .search_bar import render_search_bar, render_search_header, render_no_results
from .results_list import render_results

__all__ = [
    "render_sidebar",
    "render_search_bar",
    "render_search_header",
    "render_no_results",
    "render_results"
]
