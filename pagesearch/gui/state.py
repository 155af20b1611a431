"""
Streamlit session state management.

Provides helpers for initializing, reading, and updating
session state values used across the application.
"""

import streamlit as st
from typing import Any, List


MAX_PREVIOUS_SEARCHES = 10

DEFAULT_STATE = {
    "selected_subject": None,
    "selected_titles": [],
    "search_query": "",
    "search_response": None,
    "search_time_ms": None,
    "previous_searches": [],
    "show_content": {},
}


def init_state() -> None:
    """
    Initialize session state with default values.

    Only sets values that don't already exist, preserving
    state across reruns.
    """
    for key, default_value in DEFAULT_STATE.items():
        if key not in st.session_state:
            # Copy mutable defaults so sessions never share them
            st.session_state[key] = (
                default_value.copy() if isinstance(default_value, (list, dict))
                else default_value
            )


def get_state(key: str, default: Any = None) -> Any:
    """
    Get a value from session state.

    Args:
        key: State key to retrieve.
        default: Default value if key doesn't exist.

    Returns:
        The stored value or default.
    """
    return st.session_state.get(key, default)


def set_state(key: str, value: Any) -> None:
    """
    Set a value in session state.

    Args:
        key: State key to set.
        value: Value to store.
    """
    st.session_state[key] = value


def clear_search_state() -> None:
    """Reset search-related state to defaults."""
    set_state("search_response", None)
    set_state("search_time_ms", None)
    set_state("show_content", {})


def remember_search(query: str) -> List[str]:
    """
    Record a query at the front of the previous searches list.

    Args:
        query: Query that was just run.

    Returns:
        Updated list, most recent first, without duplicates.
    """
    previous = [q for q in get_state("previous_searches", []) if q != query]
    previous.insert(0, query)
    previous = previous[:MAX_PREVIOUS_SEARCHES]
    set_state("previous_searches", previous)
    return previous
