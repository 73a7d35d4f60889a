"""
Session management utilities for Streamlit pages.

This module provides functions for managing user sessions across Streamlit pages,
in particular the session id that keys the client-side stores and the recipe
currently opened on the detail page.
"""

import uuid
from typing import Optional

import streamlit as st

from recipehub.storage import is_valid_session_id

SESSION_ID_KEY = "session_id"
SESSION_QUERY_PARAM = "sid"
SELECTED_RECIPE_KEY = "selected_recipe"

RECIPE_DETAIL_PAGE = "pages/03_📖_Recipe_Detail.py"


def get_or_create_session_id() -> str:
    """
    Get or create a persistent session ID.

    The id is kept in st.session_state for navigation between pages and mirrored
    into the "sid" query parameter, so a browser refresh finds the same
    favorites, shopping list and custom recipes again. A "sid" that is not a
    UUID is replaced with a fresh one.

    Returns:
        Session ID string (UUID format)
    """
    if SESSION_ID_KEY not in st.session_state:
        sid = st.query_params.get(SESSION_QUERY_PARAM)
        st.session_state[SESSION_ID_KEY] = sid.lower() if is_valid_session_id(sid) else str(uuid.uuid4())
    if st.query_params.get(SESSION_QUERY_PARAM) != st.session_state[SESSION_ID_KEY]:
        st.query_params[SESSION_QUERY_PARAM] = st.session_state[SESSION_ID_KEY]
    return st.session_state[SESSION_ID_KEY]


def open_recipe(recipe_id: str, source: Optional[str] = None) -> None:
    """Remember which recipe to show and switch to the detail page."""
    st.session_state[SELECTED_RECIPE_KEY] = {"id": str(recipe_id), "source": source}
    st.switch_page(RECIPE_DETAIL_PAGE)


def get_selected_recipe() -> Optional[dict]:
    """
    The recipe opened via open_recipe(), or one given as ?recipe=<id>&source=<source>.
    """
    recipe_id = st.query_params.get("recipe")
    if recipe_id:
        return {"id": recipe_id, "source": st.query_params.get("source")}
    return st.session_state.get(SELECTED_RECIPE_KEY)
