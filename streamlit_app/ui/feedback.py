"""
Standardized feedback utilities for consistent error, empty, and loading states.

Provides reusable components for displaying errors, empty states, loading
indicators, per-source status and the sign-in gate used by tracking pages.
"""

from contextlib import contextmanager
from typing import Dict, Optional

import streamlit as st

SOURCE_LABELS = {"spoonacular": "Spoonacular", "mealdb": "TheMealDB"}

STATUS_MESSAGES = {
    "disabled": "is not configured (missing API key)",
    "auth_error": "rejected our API key or quota is exhausted",
    "error": "could not be reached",
}


def show_error(message: str, hint: Optional[str] = None, reload: bool = False) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
        reload: Show a "Try again" button that reruns the page
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")
    if reload and st.button("🔄 Try again", key=f"reload_{message[:24]}"):
        st.cache_data.clear()
        st.rerun()


def show_empty_state(
    title: str,
    subtitle: Optional[str] = None,
    action_label: str = "Get started",
    action_page_path: Optional[str] = None
) -> None:
    """
    Display a standardized empty state with optional action button.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
        action_label: Label for the action button
        action_page_path: Optional page path to navigate to when button is clicked
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)

    if action_page_path:
        if st.button(action_label, use_container_width=True, type="primary"):
            st.switch_page(action_page_path)


def show_sources_status(sources_status: Optional[Dict[str, str]]) -> None:
    """
    Warn about every recipe provider that did not answer with "ok".

    Results from the remaining provider are still shown by the caller.
    """
    for source, state in (sources_status or {}).items():
        if state == "ok":
            continue
        label = SOURCE_LABELS.get(source, source)
        st.warning(f"{label} {STATUS_MESSAGES.get(state, state)}; showing results from the other source.")


def require_sign_in(user_id: Optional[str], feature: str = "this page") -> bool:
    """
    Show a sign-in prompt when nobody is signed in.

    Returns:
        True when a user is signed in and the page may continue
    """
    if user_id:
        return True
    st.info(f"🔐 Sign in from the sidebar to use {feature}.")
    return False


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Searching…"):
            results = search_recipes(query)
    """
    with st.spinner(label):
        yield
