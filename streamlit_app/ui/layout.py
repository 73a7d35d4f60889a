"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, sections, cards, KPI rows,
recipe cards/grids and the shared sidebar (sign-in, counters, backend status).
"""

import uuid
from contextlib import contextmanager
from html import escape
from typing import Any, Dict, List, Optional

import streamlit as st

from recipehub.progress import numeric_recipe_id, shopping_items_from_recipe
from utils import state
from utils.api_client import get_health_status
from utils.session import open_recipe

PAGES = {
    "home": "pages/01_🏠_Home.py",
    "recipes": "pages/02_🍳_Recipes.py",
    "recipe_detail": "pages/03_📖_Recipe_Detail.py",
    "favorites": "pages/04_💖_Favorites.py",
    "shopping_list": "pages/05_🛒_Shopping_List.py",
    "add_recipe": "pages/06_📝_Add_Recipe.py",
    "dashboard": "pages/07_📊_Dashboard.py",
    "goals": "pages/08_🎯_Goals.py",
    "meal_scheduler": "pages/09_🗓_Meal_Scheduler.py",
    "diet_planner": "pages/10_🥗_Diet_Planner.py",
    "nutrition_planner": "pages/11_🧮_Nutrition_Planner.py",
}

DIET_FLAGS = [
    ("vegan", "Vegan"),
    ("vegetarian", "Vegetarian"),
    ("gluten_free", "Gluten free"),
    ("dairy_free", "Dairy free"),
    ("very_healthy", "Healthy"),
    ("cheap", "Budget"),
    ("sustainable", "Sustainable"),
]


def page_header(title: str, subtitle: Optional[str] = None, right: Optional[callable] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
        right: Optional callable that renders right-side content (e.g., buttons, badges)
    """
    def _title():
        st.markdown('<div class="rh-page-header">', unsafe_allow_html=True)
        st.markdown(f"# {title}")
        if subtitle:
            st.markdown(f'<div class="subtitle">{subtitle}</div>', unsafe_allow_html=True)
        st.markdown('</div>', unsafe_allow_html=True)

    if right is not None:
        col_title, col_right = st.columns([3, 1])
        with col_title:
            _title()
        with col_right:
            right()
    else:
        _title()


def kpi_row(kpis: List[dict]) -> None:
    """
    Render a row of KPI metrics.

    Args:
        kpis: List of dicts with keys:
            - label: KPI label text
            - value: KPI value (number or string)
            - delta: Optional delta/change indicator
            - icon: Optional emoji or icon prefix
    """
    cols = st.columns(len(kpis))
    for col, kpi in zip(cols, kpis):
        with col:
            icon = kpi.get("icon", "")
            label = kpi.get("label", "")
            st.metric(
                label=f"{icon} {label}" if icon else label,
                value=kpi.get("value", ""),
                delta=kpi.get("delta", None),
            )


def section(title: str, caption: Optional[str] = None) -> None:
    st.markdown(f"## {title}")
    if caption:
        st.markdown(f'<div class="rh-section-caption">{caption}</div>', unsafe_allow_html=True)


@contextmanager
def card(title: Optional[str] = None):
    """
    Context manager for a bordered card container.

    Usage:
        with card("Card Title"):
            st.write("Card content")
    """
    with st.container(border=True):
        if title:
            st.markdown(f"### {title}")
        yield


def progress_bar(label: str, progress: Dict[str, float], unit: str = "") -> None:
    """
    Labelled progress bar.

    Args:
        progress: {"current", "target", "percentage"} as returned by
                  recipehub.progress.calorie_progress / water_progress
    """
    st.markdown(f"**{label}** · {progress['current']:,.0f} / {progress['target']:,.0f} {unit}".rstrip())
    st.markdown(
        f'<div class="rh-progress"><div style="width:{progress["percentage"]:.0f}%"></div></div>',
        unsafe_allow_html=True,
    )


def recipe_badges(recipe: Dict[str, Any]) -> str:
    """HTML badges for the recipe source and its dietary flags."""
    source = "Spoonacular" if recipe.get("source") == "spoonacular" else "TheMealDB"
    badges = [f'<span class="rh-badge">{source}</span>']
    for field, label in DIET_FLAGS:
        if recipe.get(field):
            badges.append(f'<span class="rh-badge rh-badge--diet">{label}</span>')
    return "".join(badges)


def recipe_meta(recipe: Dict[str, Any]) -> str:
    parts = []
    if recipe.get("ready_in_minutes"):
        parts.append(f"⏱ {recipe['ready_in_minutes']} min")
    if recipe.get("servings"):
        parts.append(f"👥 {recipe['servings']}")
    nutrition = recipe.get("nutrition") or {}
    if nutrition.get("calories"):
        estimate = " (est.)" if recipe.get("source") == "mealdb" else ""
        parts.append(f"🔥 {nutrition['calories']:.0f} kcal{estimate}")
    if recipe.get("price_per_serving"):
        parts.append(f"💲{recipe['price_per_serving'] / 100:.2f}")
    return " · ".join(parts)


def favorite_button(recipe: Dict[str, Any], key: str) -> None:
    """Heart toggle backed by the favorites store (numeric ids only)."""
    recipe_id = numeric_recipe_id(recipe.get("id"))
    if recipe_id is None:
        return
    store = state.favorites()
    label = "❤️" if store.is_favorite(recipe_id) else "🤍"
    if st.button(label, key=f"fav_{key}", help="Toggle favorite"):
        store.toggle(recipe_id, recipe.get("source"))
        st.rerun()


def recipe_card(recipe: Dict[str, Any], key_prefix: str = "card") -> None:
    """Compact recipe card with image, meta line, badges and actions."""
    key = f"{key_prefix}_{recipe.get('source')}_{recipe.get('id')}"
    with st.container(border=True):
        if recipe.get("image"):
            st.image(recipe["image"], use_container_width=True)
        st.markdown(f'<div class="rh-recipe-title">{escape(recipe.get("title") or "")}</div>', unsafe_allow_html=True)
        meta = recipe_meta(recipe)
        if meta:
            st.markdown(f'<div class="rh-recipe-meta">{meta}</div>', unsafe_allow_html=True)
        st.markdown(recipe_badges(recipe), unsafe_allow_html=True)

        view_col, fav_col = st.columns([3, 1])
        with view_col:
            if st.button("View recipe", key=f"view_{key}", use_container_width=True):
                open_recipe(recipe["id"], recipe.get("source"))
        with fav_col:
            favorite_button(recipe, key)


def recipe_grid(recipes: List[Dict[str, Any]], columns: int = 3, key_prefix: str = "grid") -> None:
    """Render recipes as cards, `columns` per row."""
    for start in range(0, len(recipes), columns):
        cols = st.columns(columns, gap="medium")
        for col, recipe in zip(cols, recipes[start:start + columns]):
            with col:
                recipe_card(recipe, key_prefix=key_prefix)


def add_recipe_to_shopping_list(recipe: Dict[str, Any]) -> int:
    """Add every ingredient of `recipe` to the local shopping list; returns the count."""
    items = shopping_items_from_recipe(recipe)
    state.shopping_list().add_items(items)
    return len(items)


def _render_sign_in() -> None:
    auth = state.auth()
    user = auth.user
    if user:
        st.markdown(f"Signed in as **{user.get('email') or user.get('id')}**")
        if st.button("Sign out", use_container_width=True):
            auth.sign_out()
            st.rerun()
        return

    with st.form("sign_in_form", clear_on_submit=False):
        email = st.text_input("Email", placeholder="you@example.com")
        submitted = st.form_submit_button("Sign in", use_container_width=True)
    if submitted:
        email = email.strip().lower()
        if "@" not in email:
            st.error("Please enter a valid email address.")
        else:
            # Same email, same user id
            user_id = str(uuid.uuid5(uuid.NAMESPACE_URL, f"recipehub:{email}"))
            auth.set_user({"id": user_id, "email": email})
            st.rerun()


def render_sidebar() -> None:
    """Shared sidebar: branding, account, local counters and backend status."""
    with st.sidebar:
        st.markdown("### 🍳 **Recipe Hub**")
        st.divider()

        st.markdown("#### Account")
        _render_sign_in()
        st.divider()

        favorites_count = len(state.favorites().favorites)
        unchecked = len(state.shopping_list().unchecked_items())
        st.caption(f"❤️ {favorites_count} favorites · 🛒 {unchecked} items to buy")
        st.divider()

        with st.expander("System status", expanded=False):
            backend_status = get_health_status()
            if backend_status:
                providers = backend_status["raw"].get("providers", {})
                st.markdown("**Backend:** 🟢")
                st.markdown(f"**Spoonacular:** {'🟢' if providers.get('spoonacular') else '⚪ not configured'}")
                st.markdown(f"**TheMealDB:** {'🟢' if providers.get('mealdb') else '🔴'}")
            else:
                st.markdown("**Backend:** 🔴 unreachable")


def render_footer() -> None:
    st.markdown(
        '<div class="rh-footer">Recipe Hub · Recipes from Spoonacular and TheMealDB. '
        'Nutrition for TheMealDB recipes is estimated.</div>',
        unsafe_allow_html=True,
    )
