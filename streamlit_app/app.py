"""
Recipe Hub - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up the page configuration
and provides the global layout with sidebar sign-in and backend status.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_🏠_Home.py`) will appear
as pages in the sidebar navigation.

Run with:
    streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and recipehub
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import streamlit as st

from utils import state
from utils.api_client import get_health_status
from ui.styles import load_global_styles
from ui.layout import PAGES, kpi_row, page_header, render_footer, render_sidebar

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Hub",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="expanded"
)

load_global_styles()
render_sidebar()

page_header(
    "Recipe Hub",
    subtitle="Discover recipes from Spoonacular and TheMealDB, plan your week and track your nutrition."
)

backend_status = get_health_status()
mode_text = "Live" if backend_status else "Offline"

kpi_row([
    {"label": "Favorites", "value": len(state.favorites().favorites) or "—", "icon": "❤️"},
    {"label": "To buy", "value": len(state.shopping_list().unchecked_items()) or "—", "icon": "🛒"},
    {"label": "My recipes", "value": len(state.custom_recipes().recipes) or "—", "icon": "📝"},
    {"label": "Mode", "value": mode_text, "icon": "⚡"},
])

st.markdown("<br>", unsafe_allow_html=True)

st.markdown("#### Get started")
cta_col1, cta_col2, cta_col3, cta_col4 = st.columns(4, gap="medium")

with cta_col1:
    if st.button("Browse recipes", use_container_width=True, type="primary"):
        st.switch_page(PAGES["recipes"])

with cta_col2:
    if st.button("Plan my week", use_container_width=True):
        st.switch_page(PAGES["meal_scheduler"])

with cta_col3:
    if st.button("Open dashboard", use_container_width=True):
        st.switch_page(PAGES["dashboard"])

with cta_col4:
    if st.button("Shopping list", use_container_width=True):
        st.switch_page(PAGES["shopping_list"])

st.divider()

with st.expander("How it works", expanded=False):
    st.markdown("""
    1. **Find recipes** – Search both providers at once, or browse by cuisine and category.
    2. **Save and shop** – Favorite recipes and send their ingredients to your shopping list.
    3. **Plan and track** – Sign in to schedule meals, log what you ate and follow your goals.
    """)

render_footer()
