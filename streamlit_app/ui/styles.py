"""
Global CSS Styling for Recipe Hub.

This module provides load_global_styles() to inject consistent styling
across all pages: typography, recipe cards, dietary badges and progress bars.
"""

import streamlit as st

ACCENT = "#E8672F"


def load_global_styles() -> None:
    """
    Inject global CSS styles for the Recipe Hub app.

    Call once at the top of every page, after st.set_page_config().
    """
    css = f"""
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

        html, body, [class*="css"] {{
            font-family: 'Nunito', 'sans serif' !important;
        }}

        h1, h2, h3, h4, h5, h6 {{
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }}

        h1 {{
            font-size: 2.4rem !important;
            margin-bottom: 0.75rem !important;
        }}

        h2 {{
            font-size: 1.8rem !important;
            margin-top: 0.5rem !important;
            margin-bottom: 0.5rem !important;
        }}

        hr {{
            margin-top: 1rem !important;
            margin-bottom: 1rem !important;
        }}

        .stButton > button {{
            border-radius: 50px !important;
            font-weight: 600 !important;
            transition: all 0.2s ease !important;
        }}

        .stButton > button:hover {{
            transform: translateY(-1px) !important;
        }}

        .main .block-container {{
            max-width: 1200px !important;
            padding-top: 1.5rem !important;
            padding-bottom: 2.5rem !important;
        }}

        [data-testid="stSidebar"] {{
            padding-top: 1rem !important;
        }}

        [data-testid="stMetric"] {{
            padding: 0.5rem 0.25rem !important;
        }}

        /* Page header */
        .rh-page-header {{
            margin-bottom: 1.25rem !important;
        }}

        .rh-page-header .subtitle {{
            color: #666 !important;
            font-size: 1rem !important;
        }}

        /* Sections */
        .rh-section-caption {{
            color: #666 !important;
            font-size: 0.9rem !important;
            margin-bottom: 0.75rem !important;
        }}

        /* Cards */
        .rh-card {{
            border-radius: 12px !important;
            padding: 1rem 1.25rem !important;
            background-color: #ffffff !important;
            border: 1px solid rgba(232, 103, 47, 0.15) !important;
            margin-bottom: 1rem !important;
        }}

        .rh-recipe-title {{
            font-weight: 700;
            font-size: 1.05rem;
            line-height: 1.3;
            min-height: 2.6em;
            margin: 0.4rem 0 0.2rem 0;
        }}

        .rh-recipe-meta {{
            color: #777;
            font-size: 0.85rem;
            margin-bottom: 0.4rem;
        }}

        /* Source and dietary badges */
        .rh-badge {{
            display: inline-block;
            padding: 0.15rem 0.6rem;
            border-radius: 50px;
            background: #FDEDE5;
            color: {ACCENT};
            font-size: 0.72rem;
            font-weight: 700;
            margin: 0 0.25rem 0.25rem 0;
        }}

        .rh-badge--diet {{
            background: #E7F5EC;
            color: #1E7A46;
        }}

        .rh-badge--estimate {{
            background: #F1F1F1;
            color: #777;
        }}

        /* Progress bars (dashboard) */
        .rh-progress {{
            background: #F3F3F3;
            border-radius: 8px;
            height: 10px;
            overflow: hidden;
            margin: 0.25rem 0 0.75rem 0;
        }}

        .rh-progress > div {{
            background: {ACCENT};
            height: 100%;
        }}

        .rh-footer {{
            margin-top: 2rem !important;
            padding: 1rem 0 !important;
            color: #888 !important;
            font-size: 0.85rem !important;
            border-top: 1px solid #eee !important;
        }}
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
