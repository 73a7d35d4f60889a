"""
UI Styling and Components Module.

This module provides global CSS styling, layout primitives, feedback states
and charts for the Recipe Hub Streamlit app.
"""

from ui.styles import load_global_styles
from ui.layout import page_header, section, card, kpi_row, render_sidebar, render_footer

__all__ = [
    "load_global_styles",
    "page_header",
    "section",
    "card",
    "kpi_row",
    "render_sidebar",
    "render_footer",
]
