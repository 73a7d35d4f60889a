"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Backend API communication
- session: Session id and recipe navigation helpers
- state: Client-side stores (favorites, shopping list, custom recipes, auth)
"""
