"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls to the FastAPI backend should go through functions in this module.

Key principles:
- Centralized error handling for network issues
- Graceful degradation when backend is unavailable
- Tracking calls send the signed-in user's id as X-User-ID

# NOTE: When adding new endpoints, follow this pattern:
    - Create a function that takes parameters needed for the endpoint
    - Go through _request() so errors are reported the same way everywhere
    - Return parsed JSON (dict/list) or None on error
    - Never let exceptions bubble up to crash the Streamlit app
"""

import os
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

DEFAULT_TIMEOUT = 30


def get_backend_url() -> str:
    """
    Get the backend API base URL from environment variable or use default.

    Returns:
        Backend URL string with trailing slash removed. Defaults to http://localhost:8000 for local development.
    """
    url = os.getenv("BACKEND_URL", "http://localhost:8000")
    return url.rstrip("/")


def _request(
    method: str,
    path: str,
    action: str,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Any] = None,
    user_id: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
    quiet_statuses: tuple = (),
) -> Optional[Any]:
    """
    Perform a backend request and decode the JSON body.

    Args:
        method: HTTP method
        path: Path below the backend URL (e.g. "/recipes/search")
        action: Human readable action for error messages ("searching recipes")
        params: Query parameters (None values dropped)
        json: JSON body
        user_id: Sent as X-User-ID for tracking endpoints
        timeout: Request timeout in seconds
        quiet_statuses: HTTP statuses that return None without showing an error (e.g. 404)

    Returns:
        Decoded JSON, {} for empty bodies, or None on error
    """
    headers = {"X-User-ID": user_id} if user_id else {}
    query = {k: v for k, v in (params or {}).items() if v is not None}

    try:
        response = requests.request(
            method,
            f"{get_backend_url()}{path}",
            params=query,
            json=json,
            headers=headers,
            timeout=timeout,
        )
        if response.status_code in quiet_statuses:
            return None
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()
    except requests.exceptions.Timeout:
        st.error(f"Request timed out while {action}. The backend may be slow or unreachable.")
        return None
    except requests.exceptions.ConnectionError:
        st.error("Could not connect to backend. Please check your connection and that the backend is running.")
        return None
    except requests.exceptions.HTTPError as e:
        detail = e.response.text
        try:
            body = e.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail", detail)
        st.error(f"Backend returned an error while {action}: {e.response.status_code} - {detail}")
        return None
    except requests.exceptions.RequestException as e:
        st.error(f"An error occurred while {action}: {str(e)}")
        return None


@st.cache_data(ttl=60)  # Cache for 60 seconds to avoid hitting backend too frequently
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check backend health status by calling /health endpoint.

    Returns:
        {"status": "ok", "raw": {...}, "docs_url": "/docs"}, or None if backend is unreachable.
    """
    try:
        response = requests.get(f"{get_backend_url()}/health", timeout=5)
        response.raise_for_status()
        data = response.json()
        if data.get("status") == "ok":
            return {"status": "ok", "raw": data, "docs_url": "/docs"}
        return None
    except requests.exceptions.RequestException:
        return None


# ============================================================================
# Recipes
# ============================================================================

@st.cache_data(ttl=60, show_spinner=False)
def search_recipes(query: str, limit: int = 12) -> Optional[Dict[str, Any]]:
    """
    Search both providers.

    Returns:
        {"results": [recipe dicts], "sources_status": {...}} or None on error
    """
    return _request("GET", "/recipes/search", "searching recipes", params={"q": query, "limit": limit})


def get_random_recipes(count: int = 12) -> Optional[Dict[str, Any]]:
    return _request("GET", "/recipes/random", "loading random recipes", params={"count": count})


@st.cache_data(ttl=300, show_spinner=False)
def get_recipe(recipe_id: str, source: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """One unified recipe, or None when not found or on error."""
    return _request(
        "GET", f"/recipes/{recipe_id}", "loading recipe",
        params={"source": source}, quiet_statuses=(404,),
    )


@st.cache_data(ttl=60, show_spinner=False)
def recipes_by_category(category: str, limit: int = 12) -> Optional[Dict[str, Any]]:
    return _request("GET", f"/recipes/category/{category}", "filtering by category", params={"limit": limit})


@st.cache_data(ttl=60, show_spinner=False)
def recipes_by_area(area: str, limit: int = 12) -> Optional[Dict[str, Any]]:
    return _request("GET", f"/recipes/area/{area}", "filtering by area", params={"limit": limit})


@st.cache_data(ttl=300, show_spinner=False)
def get_recipe_instructions(recipe_id: str) -> Optional[List[Dict[str, Any]]]:
    return _request("GET", f"/recipes/{recipe_id}/instructions", "loading instructions")


@st.cache_data(ttl=3600, show_spinner=False)
def list_cuisines() -> List[str]:
    return _request("GET", "/catalog/cuisines", "loading cuisines") or []


@st.cache_data(ttl=3600, show_spinner=False)
def list_categories() -> List[Dict[str, Any]]:
    return _request("GET", "/catalog/categories", "loading categories") or []


@st.cache_data(ttl=3600, show_spinner=False)
def list_areas() -> List[str]:
    return _request("GET", "/catalog/areas", "loading areas") or []


def get_ingredient_nutrition(ingredient: str) -> Optional[Dict[str, Any]]:
    """Nutrition for one serving, or None when unknown (no error shown for 404)."""
    return _request(
        "GET", "/nutrition/ingredient", "looking up nutrition",
        params={"q": ingredient}, quiet_statuses=(404,),
    )


def generate_meal_plan(calories: int, diet: Optional[str] = None, exclude: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _request(
        "GET", "/meal-plan/generate", "generating meal plan",
        params={"calories": calories, "diet": diet or None, "exclude": exclude or None},
    )


# ============================================================================
# Tracking (X-User-ID required)
# ============================================================================

def get_goals(user_id: str) -> Optional[Dict[str, Any]]:
    return _request("GET", "/tracking/goals", "loading goals", user_id=user_id)


def save_goals(user_id: str, goals: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _request("PUT", "/tracking/goals", "saving goals", json=goals, user_id=user_id)


def get_dashboard(user_id: str, day: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _request("GET", "/tracking/dashboard", "loading dashboard", params={"date": day}, user_id=user_id)


def get_daily_logs(user_id: str, start: str, end: str) -> Optional[List[Dict[str, Any]]]:
    return _request("GET", "/tracking/daily-logs", "loading daily logs", params={"start": start, "end": end}, user_id=user_id)


def add_meal_entry(user_id: str, entry: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _request("POST", "/tracking/meal-entries", "logging meal", json=entry, user_id=user_id)


def delete_meal_entry(user_id: str, entry_id: int) -> bool:
    return _request("DELETE", f"/tracking/meal-entries/{entry_id}", "deleting meal", user_id=user_id) is not None


def add_weight_log(user_id: str, weight_kg: float, day: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _request(
        "POST", "/tracking/weight-logs", "saving weight",
        json={"weight_kg": weight_kg, "date": day}, user_id=user_id,
    )


def get_weight_logs(user_id: str, limit: int = 30) -> Optional[List[Dict[str, Any]]]:
    return _request("GET", "/tracking/weight-logs", "loading weight logs", params={"limit": limit}, user_id=user_id)


def add_water_log(user_id: str, amount_ml: int) -> Optional[Dict[str, Any]]:
    return _request("POST", "/tracking/water-logs", "logging water", json={"amount_ml": amount_ml}, user_id=user_id)


def add_meal_schedule(user_id: str, schedule: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _request("POST", "/tracking/meal-schedules", "scheduling meal", json=schedule, user_id=user_id)


def get_meal_schedules(user_id: str, start: str, end: str) -> Optional[List[Dict[str, Any]]]:
    return _request(
        "GET", "/tracking/meal-schedules", "loading meal plan",
        params={"start": start, "end": end}, user_id=user_id,
    )


def delete_meal_schedule(user_id: str, schedule_id: int) -> bool:
    return _request("DELETE", f"/tracking/meal-schedules/{schedule_id}", "removing meal", user_id=user_id) is not None


def get_recipe_rating(user_id: str, recipe_id: str) -> Optional[Dict[str, Any]]:
    return _request("GET", f"/tracking/ratings/{recipe_id}", "loading rating", user_id=user_id)


def rate_recipe(
    user_id: str, recipe_id: str, rating: int, is_favorite: bool = False, source: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    return _request(
        "PUT", f"/tracking/ratings/{recipe_id}", "rating recipe",
        json={"rating": rating, "is_favorite": is_favorite, "source": source}, user_id=user_id,
    )


def get_favorite_ratings(user_id: str) -> Optional[List[Dict[str, Any]]]:
    return _request("GET", "/tracking/ratings/favorites", "loading favorites", user_id=user_id)


def generate_shopping_list(user_id: str, start: str, end: str) -> Optional[Dict[str, Any]]:
    return _request(
        "POST", "/tracking/shopping-lists/generate", "generating shopping list",
        json={"start_date": start, "end_date": end}, user_id=user_id, timeout=60,
    )


def get_shopping_lists(user_id: str) -> Optional[List[Dict[str, Any]]]:
    return _request("GET", "/tracking/shopping-lists", "loading shopping lists", user_id=user_id)


def toggle_shopping_list_item(user_id: str, list_id: int, item_id: int) -> Optional[Dict[str, Any]]:
    return _request(
        "POST", f"/tracking/shopping-lists/{list_id}/items/{item_id}/toggle", "updating item",
        user_id=user_id,
    )
