"""
Spoonacular connector using the public Spoonacular REST API.

This connector interfaces with https://api.spoonacular.com to search recipes,
look up full recipe information (with nutrition), fetch random recipes, look up
ingredient nutrition, and generate daily meal plans.

The connector:
- Authenticates with an API key sent as the apiKey query parameter
- Returns raw Spoonacular payloads (normalization lives in recipehub.normalize)
- Raises SpoonacularAuthError when the key is rejected or the daily quota is spent
- Raises RuntimeError for missing configuration or transport failures

Requires SPOONACULAR_API_KEY in .env file. The base URL can be overridden via
SPOONACULAR_BASE_URL (useful for a local mock).
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from .base import BaseRecipeConnector

logger = logging.getLogger(__name__)

# Spoonacular has no cuisine listing endpoint, so the supported values are fixed.
CUISINES = [
    "African", "American", "British", "Cajun", "Caribbean", "Chinese", "Eastern European",
    "European", "French", "German", "Greek", "Indian", "Irish", "Italian", "Japanese",
    "Jewish", "Korean", "Latin American", "Mediterranean", "Mexican", "Middle Eastern",
    "Nordic", "Southern", "Spanish", "Thai", "Vietnamese",
]

DIETS = [
    "Gluten Free", "Ketogenic", "Vegetarian", "Lacto-Vegetarian", "Ovo-Vegetarian",
    "Vegan", "Pescetarian", "Paleo", "Primal", "Whole30",
]


class SpoonacularAuthError(RuntimeError):
    """
    Exception raised when Spoonacular rejects the request's credentials.

    This exception is raised when:
    - The API key is invalid (401)
    - The daily point quota is exhausted (402)
    """
    pass


class SpoonacularConnector(BaseRecipeConnector):
    """
    Connector for the Spoonacular recipe API.

    Requires credentials in .env file:
    - SPOONACULAR_API_KEY: Spoonacular API key
    """
    source = "spoonacular"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the Spoonacular connector.

        Args:
            api_key: Spoonacular API key (optional, reads from SPOONACULAR_API_KEY env var if not provided)
            base_url: API base URL (optional, reads from SPOONACULAR_BASE_URL or defaults to the public API)
            timeout: Request timeout in seconds (optional, reads from HTTP_TIMEOUT_SECONDS, default 10)
            session: Preconfigured requests.Session (optional, mainly for tests)

        Raises:
            RuntimeError: If SPOONACULAR_API_KEY is not set.
        """
        key = api_key or os.getenv("SPOONACULAR_API_KEY")
        if not key:
            raise RuntimeError(
                "Spoonacular API key not configured. Please add it to your .env file at the project root:\n"
                "SPOONACULAR_API_KEY=your_spoonacular_key_here"
            )
        self.api_key = key

        super().__init__(
            base_url=base_url or os.getenv("SPOONACULAR_BASE_URL", "https://api.spoonacular.com"),
            timeout=timeout if timeout is not None else float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
            session=session,
        )

    def _default_params(self) -> Dict[str, Any]:
        return {"apiKey": self.api_key}

    def _handle_http_error(self, path: str, error: requests.exceptions.HTTPError) -> None:
        status_code = error.response.status_code if error.response is not None else None
        if status_code in (401, 402):
            logger.warning("Spoonacular rejected request to %s with status %s", path, status_code)
            raise SpoonacularAuthError(
                f"Spoonacular rejected the API key or the daily quota is exhausted (HTTP {status_code})"
            ) from error
        raise RuntimeError(f"Spoonacular request to {path} failed: {error}") from error

    def search_recipes(
        self,
        query: str,
        cuisine: Optional[str] = None,
        diet: Optional[str] = None,
        number: int = 12,
    ) -> Dict[str, Any]:
        """
        Search recipes via /recipes/complexSearch.

        Args:
            query: Free-text query (may be empty when filtering by cuisine only)
            cuisine: Optional cuisine filter (e.g. "Italian")
            diet: Optional diet filter (e.g. "vegan")
            number: Maximum number of results

        Returns:
            Search envelope with keys results (id, title, image), offset, number, totalResults
        """
        params: Dict[str, Any] = {"query": query, "number": number}
        if cuisine:
            params["cuisine"] = cuisine
        if diet:
            params["diet"] = diet

        data = self._get_json("/recipes/complexSearch", params)
        return data if isinstance(data, dict) else {"results": []}

    def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """
        Get full recipe information including nutrition.

        Returns:
            Recipe information dict (extendedIngredients, nutrition.nutrients, flags, ...)
        """
        return self._get_json(f"/recipes/{recipe_id}/information", {"includeNutrition": "true"})

    def random_recipes(self, number: int = 12) -> List[Dict[str, Any]]:
        """Get random recipes via /recipes/random."""
        if number <= 0:
            return []
        data = self._get_json("/recipes/random", {"number": number})
        return data.get("recipes", []) if isinstance(data, dict) else []

    def filter_by_category(self, category: str, number: int = 12) -> Dict[str, Any]:
        """Spoonacular has no categories; the category is treated as a cuisine filter."""
        return self.search_recipes("", cuisine=category, number=number)

    def get_recipe_instructions(self, recipe_id: str) -> List[Dict[str, Any]]:
        """Get analyzed (step by step) instructions for a recipe."""
        data = self._get_json(f"/recipes/{recipe_id}/analyzedInstructions")
        return data if isinstance(data, list) else []

    def get_cuisines(self) -> List[str]:
        """Return the supported cuisine names."""
        return list(CUISINES)

    def get_nutrition_for_ingredient(self, ingredient: str) -> Optional[Dict[str, Any]]:
        """
        Look up nutrition for one serving of an ingredient.

        Searches the ingredient database for the best match, then fetches its
        information for amount=1, unit=serving.

        Returns:
            Ingredient information dict with nutrition.nutrients, or None if no match
        """
        search = self._get_json("/food/ingredients/search", {"query": ingredient, "number": 1})
        results = search.get("results") if isinstance(search, dict) else None
        if not results:
            logger.info("No Spoonacular ingredient match for %r", ingredient)
            return None

        ingredient_id = results[0].get("id")
        return self._get_json(
            f"/food/ingredients/{ingredient_id}/information",
            {"amount": 1, "unit": "serving"},
        )

    def generate_meal_plan(
        self,
        target_calories: int,
        diet: Optional[str] = None,
        exclude: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Generate a one-day meal plan via /mealplanner/generate.

        Returns:
            Dict with meals (id, title, readyInMinutes, servings, sourceUrl) and nutrients
        """
        params: Dict[str, Any] = {"targetCalories": target_calories, "timeFrame": "day"}
        if diet:
            params["diet"] = diet
        if exclude:
            params["exclude"] = exclude
        return self._get_json("/mealplanner/generate", params)
