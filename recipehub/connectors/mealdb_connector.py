"""
TheMealDB connector using the free public JSON API.

This connector interfaces with https://www.themealdb.com/api/json/v1/1 (anonymous,
no key) to search meals, look them up by id, pick random meals, and list or filter
by category, area and ingredient.

TheMealDB wraps every list in {"meals": [...]} and returns {"meals": null} when
nothing matches; this connector always hands back a list (possibly empty) or,
for single lookups, None.

The base URL can be overridden via MEALDB_BASE_URL.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from .base import BaseRecipeConnector

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://www.themealdb.com/images/ingredients"


def ingredient_image_url(ingredient: str, size: str = "medium") -> str:
    """
    Build the TheMealDB image URL for an ingredient.

    Args:
        ingredient: Ingredient name (e.g. "Chicken Breast")
        size: "small", "medium" or "large"

    Returns:
        URL such as https://www.themealdb.com/images/ingredients/chicken_breast-small.png
    """
    formatted = "_".join(ingredient.lower().split())
    suffix = "" if size == "medium" else f"-{size}"
    return f"{IMAGE_BASE_URL}/{formatted}{suffix}.png"


def meal_thumbnail_url(image_url: str, size: str = "medium") -> str:
    """Build a sized thumbnail URL from a meal image URL."""
    if not image_url:
        return ""
    base_url = image_url.replace("/preview", "")
    return f"{base_url}/{size}"


class MealDbConnector(BaseRecipeConnector):
    """Connector for TheMealDB. No credentials are required."""
    source = "mealdb"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(
            base_url=base_url or os.getenv("MEALDB_BASE_URL", "https://www.themealdb.com/api/json/v1/1"),
            timeout=timeout if timeout is not None else float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
            session=session,
        )

    def _get_list(self, path: str, params: Optional[Dict[str, Any]] = None, key: str = "meals") -> List[Dict[str, Any]]:
        data = self._get_json(path, params)
        if not isinstance(data, dict):
            return []
        return data.get(key) or []

    def _get_first(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        meals = self._get_list(path, params)
        return meals[0] if meals else None

    def search_recipes(self, query: str, **kwargs: Any) -> List[Dict[str, Any]]:
        """Search meals by name (search.php?s=)."""
        return self._get_list("/search.php", {"s": query})

    def search_by_first_letter(self, letter: str) -> List[Dict[str, Any]]:
        """List meals whose name starts with `letter` (search.php?f=)."""
        return self._get_list("/search.php", {"f": letter[:1]})

    def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """Look up full meal details by id (lookup.php?i=)."""
        return self._get_first("/lookup.php", {"i": recipe_id})

    def random_recipe(self) -> Optional[Dict[str, Any]]:
        """Fetch one random meal (random.php)."""
        return self._get_first("/random.php")

    def random_recipes(self, number: int = 6) -> List[Dict[str, Any]]:
        """
        Fetch `number` random meals, one request each.

        The free API only returns one meal per call. Duplicates are possible.
        """
        meals: List[Dict[str, Any]] = []
        for _ in range(max(number, 0)):
            meal = self.random_recipe()
            if meal:
                meals.append(meal)
        return meals

    def list_categories(self) -> List[Dict[str, Any]]:
        """List categories with thumbnails and descriptions (categories.php)."""
        return self._get_list("/categories.php", key="categories")

    def list_areas(self) -> List[Dict[str, Any]]:
        """List cuisine areas (list.php?a=list)."""
        return self._get_list("/list.php", {"a": "list"})

    def list_ingredients(self) -> List[Dict[str, Any]]:
        """List known ingredients (list.php?i=list)."""
        return self._get_list("/list.php", {"i": "list"})

    def filter_by_ingredient(self, ingredient: str) -> List[Dict[str, Any]]:
        """Filter by main ingredient. Entries only carry idMeal, strMeal and strMealThumb."""
        return self._get_list("/filter.php", {"i": ingredient})

    def filter_by_category(self, category: str, number: int = 0) -> List[Dict[str, Any]]:
        """
        Filter by category (filter.php?c=).

        Args:
            category: Category name (e.g. "Seafood")
            number: Optional cap on returned entries (0 = no cap)
        """
        meals = self._get_list("/filter.php", {"c": category})
        return meals[:number] if number > 0 else meals

    def filter_by_area(self, area: str) -> List[Dict[str, Any]]:
        """Filter by area (filter.php?a=)."""
        return self._get_list("/filter.php", {"a": area})
