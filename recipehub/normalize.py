"""
Normalization of upstream recipe payloads into UnifiedRecipe.

Spoonacular records carry real nutrition facts, which are picked out of the
nutrients list by name. TheMealDB records carry none, so nutrition, timing,
servings, price and several dietary flags are filled with pseudo-random values
inside fixed ranges. Those values are placeholders for display, not estimates
derived from the ingredients.

Neither converter raises on partial data: missing fields fall back to zero,
empty strings or None.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from recipehub.models import Nutrition, UnifiedIngredient, UnifiedRecipe

logger = logging.getLogger(__name__)

MEALDB_MAX_INGREDIENTS = 20

_DEFAULT_RNG = random.Random()

# Spoonacular nutrient name -> Nutrition field
SPOONACULAR_NUTRIENTS = {
    "Calories": "calories",
    "Protein": "protein",
    "Carbohydrates": "carbs",
    "Fat": "fat",
    "Fiber": "fiber",
    "Sugar": "sugar",
    "Sodium": "sodium",
}

# MealDB placeholder ranges as (low, span): values fall in [low, low + span)
MEALDB_ESTIMATE_RANGES = {
    "calories": (200, 400),
    "protein": (10, 30),
    "carbs": (20, 50),
    "fat": (5, 25),
    "fiber": (2, 8),
    "sugar": (5, 15),
    "sodium": (200, 800),
    "health_score": (60, 40),
    "ready_in_minutes": (15, 60),
    "servings": (2, 4),
    "price_per_serving": (100, 300),
}


def _estimate(rng: random.Random, field: str) -> int:
    low, span = MEALDB_ESTIMATE_RANGES[field]
    return int(rng.random() * span) + low


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def extract_mealdb_ingredients(meal: Dict[str, Any]) -> List[UnifiedIngredient]:
    """Collect strIngredientN/strMeasureN pairs, skipping blank ingredient slots."""
    ingredients: List[UnifiedIngredient] = []
    for i in range(1, MEALDB_MAX_INGREDIENTS + 1):
        name = _clean(meal.get(f"strIngredient{i}"))
        if not name:
            continue
        ingredients.append(
            UnifiedIngredient(name=name, amount=_clean(meal.get(f"strMeasure{i}")), unit="")
        )
    return ingredients


def convert_mealdb_to_unified(meal: Dict[str, Any], rng: Optional[random.Random] = None) -> UnifiedRecipe:
    """
    Convert a TheMealDB meal into a UnifiedRecipe.

    Args:
        meal: Raw meal dict from lookup.php / search.php / random.php
        rng: Random source for placeholder values (defaults to the module RNG)

    Returns:
        UnifiedRecipe with source="mealdb"
    """
    rng = rng or _DEFAULT_RNG

    category = meal.get("strCategory") or None
    category_lower = (category or "").lower()

    calories = _estimate(rng, "calories")
    protein = _estimate(rng, "protein")
    carbs = _estimate(rng, "carbs")
    fat = _estimate(rng, "fat")
    nutrition = Nutrition(
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=_estimate(rng, "fiber"),
        sugar=_estimate(rng, "sugar"),
        sodium=_estimate(rng, "sodium"),
    )

    tags_raw = meal.get("strTags") or ""
    tags = [tag.strip() for tag in tags_raw.split(",") if tag.strip()]

    return UnifiedRecipe(
        id=str(meal.get("idMeal") or ""),
        title=meal.get("strMeal") or "",
        image=meal.get("strMealThumb") or "",
        source="mealdb",
        instructions=meal.get("strInstructions") or "",
        ingredients=extract_mealdb_ingredients(meal),
        category=category,
        cuisine=meal.get("strArea") or None,
        tags=tags,
        source_url=meal.get("strSource") or None,
        youtube_url=meal.get("strYoutube") or None,
        nutrition=nutrition,
        health_score=_estimate(rng, "health_score"),
        ready_in_minutes=_estimate(rng, "ready_in_minutes"),
        servings=_estimate(rng, "servings"),
        price_per_serving=_estimate(rng, "price_per_serving"),
        vegan="vegan" in category_lower,
        vegetarian="vegetarian" in category_lower or "vegan" in category_lower,
        gluten_free=rng.random() > 0.7,
        dairy_free=rng.random() > 0.6,
        very_healthy=calories < 400 and fat < 15,
        cheap=rng.random() > 0.5,
        sustainable=rng.random() > 0.7,
    )


def extract_spoonacular_nutrition(recipe: Dict[str, Any]) -> Optional[Nutrition]:
    """
    Pick the tracked nutrients out of a Spoonacular nutrition block.

    Returns:
        Nutrition with missing nutrients set to 0, or None when the recipe has
        no nutrition block at all
    """
    block = recipe.get("nutrition")
    if not isinstance(block, dict):
        return None

    values: Dict[str, float] = {field: 0.0 for field in SPOONACULAR_NUTRIENTS.values()}
    for nutrient in block.get("nutrients") or []:
        field = SPOONACULAR_NUTRIENTS.get(nutrient.get("name"))
        if field and values[field] == 0.0:
            try:
                values[field] = max(float(nutrient.get("amount") or 0), 0.0)
            except (TypeError, ValueError):
                logger.debug("Unparseable %s amount: %r", field, nutrient.get("amount"))
    return Nutrition(**values)


def convert_spoonacular_to_unified(recipe: Dict[str, Any]) -> UnifiedRecipe:
    """
    Convert a Spoonacular recipe information payload into a UnifiedRecipe.

    Args:
        recipe: Raw dict from /recipes/{id}/information or /recipes/random

    Returns:
        UnifiedRecipe with source="spoonacular"
    """
    ingredients = []
    for ing in recipe.get("extendedIngredients") or []:
        amount = ing.get("amount")
        ingredients.append(
            UnifiedIngredient(
                name=ing.get("name") or "",
                amount="" if amount is None else str(amount),
                unit=ing.get("unit") or "",
                image=ing.get("image"),
            )
        )

    cuisines = recipe.get("cuisines") or []

    return UnifiedRecipe(
        id=str(recipe.get("id") or ""),
        title=recipe.get("title") or "",
        image=recipe.get("image") or "",
        source="spoonacular",
        ready_in_minutes=recipe.get("readyInMinutes"),
        servings=recipe.get("servings"),
        instructions=recipe.get("instructions") or "",
        ingredients=ingredients,
        cuisine=cuisines[0] if cuisines else None,
        source_url=recipe.get("sourceUrl"),
        nutrition=extract_spoonacular_nutrition(recipe),
        health_score=recipe.get("healthScore"),
        price_per_serving=recipe.get("pricePerServing"),
        vegan=bool(recipe.get("vegan")),
        vegetarian=bool(recipe.get("vegetarian")),
        gluten_free=bool(recipe.get("glutenFree")),
        dairy_free=bool(recipe.get("dairyFree")),
        very_healthy=bool(recipe.get("veryHealthy")),
        cheap=bool(recipe.get("cheap")),
        sustainable=bool(recipe.get("sustainable")),
        dish_types=recipe.get("dishTypes") or [],
        diets=recipe.get("diets") or [],
        summary=recipe.get("summary"),
    )
