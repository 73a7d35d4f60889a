"""
Single-provider lookups: browse lists, step-by-step instructions, ingredient
nutrition and generated meal plans.

Unlike recipehub.unified these calls talk to exactly one provider and let its
errors propagate (RuntimeError / SpoonacularAuthError); the API layer maps them
to HTTP errors.
"""

import logging
from typing import Any, Dict, List, Optional

from recipehub.progress import tracked_item_from_nutrition

from .connectors.mealdb_connector import MealDbConnector, ingredient_image_url
from .connectors.spoonacular_connector import CUISINES, SpoonacularConnector

logger = logging.getLogger(__name__)


def list_cuisines() -> List[str]:
    """Cuisine names usable as Spoonacular cuisine filters. No network call."""
    return list(CUISINES)


def list_categories() -> List[Dict[str, Any]]:
    """
    TheMealDB categories.

    Returns:
        List of {"id", "name", "thumbnail", "description"}
    """
    categories = MealDbConnector().list_categories()
    return [
        {
            "id": c.get("idCategory"),
            "name": c.get("strCategory") or "",
            "thumbnail": c.get("strCategoryThumb"),
            "description": c.get("strCategoryDescription"),
        }
        for c in categories
        if c.get("strCategory")
    ]


def list_areas() -> List[str]:
    return [a["strArea"] for a in MealDbConnector().list_areas() if a.get("strArea")]


def list_ingredients() -> List[Dict[str, Any]]:
    """TheMealDB ingredients with their image URL."""
    return [
        {
            "id": i.get("idIngredient"),
            "name": i["strIngredient"],
            "description": i.get("strDescription"),
            "image": ingredient_image_url(i["strIngredient"], "small"),
        }
        for i in MealDbConnector().list_ingredients()
        if i.get("strIngredient")
    ]


def get_recipe_instructions(recipe_id: str) -> List[Dict[str, Any]]:
    """
    Step-by-step instructions for a Spoonacular recipe.

    Returns:
        Flat list of {"number", "step", "section"} across all instruction sections
    """
    sections = SpoonacularConnector().get_recipe_instructions(recipe_id)
    steps: List[Dict[str, Any]] = []
    for section in sections:
        for step in section.get("steps") or []:
            steps.append({
                "number": step.get("number"),
                "step": step.get("step") or "",
                "section": section.get("name") or None,
            })
    return steps


def get_ingredient_nutrition(ingredient: str) -> Optional[Dict[str, Any]]:
    """
    Nutrition for one serving of an ingredient, as a tracked item.

    Returns:
        {"name", "calories", "protein", "carbs", "fat", "amount", "unit"} or None
        when Spoonacular knows no such ingredient
    """
    info = SpoonacularConnector().get_nutrition_for_ingredient(ingredient)
    if not info:
        return None
    return tracked_item_from_nutrition(info)


def generate_meal_plan(target_calories: int, diet: Optional[str] = None, exclude: Optional[str] = None) -> Dict[str, Any]:
    """
    One-day meal plan from Spoonacular.

    Returns:
        {"meals": [{"id", "title", "ready_in_minutes", "servings", "source_url", "image"}],
         "nutrients": {"calories", "protein", "fat", "carbohydrates"}}
    """
    logger.info("Generating meal plan: calories=%d diet=%s exclude=%s", target_calories, diet, exclude)
    plan = SpoonacularConnector().generate_meal_plan(target_calories, diet=diet, exclude=exclude) or {}
    meals = []
    for meal in plan.get("meals") or []:
        image_type = meal.get("imageType") or "jpg"
        meals.append({
            "id": str(meal.get("id")),
            "title": meal.get("title") or "",
            "ready_in_minutes": meal.get("readyInMinutes"),
            "servings": meal.get("servings"),
            "source_url": meal.get("sourceUrl"),
            "image": f"https://spoonacular.com/recipeImages/{meal.get('id')}-312x231.{image_type}",
        })
    nutrients = plan.get("nutrients") or {}
    return {
        "meals": meals,
        "nutrients": {
            "calories": float(nutrients.get("calories") or 0),
            "protein": float(nutrients.get("protein") or 0),
            "fat": float(nutrients.get("fat") or 0),
            "carbohydrates": float(nutrients.get("carbohydrates") or 0),
        },
    }
