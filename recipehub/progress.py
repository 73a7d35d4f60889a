"""
Derived numbers shown by the dashboard, goals and planner pages.

Pure functions only: no I/O, no database access. Inputs are the tracking
records (or plain dicts with the same keys) and unified recipe dicts.
"""

import re
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

DEFAULT_CALORIE_TARGET = 2000
DEFAULT_WATER_TARGET_ML = 2000
GLASS_ML = 250

# kcal per gram
PROTEIN_KCAL = 4
CARBS_KCAL = 4
FAT_KCAL = 9

_LEADING_NUMBER = re.compile(r"^\s*(\d*\.?\d+)")


def _get(record: Any, field: str, default: Any = None) -> Any:
    if record is None:
        return default
    if isinstance(record, dict):
        return record.get(field, default)
    return getattr(record, field, default)


def _percentage(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(current / target * 100, 100.0)


def calorie_progress(daily_log: Any, goals: Any) -> Dict[str, float]:
    """
    Calories eaten today against the daily target.

    Returns:
        {"current", "target", "percentage"}; percentage is capped at 100 and the
        target falls back to 2000 kcal when there are no goals
    """
    current = float(_get(daily_log, "total_calories", 0) or 0)
    target = float(_get(goals, "daily_calorie_target", 0) or DEFAULT_CALORIE_TARGET)
    return {"current": current, "target": target, "percentage": _percentage(current, target)}


def water_progress(daily_log: Any, goals: Any) -> Dict[str, float]:
    """Water drunk today against the target, plus the number of full 250 ml glasses."""
    current = float(_get(daily_log, "water_intake_ml", 0) or 0)
    target = float(_get(goals, "water_target_ml", 0) or DEFAULT_WATER_TARGET_ML)
    return {
        "current": current,
        "target": target,
        "percentage": _percentage(current, target),
        "glasses": int(current // GLASS_ML),
    }


def glasses_for(water_ml: float) -> int:
    """Rounded number of glasses for a water target (goals page hint)."""
    return int(round((water_ml or DEFAULT_WATER_TARGET_ML) / GLASS_ML))


def macro_calories(protein: float, carbs: float, fat: float) -> Dict[str, float]:
    """Convert macro grams to kcal (4/4/9)."""
    return {
        "protein": protein * PROTEIN_KCAL,
        "carbs": carbs * CARBS_KCAL,
        "fat": fat * FAT_KCAL,
    }


def sum_tracked_items(items: Iterable[Dict[str, Any]]) -> Dict[str, float]:
    """
    Amount-weighted nutrition totals of tracked ingredients.

    Each item carries per-serving calories/protein/carbs/fat and an amount in
    servings; missing values count as 0 (amount as 1).
    """
    totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0}
    for item in items:
        amount = item.get("amount")
        amount = 1.0 if amount is None else float(amount)
        for field in totals:
            totals[field] += float(item.get(field) or 0) * amount
    return totals


def tracked_item_from_nutrition(info: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a tracked item (1 serving) from Spoonacular ingredient information.

    Nutrients are matched by name; a missing nutrient counts as 0.
    """
    nutrients = (info.get("nutrition") or {}).get("nutrients") or []

    def _amount(name: str) -> float:
        for nutrient in nutrients:
            if nutrient.get("name") == name:
                return float(nutrient.get("amount") or 0)
        return 0.0

    return {
        "name": info.get("name") or "",
        "calories": _amount("Calories"),
        "protein": _amount("Protein"),
        "carbs": _amount("Carbohydrates"),
        "fat": _amount("Fat"),
        "amount": 1.0,
        "unit": "serving",
    }


def week_range(day: date) -> Tuple[date, date]:
    """Sunday..Saturday week containing `day`."""
    # date.weekday(): Monday=0 .. Sunday=6
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def week_days(day: date) -> List[date]:
    start, _ = week_range(day)
    return [start + timedelta(days=i) for i in range(7)]


def parse_leading_number(text: Any, default: float = 1.0) -> float:
    """
    Read the number at the start of a free-text amount ("1.5 cups" -> 1.5).

    Falls back to `default` for empty or non-numeric text ("pinch").
    """
    if text is None or text == "":
        return default
    if isinstance(text, (int, float)):
        return float(text)
    match = _LEADING_NUMBER.match(str(text))
    return float(match.group(1)) if match else default


def numeric_recipe_id(recipe_id: Any) -> Optional[int]:
    try:
        return int(str(recipe_id).strip())
    except (TypeError, ValueError):
        return None


def meal_entry_from_recipe(recipe: Dict[str, Any], meal_type: str, day: Optional[date] = None) -> Dict[str, Any]:
    """
    Meal entry payload for logging one serving of a unified recipe.

    Macros are rounded to whole numbers; recipes without nutrition log zeros.
    """
    nutrition = recipe.get("nutrition") or {}
    return {
        "date": (day or date.today()).isoformat(),
        "meal_type": meal_type,
        "recipe_id": str(recipe.get("id")),
        "recipe_title": recipe.get("title") or "",
        "quantity": 1,
        "calories": round(nutrition.get("calories") or 0),
        "protein": round(nutrition.get("protein") or 0),
        "carbs": round(nutrition.get("carbs") or 0),
        "fat": round(nutrition.get("fat") or 0),
    }


def meal_schedule_from_recipe(recipe: Dict[str, Any], meal_type: str, day: date) -> Dict[str, Any]:
    """Meal schedule payload for planning a unified recipe on `day`."""
    nutrition = recipe.get("nutrition") or {}
    calories = nutrition.get("calories")
    return {
        "date": day.isoformat(),
        "meal_type": meal_type,
        "recipe_id": str(recipe.get("id")),
        "source": recipe.get("source"),
        "recipe_title": recipe.get("title") or "",
        "recipe_image": recipe.get("image") or None,
        "servings": recipe.get("servings") or 1,
        "calories": round(calories) if calories is not None else None,
    }


def shopping_items_from_recipe(recipe: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Local shopping list items for every ingredient of a unified recipe."""
    recipe_id = numeric_recipe_id(recipe.get("id"))
    return [
        {
            "name": ingredient.get("name") or "",
            "amount": parse_leading_number(ingredient.get("amount")),
            "unit": ingredient.get("unit") or "",
            "recipe_id": recipe_id,
            "recipe_title": recipe.get("title"),
        }
        for ingredient in recipe.get("ingredients") or []
        if ingredient.get("name")
    ]
