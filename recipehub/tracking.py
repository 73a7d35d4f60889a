"""
User tracking service: goals, daily logs, meals, weight, water, ratings, shopping lists.

Every operation takes the id of the signed-in user and only ever reads or writes
that user's rows. Functions open their own session, commit on success, roll back
and re-raise on failure, and always close the session (same shape as the rest of
the persistence code).

Daily logs are derived data: whenever a meal entry or water log is added or
removed, the (user, date) daily log is recomputed from the remaining rows.

Errors:
- NotAuthenticatedError: no user id given
- NotFoundError: a user-scoped delete/lookup/toggle targets an unknown id
- ValueError / pydantic.ValidationError: malformed input (bad date, negative values)
"""

import logging
from datetime import date as date_type
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recipehub.db import (
    DailyLogRow, MealEntryRow, MealScheduleRow, RecipeRatingRow, ShoppingListItemRow,
    ShoppingListRow, UserGoalsRow, WaterLogRow, WeightLogRow, get_db_session,
)
from recipehub.models import RecipeSource

logger = logging.getLogger(__name__)

MealType = Literal["breakfast", "lunch", "dinner", "snack"]

DEFAULT_GOALS = {
    "daily_calorie_target": 2000,
    "water_target_ml": 2000,
    "protein_target_g": 150,
    "carbs_target_g": 250,
    "fat_target_g": 65,
}

DASHBOARD_WEIGHT_LIMIT = 7
PLACEHOLDER_QUANTITY = "1 serving"
DEFAULT_ITEM_CATEGORY = "other"


class TrackingError(Exception):
    """Base class for tracking service errors."""
    pass


class NotAuthenticatedError(TrackingError):
    pass


class NotFoundError(TrackingError):
    pass


def validate_iso_date(value: Any) -> str:
    """
    Normalize a date or YYYY-MM-DD string.

    Raises:
        ValueError: If value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date_type):
        return value.isoformat()
    try:
        return date_type.fromisoformat(str(value)).isoformat()
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def today_iso() -> str:
    return date_type.today().isoformat()


# ============================================================================
# Records
# ============================================================================

class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserGoals(_Record):
    id: int
    user_id: str
    daily_calorie_target: int
    water_target_ml: int
    preferred_diet_type: Optional[str] = None
    protein_target_g: int
    carbs_target_g: int
    fat_target_g: int
    created_at: datetime
    updated_at: datetime


class DailyLog(_Record):
    id: int
    user_id: str
    date: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    water_intake_ml: int
    created_at: datetime
    updated_at: datetime


class MealEntry(_Record):
    id: int
    user_id: str
    date: str
    meal_type: MealType
    recipe_id: str
    recipe_title: str
    quantity: float
    calories: float
    protein: float
    carbs: float
    fat: float
    created_at: datetime


class MealSchedule(_Record):
    id: int
    user_id: str
    date: str
    meal_type: MealType
    recipe_id: str
    source: Optional[RecipeSource] = None
    recipe_title: str
    recipe_image: Optional[str] = None
    servings: int
    calories: Optional[float] = None
    created_at: datetime


class RecipeRating(_Record):
    id: int
    user_id: str
    recipe_id: str
    source: Optional[RecipeSource] = None
    rating: int
    is_favorite: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ShoppingListEntry(_Record):
    id: int
    shopping_list_id: int
    ingredient_name: str
    quantity: Optional[str] = None
    category: str
    is_checked: bool
    recipe_id: Optional[str] = None
    recipe_title: Optional[str] = None
    created_at: datetime


class ShoppingList(_Record):
    id: int
    user_id: str
    name: str
    created_at: datetime
    updated_at: datetime
    items: List[ShoppingListEntry] = Field(default_factory=list)


class WeightLog(_Record):
    id: int
    user_id: str
    date: str
    weight_kg: float
    created_at: datetime


class WaterLog(_Record):
    id: int
    user_id: str
    date: str
    amount_ml: int
    logged_at: datetime


class DashboardData(BaseModel):
    daily_log: Optional[DailyLog] = None
    user_goals: Optional[UserGoals] = None
    todays_meals: List[MealEntry] = Field(default_factory=list)
    recent_weight: List[WeightLog] = Field(default_factory=list)
    water_logs: List[WaterLog] = Field(default_factory=list)


# ============================================================================
# Inputs
# ============================================================================

class _DatedInput(BaseModel):
    date: str

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> str:
        return validate_iso_date(value)


class UserGoalsUpdate(BaseModel):
    """Partial goals update; omitted fields keep their current (or default) value."""
    daily_calorie_target: Optional[int] = Field(None, ge=0)
    water_target_ml: Optional[int] = Field(None, ge=0)
    preferred_diet_type: Optional[str] = None
    protein_target_g: Optional[int] = Field(None, ge=0)
    carbs_target_g: Optional[int] = Field(None, ge=0)
    fat_target_g: Optional[int] = Field(None, ge=0)


class MealEntryCreate(_DatedInput):
    meal_type: MealType
    recipe_id: str = Field(..., min_length=1)
    recipe_title: str
    quantity: float = Field(1, ge=0)
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)


class MealScheduleCreate(_DatedInput):
    meal_type: MealType
    recipe_id: str = Field(..., min_length=1)
    source: Optional[RecipeSource] = None
    recipe_title: str
    recipe_image: Optional[str] = None
    servings: int = Field(1, ge=1)
    calories: Optional[float] = Field(None, ge=0)


# ============================================================================
# Helpers
# ============================================================================

def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise NotAuthenticatedError("Not authenticated")
    return str(user_id)


def _recompute_daily_log(db, user_id: str, day: str) -> DailyLogRow:
    """Rebuild the (user, day) totals from meal entries and water logs. Caller commits."""
    entries = db.query(MealEntryRow).filter(MealEntryRow.user_id == user_id, MealEntryRow.date == day).all()
    water = db.query(WaterLogRow).filter(WaterLogRow.user_id == user_id, WaterLogRow.date == day).all()

    log = db.query(DailyLogRow).filter(DailyLogRow.user_id == user_id, DailyLogRow.date == day).first()
    if log is None:
        log = DailyLogRow(user_id=user_id, date=day)
        db.add(log)

    log.total_calories = sum(e.calories for e in entries)
    log.total_protein = sum(e.protein for e in entries)
    log.total_carbs = sum(e.carbs for e in entries)
    log.total_fat = sum(e.fat for e in entries)
    log.water_intake_ml = sum(w.amount_ml for w in water)
    log.updated_at = datetime.now(timezone.utc)
    return log


# ============================================================================
# Goals
# ============================================================================

def get_user_goals(user_id: str) -> Optional[UserGoals]:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        row = db.query(UserGoalsRow).filter(UserGoalsRow.user_id == user_id).first()
        return UserGoals.model_validate(row) if row else None
    finally:
        db.close()


def upsert_user_goals(user_id: str, goals: UserGoalsUpdate) -> UserGoals:
    """
    Create or update the user's goals (one row per user).

    Fields left as None keep their stored value, or the default on first insert.
    """
    user_id = _require_user(user_id)
    updates = goals.model_dump(exclude_none=True)

    db = get_db_session()
    try:
        row = db.query(UserGoalsRow).filter(UserGoalsRow.user_id == user_id).first()
        if row is None:
            row = UserGoalsRow(user_id=user_id, **{**DEFAULT_GOALS, **updates})
            db.add(row)
        else:
            for field, value in updates.items():
                setattr(row, field, value)
            row.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(row)
        logger.info("Saved goals for user %s", user_id)
        return UserGoals.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error saving goals for user %s: %s", user_id, e)
        raise
    finally:
        db.close()


# ============================================================================
# Daily logs
# ============================================================================

def get_daily_log(user_id: str, day: str) -> Optional[DailyLog]:
    user_id = _require_user(user_id)
    day = validate_iso_date(day)
    db = get_db_session()
    try:
        row = db.query(DailyLogRow).filter(DailyLogRow.user_id == user_id, DailyLogRow.date == day).first()
        return DailyLog.model_validate(row) if row else None
    finally:
        db.close()


def get_daily_logs(user_id: str, start: str, end: str) -> List[DailyLog]:
    """Daily logs with start <= date <= end, oldest first."""
    user_id = _require_user(user_id)
    start, end = validate_iso_date(start), validate_iso_date(end)
    db = get_db_session()
    try:
        rows = (
            db.query(DailyLogRow)
            .filter(DailyLogRow.user_id == user_id, DailyLogRow.date >= start, DailyLogRow.date <= end)
            .order_by(DailyLogRow.date.asc())
            .all()
        )
        return [DailyLog.model_validate(r) for r in rows]
    finally:
        db.close()


# ============================================================================
# Meal entries
# ============================================================================

def add_meal_entry(user_id: str, entry: MealEntryCreate) -> MealEntry:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        row = MealEntryRow(user_id=user_id, **entry.model_dump())
        db.add(row)
        db.flush()
        _recompute_daily_log(db, user_id, row.date)
        db.commit()
        db.refresh(row)
        logger.info("Logged %s '%s' for user %s on %s", row.meal_type, row.recipe_title, user_id, row.date)
        return MealEntry.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error adding meal entry for user %s: %s", user_id, e)
        raise
    finally:
        db.close()


def get_meal_entries(user_id: str, day: str) -> List[MealEntry]:
    """Meal entries for one day in the order they were logged."""
    user_id = _require_user(user_id)
    day = validate_iso_date(day)
    db = get_db_session()
    try:
        rows = (
            db.query(MealEntryRow)
            .filter(MealEntryRow.user_id == user_id, MealEntryRow.date == day)
            .order_by(MealEntryRow.created_at.asc(), MealEntryRow.id.asc())
            .all()
        )
        return [MealEntry.model_validate(r) for r in rows]
    finally:
        db.close()


def delete_meal_entry(user_id: str, entry_id: int) -> None:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        row = db.query(MealEntryRow).filter(MealEntryRow.id == entry_id, MealEntryRow.user_id == user_id).first()
        if row is None:
            raise NotFoundError(f"Meal entry {entry_id} not found")
        day = row.date
        db.delete(row)
        db.flush()
        _recompute_daily_log(db, user_id, day)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ============================================================================
# Weight and water
# ============================================================================

def add_weight_log(user_id: str, weight_kg: float, day: Optional[str] = None) -> WeightLog:
    """Record the user's weight for a day (default today), replacing any earlier value for that day."""
    user_id = _require_user(user_id)
    if weight_kg is None or weight_kg < 0:
        raise ValueError("weight_kg must be a non-negative number")
    day = validate_iso_date(day) if day else today_iso()

    db = get_db_session()
    try:
        row = db.query(WeightLogRow).filter(WeightLogRow.user_id == user_id, WeightLogRow.date == day).first()
        if row is None:
            row = WeightLogRow(user_id=user_id, date=day, weight_kg=float(weight_kg))
            db.add(row)
        else:
            row.weight_kg = float(weight_kg)
        db.commit()
        db.refresh(row)
        return WeightLog.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error saving weight for user %s: %s", user_id, e)
        raise
    finally:
        db.close()


def get_weight_logs(user_id: str, limit: int = 30) -> List[WeightLog]:
    """Most recent weight logs, newest date first."""
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        rows = (
            db.query(WeightLogRow)
            .filter(WeightLogRow.user_id == user_id)
            .order_by(WeightLogRow.date.desc())
            .limit(limit)
            .all()
        )
        return [WeightLog.model_validate(r) for r in rows]
    finally:
        db.close()


def add_water_log(user_id: str, amount_ml: int, day: Optional[str] = None) -> WaterLog:
    user_id = _require_user(user_id)
    if amount_ml is None or amount_ml < 0:
        raise ValueError("amount_ml must be a non-negative number")
    day = validate_iso_date(day) if day else today_iso()

    db = get_db_session()
    try:
        row = WaterLogRow(user_id=user_id, date=day, amount_ml=int(amount_ml))
        db.add(row)
        db.flush()
        _recompute_daily_log(db, user_id, day)
        db.commit()
        db.refresh(row)
        return WaterLog.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error adding water log for user %s: %s", user_id, e)
        raise
    finally:
        db.close()


def get_water_logs(user_id: str, day: str) -> List[WaterLog]:
    user_id = _require_user(user_id)
    day = validate_iso_date(day)
    db = get_db_session()
    try:
        rows = (
            db.query(WaterLogRow)
            .filter(WaterLogRow.user_id == user_id, WaterLogRow.date == day)
            .order_by(WaterLogRow.logged_at.asc(), WaterLogRow.id.asc())
            .all()
        )
        return [WaterLog.model_validate(r) for r in rows]
    finally:
        db.close()


# ============================================================================
# Meal schedules
# ============================================================================

def add_meal_schedule(user_id: str, schedule: MealScheduleCreate) -> MealSchedule:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        row = MealScheduleRow(user_id=user_id, **schedule.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Scheduled '%s' (%s) for user %s on %s", row.recipe_title, row.meal_type, user_id, row.date)
        return MealSchedule.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error scheduling meal for user %s: %s", user_id, e)
        raise
    finally:
        db.close()


def get_meal_schedules(user_id: str, start: str, end: str) -> List[MealSchedule]:
    """Scheduled meals with start <= date <= end, ordered by date."""
    user_id = _require_user(user_id)
    start, end = validate_iso_date(start), validate_iso_date(end)
    db = get_db_session()
    try:
        rows = (
            db.query(MealScheduleRow)
            .filter(MealScheduleRow.user_id == user_id, MealScheduleRow.date >= start, MealScheduleRow.date <= end)
            .order_by(MealScheduleRow.date.asc(), MealScheduleRow.id.asc())
            .all()
        )
        return [MealSchedule.model_validate(r) for r in rows]
    finally:
        db.close()


def delete_meal_schedule(user_id: str, schedule_id: int) -> None:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        deleted = (
            db.query(MealScheduleRow)
            .filter(MealScheduleRow.id == schedule_id, MealScheduleRow.user_id == user_id)
            .delete()
        )
        if not deleted:
            raise NotFoundError(f"Meal schedule {schedule_id} not found")
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ============================================================================
# Ratings
# ============================================================================

def rate_recipe(
    user_id: str,
    recipe_id: str,
    rating: int,
    is_favorite: bool = False,
    notes: Optional[str] = None,
    source: Optional[str] = None,
) -> RecipeRating:
    """
    Create or replace the user's rating of a recipe (one row per user and recipe).

    source records which provider the recipe id belongs to; a rating saved
    without one keeps the provider stored earlier.
    """
    user_id = _require_user(user_id)
    if not 1 <= int(rating) <= 5:
        raise ValueError("rating must be between 1 and 5")
    recipe_id = str(recipe_id)

    db = get_db_session()
    try:
        row = (
            db.query(RecipeRatingRow)
            .filter(RecipeRatingRow.user_id == user_id, RecipeRatingRow.recipe_id == recipe_id)
            .first()
        )
        if row is None:
            row = RecipeRatingRow(user_id=user_id, recipe_id=recipe_id)
            db.add(row)
        row.rating = int(rating)
        row.is_favorite = bool(is_favorite)
        row.notes = notes
        if source:
            row.source = source
        row.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(row)
        return RecipeRating.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error rating recipe %s for user %s: %s", recipe_id, user_id, e)
        raise
    finally:
        db.close()


def get_recipe_rating(user_id: str, recipe_id: str) -> Optional[RecipeRating]:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        row = (
            db.query(RecipeRatingRow)
            .filter(RecipeRatingRow.user_id == user_id, RecipeRatingRow.recipe_id == str(recipe_id))
            .first()
        )
        return RecipeRating.model_validate(row) if row else None
    finally:
        db.close()


def get_favorite_recipes(user_id: str) -> List[RecipeRating]:
    """Ratings flagged as favorite, most recently updated first."""
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        rows = (
            db.query(RecipeRatingRow)
            .filter(RecipeRatingRow.user_id == user_id, RecipeRatingRow.is_favorite.is_(True))
            .order_by(RecipeRatingRow.updated_at.desc(), RecipeRatingRow.id.desc())
            .all()
        )
        return [RecipeRating.model_validate(r) for r in rows]
    finally:
        db.close()


# ============================================================================
# Dashboard
# ============================================================================

def get_dashboard_data(user_id: str, day: Optional[str] = None) -> DashboardData:
    """Goals, today's log, meals and water, plus the last week of weight entries."""
    user_id = _require_user(user_id)
    day = validate_iso_date(day) if day else today_iso()
    return DashboardData(
        user_goals=get_user_goals(user_id),
        daily_log=get_daily_log(user_id, day),
        todays_meals=get_meal_entries(user_id, day),
        recent_weight=get_weight_logs(user_id, DASHBOARD_WEIGHT_LIMIT),
        water_logs=get_water_logs(user_id, day),
    )


# ============================================================================
# Shopping lists
# ============================================================================

def create_shopping_list(user_id: str, name: str) -> ShoppingList:
    user_id = _require_user(user_id)
    if not name or not name.strip():
        raise ValueError("Shopping list name must not be empty")

    db = get_db_session()
    try:
        row = ShoppingListRow(user_id=user_id, name=name.strip())
        db.add(row)
        db.commit()
        db.refresh(row)
        return ShoppingList.model_validate(row)
    except Exception as e:
        db.rollback()
        logger.error("Error creating shopping list for user %s: %s", user_id, e)
        raise
    finally:
        db.close()


def get_shopping_lists(user_id: str) -> List[ShoppingList]:
    """The user's shopping lists with items, newest first."""
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        rows = (
            db.query(ShoppingListRow)
            .filter(ShoppingListRow.user_id == user_id)
            .order_by(ShoppingListRow.created_at.desc(), ShoppingListRow.id.desc())
            .all()
        )
        return [ShoppingList.model_validate(r) for r in rows]
    finally:
        db.close()


def get_shopping_list(user_id: str, list_id: int) -> ShoppingList:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        row = (
            db.query(ShoppingListRow)
            .filter(ShoppingListRow.id == list_id, ShoppingListRow.user_id == user_id)
            .first()
        )
        if row is None:
            raise NotFoundError(f"Shopping list {list_id} not found")
        return ShoppingList.model_validate(row)
    finally:
        db.close()


def toggle_shopping_list_item(user_id: str, list_id: int, item_id: int) -> ShoppingListEntry:
    user_id = _require_user(user_id)
    db = get_db_session()
    try:
        item = (
            db.query(ShoppingListItemRow)
            .join(ShoppingListRow, ShoppingListItemRow.shopping_list_id == ShoppingListRow.id)
            .filter(
                ShoppingListItemRow.id == item_id,
                ShoppingListRow.id == list_id,
                ShoppingListRow.user_id == user_id,
            )
            .first()
        )
        if item is None:
            raise NotFoundError(f"Item {item_id} not found in shopping list {list_id}")
        item.is_checked = not item.is_checked
        db.commit()
        db.refresh(item)
        return ShoppingListEntry.model_validate(item)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _format_quantity(amount: Any, unit: Any) -> Optional[str]:
    text = " ".join(str(part).strip() for part in (amount, unit) if part not in (None, "") and str(part).strip())
    return text or None


def generate_shopping_list_from_meals(
    user_id: str,
    start: str,
    end: str,
    recipe_lookup: Optional[Callable[[str, Optional[str]], Optional[Dict[str, Any]]]] = None,
) -> ShoppingList:
    """
    Build a shopping list from the meals scheduled between start and end.

    Ingredients are merged by lower-cased name; a merged item lists every recipe
    it came from. Without a recipe_lookup, or when a recipe cannot be resolved,
    the meal contributes one placeholder item ("Ingredient for <title>").

    Args:
        user_id: Signed-in user
        start: First day (YYYY-MM-DD)
        end: Last day (YYYY-MM-DD)
        recipe_lookup: Optional callable (recipe_id, source) -> recipe dict with
                       "ingredients" (name, amount, unit), e.g. get_unified_recipe_by_id.
                       source is the provider stored with the schedule, or None

    Returns:
        The new ShoppingList, named "Meal Plan <start> to <end>", with its items
    """
    user_id = _require_user(user_id)
    start, end = validate_iso_date(start), validate_iso_date(end)
    meals = get_meal_schedules(user_id, start, end)

    merged: Dict[str, Dict[str, Any]] = {}

    def _merge(name: str, quantity: Optional[str], category: str, meal: MealSchedule) -> None:
        key = name.strip().lower()
        if key not in merged:
            merged[key] = {
                "ingredient_name": name.strip(),
                "quantities": [quantity] if quantity else [],
                "category": category,
                "recipe_ids": [meal.recipe_id],
                "recipes": [meal.recipe_title],
            }
            return
        entry = merged[key]
        if quantity and quantity not in entry["quantities"]:
            entry["quantities"].append(quantity)
        if meal.recipe_id not in entry["recipe_ids"]:
            entry["recipe_ids"].append(meal.recipe_id)
        if meal.recipe_title not in entry["recipes"]:
            entry["recipes"].append(meal.recipe_title)

    for meal in meals:
        recipe = None
        if recipe_lookup is not None:
            try:
                recipe = recipe_lookup(meal.recipe_id, meal.source)
            except Exception as e:
                logger.warning("Could not resolve recipe %s for shopping list: %s", meal.recipe_id, e)

        ingredients = (recipe or {}).get("ingredients") or []
        if not ingredients:
            _merge(f"Ingredient for {meal.recipe_title}", PLACEHOLDER_QUANTITY, DEFAULT_ITEM_CATEGORY, meal)
            continue
        for ingredient in ingredients:
            name = ingredient.get("name") or ""
            if not name.strip():
                continue
            _merge(
                name,
                _format_quantity(ingredient.get("amount"), ingredient.get("unit")),
                DEFAULT_ITEM_CATEGORY,
                meal,
            )

    db = get_db_session()
    try:
        shopping_list = ShoppingListRow(user_id=user_id, name=f"Meal Plan {start} to {end}")
        db.add(shopping_list)
        for entry in merged.values():
            shopping_list.items.append(
                ShoppingListItemRow(
                    ingredient_name=entry["ingredient_name"],
                    quantity=" + ".join(entry["quantities"]) or None,
                    category=entry["category"],
                    recipe_id=entry["recipe_ids"][0] if len(entry["recipe_ids"]) == 1 else None,
                    recipe_title=", ".join(entry["recipes"]),
                )
            )
        db.commit()
        db.refresh(shopping_list)
        logger.info(
            "Generated shopping list %s for user %s: %d meals, %d items",
            shopping_list.id, user_id, len(meals), len(merged),
        )
        return ShoppingList.model_validate(shopping_list)
    except Exception as e:
        db.rollback()
        logger.error("Error generating shopping list for user %s: %s", user_id, e)
        raise
    finally:
        db.close()
