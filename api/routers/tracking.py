"""
Tracking router for per-user nutrition, planning and shopping endpoints.

This router exposes recipehub.tracking over HTTP:
- /tracking/goals - Get or upsert the user's goals
- /tracking/daily-logs - Daily totals (derived from meal entries and water logs)
- /tracking/meal-entries - Log, list and delete eaten meals
- /tracking/weight-logs, /tracking/water-logs - Body weight and hydration
- /tracking/meal-schedules - Plan and unplan meals
- /tracking/ratings - Rate recipes and mark favorites
- /tracking/dashboard - Everything the dashboard needs for one day
- /tracking/shopping-lists - Named backend shopping lists, incl. generation from the meal plan

Every endpoint requires the X-User-ID header (the signed-in user's id).

Error mapping:
- Missing X-User-ID -> 400
- Invalid input (bad date, out of range values) -> 400
- Unknown id for the user -> 404
- Anything else -> 500
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Header, HTTPException, Query, status

from api.schemas import (
    GenerateShoppingListRequest,
    RatingRequest,
    ShoppingListCreateRequest,
    WaterLogRequest,
    WeightLogRequest,
)
from recipehub import tracking
from recipehub.tracking import (
    DailyLog,
    DashboardData,
    MealEntry,
    MealEntryCreate,
    MealSchedule,
    MealScheduleCreate,
    RecipeRating,
    ShoppingList,
    ShoppingListEntry,
    UserGoals,
    UserGoalsUpdate,
    WaterLog,
    WeightLog,
)
from recipehub.unified import get_unified_recipe_by_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tracking", tags=["tracking"])


def get_user(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> str:
    """
    Get the signed-in user's id from the X-User-ID header.

    Raises:
        HTTPException 400: If the header is missing
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-ID header is required for tracking operations. Please sign in first.",
            headers={"X-User-ID": "required"}
        )
    return x_user_id


def _tracking_error(action: str, error: Exception) -> HTTPException:
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, tracking.NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (tracking.NotAuthenticatedError, ValueError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid request: {str(error)}")
    logger.error("Tracking error while %s: %s", action, error, exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error {action}: {str(error)}"
    )


# ============================================================================
# Goals and daily logs
# ============================================================================

@router.get("/goals", response_model=Optional[UserGoals], summary="Get the user's goals")
def get_goals(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> Optional[UserGoals]:
    """Returns null when the user has not saved goals yet (pages then show defaults)."""
    user_id = get_user(x_user_id)
    try:
        return tracking.get_user_goals(user_id)
    except Exception as e:
        raise _tracking_error("loading goals", e) from e


@router.put("/goals", response_model=UserGoals, summary="Create or update the user's goals")
def put_goals(
    goals: UserGoalsUpdate,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> UserGoals:
    user_id = get_user(x_user_id)
    try:
        return tracking.upsert_user_goals(user_id, goals)
    except Exception as e:
        raise _tracking_error("saving goals", e) from e


@router.get("/daily-logs/{day}", response_model=Optional[DailyLog], summary="Daily totals for one day")
def get_daily_log(day: str, x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> Optional[DailyLog]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_daily_log(user_id, day)
    except Exception as e:
        raise _tracking_error("loading daily log", e) from e


@router.get("/daily-logs", response_model=List[DailyLog], summary="Daily totals for a date range")
def get_daily_logs(
    start: str = Query(..., description="First day (YYYY-MM-DD)"),
    end: str = Query(..., description="Last day (YYYY-MM-DD)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> List[DailyLog]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_daily_logs(user_id, start, end)
    except Exception as e:
        raise _tracking_error("loading daily logs", e) from e


# ============================================================================
# Meal entries
# ============================================================================

@router.post(
    "/meal-entries",
    response_model=MealEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Log an eaten meal",
)
def post_meal_entry(
    entry: MealEntryCreate,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> MealEntry:
    user_id = get_user(x_user_id)
    try:
        return tracking.add_meal_entry(user_id, entry)
    except Exception as e:
        raise _tracking_error("logging meal", e) from e


@router.get("/meal-entries", response_model=List[MealEntry], summary="Meals logged on one day")
def get_meal_entries(
    date: str = Query(..., description="Day (YYYY-MM-DD)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> List[MealEntry]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_meal_entries(user_id, date)
    except Exception as e:
        raise _tracking_error("loading meal entries", e) from e


@router.delete("/meal-entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a logged meal")
def delete_meal_entry(entry_id: int, x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> None:
    user_id = get_user(x_user_id)
    try:
        tracking.delete_meal_entry(user_id, entry_id)
    except Exception as e:
        raise _tracking_error("deleting meal entry", e) from e
    return


# ============================================================================
# Weight and water
# ============================================================================

@router.post("/weight-logs", response_model=WeightLog, summary="Record today's (or a given day's) weight")
def post_weight_log(
    body: WeightLogRequest,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> WeightLog:
    user_id = get_user(x_user_id)
    try:
        return tracking.add_weight_log(user_id, body.weight_kg, body.date)
    except Exception as e:
        raise _tracking_error("saving weight", e) from e


@router.get("/weight-logs", response_model=List[WeightLog], summary="Recent weight logs, newest first")
def get_weight_logs(
    limit: int = Query(30, ge=1, le=365),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> List[WeightLog]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_weight_logs(user_id, limit=limit)
    except Exception as e:
        raise _tracking_error("loading weight logs", e) from e


@router.post(
    "/water-logs",
    response_model=WaterLog,
    status_code=status.HTTP_201_CREATED,
    summary="Log water intake",
)
def post_water_log(
    body: WaterLogRequest,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> WaterLog:
    user_id = get_user(x_user_id)
    try:
        return tracking.add_water_log(user_id, body.amount_ml, body.date)
    except Exception as e:
        raise _tracking_error("logging water", e) from e


@router.get("/water-logs", response_model=List[WaterLog], summary="Water logged on one day")
def get_water_logs(
    date: str = Query(..., description="Day (YYYY-MM-DD)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> List[WaterLog]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_water_logs(user_id, date)
    except Exception as e:
        raise _tracking_error("loading water logs", e) from e


# ============================================================================
# Meal schedules
# ============================================================================

@router.post(
    "/meal-schedules",
    response_model=MealSchedule,
    status_code=status.HTTP_201_CREATED,
    summary="Plan a meal",
)
def post_meal_schedule(
    schedule: MealScheduleCreate,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> MealSchedule:
    user_id = get_user(x_user_id)
    try:
        return tracking.add_meal_schedule(user_id, schedule)
    except Exception as e:
        raise _tracking_error("scheduling meal", e) from e


@router.get("/meal-schedules", response_model=List[MealSchedule], summary="Planned meals in a date range")
def get_meal_schedules(
    start: str = Query(..., description="First day (YYYY-MM-DD)"),
    end: str = Query(..., description="Last day (YYYY-MM-DD)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> List[MealSchedule]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_meal_schedules(user_id, start, end)
    except Exception as e:
        raise _tracking_error("loading meal schedules", e) from e


@router.delete("/meal-schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a planned meal")
def delete_meal_schedule(schedule_id: int, x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> None:
    user_id = get_user(x_user_id)
    try:
        tracking.delete_meal_schedule(user_id, schedule_id)
    except Exception as e:
        raise _tracking_error("deleting meal schedule", e) from e
    return


# ============================================================================
# Ratings
# ============================================================================

# Declared before /ratings/{recipe_id} so "favorites" is not read as a recipe id
@router.get("/ratings/favorites", response_model=List[RecipeRating], summary="Recipes the user marked as favorite")
def get_favorites(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> List[RecipeRating]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_favorite_recipes(user_id)
    except Exception as e:
        raise _tracking_error("loading favorites", e) from e


@router.put("/ratings/{recipe_id}", response_model=RecipeRating, summary="Rate a recipe")
def put_rating(
    recipe_id: str,
    body: RatingRequest,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> RecipeRating:
    user_id = get_user(x_user_id)
    try:
        return tracking.rate_recipe(user_id, recipe_id, body.rating, body.is_favorite, body.notes, body.source)
    except Exception as e:
        raise _tracking_error("rating recipe", e) from e


@router.get("/ratings/{recipe_id}", response_model=Optional[RecipeRating], summary="The user's rating of a recipe")
def get_rating(recipe_id: str, x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> Optional[RecipeRating]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_recipe_rating(user_id, recipe_id)
    except Exception as e:
        raise _tracking_error("loading rating", e) from e


# ============================================================================
# Dashboard
# ============================================================================

@router.get("/dashboard", response_model=DashboardData, summary="Dashboard data for one day")
def get_dashboard(
    date: Optional[str] = Query(None, description="Day (YYYY-MM-DD); defaults to today"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> DashboardData:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_dashboard_data(user_id, date)
    except Exception as e:
        raise _tracking_error("loading dashboard", e) from e


# ============================================================================
# Shopping lists
# ============================================================================

@router.post(
    "/shopping-lists/generate",
    response_model=ShoppingList,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a shopping list from planned meals",
    description="Creates 'Meal Plan <start> to <end>' with the ingredients of every meal scheduled in "
                "the range, merged by name. Unresolvable recipes contribute a placeholder item.",
)
def generate_shopping_list(
    body: GenerateShoppingListRequest,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> ShoppingList:
    user_id = get_user(x_user_id)
    lookup = get_unified_recipe_by_id if body.resolve_ingredients else None
    try:
        return tracking.generate_shopping_list_from_meals(user_id, body.start_date, body.end_date, recipe_lookup=lookup)
    except Exception as e:
        raise _tracking_error("generating shopping list", e) from e


@router.post(
    "/shopping-lists",
    response_model=ShoppingList,
    status_code=status.HTTP_201_CREATED,
    summary="Create an empty shopping list",
)
def post_shopping_list(
    body: ShoppingListCreateRequest,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> ShoppingList:
    user_id = get_user(x_user_id)
    try:
        return tracking.create_shopping_list(user_id, body.name)
    except Exception as e:
        raise _tracking_error("creating shopping list", e) from e


@router.get("/shopping-lists", response_model=List[ShoppingList], summary="The user's shopping lists")
def get_shopping_lists(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> List[ShoppingList]:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_shopping_lists(user_id)
    except Exception as e:
        raise _tracking_error("loading shopping lists", e) from e


@router.get("/shopping-lists/{list_id}", response_model=ShoppingList, summary="One shopping list with items")
def get_shopping_list(list_id: int, x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> ShoppingList:
    user_id = get_user(x_user_id)
    try:
        return tracking.get_shopping_list(user_id, list_id)
    except Exception as e:
        raise _tracking_error("loading shopping list", e) from e


@router.post(
    "/shopping-lists/{list_id}/items/{item_id}/toggle",
    response_model=ShoppingListEntry,
    summary="Check or uncheck a shopping list item",
)
def toggle_item(
    list_id: int,
    item_id: int,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> ShoppingListEntry:
    user_id = get_user(x_user_id)
    try:
        return tracking.toggle_shopping_list_item(user_id, list_id, item_id)
    except Exception as e:
        raise _tracking_error("toggling shopping list item", e) from e
