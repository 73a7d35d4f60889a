"""
FastAPI application for the Recipe Hub API.

This module defines the REST API endpoints for the recipe hub backend:
- GET /recipes/search: Search recipes across Spoonacular and TheMealDB
- GET /recipes/random: Random recipes from both providers
- GET /recipes/{recipe_id}: One recipe from its provider
- GET /recipes/category/{category} and /recipes/area/{area}: Browse filters
- GET /recipes/{recipe_id}/instructions: Step-by-step instructions (Spoonacular)
- GET /catalog/*: Cuisines, categories, areas and ingredients
- GET /nutrition/ingredient: Nutrition for one serving of an ingredient
- GET /meal-plan/generate: One-day meal plan for a calorie target
- /tracking/*: Per-user goals, logs, schedules, ratings and shopping lists
  (see api/routers/tracking.py; requires the X-User-ID header)

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import time
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException, Query, status

from api.config import get_log_level, get_required_env_vars, validate_required_config
from api.routers import tracking as tracking_router
from api.schemas import (
    CategoryOut,
    IngredientOut,
    InstructionStep,
    MealPlanResponse,
    NutritionItemOut,
    RecipeListResponse,
)
from recipehub import catalog
from recipehub.connectors.spoonacular_connector import SpoonacularAuthError
from recipehub.db import init_db
from recipehub.models import UnifiedRecipe
from recipehub.unified import (
    filter_recipes_by_area,
    filter_recipes_by_category,
    get_random_recipes,
    get_unified_recipe_by_id,
    search_all_recipes,
)

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

API_NAME = "Recipe Hub API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Backend API for recipe discovery (Spoonacular + TheMealDB), meal planning and nutrition tracking"

app = FastAPI(
    title=API_NAME,
    description=API_DESCRIPTION,
    version=API_VERSION,
    tags_metadata=[
        {
            "name": "recipes",
            "description": "Unified recipe search and lookups across Spoonacular and TheMealDB.",
        },
        {
            "name": "catalog",
            "description": "Browse lists: cuisines, categories, areas and ingredients.",
        },
        {
            "name": "nutrition",
            "description": "Ingredient nutrition and generated meal plans (Spoonacular).",
        },
        {
            "name": "tracking",
            "description": "Per-user goals, logs, schedules, ratings and shopping lists. Requires the X-User-ID header.",
        },
        {
            "name": "health",
            "description": "Health check and monitoring endpoints.",
        },
    ],
)

app.include_router(tracking_router.router)

try:
    init_db()
except Exception as e:
    # Tracking endpoints fail individually until the database is reachable
    logger.warning("Database initialization failed: %s", e)

try:
    validate_required_config()
except RuntimeError as e:
    logger.warning("Spoonacular disabled, serving TheMealDB only. %s", e)


def _upstream_error(action: str, error: Exception) -> HTTPException:
    """Map a provider failure to an HTTP error."""
    if isinstance(error, SpoonacularAuthError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Spoonacular rejected the request while {action}: {str(error)}",
        )
    if isinstance(error, RuntimeError) and "not configured" in str(error).lower():
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Recipe provider not configured: {str(error)}",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Error {action}: {str(error)}",
    )


@app.get(
    "/recipes/search",
    response_model=RecipeListResponse,
    tags=["recipes"],
    summary="Search recipes across both providers",
    description="Search Spoonacular (first ceil(limit/2)) and TheMealDB (first floor(limit/2)) in parallel. "
                "A failing provider is reported in sources_status; the other provider's results are still returned.",
)
def search_recipes(
    q: str = Query(..., min_length=1, description="Search query (e.g., 'chicken', 'pasta')"),
    limit: int = Query(12, ge=1, le=50, description="Maximum number of recipes to return"),
) -> RecipeListResponse:
    """
    Search recipes across Spoonacular and TheMealDB.

    Args:
        q: Search query (minimum 1 character)
        limit: Maximum number of recipes (1-50)

    Returns:
        RecipeListResponse with results (Spoonacular first) and sources_status

    Raises:
        HTTPException 500: If the aggregation itself fails

    Example:
        ```bash
        GET /recipes/search?q=chicken&limit=6
        ```
    """
    try:
        return RecipeListResponse(**search_all_recipes(q, limit=limit))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error performing recipe search: {str(e)}"
        ) from e


@app.get(
    "/recipes/random",
    response_model=RecipeListResponse,
    tags=["recipes"],
    summary="Random recipes from both providers",
)
def random_recipes(
    count: int = Query(12, ge=1, le=30, description="Number of recipes to return"),
) -> RecipeListResponse:
    """Random recipes: ceil(count/2) from Spoonacular, floor(count/2) from TheMealDB. Never cached."""
    try:
        return RecipeListResponse(**get_random_recipes(count=count))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching random recipes: {str(e)}"
        ) from e


@app.get(
    "/recipes/category/{category}",
    response_model=RecipeListResponse,
    tags=["recipes"],
    summary="Recipes in a category or cuisine",
    description="TheMealDB category filter (first floor(limit/2), listed first) plus Spoonacular "
                "cuisine search (ceil(limit/2)).",
)
def recipes_by_category(
    category: str,
    limit: int = Query(12, ge=1, le=50, description="Maximum number of recipes to return"),
) -> RecipeListResponse:
    try:
        return RecipeListResponse(**filter_recipes_by_category(category, limit=limit))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error filtering recipes by category: {str(e)}"
        ) from e


@app.get(
    "/recipes/area/{area}",
    response_model=RecipeListResponse,
    tags=["recipes"],
    summary="TheMealDB recipes from an area",
)
def recipes_by_area(
    area: str,
    limit: int = Query(12, ge=1, le=50, description="Maximum number of recipes to return"),
) -> RecipeListResponse:
    try:
        return RecipeListResponse(**filter_recipes_by_area(area, limit=limit))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error filtering recipes by area: {str(e)}"
        ) from e


@app.get(
    "/recipes/{recipe_id}/instructions",
    response_model=List[InstructionStep],
    tags=["recipes"],
    summary="Step-by-step instructions for a Spoonacular recipe",
)
def recipe_instructions(recipe_id: str) -> List[InstructionStep]:
    try:
        return [InstructionStep(**step) for step in catalog.get_recipe_instructions(recipe_id)]
    except Exception as e:
        raise _upstream_error("fetching instructions", e) from e


@app.get(
    "/recipes/{recipe_id}",
    response_model=UnifiedRecipe,
    tags=["recipes"],
    summary="Get one recipe",
    description="Look up a recipe at its provider. Without `source`, numeric ids go to Spoonacular "
                "and anything else to TheMealDB.",
)
def get_recipe(
    recipe_id: str,
    source: Optional[Literal["spoonacular", "mealdb"]] = Query(None, description="Provider override"),
) -> UnifiedRecipe:
    """
    Get one recipe in the unified format.

    Raises:
        HTTPException 404: If the provider has no recipe with this id
        HTTPException 502: If the provider request fails
        HTTPException 503: If the provider is not configured
    """
    try:
        recipe = get_unified_recipe_by_id(recipe_id, source=source)
    except Exception as e:
        logger.error("Recipe lookup failed for %s: %s", recipe_id, e, exc_info=True)
        raise _upstream_error("fetching recipe", e) from e

    if recipe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe {recipe_id} not found."
        )
    return UnifiedRecipe(**recipe)


@app.get("/catalog/cuisines", response_model=List[str], tags=["catalog"])
def cuisines() -> List[str]:
    """Cuisine names accepted by /recipes/category/{category}."""
    return catalog.list_cuisines()


@app.get("/catalog/categories", response_model=List[CategoryOut], tags=["catalog"])
def categories() -> List[CategoryOut]:
    try:
        return [CategoryOut(**c) for c in catalog.list_categories()]
    except Exception as e:
        raise _upstream_error("listing categories", e) from e


@app.get("/catalog/areas", response_model=List[str], tags=["catalog"])
def areas() -> List[str]:
    try:
        return catalog.list_areas()
    except Exception as e:
        raise _upstream_error("listing areas", e) from e


@app.get("/catalog/ingredients", response_model=List[IngredientOut], tags=["catalog"])
def ingredients() -> List[IngredientOut]:
    try:
        return [IngredientOut(**i) for i in catalog.list_ingredients()]
    except Exception as e:
        raise _upstream_error("listing ingredients", e) from e


@app.get(
    "/nutrition/ingredient",
    response_model=NutritionItemOut,
    tags=["nutrition"],
    summary="Nutrition for one serving of an ingredient",
)
def ingredient_nutrition(
    q: str = Query(..., min_length=1, description="Ingredient name (e.g., 'banana')"),
) -> NutritionItemOut:
    """
    Raises:
        HTTPException 404: If Spoonacular has no matching ingredient
    """
    try:
        item = catalog.get_ingredient_nutrition(q)
    except Exception as e:
        raise _upstream_error("fetching ingredient nutrition", e) from e
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No nutrition data found for '{q}'."
        )
    return NutritionItemOut(**item)


@app.get(
    "/meal-plan/generate",
    response_model=MealPlanResponse,
    tags=["nutrition"],
    summary="Generate a one-day meal plan",
)
def meal_plan(
    calories: int = Query(2000, ge=500, le=6000, description="Daily calorie target"),
    diet: Optional[str] = Query(None, description="Diet (e.g., 'vegetarian', 'ketogenic')"),
    exclude: Optional[str] = Query(None, description="Comma-separated ingredients to exclude"),
) -> MealPlanResponse:
    try:
        return MealPlanResponse(**catalog.generate_meal_plan(calories, diet=diet, exclude=exclude))
    except Exception as e:
        raise _upstream_error("generating meal plan", e) from e


@app.get("/health", tags=["health"])
def health():
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Dictionary with status, API metadata, uptime information and which
        providers are configured. Always returns 200 OK if the endpoint is reachable.
    """
    uptime_seconds = int(time.time() - _APP_START_TIME)
    env = get_required_env_vars()

    return {
        "status": "ok",
        "name": API_NAME,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "uptime_seconds": uptime_seconds,
        "providers": {
            "spoonacular": env["spoonacular_api_key"],
            "mealdb": True,
        },
    }


@app.get("/")
def root():
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "docs": "/docs",
    }
