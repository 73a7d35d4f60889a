"""
Pydantic schemas for FastAPI request and response models.

This module defines the Pydantic models used for API request validation and
response serialization. These schemas ensure type safety and automatic API
documentation generation.

The schemas include:
- RecipeListResponse: Unified recipes plus per-source status
- CategoryOut / IngredientOut / InstructionStep: Catalog and instruction payloads
- NutritionItemOut / MealPlanResponse: Nutrition planner and diet planner payloads
- Request bodies for tracking endpoints that are not plain domain inputs

# NOTE: The unified recipe itself is recipehub.models.UnifiedRecipe, and the
    tracking records (UserGoals, MealEntry, ...) are defined in recipehub.tracking;
    they are reused here rather than duplicated.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

from recipehub.models import UnifiedRecipe


class RecipeListResponse(BaseModel):
    """
    Response from the unified list endpoints (search, random, category, area).

    sources_status maps "spoonacular" / "mealdb" to "ok", "disabled",
    "auth_error" or "error".
    """
    results: List[UnifiedRecipe] = Field(default_factory=list)
    sources_status: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "results": [
                    {
                        "id": "716429",
                        "title": "Pasta with Garlic, Scallions, Cauliflower & Breadcrumbs",
                        "image": "https://img.spoonacular.com/recipes/716429-556x370.jpg",
                        "source": "spoonacular",
                        "ready_in_minutes": 45,
                        "servings": 2,
                    }
                ],
                "sources_status": {"spoonacular": "ok", "mealdb": "ok"},
            }
        }
    )


class InstructionStep(BaseModel):
    number: Optional[int] = None
    step: str
    section: Optional[str] = None


class CategoryOut(BaseModel):
    id: Optional[str] = None
    name: str
    thumbnail: Optional[str] = None
    description: Optional[str] = None


class IngredientOut(BaseModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    image: Optional[str] = None


class NutritionItemOut(BaseModel):
    """One serving of an ingredient, ready to add to the nutrition planner."""
    name: str
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    amount: float = 1
    unit: str = "serving"


class PlannedMeal(BaseModel):
    id: str
    title: str
    ready_in_minutes: Optional[int] = None
    servings: Optional[int] = None
    source_url: Optional[str] = None
    image: Optional[str] = None


class MealPlanNutrients(BaseModel):
    calories: float = 0
    protein: float = 0
    fat: float = 0
    carbohydrates: float = 0


class MealPlanResponse(BaseModel):
    meals: List[PlannedMeal] = Field(default_factory=list)
    nutrients: MealPlanNutrients = Field(default_factory=MealPlanNutrients)


# Tracking request bodies

class WeightLogRequest(BaseModel):
    weight_kg: float = Field(..., ge=0, description="Body weight in kilograms")
    date: Optional[str] = Field(None, description="Day (YYYY-MM-DD); defaults to today")


class WaterLogRequest(BaseModel):
    amount_ml: int = Field(..., ge=0, description="Amount of water in millilitres")
    date: Optional[str] = Field(None, description="Day (YYYY-MM-DD); defaults to today")


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    is_favorite: bool = False
    notes: Optional[str] = None
    source: Optional[Literal["spoonacular", "mealdb"]] = None


class ShoppingListCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)


class GenerateShoppingListRequest(BaseModel):
    start_date: str = Field(..., description="First day (YYYY-MM-DD)")
    end_date: str = Field(..., description="Last day (YYYY-MM-DD)")
    resolve_ingredients: bool = Field(
        True,
        description="Look up each scheduled recipe's ingredients; False creates one placeholder item per meal",
    )
