"""
Recipe and client-side record models for Recipe Hub.

This module defines the canonical recipe schema used throughout the app.
Both connectors return raw upstream payloads; recipehub.normalize maps them into
UnifiedRecipe, and the API serializes UnifiedRecipe.model_dump() to clients.

# NOTE: UnifiedRecipe is the canonical response schema used by the API.
    The frontend (Streamlit app) expects fields like id, title, image, source,
    nutrition, ingredients and the dietary flags.

Current field expectations:
- Spoonacular provides real nutrition (nutrients list), flags and timings
- TheMealDB provides category, area, tags and youtube links; nutrition and most
  flags are estimated during normalization
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

RecipeSource = Literal["spoonacular", "mealdb"]

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class Nutrition(BaseModel):
    """Per-serving nutrition summary. Macros in grams, sodium in milligrams."""
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    fiber: float = Field(0, ge=0)
    sugar: float = Field(0, ge=0)
    sodium: float = Field(0, ge=0)


class UnifiedIngredient(BaseModel):
    name: str
    amount: str = ""
    unit: str = ""
    image: Optional[str] = None


class UnifiedRecipe(BaseModel):
    """
    Common recipe record produced from either upstream provider.

    Optional fields stay None when the provider has no value for them; the
    flags always resolve to a bool.
    """
    # Core identifiers
    id: str = Field(..., description="Provider recipe id (numeric for Spoonacular, string for MealDB)")
    title: str = Field(..., description="Recipe title")
    image: str = Field("", description="URL to recipe image")
    source: RecipeSource = Field(..., description="Provider the record came from")

    # Timing and yield
    ready_in_minutes: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=0)

    # Content
    instructions: str = ""
    ingredients: List[UnifiedIngredient] = Field(default_factory=list)
    category: Optional[str] = None
    cuisine: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    source_url: Optional[str] = None
    youtube_url: Optional[str] = None

    # Nutrition and health
    nutrition: Optional[Nutrition] = None
    health_score: Optional[float] = Field(None, ge=0)
    price_per_serving: Optional[float] = Field(None, ge=0, description="Price per serving in cents")

    # Dietary flags
    vegan: bool = False
    vegetarian: bool = False
    gluten_free: bool = False
    dairy_free: bool = False
    very_healthy: bool = False
    cheap: bool = False
    sustainable: bool = False

    # Spoonacular-only extras
    dish_types: List[str] = Field(default_factory=list)
    diets: List[str] = Field(default_factory=list)
    summary: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "52772",
                "title": "Teriyaki Chicken Casserole",
                "image": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
                "source": "mealdb",
                "ready_in_minutes": 45,
                "servings": 4,
                "category": "Chicken",
                "cuisine": "Japanese",
                "nutrition": {"calories": 420, "protein": 32, "carbs": 40, "fat": 12,
                              "fiber": 4, "sugar": 9, "sodium": 640},
                "vegan": False,
                "vegetarian": False,
            }
        }
    )


# Client-side records (persisted by recipehub.stores)
class ShoppingListItem(BaseModel):
    """Shopping list item kept in the client-side store."""
    id: str
    name: str
    amount: float = Field(1, ge=0)
    unit: str = ""
    checked: bool = False
    recipe_id: Optional[int] = None
    recipe_title: Optional[str] = None


class CustomIngredient(BaseModel):
    id: Optional[str] = None
    name: str
    amount: float = Field(0, ge=0)
    unit: str = ""


class CustomRecipe(BaseModel):
    """A user-authored recipe kept in the client-side store."""
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    image: Optional[str] = None
    ready_in_minutes: int = Field(30, ge=0)
    servings: int = Field(1, ge=1)
    cuisines: List[str] = Field(default_factory=list)
    diets: List[str] = Field(default_factory=list)
    instructions: str = ""
    ingredients: List[CustomIngredient] = Field(default_factory=list)
    is_custom: bool = True
