"""
Tests for the recipe, catalog and nutrition endpoints.

The unified layer and the catalog are mocked; these tests only verify routing,
validation and the mapping of provider failures to HTTP errors.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import app
from recipehub.connectors.spoonacular_connector import SpoonacularAuthError

client = TestClient(app)

RECIPE = {
    "id": "52772",
    "title": "Teriyaki Chicken Casserole",
    "image": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
    "source": "mealdb",
}


def _listing(*recipes, status=None):
    return {"results": list(recipes), "sources_status": status or {"spoonacular": "ok", "mealdb": "ok"}}


class TestRecipeEndpoints:
    def test_search(self):
        with patch("api.main.search_all_recipes", return_value=_listing(RECIPE)) as mock_search:
            response = client.get("/recipes/search", params={"q": "chicken", "limit": 6})

        assert response.status_code == 200
        data = response.json()
        assert data["results"][0]["title"] == "Teriyaki Chicken Casserole"
        assert data["results"][0]["vegan"] is False
        assert data["sources_status"] == {"spoonacular": "ok", "mealdb": "ok"}
        mock_search.assert_called_once_with("chicken", limit=6)

    def test_search_requires_query(self):
        assert client.get("/recipes/search").status_code == 422
        assert client.get("/recipes/search", params={"q": ""}).status_code == 422

    def test_search_limit_bounds(self):
        assert client.get("/recipes/search", params={"q": "x", "limit": 0}).status_code == 422
        assert client.get("/recipes/search", params={"q": "x", "limit": 51}).status_code == 422

    def test_search_failure_is_500(self):
        with patch("api.main.search_all_recipes", side_effect=Exception("boom")):
            response = client.get("/recipes/search", params={"q": "x"})

        assert response.status_code == 500
        assert "boom" in response.json()["detail"]

    def test_random(self):
        with patch("api.main.get_random_recipes", return_value=_listing(RECIPE)) as mock_random:
            response = client.get("/recipes/random", params={"count": 3})

        assert response.status_code == 200
        mock_random.assert_called_once_with(count=3)

    def test_category_and_area(self):
        with patch("api.main.filter_recipes_by_category", return_value=_listing(RECIPE)) as mock_category, \
             patch("api.main.filter_recipes_by_area", return_value=_listing(status={"mealdb": "ok"})) as mock_area:
            assert client.get("/recipes/category/Seafood").status_code == 200
            area = client.get("/recipes/area/Thai", params={"limit": 4})

        mock_category.assert_called_once_with("Seafood", limit=12)
        mock_area.assert_called_once_with("Thai", limit=4)
        assert area.json() == {"results": [], "sources_status": {"mealdb": "ok"}}

    def test_get_recipe(self):
        with patch("api.main.get_unified_recipe_by_id", return_value=RECIPE) as mock_lookup:
            response = client.get("/recipes/52772", params={"source": "mealdb"})

        assert response.status_code == 200
        assert response.json()["id"] == "52772"
        mock_lookup.assert_called_once_with("52772", source="mealdb")

    def test_get_recipe_rejects_unknown_source(self):
        assert client.get("/recipes/1", params={"source": "edamam"}).status_code == 422

    def test_get_recipe_not_found(self):
        with patch("api.main.get_unified_recipe_by_id", return_value=None):
            response = client.get("/recipes/0")

        assert response.status_code == 404

    def test_get_recipe_provider_not_configured(self):
        with patch("api.main.get_unified_recipe_by_id",
                   side_effect=RuntimeError("Spoonacular API key not configured")):
            response = client.get("/recipes/716429")

        assert response.status_code == 503

    def test_get_recipe_auth_error(self):
        with patch("api.main.get_unified_recipe_by_id", side_effect=SpoonacularAuthError("quota")):
            response = client.get("/recipes/716429")

        assert response.status_code == 502

    def test_get_recipe_transport_error(self):
        with patch("api.main.get_unified_recipe_by_id", side_effect=RuntimeError("timed out")):
            response = client.get("/recipes/716429")

        assert response.status_code == 502

    def test_instructions(self):
        steps = [{"number": 1, "step": "Boil water.", "section": None}]
        with patch("api.main.catalog.get_recipe_instructions", return_value=steps):
            response = client.get("/recipes/716429/instructions")

        assert response.status_code == 200
        assert response.json() == steps


class TestCatalogEndpoints:
    def test_cuisines_need_no_network(self):
        response = client.get("/catalog/cuisines")

        assert response.status_code == 200
        assert "Italian" in response.json()

    def test_categories(self):
        categories = [{"id": "1", "name": "Beef", "thumbnail": None, "description": "Beef dishes"}]
        with patch("api.main.catalog.list_categories", return_value=categories):
            response = client.get("/catalog/categories")

        assert response.json()[0]["name"] == "Beef"

    def test_areas_provider_failure(self):
        with patch("api.main.catalog.list_areas", side_effect=RuntimeError("mealdb request failed")):
            response = client.get("/catalog/areas")

        assert response.status_code == 502

    def test_ingredients(self):
        ingredients = [{"id": "1", "name": "Chicken", "description": None, "image": "https://img.test/chicken.png"}]
        with patch("api.main.catalog.list_ingredients", return_value=ingredients):
            response = client.get("/catalog/ingredients")

        assert response.status_code == 200
        assert response.json()[0]["image"] == "https://img.test/chicken.png"


class TestNutritionEndpoints:
    def test_ingredient_nutrition(self):
        item = {"name": "banana", "calories": 105, "protein": 1.3, "carbs": 27, "fat": 0.4, "amount": 1, "unit": "serving"}
        with patch("api.main.catalog.get_ingredient_nutrition", return_value=item):
            response = client.get("/nutrition/ingredient", params={"q": "banana"})

        assert response.status_code == 200
        assert response.json()["calories"] == 105

    def test_ingredient_nutrition_not_found(self):
        with patch("api.main.catalog.get_ingredient_nutrition", return_value=None):
            response = client.get("/nutrition/ingredient", params={"q": "unobtainium"})

        assert response.status_code == 404

    def test_meal_plan(self):
        plan = {
            "meals": [{"id": "1", "title": "Oats", "ready_in_minutes": 5, "servings": 1,
                       "source_url": None, "image": None}],
            "nutrients": {"calories": 1990, "protein": 90, "fat": 60, "carbohydrates": 250},
        }
        with patch("api.main.catalog.generate_meal_plan", return_value=plan) as mock_plan:
            response = client.get("/meal-plan/generate", params={"calories": 2000, "diet": "vegetarian"})

        assert response.status_code == 200
        assert response.json()["nutrients"]["calories"] == 1990
        mock_plan.assert_called_once_with(2000, diet="vegetarian", exclude=None)

    def test_meal_plan_calorie_bounds(self):
        assert client.get("/meal-plan/generate", params={"calories": 100}).status_code == 422

    def test_meal_plan_without_key(self):
        with patch("api.main.catalog.generate_meal_plan",
                   side_effect=RuntimeError("Spoonacular API key not configured")):
            response = client.get("/meal-plan/generate")

        assert response.status_code == 503
