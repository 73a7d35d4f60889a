"""
Tests for the per-user tracking service (recipehub.tracking) on an in-memory SQLite database.

These tests verify that:
- Goals are upserted (one row per user) and partial updates keep other fields
- Daily logs are recomputed from meal entries and water logs on every change
- Weight logs keep one value per day
- Ratings are upserted per (user, recipe) and favorites are filtered
- Every operation is scoped to its user
- Shopping lists are generated from the meal plan, merging ingredients by name
"""

from unittest.mock import Mock, patch

import pytest
from pydantic import ValidationError

from recipehub import tracking
from recipehub.db import UserGoalsRow, get_db_session
from recipehub.tracking import (
    DEFAULT_GOALS,
    MealEntryCreate,
    MealScheduleCreate,
    NotAuthenticatedError,
    NotFoundError,
    UserGoalsUpdate,
)
from recipehub.unified import get_unified_recipe_by_id


def _meal(day="2024-03-04", meal_type="lunch", calories=500, protein=30, carbs=50, fat=20, **overrides):
    data = {
        "date": day,
        "meal_type": meal_type,
        "recipe_id": "716429",
        "recipe_title": "Pasta",
        "calories": calories,
        "protein": protein,
        "carbs": carbs,
        "fat": fat,
    }
    data.update(overrides)
    return MealEntryCreate(**data)


def _schedule(day, recipe_id, title, meal_type="dinner", source=None):
    return MealScheduleCreate(date=day, meal_type=meal_type, recipe_id=recipe_id, recipe_title=title, source=source)


class TestGoals:
    def test_no_goals_yet(self, user_id):
        assert tracking.get_user_goals(user_id) is None

    def test_first_save_fills_defaults(self, user_id):
        goals = tracking.upsert_user_goals(user_id, UserGoalsUpdate(daily_calorie_target=1800))

        assert goals.daily_calorie_target == 1800
        assert goals.water_target_ml == DEFAULT_GOALS["water_target_ml"]
        assert goals.protein_target_g == DEFAULT_GOALS["protein_target_g"]

    def test_upsert_twice_keeps_one_row(self, user_id):
        tracking.upsert_user_goals(user_id, UserGoalsUpdate(daily_calorie_target=1800, preferred_diet_type="Vegan"))
        goals = tracking.upsert_user_goals(user_id, UserGoalsUpdate(water_target_ml=2500))

        assert goals.daily_calorie_target == 1800
        assert goals.water_target_ml == 2500
        assert goals.preferred_diet_type == "Vegan"

        db = get_db_session()
        try:
            assert db.query(UserGoalsRow).filter(UserGoalsRow.user_id == user_id).count() == 1
        finally:
            db.close()

    def test_negative_target_is_rejected(self):
        with pytest.raises(ValidationError):
            UserGoalsUpdate(daily_calorie_target=-1)

    def test_missing_user_is_rejected(self):
        with pytest.raises(NotAuthenticatedError):
            tracking.get_user_goals("")


class TestDailyLogs:
    def test_meal_entries_update_totals(self, user_id):
        tracking.add_meal_entry(user_id, _meal(calories=500, protein=30))
        tracking.add_meal_entry(user_id, _meal(meal_type="dinner", calories=700, protein=40))

        log = tracking.get_daily_log(user_id, "2024-03-04")

        assert log.total_calories == 1200
        assert log.total_protein == 70
        assert log.water_intake_ml == 0

    def test_deleting_an_entry_recomputes_totals(self, user_id):
        first = tracking.add_meal_entry(user_id, _meal(calories=500))
        tracking.add_meal_entry(user_id, _meal(calories=300))

        tracking.delete_meal_entry(user_id, first.id)

        assert tracking.get_daily_log(user_id, "2024-03-04").total_calories == 300
        assert [e.calories for e in tracking.get_meal_entries(user_id, "2024-03-04")] == [300]

    def test_water_adds_up(self, user_id):
        tracking.add_water_log(user_id, 250, "2024-03-04")
        tracking.add_water_log(user_id, 500, "2024-03-04")

        assert tracking.get_daily_log(user_id, "2024-03-04").water_intake_ml == 750
        assert len(tracking.get_water_logs(user_id, "2024-03-04")) == 2

    def test_range_is_inclusive_and_ordered(self, user_id):
        for day in ("2024-03-05", "2024-03-03", "2024-03-04", "2024-03-09"):
            tracking.add_meal_entry(user_id, _meal(day=day))

        logs = tracking.get_daily_logs(user_id, "2024-03-03", "2024-03-05")

        assert [log.date for log in logs] == ["2024-03-03", "2024-03-04", "2024-03-05"]

    def test_invalid_date_is_rejected(self, user_id):
        with pytest.raises(ValueError):
            tracking.get_daily_log(user_id, "2024-02-30")
        with pytest.raises(ValidationError):
            _meal(day="yesterday")

    def test_delete_other_users_entry_is_not_found(self, user_id):
        entry = tracking.add_meal_entry(user_id, _meal())

        with pytest.raises(NotFoundError):
            tracking.delete_meal_entry("someone-else", entry.id)
        assert tracking.get_daily_log(user_id, "2024-03-04").total_calories == 500


class TestWeight:
    def test_one_value_per_day(self, user_id):
        tracking.add_weight_log(user_id, 80.0, "2024-03-01")
        tracking.add_weight_log(user_id, 79.5, "2024-03-01")
        tracking.add_weight_log(user_id, 79.0, "2024-03-02")

        logs = tracking.get_weight_logs(user_id)

        assert [(log.date, log.weight_kg) for log in logs] == [("2024-03-02", 79.0), ("2024-03-01", 79.5)]

    def test_negative_weight_is_rejected(self, user_id):
        with pytest.raises(ValueError):
            tracking.add_weight_log(user_id, -1)


class TestRatings:
    def test_rating_is_upserted(self, user_id):
        tracking.rate_recipe(user_id, "52772", 3)
        rating = tracking.rate_recipe(user_id, 52772, 5, is_favorite=True, notes="great")

        assert rating.rating == 5
        assert rating.is_favorite is True
        assert tracking.get_recipe_rating(user_id, "52772").notes == "great"

    def test_rating_keeps_provider(self, user_id):
        tracking.rate_recipe(user_id, "52772", 3, source="mealdb")
        rating = tracking.rate_recipe(user_id, "52772", 4)

        assert rating.source == "mealdb"
        assert tracking.get_favorite_recipes(user_id) == []

    def test_favorites_only_include_flagged(self, user_id):
        tracking.rate_recipe(user_id, "1", 4, is_favorite=True)
        tracking.rate_recipe(user_id, "2", 2, is_favorite=False)
        tracking.rate_recipe("other-user", "3", 5, is_favorite=True)

        assert [r.recipe_id for r in tracking.get_favorite_recipes(user_id)] == ["1"]

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, user_id, rating):
        with pytest.raises(ValueError):
            tracking.rate_recipe(user_id, "1", rating)


class TestMealSchedules:
    def test_schedules_in_range(self, user_id):
        tracking.add_meal_schedule(user_id, _schedule("2024-03-03", "1", "Soup"))
        tracking.add_meal_schedule(user_id, _schedule("2024-03-09", "2", "Stew"))
        tracking.add_meal_schedule(user_id, _schedule("2024-03-10", "3", "Pie"))

        titles = [s.recipe_title for s in tracking.get_meal_schedules(user_id, "2024-03-03", "2024-03-09")]

        assert titles == ["Soup", "Stew"]

    def test_delete_unknown_schedule(self, user_id):
        with pytest.raises(NotFoundError):
            tracking.delete_meal_schedule(user_id, 999)


class TestDashboard:
    def test_dashboard_collects_the_day(self, user_id):
        tracking.upsert_user_goals(user_id, UserGoalsUpdate(daily_calorie_target=2200))
        tracking.add_meal_entry(user_id, _meal(calories=600))
        tracking.add_water_log(user_id, 250, "2024-03-04")
        for i in range(9):
            tracking.add_weight_log(user_id, 80 - i * 0.1, f"2024-02-{10 + i:02d}")

        data = tracking.get_dashboard_data(user_id, "2024-03-04")

        assert data.user_goals.daily_calorie_target == 2200
        assert data.daily_log.total_calories == 600
        assert len(data.todays_meals) == 1
        assert len(data.water_logs) == 1
        assert len(data.recent_weight) == tracking.DASHBOARD_WEIGHT_LIMIT
        assert data.recent_weight[0].date == "2024-02-18"

    def test_empty_day(self, user_id):
        data = tracking.get_dashboard_data(user_id, "2024-03-04")

        assert data.daily_log is None
        assert data.user_goals is None
        assert data.todays_meals == []


class TestShoppingLists:
    def test_create_and_toggle(self, user_id):
        created = tracking.create_shopping_list(user_id, "  Weekend  ")
        assert created.name == "Weekend"
        assert created.items == []

        with pytest.raises(ValueError):
            tracking.create_shopping_list(user_id, "   ")

    def test_generate_without_lookup_uses_placeholders(self, user_id):
        tracking.add_meal_schedule(user_id, _schedule("2024-03-04", "1", "Soup"))
        tracking.add_meal_schedule(user_id, _schedule("2024-03-05", "2", "Stew"))

        generated = tracking.generate_shopping_list_from_meals(user_id, "2024-03-03", "2024-03-09")

        assert generated.name == "Meal Plan 2024-03-03 to 2024-03-09"
        assert [i.ingredient_name for i in generated.items] == ["Ingredient for Soup", "Ingredient for Stew"]
        assert all(i.quantity == "1 serving" for i in generated.items)

    def test_generate_merges_ingredients_by_name(self, user_id):
        tracking.add_meal_schedule(user_id, _schedule("2024-03-04", "1", "Soup"))
        tracking.add_meal_schedule(user_id, _schedule("2024-03-05", "2", "Stew"))
        tracking.add_meal_schedule(user_id, _schedule("2024-03-06", "3", "Mystery"))

        recipes = {
            "1": {"ingredients": [{"name": "Onion", "amount": "1", "unit": ""}, {"name": "stock", "amount": 1, "unit": "l"}]},
            "2": {"ingredients": [{"name": "onion", "amount": "2", "unit": ""}, {"name": "beef", "amount": "500", "unit": "g"}]},
        }

        def _lookup(recipe_id, source=None):
            if recipe_id == "3":
                raise RuntimeError("provider down")
            return recipes.get(recipe_id)

        generated = tracking.generate_shopping_list_from_meals(
            user_id, "2024-03-03", "2024-03-09", recipe_lookup=_lookup
        )
        items = {i.ingredient_name: i for i in generated.items}

        assert set(items) == {"Onion", "stock", "beef", "Ingredient for Mystery"}
        assert items["Onion"].quantity == "1 + 2"
        assert items["Onion"].recipe_id is None
        assert items["Onion"].recipe_title == "Soup, Stew"
        assert items["stock"].quantity == "1 l"
        assert items["beef"].recipe_id == "2"

    def test_generate_looks_up_mealdb_recipes_at_mealdb(self, user_id):
        tracking.add_meal_schedule(user_id, _schedule("2024-03-04", "52772", "Teriyaki Chicken Casserole", source="mealdb"))

        spoonacular = Mock()
        spoonacular.get_recipe.return_value = {
            "id": 52772,
            "title": "Unrelated Spoonacular Cake",
            "extendedIngredients": [{"name": "sugar", "amount": 100, "unit": "g"}],
        }
        mealdb = Mock()
        mealdb.get_recipe.return_value = {
            "idMeal": "52772",
            "strMeal": "Teriyaki Chicken Casserole",
            "strIngredient1": "soy sauce",
            "strMeasure1": "3/4 cup",
        }

        with patch("recipehub.unified.SpoonacularConnector", return_value=spoonacular), \
             patch("recipehub.unified.MealDbConnector", return_value=mealdb):
            generated = tracking.generate_shopping_list_from_meals(
                user_id, "2024-03-03", "2024-03-09", recipe_lookup=get_unified_recipe_by_id
            )

        spoonacular.get_recipe.assert_not_called()
        assert [i.ingredient_name for i in generated.items] == ["soy sauce"]
        assert tracking.get_meal_schedules(user_id, "2024-03-04", "2024-03-04")[0].source == "mealdb"

    def test_toggle_item_is_scoped_to_owner(self, user_id):
        tracking.add_meal_schedule(user_id, _schedule("2024-03-04", "1", "Soup"))
        generated = tracking.generate_shopping_list_from_meals(user_id, "2024-03-04", "2024-03-04")
        item = generated.items[0]

        toggled = tracking.toggle_shopping_list_item(user_id, generated.id, item.id)
        assert toggled.is_checked is True
        assert tracking.get_shopping_list(user_id, generated.id).items[0].is_checked is True

        with pytest.raises(NotFoundError):
            tracking.toggle_shopping_list_item("someone-else", generated.id, item.id)
        with pytest.raises(NotFoundError):
            tracking.get_shopping_list("someone-else", generated.id)

    def test_lists_are_newest_first(self, user_id):
        tracking.create_shopping_list(user_id, "First")
        tracking.create_shopping_list(user_id, "Second")

        assert [s.name for s in tracking.get_shopping_lists(user_id)] == ["Second", "First"]
