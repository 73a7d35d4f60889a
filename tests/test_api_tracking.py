"""
End-to-end tests for the /tracking endpoints on an in-memory SQLite database.

These tests verify that:
- Every tracking endpoint requires the X-User-ID header
- Invalid input maps to 400/422 and unknown ids to 404
- Goals, meal entries, water, weight, schedules and ratings round through the API
- Users never see each other's data
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import app

client = TestClient(app)

USER = {"X-User-ID": "user-123"}
OTHER_USER = {"X-User-ID": "user-456"}


def _meal_entry(**overrides):
    entry = {
        "date": "2024-03-04",
        "meal_type": "lunch",
        "recipe_id": "716429",
        "recipe_title": "Pasta",
        "calories": 540,
        "protein": 17,
        "carbs": 83,
        "fat": 16,
    }
    entry.update(overrides)
    return entry


def _schedule(**overrides):
    schedule = {
        "date": "2024-03-05",
        "meal_type": "dinner",
        "recipe_id": "52772",
        "recipe_title": "Teriyaki Chicken Casserole",
    }
    schedule.update(overrides)
    return schedule


class TestUserHeader:
    def test_missing_header_is_400(self):
        for method, path in [
            ("get", "/tracking/goals"),
            ("get", "/tracking/dashboard"),
            ("get", "/tracking/shopping-lists"),
            ("get", "/tracking/ratings/favorites"),
        ]:
            response = getattr(client, method)(path)
            assert response.status_code == 400, path
            assert "X-User-ID" in response.json()["detail"]

    def test_missing_header_on_write_is_400(self):
        response = client.post("/tracking/meal-entries", json=_meal_entry())
        assert response.status_code == 400


class TestGoalsEndpoints:
    def test_goals_start_empty_then_upsert(self):
        assert client.get("/tracking/goals", headers=USER).json() is None

        first = client.put("/tracking/goals", headers=USER, json={"daily_calorie_target": 1800})
        second = client.put("/tracking/goals", headers=USER, json={"water_target_ml": 3000})

        assert first.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        goals = client.get("/tracking/goals", headers=USER).json()
        assert goals["daily_calorie_target"] == 1800
        assert goals["water_target_ml"] == 3000

    def test_negative_goal_is_rejected(self):
        response = client.put("/tracking/goals", headers=USER, json={"daily_calorie_target": -5})
        assert response.status_code == 422


class TestMealEntryEndpoints:
    def test_log_list_and_delete(self):
        created = client.post("/tracking/meal-entries", headers=USER, json=_meal_entry())
        assert created.status_code == 201
        entry_id = created.json()["id"]

        entries = client.get("/tracking/meal-entries", headers=USER, params={"date": "2024-03-04"}).json()
        assert [e["id"] for e in entries] == [entry_id]

        log = client.get("/tracking/daily-logs/2024-03-04", headers=USER).json()
        assert log["total_calories"] == 540

        deleted = client.delete(f"/tracking/meal-entries/{entry_id}", headers=USER)
        assert deleted.status_code == 204

        log = client.get("/tracking/daily-logs/2024-03-04", headers=USER).json()
        assert log["total_calories"] == 0

    def test_invalid_meal_type_is_rejected(self):
        response = client.post("/tracking/meal-entries", headers=USER, json=_meal_entry(meal_type="brunch"))
        assert response.status_code == 422

    def test_invalid_date_query_is_400(self):
        response = client.get("/tracking/daily-logs/2024-13-01", headers=USER)
        assert response.status_code == 400

    def test_deleting_other_users_entry_is_404(self):
        entry_id = client.post("/tracking/meal-entries", headers=USER, json=_meal_entry()).json()["id"]

        assert client.delete(f"/tracking/meal-entries/{entry_id}", headers=OTHER_USER).status_code == 404
        assert client.get("/tracking/meal-entries", headers=OTHER_USER, params={"date": "2024-03-04"}).json() == []

    def test_daily_log_range(self):
        for day in ("2024-03-03", "2024-03-04", "2024-03-10"):
            client.post("/tracking/meal-entries", headers=USER, json=_meal_entry(date=day))

        logs = client.get(
            "/tracking/daily-logs", headers=USER, params={"start": "2024-03-03", "end": "2024-03-09"}
        ).json()

        assert [log["date"] for log in logs] == ["2024-03-03", "2024-03-04"]


class TestWeightAndWater:
    def test_weight_logs(self):
        client.post("/tracking/weight-logs", headers=USER, json={"weight_kg": 80.5, "date": "2024-03-01"})
        client.post("/tracking/weight-logs", headers=USER, json={"weight_kg": 80.0, "date": "2024-03-02"})

        logs = client.get("/tracking/weight-logs", headers=USER, params={"limit": 1}).json()

        assert len(logs) == 1
        assert logs[0]["date"] == "2024-03-02"
        assert logs[0]["weight_kg"] == 80.0

    def test_water_logs_feed_daily_log(self):
        response = client.post("/tracking/water-logs", headers=USER, json={"amount_ml": 250, "date": "2024-03-04"})
        assert response.status_code == 201
        client.post("/tracking/water-logs", headers=USER, json={"amount_ml": 250, "date": "2024-03-04"})

        assert len(client.get("/tracking/water-logs", headers=USER, params={"date": "2024-03-04"}).json()) == 2
        assert client.get("/tracking/daily-logs/2024-03-04", headers=USER).json()["water_intake_ml"] == 500

    def test_negative_water_is_rejected(self):
        response = client.post("/tracking/water-logs", headers=USER, json={"amount_ml": -1})
        assert response.status_code == 422

    def test_dashboard(self):
        client.put("/tracking/goals", headers=USER, json={"daily_calorie_target": 2100})
        client.post("/tracking/meal-entries", headers=USER, json=_meal_entry())
        client.post("/tracking/water-logs", headers=USER, json={"amount_ml": 500, "date": "2024-03-04"})

        data = client.get("/tracking/dashboard", headers=USER, params={"date": "2024-03-04"}).json()

        assert data["user_goals"]["daily_calorie_target"] == 2100
        assert data["daily_log"]["total_calories"] == 540
        assert data["daily_log"]["water_intake_ml"] == 500
        assert len(data["todays_meals"]) == 1


class TestSchedulesAndRatings:
    def test_schedule_list_delete(self):
        created = client.post("/tracking/meal-schedules", headers=USER, json=_schedule())
        assert created.status_code == 201

        schedules = client.get(
            "/tracking/meal-schedules", headers=USER, params={"start": "2024-03-03", "end": "2024-03-09"}
        ).json()
        assert [s["recipe_title"] for s in schedules] == ["Teriyaki Chicken Casserole"]

        schedule_id = created.json()["id"]
        assert client.delete(f"/tracking/meal-schedules/{schedule_id}", headers=USER).status_code == 204
        assert client.delete(f"/tracking/meal-schedules/{schedule_id}", headers=USER).status_code == 404

    def test_rating_and_favorites(self):
        assert client.get("/tracking/ratings/52772", headers=USER).json() is None

        client.put("/tracking/ratings/52772", headers=USER, json={"rating": 4, "is_favorite": True})
        client.put("/tracking/ratings/716429", headers=USER, json={"rating": 2})

        assert client.get("/tracking/ratings/52772", headers=USER).json()["rating"] == 4
        favorites = client.get("/tracking/ratings/favorites", headers=USER).json()
        assert [f["recipe_id"] for f in favorites] == ["52772"]

    def test_rating_stores_provider(self):
        client.put("/tracking/ratings/52772", headers=USER, json={"rating": 5, "is_favorite": True, "source": "mealdb"})

        favorites = client.get("/tracking/ratings/favorites", headers=USER).json()
        assert favorites[0]["source"] == "mealdb"

        response = client.put("/tracking/ratings/52772", headers=USER, json={"rating": 5, "source": "elsewhere"})
        assert response.status_code == 422

    def test_rating_out_of_range(self):
        response = client.put("/tracking/ratings/1", headers=USER, json={"rating": 9})
        assert response.status_code == 422


class TestShoppingListEndpoints:
    def test_create_and_list(self):
        created = client.post("/tracking/shopping-lists", headers=USER, json={"name": "Party"})
        assert created.status_code == 201

        lists = client.get("/tracking/shopping-lists", headers=USER).json()
        assert [s["name"] for s in lists] == ["Party"]
        assert client.get("/tracking/shopping-lists", headers=OTHER_USER).json() == []

    def test_generate_from_meal_plan_and_toggle(self):
        client.post("/tracking/meal-schedules", headers=USER, json=_schedule(source="mealdb"))
        recipe = {"ingredients": [{"name": "soy sauce", "amount": "3/4", "unit": "cup"}]}

        with patch("api.routers.tracking.get_unified_recipe_by_id", return_value=recipe) as mock_lookup:
            response = client.post(
                "/tracking/shopping-lists/generate",
                headers=USER,
                json={"start_date": "2024-03-03", "end_date": "2024-03-09"},
            )

        assert response.status_code == 201
        mock_lookup.assert_called_once_with("52772", "mealdb")
        generated = response.json()
        assert generated["name"] == "Meal Plan 2024-03-03 to 2024-03-09"
        assert generated["items"][0]["ingredient_name"] == "soy sauce"
        assert generated["items"][0]["quantity"] == "3/4 cup"

        item_id = generated["items"][0]["id"]
        toggled = client.post(
            f"/tracking/shopping-lists/{generated['id']}/items/{item_id}/toggle", headers=USER
        )
        assert toggled.json()["is_checked"] is True

        fetched = client.get(f"/tracking/shopping-lists/{generated['id']}", headers=USER).json()
        assert fetched["items"][0]["is_checked"] is True

    def test_generate_without_lookup(self):
        client.post("/tracking/meal-schedules", headers=USER, json=_schedule())

        with patch("api.routers.tracking.get_unified_recipe_by_id") as mock_lookup:
            response = client.post(
                "/tracking/shopping-lists/generate",
                headers=USER,
                json={"start_date": "2024-03-03", "end_date": "2024-03-09", "resolve_ingredients": False},
            )

        mock_lookup.assert_not_called()
        assert response.json()["items"][0]["ingredient_name"] == "Ingredient for Teriyaki Chicken Casserole"

    def test_unknown_list_is_404(self):
        assert client.get("/tracking/shopping-lists/999", headers=USER).status_code == 404
        assert client.post("/tracking/shopping-lists/999/items/1/toggle", headers=USER).status_code == 404
