"""
Sandbox script for testing the TheMealDB connector against the public API.

No credentials are needed.

Run:
    python -m sandbox.sandbox_mealdb
"""

from pprint import pprint

import api.config  # noqa: F401

from recipehub.connectors.mealdb_connector import MealDbConnector
from recipehub.normalize import convert_mealdb_to_unified


def main():
    """Search, list categories and normalize a random meal."""
    try:
        connector = MealDbConnector()

        query = "chicken"
        print(f"Searching for '{query}'...")
        meals = connector.search_recipes(query)
        print(f"Got {len(meals)} meals")
        for i, meal in enumerate(meals[:5], 1):
            print(f"{i}. [{meal['idMeal']}] {meal['strMeal']} ({meal.get('strArea')})")

        categories = connector.list_categories()
        print(f"\n{len(categories)} categories: {', '.join(c['strCategory'] for c in categories)}")

        meal = connector.random_recipe()
        if meal:
            print("\n=== Unified Recipe (Random Meal) ===")
            print("Nutrition, timing, servings and some flags below are placeholders.")
            pprint(convert_mealdb_to_unified(meal).model_dump(exclude={"instructions"}))

        print("\n" + "=" * 80)

    except RuntimeError as e:
        print(f"\n❌ Runtime Error: {e}")
        print("  Check network access to www.themealdb.com (or MEALDB_BASE_URL).")


if __name__ == "__main__":
    main()
