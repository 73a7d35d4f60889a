"""
Sandbox script for testing the Spoonacular connector against the live API.

Prerequisites:
- SPOONACULAR_API_KEY must be set in .env file at project root
- Every call spends quota points (search + one information call per hit)

Run:
    python -m sandbox.sandbox_spoonacular
"""

from pprint import pprint

import api.config  # noqa: F401

from recipehub.connectors.spoonacular_connector import SpoonacularAuthError, SpoonacularConnector
from recipehub.normalize import convert_spoonacular_to_unified


def main():
    """Search, look up the first hit and normalize it."""
    try:
        print("Initializing Spoonacular connector...")
        connector = SpoonacularConnector()
        print("Spoonacular connector initialized successfully ✅\n")

        query = "pasta"
        print(f"Searching for '{query}' (number=3)...")
        payload = connector.search_recipes(query, number=3)
        hits = payload.get("results", [])
        print(f"Got {len(hits)} hits (totalResults={payload.get('totalResults')})")

        for i, hit in enumerate(hits, 1):
            print(f"{i}. [{hit.get('id')}] {hit.get('title')}")

        if hits:
            print("\n=== Unified Recipe (First Hit) ===")
            recipe = convert_spoonacular_to_unified(connector.get_recipe(str(hits[0]["id"])))
            pprint(recipe.model_dump(exclude={"summary", "instructions"}))

        print("\n=== Ingredient Nutrition (banana) ===")
        pprint(connector.get_nutrition_for_ingredient("banana"))

        print("\n" + "=" * 80)

    except SpoonacularAuthError as e:
        print(f"\n❌ Spoonacular rejected the key: {e}")
        print("  Check the key, or wait for the daily quota to reset.")
    except RuntimeError as e:
        print(f"\n❌ Runtime Error: {e}")
        print("\nTroubleshooting:")
        print("  1. Ensure SPOONACULAR_API_KEY is set in .env file at project root")
        print("  2. Check network access to api.spoonacular.com")


if __name__ == "__main__":
    main()
