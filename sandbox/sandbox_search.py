"""
Sandbox script for testing unified search across Spoonacular and TheMealDB.

Without SPOONACULAR_API_KEY the search still runs; Spoonacular is then
reported as "disabled" and only TheMealDB recipes come back.

Run:
    python -m sandbox.sandbox_search
"""

import logging
from collections import Counter
from pprint import pprint

import api.config  # noqa: F401

from recipehub.unified import search_all_recipes


def run():
    """Run one unified search and summarize the merged results."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    query = "curry"
    limit = 6

    print("=" * 80)
    print("Testing Unified Search")
    print("=" * 80)
    print(f"\nQuery: '{query}'  limit: {limit}\n")

    response = search_all_recipes(query, limit=limit)
    results = response["results"]

    print(f"Total results: {len(results)}")
    print(f"Sources status: {response['sources_status']}")

    for i, recipe in enumerate(results, 1):
        calories = (recipe.get("nutrition") or {}).get("calories")
        estimate = " (est.)" if recipe["source"] == "mealdb" else ""
        print(f"{i:2d}. [{recipe['source']:11s}] {calories or 0:5.0f} kcal{estimate} | {recipe['title']}")

    print("\n=== Breakdown by Source ===")
    for source, count in sorted(Counter(r["source"] for r in results).items()):
        print(f"  {source}: {count} recipes")

    if results:
        print("\n=== Full Details (First Result) ===")
        pprint(results[0])

    print("\n" + "=" * 80)


if __name__ == "__main__":
    run()
