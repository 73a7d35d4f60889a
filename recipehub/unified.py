"""
Unified recipe queries across Spoonacular and TheMealDB.

This module provides the aggregation layer that:
- Instantiates connectors for both providers
- Issues the provider calls in parallel, tolerating each failure independently
- Fetches recipe details in parallel where the provider's list endpoint is shallow
- Normalizes every record into UnifiedRecipe
- Reports per-source status next to the results

Query flow: Streamlit -> GET /recipes/search -> search_all_recipes() ->
connector calls -> recipehub.normalize -> UnifiedRecipe -> dict

Every list function returns:
    {
        "results": [UnifiedRecipe dicts],
        "sources_status": {"spoonacular": "ok", "mealdb": "ok"},
    }
with status values:
    - "ok": Source answered
    - "disabled": Source not configured (missing API key)
    - "auth_error": Key rejected or quota exhausted (Spoonacular)
    - "error": Unexpected failure
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Tuple

from recipehub.models import UnifiedRecipe
from recipehub.normalize import convert_mealdb_to_unified, convert_spoonacular_to_unified
from recipehub.utils.cache import get_cached, make_recipe_cache_key, set_cached

from .connectors.mealdb_connector import MealDbConnector
from .connectors.spoonacular_connector import SpoonacularAuthError, SpoonacularConnector

logger = logging.getLogger(__name__)

# Upper bound for parallel upstream calls issued by one unified query
MAX_PARALLEL_REQUESTS = 6

Outcome = Tuple[Any, Optional[Exception]]


# Using a function to get the classes dynamically so that patches in tests work correctly
def _get_connector_map():
    """Get the connector map, accessing classes dynamically for test compatibility."""
    return {
        "spoonacular": SpoonacularConnector,
        "mealdb": MealDbConnector,
    }


def _status_for_error(error: Exception) -> str:
    if isinstance(error, SpoonacularAuthError):
        return "auth_error"
    if isinstance(error, RuntimeError) and "not configured" in str(error).lower():
        return "disabled"
    return "error"


def _connect(source: str, status: Dict[str, str]):
    """
    Instantiate the connector for `source`, recording a status on failure.

    Returns:
        Connector instance, or None if it could not be created
    """
    try:
        return _get_connector_map()[source]()
    except Exception as e:
        status[source] = _status_for_error(e)
        if status[source] == "disabled":
            logger.warning("%s disabled: %s", source, e)
        else:
            logger.error("Failed to initialize %s connector: %s", source, e, exc_info=True)
        return None


def gather(calls: List[Callable[[], Any]]) -> List[Outcome]:
    """
    Run calls in parallel and collect each outcome independently.

    One failing call never affects the others; nothing is cancelled or retried.

    Returns:
        List of (result, error) pairs in the same order as `calls`; exactly one
        of the two is meaningful per pair
    """
    if not calls:
        return []

    outcomes: List[Outcome] = []
    with ThreadPoolExecutor(max_workers=min(MAX_PARALLEL_REQUESTS, len(calls))) as pool:
        futures = [pool.submit(call) for call in calls]
        for future in futures:
            try:
                outcomes.append((future.result(), None))
            except Exception as e:
                outcomes.append((None, e))
    return outcomes


def _convert_all(records: List[Dict[str, Any]], convert: Callable[[Dict[str, Any]], UnifiedRecipe], source: str) -> List[UnifiedRecipe]:
    unified: List[UnifiedRecipe] = []
    for record in records:
        try:
            unified.append(convert(record))
        except Exception as e:
            logger.error("Failed to normalize %s record: %s. Record: %s", source, e, str(record)[:200], exc_info=True)
    return unified


def _spoonacular_details(connector: SpoonacularConnector, search_payload: Dict[str, Any], count: int) -> List[UnifiedRecipe]:
    """Fetch full information for the first `count` hits of a complexSearch payload."""
    hits = (search_payload or {}).get("results") or []
    ids = [str(hit.get("id")) for hit in hits[:count] if hit.get("id") is not None]

    outcomes = gather([lambda rid=rid: connector.get_recipe(rid) for rid in ids])
    details = []
    for rid, (detail, error) in zip(ids, outcomes):
        if error is not None:
            logger.warning("Spoonacular detail lookup failed for id=%s: %s", rid, error)
        elif detail:
            details.append(detail)
    return _convert_all(details, convert_spoonacular_to_unified, "spoonacular")


def _mealdb_details(connector: MealDbConnector, shallow_meals: List[Dict[str, Any]], count: int) -> List[UnifiedRecipe]:
    """Look up full meals for filter.php entries, which only carry id, name and thumbnail."""
    ids = [str(m.get("idMeal")) for m in shallow_meals[:count] if m.get("idMeal")]

    outcomes = gather([lambda mid=mid: connector.get_recipe(mid) for mid in ids])
    details = []
    for mid, (meal, error) in zip(ids, outcomes):
        if error is not None:
            logger.warning("MealDB lookup failed for id=%s: %s", mid, error)
        elif meal:
            details.append(meal)
    return _convert_all(details, convert_mealdb_to_unified, "mealdb")


def _record_outcome(source: str, error: Optional[Exception], status: Dict[str, str]) -> bool:
    if error is None:
        status[source] = "ok"
        return True
    status[source] = _status_for_error(error)
    logger.error("%s request failed: %s", source, error, exc_info=error)
    return False


def _response(recipes: List[UnifiedRecipe], limit: int, status: Dict[str, str]) -> Dict[str, Any]:
    return {
        "results": [r.model_dump(mode="json") for r in recipes[:limit]],
        "sources_status": status,
    }


def search_all_recipes(query: str, limit: int = 12) -> Dict[str, Any]:
    """
    Search both providers and merge the results.

    Spoonacular contributes up to ceil(limit / 2) recipes (detail lookups run in
    parallel), TheMealDB up to floor(limit / 2). Spoonacular results come first;
    the merged list is truncated to `limit`.

    Examples:
        >>> response = search_all_recipes("chicken", limit=6)
        >>> len(response["results"]) <= 6
        True
        >>> "sources_status" in response
        True
    """
    logger.info("Unified search: query=%r limit=%d", query, limit)
    cache_key = make_recipe_cache_key("search", query, limit)
    cached = get_cached(cache_key)
    if cached is not None:
        logger.debug("Unified search cache hit for %r", query)
        return cached

    status: Dict[str, str] = {}
    spoonacular = _connect("spoonacular", status)
    mealdb = _connect("mealdb", status)
    spoon_count = math.ceil(limit / 2)
    mealdb_count = limit // 2

    calls: List[Callable[[], Any]] = []
    if spoonacular:
        calls.append(lambda: spoonacular.search_recipes(query, number=spoon_count))
    if mealdb:
        calls.append(lambda: mealdb.search_recipes(query))
    outcomes = iter(gather(calls))

    recipes: List[UnifiedRecipe] = []
    if spoonacular:
        payload, error = next(outcomes)
        if _record_outcome("spoonacular", error, status):
            recipes.extend(_spoonacular_details(spoonacular, payload, spoon_count))
    if mealdb:
        meals, error = next(outcomes)
        if _record_outcome("mealdb", error, status):
            recipes.extend(_convert_all((meals or [])[:mealdb_count], convert_mealdb_to_unified, "mealdb"))

    response = _response(recipes, limit, status)
    logger.info("Unified search returned %d recipes (status: %s)", len(response["results"]), status)
    if "error" not in status.values():
        set_cached(cache_key, response)
    return response


def get_random_recipes(count: int = 12) -> Dict[str, Any]:
    """
    Fetch random recipes from both providers.

    ceil(count / 2) come from one Spoonacular call, floor(count / 2) from
    parallel single-meal MealDB calls. Random results are never cached.
    """
    logger.info("Random recipes: count=%d", count)
    status: Dict[str, str] = {}
    spoonacular = _connect("spoonacular", status)
    mealdb = _connect("mealdb", status)
    spoon_count = math.ceil(count / 2)
    mealdb_count = count // 2

    calls: List[Callable[[], Any]] = []
    if spoonacular:
        calls.append(lambda: spoonacular.random_recipes(spoon_count))
    if mealdb:
        calls.extend([mealdb.random_recipe] * mealdb_count)
    outcomes = gather(calls)

    recipes: List[UnifiedRecipe] = []
    if spoonacular:
        spoon_recipes, error = outcomes.pop(0)
        if _record_outcome("spoonacular", error, status):
            recipes.extend(_convert_all(spoon_recipes or [], convert_spoonacular_to_unified, "spoonacular"))
    if mealdb and mealdb_count > 0:
        meals = [meal for meal, error in outcomes if error is None and meal]
        errors = [error for _, error in outcomes if error is not None]
        if errors and len(errors) == len(outcomes):
            _record_outcome("mealdb", errors[0], status)
        else:
            status["mealdb"] = "ok"
            for error in errors:
                logger.warning("MealDB random call failed: %s", error)
        recipes.extend(_convert_all(meals, convert_mealdb_to_unified, "mealdb"))
    elif mealdb:
        status["mealdb"] = "ok"

    return _response(recipes, count, status)


def resolve_source(recipe_id: str, source: Optional[str] = None) -> str:
    """
    Decide which provider owns `recipe_id`.

    An explicit source wins; otherwise non-numeric ids belong to TheMealDB and
    numeric ids to Spoonacular.
    """
    if source in ("spoonacular", "mealdb"):
        return source
    return "spoonacular" if str(recipe_id).strip().isdigit() else "mealdb"


def get_unified_recipe_by_id(recipe_id: str, source: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Fetch one recipe from its provider.

    Returns:
        UnifiedRecipe dict, or None if the provider has no such recipe

    Raises:
        RuntimeError: If the provider is not configured or the request fails
    """
    resolved = resolve_source(recipe_id, source)
    connector = _get_connector_map()[resolved]()
    logger.info("Recipe lookup: id=%s source=%s", recipe_id, resolved)

    record = connector.get_recipe(str(recipe_id))
    if not record:
        return None

    convert = convert_mealdb_to_unified if resolved == "mealdb" else convert_spoonacular_to_unified
    return convert(record).model_dump(mode="json")


def filter_recipes_by_category(category: str, limit: int = 12) -> Dict[str, Any]:
    """
    Filter by MealDB category and Spoonacular cuisine at the same time.

    TheMealDB contributes floor(limit / 2) recipes and comes first, Spoonacular
    ceil(limit / 2). Both need a second round of detail lookups.
    """
    logger.info("Category filter: category=%r limit=%d", category, limit)
    cache_key = make_recipe_cache_key("category", category, limit)
    cached = get_cached(cache_key)
    if cached is not None:
        return cached

    status: Dict[str, str] = {}
    mealdb = _connect("mealdb", status)
    spoonacular = _connect("spoonacular", status)
    mealdb_count = limit // 2
    spoon_count = math.ceil(limit / 2)

    calls: List[Callable[[], Any]] = []
    if mealdb:
        calls.append(lambda: mealdb.filter_by_category(category))
    if spoonacular:
        calls.append(lambda: spoonacular.filter_by_category(category, number=spoon_count))
    outcomes = iter(gather(calls))

    recipes: List[UnifiedRecipe] = []
    if mealdb:
        meals, error = next(outcomes)
        if _record_outcome("mealdb", error, status):
            recipes.extend(_mealdb_details(mealdb, meals or [], mealdb_count))
    if spoonacular:
        payload, error = next(outcomes)
        if _record_outcome("spoonacular", error, status):
            recipes.extend(_spoonacular_details(spoonacular, payload, spoon_count))

    response = _response(recipes, limit, status)
    if "error" not in status.values():
        set_cached(cache_key, response)
    return response


def filter_recipes_by_area(area: str, limit: int = 12) -> Dict[str, Any]:
    """Filter TheMealDB by area (e.g. "Italian") with parallel detail lookups."""
    logger.info("Area filter: area=%r limit=%d", area, limit)
    cache_key = make_recipe_cache_key("area", area, limit)
    cached = get_cached(cache_key)
    if cached is not None:
        return cached

    status: Dict[str, str] = {}
    mealdb = _connect("mealdb", status)
    recipes: List[UnifiedRecipe] = []
    if mealdb:
        (meals, error), = gather([lambda: mealdb.filter_by_area(area)])
        if _record_outcome("mealdb", error, status):
            recipes.extend(_mealdb_details(mealdb, meals or [], limit))

    response = _response(recipes, limit, status)
    if "error" not in status.values():
        set_cached(cache_key, response)
    return response
