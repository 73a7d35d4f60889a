"""
In-process TTL cache for unified recipe queries.

This module provides a simple, lightweight cache for unified search and filter
results to reduce redundant calls to the upstream recipe APIs (Spoonacular
requests cost quota points) while keeping results fresh.

The cache is process-local and in-memory, with automatic expiration based on TTL.
Random-recipe results are never cached.
"""

import time
from typing import Any, Dict, Hashable, Optional, Tuple

# Cache storage: Key -> (timestamp, cached_value)
_RECIPE_CACHE: Dict[Hashable, Tuple[float, Dict[str, Any]]] = {}

RECIPE_CACHE_TTL_SECONDS = 60


def make_recipe_cache_key(operation: str, term: str, limit: int) -> Hashable:
    """
    Create a deterministic cache key for a unified query.

    Args:
        operation: Query kind ("search", "category", "area")
        term: Search query, category or area name
        limit: Requested number of results

    Returns:
        Hashable cache key (tuple)
    """
    term_norm = term.strip().lower() if term else ""
    return (operation, term_norm, limit)


def get_cached(key: Hashable) -> Optional[Dict[str, Any]]:
    """
    Retrieve a cached result if it exists and hasn't expired.

    Returns:
        Cached result dictionary, or None if not found or expired
    """
    entry = _RECIPE_CACHE.get(key)
    if not entry:
        return None

    timestamp, value = entry
    if time.time() - timestamp > RECIPE_CACHE_TTL_SECONDS:
        _RECIPE_CACHE.pop(key, None)
        return None

    return value


def set_cached(key: Hashable, value: Dict[str, Any]) -> None:
    """
    Store a result in the cache.

    Expired entries are dropped on every write, so the cache only holds
    results younger than RECIPE_CACHE_TTL_SECONDS.

    Args:
        key: Cache key from make_recipe_cache_key()
        value: Result dictionary ({"results": [...], "sources_status": {...}})
    """
    now = time.time()
    expired = [k for k, (timestamp, _) in _RECIPE_CACHE.items() if now - timestamp > RECIPE_CACHE_TTL_SECONDS]
    for k in expired:
        del _RECIPE_CACHE[k]
    _RECIPE_CACHE[key] = (now, value)


def clear_cache() -> None:
    """Clear all cached results (useful for testing)."""
    _RECIPE_CACHE.clear()


def get_cache_size() -> int:
    """Get the current number of cached entries (useful for monitoring)."""
    return len(_RECIPE_CACHE)
