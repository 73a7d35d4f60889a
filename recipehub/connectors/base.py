"""
Base connector abstract class for recipe provider integrations.

This module defines the abstract base class that all recipe connectors must implement.
It ensures a consistent interface across the upstream recipe APIs, so the unified
layer (recipehub.unified) can fan out to every provider the same way.

All connectors must:
- Implement the source attribute ("spoonacular" or "mealdb")
- Return raw provider payloads; mapping into UnifiedRecipe happens in recipehub.normalize
- Raise RuntimeError for configuration or transport failures
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class BaseRecipeConnector(ABC):
    """
    Abstract base class for all recipe connectors.

    Holds a shared requests.Session and the JSON GET helper used by subclasses.

    Attributes:
        source: String identifier for the provider ("spoonacular", "mealdb")
        base_url: Provider base URL without trailing slash
        timeout: Per-request timeout in seconds
    """
    source: str

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _default_params(self) -> Dict[str, Any]:
        """Query parameters sent with every request (e.g. an API key)."""
        return {}

    def _handle_http_error(self, path: str, error: requests.exceptions.HTTPError) -> None:
        """Hook for provider-specific status handling. Must raise."""
        raise RuntimeError(f"{self.source} request to {path} failed: {error}") from error

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a provider endpoint and decode its JSON body.

        Args:
            path: Endpoint path relative to base_url (e.g. "/recipes/random")
            params: Extra query parameters; None values are dropped

        Returns:
            Decoded JSON payload

        Raises:
            RuntimeError: On timeouts, connection errors, non-2xx responses or invalid JSON
        """
        query = dict(self._default_params())
        for key, value in (params or {}).items():
            if value is not None:
                query[key] = value

        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, {k: v for k, v in query.items() if k != "apiKey"})
        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            self._handle_http_error(path, e)
        except requests.exceptions.Timeout as e:
            raise RuntimeError(f"{self.source} request to {path} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"{self.source} request to {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RuntimeError(f"{self.source} returned invalid JSON for {path}") from e

    @abstractmethod
    def search_recipes(self, query: str, **kwargs: Any) -> Any:
        """
        Search recipes by free-text query.

        Returns:
            Provider-specific raw payload (Spoonacular: search envelope,
            MealDB: list of meal dicts)
        """
        pass

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch full details of one recipe.

        Returns:
            Raw recipe dict, or None if the provider has no such recipe
        """
        pass

    @abstractmethod
    def random_recipes(self, number: int) -> List[Dict[str, Any]]:
        """Fetch `number` random recipes as raw dicts."""
        pass

    @abstractmethod
    def filter_by_category(self, category: str, number: int = 12) -> Any:
        """Filter recipes by category (MealDB) or cuisine (Spoonacular)."""
        pass
