"""
Client-side persisted stores: favorites, shopping list, custom recipes, auth.

Each store keeps its state in memory and writes the whole state back to its
LocalStorage key after every mutation, so a store re-created from the same
storage file sees exactly the last written state.

Keys:
- favorite-recipes: list of recipe ids (ints)
- favorite-recipe-sources: {"<id>": "spoonacular" | "mealdb"} for ids added with a known provider
- shopping-list: list of ShoppingListItem dicts
- custom-recipes: list of CustomRecipe dicts
- auth-storage: {"user": {"id": ..., "email": ...}} or {"user": null}

# NOTE: Stores are single-writer. Two stores over the same file do not see
    each other's changes until re-created (last write wins).
"""

import logging
import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from recipehub.models import CustomRecipe, ShoppingListItem
from recipehub.storage import LocalStorage

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorite-recipes"
FAVORITE_SOURCES_KEY = "favorite-recipe-sources"
SHOPPING_LIST_KEY = "shopping-list"
CUSTOM_RECIPES_KEY = "custom-recipes"
AUTH_KEY = "auth-storage"

CUSTOM_GROUP_KEY = "custom"
CUSTOM_GROUP_TITLE = "Custom Items"


class FavoriteStore:
    """Favorite recipe ids, in the order they were added."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage
        self._favorites: List[int] = [int(rid) for rid in storage.get_item(FAVORITES_KEY, []) or []]
        self._sources: Dict[str, str] = dict(storage.get_item(FAVORITE_SOURCES_KEY, {}) or {})

    def _persist(self) -> None:
        self.storage.set_item(FAVORITES_KEY, self._favorites)
        self.storage.set_item(FAVORITE_SOURCES_KEY, self._sources)

    @property
    def favorites(self) -> List[int]:
        return list(self._favorites)

    def add(self, recipe_id: int, source: Optional[str] = None) -> None:
        """
        Add a recipe id. Adding an id that is already a favorite changes nothing.

        Both providers use numeric ids, so the provider is remembered when known.
        """
        recipe_id = int(recipe_id)
        if recipe_id in self._favorites:
            return
        self._favorites.append(recipe_id)
        if source:
            self._sources[str(recipe_id)] = source
        self._persist()

    def remove(self, recipe_id: int) -> None:
        recipe_id = int(recipe_id)
        self._favorites = [rid for rid in self._favorites if rid != recipe_id]
        self._sources.pop(str(recipe_id), None)
        self._persist()

    def source_of(self, recipe_id: int) -> Optional[str]:
        """Provider the favorite was saved from, or None if unknown."""
        return self._sources.get(str(int(recipe_id)))

    def is_favorite(self, recipe_id: int) -> bool:
        return int(recipe_id) in self._favorites

    def toggle(self, recipe_id: int, source: Optional[str] = None) -> bool:
        """
        Flip membership of `recipe_id`.

        Returns:
            True if the recipe is a favorite after the call
        """
        if self.is_favorite(recipe_id):
            self.remove(recipe_id)
            return False
        self.add(recipe_id, source)
        return True


class ShoppingListStore:
    """Local shopping list. Items get a fresh uuid and start unchecked."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage
        self._items: List[ShoppingListItem] = []
        for raw in storage.get_item(SHOPPING_LIST_KEY, []) or []:
            try:
                self._items.append(ShoppingListItem(**raw))
            except (TypeError, ValidationError) as e:
                logger.warning("Dropping invalid shopping list item %r: %s", raw, e)

    def _persist(self) -> None:
        self.storage.set_item(SHOPPING_LIST_KEY, [item.model_dump() for item in self._items])

    @property
    def items(self) -> List[ShoppingListItem]:
        return list(self._items)

    def _new_item(self, data: Dict[str, Any]) -> ShoppingListItem:
        fields = {k: v for k, v in data.items() if k not in ("id", "checked")}
        return ShoppingListItem(id=str(uuid.uuid4()), checked=False, **fields)

    def add_item(self, item: Dict[str, Any]) -> ShoppingListItem:
        """
        Add one item.

        Args:
            item: Dict with name and optionally amount, unit, recipe_id, recipe_title.
                  Any id or checked value is ignored.

        Returns:
            The stored ShoppingListItem
        """
        new_item = self._new_item(item)
        self._items.append(new_item)
        self._persist()
        return new_item

    def add_items(self, items: List[Dict[str, Any]]) -> List[ShoppingListItem]:
        """Add several items with a single write."""
        new_items = [self._new_item(item) for item in items]
        self._items.extend(new_items)
        self._persist()
        return new_items

    def update_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[ShoppingListItem]:
        """Merge `updates` into the item with `item_id`. Unknown ids are ignored."""
        for index, item in enumerate(self._items):
            if item.id == item_id:
                merged = item.model_dump()
                merged.update({k: v for k, v in updates.items() if k != "id"})
                self._items[index] = ShoppingListItem(**merged)
                self._persist()
                return self._items[index]
        return None

    def remove_item(self, item_id: str) -> None:
        self._items = [item for item in self._items if item.id != item_id]
        self._persist()

    def clear_items(self) -> None:
        self._items = []
        self._persist()

    def toggle_item_checked(self, item_id: str) -> None:
        self._items = [
            item.model_copy(update={"checked": not item.checked}) if item.id == item_id else item
            for item in self._items
        ]
        self._persist()

    def clear_checked(self) -> None:
        self._items = [item for item in self._items if not item.checked]
        self._persist()

    def unchecked_items(self) -> List[ShoppingListItem]:
        return [item for item in self._items if not item.checked]

    def checked_items(self) -> List[ShoppingListItem]:
        return [item for item in self._items if item.checked]

    def items_by_recipe(self) -> "OrderedDict[str, Dict[str, Any]]":
        """
        Group items by the recipe they came from.

        Returns:
            Ordered mapping of group key ("recipe-<id>" or "custom") to
            {"title": str, "items": [ShoppingListItem]}, in first-seen order
        """
        groups: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        for item in self._items:
            key = f"recipe-{item.recipe_id}" if item.recipe_id is not None else CUSTOM_GROUP_KEY
            if key not in groups:
                groups[key] = {"title": item.recipe_title or CUSTOM_GROUP_TITLE, "items": []}
            groups[key]["items"].append(item)
        return groups


class CustomRecipeStore:
    """User-authored recipes."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage
        self._recipes: List[CustomRecipe] = []
        for raw in storage.get_item(CUSTOM_RECIPES_KEY, []) or []:
            try:
                self._recipes.append(CustomRecipe(**raw))
            except (TypeError, ValidationError) as e:
                logger.warning("Dropping invalid custom recipe %r: %s", raw, e)

    def _persist(self) -> None:
        self.storage.set_item(CUSTOM_RECIPES_KEY, [recipe.model_dump() for recipe in self._recipes])

    @property
    def recipes(self) -> List[CustomRecipe]:
        return list(self._recipes)

    def add_recipe(self, recipe: Dict[str, Any]) -> CustomRecipe:
        """Store a new recipe under a fresh uuid. Raises ValidationError for bad input."""
        data = {k: v for k, v in recipe.items() if k != "id"}
        new_recipe = CustomRecipe(id=str(uuid.uuid4()), **data)
        self._recipes.append(new_recipe)
        self._persist()
        logger.info("Added custom recipe %s (%s)", new_recipe.id, new_recipe.title)
        return new_recipe

    def update_recipe(self, recipe_id: str, updates: Dict[str, Any]) -> Optional[CustomRecipe]:
        for index, recipe in enumerate(self._recipes):
            if recipe.id == recipe_id:
                merged = recipe.model_dump()
                merged.update({k: v for k, v in updates.items() if k != "id"})
                self._recipes[index] = CustomRecipe(**merged)
                self._persist()
                return self._recipes[index]
        return None

    def remove_recipe(self, recipe_id: str) -> None:
        self._recipes = [recipe for recipe in self._recipes if recipe.id != recipe_id]
        self._persist()

    def get_recipe_by_id(self, recipe_id: str) -> Optional[CustomRecipe]:
        return next((recipe for recipe in self._recipes if recipe.id == recipe_id), None)


class AuthStore:
    """The signed-in user ({"id", "email"}), or None."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage
        state = storage.get_item(AUTH_KEY, {}) or {}
        self._user: Optional[Dict[str, Any]] = state.get("user")

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return dict(self._user) if self._user else None

    @property
    def user_id(self) -> Optional[str]:
        return str(self._user["id"]) if self._user and self._user.get("id") else None

    def set_user(self, user: Optional[Dict[str, Any]]) -> None:
        self._user = dict(user) if user else None
        self.storage.set_item(AUTH_KEY, {"user": self._user})

    def sign_out(self) -> None:
        self.set_user(None)
