"""
Client-side State Module.

This module wires the recipehub stores (favorites, shopping list, custom
recipes, auth) to one LocalStorage file per browser session:

    <LOCAL_STORAGE_DIR>/<session id>.json

Each store persists wholesale on every change, so state survives page
navigation and refreshes (the session id lives in the URL, see utils.session).

# NOTE: Stores are rebuilt on every script run from the file. This keeps the
    file as the single source of truth; there is no multi-tab coordination.
"""

from typing import Optional

from api.config import StorageConfig
from recipehub.storage import LocalStorage
from recipehub.stores import AuthStore, CustomRecipeStore, FavoriteStore, ShoppingListStore

from utils.session import get_or_create_session_id


def get_storage() -> LocalStorage:
    """LocalStorage file for the current session."""
    session_id = get_or_create_session_id()
    return LocalStorage.for_session(StorageConfig.get_storage_dir(), session_id)


def favorites() -> FavoriteStore:
    return FavoriteStore(get_storage())


def shopping_list() -> ShoppingListStore:
    return ShoppingListStore(get_storage())


def custom_recipes() -> CustomRecipeStore:
    return CustomRecipeStore(get_storage())


def auth() -> AuthStore:
    return AuthStore(get_storage())


def current_user_id() -> Optional[str]:
    """Id of the signed-in user, or None."""
    return auth().user_id
