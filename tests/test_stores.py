"""
Tests for the client-side persisted stores.

These tests verify that:
- LocalStorage round-trips JSON values and tolerates a corrupt file
- Every store mutation is persisted, so a re-created store sees the same state
- Favorite toggles and shopping list add/remove are reversible
- Shopping list items are grouped by source recipe in first-seen order
- Custom recipes are validated before they are stored
"""

import pytest
from pydantic import ValidationError

from recipehub.storage import LocalStorage, is_valid_session_id
from recipehub.stores import (
    AUTH_KEY,
    CUSTOM_GROUP_KEY,
    CUSTOM_GROUP_TITLE,
    FAVORITES_KEY,
    AuthStore,
    CustomRecipeStore,
    FavoriteStore,
    ShoppingListStore,
)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "session.json")


class TestLocalStorage:
    def test_missing_file_reads_as_empty(self, storage):
        assert storage.get_item("anything") is None
        assert storage.get_item("anything", []) == []
        assert storage.keys() == []

    def test_set_get_remove(self, storage):
        storage.set_item("a", {"x": 1})
        storage.set_item("b", [1, 2])

        assert storage.get_item("a") == {"x": 1}
        assert sorted(storage.keys()) == ["a", "b"]

        storage.remove_item("a")
        assert storage.get_item("a") is None
        assert storage.keys() == ["b"]

    def test_values_survive_a_new_instance(self, storage):
        storage.set_item("k", "v")
        assert LocalStorage(storage.path).get_item("k") == "v"

    def test_corrupt_file_is_ignored(self, storage):
        storage.path.write_text("{not json", encoding="utf-8")

        assert storage.get_item("k", "default") == "default"
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"

    def test_clear(self, storage):
        storage.set_item("k", "v")
        storage.clear()
        assert storage.keys() == []

    def test_session_file_lives_in_storage_dir(self, tmp_path):
        sid = "0f8fad5b-d9cb-469f-a165-70867728950e"

        storage = LocalStorage.for_session(tmp_path, sid.upper())
        storage.set_item("k", "v")

        assert storage.path == tmp_path / f"{sid}.json"
        assert storage.path.exists()

    @pytest.mark.parametrize("sid", [
        "../outside/evil",
        "../../etc/passwd",
        "nested/0f8fad5b-d9cb-469f-a165-70867728950e",
        "0f8fad5bd9cb469fa16570867728950e",
        "",
        None,
    ])
    def test_session_id_must_be_a_uuid(self, tmp_path, sid):
        assert is_valid_session_id(sid) is False
        with pytest.raises(ValueError):
            LocalStorage.for_session(tmp_path / "store", sid)
        assert not (tmp_path / "outside").exists()
        assert not (tmp_path / "store").exists()


class TestFavoriteStore:
    def test_toggle_twice_restores_state(self, storage):
        store = FavoriteStore(storage)
        store.add(1)

        assert store.toggle(2) is True
        assert store.toggle(2) is False
        assert store.favorites == [1]

    def test_add_is_idempotent(self, storage):
        store = FavoriteStore(storage)
        store.add(7)
        store.add("7")

        assert store.favorites == [7]

    def test_state_is_persisted(self, storage):
        store = FavoriteStore(storage)
        store.add(3)
        store.add(5)
        store.remove(3)

        assert storage.get_item(FAVORITES_KEY) == [5]
        assert FavoriteStore(storage).favorites == [5]
        assert FavoriteStore(storage).is_favorite(5)

    def test_provider_is_remembered_per_favorite(self, storage):
        store = FavoriteStore(storage)
        store.toggle(52772, "mealdb")
        store.add(716429)

        reloaded = FavoriteStore(storage)
        assert reloaded.favorites == [52772, 716429]
        assert reloaded.source_of(52772) == "mealdb"
        assert reloaded.source_of(716429) is None

        reloaded.toggle(52772)
        assert FavoriteStore(storage).source_of(52772) is None


class TestShoppingListStore:
    def test_add_then_remove_restores_length(self, storage):
        store = ShoppingListStore(storage)
        store.add_item({"name": "milk"})
        before = len(store.items)

        item = store.add_item({"name": "eggs", "amount": 6})
        store.remove_item(item.id)

        assert len(store.items) == before

    def test_new_items_get_fresh_id_and_start_unchecked(self, storage):
        store = ShoppingListStore(storage)

        item = store.add_item({"id": "mine", "name": "flour", "checked": True, "amount": 2, "unit": "kg"})

        assert item.id != "mine"
        assert item.checked is False
        assert item.amount == 2
        assert item.unit == "kg"

    def test_toggle_and_clear_checked(self, storage):
        store = ShoppingListStore(storage)
        milk, eggs, bread = store.add_items([{"name": "milk"}, {"name": "eggs"}, {"name": "bread"}])

        store.toggle_item_checked(eggs.id)

        assert [i.name for i in store.checked_items()] == ["eggs"]
        assert [i.name for i in store.unchecked_items()] == ["milk", "bread"]

        store.clear_checked()
        assert [i.name for i in store.items] == ["milk", "bread"]

    def test_update_item(self, storage):
        store = ShoppingListStore(storage)
        item = store.add_item({"name": "rice", "amount": 1})

        updated = store.update_item(item.id, {"amount": 3, "id": "ignored"})

        assert updated.id == item.id
        assert updated.amount == 3
        assert store.update_item("unknown", {"amount": 1}) is None

    def test_group_by_recipe_in_first_seen_order(self, storage):
        store = ShoppingListStore(storage)
        store.add_items([
            {"name": "pasta", "recipe_id": 10, "recipe_title": "Carbonara"},
            {"name": "batteries"},
            {"name": "eggs", "recipe_id": 10, "recipe_title": "Carbonara"},
            {"name": "rice", "recipe_id": 20, "recipe_title": "Risotto"},
        ])

        groups = store.items_by_recipe()

        assert list(groups.keys()) == ["recipe-10", CUSTOM_GROUP_KEY, "recipe-20"]
        assert groups["recipe-10"]["title"] == "Carbonara"
        assert [i.name for i in groups["recipe-10"]["items"]] == ["pasta", "eggs"]
        assert groups[CUSTOM_GROUP_KEY]["title"] == CUSTOM_GROUP_TITLE

    def test_clear_items_and_reload(self, storage):
        store = ShoppingListStore(storage)
        store.add_item({"name": "tea"})
        store.toggle_item_checked(store.items[0].id)

        reloaded = ShoppingListStore(storage)
        assert reloaded.items[0].checked is True

        reloaded.clear_items()
        assert ShoppingListStore(storage).items == []

    def test_invalid_persisted_items_are_dropped(self, storage):
        storage.set_item("shopping-list", [{"id": "1", "name": "ok"}, {"id": "2"}, {"id": "3", "name": "x", "amount": -1}])

        store = ShoppingListStore(storage)

        assert [i.name for i in store.items] == ["ok"]


class TestCustomRecipeStore:
    def test_add_update_remove(self, storage):
        store = CustomRecipeStore(storage)

        recipe = store.add_recipe({
            "title": "Grandma's soup",
            "servings": 4,
            "ingredients": [{"name": "carrot", "amount": 2, "unit": "pcs"}],
        })

        assert recipe.id
        assert recipe.is_custom is True
        assert CustomRecipeStore(storage).get_recipe_by_id(recipe.id).title == "Grandma's soup"

        store.update_recipe(recipe.id, {"servings": 6})
        assert CustomRecipeStore(storage).get_recipe_by_id(recipe.id).servings == 6

        store.remove_recipe(recipe.id)
        assert CustomRecipeStore(storage).recipes == []

    def test_empty_title_is_rejected(self, storage):
        store = CustomRecipeStore(storage)

        with pytest.raises(ValidationError):
            store.add_recipe({"title": ""})
        assert store.recipes == []


class TestAuthStore:
    def test_sign_in_and_out(self, storage):
        store = AuthStore(storage)
        assert store.user is None
        assert store.user_id is None

        store.set_user({"id": "u-1", "email": "cook@example.com"})
        assert AuthStore(storage).user_id == "u-1"
        assert AuthStore(storage).user["email"] == "cook@example.com"

        store.sign_out()
        assert storage.get_item(AUTH_KEY) == {"user": None}
        assert AuthStore(storage).user is None
