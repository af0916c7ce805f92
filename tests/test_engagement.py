"""
Engagement Service Tests

Star toggling (idempotence, symmetry, creation on demand) and comment
ownership, exercised directly against EngagementService with an in-memory
store, a fixed clock and sequential comment ids.

Run:
----
    pytest tests/test_engagement.py -v
"""

from unittest import mock

import pytest

from stargazer.errors import (
    DuplicateItem,
    NotFound,
    StoreUnavailable,
    Unauthenticated,
    Unauthorized,
    ValidationError,
)
from stargazer.services import EngagementService, MemoryItemStore, StarStatus, UpdateOp

from conftest import FIXED_NOW, MORTY, RICK, sequential_ids


def _stargazers(store, item_id):
    return store.find_by_key(item_id)["stargazers_ids"]


class TestSetStar:
    """Star / unstar semantics."""

    @pytest.fixture(autouse=True)
    def setup(self, store, service):
        self.store = store
        self.service = service
        store.insert({"id": "stable/wordpress", "type": "chart", "stargazers_ids": ["u-other"], "comments": []})

    def test_star_existing_item(self):
        result = self.service.set_star("stable/wordpress", True, RICK)
        assert result.status is StarStatus.UPDATED
        assert result.item.has_starred is True
        assert result.item.stargazers_count == 2
        assert set(_stargazers(self.store, "stable/wordpress")) == {"u-other", RICK.id}

    def test_star_is_idempotent(self):
        self.service.set_star("stable/wordpress", True, RICK)
        with mock.patch.object(self.store, "atomic_update_by_key") as update, \
                mock.patch.object(self.store, "insert") as insert:
            result = self.service.set_star("stable/wordpress", True, RICK)
        assert result.status is StarStatus.ALREADY_SATISFIED
        assert not result.changed
        update.assert_not_called()
        insert.assert_not_called()
        assert _stargazers(self.store, "stable/wordpress").count(RICK.id) == 1

    def test_star_then_unstar_restores_stargazers(self):
        before = list(_stargazers(self.store, "stable/wordpress"))
        self.service.set_star("stable/wordpress", True, RICK)
        result = self.service.set_star("stable/wordpress", False, RICK)
        assert result.status is StarStatus.UPDATED
        assert result.item.has_starred is False
        assert result.item.stargazers_count == 1
        assert _stargazers(self.store, "stable/wordpress") == before

    def test_unstar_issues_single_remove(self):
        with mock.patch.object(self.store, "atomic_update_by_key") as update:
            self.service.set_star("stable/wordpress", False, RICK)
        update.assert_called_once_with("stable/wordpress", UpdateOp.REMOVE_FROM_SET, "stargazers_ids", RICK.id)

    def test_star_issues_single_add(self):
        with mock.patch.object(self.store, "atomic_update_by_key") as update:
            self.service.set_star("stable/wordpress", True, RICK)
        update.assert_called_once_with("stable/wordpress", UpdateOp.ADD_TO_SET, "stargazers_ids", RICK.id)

    def test_creates_missing_item_with_caller_as_only_stargazer(self):
        result = self.service.set_star("new/item", True, RICK)
        assert result.status is StarStatus.CREATED
        doc = self.store.find_by_key("new/item")
        assert doc["type"] == "chart"
        assert doc["stargazers_ids"] == [RICK.id]
        assert doc["comments"] == []
        assert result.item.stargazers_count == 1
        assert result.item.has_starred is True

    def test_creates_missing_item_with_given_type(self):
        self.service.set_star("incubator/fn", True, RICK, item_type="function")
        assert self.store.find_by_key("incubator/fn")["type"] == "function"

    def test_unstar_missing_item_creates_it_empty(self):
        result = self.service.set_star("new/item", False, RICK)
        assert result.status is StarStatus.CREATED
        assert self.store.find_by_key("new/item")["stargazers_ids"] == []

    @pytest.mark.parametrize("item_id", ["", "   ", None])
    def test_blank_id_rejected(self, item_id):
        with pytest.raises(ValidationError):
            self.service.set_star(item_id, True, RICK)

    def test_anonymous_caller_rejected(self):
        with pytest.raises(Unauthenticated):
            self.service.set_star("stable/wordpress", True, None)

    def test_lost_creation_race_applies_update(self):
        """Another request inserted the item between our read and our insert."""
        with mock.patch.object(self.store, "find_by_key", side_effect=[None, {
            "id": "stable/drupal", "type": "chart", "stargazers_ids": [MORTY.id, RICK.id], "comments": [],
        }]), mock.patch.object(self.store, "insert", side_effect=DuplicateItem("exists")), \
                mock.patch.object(self.store, "atomic_update_by_key") as update:
            result = self.service.set_star("stable/drupal", True, RICK)
        update.assert_called_once_with("stable/drupal", UpdateOp.ADD_TO_SET, "stargazers_ids", RICK.id)
        assert result.status is StarStatus.UPDATED
        assert result.item.stargazers_count == 2

    def test_store_failure_propagates(self):
        with mock.patch.object(self.store, "atomic_update_by_key", side_effect=StoreUnavailable("down")):
            with pytest.raises(StoreUnavailable):
                self.service.set_star("stable/wordpress", True, RICK)


class TestListItems:
    """Aggregate counts and per-caller star state."""

    @pytest.fixture(autouse=True)
    def setup(self, store, service):
        self.service = service
        store.insert({"id": "stable/wordpress", "type": "chart", "stargazers_ids": ["a", RICK.id], "comments": []})
        store.insert({"id": "stable/drupal", "type": "chart", "stargazers_ids": ["b"], "comments": []})
        store.insert({"id": "stable/empty", "type": "chart"})

    def _by_id(self, views):
        return {v.id: v for v in views}

    def test_counts(self):
        views = self._by_id(self.service.list_items(RICK))
        assert views["stable/wordpress"].stargazers_count == 2
        assert views["stable/drupal"].stargazers_count == 1
        assert views["stable/empty"].stargazers_count == 0

    def test_has_starred_for_caller(self):
        views = self._by_id(self.service.list_items(RICK))
        assert views["stable/wordpress"].has_starred is True
        assert views["stable/drupal"].has_starred is False

    def test_anonymous_never_starred(self):
        views = self.service.list_items(None)
        assert len(views) == 3
        assert all(v.has_starred is False for v in views)


class TestComments:
    """Comment creation, listing and author-only deletion."""

    @pytest.fixture(autouse=True)
    def setup(self, store, service):
        self.store = store
        self.service = service

    def test_list_comments_unknown_item_is_empty(self):
        assert self.service.list_comments("stable/unknown") == []

    def test_add_comment_creates_item(self):
        cm = self.service.add_comment("stable/wordpress", "Hello, World", RICK)
        assert cm.id == "comment-1"
        assert cm.created_at == FIXED_NOW
        assert cm.author_id == RICK.id
        doc = self.store.find_by_key("stable/wordpress")
        assert doc["type"] == "chart"
        assert doc["stargazers_ids"] == []
        assert [c["id"] for c in doc["comments"]] == ["comment-1"]

    def test_add_comment_appends_in_order(self):
        self.service.add_comment("stable/wordpress", "first", RICK)
        with mock.patch.object(self.store, "atomic_update_by_key", wraps=self.store.atomic_update_by_key) as update:
            self.service.add_comment("stable/wordpress", "second", MORTY)
        assert update.call_count == 1
        assert update.call_args.args[1] is UpdateOp.PUSH
        self.service.add_comment("stable/wordpress", "third", RICK)
        texts = [c.text for c in self.service.list_comments("stable/wordpress")]
        assert texts == ["first", "second", "third"]

    def test_comment_round_trips_through_store(self):
        created = self.service.add_comment("stable/wordpress", "Hello", RICK)
        [listed] = self.service.list_comments("stable/wordpress")
        assert listed == created

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_rejected(self, text):
        with pytest.raises(ValidationError):
            self.service.add_comment("stable/wordpress", text, RICK)
        assert self.store.find_by_key("stable/wordpress") is None

    def test_anonymous_comment_rejected(self):
        with pytest.raises(Unauthenticated):
            self.service.add_comment("stable/wordpress", "Hello", None)

    def test_lost_creation_race_appends(self):
        self.store.insert({"id": "stable/wordpress", "type": "chart", "stargazers_ids": [], "comments": []})
        with mock.patch.object(self.store, "find_by_key", return_value=None):
            cm = self.service.add_comment("stable/wordpress", "Hello", RICK)
        assert [c["id"] for c in self.store.find_by_key("stable/wordpress")["comments"]] == [cm.id]

    def test_delete_own_comment(self):
        cm = self.service.add_comment("stable/wordpress", "Hello", RICK)
        self.service.add_comment("stable/wordpress", "Other", MORTY)
        deleted = self.service.delete_comment("stable/wordpress", cm.id, RICK)
        assert deleted == cm
        assert [c.text for c in self.service.list_comments("stable/wordpress")] == ["Other"]

    def test_delete_someone_elses_comment(self):
        cm = self.service.add_comment("stable/wordpress", "Hello", RICK)
        with mock.patch.object(self.store, "atomic_update_by_key") as update:
            with pytest.raises(Unauthorized):
                self.service.delete_comment("stable/wordpress", cm.id, MORTY)
        update.assert_not_called()
        assert [c.id for c in self.service.list_comments("stable/wordpress")] == [cm.id]

    def test_delete_missing_comment(self):
        self.service.add_comment("stable/wordpress", "Hello", RICK)
        with pytest.raises(NotFound):
            self.service.delete_comment("stable/wordpress", "does-not-exist", RICK)

    def test_delete_on_missing_item(self):
        with pytest.raises(NotFound):
            self.service.delete_comment("stable/unknown", "comment-1", RICK)

    def test_anonymous_delete_rejected(self):
        cm = self.service.add_comment("stable/wordpress", "Hello", RICK)
        with pytest.raises(Unauthenticated):
            self.service.delete_comment("stable/wordpress", cm.id, None)


def test_default_item_type_is_configurable():
    store = MemoryItemStore()
    service = EngagementService(store, id_generator=sequential_ids(), default_item_type="function")
    service.set_star("incubator/fn", True, RICK)
    service.add_comment("incubator/other", "hi", RICK)
    assert store.find_by_key("incubator/fn")["type"] == "function"
    assert store.find_by_key("incubator/other")["type"] == "function"
