"""Unit tests for the per-view entity cache."""
from __future__ import annotations

from alumni_connect.services import EntityCache, MutationLocks


def test_load_replaces_collection_in_order(make_post):
    cache = EntityCache([make_post("old")])
    cache.load([make_post("p2"), make_post("p1")])
    assert cache.ids() == ["p2", "p1"]
    assert "old" not in cache


def test_upsert_replaces_in_place_and_appends_new(make_post):
    cache = EntityCache([make_post("p1"), make_post("p2"), make_post("p3")])

    cache.upsert(make_post("p2", like_count=9))
    cache.upsert(make_post("p4"))

    assert cache.ids() == ["p1", "p2", "p3", "p4"]
    assert cache.get("p2").like_count == 9


def test_upsert_can_prepend_new_entities(make_post):
    cache = EntityCache([make_post("p1")])
    cache.upsert(make_post("p0"), prepend=True)
    cache.upsert(make_post("p1", like_count=2), prepend=True)
    assert cache.ids() == ["p0", "p1"]


def test_remove_missing_id_is_noop(make_post, make_reply):
    cache = EntityCache([make_reply("r1")])
    assert cache.remove("does-not-exist") is None
    assert cache.ids() == ["r1"]
    assert cache.remove("r1").id == "r1"
    assert len(cache) == 0


def test_patch_merges_fields_and_ignores_unknown_ids(make_post):
    cache = EntityCache([make_post("p1", like_count=3)])

    updated = cache.patch("p1", like_count=4, is_liked_by_current_user=True)
    assert updated is not None
    assert cache.get("p1").like_count == 4
    assert cache.get("p1").is_liked_by_current_user is True
    assert cache.get("p1").body == make_post("p1").body

    assert cache.patch("ghost", like_count=100) is None
    assert cache.ids() == ["p1"]


def test_items_returns_a_copy(make_post):
    cache = EntityCache([make_post("p1")])
    snapshot = cache.items()
    snapshot.clear()
    assert len(cache) == 1


def test_insert_restores_position(make_post):
    cache = EntityCache([make_post("p1"), make_post("p3")])
    cache.insert(1, make_post("p2"))
    assert cache.ids() == ["p1", "p2", "p3"]
    cache.insert(99, make_post("p4"))
    assert cache.ids()[-1] == "p4"


def test_locks_are_per_entity_and_kind():
    locks = MutationLocks()
    assert locks.acquire("p1", "like") is True
    assert locks.acquire("p1", "like") is False
    assert locks.acquire("p1", "delete") is True
    assert locks.acquire("p2", "like") is True

    locks.release("p1", "like")
    assert locks.is_held("p1", "like") is False
    assert locks.acquire("p1", "like") is True


def test_clear_drops_entities_and_locks(make_post):
    cache = EntityCache([make_post("p1")])
    cache.locks.acquire("p1", "like")
    cache.clear()
    assert len(cache) == 0
    assert len(cache.locks) == 0
