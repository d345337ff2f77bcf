"""Tests for canonicalhash.ordering (collision-safe key ordering)."""

import pytest

from canonicalhash import (
    Crc64,
    Fnv64,
    HashOptions,
    MapOrderer,
    UnresolvableCollisionError,
    hash_value,
)
from conftest import TaggedItem


def table_digest(primary: dict, fallback: dict, calls: list | None = None):
    """Digest function looking codes up per digest family."""

    def digest_fn(key, digest_factory):
        if calls is not None:
            calls.append((key, digest_factory))
        if digest_factory is Fnv64:
            return fallback[key]
        return primary[key]

    return digest_fn


class TestMapOrderer:
    """Unit tests with injected digests."""

    def test_sorted_by_digest(self):
        orderer = MapOrderer(table_digest({"a": 1, "b": 2, "c": 3}, {}), HashOptions())
        assert orderer.order(["c", "a", "b"]) == [1, 2, 0]

    def test_empty(self):
        orderer = MapOrderer(table_digest({}, {}), HashOptions())
        assert orderer.order([]) == []

    def test_collision_resolved_by_fallback(self):
        orderer = MapOrderer(
            table_digest({"a": 5, "b": 5, "c": 1}, {"a": 9, "b": 3}),
            HashOptions(),
        )
        assert orderer.order(["a", "b", "c"]) == [2, 1, 0]

    def test_fallback_only_for_colliding_keys(self):
        calls = []
        orderer = MapOrderer(
            table_digest({"a": 5, "b": 5, "c": 1}, {"a": 9, "b": 3}, calls),
            HashOptions(),
        )
        orderer.order(["a", "b", "c"])
        fallback_keys = [key for key, factory in calls if factory is Fnv64]
        primary_keys = [key for key, factory in calls if factory is Crc64]
        assert sorted(fallback_keys) == ["a", "b"]
        assert primary_keys == ["a", "b", "c"]

    def test_unresolvable(self):
        orderer = MapOrderer(table_digest({"a": 5, "b": 5}, {"a": 9, "b": 9}), HashOptions())
        with pytest.raises(UnresolvableCollisionError) as exc_info:
            orderer.order(["a", "b"])
        assert exc_info.value.key == "b"

    def test_fallback_clashes_with_unique_key(self):
        orderer = MapOrderer(
            table_digest({"a": 5, "b": 5, "c": 9}, {"a": 9, "b": 1}),
            HashOptions(),
        )
        with pytest.raises(UnresolvableCollisionError):
            orderer.order(["a", "b", "c"])

    def test_dedupe_drops_double_match(self):
        orderer = MapOrderer(table_digest({"a": 5, "b": 5}, {"a": 9, "b": 9}), HashOptions())
        assert orderer.order(["a", "b"], dedupe=True) == [0]

    def test_collapsed_duplicate_sorts_by_primary_digest(self):
        primary = {"a": 5, "a2": 5, "c": 7}
        fallback = {"a": 100, "a2": 100}
        orderer = MapOrderer(table_digest(primary, fallback), HashOptions())
        with_duplicate = orderer.order(["c", "a", "a2"], dedupe=True)
        without_duplicate = orderer.order(["c", "a"], dedupe=True)
        assert with_duplicate == [1, 0]
        assert without_duplicate == [1, 0]

    def test_collapsed_duplicate_next_to_real_collision(self):
        primary = {"a": 5, "a2": 5, "b": 5, "c": 7}
        fallback = {"a": 100, "a2": 100, "b": 1}
        orderer = MapOrderer(table_digest(primary, fallback), HashOptions())
        assert orderer.order(["a", "a2", "b", "c"], dedupe=True) == [2, 3, 0]


class TestCollisionHandling:
    """End-to-end collision behavior with engineered digests."""

    def test_always_colliding_raises(self, always_colliding_options):
        with pytest.raises(UnresolvableCollisionError):
            hash_value({"a": 1, "b": 2}, always_colliding_options)

    def test_single_collision_resolves(self, colliding_options):
        a = hash_value({"a": 1, "b": 2, "c": 3}, colliding_options)
        b = hash_value({"c": 3, "b": 2, "a": 1}, colliding_options)
        assert a == b

    def test_single_collision_keeps_bindings(self, colliding_options):
        a = hash_value({"a": 1, "b": 2, "c": 3}, colliding_options)
        b = hash_value({"a": 2, "b": 1, "c": 3}, colliding_options)
        assert a != b

    def test_single_collision_in_set_field(self, colliding_options):
        a = hash_value(TaggedItem("t", ["a", "b", "c"]), colliding_options)
        b = hash_value(TaggedItem("t", ["c", "b", "a"]), colliding_options)
        c = hash_value(TaggedItem("t", ["a", "c"]), colliding_options)
        assert a == b
        assert a != c

    def test_keys_normalizing_alike_collide(self):
        # None and False share a byte stream, so they cannot both be keys
        with pytest.raises(UnresolvableCollisionError):
            hash_value({None: 1, False: 2})

    def test_set_members_normalizing_alike_collapse(self):
        assert hash_value({None, False}) == hash_value({None})
