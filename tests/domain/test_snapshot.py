"""Tests for ListSnapshot."""

from dataclasses import dataclass

import pytest

from multidrag.domain.snapshot import ListSnapshot
from multidrag.errors import UnknownItemError


@dataclass(frozen=True)
class Photo:
    key: str
    caption: str = ""


class TestListSnapshot:
    def test_structural_identity_survives_rebuilds(self):
        snapshot = ListSnapshot([Photo("a"), Photo("b")])
        assert Photo("b") in snapshot
        assert snapshot.index_of(Photo("b")) == 1

    def test_injected_identity(self):
        snapshot = ListSnapshot([Photo("a", "x"), Photo("b", "y")], identity=lambda p: p.key)
        assert snapshot.ids == ("a", "b")
        assert snapshot.index_of("b") == 1
        assert snapshot.with_items([Photo("b", "changed")]).index_of("b") == 0

    def test_first_duplicate_wins(self):
        snapshot = ListSnapshot(["x", "y", "x"])
        assert snapshot.index_of("x") == 0
        assert len(snapshot) == 3

    def test_id_at_out_of_range(self):
        with pytest.raises(UnknownItemError):
            ListSnapshot(["x"]).id_at(1)

    def test_items_for_uses_list_order(self):
        snapshot = ListSnapshot(["a", "b", "c"])
        assert snapshot.items_for(["c", "zzz", "a"]) == ["a", "c"]
        assert snapshot.ordered_ids({"c", "b"}) == ["b", "c"]

    def test_snapshot_does_not_alias_source_list(self):
        source = ["a", "b"]
        snapshot = ListSnapshot(source)
        source.append("c")
        assert list(snapshot) == ["a", "b"]
