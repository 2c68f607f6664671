"""Tests for id generators."""

from __future__ import annotations

from civitas.ids import SequentialIds, ShortUuidIds, make_id_generator


class TestSequentialIds:
    """Test the per-prefix counter."""

    def test_counts_per_prefix(self):
        ids = SequentialIds()
        assert ids.next_id("clan") == "clan_0001"
        assert ids.next_id("clan") == "clan_0002"
        assert ids.next_id("nation") == "nation_0001"

    def test_width(self):
        assert SequentialIds(width=2).next_id("mut") == "mut_01"

    def test_observe_advances(self):
        ids = SequentialIds()
        ids.observe("lang_0007")
        ids.observe("lang_0003")
        ids.observe("not-an-id")
        assert ids.next_id("lang") == "lang_0008"

    def test_observe_prefix_with_underscore(self):
        ids = SequentialIds()
        ids.observe("lang_0001_coast")
        ids.observe("tribe_alpha_0004")
        assert ids.next_id("tribe_alpha") == "tribe_alpha_0005"

    def test_export_import(self):
        ids = SequentialIds()
        ids.next_id("clan")
        ids.next_id("clan")

        restored = SequentialIds()
        restored.next_id("clan")
        restored.import_state(ids.export_state())

        assert ids.export_state() == {"strategy": "sequential", "counters": {"clan": 2}}
        assert restored.next_id("clan") == "clan_0003"


class TestShortUuidIds:
    """Test random ids."""

    def test_format(self):
        generated = ShortUuidIds().next_id("treaty")
        prefix, _, suffix = generated.partition("_")
        assert prefix == "treaty"
        assert len(suffix) == 8
        int(suffix, 16)

    def test_unique(self):
        ids = ShortUuidIds()
        assert len({ids.next_id("clan") for _ in range(200)}) == 200


def test_make_id_generator():
    assert isinstance(make_id_generator("sequential"), SequentialIds)
    assert isinstance(make_id_generator("uuid"), ShortUuidIds)
