"""Tests for history.py — pairing history stores."""

import threading

import pytest

from teesheet.exceptions import PairingHistoryError
from teesheet.history import InMemoryPairingHistoryStore, YamlPairingHistoryStore


class TestInMemoryStore:
    def test_counts_are_order_independent(self):
        store = InMemoryPairingHistoryStore()
        store.add_pairing("s1", "p1", "p2")
        store.add_pairing("s1", "p2", "p1")
        assert store.get_pairing_count("s1", "p1", "p2") == 2
        assert store.get_pairing_count("s1", "p2", "p1") == 2

    def test_seasons_are_separate(self):
        store = InMemoryPairingHistoryStore()
        store.add_pairing("s1", "p1", "p2")
        assert store.get_pairing_count("s2", "p1", "p2") == 0
        assert store.get_all_pairings_for_player("s2", "p1") == []

    def test_dashed_ids_do_not_merge(self):
        store = InMemoryPairingHistoryStore()
        store.add_pairing("s1", "a-b", "c")
        assert store.get_pairing_count("s1", "a", "b-c") == 0
        assert store.get_all_pairings_for_player("s1", "a") == []

    def test_reset_only_touches_season(self):
        store = InMemoryPairingHistoryStore()
        store.add_pairing("s1", "p1", "p2")
        store.add_pairing("s2", "p1", "p2")
        store.reset("s1")
        assert store.get_pairing_count("s1", "p1", "p2") == 0
        assert store.get_pairing_count("s2", "p1", "p2") == 1

    def test_concurrent_increments_are_not_lost(self):
        store = InMemoryPairingHistoryStore()
        n_threads = 8
        per_thread = 250

        def work():
            for _ in range(per_thread):
                store.add_pairing("s1", "p1", "p2")

        threads = [threading.Thread(target=work) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.get_pairing_count("s1", "p1", "p2") == n_threads * per_thread

    def test_snapshot(self):
        store = InMemoryPairingHistoryStore()
        store.add_pairing("s1", "p3", "p1")
        assert store.snapshot("s1") == {("p1", "p3"): 1}
        assert store.snapshot("nope") == {}


class TestYamlStore:
    def test_missing_file_starts_empty(self, tmp_path):
        store = YamlPairingHistoryStore(tmp_path / "history.yaml")
        assert store.get_pairing_count("s1", "p1", "p2") == 0

    def test_persists_between_instances(self, tmp_path):
        path = tmp_path / "history.yaml"
        store = YamlPairingHistoryStore(path)
        store.add_pairing("s1", "p1", "p2")
        store.add_pairing("s1", "p1", "p2")
        store.add_pairing("s1", "p3", "p4")

        reloaded = YamlPairingHistoryStore(path)
        assert reloaded.get_pairing_count("s1", "p2", "p1") == 2
        assert reloaded.get_pairing_count("s1", "p3", "p4") == 1

    def test_dashed_ids_survive_reload(self, tmp_path):
        path = tmp_path / "history.yaml"
        store = YamlPairingHistoryStore(path)
        store.add_pairing("s1", "a-b", "c")

        reloaded = YamlPairingHistoryStore(path)
        assert reloaded.get_pairing_count("s1", "c", "a-b") == 1
        assert reloaded.get_pairing_count("s1", "a", "b-c") == 0

    def test_reset_persists(self, tmp_path):
        path = tmp_path / "history.yaml"
        store = YamlPairingHistoryStore(path)
        store.add_pairing("s1", "p1", "p2")
        store.reset("s1")
        assert YamlPairingHistoryStore(path).get_pairing_count("s1", "p1", "p2") == 0

    def test_concurrent_increments_are_not_lost(self, tmp_path):
        path = tmp_path / "history.yaml"
        store = YamlPairingHistoryStore(path)

        def work():
            for _ in range(20):
                store.add_pairing("s1", "p1", "p2")

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert YamlPairingHistoryStore(path).get_pairing_count("s1", "p1", "p2") == 80

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "history.yaml"
        path.write_text("s1:\n  pairings:\n    badkey: 3\n")
        with pytest.raises(PairingHistoryError):
            YamlPairingHistoryStore(path)

    def test_unwritable_path_raises(self, tmp_path):
        store = YamlPairingHistoryStore(tmp_path / "missing_dir" / "history.yaml")
        with pytest.raises(PairingHistoryError):
            store.add_pairing("s1", "p1", "p2")
