"""Tests for tracker.py — scoring and both group selection paths."""

from itertools import combinations

import pytest

from teesheet.history import InMemoryPairingHistoryStore
from teesheet.models import Foursome, Participant, Schedule, TimePreference, TimeSlot
from teesheet.tracker import EXHAUSTIVE_POOL_LIMIT, PairingHistoryTracker

SEASON = "s1"


def _make_player(pid):
    return Participant(id=pid, first_name=pid, last_name="",
                       time_preference=TimePreference.Either, season_id=SEASON)


def _players(n):
    return [_make_player(f"p{i:02d}") for i in range(1, n + 1)]


def _tracker(pairs=None):
    store = InMemoryPairingHistoryStore()
    for (a, b), count in (pairs or {}).items():
        for _ in range(count):
            store.add_pairing(SEASON, a, b)
    return PairingHistoryTracker(store)


def _ids(players):
    return [p.id for p in players]


class TestScoreGroup:
    def test_unseen_pairs_score_zero(self):
        assert _tracker().score_group(SEASON, _players(4)) == 0

    def test_sums_all_pairs(self):
        tracker = _tracker({("p01", "p02"): 2, ("p03", "p04"): 1, ("p01", "p04"): 3})
        assert tracker.score_group(SEASON, _players(4)) == 6
        assert tracker.score_group(SEASON, _players(2)) == 2

    def test_single_player(self):
        assert _tracker({("p01", "p02"): 5}).score_group(SEASON, _players(1)) == 0


class TestFindBestGroup:
    def test_small_pool_returned_whole(self):
        pool = list(reversed(_players(3)))
        assert _ids(_tracker().find_best_group(SEASON, pool, 4)) == ["p01", "p02", "p03"]

    def test_no_history_picks_lowest_ids(self):
        pool = list(reversed(_players(8)))
        best = _tracker().find_best_group(SEASON, pool, 4)
        assert _ids(best) == ["p01", "p02", "p03", "p04"]

    def test_avoids_repeat_pairs(self):
        tracker = _tracker({("p01", "p02"): 2, ("p03", "p04"): 2})
        best = tracker.find_best_group(SEASON, _players(8), 4)
        assert tracker.score_group(SEASON, best) == 0
        assert _ids(best) == ["p01", "p03", "p05", "p06"]

    def test_is_minimum_over_all_subsets(self):
        tracker = _tracker({
            ("p01", "p02"): 3, ("p01", "p03"): 1, ("p02", "p04"): 2,
            ("p05", "p06"): 1, ("p03", "p05"): 2, ("p04", "p06"): 1,
        })
        pool = _players(6)
        best = tracker.find_best_group(SEASON, pool, 4)
        minimum = min(tracker.score_group(SEASON, list(c))
                      for c in combinations(pool, 4))
        assert tracker.score_group(SEASON, best) == minimum

    def test_pool_over_limit_rejected(self):
        with pytest.raises(ValueError):
            _tracker().find_best_group(SEASON, _players(EXHAUSTIVE_POOL_LIMIT + 1), 4)


class TestBuildGreedyGroup:
    def test_seeds_with_lowest_id(self):
        group = _tracker().build_greedy_group(SEASON, list(reversed(_players(20))), 4)
        assert _ids(group) == ["p01", "p02", "p03", "p04"]

    def test_skips_partners_of_seed(self):
        tracker = _tracker({("p01", "p02"): 1, ("p01", "p03"): 1})
        group = tracker.build_greedy_group(SEASON, _players(20), 4)
        assert _ids(group) == ["p01", "p04", "p05", "p06"]

    def test_avoids_pairs_within_group(self):
        tracker = _tracker({("p02", "p03"): 4})
        group = tracker.build_greedy_group(SEASON, _players(20), 4)
        assert _ids(group) == ["p01", "p02", "p04", "p05"]
        assert tracker.score_group(SEASON, group) == 0

    def test_can_differ_from_exhaustive(self):
        # Seed p01 is tied to everyone, so greedy pays for it while the
        # exhaustive search simply leaves p01 out.
        pairs = {("p01", f"p{i:02d}"): 1 for i in range(2, 7)}
        tracker = _tracker(pairs)
        pool = _players(6)
        greedy = tracker.build_greedy_group(SEASON, pool, 4)
        best = tracker.find_best_group(SEASON, pool, 4)
        assert tracker.score_group(SEASON, greedy) == 3
        assert tracker.score_group(SEASON, best) == 0


class TestSelectGroup:
    def test_small_pool_uses_exhaustive(self):
        pairs = {("p01", f"p{i:02d}"): 1 for i in range(2, 7)}
        tracker = _tracker(pairs)
        chosen = tracker.select_group(SEASON, _players(6), 4)
        assert "p01" not in _ids(chosen)

    def test_large_pool_uses_greedy(self):
        pairs = {("p01", f"p{i:02d}"): 1 for i in range(2, 21)}
        tracker = _tracker(pairs)
        chosen = tracker.select_group(SEASON, _players(20), 4)
        assert _ids(chosen)[0] == "p01"


class TestRecording:
    def test_record_pairing(self):
        tracker = _tracker()
        tracker.record_pairing(SEASON, "p02", "p01")
        assert tracker.get_pairing_count(SEASON, "p01", "p02") == 1

    def test_track_foursome_records_every_pair(self):
        tracker = _tracker()
        f = Foursome(id="f", time_slot=TimeSlot.morning, position=0, players=_players(4))
        assert tracker.track_foursome_pairings(SEASON, f) == 6
        for a, b in combinations(_ids(_players(4)), 2):
            assert tracker.get_pairing_count(SEASON, a, b) == 1

    def test_track_schedule(self):
        tracker = _tracker()
        players = _players(7)
        s = Schedule(id="schedule-w1", week_id="w1")
        s.add_foursome(Foursome(id="m0", time_slot=TimeSlot.morning, position=0,
                                players=players[:4]))
        s.add_foursome(Foursome(id="a0", time_slot=TimeSlot.afternoon, position=0,
                                players=players[4:]))
        assert tracker.track_schedule_pairings(SEASON, s) == 6 + 3
        assert tracker.get_pairing_count(SEASON, "p01", "p05") == 0

    def test_all_pairings_and_reset(self):
        tracker = _tracker({("p01", "p02"): 2, ("p01", "p03"): 1})
        assert tracker.get_all_pairings_for_player(SEASON, "p01") == [("p02", 2), ("p03", 1)]
        tracker.reset_pairing_history(SEASON)
        assert tracker.get_pairing_count(SEASON, "p01", "p02") == 0


class TestPairingMetrics:
    def test_empty(self):
        m = _tracker().calculate_pairing_metrics(SEASON, [])
        assert m.pairing_counts == {}
        assert m.average_pairings == 0.0

    def test_values(self):
        tracker = _tracker({("p01", "p02"): 3, ("p02", "p03"): 1})
        m = tracker.calculate_pairing_metrics(SEASON, _players(3))
        assert m.pairing_counts == {
            ("p01", "p02"): 3, ("p01", "p03"): 0, ("p02", "p03"): 1,
        }
        assert m.min_pairings == 0
        assert m.max_pairings == 3
        assert m.average_pairings == pytest.approx(4 / 3)
