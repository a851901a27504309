"""Pairing history scoring and low-conflict group selection.

Two selection paths exist and are kept separate:

- find_best_group: exhaustive search over every subset of a small pool.
- build_greedy_group: incremental construction, used for larger pools.

They are not guaranteed to agree on the same input. select_group picks
between them by pool size.
"""

import logging
from dataclasses import dataclass, field
from itertools import combinations

from teesheet.history import PairingHistoryStore
from teesheet.models import (
    MAX_GROUP_SIZE, Foursome, PairKey, Participant, Schedule, pair_key,
)

logger = logging.getLogger(__name__)

# C(12, 4) = 495 subsets; beyond this the greedy path is used
EXHAUSTIVE_POOL_LIMIT = 12


@dataclass
class PairingMetrics:
    """Summary of pair counts among a set of players."""
    pairing_counts: dict[PairKey, int] = field(default_factory=dict)
    min_pairings: int = 0
    max_pairings: int = 0
    average_pairings: float = 0.0


def _by_id(players: list[Participant]) -> list[Participant]:
    return sorted(players, key=lambda p: p.id)


class PairingHistoryTracker:
    """Bridges group selection and the pairing history store."""

    def __init__(self, store: PairingHistoryStore):
        self.store = store

    def get_pairing_count(self, season_id: str, player1_id: str,
                          player2_id: str) -> int:
        return self.store.get_pairing_count(season_id, player1_id, player2_id)

    def get_all_pairings_for_player(self, season_id: str,
                                    player_id: str) -> list[tuple[str, int]]:
        return self.store.get_all_pairings_for_player(season_id, player_id)

    def score_group(self, season_id: str, players: list[Participant]) -> int:
        """Sum of historical counts over every pair in the group. Lower is better."""
        return sum(
            self.store.get_pairing_count(season_id, a.id, b.id)
            for a, b in combinations(players, 2)
        )

    def total_score(self, season_id: str,
                    groups: list[list[Participant]]) -> int:
        return sum(self.score_group(season_id, group) for group in groups)

    def find_best_group(self, season_id: str, pool: list[Participant],
                        group_size: int = MAX_GROUP_SIZE) -> list[Participant]:
        """Exhaustively find the lowest-scoring subset of the pool.

        Subsets are enumerated in id order, so the first minimum found is
        also the lexicographically smallest by id.
        """
        ordered = _by_id(pool)
        if len(ordered) <= group_size:
            return ordered
        if len(ordered) > EXHAUSTIVE_POOL_LIMIT:
            raise ValueError(
                f"Exhaustive search limited to {EXHAUSTIVE_POOL_LIMIT} players, "
                f"got {len(ordered)}"
            )

        best: list[Participant] = []
        best_score = None
        for combo in combinations(ordered, group_size):
            score = self.score_group(season_id, list(combo))
            if best_score is None or score < best_score:
                best_score = score
                best = list(combo)
                if score == 0:
                    break
        return best

    def build_greedy_group(self, season_id: str, pool: list[Participant],
                           group_size: int = MAX_GROUP_SIZE) -> list[Participant]:
        """Grow a group one player at a time, adding the least-paired candidate.

        Seeds with the lowest-id player; each addition minimizes the count
        summed against the players already chosen, ties to the lower id.
        """
        ordered = _by_id(pool)
        if len(ordered) <= group_size:
            return ordered

        group = [ordered[0]]
        candidates = ordered[1:]
        while len(group) < group_size:
            best_idx = 0
            best_added = None
            for idx, cand in enumerate(candidates):
                added = sum(
                    self.store.get_pairing_count(season_id, cand.id, member.id)
                    for member in group
                )
                if best_added is None or added < best_added:
                    best_added = added
                    best_idx = idx
            group.append(candidates.pop(best_idx))
        return _by_id(group)

    def select_group(self, season_id: str, pool: list[Participant],
                     group_size: int = MAX_GROUP_SIZE) -> list[Participant]:
        """Pick a low-conflict group: exhaustive for small pools, greedy otherwise."""
        if len(pool) <= EXHAUSTIVE_POOL_LIMIT:
            return self.find_best_group(season_id, pool, group_size)
        return self.build_greedy_group(season_id, pool, group_size)

    def record_pairing(self, season_id: str, player1_id: str,
                       player2_id: str) -> None:
        self.store.add_pairing(season_id, player1_id, player2_id)

    def track_foursome_pairings(self, season_id: str, foursome: Foursome) -> int:
        """Record every pair in the foursome. Returns the number recorded."""
        recorded = 0
        for a, b in combinations(foursome.players, 2):
            self.record_pairing(season_id, a.id, b.id)
            recorded += 1
        return recorded

    def track_schedule_pairings(self, season_id: str, schedule: Schedule) -> int:
        recorded = 0
        for foursome in schedule.all_foursomes():
            recorded += self.track_foursome_pairings(season_id, foursome)
        logger.info("Recorded %d pairings for week %s in season %s",
                    recorded, schedule.week_id, season_id)
        return recorded

    def calculate_pairing_metrics(self, season_id: str,
                                  players: list[Participant]) -> PairingMetrics:
        counts = {
            pair_key(a.id, b.id): self.store.get_pairing_count(season_id, a.id, b.id)
            for a, b in combinations(players, 2)
        }
        if not counts:
            return PairingMetrics()
        values = list(counts.values())
        return PairingMetrics(
            pairing_counts=counts,
            min_pairings=min(values),
            max_pairings=max(values),
            average_pairings=sum(values) / len(values),
        )

    def reset_pairing_history(self, season_id: str) -> None:
        self.store.reset(season_id)
