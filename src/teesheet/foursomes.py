"""Foursome formation within a single time slot."""

import logging

from teesheet.models import MAX_GROUP_SIZE, Foursome, Participant, TimeSlot
from teesheet.tracker import PairingHistoryTracker

logger = logging.getLogger(__name__)


def group_sizes(n: int, prioritize_complete_groups: bool = True) -> list[int]:
    """Sizes of the groups for n players: floor(n/4) fours plus the remainder.

    The remainder group comes last, or first when prioritize_complete_groups
    is off.
    """
    sizes = [MAX_GROUP_SIZE] * (n // MAX_GROUP_SIZE)
    remainder = n % MAX_GROUP_SIZE
    if remainder:
        if prioritize_complete_groups:
            sizes.append(remainder)
        else:
            sizes.insert(0, remainder)
    return sizes


def foursome_id(week_id: str, time_slot: TimeSlot, position: int) -> str:
    return f"{week_id}-{time_slot.value}-{position}"


def sequential_groups(players: list[Participant],
                      sizes: list[int]) -> list[list[Participant]]:
    groups = []
    start = 0
    for size in sizes:
        groups.append(players[start:start + size])
        start += size
    return groups


def optimized_groups(players: list[Participant], sizes: list[int],
                     tracker: PairingHistoryTracker,
                     season_id: str) -> list[list[Participant]]:
    """Pick each group in turn from the players still unassigned."""
    groups = []
    remaining = list(players)
    for size in sizes:
        chosen = tracker.select_group(season_id, remaining, size)
        chosen_ids = {p.id for p in chosen}
        remaining = [p for p in remaining if p.id not in chosen_ids]
        groups.append(chosen)
    return groups


def build_foursomes(players: list[Participant], time_slot: TimeSlot,
                    week_id: str,
                    tracker: PairingHistoryTracker | None = None,
                    season_id: str | None = None,
                    prioritize_complete_groups: bool = True) -> list[Foursome]:
    """Form the slot's foursomes.

    Without a tracker the list is sliced in order. With a tracker and a
    season id each group is chosen from the players still unassigned by
    tracker.select_group. Picking groups one at a time can strand a costly
    remainder, so the result is compared with the in-order slicing and the
    slicing wins when its total pairing score is strictly lower. The
    optimized grouping is therefore never worse than the unoptimized one.
    """
    sizes = group_sizes(len(players), prioritize_complete_groups)
    groups = sequential_groups(players, sizes)
    mode = "sequential"

    if tracker is not None and season_id:
        candidate = optimized_groups(players, sizes, tracker, season_id)
        candidate_score = tracker.total_score(season_id, candidate)
        sequential_score = tracker.total_score(season_id, groups)
        if candidate_score <= sequential_score:
            groups = candidate
            mode = "optimized"
        else:
            mode = "sequential (lower score than optimized)"
        logger.debug("%s: optimized score %d, sequential score %d",
                     time_slot.value, candidate_score, sequential_score)

    foursomes = [
        Foursome(
            id=foursome_id(week_id, time_slot, position),
            time_slot=time_slot,
            position=position,
            players=group,
        )
        for position, group in enumerate(groups)
    ]

    logger.debug("%s: %d players -> %d foursomes (%s)", time_slot.value,
                 len(players), len(foursomes), mode)
    return foursomes
