"""Morning/afternoon slot assignment."""

from teesheet.models import Participant, TimePreference


def partition_by_preference(players: list[Participant]) -> tuple[
        list[Participant], list[Participant], list[Participant]]:
    """Split players into (am, pm, either) by stated preference."""
    am, pm, either = [], [], []
    for p in players:
        if p.time_preference == TimePreference.AM:
            am.append(p)
        elif p.time_preference == TimePreference.PM:
            pm.append(p)
        else:
            either.append(p)
    return am, pm, either


def assign_time_slots(players: list[Participant], balance: bool = True,
                      ) -> tuple[list[Participant], list[Participant]]:
    """Assign players to (morning, afternoon).

    AM and PM players go to their slot. With balance on, each Either player
    joins whichever slot is currently smaller (morning on a tie), so the
    final size difference never exceeds the one from strict preferences.
    This is greedy, not an optimal balance. With balance off, Either players
    are split in half, the smaller half to morning.
    """
    am, pm, either = partition_by_preference(players)
    morning = list(am)
    afternoon = list(pm)

    if balance:
        for p in either:
            if len(morning) <= len(afternoon):
                morning.append(p)
            else:
                afternoon.append(p)
    else:
        half = len(either) // 2
        morning.extend(either[:half])
        afternoon.extend(either[half:])

    return morning, afternoon


def slot_imbalance(morning: list, afternoon: list) -> int:
    return abs(len(morning) - len(afternoon))
