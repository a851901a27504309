"""Statistics and pairing reporting for teesheet schedules."""

from itertools import combinations

from teesheet.models import MAX_GROUP_SIZE, Schedule, TimeSlot
from teesheet.tracker import PairingHistoryTracker


def compute_stats(schedule: Schedule,
                  tracker: PairingHistoryTracker | None = None,
                  season_id: str | None = None) -> dict:
    """Compute statistics for a schedule.

    Pairing figures use the history as it stands now, so call this before
    recording the week's pairings to see how many repeats were scheduled.
    """
    slots = {}
    for slot in (TimeSlot.morning, TimeSlot.afternoon):
        foursomes = schedule.slot(slot)
        n = sum(len(f.players) for f in foursomes)
        slots[slot.value] = {
            "players": n,
            "foursomes": len(foursomes),
            "complete": sum(1 for f in foursomes if f.is_complete),
            "partial": sum(1 for f in foursomes if not f.is_complete),
            "expected_complete": n // MAX_GROUP_SIZE,
        }

    stats = {
        "slots": slots,
        "total_players": schedule.total_player_count(),
        "imbalance": abs(slots["morning"]["players"] - slots["afternoon"]["players"]),
        "group_scores": {},
        "repeat_pairings": [],
        "total_score": 0,
        "metrics": None,
    }

    if tracker is None or not season_id:
        return stats

    for f in schedule.all_foursomes():
        score = tracker.score_group(season_id, f.players)
        stats["group_scores"][f.id] = score
        stats["total_score"] += score
        for a, b in combinations(f.players, 2):
            count = tracker.get_pairing_count(season_id, a.id, b.id)
            if count > 0:
                stats["repeat_pairings"].append((f.id, a.id, b.id, count))

    players = [p for f in schedule.all_foursomes() for p in f.players]
    stats["metrics"] = tracker.calculate_pairing_metrics(season_id, players)
    return stats


def format_stats_report(stats: dict) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 60)

    lines.append(f"\n{'Slot':<10} {'Players':>7} {'Groups':>6} {'Full':>5} {'Short':>5}")
    lines.append("-" * 37)
    for name, s in stats["slots"].items():
        flag = " ***" if s["complete"] != s["expected_complete"] else ""
        lines.append(f"{name:<10} {s['players']:>7} {s['foursomes']:>6} "
                     f"{s['complete']:>5} {s['partial']:>5}{flag}")
    lines.append(f"\nTotal players: {stats['total_players']}  "
                 f"Slot imbalance: {stats['imbalance']}")

    if stats["metrics"] is not None:
        m = stats["metrics"]
        lines.append("\n--- PAIRING HISTORY ---")
        lines.append(f"Total group score: {stats['total_score']}")
        lines.append(f"Prior pairings among scheduled players: "
                     f"min={m.min_pairings} max={m.max_pairings} "
                     f"avg={m.average_pairings:.2f}")
        if stats["repeat_pairings"]:
            lines.append(f"Repeat pairings ({len(stats['repeat_pairings'])}):")
            for fid, a, b, count in stats["repeat_pairings"]:
                lines.append(f"  {fid}: {a} + {b} (played together {count}x)")
        else:
            lines.append("No repeat pairings")

    return "\n".join(lines)
