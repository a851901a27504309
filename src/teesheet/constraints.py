"""Constraint validation for teesheet schedules."""

from collections import Counter

from teesheet.models import MAX_GROUP_SIZE, Participant, Schedule, TimePreference, TimeSlot, Week


def validate_schedule(schedule: Schedule, week: Week | None = None,
                      players: list[Participant] | None = None) -> dict:
    """Validate a schedule against all constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues
    """
    errors = []
    warnings = []
    names = {p.id: f"{p.name} ({p.id})" for p in players or []}

    def label(pid: str) -> str:
        return names.get(pid, pid)

    # Each player at most once
    counts = Counter(schedule.all_player_ids())
    for pid, count in sorted(counts.items()):
        if count > 1:
            errors.append(f"Player {label(pid)} appears {count} times in schedule")

    # Slot preferences and group sizes
    for slot in (TimeSlot.morning, TimeSlot.afternoon):
        foursomes = schedule.slot(slot)
        short = 0
        for f in foursomes:
            if f.time_slot != slot:
                errors.append(f"Foursome {f.id} listed under {slot.value} "
                              f"but marked {f.time_slot.value}")
            if not 1 <= len(f.players) <= MAX_GROUP_SIZE:
                errors.append(f"Foursome {f.id} has {len(f.players)} players")
            if len(f.players) < MAX_GROUP_SIZE:
                short += 1
            for p in f.players:
                if not slot.accepts(p.time_preference):
                    pref = "PM" if p.time_preference == TimePreference.PM else "AM"
                    errors.append(
                        f"Player {label(p.id)} has {pref} preference but is "
                        f"scheduled in {slot.value}"
                    )
        if short > 1:
            errors.append(f"{slot.value.capitalize()} has {short} short groups "
                          f"(at most 1 allowed)")

        positions = [f.position for f in foursomes]
        if positions != list(range(len(foursomes))):
            warnings.append(f"{slot.value.capitalize()} positions are not "
                            f"0..{len(foursomes) - 1}: {positions}")

    # Availability
    if week is not None:
        for pid in sorted(counts):
            if not week.has_availability_data(pid):
                errors.append(f"Player {label(pid)} is scheduled but has no "
                              f"availability data")
            elif not week.is_available(pid):
                errors.append(f"Player {label(pid)} is scheduled but is marked "
                              f"unavailable")
        if schedule.week_id != week.id:
            errors.append(f"Schedule belongs to week {schedule.week_id}, "
                          f"not {week.id}")

        for p in players or []:
            if week.is_available(p.id) and p.id not in counts:
                warnings.append(f"Available player {label(p.id)} is not scheduled")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation result as human-readable text."""
    lines = []
    lines.append("=" * 60)
    lines.append("VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("PASS: All hard constraints satisfied")
    else:
        lines.append(f"FAIL: {len(result['errors'])} hard constraint violations")

    if result["errors"]:
        lines.append(f"\nERRORS ({len(result['errors'])}):")
        for e in result["errors"]:
            lines.append(f"  - {e}")

    if result["warnings"]:
        lines.append(f"\nWARNINGS ({len(result['warnings'])}):")
        for w in result["warnings"]:
            lines.append(f"  - {w}")

    return "\n".join(lines)
