"""Output formatters for teesheet."""

import csv
from io import StringIO
from pathlib import Path

from teesheet.models import Schedule, TimeSlot, Week


def format_schedule(schedule: Schedule, week: Week | None = None,
                    season_name: str = "") -> str:
    """Format schedule as human-readable text, morning then afternoon."""
    lines = []
    lines.append("=" * 60)
    title = season_name.upper() if season_name else "TEE SHEET"
    if week is not None:
        title += f" - WEEK {week.week_number} ({week.date.strftime('%a %m/%d/%Y')})"
    lines.append(title)
    lines.append("=" * 60)

    for slot in (TimeSlot.morning, TimeSlot.afternoon):
        foursomes = schedule.slot(slot)
        lines.append(f"\n--- {slot.value.upper()} ---")
        if not foursomes:
            lines.append("  (no groups)")
            continue
        for f in foursomes:
            names = ", ".join(p.name for p in f.players)
            short = "" if f.is_complete else f"  [{len(f.players)} players]"
            lines.append(f"  Group {f.position + 1}: {names}{short}")

    return "\n".join(lines)


def format_schedule_csv(schedule: Schedule) -> str:
    """One row per scheduled player.

    Columns: Slot, Group, Player_ID, First_Name, Last_Name, Handedness, Preference
    """
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Slot", "Group", "Player_ID", "First_Name", "Last_Name",
                     "Handedness", "Preference"])
    for f in schedule.all_foursomes():
        for p in f.players:
            writer.writerow([f.time_slot.value, f.position + 1, p.id,
                             p.first_name, p.last_name, p.handedness.value,
                             p.time_preference.value])
    return output.getvalue()


def write_schedule(schedule: Schedule, week: Week | None = None,
                   output_prefix: str = "output", season_name: str = ""):
    """Write schedule.txt and schedule.csv into {output_prefix}/."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(schedule, week, season_name) + "\n")
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_schedule_csv(schedule))
    print(f"Written: {csv_path}")
