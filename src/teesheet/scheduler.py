"""Schedule generation engine for teesheet.

One pass per call:
1. Validate the week (season id and week id must be present)
2. Filter the roster by the week's availability
3. Assign available players to morning/afternoon
4. Build foursomes per slot, by pairing history when enabled
5. Record the week's pairings in the history store when enabled
6. Return the Schedule

Each call keeps its own GenerationLog. Only the finished DebugInfo is kept
on the generator, so one generator can serve several threads at once.

An empty roster or a week nobody is available for gives an empty but valid
Schedule. Only malformed input raises.
"""

import logging
import threading

from teesheet.availability import check_availability_data, filter_available
from teesheet.config import GeneratorOptions
from teesheet.exceptions import PairingHistoryError, ScheduleValidationError
from teesheet.foursomes import build_foursomes
from teesheet.models import (
    MAX_GROUP_SIZE, DebugInfo, Participant, Schedule, TimeSlot, Week,
)
from teesheet.slots import assign_time_slots, partition_by_preference, slot_imbalance
from teesheet.trail import GenerationLog
from teesheet.tracker import PairingHistoryTracker

logger = logging.getLogger(__name__)


def schedule_id(week_id: str) -> str:
    return f"schedule-{week_id}"


class ScheduleGenerator:
    """Builds a week's Schedule from the roster and its availability."""

    def __init__(self, options: GeneratorOptions | None = None,
                 tracker: PairingHistoryTracker | None = None):
        self.options = options or GeneratorOptions()
        self.tracker = tracker
        self.last_debug_info: DebugInfo | None = None
        self._debug_infos: dict[str, DebugInfo] = {}
        self._lock = threading.Lock()

    @property
    def optimizing(self) -> bool:
        return self.options.optimize_pairings and self.tracker is not None

    def debug_info_for(self, week_id: str) -> DebugInfo | None:
        """DebugInfo of the latest finished call for a week."""
        with self._lock:
            return self._debug_infos.get(week_id)

    def _keep_debug_info(self, info: DebugInfo) -> None:
        with self._lock:
            self._debug_infos[info.week_id] = info
            self.last_debug_info = info

    def generate_schedule_for_week(self, week: Week,
                                   players: list[Participant]) -> Schedule:
        """Generate the schedule for a week from the full season roster."""
        log = GenerationLog()

        if week is None:
            raise ScheduleValidationError("Week is required")
        week_id = (week.id or "").strip()
        season_id = (week.season_id or "").strip()
        total = len(players) if players is not None else 0

        schedule = None
        try:
            if not season_id:
                raise ScheduleValidationError(
                    f"Week {week.id or '?'} has no season id")
            if not week_id:
                raise ScheduleValidationError("Week id is required and cannot be empty")
            if players is None:
                raise ScheduleValidationError("Player list is required")

            log.step("Starting schedule generation for week", {
                "week_id": week_id,
                "week_number": week.week_number,
                "season_id": season_id,
                "total_players": total,
            })

            coverage = check_availability_data(week, players)
            log.step("Availability data checked", coverage)
            for issue in coverage["issues"]:
                log.warning(issue)

            available, unavailable = filter_available(week, players, log)
            log.step("Player filtering completed", {
                "available": len(available),
                "excluded": len(unavailable),
            })

            schedule = self._generate(week_id, available, season_id, log)
        except ScheduleValidationError as e:
            log.step("Schedule generation failed", success=False, error=str(e))
            raise
        except PairingHistoryError as e:
            # schedule is structurally valid; only recording failed
            log.step("Pairing recording failed", success=False, error=str(e))
            raise
        finally:
            log.mark_complete()
            self._keep_debug_info(log.debug_info(week_id, season_id, total, schedule))

        logger.info("Week %s: %d morning / %d afternoon foursomes, %d players",
                    week_id, len(schedule.morning), len(schedule.afternoon),
                    schedule.total_player_count())
        return schedule

    def generate_schedule(self, week_id: str, available: list[Participant],
                          season_id: str | None = None) -> Schedule:
        """Generate from an already filtered list of available players.

        The season id defaults to the players' own; players from more than
        one season are rejected.
        """
        log = GenerationLog()
        if not week_id or not week_id.strip():
            raise ScheduleValidationError("Week id is required and cannot be empty")
        if available is None:
            raise ScheduleValidationError("Available players list is required")

        seasons = {p.season_id for p in available}
        if len(seasons) > 1:
            raise ScheduleValidationError(
                f"All players must be from the same season, got {sorted(seasons)}")
        if season_id is None and seasons:
            season_id = seasons.pop()

        schedule = None
        try:
            schedule = self._generate(week_id, available, season_id, log)
        finally:
            log.mark_complete()
            self._keep_debug_info(log.debug_info(
                week_id, season_id or "", len(available), schedule))
        return schedule

    def _generate(self, week_id: str, available: list[Participant],
                  season_id: str | None, log: GenerationLog) -> Schedule:
        schedule = Schedule(id=schedule_id(week_id), week_id=week_id)
        if not available:
            log.warning("No available players; returning empty schedule. "
                        "Check the week's availability data.")
            return schedule
        if len(available) < MAX_GROUP_SIZE:
            log.warning(
                f"Only {len(available)} players available; "
                f"no complete foursome is possible")

        am, pm, either = partition_by_preference(available)
        log.step("Time preference separation completed", {
            "am": len(am), "pm": len(pm), "either": len(either),
        })

        morning, afternoon = assign_time_slots(
            available, balance=self.options.balance_time_slots)
        log.step("Time slot assignment completed", {
            "morning": len(morning),
            "afternoon": len(afternoon),
            "strict_imbalance": abs(len(am) - len(pm)),
            "final_imbalance": slot_imbalance(morning, afternoon),
        })

        tracker = self.tracker if self.optimizing else None
        for slot, slot_players in ((TimeSlot.morning, morning),
                                   (TimeSlot.afternoon, afternoon)):
            foursomes = build_foursomes(
                slot_players, slot, week_id,
                tracker=tracker,
                season_id=season_id,
                prioritize_complete_groups=self.options.prioritize_complete_groups,
            )
            for f in foursomes:
                schedule.add_foursome(f)
            log.step(f"Created {slot.value} foursomes", {
                "players": len(slot_players),
                "foursomes": len(foursomes),
                "complete": sum(1 for f in foursomes if f.is_complete),
                "optimized": tracker is not None and bool(season_id),
            })

        if tracker is not None and season_id and self.options.record_pairings:
            recorded = self.tracker.track_schedule_pairings(season_id, schedule)
            log.step("Pairings recorded", {"pairs": recorded})

        log.step("Schedule assembly completed", {
            "morning_foursomes": len(schedule.morning),
            "afternoon_foursomes": len(schedule.afternoon),
            "total_players": schedule.total_player_count(),
        })
        return schedule

    def finalize_schedule(self, schedule: Schedule, season_id: str) -> int:
        """Record a schedule's pairings, e.g. after it has been saved.

        Use with record_pairings off so that a failed save is not counted.
        """
        if self.tracker is None:
            return 0
        return self.tracker.track_schedule_pairings(season_id, schedule)
