"""Weekly availability filtering."""

from teesheet.exceptions import ScheduleValidationError
from teesheet.models import Participant, Week
from teesheet.trail import GenerationLog


def filter_available(week: Week, players: list[Participant],
                     log: GenerationLog | None = None,
                     ) -> tuple[list[Participant], list[Participant]]:
    """Split players into (available, unavailable) for the week.

    Only an explicit True in the week's availability map counts as available.
    Input order is kept in both lists.
    """
    if week is None:
        raise ScheduleValidationError("Week is required for availability filtering")
    if players is None:
        raise ScheduleValidationError("Player list is required for availability filtering")

    available = []
    unavailable = []
    for player in players:
        status = week.availability_status(player.id)
        if status is True:
            available.append(player)
            reason = "explicitly available"
        elif week.has_availability_data(player.id):
            unavailable.append(player)
            reason = f"explicitly unavailable (status: {status})"
        else:
            unavailable.append(player)
            reason = "no availability data"
        if log is not None:
            log.decision(player.id, player.name, status, status is True, reason)

    return available, unavailable


def check_availability_data(week: Week, players: list[Participant]) -> dict:
    """Report how many players have an availability entry for the week.

    Returns dict with:
    - players_with_data, players_without_data: counts
    - coverage: percent of players with data (0 for an empty roster)
    - issues: list of human-readable problems
    """
    with_data = sum(1 for p in players if week.has_availability_data(p.id))
    without_data = len(players) - with_data
    coverage = round(with_data * 100 / len(players)) if players else 0

    issues = []
    if players:
        if coverage < 50:
            issues.append(
                f"Low availability data coverage: {coverage}% of players "
                f"have availability data"
            )
        elif coverage < 100:
            issues.append(
                f"Incomplete availability data: {without_data} players "
                f"missing availability data"
            )

    return {
        "players_with_data": with_data,
        "players_without_data": without_data,
        "coverage": coverage,
        "issues": issues,
    }
