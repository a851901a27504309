"""Debug trail of schedule generation steps and filtering decisions."""

import logging
from datetime import datetime
from typing import Any, Optional

from teesheet.models import DebugInfo, FilteringDecision, GenerationStep, Schedule

logger = logging.getLogger("teesheet.generation")


class GenerationLog:
    """Collects the steps of one generation call.

    Every entry is mirrored to the "teesheet.generation" logger, so the trail
    is visible in normal logging output as well as through DebugInfo.
    """

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self.steps: list[GenerationStep] = []
        self.decisions: list[FilteringDecision] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.start_time = datetime.now()
        self.end_time: Optional[datetime] = None

    def step(self, step: str, data: dict[str, Any] | None = None,
             success: bool = True, error: str | None = None) -> None:
        self.steps.append(GenerationStep(
            step=step,
            timestamp=datetime.now(),
            success=success,
            error=error,
            data=data,
        ))
        if success:
            logger.debug("%s %s", step, data or "")
        else:
            self.errors.append(error or step)
            logger.error("%s: %s", step, error)

    def decision(self, player_id: str, player_name: str,
                 status: Optional[bool], included: bool, reason: str) -> None:
        self.decisions.append(FilteringDecision(
            player_id=player_id,
            player_name=player_name,
            availability_status=status,
            decision="included" if included else "excluded",
            reason=reason,
            timestamp=datetime.now(),
        ))

    def warning(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def mark_complete(self) -> None:
        self.end_time = datetime.now()

    def debug_info(self, week_id: str, season_id: str, total_players: int,
                   schedule: Schedule | None) -> DebugInfo:
        return DebugInfo(
            week_id=week_id,
            season_id=season_id,
            total_players=total_players,
            available_players=[d.player_id for d in self.decisions
                               if d.decision == "included"],
            unavailable_players=[d.player_id for d in self.decisions
                                 if d.decision == "excluded"],
            filtering_decisions=list(self.decisions),
            generation_steps=list(self.steps),
            warnings=list(self.warnings),
            errors=list(self.errors),
            start_time=self.start_time,
            end_time=self.end_time,
            schedule=schedule,
        )
