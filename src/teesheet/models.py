"""Data models for the teesheet scheduling engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class TimePreference(Enum):
    AM = "AM"
    PM = "PM"
    Either = "Either"

    @classmethod
    def from_str(cls, s: str) -> "TimePreference":
        key = s.strip().lower()
        if key in ("am", "morning"):
            return cls.AM
        if key in ("pm", "afternoon"):
            return cls.PM
        if key in ("either", "any"):
            return cls.Either
        raise ValueError(f"Unknown time preference: {s!r}")


class Handedness(Enum):
    left = "left"
    right = "right"

    @classmethod
    def from_str(cls, s: str) -> "Handedness":
        return cls(s.strip().lower())


class TimeSlot(Enum):
    morning = "morning"
    afternoon = "afternoon"

    def accepts(self, pref: TimePreference) -> bool:
        """Whether a player with this preference may play in this slot."""
        if pref == TimePreference.Either:
            return True
        if self == TimeSlot.morning:
            return pref == TimePreference.AM
        return pref == TimePreference.PM


MAX_GROUP_SIZE = 4


@dataclass(frozen=True)
class Participant:
    """A rostered player in a season."""
    id: str
    first_name: str
    last_name: str
    time_preference: TimePreference
    season_id: str
    handedness: Handedness = Handedness.right

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Week:
    """One scheduling period with per-player availability.

    A player missing from player_availability is unavailable.
    """
    id: str
    season_id: str
    week_number: int
    date: date
    player_availability: dict[str, bool] = field(default_factory=dict)

    def is_available(self, player_id: str) -> bool:
        return self.player_availability.get(player_id) is True

    def has_availability_data(self, player_id: str) -> bool:
        return player_id in self.player_availability

    def availability_status(self, player_id: str) -> Optional[bool]:
        return self.player_availability.get(player_id)


@dataclass
class Foursome:
    """A group of one to four players sharing a tee time."""
    id: str
    time_slot: TimeSlot
    position: int
    players: list[Participant]

    def __post_init__(self):
        if not 1 <= len(self.players) <= MAX_GROUP_SIZE:
            raise ValueError(
                f"Foursome {self.id} must hold 1-{MAX_GROUP_SIZE} players, "
                f"got {len(self.players)}"
            )

    @property
    def is_complete(self) -> bool:
        return len(self.players) == MAX_GROUP_SIZE

    def player_ids(self) -> list[str]:
        return [p.id for p in self.players]


@dataclass
class Schedule:
    """A week's morning and afternoon foursomes."""
    id: str
    week_id: str
    morning: list[Foursome] = field(default_factory=list)
    afternoon: list[Foursome] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    last_modified: datetime = field(default_factory=datetime.now)

    def slot(self, time_slot: TimeSlot) -> list[Foursome]:
        return self.morning if time_slot == TimeSlot.morning else self.afternoon

    def add_foursome(self, foursome: Foursome) -> None:
        self.slot(foursome.time_slot).append(foursome)
        self.last_modified = datetime.now()

    def all_foursomes(self) -> list[Foursome]:
        return self.morning + self.afternoon

    def all_player_ids(self) -> list[str]:
        return [pid for f in self.all_foursomes() for pid in f.player_ids()]

    def total_player_count(self) -> int:
        return sum(len(f.players) for f in self.all_foursomes())


PairKey = tuple[str, str]


def pair_key(player1_id: str, player2_id: str) -> PairKey:
    """Canonical key for an unordered pair: the two ids, sorted."""
    if player1_id < player2_id:
        return (player1_id, player2_id)
    return (player2_id, player1_id)


@dataclass
class PairingHistory:
    """How often each pair of players has shared a foursome in a season."""
    season_id: str
    pairings: dict[PairKey, int] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=datetime.now)

    def add_pairing(self, player1_id: str, player2_id: str) -> None:
        if not player1_id or not player1_id.strip():
            raise ValueError("First player ID is required")
        if not player2_id or not player2_id.strip():
            raise ValueError("Second player ID is required")
        if player1_id == player2_id:
            raise ValueError("Cannot pair a player with themselves")
        key = pair_key(player1_id, player2_id)
        self.pairings[key] = self.pairings.get(key, 0) + 1
        self.last_updated = datetime.now()

    def get_pairing_count(self, player1_id: str, player2_id: str) -> int:
        if player1_id == player2_id:
            return 0
        return self.pairings.get(pair_key(player1_id, player2_id), 0)

    def get_all_pairings_for_player(self, player_id: str) -> list[tuple[str, int]]:
        """Return (partner_id, count) for every partner, most frequent first."""
        result = []
        for (a, b), count in self.pairings.items():
            if a == player_id:
                result.append((b, count))
            elif b == player_id:
                result.append((a, count))
        result.sort(key=lambda item: (-item[1], item[0]))
        return result

    def reset(self) -> None:
        self.pairings = {}
        self.last_updated = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        """Serializable form; each pair is stored as [id, id, count]."""
        return {
            "pairings": [[a, b, count]
                         for (a, b), count in sorted(self.pairings.items())],
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, season_id: str, data: dict[str, Any]) -> "PairingHistory":
        pairings = {}
        for entry in data.get("pairings") or []:
            if not isinstance(entry, (list, tuple)) or len(entry) != 3:
                raise ValueError(f"Invalid pairing entry {entry!r}")
            a, b, count = str(entry[0]), str(entry[1]), int(entry[2])
            if not a or not b or a == b or count < 0:
                raise ValueError(f"Invalid pairing entry {entry!r}")
            key = pair_key(a, b)
            pairings[key] = pairings.get(key, 0) + count
        last = data.get("last_updated")
        if isinstance(last, str):
            last = datetime.fromisoformat(last)
        return cls(
            season_id=season_id,
            pairings=pairings,
            last_updated=last or datetime.now(),
        )


@dataclass
class GenerationStep:
    """One entry in the schedule generation debug trail."""
    step: str
    timestamp: datetime
    success: bool
    error: Optional[str] = None
    data: Optional[dict[str, Any]] = None


@dataclass
class FilteringDecision:
    """Why a player was included in or excluded from a week."""
    player_id: str
    player_name: str
    availability_status: Optional[bool]
    decision: str  # "included" or "excluded"
    reason: str
    timestamp: datetime


@dataclass
class DebugInfo:
    """Everything recorded during one generation call."""
    week_id: str
    season_id: str
    total_players: int
    available_players: list[str]
    unavailable_players: list[str]
    filtering_decisions: list[FilteringDecision]
    generation_steps: list[GenerationStep]
    warnings: list[str]
    errors: list[str]
    start_time: datetime
    end_time: Optional[datetime] = None
    schedule: Optional[Schedule] = None
