"""Config loading and validation for teesheet."""

import logging
from dataclasses import dataclass, fields
from datetime import date
from pathlib import Path

import yaml

from teesheet.exceptions import ConfigurationError
from teesheet.models import Handedness, Participant, TimePreference, Week

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratorOptions:
    """Recognized schedule generation options.

    optimize_pairings: choose groups by pairing history instead of slicing
        the slot list in order.
    prioritize_complete_groups: form the full foursomes first and put the
        short group last; off puts the short group first.
    balance_time_slots: send Either players to the smaller slot; off splits
        them in half.
    record_pairings: after an optimized generation, add the week's pairs to
        the history store.
    """
    optimize_pairings: bool = True
    prioritize_complete_groups: bool = True
    balance_time_slots: bool = True
    record_pairings: bool = True

    @classmethod
    def from_dict(cls, data: dict | None) -> "GeneratorOptions":
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown generator options: {', '.join(unknown)}")
        for key, value in data.items():
            if not isinstance(value, bool):
                raise ConfigurationError(f"Option {key} must be true or false, got {value!r}")
        return cls(**data)


def parse_date(s: str) -> date:
    """Parse date string YYYY-MM-DD."""
    parts = s.strip().split("-")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def _parse_player(pdata: dict, season_id: str) -> Participant:
    pid = str(pdata.get("id", "")).strip()
    if not pid:
        raise ConfigurationError(f"Player entry without an id: {pdata}")
    try:
        pref = TimePreference.from_str(str(pdata.get("time_preference", "Either")))
        hand = Handedness.from_str(str(pdata.get("handedness", "right")))
    except ValueError as e:
        raise ConfigurationError(f"Player {pid}: {e}") from e
    return Participant(
        id=pid,
        first_name=str(pdata.get("first_name", pid)),
        last_name=str(pdata.get("last_name", "")),
        time_preference=pref,
        season_id=season_id,
        handedness=hand,
    )


def load_config(path: str | Path) -> dict:
    """Load and validate config YAML, returning structured data.

    Returns dict with:
    - season: {id, name}
    - options: GeneratorOptions
    - players: dict[id -> Participant], roster order
    - weeks: dict[week_number -> Week]
    - warnings: list of non-fatal problems
    """
    path = Path(path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError, ValueError) as e:
        # unquoted impossible dates fail inside the YAML loader
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e

    season_raw = raw.get("season") or {}
    if not season_raw.get("id"):
        raise ConfigurationError("Config needs a season with an id")

    season = {
        "id": str(season_raw["id"]),
        "name": season_raw.get("name", ""),
    }
    options = GeneratorOptions.from_dict(raw.get("options"))

    # Players
    players: dict[str, Participant] = {}
    for pdata in raw.get("players", []):
        player = _parse_player(pdata, season["id"])
        if player.id in players:
            raise ConfigurationError(f"Duplicate player id: {player.id}")
        players[player.id] = player

    # Weeks
    warnings = []
    weeks: dict[int, Week] = {}
    for wdata in raw.get("weeks", []):
        try:
            number = int(wdata["number"])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Week entry needs an integer number: {wdata}") from e
        if number in weeks:
            raise ConfigurationError(f"Duplicate week number: {number}")

        availability: dict[str, bool] = {}
        for pid in wdata.get("unavailable", []):
            availability[str(pid)] = False
        for pid in wdata.get("available", []):
            pid = str(pid)
            if availability.get(pid) is False:
                warnings.append(
                    f"Week {number}: {pid} listed as available and unavailable; "
                    f"treating as available"
                )
            availability[pid] = True

        for pid in availability:
            if pid not in players:
                warnings.append(f"Week {number}: unknown player {pid} in availability")

        try:
            week_date = parse_date(str(wdata["date"]))
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(
                f"Week {number}: date must be YYYY-MM-DD, got {wdata.get('date')!r}"
            ) from e

        weeks[number] = Week(
            id=str(wdata.get("id", f"{season['id']}-w{number}")),
            season_id=season["id"],
            week_number=number,
            date=week_date,
            player_availability=availability,
        )

    for w in warnings:
        logger.warning(w)

    return {
        "season": season,
        "options": options,
        "players": players,
        "weeks": weeks,
        "warnings": warnings,
    }
