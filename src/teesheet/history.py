"""Pairing history stores.

A store keeps one PairingHistory per season and must make add_pairing an
atomic read-modify-write: concurrent increments for the same season are
never lost. Both stores here serialize writes with a lock.
"""

import logging
import threading
from pathlib import Path

import yaml

from teesheet.exceptions import PairingHistoryError
from teesheet.models import PairKey, PairingHistory

logger = logging.getLogger(__name__)


class PairingHistoryStore:
    """Interface for season pairing counts."""

    def add_pairing(self, season_id: str, player1_id: str, player2_id: str) -> None:
        raise NotImplementedError

    def get_pairing_count(self, season_id: str, player1_id: str,
                          player2_id: str) -> int:
        raise NotImplementedError

    def get_all_pairings_for_player(self, season_id: str,
                                    player_id: str) -> list[tuple[str, int]]:
        raise NotImplementedError

    def reset(self, season_id: str) -> None:
        raise NotImplementedError


class InMemoryPairingHistoryStore(PairingHistoryStore):
    """Process-local store. Safe to share between threads."""

    def __init__(self, histories: dict[str, PairingHistory] | None = None):
        self._histories: dict[str, PairingHistory] = dict(histories or {})
        self._lock = threading.Lock()

    def _history(self, season_id: str) -> PairingHistory:
        # caller holds the lock
        if season_id not in self._histories:
            self._histories[season_id] = PairingHistory(season_id=season_id)
        return self._histories[season_id]

    def add_pairing(self, season_id, player1_id, player2_id):
        with self._lock:
            self._history(season_id).add_pairing(player1_id, player2_id)

    def get_pairing_count(self, season_id, player1_id, player2_id):
        with self._lock:
            history = self._histories.get(season_id)
            if history is None:
                return 0
            return history.get_pairing_count(player1_id, player2_id)

    def get_all_pairings_for_player(self, season_id, player_id):
        with self._lock:
            history = self._histories.get(season_id)
            if history is None:
                return []
            return history.get_all_pairings_for_player(player_id)

    def reset(self, season_id):
        with self._lock:
            if season_id in self._histories:
                self._histories[season_id].reset()
        logger.info("Pairing history reset for season %s", season_id)

    def snapshot(self, season_id: str) -> dict[PairKey, int]:
        """Copy of the season's pair counts."""
        with self._lock:
            history = self._histories.get(season_id)
            return dict(history.pairings) if history else {}


class YamlPairingHistoryStore(InMemoryPairingHistoryStore):
    """Store backed by a YAML file, rewritten after every change.

    File layout: {season_id: {pairings: [[id, id, count], ...], last_updated: iso}}.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict[str, PairingHistory]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                raw = yaml.safe_load(f) or {}
            return {
                str(season_id): PairingHistory.from_dict(str(season_id), data or {})
                for season_id, data in raw.items()
            }
        except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
            raise PairingHistoryError(
                f"Cannot load pairing history from {self.path}: {e}"
            ) from e

    def _save(self) -> None:
        # caller holds the lock
        data = {sid: h.to_dict() for sid, h in self._histories.items()}
        try:
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp, "w") as f:
                yaml.safe_dump(data, f, sort_keys=True)
            tmp.replace(self.path)
        except OSError as e:
            raise PairingHistoryError(
                f"Cannot write pairing history to {self.path}: {e}"
            ) from e

    def add_pairing(self, season_id, player1_id, player2_id):
        with self._lock:
            self._history(season_id).add_pairing(player1_id, player2_id)
            self._save()

    def reset(self, season_id):
        with self._lock:
            if season_id in self._histories:
                self._histories[season_id].reset()
                self._save()
        logger.info("Pairing history reset for season %s (%s)", season_id, self.path)
