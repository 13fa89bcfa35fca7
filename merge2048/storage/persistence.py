"""
Persistence of best score, leaderboard, player name and saved games.

`ScoreKeeper` listens to the engine's events and writes through a `KeyValueStore`. Every store
failure is logged and absorbed here, so gameplay never sees a storage error.
"""

import json
import logging
from typing import Optional
from urllib.parse import quote

from merge2048.addons.types import LeaderboardEntry, SavedGame
from merge2048.engine.events import GAME_OVER, SCORE_IMPROVED, EventBus
from merge2048.storage.store import KeyValueStore

# ##>: Module logger.
_logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "2048-best-score"
LEADERBOARD_KEY = "2048-leaderboard"
PLAYER_NAME_KEY = "2048-player-name"
GAME_STATE_KEY = "2048-game-state"

LEADERBOARD_SIZE = 10

# ##>: Characters left unescaped in slot keys, as a browser's encodeURIComponent does.
SLOT_SAFE_CHARS = "-_.!~*'()"


class ScoreKeeper:
    """
    Event-listening persistence layer.

    Parameters
    ----------
    store : KeyValueStore
        Where values are written.
    events : EventBus, optional
        When given, the keeper persists the best score on ``score-improved`` and appends to the
        leaderboard on ``game-over``.
    """

    def __init__(self, store: KeyValueStore, events: Optional[EventBus] = None):
        self.store = store
        if events is not None:
            events.subscribe(SCORE_IMPROVED, self._on_score_improved)
            events.subscribe(GAME_OVER, self._on_game_over)

    # ##: Guarded store access.

    def _get(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except Exception:
            _logger.exception("Failed to read %s from store", key)
            return None

    def _set(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
        except Exception:
            _logger.exception("Failed to write %s to store", key)
            return False
        return True

    # ##: Best score.

    def load_best_score(self) -> int:
        """Read the best score, 0 when missing or unreadable."""
        saved = self._get(BEST_SCORE_KEY)
        if not saved:
            return 0
        try:
            return int(saved)
        except ValueError:
            _logger.warning("Ignoring invalid best score %r", saved)
            return 0

    def save_best_score(self, best_score: int) -> bool:
        return self._set(BEST_SCORE_KEY, str(best_score))

    def _on_score_improved(self, best_score: int, **_) -> None:
        self.save_best_score(best_score)

    # ##: Leaderboard.

    def leaderboard(self) -> list[LeaderboardEntry]:
        """
        Read the leaderboard.

        Returns
        -------
        list[LeaderboardEntry]
            Entries sorted by descending score; empty when missing or unreadable.
        """
        saved = self._get(LEADERBOARD_KEY)
        if not saved:
            return []
        try:
            entries = [LeaderboardEntry.from_dict(item) for item in json.loads(saved)]
        except (ValueError, TypeError, KeyError, AttributeError):
            _logger.warning("Ignoring corrupt leaderboard")
            return []
        return sorted(entries, key=lambda entry: entry.score, reverse=True)

    def record_score(self, entry: LeaderboardEntry) -> list[LeaderboardEntry]:
        """
        Insert a finished game and keep the best entries.

        Returns
        -------
        list[LeaderboardEntry]
            The updated leaderboard, at most ten entries sorted by descending score.
        """
        entries = self.leaderboard()
        entries.append(entry)
        entries.sort(key=lambda item: item.score, reverse=True)
        entries = entries[:LEADERBOARD_SIZE]
        self._set(LEADERBOARD_KEY, json.dumps([item.to_dict() for item in entries], ensure_ascii=False))
        return entries

    def _on_game_over(self, entry: LeaderboardEntry, **_) -> None:
        self.record_score(entry)

    # ##: Player identity.

    def load_player_name(self, default: str) -> str:
        return self._get(PLAYER_NAME_KEY) or default

    def save_player_name(self, name: str) -> bool:
        return self._set(PLAYER_NAME_KEY, name)

    # ##: Save slots.

    @staticmethod
    def slot_key(user: str) -> str:
        """Key of a user's save slot."""
        return f"{GAME_STATE_KEY}-{quote(user, safe=SLOT_SAFE_CHARS)}"

    def save_game(self, user: str, saved: SavedGame) -> bool:
        return self._set(self.slot_key(user), saved.to_json())

    def load_game(self, user: str, size: int, now: float) -> Optional[SavedGame]:
        """
        Read a user's saved game.

        Games saved before slots were scoped per user are read from the legacy key and copied into
        the user's slot.

        Returns
        -------
        SavedGame or None
            The saved game, or None when there is none or it cannot be parsed.
        """
        key = self.slot_key(user)
        payload = self._get(key)
        if not payload:
            payload = self._get(GAME_STATE_KEY)
            if payload:
                self._set(key, payload)
        if not payload:
            return None

        try:
            return SavedGame.from_json(payload, size=size, now=now)
        except (TypeError, ValueError) as error:
            _logger.warning("Ignoring corrupt saved game for %s: %s", user, error)
            return None
