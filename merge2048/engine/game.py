"""2048 game engine: board, moves, score, undo history and terminal state."""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from numpy import asarray, int64, ndarray, zeros

from merge2048.addons.config import EngineConfiguration
from merge2048.addons.types import (
    GameStats,
    HistorySnapshot,
    LeaderboardEntry,
    Merge,
    MoveAnimation,
    MoveResult,
    SavedGame,
    SpawnedTile,
)
from merge2048.core.gameboard import is_done, slide_and_merge
from merge2048.core.gamemove import parse_direction
from merge2048.engine.events import GAME_OVER, MERGE, MOVE, NEW_GAME, SCORE_IMPROVED, UNDO, WIN, EventBus
from merge2048.engine.history import History
from merge2048.engine.spawner import NoSpawner, RandomSpawner, TileSpawner
from merge2048.storage.persistence import ScoreKeeper
from merge2048.storage.store import KeyValueStore, MemoryStore

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class GameEngine:
    """
    2048 game engine.

    This class owns a single board and implements the move/merge algorithm, scoring, the bounded
    undo history and win/loss detection. Collaborators observe it through `events`.

    Parameters
    ----------
    config : EngineConfiguration, optional
        Board size, history depth, win value and spawning options.
    store : KeyValueStore, optional
        Where best score, leaderboard, player name and saved games are kept (default is an
        in-memory store).
    spawner : TileSpawner, optional
        Spawning strategy. Defaults to `NoSpawner` in test mode and a `RandomSpawner` otherwise.
    event_bus : EventBus, optional
        Bus on which domain events are emitted.
    clock : Callable[[], float], optional
        Source of POSIX timestamps (default is `time.time`).

    Notes
    -----
    The engine starts on an empty board; call `new_game` to place the two initial tiles.
    """

    def __init__(
        self,
        config: Optional[EngineConfiguration] = None,
        store: Optional[KeyValueStore] = None,
        spawner: Optional[TileSpawner] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or EngineConfiguration()
        self.size = self.config.size
        self.events = event_bus or EventBus()
        self.keeper = ScoreKeeper(store if store is not None else MemoryStore(), self.events)
        self._clock = clock

        if spawner is None:
            if self.config.test_mode:
                spawner = NoSpawner()
            else:
                spawner = RandomSpawner(probs=self.config.spawn_probs, seed=self.config.seed)
        self._spawner = spawner

        self._history = History(capacity=self.config.max_history)
        self.best_score = self.keeper.load_best_score()
        self.player_name = self.keeper.load_player_name(self.config.default_player)
        self.current_user = self.player_name

        self.init_board()

    @property
    def board(self) -> ndarray:
        """The current board. Cells may be assigned directly for tests and debugging."""
        return self._board

    @board.setter
    def board(self, value) -> None:
        board = asarray(value, dtype=int64)
        if board.shape != (self.size, self.size):
            raise ValueError(f'board must have shape {(self.size, self.size)}, got {board.shape}')
        self._board = board.copy()

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def elapsed_seconds(self) -> int:
        return int(self._clock() - self.start_time)

    def init_board(self) -> None:
        """
        Reset to an empty board.

        Score, move count, win and game-over flags are cleared, the start time is recorded and the
        undo history is emptied.
        """
        self._board = zeros((self.size, self.size), dtype=int64)
        self.score = 0
        self.move_count = 0
        self.game_over = False
        self.won = False
        self.start_time = self._clock()
        self._history.clear()

    def new_game(self) -> ndarray:
        """
        Start a new game with two initial tiles.

        Returns
        -------
        ndarray
            A copy of the fresh board.
        """
        self.init_board()
        self.spawn_random_tile()
        self.spawn_random_tile()
        _logger.info('New game for %s', self.current_user)
        self.events.emit(NEW_GAME, board=self._board.copy())
        return self._board.copy()

    def spawn_random_tile(self) -> SpawnedTile | None:
        """
        Place a new tile on a random empty cell.

        Returns
        -------
        SpawnedTile or None
            The spawned tile, or None when the board is full or spawning is suppressed.
        """
        return self._spawner.spawn(self._board)

    def move(self, direction) -> MoveResult:
        """
        Play a move.

        Parameters
        ----------
        direction : Direction or str
            One of left, up, right or down. Anything else is a no-op.

        Returns
        -------
        MoveResult
            Whether the board changed, the spawned tile, the merged cells and one animation record
            per moved source tile.

        Notes
        -----
        - A snapshot is pushed before the move and discarded again if nothing moved, so the
          history only holds states preceding effective moves.
        - After an effective move the move count is incremented, a tile is spawned, the best score
          is updated and the game-over status is recomputed.
        """
        if self.game_over:
            return MoveResult(moved=False)

        parsed = parse_direction(direction)
        if parsed is None:
            _logger.warning('Ignoring unknown direction %r', direction)
            return MoveResult(moved=False)

        self._history.push(self._snapshot())
        board, score_delta, animations = slide_and_merge(self._board, parsed)

        if not animations:
            self._history.discard_last()
            return MoveResult(moved=False)

        # ##: Commit the move.
        self._board = board
        self.score += score_delta
        self.move_count += 1
        merges = self._find_merges(animations)
        newly_won = self._check_win(merges)

        tiles = []
        tile = self.spawn_random_tile()
        if tile is not None:
            tiles.append(tile)

        _logger.debug('Moved %s: +%d points, spawned %s', parsed.value, score_delta, tile)
        if merges:
            self.events.emit(MERGE, merges=merges)
        if newly_won:
            self.events.emit(WIN, score=self.score, moves=self.move_count)

        if self.score > self.best_score:
            self.best_score = self.score
            self.events.emit(SCORE_IMPROVED, best_score=self.best_score)

        result = MoveResult(
            moved=True, tiles=tiles, merges=merges, move_animations=animations, score_delta=score_delta
        )
        self.events.emit(MOVE, direction=parsed, result=result)
        self.check_game_over()
        return result

    @staticmethod
    def _find_merges(animations: list[MoveAnimation]) -> list[Merge]:
        """Distinct merged destinations, in animation order."""
        merges: dict[tuple[int, int], Merge] = {}
        for animation in animations:
            if animation.merged:
                key = (animation.target.row, animation.target.col)
                merges.setdefault(key, Merge(row=key[0], col=key[1], value=animation.result_value))
        return list(merges.values())

    def _check_win(self, merges: list[Merge]) -> bool:
        """Set the sticky win flag when a merge produced the win value for the first time."""
        if self.won or not any(merge.value == self.config.win_value for merge in merges):
            return False
        self.won = True
        _logger.info('Reached %d with score %d', self.config.win_value, self.score)
        return True

    def _snapshot(self) -> HistorySnapshot:
        return HistorySnapshot(board=self._board.copy(), score=self.score, move_count=self.move_count)

    def undo(self) -> bool:
        """
        Restore the state preceding the last effective move.

        Returns
        -------
        bool
            False when there is nothing to undo.

        Notes
        -----
        Undo always clears the game-over flag. The win flag is left as it is.
        """
        snapshot = self._history.pop()
        if snapshot is None:
            return False

        self._board = snapshot.board.copy()
        self.score = snapshot.score
        self.move_count = snapshot.move_count
        self.game_over = False
        self.events.emit(UNDO, score=self.score, moves=self.move_count)
        return True

    def check_game_over(self) -> bool:
        """
        Check whether any move is still possible.

        Returns
        -------
        bool
            True when the board is full and no cell equals its right or bottom neighbour.

        Notes
        -----
        On the terminating path the game-over flag is set and, the first time, a ``game-over``
        event carrying the leaderboard entry is emitted. Otherwise nothing is mutated.
        """
        if not is_done(self._board):
            return False

        if not self.game_over:
            self.game_over = True
            entry = LeaderboardEntry(
                score=self.score,
                moves=self.move_count,
                time=self.elapsed_seconds,
                date=datetime.now(timezone.utc).isoformat(),
                name=self.player_name or self.config.default_player,
            )
            _logger.info('Game over: score %d in %d moves', self.score, self.move_count)
            self.events.emit(GAME_OVER, entry=entry)
        return True

    def get_stats(self) -> GameStats:
        return GameStats(
            score=self.score,
            best_score=self.best_score,
            moves=self.move_count,
            elapsed_seconds=self.elapsed_seconds,
            can_undo=self.can_undo,
        )

    # ##: Player identity and save slots.

    def set_player_name(self, name: Optional[str]) -> None:
        self.player_name = name or self.config.default_player
        self.keeper.save_player_name(self.player_name)

    def set_current_user(self, name: Optional[str]) -> None:
        self.current_user = name or self.config.default_player

    def save_game(self) -> bool:
        """Write the game in progress to the current user's save slot."""
        saved = SavedGame(
            board=self._board.tolist(),
            score=self.score,
            move_count=self.move_count,
            start_time=self.start_time,
            timestamp=self._clock(),
        )
        return self.keeper.save_game(self.current_user, saved)

    def load_game(self) -> bool:
        """
        Restore the current user's saved game.

        Returns
        -------
        bool
            False, with the engine left untouched, when there is no readable save.
        """
        saved = self.keeper.load_game(self.current_user, size=self.size, now=self._clock())
        if saved is None:
            return False

        self.board = saved.board
        self.score = saved.score
        self.move_count = saved.move_count
        self.start_time = saved.start_time
        self.game_over = False
        self._history.clear()
        _logger.info('Loaded saved game for %s (score %d)', self.current_user, self.score)
        return True

    def resume_or_new_game(self) -> ndarray:
        """
        Resume the current user's saved game, or start a new one when none can be read.

        Returns
        -------
        ndarray
            A copy of the board in play.
        """
        if not self.load_game():
            return self.new_game()
        return self._board.copy()
