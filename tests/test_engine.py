"""
Comprehensive tests for the 2048 game engine.

Tests cover the move pipeline, scoring, win and game-over detection, the bounded undo history and
statistics, with spawning suppressed unless a test needs it.
"""

from unittest import TestCase, main

import numpy as np

from merge2048.addons.config import EngineConfiguration
from merge2048.addons.types import Merge, Position, SpawnedTile
from merge2048.core.gamemove import Direction
from merge2048.engine.events import GAME_OVER, MERGE, SCORE_IMPROVED, WIN
from merge2048.engine.game import GameEngine
from merge2048.engine.spawner import RandomSpawner
from merge2048.storage.persistence import BEST_SCORE_KEY
from merge2048.storage.store import MemoryStore


class FirstCellSpawner:
    """Spawn a fixed value on the first empty cell."""

    def __init__(self, value: int = 2):
        self.value = value

    def spawn(self, board):
        empty = np.argwhere(board == 0)
        if len(empty) == 0:
            return None
        row, col = int(empty[0][0]), int(empty[0][1])
        board[row, col] = self.value
        return SpawnedTile(row=row, col=col, value=self.value)


class Clock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def empty_board(*rows) -> list:
    """Board whose first rows are given and the others empty."""
    board = [list(row) for row in rows]
    return board + [[0, 0, 0, 0] for _ in range(4 - len(board))]


class TestInitialisation(TestCase):
    """Test a fresh engine and game resets."""

    def setUp(self):
        self.game = GameEngine(config=EngineConfiguration(test_mode=True))

    def test_init_board(self):
        """The board starts empty and every counter at zero."""
        self.assertEqual(self.game.board.shape, (4, 4))
        self.assertFalse(self.game.board.any())
        self.assertEqual(self.game.score, 0)
        self.assertEqual(self.game.move_count, 0)
        self.assertFalse(self.game.game_over)
        self.assertFalse(self.game.won)
        self.assertFalse(self.game.can_undo)

    def test_init_board_resets(self):
        """A reset clears the board, flags and history."""
        self.game.board = empty_board([2, 2, 0, 0])
        self.game.move('left')
        self.game.won = True
        self.game.init_board()
        self.assertFalse(self.game.board.any())
        self.assertEqual(self.game.score, 0)
        self.assertFalse(self.game.won)
        self.assertFalse(self.game.undo())

    def test_new_game_with_random_spawner(self):
        """A new game places two tiles of value 2 or 4."""
        game = GameEngine(config=EngineConfiguration(seed=42))
        board = game.new_game()
        self.assertEqual(np.count_nonzero(board), 2)
        self.assertTrue(np.all(np.isin(board[board != 0], [2, 4])))

    def test_new_game_returns_copy(self):
        """The returned board is not the engine's board."""
        board = self.game.new_game()
        board[0, 0] = 1024
        self.assertEqual(self.game.board[0, 0], 0)

    def test_board_setter_validates_shape(self):
        """Assigning a board of the wrong shape is refused."""
        with self.assertRaises(ValueError):
            self.game.board = [[2, 2], [2, 2]]

    def test_invalid_configuration(self):
        """Configurations that cannot describe a game are refused."""
        with self.assertRaises(ValueError):
            EngineConfiguration(size=1)
        with self.assertRaises(ValueError):
            EngineConfiguration(max_history=0)
        with self.assertRaises(ValueError):
            EngineConfiguration(spawn_probs={2: 0.5, 4: 0.2})


class TestSpawn(TestCase):
    """Test random tile spawning."""

    def test_spawn_on_empty_cell(self):
        """A tile of value 2 or 4 is placed on the board."""
        game = GameEngine(spawner=RandomSpawner(seed=7))
        tile = game.spawn_random_tile()
        self.assertIsNotNone(tile)
        self.assertIn(tile.value, (2, 4))
        self.assertTrue(tile.is_new)
        self.assertEqual(game.board[tile.row, tile.col], tile.value)
        self.assertEqual(np.count_nonzero(game.board), 1)

    def test_spawn_on_full_board(self):
        """Nothing is spawned on a full board."""
        game = GameEngine(spawner=RandomSpawner(seed=7))
        game.board = np.full((4, 4), 2)
        self.assertIsNone(game.spawn_random_tile())
        self.assertTrue(np.all(game.board == 2))

    def test_spawn_suppressed_in_test_mode(self):
        """Test mode never spawns."""
        game = GameEngine(config=EngineConfiguration(test_mode=True))
        self.assertIsNone(game.spawn_random_tile())
        game.board = empty_board([2, 0, 0, 0])
        result = game.move('right')
        self.assertEqual(result.tiles, [])
        self.assertEqual(np.count_nonzero(game.board), 1)

    def test_spawn_after_effective_move(self):
        """An effective move reports the spawned tile."""
        game = GameEngine(spawner=FirstCellSpawner(value=4))
        game.board = empty_board([0, 0, 0, 2])
        result = game.move('left')
        self.assertTrue(result.moved)
        self.assertEqual(result.tiles, [SpawnedTile(row=0, col=1, value=4)])
        self.assertEqual(game.board[0].tolist(), [2, 4, 0, 0])


class TestMove(TestCase):
    """Test the move pipeline."""

    def setUp(self):
        self.game = GameEngine(config=EngineConfiguration(test_mode=True))

    def test_merge_row_left(self):
        """Four equal tiles merge into two and score their values."""
        self.game.board = empty_board([2, 2, 2, 2])
        result = self.game.move('left')
        self.assertTrue(result.moved)
        self.assertEqual(self.game.board[0].tolist(), [4, 4, 0, 0])
        self.assertEqual(self.game.score, 8)
        self.assertEqual(self.game.move_count, 1)

    def test_merge_row_right(self):
        """Only the rightmost pair merges when moving right."""
        self.game.board = empty_board([4, 16, 2, 2])
        result = self.game.move('right')
        self.assertEqual(self.game.board[0].tolist(), [0, 4, 16, 4])
        self.assertEqual(self.game.score, 4)
        self.assertEqual(result.score_delta, 4)
        self.assertEqual(result.merges, [Merge(row=0, col=3, value=4)])
        self.assertEqual(len(result.move_animations), 4)
        self.assertEqual(sum(animation.merged for animation in result.move_animations), 2)

    def test_multiple_rows(self):
        """Every row merges independently and scores add up."""
        self.game.board = empty_board([2, 2, 0, 0], [4, 4, 0, 0], [2, 2, 2, 2])
        self.game.move('left')
        self.assertEqual(self.game.board[:3].tolist(), [[4, 0, 0, 0], [8, 0, 0, 0], [4, 4, 0, 0]])
        self.assertEqual(self.game.score, 4 + 8 + 8)

    def test_move_up_and_down(self):
        """Columns are compacted toward the top or the bottom."""
        self.game.board = [[2, 0, 0, 0], [0, 0, 0, 0], [2, 0, 0, 0], [0, 4, 0, 0]]
        self.game.move(Direction.UP)
        self.assertEqual(self.game.board[:, 0].tolist(), [4, 0, 0, 0])
        self.assertEqual(self.game.board[:, 1].tolist(), [4, 0, 0, 0])
        self.game.move('down')
        self.assertEqual(self.game.board[:, 0].tolist(), [0, 0, 0, 4])
        self.assertEqual(self.game.board[:, 1].tolist(), [0, 0, 0, 4])

    def test_no_op_move(self):
        """A move that changes nothing leaves no trace."""
        self.game.board = empty_board([2, 4, 8, 16])
        before = self.game.board.copy()
        result = self.game.move('left')
        self.assertFalse(result.moved)
        self.assertEqual(result.move_animations, [])
        np.testing.assert_array_equal(self.game.board, before)
        self.assertEqual(self.game.score, 0)
        self.assertEqual(self.game.move_count, 0)
        self.assertFalse(self.game.undo())

    def test_unknown_direction(self):
        """An unknown direction is a no-op."""
        self.game.board = empty_board([2, 2, 0, 0])
        with self.assertLogs('merge2048.engine.game', level='WARNING'):
            result = self.game.move('diagonal')
        self.assertFalse(result.moved)
        self.assertEqual(self.game.board[0].tolist(), [2, 2, 0, 0])
        self.assertFalse(self.game.can_undo)

    def test_direction_case_insensitive(self):
        """Direction tokens are not case sensitive."""
        self.game.board = empty_board([0, 0, 0, 2])
        self.assertTrue(self.game.move('LEFT').moved)

    def test_move_after_game_over(self):
        """A finished game refuses moves."""
        self.game.board = empty_board([2, 2, 0, 0])
        self.game.game_over = True
        result = self.game.move('left')
        self.assertFalse(result.moved)
        self.assertEqual(result.tiles, [])
        self.assertEqual(self.game.board[0].tolist(), [2, 2, 0, 0])

    def test_mirror_symmetry(self):
        """Moving a board left mirrors moving its reflection right."""
        rows = [[2, 2, 4, 0], [0, 8, 8, 8], [4, 0, 4, 2], [16, 16, 16, 16]]
        left = GameEngine(config=EngineConfiguration(test_mode=True))
        left.board = rows
        right = GameEngine(config=EngineConfiguration(test_mode=True))
        right.board = [row[::-1] for row in rows]

        left.move('left')
        right.move('right')
        np.testing.assert_array_equal(left.board, right.board[:, ::-1])
        self.assertEqual(left.score, right.score)

    def test_merges_reported_once(self):
        """A merged cell appears once in the merges, twice in the animations."""
        self.game.board = empty_board([2, 0, 2, 0], [0, 0, 0, 0], [8, 8, 0, 0])
        result = self.game.move('left')
        self.assertEqual(result.merges, [Merge(0, 0, 4), Merge(2, 0, 16)])
        targets = [animation.target for animation in result.move_animations if animation.merged]
        self.assertEqual(targets.count(Position(0, 0)), 2)

    def test_to_dict(self):
        """The result serialises to the camelCase shape."""
        self.game.board = empty_board([0, 2, 0, 0])
        payload = self.game.move('left').to_dict()
        self.assertEqual(
            payload,
            {
                'moved': True,
                'tiles': [],
                'merges': [],
                'moveAnimations': [
                    {
                        'from': {'row': 0, 'col': 1},
                        'to': {'row': 0, 'col': 0},
                        'value': 2,
                        'merged': False,
                        'resultValue': 2,
                    }
                ],
            },
        )


class TestWin(TestCase):
    """Test the sticky win flag."""

    def setUp(self):
        self.game = GameEngine(config=EngineConfiguration(test_mode=True))
        self.wins = []
        self.game.events.subscribe(WIN, lambda **payload: self.wins.append(payload))

    def test_merge_to_2048(self):
        """Merging two 1024 tiles wins the game."""
        self.game.board = empty_board([1024, 1024, 0, 0])
        self.game.move('left')
        self.assertTrue(self.game.won)
        self.assertEqual(self.game.board[0, 0], 2048)
        self.assertEqual(len(self.wins), 1)

    def test_merge_to_1024(self):
        """Merging two 512 tiles does not win."""
        self.game.board = empty_board([512, 512, 0, 0])
        self.game.move('left')
        self.assertFalse(self.game.won)
        self.assertEqual(self.wins, [])

    def test_won_is_sticky(self):
        """Later moves, merges beyond 2048 and undo keep the flag."""
        self.game.board = empty_board([1024, 1024, 0, 0], [2048, 2048, 0, 0])
        self.game.move('left')
        self.assertTrue(self.game.won)
        self.assertEqual(self.game.board[1, 0], 4096)

        self.game.move('right')
        self.assertTrue(self.game.won)
        self.assertTrue(self.game.undo())
        self.assertTrue(self.game.undo())
        self.assertTrue(self.game.won)
        self.assertEqual(len(self.wins), 1)


class TestUndo(TestCase):
    """Test the bounded undo history."""

    def setUp(self):
        self.game = GameEngine(config=EngineConfiguration(test_mode=True))

    def test_undo_restores_state(self):
        """Undo restores board, score and move count."""
        self.game.board = empty_board([2, 2, 4, 0])
        self.game.move('left')
        self.assertEqual(self.game.score, 4)

        self.assertTrue(self.game.undo())
        self.assertEqual(self.game.board[0].tolist(), [2, 2, 4, 0])
        self.assertEqual(self.game.score, 0)
        self.assertEqual(self.game.move_count, 0)
        self.assertFalse(self.game.undo())

    def test_undo_revives_game(self):
        """Undo clears the game-over flag."""
        self.game.board = empty_board([2, 0, 0, 0])
        self.game.move('right')
        self.game.game_over = True
        self.assertTrue(self.game.undo())
        self.assertFalse(self.game.game_over)

    def test_history_bound(self):
        """Only the last ten effective moves can be undone."""
        self.game.board = empty_board([2, 0, 0, 0])
        for index in range(12):
            self.assertTrue(self.game.move('right' if index % 2 == 0 else 'left').moved)

        undone = 0
        while self.game.undo():
            undone += 1
        self.assertEqual(undone, 10)
        self.assertEqual(self.game.move_count, 2)

    def test_no_op_does_not_evict(self):
        """A no-op move at full capacity leaves the history intact."""
        game = GameEngine(config=EngineConfiguration(test_mode=True, max_history=2))
        game.board = empty_board([2, 0, 0, 0])
        game.move('right')
        game.move('left')
        game.move('left')
        self.assertTrue(game.undo())
        self.assertTrue(game.undo())
        self.assertEqual(game.board[0].tolist(), [2, 0, 0, 0])


class TestGameOver(TestCase):
    """Test terminal state detection."""

    def setUp(self):
        self.store = MemoryStore()
        self.game = GameEngine(config=EngineConfiguration(test_mode=True), store=self.store)
        self.finished = []
        self.game.events.subscribe(GAME_OVER, lambda entry: self.finished.append(entry))

    def test_full_board_without_merges(self):
        """A full board with no equal neighbours ends the game."""
        self.game.board = [[2, 4, 8, 16], [16, 8, 4, 2], [2, 16, 8, 4], [8, 2, 4, 8]]
        self.assertTrue(self.game.check_game_over())
        self.assertTrue(self.game.game_over)
        self.assertEqual(len(self.finished), 1)

    def test_board_with_empty_cell(self):
        """A board with an empty cell is not finished and nothing changes."""
        self.game.board = [[2, 4, 8, 16], [16, 8, 4, 2], [2, 4, 8, 0], [8, 2, 4, 8]]
        self.assertFalse(self.game.check_game_over())
        self.assertFalse(self.game.game_over)
        self.assertEqual(self.finished, [])

    def test_full_board_with_merge(self):
        """A full board with two equal neighbours is not finished."""
        self.game.board = [[2, 2, 8, 16], [16, 8, 4, 2], [2, 16, 8, 4], [8, 2, 4, 8]]
        self.assertFalse(self.game.check_game_over())

    def test_game_over_recorded_once(self):
        """Repeated checks on a finished board record a single leaderboard entry."""
        self.game.board = [[2, 4, 8, 16], [16, 8, 4, 2], [2, 16, 8, 4], [8, 2, 4, 8]]
        self.game.check_game_over()
        self.assertTrue(self.game.check_game_over())
        self.assertEqual(len(self.finished), 1)
        self.assertEqual(len(self.game.keeper.leaderboard()), 1)

    def test_move_ends_game(self):
        """The move filling the last cell without merges ends the game."""
        game = GameEngine(spawner=FirstCellSpawner(value=2), store=self.store)
        game.board = [[2, 4, 8, 16], [16, 8, 4, 2], [2, 16, 8, 4], [0, 8, 2, 4]]
        result = game.move('left')
        self.assertTrue(result.moved)
        self.assertEqual(game.board[3].tolist(), [8, 2, 4, 2])
        self.assertTrue(game.game_over)
        self.assertFalse(game.move('right').moved)

        entries = game.keeper.leaderboard()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].moves, 1)


class TestScoreAndStats(TestCase):
    """Test best score tracking and statistics."""

    def setUp(self):
        self.clock = Clock()
        self.store = MemoryStore()
        self.game = GameEngine(config=EngineConfiguration(test_mode=True), store=self.store, clock=self.clock)

    def test_best_score_persisted(self):
        """Beating the best score stores it."""
        improved = []
        self.game.events.subscribe(SCORE_IMPROVED, lambda best_score: improved.append(best_score))
        self.game.board = empty_board([4, 4, 0, 0])
        self.game.move('left')
        self.assertEqual(self.game.best_score, 8)
        self.assertEqual(improved, [8])
        self.assertEqual(self.store.get(BEST_SCORE_KEY), '8')

    def test_best_score_loaded(self):
        """The best score is read back by a new engine."""
        game = GameEngine(config=EngineConfiguration(test_mode=True), store=MemoryStore({BEST_SCORE_KEY: '128'}))
        self.assertEqual(game.best_score, 128)
        game.board = empty_board([4, 4, 0, 0])
        game.move('left')
        self.assertEqual(game.best_score, 128)

    def test_merge_event(self):
        """Merges are announced to listeners."""
        seen = []
        self.game.events.subscribe(MERGE, lambda merges: seen.extend(merges))

        self.game.board = empty_board([2, 2, 0, 0])
        self.game.move('left')
        self.assertEqual(seen, [Merge(0, 0, 4)])

    def test_stats(self):
        """Statistics reflect the game in progress."""
        self.game.board = empty_board([2, 2, 0, 0])
        self.game.move('left')
        self.clock.now += 42.5
        stats = self.game.get_stats()
        self.assertEqual(stats.score, 4)
        self.assertEqual(stats.best_score, 4)
        self.assertEqual(stats.moves, 1)
        self.assertEqual(stats.elapsed_seconds, 42)
        self.assertTrue(stats.can_undo)


if __name__ == '__main__':
    main()
