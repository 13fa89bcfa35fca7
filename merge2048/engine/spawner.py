"""
Tile spawning strategies.

The engine asks its spawner for a new tile after every effective move. Tests inject `NoSpawner`
to keep the board deterministic.
"""

from typing import Optional, Protocol

from numpy import ndarray
from numpy.random import PCG64DXSM, Generator, default_rng

from merge2048.addons.types import SpawnedTile
from merge2048.core.gameboard import TILE_SPAWN_PROBS, empty_cells


class TileSpawner(Protocol):
    """Places a new tile on the board, in place."""

    def spawn(self, board: ndarray) -> SpawnedTile | None:
        ...


class RandomSpawner:
    """
    Spawn a tile on a uniformly chosen empty cell.

    Parameters
    ----------
    probs : dict[int, float], optional
        Probability of each tile value (default is 2 with 0.9 and 4 with 0.1).
    seed : int, optional
        Seed for reproducibility. Ignored when ``generator`` is given.
    generator : Generator, optional
        NumPy random generator to draw from.
    """

    def __init__(
        self,
        probs: Optional[dict[int, float]] = None,
        seed: Optional[int] = None,
        generator: Optional[Generator] = None,
    ):
        probs = probs or TILE_SPAWN_PROBS
        self._values = list(probs.keys())
        self._probs = list(probs.values())
        if generator is not None:
            self._rng = generator
        elif seed is not None:
            self._rng = default_rng(seed)
        else:
            self._rng = default_rng(PCG64DXSM())

    def spawn(self, board: ndarray) -> SpawnedTile | None:
        """
        Fill one empty cell with a new tile.

        Returns
        -------
        SpawnedTile or None
            The new tile, or None when the board has no empty cell (the board is left untouched).
        """
        cells = empty_cells(board)
        if not cells:
            return None

        row, col = cells[int(self._rng.integers(len(cells)))]
        value = int(self._rng.choice(self._values, p=self._probs))
        board[row, col] = value
        return SpawnedTile(row=row, col=col, value=value)


class NoSpawner:
    """Never spawns anything."""

    def spawn(self, board: ndarray) -> SpawnedTile | None:
        return None
