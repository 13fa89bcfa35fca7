# -*- coding: utf-8 -*-
"""
Engine specific configuration.
"""
from dataclasses import dataclass, field
from math import isclose
from typing import Optional

DEFAULT_PLAYER = "玩家"


@dataclass
class EngineConfiguration:
    """
    Configuration of a game engine.

    Attributes
    ----------
    size : int
        Side of the square board.
    max_history : int
        Number of moves that can be undone.
    win_value : int
        Tile value that wins the game when produced by a merge.
    spawn_probs : dict[int, float]
        Probability of each value for a spawned tile.
    test_mode : bool
        Suppress tile spawning so the board can be driven deterministically.
    seed : int, optional
        Seed of the random generator used for spawning.
    default_player : str
        Player name used when none was given.
    """

    size: int = 4
    max_history: int = 10
    win_value: int = 2048
    spawn_probs: dict[int, float] = field(default_factory=lambda: {2: 0.9, 4: 0.1})
    test_mode: bool = False
    seed: Optional[int] = None
    default_player: str = DEFAULT_PLAYER

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"size must be at least 2, got {self.size}")
        if self.max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {self.max_history}")
        if not self.spawn_probs or not isclose(sum(self.spawn_probs.values()), 1.0):
            raise ValueError(f"spawn probabilities must sum to 1, got {self.spawn_probs}")
