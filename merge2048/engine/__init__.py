# -*- coding: utf-8 -*-
"""
Python implementation of the 2048 game.

This module provides the `GameEngine` class, which owns the board, the score, the undo history and the
win and game-over flags.
"""

from .events import EventBus
from .history import History
from .spawner import NoSpawner, RandomSpawner, TileSpawner
from .game import GameEngine

__all__ = ["EventBus", "GameEngine", "History", "NoSpawner", "RandomSpawner", "TileSpawner"]
