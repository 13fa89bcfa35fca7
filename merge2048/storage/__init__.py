# -*- coding: utf-8 -*-
"""
Persistence collaborators of the game engine.

It includes the key-value stores and the `ScoreKeeper` that writes best scores, the leaderboard,
player names and saved games through them.
"""

from .persistence import ScoreKeeper
from .store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "ScoreKeeper"]
