# -*- coding: utf-8 -*-
"""
Configuration and record types shared by the engine and its collaborators.
"""
from .config import DEFAULT_PLAYER, EngineConfiguration
from .types import (
    GameStats,
    HistorySnapshot,
    LeaderboardEntry,
    Merge,
    MoveAnimation,
    MoveResult,
    Position,
    SavedGame,
    SpawnedTile,
)

__all__ = [
    "DEFAULT_PLAYER",
    "EngineConfiguration",
    "GameStats",
    "HistorySnapshot",
    "LeaderboardEntry",
    "Merge",
    "MoveAnimation",
    "MoveResult",
    "Position",
    "SavedGame",
    "SpawnedTile",
]
