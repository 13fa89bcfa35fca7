# -*- coding: utf-8 -*-
"""
Rules engine for the 2048 sliding-tile merge puzzle.

The package exposes the `GameEngine` state machine together with its persistence collaborators.
"""

from .addons.config import EngineConfiguration
from .engine import EventBus, GameEngine
from .storage import JsonFileStore, MemoryStore, ScoreKeeper

__all__ = ["EngineConfiguration", "EventBus", "GameEngine", "JsonFileStore", "MemoryStore", "ScoreKeeper"]
