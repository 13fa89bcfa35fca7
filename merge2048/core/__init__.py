# -*- coding: utf-8 -*-
"""
This module provides the board-level rules of the 2048 game.

It includes the single-line slide-and-merge algorithm, its application to a whole board in any
direction, terminal state detection, and the direction vocabulary with its legality checks.
"""

from .gameboard import (
    TILE_SPAWN_PROBS,
    LineMove,
    LineOutcome,
    empty_cells,
    is_done,
    merge_line,
    slide_and_merge,
)
from .gamemove import Direction, can_move, iter_lines, legal_actions, parse_direction

__all__ = [
    "TILE_SPAWN_PROBS",
    "LineMove",
    "LineOutcome",
    "Direction",
    "can_move",
    "empty_cells",
    "is_done",
    "iter_lines",
    "legal_actions",
    "merge_line",
    "parse_direction",
    "slide_and_merge",
]
