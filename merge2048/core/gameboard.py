"""
Core slide-and-merge rules of the 2048 game, operating on NumPy boards.
"""

from typing import NamedTuple

from numpy import all as np_all
from numpy import any as np_any
from numpy import argwhere, array_equal, ndarray, zeros_like

from merge2048.addons.types import MoveAnimation, Position
from merge2048.core.gamemove import Direction, iter_lines

# ##>: Tile spawn probabilities for 2048 game (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}


class LineMove(NamedTuple):
    """
    One output tile of a processed line.

    Attributes
    ----------
    sources : tuple[int, ...]
        Original indices feeding this tile: two for a merge, one otherwise.
    target : int
        Index of the tile in the processed line.
    value : int
        Value of the source tiles before the move.
    merged : bool
        Whether the sources were merged.
    result_value : int
        Value of the tile after the move.
    """

    sources: tuple[int, ...]
    target: int
    value: int
    merged: bool
    result_value: int


class LineOutcome(NamedTuple):
    """Result of sliding and merging a single line."""

    line: ndarray
    score: int
    moves: list[LineMove]
    moved: bool


def merge_line(line: ndarray, toward_tail: bool = False) -> LineOutcome:
    """
    Slide a line toward one of its ends and merge adjacent equal values.

    Parameters
    ----------
    line : ndarray
        A 1D array representing one row or column of the board. It is not modified.
    toward_tail : bool, optional
        Compact toward the last index instead of index 0 (default is False).

    Returns
    -------
    LineOutcome
        The processed line, the score gained, one `LineMove` per output tile and whether the line
        changed.

    Notes
    -----
    - Zeros (empty cells) are ignored and refilled on the side opposite to the target edge.
    - Tiles are scanned from the target edge outward, so ``[2, 2, 2]`` gives ``[4, 2]`` toward the
      head and ``[2, 4]`` toward the tail.
    - Each tile merges at most once, and a merged tile never merges again in the same pass.
    """
    size = len(line)
    order = range(size - 1, -1, -1) if toward_tail else range(size)
    active = [(index, int(line[index])) for index in order if line[index] != 0]

    result = zeros_like(line)
    moves: list[LineMove] = []
    score = 0

    # ##: Walk the tiles in scan order, consuming one or two at a time.
    i, slot = 0, 0
    while i < len(active):
        index, value = active[i]
        target = size - 1 - slot if toward_tail else slot

        if i + 1 < len(active) and active[i + 1][1] == value:
            merged = value * 2
            result[target] = merged
            moves.append(LineMove((index, active[i + 1][0]), target, value, True, merged))
            score += merged
            i += 2
        else:
            result[target] = value
            moves.append(LineMove((index,), target, value, False, value))
            i += 1
        slot += 1

    return LineOutcome(result, score, moves, not array_equal(result, line))


def slide_and_merge(board: ndarray, direction: Direction) -> tuple[ndarray, int, list[MoveAnimation]]:
    """
    Apply a move to a whole board.

    Parameters
    ----------
    board : ndarray
        The game board represented as a 2D NumPy array. It is not modified.
    direction : Direction
        Direction of the move.

    Returns
    -------
    updated_board : ndarray
        The board after every line has been processed.
    score : int
        The total score obtained from all merges.
    animations : list[MoveAnimation]
        One record per source tile of every line that changed. Unchanged lines contribute nothing,
        so the list is empty exactly when the move is a no-op.
    """
    result = board.copy()
    animations: list[MoveAnimation] = []
    score = 0

    for index, line in iter_lines(result, direction):
        outcome = merge_line(line, toward_tail=direction.toward_tail)
        if not outcome.moved:
            continue

        # ##: Write back through the strided view, then record the motion of every source tile.
        line[:] = outcome.line
        score += outcome.score
        for move in outcome.moves:
            for source in move.sources:
                animations.append(
                    MoveAnimation(
                        source=_position(direction, index, source),
                        target=_position(direction, index, move.target),
                        value=move.value,
                        merged=move.merged,
                        result_value=move.result_value,
                    )
                )

    return result, score, animations


def _position(direction: Direction, line_index: int, offset: int) -> Position:
    """Map an offset within a line back to board coordinates."""
    if direction.horizontal:
        return Position(row=line_index, col=offset)
    return Position(row=offset, col=line_index)


def empty_cells(board: ndarray) -> list[tuple[int, int]]:
    """
    List the empty cells of the board.

    Returns
    -------
    list[tuple[int, int]]
        Positions (row, col) of every zero cell, in row-major order.
    """
    return [(int(cell[0]), int(cell[1])) for cell in argwhere(board == 0)]


def is_done(board: ndarray) -> bool:
    """
    Check if the game has ended by determining if any moves are possible.

    Parameters
    ----------
    board : ndarray
        The current state of the game board.

    Returns
    -------
    bool
        True if the game is over (no moves possible), False otherwise.

    Notes
    -----
    The game is over when there are no empty cells AND no cell equals its right or bottom neighbour.
    """
    return bool(
        np_all(board != 0) and not np_any(board[:-1] == board[1:]) and not np_any(board[:, :-1] == board[:, 1:])
    )
