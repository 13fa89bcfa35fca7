"""
Direction vocabulary for the 2048 game, with line extraction and legal move checks.
"""

from enum import Enum
from typing import Iterator

from numpy import ndarray


class Direction(str, Enum):
    """
    The four directions a move can be played in.

    Left and up compact a line toward its head (index 0), right and down toward its tail.
    """

    LEFT = 'left'
    UP = 'up'
    RIGHT = 'right'
    DOWN = 'down'

    @property
    def horizontal(self) -> bool:
        """Whether the direction processes rows rather than columns."""
        return self in (Direction.LEFT, Direction.RIGHT)

    @property
    def toward_tail(self) -> bool:
        """Whether tiles are compacted toward the last index of each line."""
        return self in (Direction.RIGHT, Direction.DOWN)


def parse_direction(token: object) -> Direction | None:
    """
    Convert an input token into a direction.

    Parameters
    ----------
    token : object
        A `Direction` or a direction name such as ``"left"`` (case-insensitive).

    Returns
    -------
    Direction or None
        The matching direction, or None when the token is not recognised.
    """
    if isinstance(token, Direction):
        return token
    if not isinstance(token, str):
        return None
    try:
        return Direction(token.strip().lower())
    except ValueError:
        return None


def iter_lines(board: ndarray, direction: Direction) -> Iterator[tuple[int, ndarray]]:
    """
    Iterate over the lines processed by a move.

    Parameters
    ----------
    board : ndarray
        The game board.
    direction : Direction
        Direction of the move.

    Yields
    ------
    tuple[int, ndarray]
        The row (or column) index and a strided view of that line. Writing into the view writes
        into the board.
    """
    for index in range(board.shape[0]):
        yield index, board[index, :] if direction.horizontal else board[:, index]


def legal_actions_mask(board: ndarray) -> dict[Direction, bool]:
    """
    Compute which directions would change the board, in a single vectorized pass.

    Parameters
    ----------
    board : ndarray
        The game board.

    Returns
    -------
    dict[Direction, bool]
        True for each direction that slides or merges at least one tile.
    """
    # ##>: Horizontal adjacency, shared by left and right.
    left_cols, right_cols = board[:, :-1], board[:, 1:]
    h_can_merge = (left_cols != 0) & (left_cols == right_cols)

    # ##>: Vertical adjacency, shared by up and down.
    top_rows, bottom_rows = board[:-1, :], board[1:, :]
    v_can_merge = (top_rows != 0) & (top_rows == bottom_rows)

    # ##>: A tile slides when the neighbouring cell on the target side is empty.
    left = (left_cols == 0) & (right_cols != 0)
    right = (right_cols == 0) & (left_cols != 0)
    up = (top_rows == 0) & (bottom_rows != 0)
    down = (bottom_rows == 0) & (top_rows != 0)

    return {
        Direction.LEFT: bool(left.any() or h_can_merge.any()),
        Direction.UP: bool(up.any() or v_can_merge.any()),
        Direction.RIGHT: bool(right.any() or h_can_merge.any()),
        Direction.DOWN: bool(down.any() or v_can_merge.any()),
    }


def can_move(board: ndarray, direction: Direction) -> bool:
    """Check whether a move in the given direction would change the board."""
    return legal_actions_mask(board)[direction]


def legal_actions(board: ndarray) -> list[Direction]:
    """
    Determine the directions that are effective moves on the current board.

    Parameters
    ----------
    board : ndarray
        The game board.

    Returns
    -------
    list[Direction]
        The effective directions, in the order left, up, right, down.
    """
    return [direction for direction, legal in legal_actions_mask(board).items() if legal]
