# -*- coding: utf-8 -*-
"""
Set of types for this project.

Records handed to collaborators expose a ``to_dict`` method producing the camelCase shape used by
presentation and storage layers.
"""
import json
from dataclasses import dataclass, field
from typing import Any

from numpy import ndarray


@dataclass(frozen=True)
class Position:
    """A cell of the board."""

    row: int
    col: int

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}


@dataclass(frozen=True)
class MoveAnimation:
    """
    Motion of one source tile during a move.

    Two records share the same target when their tiles merge. ``value`` is the tile before the
    move and ``result_value`` the tile at the target after it.
    """

    source: Position
    target: Position
    value: int
    merged: bool
    result_value: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source.to_dict(),
            "to": self.target.to_dict(),
            "value": self.value,
            "merged": self.merged,
            "resultValue": self.result_value,
        }


@dataclass(frozen=True)
class SpawnedTile:
    """A tile placed on an empty cell."""

    row: int
    col: int
    value: int
    is_new: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "col": self.col, "value": self.value, "isNew": self.is_new}


@dataclass(frozen=True)
class Merge:
    """A cell produced by a merge."""

    row: int
    col: int
    value: int

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col, "value": self.value}


@dataclass
class MoveResult:
    """
    Outcome of a move attempt.

    ``merges`` lists every merged cell once, even though two animation records point at it.
    """

    moved: bool
    tiles: list[SpawnedTile] = field(default_factory=list)
    merges: list[Merge] = field(default_factory=list)
    move_animations: list[MoveAnimation] = field(default_factory=list)
    score_delta: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "moved": self.moved,
            "tiles": [tile.to_dict() for tile in self.tiles],
            "merges": [merge.to_dict() for merge in self.merges],
            "moveAnimations": [animation.to_dict() for animation in self.move_animations],
        }


@dataclass(frozen=True)
class HistorySnapshot:
    """Board, score and move count preceding an effective move."""

    board: ndarray
    score: int
    move_count: int


@dataclass(frozen=True)
class GameStats:
    """Read-only view of the game for display."""

    score: int
    best_score: int
    moves: int
    elapsed_seconds: int
    can_undo: bool


@dataclass(frozen=True)
class LeaderboardEntry:
    """A finished game, as stored on the leaderboard."""

    score: int
    moves: int
    time: int
    date: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "moves": self.moves, "time": self.time, "date": self.date, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            score=int(data["score"]),
            moves=int(data.get("moves", 0)),
            time=int(data.get("time", 0)),
            date=str(data.get("date", "")),
            name=str(data.get("name", "")),
        )


def _tile_value(value: Any) -> int:
    """Check that a stored cell is empty or holds a power of two of at least 2."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"cell {value!r} is not an integer")
    if value != 0 and (value < 2 or value & (value - 1) != 0):
        raise ValueError(f"cell {value} is not a tile value")
    return value


@dataclass(frozen=True)
class SavedGame:
    """
    A game in progress, as written to a save slot.

    Times are POSIX timestamps in seconds.
    """

    board: list[list[int]]
    score: int
    move_count: int
    start_time: float
    timestamp: float

    def to_json(self) -> str:
        return json.dumps(
            {
                "board": self.board,
                "score": self.score,
                "moveCount": self.move_count,
                "startTime": self.start_time,
                "timestamp": self.timestamp,
            }
        )

    @classmethod
    def from_json(cls, payload: str, size: int, now: float) -> "SavedGame":
        """
        Parse a save slot.

        Parameters
        ----------
        payload : str
            The stored JSON document.
        size : int
            Expected size of the square board.
        now : float
            Timestamp used when the document carries no start time.

        Raises
        ------
        ValueError
            If the document is not valid JSON, does not describe a board of the expected size, holds a
            cell that is not a tile value, or carries a negative score or move count.
        """
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("saved game is not a JSON object")

        board = data.get("board")
        if not isinstance(board, list) or len(board) != size:
            raise ValueError(f"saved board must have {size} rows")

        try:
            rows = []
            for row in board:
                if not isinstance(row, list) or len(row) != size:
                    raise ValueError(f"saved board rows must have {size} cells")
                rows.append([_tile_value(value) for value in row])

            saved = cls(
                board=rows,
                score=int(data["score"]),
                move_count=int(data.get("moveCount") or 0),
                start_time=float(data.get("startTime") or now),
                timestamp=float(data.get("timestamp") or now),
            )
        except (KeyError, TypeError) as error:
            raise ValueError(f"malformed saved game: {error}") from error

        if saved.score < 0 or saved.move_count < 0:
            raise ValueError("saved score and move count must not be negative")
        return saved
